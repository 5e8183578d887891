from ledgervote import config
from ledgervote.crypto.wallet import Wallet
from ledgervote.engine import ElectionEngine
from ledgervote.entropy import EntropyAccumulator, HashedEntropy
from ledgervote.errors import ElectionException, error_payload
from ledgervote.logger.base import get_logger, overwrite_logger_level
from ledgervote.storage import FSStateDriver
from ledgervote.webserver import WebServer

import argparse
import logging
import json
import os
import sys

logger = get_logger('CLI')

ENTROPY_SOURCES = {
    'ledger': EntropyAccumulator,
    'hashed': HashedEntropy
}


def resolve_wallet(args):
    sk = args.sk or os.environ.get('LEDGERVOTE_SK')
    if sk is None:
        raise SystemExit('A signing key is required. Pass --sk or set LEDGERVOTE_SK.')
    return Wallet(seed=sk)


def build_engine(args):
    driver = FSStateDriver(root=args.root)
    return ElectionEngine(driver=driver, entropy_class=ENTROPY_SOURCES[args.entropy])


def output(value):
    print(json.dumps(value, indent=2))


def cmd_keygen(engine, args):
    wallet = Wallet()
    output({'sk': wallet.signing_key, 'vk': wallet.verifying_key})


def cmd_init(engine, args):
    wallet = resolve_wallet(args)
    with engine.transaction():
        engine.access.seed(wallet.verifying_key)
    output({'admins': engine.access.admins()})


def cmd_advance(engine, args):
    output(engine.advance(args.blocks))


def cmd_admin(engine, args):
    signer = resolve_wallet(args).verifying_key
    action = getattr(engine, args.action)
    action(signer, args.vk)
    output({'action': args.action, 'vk': args.vk})


def cmd_stake(engine, args):
    signer = resolve_wallet(args).verifying_key
    if args.amount >= 0:
        engine.stake(signer, args.amount)
    else:
        engine.unstake(signer, -args.amount)
    output({'vk': signer, 'stake': engine.stakes.stake_of(signer), 'weight': engine.weight_of(signer)})


def cmd_delegate(engine, args):
    signer = resolve_wallet(args).verifying_key
    engine.delegate(signer, args.to)
    output({'vk': signer, 'delegate': args.to})


def cmd_undelegate(engine, args):
    signer = resolve_wallet(args).verifying_key
    engine.undelegate(signer)
    output({'vk': signer, 'delegate': None})


def cmd_register(engine, args):
    signer = resolve_wallet(args).verifying_key
    index = engine.register_candidate(signer)
    output({'vk': signer, 'index': index})


def cmd_verify(engine, args):
    signer = resolve_wallet(args).verifying_key
    engine.verify_candidate(signer, args.candidate)
    output(engine.candidate_detail(args.candidate))


def cmd_start(engine, args):
    signer = resolve_wallet(args).verifying_key
    session = engine.start_session(
        signer,
        duration_blocks=args.duration,
        quorum=args.quorum,
        threshold_bps=args.threshold,
        enable_whitelist=args.whitelist
    )
    output(session.to_dict())


def cmd_vote(engine, args):
    signer = resolve_wallet(args).verifying_key
    record = engine.cast_weighted_vote(signer, args.candidate)
    output(record.to_dict())


def cmd_finalize(engine, args):
    signer = resolve_wallet(args).verifying_key
    winner = engine.finalize(signer)
    output({'winner': winner})


def cmd_status(engine, args):
    if args.analytics:
        output(engine.analytics())
    else:
        output(engine.session_status())


def cmd_serve(engine, args):
    WebServer(engine=engine, port=args.port).run()


COMMANDS = {
    'keygen': cmd_keygen,
    'init': cmd_init,
    'advance': cmd_advance,
    'admin': cmd_admin,
    'stake': cmd_stake,
    'delegate': cmd_delegate,
    'undelegate': cmd_undelegate,
    'register': cmd_register,
    'verify': cmd_verify,
    'start': cmd_start,
    'vote': cmd_vote,
    'finalize': cmd_finalize,
    'status': cmd_status,
    'serve': cmd_serve
}


def setup_ledgervote_parser(parser):
    parser.add_argument('-r', '--root', type=str, default=str(config.STORAGE_HOME))
    parser.add_argument('-k', '--sk', type=str, default=None)
    parser.add_argument('-e', '--entropy', type=str, choices=sorted(ENTROPY_SOURCES.keys()), default='ledger')
    parser.add_argument('-l', '--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])

    subparser = parser.add_subparsers(title='subcommands', description='LedgerVote commands',
                                      help='Shows set of commands', dest='command')

    subparser.add_parser('keygen')
    subparser.add_parser('init')

    advance_parser = subparser.add_parser('advance')
    advance_parser.add_argument('-b', '--blocks', type=int, default=1)

    admin_parser = subparser.add_parser('admin')
    admin_parser.add_argument('action', choices=[
        'add_admin', 'remove_admin', 'blacklist', 'unblacklist', 'whitelist', 'unwhitelist'
    ])
    admin_parser.add_argument('vk', type=str)

    stake_parser = subparser.add_parser('stake')
    stake_parser.add_argument('amount', type=int)

    delegate_parser = subparser.add_parser('delegate')
    delegate_parser.add_argument('to', type=str)

    subparser.add_parser('undelegate')
    subparser.add_parser('register')

    verify_parser = subparser.add_parser('verify')
    verify_parser.add_argument('candidate', type=str)

    start_parser = subparser.add_parser('start')
    start_parser.add_argument('-d', '--duration', type=int, required=True)
    start_parser.add_argument('-q', '--quorum', type=int, default=0)
    start_parser.add_argument('-t', '--threshold', type=int, default=0)
    start_parser.add_argument('-w', '--whitelist', action='store_true', default=False)

    vote_parser = subparser.add_parser('vote')
    vote_parser.add_argument('candidate', type=str)

    subparser.add_parser('finalize')

    status_parser = subparser.add_parser('status')
    status_parser.add_argument('-a', '--analytics', action='store_true', default=False)

    serve_parser = subparser.add_parser('serve')
    serve_parser.add_argument('-p', '--port', type=int, default=config.WEBSERVER_PORT)


def main(argv=None):
    parser = argparse.ArgumentParser(description="LedgerVote Commands", prog='ledgervote')
    setup_ledgervote_parser(parser)
    args = parser.parse_args(argv)

    if vars(args).get('command') is None:
        parser.print_help()
        return 1

    if args.log_level is not None:
        overwrite_logger_level(getattr(logging, args.log_level))

    engine = build_engine(args)

    try:
        COMMANDS[args.command](engine, args)
    except ElectionException as e:
        logger.error(f'{args.command} failed: {e}')
        output(error_payload(e))
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

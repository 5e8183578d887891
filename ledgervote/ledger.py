import hashlib

from ledgervote import config
from ledgervote.errors import InvalidParameter
from ledgervote.formatting import primatives
from ledgervote.logger.base import get_logger
from ledgervote.storage import StateDriver, make_key

CHAIN = 'chain'


class Chain:
    '''
    Ledger height oracle. Height 0 is the genesis block, whose hash is all zeros. Every later block hash is
    chained from the previous one unless one is supplied explicitly.
    '''
    def __init__(self, driver: StateDriver):
        self.driver = driver
        self.log = get_logger('Chain')

    def height(self) -> int:
        return self.driver.get(make_key(CHAIN, 'height'), 0)

    def block_hash(self, height: int) -> str:
        if height < 0 or height > self.height():
            return None

        if height == 0:
            return config.GENESIS_HASH

        return self.driver.get(make_key(CHAIN, 'hashes', [height]))

    def previous_block_hash(self) -> str:
        h = self.height()
        if h == 0:
            return config.GENESIS_HASH
        return self.block_hash(h - 1)

    def latest_block(self) -> dict:
        h = self.height()
        return {
            'number': h,
            'hash': self.block_hash(h)
        }

    def append(self, block_hash: str = None) -> dict:
        h = self.height()

        if block_hash is None:
            hasher = hashlib.sha3_256()
            hasher.update(f'{self.block_hash(h)}{h + 1}'.encode())
            block_hash = hasher.hexdigest()

        if not primatives.hash_is_formatted(block_hash):
            raise InvalidParameter('Block hash must be 64 lowercase hex characters.')

        self.driver.set(make_key(CHAIN, 'hashes', [h + 1]), block_hash)
        self.driver.set(make_key(CHAIN, 'height'), h + 1)

        return {
            'number': h + 1,
            'hash': block_hash
        }

    def advance(self, blocks: int = 1) -> dict:
        block = self.latest_block()
        for _ in range(blocks):
            block = self.append()

        self.log.debug(f'Advanced {blocks} blocks to height {block["number"]}.')
        return block

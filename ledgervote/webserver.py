from sanic import Sanic
from sanic import response
from ledgervote import config
from ledgervote.engine import ElectionEngine
from ledgervote.formatting import primatives
from ledgervote.logger.base import get_logger

import uuid

log = get_logger("WebServer")


class WebServer:
    def __init__(self, engine: ElectionEngine, port=config.WEBSERVER_PORT, debug=False, access_log=False):
        # Sanic keeps a registry of app names, so every server gets its own.
        self.app = Sanic(f'ledgervote_{uuid.uuid4().hex}')
        self.app.config.update({
            'REQUEST_MAX_SIZE': 32_000,
            'REQUEST_TIMEOUT': 10,
            'KEEP_ALIVE': False,
        })

        self.engine = engine

        self.port = port
        self.debug = debug
        self.access_log = access_log

        # Add Routes
        self.app.add_route(self.ping, '/ping', methods=['GET'])
        self.app.add_route(self.get_latest_block, '/latest_block', methods=['GET'])

        # Election Routes
        self.app.add_route(self.get_session, '/session', methods=['GET'])
        self.app.add_route(self.get_winner, '/winner', methods=['GET'])
        self.app.add_route(self.get_candidates, '/candidates', methods=['GET'])
        self.app.add_route(self.get_candidate, '/candidates/<vk>', methods=['GET'])
        self.app.add_route(self.get_voter, '/voters/<vk>', methods=['GET'])
        self.app.add_route(self.get_analytics, '/analytics', methods=['GET'])

        self.app.register_middleware(self.refresh_state, 'request')

    def run(self):
        log.info(f'Serving election state on port {self.port}.')
        self.app.run(host='0.0.0.0', port=self.port, debug=self.debug, access_log=self.access_log, single_process=True)

    async def refresh_state(self, request):
        self.engine.refresh()

    async def ping(self, request):
        return response.json({'status': 'online'})

    async def get_latest_block(self, request):
        return response.json(self.engine.chain.latest_block())

    async def get_session(self, request):
        return response.json(self.engine.session_status())

    async def get_winner(self, request):
        session = self.engine.session()
        return response.json({
            'status': session.status,
            'winner': session.winner
        })

    async def get_candidates(self, request):
        return response.json({'candidates': self.engine.candidates()})

    async def get_candidate(self, request, vk):
        if not primatives.vk_is_formatted(vk):
            return response.json({'error': 'InvalidAccount'}, status=400)

        candidate = self.engine.candidate_detail(vk)
        if candidate is None:
            return response.json({'error': 'UnknownCandidate'}, status=404)

        return response.json(candidate)

    async def get_voter(self, request, vk):
        if not primatives.vk_is_formatted(vk):
            return response.json({'error': 'InvalidAccount'}, status=400)

        record = self.engine.voter_record(vk)
        if record is None:
            return response.json({'vk': vk, 'voted': False, 'weight': self.engine.weight_of(vk)})

        return response.json(record)

    async def get_analytics(self, request):
        return response.json(self.engine.analytics())

import os
import pathlib

CANDIDATE_CAPACITY = 100
BASIS_POINTS = 10_000
ENTROPY_MODULUS = 1_000_000
ENTROPY_HASH_BYTES = 8
UINT_BITS = 256
UINT_MAX = 2 ** UINT_BITS - 1

GENESIS_HASH = '0' * 64

STATE_FILENAME = 'state.json'
STORAGE_HOME = pathlib.Path(
    os.getenv('LEDGERVOTE_HOME', pathlib.Path().home().joinpath('.ledgervote'))
).expanduser()

WEBSERVER_PORT = int(os.getenv('LEDGERVOTE_PORT', 18080))

INDEX_SEPARATOR = '.'
DELIMITER = ':'

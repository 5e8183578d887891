from ledgervote import config
from ledgervote.logger.base import get_logger
import os
import pathlib
import shutil
import json


def encode(value) -> str:
    return json.dumps(value, separators=(',', ':'), sort_keys=True)


def decode(value: str):
    if value is None:
        return None
    return json.loads(value)


def make_key(contract: str, variable: str, args: list = None) -> str:
    key = f'{contract}{config.INDEX_SEPARATOR}{variable}'
    for arg in args or []:
        key += f'{config.DELIMITER}{arg}'
    return key


class StateDriver:
    # Reads see pending writes first. Nothing reaches committed state until commit() is called.

    def __init__(self):
        self.log = get_logger('StateDriver')
        self.state = {}
        self.pending_writes = {}

    def get(self, key: str, default=None):
        if key in self.pending_writes:
            value = self.pending_writes[key]
        else:
            value = self.state.get(key)

        if value is None:
            return default

        return decode(value)

    def set(self, key: str, value):
        self.pending_writes[key] = None if value is None else encode(value)

    def delete(self, key: str):
        self.pending_writes[key] = None

    def keys(self, prefix: str = '') -> list:
        found = {k for k in self.state.keys() if k.startswith(prefix)}

        for k, v in self.pending_writes.items():
            if not k.startswith(prefix):
                continue
            if v is None:
                found.discard(k)
            else:
                found.add(k)

        return sorted(found)

    def has_pending_state(self) -> bool:
        return len(self.pending_writes) > 0

    def commit(self):
        for k, v in self.pending_writes.items():
            if v is None:
                self.state.pop(k, None)
            else:
                self.state[k] = v

        writes = len(self.pending_writes)
        self.pending_writes = {}
        self.persist()

        self.log.debug(f'Committed {writes} writes.')

    def clear_pending_state(self):
        if len(self.pending_writes) > 0:
            self.log.debug(f'Discarded {len(self.pending_writes)} pending writes.')
        self.pending_writes = {}

    def flush(self):
        self.state = {}
        self.pending_writes = {}
        self.persist()

    def refresh(self):
        pass

    def persist(self):
        pass

    def snapshot(self) -> dict:
        return {k: decode(v) for k, v in sorted(self.state.items())}


class FSStateDriver(StateDriver):
    def __init__(self, root=None):
        super().__init__()
        self.log = get_logger('FSStateDriver')
        self.root = pathlib.Path(root) if root is not None else config.STORAGE_HOME
        self.root.mkdir(exist_ok=True, parents=True)

        self.state_file = self.root.joinpath(config.STATE_FILENAME)
        self.refresh()

        self.log.info(f'Initialized state at \'{self.state_file}\', {len(self.state)} existing keys found.')

    def refresh(self):
        # Other processes commit to the same file. Re-read it unless this driver holds uncommitted writes.
        if self.has_pending_state():
            return

        if not self.state_file.exists():
            self.state = {}
            return

        with open(self.state_file, 'r') as f:
            stored = json.load(f)

        self.state = {k: encode(v) for k, v in stored.items()}

    def persist(self):
        tmp_file = self.root.joinpath(f'{config.STATE_FILENAME}.{os.getpid()}.tmp')

        with open(tmp_file, 'w') as f:
            json.dump(self.snapshot(), f, indent=1)

        os.replace(tmp_file, self.state_file)

    def flush(self):
        if self.root.is_dir():
            shutil.rmtree(self.root)
        self.root.mkdir(exist_ok=True, parents=True)

        super().flush()
        self.log.debug(f'Flushed state at \'{self.root}\'')

from ledgervote.errors import NotAuthorized, InvalidAccount, InvalidParameter
from ledgervote.formatting import primatives
from ledgervote.logger.base import get_logger
from ledgervote.storage import StateDriver, make_key

ACCESS = 'access'


def assert_vk_is_valid(vk: str):
    if not primatives.vk_is_formatted(vk):
        raise InvalidAccount(f'\'{vk}\' is not a valid verifying key.')


class AccessControl:
    def __init__(self, driver: StateDriver):
        self.driver = driver
        self.log = get_logger('AccessControl')

    def seed(self, owner: str):
        assert_vk_is_valid(owner)

        if len(self.admins()) > 0:
            return

        self.driver.set(make_key(ACCESS, 'admins', [owner]), True)
        self.log.info(f'Seeded {owner} as the first administrator.')

    def _flag(self, variable: str, vk: str) -> bool:
        return self.driver.get(make_key(ACCESS, variable, [vk]), False) is True

    def is_admin(self, vk: str) -> bool:
        return self._flag('admins', vk)

    def is_blacklisted(self, vk: str) -> bool:
        return self._flag('blacklist', vk)

    def is_whitelisted(self, vk: str) -> bool:
        return self._flag('whitelist', vk)

    def admins(self) -> list:
        prefix = make_key(ACCESS, 'admins', [''])
        return [k[len(prefix):] for k in self.driver.keys(prefix)]

    def assert_is_admin(self, signer: str):
        if not self.is_admin(signer):
            raise NotAuthorized(f'{signer} is not an administrator.')

    def _set_flag(self, signer: str, variable: str, vk: str, value: bool):
        self.assert_is_admin(signer)
        assert_vk_is_valid(vk)

        self.driver.set(make_key(ACCESS, variable, [vk]), True if value else None)
        self.log.info(f'{signer} set {variable}[{vk}] = {value}.')

    def add_admin(self, signer: str, vk: str):
        self._set_flag(signer, 'admins', vk, True)

    def remove_admin(self, signer: str, vk: str):
        self.assert_is_admin(signer)
        if self.is_admin(vk) and len(self.admins()) == 1:
            raise InvalidParameter('Cannot remove the last administrator.')
        self._set_flag(signer, 'admins', vk, False)

    def blacklist(self, signer: str, vk: str):
        self._set_flag(signer, 'blacklist', vk, True)

    def unblacklist(self, signer: str, vk: str):
        self._set_flag(signer, 'blacklist', vk, False)

    def whitelist(self, signer: str, vk: str):
        self._set_flag(signer, 'whitelist', vk, True)

    def unwhitelist(self, signer: str, vk: str):
        self._set_flag(signer, 'whitelist', vk, False)

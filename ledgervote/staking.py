from ledgervote.access import assert_vk_is_valid
from ledgervote.errors import SelfDelegation, AlreadyDelegated, NotDelegated, InsufficientStake, InvalidParameter
from ledgervote.logger.base import get_logger
from ledgervote.storage import StateDriver, make_key
from ledgervote.utils import safemath

STAKING = 'staking'


class StakeLedger:
    '''
    Bookkeeping for StakeWeight, DelegationEdge and DelegatedPower. No funds move here, only influence.

    For every active edge (d -> g) the delegate's power includes exactly d's current stake. Staking or
    unstaking while delegated moves the delegate's power by the same delta so undelegating removes exactly
    what was routed.
    '''
    def __init__(self, driver: StateDriver):
        self.driver = driver
        self.log = get_logger('StakeLedger')

    def stake_of(self, vk: str) -> int:
        return self.driver.get(make_key(STAKING, 'stakes', [vk]), 0)

    def delegated_power_of(self, vk: str) -> int:
        return self.driver.get(make_key(STAKING, 'power', [vk]), 0)

    def delegate_of(self, vk: str) -> str:
        return self.driver.get(make_key(STAKING, 'delegations', [vk]))

    def _set_stake(self, vk: str, amount: int):
        self.driver.set(make_key(STAKING, 'stakes', [vk]), amount if amount > 0 else None)

    def _set_power(self, vk: str, amount: int):
        self.driver.set(make_key(STAKING, 'power', [vk]), amount if amount > 0 else None)

    def stake(self, signer: str, amount: int):
        assert_vk_is_valid(signer)
        if type(amount) != int or amount <= 0:
            raise InvalidParameter('Stake amount must be a positive integer.')

        self._set_stake(signer, safemath.add(self.stake_of(signer), amount))

        delegate = self.delegate_of(signer)
        if delegate is not None:
            self._set_power(delegate, safemath.add(self.delegated_power_of(delegate), amount))

        self.log.debug(f'{signer} staked {amount}.')

    def unstake(self, signer: str, amount: int):
        assert_vk_is_valid(signer)
        if type(amount) != int or amount <= 0:
            raise InvalidParameter('Unstake amount must be a positive integer.')

        current = self.stake_of(signer)
        if amount > current:
            raise InsufficientStake(f'{signer} has {current} staked, cannot unstake {amount}.')

        self._set_stake(signer, safemath.sub(current, amount))

        delegate = self.delegate_of(signer)
        if delegate is not None:
            self._set_power(delegate, safemath.sub(self.delegated_power_of(delegate), amount))

        self.log.debug(f'{signer} unstaked {amount}.')

    def delegate(self, signer: str, to: str):
        assert_vk_is_valid(signer)
        assert_vk_is_valid(to)

        if signer == to:
            raise SelfDelegation()

        if self.delegate_of(signer) is not None:
            raise AlreadyDelegated(f'{signer} already delegates to {self.delegate_of(signer)}.')

        amount = self.stake_of(signer)

        self.driver.set(make_key(STAKING, 'delegations', [signer]), to)
        self._set_power(to, safemath.add(self.delegated_power_of(to), amount))

        self.log.info(f'{signer} delegated {amount} to {to}.')

    def undelegate(self, signer: str):
        assert_vk_is_valid(signer)

        delegate = self.delegate_of(signer)
        if delegate is None:
            raise NotDelegated(f'{signer} has no active delegation.')

        amount = self.stake_of(signer)

        self.driver.set(make_key(STAKING, 'delegations', [signer]), None)
        self._set_power(delegate, safemath.sub(self.delegated_power_of(delegate), amount))

        self.log.info(f'{signer} withdrew {amount} from {delegate}.')

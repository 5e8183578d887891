from ledgervote import config
from ledgervote.errors import ArithmeticOverflow, DivisionByZero


def check_uint(a: int) -> int:
    if type(a) != int or a < 0 or a > config.UINT_MAX:
        raise ArithmeticOverflow(f'{a} is not a {config.UINT_BITS} bit unsigned integer.')
    return a


def add(a: int, b: int) -> int:
    return check_uint(check_uint(a) + check_uint(b))


def sub(a: int, b: int) -> int:
    return check_uint(check_uint(a) - check_uint(b))


def mul(a: int, b: int) -> int:
    return check_uint(check_uint(a) * check_uint(b))


def div(a: int, b: int) -> int:
    # Floors. Callers rely on truncation.
    if check_uint(b) == 0:
        raise DivisionByZero(f'Cannot divide {a} by zero.')
    return check_uint(a) // b


def mod(a: int, b: int) -> int:
    if check_uint(b) == 0:
        raise DivisionByZero(f'Cannot reduce {a} modulo zero.')
    return check_uint(a) % b

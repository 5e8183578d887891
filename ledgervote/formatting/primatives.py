import re


def vk_is_formatted(s: str):
    # Lowercase only. One account has exactly one spelling.
    return hash_is_formatted(s)


def hash_is_formatted(s: str):
    try:
        h = re.fullmatch(r'[0-9a-f]{64}', s)
        if h is None:
            return False
        return True
    except TypeError:
        return False


def number_is_formatted(n):
    return type(n) == int and n >= 0

"""Random passwords handed out once to an operator.

Used for generated tenant database roles and for administrator password
resets.
"""

import secrets
import string

# Characters easily confused with one another when read aloud or copied.
SIMILAR_CHARACTERS = frozenset("il1Lo0O")
SECRET_SYMBOLS = "!@#$%^&*()-_=+[]{}?"


def _without_similar(alphabet: str) -> str:
    return "".join(c for c in alphabet if c not in SIMILAR_CHARACTERS)


_SECRET_CLASSES = (
    _without_similar(string.ascii_uppercase),
    _without_similar(string.ascii_lowercase),
    _without_similar(string.digits),
    SECRET_SYMBOLS,
)


def generate_random_secret(length: int = 12) -> str:
    """Generate a random password.

    The result holds at least one upper-case letter, lower-case letter,
    digit and symbol, and none of the characters in SIMILAR_CHARACTERS.

    Raises:
        ValueError: If length cannot fit one character of each class.
    """
    if length < len(_SECRET_CLASSES):
        raise ValueError(f"length must be at least {len(_SECRET_CLASSES)}")
    alphabet = "".join(_SECRET_CLASSES)
    chars = [secrets.choice(charset) for charset in _SECRET_CLASSES]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)

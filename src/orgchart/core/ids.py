"""
Identifier generation for new nodes.

Ids are short random lowercase alphanumeric strings. Collisions are only
avoided probabilistically by ``generate_id``; use ``generate_unique_id`` when
the set of taken ids is known.
"""

import random
import string
from typing import Container


ID_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_ID_LENGTH = 8

# Guard against an exhausted id space when length is tiny
MAX_ATTEMPTS = 1000


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """
    Generate a short random alphanumeric id.

    Args:
        length: Number of characters.

    Returns:
        A random id string.
    """
    if length < 1:
        raise ValueError(f"Id length must be positive, got {length}")
    return "".join(random.choices(ID_ALPHABET, k=length))


def generate_unique_id(taken: Container[str], length: int = DEFAULT_ID_LENGTH) -> str:
    """
    Generate an id that is not in ``taken``.

    Args:
        taken: Ids already in use.
        length: Number of characters.

    Returns:
        A random id string not contained in ``taken``.

    Raises:
        RuntimeError: If no free id was found after MAX_ATTEMPTS tries.
    """
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_id(length)
        if candidate not in taken:
            return candidate
    raise RuntimeError(f"Could not generate a unique id of length {length}")

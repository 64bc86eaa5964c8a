"""Secret hashing primitives."""

from sentinel.core.security.hasher import Hasher, SecretHasher, get_secret_hasher


__all__ = [
    "Hasher",
    "SecretHasher",
    "get_secret_hasher",
]

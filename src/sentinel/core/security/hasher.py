"""One-way hashing for passwords and client secrets.

Records are PBKDF2-SHA256 in the modular crypt format::

    $pbkdf2-sha256$<iterations>$<salt>$<derived key>

The iteration count and salt travel with every record, so raising
``secret_hash_iterations`` later leaves existing records verifiable and
only affects hashes produced from then on.
"""

from typing import Annotated

from fastapi import Depends
from passlib.context import CryptContext

from sentinel.config import settings
from sentinel.core.constants import (
    MIN_SECRET_HASH_ITERATIONS,
    SECRET_HASH_SCHEME,
    SECRET_SALT_SIZE,
)
from sentinel.core.errors import ValidationError


class SecretHasher:
    """Salted, iterated hashing with constant-time verification.

    Usage:
        hasher = SecretHasher()
        record = hasher.hash("s3cret")
        hasher.verify("s3cret", record)  # True
    """

    def __init__(self, iterations: int | None = None) -> None:
        iterations = iterations or settings.secret_hash_iterations
        if iterations < MIN_SECRET_HASH_ITERATIONS:
            raise ValueError(
                f"iterations must be at least {MIN_SECRET_HASH_ITERATIONS}"
            )
        self.iterations = iterations
        self._context = CryptContext(
            schemes=[SECRET_HASH_SCHEME],
            pbkdf2_sha256__rounds=iterations,
            pbkdf2_sha256__min_rounds=iterations,
            pbkdf2_sha256__salt_size=SECRET_SALT_SIZE,
        )

    def hash(self, secret: str) -> str:
        """Hash a secret with a fresh random salt.

        Args:
            secret: Plain text password or client secret

        Returns:
            Encoded hash record embedding iterations, salt and derived key

        Raises:
            ValidationError: If the secret is empty or whitespace only
        """
        if not isinstance(secret, str) or not secret.strip():
            raise ValidationError("Secret cannot be empty.", field="secret")
        return self._context.hash(secret)

    def verify(self, secret: str | None, record: str | None) -> bool:
        """Check a secret against a stored hash record.

        Never raises: an empty secret, an empty record and a malformed
        record all verify as False. The derived keys are compared in
        constant time.
        """
        if not secret or not secret.strip() or not record or not record.strip():
            return False
        try:
            return bool(self._context.verify(secret, record))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """Spend the cost of one verification without a real record.

        Called when the principal does not exist, so that path takes as long
        as a wrong secret would.
        """
        return bool(self._context.dummy_verify())

    def needs_rehash(self, record: str) -> bool:
        """True when a record was produced with weaker parameters than current."""
        try:
            return bool(self._context.needs_update(record))
        except (ValueError, TypeError):
            return True


_default_hasher: SecretHasher | None = None


def get_secret_hasher() -> SecretHasher:
    """Return the process-wide hasher built from settings."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = SecretHasher()
    return _default_hasher


# Type alias for dependency injection
Hasher = Annotated[SecretHasher, Depends(get_secret_hasher)]

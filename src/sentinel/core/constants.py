"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Slug normalization
MAX_SLUG_LENGTH = 200

# String field lengths
MAX_NAME_LENGTH = 200
MAX_CLIENT_ID_LENGTH = 200
MAX_EMAIL_LENGTH = 320
MAX_HASH_LENGTH = 500
MAX_TOKEN_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 1000

# Secret hashing (PBKDF2-SHA256)
SECRET_HASH_SCHEME = "pbkdf2_sha256"
SECRET_SALT_SIZE = 16
MIN_SECRET_HASH_ITERATIONS = 100_000
DEFAULT_SECRET_HASH_ITERATIONS = 100_000

# Verification tokens
MIN_VERIFICATION_TOKEN_BYTES = 32
DEFAULT_VERIFICATION_TOKEN_BYTES = 32
DEFAULT_VERIFICATION_TOKEN_LIFETIME_MINUTES = 60 * 24

# Password requirements
DEFAULT_MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128

# Client credentials grant
CLIENT_CREDENTIALS_GRANT = "client_credentials"
BASIC_AUTH_SCHEME = "Basic"

# Scopes
ADMIN_SCOPE = "manage:clients"
USER_BASE_SCOPES = ("openid", "profile", "email")

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

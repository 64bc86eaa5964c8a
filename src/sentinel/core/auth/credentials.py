"""Client credential extraction for the token endpoint.

A client may authenticate with ``client_id``/``client_secret`` form fields
or with an HTTP Basic ``Authorization`` header. Form fields win when a
``client_id`` is present; the header is consulted only otherwise.
"""

import base64
import binascii

from sentinel.core.auth.schemas import ClientCredentials
from sentinel.core.constants import BASIC_AUTH_SCHEME
from sentinel.core.errors import AuthFailure


def parse_basic_authorization(header: str | None) -> ClientCredentials:
    """Decode ``Basic base64(id:secret)`` into credentials.

    The scheme name is matched case-insensitively and the decoded value is
    split on the first colon only, so secrets may contain colons.

    Raises:
        AuthFailure: If the header is missing, uses another scheme, is not
            valid base64/UTF-8, or has no colon separator
    """
    if not header:
        raise AuthFailure("missing_credentials")

    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != BASIC_AUTH_SCHEME.lower() or not encoded.strip():
        raise AuthFailure("unsupported_authorization_scheme")

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise AuthFailure("malformed_authorization_header") from e

    client_id, separator, client_secret = decoded.partition(":")
    if not separator:
        raise AuthFailure("malformed_authorization_header")

    return ClientCredentials(client_id=client_id, client_secret=client_secret)


def extract_client_credentials(
    form_client_id: str | None,
    form_client_secret: str | None,
    authorization: str | None,
) -> ClientCredentials:
    """Pick the credentials a token request carries.

    Args:
        form_client_id: ``client_id`` form field
        form_client_secret: ``client_secret`` form field
        authorization: raw ``Authorization`` header value

    Returns:
        The extracted identifier and secret (the secret may be None)

    Raises:
        AuthFailure: If neither transport yields a client identifier
    """
    if form_client_id and form_client_id.strip():
        return ClientCredentials(
            client_id=form_client_id,
            client_secret=form_client_secret,
        )

    credentials = parse_basic_authorization(authorization)
    if not credentials.client_id.strip():
        raise AuthFailure("missing_client_id")
    return credentials

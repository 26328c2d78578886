"""Token scopes and lookup digests."""

import hashlib
from enum import StrEnum


class TokenScope(StrEnum):
    """Purpose a token was issued for."""

    ACTIVATION = "activation"
    AUTHENTICATION = "authentication"
    PASSWORD_RESET = "password-reset"


def token_digest(plaintext: str) -> bytes:
    """Digest a plaintext token for lookup in the tokens table.

    Tokens carry their own entropy, so a fast SHA-256 digest is enough;
    the slow password hash is reserved for low-entropy user passwords.

    Args:
        plaintext: The token as presented by the client.

    Returns:
        The 32-byte SHA-256 digest.
    """
    return hashlib.sha256(plaintext.encode("utf-8")).digest()

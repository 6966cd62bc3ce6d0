"""Opaque token generation for email verification and password reset links."""

import hashlib
import secrets

from eduwise_auth.schemas import OpaqueToken


class OpaqueTokenGenerator:
    """Generates random single-use tokens and their SHA-256 hashes.

    The plaintext is sent to the user out-of-band; only the hash is stored.
    Lookups hash the presented value and compare hashes.
    """

    TOKEN_BYTES = 32

    def new_token(self) -> OpaqueToken:
        plaintext = secrets.token_hex(self.TOKEN_BYTES)
        return OpaqueToken(plaintext=plaintext, token_hash=self.hash_token(plaintext))

    @staticmethod
    def hash_token(plaintext: str) -> str:
        return hashlib.sha256(plaintext.encode()).hexdigest()

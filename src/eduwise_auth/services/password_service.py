"""Password hashing and the account password policy.

Every path that sets a password (self-registration, password reset and
admin-created accounts) goes through ``PasswordHashingService.check_policy``
so the rules live in one place:

- at least ``MIN_LENGTH`` characters
- at most ``MAX_BYTES`` bytes once UTF-8 encoded

bcrypt refuses input longer than 72 bytes instead of truncating it, so the
byte limit is part of the policy rather than a hashing failure. A password
of 30 characters can already cross it when it is mostly non-ASCII.
"""

import bcrypt

from eduwise_auth.exceptions import WeakPasswordError

DEFAULT_ROUNDS = 12


class PasswordHashingService:
    """bcrypt hashing behind the account password policy.

    Parameters
    ----------
    rounds
        bcrypt work factor (log2 of iterations). Tests pass a low value to
        keep hashing fast; hashes of any work factor still verify.
    """

    MIN_LENGTH = 8
    MAX_BYTES = 72

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._rounds = rounds

    def check_policy(self, password: str) -> None:
        """
        Raise ``WeakPasswordError`` unless ``password`` may be set.

        ``WeakPasswordError.too_short`` tells the caller which rule failed.
        """
        if len(password or "") < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg, too_short=True)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = (
                f"Password cannot be longer than {self.MAX_BYTES} bytes "
                "(fewer characters if it contains accents or symbols)"
            )
            raise WeakPasswordError(msg)

    def hash(self, password: str) -> str:
        self.check_policy(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a stored hash.

        Input that the policy could never have accepted, or a hash that is
        not a bcrypt hash, simply does not match.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            return False

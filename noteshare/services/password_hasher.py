"""
NoteShare Backend: Password Hasher
===================================

What:  One-way salted password hashing and constant-time verification.
How:   bcrypt with a configurable work factor (default 10). The salt comes
       from the OS random source through bcrypt.gensalt().

Contract:
    hash(plaintext)           -> bcrypt digest (str), or HashingError
    verify(plaintext, digest) -> bool, never raises

Neither the plaintext nor the digest is ever logged.
"""

import logging

import bcrypt

from noteshare.exceptions import HashingError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input; longer input is rejected.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    bcrypt wrapper with a fixed cost factor.

    Stateless apart from the cost factor; one instance is shared by every
    request. Both methods are CPU bound, so async callers run them through
    starlette.concurrency.run_in_threadpool.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            HashingError: the salt source is unavailable or bcrypt refused
                the input.
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            digest = bcrypt.hashpw(plaintext.encode("utf-8"), salt)
        except (OSError, NotImplementedError, ValueError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise HashingError(context={"error_type": type(e).__name__}) from e
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a password against a stored digest.

        bcrypt.checkpw compares in constant time. A malformed digest or an
        over-long password counts as a mismatch.
        """
        secret = plaintext.encode("utf-8")
        # Older bcrypt releases silently truncate instead of rejecting.
        if len(secret) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(secret, digest.encode("utf-8"))
        except ValueError:
            return False

"""
Credential verification with bcrypt.

bcrypt.checkpw compares digests in constant time, so the position of a
mismatch does not show up in response timing.
"""

import bcrypt

MAX_SECRET_BYTES = 72


class BcryptVerifier:
    """Hash and verify secrets with bcrypt."""

    def __init__(self, rounds: int = 10):
        """
        Initialize verifier.

        Args:
            rounds: bcrypt cost factor for newly created hashes
        """
        self.rounds = rounds
        # Compared against when the claimed user does not exist
        self._dummy_hash = bcrypt.hashpw(b"coursebook-dummy-secret", bcrypt.gensalt(rounds))

    def hash(self, secret: str) -> str:
        """
        Hash a plaintext secret for storage.

        Raises:
            ValueError: If the secret exceeds bcrypt's 72 byte input limit
        """
        encoded = secret.encode("utf-8")
        if len(encoded) > MAX_SECRET_BYTES:
            raise ValueError(f"Password must be at most {MAX_SECRET_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify(self, claimed_secret: str, stored_hash: str) -> bool:
        """
        Check a claimed secret against a stored hash.

        Malformed hashes and over-long secrets are a no-match.
        """
        encoded = claimed_secret.encode("utf-8")
        if not stored_hash or len(encoded) > MAX_SECRET_BYTES:
            self.verify_dummy(claimed_secret)
            return False

        try:
            return bcrypt.checkpw(encoded, stored_hash.encode("utf-8"))
        except ValueError:
            self.verify_dummy(claimed_secret)
            return False

    def verify_dummy(self, claimed_secret: str) -> None:
        """Run one bcrypt check whose result is discarded."""
        encoded = claimed_secret.encode("utf-8")[:MAX_SECRET_BYTES]
        bcrypt.checkpw(encoded, self._dummy_hash)

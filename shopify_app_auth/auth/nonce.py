"""
State/nonce generation for the OAuth flow.

The state value binds an authorization request to its callback. It must be
unguessable for its (short) lifetime and safe to place in a URL and cookie.
"""

import secrets

# 32 random bytes = 256 bits of entropy, ~43 URL-safe characters
NONCE_BYTES = 32


class NonceGenerator:
    """Produces cryptographically secure, URL-safe state tokens."""

    def __init__(self, num_bytes: int = NONCE_BYTES):
        if num_bytes < 16:
            raise ValueError("Nonces need at least 16 bytes (128 bits) of entropy")
        self.num_bytes = num_bytes

    def generate(self) -> str:
        return secrets.token_urlsafe(self.num_bytes)


_default_generator = NonceGenerator()


def nonce() -> str:
    """Generate a state token with the default generator."""
    return _default_generator.generate()

"""
Short Code Generator

Produces fixed-length random short codes from a URL-safe alphabet.

Design Decisions:
- Uses the secrets module (CSPRNG) so codes of anonymous links cannot be
  predicted and enumerated
- Default alphabet [A-Za-z0-9_-] gives 64^6 (~6.9e10) codes at length 6
- Instances are callable, so anything expecting a generator also accepts a
  plain function returning a string (used by tests to force collisions)
"""

import secrets

from shortlink.core.setting import URL_SAFE_ALPHABET


class ShortCodeGenerator:
    """Generate random short codes."""

    def __init__(self, length: int = 6, alphabet: str = URL_SAFE_ALPHABET):
        """
        Args:
            length: Number of characters per code
            alphabet: Characters codes are drawn from
        """
        if length < 1:
            raise ValueError(f"Short code length must be positive, got {length}")
        if len(set(alphabet)) < 2:
            raise ValueError("Short code alphabet needs at least two distinct characters")

        self.length = length
        # Repeated characters would skew the distribution
        self.alphabet = "".join(dict.fromkeys(alphabet))

    @property
    def space_size(self) -> int:
        """Number of distinct codes this generator can produce."""
        return len(self.alphabet) ** self.length

    def generate(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def __call__(self) -> str:
        return self.generate()

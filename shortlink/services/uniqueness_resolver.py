"""
Uniqueness Resolver

Combines the code generator with the record store to hand out short codes
that are unique at insertion time.

Algorithm:
- Up to max_attempts times: generate a candidate and check the store for any
  row already holding it (soft-deleted rows included, their codes stay
  reserved). Candidates naming a fixed route (RESERVED_SHORT_CODES) count
  as collisions without a lookup
- The existence check and the insert are not atomic; two concurrent
  allocations can both pass the check. The store's unique index rejects the
  later insert, and that rejection counts as one more collision in the same
  bounded loop
- When every attempt collides, CollisionExhaustedError is raised. This is an
  operational fault (code space too small for the load), not a client error
"""

import logging
from typing import Callable, Iterable, Optional

from shortlink.core.exceptions import CollisionExhaustedError, UniqueConstraintViolation
from shortlink.core.setting import RESERVED_SHORT_CODES
from shortlink.db.interface import RecordStore
from shortlink.db.models import ShortLink

logger = logging.getLogger(__name__)

CodeSource = Callable[[], str]


class UniquenessResolver:
    """Allocates collision-free short codes with bounded retries."""

    def __init__(
        self,
        store: RecordStore,
        generator: CodeSource,
        max_attempts: int = 5,
        reserved: Iterable[str] = RESERVED_SHORT_CODES
    ):
        """
        Args:
            store: Record store used for existence checks and inserts
            generator: Callable returning a fresh candidate code
            max_attempts: Candidates tried before giving up
            reserved: Codes never handed out (paths of fixed routes)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        self.store = store
        self.generator = generator
        self.max_attempts = max_attempts
        self.reserved = frozenset(reserved)

    async def _next_free_candidate(self, attempt: int) -> Optional[str]:
        candidate = self.generator()
        if candidate in self.reserved:
            logger.warning(f"Skipping reserved short code (attempt {attempt}): {candidate}")
            return None

        existing = await self.store.find_by_code(candidate, include_deleted=True)
        if existing is None:
            return candidate

        logger.warning(f"Short code collision detected (attempt {attempt}): {candidate}")
        return None

    async def allocate(self) -> str:
        """
        Return a code that no stored link holds at the time of the check.

        Raises:
            CollisionExhaustedError: If every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = await self._next_free_candidate(attempt)
            if candidate is not None:
                return candidate

        logger.error(f"Short code allocation exhausted after {self.max_attempts} attempts")
        raise CollisionExhaustedError(self.max_attempts)

    async def allocate_and_insert(self, build: Callable[[str], ShortLink]) -> ShortLink:
        """
        Allocate a code and insert the link built for it.

        Args:
            build: Creates the (unsaved) link for a given short code

        Returns:
            The inserted link

        Raises:
            CollisionExhaustedError: If every attempt collided, either on the
                existence check or on the insert
            DatabaseError: For storage failures other than uniqueness violations
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = await self._next_free_candidate(attempt)
            if candidate is None:
                continue

            try:
                return await self.store.insert(build(candidate))
            except UniqueConstraintViolation:
                logger.warning(
                    f"Short code {candidate} taken by a concurrent insert (attempt {attempt})"
                )

        logger.error(f"Short code allocation exhausted after {self.max_attempts} attempts")
        raise CollisionExhaustedError(self.max_attempts)

"""Short human-shareable references for bookings and mock payments."""

import logging
import secrets
from collections.abc import Awaitable, Callable

from cinebook.config import settings
from cinebook.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

BOOKING_PREFIX = "BK-"
PAYMENT_PREFIX = "MOCK-PAY-"


def generate_reference(prefix: str, nbytes: int = 3) -> str:
    """Return ``prefix`` followed by ``2 * nbytes`` uppercase hex characters."""
    return prefix + secrets.token_hex(nbytes).upper()


class ReferenceGenerator:
    """
    Generates references, retrying until a reference is unused.

    Uniqueness is best effort: the loop is bounded by ``max_attempts`` and
    fails with ServiceUnavailableError instead of spinning forever.
    """

    def __init__(
        self,
        is_taken: Callable[[str], Awaitable[bool]] | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.is_taken = is_taken
        self.max_attempts = max_attempts or settings.reference_max_attempts

    async def booking_reference(self) -> str:
        """Unused ``BK-XXXXXX`` reference."""
        return await self._unique(BOOKING_PREFIX)

    def payment_reference(self) -> str:
        """``MOCK-PAY-XXXXXX`` reference; not checked against past payments."""
        return generate_reference(PAYMENT_PREFIX)

    async def _unique(self, prefix: str) -> str:
        for attempt in range(1, self.max_attempts + 1):
            reference = generate_reference(prefix)
            if self.is_taken is None or not await self.is_taken(reference):
                return reference
            logger.warning(f"Reference collision on {reference} (attempt {attempt})")

        logger.error(f"Could not generate a unique {prefix} reference in {self.max_attempts} attempts")
        raise ServiceUnavailableError("Could not generate a unique booking reference")

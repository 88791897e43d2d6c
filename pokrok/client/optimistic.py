"""Optimistic updates: apply locally, confirm with the server, roll back on failure."""
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Hashable, Optional

import httpx

from pokrok.client.api import ApiError

logger = logging.getLogger(__name__)


class MutationOutcome(str, Enum):
    SKIPPED = "skipped"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


class OptimisticMutator:
    """
    Runs local mutations ahead of their server request.

    Each mutation is identified by a key. While a key is in flight further
    mutations with the same key are skipped without a request, so a double
    click sends a single request.
    """

    def __init__(self, notify: Optional[Callable[[str], None]] = None):
        self.notify = notify
        self._in_flight: set[Hashable] = set()

    def in_flight(self, key: Hashable) -> bool:
        return key in self._in_flight

    async def run(
        self,
        key: Hashable,
        apply: Callable[[], None],
        request: Callable[[], Awaitable[Any]],
        rollback: Callable[[], None],
        reconcile: Optional[Callable[[Any], None]] = None,
        error_message: str = "Could not save the change",
    ) -> MutationOutcome:
        """
        Apply a change locally and confirm it with the server.

        Args:
            key: Guard key of the mutation
            apply: Applies the change to local state
            request: Sends the change to the server
            rollback: Restores local state after a failed request
            reconcile: Adopts the server's response after success
            error_message: Shown through ``notify`` on failure

        Returns:
            SKIPPED if the key was in flight, CONFIRMED or ROLLED_BACK otherwise
        """
        if key in self._in_flight:
            logger.debug("Mutation %r already in flight, skipping", key)
            return MutationOutcome.SKIPPED
        self._in_flight.add(key)

        try:
            apply()
            try:
                result = await request()
            except (ApiError, httpx.HTTPError) as e:
                logger.warning("Mutation %r failed: %s", key, e)
                rollback()
                if self.notify is not None:
                    self.notify(error_message)
                return MutationOutcome.ROLLED_BACK

            if reconcile is not None:
                reconcile(result)
            return MutationOutcome.CONFIRMED
        finally:
            self._in_flight.discard(key)

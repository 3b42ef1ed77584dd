"""Optimistic update with rollback.

Emits the expected post-mutation snapshot first, performs the mutation, then
either emits a snapshot rebuilt from authoritative data or, on failure, emits a
failure snapshot followed by the exact snapshot that preceded the optimistic
one.

Only a failed mutation rolls back. Once the data source has acknowledged the
change, a failed confirmation refresh is logged and the expected snapshot is
committed instead, so the container never shows state the source contradicts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Generic, Hashable, TypeVar

from .errors import MarqueeError, describe_error

S = TypeVar("S")
A = TypeVar("A")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingOperation(Generic[S]):
    """An in-flight mutation, its target and the snapshot to restore on failure."""

    entity_id: Hashable
    prior: S
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or str(self.entity_id)


class OptimisticUpdate(Generic[S, A]):
    """Reusable optimistic-update/rollback routine.

    Args:
        apply_optimistic: Builds the pending snapshot from the prior one.
        commit_on_success: Builds the confirmed snapshot from the mutation's
            acknowledgement, normally by refreshing from the data source.
        compensate_on_failure: Builds the failure snapshot shown before the
            prior snapshot is restored.
        settle_unconfirmed: Builds the snapshot committed when the mutation
            was acknowledged but ``commit_on_success`` failed.
        owner: Name used in log messages.
    """

    def __init__(
        self,
        *,
        apply_optimistic: Callable[[S], S],
        commit_on_success: Callable[[A], Awaitable[S]],
        compensate_on_failure: Callable[[S, str], S],
        settle_unconfirmed: Callable[[S], S],
        owner: str = "optimistic",
    ) -> None:
        self._apply_optimistic = apply_optimistic
        self._commit_on_success = commit_on_success
        self._compensate_on_failure = compensate_on_failure
        self._settle_unconfirmed = settle_unconfirmed
        self._owner = owner

    async def run(
        self,
        entity_id: Hashable,
        prior: S,
        mutation: Callable[[], Awaitable[A]],
        *,
        label: str = "",
    ) -> AsyncIterator[S]:
        operation = PendingOperation(entity_id=entity_id, prior=prior, label=label)
        yield self._apply_optimistic(prior)

        try:
            ack = await mutation()
        except Exception as exc:
            async for snapshot in self._rollback(operation, exc):
                yield snapshot
            return

        try:
            confirmed = await self._commit_on_success(ack)
        except Exception as exc:
            logger.warning(
                f"{self._owner}: mutation '{operation.name}' succeeded but refresh failed, keeping expected state: {exc}"
            )
            yield self._settle_unconfirmed(operation.prior)
            return

        logger.debug(f"{self._owner}: mutation '{operation.name}' confirmed")
        yield confirmed

    async def _rollback(self, operation: PendingOperation[S], exc: Exception) -> AsyncIterator[S]:
        if isinstance(exc, MarqueeError):
            logger.info(f"{self._owner}: rolling back '{operation.name}': {exc}")
        else:
            logger.exception(f"{self._owner}: unexpected failure in '{operation.name}'", exc_info=exc)
        yield self._compensate_on_failure(operation.prior, describe_error(exc))
        yield operation.prior

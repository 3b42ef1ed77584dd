"""Base types for intents (events) and snapshots (states).

Both are frozen pydantic models: the concrete class is the tag, the fields are
the payload, and equality is structural. Collections inside snapshots are held
as tuples or frozensets so a committed snapshot can never change.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Intent(BaseModel):
    """A request to change state. Subclass once per user/system action."""

    model_config = ConfigDict(frozen=True)

    @property
    def tag(self) -> str:
        return type(self).__name__


class Snapshot(BaseModel):
    """An immutable, value-comparable observable condition of one container."""

    model_config = ConfigDict(frozen=True)

    @property
    def tag(self) -> str:
        return type(self).__name__

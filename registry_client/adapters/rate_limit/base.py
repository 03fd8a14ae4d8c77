"""Rate gate interfaces.

The transport depends on this abstraction (not the concrete implementation)
so the spacing policy can be swapped without touching request handling.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncContextManager


@dataclass
class RateSlot:
    """Handle for one request holding the gate.

    Attributes:
        waited_seconds: Time spent sleeping before the request was allowed.
        responded: Set by the holder once the remote side produced a response.
            Only responded requests advance the last-completion timestamp.
    """

    waited_seconds: float = 0.0
    responded: bool = False

    def mark_responded(self) -> None:
        self.responded = True


class AbstractRateGate(ABC):
    """Interface for request gates."""

    @abstractmethod
    def hold(self) -> AsyncContextManager[RateSlot]:
        """Acquire the gate for the full lifetime of one request.

        Returns:
            Async context manager yielding a RateSlot. The gate is released
            when the context exits, after the holder is done classifying the
            response.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def last_completed(self) -> float | None:
        """Clock reading recorded when the last responded request finished."""
        raise NotImplementedError

"""Cancellation token shared between the pipeline deadline and the sampler."""

from __future__ import annotations

import threading
from typing import Optional

from vidscribe.core.exceptions import ExtractionCancelledError


class CancellationToken:
    """Thread-safe one-shot cancellation flag.

    Set from the event loop, observed both by coroutines and by the decoder
    worker thread between blocking steps.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ExtractionCancelledError(f"Frame extraction was cancelled ({self._reason}).")

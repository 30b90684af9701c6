# epub_zh_converter/src/epub_zh_converter/core/progress.py
"""
Suivi de la progression d'une conversion.

Le pipeline publie ses événements via un ProgressSink. Le ProgressTracker
s'intercale entre les deux pour garantir l'ordre croissant des
pourcentages et le silence après un échec ou une annulation.
"""

import logging
import queue
from typing import Callable, Optional, Protocol, Union

from .models import ProgressEvent

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    def update(self, percent: float, message: str) -> None: ...

    def fail(self, message: str) -> None: ...


class CallbackProgressSink:
    """Adapte une simple fonction (percent, message) en ProgressSink."""

    def __init__(
        self,
        on_progress: Callable[[float, str], None],
        on_failure: Optional[Callable[[str], None]] = None,
    ):
        self._on_progress = on_progress
        self._on_failure = on_failure

    def update(self, percent: float, message: str) -> None:
        self._on_progress(percent, message)

    def fail(self, message: str) -> None:
        if self._on_failure is not None:
            self._on_failure(message)


class QueueProgressSink:
    """
    Sink non bloquant: dépose les événements dans une file.

    Utilisé par la GUI, dont la boucle Tk relit la file périodiquement.
    Les échecs sont déposés comme ProgressEvent de pourcentage négatif.
    """

    FAILURE_PERCENT = -1.0

    def __init__(self, events: "queue.Queue[ProgressEvent]"):
        self.events = events

    def update(self, percent: float, message: str) -> None:
        self.events.put_nowait(ProgressEvent(percent, message))

    def fail(self, message: str) -> None:
        self.events.put_nowait(ProgressEvent(self.FAILURE_PERCENT, message))


class NullProgressSink:
    def update(self, percent: float, message: str) -> None:
        pass

    def fail(self, message: str) -> None:
        pass


SinkLike = Union[ProgressSink, Callable[[float, str], None], None]


def as_progress_sink(sink: SinkLike) -> ProgressSink:
    """Normalise un callable, un ProgressSink ou None."""
    if sink is None:
        return NullProgressSink()
    if hasattr(sink, "update") and hasattr(sink, "fail"):
        return sink
    if callable(sink):
        return CallbackProgressSink(sink)
    raise TypeError(f"Unsupported progress sink: {sink!r}")


class ProgressTracker:
    """Garde-fou autour d'un sink pour une seule exécution du pipeline."""

    def __init__(self, sink: SinkLike):
        self._sink = as_progress_sink(sink)
        self._last = 0.0
        self._closed = False

    @property
    def last_percent(self) -> float:
        return self._last

    @property
    def closed(self) -> bool:
        return self._closed

    def update(self, percent: float, message: str):
        if self._closed:
            return
        percent = min(100.0, max(float(percent), self._last))
        self._last = percent
        logger.debug("Progress %.1f%% - %s", percent, message)
        try:
            self._sink.update(percent, message)
        except Exception:
            # Le sink ne doit jamais interrompre la conversion
            logger.exception("Progress sink raised on update")

    def fail(self, message: str):
        if self._closed:
            return
        self._closed = True
        try:
            self._sink.fail(message)
        except Exception:
            logger.exception("Progress sink raised on failure")

    def close(self):
        """Plus aucun événement ne sera émis (annulation)."""
        self._closed = True

# epub_zh_converter/src/epub_zh_converter/core/cancellation.py
import threading

from .errors import ConversionCancelled


class CancellationToken:
    """Jeton d'annulation partagé entre l'appelant et le pipeline."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise ConversionCancelled()

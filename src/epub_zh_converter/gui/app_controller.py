# epub_zh_converter/src/epub_zh_converter/gui/app_controller.py
"""
Contrôleur de données (Gestionnaire d'état).

Ce module centralise l'état d'une conversion (fichier chargé, sens,
résultat, erreur) indépendamment de l'interface graphique.
"""

import functools
import logging
import os
import queue
import threading
from typing import Optional

from ..config import SUPPORTED_EXT
from ..core.cancellation import CancellationToken
from ..core.converter_service import ConverterService
from ..core.errors import ConversionError
from ..core.file_utils import write_bytes_atomic
from ..core.models import ConversionDirection, ConversionResult, ProgressEvent
from ..core.progress import QueueProgressSink
from . import task_manager

logger = logging.getLogger(__name__)


class AppController:
    """Gère l'état de la fenêtre de conversion."""

    def __init__(self, service: Optional[ConverterService] = None):
        self.service = service or ConverterService()
        self.direction = ConversionDirection.TRADITIONAL_TO_SIMPLIFIED
        self.source_path: str | None = None
        self.source_bytes: bytes | None = None
        self.result: ConversionResult | None = None
        self.error: ConversionError | None = None
        self.events: "queue.Queue[ProgressEvent]" = queue.Queue()
        self._cancel_token: CancellationToken | None = None
        self._thread: threading.Thread | None = None
        logger.debug("AppController initialisé.")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def source_name(self) -> str | None:
        return os.path.basename(self.source_path) if self.source_path else None

    def load_file(self, path: str):
        """Charge un fichier EPUB et efface tout résultat précédent."""
        if self.running:
            raise RuntimeError("Une conversion est déjà en cours.")
        if not path or not os.path.isfile(path):
            raise ValueError("Le chemin du fichier est invalide.")
        if not path.lower().endswith(SUPPORTED_EXT):
            raise ValueError("Seuls les fichiers .epub sont acceptés.")

        with open(path, "rb") as f:
            data = f.read()

        self.reset()
        self.source_path = path
        self.source_bytes = data
        logger.info(f"Fichier chargé : {path} ({len(data)} octets)")

    def set_direction(self, direction: ConversionDirection):
        if self.running:
            raise RuntimeError("Le sens ne peut pas changer pendant une conversion.")
        self.direction = direction

    def start_conversion(self) -> threading.Thread:
        """Lance la conversion du fichier chargé dans un thread."""
        if self.source_bytes is None:
            raise ValueError("Aucun fichier chargé.")
        if self.running:
            raise RuntimeError("Une conversion est déjà en cours.")

        self.result = None
        self.error = None
        self.events = queue.Queue()
        self._cancel_token = CancellationToken()
        self._thread = task_manager.start_conversion_task(
            self.service,
            self.source_bytes,
            self.source_name,
            self.direction,
            self.events,
            self._cancel_token,
            functools.partial(self._on_complete, self._cancel_token),
        )
        return self._thread

    def _on_complete(
        self,
        token: CancellationToken,
        result: Optional[ConversionResult],
        error: Optional[ConversionError],
    ):
        """Appelé depuis le thread de conversion."""
        if token is not self._cancel_token:
            # Exécution abandonnée (reset ou nouveau fichier)
            return
        if error is not None:
            self.result = None
            self.error = error
            logger.info(f"Conversion terminée en échec : {error.message}")
        else:
            self.result = result
            self.error = None
            logger.info(f"Conversion terminée : {result.derived_file_name}")

    def cancel(self):
        if self._cancel_token is not None:
            self._cancel_token.cancel()

    def drain_events(self) -> list:
        """Retourne les événements de progression en attente."""
        pending = []
        while True:
            try:
                pending.append(self.events.get_nowait())
            except queue.Empty:
                return pending

    def latest_progress(self) -> Optional[ProgressEvent]:
        """Vide la file et retourne le dernier événement de progression (hors échec)."""
        latest = None
        for event in self.drain_events():
            if event.percent != QueueProgressSink.FAILURE_PERCENT:
                latest = event
        return latest

    def save_result(self, path: str):
        """Enregistre l'EPUB converti."""
        if self.result is None:
            raise ValueError("Aucun résultat à enregistrer.")
        write_bytes_atomic(path, self.result.output_bytes)

    def reset(self):
        """Oublie le fichier, le résultat et l'erreur courants."""
        self.cancel()
        self.source_path = None
        self.source_bytes = None
        self.result = None
        self.error = None
        self._cancel_token = None
        self.events = queue.Queue()

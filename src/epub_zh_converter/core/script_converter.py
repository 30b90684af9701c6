# epub_zh_converter/src/epub_zh_converter/core/script_converter.py
"""
Conversion traditionnel <-> simplifié via les tables OpenCC.

Le pipeline ne dépend que du protocole Converter; OpenCCConverter en est
l'implémentation par défaut.
"""

import logging
import threading
from typing import Dict, Protocol

from opencc import OpenCC

from .models import ConversionDirection

logger = logging.getLogger(__name__)


class Converter(Protocol):
    def convert(self, text: str, direction: ConversionDirection) -> str: ...


class OpenCCConverter:
    """
    Convertisseur basé sur OpenCC.

    Une instance OpenCC est créée à la demande pour chaque sens et reste
    attachée à ce convertisseur (aucun état global partagé).
    """

    def __init__(self):
        self._engines: Dict[ConversionDirection, OpenCC] = {}
        self._lock = threading.Lock()

    def _engine(self, direction: ConversionDirection) -> OpenCC:
        with self._lock:
            engine = self._engines.get(direction)
            if engine is None:
                logger.debug("Loading OpenCC table %s", direction.opencc_config)
                engine = OpenCC(direction.opencc_config)
                self._engines[direction] = engine
            return engine

    def convert(self, text: str, direction: ConversionDirection) -> str:
        if not text:
            return text
        return self._engine(direction).convert(text)

# epub_zh_converter/src/epub_zh_converter/gui/task_manager.py
"""
Gestionnaire des tâches de fond (threading) pour l'interface graphique.
La conversion est découplée de l'UI: la progression passe par une file.
"""

import logging
import queue
import threading
from typing import TYPE_CHECKING, Callable, Optional

from ..core.errors import ConversionError
from ..core.progress import QueueProgressSink

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken
    from ..core.converter_service import ConverterService
    from ..core.models import ConversionDirection, ConversionResult, ProgressEvent

logger = logging.getLogger(__name__)

OnComplete = Callable[[Optional["ConversionResult"], Optional[ConversionError]], None]


def start_conversion_task(
    service: "ConverterService",
    data: bytes,
    file_name: str,
    direction: "ConversionDirection",
    events: "queue.Queue[ProgressEvent]",
    cancel_token: "CancellationToken",
    on_complete: OnComplete,
) -> threading.Thread:
    """Lance le thread de conversion et retourne le thread démarré."""
    logger.debug(f"Démarrage du Conversion Task pour {file_name} ({direction.value}).")
    thread = threading.Thread(
        target=_conversion_worker,
        args=(service, data, file_name, direction, events, cancel_token, on_complete),
        name="conversion",
        daemon=True,
    )
    thread.start()
    return thread


def _conversion_worker(
    service: "ConverterService",
    data: bytes,
    file_name: str,
    direction: "ConversionDirection",
    events: "queue.Queue[ProgressEvent]",
    cancel_token: "CancellationToken",
    on_complete: OnComplete,
):
    """Logique exécutée dans le thread de conversion."""
    result = None
    error = None
    try:
        result = service.convert_bytes(
            data, file_name, direction, QueueProgressSink(events), cancel_token
        )
    except ConversionError as e:
        error = e
    except Exception as e:
        # Erreur inattendue: présentée comme un échec de génération
        logger.exception("Unexpected error converting %s", file_name)
        error = ConversionError(f"Unexpected error: {e}")
    finally:
        # Toujours signaler la fin pour libérer l'UI
        on_complete(result, error)

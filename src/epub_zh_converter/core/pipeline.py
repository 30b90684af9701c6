# epub_zh_converter/src/epub_zh_converter/core/pipeline.py
"""
Pipeline de conversion d'une archive EPUB.

Lit l'archive source, convertit les entrées texte (html, css, opf...),
recopie les autres à l'identique et génère une nouvelle archive.
Seules l'ouverture et la génération de l'archive sont fatales: une
entrée qui ne peut pas être décodée ou convertie est conservée telle
quelle.
"""

import logging
import posixpath
from typing import List, Optional, Tuple

from ..config import (
    MSG_ANALYZING,
    MSG_COMPLETE,
    MSG_GENERATING,
    MSG_PROCESSING,
    MSG_READING,
    PROGRESS_ANALYZED,
    PROGRESS_DONE,
    PROGRESS_ENTRIES_SPAN,
    PROGRESS_GENERATING,
    PROGRESS_READ,
    TEXT_ENCODING,
)
from .cancellation import CancellationToken
from .classifier import is_text_bearing
from .epub.archive import read_archive, write_archive
from .errors import ConversionCancelled, ConversionError
from .models import (
    ArchiveEntry,
    ConversionDirection,
    ConversionResult,
    EntryDegradation,
)
from .progress import ProgressTracker, SinkLike
from .script_converter import Converter, OpenCCConverter

logger = logging.getLogger(__name__)


def convert_entry(
    entry: ArchiveEntry, direction: ConversionDirection, converter: Converter
) -> Tuple[ArchiveEntry, Optional[EntryDegradation]]:
    """
    Convertit une entrée texte.

    Returns:
        (entrée à écrire, dégradation éventuelle). En cas d'échec, l'entrée
        d'origine est retournée inchangée.
    """
    try:
        text = entry.data.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        logger.warning("Entry %s is not valid UTF-8, kept as is: %s", entry.path, e)
        return entry, EntryDegradation(entry.path, f"decode error: {e}")

    try:
        converted = converter.convert(text, direction)
        payload = converted.encode(TEXT_ENCODING)
    except Exception as e:
        logger.warning("Conversion failed for %s, kept as is: %s", entry.path, e)
        return entry, EntryDegradation(entry.path, f"conversion error: {e}")

    return (
        ArchiveEntry(entry.path, entry.is_directory, payload, entry.info),
        None,
    )


def derive_output_name(
    file_name: str, direction: ConversionDirection, converter: Converter
) -> Tuple[str, bool]:
    """
    Calcule le nom du fichier converti: <base convertie><suffixe><extension>.

    Returns:
        (nom dérivé, True si la conversion du nom a échoué)
    """
    name = posixpath.basename((file_name or "").replace("\\", "/"))
    base, dot, ext = name.rpartition(".")
    if not dot or not base:
        base, ext = name, ""
    extension = f".{ext}" if ext else ""

    try:
        converted_base = converter.convert(base, direction)
        if not isinstance(converted_base, str):
            raise TypeError(f"converter returned {type(converted_base).__name__}")
    except Exception as e:
        logger.warning("File name conversion failed for %s: %s", name, e)
        return f"{base}{direction.suffix}{extension}", True

    return f"{converted_base}{direction.suffix}{extension}", False


def convert_archive(
    input_bytes: bytes,
    direction: ConversionDirection,
    on_progress: SinkLike = None,
    *,
    file_name: str = "book.epub",
    converter: Optional[Converter] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ConversionResult:
    """
    Convertit le texte d'une archive EPUB dans le sens demandé.

    Args:
        input_bytes: Contenu brut du fichier EPUB
        direction: Sens de conversion, fixe pour toute l'exécution
        on_progress: Callable (percent, message) ou ProgressSink
        file_name: Nom du fichier d'origine, pour dériver le nom de sortie
        converter: Convertisseur injecté (OpenCC par défaut)
        cancel_token: Jeton vérifié entre chaque entrée

    Returns:
        ConversionResult avec les octets de la nouvelle archive

    Raises:
        InvalidArchiveError: Entrée illisible comme archive ZIP
        SerializationError: Impossible de générer la nouvelle archive
        ConversionCancelled: Annulation demandée par l'appelant
    """
    converter = converter or OpenCCConverter()
    tracker = ProgressTracker(on_progress)

    try:
        # 1. Lecture de l'archive source
        source = read_archive(input_bytes)
        tracker.update(PROGRESS_READ, MSG_READING)

        # 2. Analyse de la structure
        total = len(source)
        tracker.update(PROGRESS_ANALYZED, MSG_ANALYZING)
        logger.info("Converting %s (%d entries, %s)", file_name, total, direction.value)

        # 3. Traitement des entrées, dans l'ordre d'origine
        output: List[ArchiveEntry] = []
        degraded: List[EntryDegradation] = []
        converted_count = 0
        for index, entry in enumerate(source):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            if not entry.is_directory and is_text_bearing(entry.path):
                new_entry, degradation = convert_entry(entry, direction, converter)
                if degradation is None:
                    converted_count += 1
                else:
                    degraded.append(degradation)
                output.append(new_entry)
            else:
                output.append(entry)

            tracker.update(
                PROGRESS_ANALYZED + (index + 1) / total * PROGRESS_ENTRIES_SPAN,
                MSG_PROCESSING.format(path=entry.path),
            )

        # 4. Génération de la nouvelle archive
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        tracker.update(PROGRESS_GENERATING, MSG_GENERATING)
        output_bytes = write_archive(output, source.comment)

        # 5. Nom du fichier converti
        derived_name, name_degraded = derive_output_name(file_name, direction, converter)

    except ConversionCancelled:
        tracker.close()
        logger.info("Conversion of %s cancelled", file_name)
        raise
    except ConversionError as e:
        tracker.fail(e.message)
        logger.error("Conversion of %s failed: %s", file_name, e.message)
        raise

    tracker.update(PROGRESS_DONE, MSG_COMPLETE)
    logger.info(
        "Converted %s -> %s (%d text entries, %d kept as is)",
        file_name,
        derived_name,
        converted_count,
        len(degraded),
    )
    return ConversionResult(
        output_bytes=output_bytes,
        derived_file_name=derived_name,
        degraded_entries=tuple(degraded),
        file_name_degraded=name_degraded,
        entry_count=total,
        converted_count=converted_count,
    )

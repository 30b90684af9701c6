# epub_zh_converter/src/epub_zh_converter/core/epub/archive.py
"""
Module d'accès au conteneur ZIP d'un EPUB.

Responsabilité unique: lire une archive depuis des octets et en
générer une nouvelle, sans jamais modifier l'archive source.
"""

import io
import logging
import zipfile
import zlib
from typing import Iterable

from ...config import MIMETYPE_ENTRY
from ..errors import InvalidArchiveError, SerializationError
from ..models import ArchiveEntry, SourceArchive

logger = logging.getLogger(__name__)

_SUPPORTED_COMPRESSION = (
    zipfile.ZIP_STORED,
    zipfile.ZIP_DEFLATED,
    zipfile.ZIP_BZIP2,
    zipfile.ZIP_LZMA,
)

_READ_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    OSError,
    ValueError,
    NotImplementedError,
    RuntimeError,  # entrée chiffrée
)


def read_archive(data: bytes) -> SourceArchive:
    """
    Lit une archive ZIP en mémoire.

    Toutes les entrées sont décompressées immédiatement afin qu'une
    archive corrompue (CRC, flux tronqué) soit détectée à l'ouverture.

    Args:
        data: Contenu brut du fichier EPUB

    Returns:
        SourceArchive immuable, dans l'ordre de l'archive

    Raises:
        InvalidArchiveError: Si les octets ne forment pas une archive ZIP lisible
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidArchiveError(f"Expected bytes, got {type(data).__name__}")

    try:
        with zipfile.ZipFile(io.BytesIO(bytes(data))) as zf:
            entries = []
            for info in zf.infolist():
                is_dir = info.is_dir()
                payload = b"" if is_dir else zf.read(info)
                entries.append(ArchiveEntry(info.filename, is_dir, payload, info))
            comment = zf.comment
    except _READ_ERRORS as e:
        logger.warning("Could not open archive: %s", e)
        raise InvalidArchiveError() from e

    logger.debug("Read archive with %d entries", len(entries))
    return SourceArchive(tuple(entries), comment)


def _clone_info(entry: ArchiveEntry) -> zipfile.ZipInfo:
    """Copie les métadonnées utiles de l'entrée d'origine."""
    src = entry.info
    info = zipfile.ZipInfo(entry.path, date_time=src.date_time)
    info.compress_type = (
        src.compress_type if src.compress_type in _SUPPORTED_COMPRESSION else zipfile.ZIP_DEFLATED
    )
    if entry.path == MIMETYPE_ENTRY:
        # Le fichier mimetype d'un EPUB doit rester non compressé
        info.compress_type = zipfile.ZIP_STORED
    info.external_attr = src.external_attr
    info.create_system = src.create_system
    info.comment = src.comment
    return info


def write_archive(entries: Iterable[ArchiveEntry], comment: bytes = b"") -> bytes:
    """
    Génère une nouvelle archive ZIP dans l'ordre des entrées fournies.

    Raises:
        SerializationError: Si l'archive ne peut pas être assemblée
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for entry in entries:
                zf.writestr(_clone_info(entry), entry.data)
            zf.comment = comment
    except (zipfile.LargeZipFile, zlib.error, OSError, ValueError, MemoryError) as e:
        logger.error("Could not generate archive: %s", e)
        raise SerializationError() from e

    return buffer.getvalue()

# epub_zh_converter/src/epub_zh_converter/core/file_utils.py
"""
Logique pour les opérations sur le système de fichiers (trouver, nommer, écrire).
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List

from ..config import OUTPUT_TMP_EXT, SIMPLIFIED_SUFFIX, SUPPORTED_EXT, TRADITIONAL_SUFFIX

logger = logging.getLogger(__name__)


def is_converted_name(filename: str) -> bool:
    """True si le fichier porte déjà un suffixe de conversion."""
    stem = Path(filename).stem
    return stem.endswith(SIMPLIFIED_SUFFIX) or stem.endswith(TRADITIONAL_SUFFIX)


def find_epubs_in_folder(folder: str) -> List[str]:
    """Trouve tous les fichiers EPUB dans un dossier et ses sous-dossiers."""
    files = []
    for root, _, filenames in os.walk(folder):
        for f in sorted(filenames):
            if f.lower().endswith(SUPPORTED_EXT) and not is_converted_name(f):
                files.append(os.path.join(root, f))
    logger.info("Found %d epub(s) in folder %s", len(files), folder)
    return files


def collect_epub_paths(paths: Iterable[str]) -> List[str]:
    """Développe une liste de fichiers et dossiers en chemins EPUB."""
    found = []
    for p in paths:
        if os.path.isdir(p):
            found.extend(find_epubs_in_folder(p))
        elif os.path.isfile(p):
            found.append(p)
        else:
            logger.warning("Path not found: %s", p)
    return found


def sanitize_filename(value: str) -> str:
    """Nettoie un texte pour un nom de fichier valide."""
    value = re.sub(r'[\\/*?:"<>|]', "", value)
    value = re.sub(r"\s+", " ", value)
    return value.strip()


def resolve_output_path(folder: str, filename: str) -> Path:
    """Génère un chemin de sortie libre dans folder, en évitant les collisions."""
    clean = sanitize_filename(filename) or "converted.epub"
    stem, suffix = Path(clean).stem, Path(clean).suffix
    new_path = Path(folder) / clean

    counter = 1
    while new_path.exists():
        new_path = Path(folder) / f"{stem} ({counter}){suffix}"
        counter += 1

    return new_path


def write_bytes_atomic(path: str, data: bytes) -> None:
    """
    Écrit un fichier via un fichier temporaire puis os.replace.

    Aucun fichier partiel n'est laissé en cas d'échec.
    """
    temp_path = str(path) + OUTPUT_TMP_EXT

    try:
        with open(temp_path, "wb") as f:
            f.write(data)
        os.replace(temp_path, path)
        logger.info("Wrote %s (%d bytes)", path, len(data))
    except OSError:
        logger.exception("Failed to write %s", path)
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_path)
        raise

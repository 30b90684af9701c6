# epub_zh_converter/src/epub_zh_converter/core/epub/reader.py
"""
Module de lecture EPUB.

Responsabilité unique: lire les informations descriptives d'un livre
(titre, langue, auteurs) pour les comptes rendus de conversion.
"""

import logging
from typing import Any, Dict, List, Optional

from ebooklib import epub
from ebooklib.epub import EpubBook

logger = logging.getLogger(__name__)


def safe_read_epub(epub_path: str) -> Optional[EpubBook]:
    """
    Lit un fichier EPUB de manière sécurisée.

    Args:
        epub_path: Chemin vers le fichier EPUB

    Returns:
        Objet EpubBook si succès, None sinon
    """
    try:
        return epub.read_epub(epub_path, options={"ignore_ncx": True})
    except Exception as e:
        logger.warning("ebooklib failed to read %s: %s", epub_path, e)
        return None


def _get_metadata_field(book: EpubBook, namespace: str, name: str) -> Optional[Any]:
    """Helper générique pour extraire le premier champ de métadonnées."""
    try:
        meta = book.get_metadata(namespace, name)
        if meta:
            return meta[0][0]
    except Exception:
        logger.debug("No %s:%s metadata", namespace, name)
    return None


def _get_title(book: EpubBook) -> Optional[str]:
    """Extrait le titre du livre."""
    return _get_metadata_field(book, "DC", "title")


def _get_language(book: EpubBook) -> Optional[str]:
    """Extrait la langue du livre."""
    return _get_metadata_field(book, "DC", "language")


def _get_authors(book: EpubBook) -> Optional[List[str]]:
    try:
        auths_meta = book.get_metadata("DC", "creator")
        authors = [a[0] if isinstance(a, tuple) else str(a) for a in auths_meta]
        return authors or None
    except Exception:
        return None


def extract_book_info(epub_path: str) -> Dict:
    """
    Extrait les informations descriptives d'un fichier EPUB.

    Returns:
        Dictionnaire {title, language, authors}; valeurs None si le
        fichier est illisible.
    """
    data = {"title": None, "language": None, "authors": None}

    book = safe_read_epub(epub_path)
    if not book:
        return data

    data["title"] = _get_title(book)
    data["language"] = _get_language(book)
    data["authors"] = _get_authors(book)
    logger.debug("Read book info for %s: %s", epub_path, data["title"])
    return data

# epub_zh_converter/src/epub_zh_converter/core/epub/__init__.py
"""
Module EPUB - Accès au conteneur des fichiers EPUB.

Lecture/écriture de l'archive ZIP (archive) et lecture des informations
du livre via EbookLib (reader).
"""

from .archive import read_archive, write_archive
from .reader import extract_book_info, safe_read_epub

__all__ = [
    "extract_book_info",
    "read_archive",
    "safe_read_epub",
    "write_archive",
]

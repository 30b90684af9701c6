# epub_zh_converter/src/epub_zh_converter/core/classifier.py
"""
Classification des entrées d'une archive EPUB (texte ou binaire opaque).
"""

import posixpath

from ..config import TEXT_EXTENSIONS


def entry_extension(path: str) -> str:
    """Retourne l'extension finale (sans le point, en minuscules) ou ''."""
    name = posixpath.basename(path or "")
    _, dot, ext = name.rpartition(".")
    if not dot:
        return ""
    return ext.lower()


def is_text_bearing(path: str) -> bool:
    """True si l'entrée contient du texte à convertir (html, css, opf...)."""
    return entry_extension(path) in TEXT_EXTENSIONS

# epub_zh_converter/src/epub_zh_converter/main.py
"""
Point d'entrée principal pour EPUB ZH Converter
Décide de lancer le GUI ou le CLI selon l'environnement
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from .config import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_ENCODING,
    LOG_MAX_BYTES,
    NO_GUI_ENV_VAR,
    ensure_directories,
)
from .core.models import ConversionDirection

USAGE = """Usage: python -m epub_zh_converter <epub_or_folder>... [--to-traditional] [--output-dir=DIR]
  epub_or_folder: Fichiers EPUB ou dossiers à convertir
  --to-traditional: Convertit du simplifié vers le traditionnel (défaut: traditionnel -> simplifié)
  --output-dir=DIR: Dossier de sortie (défaut: à côté du fichier source)"""


def setup_logging():
    """Configure le système de logging."""
    ensure_directories()
    logger = logging.getLogger("epub_zh_converter")
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    # Handler pour fichier avec rotation
    logfile = os.path.join(LOG_DIR, "epub_zh_converter.log")
    handler = RotatingFileHandler(
        logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding=LOG_ENCODING
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Handler pour console
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    return logger


def run_gui() -> int:
    """Lance l'interface graphique."""
    logger = logging.getLogger("epub_zh_converter")
    logger.info("Starting EPUB ZH Converter GUI")
    try:
        from .gui.main_window import ConverterGUI

        app = ConverterGUI()
        app.mainloop()
        return 0
    except Exception:
        logger.exception("Fatal error in main loop")
        return 1


def parse_cli_args(argv: List[str]):
    """Retourne (chemins, sens, dossier de sortie) ou None si usage invalide."""
    paths: List[str] = []
    direction = ConversionDirection.TRADITIONAL_TO_SIMPLIFIED
    output_dir: Optional[str] = None

    for arg in argv:
        if arg == "--to-traditional":
            direction = ConversionDirection.SIMPLIFIED_TO_TRADITIONAL
        elif arg == "--to-simplified":
            direction = ConversionDirection.TRADITIONAL_TO_SIMPLIFIED
        elif arg.startswith("--output-dir="):
            output_dir = arg.split("=", 1)[1] or None
        elif arg.startswith("--"):
            return None
        else:
            paths.append(arg)

    if not paths:
        return None
    return paths, direction, output_dir


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Lance le mode ligne de commande."""
    logger = logging.getLogger("epub_zh_converter")
    logger.info("Starting EPUB ZH Converter CLI mode")

    parsed = parse_cli_args(sys.argv[1:] if argv is None else argv)
    if parsed is None:
        print(USAGE)
        return 1
    paths, direction, output_dir = parsed

    try:
        from .cli import cli_convert_paths, print_conversion_summary

        reports = cli_convert_paths(paths, direction, output_dir)
        print_conversion_summary(reports)
        if not reports or not all(r.success for r in reports):
            return 1
        return 0
    except Exception as e:
        logger.exception("Error in CLI mode")
        print(f"Error: {e}")
        return 1


def main() -> int:
    """Point d'entrée principal."""
    setup_logging()

    # Vérifier si on doit éviter le GUI
    if os.getenv(NO_GUI_ENV_VAR) == "1":
        logger = logging.getLogger("epub_zh_converter")
        logger.info("NO_GUI mode: running CLI")
        return run_cli()

    # Par défaut, lancer le GUI
    return run_gui()


def console_main() -> int:
    """Point d'entrée du script epub-zh-convert (toujours en CLI)."""
    setup_logging()
    return run_cli()


if __name__ == "__main__":
    raise SystemExit(main())

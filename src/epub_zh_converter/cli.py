# epub_zh_converter/src/epub_zh_converter/cli.py
"""
Logique pour le mode ligne de commande.

Utilise ConverterService pour réutiliser la logique de conversion.
"""

import logging
from typing import List, Optional

from .core.converter_service import ConverterService
from .core.models import ConversionDirection, ConversionReport

logger = logging.getLogger(__name__)


def cli_convert_paths(
    paths: List[str],
    direction: ConversionDirection = ConversionDirection.TRADITIONAL_TO_SIMPLIFIED,
    output_dir: Optional[str] = None,
) -> List[ConversionReport]:
    """
    Convertit des fichiers/dossiers en mode CLI.

    Args:
        paths: Fichiers EPUB ou dossiers à parcourir
        direction: Sens de conversion
        output_dir: Dossier de sortie (par défaut à côté de chaque source)

    Returns:
        Liste des comptes rendus de conversion
    """
    logger.info(f"CLI mode - converting {len(paths)} path(s) ({direction.value})")

    service = ConverterService()
    reports = service.process_paths(paths, direction, output_dir=output_dir)

    logger.info(f"CLI mode - processed {len(reports)} files")
    return reports


def print_conversion_summary(reports: List[ConversionReport]):
    """Affiche un résumé des conversions."""
    print("\n=== Conversion summary ===")
    print(f"Files processed: {len(reports)}")

    succeeded = [r for r in reports if r.success]
    print(f"Converted: {len(succeeded)}")

    for report in reports:
        print(f"\n{report.source_path}:")
        if not report.success:
            print(f"  Failed: {report.note}")
            continue

        print(f"  -> {report.output_path}")
        if report.title and report.title != report.converted_title:
            print(f"  Title: {report.title} -> {report.converted_title}")

        result = report.result
        if result is None:
            continue
        print(f"  Text entries converted: {result.converted_count}/{result.entry_count}")
        for degradation in result.degraded_entries:
            print(f"  Kept as is: {degradation.path} ({degradation.reason})")
        if result.file_name_degraded:
            print("  File name could not be converted")

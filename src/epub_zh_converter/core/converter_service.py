# epub_zh_converter/src/epub_zh_converter/core/converter_service.py
"""
Service de conversion EPUB.

Service réutilisable qui orchestre le workflow complet sur disque:
lecture du fichier, conversion de l'archive, écriture du résultat.

Ce service est utilisé à la fois par le mode GUI et le mode CLI
pour éviter la duplication de logique.
"""

import logging
import os
from typing import Iterable, List, Optional

from .cancellation import CancellationToken
from .epub import extract_book_info
from .errors import ConversionError
from .file_utils import collect_epub_paths, resolve_output_path, write_bytes_atomic
from .models import ConversionDirection, ConversionReport, ConversionResult
from .pipeline import convert_archive
from .progress import SinkLike
from .script_converter import Converter, OpenCCConverter

logger = logging.getLogger(__name__)


class ConverterService:
    """
    Service de conversion traditionnel <-> simplifié.

    Fournit les opérations de haut niveau:
    - Conversion d'une archive en mémoire
    - Conversion d'un fichier avec écriture du résultat
    - Conversion d'une liste de fichiers/dossiers
    """

    def __init__(self, converter: Optional[Converter] = None):
        self.converter = converter or OpenCCConverter()
        logger.debug("ConverterService initialized")

    def convert_bytes(
        self,
        data: bytes,
        file_name: str,
        direction: ConversionDirection,
        on_progress: SinkLike = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ConversionResult:
        """Convertit une archive en mémoire (lève ConversionError en cas d'échec)."""
        return convert_archive(
            data,
            direction,
            on_progress,
            file_name=file_name,
            converter=self.converter,
            cancel_token=cancel_token,
        )

    def convert_file(
        self,
        epub_path: str,
        direction: ConversionDirection,
        output_dir: Optional[str] = None,
        on_progress: SinkLike = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ConversionReport:
        """
        Convertit un fichier EPUB et écrit le résultat.

        Args:
            epub_path: Chemin du fichier source
            direction: Sens de conversion
            output_dir: Dossier de sortie (par défaut celui du fichier source)

        Returns:
            ConversionReport; success=False et note renseignée en cas d'échec
        """
        report = ConversionReport(source_path=epub_path, direction=direction)
        logger.info(f"Converting EPUB: {epub_path}")

        try:
            with open(epub_path, "rb") as f:
                data = f.read()
        except OSError as e:
            report.note = f"Cannot read file: {e}"
            logger.error(f"Cannot read {epub_path}: {e}")
            return report

        report.book_info = extract_book_info(epub_path)
        report.title = report.book_info.get("title")

        try:
            result = self.convert_bytes(
                data, os.path.basename(epub_path), direction, on_progress, cancel_token
            )
        except ConversionError as e:
            report.note = e.message
            return report

        report.result = result
        target_dir = output_dir or os.path.dirname(os.path.abspath(epub_path))
        output_path = resolve_output_path(target_dir, result.derived_file_name)

        try:
            os.makedirs(target_dir, exist_ok=True)
            write_bytes_atomic(str(output_path), result.output_bytes)
        except OSError as e:
            report.note = f"Cannot write output: {e}"
            return report

        report.output_path = str(output_path)
        report.converted_title = extract_book_info(report.output_path).get("title")
        report.success = True
        if result.degraded_entries:
            report.note = f"Converted, {len(result.degraded_entries)} entr(y/ies) kept as is"
        else:
            report.note = "Converted"

        logger.info(f"Successfully converted: {epub_path} -> {output_path}")
        return report

    def process_paths(
        self,
        paths: Iterable[str],
        direction: ConversionDirection,
        output_dir: Optional[str] = None,
    ) -> List[ConversionReport]:
        """
        Convertit une liste de fichiers et/ou dossiers.

        Returns:
            Liste des comptes rendus, un par fichier EPUB trouvé
        """
        files = collect_epub_paths(paths)
        logger.info(f"Found {len(files)} EPUB files")

        reports = [self.convert_file(p, direction, output_dir) for p in files]

        ok = sum(1 for r in reports if r.success)
        logger.info(f"Converted {ok}/{len(reports)} files")
        return reports

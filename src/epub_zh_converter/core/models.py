# epub_zh_converter/src/epub_zh_converter/core/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple
from zipfile import ZipInfo

from ..config import (
    OPENCC_S2T_CONFIG,
    OPENCC_T2S_CONFIG,
    SIMPLIFIED_SUFFIX,
    TRADITIONAL_SUFFIX,
)


class ConversionDirection(Enum):
    """Sens de conversion entre écriture traditionnelle et simplifiée."""

    TRADITIONAL_TO_SIMPLIFIED = "t2s"
    SIMPLIFIED_TO_TRADITIONAL = "s2t"

    @property
    def opencc_config(self) -> str:
        if self is ConversionDirection.TRADITIONAL_TO_SIMPLIFIED:
            return OPENCC_T2S_CONFIG
        return OPENCC_S2T_CONFIG

    @property
    def suffix(self) -> str:
        if self is ConversionDirection.TRADITIONAL_TO_SIMPLIFIED:
            return SIMPLIFIED_SUFFIX
        return TRADITIONAL_SUFFIX

    @property
    def label(self) -> str:
        if self is ConversionDirection.TRADITIONAL_TO_SIMPLIFIED:
            return "繁體 → 简体"
        return "简体 → 繁體"

    def opposite(self) -> "ConversionDirection":
        if self is ConversionDirection.TRADITIONAL_TO_SIMPLIFIED:
            return ConversionDirection.SIMPLIFIED_TO_TRADITIONAL
        return ConversionDirection.TRADITIONAL_TO_SIMPLIFIED

    @classmethod
    def from_value(cls, value: str) -> "ConversionDirection":
        """Accepte 't2s'/'s2t' ou le nom du membre (insensible à la casse)."""
        normalized = (value or "").strip()
        for member in cls:
            if normalized.lower() == member.value or normalized.upper() == member.name:
                return member
        raise ValueError(f"Unknown conversion direction: {value!r}")


@dataclass(frozen=True)
class ArchiveEntry:
    """Une entrée (fichier ou répertoire) d'une archive ZIP."""

    path: str
    is_directory: bool
    data: bytes
    info: ZipInfo


@dataclass(frozen=True)
class SourceArchive:
    """Vue immuable d'une archive lue, dans l'ordre d'origine."""

    entries: Tuple[ArchiveEntry, ...]
    comment: bytes = b""

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(e.path for e in self.entries)

    def get(self, path: str) -> Optional[ArchiveEntry]:
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None


@dataclass(frozen=True)
class EntryDegradation:
    """Entrée texte conservée telle quelle suite à un échec de décodage/conversion."""

    path: str
    reason: str


@dataclass(frozen=True)
class ProgressEvent:
    percent: float
    message: str


@dataclass
class ConversionResult:
    """Résultat d'une conversion réussie."""

    output_bytes: bytes
    derived_file_name: str
    degraded_entries: Tuple[EntryDegradation, ...] = ()
    file_name_degraded: bool = False
    entry_count: int = 0
    converted_count: int = 0

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_entries) or self.file_name_degraded


@dataclass
class ConversionReport:
    """Compte rendu de la conversion d'un fichier EPUB sur disque."""

    source_path: str
    direction: ConversionDirection
    output_path: str | None = None
    success: bool = False
    note: str = ""
    result: ConversionResult | None = None

    # Informations du livre (lues avec EbookLib)
    title: str | None = None
    converted_title: str | None = None
    book_info: Dict = field(default_factory=dict)

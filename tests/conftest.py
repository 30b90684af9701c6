# tests/conftest.py
"""
Configuration globale pour pytest.

Fournit des fixtures réutilisables pour tous les tests: EPUB construits
en mémoire, convertisseur factice et sink de progression enregistreur.
"""

import io
import zipfile
from typing import Dict, List, Tuple

import pytest

from epub_zh_converter.core.models import ConversionDirection

# Table minimale traditionnel -> simplifié pour le convertisseur factice
_T2S = {"書": "书", "國": "国", "漢": "汉", "語": "语", "說": "说", "長": "长", "門": "门"}
_S2T = {v: k for k, v in _T2S.items()}

CHAPTER_XHTML = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>漢語</title></head>'
    "<body><p>中國的書很長</p></body></html>"
)
CONTENT_OPF = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<package xmlns="http://www.idpf.org/2007/opf" version="3.0">'
    '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/"><dc:title>國語書</dc:title></metadata>'
    "</package>"
)
COVER_JPG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


class FakeConverter:
    """Convertisseur caractère par caractère, avec journal des appels."""

    def __init__(self):
        self.calls: List[Tuple[str, ConversionDirection]] = []

    def convert(self, text: str, direction: ConversionDirection) -> str:
        self.calls.append((text, direction))
        table = _T2S if direction is ConversionDirection.TRADITIONAL_TO_SIMPLIFIED else _S2T
        return "".join(table.get(ch, ch) for ch in text)


class RecordingSink:
    """ProgressSink qui conserve tous les événements reçus."""

    def __init__(self):
        self.events: List[Tuple[float, str]] = []
        self.failures: List[str] = []

    def update(self, percent: float, message: str) -> None:
        self.events.append((percent, message))

    def fail(self, message: str) -> None:
        self.failures.append(message)

    @property
    def percents(self) -> List[float]:
        return [p for p, _ in self.events]


def build_epub(entries: Dict[str, bytes], stored: Tuple[str, ...] = ("mimetype",)) -> bytes:
    """Construit une archive ZIP en mémoire; les noms finissant par '/' sont des répertoires."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
                continue
            compress = zipfile.ZIP_STORED if name in stored else zipfile.ZIP_DEFLATED
            zf.writestr(name, data, compress_type=compress)
    return buffer.getvalue()


def read_entries(data: bytes) -> Dict[str, bytes]:
    """Relit une archive: {chemin: contenu} dans l'ordre de l'archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {
            info.filename: (b"" if info.is_dir() else zf.read(info)) for info in zf.infolist()
        }


@pytest.fixture
def fake_converter() -> FakeConverter:
    return FakeConverter()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sample_entries() -> Dict[str, bytes]:
    """Contenu d'un petit EPUB en écriture traditionnelle."""
    return {
        "mimetype": b"application/epub+zip",
        "META-INF/": b"",
        "META-INF/container.xml": b'<?xml version="1.0"?><container/>',
        "OEBPS/": b"",
        "OEBPS/content.opf": CONTENT_OPF.encode("utf-8"),
        "OEBPS/chapter1.xhtml": CHAPTER_XHTML.encode("utf-8"),
        "OEBPS/style.CSS": "p:before { content: '書'; }".encode("utf-8"),
        "OEBPS/cover.jpg": COVER_JPG,
        "OEBPS/fonts/kai.ttf": "書".encode("utf-8") + b"\x00\x01\x02",
    }


@pytest.fixture
def sample_epub_bytes(sample_entries) -> bytes:
    return build_epub(sample_entries)


@pytest.fixture
def temp_dir(tmp_path):
    """Fournit un répertoire temporaire pour les tests."""
    return tmp_path


@pytest.fixture
def epub_builder():
    """Fabrique d'archives: epub_builder({chemin: octets}) -> bytes."""
    return build_epub


@pytest.fixture
def entries_reader():
    """Lecteur d'archives: entries_reader(bytes) -> {chemin: octets}."""
    return read_entries


def write_sample_book(path, title="中國書", author="作者"):
    """Écrit un EPUB minimal valide avec EbookLib."""
    from ebooklib import epub

    book = epub.EpubBook()
    book.set_identifier("id-123")
    book.set_title(title)
    book.set_language("zh")
    book.add_author(author)

    chapter = epub.EpubHtml(title="第一章", file_name="chap_01.xhtml", lang="zh")
    chapter.content = "<h1>第一章</h1><p>這是一本書。</p>"
    book.add_item(chapter)

    book.toc = (epub.Link("chap_01.xhtml", "第一章", "chap_01"),)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def book_writer():
    """Écrit un vrai EPUB (EbookLib): book_writer(chemin, title=...) -> chemin."""
    return write_sample_book

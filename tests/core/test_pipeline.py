# tests/core/test_pipeline.py
"""
Tests pour le module core.pipeline.
"""

import io
import os
import zipfile
from unittest.mock import patch

import pytest

from epub_zh_converter.core.cancellation import CancellationToken
from epub_zh_converter.core.errors import (
    ConversionCancelled,
    InvalidArchiveError,
    SerializationError,
)
from epub_zh_converter.core.models import ConversionDirection
from epub_zh_converter.core.pipeline import convert_archive, derive_output_name

T2S = ConversionDirection.TRADITIONAL_TO_SIMPLIFIED
S2T = ConversionDirection.SIMPLIFIED_TO_TRADITIONAL


class ExplodingConverter:
    """Échoue sur tout texte contenant le marqueur donné."""

    def __init__(self, marker: str):
        self.marker = marker

    def convert(self, text, direction):
        if self.marker in text:
            raise RuntimeError("boom")
        return text.upper()


class TestConvertArchiveStructure:
    """Tests de conservation de la structure de l'archive."""

    def test_same_paths_in_same_order(self, sample_epub_bytes, sample_entries, fake_converter, entries_reader):
        """Test que toutes les entrées sont conservées dans l'ordre."""
        result = convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        output = entries_reader(result.output_bytes)
        assert list(output.keys()) == list(sample_entries.keys())

    def test_directories_stay_directories(self, sample_epub_bytes, fake_converter):
        """Test que les répertoires restent des répertoires."""
        result = convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        with zipfile.ZipFile(io.BytesIO(result.output_bytes)) as zf:
            kinds = {i.filename: i.is_dir() for i in zf.infolist()}
        assert kinds["META-INF/"] is True
        assert kinds["OEBPS/"] is True
        assert kinds["OEBPS/chapter1.xhtml"] is False

    def test_binary_entries_unchanged(self, sample_epub_bytes, sample_entries, fake_converter, entries_reader):
        """Test que les entrées non texte sont recopiées à l'identique."""
        result = convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        output = entries_reader(result.output_bytes)
        assert output["OEBPS/cover.jpg"] == sample_entries["OEBPS/cover.jpg"]
        assert output["OEBPS/fonts/kai.ttf"] == sample_entries["OEBPS/fonts/kai.ttf"]
        assert output["mimetype"] == b"application/epub+zip"

    def test_text_entries_converted(self, sample_epub_bytes, fake_converter, entries_reader):
        """Test que les entrées texte sont converties (extension insensible à la casse)."""
        result = convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        output = entries_reader(result.output_bytes)
        chapter = output["OEBPS/chapter1.xhtml"].decode("utf-8")
        assert "中国的书很长" in chapter
        assert "<title>汉语</title>" in chapter
        assert "国语书" in output["OEBPS/content.opf"].decode("utf-8")
        assert "书" in output["OEBPS/style.CSS"].decode("utf-8")
        assert result.converted_count == 4  # container.xml, opf, xhtml, css
        assert result.entry_count == 9

    def test_mimetype_stored_uncompressed(self, sample_epub_bytes, fake_converter):
        """Test que mimetype reste la première entrée, non compressée."""
        result = convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        with zipfile.ZipFile(io.BytesIO(result.output_bytes)) as zf:
            first = zf.infolist()[0]
            assert first.filename == "mimetype"
            assert first.compress_type == zipfile.ZIP_STORED
            assert zf.testzip() is None

    def test_converter_receives_direction(self, sample_epub_bytes, fake_converter):
        """Test que le sens choisi est transmis au convertisseur."""
        convert_archive(sample_epub_bytes, S2T, converter=fake_converter)

        assert fake_converter.calls
        assert all(direction is S2T for _, direction in fake_converter.calls)

    def test_source_bytes_not_modified(self, sample_epub_bytes, fake_converter):
        """Test que l'archive d'entrée n'est jamais modifiée."""
        before = bytes(sample_epub_bytes)
        convert_archive(sample_epub_bytes, T2S, converter=fake_converter)

        assert sample_epub_bytes == before

    def test_empty_archive(self, epub_builder, fake_converter, recording_sink):
        """Test avec une archive vide."""
        result = convert_archive(epub_builder({}), T2S, recording_sink, converter=fake_converter)

        assert result.entry_count == 0
        assert recording_sink.percents[-1] == 100


class TestConvertArchiveDegradation:
    """Tests des échecs non fatals (entrée conservée telle quelle)."""

    def test_invalid_utf8_entry_kept(self, epub_builder, fake_converter, recording_sink, entries_reader):
        """Test qu'une entrée texte en UTF-8 invalide est conservée."""
        bad = b"<p>\xff\xfe\xfa</p>"
        data = epub_builder({"a.xhtml": bad, "b.html": "國".encode("utf-8")})

        result = convert_archive(data, T2S, recording_sink, converter=fake_converter)

        output = entries_reader(result.output_bytes)
        assert output["a.xhtml"] == bad
        assert output["b.html"].decode("utf-8") == "国"
        assert [d.path for d in result.degraded_entries] == ["a.xhtml"]
        assert recording_sink.percents[-1] == 100
        assert recording_sink.failures == []

    def test_converter_failure_keeps_original(self, epub_builder, entries_reader):
        """Test qu'un échec du convertisseur conserve le texte d'origine."""
        data = epub_builder({"bad.xhtml": b"<p>BOOM</p>", "good.css": b"p {}"})

        result = convert_archive(
            data, T2S, file_name="x.epub", converter=ExplodingConverter("BOOM")
        )

        output = entries_reader(result.output_bytes)
        assert output["bad.xhtml"] == b"<p>BOOM</p>"
        assert output["good.css"] == b"P {}"
        assert result.degraded is True
        assert "conversion error" in result.degraded_entries[0].reason

    def test_file_name_failure_falls_back(self, epub_builder):
        """Test que l'échec sur le nom conserve le nom d'origine + suffixe."""
        data = epub_builder({"mimetype": b"application/epub+zip"})

        result = convert_archive(
            data, T2S, file_name="BOOM.epub", converter=ExplodingConverter("BOOM")
        )

        assert result.derived_file_name == "BOOM_简体.epub"
        assert result.file_name_degraded is True


class TestConvertArchiveFailures:
    """Tests des échecs fatals."""

    def test_random_bytes_invalid_archive(self, fake_converter, recording_sink):
        """Test que des octets aléatoires lèvent InvalidArchiveError."""
        with pytest.raises(InvalidArchiveError) as exc_info:
            convert_archive(os.urandom(256), T2S, recording_sink, converter=fake_converter)

        assert exc_info.value.kind == "InvalidArchive"
        assert recording_sink.events == []
        assert len(recording_sink.failures) == 1

    def test_truncated_archive(self, sample_epub_bytes, fake_converter):
        """Test avec une archive tronquée."""
        with pytest.raises(InvalidArchiveError):
            convert_archive(sample_epub_bytes[: len(sample_epub_bytes) // 2], T2S, converter=fake_converter)

    def test_serialization_failure(self, sample_epub_bytes, fake_converter, recording_sink):
        """Test qu'un échec de génération lève SerializationError après 95%."""
        with patch.object(zipfile.ZipFile, "writestr", side_effect=MemoryError("oom")):
            with pytest.raises(SerializationError) as exc_info:
                convert_archive(
                    sample_epub_bytes, T2S, recording_sink, converter=fake_converter
                )

        assert exc_info.value.kind == "SerializationFailure"
        assert len(recording_sink.failures) == 1
        assert recording_sink.percents[-1] == 95
        assert 100 not in recording_sink.percents

    def test_cancelled_before_entries(self, sample_epub_bytes, fake_converter, recording_sink):
        """Test qu'une annulation lève ConversionCancelled sans autre événement."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(ConversionCancelled):
            convert_archive(
                sample_epub_bytes, T2S, recording_sink, converter=fake_converter, cancel_token=token
            )

        assert recording_sink.percents == [10, 20]
        assert recording_sink.failures == []

    def test_cancelled_mid_run(self, sample_epub_bytes, fake_converter):
        """Test d'une annulation depuis le callback de progression."""
        token = CancellationToken()
        events = []

        def on_progress(percent, message):
            events.append(percent)
            if message.startswith("processing"):
                token.cancel()

        with pytest.raises(ConversionCancelled):
            convert_archive(
                sample_epub_bytes, T2S, on_progress, converter=fake_converter, cancel_token=token
            )

        assert events[-1] < 95
        assert len([p for p in events if p > 20]) == 1


class TestProgressEvents:
    """Tests des événements de progression."""

    def test_progress_sequence(self, sample_epub_bytes, fake_converter, recording_sink):
        """Test que la progression commence à 10, croît et finit à 100."""
        convert_archive(sample_epub_bytes, T2S, recording_sink, converter=fake_converter)

        percents = recording_sink.percents
        assert percents[0] >= 10
        assert percents[-1] == 100
        assert percents == sorted(percents)
        assert recording_sink.events[1] == (20, "analyzing structure")
        assert (95, "generating archive") in recording_sink.events

    def test_progress_per_entry(self, epub_builder, fake_converter, recording_sink):
        """Test de la formule 20 + (i+1)/N*70."""
        data = epub_builder({"a.txt": b"a", "b.png": b"b"})

        convert_archive(data, T2S, recording_sink, converter=fake_converter)

        processing = [e for e in recording_sink.events if e[1].startswith("processing")]
        assert processing == [(55.0, "processing: a.txt"), (90.0, "processing: b.png")]

    def test_plain_callback_accepted(self, sample_epub_bytes, fake_converter):
        """Test qu'un simple callable sert de sink."""
        seen = []

        convert_archive(
            sample_epub_bytes, T2S, lambda p, m: seen.append((p, m)), converter=fake_converter
        )

        assert seen[-1] == (100, "complete")

    def test_sink_errors_do_not_abort(self, sample_epub_bytes, fake_converter):
        """Test qu'un sink défaillant n'interrompt pas la conversion."""

        def broken(percent, message):
            raise ValueError("ui gone")

        result = convert_archive(sample_epub_bytes, T2S, broken, converter=fake_converter)

        assert result.output_bytes


class TestDeriveOutputName:
    """Tests pour derive_output_name."""

    def test_t2s_suffix(self, fake_converter):
        name, degraded = derive_output_name("國語書.epub", T2S, fake_converter)
        assert name == "国语书_简体.epub"
        assert degraded is False

    def test_s2t_suffix(self, fake_converter):
        name, _ = derive_output_name("国语书.epub", S2T, fake_converter)
        assert name == "國語書_繁體.epub"

    def test_keeps_extension_and_inner_dots(self, fake_converter):
        name, _ = derive_output_name("my.book.EPUB", T2S, fake_converter)
        assert name == "my.book_简体.EPUB"

    def test_strips_directories(self, fake_converter):
        name, _ = derive_output_name("/tmp/books/story.epub", T2S, fake_converter)
        assert name == "story_简体.epub"

    def test_no_extension(self, fake_converter):
        name, _ = derive_output_name("story", S2T, fake_converter)
        assert name == "story_繁體"

    def test_suffix_is_only_difference(self, fake_converter):
        """Test que le nom dérivé ne diffère que par le suffixe (base inchangée)."""
        name, _ = derive_output_name("novel.epub", T2S, fake_converter)
        assert name.endswith(".epub")
        assert name[: -len(".epub")] == "novel" + T2S.suffix

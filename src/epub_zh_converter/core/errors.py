# epub_zh_converter/src/epub_zh_converter/core/errors.py
"""
Erreurs de conversion.

Seules l'ouverture et la génération de l'archive sont fatales. Les échecs
sur une entrée isolée sont absorbés par le pipeline (voir
models.EntryDegradation).
"""


class ConversionError(Exception):
    """Erreur fatale d'une conversion EPUB."""

    kind = "ConversionError"
    default_message = "EPUB conversion failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidArchiveError(ConversionError):
    kind = "InvalidArchive"
    default_message = "The file is not a valid EPUB (ZIP) archive"


class SerializationError(ConversionError):
    kind = "SerializationFailure"
    default_message = "The converted EPUB could not be generated"


class ConversionCancelled(ConversionError):
    kind = "Cancelled"
    default_message = "Conversion cancelled"

# epub_zh_converter/src/epub_zh_converter/config.py
"""
Configuration et constantes pour EPUB ZH Converter
"""

import os

# ---------- Extensions ----------
SUPPORTED_EXT = (".epub",)

# Entrées de l'archive soumises à la conversion (comparaison insensible à la casse)
TEXT_EXTENSIONS = frozenset({"html", "xhtml", "xml", "css", "txt", "ncx", "opf"})

# ---------- Conteneur EPUB ----------
EPUB_MIMETYPE = "application/epub+zip"
MIMETYPE_ENTRY = "mimetype"
TEXT_ENCODING = "utf-8"

# ---------- Tables OpenCC ----------
OPENCC_T2S_CONFIG = "hk2s"
OPENCC_S2T_CONFIG = "s2hk"

# ---------- Noms de fichiers générés ----------
SIMPLIFIED_SUFFIX = "_简体"
TRADITIONAL_SUFFIX = "_繁體"
OUTPUT_TMP_EXT = ".tmp"

# ---------- Messages de progression ----------
MSG_READING = "reading archive"
MSG_ANALYZING = "analyzing structure"
MSG_PROCESSING = "processing: {path}"
MSG_GENERATING = "generating archive"
MSG_COMPLETE = "complete"

# Bornes de progression (pourcentages)
PROGRESS_READ = 10.0
PROGRESS_ANALYZED = 20.0
PROGRESS_ENTRIES_SPAN = 70.0
PROGRESS_GENERATING = 95.0
PROGRESS_DONE = 100.0

# ---------- Dossiers ----------
LOG_DIR = "logs"

# ---------- Configuration logging ----------
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 5
LOG_ENCODING = "utf-8"

# ---------- Configuration GUI ----------
GUI_TITLE = "EPUB 繁简转换"
GUI_GEOMETRY = "640x260"
GUI_POLL_MS = 100

# ---------- Variables d'environnement ----------
NO_GUI_ENV_VAR = "EPUB_ZH_NO_GUI"


# ---------- Initialisation des dossiers ----------
def ensure_directories():
    """Crée les dossiers nécessaires s'ils n'existent pas."""
    os.makedirs(LOG_DIR, exist_ok=True)

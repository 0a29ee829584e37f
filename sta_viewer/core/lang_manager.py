"""
Localization for windows built from UI definitions.

Text domains are gettext catalogs found under <localedir>/<lang>/LC_MESSAGES.
Catalogs are always UTF-8. A .po file newer than its .mo is compiled on load,
and the catalog is installed into the QApplication as a QTranslator so that
strings in the UI definition are translated while the widget tree is built.
"""

import os
import json
import gettext
import logging
import struct
from typing import Optional
from PyQt6.QtCore import QCoreApplication, QLocale, QTranslator

logger = logging.getLogger("LangManager")

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_LOCALE_DIR = os.path.join(PROJECT_ROOT, "config", "locale")
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "window.json")

MO_MAGIC = 0x950412de
UTF8_HEADER = "Content-Type: text/plain; charset=UTF-8\nContent-Transfer-Encoding: 8bit\n"

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}

# domain -> translator currently installed on the application
_installed = {}


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            out.append(_ESCAPES.get(text[i + 1], text[i + 1]))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_po(po_path: str) -> dict:
    """Read a .po file into {msgid: msgstr}. Contexts are keyed as 'ctxt\\x04msgid'."""
    messages = {}
    entry = {}
    field = None
    fuzzy = False

    def flush():
        nonlocal entry, field, fuzzy
        if "msgid" in entry and "msgstr" in entry and not fuzzy:
            msgid = entry["msgid"]
            if "msgctxt" in entry:
                msgid = f"{entry['msgctxt']}\x04{msgid}"
            # Untranslated entries fall through to the source text
            if entry["msgstr"] or not msgid:
                messages[msgid] = entry["msgstr"]
        entry = {}
        field = None
        fuzzy = False

    with open(po_path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line:
                flush()
                continue
            if line.startswith("#"):
                if line.startswith("#,") and "fuzzy" in line:
                    if "msgstr" in entry:
                        flush()
                    fuzzy = True
                continue

            if line.startswith('"'):
                if field is not None:
                    entry[field] += _unescape(line[1:-1])
                continue

            keyword, _, rest = line.partition(" ")
            if keyword in ("msgctxt", "msgid", "msgstr"):
                if keyword in entry or (keyword != "msgstr" and "msgstr" in entry):
                    # New entry started without a blank separator
                    flush()
                field = keyword
                entry[field] = _unescape(rest.strip()[1:-1])
            else:
                # Plural forms are not used by the UI catalogs
                field = None
    flush()
    return messages


def _string_table(strings: list, base: int) -> tuple:
    """Pack strings NUL-terminated from offset base. Returns (descriptors, data)."""
    descriptors = []
    data = bytearray()
    for s in strings:
        encoded = s.encode("utf-8")
        descriptors.append(struct.pack("<ii", len(encoded), base + len(data)))
        data += encoded + b"\0"
    return b"".join(descriptors), bytes(data)


def compile_mo(po_path: str, mo_path: str) -> int:
    """Write a GNU .mo catalog for po_path. Returns the number of messages.

    The catalog is always UTF-8: a header without a charset gets one.
    """
    messages = parse_po(po_path)
    header = messages.get("", "")
    if "charset=" not in header:
        header = UTF8_HEADER + header
    messages[""] = header

    # GNU gettext binary-searches the ids when the catalog has no hash table
    keys = sorted(messages, key=lambda k: k.encode("utf-8"))
    count = len(keys)
    ids_table = 28
    strs_table = ids_table + count * 8
    ids_start = strs_table + count * 8

    id_index, id_data = _string_table(keys, ids_start)
    str_index, str_data = _string_table([messages[k] for k in keys], ids_start + len(id_data))

    os.makedirs(os.path.dirname(os.path.abspath(mo_path)), exist_ok=True)
    with open(mo_path, "wb") as f:
        f.write(struct.pack("<Iiiiiii", MO_MAGIC, 0, count, ids_table, strs_table, 0, ids_start))
        f.write(id_index + str_index + id_data + str_data)
    return count


class GettextTranslator(QTranslator):
    """QTranslator backed by a gettext catalog."""

    def __init__(self, translations: gettext.NullTranslations, parent=None):
        super().__init__(parent)
        self._translations = translations

    def translate(self, context, source_text, disambiguation=None, n=-1):
        if not source_text:
            return source_text
        if disambiguation:
            return self._translations.pgettext(disambiguation, source_text)
        return self._translations.gettext(source_text)

    def isEmpty(self):
        return False


class LangManager:
    """
    Resolves the language for a text domain and loads its catalog.

    Language order: explicit languages, then config/window.json "language",
    then the system locale. A missing catalog is not an error; strings are
    then shown untranslated.
    """

    def __init__(self, domain: str, localedir: Optional[str] = None,
                 languages: Optional[list] = None, config_path: Optional[str] = None):
        self.domain = domain
        self.locale_dir = localedir or DEFAULT_LOCALE_DIR
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.languages = list(languages) if languages else self._resolve_languages()
        self.translations = self._load()

    @property
    def current_language(self) -> Optional[str]:
        info = self.translations.info()
        return info.get("language") or (self.languages[0] if self.languages else None)

    def _load_saved_language(self) -> Optional[str]:
        if not os.path.exists(self.config_path):
            return None
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
            return config.get("language")
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read language from {self.config_path}: {e}")
            return None

    def _resolve_languages(self) -> list:
        saved = self._load_saved_language()
        if saved and saved != "system":
            return [saved]
        return [QLocale.system().name()]

    def _catalog_path(self, lang: str, ext: str) -> str:
        return os.path.join(self.locale_dir, lang, "LC_MESSAGES", f"{self.domain}{ext}")

    def _ensure_compiled(self, lang: str) -> None:
        po_path = self._catalog_path(lang, ".po")
        if not os.path.exists(po_path):
            return
        mo_path = self._catalog_path(lang, ".mo")
        if os.path.exists(mo_path) and os.path.getmtime(mo_path) >= os.path.getmtime(po_path):
            return
        try:
            count = compile_mo(po_path, mo_path)
            logger.info(f"Compiled {po_path} -> {mo_path} ({count} messages)")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not compile {po_path}: {e}")

    def _load(self) -> gettext.NullTranslations:
        for lang in self.languages:
            self._ensure_compiled(lang)
            base = lang.split("_")[0].split(".")[0]
            if base != lang:
                self._ensure_compiled(base)

        try:
            trans = gettext.translation(self.domain, localedir=self.locale_dir,
                                        languages=self.languages, fallback=True)
        except (OSError, ValueError) as e:
            logger.warning(f"Unusable catalog for '{self.domain}' in {self.locale_dir}: {e}")
            return gettext.NullTranslations()
        if isinstance(trans, gettext.GNUTranslations):
            logger.info(f"Loaded text domain '{self.domain}' for {self.languages}")
        else:
            logger.debug(f"No catalog for '{self.domain}' in {self.locale_dir} ({self.languages})")
        return trans

    def gettext(self, message: str) -> str:
        return self.translations.gettext(message)

    def install(self) -> bool:
        """Install the catalog on the QApplication, replacing an earlier one for this domain."""
        app = QCoreApplication.instance()
        if app is None:
            logger.debug(f"No application yet; '{self.domain}' not installed as a translator.")
            return False
        previous = _installed.pop(self.domain, None)
        if previous is not None:
            app.removeTranslator(previous)
        translator = GettextTranslator(self.translations, app)
        app.installTranslator(translator)
        _installed[self.domain] = translator
        return True

    def uninstall(self) -> None:
        remove_text_domain(self.domain)

    def set_language(self, lang_code: str) -> None:
        """Switch language, reinstall the translator and remember the choice."""
        self.languages = [lang_code]
        self.translations = self._load()
        if self.domain in _installed:
            self.install()
        self._save_language_preference(lang_code)

    def _save_language_preference(self, lang_code: str) -> None:
        try:
            config = {}
            if os.path.exists(self.config_path):
                with open(self.config_path, "r", encoding="utf-8") as f:
                    config = json.load(f)
            config["language"] = lang_code
            os.makedirs(os.path.dirname(os.path.abspath(self.config_path)), exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=4, ensure_ascii=False)
            logger.info(f"Saved language preference: {lang_code}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save language to {self.config_path}: {e}")


def bind_text_domain(domain: str, localedir: Optional[str] = None,
                     languages: Optional[list] = None) -> LangManager:
    """Load the UTF-8 catalog for domain and install it on the running application."""
    manager = LangManager(domain, localedir, languages)
    manager.install()
    return manager


def remove_text_domain(domain: str) -> None:
    translator = _installed.pop(domain, None)
    app = QCoreApplication.instance()
    if translator is not None and app is not None:
        app.removeTranslator(translator)

"""Scripture reference normalization — stable cache keys for derived artifacts.

A user may type the same passage as "Romanos 12:1-2" or "Romans 12:1-2".
Both resolve to one canonical book code, so artifacts computed for one
spelling are reused for the other (as long as the target language matches):

    >>> normalize_reference("Romanos 12:1-2", "Spanish")
    'rom_12_1_2_es'
    >>> normalize_reference("Romans 12:1-2", "Spanish")
    'rom_12_1_2_es'

Key format: ``<book-code>_<chapter_verse>_<lang>``. Keys written before
language scoping omit the ``_<lang>`` suffix (see :func:`legacy_key`).
"""

import re
import unicodedata

# ── Book aliases ─────────────────────────────────────────────────────
#
# Canonical three-character code → names and abbreviations in English
# and Spanish. Aliases are compared after lower-casing, accent stripping
# and removing spaces/dots, so "1 Corintios", "1Cor." and "1 cor" match.

BOOK_ALIASES: dict[str, tuple[str, ...]] = {
    # Old Testament
    "gen": ("Genesis", "Gen", "Gn", "Génesis"),
    "exo": ("Exodus", "Exod", "Ex", "Éxodo", "Exo"),
    "lev": ("Leviticus", "Lev", "Lv", "Levítico"),
    "num": ("Numbers", "Num", "Nm", "Números"),
    "deu": ("Deuteronomy", "Deut", "Dt", "Deuteronomio"),
    "jos": ("Joshua", "Josh", "Josué", "Jos"),
    "jdg": ("Judges", "Judg", "Jdg", "Jueces", "Jue"),
    "rut": ("Ruth", "Rut", "Rt"),
    "1sa": ("1 Samuel", "1 Sam", "1 Sa", "1 S"),
    "2sa": ("2 Samuel", "2 Sam", "2 Sa", "2 S"),
    "1ki": ("1 Kings", "1 Kgs", "1 Reyes", "1 Re", "1 R"),
    "2ki": ("2 Kings", "2 Kgs", "2 Reyes", "2 Re", "2 R"),
    "1ch": ("1 Chronicles", "1 Chron", "1 Chr", "1 Crónicas", "1 Cr"),
    "2ch": ("2 Chronicles", "2 Chron", "2 Chr", "2 Crónicas", "2 Cr"),
    "ezr": ("Ezra", "Ezr", "Esdras", "Esd"),
    "neh": ("Nehemiah", "Neh", "Nehemías"),
    "est": ("Esther", "Esth", "Ester", "Est"),
    "job": ("Job", "Jb"),
    "psa": ("Psalms", "Psalm", "Ps", "Psa", "Salmos", "Salmo", "Sal"),
    "pro": ("Proverbs", "Prov", "Pr", "Proverbios"),
    "ecc": ("Ecclesiastes", "Eccl", "Ecc", "Eclesiastés", "Ec"),
    "sng": ("Song of Songs", "Song of Solomon", "Song", "Cantares", "Cantar de los Cantares", "Cnt"),
    "isa": ("Isaiah", "Isa", "Is", "Isaías"),
    "jer": ("Jeremiah", "Jer", "Jeremías"),
    "lam": ("Lamentations", "Lam", "Lamentaciones"),
    "ezk": ("Ezekiel", "Ezek", "Ezequiel", "Ez"),
    "dan": ("Daniel", "Dan", "Dn"),
    "hos": ("Hosea", "Hos", "Oseas", "Os"),
    "jol": ("Joel", "Jl"),
    "amo": ("Amos", "Am", "Amós"),
    "oba": ("Obadiah", "Obad", "Abdías", "Abd"),
    "jon": ("Jonah", "Jon", "Jonás"),
    "mic": ("Micah", "Mic", "Miqueas", "Mi"),
    "nam": ("Nahum", "Nah", "Nahúm"),
    "hab": ("Habakkuk", "Hab", "Habacuc"),
    "zep": ("Zephaniah", "Zeph", "Sofonías", "Sof"),
    "hag": ("Haggai", "Hag", "Hageo"),
    "zec": ("Zechariah", "Zech", "Zacarías", "Zac"),
    "mal": ("Malachi", "Mal", "Malaquías"),
    # New Testament
    "mat": ("Matthew", "Matt", "Mt", "Mateo", "Mat"),
    "mrk": ("Mark", "Mk", "Mrk", "Marcos", "Mc", "Mr"),
    "luk": ("Luke", "Lk", "Lucas", "Luc", "Lc"),
    "jhn": ("John", "Jn", "Jhn", "Juan"),
    "act": ("Acts", "Act", "Hechos", "Hch", "Hechos de los Apóstoles"),
    "rom": ("Romans", "Rom", "Ro", "Rm", "Romanos"),
    "1co": ("1 Corinthians", "1 Cor", "1 Co", "1 Corintios"),
    "2co": ("2 Corinthians", "2 Cor", "2 Co", "2 Corintios"),
    "gal": ("Galatians", "Gal", "Ga", "Gálatas", "Gál"),
    "eph": ("Ephesians", "Eph", "Efesios", "Ef", "Efe"),
    "php": ("Philippians", "Phil", "Php", "Filipenses", "Fil", "Fp"),
    "col": ("Colossians", "Col", "Colosenses"),
    "1th": ("1 Thessalonians", "1 Thess", "1 Th", "1 Tesalonicenses", "1 Tes", "1 Ts"),
    "2th": ("2 Thessalonians", "2 Thess", "2 Th", "2 Tesalonicenses", "2 Tes", "2 Ts"),
    "1ti": ("1 Timothy", "1 Tim", "1 Ti", "1 Timoteo"),
    "2ti": ("2 Timothy", "2 Tim", "2 Ti", "2 Timoteo"),
    "tit": ("Titus", "Tit", "Tito"),
    "phm": ("Philemon", "Phlm", "Phm", "Filemón", "Flm"),
    "heb": ("Hebrews", "Heb", "Hebreos", "He"),
    "jas": ("James", "Jas", "Santiago", "Sant", "Stg"),
    "1pe": ("1 Peter", "1 Pet", "1 Pe", "1 Pedro", "1 Ped", "1 P"),
    "2pe": ("2 Peter", "2 Pet", "2 Pe", "2 Pedro", "2 Ped", "2 P"),
    "1jn": ("1 John", "1 Jn", "1 Juan"),
    "2jn": ("2 John", "2 Jn", "2 Juan"),
    "3jn": ("3 John", "3 Jn", "3 Juan"),
    "jud": ("Jude", "Jud", "Judas"),
    "rev": ("Revelation", "Rev", "Rv", "Apocalipsis", "Apoc", "Ap"),
}

LANGUAGE_CODES: dict[str, str] = {
    "spanish": "es",
    "espanol": "es",
    "castellano": "es",
    "english": "en",
    "ingles": "en",
    "greek": "el",
    "griego": "el",
    "portuguese": "pt",
    "portugues": "pt",
}

DEFAULT_LANGUAGE_CODE = "es"

_REFERENCE_PATTERN = re.compile(r"^((?:\d\s*)?[^\W\d_][^\d]*?)\s*(\d.*)$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_ALPHA = re.compile(r"[^a-z]")


def _fold(value: str) -> str:
    """Lower-case, strip accents and drop everything but letters and digits."""
    decomposed = unicodedata.normalize("NFKD", value.lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", ascii_only)


def _build_alias_index() -> dict[str, str]:
    index: dict[str, str] = {}
    for code, names in BOOK_ALIASES.items():
        index[code] = code
        for name in names:
            index[_fold(name)] = code
    return index


_ALIAS_INDEX = _build_alias_index()


def book_code(book: str) -> str | None:
    """Resolve a book name or abbreviation in any supported language."""
    return _ALIAS_INDEX.get(_fold(book))


def language_code(language: str, default: str = DEFAULT_LANGUAGE_CODE) -> str:
    """Reduce a language label ("Spanish", "es-ES", "Español") to two letters.

    A label with fewer than two letters yields ``default``.
    """
    folded = _fold(language)
    if folded in LANGUAGE_CODES:
        return LANGUAGE_CODES[folded]
    letters = _NON_ALPHA.sub("", folded)
    return letters[:2] if len(letters) >= 2 else default


def _blunt_key(reference: str) -> str:
    return _NON_ALNUM.sub("_", reference.strip().lower())


def canonical_reference(reference: str) -> str:
    """Canonical, language-less form of a reference, e.g. ``rom_12_1_2``.

    Falls back to replacing every non-alphanumeric character with ``_`` when
    the book cannot be recognized.
    """
    cleaned = reference.strip().lower()
    match = _REFERENCE_PATTERN.match(cleaned)
    if not match:
        return _blunt_key(reference)

    code = book_code(match.group(1))
    if code is None:
        return _blunt_key(reference)

    remainder = re.sub(r"\s+", "", match.group(2))
    remainder = re.sub(r"[:\-–]", "_", remainder)
    remainder = _NON_ALNUM.sub("_", remainder)
    return f"{code}_{remainder}"


def normalize_reference(
    reference: str,
    language: str,
    default_language_code: str = DEFAULT_LANGUAGE_CODE,
) -> str:
    """Language-scoped cache key; never raises.

    An empty or unusable language label is scoped to ``default_language_code``.
    """
    return f"{canonical_reference(reference)}_{language_code(language, default_language_code)}"


def legacy_key(reference: str) -> str:
    """Key format used before artifacts were scoped by language. Read-only."""
    return canonical_reference(reference)

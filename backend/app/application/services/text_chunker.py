"""Text chunker — splits extracted document text into overlapping, sentence-aligned fragments.

Each fragment records its ``[start_char, end_char)`` span in the *cleaned*
text (whitespace runs collapsed to one space), plus a page number and an
optional section title recovered from the text itself.
"""

import bisect
import re
from dataclasses import dataclass

# ── Chunking constants ──────────────────────────────────────────────
_DEFAULT_TARGET_SIZE = 800
_DEFAULT_OVERLAP = 100
_DEFAULT_MIN_SIZE = 200
_LOOKBEHIND = 100  # boundary search starts this far before the candidate end
_LOOKAHEAD = 50  # ...and runs this far past it
_CHARS_PER_PAGE = 1800  # page estimate when the text carries no [PAGE n] markers
_MAX_SECTION_LENGTH = 100

_SENTENCE_BREAK = re.compile(r"[.!?]\s+[A-ZÁÉÍÓÚÜÑ¿¡\"“]")
_TRAILING_TERMINATOR = re.compile(r"[.!?]$")
_PAGE_MARKER = re.compile(r"\[PAGE (\d+)\]")
_SECTION_PATTERNS = (
    re.compile(r"^(Capítulo|Chapter|Sección|Section)\s+\d+[:.]", re.IGNORECASE),
    re.compile(r"^([IVX]+\.?\s+)"),
    re.compile(r"^(\d+\.?\s+[A-ZÁÉÍÓÚÜÑ])"),
)


@dataclass(frozen=True)
class ChunkingOptions:
    target_size: int = _DEFAULT_TARGET_SIZE
    overlap: int = _DEFAULT_OVERLAP
    min_size: int = _DEFAULT_MIN_SIZE


@dataclass
class TextChunk:
    """A fragment of cleaned text with its recovered location."""

    text: str
    start_char: int
    end_char: int
    page: int
    section: str | None = None


class TextChunker:
    """Splits long texts into fragments suitable for embedding.

    Never raises: any input produces zero or more chunks.
    """

    def __init__(self, options: ChunkingOptions | None = None):
        self._options = options or ChunkingOptions()

    @property
    def options(self) -> ChunkingOptions:
        return self._options

    def split(self, text: str, options: ChunkingOptions | None = None) -> list[TextChunk]:
        opts = options or self._options
        clean = re.sub(r"\s+", " ", text or "").strip()
        if not clean:
            return []

        pages = _PageIndex(clean)

        if len(clean) < opts.min_size:
            return [self._make_chunk(clean, 0, len(clean), pages)]

        chunks: list[TextChunk] = []
        length = len(clean)
        start = 0

        while start < length:
            end = min(start + opts.target_size, length)

            if end < length:
                window_start = max(start + opts.min_size, end - _LOOKBEHIND)
                window = clean[window_start : min(end + _LOOKAHEAD, length)]
                boundary = _find_sentence_end(window)
                if boundary > 0:
                    end = window_start + boundary

            piece = clean[start:end].strip()
            if len(piece) >= opts.min_size:
                chunks.append(self._make_chunk(piece, start, end, pages))

            if end >= length:
                break

            next_start = end - opts.overlap
            # Progress guard: the window must always move forward.
            if next_start <= start:
                next_start = end
            start = next_start

        return chunks

    def _make_chunk(self, piece: str, start: int, end: int, pages: "_PageIndex") -> TextChunk:
        return TextChunk(
            text=piece,
            start_char=start,
            end_char=end,
            page=pages.page_at(start),
            section=extract_section(piece),
        )


class _PageIndex:
    """Positions of ``[PAGE n]`` markers in the cleaned text."""

    def __init__(self, text: str):
        self._offsets: list[int] = []
        self._numbers: list[int] = []
        for match in _PAGE_MARKER.finditer(text):
            self._offsets.append(match.start())
            self._numbers.append(int(match.group(1)))

    def page_at(self, offset: int) -> int:
        """Last marker at or before ``offset``; estimated from position if none."""
        idx = bisect.bisect_right(self._offsets, offset) - 1
        if idx >= 0:
            return self._numbers[idx]
        return estimate_page(offset)


def estimate_page(start_char: int) -> int:
    return start_char // _CHARS_PER_PAGE + 1


def extract_section(text: str) -> str | None:
    """First line of the fragment if it opens with a heading, else None."""
    for pattern in _SECTION_PATTERNS:
        if pattern.match(text):
            return text.split("\n")[0][:_MAX_SECTION_LENGTH]
    return None


def _find_sentence_end(window: str) -> int:
    """Offset just past the first sentence terminator in ``window``, or -1."""
    for pattern in (_SENTENCE_BREAK, _TRAILING_TERMINATOR):
        match = pattern.search(window)
        if match:
            return match.start() + 1
    return -1

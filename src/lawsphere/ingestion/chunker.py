"""Character-window chunking with structural boundary snapping.

Chunks are cut every ``chunk_size`` characters.  Near each cut point the
chunker looks for a structural boundary (paragraph break, a
``Section``/``Article``/``CHAPTER`` marker, line break, sentence end,
space) and moves the cut back to it so words and clauses stay whole.
The next chunk always starts ``chunk_overlap`` characters before the
previous cut, so neighbours share exactly that many characters.

Every character a snapped cut gives up pushes later windows back, so the
total given up per text is capped: the chunk count stays within one of
the hard-cut count ``ceil((L - O) / (S - O))``.

Chunking is a pure function of ``(text, params)``; record ids depend on
that.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable

from lawsphere.config import settings
from lawsphere.ingestion.models import Chunk, ChunkingParams, Document

logger = logging.getLogger(__name__)

# Maps chunk text to a label, or None when nothing is recognised.
SectionLabeler = Callable[[str], "str | None"]

GENERAL_LABEL = "General"

# Boundaries in priority order.  A match's cut position is ``match.end()``,
# so the marker pattern is a lookahead that cuts *before* the marker.
BOUNDARY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\n\n"),
    re.compile(r"(?=\b(?:Section|SECTION|Article|ARTICLE|CHAPTER)\s+[0-9IVXLC]+)"),
    re.compile(r"\n"),
    re.compile(r"\.\s"),
    re.compile(r" "),
]

_LAW_MARKER = re.compile(r"\b(section|article)\s+(\d+[A-Za-z]?)\b", re.IGNORECASE)


def law_section_label(text: str) -> str | None:
    """Return ``"Section N"`` or ``"Article N"`` for the first marker in *text*."""
    match = _LAW_MARKER.search(text)
    if match is None:
        return None
    return f"{match.group(1).capitalize()} {match.group(2)}"


class TextChunker:
    """Split sanitised text into ordered, overlapping :class:`Chunk` objects.

    Parameters
    ----------
    chunk_size:
        Target number of characters per chunk.
    chunk_overlap:
        Characters shared by consecutive chunks.  Must be ``< chunk_size``.
    min_chunk_chars:
        Chunks shorter than this are discarded (trailing fragments).
    labeler:
        Section-labelling function; see :func:`law_section_label`.
    respect_boundaries:
        When ``False`` every cut is a hard character cut.
    boundary_window:
        How far back from the hard cut point to look for a boundary.
        Defaults to a tenth of ``chunk_size``.  Narrowed further when the
        text's snapping budget runs low.
    """

    def __init__(
        self,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        *,
        min_chunk_chars: int = settings.min_chunk_chars,
        labeler: SectionLabeler = law_section_label,
        respect_boundaries: bool = True,
        boundary_window: int | None = None,
    ) -> None:
        self.params = ChunkingParams(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
        self.min_chunk_chars = min_chunk_chars
        self.labeler = labeler
        self.respect_boundaries = respect_boundaries
        window = boundary_window if boundary_window is not None else chunk_size // 10
        # A cut must stay past the overlap, or the window would not advance.
        self.boundary_window = max(0, min(window, chunk_size - chunk_overlap - 1))

    @property
    def chunk_size(self) -> int:
        return self.params.chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self.params.chunk_overlap

    # -- public API -----------------------------------------------------------

    def spans(self, text: str) -> list[tuple[int, int]]:
        """Return ``[start, end)`` offsets of every window over *text*, unfiltered."""
        length = len(text)
        if length == 0:
            return []

        budget, planned_cuts = self._snap_budget(length)
        spans: list[tuple[int, int]] = []
        given_up = 0
        start = 0
        while True:
            hard_end = start + self.chunk_size
            if hard_end >= length:
                spans.append((start, length))
                break
            # Spread the budget evenly; unused allowance carries forward.
            earned = min(budget, budget * (len(spans) + 1) // planned_cuts)
            end = self._find_cut(text, start, hard_end, earned - given_up)
            given_up += hard_end - end
            spans.append((start, end))
            start = end - self.chunk_overlap
        return spans

    def chunk_text(self, text: str, source_file: str = "") -> list[Chunk]:
        """Chunk *text* and label each chunk; short fragments are dropped."""
        chunks: list[Chunk] = []
        for start, end in self.spans(text):
            piece = text[start:end]
            if len(piece.strip()) < self.min_chunk_chars:
                logger.debug("Dropping %d-char fragment of %s at %d", len(piece), source_file, start)
                continue
            chunks.append(
                Chunk(
                    source_file=source_file,
                    index=len(chunks),
                    text=piece,
                    section_label=self.labeler(piece) or GENERAL_LABEL,
                    start=start,
                    end=end,
                )
            )
        return chunks

    def chunk(self, document: Document) -> list[Chunk]:
        """Chunk a :class:`Document` whose text has already been sanitised."""
        return self.chunk_text(document.raw_text, source_file=document.file_name)

    # -- internals ------------------------------------------------------------

    def _snap_budget(self, length: int) -> tuple[int, int]:
        """Return ``(characters snapping may give up, planned cut count)``.

        With hard cuts the last window has ``slack`` unused characters; giving
        up less than ``slack + step`` in total costs at most one extra chunk.
        """
        step = self.chunk_size - self.chunk_overlap
        windows = max(1, math.ceil((length - self.chunk_overlap) / step))
        slack = windows * step + self.chunk_overlap - length
        return max(0, slack + step - 1), max(1, windows - 1)

    def _find_cut(self, text: str, start: int, hard_end: int, allowance: int) -> int:
        window = min(self.boundary_window, allowance)
        if not self.respect_boundaries or window <= 0:
            return hard_end

        lo = max(start + self.chunk_overlap + 1, hard_end - window)
        for pattern in BOUNDARY_PATTERNS:
            cut = None
            for match in pattern.finditer(text, lo, hard_end):
                if lo < match.end() <= hard_end:
                    cut = match.end()
            if cut is not None:
                return cut
        return hard_end


def chunk_text(
    raw_text: str,
    chunk_size: int = settings.chunk_size,
    chunk_overlap: int = settings.chunk_overlap,
    source_file: str = "",
) -> list[Chunk]:
    """Convenience wrapper around :meth:`TextChunker.chunk_text`."""
    return TextChunker(chunk_size, chunk_overlap).chunk_text(raw_text, source_file=source_file)

"""Unit tests for the chunker module."""

from __future__ import annotations

import math

import pytest

from lawsphere.ingestion.chunker import GENERAL_LABEL, TextChunker, chunk_text, law_section_label
from lawsphere.ingestion.models import Document

WORDS = "the accused shall be punished with imprisonment which may extend to seven years and fine "


def _prose(length: int) -> str:
    return (WORDS * (length // len(WORDS) + 1))[:length]


SENTENCES = (
    "Whoever commits theft shall be punished. The offence is cognizable and non-bailable.\n\n"
    "Section 303 applies to movable property. Attempt is punishable too. "
)


def _sentences(length: int) -> str:
    return (SENTENCES * (length // len(SENTENCES) + 1))[:length]


class TestSpans:
    def test_worked_example_offsets(self) -> None:
        """2,300 chars, size 1000, overlap 200 → three windows."""
        text = "abcdefghij" * 230
        chunker = TextChunker(1000, 200)
        assert chunker.spans(text) == [(0, 1000), (800, 1800), (1600, 2300)]

    def test_worked_example_chunks(self) -> None:
        chunks = chunk_text("abcdefghij" * 230, 1000, 200, source_file="bns.pdf")
        assert [c.index for c in chunks] == [0, 1, 2]
        assert len(chunks[-1].text) == 700
        assert all(c.source_file == "bns.pdf" for c in chunks)

    @pytest.mark.parametrize("length", [1000, 1001, 1799, 2300, 5000, 12345])
    def test_hard_cut_count_formula(self, length: int) -> None:
        size, overlap = 1000, 200
        chunker = TextChunker(size, overlap, respect_boundaries=False)
        spans = chunker.spans("x" * length)
        expected = math.ceil((length - overlap) / (size - overlap))
        assert abs(len(spans) - expected) <= 1

    @pytest.mark.parametrize("length", [2300, 9999, 50_000, 200_000])
    def test_count_formula_holds_when_snapping(self, length: int) -> None:
        size, overlap = 1000, 200
        spans = TextChunker(size, overlap).spans(_sentences(length))
        expected = math.ceil((length - overlap) / (size - overlap))
        assert abs(len(spans) - expected) <= 1
        assert any(end - start < size for start, end in spans[:-1])
        for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
            assert prev_end - next_start == overlap

    def test_empty_text(self) -> None:
        assert TextChunker(1000, 200).spans("") == []


class TestOverlapAndCoverage:
    @pytest.fixture()
    def text(self) -> str:
        return _prose(4321)

    def test_adjacent_chunks_share_exactly_overlap(self, text: str) -> None:
        chunks = TextChunker(500, 80).chunk_text(text)
        assert len(chunks) > 2
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.end - nxt.start == 80
            assert prev.text[-80:] == nxt.text[:80]

    def test_chunks_cover_full_text(self, text: str) -> None:
        chunks = TextChunker(500, 80).chunk_text(text)
        assert chunks[0].start == 0
        assert chunks[-1].end == len(text)
        for c in chunks:
            assert text[c.start : c.end] == c.text

    def test_no_chunk_exceeds_size(self, text: str) -> None:
        chunks = TextChunker(500, 80).chunk_text(text)
        assert all(len(c.text) <= 500 for c in chunks)

    def test_cuts_land_on_word_boundaries(self, text: str) -> None:
        chunks = TextChunker(500, 80).chunk_text(text)
        for c in chunks[:-1]:
            assert c.text.endswith(" ")

    def test_deterministic(self, text: str) -> None:
        first = TextChunker(500, 80).chunk_text(text, "a.txt")
        second = TextChunker(500, 80).chunk_text(text, "a.txt")
        assert first == second


class TestBoundaries:
    def test_cut_before_section_marker(self) -> None:
        text = "word " * 185 + "Section 12 Punishment for theft " + "word " * 200
        chunks = TextChunker(1000, 200).chunk_text(text)
        assert chunks[0].end == 925
        assert chunks[1].text.find("Section 12") >= 0

    def test_hard_cut_when_no_boundary(self) -> None:
        chunks = TextChunker(300, 50).chunk_text("z" * 700)
        assert chunks[0].end == 300


class TestFiltering:
    def test_short_document_yields_nothing(self) -> None:
        assert TextChunker(1000, 200).chunk_text("Too short to keep.") == []

    def test_min_chunk_chars_configurable(self) -> None:
        chunks = TextChunker(1000, 200, min_chunk_chars=5).chunk_text("Short but kept.")
        assert len(chunks) == 1

    def test_indices_are_contiguous(self) -> None:
        chunks = TextChunker(300, 50).chunk_text(_prose(2000))
        assert [c.index for c in chunks] == list(range(len(chunks)))


class TestParams:
    def test_overlap_must_be_smaller_than_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_overlap"):
            TextChunker(100, 100)

    def test_params_exposed(self) -> None:
        chunker = TextChunker(800, 100)
        assert chunker.params.chunk_size == 800
        assert chunker.params.chunk_overlap == 100


class TestSectionLabels:
    @pytest.mark.parametrize(
        ("text", "label"),
        [
            ("Whoever commits murder under Section 103 shall be punished", "Section 103"),
            ("SECTION 64A applies here", "Section 64A"),
            ("as guaranteed by Article 21 of the Constitution", "Article 21"),
        ],
    )
    def test_law_section_label(self, text: str, label: str) -> None:
        assert law_section_label(text) == label

    def test_no_marker(self) -> None:
        assert law_section_label("General provisions and definitions") is None

    def test_chunk_defaults_to_general(self) -> None:
        chunks = TextChunker(1000, 200).chunk_text(_prose(400))
        assert chunks[0].section_label == GENERAL_LABEL

    def test_custom_labeler(self) -> None:
        chunker = TextChunker(1000, 200, labeler=lambda text: "Schedule I")
        chunks = chunker.chunk(Document(file_name="x.txt", raw_text=_prose(400)))
        assert chunks[0].section_label == "Schedule I"

import pytest

from chunkwise.errors import ConfigurationError
from chunkwise.processing.splitter import ChunkSplitter


def _sample_text() -> str:
    sentences = []
    for i in range(60):
        sentences.append("word " * (i % 7 + 3) + f"number {i}.")
        if i % 9 == 0:
            sentences.append("\n")
    return " ".join(sentences)


def test_short_content_is_single_chunk():
    chunks = ChunkSplitter().split("Hello world.", chunk_size=100)
    assert len(chunks) == 1
    assert chunks[0].index == 0
    assert chunks[0].text == "Hello world."


def test_blank_content_yields_no_chunks():
    assert ChunkSplitter().split("   \n  ", chunk_size=100) == []


def test_cuts_after_sentence_boundary():
    content = "a" * 30 + "." + "b" * 30 + "."
    chunks = ChunkSplitter().split(content, chunk_size=50)
    assert [c.text for c in chunks] == ["a" * 30 + ".", "b" * 30 + "."]


def test_cuts_after_newline():
    content = "x" * 40 + "\n" + "y" * 40
    chunks = ChunkSplitter().split_text(content, chunk_size=50)
    assert chunks == ["x" * 40 + "\n", "y" * 40]


def test_ignores_boundary_in_first_half_of_window():
    content = "a" * 10 + "." + "b" * 100
    chunks = ChunkSplitter().split_text(content, chunk_size=50)
    assert [len(c) for c in chunks] == [50, 50, 11]
    assert "".join(chunks) == content


def test_chunks_are_bounded_and_reconstruct_content():
    content = _sample_text()
    chunks = ChunkSplitter().split(content, chunk_size=120)
    assert len(chunks) > 1
    assert all(len(chunk) <= 120 for chunk in chunks)
    assert all(chunk.text.strip() for chunk in chunks)
    assert "".join(chunk.text for chunk in chunks) == content


def test_split_is_deterministic():
    content = _sample_text()
    splitter = ChunkSplitter()
    assert splitter.split(content, 200) == splitter.split(content, 200)


def test_indices_are_contiguous_after_dropping_blank_chunks():
    content = "abcdefghi\n" + " " * 10 + "klmnopqrs."
    chunks = ChunkSplitter().split(content, chunk_size=10)
    assert [c.index for c in chunks] == [0, 1]
    assert [c.text for c in chunks] == ["abcdefghi\n", "klmnopqrs."]


def test_japanese_full_stop_is_a_boundary():
    content = "あ" * 30 + "。" + "い" * 30
    chunks = ChunkSplitter().split_text(content, chunk_size=40)
    assert chunks[0] == "あ" * 30 + "。"


def test_custom_boundaries():
    content = "a" * 30 + ";" + "b" * 30
    chunks = ChunkSplitter(boundaries=(";",)).split_text(content, chunk_size=40)
    assert chunks[0] == "a" * 30 + ";"


def test_invalid_chunk_size():
    with pytest.raises(ConfigurationError):
        ChunkSplitter().split("text", chunk_size=0)


def test_invalid_fill_ratio():
    with pytest.raises(ConfigurationError):
        ChunkSplitter(min_fill_ratio=1.5)


def test_chunk_size_reports_utf8_bytes():
    chunk = ChunkSplitter().split("éé", chunk_size=10)[0]
    assert len(chunk) == 2
    assert chunk.size == 4

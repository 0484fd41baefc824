"""Unit tests for sentence-aligned, token-bounded chunking."""
import pytest

from transcript_digest.summarization.chunker import TextChunker, estimate_tokens
from tests.utils import word_count


# 40 characters = 10 tokens under the default 4-chars-per-token estimate
SENTENCE = "x" * 38 + ". "


def test_estimate_tokens_four_chars_per_token():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("a" * 4001) == 1000


def test_text_within_budget_is_single_chunk():
    text = "Short transcript. Nothing else to say!"
    chunks = TextChunker().chunk(text, max_tokens=100)

    assert len(chunks) == 1
    assert chunks[0].index == 0
    assert chunks[0].text == text
    assert chunks[0].estimated_tokens == estimate_tokens(text)


@pytest.mark.parametrize("text", ["", "   ", "\n\t  \n"])
def test_empty_input_yields_no_chunks(text):
    assert TextChunker().chunk(text, max_tokens=10) == []


def test_rejects_non_positive_budget():
    with pytest.raises(ValueError):
        TextChunker().chunk("Some text.", max_tokens=0)


def test_five_thousand_tokens_split_into_three_sentence_aligned_chunks():
    text = SENTENCE * 500  # 20,000 chars = 5,000 tokens

    chunks = TextChunker().chunk(text, max_tokens=2000)

    assert [c.estimated_tokens for c in chunks] == [2000, 2000, 1000]
    assert [c.index for c in chunks] == [0, 1, 2]
    for chunk in chunks:
        assert chunk.text.endswith(". ")


def test_chunks_concatenate_to_original_text():
    text = (
        "Welcome everyone! Today we review the roadmap. Are there questions? "
        "Budget is tight... but workable. Next steps follow.\n\nSecond part starts here. "
        "It ends without punctuation"
    )
    chunker = TextChunker(word_count)

    chunks = chunker.chunk(text, max_tokens=8)

    assert len(chunks) > 1
    assert "".join(c.text for c in chunks) == text
    assert all(c.estimated_tokens <= 8 for c in chunks)


def test_sentences_are_not_split_when_they_fit():
    text = "One two three. Four five six. Seven eight nine."
    chunks = TextChunker(word_count).chunk(text, max_tokens=6)

    assert [c.text for c in chunks] == ["One two three. Four five six. ", "Seven eight nine."]


def test_oversized_sentence_is_hard_split_on_words():
    text = "one two three four five six seven."
    chunks = TextChunker(word_count).chunk(text, max_tokens=3)

    assert [c.text for c in chunks] == ["one two three ", "four five six ", "seven."]


def test_oversized_word_is_split_on_characters():
    word = "a" * 30
    chunks = TextChunker().chunk(word, max_tokens=2)

    assert "".join(c.text for c in chunks) == word
    assert all(estimate_tokens(c.text) <= 2 for c in chunks)
    assert [len(c.text) for c in chunks] == [11, 11, 8]


def test_hard_split_fragments_merge_with_following_sentences():
    text = "alpha beta gamma delta epsilon. Zeta."
    chunks = TextChunker(word_count).chunk(text, max_tokens=4)

    assert [c.text for c in chunks] == ["alpha beta gamma delta ", "epsilon. Zeta."]


def test_chunking_is_deterministic():
    text = SENTENCE * 37 + "Tail without a period"
    chunker = TextChunker()

    first = chunker.chunk(text, max_tokens=55)
    second = chunker.chunk(text, max_tokens=55)

    assert first == second


def test_needs_chunking():
    chunker = TextChunker(word_count)
    assert chunker.needs_chunking("a b c", 2)
    assert not chunker.needs_chunking("a b", 2)

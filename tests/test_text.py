"""
Tests for Text Chains
=====================
Tests for tokenizing, sentence splitting and text generation in
chainkit/text.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chainkit import TextChain, END, EmptyChainError, RandomSource
from chainkit.text import tokenize, split_sentences, join_sentence, BREAK_TOKENS


CORPUS = "I like cats. I like dogs. You like cats!"


class TestTokenize:
    """Tests for tokenize()."""

    def test_words_and_punctuation(self):
        assert tokenize("Hello, world! How are you?") == [
            'Hello', ',', 'world', '!', 'How', 'are', 'you', '?'
        ]

    def test_whitespace_kinds(self):
        assert tokenize("one\ttwo\nthree\r\nfour") == ['one', 'two', 'three', 'four']

    def test_quoted_break(self):
        assert tokenize('Stop."') == ['Stop', '."']

    def test_hyphen_splits(self):
        assert tokenize("well-known") == ['well', '-', 'known']

    def test_empty(self):
        assert tokenize("") == []


class TestSentences:
    """Tests for split_sentences() and join_sentence()."""

    def test_split_after_breaks(self):
        assert split_sentences(['a', '.', 'b', '!', 'c']) == [['a', '.'], ['b', '!'], ['c']]

    def test_split_empty(self):
        assert split_sentences([]) == []

    def test_quoted_breaks(self):
        assert {'."', '!"', '?"', ',"'} <= BREAK_TOKENS

    def test_join_attaches_punctuation(self):
        assert join_sentence(['Hello', ',', 'world', '!']) == 'Hello, world!'

    def test_join_empty(self):
        assert join_sentence([]) == ''


class TestTrainText:
    """Tests for TextChain.train_text()."""

    def test_returns_self(self):
        chain = TextChain(1)
        assert chain.train_text("a b") is chain

    def test_sentences_trained_separately(self):
        chain = TextChain(1).train_text("The cat sat. The dog ran.")
        assert chain.start_keys() == [('The',)]
        assert chain.lookup(('The',)) == {'cat': 1, 'dog': 1}
        assert chain.lookup(('.',)) == {END: 2}
        assert chain.lookup(('sat',)) == {'.': 1}

    def test_without_splitting(self):
        chain = TextChain(1).train_text("The cat sat. The dog ran.", split=False)
        assert chain.start_keys() == [('The',)]
        assert chain.lookup(('.',)) == {'The': 1, END: 1}

    def test_delegates_to_generic_training(self):
        text_chain = TextChain(2).train_text("a b c d")
        assert text_chain.transitions() == TextChain(2).train(['a', 'b', 'c', 'd']).transitions()

    def test_custom_tokenizer(self):
        chain = TextChain(1, tokenizer=str.split).train_text("x, y. z")
        assert chain.lookup(('x,',)) == {'y.': 1}

    def test_short_text_contributes_nothing(self):
        chain = TextChain(3).train_text("too short")
        assert chain.is_empty()


class TestGenerateText:
    """Tests for TextChain text generation."""

    def test_deterministic_text(self):
        chain = TextChain(2).train_text("a b c")
        assert chain.generate_text() == "a b c"

    def test_default_joiner_from_settings(self):
        assert TextChain(1).joiner == " "

    def test_joiner_override(self):
        chain = TextChain(2).train_text("a b c")
        assert chain.generate_text(joiner="-") == "a-b-c"
        assert TextChain(2, joiner="_").train_text("a b c").generate_text() == "a_b_c"

    def test_max_length(self):
        chain = TextChain(2).train_text("a b c")
        assert chain.generate_text(max_length=2) == "a b"

    def test_empty_chain_raises(self):
        with pytest.raises(EmptyChainError):
            TextChain(1).generate_text()

    def test_sentence_ends_at_break(self):
        chain = TextChain(1).train_text(CORPUS)
        expected = {"I like cats.", "I like dogs.", "You like cats!",
                    "I like cats!", "You like cats.", "You like dogs."}
        for seed in range(30):
            assert chain.generate_sentence(rng=seed) in expected

    def test_sentence_max_length(self):
        chain = TextChain(1).train_text(CORPUS)
        sentence = chain.generate_sentence(rng=2, max_length=2)
        assert len(sentence.split()) == 2

    def test_sentence_negative_max_length(self):
        chain = TextChain(1).train_text(CORPUS)
        with pytest.raises(ValueError):
            chain.generate_sentence(max_length=-1)

    def test_paragraph(self):
        chain = TextChain(2).train_text("I like cats. I like dogs.")
        paragraph = chain.generate_paragraph(3, rng=5)
        assert paragraph.count('.') == 3
        assert paragraph.startswith("I like")

    def test_paragraph_is_reproducible(self):
        chain = TextChain(1).train_text(CORPUS)
        assert chain.generate_paragraph(4, rng=9) == chain.generate_paragraph(4, rng=9)

    def test_paragraph_shares_source(self):
        chain = TextChain(1).train_text(CORPUS)
        rng = RandomSource(seed=0)
        sentences = {chain.generate_paragraph(1, rng=rng) for _ in range(30)}
        assert len(sentences) > 1

    def test_from_dict_keeps_text_class(self):
        chain = TextChain(1).train_text(CORPUS)
        restored = TextChain.from_dict(chain.to_dict())
        assert isinstance(restored, TextChain)
        assert restored == chain
        assert restored.generate_sentence(rng=3) == chain.generate_sentence(rng=3)

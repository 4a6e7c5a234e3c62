#!/usr/bin/env python3
"""
Text Chains
===========
Word-level chains over text.

Text is split into word and punctuation tokens, and the token stream is cut
into sentences after break tokens ("." "?" "!" and their quoted forms).
Each sentence trains the underlying generic chain as one sequence.

Usage:
    from chainkit import TextChain

    chain = TextChain(order=2)
    chain.train_text("The cat sat. The cat ran away.")
    print(chain.generate_sentence(rng=7))
"""

import re
from typing import Callable, Iterable, List, Optional

from .chain import Chain
from .sampling import RandomLike, as_random_source
from .settings import get_setting

# Words, or runs of punctuation
TOKEN_PATTERN = re.compile(r'[^ .!?,\-\n\r\t]+|[.,!?\-"]+')

# Tokens that end a sentence
BREAK_TOKENS = frozenset(['.', '?', '!', '."', '!"', '?"', ',"'])

# Tokens written without a leading space
ATTACHED_TOKENS = BREAK_TOKENS | {','}

Tokenizer = Callable[[str], List[str]]


def tokenize(text: str) -> List[str]:
    """Split text into word and punctuation tokens."""
    return TOKEN_PATTERN.findall(text)


def split_sentences(tokens: Iterable[str]) -> List[List[str]]:
    """Group tokens into sentences, each ending after a break token."""
    sentences = []
    words = []
    for token in tokens:
        words.append(token)
        if token in BREAK_TOKENS:
            sentences.append(words)
            words = []
    if words:
        sentences.append(words)
    return sentences


def join_sentence(tokens: Iterable[str]) -> str:
    """Join tokens with spaces, attaching punctuation to the word before it."""
    result = ''
    for token in tokens:
        if token in ATTACHED_TOKENS or not result:
            result += token
        else:
            result += ' ' + token
    return result


class TextChain(Chain[str]):
    """Chain specialized for string tokens."""

    def __init__(self,
                 order: int = 1,
                 tokenizer: Optional[Tokenizer] = None,
                 joiner: Optional[str] = None):
        """
        Args:
            order: Words per context
            tokenizer: Callable turning text into tokens (default: tokenize)
            joiner: Separator for generate_text (default: text.joiner setting)
        """
        super().__init__(order)
        self.tokenizer = tokenizer or tokenize
        self.joiner = joiner if joiner is not None else get_setting('text.joiner', ' ')

    def train_text(self, text: str, split: bool = True) -> 'TextChain':
        """
        Tokenize text and train on it.

        Args:
            text: Raw text
            split: Train each sentence separately (False = one sequence)
        """
        tokens = self.tokenizer(text)
        sequences = split_sentences(tokens) if split else [tokens]
        for sequence in sequences:
            self.train(sequence)
        return self

    def generate_text(self,
                      max_length: Optional[int] = None,
                      rng: RandomLike = None,
                      joiner: Optional[str] = None) -> str:
        """Generate tokens and join them into text."""
        tokens = self.generate(max_length=max_length, rng=rng)
        return (self.joiner if joiner is None else joiner).join(tokens)

    def generate_sentence(self,
                          rng: RandomLike = None,
                          max_length: Optional[int] = None) -> str:
        """Generate up to and including the first break token."""
        if max_length is not None and max_length < 0:
            raise ValueError(f"max_length must be >= 0, got {max_length}")
        tokens = []
        for token in self.iter_generate(rng):
            if max_length is not None and len(tokens) >= max_length:
                break
            tokens.append(token)
            if token in BREAK_TOKENS:
                break
        return join_sentence(tokens)

    def generate_paragraph(self, sentences: int, rng: RandomLike = None) -> str:
        """Generate ``sentences`` sentences separated by single spaces."""
        rng = as_random_source(rng)
        return ' '.join(self.generate_sentence(rng) for _ in range(sentences))


__all__ = [
    "TextChain",
    "tokenize",
    "split_sentences",
    "join_sentence",
    "BREAK_TOKENS",
    "TOKEN_PATTERN",
]

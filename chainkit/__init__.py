#!/usr/bin/env python3
"""
ChainKit - N-gram Markov Chain Engine
=====================================

Train Markov chains on sequences of any hashable items and generate new
sequences from them.

Quick Start
-----------
    from chainkit import Chain, TextChain

    chain = Chain(order=1)
    chain.train([1, 2, 3, 2, 1, 2, 3, 4, 3, 2, 1]).train([5, 4, 3, 2, 1])
    print(chain.generate(max_length=20, rng=42))

    text = TextChain(order=2)
    text.train_text("The quick brown fox. The quick red fox jumps.")
    print(text.generate_sentence(rng=1))

Modules
-------
    chainkit.chain    - Generic chain engine and END marker
    chainkit.text     - Tokenizing text chains
    chainkit.sampling - Pluggable random sources
    chainkit.formats   - JSON / YAML / CBOR persistence
    chainkit.settings - YAML application settings

CLI Usage
---------
    python -m chainkit train corpus.txt -u model.json --order 2
    python -m chainkit generate model.json -n 5 --seed 42
"""

__version__ = "0.2.0"
__author__ = "ChainKit"

from .errors import (
    ChainError,
    InvalidOrderError,
    EmptyChainError,
    FormatError,
)
from .sampling import RandomSource, as_random_source
from .chain import Chain, END
from .text import TextChain, tokenize, split_sentences, join_sentence
from .formats import JsonCodec, YamlCodec, CborCodec, codec_for_path, load_chain, save_chain

__all__ = [
    '__version__',
    # Engine
    'Chain',
    'END',
    'TextChain',
    'RandomSource',
    'as_random_source',
    # Text helpers
    'tokenize',
    'split_sentences',
    'join_sentence',
    # Persistence
    'JsonCodec',
    'YamlCodec',
    'CborCodec',
    'codec_for_path',
    'load_chain',
    'save_chain',
    # Errors
    'ChainError',
    'InvalidOrderError',
    'EmptyChainError',
    'FormatError',
]

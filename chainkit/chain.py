#!/usr/bin/env python3
"""
N-gram Chain Engine
===================
A generic Markov chain over sequences of hashable items.

The chain is keyed on context windows of ``order`` consecutive items. Each
context maps to a weighted distribution over the item that followed it in
training, including the END marker when the window closed a sequence.

Theory:
-------
Training slides a window of N items across each sequence. Window i has
context ``seq[i:i+N]`` and successor ``seq[i+N]`` (or END at the tail).
The first window of every sequence is remembered as a start context.
Generation picks a start context uniformly, then repeatedly samples a
successor with probability weight / total until END, a dead end, or the
length bound.

Usage:
    from chainkit import Chain

    chain = Chain(order=1)
    chain.train([1, 2, 3, 2, 1]).train([5, 4, 3, 2, 1])
    print(chain.generate(max_length=20, rng=42))
"""

import logging
from itertools import islice
from types import MappingProxyType
from typing import (
    Any, Dict, Generic, Hashable, Iterable, Iterator, List, Mapping,
    Optional, Sequence, Tuple, TypeVar,
)

from .errors import EmptyChainError, InvalidOrderError
from .sampling import RandomLike, as_random_source

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Hashable)

Context = Tuple[Hashable, ...]


# =============================================================================
# END MARKER
# =============================================================================

class _EndMarker:
    """Sentinel successor meaning "the sequence terminated here"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'END'

    def __reduce__(self):
        # Pickle and copy by reference to the module-level singleton
        return 'END'


END = _EndMarker()


def _as_list(value, what: str) -> list:
    """Persisted sequences must be lists; strings and mappings are not keys."""
    if not isinstance(value, list):
        raise TypeError(f"{what} must be a list, got {type(value).__name__}")
    return value


# =============================================================================
# CHAIN
# =============================================================================

class Chain(Generic[T]):
    """
    Markov chain of fixed order over hashable items.

    State is exactly the order, the transition table and the start set.
    Training only ever adds to it.
    """

    def __init__(self, order: int = 1):
        """
        Args:
            order: Number of items per context window (>= 1)

        Raises:
            InvalidOrderError: If order is not a positive integer
        """
        if not isinstance(order, int) or isinstance(order, bool) or order < 1:
            raise InvalidOrderError(order)
        self._order = order
        self._transitions: Dict[Context, Dict[Any, int]] = {}
        # dict keys as an insertion-ordered set
        self._starts: Dict[Context, None] = {}

    @property
    def order(self) -> int:
        """Number of items per context. Fixed for the lifetime of the chain."""
        return self._order

    def __len__(self) -> int:
        return len(self._transitions)

    def __contains__(self, key) -> bool:
        try:
            return tuple(key) in self._transitions
        except TypeError:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return (
            self._order == other._order
            and self._transitions == other._transitions
            and self._starts.keys() == other._starts.keys()
        )

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(order={self._order}, "
                f"contexts={len(self._transitions)}, starts={len(self._starts)})")

    def is_empty(self) -> bool:
        """True if nothing has been trained."""
        return not self._transitions

    # -------------------------------------------------------------------------
    # Transition table
    # -------------------------------------------------------------------------

    def _key(self, key: Iterable[T]) -> Context:
        key = tuple(key)
        if len(key) != self._order:
            raise ValueError(
                f"context must have exactly {self._order} items, got {len(key)}: {key!r}"
            )
        return key

    def record(self, key: Iterable[T], next_item, weight: int = 1) -> None:
        """
        Add ``weight`` to the transition ``key -> next_item``.

        Creates the context and the successor on first sight. ``next_item``
        may be END.

        Raises:
            ValueError: If key has the wrong length or weight is not a positive int
        """
        if not isinstance(weight, int) or isinstance(weight, bool) or weight < 1:
            raise ValueError(f"weight must be a positive integer, got {weight!r}")
        key = self._key(key)
        links = self._transitions.get(key)
        if links is None:
            self._transitions[key] = {next_item: weight}
        else:
            links[next_item] = links.get(next_item, 0) + weight

    def lookup(self, key: Iterable[T]) -> Optional[Mapping[Any, int]]:
        """Read-only successor weights for a context, or None if unseen."""
        try:
            links = self._transitions.get(tuple(key))
        except TypeError:
            return None
        if links is None:
            return None
        return MappingProxyType(links)

    def add_start(self, key: Iterable[T]) -> None:
        """Mark a context as eligible to begin generation."""
        self._starts[self._key(key)] = None

    def contexts(self) -> List[Context]:
        """All trained contexts, in insertion order."""
        return list(self._transitions)

    def start_keys(self) -> List[Context]:
        """All start contexts, in insertion order."""
        return list(self._starts)

    def transitions(self) -> Dict[Context, Dict[Any, int]]:
        """A copy of the full transition table."""
        return {key: dict(links) for key, links in self._transitions.items()}

    def total_weight(self) -> int:
        """Sum of every transition weight (one per trained window)."""
        return sum(sum(links.values()) for links in self._transitions.values())

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def add_sequence(self, sequence: Iterable[T]) -> int:
        """
        Train on one sequence and report how many windows it contributed.

        Sequences shorter than the order contribute nothing and return 0.
        """
        items = tuple(sequence)
        n = self._order
        if len(items) < n:
            logger.debug(f"Skipping sequence of length {len(items)} (order {n})")
            return 0

        self.add_start(items[:n])
        windows = len(items) - n + 1
        for i in range(windows):
            key = items[i:i + n]
            next_item = items[i + n] if i + n < len(items) else END
            self.record(key, next_item)
        return windows

    def train(self, sequence: Iterable[T]) -> 'Chain[T]':
        """Train on one sequence. Returns self so calls can be chained."""
        self.add_sequence(sequence)
        return self

    def merge(self, other: 'Chain[T]') -> 'Chain[T]':
        """
        Add every weight and start context of another chain into this one.

        Raises:
            ValueError: If the orders differ
        """
        if other.order != self._order:
            raise ValueError(
                f"orders must be equal to merge chains ({self._order} != {other.order})"
            )
        for key, links in other._transitions.items():
            for next_item, weight in links.items():
                self.record(key, next_item, weight)
        for key in other._starts:
            self._starts[key] = None
        logger.debug(f"Merged {len(other)} contexts into {self!r}")
        return self

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def iter_generate(self, rng: RandomLike = None) -> Iterator[T]:
        """
        Lazily yield a generated sequence.

        The first ``order`` items are a start context. The iterator ends at
        END or at a dead end; on a cyclic chain it may never end, so bound
        it (see ``generate``).

        Raises:
            EmptyChainError: If there are no start contexts
        """
        if not self._starts:
            raise EmptyChainError()
        return self._walk(as_random_source(rng))

    def _walk(self, rng) -> Iterator[T]:
        starts = list(self._starts)
        window = starts[rng.draw_index([1] * len(starts))]
        yield from window

        while True:
            links = self._transitions.get(window)
            if links is None:
                logger.debug(f"Dead end at context {window!r}")
                return
            candidates = list(links)
            next_item = candidates[rng.draw_index(list(links.values()))]
            if next_item is END:
                return
            yield next_item
            window = window[1:] + (next_item,)

    def generate(self, max_length: Optional[int] = None, rng: RandomLike = None) -> List[T]:
        """
        Generate a sequence.

        Args:
            max_length: Upper bound on the result length (None = unbounded)
            rng: RandomSource, random.Random, int seed, or None

        Returns:
            List of items beginning with a start context

        Raises:
            EmptyChainError: If the chain has no start contexts
            ValueError: If max_length is negative
        """
        if max_length is not None and max_length < 0:
            raise ValueError(f"max_length must be >= 0, got {max_length}")
        walk = self.iter_generate(rng)
        if max_length is None:
            return list(walk)
        return list(islice(walk, max_length))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize chain state to plain lists and dicts."""
        transitions = []
        for key, links in self._transitions.items():
            next_items = []
            for next_item, weight in links.items():
                if next_item is END:
                    next_items.append({'end': True, 'weight': weight})
                else:
                    next_items.append({'item': next_item, 'weight': weight})
            transitions.append({'context': list(key), 'next': next_items})

        return {
            'order': self._order,
            'starts': [list(key) for key in self._starts],
            'transitions': transitions,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Chain':
        """
        Deserialize chain state produced by ``to_dict``.

        Raises:
            KeyError, TypeError, ValueError: If the structure is malformed
        """
        chain = cls(data['order'])
        for key in _as_list(data['starts'], 'starts'):
            chain.add_start(_as_list(key, 'start context'))
        for entry in _as_list(data['transitions'], 'transitions'):
            key = _as_list(entry['context'], 'context')
            for link in _as_list(entry['next'], 'next'):
                next_item = END if link.get('end') else link['item']
                chain.record(key, next_item, link['weight'])
        return chain

    @classmethod
    def from_state(cls,
                   order: int,
                   starts: Iterable[Sequence],
                   transitions: Mapping[Sequence, Mapping[Any, int]]) -> 'Chain':
        """Rebuild a chain from its (order, starts, transitions) triple."""
        chain = cls(order)
        for key in starts:
            chain.add_start(key)
        for key, links in transitions.items():
            for next_item, weight in links.items():
                chain.record(key, next_item, weight)
        return chain


__all__ = ["Chain", "END", "Context"]

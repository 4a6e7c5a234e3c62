#!/usr/bin/env python3
"""
Errors
======
Exception hierarchy shared by the chain engine, codecs and CLI.
"""


class ChainError(Exception):
    """Base class for all chainkit errors."""


class InvalidOrderError(ChainError, ValueError):
    """Raised when a chain is constructed with an order below 1."""

    def __init__(self, order):
        self.order = order
        super().__init__(f"order must be a positive integer, got {order!r}")


class EmptyChainError(ChainError):
    """Raised when generating from a chain that has no start contexts."""

    def __init__(self, message: str = "chain has no start contexts; train it first"):
        super().__init__(message)


class FormatError(ChainError, ValueError):
    """Raised by a codec when persisted chain data is malformed."""


__all__ = [
    "ChainError",
    "InvalidOrderError",
    "EmptyChainError",
    "FormatError",
]

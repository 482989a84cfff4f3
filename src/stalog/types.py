## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field
from typing import NewType


@dataclass(frozen=True)
class Symbol:
    """Reference into the evaluator's symbol table, by position."""
    index: int

    def __repr__(self):
        return f"Symbol({self.index})"


@dataclass(frozen=True)
class Tree:
    """Composite value.  Reserved: no instruction constructs or consumes it yet."""
    children: tuple = ()          # tuple[Value, ...]

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))


# Closed set of value kinds; evaluator code matches exhaustively over these.
Value = Symbol | Tree


@dataclass(frozen=True)
class Push:
    symbol_idx: int


@dataclass(frozen=True)
class Permute:
    pop: int
    push: tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'push', tuple(self.push))


# Closed set of instruction kinds.
Instruction = Push | Permute

INT32_MIN, INT32_MAX = -2**31, 2**31 - 1

# Integer parameter that listings may also spell as a declared symbol name.
SymbolIndex = NewType("SymbolIndex", int)


@dataclass(frozen=True)
class Module:
    name: str                     # `package` identifier
    symbols: tuple[str, ...]      # symbol table, in declaration order
    meta: dict = field(default_factory=dict, compare=False)  # filename, lines, etc.

    def index_of(self, name: str) -> int | None:
        try:
            return self.symbols.index(name)
        except ValueError:
            return None

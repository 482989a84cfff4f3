## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Caller-side constructors.  The evaluator only knows `Push` and `Permute`; every
# stack shuffle below is spelled as a (pop, push) pair for the single permute primitive.
#

from .types import Push, Permute, SymbolIndex
from .errors import StalogValueError


def _window_size(n: int, name: str) -> int:
    if n < 0:
        raise StalogValueError(f"`{name}` needs a non-negative window size, got {n}.", stalog_token=name)
    return n

## PRIMITIVES
def op_push(symbol_idx: SymbolIndex) -> Push: return Push(symbol_idx)
def op_permute(pop: int, push: list) -> Permute: return Permute(pop, tuple(push))
## STACK SHUFFLES
def op_pop() -> Permute: return Permute(1, ())
def op_swap() -> Permute: return Permute(2, (0, 1))
def op_dup() -> Permute: return Permute(1, (0, 0))

def op_identity(n: int) -> Permute:
    n = _window_size(n, 'identity')
    return Permute(n, tuple(range(n - 1, -1, -1)))

def op_rotate_right(n: int) -> Permute:
    """Top element moves to the bottom of the window: A B C -> C A B."""
    n = _window_size(n, 'rotate-right')
    return Permute(n, (0,) + tuple(range(n - 1, 0, -1))) if n else Permute(0, ())

def op_rotate_left(n: int) -> Permute:
    """Bottom element of the window moves to the top: A B C -> B C A."""
    n = _window_size(n, 'rotate-left')
    return Permute(n, tuple(range(n - 2, -1, -1)) + (n - 1,)) if n else Permute(0, ())

## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from stalog import operators as O
from stalog.types import Push, Permute
from stalog.errors import StalogNameError, StalogValueError, StalogModuleError
from stalog.builtins import load_builtins, get_listing_name, get_python_name
from stalog.evaluator import Evaluator


def _run(*instructions, symbols="ABCDE", start=(0, 1, 2, 3)):
    ev = Evaluator(list(symbols))
    for i in start:
        ev.execute(Push(i))
    for ins in instructions:
        ev.execute(ins)
    return ''.join(symbols[v.index] for v in ev.stack)


def test_shuffles_build_expected_permutes():
    assert O.op_pop() == Permute(1, ())
    assert O.op_swap() == Permute(2, (0, 1))
    assert O.op_dup() == Permute(1, (0, 0))
    assert O.op_identity(3) == Permute(3, (2, 1, 0))
    assert O.op_rotate_right(3) == Permute(3, (0, 2, 1))
    assert O.op_rotate_left(3) == Permute(3, (1, 0, 2))
    assert O.op_push(4) == Push(4)
    assert O.op_permute(2, [1, 1]) == Permute(2, (1, 1))


def test_degenerate_window_sizes():
    assert O.op_identity(0) == Permute(0, ())
    assert O.op_rotate_right(0) == Permute(0, ())
    assert O.op_rotate_left(0) == Permute(0, ())
    assert O.op_rotate_right(1) == Permute(1, (0,))
    assert O.op_rotate_left(1) == Permute(1, (0,))


def test_shuffles_on_stack():
    assert _run(O.op_identity(4)) == "ABCD"
    assert _run(O.op_rotate_right(3)) == "ADBC"
    assert _run(O.op_rotate_left(3)) == "ACDB"
    assert _run(O.op_rotate_right(4)) == "DABC"
    assert _run(O.op_rotate_left(4)) == "BCDA"


def test_rotations_are_inverse():
    for n in range(6):
        assert _run(O.op_rotate_right(n), O.op_rotate_left(n), start=range(5)) == "ABCDE"


def test_rotation_repeated_window_size_times_is_identity():
    for n in range(1, 6):
        assert _run(*[O.op_rotate_left(n)] * n, start=range(5)) == "ABCDE"


def test_negative_window_size_is_rejected():
    with pytest.raises(StalogValueError):
        O.op_identity(-1)
    with pytest.raises(StalogValueError):
        O.op_rotate_right(-2)


def test_builtins_registry_names_and_aliases():
    ops = load_builtins()
    assert ops.names() == ['dup', 'identity', 'permute', 'pop', 'push', 'rotate-left', 'rotate-right', 'swap']
    assert ops.get('rotr') is ops.get('rotate-right')
    assert ops.get('drop')() == Permute(1, ())
    assert ops.get('permute').__stalog_meta__['arity'] == 2
    with pytest.raises(StalogNameError):
        ops.get('roll')


def test_listing_names_round_trip():
    assert get_listing_name('op_rotate_right') == 'rotate-right'
    assert get_python_name('rotate-right') == 'op_rotate_right'
    with pytest.raises(StalogModuleError):
        get_listing_name('rotate_right')

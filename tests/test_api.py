## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import stalog.api as S


def test_load_and_run_string():
    module = S.load("package api symbol X symbol Y")
    ev = S.run("push X push Y swap dup", module)
    assert ev.stack == (S.Symbol(1), S.Symbol(0), S.Symbol(0))


def test_assemble_and_apply():
    module = S.load("package api2 symbol X symbol Y")
    program = S.assemble("push Y; permute 1 [0 0 0]", module)
    assert program == [S.Push(1), S.Permute(1, (0, 0, 0))]

    ev = S.evaluator(module)
    for instruction in program:
        S.apply(instruction, ev)
    assert len(ev.stack) == 3


def test_errors_are_exported():
    ev = S.Evaluator(["X"])
    try:
        ev.execute(S.Permute(1, ()))
    except S.StalogEvalError as exc:
        assert isinstance(exc, S.InsufficientStack)
    else:
        raise AssertionError("permute on empty stack should fail")


def test_introspection_helpers():
    ops = S.list_operations()
    assert 'rotate-right' in ops
    assert S.is_instruction(S.instruction('swap'))


def test_api_exports_only_stalog_errors():
    assert S.StalogContractError.__name__ == "StalogContractError"
    assert not hasattr(S, "lark")

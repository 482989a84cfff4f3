## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect

from .types import Module, Instruction, SymbolIndex, INT32_MIN, INT32_MAX
from .errors import StalogNameError, StalogValueError
from .builtins import Operators


def link_module(sections: dict, filename: str | None = None) -> Module:
    """Build the symbol table from parsed declarations; names must be unique within a package."""
    name, meta = sections['package']
    symbols = []
    for symbol, mt in sections['symbols']:
        if symbol in symbols:
            raise StalogNameError(f"Symbol `{symbol}` declared twice in package `{name}`.", stalog_token=symbol, stalog_meta=mt)
        symbols.append(symbol)
    return Module(name=name, symbols=tuple(symbols), meta={'filename': filename, 'lines': meta.get('lines')})


def _int32(token: str, opname: str, meta: dict) -> int:
    value = int(token)
    if not (INT32_MIN <= value <= INT32_MAX):
        raise StalogValueError(f"Argument `{token}` of `{opname}` does not fit in a signed 32-bit integer.",
                               stalog_token=opname, stalog_meta=meta)
    return value


def _expected(param: inspect.Parameter) -> type:
    return list if param.annotation is list else int


def link_program(program: list, module: Module, operators: Operators) -> list[Instruction]:
    output = []
    for opname, args, mt in program:
        fn = operators.get(opname, meta=mt)

        params = list(inspect.signature(fn).parameters.values())
        if len(args) != len(params):
            raise StalogValueError(f"`{opname}` takes {len(params)} argument(s), but {len(args)} given.",
                                   stalog_token=opname, stalog_meta=mt)

        values = []
        for (typ, token, amt), param in zip(args, params):
            if typ == 'SYMBOL_NAME':
                if param.annotation is not SymbolIndex:
                    raise StalogValueError(f"`{opname}` expects {_expected(param).__name__} for `{param.name}`, got symbol `{token}`.",
                                           stalog_token=opname, stalog_meta=amt)
                if (idx := module.index_of(token)) is None:
                    raise StalogNameError(f"Symbol `{token}` not declared in package `{module.name}`.", stalog_token=token, stalog_meta=amt)
                values.append(idx)
            elif typ == 'INTEGER':
                values.append(_int32(token, opname, amt))
            elif typ == 'WINDOW':
                values.append([_int32(t, opname, amt) for t in token])
            else:
                raise NotImplementedError(f"Unexpected argument type `{typ}` from parser.")

        for value, param in zip(values, params):
            expected = _expected(param)
            if not isinstance(value, expected):
                raise StalogValueError(f"`{opname}` expects {expected.__name__} for `{param.name}`, got {type(value).__name__}.",
                                       stalog_token=opname, stalog_meta=mt)

        output.append(fn(*values))
    return output

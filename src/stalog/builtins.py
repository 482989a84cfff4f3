## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from typing import Callable
from dataclasses import dataclass, field

from . import operators
from .errors import StalogNameError, StalogModuleError


def get_python_name(name: str) -> str:
    """Map a listing operator name to its Python function name."""
    return 'op_' + name.replace('-', '_')

def get_listing_name(py_name: str) -> str:
    """Inverse of `get_python_name` for well-formed operator names."""
    if not py_name.startswith("op_"):
        raise StalogModuleError(f"Operator function `{py_name}` requires prefix `op_` by convention.", stalog_token=py_name)
    return py_name[3:].replace('_', '-')


@dataclass
class Operators:
    constructors: dict[str, Callable]
    aliases: dict[str, str] = field(default_factory=dict)

    def add(self, name: str, fn: Callable) -> None:
        fn.__stalog_meta__ = {'arity': len(inspect.signature(fn).parameters), 'name': name}
        self.constructors[name] = fn

    def get(self, name: str, *, meta: dict | None = None) -> Callable:
        resolved_name = self.aliases.get(name, name)
        if (fn := self.constructors.get(resolved_name)) is not None:
            return fn
        raise StalogNameError(f"Operation `{name}` not found.", stalog_token=name, stalog_meta=meta)

    def names(self) -> list[str]:
        return sorted(self.constructors)


def load_builtins() -> Operators:
    aliases = {'drop': 'pop', 'id': 'identity', 'rotr': 'rotate-right', 'rotl': 'rotate-left'}
    ops = Operators(constructors={}, aliases=aliases)

    for k in dir(operators):
        if not k.startswith('op_'): continue
        ops.add(get_listing_name(k), getattr(operators, k))
    return ops

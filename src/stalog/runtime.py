## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .types import Module, Instruction
from .errors import StalogModuleError
from .parser import parse_module, parse_program
from .linker import link_module, link_program
from .builtins import Operators, load_builtins
from .evaluator import Evaluator, interpret
from .loader import find_module_source


class Runtime:
    """Minimal runtime facade focused on embedding: modules in, evaluators out."""

    def __init__(self, operators: Operators | None = None):
        self.operators = operators or load_builtins()
        self.modules: dict[str, Module] = {}

    # Loading ─────────────────────────────────────────────────────────────────────────────────
    def load(self, source: str, filename: str | None = None) -> Module:
        module = link_module(parse_module(source, filename=filename), filename=filename)
        self.modules[module.name] = module
        return module

    def load_module(self, name: str) -> Module:
        if (module := self.modules.get(name)) is not None:
            return module
        if (src := find_module_source(name)) is None:
            raise StalogModuleError(f"Module `{name}` not found.", stalog_token=name)
        module = self.load(src.read_text(encoding="utf-8"), filename=str(src))
        if module.name != name:
            raise StalogModuleError(
                f"Package `{module.name}` declared in `{src}` does not match expected name `{name}`.",
                stalog_token=name, filename=str(src))
        return module

    def _resolve(self, module: Module | str) -> Module:
        return self.load_module(module) if isinstance(module, str) else module

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def instruction(self, name: str, *args) -> Instruction:
        return self.operators.get(name)(*args)

    def assemble(self, listing: str, module: Module | str, filename: str | None = None) -> list[Instruction]:
        return link_program(parse_program(listing, filename=filename), self._resolve(module), self.operators)

    def is_instruction(self, x: Any) -> bool:
        return isinstance(x, Instruction)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def evaluator(self, module: Module | str) -> Evaluator:
        return Evaluator(self._resolve(module).symbols)

    def run(self, listing: str, module: Module | str, evaluator: Evaluator | None = None,
            filename: str | None = None, verbosity: int = 0, stats: dict | None = None) -> Evaluator:
        module = self._resolve(module)
        program = self.assemble(listing, module, filename=filename)
        evaluator = evaluator if evaluator is not None else self.evaluator(module)
        return interpret(program, evaluator, verbosity=verbosity, stats=stats)

    def can_step(self, instruction: Instruction, evaluator: Evaluator) -> tuple[bool, str]:
        return evaluator.can_execute(instruction)

    def apply(self, instruction_or_name: Instruction | str, evaluator: Evaluator, *args) -> Evaluator:
        instruction = instruction_or_name if self.is_instruction(instruction_or_name) else self.instruction(instruction_or_name, *args)
        evaluator.execute(instruction)
        return evaluator

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def list_operations(self) -> dict[str, dict]:
        return {n: self.operators.get(n).__stalog_meta__ for n in self.operators.names()}

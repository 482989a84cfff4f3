## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import collections
from typing import Iterable, Sequence

from .types import Symbol, Push, Permute, Instruction, Value
from .errors import StalogContractError, InvalidSymbolIndex, InsufficientStack, InvalidWindowIndex
from .formatting import show_program_and_stack


def _require_int(instruction, value) -> None:
    if type(value) is not int:
        raise StalogContractError(f"Instruction `{instruction!r}` carries non-integer operand {value!r}.",
                                  stalog_instruction=instruction)


class Evaluator:
    """Executes instructions one at a time over a value stack, for a fixed symbol table.

    Every instruction is fully validated before the stack is touched, so a failing
    `execute` leaves both `stack` and `log` exactly as they were before the call.
    """

    def __init__(self, symbols: Sequence[str]):
        self.symbols: tuple[str, ...] = tuple(symbols)
        self._stack: list[Value] = []
        self._log: list[Value] = []

    @property
    def stack(self) -> tuple[Value, ...]:
        return tuple(self._stack)

    @property
    def log(self) -> tuple[Value, ...]:
        return tuple(self._log)

    def __repr__(self):
        return f"Evaluator(symbols={len(self.symbols)}, stack={self._stack!r})"

    # Validation ──────────────────────────────────────────────────────────────────────────────
    def check(self, instruction: Instruction) -> None:
        """Raise the error `execute` would raise for this instruction, without mutating anything."""
        match instruction:
            case Push(symbol_idx=idx):
                _require_int(instruction, idx)
                if not (0 <= idx < len(self.symbols)):
                    raise InvalidSymbolIndex(idx, len(self.symbols), stalog_instruction=instruction, stalog_stack=self.stack)
            case Permute(pop=pop, push=push):
                for idx in (pop, *push):
                    _require_int(instruction, idx)
                if pop < 0:
                    raise InvalidWindowIndex(None, pop, stalog_instruction=instruction, stalog_stack=self.stack)
                if len(self._stack) < pop:
                    raise InsufficientStack(pop, len(self._stack), stalog_instruction=instruction, stalog_stack=self.stack)
                for idx in push:
                    if not (0 <= idx < pop):
                        raise InvalidWindowIndex(idx, pop, stalog_instruction=instruction, stalog_stack=self.stack)
            case _:
                # Producers only emit the known variants; anything else is a bug upstream
                # and must abort instead of being reported as an ordinary evaluation error.
                raise StalogContractError(f"Unknown instruction `{instruction!r}` of type {type(instruction).__name__}.",
                                          stalog_instruction=instruction)

    def can_execute(self, instruction: Instruction) -> tuple[bool, str]:
        try:
            self.check(instruction)
        except (InvalidSymbolIndex, InsufficientStack, InvalidWindowIndex) as exc:
            return False, str(exc)
        return True, ""

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def execute(self, instruction: Instruction) -> None:
        self.check(instruction)

        match instruction:
            case Push(symbol_idx=idx):
                self._stack.append(Symbol(idx))
            case Permute(pop=pop, push=push):
                # Window is addressed from the top: window[0] is the current top element.
                pushes = [self._stack[len(self._stack) - 1 - idx] for idx in push]
                del self._stack[len(self._stack) - pop:]
                self._stack.extend(pushes)


def interpret(program: Iterable[Instruction], evaluator: Evaluator, verbosity=0, stats=None) -> Evaluator:
    program = collections.deque(program)

    step = 0
    while program:
        if verbosity == 2 or (verbosity == 1 and step == 0):
            print(f"\033[90m{step:>3} :\033[0m  ", end='')
            show_program_and_stack(program, evaluator.stack, evaluator.symbols)

        instruction = program[0]
        try:
            evaluator.execute(instruction)
        except Exception as exc:
            exc.stalog_instruction = instruction
            exc.stalog_step = step
            exc.stalog_stack = evaluator.stack
            raise
        program.popleft()
        step += 1

    if verbosity > 0:
        print(f"\033[90m{step:>3} :\033[0m  ", end='')
        show_program_and_stack(program, evaluator.stack, evaluator.symbols)
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step

    return evaluator

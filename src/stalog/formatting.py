## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Symbol, Tree, Push, Permute


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def format_value(value, symbols=None) -> str:
    if isinstance(value, Symbol):
        if symbols is not None and 0 <= value.index < len(symbols):
            return symbols[value.index]
        return f"#{value.index}"
    if isinstance(value, Tree):
        return '(' + ' '.join(format_value(c, symbols) for c in value.children) + ')'
    return str(value)

def format_instruction(instruction, symbols=None) -> str:
    match instruction:
        case Push(symbol_idx=idx):
            name = symbols[idx] if symbols is not None and 0 <= idx < len(symbols) else str(idx)
            return f"push {name}"
        case Permute(pop=pop, push=push):
            return f"permute {pop} [" + ' '.join(str(i) for i in push) + "]"
    return repr(instruction)

def format_stack(stack, symbols=None) -> str:
    return ' '.join(format_value(v, symbols) for v in stack) if stack else '∅'

def show_stack(stack, symbols=None, width=72, end='\n', file=None):
    stack_str = format_stack(stack, symbols)
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_program_and_stack(program, stack, symbols=None, width=72):
    prog_str = ' ; '.join(format_instruction(p, symbols) for p in program) if program else '∅'
    if len(prog_str) > width:
        prog_str = prog_str[:+width-2] + ' …'
    show_stack(stack, symbols, end='')
    print(f" \033[36m <=> \033[0m {prog_str:<{width}}")

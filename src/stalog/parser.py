## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import functools

import lark
from .errors import StalogParseError, StalogIncompleteParse


GRAMMAR = r"""module: PACKAGE identifier definition*
?definition: symbol_def
symbol_def: SYMBOL SYMBOL_NAME
?identifier: SYMBOL_NAME | DEF_NAME

program: (instruction SEPARATOR?)*
instruction: OPNAME argument*
?argument: INTEGER | SYMBOL_NAME | window
window: LSQB INTEGER* RSQB

// TOKENS
PACKAGE.2: "package"
SYMBOL.2: "symbol"
SYMBOL_NAME: /[A-Z][A-Za-z0-9]*/
DEF_NAME: /[a-z][A-Za-z0-9]*/
OPNAME: /[a-z][a-z0-9]*(?:-[a-z0-9]+)*/
INTEGER: /-?\d+/
SEPARATOR: ";"
LSQB: "["
RSQB: "]"

// COMMENTS & WHITESPACE
COMMENT: /#[^\n]*/
%import common.WS
%ignore WS
%ignore COMMENT
"""


@functools.lru_cache(maxsize=None)
def _get_parser(start: str) -> lark.Lark:
    return lark.Lark(GRAMMAR, start=start, parser="lalr", lexer="contextual", propagate_positions=True)


def _token_meta(token: lark.Token, filename) -> dict:
    if not hasattr(token, 'line'): return {'filename': filename}
    return {'filename': filename, 'lines': (token.line, token.end_line), 'columns': (token.column, token.end_column)}


def syntax_tree(source: str, start='module', filename=None) -> lark.Tree:
    try:
        return _get_parser(start).parse(source)
    except (lark.exceptions.ParseError, lark.exceptions.UnexpectedCharacters) as exc:
        def attr(k): return getattr(exc, k, None)
        token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''
        error_class = StalogIncompleteParse if token_val == '' and not isinstance(exc, lark.exceptions.UnexpectedCharacters) else StalogParseError
        if isinstance(exc, lark.exceptions.UnexpectedCharacters):
            token_val = source[exc.pos_in_stream:exc.pos_in_stream+1]
        raise error_class(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None


def parse_module(source: str, filename=None) -> dict:
    """Parse `package` header and `symbol` declarations into plain data for the linker."""
    tree = syntax_tree(source, start='module', filename=filename)
    name_token = tree.children[1]
    sections = {'package': (name_token.value, _token_meta(name_token, filename)), 'symbols': []}
    for node in tree.children[2:]:
        assert isinstance(node, lark.Tree) and node.data == 'symbol_def'
        _, name = node.children
        sections['symbols'].append((name.value, _token_meta(name, filename)))
    return sections


def parse_program(source: str, filename=None) -> list[tuple[str, list, dict]]:
    """Parse an instruction listing into `(opname, arguments, meta)` triples.

    Each argument is a `(type, value, meta)` triple, where type is `INTEGER`, `SYMBOL_NAME`
    or `WINDOW` (whose value is the list of integer strings between brackets).
    """
    tree = syntax_tree(source, start='program', filename=filename)

    def _argument(node):
        if isinstance(node, lark.Token):
            return (node.type, node.value, _token_meta(node, filename))
        assert node.data == 'window'
        lsqb = node.children[0]
        return ('WINDOW', [t.value for t in node.children if t.type == 'INTEGER'], _token_meta(lsqb, filename))

    program = []
    for node in tree.children:
        if isinstance(node, lark.Token): continue  # SEPARATOR
        opname, *args = node.children
        program.append((opname.value, [_argument(a) for a in args], _token_meta(opname, filename)))
    return program


def format_source_lines(meta: dict, identifier: str, source: str | None = None) -> str:
    filename, (line, _) = meta.get('filename'), meta.get('lines', (None, None))
    header = f"\033[97m  File \"{filename}\", line {line if line else '?'}, in {identifier}\033[0m\n"
    if source is None and filename is not None and os.path.isfile(filename):
        with open(filename, 'r', encoding='utf-8') as f:
            source = f.read()
    if source is None or line is None: return header
    text = source.split('\n')[line-1]
    text = text.replace(identifier, f"\033[48;5;30m\033[1;97m{identifier}\033[0m", 1)
    return header + '    ' + text.strip() + '\n'


def format_parse_error_context(filename, line, column, token_value, source=None):
    if source is not None:
        lines = source.splitlines(keepends=True)
    else:
        with open(filename, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    line = line or len(lines)
    column = column or 0
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'

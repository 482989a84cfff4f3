## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# stalog — A tiny stack evaluator with a single generalized permute primitive.
#

import sys
import time
from dataclasses import dataclass

import click

from .types import Module
from .errors import StalogError, StalogParseError, StalogNameError, StalogValueError, \
                    StalogEvalError, StalogContractError, StalogModuleError
from .evaluator import Evaluator
from .parser import syntax_tree, format_parse_error_context, format_source_lines
from .formatting import write_without_ansi, format_instruction, format_stack

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class StalogRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, symbols=None, is_repl: bool = False) -> None:
        if isinstance(exc, StalogParseError):
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, (StalogNameError, StalogValueError)):
            detail = f"Term `\033[1;97m{exc.stalog_token}\033[0m` from `\033[97m{filename}\033[0m` could not be linked: {exc}"
            context = '\n' + format_source_lines(exc.stalog_meta or {'filename': filename}, exc.stalog_token or '', source=source)
            self._maybe_fatal_error("LINKER ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, StalogModuleError):
            detail = f"Loading module failed while resolving `{exc.stalog_token}`: \033[97m{exc.filename}\033[0m"
            self._maybe_fatal_error("IMPORT ERROR.", detail, type(exc).__name__, str(exc) + '\n', is_repl)
        elif isinstance(exc, StalogEvalError):
            step = getattr(exc, 'stalog_step', '?')
            detail = f"Instruction \033[1;97m`{format_instruction(exc.stalog_instruction, symbols)}`\033[0m at step {step} was rejected: {exc}"
            context = f'\033[1;33m  Stack content is\033[0;33m\n    {format_stack(exc.stalog_stack or (), symbols)}\033[0m\n'
            self._maybe_fatal_error("EVALUATION ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, StalogContractError):
            # Malformed instructions are a producer bug: never ignored, not even in the REPL.
            print(f'\033[30;43m CONTRACT VIOLATION. \033[0m {exc}', file=sys.stderr)
            sys.exit(1)
        else:
            raise exc

    def load_module(self, filename: str | None, source: str | None, name: str | None) -> Module | None:
        try:
            if name is not None:
                return self.runtime.load_module(name)
            return self.runtime.load(source, filename=filename)
        except StalogError as exc:
            self._handle_exception(exc, filename or f'<MOD:{name}>', source, is_repl=False)
            return None

    def execute_items(self, items: list[ExecutionItem], module: Module, evaluator: Evaluator) -> None:
        for item in items:
            self._execute_listing(item.source, item.filename, module, evaluator)

    def _execute_listing(self, source: str, filename: str, module: Module, evaluator: Evaluator, is_repl: bool = False) -> None:
        try:
            self.runtime.run(source, module, evaluator=evaluator, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        except StalogError as exc:
            self._handle_exception(exc, filename, source, symbols=module.symbols, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self, module: Module, evaluator: Evaluator) -> None:
        if sys.platform != "win32": import readline

        print(f'stalog - Stack evaluator REPL for package `{module.name}`; type Ctrl+C to exit.')
        while True:
            try:
                line = input("\033[36m<<< \033[0m")
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                self._execute_listing(line, '<REPL>', module, evaluator, is_repl=True)
                print("\033[90m>>>\033[0m", format_stack(evaluator.stack, module.symbols))
            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _inline_command_source(index: int, command: str) -> ExecutionItem:
    return ExecutionItem(command.rstrip() + '\n', f'<INPUT_{index}>')


def _open_module(runner: StalogRunner, module_file, module_name: str | None) -> Module | None:
    if module_file is None and module_name is None:
        raise click.UsageError("Expected a module file or `-m NAME`.")
    source = module_file.read() if module_file is not None else None
    filename = (module_file.name or '<STDIN>') if module_file is not None else None
    return runner.load_module(filename, source, module_name)


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--verbose', '-v', default=0, count=True, help='Trace evaluator execution; repeat for every step.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore evaluation errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain)


@cli.command('parse')
@click.argument('module_file', type=click.File('r', encoding='utf-8'))
@click.pass_context
def parse_command(ctx: click.Context, module_file) -> None:
    runner = StalogRunner(ctx.obj['config'])
    source, filename = module_file.read(), module_file.name or '<STDIN>'
    try:
        print(syntax_tree(source, filename=filename).pretty(), end='')
    except StalogError as exc:
        runner._handle_exception(exc, filename, source)
        ctx.exit(runner.finalize())

    if (module := runner.load_module(filename, source, None)) is not None:
        print(f"\033[97mpackage\033[0m {module.name}")
        for idx, name in enumerate(module.symbols):
            print(f"\033[90m{idx:>5} |\033[0m {name}")
    ctx.exit(runner.finalize())


@cli.command('run')
@click.argument('module_file', type=click.File('r', encoding='utf-8'), required=False)
@click.argument('listings', type=click.File('r', encoding='utf-8'), nargs=-1)
@click.option('--module', '-m', 'module_name', default=None, help='Load package NAME from STALOG_PATH instead of a file.')
@click.option('--command', '-c', 'commands', multiple=True, help='Inline instruction listing, run after listing files.')
@click.pass_context
def run_command(ctx: click.Context, module_file, listings, module_name: str | None, commands: tuple[str, ...]) -> None:
    runner = StalogRunner(ctx.obj['config'])
    if module_name is not None and module_file is not None:
        # With `-m`, the first positional argument is already a listing.
        listings, module_file = (module_file, *listings), None
    if (module := _open_module(runner, module_file, module_name)) is None:
        ctx.exit(runner.finalize())

    items = [ExecutionItem(f.read(), f.name or '<STDIN>') for f in listings]
    items += [_inline_command_source(i, c) for i, c in enumerate(commands, start=1)]
    if not items and not sys.stdin.isatty():
        items.append(ExecutionItem(sys.stdin.read(), '<STDIN>'))

    evaluator = runner.runtime.evaluator(module)
    runner.execute_items(items, module, evaluator)
    print(format_stack(evaluator.stack, module.symbols))
    ctx.exit(runner.finalize())


@cli.command('repl')
@click.argument('module_file', type=click.File('r', encoding='utf-8'), required=False)
@click.option('--module', '-m', 'module_name', default=None, help='Load package NAME from STALOG_PATH instead of a file.')
@click.pass_context
def repl_command(ctx: click.Context, module_file, module_name: str | None) -> None:
    runner = StalogRunner(ctx.obj['config'])
    if (module := _open_module(runner, module_file, module_name)) is None:
        ctx.exit(runner.finalize())
    runner.repl(module, runner.runtime.evaluator(module))
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=argv, prog_name='stalog')


if __name__ == "__main__":
    main()

## stalog — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def run_cli(*cli_args: str | Path, env: dict | None = None, extra_args: list[str] | None = None,
            stdin: str | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "stalog", "--plain"]
    if extra_args:
        args.extend(extra_args)
    args.extend(str(arg) for arg in cli_args)
    merged_env = os.environ.copy()
    if env:
        merged_env.update(env)
    return subprocess.run(args, input=stdin, capture_output=True, text=True, env=merged_env)


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _strip_output_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.strip()]


def _letters(tmp_path: Path) -> Path:
    path = tmp_path / "letters.stalog"
    path.write_text("package letters\nsymbol A\nsymbol B\nsymbol C\nsymbol D\nsymbol E\n", encoding="utf-8")
    return path


def test_cli_parse_prints_syntax_tree_and_symbols():
    result = run_cli("parse", repo_root() / "libs" / "peano.stalog")
    assert result.returncode == 0
    out = result.stdout
    assert out.startswith("module")
    assert "symbol_def" in out
    assert "package peano" in out
    assert "0 | Z" in out and "1 | S" in out


def test_cli_parse_syntax_error_shows_context(tmp_path: Path):
    bad = tmp_path / "bad.stalog"
    bad.write_text("package foo\nsymbol lower\n", encoding="utf-8")
    result = run_cli("parse", bad)
    assert result.returncode != 0
    out = result.stdout
    assert "SYNTAX ERROR." in out
    assert "File \"" in out
    assert "2 | symbol lower" in out


def test_cli_run_inline_commands(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push A; push B", "-c", "swap")
    assert result.returncode == 0
    assert _strip_output_lines(result.stdout) == ["B A"]


def test_cli_run_listing_file_then_commands(tmp_path: Path):
    listing = tmp_path / "roll.stasm"
    listing.write_text("push A push B push C push D\n# roll right\nrotr 3\n", encoding="utf-8")
    result = run_cli("run", _letters(tmp_path), listing, "-c", "rotr 3")
    assert result.returncode == 0
    assert _strip_output_lines(result.stdout) == ["A C D B"]


def test_cli_run_listing_from_stdin(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), stdin="push B dup\n")
    assert result.returncode == 0
    assert _strip_output_lines(result.stdout) == ["B B"]


def test_cli_run_module_by_name():
    env = {"STALOG_PATH": str(repo_root() / "libs")}
    result = run_cli("run", "-m", "peano", "-c", "push Z push S swap", env=env)
    assert result.returncode == 0
    assert _strip_output_lines(result.stdout) == ["S Z"]


def test_cli_run_evaluation_error_sets_retcode(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push A push B push C push D permute 3 [2 3 0]")
    assert result.returncode != 0
    out = result.stdout
    assert "EVALUATION ERROR." in out
    assert "InvalidWindowIndex" in out
    assert "permute 3 [2 3 0]" in out
    assert "A B C D" in out


def test_cli_run_ignore_continues_after_error(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push 10", "-c", "push E", extra_args=["--ignore"])
    assert result.returncode == 1
    out = result.stdout
    assert "EVALUATION ERROR." in out
    assert "InvalidSymbolIndex" in out
    assert _strip_output_lines(out)[-1] == "E"


def test_cli_run_linker_error(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push A roll 3")
    assert result.returncode != 0
    out = result.stdout
    assert "LINKER ERROR." in out
    assert "roll" in out


def test_cli_run_missing_module(tmp_path: Path):
    env = {"STALOG_PATH": str(tmp_path / "does-not-exist")}
    result = run_cli("run", "-m", "nosuchmodule", "-c", "pop", env=env)
    assert result.returncode != 0
    assert "IMPORT ERROR." in result.stdout


def test_cli_run_stats(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push A dup dup", extra_args=["--stats"])
    assert result.returncode == 0
    out = result.stdout
    assert "STATISTICS." in out
    assert "step\t3" in out


def test_cli_run_verbose_traces_steps(tmp_path: Path):
    result = run_cli("run", _letters(tmp_path), "-c", "push A dup", extra_args=["-vv"])
    assert result.returncode == 0
    out = result.stdout
    assert "<=>" in out
    assert "push A ; permute 1 [0 0]" in out


def test_cli_repl_keeps_state_across_errors(tmp_path: Path):
    result = run_cli("repl", _letters(tmp_path), stdin="push A\nswap\npush C\n")
    assert result.returncode == 1
    out = result.stdout
    assert "EVALUATION ERROR." in out
    assert ">>> A C" in out

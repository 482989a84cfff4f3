## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
from pathlib import Path


MODULE_SUFFIX = '.stalog'


def _resolve_stalog_paths() -> list[Path]:
    parts = [p for p in os.environ.get("STALOG_PATH", "").split(os.pathsep) if p]
    return [Path(os.path.expanduser(os.path.expandvars(p))) for p in parts]


def iter_module_candidates(module_name: str):
    """Resolution order: STALOG_PATH first, then 'libs' paths relative to distribution."""
    for root in _resolve_stalog_paths():
        yield root / f"{module_name}{MODULE_SUFFIX}"
    base = Path(__file__).resolve().parent
    for d in (base, *base.parents[:2]):
        yield d / 'libs' / f"{module_name}{MODULE_SUFFIX}"


def find_module_source(module_name: str) -> Path | None:
    return next((p for p in iter_module_candidates(module_name) if p.is_file()), None)

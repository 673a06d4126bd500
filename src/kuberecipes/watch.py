from __future__ import annotations

import sys
import time
from collections.abc import Callable
from pathlib import Path

from .config import EffectiveConfig
from .corpus import recipe_paths
from .errors import MissingFileError, WatchError
from .lint import LintReport, lint_corpus
from .paths import resolve_site_paths


def watch_corpus(
    cfg: EffectiveConfig,
    debounce_ms: int,
    verbose: bool,
    max_cycles: int | None = None,
    emit: Callable[[str], None] = print,
) -> None:
    recipes_dir = resolve_site_paths(cfg).recipes_dir
    if not recipes_dir.exists():
        raise MissingFileError(f"Recipes directory not found: {recipes_dir}")

    mtimes = _snapshot_mtimes(recipe_paths(recipes_dir))
    cycles = 0

    while True:
        time.sleep(debounce_ms / 1000.0)
        current = recipe_paths(recipes_dir)
        if _changed(mtimes, current):
            if verbose:
                print(f"change detected in {recipes_dir}", file=sys.stderr)
            try:
                report = lint_corpus(cfg)
            except Exception as exc:
                raise WatchError(str(exc)) from exc
            _emit_report(report, emit)
            mtimes = _snapshot_mtimes(recipe_paths(recipes_dir))

        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break


def _emit_report(report: LintReport, emit: Callable[[str], None]) -> None:
    for line in report.format_lines():
        emit(line)
    emit(report.summary())


def _snapshot_mtimes(paths: list[Path]) -> dict[Path, float]:
    mtimes: dict[Path, float] = {}
    for path in paths:
        try:
            mtimes[path] = path.stat().st_mtime
        except OSError:
            continue
    return mtimes


def _changed(mtimes: dict[Path, float], current: list[Path] | None = None) -> bool:
    if current is not None and set(current) != set(mtimes):
        return True
    for path, old in mtimes.items():
        try:
            if path.stat().st_mtime != old:
                return True
        except OSError:
            return True
    return False

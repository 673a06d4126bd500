from __future__ import annotations

import os
from pathlib import Path
import time

import pytest

from kuberecipes.config import resolve_config
from kuberecipes.errors import MissingFileError, WatchError
from kuberecipes.watch import _changed, _snapshot_mtimes, watch_corpus
from tests.utils import make_site, recipe_md


def test_changed_detection(tmp_path: Path) -> None:
    recipes_dir = make_site(tmp_path, {"a.md": recipe_md("A")})
    path = recipes_dir / "a.md"
    mtimes = _snapshot_mtimes([path])
    assert _changed(mtimes, [path]) is False
    time.sleep(0.01)
    path.write_text(recipe_md("A2"), encoding="utf-8")
    later = path.stat().st_mtime + 5
    os.utime(path, (later, later))
    assert _changed(mtimes, [path]) is True


def test_changed_detection_added_and_missing(tmp_path: Path) -> None:
    recipes_dir = make_site(tmp_path, {"a.md": recipe_md("A")})
    path = recipes_dir / "a.md"
    mtimes = _snapshot_mtimes([path])
    assert _changed(mtimes, [path, recipes_dir / "b.md"]) is True
    assert _changed({tmp_path / "missing.md": 0.0}) is True


def test_watch_corpus_single_cycle_no_change(tmp_path: Path, temp_home: Path) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A")})
    cfg = resolve_config({"project": str(tmp_path)})
    lines: list[str] = []
    watch_corpus(cfg, debounce_ms=1, verbose=False, max_cycles=1, emit=lines.append)
    assert lines == []


def test_watch_corpus_missing_dir(tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"project": str(tmp_path)})
    with pytest.raises(MissingFileError):
        watch_corpus(cfg, debounce_ms=1, verbose=False, max_cycles=1)


def test_watch_corpus_change_relints(tmp_path: Path, temp_home: Path, monkeypatch) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A", related=["ghost"])})
    cfg = resolve_config({"project": str(tmp_path)})
    monkeypatch.setattr("kuberecipes.watch._changed", lambda mtimes, current=None: True)
    lines: list[str] = []
    watch_corpus(cfg, debounce_ms=1, verbose=True, max_cycles=1, emit=lines.append)
    assert any("[related-missing]" in line for line in lines)
    assert lines[-1] == "1 file(s) checked, 1 error(s), 0 warning(s)"


def test_watch_corpus_lint_error(tmp_path: Path, temp_home: Path, monkeypatch) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A")})
    cfg = resolve_config({"project": str(tmp_path)})

    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("kuberecipes.watch.lint_corpus", boom)
    monkeypatch.setattr("kuberecipes.watch._changed", lambda mtimes, current=None: True)
    with pytest.raises(WatchError):
        watch_corpus(cfg, debounce_ms=1, verbose=False, max_cycles=1)


class _VanishedPath:
    def stat(self):
        raise FileNotFoundError("gone")


def test_changed_detection_file_removed_during_check() -> None:
    assert _changed({_VanishedPath(): 1.0}) is True

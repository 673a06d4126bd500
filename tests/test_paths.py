from __future__ import annotations

from pathlib import Path

from kuberecipes.config import resolve_config
from kuberecipes.paths import resolve_site_paths


def test_resolve_site_paths_relative(temp_home: Path, tmp_path: Path) -> None:
    cfg = resolve_config({"project": str(tmp_path)})
    paths = resolve_site_paths(cfg)
    assert paths.site_root == tmp_path
    assert paths.recipes_dir == tmp_path / "src" / "content" / "recipes"
    assert paths.build_dir == tmp_path / "build"
    assert paths.index_path == tmp_path / "build" / "recipes.json"


def test_resolve_site_paths_separate_site_root(temp_home: Path, tmp_path: Path) -> None:
    site = tmp_path / "site"
    project = tmp_path / "project"
    cfg = resolve_config({"project": str(project), "site_root": str(site), "content_dir": "recipes"})
    paths = resolve_site_paths(cfg)
    assert paths.recipes_dir == site / "recipes"
    assert paths.build_dir == project / "build"


def test_resolve_site_paths_absolute(temp_home: Path, tmp_path: Path) -> None:
    out = tmp_path / "elsewhere"
    cfg = resolve_config({"project": str(tmp_path), "build_dir": str(out)})
    paths = resolve_site_paths(cfg)
    assert paths.build_dir == out
    assert paths.index_path == out / "recipes.json"

from __future__ import annotations

import json
from pathlib import Path

import pytest

from kuberecipes.config import resolve_config
from kuberecipes.errors import ValidationError
from kuberecipes.site_index import build_index, recipe_url
from tests.utils import make_site, recipe_md


def test_recipe_url() -> None:
    assert recipe_url("https://kubernetes.recipes/", "security", "rbac") == "https://kubernetes.recipes/recipes/security/rbac/"
    assert recipe_url("http://localhost:4321", "helm", "a/b") == "http://localhost:4321/recipes/helm/a/b/"


def test_build_index_writes_json(example_site: Path, tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"site_root": str(example_site), "project": str(tmp_path)})
    result = build_index(cfg)
    assert result.path == tmp_path / "build" / "recipes.json"
    assert result.count == 3

    data = json.loads(result.path.read_text(encoding="utf-8"))
    slugs = [entry["slug"] for entry in data["recipes"]]
    assert slugs == ["alertmanager-config", "cert-manager-setup", "rbac-least-privilege"]

    first = data["recipes"][0]
    assert first["url"] == "https://kubernetes.recipes/recipes/observability/alertmanager-config/"
    assert first["backlinks"] == ["cert-manager-setup"]
    assert first["sections"] == ["The Problem", "The Solution", "Key Takeaways"]
    assert first["timeToComplete"] == "30 minutes"

    cert = data["recipes"][1]
    assert cert["publishDate"] == "2024-02-10"
    assert cert["updatedDate"] == "2024-05-01"
    assert cert["author"] == "Luca Berton"

    assert data["categories"] == {
        "observability": ["alertmanager-config"],
        "security": ["cert-manager-setup", "rbac-least-privilege"],
    }
    assert data["tags"]["security"] == ["rbac-least-privilege"]


def test_build_index_drafts_and_dry_run(example_site: Path, tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"site_root": str(example_site), "project": str(tmp_path)})
    result = build_index(cfg, include_drafts=True, dry_run=True)
    assert result.count == 4
    assert not result.path.exists()
    assert result.data["recipes"][0]["slug"] == "gateway-api-draft"


def test_build_index_rejects_invalid_recipe(tmp_path: Path, temp_home: Path) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A", related=["ghost"])})
    cfg = resolve_config({"project": str(tmp_path)})
    with pytest.raises(ValidationError):
        build_index(cfg, dry_run=True)


def test_build_index_rejects_unparseable_recipe(tmp_path: Path, temp_home: Path) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A"), "b.md": "no frontmatter\n"})
    cfg = resolve_config({"project": str(tmp_path)})
    with pytest.raises(ValidationError):
        build_index(cfg, dry_run=True)


def test_build_index_rejects_slug_collisions(tmp_path: Path, temp_home: Path) -> None:
    make_site(tmp_path, {"a.md": recipe_md("A"), "a.mdx": recipe_md("A mdx")})
    cfg = resolve_config({"project": str(tmp_path)})
    with pytest.raises(ValidationError, match="duplicate-slug"):
        build_index(cfg, dry_run=True)

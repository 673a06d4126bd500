from __future__ import annotations

from pathlib import Path

from kuberecipes.config import resolve_config
from kuberecipes.listing import list_recipes
from tests.utils import make_site, recipe_md


def test_list_recipes_filters(example_site: Path, tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"site_root": str(example_site), "project": str(tmp_path)})
    all_recipes = list_recipes(cfg, None, None)
    assert [rec["slug"] for rec in all_recipes] == [
        "alertmanager-config",
        "cert-manager-setup",
        "rbac-least-privilege",
    ]
    assert len(list_recipes(cfg, None, None, include_drafts=True)) == 4
    assert len(list_recipes(cfg, "security", None)) == 1
    assert len(list_recipes(cfg, None, "SECURITY")) == 2
    assert len(list_recipes(cfg, None, None, "beginner")) == 1
    assert len(list_recipes(cfg, None, None, "intermediate")) == 1


def test_list_recipes_entry_shape(example_site: Path, tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"site_root": str(example_site), "project": str(tmp_path)})
    rec = list_recipes(cfg, "tls", None)[0]
    assert rec["title"] == "Issue TLS Certificates with cert-manager"
    assert rec["difficulty"] == "beginner"
    assert rec["publishDate"] == "2024-02-10"
    assert rec["draft"] is False
    assert rec["path"].endswith("cert-manager-setup.md")


def test_list_recipes_missing_dir(tmp_path: Path, temp_home: Path) -> None:
    cfg = resolve_config({"project": str(tmp_path)})
    assert list_recipes(cfg, None, None) == []


def test_list_recipes_skips_bad_files(tmp_path: Path, temp_home: Path) -> None:
    make_site(
        tmp_path,
        {
            "no-frontmatter.md": "# Hi\n",
            "bad-yaml.md": "---\n[bad\n---\n",
            "list-frontmatter.md": "---\n- a\n---\n",
        },
    )
    cfg = resolve_config({"project": str(tmp_path)})
    assert list_recipes(cfg, None, None) == []


def test_list_recipes_tags_string(tmp_path: Path, temp_home: Path) -> None:
    make_site(tmp_path, {"tag.md": recipe_md().replace("tags:\n  - testing", "tags: helm")})
    cfg = resolve_config({"project": str(tmp_path)})
    assert len(list_recipes(cfg, "helm", None)) == 1


def test_list_recipes_stringifies_yaml_scalars(tmp_path: Path, temp_home: Path) -> None:
    make_site(
        tmp_path,
        {"dated.md": "---\ntitle: 2024-01-01\ncategory: 42\ntags: [a]\npublishDate: 2024-01-01\n---\nbody\n"},
    )
    cfg = resolve_config({"project": str(tmp_path)})
    rec = list_recipes(cfg, None, None)[0]
    assert rec["title"] == "2024-01-01"
    assert rec["category"] == "42"
    assert rec["publishDate"] == "2024-01-01"

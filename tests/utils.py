from __future__ import annotations

from pathlib import Path


def write_global_config(home: Path, content: str) -> Path:
    cfg_dir = home / ".config" / "kuberecipes"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    path = cfg_dir / "config.toml"
    path.write_text(content, encoding="utf-8")
    return path


def write_profile(home: Path, name: str, project: str) -> Path:
    dir_path = home / ".config" / "kuberecipes" / "projects.d"
    dir_path.mkdir(parents=True, exist_ok=True)
    path = dir_path / f"{name}.toml"
    path.write_text(f"project = {project!r}\n", encoding="utf-8")
    return path


def recipe_md(
    title: str = "Test Recipe",
    category: str = "security",
    related: list[str] | None = None,
    extra: str = "",
    body: str = "## Steps\n\n```yaml\nkind: Pod\n```\n",
) -> str:
    lines = [
        "---",
        f"title: {title!r}",
        "description: 'A recipe used in tests.'",
        f"category: {category}",
        "tags:",
        "  - testing",
        "publishDate: '2024-01-01'",
    ]
    if related:
        lines.append("relatedRecipes:")
        lines.extend(f"  - {slug}" for slug in related)
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    lines.append("")
    return "\n".join(lines) + "\n" + body


def make_site(root: Path, recipes: dict[str, str]) -> Path:
    recipes_dir = root / "src" / "content" / "recipes"
    recipes_dir.mkdir(parents=True, exist_ok=True)
    for name, content in recipes.items():
        path = recipes_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return recipes_dir

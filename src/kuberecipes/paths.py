from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import EffectiveConfig


@dataclass(frozen=True)
class SitePaths:
    site_root: Path
    recipes_dir: Path
    build_dir: Path
    index_path: Path


def resolve_site_paths(cfg: EffectiveConfig) -> SitePaths:
    root = Path(cfg.site_root)
    build_dir = _resolve_dir(Path(cfg.project_dir), Path(cfg.build_dir))
    return SitePaths(
        site_root=root,
        recipes_dir=_resolve_dir(root, Path(cfg.content_dir)),
        build_dir=build_dir,
        index_path=build_dir / "recipes.json",
    )


def _resolve_dir(root: Path, rel: Path) -> Path:
    if rel.is_absolute():
        return rel
    return root / rel

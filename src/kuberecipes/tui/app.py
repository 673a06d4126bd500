from __future__ import annotations

from ..config import EffectiveConfig
from ..corpus import load_corpus
from .common import apply_theme, sync_layout_classes
from .data_sources import load_recipes, unique_tags
from .layout import normalize_density, resolve_layout_mode
from .screens.browse import BrowseScreen
from .textual import App
from .theme import APP_CSS


class KubeRecipesApp(App):
    TITLE = "kuberecipes"
    CSS = APP_CSS
    BINDINGS = [("q", "quit", "Quit"), ("r", "reload", "Reload")]

    def __init__(self, cfg: EffectiveConfig) -> None:
        super().__init__(ansi_color=True)
        self.cfg = cfg
        self.tui_layout_mode = "normal"
        self.tui_density = normalize_density(cfg.tui.density)
        self.recipes = []
        self.tags = []
        self.backlinks = {}
        self.known_slugs = set()
        self._load()

    def _load(self) -> None:
        corpus = load_corpus(self.cfg)
        self.recipes = load_recipes(self.cfg)
        self.tags = unique_tags(self.recipes)
        self.backlinks = corpus.backlinks()
        self.known_slugs = corpus.known_slugs

    def on_mount(self) -> None:
        apply_theme(self)
        self._refresh_layout_mode()
        self.push_screen(BrowseScreen())

    def on_resize(self, event) -> None:
        self._refresh_layout_mode()

    async def action_reload(self) -> None:
        self._load()
        screen = self.screen
        if isinstance(screen, BrowseScreen):
            await screen.reload()

    def _refresh_layout_mode(self) -> None:
        size = getattr(self, "size", None)
        width = int(getattr(size, "width", 0) or 0)
        height = int(getattr(size, "height", 0) or 0)
        self.tui_layout_mode = resolve_layout_mode(width, height, self.cfg.tui.layout)
        sync_layout_classes(self, self.tui_layout_mode, self.tui_density)
        for screen in tuple(getattr(self, "screen_stack", ())):
            sync_layout_classes(screen, self.tui_layout_mode, self.tui_density)

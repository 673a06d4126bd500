from __future__ import annotations

from ..common import current_layout_mode, header_icon, set_hidden, sync_screen_layout
from ..data_sources import filter_recipes, recipe_details
from ..layout import detail_pane_width, show_tag_panel
from ..state import RecipeInfo
from ..textual import (
    ComposeResult,
    Footer,
    Header,
    Horizontal,
    Input,
    Label,
    ListItem,
    ListView,
    Screen,
    Static,
    Vertical,
)
from ..widgets.list_utils import current_highlight, list_view_index

ALL_TAGS = "__all__"


class BrowseScreen(Screen):
    def __init__(self) -> None:
        super().__init__()
        self.tag_filter: str | None = None
        self.search_query: str = ""
        self.shown: list[RecipeInfo] = []

    def compose(self) -> ComposeResult:
        yield Header(icon=header_icon(self))
        with Vertical(id="browse-shell"):
            yield Input(placeholder="Search recipes", id="search-input")
            with Horizontal(id="browse-panes"):
                with Vertical(id="tag-panel"):
                    yield Label("Tags")
                    yield ListView(id="tag-list")
                with Vertical(id="recipe-panel"):
                    yield Label("Recipes")
                    yield ListView(id="recipe-list")
                yield Static("", id="detail-pane", markup=False)
            yield Static("", id="status")
        yield Footer()

    async def on_mount(self) -> None:
        sync_screen_layout(self)
        self._apply_layout()
        await self._refresh_tags()
        await self._refresh_recipes()
        self.query_one("#search-input", Input).focus()

    def on_resize(self, event) -> None:
        sync_screen_layout(self)
        self._apply_layout()

    async def reload(self) -> None:
        await self._refresh_tags()
        await self._refresh_recipes()
        self._set_status(f"Reloaded {len(self.app.recipes)} recipe(s).")

    async def on_input_changed(self, event: Input.Changed) -> None:
        widget = getattr(event, "input", event.control)
        if widget.id == "search-input":
            self.search_query = event.value
            await self._refresh_recipes()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        list_view = getattr(event, "list_view", event.control)
        if list_view.id == "tag-list":
            tag = getattr(event.item, "tag_value", ALL_TAGS)
            self.tag_filter = None if tag == ALL_TAGS else tag
            self._mark_active_tag(list_view, event.item)
            await self._refresh_recipes()
        elif list_view.id == "recipe-list":
            self._show_recipe(getattr(event.item, "recipe", None))

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        list_view = getattr(event, "list_view", event.control)
        if list_view.id == "recipe-list" and event.item is not None:
            self._show_recipe(getattr(event.item, "recipe", None))

    def on_key(self, event) -> None:
        if event.key in ("down",) and isinstance(self.app.focused, Input):
            self.query_one("#recipe-list", ListView).focus()
            event.stop()

    def _apply_layout(self) -> None:
        mode = current_layout_mode(self)
        set_hidden(self.query_one("#tag-panel", Vertical), not show_tag_panel(mode))
        width = getattr(getattr(self, "size", None), "width", 0)
        if isinstance(width, int) and width > 0:
            self.query_one("#detail-pane", Static).styles.width = detail_pane_width(width, mode)

    async def _refresh_tags(self) -> None:
        tag_list = self.query_one("#tag-list", ListView)
        await tag_list.clear()
        all_item = ListItem(Label("All tags"))
        all_item.tag_value = ALL_TAGS
        items = [all_item]
        for tag in self.app.tags:
            item = ListItem(Label(tag, markup=False))
            item.tag_value = tag
            items.append(item)
        await tag_list.extend(items)

    async def _refresh_recipes(self) -> None:
        self.shown = filter_recipes(self.app.recipes, self.tag_filter, self.search_query)
        recipe_list = self.query_one("#recipe-list", ListView)
        await recipe_list.clear()
        if not self.shown:
            await recipe_list.extend([ListItem(Label("No recipes found"))])
            self._show_recipe(None)
            return

        items: list[ListItem] = []
        for recipe in self.shown:
            item = ListItem(Label(recipe.display(), markup=False))
            item.recipe = recipe
            items.append(item)
        await recipe_list.extend(items)
        recipe_list.index = 0
        self._show_recipe(current_highlight(recipe_list) or self.shown[0])
        self._set_status(f"{len(self.shown)} of {len(self.app.recipes)} recipe(s)")

    def _mark_active_tag(self, list_view: ListView, active: ListItem) -> None:
        active_idx = list_view_index(list_view, active)
        for idx, item in enumerate(list_view.children):
            if idx == active_idx:
                item.add_class("tag-active")
            else:
                item.remove_class("tag-active")

    def _show_recipe(self, recipe: RecipeInfo | None) -> None:
        pane = self.query_one("#detail-pane", Static)
        if recipe is None:
            pane.update("")
            return
        pane.update(recipe_details(recipe, self.app.backlinks, self.app.known_slugs, self.app.cfg.lint))

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)

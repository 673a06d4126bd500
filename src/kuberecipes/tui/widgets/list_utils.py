from __future__ import annotations

from ..state import RecipeInfo
from ..textual import ListItem, ListView


def list_view_index(list_view: ListView, item: ListItem) -> int:
    try:
        return list(list_view.children).index(item)
    except ValueError:
        return 0


def highlighted_item(list_view: ListView) -> ListItem | None:
    item = getattr(list_view, "highlighted_child", None)
    if item is None:
        highlighted = getattr(list_view, "index", None)
        if isinstance(highlighted, int) and 0 <= highlighted < len(list_view.children):
            item = list_view.children[highlighted]
    return item


def current_highlight(list_view: ListView) -> RecipeInfo | None:
    item = highlighted_item(list_view)
    if not item:
        return None
    return getattr(item, "recipe", None)

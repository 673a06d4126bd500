from __future__ import annotations

from .textual import Theme

TUI_THEME_NAME = "kuberecipes-ansi"

APP_CSS = """
Screen {
    background: $background;
    color: $text;
    padding: 0;
}

Header, Footer {
    background: $panel;
    color: $text;
}

#browse-shell {
    height: 1fr;
    padding: 1 2;
}

.layout-compact #browse-shell,
.density-compact #browse-shell {
    padding: 0 1;
}

#browse-panes {
    height: 1fr;
}

#tag-panel {
    width: 24;
}

#recipe-panel {
    width: 1fr;
}

#tag-list, #recipe-list {
    height: 1fr;
    border: round $panel;
    background: $surface;
}

#tag-list:focus,
#recipe-list:focus {
    border: round $primary;
}

ListView > ListItem.--highlight,
ListView > ListItem.-highlight {
    background: $panel;
    color: $text;
    text-style: bold;
}

ListView:focus > ListItem.--highlight,
ListView:focus > ListItem.-highlight {
    background: ansi_bright_cyan;
    color: ansi_black;
    text-style: bold;
}

ListView > ListItem.tag-active {
    background: ansi_bright_yellow;
    color: ansi_black;
}

#detail-pane {
    height: 1fr;
    border: round $panel;
    background: $surface;
    padding: 0 1;
    overflow-y: auto;
}

.layout-compact #browse-panes {
    layout: vertical;
}

#search-input {
    margin: 0 0 1 0;
    background: $surface;
    border: round $panel;
    color: $text;
}

#status {
    height: auto;
    padding: 1 0 0 0;
    color: $text-muted;
}

.is-hidden {
    display: none;
}
"""

TUI_THEMES = {
    TUI_THEME_NAME: Theme(
        name=TUI_THEME_NAME,
        primary="ansi_bright_cyan",
        secondary="ansi_bright_blue",
        accent="ansi_bright_yellow",
        warning="ansi_bright_yellow",
        error="ansi_bright_red",
        success="ansi_bright_green",
        foreground="ansi_default",
        background="ansi_default",
        surface="ansi_default",
        panel="ansi_bright_black",
        dark=False,
        variables={
            "text": "ansi_default",
            "text-muted": "ansi_bright_black",
        },
    )
}

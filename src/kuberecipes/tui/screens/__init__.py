from .browse import BrowseScreen

__all__ = ["BrowseScreen"]

from .markdown import (
    FRONTMATTER_RE,
    MarkdownDocument,
    extract_sections,
    normalize_tags,
    read_frontmatter,
    scan_code_blocks,
    split_frontmatter,
)
from .models import CodeBlock, RecipeDocument

__all__ = [
    "FRONTMATTER_RE",
    "CodeBlock",
    "MarkdownDocument",
    "RecipeDocument",
    "extract_sections",
    "normalize_tags",
    "read_frontmatter",
    "scan_code_blocks",
    "split_frontmatter",
]

# treeforge/core/rendering.py
from typing import List
from loguru import logger

from .models import Entry, EntryKind
from .token_counter import count_tokens, DEFAULT_ENCODING

def render_tree(tree: List[Entry], show_tokens: bool = False, encoding_name: str = DEFAULT_ENCODING) -> str:
    """
    Renders the forest as an indented listing, two spaces per level.
    Folders end with '/', entries keep insertion order.
    """
    lines: List[str] = []

    def _render(entries: List[Entry], depth: int) -> None:
        indent = "  " * depth
        for entry in entries:
            if entry.kind == EntryKind.FOLDER:
                lines.append(f"{indent}{entry.name}/")
                _render(entry.children or [], depth + 1)
            elif show_tokens:
                lines.append(f"{indent}{entry.name} ({count_tokens(entry.content or '', encoding_name)} tokens)")
            else:
                lines.append(f"{indent}{entry.name}")

    _render(tree, 0)
    logger.trace(f"Rendered tree with {len(lines)} lines.")
    return "\n".join(lines)

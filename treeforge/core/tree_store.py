# treeforge/core/tree_store.py
"""
Pure operations over a forest of Entry nodes.

Nothing here mutates its input: every operation that changes the tree copies
the node lists from the mutation point outward and shares untouched subtrees.
"""
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple
from loguru import logger

from .models import Entry, EntryKind
from .id_strategies import IdStrategy
from .path_model import parse_path, normalize_path, is_root_parent, ancestor_paths, derive_id

class PathConflictError(ValueError):
    """Raised when a path needs a parent folder but something else is in the way."""

def walk(tree: List[Entry]) -> Iterator[Entry]:
    """Depth-first, pre-order iteration over every entry in the forest."""
    for entry in tree:
        yield entry
        if entry.kind == EntryKind.FOLDER and entry.children:
            yield from walk(entry.children)

def find(path: str, tree: List[Entry]) -> Optional[Entry]:
    """Returns the first entry whose path equals 'path' (depth-first), or None."""
    target = normalize_path(path)
    for entry in walk(tree):
        if entry.path == target:
            return entry
    return None

def exists(path: str, tree: List[Entry]) -> bool:
    return find(path, tree) is not None

def first_file(tree: List[Entry]) -> Optional[Entry]:
    """First file in display order, or None for a tree of empty folders."""
    for entry in walk(tree):
        if entry.kind == EntryKind.FILE:
            return entry
    return None

def _resolve_parent_id(path: str, tree: List[Entry]) -> Optional[int]:
    parent_path = parse_path(path).parent_path
    if is_root_parent(parent_path):
        return None
    parent = find(parent_path, tree)
    return parent.id if parent else None

def make_file(path: str, content: str = "", tree: Optional[List[Entry]] = None,
              id_strategy: Optional[IdStrategy] = None) -> Entry:
    """Builds (does not insert) a file entry; parent_id is looked up in the current tree."""
    path = normalize_path(path)
    return Entry(
        id=derive_id(path, id_strategy),
        kind=EntryKind.FILE,
        path=path,
        name=parse_path(path).file_name,
        content=content,
        parent_id=_resolve_parent_id(path, tree or []),
    )

def make_folder(path: str, tree: Optional[List[Entry]] = None,
                id_strategy: Optional[IdStrategy] = None) -> Entry:
    """Builds (does not insert) an empty folder entry."""
    path = normalize_path(path)
    return Entry(
        id=derive_id(path, id_strategy),
        kind=EntryKind.FOLDER,
        path=path,
        name=parse_path(path).file_name,
        children=[],
        parent_id=_resolve_parent_id(path, tree or []),
    )

def _append_to_parent(entries: List[Entry], parent_id: int, child: Entry) -> Tuple[List[Entry], bool]:
    """Copy-on-write append under the first folder with 'parent_id'. Returns (entries, found)."""
    for index, entry in enumerate(entries):
        if entry.kind != EntryKind.FOLDER:
            continue
        if entry.id == parent_id:
            updated = replace(entry, children=[*(entry.children or []), child])
        else:
            new_children, found = _append_to_parent(entry.children or [], parent_id, child)
            if not found:
                continue
            updated = replace(entry, children=new_children)
        return [*entries[:index], updated, *entries[index + 1:]], True
    return entries, False

def insert(entry: Entry, tree: List[Entry]) -> List[Entry]:
    """
    Appends 'entry' under the folder identified by entry.parent_id, or at the
    top level when it has none. Duplicates are not checked; call exists() first.
    """
    if entry.parent_id is None:
        return [*tree, entry]

    updated, found = _append_to_parent(tree, entry.parent_id, entry)
    if not found:
        raise PathConflictError(f"No folder with id {entry.parent_id} to hold '{entry.path}'")
    return updated

def ensure_ancestors(path: str, tree: List[Entry], id_strategy: Optional[IdStrategy] = None) -> List[Entry]:
    """
    Synthesizes every missing ancestor folder of 'path', root to leaf, so each
    new folder's own parent is already present when it is inserted.
    Raises PathConflictError if an ancestor path is taken by a file.
    """
    if is_root_parent(parse_path(path).parent_path):
        return tree

    updated = tree
    for folder_path in ancestor_paths(path):
        existing = find(folder_path, updated)
        if existing is None:
            folder = make_folder(folder_path, updated, id_strategy)
            updated = insert(folder, updated)
            logger.trace(f"Synthesized folder {folder_path} (id={folder.id})")
        elif existing.kind != EntryKind.FOLDER:
            raise PathConflictError(f"Cannot create '{path}': ancestor '{folder_path}' is a file")
    return updated

def create_file_if_absent(path: str, content: str = "", tree: Optional[List[Entry]] = None,
                          id_strategy: Optional[IdStrategy] = None) -> Optional[Entry]:
    """Builds a file entry unless 'path' is already taken, in which case returns None."""
    if exists(path, tree or []):
        return None
    return make_file(path, content, tree, id_strategy)

def create_folder_if_absent(path: str, tree: Optional[List[Entry]] = None,
                            id_strategy: Optional[IdStrategy] = None) -> Optional[Entry]:
    """Builds a folder entry unless 'path' is already taken, in which case returns None."""
    if exists(path, tree or []):
        return None
    return make_folder(path, tree, id_strategy)

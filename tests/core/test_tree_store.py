# tests/core/test_tree_store.py
import copy

import pytest

from treeforge.core.models import Entry, EntryKind
from treeforge.core.path_model import derive_id
from treeforge.core.tree_store import (
    PathConflictError, find, exists, walk, first_file, ensure_ancestors, insert,
    make_file, make_folder, create_file_if_absent, create_folder_if_absent,
)

def _sample_tree():
    src_id = derive_id("/src")
    components_id = derive_id("/src/components")
    return [
        Entry(id=src_id, kind=EntryKind.FOLDER, path="/src", name="src", children=[
            Entry(id=derive_id("/src/App.tsx"), kind=EntryKind.FILE, path="/src/App.tsx", name="App.tsx",
                  content="app", parent_id=src_id),
            Entry(id=components_id, kind=EntryKind.FOLDER, path="/src/components", name="components",
                  parent_id=src_id, children=[
                      Entry(id=derive_id("/src/components/Header.tsx"), kind=EntryKind.FILE,
                            path="/src/components/Header.tsx", name="Header.tsx", content="header",
                            parent_id=components_id),
                  ]),
        ]),
        Entry(id=derive_id("/index.html"), kind=EntryKind.FILE, path="/index.html", name="index.html", content="<html>"),
    ]

def test_find_nested_and_missing():
    tree = _sample_tree()
    assert find("/src/components/Header.tsx", tree).content == "header"
    assert find("/index.html", tree).name == "index.html"
    assert find("/src/missing.ts", tree) is None
    assert find("/anything", []) is None

def test_find_normalizes_query():
    tree = _sample_tree()
    assert find("src/App.tsx", tree) is find("/src/App.tsx", tree)

def test_exists():
    tree = _sample_tree()
    assert exists("/src", tree)
    assert not exists("/lib", tree)

def test_walk_and_first_file():
    tree = _sample_tree()
    assert [e.path for e in walk(tree)] == [
        "/src", "/src/App.tsx", "/src/components", "/src/components/Header.tsx", "/index.html",
    ]
    assert first_file(tree).path == "/src/App.tsx"
    assert first_file([make_folder("/empty")]) is None

def test_make_file_resolves_parent_from_current_tree():
    tree = _sample_tree()
    entry = make_file("/src/components/Footer.tsx", "footer", tree)
    assert entry.kind == EntryKind.FILE
    assert entry.name == "Footer.tsx"
    assert entry.content == "footer"
    assert entry.parent_id == derive_id("/src/components")
    assert entry.id == derive_id("/src/components/Footer.tsx")
    assert entry.children is None

def test_make_folder_root_level_has_no_parent():
    folder = make_folder("lib", [])
    assert folder.path == "/lib"
    assert folder.parent_id is None
    assert folder.children == []
    assert folder.content is None

def test_make_file_defaults_to_empty_content():
    assert make_file("/x.ts", tree=[]).content == ""

def test_insert_nested_does_not_mutate_input():
    tree = _sample_tree()
    snapshot = copy.deepcopy(tree)
    entry = make_file("/src/components/Footer.tsx", "footer", tree)

    updated = insert(entry, tree)

    assert tree == snapshot
    components = find("/src/components", updated)
    assert [c.name for c in components.children] == ["Header.tsx", "Footer.tsx"]
    # Untouched sibling subtree is shared
    assert updated[1] is tree[1]

def test_insert_root_level_appends():
    tree = _sample_tree()
    updated = insert(make_file("/README.md", "# hi", tree), tree)
    assert [e.path for e in updated] == ["/src", "/index.html", "/README.md"]
    assert len(tree) == 2

def test_insert_unknown_parent_raises():
    orphan = Entry(id=1, kind=EntryKind.FILE, path="/ghost/a.ts", name="a.ts", content="", parent_id=12345)
    with pytest.raises(PathConflictError):
        insert(orphan, [])

def test_ensure_ancestors_builds_chain():
    updated = ensure_ancestors("/a/b/c/d.ts", [])
    a = find("/a", updated)
    b = find("/a/b", updated)
    c = find("/a/b/c", updated)
    assert all(e.kind == EntryKind.FOLDER for e in (a, b, c))
    assert a.parent_id is None
    assert b.parent_id == a.id
    assert c.parent_id == b.id
    assert not exists("/a/b/c/d.ts", updated)
    assert len(updated) == 1

def test_ensure_ancestors_reuses_existing_folders():
    tree = _sample_tree()
    updated = ensure_ancestors("/src/components/icons/Star.tsx", tree)
    icons = find("/src/components/icons", updated)
    assert icons.parent_id == derive_id("/src/components")
    assert len([e for e in walk(updated) if e.path == "/src"]) == 1

def test_ensure_ancestors_root_level_is_noop():
    tree = _sample_tree()
    assert ensure_ancestors("/top.ts", tree) is tree
    assert ensure_ancestors("/", tree) is tree

def test_ensure_ancestors_file_in_the_way():
    tree = _sample_tree()
    with pytest.raises(PathConflictError):
        ensure_ancestors("/index.html/oops.ts", tree)

def test_if_absent_helpers():
    tree = _sample_tree()
    assert create_file_if_absent("/src/App.tsx", "other", tree) is None
    assert create_folder_if_absent("/src", tree) is None
    assert create_file_if_absent("/src/new.ts", "n", tree).parent_id == derive_id("/src")
    assert create_folder_if_absent("/src/hooks", tree).children == []

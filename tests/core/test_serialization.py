# tests/core/test_serialization.py
import json

import pytest

from treeforge.core.action_parser import parse_actions
from treeforge.core.models import ActionKind, ActionStatus, EntryKind
from treeforge.core.serialization import (
    entry_to_dict, entry_from_dict, action_to_dict, action_from_dict, dump_tree, load_tree,
)
from treeforge.core.step_processor import process_actions, sync_content
from treeforge.core.tree_store import find, walk

def _built_tree():
    actions = parse_actions('<action type="file" filePath="src/App.tsx">app</action><action type="folder" filePath="public"></action>')
    return process_actions(actions, []).updated_tree

def test_entry_dict_uses_front_end_keys():
    tree = _built_tree()
    src = entry_to_dict(tree[0])
    assert src["type"] == "folder"
    assert "parentId" not in src
    assert "content" not in src
    app = src["children"][0]
    assert app["type"] == "file"
    assert app["parentId"] == src["id"]
    assert app["content"] == "app"
    assert "children" not in app

def test_dump_and_load_tree():
    tree = _built_tree()
    loaded = load_tree(dump_tree(tree))
    assert loaded == tree

def test_load_tree_accepts_front_end_payload_without_names():
    payload = json.dumps([{"id": 3, "type": "file", "path": "/index.html", "content": "<html>"}])
    entry = load_tree(payload)[0]
    assert entry.name == "index.html"
    assert entry.kind == EntryKind.FILE
    assert entry.parent_id is None

def test_load_tree_rejects_bad_shapes():
    assert load_tree("   ") == []
    with pytest.raises(ValueError):
        load_tree('{"id": 1}')
    with pytest.raises(ValueError):
        entry_from_dict({"id": 1, "type": "symlink", "path": "/x"})

def test_action_dict_round_trip():
    action = parse_actions('<action type="shell">npm test</action>')[0]
    data = action_to_dict(action)
    assert data["type"] == "run-script"
    assert data["status"] == "pending"
    assert "path" not in data
    restored = action_from_dict(data)
    assert restored == action
    assert restored.kind == ActionKind.RUN_SCRIPT

def test_load_tree_normalizes_front_end_paths():
    payload = json.dumps([
        {"id": 1, "type": "folder", "path": "src", "name": "src", "children": [
            {"id": 2, "type": "file", "path": "src/App.tsx/", "name": "stale", "content": "old", "parentId": 1},
        ]},
    ])
    tree = load_tree(payload)
    app = tree[0].children[0]
    assert tree[0].path == "/src"
    assert app.path == "/src/App.tsx"
    assert app.name == "App.tsx"

    actions = parse_actions('<action type="file" filePath="src/App.tsx">new</action>')
    result = process_actions(actions, tree)
    assert [e.path for e in walk(result.updated_tree)] == ["/src", "/src/App.tsx"]
    assert find("/src/App.tsx", result.updated_tree).content == "old"
    assert result.updated_actions[0].status == ActionStatus.COMPLETED

    synced = sync_content(result.updated_actions, result.updated_tree)
    assert find("/src/App.tsx", synced).content == "new"

# treeforge/core/serialization.py
"""JSON shape shared with the browser front end (camelCase parentId, 'type' for the kind)."""
import json
from typing import Any, Dict, List

from .models import Action, ActionKind, ActionStatus, Entry, EntryKind
from .path_model import normalize_path, parse_path

def entry_to_dict(entry: Entry) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": entry.id,
        "name": entry.name,
        "type": entry.kind.value,
        "path": entry.path,
    }
    if entry.kind == EntryKind.FILE:
        data["content"] = entry.content or ""
    else:
        data["children"] = [entry_to_dict(child) for child in entry.children or []]
    if entry.parent_id is not None:
        data["parentId"] = entry.parent_id
    return data

def entry_from_dict(data: Dict[str, Any]) -> Entry:
    """
    Raises KeyError/ValueError on missing keys or an unknown type.
    Paths are normalized on the way in; the name always follows the path.
    """
    kind = EntryKind(data["type"])
    is_folder = kind == EntryKind.FOLDER
    path = normalize_path(data["path"])
    return Entry(
        id=int(data["id"]),
        kind=kind,
        path=path,
        name=parse_path(path).file_name,
        content=None if is_folder else data.get("content", ""),
        children=[entry_from_dict(child) for child in data.get("children", [])] if is_folder else None,
        parent_id=data.get("parentId"),
    )

def action_to_dict(action: Action) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": action.id,
        "title": action.title,
        "description": action.description,
        "type": action.kind.value,
        "status": action.status.value,
    }
    if action.path is not None:
        data["path"] = action.path
    if action.code is not None:
        data["code"] = action.code
    return data

def action_from_dict(data: Dict[str, Any]) -> Action:
    return Action(
        id=int(data["id"]),
        kind=ActionKind(data["type"]),
        title=data.get("title", ""),
        description=data.get("description", ""),
        status=ActionStatus(data.get("status", ActionStatus.PENDING.value)),
        path=data.get("path"),
        code=data.get("code"),
    )

def dump_tree(tree: List[Entry], indent: int = 2) -> str:
    return json.dumps([entry_to_dict(entry) for entry in tree], indent=indent)

def load_tree(text: str) -> List[Entry]:
    """Parses a JSON list of entries. An empty document is an empty tree."""
    if not text.strip():
        return []
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Tree JSON must be a list of entries")
    return [entry_from_dict(item) for item in data]

# treeforge/core/action_parser.py
"""
Turns the pseudo-XML artifact emitted by the generator into Actions.

Input looks like:

    <artifact id="todo-app" title="Todo App">
      <action type="file" filePath="src/App.tsx">...content...</action>
      <action type="shell">
    npm run dev
      </action>
    </artifact>

and yields a leading create-folder Action titled from the artifact, then one
Action per complete <action> block, in document order. Text between tags is
ignored. Incomplete blocks (common while the response is still streaming)
are skipped; a later re-parse of the full text picks them up.
"""
import re
from functools import lru_cache
from typing import Dict, List, Optional, Tuple
from loguru import logger

from .models import Action, ActionKind

_ATTRIBUTE_RE = re.compile(r'([A-Za-z_][\w:.-]*)\s*=\s*"([^"]*)"')

@lru_cache(maxsize=8)
def _compile_patterns(artifact_tag: str, action_tag: str) -> Tuple[re.Pattern, re.Pattern]:
    artifact = re.escape(artifact_tag)
    action = re.escape(action_tag)
    header_re = re.compile(rf'<{artifact}\b([^>]*)>')
    # Non-greedy body: blocks don't nest, so the first closing tag ends the block
    block_re = re.compile(rf'<{action}\b([^>]*)>(.*?)</{action}\s*>', re.DOTALL)
    return header_re, block_re

def _parse_attributes(raw: str) -> Dict[str, str]:
    return {name: value for name, value in _ATTRIBUTE_RE.findall(raw)}

def _describe(action_type: str, path: Optional[str], code: str) -> Tuple[ActionKind, str, str, Optional[str]]:
    """Maps a raw type attribute to (kind, title, description, path)."""
    lowered = action_type.lower()
    if lowered == "file":
        return (ActionKind.CREATE_FILE,
                f"Create {path}" if path else "Create file",
                f"Create file: {path}" if path else "Create a new file",
                path)
    if lowered == "folder":
        return (ActionKind.CREATE_FOLDER,
                f"Create folder {path}" if path else "Create folder",
                f"Create folder: {path}" if path else "Create a new folder",
                path)
    if lowered == "edit":
        return (ActionKind.EDIT_FILE,
                f"Edit {path}" if path else "Edit file",
                f"Edit file: {path}" if path else "Edit a file",
                path)
    if lowered == "delete":
        return (ActionKind.DELETE_FILE,
                f"Delete {path}" if path else "Delete file",
                f"Delete file: {path}" if path else "Delete a file",
                path)
    if lowered in ("shell", "script"):
        command = code.split("\n")[0] or code
        return (ActionKind.RUN_SCRIPT, f"Run {command}", f"Execute shell command: {command}", None)
    return (ActionKind.UNKNOWN, f"Unknown action: {action_type}", f"Process action of type: {action_type}", path)

def parse_actions(raw_text: str, artifact_tag: str = "artifact", action_tag: str = "action") -> List[Action]:
    """Parses 'raw_text' into an ordered list of pending Actions with ids from 0."""
    actions: List[Action] = []
    if not raw_text:
        return actions

    header_re, block_re = _compile_patterns(artifact_tag, action_tag)
    next_id = 0

    header = None
    for candidate in header_re.finditer(raw_text):
        title = _parse_attributes(candidate.group(1)).get("title")
        if title is not None:
            header = candidate
            break
    if header:
        actions.append(Action(
            id=next_id,
            kind=ActionKind.CREATE_FOLDER,
            title=title,
            description=f"Create {title}",
        ))
        next_id += 1

    for match in block_re.finditer(raw_text):
        attributes = _parse_attributes(match.group(1))
        action_type = attributes.get("type")
        if action_type is None:
            logger.debug(f"Skipping <{action_tag}> block without a type attribute at offset {match.start()}")
            continue

        code = match.group(2).strip()
        kind, title, description, path = _describe(action_type, attributes.get("filePath") or None, code)
        actions.append(Action(
            id=next_id,
            kind=kind,
            title=title,
            description=description,
            path=path,
            code=code or None,
        ))
        next_id += 1

    logger.debug(f"Parsed {len(actions)} actions ({'with' if header else 'without'} artifact header).")
    return actions

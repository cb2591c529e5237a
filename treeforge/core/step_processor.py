# treeforge/core/step_processor.py
from dataclasses import replace
from typing import Dict, List, Optional, Tuple
from loguru import logger

from .models import Action, ActionKind, ActionStatus, Entry, EntryKind, ProcessResult
from .id_strategies import IdStrategy
from .path_model import normalize_path, parse_path
from .tree_store import PathConflictError, ensure_ancestors, exists, insert, make_file, make_folder

def _target_path(action: Action) -> Optional[str]:
    """Normalized path of a create action, or None when it has nothing to point at."""
    if not action.path:
        return None
    path = normalize_path(action.path)
    if not parse_path(path).segments:
        return None
    return path

def _is_pending_create(action: Action) -> bool:
    return action.status == ActionStatus.PENDING and action.is_create

def process_action(action: Action, tree: List[Entry],
                   id_strategy: Optional[IdStrategy] = None) -> Tuple[Action, Optional[Entry]]:
    """
    Applies the duplicate policy to a single action without touching the tree.

    Returns the (possibly completed) action and the entry to insert, if any.
    Ancestor folders are not synthesized here; see process_batch.
    """
    if not action.is_create:
        return action, None

    path = _target_path(action)
    if path is None:
        return action, None

    if exists(path, tree):
        logger.debug(f"'{path}' already exists, marking action {action.id} completed without changes.")
        return replace(action, status=ActionStatus.COMPLETED), None

    if action.kind == ActionKind.CREATE_FILE:
        created = make_file(path, action.code or "", tree, id_strategy)
    else:
        created = make_folder(path, tree, id_strategy)
    return replace(action, status=ActionStatus.COMPLETED), created

def process_batch(actions: List[Action], tree: List[Entry],
                  id_strategy: Optional[IdStrategy] = None) -> ProcessResult:
    """
    Runs every pending create action in order against an evolving tree.
    Each insertion is visible to the actions after it. Other actions pass through.
    """
    updated_tree = list(tree)
    updated_actions: List[Action] = []

    for action in actions:
        if not _is_pending_create(action):
            updated_actions.append(action)
            continue

        path = _target_path(action)
        if path is None:
            logger.debug(f"Action {action.id} ({action.title}) has no path, leaving it pending.")
            updated_actions.append(action)
            continue

        try:
            updated_tree = ensure_ancestors(path, updated_tree, id_strategy)
            updated_action, created = process_action(action, updated_tree, id_strategy)
            if created is not None:
                updated_tree = insert(created, updated_tree)
                logger.debug(f"Created {created.kind.value} {created.path} (id={created.id})")
        except PathConflictError as e:
            logger.warning(f"Leaving action {action.id} pending: {e}")
            updated_action = action

        updated_actions.append(updated_action)

    return ProcessResult(updated_actions=updated_actions, updated_tree=updated_tree)

def process_actions(actions: List[Action], tree: List[Entry],
                    id_strategy: Optional[IdStrategy] = None) -> ProcessResult:
    """
    Entry point: processes the pending create actions out of 'actions' and
    splices the results back by id, leaving every other action as it was.
    """
    pending = [action for action in actions if _is_pending_create(action)]
    if not pending:
        return ProcessResult(updated_actions=actions, updated_tree=tree)

    batch = process_batch(pending, tree, id_strategy)
    processed: Dict[int, Action] = {action.id: action for action in batch.updated_actions}
    final_actions = [processed.get(action.id, action) for action in actions]

    completed = sum(1 for action in batch.updated_actions if action.status == ActionStatus.COMPLETED)
    logger.info(f"Processed {len(pending)} pending create actions, {completed} completed.")
    return ProcessResult(updated_actions=final_actions, updated_tree=batch.updated_tree)

def _sync_entries(entries: List[Entry], sources: Dict[str, Action]) -> List[Entry]:
    synced: List[Entry] = []
    for entry in entries:
        if entry.kind == EntryKind.FILE:
            source = sources.get(entry.path)
            if source is not None:
                new_content = source.code or ""
                if entry.content != new_content:
                    entry = replace(entry, content=new_content)
        elif entry.children:
            children = _sync_entries(entry.children, sources)
            if any(new is not old for new, old in zip(children, entry.children)):
                entry = replace(entry, children=children)
        synced.append(entry)
    return synced

def sync_content(actions: List[Action], tree: List[Entry]) -> List[Entry]:
    """
    Copies each create-file/edit-file action's code into the file at its path.

    The first matching action for a path wins. Entries whose content already
    matches, and folders with no changed descendants, are reused as-is.
    """
    sources: Dict[str, Action] = {}
    for action in actions:
        if action.kind in (ActionKind.CREATE_FILE, ActionKind.EDIT_FILE) and action.path:
            sources.setdefault(normalize_path(action.path), action)
    return _sync_entries(tree, sources)

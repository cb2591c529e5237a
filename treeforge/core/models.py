# treeforge/core/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List

class EntryKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"

class ActionKind(str, Enum):
    CREATE_FILE = "create-file"
    CREATE_FOLDER = "create-folder"
    EDIT_FILE = "edit-file"
    DELETE_FILE = "delete-file"
    RUN_SCRIPT = "run-script"
    UNKNOWN = "unknown"

class ActionStatus(str, Enum):
    PENDING = "pending"
    CURRENT = "current"
    COMPLETED = "completed"

# Kinds the step processor materializes into the tree
CREATE_KINDS = (ActionKind.CREATE_FILE, ActionKind.CREATE_FOLDER)

@dataclass
class Entry:
    """A file or folder in the virtual tree."""
    id: int
    kind: EntryKind
    path: str # Normalized, e.g. "/src/components/Header.tsx"
    name: str # Last path segment
    content: Optional[str] = None # Files only
    children: Optional[List['Entry']] = None # Folders only, insertion order
    parent_id: Optional[int] = None # Absent for root-level entries

    @property
    def is_folder(self) -> bool:
        return self.kind == EntryKind.FOLDER

@dataclass
class Action:
    """One instruction extracted from an artifact."""
    id: int
    kind: ActionKind
    title: str
    description: str
    status: ActionStatus = ActionStatus.PENDING
    path: Optional[str] = None
    code: Optional[str] = None

    @property
    def is_create(self) -> bool:
        return self.kind in CREATE_KINDS

@dataclass
class ProcessResult:
    """Outcome of running the step processor over a batch."""
    updated_actions: List[Action] = field(default_factory=list)
    updated_tree: List[Entry] = field(default_factory=list)

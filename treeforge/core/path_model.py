# treeforge/core/path_model.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .id_strategies import IdStrategy, JavaScriptHashStrategy

_DEFAULT_STRATEGY = JavaScriptHashStrategy()

@dataclass(frozen=True)
class ParsedPath:
    """Components of a slash-delimited tree path."""
    full_path: str # As given, not normalized
    file_name: str # Last segment, "" for the root
    parent_path: str # "" for the root, "/" for root-level entries, "/a/b" for "/a/b/c"
    segments: Tuple[str, ...]

def parse_path(path: str) -> ParsedPath:
    """
    Splits a path into its components.

    Leading and trailing slashes are stripped before segmenting. Note the
    asymmetry in parent_path: "" means "this is the root", "/" means "lives
    at the root". Callers rely on both meaning "no parent folder needed".
    """
    normalized = path.strip("/")
    segments = tuple(normalized.split("/")) if normalized else ()

    file_name = segments[-1] if segments else ""

    parent_path = ""
    if len(segments) > 1:
        parent_path = "/" + "/".join(segments[:-1])
    elif len(segments) == 1:
        parent_path = "/"

    return ParsedPath(full_path=path, file_name=file_name, parent_path=parent_path, segments=segments)

def normalize_path(path: str) -> str:
    """Canonical form: single leading slash, no trailing slash, no empty segments."""
    return "/" + "/".join(segment for segment in path.split("/") if segment)

def is_root_parent(parent_path: str) -> bool:
    return parent_path in ("", "/")

def ancestor_paths(path: str) -> List[str]:
    """Proper ancestor paths of 'path', root to leaf. Empty for root-level paths."""
    segments = parse_path(normalize_path(path)).segments
    return ["/" + "/".join(segments[:i]) for i in range(1, len(segments))]

def derive_id(path: str, strategy: Optional[IdStrategy] = None) -> int:
    """Deterministic id for 'path'. Distinct paths may collide; this is not checked."""
    return (strategy or _DEFAULT_STRATEGY).derive(path)

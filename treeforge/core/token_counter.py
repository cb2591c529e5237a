# treeforge/core/token_counter.py
from functools import lru_cache
from typing import Optional, Any, List
from loguru import logger

from .models import Entry, EntryKind
from .tree_store import walk

# --- Tiktoken Initialization ---
# Encoders are loaded lazily: get_encoding may need to fetch BPE files.
try:
    import tiktoken
    TIKTOKEN_AVAILABLE = True
except ImportError:
    logger.warning("tiktoken library not found. Token counts will be estimated.")
    tiktoken = None # type: ignore
    TIKTOKEN_AVAILABLE = False

DEFAULT_ENCODING = "cl100k_base"
FALLBACK_ENCODING = "gpt2"

@lru_cache(maxsize=4)
def _get_cached_encoder(encoding_name: str) -> Optional[Any]:
    """Internal helper to load and cache encoder objects."""
    if not TIKTOKEN_AVAILABLE:
        logger.trace(f"Tiktoken unavailable, cannot get encoder '{encoding_name}'.")
        return None
    try:
        logger.debug(f"Attempting to load tiktoken encoder: {encoding_name}")
        return tiktoken.get_encoding(encoding_name) # type: ignore
    except Exception as e:
        logger.warning(f"Failed to get tiktoken encoder '{encoding_name}': {e}. Trying fallback '{FALLBACK_ENCODING}'.")
        if encoding_name == FALLBACK_ENCODING:
            logger.error(f"Fallback encoder '{FALLBACK_ENCODING}' also failed. No encoder available.")
            return None
        return _get_cached_encoder(FALLBACK_ENCODING)

def _estimate(text: str) -> int:
    return len(text) // 4

def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Counts tokens in a string using the given tiktoken encoding.
    Falls back to character estimation if tiktoken fails or is unavailable.
    """
    if not text:
        return 0

    encoder = _get_cached_encoder(encoding_name) if TIKTOKEN_AVAILABLE else None
    if encoder is None:
        return _estimate(text)
    try:
        return len(encoder.encode(text))
    except Exception as e:
        logger.error(f"Error encoding text for token count with '{encoding_name}': {e}")
        return _estimate(text)

def tree_token_total(tree: List[Entry], encoding_name: str = DEFAULT_ENCODING) -> int:
    """Sum of token counts over every file's content."""
    return sum(count_tokens(entry.content or "", encoding_name)
               for entry in walk(tree) if entry.kind == EntryKind.FILE)

# treeforge/__init__.py
import os
from loguru import logger

__version__ = "0.1.0"

def _initialize_id_strategies():
    """Loads third-party id strategies unless explicitly skipped."""
    if os.environ.get("TREEFORGE_SKIP_PLUGINS", "0") == "1":
        logger.debug("Skipping id strategy discovery due to TREEFORGE_SKIP_PLUGINS=1.")
        return

    try:
        from .core.id_strategies import load_id_strategies
        load_id_strategies()
    except Exception:
        logger.exception("An unexpected error occurred during id strategy discovery.")

_initialize_id_strategies()

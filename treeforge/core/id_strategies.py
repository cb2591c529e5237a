# treeforge/core/id_strategies.py
from abc import ABC, abstractmethod
from typing import Dict, List, Type
import hashlib
import importlib.metadata
from loguru import logger

class IdStrategy(ABC):
    """Abstract base class for path -> entry id derivation."""
    name: str = "Unnamed Strategy" # Unique identifier name

    @abstractmethod
    def derive(self, path: str) -> int:
        """
        Returns a non-negative integer id for 'path'.
        Must be a pure function of the string: same path, same id.
        Collisions between distinct paths are not detected.
        """
        pass

class JavaScriptHashStrategy(IdStrategy):
    """
    32-bit rolling hash matching the browser front end:
    h = (h << 5) - h + code_unit, wrapped to signed 32 bits, then abs().
    """
    name: str = "js-hash"

    def derive(self, path: str) -> int:
        h = 0
        # Iterate UTF-16 code units, like String.charCodeAt
        data = path.encode("utf-16-le")
        for i in range(0, len(data), 2):
            code_unit = data[i] | (data[i + 1] << 8)
            h = ((h << 5) - h + code_unit) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
        return abs(h)

class Blake2bStrategy(IdStrategy):
    """63-bit BLAKE2b digest of the UTF-8 path. Far fewer collisions than js-hash."""
    name: str = "blake2b"

    def derive(self, path: str) -> int:
        digest = hashlib.blake2b(path.encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big") >> 1

DEFAULT_STRATEGY_NAME = JavaScriptHashStrategy.name

# --- Strategy Registry ---
_strategy_registry: Dict[str, Type[IdStrategy]] = {}

def register_id_strategy(cls: Type[IdStrategy]):
    """Decorator or function to register a strategy class."""
    if not issubclass(cls, IdStrategy):
        raise TypeError("Id strategy must inherit from IdStrategy")
    if not cls.name or cls.name == "Unnamed Strategy":
        raise ValueError(f"Id strategy {cls.__name__} must define a unique 'name' attribute.")

    if cls.name in _strategy_registry:
        logger.warning(f"Id strategy name conflict: '{cls.name}' already registered. Overwriting.")
    _strategy_registry[cls.name] = cls
    logger.debug(f"Registered id strategy: '{cls.name}'")
    return cls

register_id_strategy(JavaScriptHashStrategy)
register_id_strategy(Blake2bStrategy)

def load_id_strategies(entry_point_group="treeforge.id_strategies"):
    """Discovers and loads third-party id strategies using importlib.metadata entry points."""
    logger.debug(f"Discovering id strategies using entry point group: '{entry_point_group}'")

    try:
        entry_points = importlib.metadata.entry_points(group=entry_point_group)
    except Exception as e:
        logger.error(f"Error accessing entry points for group '{entry_point_group}': {e}")
        entry_points = []

    loaded_count = 0
    for ep in entry_points:
        try:
            strategy_class = ep.load()
            if not (isinstance(strategy_class, type) and issubclass(strategy_class, IdStrategy)):
                logger.warning(f"Entry point {ep.name} did not load an IdStrategy subclass.")
                continue
            strategy_name = getattr(strategy_class, 'name', None)
            if not strategy_name or strategy_name == "Unnamed Strategy":
                logger.error(f"Id strategy {strategy_class.__name__} from entry point {ep.name} lacks a valid 'name' attribute.")
            elif strategy_name in _strategy_registry:
                logger.warning(f"Id strategy name conflict via entry point: '{strategy_name}' already registered. Skipping {ep.name}.")
            else:
                _strategy_registry[strategy_name] = strategy_class
                logger.info(f"Loaded id strategy '{strategy_name}' from entry point '{ep.name}'")
                loaded_count += 1
        except Exception as e:
            logger.exception(f"Failed to load id strategy from entry point {ep.name}: {e}")

    logger.debug(f"Loaded {loaded_count} id strategies via entry points. Total registered: {len(_strategy_registry)}")
    return loaded_count

def get_available_strategies() -> List[Type[IdStrategy]]:
    """Returns all registered strategy classes."""
    return list(_strategy_registry.values())

def get_id_strategy(name: str = DEFAULT_STRATEGY_NAME) -> IdStrategy:
    """Instantiates a registered strategy by name. Raises KeyError if unknown."""
    try:
        return _strategy_registry[name]()
    except KeyError:
        known = ", ".join(sorted(_strategy_registry))
        raise KeyError(f"Unknown id strategy '{name}'. Available: {known}") from None

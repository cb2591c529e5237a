# tests/core/test_id_strategies.py
import pytest

from treeforge.core import id_strategies
from treeforge.core.id_strategies import (
    IdStrategy, JavaScriptHashStrategy, Blake2bStrategy,
    register_id_strategy, get_id_strategy, get_available_strategies, load_id_strategies,
)

def test_js_hash_matches_browser_values():
    strategy = JavaScriptHashStrategy()
    assert strategy.derive("") == 0
    assert strategy.derive("a") == 97
    assert strategy.derive("ab") == 97 * 31 + 98
    # Same value as Java's String.hashCode("hello")
    assert strategy.derive("hello") == 99162322

def test_js_hash_wraps_to_non_negative():
    strategy = JavaScriptHashStrategy()
    value = strategy.derive("/a/very/long/path/that/overflows/the/thirty/two/bit/range.tsx")
    assert 0 <= value <= 2 ** 31

def test_blake2b_fits_in_63_bits():
    value = Blake2bStrategy().derive("/src/App.tsx")
    assert 0 <= value < 2 ** 63

def test_builtins_registered():
    names = {cls.name for cls in get_available_strategies()}
    assert {"js-hash", "blake2b"} <= names
    assert isinstance(get_id_strategy(), JavaScriptHashStrategy)
    assert isinstance(get_id_strategy("blake2b"), Blake2bStrategy)

def test_unknown_strategy_raises_key_error():
    with pytest.raises(KeyError, match="Unknown id strategy"):
        get_id_strategy("nope")

def test_register_requires_name(mocker):
    mocker.patch.dict(id_strategies._strategy_registry, clear=False)

    class Nameless(IdStrategy):
        def derive(self, path):
            return 1

    with pytest.raises(ValueError):
        register_id_strategy(Nameless)
    with pytest.raises(TypeError):
        register_id_strategy(int)

def test_register_custom_strategy(mocker):
    mocker.patch.dict(id_strategies._strategy_registry, clear=False)

    @register_id_strategy
    class LengthStrategy(IdStrategy):
        name = "length"
        def derive(self, path):
            return len(path)

    assert get_id_strategy("length").derive("/abc") == 4

def test_load_from_entry_points(mocker):
    mocker.patch.dict(id_strategies._strategy_registry, clear=False)

    class PluginStrategy(IdStrategy):
        name = "plugin-strategy"
        def derive(self, path):
            return 7

    good = mocker.Mock()
    good.name = "good"
    good.load.return_value = PluginStrategy
    bad = mocker.Mock()
    bad.name = "bad"
    bad.load.return_value = object
    mocker.patch("importlib.metadata.entry_points", return_value=[good, bad])

    assert load_id_strategies() == 1
    assert get_id_strategy("plugin-strategy").derive("/x") == 7

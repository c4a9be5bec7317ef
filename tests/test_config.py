import pytest

from edit_engine.config import EngineConfig


def test_defaults() -> None:
    config = EngineConfig()

    assert config.history_capacity == 100
    assert config.wide_advance == 14.0
    assert config.narrow_advance == 7.0
    assert not config.wrap_enabled
    assert not config.case_sensitive


@pytest.mark.parametrize(
    "overrides",
    [
        {"history_capacity": 0},
        {"wrap_width": 0},
        {"wrap_column": 0},
        {"tab_width": 0},
        {"narrow_advance": -1.0},
        {"max_matches": 0},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValueError):
        EngineConfig(**overrides)


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDIT_ENGINE_HISTORY_CAPACITY", "5")
    monkeypatch.setenv("EDIT_ENGINE_WRAP", "yes")
    monkeypatch.setenv("EDIT_ENGINE_WRAP_COLUMN", "80")
    monkeypatch.setenv("EDIT_ENGINE_CASE_SENSITIVE", "1")
    monkeypatch.setenv("EDIT_ENGINE_TAB_WIDTH", "8")

    config = EngineConfig.from_env()

    assert config.history_capacity == 5
    assert config.wrap_enabled
    assert config.wrap_column == 80
    assert config.case_sensitive
    assert config.tab_width == 8


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDIT_ENGINE_HISTORY_CAPACITY", "5")

    config = EngineConfig.from_env(history_capacity=9)

    assert config.history_capacity == 9


def test_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDIT_ENGINE_WRAP_WIDTH", "wide")

    with pytest.raises(ValueError):
        EngineConfig.from_env()

import pytest

from delve.dungeon import Dungeon, DungeonConfig, DungeonConfigError
from delve.dungeon.grid import GridModel


@pytest.mark.parametrize("w,h", [(0, 50), (50, 0), (-5, 10)])
def test_non_positive_dimensions_rejected(w, h):
    with pytest.raises(DungeonConfigError):
        Dungeon(width=w, height=h)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        DungeonConfig(width=0).validate()


def test_border_leaving_no_interior_rejected():
    with pytest.raises(DungeonConfigError):
        DungeonConfig(width=2, height=10, border_size=1).validate()


def test_grid_model_rejects_bad_dimensions():
    with pytest.raises(DungeonConfigError):
        GridModel(0, 10)


def test_from_env_reads_values(monkeypatch):
    monkeypatch.setenv("DELVE_WIDTH", "64")
    monkeypatch.setenv("DELVE_HEIGHT", "40")
    monkeypatch.setenv("DELVE_SEED", "99")
    monkeypatch.setenv("DELVE_VERBOSE", "yes")
    cfg = DungeonConfig.from_env()
    assert (cfg.width, cfg.height, cfg.seed, cfg.verbose) == (64, 40, 99, True)


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv("DELVE_WIDTH", "64")
    cfg = DungeonConfig.from_env(width=30, height=None)
    assert cfg.width == 30
    assert cfg.height == 50


def test_from_env_bad_value(monkeypatch):
    monkeypatch.setenv("DELVE_MAX_ROOMS", "lots")
    with pytest.raises(DungeonConfigError):
        DungeonConfig.from_env()


def test_dungeon_rejects_config_and_overrides_together():
    with pytest.raises(TypeError):
        Dungeon(DungeonConfig(), width=20)

import json

import pytest

from particle_life import ConfigError, Settings


def valid(**overrides):
    data = {
        "width": 200,
        "height": 100,
        "num_colors": 2,
        "atoms_per_color": 5,
        "rules": [0.1, -0.2, 0.3, -0.4],
        "radii": [40, 50],
        "toroid": True,
        "wall_repel": 10,
        "viscosity": 0.3,
        "time_scale": 0.5,
        "real_forces": False,
        "debug": False,
    }
    data.update(overrides)
    return data


def test_from_dict_defaults_only_walls_and_seed():
    settings = Settings.from_dict(valid())
    assert settings.num_atoms == 10
    assert settings.radii == [40.0, 50.0]
    assert settings.wall_repel == 10
    assert settings.viscosity == 0.3
    assert settings.time_scale == 0.5
    assert settings.toroid is True and settings.real_forces is False
    assert settings.walls == "bounce"
    assert settings.seed is None


def test_debug_population():
    assert Settings.from_dict(valid(debug=True)).num_atoms == 2


@pytest.mark.parametrize(
    "missing",
    [
        "width",
        "height",
        "num_colors",
        "atoms_per_color",
        "toroid",
        "wall_repel",
        "viscosity",
        "rules",
        "radii",
        "time_scale",
        "real_forces",
        "debug",
    ],
)
def test_missing_field(missing):
    data = valid()
    del data[missing]
    with pytest.raises(ConfigError, match=missing):
        Settings.from_dict(data)


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 0},
        {"height": 12.5},
        {"num_colors": True},
        {"atoms_per_color": "10"},
        {"rules": [0.1, 0.2, 0.3]},
        {"rules": [0.1, 0.2, 0.3, "x"]},
        {"rules": None},
        {"rules": "1234"},
        {"rules": b"1234"},
        {"rules": {0: 1, 1: 2, 2: 3, 3: 4}},
        {"radii": "12"},
        {"radii": [40]},
        {"radii": [40, -1]},
        {"toroid": "yes"},
        {"walls": "sticky"},
        {"wall_repel": -5},
        {"viscosity": float("inf")},
        {"seed": -1},
        {"debug": True, "num_colors": 1, "rules": [0.0], "radii": [10]},
        {"gravity": 0.5},
    ],
)
def test_malformed_settings(overrides):
    with pytest.raises(ConfigError):
        Settings.from_dict(valid(**overrides))


def test_not_a_mapping():
    with pytest.raises(ConfigError):
        Settings.from_dict([1, 2, 3])


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_save_and_load(tmp_path):
    path = tmp_path / "conf" / "settings.json"
    settings = Settings.from_dict(valid(seed=5, toroid=False, walls="clamp"))
    settings.save(str(path))

    assert json.loads(path.read_text())["walls"] == "clamp"
    assert Settings.load(str(path)) == settings


def test_load_bad_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        Settings.load(str(path))

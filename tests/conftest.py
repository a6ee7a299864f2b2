import pytest

from particle_life import Settings, Universe


@pytest.fixture
def make_settings():
    def make(num_colors=2, atoms_per_color=10, **kwargs):
        kwargs.setdefault("width", 1000)
        kwargs.setdefault("height", 1000)
        kwargs.setdefault("rules", [0.0] * (num_colors * num_colors))
        kwargs.setdefault("radii", [80.0] * num_colors)
        kwargs.setdefault("seed", 1234)
        return Settings(
            num_colors=num_colors, atoms_per_color=atoms_per_color, **kwargs
        )

    return make


@pytest.fixture
def two_atoms(make_settings):
    """Debug layout: color 0 at (100, 100), color 1 at (140, 140)."""

    def make(g=0.01, **kwargs):
        kwargs.setdefault("rules", [0.0, g, g, 0.0])
        kwargs.setdefault("radii", [500.0, 500.0])
        kwargs.setdefault("viscosity", 0.0)
        kwargs.setdefault("time_scale", 1.0)
        kwargs.setdefault("real_forces", False)
        return Universe(make_settings(debug=True, **kwargs))

    return make

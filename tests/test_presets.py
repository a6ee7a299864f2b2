import pytest

from particle_life import (
    Mulberry32,
    Universe,
    explore,
    random_rules,
    random_setup,
    symmetrize,
)
from particle_life.config import DEFAULT_RADIUS, MAX_RADIUS


def test_mulberry32_is_reproducible():
    a = Mulberry32(42)
    b = Mulberry32(42)
    first = [a() for _ in range(100)]
    assert first == [b() for _ in range(100)]
    assert all(0 <= v < 1 for v in first)
    assert first != [Mulberry32(43)() for _ in range(100)]


def test_mulberry32_accepts_wide_seeds():
    assert Mulberry32(3762108977281)() == Mulberry32(3762108977281 & 0xFFFFFFFF)()


def test_randint_range():
    rng = Mulberry32(1)
    values = {rng.randint(2, 8) for _ in range(500)}
    assert values == set(range(2, 8))


def test_random_rules():
    rules, radii = random_rules(4, seed=9)
    assert len(rules) == 16
    assert all(-1 <= v < 1 for v in rules)
    assert radii == [float(DEFAULT_RADIUS)] * 4
    assert random_rules(4, seed=9) == (rules, radii)


def test_symmetric_rules():
    rules, _ = random_rules(5, seed=2, symmetric=True)
    for i in range(5):
        for j in range(5):
            assert rules[i * 5 + j] == rules[j * 5 + i]


def test_symmetrize_averages_pairs():
    out = symmetrize([1.0, 0.2, 0.4, -1.0], 2)
    assert out == [1.0, pytest.approx(0.3), pytest.approx(0.3), -1.0]


@pytest.mark.parametrize("seed", [0, 1, 12345, 0xCAFECAFE])
def test_random_setup(seed):
    settings = random_setup(seed, width=320, height=240)
    assert 2 <= settings.num_colors <= 7
    assert 500 // 7 <= settings.num_colors * settings.atoms_per_color < 3000
    assert 0.1 <= settings.viscosity < 2.0
    assert 0 <= settings.wall_repel < 100
    assert len(settings.rules) == settings.num_colors ** 2
    assert (settings.width, settings.height) == (320, 240)
    assert random_setup(seed, width=320, height=240) == settings


def test_random_setup_builds_a_universe():
    settings = random_setup(3, width=200, height=200)
    settings.atoms_per_color = 5
    universe = Universe(settings)
    universe.tick()
    assert universe.particle_count() == 5 * settings.num_colors


def test_explore_changes_one_entry():
    rules, radii = random_rules(3, seed=4)
    rng = Mulberry32(77)
    for _ in range(50):
        new_rules, new_radii = explore(rules, radii, 3, rng)
        changed_rules = [i for i, (a, b) in enumerate(zip(rules, new_rules)) if a != b]
        changed_radii = [i for i, (a, b) in enumerate(zip(radii, new_radii)) if a != b]
        assert len(changed_rules) + len(changed_radii) <= 1
        for i in changed_rules:
            if rules[i] > 0:
                assert new_rules[i] <= 0
            assert -1 <= new_rules[i] <= 1
        for i in changed_radii:
            assert 1 <= new_radii[i] <= MAX_RADIUS
        rules, radii = new_rules, new_radii


def test_explore_does_not_mutate_inputs():
    rules, radii = random_rules(2, seed=4)
    snapshot = (list(rules), list(radii))
    explore(rules, radii, 2, Mulberry32(5))
    assert (rules, radii) == snapshot


def test_mulberry32_matches_reference_stream():
    rng = Mulberry32(3762108977281)
    assert [rng() for _ in range(4)] == [
        0.4479174397420138,
        0.11472229496575892,
        0.6360225542448461,
        0.36440747743472457,
    ]


def test_random_rules_continues_a_stream():
    rng = Mulberry32(5)
    assert random_rules(3, rng=rng) == random_rules(3, seed=5)

    seed = rng.state
    following = random_rules(3, rng=rng)
    assert following == random_rules(3, seed=seed)
    assert following != random_rules(3, seed=5)
    assert following != random_rules(3, seed=6)

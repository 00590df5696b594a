from tanx_duel.core.explosion import Explosion, carve_disk
from tanx_duel.core.terrain import Terrain


def _solid_terrain(width: int = 20, height: int = 20) -> Terrain:
    terrain = Terrain(width, height)
    for y in range(height):
        terrain.fill_run((0, y), width, True)
    return terrain


def test_explosion_grows_until_max_radius():
    terrain = _solid_terrain()
    explosion = Explosion((10, 10), 5, growth=2)

    results = [explosion.update(terrain) for _ in range(3)]

    assert results == [False, False, True]
    assert explosion.radius == 5
    assert explosion.done


def test_final_crater_matches_disk():
    terrain = _solid_terrain()
    explosion = Explosion((10, 10), 4, growth=1.5)
    while not explosion.update(terrain):
        pass

    for y in range(terrain.height):
        for x in range(terrain.width):
            inside = (x - 10) ** 2 + (y - 10) ** 2 <= 16
            assert terrain.is_not_empty(x, y) is not inside


def test_zero_radius_clears_only_the_center():
    terrain = _solid_terrain(5, 5)

    assert Explosion((2, 2), 0).update(terrain) is True
    assert sum(terrain.occupancy) == 24
    assert not terrain.is_not_empty(2, 2)


def test_carving_is_clipped_at_the_edges():
    terrain = _solid_terrain(6, 6)
    terrain.changed = False

    carve_disk(terrain, (0, 0), 2)

    cleared = {(x, y) for x in range(6) for y in range(6) if not terrain.is_not_empty(x, y)}
    assert cleared == {(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (0, 2)}
    assert terrain.changed


def test_offscreen_blast_leaves_terrain_untouched():
    terrain = _solid_terrain(6, 6)
    before = bytes(terrain.occupancy)

    carve_disk(terrain, (-10, -10), 3)

    assert bytes(terrain.occupancy) == before

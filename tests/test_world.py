import pytest

from homestead.catalog import CropCatalog
from homestead.errors import InvalidCoordinate, WorldAlreadyInitialized, WorldNotInitialized
from homestead.models import LandType
from homestead.world import WorldMap


def test_zoning_regions():
    world = WorldMap()
    world.initialize()
    assert world.tile((0, 0)).land_type == LandType.FARMLAND
    assert world.tile((2, 2)).land_type == LandType.FARMLAND
    assert world.tile((3, 0)).land_type == LandType.CULTIVABLE
    assert world.tile((4, 4)).land_type == LandType.CULTIVABLE
    assert world.tile((8, 0)).land_type == LandType.UNCULTIVABLE
    assert world.tile((9, 9)).land_type == LandType.UNCULTIVABLE


def test_fresh_world_has_no_crops():
    world = WorldMap()
    world.initialize()
    assert all(tile.crop is None for row in world.tiles for tile in row)
    assert world.merchants == []


def test_world_can_only_be_generated_once():
    world = WorldMap(width=4, height=4)
    world.initialize()
    world.tile((0, 0)).land_type = LandType.CULTIVABLE
    with pytest.raises(WorldAlreadyInitialized):
        world.initialize()
    # second attempt must not regenerate tiles
    assert world.tile((0, 0)).land_type == LandType.CULTIVABLE


def test_tile_access_before_generation():
    with pytest.raises(WorldNotInitialized):
        WorldMap().tile((0, 0))


@pytest.mark.parametrize("coord", [(10, 0), (0, 10), (-1, 3), (25, 25)])
def test_out_of_bounds(coord):
    world = WorldMap()
    world.initialize()
    with pytest.raises(InvalidCoordinate):
        world.tile(coord)


def test_catalog_known_and_fallback():
    catalog = CropCatalog()
    carrot = catalog.lookup("carrot")
    assert (carrot.growth_duration, carrot.base_yield) == (300, 2)
    assert catalog.is_known("carrot")

    mystery = catalog.lookup("moonflower")
    assert not catalog.is_known("moonflower")
    assert mystery.name == "moonflower"
    assert (mystery.growth_duration, mystery.base_yield) == (60, 1)
    assert "tomato" in catalog.names()

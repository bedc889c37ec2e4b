import logging
from typing import Dict, List, Optional

import config
from homestead.errors import InvalidCoordinate, WorldAlreadyInitialized, WorldNotInitialized
from homestead.models import Coordinate, LandType, Merchant, Tile

logger = logging.getLogger(__name__)


def zone_for(x: int, y: int, zoning: Dict[str, dict]) -> LandType:
    """Land type of a fresh tile: farmland corner, cultivable ring, wild edge."""
    farm = zoning["farmland"]
    if x < farm["x_max"] and y < farm["y_max"]:
        return LandType.FARMLAND
    field = zoning["cultivable"]
    if x < field["x_max"] and y < field["y_max"]:
        return LandType.CULTIVABLE
    return LandType.UNCULTIVABLE


class WorldMap:
    """The shared grid plus the list of traveling merchants.

    Tiles live in a dense row-major list indexed by (x, y); nothing outside
    the map holds a reference to a tile.
    """

    def __init__(self, width: Optional[int] = None, height: Optional[int] = None,
                 zoning: Optional[Dict[str, dict]] = None):
        self.width = config.MAP_WIDTH if width is None else width
        self.height = config.MAP_HEIGHT if height is None else height
        self.zoning = config.ZONING if zoning is None else zoning
        self.tiles: List[List[Tile]] = []
        self.initialized = False
        self.merchants: List[Merchant] = []
        self.last_refresh: Optional[int] = None

    def initialize(self):
        if self.initialized:
            raise WorldAlreadyInitialized("world has already been generated")
        self.tiles = [
            [Tile(land_type=zone_for(x, y, self.zoning)) for x in range(self.width)]
            for y in range(self.height)
        ]
        self.initialized = True
        logger.info(f"World generated ({self.width}x{self.height})")

    def contains(self, coord: Coordinate) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, coord: Coordinate) -> Tile:
        if not self.initialized:
            raise WorldNotInitialized("world has not been generated yet")
        if not self.contains(coord):
            raise InvalidCoordinate(f"({coord[0]}, {coord[1]}) is outside the {self.width}x{self.height} map")
        x, y = coord
        return self.tiles[y][x]

    def dimensions(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    def find_merchant(self, merchant_id: str) -> Optional[Merchant]:
        return next((m for m in self.merchants if m.id == merchant_id), None)

    def prune_merchants(self, now: int) -> List[Merchant]:
        expired = [m for m in self.merchants if m.expires_at <= now]
        if expired:
            self.merchants = [m for m in self.merchants if m.expires_at > now]
            logger.debug(f"Pruned {len(expired)} expired merchant(s)")
        return expired

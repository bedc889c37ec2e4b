import logging
from typing import Optional

from homestead.errors import (
    CropNotMature,
    InsufficientFertilizer,
    InsufficientSeed,
    LandAlreadyCultivated,
    LandEmpty,
    LandNotCultivable,
    LandNotFarmland,
    LandOccupied,
    MissingTool,
    UnknownCrop,
)
from homestead.models import Crop, CropStage, ItemCategory, LandType, NotificationKind, Tile

logger = logging.getLogger(__name__)


class FieldActions:
    """Tile and crop lifecycle: cultivate -> plant -> water/fertilize -> grow -> harvest.

    Each method checks every precondition first and only then mutates the
    tile and the acting player's inventory.
    """

    def cultivate_land(self, owner_id: str, x: int, y: int) -> Tile:
        with self._lock:
            player = self._player(owner_id)
            tile = self.world.tile((x, y))

            if tile.land_type == LandType.FARMLAND:
                raise LandAlreadyCultivated(f"({x}, {y}) is already farmland")
            if tile.land_type != LandType.CULTIVABLE:
                raise LandNotCultivable(f"({x}, {y}) cannot be cultivated")

            tool = self.settings.cultivation_tool
            if not player.inventory.has(ItemCategory.TOOL, tool):
                raise MissingTool(f"cultivating needs a {tool}")

            if self.settings.consume_cultivation_tool:
                player.inventory.consume(ItemCategory.TOOL, tool, 1)
            tile.land_type = LandType.FARMLAND

            logger.info(f"{player.name} cultivated ({x}, {y})")
            return tile

    def plant_seed(self, owner_id: str, x: int, y: int, seed_name: str, now: Optional[int] = None) -> Crop:
        with self._lock:
            now = self._now(now)
            player = self._player(owner_id)
            tile = self.world.tile((x, y))

            if tile.land_type != LandType.FARMLAND:
                raise LandNotFarmland(f"({x}, {y}) is not farmland")
            if tile.crop is not None:
                raise LandOccupied(f"({x}, {y}) already has {tile.crop.crop_name} planted")
            if not player.inventory.has(ItemCategory.SEED, seed_name):
                raise InsufficientSeed(f"no {seed_name} seeds left")
            if self.settings.strict_crop_catalog and not self.catalog.is_known(seed_name):
                raise UnknownCrop(f"{seed_name} is not a known crop")
            self._commit_time(now)

            definition = self.catalog.lookup(seed_name)
            player.inventory.consume(ItemCategory.SEED, seed_name, 1)
            tile.crop = Crop(
                crop_name=seed_name,
                planted_at=now,
                growth_duration_needed=definition.growth_duration,
            )

            self.notify(NotificationKind.SEED_PLANTED, now, owner=owner_id, crop=seed_name, x=x, y=y)
            return tile.crop

    def water_plant(self, owner_id: str, x: int, y: int) -> Crop:
        with self._lock:
            player = self._player(owner_id)
            crop = self._crop_at(x, y)

            tool = self.settings.watering_tool
            if not player.inventory.has(ItemCategory.TOOL, tool):
                raise MissingTool(f"watering needs a {tool}")

            crop.water_level += 1
            crop.try_start_growing()

            logger.info(f"{player.name} watered {crop.crop_name} at ({x}, {y}) -> water {crop.water_level}")
            return crop

    def fertilize_plant(self, owner_id: str, x: int, y: int, fertilizer_name: str) -> Crop:
        with self._lock:
            player = self._player(owner_id)
            crop = self._crop_at(x, y)

            if not player.inventory.has(ItemCategory.FERTILIZER, fertilizer_name):
                raise InsufficientFertilizer(f"no {fertilizer_name} left")

            player.inventory.consume(ItemCategory.FERTILIZER, fertilizer_name, 1)
            if crop.stage != CropStage.MATURE:
                crop.fertilizer_level += 1
            crop.try_start_growing()

            logger.info(f"{player.name} fertilized {crop.crop_name} at ({x}, {y}) with {fertilizer_name}")
            return crop

    def check_growth(self, x: int, y: int, now: Optional[int] = None) -> Crop:
        """Advance a growing crop to mature once enough time has passed.

        Nothing ticks in the background; anything reading a crop's stage
        should call this first.
        """
        with self._lock:
            now = self._now(now)
            crop = self._crop_at(x, y)
            self._commit_time(now)

            if crop.stage == CropStage.GROWING and now - crop.planted_at >= crop.growth_duration_needed:
                crop.stage = CropStage.MATURE
                logger.info(f"{crop.crop_name} at ({x}, {y}) is ready to harvest")
            return crop

    def harvest(self, owner_id: str, x: int, y: int) -> int:
        with self._lock:
            player = self._player(owner_id)
            tile = self.world.tile((x, y))

            if tile.land_type != LandType.FARMLAND:
                raise LandNotFarmland(f"({x}, {y}) is not farmland")
            crop = tile.crop
            if crop is None:
                raise LandEmpty(f"nothing is planted at ({x}, {y})")
            if crop.stage != CropStage.MATURE:
                raise CropNotMature(f"{crop.crop_name} at ({x}, {y}) is still {crop.stage.value}")

            now = self._now()
            self._commit_time(now)
            amount = self.catalog.lookup(crop.crop_name).base_yield + crop.water_level + crop.fertilizer_level
            player.inventory.add(ItemCategory.SEED, crop.crop_name, amount)
            crop.harvested_amount = amount
            tile.crop = None

            self.notify(NotificationKind.PLANT_HARVESTED, now, owner=owner_id,
                        crop=crop.crop_name, amount=amount, x=x, y=y)
            return amount

    def _crop_at(self, x: int, y: int) -> Crop:
        tile = self.world.tile((x, y))
        if tile.crop is None:
            raise LandEmpty(f"nothing is planted at ({x}, {y})")
        return tile.crop

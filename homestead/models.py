from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from homestead.errors import (
    InsufficientFertilizer,
    InsufficientSeed,
    InsufficientTool,
    InvalidAmount,
)

Coordinate = Tuple[int, int]


class LandType(str, Enum):
    UNCULTIVABLE = "uncultivable"
    CULTIVABLE = "cultivable"
    FARMLAND = "farmland"


class CropStage(str, Enum):
    PLANTED = "planted"
    GROWING = "growing"
    MATURE = "mature"


class ItemCategory(str, Enum):
    SEED = "seed"
    TOOL = "tool"
    FERTILIZER = "fertilizer"


_SHORTAGE_ERRORS = {
    ItemCategory.SEED: InsufficientSeed,
    ItemCategory.TOOL: InsufficientTool,
    ItemCategory.FERTILIZER: InsufficientFertilizer,
}


class Crop(BaseModel):
    crop_name: str
    stage: CropStage = CropStage.PLANTED
    planted_at: int
    water_level: int = 0
    fertilizer_level: int = 0
    growth_duration_needed: int
    harvested_amount: int = 0

    def try_start_growing(self) -> bool:
        """Planted crops start growing once they have both water and fertilizer."""
        if self.stage == CropStage.PLANTED and self.water_level >= 1 and self.fertilizer_level >= 1:
            self.stage = CropStage.GROWING
            return True
        return False


class Tile(BaseModel):
    land_type: LandType
    crop: Optional[Crop] = None


class Inventory(BaseModel):
    seeds: Dict[str, int] = Field(default_factory=dict)
    tools: Dict[str, int] = Field(default_factory=dict)
    fertilizers: Dict[str, int] = Field(default_factory=dict)

    def ledger(self, category: ItemCategory) -> Dict[str, int]:
        if category == ItemCategory.SEED:
            return self.seeds
        if category == ItemCategory.TOOL:
            return self.tools
        return self.fertilizers

    def quantity(self, category: ItemCategory, name: str) -> int:
        return self.ledger(category).get(name, 0)

    def has(self, category: ItemCategory, name: str, amount: int = 1) -> bool:
        return self.quantity(category, name) >= amount

    def add(self, category: ItemCategory, name: str, amount: int):
        if amount <= 0:
            raise InvalidAmount(f"amount must be positive, got {amount}")
        ledger = self.ledger(category)
        ledger[name] = ledger.get(name, 0) + amount

    def consume(self, category: ItemCategory, name: str, amount: int):
        if amount <= 0:
            raise InvalidAmount(f"amount must be positive, got {amount}")
        have = self.quantity(category, name)
        if have < amount:
            raise _SHORTAGE_ERRORS[category](f"need {amount} {name}, have {have}")
        self.ledger(category)[name] = have - amount

    def snapshot(self, category: ItemCategory) -> Dict[str, int]:
        return dict(self.ledger(category))

    def total(self, category: ItemCategory) -> int:
        return sum(self.ledger(category).values())


class PlayerState(BaseModel):
    id: str
    name: str
    inventory: Inventory = Field(default_factory=Inventory)
    created_at: int = 0
    last_explored_at: Optional[int] = None


class MerchantOffer(BaseModel):
    category: ItemCategory
    item_name: str
    price_category: str  # seed name used as currency
    price_amount: int


class Merchant(BaseModel):
    id: str
    name: str
    offers: List[MerchantOffer] = Field(default_factory=list)
    expires_at: int


class NotificationKind(str, Enum):
    PLAYER_CREATED = "player_created"
    SEED_PLANTED = "seed_planted"
    PLANT_HARVESTED = "plant_harvested"
    MERCHANT_SPAWNED = "merchant_spawned"


class Notification(BaseModel):
    kind: NotificationKind
    at: int
    data: Dict[str, Any] = Field(default_factory=dict)

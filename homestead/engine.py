import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

import config
from homestead.actions.explore import ExplorationActions
from homestead.actions.field import FieldActions
from homestead.actions.market import MerchantActions, make_picker
from homestead.catalog import CropCatalog
from homestead.errors import InvalidTimestamp, PlayerExists, PlayerNotFound
from homestead.models import Inventory, ItemCategory, Notification, NotificationKind, PlayerState
from homestead.world import WorldMap

logger = logging.getLogger(__name__)


def system_clock() -> int:
    return int(time.time())


class GameSettings(BaseModel):
    """Tunable rules. Defaults come from data.json via config."""

    map_width: int = config.MAP_WIDTH
    map_height: int = config.MAP_HEIGHT
    zoning: Dict[str, dict] = Field(default_factory=lambda: dict(config.ZONING))
    crops: Dict[str, dict] = Field(default_factory=lambda: dict(config.CROPS))
    default_crop: Dict[str, int] = Field(default_factory=lambda: dict(config.DEFAULT_CROP))
    initial_inventory: Dict[str, Dict[str, int]] = Field(default_factory=lambda: {
        k: dict(v) for k, v in config.INITIAL_INVENTORY.items()
    })
    cultivation_tool: str = config.CULTIVATION_TOOL
    watering_tool: str = config.WATERING_TOOL
    consume_cultivation_tool: bool = config.CONSUME_CULTIVATION_TOOL
    strict_crop_catalog: bool = config.STRICT_CROP_CATALOG

    merchant_refresh_interval: int = config.MERCHANT_REFRESH_INTERVAL
    merchant_listing_duration: int = config.MERCHANT_LISTING_DURATION
    merchant_names: List[str] = Field(default_factory=lambda: list(config.MERCHANT_NAMES))
    seed_offers: List[dict] = Field(default_factory=lambda: list(config.SEED_OFFERS))
    tool_offers: List[dict] = Field(default_factory=lambda: list(config.TOOL_OFFERS))
    fertilizer_offers: List[dict] = Field(default_factory=lambda: list(config.FERTILIZER_OFFERS))

    explore_seeds: List[str] = Field(default_factory=lambda: list(config.EXPLORE_SEEDS))
    explore_max_quantity: int = config.EXPLORE_MAX_QUANTITY
    explore_cooldown: int = config.EXPLORE_COOLDOWN

    offer_picker: str = config.OFFER_PICKER
    picker_seed: Optional[int] = None
    log_limit: int = config.LOG_LIMIT


class GameEngine(FieldActions, MerchantActions, ExplorationActions):
    """Owns the world, the players and the notification log.

    Every public method runs under one re-entrant lock, so each action is
    applied whole or not at all from any other caller's point of view.
    """

    def __init__(self, settings: Optional[GameSettings] = None,
                 clock: Optional[Callable[[], int]] = None):
        self.settings = settings or GameSettings()
        self.clock = clock or system_clock
        self.catalog = CropCatalog(self.settings.crops, self.settings.default_crop)
        self.picker = make_picker(self.settings.offer_picker, self.settings.picker_seed)
        self.world = WorldMap(self.settings.map_width, self.settings.map_height, self.settings.zoning)
        self.players: Dict[str, PlayerState] = {}
        self.notifications: List[Notification] = []
        self._lock = threading.RLock()
        self._last_seen = 0

    def initialize_world(self):
        with self._lock:
            self.world.initialize()

    # --- Time ---
    def _now(self, now: Optional[int] = None) -> int:
        """Resolve the time for an action without recording it.

        Actions call _commit_time once their checks have passed, so a
        rejected action leaves the engine clock where it was.
        """
        if now is None:
            return max(int(self.clock()), self._last_seen)
        if now < 0 or now < self._last_seen:
            raise InvalidTimestamp(f"time {now} is earlier than {self._last_seen}")
        return now

    def _commit_time(self, now: int):
        self._last_seen = max(self._last_seen, now)

    # --- Players ---
    def _player(self, owner_id: str) -> PlayerState:
        player = self.players.get(owner_id)
        if player is None:
            raise PlayerNotFound(f"no player {owner_id}")
        return player

    def join(self, owner_id: str, name: Optional[str] = None) -> Tuple[PlayerState, bool]:
        """Create the player, or hand back the existing one. Second value: reconnected."""
        with self._lock:
            player = self.players.get(owner_id)
            if player is not None:
                return player, True
            return self.create_player(owner_id, name), False

    def create_player(self, owner_id: str, name: Optional[str] = None, now: Optional[int] = None) -> PlayerState:
        with self._lock:
            now = self._now(now)
            if owner_id in self.players:
                raise PlayerExists(f"player {owner_id} already exists")
            self._commit_time(now)

            start = self.settings.initial_inventory
            inventory = Inventory(
                seeds=dict(start.get("seeds", {})),
                tools=dict(start.get("tools", {})),
                fertilizers=dict(start.get("fertilizers", {})),
            )
            player = PlayerState(id=owner_id, name=name or owner_id, inventory=inventory, created_at=now)
            self.players[owner_id] = player

            self.notify(NotificationKind.PLAYER_CREATED, now, owner=owner_id, name=player.name)
            return player

    # --- Notifications ---
    def notify(self, kind: NotificationKind, at: int, **data: Any) -> Notification:
        note = Notification(kind=kind, at=at, data=data)
        self.notifications.insert(0, note)
        if len(self.notifications) > self.settings.log_limit:
            self.notifications.pop()
        logger.info(f"[{kind.value}] {data}")
        return note

    # --- Queries ---
    def get_player_inventory(self, owner_id: str) -> Dict[str, Dict[str, int]]:
        with self._lock:
            inventory = self._player(owner_id).inventory
            return {
                "seeds": inventory.snapshot(ItemCategory.SEED),
                "tools": inventory.snapshot(ItemCategory.TOOL),
                "fertilizers": inventory.snapshot(ItemCategory.FERTILIZER),
            }

    def get_map_dimensions(self) -> Dict[str, int]:
        return self.world.dimensions()

    def get_land_info(self, x: int, y: int) -> Dict[str, Any]:
        """Stored tile state. Stage is only as fresh as the last check_growth."""
        with self._lock:
            tile = self.world.tile((x, y))
            info: Dict[str, Any] = {
                "x": x,
                "y": y,
                "land_type": tile.land_type.value,
                "has_crop": tile.crop is not None,
            }
            if tile.crop is not None:
                info.update(tile.crop.model_dump(mode="json"))
            return info

    def players_overview(self) -> List[Dict[str, Any]]:
        with self._lock:
            overview = [
                {
                    "id": p.id,
                    "name": p.name,
                    "seed_count": p.inventory.total(ItemCategory.SEED),
                    "tool_count": p.inventory.total(ItemCategory.TOOL),
                    "fertilizer_count": p.inventory.total(ItemCategory.FERTILIZER),
                }
                for p in self.players.values()
            ]
            overview.sort(key=lambda row: row["seed_count"], reverse=True)
            return overview

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            planted = [
                {"x": x, "y": y, "crop_name": tile.crop.crop_name, "stage": tile.crop.stage.value}
                for y, row in enumerate(self.world.tiles)
                for x, tile in enumerate(row)
                if tile.crop is not None
            ]
            return {
                "map": self.get_map_dimensions(),
                "initialized": self.world.initialized,
                "planted": planted,
                "merchants": self.get_merchants_info(),
                "last_refresh": self.world.last_refresh,
                "time": self._last_seen,
            }

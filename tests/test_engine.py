import os

import pytest

import config
import homestead
from homestead.engine import GameEngine, GameSettings
from homestead.errors import (
    ExploreCooldown,
    InvalidTimestamp,
    LandEmpty,
    MerchantNotFound,
    PlayerExists,
    PlayerNotFound,
    WorldAlreadyInitialized,
)
from homestead.models import ItemCategory, NotificationKind


def test_new_player_starting_inventory(engine):
    engine.create_player("alice")
    inv = engine.get_player_inventory("alice")
    assert inv["seeds"] == {"carrot": 5, "tomato": 3}
    assert inv["tools"] == {"shovel": 1, "watering_can": 1}
    assert inv["fertilizers"] == {}


def test_players_do_not_share_inventories(engine):
    alice = engine.create_player("alice")
    bob = engine.create_player("bob")
    alice.inventory.add(ItemCategory.SEED, "carrot", 10)
    assert bob.inventory.quantity(ItemCategory.SEED, "carrot") == 5


def test_duplicate_and_unknown_players(engine):
    engine.create_player("alice")
    with pytest.raises(PlayerExists):
        engine.create_player("alice")
    with pytest.raises(PlayerNotFound):
        engine.get_player_inventory("bob")


def test_player_created_notification(engine):
    engine.create_player("alice", "Alice")
    note = engine.notifications[0]
    assert note.kind == NotificationKind.PLAYER_CREATED
    assert note.data == {"owner": "alice", "name": "Alice"}
    assert note.at == 1000


def test_plant_and_harvest_notifications(engine, player, clock):
    engine.plant_seed("alice", 0, 0, "carrot")
    assert engine.notifications[0].kind == NotificationKind.SEED_PLANTED
    engine.water_plant("alice", 0, 0)
    player.inventory.add(ItemCategory.FERTILIZER, "basic_fertilizer", 1)
    engine.fertilize_plant("alice", 0, 0, "basic_fertilizer")
    clock.advance(300)
    engine.check_growth(0, 0)
    engine.harvest("alice", 0, 0)

    note = engine.notifications[0]
    assert note.kind == NotificationKind.PLANT_HARVESTED
    assert note.data["amount"] == 4
    assert note.at == 1300


def test_notification_log_is_bounded(make_engine):
    engine = make_engine(log_limit=3)
    for i in range(5):
        engine.create_player(f"p{i}")
    assert len(engine.notifications) == 3
    assert engine.notifications[0].data["owner"] == "p4"


def test_world_initialized_once(engine):
    with pytest.raises(WorldAlreadyInitialized):
        engine.initialize_world()


def test_map_dimensions(engine):
    assert engine.get_map_dimensions() == {"width": 10, "height": 10}


def test_time_never_runs_backwards(engine, clock):
    engine.refresh_merchant(now=5000)
    with pytest.raises(InvalidTimestamp):
        engine.check_growth(0, 0, now=4999)
    # a lagging clock is clamped to the latest time already seen
    assert engine._now() == 5000
    clock.advance(10_000)
    assert engine._now() == 11_000


def test_negative_time_rejected():
    engine = GameEngine(clock=lambda: 0)
    with pytest.raises(InvalidTimestamp):
        engine._now(-1)


def test_explore_adds_one_to_three_seeds(engine, player):
    before = player.inventory.total(ItemCategory.SEED)
    name, quantity = engine.explore_for_seeds("alice")
    assert name in engine.settings.explore_seeds
    assert 1 <= quantity <= 3
    assert player.inventory.total(ItemCategory.SEED) == before + quantity


def test_explore_is_uncapped_by_default(engine, player):
    gained = 0
    before = player.inventory.total(ItemCategory.SEED)
    for _ in range(5):
        gained += engine.explore_for_seeds("alice")[1]
    assert player.inventory.total(ItemCategory.SEED) == before + gained


def test_explore_cooldown(make_engine):
    engine = make_engine(explore_cooldown=60)
    engine.create_player("alice")
    engine.explore_for_seeds("alice", now=1000)
    with pytest.raises(ExploreCooldown):
        engine.explore_for_seeds("alice", now=1030)
    engine.explore_for_seeds("alice", now=1060)


def test_explore_quantity_follows_clock(engine, player):
    """ClockPicker: crop index = now % 5, quantity = (now + 1) % 3 + 1."""
    assert engine.explore_for_seeds("alice", now=1000) == ("carrot", 3)
    assert engine.explore_for_seeds("alice", now=1001) == ("tomato", 1)


def test_players_overview_and_snapshot(engine, player):
    engine.plant_seed("alice", 0, 0, "carrot")
    overview = engine.players_overview()
    assert overview == [{"id": "alice", "name": "Alice", "seed_count": 7,
                         "tool_count": 2, "fertilizer_count": 0}]

    snap = engine.snapshot()
    assert snap["planted"] == [{"x": 0, "y": 0, "crop_name": "carrot", "stage": "planted"}]
    assert snap["map"] == {"width": 10, "height": 10}
    assert snap["merchants"] == []


def test_settings_override_map_size(clock):
    engine = GameEngine(settings=GameSettings(map_width=4, map_height=2), clock=clock)
    engine.initialize_world()
    assert engine.get_map_dimensions() == {"width": 4, "height": 2}
    assert engine.get_land_info(3, 1)["land_type"] == "cultivable"


def test_rejected_action_does_not_advance_time(engine, player):
    with pytest.raises(LandEmpty):
        engine.check_growth(0, 0, now=999_999)
    assert engine.snapshot()["time"] == 1000

    # a later action at an ordinary time is still accepted
    engine.plant_seed("alice", 0, 0, "carrot", now=1500)
    assert engine.snapshot()["time"] == 1500


def test_rejected_trade_and_explore_do_not_advance_time(make_engine):
    engine = make_engine(explore_cooldown=60)
    engine.create_player("alice")
    engine.explore_for_seeds("alice", now=1000)
    with pytest.raises(ExploreCooldown):
        engine.explore_for_seeds("alice", now=1030)
    with pytest.raises(MerchantNotFound):
        engine.trade_with_merchant("alice", "nobody", 0, now=2000)
    assert engine.snapshot()["time"] == 1000


def test_join_creates_then_reconnects(engine):
    first, reconnected = engine.join("bob", "Bob")
    assert not reconnected
    again, reconnected = engine.join("bob", "Someone Else")
    assert reconnected
    assert again is first
    assert again.name == "Bob"
    assert len(engine.players) == 1


def test_data_file_ships_with_the_package():
    package_dir = os.path.abspath(list(homestead.__path__)[0])
    assert os.path.dirname(os.path.abspath(config.JSON_PATH)) == package_dir
    assert os.path.isfile(config.JSON_PATH)

import json
import os

# data.json ships inside the homestead package unless HOMESTEAD_DATA points elsewhere
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
JSON_PATH = os.environ.get("HOMESTEAD_DATA", os.path.join(BASE_DIR, "homestead", "data.json"))

with open(JSON_PATH, "r", encoding="utf-8") as f:
    data = json.load(f)

# --- World ---
world = data["world"]
MAP_WIDTH = world["width"]
MAP_HEIGHT = world["height"]
ZONING = world["zoning"]

# --- Crops ---
CROPS = data["crops"]
DEFAULT_CROP = data["default_crop"]

# --- Players ---
INITIAL_INVENTORY = data["initial_inventory"]
CULTIVATION_TOOL = data["tools"]["cultivation"]
WATERING_TOOL = data["tools"]["watering"]

# --- Traveling merchants ---
merchants = data["merchant_rules"]
MERCHANT_REFRESH_INTERVAL = merchants["refresh_interval"]
MERCHANT_LISTING_DURATION = merchants["listing_duration"]
MERCHANT_NAMES = merchants["names"]
SEED_OFFERS = merchants["seed_offers"]
TOOL_OFFERS = merchants["tool_offers"]
FERTILIZER_OFFERS = merchants["fertilizer_offers"]

# --- Exploration ---
exploration = data["exploration"]
EXPLORE_SEEDS = exploration["seeds"]
EXPLORE_MAX_QUANTITY = exploration["max_quantity"]
EXPLORE_COOLDOWN = exploration["cooldown"]

# --- Rules ---
settings = data["game_settings"]
CONSUME_CULTIVATION_TOOL = settings["consume_cultivation_tool"]
STRICT_CROP_CATALOG = settings["strict_crop_catalog"]
OFFER_PICKER = settings["offer_picker"]
LOG_LIMIT = settings["log_limit"]

"""Errors raised by engine actions.

Every action checks all of its preconditions before touching state, so any
of these means nothing changed. ``code`` is stable and safe to show to
clients; ``status`` is the HTTP status the server answers with.
"""


class GameError(Exception):
    code = "game_error"
    status = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


# --- World / tiles ---
class WorldAlreadyInitialized(GameError):
    code = "world_already_initialized"
    status = 409


class WorldNotInitialized(GameError):
    code = "world_not_initialized"
    status = 409


class InvalidCoordinate(GameError):
    code = "invalid_coordinate"


class LandNotCultivable(GameError):
    code = "land_not_cultivable"


class LandNotFarmland(GameError):
    code = "land_not_farmland"


class LandAlreadyCultivated(LandNotFarmland, LandNotCultivable):
    code = "land_already_cultivated"


class LandOccupied(GameError):
    code = "land_occupied"
    status = 409


class LandEmpty(GameError):
    code = "land_empty"


class CropNotMature(GameError):
    code = "crop_not_mature"


class UnknownCrop(GameError):
    code = "unknown_crop"


# --- Inventory ---
class InvalidAmount(GameError):
    code = "invalid_amount"


class InsufficientResource(GameError):
    code = "insufficient_resource"


class InsufficientSeed(InsufficientResource):
    code = "insufficient_seed"


class InsufficientTool(InsufficientResource):
    code = "insufficient_tool"


class InsufficientFertilizer(InsufficientResource):
    code = "insufficient_fertilizer"


class MissingTool(GameError):
    code = "missing_tool"


# --- Merchants ---
class InvalidMerchant(GameError):
    code = "invalid_merchant"
    status = 404


class MerchantNotFound(InvalidMerchant):
    code = "merchant_not_found"


class InvalidOffer(GameError):
    code = "invalid_offer"


class InsufficientPayment(GameError):
    code = "insufficient_payment"


# --- Players / time ---
class PlayerNotFound(GameError):
    code = "player_not_found"
    status = 404


class PlayerExists(GameError):
    code = "player_exists"
    status = 409


class InvalidTimestamp(GameError):
    code = "invalid_timestamp"


class ExploreCooldown(GameError):
    code = "explore_cooldown"
    status = 429

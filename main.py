import logging
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from homestead.engine import GameEngine
from homestead.errors import GameError, PlayerNotFound

logger = logging.getLogger(__name__)

app = FastAPI(title="Homestead")

# --- Global state ---
engine = GameEngine()
engine.initialize_world()
game_logs: List[str] = []


# --- Log helper ---
def log_event(message: str):
    time_str = datetime.now().strftime("%H:%M:%S")
    game_logs.insert(0, f"[{time_str}] {message}")  # newest first
    if len(game_logs) > engine.settings.log_limit:
        game_logs.pop()


def run_action(label: str, action, *args):
    """Run an engine action, turning game errors into HTTP errors."""
    try:
        return action(*args)
    except GameError as e:
        logger.debug(f"{label} rejected: {e.code} {e.message}")
        raise HTTPException(e.status, {"code": e.code, "message": e.message})


# --- API Models ---
class RegisterModel(BaseModel): owner_id: str; name: Optional[str] = None
class LandModel(BaseModel): owner_id: str; x: int; y: int
class PlantModel(BaseModel): owner_id: str; x: int; y: int; seed_name: str
class FertilizeModel(BaseModel): owner_id: str; x: int; y: int; fertilizer_name: str
class GrowthModel(BaseModel): x: int; y: int
class TradeModel(BaseModel): owner_id: str; merchant_id: str; offer_index: int
class ExploreModel(BaseModel): owner_id: str


@app.post("/api/register")
async def register_player(data: RegisterModel):
    # known owner: reconnect instead of creating a second farm
    p, reconnected = run_action("register", engine.join, data.owner_id, data.name)
    log_event(f"Player reconnected: {p.name}" if reconnected else f"Player joined: {p.name}")
    return {"status": "success", "owner_id": p.id, "name": p.name, "reconnected": reconnected}


@app.get("/api/state")
async def get_state(owner_id: Optional[str] = None):
    response = engine.snapshot()
    if owner_id:
        try:
            response["inventory"] = engine.get_player_inventory(owner_id)
        except PlayerNotFound:
            logger.debug(f"state requested for unknown owner {owner_id}")
    return response


@app.get("/api/land/{x}/{y}")
async def get_land(x: int, y: int):
    return run_action("land info", engine.get_land_info, x, y)


@app.get("/api/inventory/{owner_id}")
async def get_inventory(owner_id: str):
    return run_action("inventory", engine.get_player_inventory, owner_id)


@app.get("/api/merchants")
async def get_merchants():
    return {"merchants": engine.get_merchants_info()}


@app.get("/api/merchants/{merchant_id}/offers")
async def get_offers(merchant_id: str):
    return {"offers": run_action("offers", engine.get_merchant_offers, merchant_id)}


@app.post("/api/cultivate")
async def cultivate(data: LandModel):
    run_action("cultivate", engine.cultivate_land, data.owner_id, data.x, data.y)
    log_event(f"{data.owner_id} cultivated ({data.x}, {data.y})")
    return {"status": "success", "land": engine.get_land_info(data.x, data.y)}


@app.post("/api/plant")
async def plant(data: PlantModel):
    run_action("plant", engine.plant_seed, data.owner_id, data.x, data.y, data.seed_name)
    log_event(f"{data.owner_id} planted {data.seed_name} at ({data.x}, {data.y})")
    return {"status": "success", "land": engine.get_land_info(data.x, data.y)}


@app.post("/api/water")
async def water(data: LandModel):
    run_action("water", engine.water_plant, data.owner_id, data.x, data.y)
    return {"status": "success", "land": engine.get_land_info(data.x, data.y)}


@app.post("/api/fertilize")
async def fertilize(data: FertilizeModel):
    run_action("fertilize", engine.fertilize_plant, data.owner_id, data.x, data.y, data.fertilizer_name)
    return {"status": "success", "land": engine.get_land_info(data.x, data.y)}


@app.post("/api/check_growth")
async def check_growth(data: GrowthModel):
    run_action("check growth", engine.check_growth, data.x, data.y)
    return {"status": "success", "land": engine.get_land_info(data.x, data.y)}


@app.post("/api/harvest")
async def harvest(data: LandModel):
    amount = run_action("harvest", engine.harvest, data.owner_id, data.x, data.y)
    log_event(f"{data.owner_id} harvested {amount} at ({data.x}, {data.y})")
    return {"status": "success", "amount": amount}


@app.post("/api/explore")
async def explore(data: ExploreModel):
    seed_name, quantity = run_action("explore", engine.explore_for_seeds, data.owner_id)
    log_event(f"{data.owner_id} found {quantity} {seed_name} seed(s)")
    return {"status": "success", "seed_name": seed_name, "quantity": quantity}


@app.post("/api/trade")
async def trade(data: TradeModel):
    offer = run_action("trade", engine.trade_with_merchant, data.owner_id, data.merchant_id, data.offer_index)
    log_event(f"{data.owner_id} bought {offer.item_name} for {offer.price_amount} {offer.price_category}")
    return {"status": "success", "offer": offer.model_dump(mode="json")}


# --- Admin ---
@app.post("/admin/refresh_merchant")
async def refresh_merchant():
    merchant = run_action("refresh merchant", engine.refresh_merchant)
    if merchant is None:
        return {"status": "skipped", "merchants": engine.get_merchants_info()}
    log_event(f"Merchant arrived: {merchant.name} ({merchant.id})")
    return {"status": "success", "merchant": merchant.model_dump(mode="json")}


@app.get("/admin/data")
async def get_admin_data():
    return {
        "players": engine.players_overview(),
        "logs": game_logs,
        "notifications": [n.model_dump(mode="json") for n in engine.notifications],
        "state": engine.snapshot(),
    }


@app.post("/admin/reset")
async def reset_game():
    global engine, game_logs
    engine = GameEngine()
    engine.initialize_world()
    game_logs = []
    log_event("=== Game reset ===")
    return {"status": "reset complete"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)

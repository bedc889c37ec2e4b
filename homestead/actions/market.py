import logging
import random
import uuid
from typing import Any, Dict, List, Optional, Sequence

from homestead.errors import InsufficientPayment, InvalidOffer, MerchantNotFound
from homestead.models import ItemCategory, Merchant, MerchantOffer, NotificationKind

logger = logging.getLogger(__name__)


class OfferPicker:
    """Chooses an index into a candidate list for a given moment."""

    def pick(self, now: int, size: int, salt: int = 0) -> int:
        raise NotImplementedError


class ClockPicker(OfferPicker):
    """Index derived from the shared clock alone.

    Anyone who can read the clock can predict what the next merchant will
    sell and what exploring will find. Fine for a single table; use
    RandomPicker when players compete.
    """

    def pick(self, now: int, size: int, salt: int = 0) -> int:
        return (now + salt) % size


class RandomPicker(OfferPicker):
    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def pick(self, now: int, size: int, salt: int = 0) -> int:
        return self.rng.randrange(size)


def make_picker(kind: str, seed: Optional[int] = None) -> OfferPicker:
    if kind == "clock":
        return ClockPicker()
    if kind == "random":
        return RandomPicker(seed)
    raise ValueError(f"unknown offer picker: {kind}")


class MerchantActions:
    """Traveling merchant rotation and trading."""

    _OFFER_POOLS = (
        (ItemCategory.SEED, "seed_offers"),
        (ItemCategory.TOOL, "tool_offers"),
        (ItemCategory.FERTILIZER, "fertilizer_offers"),
    )

    def refresh_merchant(self, now: Optional[int] = None) -> Optional[Merchant]:
        """Drop expired listings and bring in one new merchant.

        Returns None without touching anything while the refresh cooldown
        is still running.
        """
        with self._lock:
            now = self._now(now)
            world = self.world
            if world.last_refresh is not None and now - world.last_refresh < self.settings.merchant_refresh_interval:
                logger.debug(f"Merchant refresh skipped, last one at {world.last_refresh}")
                return None

            self._commit_time(now)
            world.prune_merchants(now)
            merchant = self._spawn_merchant(now)
            world.merchants.append(merchant)
            world.last_refresh = now

            self.notify(NotificationKind.MERCHANT_SPAWNED, now, merchant_id=merchant.id,
                        name=merchant.name, expires_at=merchant.expires_at)
            return merchant

    def _spawn_merchant(self, now: int) -> Merchant:
        offers = []
        for salt, (category, pool_name) in enumerate(self._OFFER_POOLS):
            pool: Sequence[dict] = getattr(self.settings, pool_name)
            entry = pool[self.picker.pick(now, len(pool), salt)]
            offers.append(MerchantOffer(
                category=category,
                item_name=entry["item"],
                price_category=entry["price_category"],
                price_amount=entry["price_amount"],
            ))

        names = self.settings.merchant_names
        return Merchant(
            id=str(uuid.uuid4())[:8],
            name=names[self.picker.pick(now, len(names), len(self._OFFER_POOLS))],
            offers=offers,
            expires_at=now + self.settings.merchant_listing_duration,
        )

    def trade_with_merchant(self, owner_id: str, merchant_id: str, offer_index: int,
                            now: Optional[int] = None) -> MerchantOffer:
        with self._lock:
            now = self._now(now)
            player = self._player(owner_id)

            merchant = self.world.find_merchant(merchant_id)
            if merchant is None or merchant.expires_at <= now:
                raise MerchantNotFound(f"merchant {merchant_id} is not in town")
            if not 0 <= offer_index < len(merchant.offers):
                raise InvalidOffer(f"merchant {merchant_id} has no offer #{offer_index}")

            offer = merchant.offers[offer_index]
            if not player.inventory.has(ItemCategory.SEED, offer.price_category, offer.price_amount):
                raise InsufficientPayment(
                    f"{offer.item_name} costs {offer.price_amount} {offer.price_category}, "
                    f"have {player.inventory.quantity(ItemCategory.SEED, offer.price_category)}"
                )
            self._commit_time(now)

            player.inventory.consume(ItemCategory.SEED, offer.price_category, offer.price_amount)
            player.inventory.add(offer.category, offer.item_name, 1)

            logger.info(f"{player.name} bought {offer.item_name} from {merchant.name} "
                        f"for {offer.price_amount} {offer.price_category}")
            return offer

    def get_merchants_info(self, now: Optional[int] = None) -> List[Dict[str, Any]]:
        """Merchants still in town. Expired listings are hidden even before rotation prunes them."""
        with self._lock:
            now = self._now(now)
            return [
                {"id": m.id, "name": m.name, "expires_at": m.expires_at, "offer_count": len(m.offers)}
                for m in self.world.merchants
                if m.expires_at > now
            ]

    def get_merchant_offers(self, merchant_id: str, now: Optional[int] = None) -> List[Dict[str, Any]]:
        with self._lock:
            now = self._now(now)
            merchant = self.world.find_merchant(merchant_id)
            if merchant is None or merchant.expires_at <= now:
                raise MerchantNotFound(f"merchant {merchant_id} is not in town")
            return [offer.model_dump(mode="json") for offer in merchant.offers]

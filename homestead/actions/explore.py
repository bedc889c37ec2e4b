import logging
from typing import Optional, Tuple

from homestead.errors import ExploreCooldown
from homestead.models import ItemCategory

logger = logging.getLogger(__name__)


class ExplorationActions:
    def explore_for_seeds(self, owner_id: str, now: Optional[int] = None) -> Tuple[str, int]:
        """Forage for free seeds: one candidate crop, 1..EXPLORE_MAX_QUANTITY of it.

        Uncapped unless explore_cooldown is set.
        """
        with self._lock:
            now = self._now(now)
            player = self._player(owner_id)

            cooldown = self.settings.explore_cooldown
            if cooldown and player.last_explored_at is not None and now - player.last_explored_at < cooldown:
                wait = cooldown - (now - player.last_explored_at)
                raise ExploreCooldown(f"{player.name} can explore again in {wait}s")
            self._commit_time(now)

            seeds = self.settings.explore_seeds
            seed_name = seeds[self.picker.pick(now, len(seeds))]
            quantity = self.picker.pick(now, self.settings.explore_max_quantity, 1) + 1

            player.inventory.add(ItemCategory.SEED, seed_name, quantity)
            player.last_explored_at = now

            logger.info(f"{player.name} found {quantity} {seed_name} seed(s) while exploring")
            return seed_name, quantity

from typing import Iterable, List, Optional
import random
import re
import logging

from .common import AVAILABLE_REWARDS, ITEM_PREFIX, CLUE_PREFIX, RewardCategory

logger = logging.getLogger(__name__)

_PAYLOAD_RE = re.compile(r"\(([^)]+)\)")


def reward_category(reward_id: Optional[str]) -> RewardCategory:
    """Category of a concrete reward id, derived from its prefix."""
    if not reward_id:
        return RewardCategory.NONE
    if reward_id.startswith(ITEM_PREFIX):
        return RewardCategory.ITEM
    if reward_id.startswith(CLUE_PREFIX):
        return RewardCategory.CLUE
    return RewardCategory.NONE


def extract_payload(reward_id: Optional[str]) -> Optional[str]:
    """Returns the value embedded in a clue, e.g. 'Clue_Codigo_Safe (123)' -> '123'."""
    if not reward_id:
        return None
    match = _PAYLOAD_RE.search(reward_id)
    return match.group(1) if match else None


class RewardPool:
    """Concrete reward ids, consumed without replacement."""

    def __init__(self, rewards: Optional[Iterable[str]] = None):
        self._rewards: List[str] = list(AVAILABLE_REWARDS if rewards is None else rewards)
        if len(set(self._rewards)) != len(self._rewards):
            # Duplicates would let the same id be assigned twice
            logger.warning("Reward pool contains duplicate ids. Keeping the first occurrence of each.")
            self._rewards = list(dict.fromkeys(self._rewards))

    def __len__(self):
        return len(self._rewards)

    def __contains__(self, reward_id):
        return reward_id in self._rewards

    def is_empty(self) -> bool:
        return not self._rewards

    def pop_random(self, rng: random.Random) -> Optional[str]:
        """Removes and returns a random reward, or None when the pool is exhausted."""
        if not self._rewards:
            return None
        index = rng.randrange(len(self._rewards))
        return self._rewards.pop(index)

    def remaining(self) -> List[str]:
        return list(self._rewards)

    def copy(self) -> "RewardPool":
        return RewardPool(self._rewards)

from enum import Enum, auto
from typing import Union
import logging

logger = logging.getLogger(__name__)

class RewardCategory(Enum):
    ITEM = auto()
    CLUE = auto()
    SIGNAL = auto()
    VICTORY = auto()
    NONE = auto()

class PuzzleState(Enum):
    LOCKED = auto()
    AVAILABLE = auto()
    SOLVED = auto()

class DifficultyTier(Enum):
    """Difficulty tiers: (menu value, target puzzle count, allows restricted puzzles, timer seconds)."""
    EASY = (4, 4, False, 1800)
    MEDIUM = (7, 7, False, 1500)
    DIFFICULT = (10, 10, True, 1200)
    EXPERT = (-1, None, True, 1800) # None = every eligible puzzle

    def __init__(self, menu_value, target_count, allows_restricted, timer_seconds):
        self.menu_value = menu_value
        self.target_count = target_count
        self.allows_restricted = allows_restricted
        self.timer_seconds = timer_seconds

    @classmethod
    def parse(cls, value: Union["DifficultyTier", str, int, None]) -> "DifficultyTier":
        """Accepts a tier, its name or its menu value (4, 7, 10, -1). Unknown values fall back to EXPERT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            try:
                value = int(key)
            except ValueError:
                pass
        if isinstance(value, int):
            for tier in cls:
                if tier.menu_value == value:
                    return tier
        logger.warning(f"Unknown difficulty value {value!r}. Defaulting to EXPERT.")
        return cls.EXPERT

# --- Reward id prefixes ---
ITEM_PREFIX = "Item_"
CLUE_PREFIX = "Clue_"

# --- Terminal Gate ---
TERMINAL_GATE_ID = "escapeDoor"
DEFAULT_DOOR_REQUIREMENT = "Item_Llave_Maestra"
FINAL_CODE_CLUE_CLASS = "Clue_Codigo_Final"

# All concrete rewards puzzles can grant. The master key is reserved for the door fallback.
AVAILABLE_REWARDS = [
    "Item_Llave_Dorada",
    "Item_Llave_Pequeña",
    "Item_Destornillador",
    "Clue_Codigo_Vent (789)",
    "Clue_Codigo_Safe (123)",
    "Clue_Riddle (Tengo ojos...)",
    "Clue_Color_Sequence (Rojo, Azul, Verde)",
    "Clue_Book_Sequence (Verde, Rojo, Violeta, Azul)",
    "Item_Linterna_UV",
    "Clue_Password_Panel (HIDDEN)",
    "Item_Diapositiva",
    "Item_Bateria",
    "Clue_Codigo_Final (DOOR456)",
    "Clue_Symbol_Key (Estrella=A...)",
    "Clue_Under_Cube (Símbolo X?)",
]

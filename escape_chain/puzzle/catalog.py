from typing import Dict, List, Optional

from .common import RewardCategory, TERMINAL_GATE_ID
from .puzzle_types import PuzzleDefinition
from .requirements import Requirement
from .behaviors import (DirectActionBehavior, KeyLockBehavior, MultiStepBehavior, CodeEntryBehavior,
                        SequenceBehavior, MinigameBehavior, ExitDoorBehavior)

ITEM = RewardCategory.ITEM
CLUE = RewardCategory.CLUE
SIGNAL = RewardCategory.SIGNAL


def _puzzle(id, name, description, requires, reward, behavior, restricted=False, signal=None):
    return PuzzleDefinition(id=id, name=name, description=description,
                            requirement=Requirement.parse(requires), reward_category=reward,
                            restricted=restricted, signal=signal, behavior=behavior)


PUZZLE_CATALOG: List[PuzzleDefinition] = [
    # --- Cube & pressure plate ---
    _puzzle("demo_holdableCube", "Blue Cube", "A heavy blue cube.", None, SIGNAL,
            DirectActionBehavior("You pick up the blue cube. It might fit somewhere."),
            signal="Enable_Pressure_Plate"),
    _puzzle("pressurePlate", "Pressure Plate", "A plate in the floor. It seems to need weight.",
            "Enable_Pressure_Plate", ITEM,
            DirectActionBehavior("The plate sinks and something drops nearby.")),

    # --- Locks ---
    _puzzle("demo_keyLock", "Wooden Chest", "A chest with a golden lock.", "Item_Llave_Dorada", ITEM,
            KeyLockBehavior("You use the golden key and the chest opens.")),
    _puzzle("deskDrawer", "Desk Drawer", "A locked desk drawer.", "Item_Llave_Pequeña", ITEM,
            KeyLockBehavior("You use the small key and the drawer slides open.")),
    _puzzle("demo_uvMessage", "Hidden Message", "A blank stretch of wall.", "Item_Linterna_UV", CLUE,
            KeyLockBehavior("The UV light reveals a message on the wall.", consume=False)),

    # --- Free actions ---
    _puzzle("demo_simpleButton", "Wall Button", "A simple red button.", None, ITEM,
            DirectActionBehavior("You pressed the button.")),
    _puzzle("liftRug", "Rug", "A slightly raised rug.", None, CLUE,
            DirectActionBehavior("There is something written under the rug.")),
    _puzzle("movePicture", "Picture", "A crooked picture on the wall.", None, ITEM,
            DirectActionBehavior("You move the picture and something falls behind it.")),
    _puzzle("demo_2DPuzzleTrigger", "Picture Frame", "An old frame with a note tucked in.", None, CLUE,
            DirectActionBehavior("You find a note in the frame.")),

    # --- Code entry ---
    _puzzle("symbolMatching", "Symbol Book", "A book full of strange symbols.", "Clue_Symbol_Key", CLUE,
            CodeEntryBehavior("Use the symbol key to decipher the word.", answer="SECRETO")),
    _puzzle("demo_comboLock", "Safe", "A safe with a combination lock.", "Clue_Codigo_Safe", ITEM,
            CodeEntryBehavior("Enter the safe combination.", clue_classes=["Clue_Codigo_Safe"])),
    _puzzle("demo_riddle", "Riddle Panel", "A panel with a riddle.", "Clue_Riddle", CLUE,
            CodeEntryBehavior("What has eyes but cannot see?", answer="aguja")),
    _puzzle("demo_passwordPanel", "Password Panel", "A panel asking for a password.", "Clue_Password_Panel", ITEM,
            CodeEntryBehavior("Enter the password.", clue_classes=["Clue_Password_Panel"])),

    # --- Sequences ---
    _puzzle("demo_colorSequence", "Colour Buttons", "Three coloured buttons.", "Clue_Color_Sequence", SIGNAL,
            SequenceBehavior(["red", "blue", "green"], "Correct sequence! Something clicked in the bookshelf."),
            signal="Enable_Book_Puzzle"),
    _puzzle("bookSwap", "Bookshelf", "Four coloured books in the wrong order.",
            ["Clue_Book_Sequence", "Enable_Book_Puzzle"], ITEM,
            SequenceBehavior(["green", "red", "purple", "blue"], "The books click into place.")),

    # --- Minigames ---
    _puzzle("wiresPuzzle", "Wire Panel", "A panel of loose wires.", None, ITEM,
            MinigameBehavior("wires", "You connected the wires correctly!")),
    _puzzle("simonSays", "Simon Panel", "A panel of blinking lights.", None, ITEM,
            MinigameBehavior("simon", "The lights flash green.")),

    # --- Higher tiers only ---
    _puzzle("airVent", "Air Vent", "A metal grate high on the wall.",
            ["Item_Destornillador", "Item_Linterna_UV"], CLUE,
            MultiStepBehavior([("Item_Destornillador", "The grate comes loose. It is dark inside."),
                               ("Item_Linterna_UV", "")],
                              "The UV light reveals writing inside the vent.",
                              consumed=["Item_Destornillador"]),
            restricted=True),
    _puzzle("projectorPuzzle", "Projector", "A projector with no power and no slide.",
            ["Item_Bateria", "Item_Diapositiva"], CLUE,
            MultiStepBehavior([("Item_Bateria", "The projector hums to life."),
                               ("Item_Diapositiva", "")],
                              "The projector shows a code on the wall.",
                              consumed=["Item_Bateria", "Item_Diapositiva"]),
            restricted=True),
    _puzzle("finalKeypad", "Final Keypad", "A keypad next to the exit.",
            ["Clue_Codigo_Safe", "Clue_Codigo_Vent"], CLUE,
            CodeEntryBehavior("Enter the combined code.", clue_classes=["Clue_Codigo_Safe", "Clue_Codigo_Vent"]),
            restricted=True),

    # --- Exit (always present, requirement set after generation) ---
    PuzzleDefinition(id=TERMINAL_GATE_ID, name="Exit Door",
                     description="The only way out. It needs a master key or a final code.",
                     reward_category=RewardCategory.VICTORY, behavior=ExitDoorBehavior()),
]

_BY_ID: Dict[str, PuzzleDefinition] = {d.id: d for d in PUZZLE_CATALOG}


def get_puzzle_definition(puzzle_id: str) -> Optional[PuzzleDefinition]:
    return _BY_ID.get(puzzle_id)


def get_terminal_gate() -> PuzzleDefinition:
    return _BY_ID[TERMINAL_GATE_ID]

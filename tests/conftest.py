# conftest.py
"""
Shared pytest fixtures for the escape_chain tests.

Collaborators (world, UI events) are MagicMocks restricted to the abstract interface;
the inventory is the real in-memory implementation so requirement checks stay live.
"""
import logging
from unittest.mock import MagicMock

import pytest

from escape_chain.core.collaborators import GameEvents, InMemoryInventory, World
from escape_chain.core.game_state import GameSession
from escape_chain.puzzle.behaviors import CodeEntryBehavior, DirectActionBehavior, KeyLockBehavior
from escape_chain.puzzle.catalog import get_terminal_gate
from escape_chain.puzzle.common import DEFAULT_DOOR_REQUIREMENT, RewardCategory
from escape_chain.puzzle.generator import GenerationResult
from escape_chain.puzzle.puzzle_types import PuzzleDefinition, PuzzleInstance
from escape_chain.puzzle.requirements import Requirement

logger = logging.getLogger(__name__)


def _define(id, requires=None, reward=RewardCategory.ITEM, behavior=None, signal=None, restricted=False):
    return PuzzleDefinition(id=id, name=id.capitalize(), requirement=Requirement.parse(requires),
                            reward_category=reward, restricted=restricted, signal=signal,
                            behavior=behavior)


class StaticGenerator:
    """Stands in for ChainGenerator and always returns the same hand-built chain."""

    default_door_requirement = DEFAULT_DOOR_REQUIREMENT

    def __init__(self, factory):
        self.factory = factory
        self.target_counts = []

    def generate(self, catalog_subset, target_count=None, reward_pool=None, terminal_gate=None):
        self.target_counts.append(target_count)
        return GenerationResult(self.factory(), [], [], target_count)


def _room_chain():
    """button -> Item_Key; chest(Item_Key) -> Clue_Code (42); panel(Clue_Code) -> Power_On;
    lever(Power_On) -> master key; exit door(master key)."""
    button = _define("button", behavior=DirectActionBehavior("Click."))
    chest = _define("chest", "Item_Key", RewardCategory.CLUE, KeyLockBehavior("The chest opens."))
    panel = _define("panel", "Clue_Code", RewardCategory.SIGNAL,
                    CodeEntryBehavior("Enter the code.", clue_classes=["Clue_Code"]), signal="Power_On")
    lever = _define("lever", "Power_On", behavior=DirectActionBehavior("The lever drops."))
    return [
        PuzzleInstance(button, "Item_Key"),
        PuzzleInstance(chest, "Clue_Code (42)"),
        PuzzleInstance(panel),
        PuzzleInstance(lever, "Item_Llave_Maestra"),
        PuzzleInstance(get_terminal_gate(), requirement=Requirement.parse("Item_Llave_Maestra")),
    ]


@pytest.fixture
def define():
    """Factory for small catalog entries."""
    return _define


@pytest.fixture
def inventory():
    return InMemoryInventory()


@pytest.fixture
def world():
    world = MagicMock(spec=World)
    world.spawn_pickup.side_effect = lambda reward_id, position: f"pickup:{reward_id}"
    return world


@pytest.fixture
def events():
    return MagicMock(spec=GameEvents)


@pytest.fixture
def make_session(inventory, world, events):
    """Builds a session whose generator always yields the chain built by ``factory``."""

    def _make(factory, difficulty="easy", game_events=None):
        sink = game_events if game_events is not None else events
        session = GameSession(inventory, world, sink, generator=StaticGenerator(factory))
        return session.select_puzzles(difficulty)

    return _make


@pytest.fixture
def room_chain():
    return _room_chain


@pytest.fixture
def room(make_session, room_chain):
    """Session over the five-step room chain, freshly selected."""
    return make_session(room_chain)

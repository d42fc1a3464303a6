from typing import Iterable, List, Optional, Union
import random
import logging

from .common import (DifficultyTier, RewardCategory, ITEM_PREFIX,
                     DEFAULT_DOOR_REQUIREMENT, FINAL_CODE_CLUE_CLASS)
from .diagnostics import Diagnostic, DiagnosticReason
from .puzzle_types import PuzzleDefinition, PuzzleInstance
from .requirements import Requirement, RequirementResolver, SimulationState
from .rewards import RewardPool
from .catalog import get_terminal_gate

logger = logging.getLogger(__name__)


def filter_catalog(catalog: Iterable[PuzzleDefinition],
                   tier: Union[DifficultyTier, str, int]) -> List[PuzzleDefinition]:
    """Entries eligible for the tier. The Terminal Gate is never part of the result."""
    tier = DifficultyTier.parse(tier)
    return [d for d in catalog
            if not d.is_terminal() and (tier.allows_restricted or not d.restricted)]


def is_door_compatible(reward_id: Optional[str]) -> bool:
    """Items and the final code clue can open the exit."""
    if not reward_id:
        return False
    return reward_id.startswith(ITEM_PREFIX) or reward_id.startswith(FINAL_CODE_CLUE_CLASS)


class GenerationResult:
    """Ordered instances (Terminal Gate last), the unconsumed pool and any diagnostics."""

    def __init__(self, instances: List[PuzzleInstance], unused_pool: List[str],
                 diagnostics: List[Diagnostic], target_count: int):
        self.instances = instances
        self.unused_pool = unused_pool
        self.diagnostics = diagnostics
        self.target_count = target_count # After clamping

    @property
    def chain(self) -> List[PuzzleInstance]:
        return [i for i in self.instances if not i.is_terminal()]

    @property
    def terminal_gate(self) -> Optional[PuzzleInstance]:
        return next((i for i in self.instances if i.is_terminal()), None)

    def has(self, reason: DiagnosticReason) -> bool:
        return any(d.reason == reason for d in self.diagnostics)

    def __iter__(self):
        # Allows `instances, unused, diagnostics = generator.generate(...)`
        return iter((self.instances, self.unused_pool, self.diagnostics))


class ChainGenerator:
    """Builds an ordered, solvable chain of puzzles by greedy randomized forward construction."""

    SAFETY_FACTOR = 3 # Loop bound = SAFETY_FACTOR * target_count; each pass appends or stops

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None,
                 safety_factor: int = SAFETY_FACTOR,
                 default_door_requirement: str = DEFAULT_DOOR_REQUIREMENT):
        if rng is not None and seed is not None:
            raise ValueError("Pass either seed or rng, not both")
        if not (isinstance(safety_factor, int) and safety_factor > 0):
            raise ValueError("safety_factor must be a positive integer")
        if not default_door_requirement:
            raise ValueError("default_door_requirement must be a non-empty reward class")

        self.rng = rng if rng is not None else random.Random(seed)
        self.safety_factor = safety_factor
        self.default_door_requirement = default_door_requirement

    def generate(self, catalog_subset: Iterable[PuzzleDefinition],
                 target_count: Optional[int] = None,
                 reward_pool: Union[RewardPool, Iterable[str], None] = None,
                 terminal_gate: Optional[PuzzleDefinition] = None) -> GenerationResult:
        """Generates a chain from already tier-filtered definitions.

        The pool is copied, so the caller's snapshot is never consumed. A target of None
        means every eligible puzzle.
        """
        catalog_subset = list(catalog_subset)
        diagnostics: List[Diagnostic] = []

        if terminal_gate is None:
            terminal_gate = next((d for d in catalog_subset if d.is_terminal()), None) or get_terminal_gate()
        eligible = [d for d in catalog_subset if not d.is_terminal()]
        pool = reward_pool.copy() if isinstance(reward_pool, RewardPool) else RewardPool(reward_pool)

        if target_count is None:
            target_count = len(eligible)
        if not isinstance(target_count, int) or target_count < 0:
            raise ValueError(f"target_count must be a non-negative integer, got {target_count!r}")
        if target_count > len(eligible):
            self._report(diagnostics, DiagnosticReason.TARGET_CLAMPED,
                         f"Requested {target_count} puzzles but only {len(eligible)} are eligible. Using {len(eligible)}.",
                         requested=target_count, available=len(eligible))
            target_count = len(eligible)

        logger.info(f"Generating chain of {target_count} puzzles from {len(eligible)} candidates, pool size {len(pool)}.")

        accumulator = SimulationState()
        remaining = list(eligible)
        chain: List[PuzzleInstance] = []
        max_attempts = self.safety_factor * target_count
        attempts = 0

        while len(chain) < target_count and attempts < max_attempts:
            attempts += 1
            candidates = [d for d in remaining
                          if RequirementResolver.evaluate(d.requirement, accumulator).satisfied]
            if not candidates:
                self._report(diagnostics, DiagnosticReason.GENERATION_STUCK,
                             f"Chain generation stuck at {len(chain)}/{target_count} puzzles.",
                             accumulator=accumulator.snapshot(),
                             remaining=[d.id for d in remaining])
                break

            chosen = self.rng.choice(candidates)
            instance = PuzzleInstance(chosen)
            logger.debug(f"Selected candidate {chosen.id} out of {len(candidates)}")

            if chosen.reward_category in (RewardCategory.ITEM, RewardCategory.CLUE):
                reward = pool.pop_random(self.rng)
                if reward is None:
                    self._report(diagnostics, DiagnosticReason.REWARD_POOL_EXHAUSTED,
                                 f"No rewards left to assign to {chosen.id}. It will grant nothing.",
                                 puzzle_id=chosen.id, accumulator=accumulator.snapshot())
                else:
                    instance.assigned_reward = reward
                    # The accumulator tracks classes, not instances
                    accumulator.add_reward(reward)
                    logger.debug(f"Assigned reward {reward} to {chosen.id}")
            elif chosen.reward_category == RewardCategory.SIGNAL:
                accumulator.set_signal(chosen.signal)
                logger.debug(f"Adding signal {chosen.signal} from {chosen.id}")

            remaining.remove(chosen)
            chain.append(instance)

        instances = chain + [self._configure_terminal_gate(chain, terminal_gate, diagnostics)]
        logger.info("Chain generated: " + ", ".join(
            f"{i.id}->{i.assigned_reward}" if i.assigned_reward else i.id for i in instances))
        return GenerationResult(instances, pool.remaining(), diagnostics, target_count)

    def _configure_terminal_gate(self, chain: List[PuzzleInstance], gate: PuzzleDefinition,
                                 diagnostics: List[Diagnostic]) -> PuzzleInstance:
        last_reward = chain[-1].assigned_reward if chain else None
        if is_door_compatible(last_reward):
            requirement = Requirement.parse(last_reward)
        else:
            last_id = chain[-1].id if chain else None
            self._report(diagnostics, DiagnosticReason.TERMINAL_GATE_MISCONFIGURED,
                         f"Last puzzle ({last_id}) reward {last_reward!r} cannot open the exit. "
                         f"Defaulting door requirement to {self.default_door_requirement}; the game may be unsolvable.",
                         last_puzzle=last_id, last_reward=last_reward,
                         fallback=self.default_door_requirement)
            requirement = Requirement.parse(self.default_door_requirement)
        logger.info(f"Terminal gate {gate.id} requires {requirement.describe()}")
        return PuzzleInstance(gate, requirement=requirement)

    @staticmethod
    def _report(diagnostics: List[Diagnostic], reason: DiagnosticReason, message: str, **context):
        diagnostic = Diagnostic(reason, message, context)
        logger.warning(f"{diagnostic} {context}")
        diagnostics.append(diagnostic)

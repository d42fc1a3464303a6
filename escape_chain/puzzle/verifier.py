from typing import List, Optional, Tuple
import logging

from .common import RewardCategory
from .requirements import Requirement, RequirementResolver, SimulationState
from .generator import is_door_compatible

logger = logging.getLogger(__name__)

class ChainVerifier:
    """Replays a generated chain and re-checks its solvability guarantees."""

    def __init__(self, instances, default_door_requirement: Optional[str] = None):
        self.instances = list(instances)
        self.default_door_requirement = default_door_requirement
        self._initialization_error: Optional[str] = None

        gates = [i for i in self.instances if i.is_terminal()]
        if len(gates) != 1:
            self._initialization_error = f"Expected exactly one terminal gate, found {len(gates)}."
        elif self.instances[-1] is not gates[0]:
            self._initialization_error = "Terminal gate is not the last instance."
        if self._initialization_error:
            logger.error(f"ChainVerifier initialization failed: {self._initialization_error}")

    def verify(self) -> Tuple[bool, List[str]]:
        """
        Returns:
            Tuple containing:
            - bool: True if every check passed.
            - List[str]: One message per problem found.
        """
        if self._initialization_error:
            return False, [self._initialization_error]

        problems: List[str] = []
        accumulator = SimulationState()
        seen_rewards = set()
        chain, gate = self.instances[:-1], self.instances[-1]

        for position, instance in enumerate(chain):
            evaluation = RequirementResolver.evaluate(instance.requirement, accumulator)
            if not evaluation.satisfied:
                problems.append(f"{instance.id} (position {position}) is unreachable; missing {', '.join(evaluation.missing)}.")

            reward = instance.assigned_reward
            if reward is not None:
                if reward in seen_rewards:
                    problems.append(f"Reward {reward} is assigned more than once.")
                seen_rewards.add(reward)
                accumulator.add_reward(reward)
            elif instance.reward_category == RewardCategory.SIGNAL:
                accumulator.set_signal(instance.definition.signal)

        last_reward = chain[-1].assigned_reward if chain else None
        if is_door_compatible(last_reward):
            expected = Requirement.parse(last_reward)
        elif self.default_door_requirement:
            expected = Requirement.parse(self.default_door_requirement)
        else:
            expected = None
        if expected is not None and gate.requirement != expected:
            problems.append(f"Terminal gate requires {gate.requirement.describe()} but {expected.describe()} was expected.")

        if problems:
            logger.warning(f"Chain verification found {len(problems)} problem(s).")
        else:
            logger.info(f"Chain of {len(chain)} puzzles verified.")
        return not problems, problems

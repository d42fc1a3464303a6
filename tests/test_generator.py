import random

import pytest

from escape_chain.puzzle.catalog import PUZZLE_CATALOG, get_terminal_gate
from escape_chain.puzzle.common import DEFAULT_DOOR_REQUIREMENT, DifficultyTier, RewardCategory
from escape_chain.puzzle.diagnostics import DiagnosticReason
from escape_chain.puzzle.generator import ChainGenerator, filter_catalog
from escape_chain.puzzle.requirements import Requirement, RequirementResolver, SimulationState
from escape_chain.puzzle.rewards import RewardPool
from escape_chain.puzzle.verifier import ChainVerifier

SEEDS = range(40)


class TestCatalogFiltering:
    def test_lower_tiers_exclude_restricted_and_gate(self):
        easy = filter_catalog(PUZZLE_CATALOG, DifficultyTier.EASY)
        assert len(easy) == 17
        assert not any(d.restricted or d.is_terminal() for d in easy)

    def test_higher_tiers_include_restricted(self):
        difficult = filter_catalog(PUZZLE_CATALOG, "difficult")
        ids = {d.id for d in difficult}
        assert {"airVent", "projectorPuzzle", "finalKeypad"} <= ids
        assert "escapeDoor" not in ids
        assert len(difficult) == 20

    def test_catalog_has_a_single_terminal_gate(self):
        gates = [d for d in PUZZLE_CATALOG if d.is_terminal()]
        assert gates == [get_terminal_gate()]


class TestSolvability:
    @pytest.mark.parametrize("tier", list(DifficultyTier))
    def test_generated_chains_verify(self, tier):
        eligible = filter_catalog(PUZZLE_CATALOG, tier)
        for seed in SEEDS:
            result = ChainGenerator(seed=seed).generate(eligible, tier.target_count)
            ok, problems = ChainVerifier(result.instances, DEFAULT_DOOR_REQUIREMENT).verify()
            assert ok, f"seed {seed}: {problems}"

    @pytest.mark.parametrize("tier", list(DifficultyTier))
    def test_each_puzzle_reachable_from_earlier_rewards(self, tier):
        eligible = filter_catalog(PUZZLE_CATALOG, tier)
        for seed in SEEDS:
            result = ChainGenerator(seed=seed).generate(eligible, tier.target_count)
            accumulator = SimulationState()
            for instance in result.chain:
                assert RequirementResolver.evaluate(instance.requirement, accumulator).satisfied
                if instance.assigned_reward:
                    accumulator.add_reward(instance.assigned_reward)
                elif instance.reward_category == RewardCategory.SIGNAL:
                    accumulator.set_signal(instance.definition.signal)

    @pytest.mark.parametrize("tier", list(DifficultyTier))
    def test_no_reward_assigned_twice(self, tier):
        eligible = filter_catalog(PUZZLE_CATALOG, tier)
        for seed in SEEDS:
            result = ChainGenerator(seed=seed).generate(eligible, tier.target_count)
            rewards = [i.assigned_reward for i in result.instances if i.assigned_reward]
            assert len(rewards) == len(set(rewards))
            assert not set(rewards) & set(result.unused_pool)

    def test_terminal_gate_is_last(self):
        result = ChainGenerator(seed=1).generate(filter_catalog(PUZZLE_CATALOG, "easy"), 4)
        assert result.instances[-1].is_terminal()
        assert result.terminal_gate is result.instances[-1]
        assert len(result.chain) == 4


class TestScenarios:
    def test_key_granter_precedes_key_requirer(self, define):
        catalog = [
            define("granter"),
            define("requirer", "Item_Key", RewardCategory.SIGNAL, signal="Opened"),
            define("blocked_a", "Item_Missing"),
            define("blocked_b", "Clue_Missing", RewardCategory.CLUE),
            define("blocked_c", "Never_Set"),
        ]
        for seed in SEEDS:
            result = ChainGenerator(seed=seed).generate(catalog, 2, reward_pool=["Item_Key"])
            assert [i.id for i in result.chain] == ["granter", "requirer"]
            assert result.chain[0].assigned_reward == "Item_Key"

    def test_pool_exhaustion_leaves_reward_unassigned(self, define):
        catalog = [define("one"), define("two", reward=RewardCategory.CLUE), define("three")]
        result = ChainGenerator(seed=5).generate(catalog, 3, reward_pool=["Item_A", "Clue_B"])
        assert len(result.chain) == 3
        assert {i.assigned_reward for i in result.chain[:2]} == {"Item_A", "Clue_B"}
        assert result.chain[2].assigned_reward is None
        assert result.has(DiagnosticReason.REWARD_POOL_EXHAUSTED)

    def test_gate_falls_back_when_last_reward_is_plain_clue(self, define):
        result = ChainGenerator(seed=0).generate([define("rug", reward=RewardCategory.CLUE)], 1,
                                                 reward_pool=["Clue_Foo (not a final code)"])
        assert result.terminal_gate.requirement == Requirement.parse("Item_Llave_Maestra")
        assert result.has(DiagnosticReason.TERMINAL_GATE_MISCONFIGURED)

    def test_gate_requires_last_item(self, define):
        result = ChainGenerator(seed=0).generate([define("box")], 1, reward_pool=["Item_Crowbar"])
        assert result.terminal_gate.requirement == Requirement.parse("Item_Crowbar")
        assert not result.diagnostics

    def test_gate_accepts_final_code_clue(self, define):
        result = ChainGenerator(seed=0).generate([define("safe", reward=RewardCategory.CLUE)], 1,
                                                 reward_pool=["Clue_Codigo_Final (DOOR456)"])
        assert result.terminal_gate.requirement == Requirement.parse("Clue_Codigo_Final")
        assert not result.has(DiagnosticReason.TERMINAL_GATE_MISCONFIGURED)


class TestGeneratorEdgeCases:
    def test_target_is_clamped(self, define):
        result = ChainGenerator(seed=0).generate([define("a"), define("b")], 50)
        assert result.target_count == 2
        assert len(result.chain) == 2
        assert result.has(DiagnosticReason.TARGET_CLAMPED)

    def test_negative_target_rejected(self, define):
        with pytest.raises(ValueError):
            ChainGenerator(seed=0).generate([define("a")], -1)

    def test_zero_target_yields_only_gate(self, define):
        result = ChainGenerator(seed=0).generate([define("a")], 0)
        assert result.chain == []
        assert result.terminal_gate.requirement == Requirement.parse(DEFAULT_DOOR_REQUIREMENT)

    def test_stuck_generation_is_reported(self, define):
        result = ChainGenerator(seed=0).generate([define("locked", "Item_Nowhere")], 1)
        assert result.chain == []
        assert result.has(DiagnosticReason.GENERATION_STUCK)
        stuck = next(d for d in result.diagnostics if d.reason == DiagnosticReason.GENERATION_STUCK)
        assert stuck.context["remaining"] == ["locked"]

    def test_tightest_bound_still_builds_full_chain(self):
        eligible = filter_catalog(PUZZLE_CATALOG, "medium")
        for seed in SEEDS:
            result = ChainGenerator(seed=seed, safety_factor=1).generate(eligible, 7)
            assert len(result.chain) == 7
            assert not result.has(DiagnosticReason.GENERATION_STUCK)

    def test_same_seed_same_chain(self):
        eligible = filter_catalog(PUZZLE_CATALOG, "medium")
        first = ChainGenerator(seed=42).generate(eligible, 7)
        second = ChainGenerator(seed=42).generate(eligible, 7)
        assert [(i.id, i.assigned_reward) for i in first.instances] == \
               [(i.id, i.assigned_reward) for i in second.instances]

    def test_caller_pool_is_not_consumed(self):
        pool = RewardPool()
        ChainGenerator(seed=3).generate(filter_catalog(PUZZLE_CATALOG, "easy"), 4, reward_pool=pool)
        assert len(pool) == 15

    def test_result_unpacks(self, define):
        instances, unused, diagnostics = ChainGenerator(seed=0).generate([define("a")], 1, reward_pool=["Item_A", "Item_B"])
        assert len(instances) == 2
        assert len(unused) == 1
        assert diagnostics == []

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            ChainGenerator(seed=1, rng=random.Random(1))
        with pytest.raises(ValueError):
            ChainGenerator(safety_factor=0)
        with pytest.raises(ValueError):
            ChainGenerator(default_door_requirement="")


class TestChainVerifier:
    def test_gate_must_be_last(self, define):
        result = ChainGenerator(seed=0).generate([define("a")], 1, reward_pool=["Item_A"])
        ok, problems = ChainVerifier(list(reversed(result.instances))).verify()
        assert not ok
        assert "not the last" in problems[0]

    def test_unreachable_puzzle_is_flagged(self, define):
        result = ChainGenerator(seed=0).generate([define("a")], 1, reward_pool=["Item_A"])
        result.instances[0].requirement = Requirement.parse("Item_Elsewhere")
        ok, problems = ChainVerifier(result.instances, DEFAULT_DOOR_REQUIREMENT).verify()
        assert not ok
        assert any("unreachable" in p for p in problems)

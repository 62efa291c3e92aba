import pytest

from growth.battle.performance import ActionTarget, ActionType, BattlePerformance, CombatAction
from growth.battle.scoring import (
    PerformanceRating,
    adaptation_score,
    difficulty_multiplier,
    duration_multiplier,
    score,
    victory_multiplier,
)
from growth.progression.curve import experience_required_for
from growth.progression.ledger import Domain, LevelUp, SkillDomainLevel, new_ledger


@pytest.fixture
def won_battle(performance_factory):
    """95 second win against a foe two levels up."""
    return performance_factory(
        opponent_level=17,
        total_damage_dealt=450,
        total_damage_taken=180,
        critical_hits=3,
        abilities_used=4,
        strategic_decisions=2,
    )


def fail(action_type=ActionType.ATTACK):
    return CombatAction(action_type=action_type, success=False)

def hit(action_type=ActionType.ATTACK, target=ActionTarget.ENEMY):
    return CombatAction(action_type=action_type, success=True, target=target)


def test_combat_experience_breakdown(won_battle, demo_ledger):
    reward = score(won_battle, demo_ledger)
    combat = reward.gain_for(Domain.COMBAT)

    assert combat.base_amount == 20
    assert combat.bonus_total == 91
    assert combat.multiplier == pytest.approx(2.16)
    assert combat.experience == 196
    assert combat.justification == (
        "Combat experience: +20 base combat experience, +9 for dealing 450 damage, "
        "+30 for 3 critical hits, +32 for using 4 abilities"
    )

def test_clauses_add_up_to_bonus_total(won_battle, demo_ledger):
    reward = score(won_battle, demo_ledger)
    for gain in reward.skill_gains:
        assert sum(c.amount for c in gain.clauses) == gain.bonus_total
        assert gain.clauses[0].amount == gain.base_amount

def test_every_domain_scored(won_battle, demo_ledger):
    reward = score(won_battle, demo_ledger)
    assert [g.domain for g in reward.skill_gains] == list(Domain)
    assert reward.gain_for(Domain.MENTAL).experience == 112
    assert reward.gain_for(Domain.SURVIVAL).experience == 75
    assert reward.gain_for(Domain.SPIRITUAL).experience == 12
    assert reward.total_experience == sum(g.experience for g in reward.skill_gains)

def test_base_is_the_minimum(performance_factory, demo_ledger):
    # Short defeat against a much weaker foe
    performance = performance_factory(
        is_victory=False,
        battle_duration=10,
        player_level=20,
        opponent_level=10,
    )
    reward = score(performance, demo_ledger)

    for gain in reward.skill_gains:
        assert gain.experience == gain.base_amount
        assert gain.multiplier < 1

def test_flawless_victory(performance_factory, demo_ledger):
    performance = performance_factory(total_damage_dealt=100, total_damage_taken=0)
    combat = score(performance, demo_ledger).gain_for(Domain.COMBAT)

    assert combat.bonus_total == 52
    assert combat.multiplier == pytest.approx(2.4)
    assert combat.experience == 124
    assert "+30 for flawless victory" in combat.justification

def test_outnumbered_bumps_survival(performance_factory, demo_ledger):
    calm = score(performance_factory(), demo_ledger).gain_for(Domain.SURVIVAL)
    swarmed = score(performance_factory(outnumbered=True), demo_ledger).gain_for(Domain.SURVIVAL)

    assert swarmed.multiplier == pytest.approx(calm.multiplier + 0.3 * 1.2)
    assert swarmed.bonus_total == calm.bonus_total + 25

def test_unreported_terrain_is_not_adverse(performance_factory, demo_ledger):
    unknown = score(performance_factory(), demo_ledger).gain_for(Domain.SURVIVAL)
    adverse = score(performance_factory(terrain_advantage=False), demo_ledger).gain_for(Domain.SURVIVAL)

    assert adverse.bonus_total == unknown.bonus_total + 15

def test_action_log_bonuses(performance_factory, demo_ledger):
    performance = performance_factory(actions=(
        hit(ActionType.ATTACK),
        hit(ActionType.HEAL, ActionTarget.SELF),
        hit(ActionType.BUFF, ActionTarget.ALLY),
        hit(ActionType.BUFF, ActionTarget.ENEMY),
        hit(ActionType.DEBUFF, ActionTarget.ENEMY),
        fail(ActionType.SPECIAL),
    ))
    reward = score(performance, demo_ledger)

    assert "+5 for 1 successful attacks" in reward.gain_for(Domain.COMBAT).justification
    spiritual = reward.gain_for(Domain.SPIRITUAL).justification
    assert "+15 for 1 healing actions" in spiritual
    assert "+12 for 1 support actions" in spiritual
    assert "+10 for successful intimidation" in reward.gain_for(Domain.SOCIAL).justification
    assert "complex abilities" not in reward.gain_for(Domain.MENTAL).justification

@pytest.mark.parametrize("actions,expected", [
    ([], 0),
    ([fail(), hit()], 0),
    ([fail(), fail(), hit()], 6),
    ([fail()] * 6 + [hit()], 15),
    ([fail(), fail(), hit(), fail(), fail(), fail(), hit()], 15),
    ([fail(), fail(), fail()], 0),
])
def test_adaptation_score(actions, expected):
    assert adaptation_score(actions) == expected

@pytest.mark.parametrize("seconds,expected", [
    (0, 0.7),
    (29.9, 0.7),
    (30, 1.0),
    (60, 1.2),
    (179, 1.2),
    (180, 1.1),
    (300, 0.9),
    (1000, 0.9),
])
def test_duration_multiplier(seconds, expected):
    assert duration_multiplier(seconds) == expected

def test_victory_and_difficulty_multipliers():
    assert victory_multiplier(True) == 1.5
    assert victory_multiplier(False) == 0.8
    assert difficulty_multiplier(2) == pytest.approx(1.2)
    assert difficulty_multiplier(0) == 1.0
    assert difficulty_multiplier(-10) == 0.5

def test_level_ups_are_predicted_not_applied(won_battle):
    ledger = new_ledger("achilles")
    reward = score(won_battle, ledger)

    assert reward.level_ups == [LevelUp(Domain.COMBAT, 2)]
    assert ledger.core[Domain.COMBAT].level == 1
    assert ledger.core[Domain.COMBAT].experience == 0

def test_unlocked_interactions(won_battle, catalog):
    ledger = new_ledger("achilles")
    ledger.core[Domain.COMBAT] = SkillDomainLevel(
        level=24, experience=experience_required_for(25) - 10,
    )
    ledger.core[Domain.SURVIVAL] = SkillDomainLevel(level=20)

    reward = score(won_battle, ledger, catalog)

    assert LevelUp(Domain.COMBAT, 25) in reward.level_ups
    assert reward.unlocked_interaction_ids == ["combat_survival_synergy"]

def test_no_catalog_no_unlocks(won_battle):
    reward = score(won_battle, new_ledger("achilles"))
    assert reward.unlocked_interaction_ids == []

def test_performance_rating(won_battle, performance_factory, demo_ledger):
    assert score(won_battle, demo_ledger).performance_rating == PerformanceRating.EXCELLENT

    dismal = performance_factory(
        is_victory=False, battle_duration=10, player_level=20, opponent_level=10,
    )
    assert score(dismal, demo_ledger).performance_rating == PerformanceRating.POOR

def test_character_mismatch(performance_factory):
    with pytest.raises(ValueError):
        score(performance_factory(), new_ledger("loki"))

def test_unreported_damage_taken(demo_ledger):
    # Win in 95 s against a foe two levels up; no damage-taken counter
    performance = BattlePerformance(
        character_id="achilles",
        battle_id="battle_unreported",
        is_victory=True,
        battle_duration=95,
        player_level=15,
        opponent_level=17,
        total_damage_dealt=450,
        critical_hits=3,
        abilities_used=4,
    )
    reward = score(performance, demo_ledger)

    combat = reward.gain_for(Domain.COMBAT)
    assert combat.bonus_total == 91
    assert combat.multiplier == pytest.approx(2.16)
    assert combat.experience == 196
    assert "flawless" not in combat.justification
    assert "minimal damage" not in reward.gain_for(Domain.SURVIVAL).justification
    assert "resilience" not in reward.gain_for(Domain.SPIRITUAL).justification

"""
Combat performance scorer - battle telemetry to skill experience.

score() is a pure function of its inputs. It reads the current
ledger to predict level-ups but never modifies it; applying the
gains is the caller's job (see growth.progression.ledger.apply_gains).

Per domain:
    bonus_total = fixed base + itemized bonuses
    multiplier  = (victory * difficulty + domain bumps) * duration
    experience  = max(base, floor(bonus_total * multiplier))

Every bonus is kept as a BonusClause so the justification shown to
the player always adds up to bonus_total.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from growth.battle.performance import ActionTarget, ActionType, BattlePerformance, CombatAction
from growth.progression.curve import experience_required_for
from growth.progression.ledger import Domain, LevelUp, SkillDomainLedger
from growth.synergy.catalog import InteractionCatalog
from growth.synergy.eligibility import resolve_eligible


logger = logging.getLogger(__name__)


BASE_EXPERIENCE: dict[Domain, int] = {
    Domain.COMBAT: 20,
    Domain.SURVIVAL: 15,
    Domain.MENTAL: 12,
    Domain.SOCIAL: 8,
    Domain.SPIRITUAL: 6,
}

VICTORY_MULTIPLIER = 1.5
DEFEAT_MULTIPLIER = 0.8
DIFFICULTY_STEP = 0.1
DIFFICULTY_FLOOR = 0.5

# (upper bound in seconds, multiplier); anything longer gets LONG_BATTLE_MULTIPLIER
DURATION_BUCKETS: tuple[tuple[float, float], ...] = (
    (30, 0.7),
    (60, 1.0),
    (180, 1.2),
    (300, 1.1),
)
LONG_BATTLE_MULTIPLIER = 0.9

ADAPTATION_MIN_FAILURES = 2
ADAPTATION_PER_FAILURE = 3
ADAPTATION_CAP = 15

# Multiplier products are rounded to this many places before flooring
_FLOAT_PLACES = 9


class PerformanceRating(str, Enum):
    """Qualitative battle grade, worst to best."""
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"
    LEGENDARY = "legendary"


RATING_THRESHOLDS: tuple[tuple[float, PerformanceRating], ...] = (
    (150, PerformanceRating.LEGENDARY),
    (120, PerformanceRating.EXCELLENT),
    (90, PerformanceRating.GOOD),
    (60, PerformanceRating.AVERAGE),
)


@dataclass(frozen=True)
class BonusClause:
    """One itemized line of a domain's experience breakdown."""
    amount: int
    reason: str

    def __str__(self) -> str:
        return f"+{self.amount} {self.reason}"


@dataclass(frozen=True)
class SkillGain:
    """
    Experience earned in one domain for one battle.

    Attributes:
        domain: Skill domain
        experience: Final experience awarded
        multiplier: Combined multiplier applied to bonus_total
        base_amount: Fixed per-domain base (the minimum award)
        bonus_total: Sum of every clause, base included
        clauses: Itemized breakdown
    """
    domain: Domain
    experience: int
    multiplier: float
    base_amount: int
    bonus_total: int
    clauses: tuple[BonusClause, ...] = ()

    @property
    def justification(self) -> str:
        label = self.domain.value.capitalize()
        return f"{label} experience: " + ", ".join(str(c) for c in self.clauses)


@dataclass
class CombatSkillReward:
    """Everything one battle earned a character."""
    character_id: str
    battle_id: str
    skill_gains: list[SkillGain]
    level_ups: list[LevelUp] = field(default_factory=list)
    unlocked_interaction_ids: list[str] = field(default_factory=list)
    performance_rating: PerformanceRating = PerformanceRating.POOR

    @property
    def total_experience(self) -> int:
        return sum(g.experience for g in self.skill_gains)

    def gain_for(self, domain: Domain) -> SkillGain:
        for gain in self.skill_gains:
            if gain.domain == domain:
                return gain
        raise KeyError(domain)


class _Tally:
    """Accumulates clauses and multiplier bumps for one domain."""

    def __init__(self, domain: Domain):
        self.domain = domain
        self.clauses: list[BonusClause] = [
            BonusClause(BASE_EXPERIENCE[domain], f"base {domain.value} experience")
        ]
        self.bump = 0.0

    def add(self, amount: int, reason: str, bump: float = 0.0) -> None:
        if amount > 0:
            self.clauses.append(BonusClause(amount, reason))
        self.bump += bump

    @property
    def total(self) -> int:
        return sum(c.amount for c in self.clauses)


# Multipliers

def victory_multiplier(is_victory: bool) -> float:
    return VICTORY_MULTIPLIER if is_victory else DEFEAT_MULTIPLIER


def difficulty_multiplier(level_difference: int) -> float:
    return max(DIFFICULTY_FLOOR, 1 + DIFFICULTY_STEP * level_difference)


def duration_multiplier(seconds: float) -> float:
    """Short fights teach little, very long ones are inefficient."""
    for upper, multiplier in DURATION_BUCKETS:
        if seconds < upper:
            return multiplier
    return LONG_BATTLE_MULTIPLIER


def adaptation_score(actions: tuple[CombatAction, ...] | list[CombatAction]) -> int:
    """
    Reward recoveries: a success after two or more straight failures
    earns min(15, failures * 3).
    """
    score = 0
    failures = 0
    for action in actions:
        if not action.success:
            failures += 1
            continue
        if failures >= ADAPTATION_MIN_FAILURES:
            score += min(ADAPTATION_CAP, failures * ADAPTATION_PER_FAILURE)
        failures = 0
    return score


# Domain bonuses

def _combat(p: BattlePerformance) -> _Tally:
    t = _Tally(Domain.COMBAT)
    if p.total_damage_dealt > 0:
        t.add(min(50, p.total_damage_dealt // 50),
              f"for dealing {p.total_damage_dealt} damage")
    t.add(p.critical_hits * 10, f"for {p.critical_hits} critical hits")

    attacks = p.count_actions(ActionType.ATTACK)
    t.add(attacks * 5, f"for {attacks} successful attacks")
    t.add(p.abilities_used * 8, f"for using {p.abilities_used} abilities")

    # An unreported damage counter never counts as flawless
    if p.is_victory and p.total_damage_taken == 0:
        t.add(30, "for flawless victory", bump=0.5)
    return t


def _survival(p: BattlePerformance) -> _Tally:
    t = _Tally(Domain.SURVIVAL)
    taken = p.total_damage_taken
    if taken is not None and taken < p.total_damage_dealt * 0.5:
        t.add(20, "for taking minimal damage")
    t.add(p.successful_dodges * 8, f"for {p.successful_dodges} successful dodges")
    t.add(p.perfect_blocks * 10, f"for {p.perfect_blocks} perfect blocks")

    # Only an explicit report of bad terrain counts
    if p.terrain_advantage is False:
        t.add(15, "for fighting in adverse terrain")
    if p.outnumbered:
        t.add(25, "for surviving while outnumbered", bump=0.3)
    if p.battle_duration > 180:
        t.add(10, "for enduring long battle")
    return t


def _mental(p: BattlePerformance) -> _Tally:
    t = _Tally(Domain.MENTAL)
    t.add(p.strategic_decisions * 15, f"for {p.strategic_decisions} strategic decisions")

    specials = p.count_actions(ActionType.SPECIAL)
    t.add(specials * 12, f"for {specials} complex abilities")
    t.add(adaptation_score(p.actions), "for tactical adaptation")

    if p.is_victory and p.level_difference > 0:
        t.add(p.level_difference * 5, "for defeating stronger opponent")
    if p.is_victory and p.battle_duration < 60:
        t.add(18, "for efficient victory")
    return t


def _social(p: BattlePerformance) -> _Tally:
    t = _Tally(Domain.SOCIAL)
    t.add(p.social_interactions * 12, f"for {p.social_interactions} social interactions")

    if p.team_battle:
        t.add(20, "for team coordination", bump=0.2)

    intimidations = p.count_actions(ActionType.DEBUFF, target=ActionTarget.ENEMY)
    t.add(intimidations * 10, "for successful intimidation")

    if p.outnumbered and p.is_victory:
        t.add(25, "for leading through adversity")
    if p.is_victory and p.total_damage_dealt < p.opponent_level * 20:
        t.add(15, "for honorable victory")
    return t


def _spiritual(p: BattlePerformance) -> _Tally:
    t = _Tally(Domain.SPIRITUAL)
    t.add(p.spiritual_moments * 20, f"for {p.spiritual_moments} spiritual moments")

    heals = p.count_actions(ActionType.HEAL)
    t.add(heals * 15, f"for {heals} healing actions")

    support = p.count_actions(ActionType.BUFF, exclude_target=ActionTarget.ENEMY)
    t.add(support * 12, f"for {support} support actions")

    taken = p.total_damage_taken
    if p.is_victory and taken is not None and taken > p.opponent_level * 15:
        t.add(20, "for spiritual resilience")
    if p.battle_duration > 120 and p.failed_actions < 3:
        t.add(15, "for maintaining composure")
    if p.environment == "natural" and p.terrain_advantage:
        t.add(10, "for environmental harmony")
    return t


_DOMAIN_SCORERS = {
    Domain.COMBAT: _combat,
    Domain.SURVIVAL: _survival,
    Domain.MENTAL: _mental,
    Domain.SOCIAL: _social,
    Domain.SPIRITUAL: _spiritual,
}


def _to_gain(tally: _Tally, victory: float, difficulty: float, duration: float) -> SkillGain:
    multiplier = (victory * difficulty + tally.bump) * duration
    raw = math.floor(round(tally.total * multiplier, _FLOAT_PLACES))
    base = BASE_EXPERIENCE[tally.domain]
    return SkillGain(
        domain=tally.domain,
        experience=max(base, raw),
        multiplier=multiplier,
        base_amount=base,
        bonus_total=tally.total,
        clauses=tuple(tally.clauses),
    )


def predict_level_ups(gains: list[SkillGain], ledger: SkillDomainLedger) -> list[LevelUp]:
    """Which domains the gains would push over their next threshold."""
    level_ups = []
    for gain in gains:
        entry = ledger.core[gain.domain]
        if entry.level >= entry.max_level:
            continue
        if entry.experience + gain.experience >= experience_required_for(entry.level + 1):
            level_ups.append(LevelUp(gain.domain, entry.level + 1))
    return level_ups


def rate_performance(p: BattlePerformance, total_experience: int) -> PerformanceRating:
    """Grade a battle independently of the experience formulas."""
    score: float = 0
    if p.is_victory:
        score += 30
    if p.battle_duration < 60:
        score += 15
    if p.total_damage_taken is not None and p.total_damage_dealt > p.total_damage_taken * 2:
        score += 20

    score += min(20, p.critical_hits * 3)
    score += min(15, p.successful_dodges * 2)
    score += min(25, p.abilities_used * 4)
    score += min(20, p.strategic_decisions * 5)

    if p.level_difference > 0:
        score += p.level_difference * 10
    if p.outnumbered:
        score += 25

    score += min(30, total_experience / 5)

    for threshold, rating in RATING_THRESHOLDS:
        if score >= threshold:
            return rating
    return PerformanceRating.POOR


def _newly_eligible(
    ledger: SkillDomainLedger,
    level_ups: list[LevelUp],
    catalog: InteractionCatalog,
) -> list[str]:
    if not level_ups:
        return []

    projected = ledger.clone()
    for level_up in level_ups:
        projected.core[level_up.domain].level = level_up.new_level

    before = {d.id for d in resolve_eligible(catalog, ledger)}
    return [d.id for d in resolve_eligible(catalog, projected) if d.id not in before]


def score(
    performance: BattlePerformance,
    ledger: SkillDomainLedger,
    catalog: Optional[InteractionCatalog] = None,
) -> CombatSkillReward:
    """
    Score one battle.

    Args:
        performance: The finished battle
        ledger: The character's current skills (read only)
        catalog: When given, interactions that the predicted level-ups
            would newly unlock are listed on the reward

    Returns:
        CombatSkillReward with one SkillGain per domain
    """
    if performance.character_id != ledger.character_id:
        raise ValueError(
            f"Performance for '{performance.character_id}' scored against "
            f"ledger of '{ledger.character_id}'"
        )

    victory = victory_multiplier(performance.is_victory)
    difficulty = difficulty_multiplier(performance.level_difference)
    duration = duration_multiplier(performance.battle_duration)

    gains = [
        _to_gain(scorer(performance), victory, difficulty, duration)
        for scorer in _DOMAIN_SCORERS.values()
    ]

    for gain in gains:
        logger.debug(f"{performance.battle_id}: {gain.justification} -> {gain.experience}")

    level_ups = predict_level_ups(gains, ledger)
    unlocked = _newly_eligible(ledger, level_ups, catalog) if catalog is not None else []

    reward = CombatSkillReward(
        character_id=performance.character_id,
        battle_id=performance.battle_id,
        skill_gains=gains,
        level_ups=level_ups,
        unlocked_interaction_ids=unlocked,
    )
    reward.performance_rating = rate_performance(performance, reward.total_experience)
    return reward

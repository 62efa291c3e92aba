"""
Demo data constructors.

The resolver does not yet report every counter the scorer reads, so
these helpers fill the gaps with random values. All randomness in the
package lives here and is drawn from an injectable random.Random, so
a seeded generator gives repeatable demo battles.
"""

from __future__ import annotations

import random
from typing import Optional

from growth.battle.performance import BattlePerformance
from growth.battle.scoring import CombatSkillReward, score
from growth.progression.ledger import Domain, SkillDomainLedger, SkillDomainLevel


def _battle_id(rng: random.Random) -> str:
    return f"battle_{rng.getrandbits(48):012x}"


def create_battle_performance(
    character_id: str,
    is_victory: bool,
    battle_duration: float,
    player_level: int,
    opponent_level: int,
    damage_dealt: int,
    damage_taken: int,
    critical_hits: int,
    abilities_used: int,
    environment: str = "arena",
    rng: Optional[random.Random] = None,
) -> BattlePerformance:
    """
    Build a performance record from the counters a resolver reports.

    Dodges, blocks, social and spiritual moments, terrain and
    outnumbered flags are rolled from `rng`. Strategic decisions are
    estimated as half the abilities used.
    """
    rng = rng or random.Random()

    return BattlePerformance(
        character_id=character_id,
        battle_id=_battle_id(rng),
        is_victory=is_victory,
        battle_duration=battle_duration,
        player_level=player_level,
        opponent_level=opponent_level,
        total_damage_dealt=damage_dealt,
        total_damage_taken=damage_taken,
        critical_hits=critical_hits,
        successful_dodges=rng.randrange(3),
        perfect_blocks=rng.randrange(2),
        abilities_used=abilities_used,
        strategic_decisions=abilities_used // 2,
        social_interactions=rng.randrange(2),
        spiritual_moments=0,
        environment=environment,
        terrain_advantage=rng.random() > 0.5,
        outnumbered=rng.random() > 0.8,
        team_battle=False,
    )


def create_demo_ledger(character_id: str, archetype: Optional[str] = None) -> SkillDomainLedger:
    """A mid-game ledger for previews and tests."""
    levels = {
        Domain.COMBAT: (20, 850),
        Domain.SURVIVAL: (18, 600),
        Domain.MENTAL: (16, 420),
        Domain.SOCIAL: (12, 250),
        Domain.SPIRITUAL: (10, 180),
    }
    return SkillDomainLedger(
        character_id=character_id,
        archetype=archetype,
        core={
            domain: SkillDomainLevel(level=level, experience=experience, max_level=100)
            for domain, (level, experience) in levels.items()
        },
    )


def create_demo_reward(
    character_id: str,
    rng: Optional[random.Random] = None,
) -> CombatSkillReward:
    """Score a representative won battle against the demo ledger."""
    performance = create_battle_performance(
        character_id,
        is_victory=True,
        battle_duration=95,
        player_level=15,
        opponent_level=17,
        damage_dealt=450,
        damage_taken=180,
        critical_hits=3,
        abilities_used=4,
        environment="forest",
        rng=rng,
    )
    return score(performance, create_demo_ledger(character_id))

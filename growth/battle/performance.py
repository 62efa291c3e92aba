"""
Battle telemetry records.

A BattlePerformance is produced once per finished battle by the
combat resolver and handed to the scorer. Counters are validated as
non-negative at construction; a malformed record raises
pydantic.ValidationError rather than producing odd experience.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from engine.core.component import Record


class ActionType(str, Enum):
    """Kinds of logged combat actions."""
    ATTACK = "attack"
    DEFEND = "defend"
    SPECIAL = "special"
    DODGE = "dodge"
    CRITICAL = "critical"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"


class ActionTarget(str, Enum):
    SELF = "self"
    ENEMY = "enemy"
    ALLY = "ally"


class CombatAction(Record):
    """
    One logged action, in battle order.

    Attributes:
        action_type: What was attempted
        success: Whether it landed
        target: Who it was aimed at
        difficulty: 1-10 rating from the resolver
    """
    action_type: ActionType
    success: bool
    target: ActionTarget = ActionTarget.ENEMY
    damage: int = Field(default=0, ge=0)
    blocked: int = Field(default=0, ge=0)
    healed: int = Field(default=0, ge=0)
    skill_used: Optional[str] = None
    difficulty: int = Field(default=1, ge=1, le=10)


class BattlePerformance(Record):
    """Immutable summary of one completed battle for one character."""
    character_id: str
    battle_id: str
    is_victory: bool
    battle_duration: float = Field(ge=0)
    player_level: int = Field(ge=1)
    opponent_level: int = Field(ge=1)
    actions: tuple[CombatAction, ...] = ()

    # Aggregate counters
    total_damage_dealt: int = Field(default=0, ge=0)
    # None means the resolver did not report damage taken
    total_damage_taken: Optional[int] = Field(default=None, ge=0)
    critical_hits: int = Field(default=0, ge=0)
    successful_dodges: int = Field(default=0, ge=0)
    perfect_blocks: int = Field(default=0, ge=0)
    abilities_used: int = Field(default=0, ge=0)
    strategic_decisions: int = Field(default=0, ge=0)
    social_interactions: int = Field(default=0, ge=0)
    spiritual_moments: int = Field(default=0, ge=0)

    # Context
    environment: str = "arena"
    weather_conditions: Optional[str] = None
    # None means the resolver did not report terrain at all
    terrain_advantage: Optional[bool] = None
    outnumbered: bool = False
    team_battle: bool = False

    @property
    def level_difference(self) -> int:
        """Positive when the opponent out-levels the character."""
        return self.opponent_level - self.player_level

    def count_actions(
        self,
        action_type: ActionType,
        success: bool = True,
        exclude_target: Optional[ActionTarget] = None,
        target: Optional[ActionTarget] = None,
    ) -> int:
        """Count logged actions of a type with the given outcome."""
        return sum(
            1 for a in self.actions
            if a.action_type == action_type
            and a.success == success
            and (target is None or a.target == target)
            and (exclude_target is None or a.target != exclude_target)
        )

    @property
    def failed_actions(self) -> int:
        return sum(1 for a in self.actions if not a.success)

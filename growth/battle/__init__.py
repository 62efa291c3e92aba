"""
Battle module - turning battle performance into experience.
"""

from growth.battle.performance import (
    ActionType,
    ActionTarget,
    CombatAction,
    BattlePerformance,
)
from growth.battle.scoring import (
    PerformanceRating,
    BonusClause,
    SkillGain,
    CombatSkillReward,
    adaptation_score,
    predict_level_ups,
    rate_performance,
    score,
)

__all__ = [
    # Performance
    "ActionType",
    "ActionTarget",
    "CombatAction",
    "BattlePerformance",
    # Scoring
    "PerformanceRating",
    "BonusClause",
    "SkillGain",
    "CombatSkillReward",
    "adaptation_score",
    "predict_level_ups",
    "rate_performance",
    "score",
]

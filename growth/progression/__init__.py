"""
Progression module - experience curve and skill levels.

Provides:
- Level curve, tiers, titles and milestones
- Per-character skill ledger and level-up application
"""

from growth.progression.curve import (
    Tier,
    TierInfo,
    MilestoneType,
    MilestoneReward,
    LevelData,
    TierProgress,
    experience_required_for,
    experience_to_next,
    total_experience_for,
    level_from_total_experience,
    tier_for,
    tier_info,
    title_for,
    stat_points_for,
    milestone_for,
    next_milestone,
    level_data,
    tier_progress,
)
from growth.progression.ledger import (
    Domain,
    LevelUp,
    SkillDomainLevel,
    SkillDomainLedger,
    new_ledger,
    skill_level,
    apply_gains,
    set_skill,
)

__all__ = [
    # Curve
    "Tier",
    "TierInfo",
    "MilestoneType",
    "MilestoneReward",
    "LevelData",
    "TierProgress",
    "experience_required_for",
    "experience_to_next",
    "total_experience_for",
    "level_from_total_experience",
    "tier_for",
    "tier_info",
    "title_for",
    "stat_points_for",
    "milestone_for",
    "next_milestone",
    "level_data",
    "tier_progress",
    # Ledger
    "Domain",
    "LevelUp",
    "SkillDomainLevel",
    "SkillDomainLedger",
    "new_ledger",
    "skill_level",
    "apply_gains",
    "set_skill",
]

"""
Progression curve - experience thresholds, tiers, titles, milestones.

Every function here is pure and total over levels >= 1. The same
curve drives skill-domain level-ups and any UI that displays
progress, so changes must be made here and nowhere else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


BASE_EXPERIENCE = 100
GROWTH_FACTOR = 1.15
LEVEL_PENALTY_EXPONENT = 1.3
LEVEL_PENALTY_WEIGHT = 50


class Tier(Enum):
    """Progression tiers, in ascending order."""
    NOVICE = "novice"
    APPRENTICE = "apprentice"
    ADEPT = "adept"
    EXPERT = "expert"
    MASTER = "master"
    LEGEND = "legend"


class MilestoneType(Enum):
    """Kinds of one-time milestone rewards."""
    TRAINING_POINTS = "training_points"
    ABILITY = "ability"
    STAT_BOOST = "stat_boost"
    SPECIAL = "special"


@dataclass(frozen=True)
class TierInfo:
    """Display metadata for a tier."""
    tier: Tier
    name: str
    first_level: int
    # None for the open-ended legend tier
    last_level: Optional[int]
    description: str = ""
    benefits: tuple[str, ...] = ()

    def contains(self, level: int) -> bool:
        if level < self.first_level:
            return False
        return self.last_level is None or level <= self.last_level


@dataclass(frozen=True)
class MilestoneReward:
    """A one-time reward granted on reaching a specific level."""
    reward_type: MilestoneType
    name: str
    description: str
    value: Optional[int] = None


@dataclass(frozen=True)
class LevelData:
    """Everything the curve knows about a single level."""
    level: int
    experience_required: int
    experience_to_next: int
    stat_points: int
    tier: Tier
    title: str
    milestone: Optional[MilestoneReward] = None


@dataclass(frozen=True)
class TierProgress:
    """Position of a level within its tier."""
    current: TierInfo
    progress: float
    next_tier: Optional[TierInfo] = field(default=None)


TIERS: tuple[TierInfo, ...] = (
    TierInfo(
        Tier.NOVICE, "Novice", 1, 10,
        "Learning the basics of combat and training",
        ("Basic training access", "Core skill previews", "Simple combat abilities"),
    ),
    TierInfo(
        Tier.APPRENTICE, "Apprentice", 11, 20,
        "Developing fundamental skills and techniques",
        ("Intermediate training unlocked", "First signature abilities",
         "Team coordination basics"),
    ),
    TierInfo(
        Tier.ADEPT, "Adept", 21, 30,
        "Mastering advanced combat techniques",
        ("Advanced training facilities", "Complex skill combinations",
         "Leadership abilities"),
    ),
    TierInfo(
        Tier.EXPERT, "Expert", 31, 40,
        "Achieving exceptional mastery",
        ("Master-level training", "Signature skill mastery",
         "Cross-archetype learning"),
    ),
    TierInfo(
        Tier.MASTER, "Master", 41, 50,
        "Transcending normal limitations",
        ("Legendary training access", "Ultimate abilities unlocked",
         "Mentor capabilities"),
    ),
    TierInfo(
        Tier.LEGEND, "Legend", 51, None,
        "Achieving mythical status",
        ("Mythical abilities", "Reality-bending powers", "Infinite growth potential"),
    ),
)

_TIER_INFO: dict[Tier, TierInfo] = {info.tier: info for info in TIERS}

# Legend has no upper bound; progress bars use this nominal span
LEGEND_DISPLAY_SPAN = 150

TITLES: dict[Tier, tuple[str, ...]] = {
    Tier.NOVICE: (
        "Trainee", "Recruit", "Student", "Initiate", "Novice",
        "Cadet", "Learner", "Beginner", "Pupil", "Freshman",
    ),
    Tier.APPRENTICE: (
        "Apprentice", "Warrior-in-Training", "Combatant", "Fighter", "Soldier",
        "Guardian", "Defender", "Protector", "Sentinel", "Champion-to-be",
    ),
    Tier.ADEPT: (
        "Adept", "Skilled Fighter", "Battle-tested", "Veteran", "Elite",
        "Advanced Warrior", "Combat Expert", "Tactical Fighter", "Seasoned Hero",
        "Proven Champion",
    ),
    Tier.EXPERT: (
        "Expert", "Master Fighter", "Combat Specialist", "Elite Warrior",
        "Legendary Fighter", "Battle Master", "War Veteran", "Combat Legend",
        "Heroic Champion", "Renowned Warrior",
    ),
    Tier.MASTER: (
        "Master", "Grandmaster", "Legendary Hero", "Mythic Warrior",
        "Ultimate Champion", "Transcendent Master", "Cosmic Champion",
        "Eternal Paragon", "Divine Ascendant", "Omni-Leveler",
    ),
    Tier.LEGEND: (
        "Legend", "Mythic Legend", "Godlike Being", "Transcendent Hero",
        "Omnipotent Champion", "Infinite Legend", "Cosmic Deity",
        "Absolute Apex", "Universal Force", "Beyond Omega",
    ),
}

MILESTONES: dict[int, MilestoneReward] = {
    5: MilestoneReward(MilestoneType.TRAINING_POINTS, "First Milestone",
                       "Bonus training points for reaching level 5", 5),
    10: MilestoneReward(MilestoneType.ABILITY, "Signature Ability Unlock",
                        "Unlock your first signature ability"),
    15: MilestoneReward(MilestoneType.STAT_BOOST, "Power Surge",
                        "Permanent +2 to all stats", 2),
    20: MilestoneReward(MilestoneType.SPECIAL, "Tier Advancement",
                        "Advanced training facilities unlocked"),
    25: MilestoneReward(MilestoneType.TRAINING_POINTS, "Skill Mastery",
                        "Major training point bonus", 10),
    30: MilestoneReward(MilestoneType.ABILITY, "Ultimate Technique",
                        "Unlock powerful ultimate ability"),
    35: MilestoneReward(MilestoneType.STAT_BOOST, "Transcendence",
                        "Massive stat increase", 5),
    40: MilestoneReward(MilestoneType.SPECIAL, "Master Status",
                        "Cross-archetype skill learning unlocked"),
    45: MilestoneReward(MilestoneType.ABILITY, "Legendary Power",
                        "Unlock legendary-tier abilities"),
    50: MilestoneReward(MilestoneType.SPECIAL, "Maximum Power",
                        "Achieve ultimate character potential"),
}


def _check_level(level: int) -> None:
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")


def experience_required_for(level: int) -> int:
    """
    Experience threshold for reaching a level.

    floor(100 * 1.15^(level-2) + 50 * (level-1)^1.3) for level > 1,
    0 for level 1. Strictly increasing from level 1 onward.
    """
    _check_level(level)
    if level == 1:
        return 0
    return math.floor(
        BASE_EXPERIENCE * GROWTH_FACTOR ** (level - 2)
        + LEVEL_PENALTY_WEIGHT * (level - 1) ** LEVEL_PENALTY_EXPONENT
    )


def experience_to_next(level: int) -> int:
    """Gap between this level's threshold and the next one."""
    return experience_required_for(level + 1) - experience_required_for(level)


def total_experience_for(level: int) -> int:
    """Cumulative experience needed to climb from level 1 to `level`."""
    _check_level(level)
    return sum(experience_to_next(lvl) for lvl in range(1, level))


def level_from_total_experience(total: int) -> tuple[int, int, int]:
    """
    Convert lifetime experience into a level.

    Returns:
        (level, experience into that level, experience needed for the next)
    """
    if total < 0:
        raise ValueError(f"Total experience must be >= 0, got {total}")

    level = 1
    accumulated = 0
    while accumulated + experience_to_next(level) <= total:
        accumulated += experience_to_next(level)
        level += 1

    return level, total - accumulated, experience_to_next(level)


def tier_for(level: int) -> Tier:
    """Bucket a level into its tier. Legend is open-ended."""
    _check_level(level)
    for info in TIERS:
        if info.contains(level):
            return info.tier
    return Tier.LEGEND


def tier_info(tier: Tier) -> TierInfo:
    return _TIER_INFO[tier]


def title_for(level: int) -> str:
    """
    Title for a level.

    Indexes the tier's title list by position within the tier and
    clamps to the last title once the list runs out.
    """
    info = _TIER_INFO[tier_for(level)]
    titles = TITLES[info.tier]
    index = level - info.first_level
    return titles[min(index, len(titles) - 1)]


def stat_points_for(level: int) -> int:
    """Stat points granted on reaching a level."""
    _check_level(level)
    if level <= 10:
        return 2
    if level <= 30:
        return 3
    if level <= 45:
        return 4
    return 5


def milestone_for(level: int) -> Optional[MilestoneReward]:
    """Milestone reward at exactly this level, if any."""
    return MILESTONES.get(level)


def next_milestone(level: int) -> Optional[tuple[int, MilestoneReward]]:
    """First milestone strictly above `level`."""
    for milestone_level in sorted(MILESTONES):
        if milestone_level > level:
            return milestone_level, MILESTONES[milestone_level]
    return None


def level_data(level: int) -> LevelData:
    """Bundle everything the curve knows about a level."""
    return LevelData(
        level=level,
        experience_required=experience_required_for(level),
        experience_to_next=experience_to_next(level),
        stat_points=stat_points_for(level),
        tier=tier_for(level),
        title=title_for(level),
        milestone=milestone_for(level),
    )


def tier_progress(level: int) -> TierProgress:
    """Fractional progress through the current tier and the tier after it."""
    current = _TIER_INFO[tier_for(level)]
    last = current.last_level
    if last is None:
        last = current.first_level + LEGEND_DISPLAY_SPAN - 1

    span = last - current.first_level + 1
    progress = min(1.0, (level - current.first_level + 1) / span)

    index = TIERS.index(current)
    next_tier = TIERS[index + 1] if index + 1 < len(TIERS) else None

    return TierProgress(current=current, progress=progress, next_tier=next_tier)

"""
Skill domain ledger - per-character skill levels and experience.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Union

from pydantic import Field, model_validator

from engine.core.component import Component, register_component
from growth.progression.curve import experience_required_for

if TYPE_CHECKING:
    from growth.battle.scoring import SkillGain


logger = logging.getLogger(__name__)


class Domain(str, Enum):
    """The five core skill domains every character has."""
    COMBAT = "combat"
    SURVIVAL = "survival"
    MENTAL = "mental"
    SOCIAL = "social"
    SPIRITUAL = "spiritual"


SkillKey = Union[Domain, str]


@dataclass(frozen=True)
class LevelUp:
    """A single level crossed in one domain."""
    domain: Domain
    new_level: int


class SkillDomainLevel(Component):
    """
    Level and in-level experience for one domain.

    Attributes:
        level: Current level (1..max_level)
        experience: Experience accumulated toward the next level
        max_level: Level cap for this domain
    """
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    max_level: int = Field(default=100, ge=1)

    @model_validator(mode='after')
    def _level_within_cap(self) -> SkillDomainLevel:
        if self.level > self.max_level:
            raise ValueError(f"level {self.level} exceeds max_level {self.max_level}")
        return self

    @property
    def is_capped(self) -> bool:
        return self.level >= self.max_level

    @property
    def experience_needed(self) -> int:
        """Threshold for the next level (0 once capped)."""
        if self.is_capped:
            return 0
        return experience_required_for(self.level + 1)


@register_component
class SkillDomainLedger(Component):
    """
    Per-character skill record.

    Owns exactly one SkillDomainLevel per Domain. Signature and
    archetype skills are free-form name -> level maps consulted only
    by interaction requirements.
    """
    character_id: str
    archetype: Optional[str] = None
    core: dict[Domain, SkillDomainLevel]
    signature_skills: dict[str, int] = Field(default_factory=dict)
    archetype_skills: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode='after')
    def _all_domains_present(self) -> SkillDomainLedger:
        missing = [d.value for d in Domain if d not in self.core]
        if missing:
            raise ValueError(f"ledger is missing domains: {', '.join(missing)}")
        for name, level in {**self.signature_skills, **self.archetype_skills}.items():
            if level < 0:
                raise ValueError(f"skill '{name}' has negative level {level}")
        return self

    def domain(self, domain: Domain) -> SkillDomainLevel:
        return self.core[domain]


def new_ledger(
    character_id: str,
    archetype: Optional[str] = None,
    max_level: int = 100,
    signature_skills: Optional[dict[str, int]] = None,
    archetype_skills: Optional[dict[str, int]] = None,
) -> SkillDomainLedger:
    """Create a fresh ledger with every domain at level 1."""
    return SkillDomainLedger(
        character_id=character_id,
        archetype=archetype,
        core={d: SkillDomainLevel(max_level=max_level) for d in Domain},
        signature_skills=dict(signature_skills or {}),
        archetype_skills=dict(archetype_skills or {}),
    )


def skill_level(ledger: SkillDomainLedger, key: SkillKey) -> Optional[int]:
    """
    Single lookup for any requirement key.

    Core domains are checked first, then signature skills, then
    archetype skills. Returns None when the character has no such
    skill at all.
    """
    try:
        domain = Domain(key)
    except ValueError:
        domain = None

    if domain is not None:
        return ledger.core[domain].level

    if key in ledger.signature_skills:
        return ledger.signature_skills[key]
    return ledger.archetype_skills.get(key)


def apply_gains(
    ledger: SkillDomainLedger,
    gains: Iterable[SkillGain],
) -> tuple[SkillDomainLedger, list[LevelUp]]:
    """
    Apply experience gains and resolve level-ups.

    Each crossed threshold consumes its experience and raises the
    level by one, up to max_level. Experience keeps accumulating once
    the cap is reached. The input ledger is left untouched.

    Returns:
        (updated ledger, every level crossed in order)
    """
    updated = ledger.clone()
    level_ups: list[LevelUp] = []

    for gain in gains:
        if gain.experience < 0:
            raise ValueError(f"Negative experience gain for {gain.domain}")

        entry = updated.core[Domain(gain.domain)]
        level = entry.level
        experience = entry.experience + gain.experience

        while level < entry.max_level and experience >= experience_required_for(level + 1):
            experience -= experience_required_for(level + 1)
            level += 1
            level_ups.append(LevelUp(Domain(gain.domain), level))

        updated.core[Domain(gain.domain)] = SkillDomainLevel(
            level=level,
            experience=experience,
            max_level=entry.max_level,
        )

    for level_up in level_ups:
        logger.info(
            f"{ledger.character_id}: {level_up.domain.value} reached level {level_up.new_level}"
        )

    return updated, level_ups


def set_skill(
    ledger: SkillDomainLedger,
    name: str,
    level: int,
    archetype: bool = False,
) -> SkillDomainLedger:
    """Return a copy with a signature (or archetype) skill set to `level`."""
    if level < 0:
        raise ValueError(f"Skill level must be >= 0, got {level}")
    updated = ledger.clone()
    target = updated.archetype_skills if archetype else updated.signature_skills
    target[name] = level
    return updated

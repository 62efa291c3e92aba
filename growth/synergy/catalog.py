"""
Interaction catalog - the static rule set of skill synergies.

The catalog is built once at startup (normally from the bundled JSON
data) and passed by reference to the resolver and runtime. It is
never modified afterwards.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from engine.core.config import DEFAULT_DATA_PATH
from engine.resources.database import Database


logger = logging.getLogger(__name__)


class RuleGroup(str, Enum):
    """Catalog partition an interaction belongs to."""
    UNIVERSAL = "universal"
    SIGNATURE = "signature"
    ARCHETYPE = "archetype"


class EffectType(str, Enum):
    COMBAT = "combat"
    UTILITY = "utility"
    PASSIVE = "passive"
    SOCIAL = "social"


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class CombatPhase(str, Enum):
    START = "start"
    DURING = "during"
    END = "end"


@dataclass(frozen=True)
class SkillRequirement:
    """A (skill key, minimum level) pair."""
    skill: str
    min_level: int


@dataclass(frozen=True)
class Requirements:
    """What a character needs for an interaction to be eligible."""
    core_skills: tuple[SkillRequirement, ...] = ()
    signature_skills: tuple[SkillRequirement, ...] = ()
    character: Optional[str] = None
    archetype: Optional[str] = None

    @property
    def skills(self) -> tuple[SkillRequirement, ...]:
        """Core and signature requirements together."""
        return self.core_skills + self.signature_skills


@dataclass(frozen=True)
class InteractionEffects:
    """
    What an active interaction grants.

    Attributes:
        effect_type: Effect category
        bonuses: Bonus key -> value, summed across active interactions
        abilities: Abilities unlocked while active
        duration: Seconds the effect lasts (None = lasts while eligible)
        cooldown: Seconds before it can be activated again (None = no cooldown)
    """
    effect_type: EffectType
    bonuses: Mapping[str, float] = field(default_factory=dict, hash=False)
    abilities: tuple[str, ...] = ()
    duration: Optional[float] = None
    cooldown: Optional[float] = None

    @property
    def is_timed(self) -> bool:
        return self.duration is not None


@dataclass(frozen=True)
class TriggerConditions:
    """Battle situations in which the interaction applies (unset = any)."""
    combat_phase: Optional[CombatPhase] = None
    # Applies at or below this health percentage
    health_threshold: Optional[float] = None
    enemy_condition: Optional[str] = None
    environment: Optional[str] = None


@dataclass(frozen=True)
class InteractionDefinition:
    """Complete, immutable definition of one interaction."""
    id: str
    name: str
    group: RuleGroup
    requirements: Requirements
    effects: InteractionEffects
    triggers: TriggerConditions = field(default_factory=TriggerConditions)
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    icon: str = ""
    visual_effect: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InteractionDefinition:
        """Build a definition from a (schema-validated) data entry."""
        reqs = data.get('requirements', {})
        effects = data['effects']
        triggers = data.get('trigger_conditions', {})

        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description', ''),
            group=RuleGroup(data['group']),
            requirements=Requirements(
                core_skills=tuple(
                    SkillRequirement(r['skill'], r['min_level'])
                    for r in reqs.get('core_skills', [])
                ),
                signature_skills=tuple(
                    SkillRequirement(r['skill'], r['min_level'])
                    for r in reqs.get('signature_skills', [])
                ),
                character=reqs.get('character'),
                archetype=reqs.get('archetype'),
            ),
            effects=InteractionEffects(
                effect_type=EffectType(effects['type']),
                bonuses=MappingProxyType(dict(effects['bonuses'])),
                abilities=tuple(effects.get('abilities', [])),
                duration=effects.get('duration'),
                cooldown=effects.get('cooldown'),
            ),
            triggers=TriggerConditions(
                combat_phase=CombatPhase(triggers['combat_phase'])
                if 'combat_phase' in triggers else None,
                health_threshold=triggers.get('health_threshold'),
                enemy_condition=triggers.get('enemy_condition'),
                environment=triggers.get('environment'),
            ),
            rarity=Rarity(data.get('rarity', 'common')),
            icon=data.get('icon', ''),
            visual_effect=data.get('visual_effect', ''),
        )


class InteractionCatalog:
    """
    Read-only, ordered collection of interaction definitions.

    Iteration order is universal, then signature, then archetype
    definitions, each in the order given.
    """

    _GROUP_ORDER = (RuleGroup.UNIVERSAL, RuleGroup.SIGNATURE, RuleGroup.ARCHETYPE)

    def __init__(self, definitions: Iterable[InteractionDefinition]):
        ordered: list[InteractionDefinition] = []
        by_id: dict[str, InteractionDefinition] = {}

        definitions = list(definitions)
        for group in self._GROUP_ORDER:
            for definition in definitions:
                if definition.group != group:
                    continue
                if definition.id in by_id:
                    raise ValueError(f"Duplicate interaction id: {definition.id}")
                by_id[definition.id] = definition
                ordered.append(definition)

        self._definitions = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    @classmethod
    def from_database(cls, database: Database) -> InteractionCatalog:
        """Build a catalog from a loaded Database."""
        return cls(
            InteractionDefinition.from_dict(entry)
            for entry in database.interactions.values()
        )

    def get(self, interaction_id: str) -> Optional[InteractionDefinition]:
        return self._by_id.get(interaction_id)

    def __contains__(self, interaction_id: object) -> bool:
        return interaction_id in self._by_id

    def __iter__(self) -> Iterator[InteractionDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(d.id for d in self._definitions)

    def by_group(self, group: RuleGroup) -> list[InteractionDefinition]:
        return [d for d in self._definitions if d.group == group]

    def by_rarity(self, rarity: Rarity) -> list[InteractionDefinition]:
        return [d for d in self._definitions if d.rarity == rarity]

    def by_effect_type(self, effect_type: EffectType) -> list[InteractionDefinition]:
        return [d for d in self._definitions if d.effects.effect_type == effect_type]

    def for_character(self, character_id: str) -> list[InteractionDefinition]:
        """Signature interactions scoped to one character."""
        return [d for d in self._definitions if d.requirements.character == character_id]

    def for_archetype(self, archetype: str) -> list[InteractionDefinition]:
        return [d for d in self._definitions if d.requirements.archetype == archetype]

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{group.value}={len(self.by_group(group))}" for group in self._GROUP_ORDER
        )
        return f"InteractionCatalog({counts})"


def load_catalog(data_path: Path | str = DEFAULT_DATA_PATH) -> InteractionCatalog:
    """Load and validate the interaction catalog from disk."""
    database = Database(data_path)
    database.load_all()
    catalog = InteractionCatalog.from_database(database)
    logger.info(f"Interaction catalog ready: {catalog!r}")
    return catalog


@functools.lru_cache(maxsize=None)
def default_catalog() -> InteractionCatalog:
    """The bundled catalog, loaded once per process."""
    return load_catalog(DEFAULT_DATA_PATH)

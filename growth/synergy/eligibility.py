"""
Eligibility resolver - which interactions a character qualifies for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from growth.progression.ledger import SkillDomainLedger, skill_level
from growth.synergy.catalog import (
    CombatPhase,
    InteractionCatalog,
    InteractionDefinition,
    Requirements,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BattleContext:
    """Current battle situation, for trigger matching."""
    combat_phase: Optional[CombatPhase] = None
    health_percent: Optional[float] = None
    enemy_condition: Optional[str] = None
    environment: Optional[str] = None


def meets_requirements(
    requirements: Requirements,
    character_id: str,
    archetype: Optional[str],
    ledger: SkillDomainLedger,
) -> bool:
    """
    Check one requirement set.

    A skill the character does not have at all fails the whole
    requirement; there is no default level.
    """
    if requirements.character and requirements.character != character_id:
        return False
    if requirements.archetype and requirements.archetype != archetype:
        return False

    for requirement in requirements.skills:
        level = skill_level(ledger, requirement.skill)
        if level is None or level < requirement.min_level:
            return False

    return True


def resolve_eligible(
    catalog: InteractionCatalog,
    ledger: SkillDomainLedger,
    character_id: Optional[str] = None,
    archetype: Optional[str] = None,
) -> list[InteractionDefinition]:
    """
    Filter the catalog down to the interactions currently satisfied.

    Args:
        catalog: Interaction rules
        ledger: Character skills (core, signature and archetype)
        character_id: Defaults to the ledger's character
        archetype: Defaults to the ledger's archetype

    Returns:
        Eligible definitions in catalog order
    """
    character_id = character_id if character_id is not None else ledger.character_id
    archetype = archetype if archetype is not None else ledger.archetype

    eligible = [
        definition for definition in catalog
        if meets_requirements(definition.requirements, character_id, archetype, ledger)
    ]
    logger.debug(f"{character_id}: {len(eligible)}/{len(catalog)} interactions eligible")
    return eligible


def eligible_ids(
    catalog: InteractionCatalog,
    ledger: SkillDomainLedger,
) -> frozenset[str]:
    return frozenset(d.id for d in resolve_eligible(catalog, ledger))


def trigger_matches(definition: InteractionDefinition, context: BattleContext) -> bool:
    """
    Check an interaction's trigger conditions against the battle.

    Unset conditions always match. A set condition needs the matching
    context value; an unknown context value does not match.
    """
    triggers = definition.triggers

    if triggers.combat_phase is not None and triggers.combat_phase != context.combat_phase:
        return False

    if triggers.health_threshold is not None:
        if context.health_percent is None or context.health_percent > triggers.health_threshold:
            return False

    if triggers.enemy_condition is not None and triggers.enemy_condition != context.enemy_condition:
        return False

    if triggers.environment is not None and triggers.environment != context.environment:
        return False

    return True


def resolve_triggered(
    eligible: Iterable[InteractionDefinition],
    context: BattleContext,
) -> list[InteractionDefinition]:
    """Eligible interactions whose triggers fit the current battle."""
    return [d for d in eligible if trigger_matches(d, context)]

"""
Interaction runtime - activation, duration, cooldown, mastery.

Per (character, interaction) the lifecycle is:

    inactive --activate--> ACTIVE --duration ends--> COOLING_DOWN --cooldown 0--> inactive
                             |                                        ^
                             +------ duration ends, no cooldown ------+--> inactive

Records in COOLING_DOWN grant no bonuses but block re-activation.
Interactions without a duration stay ACTIVE until cleared.

Every function returns a new SkillSynergy; the input is never
modified. Expected rule violations come back as an ActivationResult
with a failure code. Negative time deltas are caller bugs and raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from pydantic import Field

from engine.core.component import Component, register_component
from growth.synergy.catalog import InteractionCatalog


logger = logging.getLogger(__name__)


DEFAULT_MASTERY_THRESHOLD = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionState(str, Enum):
    ACTIVE = "active"
    COOLING_DOWN = "cooling_down"


class ActivationFailure(str, Enum):
    """Why an activation request was refused."""
    ON_COOLDOWN = "on_cooldown"
    UNKNOWN_INTERACTION = "unknown_interaction"
    NOT_ELIGIBLE = "not_eligible"


class ActiveInteraction(Component):
    """
    A running interaction for one character.

    Attributes:
        interaction_id: Catalog id
        activated_at: When the activation happened
        remaining_duration: Seconds of effect left (None = no time limit)
        remaining_cooldown: Seconds until the interaction can be used again
        bonuses: Bonuses granted while ACTIVE
        state: ACTIVE or COOLING_DOWN
    """
    interaction_id: str
    activated_at: datetime
    remaining_duration: Optional[float] = Field(default=None, ge=0)
    remaining_cooldown: float = Field(default=0, ge=0)
    bonuses: dict[str, float] = Field(default_factory=dict)
    state: InteractionState = InteractionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == InteractionState.ACTIVE


@register_component
class SkillSynergy(Component):
    """
    Per-character interaction state.

    Attributes:
        character_id: Owning character
        active_interactions: Running and cooling-down records
        mastered_interaction_ids: Interactions unlocked as mastered
        combo_count: Successful activations, across all interactions
        last_updated: Time of the last activation or tick
    """
    character_id: str
    active_interactions: list[ActiveInteraction] = Field(default_factory=list)
    mastered_interaction_ids: list[str] = Field(default_factory=list)
    combo_count: int = Field(default=0, ge=0)
    last_updated: datetime = Field(default_factory=utcnow)

    def find(self, interaction_id: str) -> Optional[ActiveInteraction]:
        for record in self.active_interactions:
            if record.interaction_id == interaction_id:
                return record
        return None


@dataclass(frozen=True)
class ActivationResult:
    """
    Outcome of an activation request.

    On failure, synergy is the unmodified input.
    """
    success: bool
    synergy: SkillSynergy
    failure: Optional[ActivationFailure] = None
    newly_mastered: bool = False

    def __bool__(self) -> bool:
        return self.success


def new_synergy(character_id: str, now: Optional[datetime] = None) -> SkillSynergy:
    return SkillSynergy(character_id=character_id, last_updated=now or utcnow())


def is_on_cooldown(synergy: SkillSynergy, interaction_id: str) -> bool:
    record = synergy.find(interaction_id)
    return record is not None and record.remaining_cooldown > 0


def activate(
    synergy: SkillSynergy,
    interaction_id: str,
    catalog: InteractionCatalog,
    eligible_ids: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
    mastery_threshold: int = DEFAULT_MASTERY_THRESHOLD,
) -> ActivationResult:
    """
    Activate an interaction.

    Args:
        synergy: Current state
        interaction_id: Catalog id to activate
        catalog: Interaction rules
        eligible_ids: When given, ids outside this set are refused
        now: Activation time (defaults to the current UTC time)
        mastery_threshold: combo_count needed for mastery

    Returns:
        ActivationResult carrying the new state or a failure code
    """
    definition = catalog.get(interaction_id)
    if definition is None:
        logger.warning(f"{synergy.character_id}: unknown interaction '{interaction_id}'")
        return ActivationResult(False, synergy, ActivationFailure.UNKNOWN_INTERACTION)

    if is_on_cooldown(synergy, interaction_id):
        logger.debug(f"{synergy.character_id}: '{interaction_id}' is on cooldown")
        return ActivationResult(False, synergy, ActivationFailure.ON_COOLDOWN)

    if eligible_ids is not None and interaction_id not in set(eligible_ids):
        logger.debug(f"{synergy.character_id}: '{interaction_id}' is not eligible")
        return ActivationResult(False, synergy, ActivationFailure.NOT_ELIGIBLE)

    now = now or utcnow()
    record = ActiveInteraction(
        interaction_id=interaction_id,
        activated_at=now,
        remaining_duration=definition.effects.duration,
        remaining_cooldown=definition.effects.cooldown or 0,
        bonuses=dict(definition.effects.bonuses),
    )

    updated = synergy.model_copy(deep=True)
    updated.active_interactions = [
        r for r in updated.active_interactions if r.interaction_id != interaction_id
    ] + [record]
    updated.combo_count = synergy.combo_count + 1
    updated.last_updated = now

    # Mastery follows the character-wide combo count, so whichever
    # interaction is activated when the threshold is crossed is mastered.
    newly_mastered = (
        updated.combo_count >= mastery_threshold
        and interaction_id not in updated.mastered_interaction_ids
    )
    if newly_mastered:
        updated.mastered_interaction_ids = updated.mastered_interaction_ids + [interaction_id]
        logger.info(f"{synergy.character_id}: mastered '{interaction_id}'")

    logger.debug(
        f"{synergy.character_id}: activated '{interaction_id}' (combo {updated.combo_count})"
    )
    return ActivationResult(True, updated, newly_mastered=newly_mastered)


def tick(
    synergy: SkillSynergy,
    delta_seconds: float,
    now: Optional[datetime] = None,
) -> SkillSynergy:
    """
    Advance durations and cooldowns by delta_seconds.

    A timed effect ends once its accumulated tick time reaches its
    duration; it then waits out any remaining cooldown before the
    record is dropped. Untimed effects are never ended by time.
    """
    if delta_seconds < 0:
        raise ValueError(f"delta_seconds must be >= 0, got {delta_seconds}")

    remaining: list[ActiveInteraction] = []
    for record in synergy.active_interactions:
        cooldown = max(0.0, record.remaining_cooldown - delta_seconds)
        state = record.state
        duration = record.remaining_duration

        if state == InteractionState.ACTIVE and duration is not None:
            duration = max(0.0, duration - delta_seconds)
            if duration <= 0:
                state = InteractionState.COOLING_DOWN
                logger.debug(f"{synergy.character_id}: '{record.interaction_id}' expired")

        if state == InteractionState.COOLING_DOWN and cooldown <= 0:
            continue

        remaining.append(record.model_copy(update={
            'remaining_cooldown': cooldown,
            'remaining_duration': duration,
            'state': state,
        }))

    return synergy.model_copy(update={
        'active_interactions': remaining,
        'last_updated': now or utcnow(),
    }, deep=True)


def clear(synergy: SkillSynergy, interaction_id: str) -> SkillSynergy:
    """
    End an interaction's effect now.

    A pending cooldown is kept so the interaction stays blocked.
    """
    remaining: list[ActiveInteraction] = []
    for record in synergy.active_interactions:
        if record.interaction_id != interaction_id:
            remaining.append(record)
        elif record.remaining_cooldown > 0:
            remaining.append(record.model_copy(update={
                'state': InteractionState.COOLING_DOWN,
                'remaining_duration': 0.0 if record.remaining_duration is not None else None,
            }))

    return synergy.model_copy(update={'active_interactions': remaining}, deep=True)


def revoke_ineligible(synergy: SkillSynergy, eligible_ids: Iterable[str]) -> SkillSynergy:
    """Clear every running effect whose interaction is no longer eligible."""
    eligible = set(eligible_ids)
    for record in active_effects(synergy):
        if record.interaction_id not in eligible:
            synergy = clear(synergy, record.interaction_id)
    return synergy


def active_effects(synergy: SkillSynergy) -> list[ActiveInteraction]:
    """Records currently granting bonuses."""
    return [r for r in synergy.active_interactions if r.is_active]


def combined_bonuses(active_interactions: Iterable[ActiveInteraction]) -> dict[str, float]:
    """
    Sum bonuses across running interactions.

    Stacking is additive with no de-duplication; cooling-down records
    contribute nothing.
    """
    combined: dict[str, float] = {}
    for record in active_interactions:
        if not record.is_active:
            continue
        for key, value in record.bonuses.items():
            combined[key] = combined.get(key, 0) + value
    return combined

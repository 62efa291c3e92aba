"""
Progression manager - runs the battle -> skills -> synergy flow.

The rule modules are pure functions over value objects. This manager
is the host-facing convenience that owns each registered character's
ledger and synergy, sequences the calls in the right order, and
publishes GrowthEvents for UI and combat listeners.

Usage:
    manager = ProgressionManager()
    manager.register("achilles", archetype="warrior")
    reward = manager.record_battle(performance)
    manager.activate("achilles", "warrior_archetype_synergy")
    manager.update(dt)
    bonuses = manager.bonuses_for("achilles")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Optional

from engine.core.config import DEFAULT_DATA_PATH, EngineConfig
from engine.core.events import EventBus, GrowthEvent
from growth.battle.performance import BattlePerformance
from growth.battle.scoring import CombatSkillReward, score
from growth.progression.curve import milestone_for
from growth.progression.ledger import (
    SkillDomainLedger,
    apply_gains,
    new_ledger,
    set_skill,
)
from growth.synergy.catalog import (
    InteractionCatalog,
    InteractionDefinition,
    default_catalog,
    load_catalog,
)
from growth.synergy.eligibility import (
    BattleContext,
    eligible_ids,
    resolve_triggered,
)
from growth.synergy.runtime import (
    ActivationResult,
    SkillSynergy,
    activate,
    active_effects,
    combined_bonuses,
    new_synergy,
    revoke_ineligible,
    tick,
    utcnow,
)


@dataclass
class CharacterProgress:
    """Everything the manager tracks for one character."""
    character_id: str
    ledger: SkillDomainLedger
    synergy: SkillSynergy
    eligible: frozenset[str] = field(default_factory=frozenset)


class ProgressionManager:
    """
    Owns per-character progression state.

    Not thread-safe: one manager instance should be driven by a single
    game loop, which serializes battle results, activations and ticks.
    """

    def __init__(
        self,
        catalog: Optional[InteractionCatalog] = None,
        events: Optional[EventBus] = None,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config or EngineConfig()

        if catalog is None:
            if self.config.data_path == DEFAULT_DATA_PATH:
                catalog = default_catalog()
            else:
                catalog = load_catalog(self.config.data_path)
        self.catalog = catalog

        self.events = events or EventBus()
        self._clock = clock
        self._characters: dict[str, CharacterProgress] = {}

        self.logger = logging.getLogger(__name__)

    # Registration

    def register(
        self,
        character_id: str,
        archetype: Optional[str] = None,
        ledger: Optional[SkillDomainLedger] = None,
        synergy: Optional[SkillSynergy] = None,
    ) -> CharacterProgress:
        """
        Start tracking a character.

        A stored ledger/synergy may be passed in to resume a saved game.
        An explicit archetype must then match the ledger's archetype.
        """
        if character_id in self._characters:
            raise ValueError(f"Character '{character_id}' is already registered")

        if ledger is None:
            ledger = new_ledger(
                character_id,
                archetype=archetype,
                max_level=self.config.default_max_level,
            )
        elif ledger.character_id != character_id:
            raise ValueError(
                f"Ledger belongs to '{ledger.character_id}', not '{character_id}'"
            )
        elif archetype is not None and archetype != ledger.archetype:
            raise ValueError(
                f"Archetype '{archetype}' conflicts with ledger archetype "
                f"'{ledger.archetype}' for '{character_id}'"
            )

        progress = CharacterProgress(
            character_id=character_id,
            ledger=ledger,
            synergy=synergy or new_synergy(character_id, self._clock()),
            eligible=eligible_ids(self.catalog, ledger),
        )
        self._characters[character_id] = progress
        self.logger.debug(
            f"Registered {character_id} with {len(progress.eligible)} eligible interactions"
        )
        return progress

    def unregister(self, character_id: str) -> Optional[CharacterProgress]:
        return self._characters.pop(character_id, None)

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._characters

    @property
    def characters(self) -> Iterator[CharacterProgress]:
        return iter(self._characters.values())

    def _get(self, character_id: str) -> CharacterProgress:
        if character_id not in self._characters:
            raise KeyError(f"Character '{character_id}' is not registered")
        return self._characters[character_id]

    # Queries

    def ledger_for(self, character_id: str) -> SkillDomainLedger:
        return self._get(character_id).ledger

    def synergy_for(self, character_id: str) -> SkillSynergy:
        return self._get(character_id).synergy

    def eligible_for(self, character_id: str) -> list[InteractionDefinition]:
        """Eligible definitions in catalog order."""
        eligible = self._get(character_id).eligible
        return [d for d in self.catalog if d.id in eligible]

    def triggered_for(
        self,
        character_id: str,
        context: BattleContext,
    ) -> list[InteractionDefinition]:
        """Eligible interactions whose triggers match the battle context."""
        return resolve_triggered(self.eligible_for(character_id), context)

    def bonuses_for(self, character_id: str) -> dict[str, float]:
        return combined_bonuses(self._get(character_id).synergy.active_interactions)

    # Updates

    def record_battle(self, performance: BattlePerformance) -> CombatSkillReward:
        """
        Score a finished battle and apply it.

        Publishes BATTLE_SCORED, then LEVEL_UP / MILESTONE_REACHED per
        level crossed, then INTERACTION_UNLOCKED per new interaction.
        """
        progress = self._get(performance.character_id)

        reward = score(performance, progress.ledger, self.catalog)
        ledger, level_ups = apply_gains(progress.ledger, reward.skill_gains)

        # Store before publishing so handlers see the post-battle ledger
        unlocked, lost = self._store_ledger(progress, ledger)

        self.events.publish(
            GrowthEvent.BATTLE_SCORED,
            character_id=progress.character_id,
            reward=reward,
        )

        for level_up in level_ups:
            self.events.publish(
                GrowthEvent.LEVEL_UP,
                character_id=progress.character_id,
                domain=level_up.domain,
                new_level=level_up.new_level,
            )
            milestone = milestone_for(level_up.new_level)
            if milestone is not None:
                self.events.publish(
                    GrowthEvent.MILESTONE_REACHED,
                    character_id=progress.character_id,
                    domain=level_up.domain,
                    level=level_up.new_level,
                    milestone=milestone,
                )

        self._publish_eligibility(progress, unlocked, lost)
        self.logger.info(
            f"{progress.character_id}: battle {performance.battle_id} scored "
            f"{reward.total_experience} xp ({reward.performance_rating.value})"
        )
        return reward

    def set_skill(
        self,
        character_id: str,
        name: str,
        level: int,
        archetype: bool = False,
    ) -> SkillDomainLedger:
        """Set a signature or archetype skill and refresh eligibility."""
        progress = self._get(character_id)
        unlocked, lost = self._store_ledger(
            progress, set_skill(progress.ledger, name, level, archetype),
        )
        self._publish_eligibility(progress, unlocked, lost)
        return progress.ledger

    def _store_ledger(
        self,
        progress: CharacterProgress,
        ledger: SkillDomainLedger,
    ) -> tuple[list[InteractionDefinition], list[str]]:
        """
        Replace the ledger and re-resolve eligibility.

        Effects that are no longer eligible are cleared. Returns the
        newly eligible definitions and the ids that were lost.
        """
        previous = progress.eligible
        progress.ledger = ledger
        progress.eligible = eligible_ids(self.catalog, ledger)

        unlocked = [
            d for d in self.catalog
            if d.id in progress.eligible and d.id not in previous
        ]
        lost = sorted(previous - progress.eligible)
        if lost:
            progress.synergy = revoke_ineligible(progress.synergy, progress.eligible)
        return unlocked, lost

    def _publish_eligibility(
        self,
        progress: CharacterProgress,
        unlocked: list[InteractionDefinition],
        lost: list[str],
    ) -> None:
        for definition in unlocked:
            self.events.publish(
                GrowthEvent.INTERACTION_UNLOCKED,
                character_id=progress.character_id,
                interaction=definition,
            )
        for interaction_id in lost:
            self.events.publish(
                GrowthEvent.INTERACTION_REVOKED,
                character_id=progress.character_id,
                interaction_id=interaction_id,
            )

    def activate(self, character_id: str, interaction_id: str) -> ActivationResult:
        """
        Activate an interaction for a character.

        Only currently eligible interactions can be activated.
        """
        progress = self._get(character_id)
        result = activate(
            progress.synergy,
            interaction_id,
            self.catalog,
            eligible_ids=progress.eligible,
            now=self._clock(),
            mastery_threshold=self.config.mastery_threshold,
        )

        if not result.success:
            self.logger.warning(
                f"{character_id}: activation of '{interaction_id}' rejected "
                f"({result.failure.value})"
            )
            self.events.publish(
                GrowthEvent.ACTIVATION_REJECTED,
                character_id=character_id,
                interaction_id=interaction_id,
                failure=result.failure,
            )
            return result

        progress.synergy = result.synergy
        self.events.publish(
            GrowthEvent.INTERACTION_ACTIVATED,
            character_id=character_id,
            interaction_id=interaction_id,
            combo_count=result.synergy.combo_count,
        )
        if result.newly_mastered:
            self.events.publish(
                GrowthEvent.INTERACTION_MASTERED,
                character_id=character_id,
                interaction_id=interaction_id,
            )
        return result

    def update(self, dt: float) -> None:
        """
        Advance every character's interactions by dt seconds.

        Publishes INTERACTION_EXPIRED for effects that ended this step.
        """
        now = self._clock()
        for progress in self._characters.values():
            running = {r.interaction_id for r in active_effects(progress.synergy)}
            progress.synergy = tick(progress.synergy, dt, now=now)
            still_running = {r.interaction_id for r in active_effects(progress.synergy)}

            for interaction_id in sorted(running - still_running):
                self.events.publish(
                    GrowthEvent.INTERACTION_EXPIRED,
                    character_id=progress.character_id,
                    interaction_id=interaction_id,
                )

"""
Synergy module - skill interactions.

Provides:
- Interaction catalog loaded from JSON data
- Eligibility and trigger resolution
- Activation, duration, cooldown and mastery tracking
"""

from growth.synergy.catalog import (
    RuleGroup,
    EffectType,
    Rarity,
    CombatPhase,
    SkillRequirement,
    Requirements,
    InteractionEffects,
    TriggerConditions,
    InteractionDefinition,
    InteractionCatalog,
    load_catalog,
    default_catalog,
)
from growth.synergy.eligibility import (
    BattleContext,
    meets_requirements,
    resolve_eligible,
    eligible_ids,
    trigger_matches,
    resolve_triggered,
)
from growth.synergy.runtime import (
    InteractionState,
    ActivationFailure,
    ActiveInteraction,
    SkillSynergy,
    ActivationResult,
    new_synergy,
    is_on_cooldown,
    activate,
    tick,
    clear,
    revoke_ineligible,
    active_effects,
    combined_bonuses,
)

__all__ = [
    # Catalog
    "RuleGroup",
    "EffectType",
    "Rarity",
    "CombatPhase",
    "SkillRequirement",
    "Requirements",
    "InteractionEffects",
    "TriggerConditions",
    "InteractionDefinition",
    "InteractionCatalog",
    "load_catalog",
    "default_catalog",
    # Eligibility
    "BattleContext",
    "meets_requirements",
    "resolve_eligible",
    "eligible_ids",
    "trigger_matches",
    "resolve_triggered",
    # Runtime
    "InteractionState",
    "ActivationFailure",
    "ActiveInteraction",
    "SkillSynergy",
    "ActivationResult",
    "new_synergy",
    "is_on_cooldown",
    "activate",
    "tick",
    "clear",
    "revoke_ineligible",
    "active_effects",
    "combined_bonuses",
]

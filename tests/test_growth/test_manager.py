import pytest

from engine.core.config import EngineConfig
from engine.core.events import GrowthEvent
from growth.manager import ProgressionManager
from growth.progression.curve import experience_required_for
from growth.progression.ledger import Domain, SkillDomainLevel, new_ledger
from growth.synergy.eligibility import BattleContext
from growth.synergy.runtime import ActivationFailure


@pytest.fixture
def recorded(event_bus):
    """Every GrowthEvent published on the bus, in order."""
    events = []
    for event_type in GrowthEvent:
        event_bus.subscribe(event_type, events.append, weak=False)
    return events


@pytest.fixture
def manager(catalog, event_bus, now):
    return ProgressionManager(catalog=catalog, events=event_bus, clock=lambda: now)


def ready_ledger(character_id="achilles"):
    """One combat level short of combat_survival_synergy."""
    ledger = new_ledger(character_id, archetype="warrior")
    ledger.core[Domain.COMBAT] = SkillDomainLevel(
        level=24, experience=experience_required_for(25) - 10,
    )
    ledger.core[Domain.SURVIVAL] = SkillDomainLevel(level=20)
    return ledger


def of_type(events, event_type):
    return [e for e in events if e.type == event_type]


def test_register(manager):
    progress = manager.register("achilles", archetype="warrior")

    assert "achilles" in manager
    assert progress.ledger.archetype == "warrior"
    assert manager.synergy_for("achilles").combo_count == 0
    assert manager.eligible_for("achilles") == []

def test_register_twice(manager):
    manager.register("achilles")
    with pytest.raises(ValueError):
        manager.register("achilles")

def test_register_with_foreign_ledger(manager):
    with pytest.raises(ValueError):
        manager.register("achilles", ledger=new_ledger("loki"))

def test_unregistered_character(manager):
    with pytest.raises(KeyError):
        manager.ledger_for("nobody")
    assert manager.unregister("nobody") is None

def test_config_max_level(catalog):
    manager = ProgressionManager(catalog=catalog, config=EngineConfig(default_max_level=5))
    manager.register("loki")
    assert manager.ledger_for("loki").core[Domain.COMBAT].max_level == 5

def test_record_battle(manager, recorded, performance_factory):
    manager.register("achilles", ledger=ready_ledger())

    reward = manager.record_battle(performance_factory(
        total_damage_dealt=450, critical_hits=3, abilities_used=4,
    ))

    assert manager.ledger_for("achilles").core[Domain.COMBAT].level == 25
    assert reward.unlocked_interaction_ids == ["combat_survival_synergy"]
    assert [d.id for d in manager.eligible_for("achilles")] == ["combat_survival_synergy"]

    types = [e.type for e in recorded]
    assert types[0] == GrowthEvent.BATTLE_SCORED
    assert GrowthEvent.LEVEL_UP in types
    assert types.index(GrowthEvent.LEVEL_UP) < types.index(GrowthEvent.INTERACTION_UNLOCKED)

    level_up = of_type(recorded, GrowthEvent.LEVEL_UP)[0]
    assert level_up["domain"] == Domain.COMBAT
    assert level_up["new_level"] == 25

    milestone = of_type(recorded, GrowthEvent.MILESTONE_REACHED)[0]
    assert milestone["level"] == 25

    unlocked = of_type(recorded, GrowthEvent.INTERACTION_UNLOCKED)[0]
    assert unlocked["interaction"].id == "combat_survival_synergy"

def synergy_ledger(character_id="achilles"):
    """Qualifies for combat_survival_synergy and Achilles' wrath."""
    ledger = new_ledger(
        character_id, archetype="warrior", signature_skills={"divine_wrath": 15},
    )
    ledger.core[Domain.COMBAT] = SkillDomainLevel(level=40)
    ledger.core[Domain.SURVIVAL] = SkillDomainLevel(level=20)
    return ledger


def test_activation_rejected(manager, recorded):
    manager.register("achilles", ledger=ready_ledger())

    rejected = manager.activate("achilles", "combat_survival_synergy")

    assert rejected.failure == ActivationFailure.NOT_ELIGIBLE
    event = of_type(recorded, GrowthEvent.ACTIVATION_REJECTED)[0]
    assert event["failure"] == ActivationFailure.NOT_ELIGIBLE
    assert manager.synergy_for("achilles").combo_count == 0

def test_activate_and_bonuses(manager, recorded):
    manager.register("achilles", ledger=synergy_ledger())

    assert manager.activate("achilles", "combat_survival_synergy")
    assert manager.activate("achilles", "achilles_wrath_combat")

    bonuses = manager.bonuses_for("achilles")
    assert bonuses["damage_reduction"] == 15
    assert bonuses["attack_power"] == 100
    assert len(of_type(recorded, GrowthEvent.INTERACTION_ACTIVATED)) == 2

    cooling = manager.activate("achilles", "achilles_wrath_combat")
    assert cooling.failure == ActivationFailure.ON_COOLDOWN

def test_update_publishes_expiry(manager, recorded):
    ledger = new_ledger("achilles", signature_skills={"heroic_presence": 10})
    ledger.core[Domain.SOCIAL] = SkillDomainLevel(level=25)
    manager.register("achilles", ledger=ledger)

    assert manager.activate("achilles", "achilles_honor_social")

    manager.update(60)
    assert of_type(recorded, GrowthEvent.INTERACTION_EXPIRED) == []

    manager.update(60)
    expired = of_type(recorded, GrowthEvent.INTERACTION_EXPIRED)
    assert [e["interaction_id"] for e in expired] == ["achilles_honor_social"]
    assert manager.bonuses_for("achilles") == {}

def test_mastery_event(catalog, event_bus, recorded):
    manager = ProgressionManager(
        catalog=catalog, events=event_bus, config=EngineConfig(mastery_threshold=2),
    )
    manager.register("achilles", ledger=synergy_ledger())

    for _ in range(3):
        assert manager.activate("achilles", "combat_survival_synergy")

    mastered = of_type(recorded, GrowthEvent.INTERACTION_MASTERED)
    assert [e["interaction_id"] for e in mastered] == ["combat_survival_synergy"]
    assert manager.synergy_for("achilles").mastered_interaction_ids == ["combat_survival_synergy"]

def test_lost_eligibility_revokes(manager, recorded):
    ledger = new_ledger("achilles", signature_skills={"heroic_presence": 10})
    ledger.core[Domain.SOCIAL] = SkillDomainLevel(level=25)
    manager.register("achilles", ledger=ledger)
    manager.activate("achilles", "achilles_honor_social")

    manager.set_skill("achilles", "heroic_presence", 0)

    assert manager.bonuses_for("achilles") == {}
    revoked = of_type(recorded, GrowthEvent.INTERACTION_REVOKED)
    assert [e["interaction_id"] for e in revoked] == ["achilles_honor_social"]

def test_triggered_for(manager):
    manager.register("achilles", ledger=synergy_ledger())

    calm = manager.triggered_for("achilles", BattleContext(health_percent=90))
    desperate = manager.triggered_for("achilles", BattleContext(health_percent=20))

    assert [d.id for d in calm] == ["combat_survival_synergy"]
    assert [d.id for d in desperate] == ["combat_survival_synergy", "achilles_wrath_combat"]

def test_register_with_conflicting_archetype(manager):
    with pytest.raises(ValueError):
        manager.register("achilles", archetype="mage", ledger=ready_ledger())

    progress = manager.register("achilles", archetype="warrior", ledger=ready_ledger())
    assert progress.ledger.archetype == "warrior"

def test_handlers_see_post_battle_ledger(manager, event_bus, performance_factory):
    manager.register("achilles", ledger=ready_ledger())
    seen = {}

    def on_scored(event):
        seen["scored"] = manager.ledger_for("achilles").core[Domain.COMBAT].level

    def on_level_up(event):
        seen["level_up"] = manager.ledger_for("achilles").core[Domain.COMBAT].level
        seen["eligible"] = [d.id for d in manager.eligible_for("achilles")]

    event_bus.subscribe(GrowthEvent.BATTLE_SCORED, on_scored)
    event_bus.subscribe(GrowthEvent.LEVEL_UP, on_level_up)

    manager.record_battle(performance_factory(
        total_damage_dealt=450, critical_hits=3, abilities_used=4,
    ))

    assert seen == {
        "scored": 25,
        "level_up": 25,
        "eligible": ["combat_survival_synergy"],
    }

from datetime import datetime, timezone

import pytest


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def catalog():
    """The bundled interaction catalog."""
    from growth.synergy.catalog import default_catalog
    return default_catalog()


@pytest.fixture
def demo_ledger():
    """Mid-game ledger (combat 20, survival 18, mental 16, social 12, spiritual 10)."""
    from growth.battle.demo import create_demo_ledger
    return create_demo_ledger("achilles", archetype="warrior")


@pytest.fixture
def now():
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def performance_factory():
    """Build a BattlePerformance with quiet defaults."""
    from growth.battle.performance import BattlePerformance

    def make(**overrides):
        fields = dict(
            character_id="achilles",
            battle_id="battle_test",
            is_victory=True,
            battle_duration=95,
            player_level=15,
            opponent_level=15,
        )
        fields.update(overrides)
        return BattlePerformance(**fields)

    return make

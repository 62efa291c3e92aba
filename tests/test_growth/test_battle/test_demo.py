import random

from growth.battle.demo import create_battle_performance, create_demo_ledger, create_demo_reward
from growth.progression.ledger import Domain


def test_seeded_performance_is_repeatable():
    kwargs = dict(
        character_id="loki",
        is_victory=True,
        battle_duration=40,
        player_level=5,
        opponent_level=6,
        damage_dealt=200,
        damage_taken=50,
        critical_hits=1,
        abilities_used=3,
    )
    first = create_battle_performance(rng=random.Random(42), **kwargs)
    second = create_battle_performance(rng=random.Random(42), **kwargs)

    assert first == second
    assert first.strategic_decisions == 1
    assert first.spiritual_moments == 0
    assert 0 <= first.successful_dodges <= 2
    assert first.battle_id.startswith("battle_")

def test_demo_ledger():
    ledger = create_demo_ledger("achilles")
    assert ledger.core[Domain.COMBAT].level == 20
    assert ledger.core[Domain.SPIRITUAL].experience == 180

def test_demo_reward():
    reward = create_demo_reward("achilles", rng=random.Random(1))

    assert reward.character_id == "achilles"
    assert reward.gain_for(Domain.COMBAT).experience == 196
    assert reward.level_ups == []

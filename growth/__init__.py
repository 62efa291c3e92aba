"""
Skill growth rules.

Built on top of the engine:
- Progression (experience curve, tiers, skill ledger)
- Battle (performance records, experience scoring)
- Synergy (interaction catalog, eligibility, runtime)
- ProgressionManager (per-character orchestration with events)
"""

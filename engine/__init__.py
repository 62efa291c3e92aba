"""
Skill Growth Engine

Core infrastructure shared by the growth rules: component base
classes, the event bus, configuration and the data loader.

Quick Start:
    from engine.core import EventBus, GrowthEvent
    from growth.manager import ProgressionManager

    events = EventBus()
    events.subscribe(GrowthEvent.LEVEL_UP, lambda e: print(e.data), weak=False)

    manager = ProgressionManager(events=events)
    manager.register("achilles", archetype="warrior")
"""

__version__ = "0.1.0"

# Re-export core components for convenience
from engine.core import (
    Component,
    Record,
    register_component,
    EventBus,
    Event,
    GrowthEvent,
    EngineConfig,
)

__all__ = [
    # Components
    "Component",
    "Record",
    "register_component",
    # Events
    "EventBus",
    "Event",
    "GrowthEvent",
    # Config
    "EngineConfig",
]

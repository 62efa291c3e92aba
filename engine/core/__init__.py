"""
Core engine module.

Exports:
- Component, Record, register_component: Model bases and registration
- EventBus, Event, GrowthEvent: Event system
- EngineConfig: Tunables and data location
"""

from engine.core.component import (
    Component,
    Record,
    register_component,
    get_component_type,
    get_all_component_types,
)
from engine.core.events import EventBus, Event, GrowthEvent
from engine.core.config import EngineConfig

__all__ = [
    # Components
    "Component",
    "Record",
    "register_component",
    "get_component_type",
    "get_all_component_types",
    # Events
    "EventBus",
    "Event",
    "GrowthEvent",
    # Config
    "EngineConfig",
]

"""
Component and Record base classes for engine data.

Two kinds of data flow through the engine:
- Components: per-character state that is owned by the host
  (skill ledgers, synergy trackers). Validated on assignment.
- Records: immutable value objects produced once and consumed once
  (battle performance telemetry). Frozen after construction.

Neither kind carries game logic. All rules live in plain functions
(curve, scoring, eligibility, runtime) that take these as inputs
and return new instances.

Usage:
    @register_component
    class SkillSynergy(Component):
        character_id: str
        combo_count: int = Field(default=0, ge=0)

    class BattlePerformance(Record):
        is_victory: bool
        battle_duration: float = Field(ge=0)
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for mutable, validated state containers.

    Components use Pydantic for:
    - Automatic validation (contract violations raise ValidationError)
    - JSON serialization for whatever persistence the host uses
    - Default values

    IMPORTANT: Do NOT add methods that apply game rules.
    Rule functions return updated copies instead.
    """

    model_config = ConfigDict(
        # Allow arbitrary types (enums, nested models)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Unknown fields are a caller bug
        extra='forbid',
    )

    # Class variable: component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


class Record(BaseModel):
    """
    Base class for immutable value objects.

    Records are validated once at construction and cannot be
    modified afterwards.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class SkillDomainLedger(Component):
            character_id: str
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)


def get_all_component_types() -> dict[str, type[Component]]:
    """Get all registered component types."""
    return _component_registry.copy()

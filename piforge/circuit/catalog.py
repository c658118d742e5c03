"""Component catalog: types, pin sets and typed property records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from piforge.core.exceptions import CircuitError


class ComponentType(str, Enum):
    LED = "LED"
    RESISTOR = "Resistor"
    BUTTON = "Button"
    SERVO = "Servo"
    BUZZER = "Buzzer"


@dataclass(frozen=True)
class LedProps:
    color: str = "#ff4444"


@dataclass(frozen=True)
class ResistorProps:
    ohms: int = 220


@dataclass(frozen=True)
class ButtonProps:
    pass


@dataclass(frozen=True)
class ServoProps:
    min_angle: int = 0
    max_angle: int = 180


@dataclass(frozen=True)
class BuzzerProps:
    frequency_hz: int = 2000


ComponentProps = Union[LedProps, ResistorProps, ButtonProps, ServoProps, BuzzerProps]

ComponentRole = Literal["indicator", "actuator", "input", "passive"]


@dataclass(frozen=True)
class ComponentSpec:
    """Catalog entry for one component type."""

    type: ComponentType
    pins: tuple[str, ...]
    props_type: type
    role: ComponentRole


class ComponentCatalog:
    def __init__(self):
        self._specs: dict[ComponentType, ComponentSpec] = {}

    def register(self, spec: ComponentSpec) -> None:
        if spec.type in self._specs:
            raise ValueError(f"Component type '{spec.type.value}' already registered")
        self._specs[spec.type] = spec

    def get(self, component_type: ComponentType) -> ComponentSpec:
        if component_type not in self._specs:
            raise CircuitError(f"Unknown component type: {component_type}")
        return self._specs[component_type]

    def types(self) -> list[ComponentType]:
        return list(self._specs)

    def default_props(self, component_type: ComponentType) -> ComponentProps:
        return self.get(component_type).props_type()

    def check_props(
        self, component_type: ComponentType, props: ComponentProps
    ) -> ComponentProps:
        """Return ``props`` if it is the record type declared for the component."""
        expected = self.get(component_type).props_type
        if type(props) is not expected:
            raise CircuitError(
                f"{component_type.value} expects {expected.__name__}, "
                f"got {type(props).__name__}"
            )
        return props


def default_catalog() -> ComponentCatalog:
    catalog = ComponentCatalog()
    catalog.register(ComponentSpec(ComponentType.LED, ("p1", "p2"), LedProps, "indicator"))
    catalog.register(
        ComponentSpec(ComponentType.RESISTOR, ("p1", "p2"), ResistorProps, "passive")
    )
    catalog.register(ComponentSpec(ComponentType.BUTTON, ("p1", "p2"), ButtonProps, "input"))
    catalog.register(
        ComponentSpec(ComponentType.SERVO, ("sig", "vcc", "gnd"), ServoProps, "actuator")
    )
    catalog.register(ComponentSpec(ComponentType.BUZZER, ("p1", "p2"), BuzzerProps, "actuator"))
    return catalog

"""Component item registry and factory."""

from __future__ import annotations

from typing import Callable, Dict

from piforge.circuit.catalog import ComponentType
from piforge.circuit.model import Component
from piforge_gui.components.actuators import BuzzerItem, ResistorItem, ServoItem
from piforge_gui.components.base import ComponentGraphicsItem
from piforge_gui.components.button import ButtonItem
from piforge_gui.components.led import LedItem

ItemFactory = Callable[[Component], ComponentGraphicsItem]


class ComponentItemRegistry:
    def __init__(self):
        self._factories: Dict[ComponentType, ItemFactory] = {}

    def register(self, component_type: ComponentType, factory: ItemFactory) -> None:
        self._factories[component_type] = factory

    def create(self, component: Component) -> ComponentGraphicsItem:
        # Types without a dedicated item still get a generic box with pins.
        factory = self._factories.get(component.type, ComponentGraphicsItem)
        return factory(component)


def default_registry() -> ComponentItemRegistry:
    registry = ComponentItemRegistry()
    registry.register(ComponentType.LED, LedItem)
    registry.register(ComponentType.RESISTOR, ResistorItem)
    registry.register(ComponentType.BUTTON, ButtonItem)
    registry.register(ComponentType.SERVO, ServoItem)
    registry.register(ComponentType.BUZZER, BuzzerItem)
    return registry

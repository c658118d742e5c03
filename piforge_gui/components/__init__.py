from piforge_gui.components.actuators import BuzzerItem, ResistorItem, ServoItem
from piforge_gui.components.base import ComponentGraphicsItem
from piforge_gui.components.board import BoardItem
from piforge_gui.components.button import ButtonItem
from piforge_gui.components.led import LedItem
from piforge_gui.components.registry import ComponentItemRegistry, default_registry

__all__ = [
    "BoardItem",
    "ButtonItem",
    "BuzzerItem",
    "ComponentGraphicsItem",
    "ComponentItemRegistry",
    "LedItem",
    "ResistorItem",
    "ServoItem",
    "default_registry",
]

"""Breadboard model: components, wires, connectivity and gestures."""

from piforge.circuit.catalog import (
    ButtonProps,
    BuzzerProps,
    ComponentCatalog,
    ComponentProps,
    ComponentSpec,
    ComponentType,
    LedProps,
    ResistorProps,
    ServoProps,
    default_catalog,
)
from piforge.circuit.interaction import InteractionController, InteractionMode, WireDraft
from piforge.circuit.model import (
    HOST_ID,
    Circuit,
    Component,
    Point,
    Wire,
    is_host,
    parse_host_pin,
)
from piforge.circuit.resolver import ComponentState, ConnectivityResolver

__all__ = [
    # Catalog
    "ComponentType",
    "ComponentSpec",
    "ComponentCatalog",
    "ComponentProps",
    "LedProps",
    "ResistorProps",
    "ButtonProps",
    "ServoProps",
    "BuzzerProps",
    "default_catalog",
    # Model
    "HOST_ID",
    "Circuit",
    "Component",
    "Point",
    "Wire",
    "is_host",
    "parse_host_pin",
    # Resolution and gestures
    "ConnectivityResolver",
    "ComponentState",
    "InteractionController",
    "InteractionMode",
    "WireDraft",
]

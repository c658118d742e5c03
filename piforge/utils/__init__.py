from piforge.utils.config_loader import (
    BoardModelConfig,
    CanvasConfig,
    GuestConfig,
    HeaderConfig,
    PiforgeConfig,
    SerialConfig,
    clear_config_cache,
    get_config,
    load_config,
)

__all__ = [
    "BoardModelConfig",
    "CanvasConfig",
    "GuestConfig",
    "HeaderConfig",
    "PiforgeConfig",
    "SerialConfig",
    "clear_config_cache",
    "get_config",
    "load_config",
]

"""Helpers for loading and validating the piforge YAML configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import threading

import yaml  # type: ignore[import-untyped]

from piforge.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


@dataclass(frozen=True)
class HeaderConfig:
    """Position of the 40-pin header on the board image, in board pixels."""

    x: float
    y: float
    width: float
    height: float
    pitch: float = 18.0
    offset: float = 9.0


@dataclass(frozen=True)
class BoardModelConfig:
    name: str
    label: str
    width: int
    height: int
    color: str
    header: HeaderConfig


@dataclass(frozen=True)
class SerialConfig:
    buffer_size: int = 100
    boot_delay_ms: int = 1000
    inject_delay_ms: int = 5000
    auto_boot: bool = True


@dataclass(frozen=True)
class GuestConfig:
    program: str = "qemu-system-i386"
    memory_mb: int = 128
    cdrom: Optional[str] = None
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class CanvasConfig:
    width: int = 1200
    height: int = 800
    board_x: float = 100.0
    board_y: float = 100.0


@dataclass(frozen=True)
class PiforgeConfig:
    default_board: str
    boards: dict[str, BoardModelConfig]
    serial: SerialConfig = field(default_factory=SerialConfig)
    guest: GuestConfig = field(default_factory=GuestConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    wire_colors: tuple[str, ...] = ()

    def board(self, name: Optional[str] = None) -> BoardModelConfig:
        """Return a board model by name (the default board when omitted)."""
        key = name or self.default_board
        if key not in self.boards:
            raise ConfigurationError(
                "boards", f"Unknown board model '{key}'. Available: {', '.join(self.boards)}"
            )
        return self.boards[key]


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, PiforgeConfig] = {}
_CACHE_LOCK = threading.RLock()


def _get_config_path(path: Optional[str | Path] = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError("Config root must be a mapping")
    return raw


def _positive(section: str, name: str, value: Any) -> int:
    number = int(value)
    if number <= 0:
        raise ConfigurationError(f"{section}.{name}", "must be positive")
    return number


def _build_board(name: str, raw: dict[str, Any]) -> BoardModelConfig:
    header = raw["header"]
    return BoardModelConfig(
        name=name,
        label=str(raw.get("label", name)),
        width=_positive(f"boards.{name}", "width", raw["width"]),
        height=_positive(f"boards.{name}", "height", raw["height"]),
        color=str(raw["color"]),
        header=HeaderConfig(
            x=float(header["x"]),
            y=float(header["y"]),
            width=float(header["width"]),
            height=float(header["height"]),
            pitch=float(header.get("pitch", 18.0)),
            offset=float(header.get("offset", 9.0)),
        ),
    )


def _build_serial(raw: dict[str, Any]) -> SerialConfig:
    defaults = SerialConfig()
    return SerialConfig(
        buffer_size=_positive("serial", "buffer_size", raw.get("buffer_size", defaults.buffer_size)),
        boot_delay_ms=_positive(
            "serial", "boot_delay_ms", raw.get("boot_delay_ms", defaults.boot_delay_ms)
        ),
        inject_delay_ms=_positive(
            "serial", "inject_delay_ms", raw.get("inject_delay_ms", defaults.inject_delay_ms)
        ),
        auto_boot=bool(raw.get("auto_boot", defaults.auto_boot)),
    )


def _build_guest(raw: dict[str, Any], base_dir: Path) -> GuestConfig:
    defaults = GuestConfig()
    cdrom = raw.get("cdrom")
    if cdrom:
        # Relative image paths are resolved against the config file.
        cdrom = str((base_dir / str(cdrom)).resolve())
    return GuestConfig(
        program=str(raw.get("program", defaults.program)),
        memory_mb=_positive("guest", "memory_mb", raw.get("memory_mb", defaults.memory_mb)),
        cdrom=cdrom or None,
        extra_args=tuple(str(arg) for arg in raw.get("extra_args", [])),
    )


def _build_canvas(raw: dict[str, Any]) -> CanvasConfig:
    size = raw.get("size", [1200, 800])
    board = raw.get("board_position", [100, 100])
    return CanvasConfig(
        width=_positive("canvas", "width", size[0]),
        height=_positive("canvas", "height", size[1]),
        board_x=float(board[0]),
        board_y=float(board[1]),
    )


def _parse_config_from_dict(raw: dict[str, Any], base_dir: Path = Path(".")) -> PiforgeConfig:
    try:
        boards_raw = raw["boards"]
        if not boards_raw:
            raise ConfigurationError("boards", "at least one board model is required")
        boards = {str(name): _build_board(str(name), value) for name, value in boards_raw.items()}
        default_board = str(raw.get("default_board", next(iter(boards))))

        cfg = PiforgeConfig(
            default_board=default_board,
            boards=boards,
            serial=_build_serial(raw.get("serial") or {}),
            guest=_build_guest(raw.get("guest") or {}, base_dir),
            canvas=_build_canvas(raw.get("canvas") or {}),
            wire_colors=tuple(str(c) for c in raw.get("wire_colors") or ()),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc
    except (TypeError, ValueError, IndexError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    if cfg.default_board not in cfg.boards:
        raise ConfigurationError(
            "default_board", f"'{cfg.default_board}' is not one of the configured boards"
        )
    return cfg


def load_config(path: Optional[str | Path] = None) -> PiforgeConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Optional path to YAML config. If None, load the bundled piforge/config.yaml.

    Returns:
        PiforgeConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """

    p = _get_config_path(path)
    raw = _load_yaml_file(p)

    return _parse_config_from_dict(raw, base_dir=p.parent)


def get_config(path: Optional[str | Path] = None) -> PiforgeConfig:
    """Return the loaded config for ``path``, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe.
    """
    key = str(_get_config_path(path).resolve())
    with _CACHE_LOCK:
        if key not in _LOADER_CACHE:
            _LOADER_CACHE[key] = load_config(path)
        return _LOADER_CACHE[key]


def clear_config_cache() -> None:
    """Clear all cached configurations.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()

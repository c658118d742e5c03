import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import yaml
from conftest import BOARDS_CFG

from piforge.core.exceptions import ConfigurationError
from piforge.utils.config_loader import (
    DEFAULT_CONFIG_PATH,
    BoardModelConfig,
    HeaderConfig,
    PiforgeConfig,
    SerialConfig,
    _get_config_path,
    _load_yaml_file,
    _parse_config_from_dict,
    clear_config_cache,
    get_config,
    load_config,
)


class TestDataclasses:
    def test_header_defaults(self):
        header = HeaderConfig(x=25, y=30, width=365, height=40)
        assert header.pitch == 18.0
        assert header.offset == 9.0

    def test_serial_defaults(self):
        cfg = SerialConfig()
        assert (cfg.buffer_size, cfg.boot_delay_ms, cfg.inject_delay_ms) == (100, 1000, 5000)
        assert cfg.auto_boot is True

    def test_board_config_immutable(self):
        board = BoardModelConfig(
            "RPi4B", "RPi 4B", 440, 310, "#0a4d29", HeaderConfig(25, 30, 365, 40)
        )
        with pytest.raises(AttributeError):
            board.width = 0


class TestGetConfigPath:
    def test_get_config_path_default(self):
        path = _get_config_path()
        assert path == DEFAULT_CONFIG_PATH
        assert path.name == "config.yaml"
        assert path.parent.name == "piforge"

    def test_get_config_path_custom(self):
        custom_path = "/path/to/custom/config.yaml"
        assert _get_config_path(custom_path) == Path(custom_path)


class TestLoadYamlFile:
    def test_load_valid_yaml(self, temp_yaml_file):
        yaml_content = {"boards": {"RPi4B": {"width": 440}}}
        with temp_yaml_file.open("w", encoding="utf-8") as f:
            yaml.dump(yaml_content, f)

        assert _load_yaml_file(temp_yaml_file) == yaml_content

    def test_load_invalid_yaml(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("{ invalid: yaml: content")
            f.flush()
            path = Path(f.name)
        try:
            with pytest.raises(ConfigurationError):
                _load_yaml_file(path)
        finally:
            path.unlink()

    def test_non_mapping_root(self, temp_yaml_file):
        temp_yaml_file.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            _load_yaml_file(temp_yaml_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            _load_yaml_file(tmp_path / "nope.yaml")


class TestParseConfigFromDict:
    def test_parse_valid_config(self, valid_config_dict):
        cfg = _parse_config_from_dict(valid_config_dict)

        assert isinstance(cfg, PiforgeConfig)
        assert cfg.default_board == "RPi4B"
        assert cfg.board().label == "RPi 4B"
        assert cfg.board("RPiZeroW").header.pitch == 16.5
        assert cfg.wire_colors == ("#ef4444", "#3b82f6")
        assert (cfg.canvas.width, cfg.canvas.height) == (1200, 800)

    def test_missing_boards(self, valid_config_dict):
        del valid_config_dict["boards"]
        with pytest.raises(ConfigurationError, match="Missing required config key"):
            _parse_config_from_dict(valid_config_dict)

    def test_missing_header_key(self, valid_config_dict):
        del valid_config_dict["boards"]["RPi4B"]["header"]
        with pytest.raises(ConfigurationError):
            _parse_config_from_dict(valid_config_dict)

    def test_board_edits_stay_local_to_one_test(self, valid_config_dict):
        del valid_config_dict["boards"]["RPi4B"]["header"]
        assert "header" in BOARDS_CFG["RPi4B"]

    def test_empty_boards(self, valid_config_dict):
        valid_config_dict["boards"] = {}
        with pytest.raises(ConfigurationError) as info:
            _parse_config_from_dict(valid_config_dict)
        assert info.value.config_key == "boards"

    def test_unknown_default_board(self, valid_config_dict):
        valid_config_dict["default_board"] = "Arduino"
        with pytest.raises(ConfigurationError) as info:
            _parse_config_from_dict(valid_config_dict)
        assert info.value.config_key == "default_board"

    def test_default_board_falls_back_to_first(self, valid_config_dict):
        del valid_config_dict["default_board"]
        assert _parse_config_from_dict(valid_config_dict).default_board == "RPi4B"

    @pytest.mark.parametrize("key", ["buffer_size", "boot_delay_ms", "inject_delay_ms"])
    def test_non_positive_serial_values(self, valid_config_dict, key):
        valid_config_dict["serial"][key] = 0
        with pytest.raises(ConfigurationError) as info:
            _parse_config_from_dict(valid_config_dict)
        assert info.value.config_key == f"serial.{key}"

    def test_non_numeric_value(self, valid_config_dict):
        valid_config_dict["serial"]["boot_delay_ms"] = "soon"
        with pytest.raises(ConfigurationError, match="Invalid config schema"):
            _parse_config_from_dict(valid_config_dict)

    def test_optional_sections_use_defaults(self, valid_config_dict):
        for key in ("serial", "guest", "canvas", "wire_colors"):
            del valid_config_dict[key]
        cfg = _parse_config_from_dict(valid_config_dict)

        assert cfg.serial == SerialConfig()
        assert cfg.guest.program == "qemu-system-i386"
        assert cfg.guest.cdrom is None
        assert cfg.wire_colors == ()

    def test_cdrom_is_resolved_against_base_dir(self, valid_config_dict, tmp_path):
        valid_config_dict["guest"]["cdrom"] = "images/pi.iso"
        cfg = _parse_config_from_dict(valid_config_dict, base_dir=tmp_path)
        assert cfg.guest.cdrom == str((tmp_path / "images" / "pi.iso").resolve())

    def test_extra_args_become_tuple(self, valid_config_dict):
        valid_config_dict["guest"]["extra_args"] = ["-smp", 2]
        cfg = _parse_config_from_dict(valid_config_dict)
        assert cfg.guest.extra_args == ("-smp", "2")

    def test_unknown_board_lookup(self, piforge_config):
        with pytest.raises(ConfigurationError, match="Unknown board model 'RPi9'"):
            piforge_config.board("RPi9")


class TestLoadConfig:
    def test_load_config_success(self, temp_config_yaml_file):
        cfg = load_config(temp_config_yaml_file)
        assert isinstance(cfg, PiforgeConfig)
        assert set(cfg.boards) == {"RPi4B", "RPiZeroW"}

    def test_bundled_config(self):
        cfg = load_config()
        assert set(cfg.boards) == {"RPi5", "RPi4B", "RPi3B+", "RPiZeroW"}
        assert cfg.default_board == "RPi4B"
        assert cfg.serial.buffer_size == 100
        assert len(cfg.wire_colors) == 5


class TestGetConfig:
    def test_get_config_loads_default_when_none(self):
        with patch("piforge.utils.config_loader._LOADER_CACHE", {}):
            with patch("piforge.utils.config_loader.load_config") as mock_load:
                mock_config = Mock(spec=PiforgeConfig)
                mock_load.return_value = mock_config
                result = get_config()
                mock_load.assert_called_once_with(None)
                assert result == mock_config

    def test_get_config_is_cached(self, temp_config_yaml_file):
        clear_config_cache()
        first = get_config(temp_config_yaml_file)
        assert get_config(str(temp_config_yaml_file)) is first

        clear_config_cache()
        assert get_config(temp_config_yaml_file) is not first

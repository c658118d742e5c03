import pytest

from piforge.circuit.catalog import ComponentType
from piforge.circuit.interaction import InteractionMode
from piforge.circuit.model import HOST_ID, Point
from piforge.core.exceptions import ConfigurationError
from piforge.core.gpio_enums import PinMode
from piforge.serial.console import ConsoleMode
from piforge.serial.guest import GuestEvent
from piforge.session import SimulationSession


@pytest.fixture
def session(piforge_config, scheduler):
    return SimulationSession(config=piforge_config, scheduler=scheduler)


class TestSetup:
    def test_parts_share_one_bank(self, session):
        assert session.resolver.resolve("comp-1", []) == 0.0
        assert session.circuit.board_position == Point(100, 100)
        assert session.interaction.mode is InteractionMode.DRAG

    def test_wire_colors_come_from_config(self, session):
        led = session.circuit.add_component(ComponentType.LED, Point(0, 0))
        wire = session.circuit.add_wire(HOST_ID, "1", led.id, "p1")
        assert wire.color == "#ef4444"

    def test_bundled_config_is_used_by_default(self):
        session = SimulationSession()
        assert session.board_model.name == "RPi4B"


class TestBoardModel:
    def test_default_board(self, session):
        assert session.board_model.label == "RPi 4B"

    def test_switch_keeps_circuit_and_pins(self, session):
        led = session.circuit.add_component(ComponentType.LED, Point(0, 0))
        session.circuit.add_wire(HOST_ID, "17", led.id, "p1")
        session.bank.set_mode(17, PinMode.OUT)

        model = session.set_board_model("RPiZeroW")

        assert model.label == "Pi Zero W"
        assert session.board_model is model
        assert len(session.circuit.wires) == 1
        assert session.bank.get_pin_state(17).mode is PinMode.OUT

    def test_unknown_board(self, session):
        with pytest.raises(ConfigurationError):
            session.set_board_model("RPi9")
        assert session.board_model.name == "RPi4B"


@pytest.mark.integration
class TestEndToEnd:
    def test_led_follows_shell_commands(self, session, terminal):
        led = session.circuit.add_component(ComponentType.LED, Point(0, 0))
        session.circuit.add_wire(HOST_ID, "17", led.id, "p1")
        console = session.create_console(terminal)
        console.open()

        console.handle_input("gpio-mode 17 out\rgpio-write 17 1\r")

        assert session.component_states()[led.id].level == 1.0

    def test_led_follows_guest_tags(self, session, terminal, guest, scheduler):
        led = session.circuit.add_component(ComponentType.LED, Point(0, 0))
        session.circuit.add_wire(led.id, "p1", HOST_ID, "17")
        console = session.create_console(terminal, guest_factory=lambda: guest)
        console.open()
        scheduler.advance(session.config.serial.boot_delay_ms)
        assert console.mode is ConsoleMode.GUEST

        guest.emit(GuestEvent.READY)
        guest.print("[GPIO_MODE: 17 pwm]")
        session.bank.set_pwm(17, 50)

        assert session.component_states()[led.id].level == pytest.approx(0.5)

    def test_button_drives_input_read_by_shell(self, session, terminal):
        button = session.circuit.add_component(ComponentType.BUTTON, Point(0, 0))
        session.circuit.add_wire(button.id, "p1", HOST_ID, "22")
        console = session.create_console(terminal)

        session.interaction.button_pressed(button.id)
        console.handle_input("gpio-read 22\r")

        assert "1" in terminal.lines

    def test_create_console_requires_scheduler(self, piforge_config, terminal):
        session = SimulationSession(config=piforge_config)
        with pytest.raises(ValueError):
            session.create_console(terminal)


class TestWatchPins:
    def test_watcher_receives_pin_and_value(self, session):
        seen = []
        session.watch_pins(lambda pin, value: seen.append((pin, value)))
        session.bank.set_mode(4, PinMode.OUT)
        session.bank.digital_write(4, 1)
        assert seen == [(4, 1)]

    def test_repeat_subscription_is_deduplicated(self, session):
        seen = []

        def watcher(pin, value):
            seen.append((pin, value))

        session.watch_pins(watcher)
        session.watch_pins(watcher)
        session.bank.set_mode(4, PinMode.OUT)
        session.bank.digital_write(4, 1)
        assert seen == [(4, 1)]

    def test_listener_writes_are_deferred_to_scheduler(self, session, scheduler):
        bank = session.bank
        bank.set_mode(5, PinMode.OUT)
        bank.set_mode(6, PinMode.OUT)
        bank.on_pin_change(5, lambda v: bank.digital_write(6, v))

        bank.digital_write(5, 1)
        assert bank.digital_read(6) == 0
        scheduler.run_pending()
        assert bank.digital_read(6) == 1

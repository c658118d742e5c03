"""Tests for the local pseudo-shell."""

import pytest

from piforge.core.gpio_enums import PinMode
from piforge.serial.shell import GPIO_HELP, PROMPT, PseudoShell, describe_pin


@pytest.fixture
def shell(bank, terminal):
    return PseudoShell(bank, terminal)


def run(shell, terminal, line):
    """Type ``line`` plus Enter and return the lines printed for it."""
    terminal.chunks.clear()
    shell.feed(line + "\r")
    # Echo + newline, then the response, then the prompt.
    return terminal.lines[1:-1]


class TestLineEditing:
    def test_printable_chars_are_echoed(self, shell, terminal):
        shell.feed("ls")
        assert terminal.output == "ls"
        assert shell.line == "ls"

    def test_enter_runs_and_reprompts(self, shell, terminal):
        shell.feed("ls\r")
        assert terminal.output.endswith(PROMPT)
        assert shell.line == ""

    def test_backspace(self, shell, terminal):
        shell.feed("lx\x7fs")
        assert shell.line == "ls"
        assert "\b \b" in terminal.output

    def test_backspace_on_empty_line_is_silent(self, shell, terminal):
        shell.feed("\x7f\b")
        assert terminal.output == ""

    def test_crlf_is_a_single_enter(self, shell, terminal):
        shell.feed("ls\r\n")
        assert terminal.output.count(PROMPT) == 1

    def test_lone_newline_is_enter(self, shell, terminal):
        shell.feed("\n")
        assert terminal.output == "\r\n" + PROMPT

    def test_control_chars_are_dropped(self, shell):
        shell.feed("l\x1bs")
        assert shell.line == "ls"

    def test_empty_line_prints_nothing(self, shell, terminal):
        assert run(shell, terminal, "   ") == []

    def test_end_line_closes_prompt_line(self, shell, terminal):
        shell.prompt()
        shell.feed("gpio")
        shell.end_line()

        assert terminal.output == PROMPT + "gpio\r\n"
        assert shell.line == ""

    def test_end_line_only_closes_once(self, shell, terminal):
        shell.end_line()
        assert terminal.output == ""

        shell.prompt()
        shell.end_line()
        shell.end_line()
        assert terminal.output == PROMPT + "\r\n"


class TestGenericCommands:
    def test_ls(self, shell, terminal):
        assert run(shell, terminal, "ls") == ["BIN  ETC  USR  HOME"]

    def test_help(self, shell, terminal):
        assert run(shell, terminal, "help") == ["AVAILABLE: LS, HELP, CLEAR, GPIO-HELP"]

    def test_commands_are_case_insensitive(self, shell, terminal):
        assert run(shell, terminal, "LS") == ["BIN  ETC  USR  HOME"]

    def test_unknown_command(self, shell, terminal):
        assert run(shell, terminal, "Reboot now") == ["ERR: CMD NOT FOUND: reboot now"]

    def test_clear(self, shell, terminal):
        shell.feed("clear\r")
        assert terminal.clears == 1
        assert terminal.output == PROMPT

    def test_gpio_help(self, shell, terminal):
        assert run(shell, terminal, "gpio-help") == list(GPIO_HELP)


class TestGpioCommands:
    def test_mode_and_write(self, shell, terminal, bank):
        assert run(shell, terminal, "gpio-mode 17 out") == ["GPIO17: OUT 0"]
        assert run(shell, terminal, "gpio-write 17 1") == ["GPIO17: OUT 1"]
        assert bank.digital_read(17) == 1

    def test_write_to_input_has_no_effect(self, shell, terminal, bank):
        assert run(shell, terminal, "gpio-write 17 1") == ["GPIO17: IN 0"]

    def test_read(self, shell, terminal, bank):
        bank.drive_input(22, 1)
        assert run(shell, terminal, "gpio-read 22") == ["1"]

    def test_pwm(self, shell, terminal, bank):
        run(shell, terminal, "gpio-mode 18 pwm")
        assert run(shell, terminal, "gpio-pwm 18 40") == ["GPIO18: PWM 1 (40%)"]
        assert bank.get_pin_state(18).pwm_duty_cycle == 40

    @pytest.mark.parametrize(
        "line,usage",
        [
            ("gpio-mode 17", "USAGE: gpio-mode <pin> <in|out|pwm>"),
            ("gpio-mode 17 sideways", "USAGE: gpio-mode <pin> <in|out|pwm>"),
            ("gpio-write 17 2", "USAGE: gpio-write <pin> <0|1>"),
            ("gpio-write 17", "USAGE: gpio-write <pin> <0|1>"),
            ("gpio-read", "USAGE: gpio-read <pin>"),
            ("gpio-pwm 18 101", "USAGE: gpio-pwm <pin> <0-100>"),
            ("gpio-pwm 18 half", "USAGE: gpio-pwm <pin> <0-100>"),
            ("gpio-pwm 18 \u0665\u0660", "USAGE: gpio-pwm <pin> <0-100>"),
        ],
    )
    def test_usage_errors(self, shell, terminal, line, usage):
        assert run(shell, terminal, line) == [usage]

    @pytest.mark.parametrize(
        "line", ["gpio-mode 28 out", "gpio-read x", "gpio-write -1 1", "gpio-read \u0661\u0667"]
    )
    def test_bad_pin(self, shell, terminal, line):
        pin = line.split()[1]
        assert run(shell, terminal, line) == [f"ERR: NO SUCH PIN: {pin}"]

    def test_status_table(self, shell, terminal, bank):
        bank.set_mode(4, PinMode.PWM)
        bank.set_pwm(4, 25)

        lines = run(shell, terminal, "gpio-status")

        assert lines[0] == "PIN  MODE  VALUE  PWM"
        assert len(lines) == 1 + bank.num_pins
        assert lines[1].split() == ["0", "IN", "0", "-"]
        assert lines[5].split() == ["4", "PWM", "1", "25%"]


def test_describe_pin(bank):
    bank.set_mode(17, PinMode.OUT)
    bank.digital_write(17, 1)
    assert describe_pin(bank.get_pin_state(17)) == "GPIO17: OUT 1"

"""Local pseudo-shell used while no guest is attached.

Answers a small command set directly against the register bank so the
workbench can be exercised without booting anything.
"""

from __future__ import annotations

import logging
from typing import Callable

from piforge.core.gpio_enums import PinMode
from piforge.core.register_bank import PinState, RegisterBank
from piforge.serial.guest import TerminalSink

logger = logging.getLogger(__name__)

PROMPT = "> "

ENTER_KEYS = ("\r", "\n")
BACKSPACE_KEYS = ("\x7f", "\b")

GPIO_HELP = (
    "GPIO COMMANDS:",
    "  gpio-mode <pin> <in|out|pwm>   CONFIGURE A PIN",
    "  gpio-write <pin> <0|1>         DRIVE AN OUTPUT PIN",
    "  gpio-read <pin>                READ A PIN LEVEL",
    "  gpio-pwm <pin> <0-100>         SET A PWM DUTY CYCLE",
    "  gpio-status                    SHOW ALL PINS",
)

Handler = Callable[[list[str]], None]


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def describe_pin(state: PinState) -> str:
    text = f"GPIO{state.pin}: {state.mode.value} {state.value}"
    if state.pwm_duty_cycle is not None:
        text += f" ({state.pwm_duty_cycle}%)"
    return text


class PseudoShell:
    def __init__(self, bank: RegisterBank, terminal: TerminalSink):
        self._bank = bank
        self._terminal = terminal
        self._line: list[str] = []
        self._after_cr = False
        self._on_prompt_line = False
        self._handlers: dict[str, Handler] = {
            "ls": self._cmd_ls,
            "help": self._cmd_help,
            "clear": self._cmd_clear,
            "gpio-help": self._cmd_gpio_help,
            "gpio-mode": self._cmd_gpio_mode,
            "gpio-write": self._cmd_gpio_write,
            "gpio-read": self._cmd_gpio_read,
            "gpio-pwm": self._cmd_gpio_pwm,
            "gpio-status": self._cmd_gpio_status,
        }

    @property
    def line(self) -> str:
        """Text typed since the last Enter."""
        return "".join(self._line)

    def prompt(self) -> None:
        self._terminal.write(PROMPT)
        self._on_prompt_line = True

    def end_line(self) -> None:
        """Finish an open prompt line and drop any half-typed input."""
        self._line.clear()
        if self._on_prompt_line:
            self._on_prompt_line = False
            self._terminal.writeln("")

    def feed(self, data: str) -> None:
        """Handle raw keystrokes (one key or a pasted chunk)."""
        for char in data:
            if char == "\n" and self._after_cr:
                # CR LF from a paste counts as one Enter.
                self._after_cr = False
                continue
            self._after_cr = char == "\r"

            if char in ENTER_KEYS:
                self._on_prompt_line = False
                self._terminal.writeln("")
                line = self.line
                self._line.clear()
                self.execute(line)
                self.prompt()
            elif char in BACKSPACE_KEYS:
                if self._line:
                    self._line.pop()
                    self._terminal.write("\b \b")
            elif char.isprintable():
                self._line.append(char)
                self._terminal.write(char)

    def execute(self, line: str) -> None:
        """Run one command line. Command names are case-insensitive."""
        words = line.strip().split()
        if not words:
            return
        name = words[0].lower()
        handler = self._handlers.get(name)
        if handler is None:
            self._terminal.writeln(f"ERR: CMD NOT FOUND: {line.strip().lower()}")
            return
        logger.debug("shell: %s", line.strip())
        handler(words[1:])

    # ==========================================================
    # Generic commands
    # ==========================================================

    def _cmd_ls(self, _args: list[str]) -> None:
        self._terminal.writeln("BIN  ETC  USR  HOME")

    def _cmd_help(self, _args: list[str]) -> None:
        self._terminal.writeln("AVAILABLE: LS, HELP, CLEAR, GPIO-HELP")

    def _cmd_clear(self, _args: list[str]) -> None:
        self._terminal.clear()

    def _cmd_gpio_help(self, _args: list[str]) -> None:
        for text in GPIO_HELP:
            self._terminal.writeln(text)

    # ==========================================================
    # GPIO commands
    # ==========================================================

    def _cmd_gpio_mode(self, args: list[str]) -> None:
        usage = "USAGE: gpio-mode <pin> <in|out|pwm>"
        if len(args) != 2:
            self._terminal.writeln(usage)
            return
        pin = self._parse_pin(args[0])
        mode = PinMode.parse(args[1])
        if pin is None:
            return
        if mode is None:
            self._terminal.writeln(usage)
            return
        self._bank.set_mode(pin, mode)
        self._echo_pin(pin)

    def _cmd_gpio_write(self, args: list[str]) -> None:
        if len(args) != 2 or args[1] not in ("0", "1"):
            self._terminal.writeln("USAGE: gpio-write <pin> <0|1>")
            return
        pin = self._parse_pin(args[0])
        if pin is None:
            return
        self._bank.digital_write(pin, int(args[1]))
        self._echo_pin(pin)

    def _cmd_gpio_read(self, args: list[str]) -> None:
        if len(args) != 1:
            self._terminal.writeln("USAGE: gpio-read <pin>")
            return
        pin = self._parse_pin(args[0])
        if pin is None:
            return
        self._terminal.writeln(str(self._bank.digital_read(pin)))

    def _cmd_gpio_pwm(self, args: list[str]) -> None:
        usage = "USAGE: gpio-pwm <pin> <0-100>"
        if len(args) != 2 or not _is_number(args[1]) or int(args[1]) > 100:
            self._terminal.writeln(usage)
            return
        pin = self._parse_pin(args[0])
        if pin is None:
            return
        self._bank.set_pwm(pin, int(args[1]))
        self._echo_pin(pin)

    def _cmd_gpio_status(self, _args: list[str]) -> None:
        self._terminal.writeln("PIN  MODE  VALUE  PWM")
        for state in self._bank.get_all_pins():
            duty = "-" if state.pwm_duty_cycle is None else f"{state.pwm_duty_cycle}%"
            self._terminal.writeln(
                f"{state.pin:<4} {state.mode.value:<5} {state.value:<6} {duty}"
            )

    # Private helpers -------------------------------------------------------

    def _parse_pin(self, text: str) -> int | None:
        if _is_number(text) and int(text) < self._bank.num_pins:
            return int(text)
        self._terminal.writeln(f"ERR: NO SUCH PIN: {text}")
        return None

    def _echo_pin(self, pin: int) -> None:
        state = self._bank.get_pin_state(pin)
        if state is not None:
            self._terminal.writeln(describe_pin(state))

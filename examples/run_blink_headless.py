import argparse
import sys
from pathlib import Path

# Ensure the local checkout is used even if piforge is installed elsewhere.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from piforge import ComponentType, Point, SimulationSession
from piforge.circuit.model import HOST_ID


class PrintTerminal:
    def write(self, text: str) -> None:
        sys.stdout.write(text)

    def writeln(self, text: str = "") -> None:
        sys.stdout.write(text + "\n")

    def clear(self) -> None:
        pass


class ImmediateScheduler:
    """Runs every callback at once. Good enough without an event loop."""

    class _Handle:
        def cancel(self) -> None:
            pass

    def call_later(self, delay_ms, callback):
        callback()
        return self._Handle()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Blink an LED from the pseudo-shell.")
    parser.add_argument("--pin", type=int, default=17, help="GPIO pin to wire the LED to")
    parser.add_argument("--times", type=int, default=3, help="Number of on/off cycles")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    session = SimulationSession(scheduler=ImmediateScheduler())
    led = session.circuit.add_component(ComponentType.LED, Point(300, 300))
    session.circuit.add_wire(HOST_ID, str(args.pin), led.id, "p1")

    console = session.create_console(PrintTerminal())
    console.handle_input(f"gpio-mode {args.pin} out\r")

    for _ in range(args.times):
        for value in (1, 0):
            console.handle_input(f"gpio-write {args.pin} {value}\r")
            level = session.component_states()[led.id].level
            print(f"\nLED {led.id}", "ON" if level else "OFF")


if __name__ == "__main__":
    main()

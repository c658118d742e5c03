import pytest

from piforge.core.gpio_enums import PinMode
from piforge.core.ids import IdAllocator


def test_ids_are_sequential():
    ids = IdAllocator("comp")
    assert [ids.next_id() for _ in range(3)] == ["comp-1", "comp-2", "comp-3"]


def test_custom_start():
    assert IdAllocator("wire", start=10).next_id() == "wire-10"


def test_allocators_are_independent():
    a, b = IdAllocator("comp"), IdAllocator("comp")
    a.next_id()
    assert b.next_id() == "comp-1"


def test_empty_prefix_rejected():
    with pytest.raises(ValueError):
        IdAllocator("")


@pytest.mark.parametrize(
    "word,expected",
    [("in", PinMode.IN), ("OUT", PinMode.OUT), (" Pwm ", PinMode.PWM), (PinMode.OUT, PinMode.OUT)],
)
def test_pin_mode_parse(word, expected):
    assert PinMode.parse(word) is expected


@pytest.mark.parametrize("word", ["", "ALT0", "output", "1"])
def test_pin_mode_parse_unknown(word):
    assert PinMode.parse(word) is None

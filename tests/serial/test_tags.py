"""Tests for the serial tag decoder."""

import pytest

from piforge.serial.tags import (
    DEFAULT_WINDOW,
    GpioModeTag,
    GpioOutTag,
    SerialTagDecoder,
    parse_tag,
)


class TestParseTag:
    def test_gpio_out(self):
        assert parse_tag("GPIO_OUT: 17 1") == GpioOutTag(17, 1)

    def test_gpio_mode_is_upper_cased(self):
        assert parse_tag("GPIO_MODE: 4 pwm") == GpioModeTag(4, "PWM")

    def test_mode_word_is_not_validated(self):
        assert parse_tag("GPIO_MODE: 4 alt0") == GpioModeTag(4, "ALT0")

    @pytest.mark.parametrize(
        "body",
        [
            "GPIO_OUT: 17",
            "GPIO_OUT:17 1",
            "GPIO_OUT: 17 1 ",
            "gpio_out: 17 1",
            "GPIO_OUT: -1 1",
            "GPIO_MODE: 4",
            "OK",
            "",
        ],
    )
    def test_malformed_bodies(self, body):
        assert parse_tag(body) is None


class TestDecoder:
    @pytest.fixture
    def decoder(self):
        return SerialTagDecoder()

    def test_default_capacity(self, decoder):
        assert decoder.capacity == DEFAULT_WINDOW == 100

    def test_tag_completes_on_closing_bracket(self, decoder):
        for char in "[GPIO_OUT: 17 1":
            assert decoder.feed(char) is None
        assert decoder.feed("]") == GpioOutTag(17, 1)
        assert decoder.pending == ""

    def test_tags_inside_noise(self, decoder):
        text = "root@pi:~# gpio-write 17 1\r\n[GPIO_OUT: 17 1]\r\n# "
        assert decoder.feed_text(text) == [GpioOutTag(17, 1)]

    def test_several_tags_in_one_chunk(self, decoder):
        text = "[GPIO_MODE: 17 out][GPIO_OUT: 17 1]x[GPIO_OUT: 17 0]"
        assert decoder.feed_text(text) == [
            GpioModeTag(17, "OUT"),
            GpioOutTag(17, 1),
            GpioOutTag(17, 0),
        ]

    def test_tag_split_across_chunks(self, decoder):
        assert decoder.feed_text("[GPIO_O") == []
        assert decoder.pending == "[GPIO_O"
        assert decoder.feed_text("UT: 5 1]") == [GpioOutTag(5, 1)]

    def test_new_bracket_restarts_tag(self, decoder):
        assert decoder.feed_text("[garbage [GPIO_OUT: 3 1]") == [GpioOutTag(3, 1)]

    def test_unknown_tag_is_dropped(self, decoder):
        assert decoder.feed_text("[  OK  ] Started udev") == []
        assert decoder.pending == ""

    def test_stray_closing_bracket_is_ignored(self, decoder):
        assert decoder.feed_text("]]]") == []

    def test_overlong_tag_is_abandoned(self):
        decoder = SerialTagDecoder(capacity=16)
        # "[GPIO_OUT: 17 1]" is exactly 16 characters and still fits.
        assert decoder.feed_text("[GPIO_OUT: 17 1]") == [GpioOutTag(17, 1)]
        assert decoder.feed_text("[GPIO_OUT: 17 10]") == []
        assert decoder.pending == ""

    def test_abandoned_tag_does_not_swallow_the_next_one(self):
        decoder = SerialTagDecoder(capacity=20)
        text = "[" + "x" * 40 + "]" + "[GPIO_OUT: 2 1]"
        assert decoder.feed_text(text) == [GpioOutTag(2, 1)]

    def test_reset(self, decoder):
        decoder.feed_text("[GPIO_OUT: 1")
        decoder.reset()
        assert decoder.feed_text(" 1]") == []

    def test_capacity_too_small(self):
        with pytest.raises(ValueError):
            SerialTagDecoder(capacity=1)

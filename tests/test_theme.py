from agentsesame.text import Color
from agentsesame.theme import Theme, ThemeConfig, parse_hex_color


def test_parse_hex_valid():
    assert parse_hex_color("#E87B35") == Color.rgb(232, 123, 53)
    assert parse_hex_color("4285F4") == Color.rgb(66, 133, 244)


def test_parse_hex_invalid():
    assert parse_hex_color("xyz") is None
    assert parse_hex_color("") is None
    assert parse_hex_color("#GG0000") is None


def test_defaults_without_config():
    theme = Theme.from_config(None)
    assert theme.primary == Color.rgb(232, 123, 53)
    assert theme.on_surface == Color.WHITE
    assert theme.on_surface_variant == Color.DARK_GRAY
    assert theme.surface_variant == Color.rgb(40, 40, 60)
    assert theme.surface_container == Color.rgb(60, 60, 60)
    assert theme.secondary == Color.CYAN
    assert theme.tertiary == Color.rgb(100, 255, 100)
    assert theme.primary_container == Color.YELLOW
    assert theme.error == Color.RED


def test_empty_config_equals_defaults():
    assert Theme.from_config(ThemeConfig()) == Theme.from_config(None)


def test_override_applied():
    theme = Theme.from_config(ThemeConfig(primary="#112233", error="445566"))
    assert theme.primary == Color.rgb(0x11, 0x22, 0x33)
    assert theme.error == Color.rgb(0x44, 0x55, 0x66)
    assert theme.secondary == Color.CYAN


def test_invalid_override_falls_back():
    theme = Theme.from_config(ThemeConfig(primary="xyz", on_surface="#12345"))
    assert theme.primary == Color.rgb(232, 123, 53)
    assert theme.on_surface == Color.WHITE
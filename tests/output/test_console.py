"""Tests for Rich Console factory and theme."""

from io import StringIO

from pvectl.output.console import PVE_THEME, create_console, get_output, style_for_access


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[pve.error]boom[/pve.error]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "boom" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120


class TestTheme:
    def test_theme_styles_exist(self) -> None:
        for name in ("pve.ok", "pve.error", "pve.name", "pve.elevated", "pve.basic"):
            assert name in PVE_THEME.styles

    def test_access_styles(self) -> None:
        assert style_for_access("basic") == "pve.basic"
        assert style_for_access("elevated") == "pve.elevated"
        assert style_for_access("mixed") == "pve.elevated"
        assert style_for_access("unknown") == ""

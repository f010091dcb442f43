"""Tests for sysbundle.output.console module."""

from __future__ import annotations

import pytest

from sysbundle.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    """Tests for Style."""

    def test_str_conversion(self) -> None:
        """Styles convert to rich style strings."""
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    """MockConsole records what services print."""

    def test_records_styles(self) -> None:
        """Every output is recorded with its style."""
        console = MockConsole()
        console.print("plain")
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        console.header("Releases")

        assert console.messages == [
            "plain",
            "OK done",
            "error: broken",
            "warning: careful",
            "info: fyi",
            "Releases",
        ]
        assert [o.style for o in console.outputs] == [
            Style.DEFAULT,
            Style.SUCCESS,
            Style.ERROR,
            Style.WARNING,
            Style.INFO,
            Style.HEADER,
        ]

    def test_has_error_and_find(self) -> None:
        """has_error and find query the records."""
        console = MockConsole()
        console.print("unpack alpha-1")
        assert not console.has_error()

        console.error("alpha-1: archive fetch failed")

        assert console.has_error()
        assert len(console.find("alpha-1")) == 2
        assert console.text == "unpack alpha-1\nerror: alpha-1: archive fetch failed"

    def test_satisfies_protocol(self) -> None:
        """MockConsole is a ConsoleProtocol."""
        console: ConsoleProtocol = MockConsole()
        console.print("x")


class TestRichConsole:
    """Tests for RichConsole."""

    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors go to stderr, the rest to stdout."""
        console = RichConsole()

        console.print("listing")
        console.error("bad [thing]")

        captured = capsys.readouterr()
        assert "listing" in captured.out
        assert "bad [thing]" in captured.err
        assert "bad" not in captured.out

    def test_markup_in_messages_is_not_interpreted(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Brackets in messages are printed literally."""
        RichConsole().success("[red]literal[/red]")
        assert "[red]literal[/red]" in capsys.readouterr().out

"""Tests for -mon monitors."""

import pytest

from queso.exceptions import OptionError, PropertyValueError
from queso.monitor import Monitor, MonitorMode


class TestMonitor:
    """Tests for Monitor."""

    def test_chardev_only(self) -> None:
        assert Monitor("mon0").args() == ["-mon", "chardev=mon0"]

    def test_qmp_pretty(self) -> None:
        monitor = Monitor("qmp0").set_mode(MonitorMode.QMP).toggle_pretty(True)
        assert monitor.args_string() == "-mon chardev=qmp0,mode=control,pretty=on"

    def test_hmp(self) -> None:
        assert Monitor("hmp0").set_mode(MonitorMode.HMP).args_string() == "-mon chardev=hmp0,mode=readline"

    def test_hmp_pretty_off_allowed(self) -> None:
        monitor = Monitor("hmp0").set_mode(MonitorMode.HMP).toggle_pretty(False)
        assert monitor.args_string() == "-mon chardev=hmp0,mode=readline,pretty=off"

    def test_pretty_without_mode_allowed(self) -> None:
        assert Monitor("m").toggle_pretty(True).args_string() == "-mon chardev=m,pretty=on"

    def test_hmp_pretty_rejected(self) -> None:
        """pretty-printing only applies to JSON replies."""
        monitor = Monitor("hmp0").toggle_pretty(True).set_mode(MonitorMode.HMP)
        with pytest.raises(PropertyValueError) as exc_info:
            monitor.option()
        assert exc_info.value.context == {"chardev": "hmp0", "mode": "readline"}
        assert isinstance(exc_info.value, OptionError)

    def test_mode_replaced(self) -> None:
        """Switching an HMP monitor to QMP makes pretty valid again."""
        monitor = Monitor("m").set_mode(MonitorMode.HMP).toggle_pretty(True).set_mode(MonitorMode.QMP)
        assert monitor.args_string() == "-mon chardev=m,mode=control,pretty=on"

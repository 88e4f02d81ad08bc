"""Tests for the CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from munin_log_events import main
from munin_log_events.checkpoint import CheckpointStore
from munin_log_events.utils.naming import checkpoint_key


@pytest.fixture
def web_env(tmp_path: Path, make_log, plugin_env, state_path: Path) -> Path:
    log = make_log("shop.log", ["GET / 200", "GET /cart 500", "GET /pay 503"])
    plugin_env(
        web_logfiles=str(tmp_path / "logs" / "*.log"),
        web_regex=r" 5\d\d$",
        services="shop blog",
        blog_logbinding="blog",
        shop_warning="5",
        title="Web errors",
        MUNIN_STATEFILE=str(state_path),
    )
    return log


class TestCLI:
    def test_config_mode_prints_graph_description(
        self, web_env: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("sys.argv", ["log_events_web", "config"]):
            main()

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "graph_title Web errors"
        assert "shop.label shop" in out
        assert "shop.warning 5" in out
        assert "blog.label blog" in out

    def test_config_mode_does_not_touch_state(
        self, web_env: Path, state_path: Path
    ) -> None:
        with patch("sys.argv", ["log_events_web", "config"]):
            main()

        assert not state_path.exists()

    @pytest.mark.parametrize(
        "argv",
        [["log_events_web"], ["log_events_web", "fetch"], ["log_events_web", "anything"]],
        ids=["no_argument", "fetch", "unknown_argument"],
    )
    def test_collect_mode_prints_values(
        self,
        web_env: Path,
        state_path: Path,
        capsys: pytest.CaptureFixture[str],
        argv: list[str],
    ) -> None:
        with patch("sys.argv", argv):
            main()

        assert capsys.readouterr().out.splitlines() == [
            "shop.value 2",
            f"shop.extinfo {web_env}",
            "blog.value 0",
        ]
        assert CheckpointStore(state_path).load() == {checkpoint_key(str(web_env)): 3}

    def test_state_file_defaults_to_plugstate_and_plugin_name(
        self, web_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("MUNIN_STATEFILE")
        monkeypatch.setenv("MUNIN_PLUGSTATE", str(tmp_path / "plugstate"))

        with patch("sys.argv", ["/etc/munin/plugins/log_events_web"]):
            main()

        assert (tmp_path / "plugstate" / "log_events_web.state").exists()

    def test_missing_configuration_exits_with_status_one(
        self, plugin_env, capsys: pytest.CaptureFixture[str]
    ) -> None:
        plugin_env(web_logfiles="/var/log/*.log")

        with patch("sys.argv", ["log_events_web"]), pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == (
            "log_events_web: ERROR: Missing configuration: "
            "web_regex, services or services_autoconf"
        )

    def test_warnings_go_to_stderr_with_plugin_prefix(
        self,
        web_env: Path,
        plugin_env,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        plugin_env(mail_logfiles=str(tmp_path / "mail.log"), mail_regex="reject")

        with patch("sys.argv", ["log_events_web"]):
            main()

        err = capsys.readouterr().err
        assert f"log_events_web: WARNING: Log file {tmp_path / 'mail.log'} does not exist" in err

    def test_debug_output_is_enabled_by_munin_debug(
        self, web_env: Path, plugin_env, capsys: pytest.CaptureFixture[str]
    ) -> None:
        plugin_env(MUNIN_DEBUG="1")

        with patch("sys.argv", ["log_events_web"]):
            main()

        assert "DEBUG" in capsys.readouterr().err

"""Tests for paperplane.cli._run — ``paperplane run`` subcommand."""

import sys
import types
from unittest.mock import MagicMock, patch

import pytest

from paperplane.app import Mount, mount
from paperplane.cli import main
from paperplane.config import AppConfig
from paperplane.http.response import send


def _index(request):
    return send("ok")


@pytest.fixture
def fake_app(monkeypatch: pytest.MonkeyPatch) -> Mount:
    """Register a fake module holding a Mount and a bare handler."""
    app = mount(_index, AppConfig(host="127.0.0.1", port=8000, debug=True, log_level="warning"))
    mod = types.ModuleType("_run_test_app")
    mod.app = app  # type: ignore[attr-defined]
    mod.handler = _index  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_run_test_app", mod)
    return app


class TestPaperplaneRun:
    @patch("paperplane.server.dev.run_server")
    def test_default_host_and_port(self, mock_server: MagicMock, fake_app: Mount) -> None:
        """run uses the mount's config when --host/--port are omitted."""
        main(["run", "_run_test_app:app"])
        mock_server.assert_called_once()
        args = mock_server.call_args[0]
        assert args[0] is fake_app
        assert args[1] == "127.0.0.1"
        assert args[2] == 8000

    @patch("paperplane.server.dev.run_server")
    def test_host_and_port_override(self, mock_server: MagicMock, fake_app: Mount) -> None:
        main(["run", "_run_test_app:app", "--host", "0.0.0.0", "--port", "3000"])
        args = mock_server.call_args[0]
        assert args[1] == "0.0.0.0"
        assert args[2] == 3000

    @patch("paperplane.server.dev.run_server")
    def test_reload_and_app_path(self, mock_server: MagicMock, fake_app: Mount) -> None:
        """reload follows config.debug; the import string is forwarded for reloading."""
        main(["run", "_run_test_app:app"])
        kwargs = mock_server.call_args[1]
        assert kwargs["reload"] is True
        assert kwargs["app_path"] == "_run_test_app:app"

    @patch("paperplane.server.dev.run_server")
    def test_bare_handler_is_mounted(self, mock_server: MagicMock, fake_app: Mount) -> None:
        main(["run", "_run_test_app:handler"])
        args, kwargs = mock_server.call_args
        assert isinstance(args[0], Mount)
        assert args[0].handler is _index
        assert kwargs["app_path"] is None

    @patch("paperplane.cli._run.logging.basicConfig")
    @patch("paperplane.server.dev.run_server")
    def test_log_level(
        self, mock_server: MagicMock, mock_logging: MagicMock, fake_app: Mount
    ) -> None:
        main(["run", "_run_test_app:app"])
        assert mock_logging.call_args[1]["level"] == "WARNING"

        main(["run", "_run_test_app:app", "--log-level", "debug"])
        assert mock_logging.call_args[1]["level"] == "DEBUG"

    def test_invalid_import_string(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "nonexistent_module_xyz:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "paperplane" in capsys.readouterr().out

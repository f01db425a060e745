# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for bucketbrowser/service.py."""

import logging
import signal
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bucketbrowser.config import AppConfig, ConfigError
from bucketbrowser.service import BrowserService, main


@pytest.fixture
def config(aws_env: dict[str, str]) -> AppConfig:
    return AppConfig.from_env(aws_env)


class TestBrowserService:
    """Tests for BrowserService wiring."""

    def test_wires_components(self, config: AppConfig) -> None:
        """Configuration flows into client, manager and server."""
        service = BrowserService(config)
        try:
            assert service.client.bucket == "test-bucket"
            assert service.client.region == "eu-west-1"
            assert service.manager.client is service.client
            assert service.server.host == "127.0.0.1"
            assert service.server.port == 5300
        finally:
            service.stop()

    def test_host_and_port_override(self, config: AppConfig) -> None:
        service = BrowserService(config, host="0.0.0.0", port=8080)
        try:
            assert service.server.host == "0.0.0.0"
            assert service.server.port == 8080
        finally:
            service.stop()

    def test_start_blocks_until_stopped(self, config: AppConfig) -> None:
        """start() returns once stop() has been called."""
        service = BrowserService(config)
        with (
            patch.object(service.server, "start") as mock_start,
            patch.object(service.server, "stop") as mock_stop,
        ):
            service.stop()
            service.start()
            service.stop()
        mock_start.assert_called_once()
        mock_stop.assert_called_once()


class TestMain:
    """Tests for the main entry point."""

    @pytest.fixture(autouse=True)
    def _no_side_effects(self) -> Iterator[dict[str, MagicMock]]:
        """Keep logging and signal handlers untouched."""
        with (
            patch("bucketbrowser.service.configure_logging") as mock_log,
            patch("bucketbrowser.service.signal.signal") as mock_signal,
        ):
            yield {"logging": mock_log, "signal": mock_signal}

    def test_config_error(self) -> None:
        with patch(
            "bucketbrowser.service.AppConfig.load",
            side_effect=ConfigError("missing"),
        ):
            assert main([]) == 1

    def test_config_path_passed(self, tmp_path: Path) -> None:
        path = tmp_path / "bucketbrowser.yaml"
        with patch(
            "bucketbrowser.service.AppConfig.load",
            side_effect=ConfigError("missing"),
        ) as mock_load:
            main(["--config", str(path)])
        mock_load.assert_called_once_with(config_path=path)

    def test_init_error(self, config: AppConfig) -> None:
        with (
            patch("bucketbrowser.service.AppConfig.load", return_value=config),
            patch(
                "bucketbrowser.service.BrowserService",
                side_effect=ValueError("bad"),
            ),
        ):
            assert main([]) == 2

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (None, 0),
            (OSError("Address already in use"), 2),
            (KeyboardInterrupt(), 0),
            (RuntimeError("boom"), 3),
        ],
    )
    def test_run_exit_codes(
        self,
        config: AppConfig,
        error: BaseException | None,
        code: int,
    ) -> None:
        service = MagicMock()
        service.start.side_effect = error
        with (
            patch("bucketbrowser.service.AppConfig.load", return_value=config),
            patch(
                "bucketbrowser.service.BrowserService", return_value=service
            ) as mock_cls,
        ):
            assert main(["--host", "0.0.0.0", "--port", "9000"]) == code
        mock_cls.assert_called_once_with(config, host="0.0.0.0", port=9000)
        service.stop.assert_called()

    def test_installs_signal_handlers(
        self, config: AppConfig, _no_side_effects: dict[str, MagicMock]
    ) -> None:
        service = MagicMock()
        with (
            patch("bucketbrowser.service.AppConfig.load", return_value=config),
            patch("bucketbrowser.service.BrowserService", return_value=service),
        ):
            main([])
        mock_signal = _no_side_effects["signal"]
        signals = [c.args[0] for c in mock_signal.call_args_list]
        assert signals == [signal.SIGINT, signal.SIGTERM]

        handler = mock_signal.call_args_list[0].args[1]
        service.stop.reset_mock()
        handler(signal.SIGINT, None)
        service.stop.assert_called_once()

    def test_debug_flag(self, _no_side_effects: dict[str, MagicMock]) -> None:
        with patch(
            "bucketbrowser.service.AppConfig.load",
            side_effect=ConfigError("missing"),
        ):
            main(["--debug"])
        _no_side_effects["logging"].assert_called_once_with(
            level=logging.DEBUG, add_secret_filter=True
        )

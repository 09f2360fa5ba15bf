"""
Entry Point Tests
"""

from unittest.mock import AsyncMock, MagicMock, patch

from networkcontrol import main as entry
from networkcontrol.config import settings
from networkcontrol.errors import NetworkError


class TestMain:

    def _run(self, argv, height=None):
        network_height = AsyncMock(return_value=1234)
        if height is not None:
            network_height.side_effect = height
        with patch.object(entry, "network_height", network_height), \
                patch.object(entry, "create_app", MagicMock(return_value="app")) as create_app, \
                patch.object(entry.uvicorn, "run") as run, \
                patch.object(entry.logging.config, "dictConfig"):
            code = entry.main(argv)
        return code, network_height, create_app, run

    def test_factomd_flag_does_not_touch_settings(self):
        original_url = settings.FACTOMD_URL

        code, network_height, create_app, run = self._run(["-f", "http://node.test:8088", "--port", "9000"])

        assert code == 0
        assert network_height.call_args.args[0].url == "http://node.test:8088"
        assert create_app.call_args.kwargs["factomd_config"].url == "http://node.test:8088"
        run.assert_called_once_with("app", host=settings.HOST, port=9000, log_config=None)
        assert settings.FACTOMD_URL == original_url

    def test_unreachable_node_exits_without_serving(self):
        code, _, create_app, run = self._run(["-f", "http://down.test"], height=NetworkError("refused"))

        assert code == 1
        create_app.assert_not_called()
        run.assert_not_called()

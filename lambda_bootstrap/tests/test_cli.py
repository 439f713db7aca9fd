import sys
import textwrap
from unittest.mock import patch

import pytest

from lambda_bootstrap import cli
from lambda_bootstrap.config import load_config
from lambda_bootstrap.core.exceptions import ConfigurationError, TransportError

pytestmark = pytest.mark.usefixtures("restore_root_logger")


@pytest.fixture
def task_root(tmp_path, monkeypatch):
    (tmp_path / "handler_module_for_cli.py").write_text(
        textwrap.dedent(
            """
            def myHandler(event, context):
                return {"ok": True}
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(sys, "path", [str(tmp_path)] + sys.path)
    yield tmp_path
    sys.modules.pop("handler_module_for_cli", None)


class TestLoadHandler:
    def test_imports_exported_name(self, task_root, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "handler_module_for_cli.myHandler")

        function = cli.load_handler(load_config())

        assert function.__name__ == "myHandler"

    def test_missing_module(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "no_such_module_here.myHandler")

        with pytest.raises(ConfigurationError):
            cli.load_handler(load_config())

    def test_missing_attribute(self, task_root, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "handler_module_for_cli.otherHandler")

        with pytest.raises(ConfigurationError):
            cli.load_handler(load_config())


    @pytest.mark.parametrize(
        "source",
        ["def myHandler(event, context)\n    return {}\n", "raise RuntimeError('no database')\n"],
        ids=["syntax_error", "import_time_error"],
    )
    def test_broken_module_is_configuration_error(self, tmp_path, monkeypatch, source):
        (tmp_path / "broken_handler_for_cli.py").write_text(source, encoding="utf-8")
        monkeypatch.setattr(sys, "path", [str(tmp_path)] + sys.path)
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "broken_handler_for_cli.myHandler")

        try:
            with pytest.raises(ConfigurationError):
                cli.load_handler(load_config())
        finally:
            sys.modules.pop("broken_handler_for_cli", None)


class TestMain:
    def test_configuration_error_exits_before_loop(self, tmp_path):
        with patch("lambda_bootstrap.cli.Runtime") as mock_runtime:
            code = cli.main(["--log-config", str(tmp_path / "none.yml")])

        assert code == 1
        mock_runtime.assert_not_called()

    def test_registers_and_starts(self, task_root, tmp_path, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "handler_module_for_cli.myHandler")

        with patch("lambda_bootstrap.cli.Runtime") as mock_runtime:
            code = cli.main(["--log-config", str(tmp_path / "none.yml")])

        assert code == 0
        runtime = mock_runtime.return_value
        name, function = runtime.register.call_args[0]
        assert name == "myHandler"
        assert function.__name__ == "myHandler"
        runtime.start.assert_called_once()

    def test_fatal_loop_error_exits_non_zero(self, task_root, tmp_path, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "handler_module_for_cli.myHandler")

        with patch("lambda_bootstrap.cli.Runtime") as mock_runtime:
            mock_runtime.return_value.start.side_effect = TransportError(
                "next", OSError("refused")
            )
            code = cli.main(["--log-config", str(tmp_path / "none.yml")])

        assert code == 1

    def test_broken_module_exits_non_zero(self, tmp_path, monkeypatch):
        (tmp_path / "broken_main_for_cli.py").write_text("1 / 0\n", encoding="utf-8")
        monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "h:1")
        monkeypatch.setenv("_HANDLER", "broken_main_for_cli.myHandler")

        try:
            with patch("lambda_bootstrap.cli.Runtime") as mock_runtime:
                code = cli.main(
                    ["--task-root", str(tmp_path), "--log-config", str(tmp_path / "none.yml")]
                )
        finally:
            sys.modules.pop("broken_main_for_cli", None)
            if str(tmp_path) in sys.path:
                sys.path.remove(str(tmp_path))

        assert code == 1
        mock_runtime.return_value.start.assert_not_called()

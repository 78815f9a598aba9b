import json
import logging
import sys
from unittest import mock

from hunkview.core import logging_config
from hunkview.core.config import Settings
from hunkview.core.logging_config import StructuredJSONFormatter, get_logger


def test_get_logger_namespaces_under_hunkview():
    assert get_logger("hunkview.diff.parser").name == "hunkview.diff.parser"
    assert get_logger("hunkview").name == "hunkview"
    assert get_logger("scripts").name == "hunkview.scripts"


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "hunkview.api", logging.INFO, __file__, 12, "reply posted to %s", ("octo/widgets",), None
    )
    record.pull_number = 7

    payload = json.loads(StructuredJSONFormatter().format(record))

    assert payload["message"] == "reply posted to octo/widgets"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "hunkview.api"
    assert payload["pull_number"] == 7
    assert "args" not in payload and "msg" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad hunk")
    except ValueError:
        record = logging.LogRecord(
            "hunkview", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    payload = json.loads(StructuredJSONFormatter().format(record))

    assert "ValueError: bad hunk" in payload["exception"]


def test_logging_config_uses_settings(tmp_path):
    log_dir = tmp_path / "logs"
    settings = Settings(LOG_DIR=str(log_dir), LOG_LEVEL="DEBUG")

    with mock.patch.object(logging_config, "get_settings", return_value=settings):
        config = logging_config.get_logging_config()

    assert log_dir.is_dir()
    assert set(config["handlers"]) == {"console", "json_file"}
    assert config["handlers"]["json_file"]["filename"] == str(log_dir / "hunkview.json.log")
    assert config["loggers"]["hunkview"]["handlers"] == ["console", "json_file"]
    assert {logger["level"] for logger in config["loggers"].values()} == {"DEBUG"}

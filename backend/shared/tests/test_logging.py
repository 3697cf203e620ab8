import json
import logging
from enum import StrEnum
from unittest.mock import patch

import pytest
import structlog

from shared.logging import REDACTED, _redact_credentials, _serialize_enums, configure_structlog, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def allow_file_logging():
    """Lift the pytest guard so setup_logging creates a real log file."""
    with patch("shared.logging._is_test", return_value=False):
        yield


def _renderer(handler: logging.Handler) -> object:
    formatter = handler.formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    return formatter.processors[-1]


class TestSetupLogging:
    @pytest.mark.parametrize(
        ("log_format", "renderer_type"),
        [("json", structlog.processors.JSONRenderer), ("console", structlog.dev.ConsoleRenderer)],
    )
    def test_log_format_selects_renderer(self, monkeypatch, log_format, renderer_type):
        monkeypatch.setenv("LOG_FORMAT", log_format)
        setup_logging()

        (handler,) = logging.getLogger().handlers
        assert isinstance(_renderer(handler), renderer_type)

    def test_quiets_uvicorn_access_log(self):
        logging.getLogger("uvicorn.access").setLevel(logging.NOTSET)
        setup_logging()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    @pytest.mark.parametrize(("var", "value"), [("LOG_LEVEL", "loud"), ("LOG_FORMAT", "xml")])
    def test_invalid_env_raises(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(ValueError, match=f"Invalid {var}"):
            setup_logging()

    def test_no_log_file_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "api") is None
        assert not (tmp_path / "api").exists()

    def test_file_output_uses_plain_renderer(self, tmp_path, monkeypatch, allow_file_logging):
        monkeypatch.setenv("LOG_FORMAT", "console")
        log_path = setup_logging(log_dir=tmp_path / "api")

        assert log_path is not None
        assert log_path.parent == tmp_path / "api"
        file_handler = logging.getLogger().handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        renderer = _renderer(file_handler)
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

        structlog.get_logger("test.file").info("claimed username", username="alice")
        content = log_path.read_text()
        assert "claimed username" in content
        assert "\x1b[" not in content


class TestConfigureStructlog:
    def test_keeps_existing_handlers(self):
        handler = logging.NullHandler()
        logging.getLogger().addHandler(handler)

        configure_structlog()

        assert handler in logging.getLogger().handlers


class TestSerializeEnums:
    class _Kind(StrEnum):
        SIGNATURE = "signature"

    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"kind": self._Kind.SIGNATURE, "path": "/api/my/account"})
        assert result == {"kind": "signature", "path": "/api/my/account"}
        assert type(result["kind"]) is str


class TestRedactCredentials:
    def test_masks_credential_keys(self):
        event_dict = {"event": "auth", "token": "eyJ.abc.def", "authorization": "Bearer x", "secret": "s"}
        result = _redact_credentials(None, "", event_dict)
        assert result == {"event": "auth", "token": REDACTED, "authorization": REDACTED, "secret": REDACTED}

    def test_leaves_other_keys_unchanged(self):
        event_dict = {"event": "auth", "username": "alice"}
        assert _redact_credentials(None, "", event_dict) == {"event": "auth", "username": "alice"}

    def test_bound_context_is_masked(self, caplog):
        structlog.contextvars.bind_contextvars(access_secret="s3cr3t-value")
        with caplog.at_level(logging.INFO):
            structlog.get_logger("test.redact").info("provisioned", username="alice")

        assert "provisioned" in caplog.text
        assert "s3cr3t-value" not in caplog.text

    def test_token_never_reaches_log_file(self, tmp_path, monkeypatch, allow_file_logging):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "api")

        structlog.get_logger("test.redact").info("issued", username="alice", token="eyJ.very.secret")

        assert log_path is not None
        content = log_path.read_text()
        assert "eyJ.very.secret" not in content
        assert json.loads(content.strip().splitlines()[0])["token"] == REDACTED

import base64
import importlib
import logging

import orjson
import pytest

from nemo_provider.models import ConnectionSpec
from nemo_provider.nemo import FetchError, basic_auth_header, build_fetch_options
from nemo_provider.utils.logging import JSONFormatter, RedactionFilter, REDACTED, setup_logging


@pytest.fixture
def spec():
    return ConnectionSpec(
        host="nemo.example.org",
        mission="river-watch",
        username="bob",
        password="p@ss:word",
        form_id="abc-123",
    )


def test_fetch_options_url_is_interpolated(spec):
    options = build_fetch_options(spec)

    assert options.url == "https://nemo.example.org/en/m/river-watch/odata/v1/Responses-abc-123"


def test_fetch_options_carry_basic_auth(spec):
    options = build_fetch_options(spec, user_agent="tests/1.0")

    token = options.headers['Authorization'].split(" ", 1)[1]
    assert base64.b64decode(token).decode("utf-8") == "bob:p@ss:word"
    assert options.headers['User-Agent'] == "tests/1.0"
    assert "p@ss" not in repr(options)


def test_fetch_options_are_deterministic(spec):
    assert build_fetch_options(spec) == build_fetch_options(spec)


def test_basic_auth_header_handles_unicode():
    header = basic_auth_header("josé", "ñ")

    assert header == "Basic " + base64.b64encode("josé:ñ".encode("utf-8")).decode("ascii")


def test_fetch_error_message():
    error = FetchError("nemo.example.org", "upstream returned an error status",
                       response_received=True, status_code=503)

    assert str(error) == (
        "Failed to fetch responses from nemo.example.org: "
        "upstream returned an error status (HTTP 503)"
    )


def test_log_records_are_json_with_credentials_masked():
    record = logging.LogRecord(
        name="nemo_provider.test", level=logging.INFO, pathname=__file__, lineno=1,
        msg="Fetching %s", args=("responses",), exc_info=None,
    )
    record.password = "hunter2"
    record.target_host = "nemo.example.org"

    assert RedactionFilter().filter(record) is True
    data = orjson.loads(JSONFormatter().format(record))

    assert data['message'] == "Fetching responses"
    assert data['level'] == "INFO"
    assert data['password'] == REDACTED
    assert data['target_host'] == "nemo.example.org"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("NEMO_TIMEOUT_S", "none")
    monkeypatch.setenv("NEMO_TTL", "120")

    import nemo_provider.settings as settings
    settings = importlib.reload(settings)
    config = settings.load_config()

    assert config.timeout is None
    assert config.ttl == 120

    monkeypatch.delenv("NEMO_TIMEOUT_S")
    monkeypatch.delenv("NEMO_TTL")
    settings = importlib.reload(settings)
    config = settings.load_config()

    assert config.timeout == 30.0
    assert config.ttl == 10


def test_setup_logging_installs_json_handler():
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        setup_logging("debug")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)
        assert any(isinstance(f, RedactionFilter) for f in handler.filters)
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


def test_create_model_uses_environment(monkeypatch):
    monkeypatch.setenv("NEMO_TTL", "45")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    import nemo_provider.settings as settings
    settings = importlib.reload(settings)

    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        model = settings.create_model()

        assert model.config.ttl == 45
        assert root_logger.level == logging.WARNING
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)
        monkeypatch.delenv("NEMO_TTL")
        monkeypatch.delenv("LOG_LEVEL")
        importlib.reload(settings)

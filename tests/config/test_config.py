import logging

import pytest

from opuskit.config import OpusKitConfig
from opuskit.exceptions import ConfigurationError
from opuskit.utils.logging import configure_logging


def test_defaults():
    config = OpusKitConfig.from_env({})
    assert config.backend == "system"
    assert config.library_path is None
    assert config.log_level == "INFO"


def test_library_path_selects_path_backend():
    config = OpusKitConfig.from_env({"OPUSKIT_LIBRARY": "/opt/opus/libopus.so.0"})
    assert config.backend == "path"
    assert config.library_path == "/opt/opus/libopus.so.0"


def test_values_are_normalised():
    config = OpusKitConfig.from_env({"OPUSKIT_BACKEND": "OpusLib", "OPUSKIT_LOG_LEVEL": "debug"})
    assert config.backend == "opuslib"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "environ",
    [
        {"OPUSKIT_BACKEND": "ffmpeg"},
        {"OPUSKIT_BACKEND": "path"},
        {"OPUSKIT_LOG_LEVEL": "loud"},
    ],
)
def test_invalid_configuration(environ):
    with pytest.raises(ConfigurationError):
        OpusKitConfig.from_env(environ)


def test_from_dict_requires_mapping():
    with pytest.raises(ConfigurationError):
        OpusKitConfig.from_dict(["system"])


def test_configure_logging_reads_environment(monkeypatch):
    calls = []
    monkeypatch.setenv("OPUSKIT_LOG_LEVEL", "warning")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    configure_logging()
    configure_logging("debug")
    assert calls == [{"level": logging.WARNING}, {"level": logging.DEBUG}]

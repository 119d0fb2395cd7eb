import pytest
from pydantic import ValidationError

from procexit.modules.shutdown.config import ExitConfig, LogLevel, LogOutput


def test_defaults():
    config = ExitConfig()
    assert config.error_exit_code == 1
    assert config.log_output is None
    assert config.log_level == LogLevel.INFO


@pytest.mark.parametrize("exit_code", [0, -1])
def test_error_exit_code_must_be_positive(exit_code):
    with pytest.raises(ValidationError):
        ExitConfig(error_exit_code=exit_code)


def test_invalid_log_output():
    with pytest.raises(ValidationError):
        ExitConfig(log_output="xml")


def test_from_env():
    config = ExitConfig.from_env({
        "PROCEXIT_ERROR_EXIT_CODE": "3",
        "PROCEXIT_LOG_OUTPUT": "JSON",
        "PROCEXIT_LOG_LEVEL": "debug",
    })

    assert config.error_exit_code == 3
    assert config.log_output == LogOutput.JSON
    assert config.log_level == LogLevel.DEBUG


def test_from_env_defaults_for_unset_variables():
    assert ExitConfig.from_env({}) == ExitConfig()


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("PROCEXIT_ERROR_EXIT_CODE", "9")
    monkeypatch.delenv("PROCEXIT_LOG_OUTPUT", raising=False)
    monkeypatch.delenv("PROCEXIT_LOG_LEVEL", raising=False)

    assert ExitConfig.from_env().error_exit_code == 9


def test_from_env_rejects_invalid_code():
    with pytest.raises(ValidationError):
        ExitConfig.from_env({"PROCEXIT_ERROR_EXIT_CODE": "0"})

"""
Tests for the ``python -m env_config`` diagnostics command.

The target config class lives in a throwaway module registered in
``sys.modules``, so ``importlib.import_module`` finds it without touching
the filesystem. Only the broken-module case writes a real file, because the
failure must happen during import.
"""

import sys
import types
from dataclasses import dataclass
from typing import Optional

import pytest

from env_config import env_config
from env_config.cli import EXIT_CONFIG_ERROR, EXIT_OK, EXIT_USAGE_ERROR, main

MODULE = "cli_fake_settings"


@env_config(prefix="CLITEST")
@dataclass(frozen=True)
class CliConfig:
    debug: bool
    api_key: Optional[str]


@dataclass(frozen=True)
class NotDecorated:
    debug: bool


@env_config(prefix="CLIPOOL")
@dataclass(frozen=True)
class PoolConfig:
    size: int

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"size must be positive, got: {self.size}")


@pytest.fixture
def fake_module(monkeypatch):
    module = types.ModuleType(MODULE)
    module.CliConfig = CliConfig
    module.NotDecorated = NotDecorated
    module.PoolConfig = PoolConfig
    monkeypatch.setitem(sys.modules, MODULE, module)
    return module


@pytest.fixture
def clean_env(monkeypatch):
    """
    Unset the variables and make sure they are unset again afterwards, even
    if load_dotenv() set them behind monkeypatch's back.
    """
    for name in ("CLITEST_DEBUG", "CLITEST_API_KEY"):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)


def test_check_success_masks_secrets(fake_module, clean_env, monkeypatch, capsys):
    monkeypatch.setenv("CLITEST_DEBUG", "true")
    monkeypatch.setenv("CLITEST_API_KEY", "hunter2")

    exit_code = main(["check", f"{MODULE}:CliConfig"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "CLITEST_DEBUG -> debug = True" in out
    assert "CLITEST_API_KEY -> api_key = '***'" in out
    assert "hunter2" not in out


def test_check_unset_optional_is_shown_as_none(fake_module, clean_env, monkeypatch, capsys):
    monkeypatch.setenv("CLITEST_DEBUG", "false")

    exit_code = main(["check", f"{MODULE}:CliConfig"])

    assert exit_code == EXIT_OK
    assert "CLITEST_API_KEY -> api_key = None" in capsys.readouterr().out


def test_check_missing_mandatory(fake_module, clean_env, capsys):
    exit_code = main(["check", f"{MODULE}:CliConfig"])

    assert exit_code == EXIT_CONFIG_ERROR
    assert "error: CLITEST_DEBUG is mandatory but not set" in capsys.readouterr().err


def test_check_invalid_value(fake_module, clean_env, monkeypatch, capsys):
    monkeypatch.setenv("CLITEST_DEBUG", "True")

    exit_code = main(["check", f"{MODULE}:CliConfig"])

    err = capsys.readouterr().err
    assert exit_code == EXIT_CONFIG_ERROR
    assert "CLITEST_DEBUG has an unparsable value: 'True'" in err


def test_check_with_env_file(fake_module, clean_env, tmp_path, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("CLITEST_DEBUG=true\n")

    exit_code = main(["check", f"{MODULE}:CliConfig", "--env-file", str(env_file)])

    assert exit_code == EXIT_OK
    assert "CLITEST_DEBUG -> debug = True" in capsys.readouterr().out


def test_env_file_does_not_override_process_env(fake_module, clean_env, monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("CLITEST_DEBUG", "false")
    env_file = tmp_path / ".env"
    env_file.write_text("CLITEST_DEBUG=true\n")

    main(["check", f"{MODULE}:CliConfig", "--env-file", str(env_file)])

    assert "CLITEST_DEBUG -> debug = False" in capsys.readouterr().out


def test_missing_env_file(fake_module, tmp_path, capsys):
    exit_code = main(["check", f"{MODULE}:CliConfig", "--env-file", str(tmp_path / "nope.env")])

    assert exit_code == EXIT_USAGE_ERROR
    assert "env file not found" in capsys.readouterr().err


def test_vars_lists_variables(fake_module, capsys):
    exit_code = main(["vars", f"{MODULE}:CliConfig"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "# CliConfig (prefix: CLITEST)" in out
    assert "CLITEST_DEBUG\trequired\tbool" in out
    assert "CLITEST_API_KEY\toptional\tstr" in out


@pytest.mark.parametrize(
    "target, message",
    [
        ("no_colon_here", "expected MODULE:CLASS"),
        (f"{MODULE}:Missing", "has no attribute Missing"),
        (f"{MODULE}:NotDecorated", "is not an @env_config class"),
        ("definitely_not_a_module_9d8e:Config", "cannot import"),
    ],
)
def test_bad_targets(fake_module, capsys, target, message):
    exit_code = main(["vars", target])

    assert exit_code == EXIT_USAGE_ERROR
    assert message in capsys.readouterr().err


def test_verbose_flag_is_accepted(fake_module, clean_env, monkeypatch):
    monkeypatch.setenv("CLITEST_DEBUG", "true")

    assert main(["check", f"{MODULE}:CliConfig", "-v"]) == EXIT_OK


def test_check_post_init_validation_error(fake_module, monkeypatch, capsys):
    """Validation raised by the config class itself is reported, not a traceback."""
    monkeypatch.setenv("CLIPOOL_SIZE", "0")

    exit_code = main(["check", f"{MODULE}:PoolConfig"])

    assert exit_code == EXIT_CONFIG_ERROR
    assert "error: size must be positive, got: 0" in capsys.readouterr().err


def test_module_with_malformed_config_class(tmp_path, monkeypatch, capsys):
    """
    Scenario: the target module defines a config class with a field type that
    has no parser, so importing it fails at decoration time.

    Expected: a usage error naming the class, not a traceback.
    """
    (tmp_path / "cli_broken_settings.py").write_text(
        "from dataclasses import dataclass\n"
        "from env_config import env_config\n"
        "\n"
        "@env_config\n"
        "@dataclass(frozen=True)\n"
        "class Broken:\n"
        "    x: complex\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    exit_code = main(["vars", "cli_broken_settings:Broken"])

    err = capsys.readouterr().err
    assert exit_code == EXIT_USAGE_ERROR
    assert "invalid config class in cli_broken_settings" in err
    assert "Broken.x: no parser registered for type complex" in err

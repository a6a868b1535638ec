"""Run-wide configuration shared by every test context."""

from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml
from pydantic import Field, ValidationError

from unitree.errors import ConfigError
from unitree.models.base import Model


class RunConfig(Model):
    """Settings for one run of a test tree."""

    verbose: bool = Field(default=False, description="Log at debug level")
    only_tests: Sequence[str] = Field(
        default=(),
        description="Qualified paths to run (empty means run everything)",
    )
    check_env: bool = Field(
        default=False,
        description="Compare working dir and environment before/after each test",
    )
    conf: Mapping[str, str] = Field(
        default_factory=dict,
        description="Named settings read by test code through the context",
    )


def load_run_config(path: Path) -> RunConfig:
    """Load a run configuration from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated run configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is empty, not valid YAML or fails validation

    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty config file: {path}")

    if isinstance(data, dict) and isinstance(data.get("conf"), dict):
        # YAML scalars come back typed; the key store holds strings.
        data["conf"] = {
            str(key): _to_conf_string(value) for key, value in data["conf"].items()
        }

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def _to_conf_string(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

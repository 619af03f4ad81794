"""Configuration model for branch-format.

The CLI constructs a Config instance and passes it down into every service
so behavior never depends on the current directory or environment lookups
made deep inside the core.

Sources, lowest precedence first:
    1. Dataclass defaults
    2. YAML file (.branch-format.yaml at the repository top level, or --config)
    3. BRANCH_FORMAT_* environment variables
    4. Command-line options
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping

import yaml

from branchfmt.errors import ConfigError

CONFIG_FILENAME = ".branch-format.yaml"

# Versioned names first: distributions that ship several LLVM releases only
# install suffixed executables.
DEFAULT_FORMATTER_CANDIDATES = (
    "git-clang-format-18",
    "git-clang-format-17",
    "git-clang-format-16",
    "git-clang-format-15",
    "git-clang-format-14",
    "git-clang-format",
)

_ENV_OVERRIDES = {
    "BRANCH_FORMAT_UPSTREAM": "upstream",
    "BRANCH_FORMAT_PROTECTED_BRANCH": "protected_branch",
}


@dataclass(frozen=True)
class Config:
    """Top-level configuration for a branch-format run.

    Attributes:
        repo_path: Directory inside the repository to operate on
        upstream: Upstream ref the branch is compared against
        protected_branch: Branch whose history must never be rewritten
        extensions: File extensions handed to the formatter
        style: Style source passed as --style
        formatter_candidates: Formatter executables, first found wins
        diffstat_formatter: Formatter variant supporting --diffstat,
            relative to the repository top level unless absolute
        clang_format_binary: Explicit --binary for the formatter
        verbosity: Logging verbosity (0 = warnings only)
    """

    repo_path: str = "."
    upstream: str = "origin/master"
    protected_branch: str = "master"
    extensions: tuple[str, ...] = ("c", "h")
    style: str = "file"
    formatter_candidates: tuple[str, ...] = DEFAULT_FORMATTER_CANDIDATES
    diffstat_formatter: str = "scripts/git-clang-format-custom"
    clang_format_binary: str | None = None
    verbosity: int = 0

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, object], base: Config | None = None) -> Config:
        """Build a Config from a parsed YAML mapping.

        Args:
            data: Mapping of field names to values
            base: Config providing values for absent keys (default: defaults)

        Returns:
            New Config instance

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        base = base or cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        updates: dict[str, object] = {}
        for key, value in data.items():
            updates[key] = _coerce(key, value)
        return replace(base, **updates)

    @classmethod
    def load(
        cls,
        repo_top_level: str | None = None,
        config_file: str | None = None,
        environ: Mapping[str, str] | None = None,
        base: Config | None = None,
    ) -> Config:
        """Load configuration from the YAML file and environment.

        An explicitly requested config_file must exist. The default
        .branch-format.yaml is optional.

        Args:
            repo_top_level: Repository top level used to find the default file
            config_file: Explicit configuration file path
            environ: Environment mapping (default: os.environ)
            base: Config to layer the loaded values onto

        Returns:
            Loaded Config
        """
        config = base or cls()

        path: Path | None = None
        if config_file:
            path = Path(config_file)
            if not path.is_file():
                raise ConfigError(f"Configuration file not found: {config_file}")
        elif repo_top_level:
            candidate = Path(repo_top_level) / CONFIG_FILENAME
            if candidate.is_file():
                path = candidate

        if path is not None:
            config = cls.from_dict(_read_yaml(path), base=config)

        env = os.environ if environ is None else environ
        env_updates = {
            attr: env[name] for name, attr in _ENV_OVERRIDES.items() if env.get(name)
        }
        if env_updates:
            config = replace(config, **env_updates)

        return config

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def extensions_arg(self) -> str:
        """Extensions formatted for the formatter's --extensions option."""
        return ",".join(self.extensions)

    def with_overrides(self, **overrides: object) -> Config:
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _read_yaml(path: Path) -> Mapping[str, object]:
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


_TUPLE_FIELDS = {"extensions", "formatter_candidates"}
_STR_FIELDS = {"repo_path", "upstream", "protected_branch", "style", "diffstat_formatter"}


def _coerce(key: str, value: object) -> object:
    if key in _TUPLE_FIELDS:
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",")]
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            items = [item.strip() for item in value]
        else:
            raise ConfigError(f"'{key}' must be a list of strings or a comma separated string")
        items = [item.lstrip(".") if key == "extensions" else item for item in items]
        return tuple(item for item in items if item)

    if key in _STR_FIELDS:
        if not isinstance(value, str) or not value:
            raise ConfigError(f"'{key}' must be a non-empty string")
        return value

    if key == "clang_format_binary":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string")
        return value

    if key == "verbosity":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"'{key}' must be an integer")
        return value

    return value

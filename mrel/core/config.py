"""Typed release configuration.

The optional ``release.toml`` at the monorepo root describes how the release
tooling talks to its collaborators (packages dir, registry and build
commands, scoped-name convention). It is parsed once at startup into a frozen
``ReleaseConfig`` that is passed explicitly to the pipeline.

Example:

    [release]
    packages_dir = "packages"
    scope = "@vue"
    next_tag_package = "vue"
    skip = ["compiler-sfc"]
    test_command = ["yarn", "test", "--bail"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ReleaseConfig",
    "load_release_config",
]

CONFIG_FILE_NAME = "release.toml"

DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_REMOTE = "origin"
DEFAULT_TEST_COMMAND = ("yarn", "test", "--bail")
DEFAULT_BUILD_COMMAND = ("yarn", "build", "--release")
DEFAULT_PUBLISH_COMMAND = ("yarn", "publish")
DEFAULT_ALREADY_PUBLISHED_MARKERS = ("previously published",)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when release.toml cannot be loaded or is malformed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release tooling configuration (all fields have working defaults)."""

    packages_dir: str = DEFAULT_PACKAGES_DIR
    # Scoped-name convention: "<scope>/<dir name>" refers to an in-repo package.
    scope: str | None = None
    # Package always published under the "next" channel (unless overridden).
    next_tag_package: str | None = None
    skip: frozenset[str] = field(default_factory=lambda: frozenset[str]())
    remote: str = DEFAULT_REMOTE
    test_command: tuple[str, ...] = DEFAULT_TEST_COMMAND
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    publish_command: tuple[str, ...] = DEFAULT_PUBLISH_COMMAND
    already_published_markers: tuple[str, ...] = DEFAULT_ALREADY_PUBLISHED_MARKERS

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[ReleaseConfig, str]:
        """Build a config from a parsed TOML document (the ``[release]`` table)."""
        table: StrDict = get_table(data, "release") or {}

        commands: dict[str, tuple[str, ...]] = {}
        for key, default in (
            ("test_command", DEFAULT_TEST_COMMAND),
            ("build_command", DEFAULT_BUILD_COMMAND),
            ("publish_command", DEFAULT_PUBLISH_COMMAND),
            ("already_published_markers", DEFAULT_ALREADY_PUBLISHED_MARKERS),
        ):
            if key not in table:
                commands[key] = default
                continue
            items = get_str_list(table, key)
            if not items:
                return Err(f"release.{key} must be a non-empty list of strings")
            commands[key] = tuple(items)

        skip: list[str] = []
        if "skip" in table:
            items = get_str_list(table, "skip")
            if items is None:
                return Err("release.skip must be a list of package names")
            skip = items

        for key in ("packages_dir", "scope", "next_tag_package", "remote"):
            if key in table and get_str(table, key) is None:
                return Err(f"release.{key} must be a non-empty string")

        return Ok(
            cls(
                packages_dir=get_str(table, "packages_dir") or DEFAULT_PACKAGES_DIR,
                scope=get_str(table, "scope"),
                next_tag_package=get_str(table, "next_tag_package"),
                skip=frozenset(skip),
                remote=get_str(table, "remote") or DEFAULT_REMOTE,
                test_command=commands["test_command"],
                build_command=commands["build_command"],
                publish_command=commands["publish_command"],
                already_published_markers=commands["already_published_markers"],
            )
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_release_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load release.toml, falling back to defaults when the file does not exist.

    Args:
        path: Path to the release.toml file

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) if the file exists but is invalid
    """
    if not path.exists():
        return Ok(ReleaseConfig())

    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    config = ReleaseConfig.from_dict(parsed.value)
    if isinstance(config, Err):
        return Err(ConfigError(f"Invalid config: {config.error}", path=path))
    return Ok(config.value)

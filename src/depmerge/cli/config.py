import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from depmerge.core.errors import ConfigError
from depmerge.core.manifest import TieBreak
from depmerge.core.state import DEFAULT_STATE_FILE

CONFIG_DIR_NAME = ".depmerge"

_KNOWN_KEYS = frozenset(
    {
        "author",
        "remote",
        "branch_prefix",
        "tables",
        "lock_files",
        "build_command",
        "merge_tool",
        "state_file",
        "tie_break",
    }
)


@dataclass(frozen=True)
class LoadedConfig:
    """In-memory representation of `.depmerge/config.toml`."""

    author: str = "renovate[bot]"
    remote: str = "origin"
    branch_prefix: str = "renovate"
    tables: tuple[str, ...] = ("dependencies",)
    lock_files: tuple[str, ...] = ("Cargo.lock",)
    build_command: tuple[str, ...] = ("cargo", "build")
    merge_tool: str = "depmerge"
    state_file: str = DEFAULT_STATE_FILE
    tie_break: TieBreak = TieBreak.REMOTE


def _require_str(data: dict[str, Any], key: str, default: str, cfg_path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' in {cfg_path} must be a non-empty string")
    return value


def _require_str_list(
    data: dict[str, Any], key: str, default: tuple[str, ...], cfg_path: Path
) -> tuple[str, ...]:
    value = data.get(key, list(default))
    if not isinstance(value, list) or not all(isinstance(x, str) and x for x in value):
        raise ConfigError(f"'{key}' in {cfg_path} must be a list of non-empty strings")
    return tuple(value)


def load_config(repo_root: Path) -> LoadedConfig:
    """Load .depmerge/config.toml from the repository if present; otherwise return defaults.

    Example config:
      author = "renovate[bot]"
      remote = "origin"
      branch_prefix = "renovate"
      tables = ["dependencies", "dev-dependencies"]
      lock_files = ["Cargo.lock"]
      build_command = ["cargo", "check", "--workspace"]
      merge_tool = "depmerge"
      tie_break = "remote"

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = repo_root / CONFIG_DIR_NAME / "config.toml"
    defaults = LoadedConfig()
    if not cfg_path.exists():
        return defaults

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Could not parse {cfg_path}: {e}") from e

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown setting(s) in {cfg_path}: {', '.join(unknown)}")

    tie_break_raw = _require_str(data, "tie_break", defaults.tie_break.value, cfg_path)
    try:
        tie_break = TieBreak(tie_break_raw)
    except ValueError as e:
        choices = ", ".join(t.value for t in TieBreak)
        raise ConfigError(f"'tie_break' in {cfg_path} must be one of: {choices}") from e

    build_command = _require_str_list(data, "build_command", defaults.build_command, cfg_path)
    if not build_command:
        raise ConfigError(f"'build_command' in {cfg_path} must not be empty")

    return LoadedConfig(
        author=_require_str(data, "author", defaults.author, cfg_path),
        remote=_require_str(data, "remote", defaults.remote, cfg_path),
        branch_prefix=_require_str(data, "branch_prefix", defaults.branch_prefix, cfg_path),
        tables=_require_str_list(data, "tables", defaults.tables, cfg_path) or defaults.tables,
        lock_files=_require_str_list(data, "lock_files", defaults.lock_files, cfg_path),
        build_command=build_command,
        merge_tool=_require_str(data, "merge_tool", defaults.merge_tool, cfg_path),
        state_file=_require_str(data, "state_file", defaults.state_file, cfg_path),
        tie_break=tie_break,
    )

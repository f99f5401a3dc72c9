"""Project configuration for the todo scheduler.

Manages a per-project .todo/ directory holding config.toml. Provides
discovery via find_project_root() and CLI resolution via
resolve_config_for_cli().
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

_TODO_DIR = ".todo"
_CONFIG_FILE = "config.toml"

OUTPUT_FORMATS = ("table", "json")


@dataclass(frozen=True)
class ScheduleConfig:
    """Scheduling defaults."""

    default_duration: int = 1
    start_date: date | None = None


@dataclass(frozen=True)
class OutputConfig:
    """CLI output settings."""

    format: str = "table"


@dataclass(frozen=True)
class ProjectConfig:
    """Per-project todo scheduler configuration.

    Loaded from .todo/config.toml via load_project_config().
    """

    name: str
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_project_config(project_path: Path) -> ProjectConfig:
    """Load config from .todo/config.toml.

    Args:
        project_path: Path to the project root directory.

    Returns:
        Parsed ProjectConfig.

    Raises:
        FileNotFoundError: If .todo/config.toml is missing.
        ValueError: On invalid, empty, or corrupt TOML.
    """
    config_file = project_path / _TODO_DIR / _CONFIG_FILE
    if not config_file.exists():
        msg = f"Project config not found: {config_file}"
        raise FileNotFoundError(msg)

    content = config_file.read_text(encoding="utf-8")
    if not content.strip():
        msg = f"Config file is empty: {config_file}"
        raise ValueError(msg)

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_file}: {exc}"
        raise ValueError(msg) from exc

    return _parse_config(data)


def _parse_config(data: dict[str, object]) -> ProjectConfig:
    """Parse raw TOML data into a ProjectConfig.

    Unknown fields are silently ignored for forward compatibility.
    """
    sections: dict[str, dict[str, object]] = {}
    for section in ("project", "schedule", "output"):
        value = data.get(section, {})
        if not isinstance(value, dict):
            msg = f"[{section}] section must be a table"
            raise ValueError(msg)
        sections[section] = value

    name = sections["project"].get("name")
    if not isinstance(name, str) or not name:
        msg = "project.name is required and must be a non-empty string"
        raise ValueError(msg)

    schedule_data = sections["schedule"]
    duration = schedule_data.get("default_duration", 1)
    if isinstance(duration, bool) or not isinstance(duration, int):
        msg = f"schedule.default_duration must be an integer, got {duration!r}"
        raise ValueError(msg)

    config = ProjectConfig(
        name=name,
        schedule=ScheduleConfig(
            default_duration=duration,
            start_date=_parse_start_date(schedule_data.get("start_date")),
        ),
        output=OutputConfig(
            format=str(sections["output"].get("format", "table")),
        ),
    )
    _validate_config(config)
    return config


def _parse_start_date(value: object) -> date | None:
    """Accept a native TOML date or an ISO date string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            msg = f"schedule.start_date must be an ISO date, got '{value}'"
            raise ValueError(msg) from exc
    msg = f"schedule.start_date must be a date, got {value!r}"
    raise ValueError(msg)


def create_default_config(
    project_path: Path,
    *,
    name: str | None = None,
    force: bool = False,
) -> ProjectConfig:
    """Create .todo/ directory with config.toml.

    Args:
        project_path: Path to the project root directory.
        name: Project name. Defaults to directory basename.
        force: Overwrite existing .todo/ configuration.

    Returns:
        The created ProjectConfig.

    Raises:
        FileExistsError: If .todo/ exists and force=False.
    """
    todo_dir = project_path / _TODO_DIR
    if todo_dir.exists() and not force:
        msg = f"Project already initialized: {todo_dir}"
        raise FileExistsError(msg)

    resolved_name = name or project_path.resolve().name

    config = ProjectConfig(name=resolved_name)
    _validate_config(config)

    todo_dir.mkdir(parents=True, exist_ok=True)
    config_file = todo_dir / _CONFIG_FILE
    config_file.write_text(_generate_toml(config), encoding="utf-8")

    logger.info("Initialized project '%s' at %s", resolved_name, todo_dir)
    return config


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start to find nearest .todo/ directory.

    Args:
        start: Starting directory. Defaults to cwd.

    Returns:
        The directory containing .todo/, or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        if (current / _TODO_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_config_for_cli(start: Path | None = None) -> ProjectConfig | None:
    """Load the nearest project config, or None outside a project.

    Raises:
        ValueError: If .todo/config.toml is corrupt or invalid.
    """
    project_root = find_project_root(start)
    if project_root is None:
        return None
    try:
        return load_project_config(project_root)
    except FileNotFoundError:
        logger.debug("No config.toml under %s; using defaults", project_root / _TODO_DIR)
        return None


def _generate_toml(config: ProjectConfig) -> str:
    """Generate TOML string from a ProjectConfig."""
    lines = [
        "[project]",
        f'name = "{_escape_toml_string(config.name)}"',
        "",
        "[schedule]",
        f"default_duration = {config.schedule.default_duration}",
    ]
    if config.schedule.start_date is not None:
        lines.append(f"start_date = {config.schedule.start_date.isoformat()}")
    lines += [
        "",
        "[output]",
        f'format = "{_escape_toml_string(config.output.format)}"',
        "",
    ]
    return "\n".join(lines)


def _escape_toml_string(value: str) -> str:
    """Escape special characters for TOML string values."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _validate_config(config: ProjectConfig) -> None:
    """Validate config values.

    Raises:
        ValueError: On invalid configuration.
    """
    if not config.name or not config.name.strip():
        msg = "project.name must not be empty"
        raise ValueError(msg)
    if " " in config.name or "\t" in config.name:
        msg = f"project.name must not contain whitespace: '{config.name}'"
        raise ValueError(msg)

    if config.schedule.default_duration < 1:
        msg = (
            "schedule.default_duration must be at least 1, "
            f"got {config.schedule.default_duration}"
        )
        raise ValueError(msg)

    if config.output.format not in OUTPUT_FORMATS:
        msg = f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got '{config.output.format}'"
        raise ValueError(msg)

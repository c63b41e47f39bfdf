"""Configuration management for the lazycss middleware."""

import os
import tomllib
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict, fields

SECTION = "lazycss"

_TRUE_VALUES = ("1", "true", "yes", "on")


# Simple TOML writer function to avoid tomli_w dependency
def _write_toml(data: Dict[str, Any], file_path: Path) -> None:
    """Write data to TOML file using raw Python."""
    lines = []

    def _format_value(value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        elif isinstance(value, (int, float)):
            return str(value)
        else:
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'

    def _write_section(section_name: str, section_data: Dict[str, Any]) -> None:
        lines.append(f"[{section_name}]")
        for key, value in section_data.items():
            lines.append(f"{key} = {_format_value(value)}")
        lines.append("")  # Empty line after section

    lines.append("# lazycss configuration")
    lines.append("")

    for key, value in data.items():
        if isinstance(value, dict):
            _write_section(key, value)
        else:
            lines.append(f"{key} = {_format_value(value)}")

    with open(file_path, 'w', encoding='utf-8') as f:
        f.write('\n'.join(lines))


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _normalize(path: str | os.PathLike) -> str:
    return os.path.normpath(os.path.abspath(os.fspath(path)))


@dataclass
class StylesheetConfig:
    """Options of the stylesheet middleware.

    ``output_root`` is the public root the output is served from. When
    ``output_dir`` is nested below it, the nesting is stripped from request
    paths before they are mapped onto ``source_dir``.
    """

    source_dir: str = ""
    output_dir: str = ""
    output_root: str = ""
    compress: bool = False
    force: bool = False
    debug: bool = False
    source_ext: str = ".scss"
    output_ext: str = ".css"

    def __post_init__(self):
        self.source_dir = _normalize(self.source_dir or os.getcwd())
        self.output_dir = _normalize(self.output_dir or self.source_dir)
        self.output_root = _normalize(self.output_root or self.output_dir)
        self.compress = _to_bool(self.compress)
        self.force = _to_bool(self.force)
        self.debug = _to_bool(self.debug)

        for name in ("source_ext", "output_ext"):
            ext = getattr(self, name)
            if not ext.startswith("."):
                setattr(self, name, "." + ext)

        if os.path.commonpath([self.output_root, self.output_dir]) != self.output_root:
            raise ValueError(f"output_dir ({self.output_dir}) must be inside "
                             f"output_root ({self.output_root})")

    @property
    def output_prefix(self) -> str:
        """URL prefix of ``output_dir`` below ``output_root`` ("" when they are the same)."""
        rel = Path(self.output_dir).relative_to(self.output_root).as_posix()
        return "" if rel == "." else "/" + rel

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StylesheetConfig":
        """Create config from dictionary."""
        # Handle both flat format and [lazycss] section format
        if SECTION in data:
            data = data[SECTION]
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_env(cls) -> "StylesheetConfig":
        """Create config from ``LAZYCSS_*`` environment variables."""
        data = {}
        for f in fields(cls):
            value = os.getenv(f"LAZYCSS_{f.name.upper()}")
            if value is not None:
                data[f.name] = value
        if not data:
            raise ValueError("No LAZYCSS_* environment variables are set")
        return cls(**data)

    @classmethod
    def from_file(cls, config_path: Path) -> "StylesheetConfig":
        """Load configuration from TOML file.

        Relative directories in the file are resolved against the directory
        of the file.

        Args:
            config_path: Path to TOML configuration file

        Returns:
            StylesheetConfig instance

        Raises:
            ValueError: If file doesn't exist or has invalid format
        """
        if not config_path.exists():
            raise ValueError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'rb') as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse TOML configuration file {config_path}: {e}")

        data = dict(data.get(SECTION, data))
        base = config_path.parent
        for key in ("source_dir", "output_dir", "output_root"):
            if data.get(key):
                data[key] = str(base / data[key])
        return cls.from_dict(data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to TOML file.

        Args:
            config_path: Path to save TOML configuration file
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        _write_toml({SECTION: self.to_dict()}, config_path)


class ConfigManager:
    """Manages configuration loading and saving."""

    DEFAULT_CONFIG_PATH = Path("lazycss.toml")
    DEFAULT_FALLBACK_CONFIG_PATH = Path.home() / ".lazycss" / "config.toml"

    @classmethod
    def load_config(cls, config_path: Optional[Path] = None) -> StylesheetConfig:
        """Load configuration from various sources.

        Priority order:
        1. Provided config_path
        2. Default config file, then the fallback one
        3. Environment variables
        4. Built-in defaults

        Args:
            config_path: Optional path to config file

        Returns:
            StylesheetConfig instance

        Raises:
            ValueError: If the provided file doesn't exist or is invalid
        """
        if config_path:
            return StylesheetConfig.from_file(config_path)

        if cls.DEFAULT_CONFIG_PATH.exists():
            return StylesheetConfig.from_file(cls.DEFAULT_CONFIG_PATH)
        elif cls.DEFAULT_FALLBACK_CONFIG_PATH.exists():
            return StylesheetConfig.from_file(cls.DEFAULT_FALLBACK_CONFIG_PATH)

        try:
            return StylesheetConfig.from_env()
        except ValueError:
            pass

        return StylesheetConfig()

    @classmethod
    def save_config(cls, config: StylesheetConfig, config_path: Optional[Path] = None) -> Path:
        """Save configuration to file.

        Args:
            config: StylesheetConfig instance to save
            config_path: Optional path to save config file (defaults to DEFAULT_CONFIG_PATH)

        Returns:
            The path the configuration was written to
        """
        path = config_path or cls.DEFAULT_CONFIG_PATH
        config.save_to_file(path)
        return path

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return cls.DEFAULT_CONFIG_PATH

"""
Configuration file parsing and management.

Supports YAML configuration files (JSON for *.json paths).
Merges configurations from multiple sources (project → user → system → defaults).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from .candidates import DEFAULT_SHELLS_FILE, GeneratorOptions
from .common import env_int, vlog
from .environment import OSKind


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".shell-discovery.yml",                                      # Project root (highest priority)
    ".shell-discovery.yaml",
    os.path.expanduser("~/.config/shell-discovery/config.yml"),  # User global
    os.path.expanduser("~/.config/shell-discovery/config.yaml"),
    "/etc/shell-discovery/config.yml",                           # System global
    "/etc/shell-discovery/config.yaml",
]

DEFAULT_MAX_WORKERS = 8
MAX_WORKERS_LIMIT = 32
VALID_PLATFORMS = {"auto"} | {kind.value for kind in OSKind}


def _default_max_workers() -> int:
    # Environment override; out-of-range values fall back instead of raising
    return env_int("SHELL_DISCOVERY_MAX_WORKERS", DEFAULT_MAX_WORKERS, 1, MAX_WORKERS_LIMIT)


@dataclass(frozen=True)
class Preferences:
    """
    Discovery preferences.

    Attributes:
        max_workers: Maximum number of parallel validation workers
        include_cygwin: Probe Cygwin locations on Windows
        include_windows_powershell: Probe inbox Windows PowerShell on Windows
        use_registry: Resolve pwsh.exe through the registry on Windows
        enumerate_powershell: Enumerate installed PowerShell variants on Windows
        shells_file: Shells registry read on macOS/Linux
    """
    max_workers: int = field(default_factory=_default_max_workers)
    include_cygwin: bool = True
    include_windows_powershell: bool = True
    use_registry: bool = True
    enumerate_powershell: bool = True
    shells_file: str = DEFAULT_SHELLS_FILE

    def __post_init__(self):
        if self.max_workers < 1 or self.max_workers > MAX_WORKERS_LIMIT:
            raise ValueError(
                f"Invalid max_workers: {self.max_workers}. "
                f"Must be between 1 and {MAX_WORKERS_LIMIT}"
            )

        if not self.shells_file:
            raise ValueError("shells_file must not be empty")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        defaults = Preferences()
        return Preferences(
            max_workers=data.get("max_workers", defaults.max_workers),
            include_cygwin=data.get("include_cygwin", True),
            include_windows_powershell=data.get("include_windows_powershell", True),
            use_registry=data.get("use_registry", True),
            enumerate_powershell=data.get("enumerate_powershell", True),
            shells_file=data.get("shells_file", DEFAULT_SHELLS_FILE),
        )


def _prefer(value: Any, other: Any, default: Any) -> Any:
    """Keep value unless it is still the default, then take other."""
    return value if value != default else other


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for shell discovery.

    Attributes:
        version: Config schema version
        platform: Platform override ('auto', 'windows', 'macos', 'linux')
        preferences: Discovery preferences
        shells: Extra candidate paths per shell label
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    platform: str = "auto"
    preferences: Preferences = field(default_factory=Preferences)
    shells: dict[str, tuple[str, ...]] = field(default_factory=dict)
    source: str = ""

    def __post_init__(self):
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if self.platform not in VALID_PLATFORMS:
            raise ValueError(
                f"Invalid platform: {self.platform}. "
                f"Must be one of: {', '.join(sorted(VALID_PLATFORMS))}"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        preferences = Preferences.from_dict(data.get("preferences") or {})

        shells_data = data.get("shells") or {}
        shells = {}
        for label, paths in shells_data.items():
            if isinstance(paths, str):
                paths = [paths]
            shells[str(label)] = tuple(str(p) for p in paths or ())

        platform_data = data.get("platform") or {}
        platform = platform_data.get("os", "auto") if isinstance(platform_data, dict) else str(platform_data)

        return Config(
            version=data.get("version", 1),
            platform=platform,
            preferences=preferences,
            shells=shells,
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        mine, theirs = self.preferences, other.preferences
        defaults = Preferences()

        merged_preferences = Preferences(
            max_workers=_prefer(mine.max_workers, theirs.max_workers, defaults.max_workers),
            include_cygwin=_prefer(mine.include_cygwin, theirs.include_cygwin, True),
            include_windows_powershell=_prefer(
                mine.include_windows_powershell, theirs.include_windows_powershell, True
            ),
            use_registry=_prefer(mine.use_registry, theirs.use_registry, True),
            enumerate_powershell=_prefer(mine.enumerate_powershell, theirs.enumerate_powershell, True),
            shells_file=_prefer(mine.shells_file, theirs.shells_file, DEFAULT_SHELLS_FILE),
        )

        # Shell entries: this config takes priority per label
        merged_shells = dict(other.shells)
        merged_shells.update(self.shells)

        return Config(
            version=self.version,
            platform=_prefer(self.platform, other.platform, "auto"),
            preferences=merged_preferences,
            shells=merged_shells,
            source=self.source or other.source,
        )

    def generator_options(self) -> GeneratorOptions:
        """Candidate generation options derived from this config."""
        return GeneratorOptions(
            include_cygwin=self.preferences.include_cygwin,
            include_windows_powershell=self.preferences.include_windows_powershell,
            shells_file=self.preferences.shells_file,
            extra_candidates=dict(self.shells),
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """
    Load JSON configuration file.

    Returns:
        Parsed configuration dictionary, or None if file invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file (*.json is read as JSON, anything else as YAML)
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError, AttributeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (if provided)
    2. Project .shell-discovery.yml
    3. User ~/.config/shell-discovery/config.yml
    4. System /etc/shell-discovery/config.yml
    5. Default configuration

    Args:
        custom_path: Optional path to custom configuration file
        verbose: Enable verbose logging

    Returns:
        Merged Config object (never None, returns defaults if no config found)

    Raises:
        ValueError: If custom_path is provided but file cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)
        vlog(f"Using custom config: {custom_path}", verbose)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    # First config has highest priority
    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration and return list of warnings.

    Args:
        config: Config object to validate

    Returns:
        List of validation warning messages (empty if valid)
    """
    warnings = []

    for label, paths in config.shells.items():
        if not paths:
            warnings.append(f"Shell '{label}': no candidate paths configured")
        if len(paths) != len(set(paths)):
            warnings.append(f"Shell '{label}': duplicate candidate paths")

    if config.platform != "auto" and config.source:
        warnings.append(f"Platform forced to '{config.platform}' by {config.source}")

    return warnings

"""
Shell discovery - find the command-line shells installed on this machine.

Core Modules:
- Platform: OS identity, version and environment snapshot
- Probing: Filesystem probe, registry lookup, PowerShell enumeration
- Discovery: Candidate generation, path validation, parallel orchestration
"""

__version__ = "1.0.0"
__author__ = "Shell Discovery Contributors"

VERSION = __version__

# Platform
from .environment import (
    OSKind,
    PlatformEnvironment,
    detect_platform,
    platform_from_override,
    get_windows_build_number,
    get_system32_path,
)

# Probing
from .probe import FileSystemProbe, ProbeError, ProbeErrorKind, StatResult
from .registry import lookup_registry_path
from .powershell import PowerShellExeDetails, enumerate_powershell_installations

# Discovery
from .candidates import (
    CandidateSet,
    GeneratorOptions,
    ShellsFileError,
    generate_candidates,
    parse_shells_file,
)
from .validator import ShellDefinition, validate_shell_paths
from .discovery import (
    DefaultShellMemo,
    detect_available_shells,
    discover_shells,
    get_default_shell,
    sort_shells,
)

# Configuration
from .config import Config, Preferences, load_config, load_config_file, validate_config

# Rendering
from .render import render_table, render_json

# Logging configuration
from .logging_config import setup_logging, get_logger

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Platform
    "OSKind",
    "PlatformEnvironment",
    "detect_platform",
    "platform_from_override",
    "get_windows_build_number",
    "get_system32_path",
    # Probing
    "FileSystemProbe",
    "ProbeError",
    "ProbeErrorKind",
    "StatResult",
    "lookup_registry_path",
    "PowerShellExeDetails",
    "enumerate_powershell_installations",
    # Discovery
    "CandidateSet",
    "GeneratorOptions",
    "ShellsFileError",
    "generate_candidates",
    "parse_shells_file",
    "ShellDefinition",
    "validate_shell_paths",
    "DefaultShellMemo",
    "detect_available_shells",
    "discover_shells",
    "get_default_shell",
    "sort_shells",
    # Configuration
    "Config",
    "Preferences",
    "load_config",
    "load_config_file",
    "validate_config",
    # Rendering
    "render_table",
    "render_json",
    # Logging
    "setup_logging",
    "get_logger",
]

"""
Configuration management for prefdiff.

Supports:
- TOML config files
- Environment variables
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Config file
4. Defaults
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "prefdiff.toml",
    Path.home() / ".config" / "prefdiff" / "config.toml",
    Path.home() / ".prefdiff.toml",
]

ENV_PREFIX = "PREFDIFF_"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CaptureConfig:
    """How snapshots are read from the defaults tool."""
    executable: str = "defaults"
    timeout: int = 30                      # seconds per `defaults` invocation
    max_workers: int = 8                   # parallel domain exports
    include_global_domain: bool = True     # NSGlobalDomain is not listed by `defaults domains`
    domains: List[str] = field(default_factory=list)   # fnmatch patterns; empty = all
    exclude: List[str] = field(default_factory=list)   # fnmatch patterns


@dataclass
class OutputConfig:
    """Output configuration."""
    quiet: bool = False
    json: bool = False
    script: bool = False
    log_level: str = "WARNING"
    log_dir: Optional[str] = None


@dataclass
class ClipboardConfig:
    """Clipboard export."""
    command: str = "pbcopy"


@dataclass
class Config:
    """Main configuration container."""
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> "Config":
        """
        Load configuration from file and environment.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Config instance with loaded values

        Raises:
            FileNotFoundError: config_path given but missing
            ValueError: config file or environment holds an invalid value
        """
        config = cls()

        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        config.override_from_env(os.environ if environ is None else environ)
        return config

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        if "capture" in data:
            cap = data["capture"]
            config.capture = CaptureConfig(
                executable=cap.get("executable", config.capture.executable),
                timeout=int(cap.get("timeout", config.capture.timeout)),
                max_workers=int(cap.get("max_workers", config.capture.max_workers)),
                include_global_domain=bool(
                    cap.get("include_global_domain", config.capture.include_global_domain)
                ),
                domains=list(cap.get("domains", [])),
                exclude=list(cap.get("exclude", [])),
            )

        if "output" in data:
            out = data["output"]
            config.output = OutputConfig(
                quiet=bool(out.get("quiet", config.output.quiet)),
                json=bool(out.get("json", config.output.json)),
                script=bool(out.get("script", config.output.script)),
                log_level=str(out.get("log_level", config.output.log_level)).upper(),
                log_dir=out.get("log_dir") or None,
            )

        if "clipboard" in data:
            clip = data["clipboard"]
            config.clipboard = ClipboardConfig(
                command=clip.get("command", config.clipboard.command),
            )

        return config

    def override_from_env(self, environ: Dict[str, str]) -> "Config":
        """Apply PREFDIFF_* environment variables."""
        if environ.get(ENV_PREFIX + "EXECUTABLE"):
            self.capture.executable = environ[ENV_PREFIX + "EXECUTABLE"]
        if environ.get(ENV_PREFIX + "TIMEOUT"):
            self.capture.timeout = _env_int(environ, ENV_PREFIX + "TIMEOUT")
        if environ.get(ENV_PREFIX + "MAX_WORKERS"):
            self.capture.max_workers = _env_int(environ, ENV_PREFIX + "MAX_WORKERS")
        if environ.get(ENV_PREFIX + "LOG_LEVEL"):
            self.output.log_level = environ[ENV_PREFIX + "LOG_LEVEL"].upper()
        if environ.get(ENV_PREFIX + "LOG_DIR"):
            self.output.log_dir = environ[ENV_PREFIX + "LOG_DIR"]
        return self

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        if getattr(args, "executable", None):
            self.capture.executable = args.executable
        if getattr(args, "timeout", None) is not None:
            self.capture.timeout = args.timeout
        if getattr(args, "workers", None) is not None:
            self.capture.max_workers = args.workers
        if getattr(args, "domain", None):
            self.capture.domains = list(args.domain)
        if getattr(args, "exclude", None):
            self.capture.exclude = self.capture.exclude + list(args.exclude)
        if getattr(args, "no_global", False):
            self.capture.include_global_domain = False

        if getattr(args, "quiet", False):
            self.output.quiet = True
        if getattr(args, "json", False):
            self.output.json = True
        if getattr(args, "script", False):
            self.output.script = True
        if getattr(args, "log_level", None):
            self.output.log_level = args.log_level.upper()
        if getattr(args, "log_dir", None):
            self.output.log_dir = args.log_dir

        return self

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.capture.executable:
            errors.append("Capture executable is required")
        if self.capture.timeout < 1:
            errors.append("Capture timeout must be at least 1 second")
        if self.capture.max_workers < 1:
            errors.append("max_workers must be at least 1")
        if self.output.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.output.log_level}")
        if self.output.json and self.output.script:
            errors.append("Choose either JSON or script output, not both")
        if not self.clipboard.command:
            errors.append("Clipboard command is required")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(
            f"Capture: {self.capture.executable}, {self.capture.max_workers} workers, "
            f"timeout {self.capture.timeout}s"
        )
        if self.capture.domains:
            lines.append(f"Domains: {', '.join(self.capture.domains)}")
        if self.capture.exclude:
            lines.append(f"Excluded: {', '.join(self.capture.exclude)}")
        lines.append(f"Log level: {self.output.log_level}")

        return "\n".join(lines)


def _env_int(environ: Dict[str, str], name: str) -> int:
    try:
        return int(environ[name])
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {environ[name]!r}") from e


EXAMPLE_CONFIG = """# prefdiff Configuration

[capture]
executable = "defaults"
timeout = 30
max_workers = 8
include_global_domain = true
# Only capture matching domains (fnmatch patterns); empty = all
domains = []
exclude = ["com.apple.spaces", "com.apple.knowledge-agent"]

[output]
log_level = "WARNING"
# log_dir = "~/Library/Logs/prefdiff"

[clipboard]
command = "pbcopy"
"""


def create_example_config(path: str = "prefdiff.toml") -> Path:
    """Create example config file."""
    target = Path(path)

    if target.exists():
        raise FileExistsError(f"Config file already exists: {path}")

    target.write_text(EXAMPLE_CONFIG)
    return target

"""
apimock Configuration

Layered settings for the mock server.

Sources, later ones overriding only the fields they set:
- Built-in defaults
- ~/.apimockrc
- ./.apimockrc
- Command-line flags

Config files are read with PyYAML, so both the JSON form
(`{"dir": "mock", "port": "8080"}`) and YAML form (`dir: mock`) work.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

logger = logging.getLogger("apimock.config")

CONFIG_FILE_NAME = ".apimockrc"

DEFAULTS = {
    'mock_dir': 'mock',
    'port': 8080,
    'host': '127.0.0.1',
    'log_level': 'info'
}

# Config file key -> setting name
FILE_KEYS = {
    'dir': 'mock_dir',
    'port': 'port',
    'host': 'host',
    'log_level': 'log_level'
}

LOG_LEVELS = ('debug', 'info', 'warning', 'error')


class ConfigError(Exception):
    """Raised when the resolved configuration cannot be used to start the server."""


def _parse_port(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load settings from one config file.

    Missing or unparsable files yield no settings. Empty values are treated
    as unset, and a port that is not a number is dropped with a warning.

    Args:
        path: Config file path

    Returns:
        Dict of setting name -> value for the fields the file sets
    """
    path = Path(path)
    if not path.is_file():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"Ignoring config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.debug(f"Ignoring config file {path}: expected a mapping")
        return {}

    settings = {}
    for key, name in FILE_KEYS.items():
        value = data.get(key)
        if value is None or value == "":
            continue

        if name == 'port':
            port = _parse_port(value)
            if port is None:
                logger.warning(f"Ignoring invalid port {value!r} in {path}")
                continue
            settings[name] = port
        elif name == 'log_level':
            level = str(value).lower()
            if level not in LOG_LEVELS:
                logger.warning(f"Ignoring invalid log_level {value!r} in {path}")
                continue
            settings[name] = level
        else:
            settings[name] = str(value)

    logger.debug(f"Loaded {sorted(settings)} from {path}")
    return settings


class ConfigLoader:
    """
    Resolves server settings from defaults, config files and CLI flags.

    Example:
        loader = ConfigLoader()
        settings = loader.resolve({'mock_dir': args.dir, 'port': args.port})
        config = MockConfig(**settings)
    """

    def __init__(self, home_dir: Optional[Path] = None, work_dir: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            home_dir: Directory holding the user-level config (defaults to ~)
            work_dir: Directory holding the project-level config (defaults to cwd)
        """
        self.home_dir = Path(home_dir) if home_dir else Path.home()
        self.work_dir = Path(work_dir) if work_dir else Path.cwd()

    def config_files(self) -> List[Path]:
        """Config files in increasing order of precedence."""
        return [
            self.home_dir / CONFIG_FILE_NAME,
            self.work_dir / CONFIG_FILE_NAME
        ]

    def resolve(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge all sources into the final settings.

        Args:
            overrides: CLI values; None entries are treated as not given

        Returns:
            Dict with mock_dir, port, host and log_level

        Raises:
            ConfigError: If the mock directory does not exist or is not a directory
        """
        settings = dict(DEFAULTS)

        for path in self.config_files():
            settings.update(load_config_file(path))

        for name, value in (overrides or {}).items():
            if value is not None and value != "":
                settings[name] = value

        mock_dir = Path(settings['mock_dir'])
        if not mock_dir.is_dir():
            raise ConfigError(
                f"Mock directory '{mock_dir}' not found. "
                f"Please specify with --dir or write correct path in {CONFIG_FILE_NAME}."
            )

        return settings

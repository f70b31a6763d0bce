"""
apimock Common Utilities

Shared configuration and helpers used across apimock modules.
"""

from .utils import describe_mock_directory
from .config import ConfigError, ConfigLoader, load_config_file, CONFIG_FILE_NAME

__all__ = [
    'describe_mock_directory',
    'ConfigError',
    'ConfigLoader',
    'load_config_file',
    'CONFIG_FILE_NAME'
]

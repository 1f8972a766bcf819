from .loader import find_default_config, load_project
from .types import ConfigError, ProjectConfig, TaskConfig, UnsupportedConfigFormatError

__all__ = [
    "find_default_config",
    "load_project",
    "ProjectConfig",
    "TaskConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]

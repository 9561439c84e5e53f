"""statusmon - functional health monitoring for web properties."""

__version__ = "0.1.0"

from .checks import CheckResult, ComponentResult, ProjectType, Status, aggregate
from .config import get_settings
from .main import main_cli

main = main_cli

__all__ = [
    "main_cli",
    "main",
    "get_settings",
    "aggregate",
    "Status",
    "ProjectType",
    "ComponentResult",
    "CheckResult",
    "__version__",
]

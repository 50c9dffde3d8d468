"""Application bootstrap, configuration persistence and startup timing."""

from .bootstrap import AppContext, create_app  # noqa: F401
from .config_store import DashboardConfig, load_config, save_config  # noqa: F401
from .timing import TimingEvent, TimingLogger  # noqa: F401

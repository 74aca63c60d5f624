"""
Lane Runner Services

Application services for event handling and logging.
"""

from services.event_bus import EventBus
from services.logger import init_logging

__all__ = ["EventBus", "init_logging"]

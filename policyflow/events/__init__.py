"""Change notification bus"""

from .bus import ChangeBus, Listener, Unsubscribe

__all__ = ["ChangeBus", "Listener", "Unsubscribe"]

"""Event bus for decoupled communication between components."""
from PySide6.QtCore import QObject, Signal

class EventBus(QObject):
    """
    Central event bus using Qt signals.

    The tracker publishes here; UI code subscribes instead of polling.
    """

    # Transfer progress, carries the new TransferStep snapshot
    step_changed = Signal(object)


# Singleton instance
event_bus = EventBus()

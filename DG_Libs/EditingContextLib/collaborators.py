"""
Optional UI collaborator registry.

Presentation components (layer panel, preview renderer, tool panel, overlay
renderer, notification toasts) subscribe to named events. Any of them may be
absent at a given time; emitting an event nobody listens to is a no-op.

Classes:
    CollaboratorRegistry: Listener lists keyed by event name

Example:
    >>> collaborators = CollaboratorRegistry()
    >>> collaborators.register("layers_changed", layer_panel.render_layers)
    >>> collaborators.emit("layers_changed", context.layers)
    1
"""

import logging
from typing import Any, Callable, Dict, List

from DG_Libs.constants import COLLABORATOR_EVENTS

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class CollaboratorRegistry:
    """
    Registry of listeners for editor events.

    Listener failures are logged and do not stop the remaining listeners, so
    a broken panel cannot abort a tile switch that already committed state.
    """

    def __init__(self):
        """Initialize an empty registry with one listener list per known event."""
        self._listeners: Dict[str, List[Listener]] = {event: [] for event in sorted(COLLABORATOR_EVENTS)}

    def register(self, event: str, listener: Listener) -> None:
        """
        Subscribe a listener to an event.

        Args:
            event: One of the known collaborator event names
            listener: Callable invoked with the event arguments

        Raises:
            ValueError: If the event is unknown or listener is not callable
            RuntimeError: If the listener is already registered for the event
        """
        event = str(event).strip()

        if event not in self._listeners:
            available = ", ".join(self.list_events())
            raise ValueError(f"Unknown collaborator event '{event}'. Available events: {available}")

        if not callable(listener):
            raise ValueError(f"listener must be callable, got {type(listener)}")

        if listener in self._listeners[event]:
            raise RuntimeError(f"Listener already registered for event '{event}'")

        self._listeners[event].append(listener)
        logger.debug(f"Registered collaborator for event: {event}")

    def unregister(self, event: str, listener: Listener) -> bool:
        """
        Remove a listener.

        Returns:
            True if removed, False if it was not registered
        """
        listeners = self._listeners.get(str(event).strip())
        if listeners is None or listener not in listeners:
            return False

        listeners.remove(listener)
        logger.debug(f"Unregistered collaborator for event: {event}")
        return True

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(str(event).strip()))

    def list_events(self) -> List[str]:
        return sorted(self._listeners.keys())

    def emit(self, event: str, *args: Any) -> int:
        """
        Notify every listener of an event.

        Args:
            event: Event name
            *args: Arguments passed to each listener

        Returns:
            Number of listeners that completed without raising
        """
        listeners = list(self._listeners.get(event, []))
        if not listeners:
            logger.debug(f"No collaborator registered for '{event}', skipping")
            return 0

        delivered = 0
        for listener in listeners:
            try:
                listener(*args)
                delivered += 1
            except Exception:
                logger.exception(f"Collaborator for '{event}' failed")

        return delivered

    def clear(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

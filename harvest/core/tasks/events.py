"""
harvest/core/tasks/events.py
Event emitter for the task system.
Lets the TaskManager notify the UI, indicators and legacy adapters without
depending on any of them.
"""
from typing import Any, Callable, Dict, List, Optional

from harvest.utils.logger import Logger


class _Listener:
    __slots__ = ("callback", "context", "once", "fired")

    def __init__(self, callback: Callable, context: Any, once: bool):
        self.callback = callback
        self.context = context
        self.once = once
        self.fired = False

    def invoke(self, args: tuple) -> None:
        if self.context is not None:
            self.callback(self.context, *args)
        else:
            self.callback(*args)


class TaskEventEmitter:
    """
    Named-event publish/subscribe hub.

    Dispatch is synchronous and runs listeners in registration order. A
    listener may subscribe, unsubscribe or emit while being dispatched:
    listeners added during a pass wait for the next emit, listeners removed
    during a pass are skipped. Errors raised by a listener are logged and
    never reach the emitting code.
    """

    def __init__(self):
        """Initialize the emitter."""
        self.listeners: Dict[str, List[_Listener]] = {}

    def on(self, event: str, callback: Callable, context: Any = None) -> None:
        """
        Add a persistent listener.

        Args:
            event: The event name.
            callback: The function to call when the event is emitted.
            context: Optional object passed as the first argument, so an
                unbound method can be registered together with its instance.
        """
        self.listeners.setdefault(event, []).append(_Listener(callback, context, False))

    def once(self, event: str, callback: Callable, context: Any = None) -> None:
        """
        Add a listener that is removed after its first invocation.

        Args:
            event: The event name.
            callback: The function to call when the event is emitted.
            context: Optional object passed as the first argument.
        """
        self.listeners.setdefault(event, []).append(_Listener(callback, context, True))

    def off(self, event: str, callback: Callable) -> None:
        """
        Remove the first listener registered with `callback` for `event`.

        Args:
            event: The event name.
            callback: The callback to remove.
        """
        event_listeners = self.listeners.get(event)
        if not event_listeners:
            return

        for index, listener in enumerate(event_listeners):
            if listener.callback == callback:
                del event_listeners[index]
                break

        # Clean up empty event lists
        if not event_listeners:
            self.listeners.pop(event, None)

    def emit(self, event: str, *args: Any) -> None:
        """
        Emit an event.

        Args:
            event: The event name.
            *args: Arguments passed to every listener.
        """
        event_listeners = self.listeners.get(event)
        if not event_listeners:
            return

        # Snapshot so listeners can mutate the table during dispatch
        for listener in list(event_listeners):
            current = self.listeners.get(event)
            if current is None or not any(l is listener for l in current):
                continue
            if listener.once:
                if listener.fired:
                    continue
                listener.fired = True
            try:
                listener.invoke(args)
            except Exception as e:
                Logger.error("TaskEvents", f"Error in task event listener for '{event}': {e!r}")

        # One-time listeners leave after the pass completes
        current = self.listeners.get(event)
        if current is None:
            return
        remaining = [l for l in current if not (l.once and l.fired)]
        if remaining:
            self.listeners[event] = remaining
        else:
            self.listeners.pop(event, None)

    def remove_all_listeners(self, event: Optional[str] = None) -> None:
        """
        Remove all listeners for an event, or for every event.

        Args:
            event: The event name. If None, clear all.
        """
        if event is None:
            self.listeners.clear()
        else:
            self.listeners.pop(event, None)

    def listener_count(self, event: str) -> int:
        return len(self.listeners.get(event, []))

    def event_names(self) -> List[str]:
        return list(self.listeners.keys())

    def has_listeners(self, event: str) -> bool:
        return self.listener_count(event) > 0

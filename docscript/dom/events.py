"""
docscript DOM events

Minimal namespace-aware event model used by the reference DOM.

Key classes:
- Event: Structured event created by Document.create_event and initialised with init_event_ns
- EventTarget: Listener registration and synchronous capture/target/bubble dispatch

Listener failures are isolated: they are logged and dispatch continues with
the next listener.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, List, Optional, Union

from docscript.constants import XML_EVENTS_NAMESPACE_URI

logger = logging.getLogger(__name__)


class EventPhase(IntEnum):
    NONE = 0
    CAPTURING = 1
    AT_TARGET = 2
    BUBBLING = 3


class Event:
    """A DOM event; must be initialised before dispatch."""

    # scripts may set attributes on events
    _guarded_writes = True

    def __init__(self, interface: str = "Events"):
        self.interface = interface
        self.namespace_uri: Optional[str] = None
        self.type: Optional[str] = None
        self.bubbles = False
        self.cancelable = False
        self.target: Optional["EventTarget"] = None
        self.current_target: Optional["EventTarget"] = None
        self.event_phase = EventPhase.NONE
        self.time_stamp = time.time()
        self.default_prevented = False
        self.propagation_stopped = False

    def init_event_ns(self, namespace_uri: Optional[str], event_type: str,
                      bubbles: bool, cancelable: bool) -> None:
        self.namespace_uri = namespace_uri
        self.type = event_type
        self.bubbles = bubbles
        self.cancelable = cancelable

    def init_event(self, event_type: str, bubbles: bool, cancelable: bool) -> None:
        self.init_event_ns(XML_EVENTS_NAMESPACE_URI, event_type, bubbles, cancelable)

    @property
    def initialized(self) -> bool:
        return bool(self.type)

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True

    def __repr__(self) -> str:
        return f"<Event {self.type!r} ns={self.namespace_uri!r}>"


Listener = Union[Callable[[Event], Any], Any]


@dataclass
class _Registration:
    namespace_uri: Optional[str]
    type: str
    listener: Listener
    use_capture: bool
    group: Any = None

    def matches(self, namespace_uri: Optional[str], event_type: str) -> bool:
        return self.namespace_uri == namespace_uri and self.type == event_type


def _invoke(listener: Listener, event: Event) -> None:
    handle = getattr(listener, "handle_event", None)
    if callable(handle):
        handle(event)
    else:
        listener(event)


class EventTarget:
    """Mixin giving a node listener lists and dispatch_event."""

    _registrations: List[_Registration]

    def _get_registrations(self) -> List[_Registration]:
        regs = getattr(self, "_registrations", None)
        if regs is None:
            regs = []
            self._registrations = regs
        return regs

    def add_event_listener_ns(self, namespace_uri: Optional[str], event_type: str,
                              listener: Listener, use_capture: bool = False,
                              group: Any = None) -> None:
        regs = self._get_registrations()
        for reg in regs:
            if (reg.matches(namespace_uri, event_type) and reg.listener == listener
                    and reg.use_capture == use_capture):
                return
        regs.append(_Registration(namespace_uri, event_type, listener, use_capture, group))

    def remove_event_listener_ns(self, namespace_uri: Optional[str], event_type: str,
                                 listener: Listener, use_capture: bool = False) -> None:
        regs = self._get_registrations()
        self._registrations = [
            reg for reg in regs
            if not (reg.matches(namespace_uri, event_type) and reg.listener == listener
                    and reg.use_capture == use_capture)
        ]

    def add_event_listener(self, event_type: str, listener: Listener,
                           use_capture: bool = False) -> None:
        self.add_event_listener_ns(XML_EVENTS_NAMESPACE_URI, event_type, listener, use_capture)

    def remove_event_listener(self, event_type: str, listener: Listener,
                              use_capture: bool = False) -> None:
        self.remove_event_listener_ns(XML_EVENTS_NAMESPACE_URI, event_type, listener, use_capture)

    def has_event_listener_ns(self, namespace_uri: Optional[str], event_type: str) -> bool:
        return any(reg.matches(namespace_uri, event_type) for reg in self._get_registrations())

    def _event_parent(self) -> Optional["EventTarget"]:
        return None

    def dispatch_event(self, event: Event) -> bool:
        """
        Dispatch event synchronously through capture, target and bubble phases.

        Returns:
            False if a listener called prevent_default on a cancelable event
        """
        if not event.initialized:
            raise ValueError("Event must be initialised before dispatch")

        event.target = self
        event.propagation_stopped = False

        ancestors: List[EventTarget] = []
        parent = self._event_parent()
        while parent is not None:
            ancestors.append(parent)
            parent = parent._event_parent()

        event.event_phase = EventPhase.CAPTURING
        for target in reversed(ancestors):
            target._fire(event, capture=True)
            if event.propagation_stopped:
                break

        if not event.propagation_stopped:
            event.event_phase = EventPhase.AT_TARGET
            self._fire(event, capture=None)

        if event.bubbles and not event.propagation_stopped:
            event.event_phase = EventPhase.BUBBLING
            for target in ancestors:
                target._fire(event, capture=False)
                if event.propagation_stopped:
                    break

        event.event_phase = EventPhase.NONE
        event.current_target = None
        return not event.default_prevented

    def _fire(self, event: Event, capture: Optional[bool]) -> None:
        # capture=None fires every matching listener (at-target phase)
        event.current_target = self
        for reg in list(self._get_registrations()):
            if not reg.matches(event.namespace_uri, event.type):
                continue
            if capture is not None and reg.use_capture != capture:
                continue
            try:
                _invoke(reg.listener, event)
            except Exception:
                logger.exception("Error in listener=%r for event=%s", reg.listener, event.type)

# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Event sinks for observing function call execution.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .models import ExecutionEvent

logger = logging.getLogger(__name__)

# Plain callbacks receive (event_kind, payload), sync or async.
EventCallback = Callable[[str, Dict[str, Any]], Union[None, Awaitable[None]]]


class EventSink:
    """Receives execution events. The default implementation discards them."""

    async def emit(self, event: ExecutionEvent) -> None:
        return None


class NullEventSink(EventSink):
    pass


class CallbackEventSink(EventSink):
    """
    Adapts a plain ``callback(kind, payload)`` function to an EventSink.

    Notifications are fire-and-forget: a callback that raises is logged and
    never interrupts the caller.
    """

    def __init__(self, callback: EventCallback):
        self.callback = callback

    async def emit(self, event: ExecutionEvent) -> None:
        try:
            outcome = self.callback(event.kind.value, event.payload())
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning(f"⚠️  Event callback failed for '{event.kind.value}': {e}")


def as_event_sink(on_event: Optional[Union[EventSink, EventCallback]]) -> EventSink:
    """Normalize an optional sink or callback into an EventSink."""
    if on_event is None:
        return NullEventSink()
    if isinstance(on_event, EventSink):
        return on_event
    return CallbackEventSink(on_event)


async def emit_event(sink: EventSink, event: ExecutionEvent) -> None:
    """Emit through ``sink``; a failing sink is logged and ignored."""
    try:
        await sink.emit(event)
    except Exception as e:
        logger.warning(f"⚠️  Event sink failed for '{event.kind.value}': {e}")

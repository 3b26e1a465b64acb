# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Dispatch of extracted function calls to their implementations.
"""

import asyncio
import inspect
import logging
from typing import Any, List, Optional, Union

from .events import EventCallback, EventSink, as_event_sink, emit_event
from .models import EventKind, ExecutionEvent, FunctionCall, LocalBinding
from .registry import FunctionRegistry
from .remote import RemoteToolCapability

logger = logging.getLogger(__name__)


class _CallFailed(Exception):
    pass


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _is_async_callable(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


async def _invoke(call: FunctionCall, registry: FunctionRegistry,
                  remote_tool: Optional[RemoteToolCapability]) -> Any:
    func = registry.get(call.name)
    if func is None:
        raise _CallFailed(f"Function '{call.name}' not found")

    if isinstance(func.binding, LocalBinding):
        executor = func.binding.executor
        if _is_async_callable(executor):
            outcome = executor(call.arguments)
        else:
            # Sync executors run in a worker thread so timeouts and concurrency apply to them.
            outcome = await asyncio.to_thread(executor, call.arguments)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    if remote_tool is None:
        raise _CallFailed(f"No remote tool capability available for function '{call.name}'")
    return await remote_tool.invoke(call.name, call.arguments)


async def _invoke_reporting_own_timeouts(call: FunctionCall, registry: FunctionRegistry,
                                         remote_tool: Optional[RemoteToolCapability]) -> Any:
    """Like _invoke, but a TimeoutError raised by the function itself is not a dispatch timeout."""
    try:
        return await _invoke(call, registry, remote_tool)
    except asyncio.TimeoutError as e:
        raise _CallFailed(_error_message(e)) from e


async def _run_call(call: FunctionCall, registry: FunctionRegistry, sink: EventSink,
                    remote_tool: Optional[RemoteToolCapability], call_timeout: Optional[float]) -> FunctionCall:
    invocation = _invoke_reporting_own_timeouts(call, registry, remote_tool)
    try:
        if call_timeout is not None:
            result = await asyncio.wait_for(invocation, timeout=call_timeout)
        else:
            result = await invocation
    except asyncio.TimeoutError:
        message = f"Function '{call.name}' timed out after {call_timeout}s"
    except Exception as e:
        message = _error_message(e)
    else:
        logger.debug(f"✅ Function '{call.name}' completed")
        return call.with_result(result)

    logger.warning(f"⚠️  Function call '{call.name}' failed: {message}")
    await emit_event(sink, ExecutionEvent(kind=EventKind.ERROR, call=call, message=message))
    return call.with_error(message)


async def dispatch_function_calls(
    calls: List[FunctionCall],
    registry: FunctionRegistry,
    on_event: Optional[Union[EventSink, EventCallback]] = None,
    remote_tool: Optional[RemoteToolCapability] = None,
    *,
    max_concurrency: int = 1,
    call_timeout: Optional[float] = None,
) -> List[FunctionCall]:
    """
    Execute ``calls`` against ``registry`` and return them with results.

    Every returned call carries either the function's return value or
    ``{"error": message}``; a failing call never stops the others. The
    returned list keeps the input order. ``function_call_start`` and
    ``function_call_end`` bracket the whole batch once, with an ``error``
    event per failed call in between.

    Calls run one at a time unless ``max_concurrency`` is above 1.
    ``call_timeout`` (seconds) bounds each call individually.
    """
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be at least 1")

    sink = as_event_sink(on_event)
    logger.debug(f"🔧 Dispatching {len(calls)} function calls (max_concurrency={max_concurrency})")
    await emit_event(sink, ExecutionEvent(kind=EventKind.FUNCTION_CALL_START, calls=list(calls)))

    if max_concurrency == 1:
        results = []
        for call in calls:
            results.append(await _run_call(call, registry, sink, remote_tool, call_timeout))
    else:
        semaphore = asyncio.Semaphore(max_concurrency)

        async def _bounded(call: FunctionCall) -> FunctionCall:
            async with semaphore:
                return await _run_call(call, registry, sink, remote_tool, call_timeout)

        results = list(await asyncio.gather(*(_bounded(call) for call in calls)))

    failed = sum(1 for r in results if r.error is not None)
    logger.info(f"🔧 Dispatched {len(results)} function calls, {failed} failed")
    await emit_event(sink, ExecutionEvent(kind=EventKind.FUNCTION_CALL_END, calls=results))
    return results

# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Request/response loop: prompt the model, run the calls it asks for, feed the
results back until it answers without calling anything.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, Field

from .config import AppConfig
from .dispatcher import dispatch_function_calls
from .events import EventCallback, EventSink, as_event_sink, emit_event
from .function_calling import (
    generate_followup_prompt,
    generate_function_prompt,
    parse_function_calls,
    remove_tagged_function_calls,
    summarize_function_results,
)
from .models import EventKind, ExecutionEvent, FunctionCall, ResponseFormat
from .registry import FunctionRegistry
from .remote import RemoteToolCapability
from .token_counter import TokenCounter

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Sends one prompt to the model and returns its reply."""

    async def chat(self, prompt: str) -> Union[str, Dict[str, Any]]:
        ...


class ProcessorResult(BaseModel):
    content: Any = None
    function_calls: List[FunctionCall] = Field(default_factory=list)
    pending_calls: List[FunctionCall] = Field(default_factory=list)
    rounds: int = 0
    is_json_response: bool = False


def _as_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False, indent=2, default=str)


class FunctionCallProcessor:
    """
    Drives the encode -> model -> extract -> dispatch -> followup cycle.

    Stops when the model answers without function calls or after
    ``max_recursion_depth`` dispatch rounds; calls requested after the
    limit is reached are reported as ``pending_calls`` without running.
    """

    def __init__(self, registry: FunctionRegistry, model_client: ModelClient,
                 remote_tool: Optional[RemoteToolCapability] = None, max_recursion_depth: int = 25,
                 max_concurrency: int = 1, call_timeout: Optional[float] = None,
                 prompt_template: Optional[str] = None, optimize_prompt: bool = False,
                 max_result_tokens: Optional[int] = None, token_model: str = "gpt-4o",
                 token_counter: Optional[TokenCounter] = None):
        if max_recursion_depth < 1:
            raise ValueError("max_recursion_depth must be at least 1")
        self.registry = registry
        self.model_client = model_client
        self.remote_tool = remote_tool
        self.max_recursion_depth = max_recursion_depth
        self.max_concurrency = max_concurrency
        self.call_timeout = call_timeout
        self.prompt_template = prompt_template
        self.optimize_prompt = optimize_prompt
        self.max_result_tokens = max_result_tokens
        self.token_model = token_model
        self.token_counter = token_counter

    @classmethod
    def from_config(cls, config: AppConfig, registry: FunctionRegistry, model_client: ModelClient,
                    remote_tool: Optional[RemoteToolCapability] = None) -> "FunctionCallProcessor":
        return cls(
            registry,
            model_client,
            remote_tool=remote_tool,
            max_recursion_depth=config.dispatch.max_recursion_depth,
            max_concurrency=config.dispatch.max_concurrency,
            call_timeout=config.dispatch.call_timeout,
            prompt_template=config.prompt.template,
            optimize_prompt=config.prompt.optimize,
            max_result_tokens=config.prompt.max_result_tokens,
            token_model=config.prompt.token_model,
        )

    def encode(self, prompt: str) -> str:
        return generate_function_prompt(prompt, self.registry, self.prompt_template, self.optimize_prompt)

    async def run(self, prompt: str, on_event: Optional[Union[EventSink, EventCallback]] = None,
                  response_format: Optional[ResponseFormat] = None) -> ProcessorResult:
        sink = as_event_sink(on_event)
        response = await self.model_client.chat(self.encode(prompt))
        await emit_event(sink, ExecutionEvent(kind=EventKind.RECURSION_START))

        executed: List[FunctionCall] = []
        pending: List[FunctionCall] = []
        rounds = 0
        while True:
            calls = parse_function_calls(response)
            if not calls:
                break
            if rounds >= self.max_recursion_depth:
                logger.warning(f"⚠️  Reached max recursion depth {self.max_recursion_depth}, "
                               f"{len(calls)} function calls left unexecuted")
                pending = calls
                break

            rounds += 1
            logger.info(f"🔧 Round {rounds}: executing {len(calls)} function calls")
            results = await dispatch_function_calls(
                calls, self.registry, sink, self.remote_tool,
                max_concurrency=self.max_concurrency, call_timeout=self.call_timeout,
            )
            executed.extend(results)

            summary = summarize_function_results(
                results, self.max_result_tokens, self.token_counter, self.token_model,
            )
            followup = generate_followup_prompt(prompt, _as_text(response), summary, response_format)
            response = await self.model_client.chat(self.encode(followup))

        result = self._finalize(response, response_format)
        result.function_calls = executed
        result.pending_calls = pending
        result.rounds = rounds

        await emit_event(sink, ExecutionEvent(kind=EventKind.RECURSION_END, calls=executed))
        return result

    def _finalize(self, response: Any, response_format: Optional[ResponseFormat]) -> ProcessorResult:
        if not isinstance(response, str):
            return ProcessorResult(content=response, is_json_response=True)

        content = remove_tagged_function_calls(response).strip()
        if response_format != ResponseFormat.JSON:
            return ProcessorResult(content=content)

        try:
            return ProcessorResult(content=json.loads(content), is_json_response=True)
        except ValueError:
            logger.warning("⚠️  Final response is not valid JSON, returning it as text")
            return ProcessorResult(content=content)

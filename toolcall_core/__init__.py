# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Toolcall Core - function calling for models without native tool support.
"""

__version__ = "1.0.0"
__author__ = "FunnyCups & Toolcall Team"

# Re-export commonly used components for convenience
from .models import (
    AgentFunction,
    EventKind,
    ExecutionEvent,
    FunctionCall,
    LocalBinding,
    RemoteBinding,
    ResponseFormat,
    ToolSchema,
)
from .exceptions import ToolcallError, DuplicateFunctionError, RemoteToolError
from .registry import FunctionRegistry
from .events import EventSink, NullEventSink, CallbackEventSink
from .function_calling import (
    parse_function_calls,
    generate_function_prompt,
    generate_followup_prompt,
    summarize_function_results,
    StreamingFunctionCallDetector,
)
from .dispatcher import dispatch_function_calls
from .remote import RemoteToolCapability, HttpRemoteToolCapability
from .processor import FunctionCallProcessor, ModelClient, ProcessorResult
from .config import AppConfig, ConfigLoader, setup_logging

__all__ = [
    'AgentFunction',
    'EventKind',
    'ExecutionEvent',
    'FunctionCall',
    'LocalBinding',
    'RemoteBinding',
    'ResponseFormat',
    'ToolSchema',
    'ToolcallError',
    'DuplicateFunctionError',
    'RemoteToolError',
    'FunctionRegistry',
    'EventSink',
    'NullEventSink',
    'CallbackEventSink',
    'parse_function_calls',
    'generate_function_prompt',
    'generate_followup_prompt',
    'summarize_function_results',
    'StreamingFunctionCallDetector',
    'dispatch_function_calls',
    'RemoteToolCapability',
    'HttpRemoteToolCapability',
    'FunctionCallProcessor',
    'ModelClient',
    'ProcessorResult',
    'AppConfig',
    'ConfigLoader',
    'setup_logging',
]

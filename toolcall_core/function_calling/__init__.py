# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Function calling module for Toolcall.
"""

from .parser import (
    FUNCTION_CALL_START_TAG,
    FUNCTION_CALL_END_TAG,
    parse_function_calls,
    remove_tagged_function_calls,
    has_complete_function_call_tags,
)
from .prompt import generate_function_prompt, generate_followup_prompt, summarize_function_results
from .streaming import StreamingFunctionCallDetector

__all__ = [
    'FUNCTION_CALL_START_TAG',
    'FUNCTION_CALL_END_TAG',
    'parse_function_calls',
    'remove_tagged_function_calls',
    'has_complete_function_call_tags',
    'generate_function_prompt',
    'generate_followup_prompt',
    'summarize_function_results',
    'StreamingFunctionCallDetector',
]

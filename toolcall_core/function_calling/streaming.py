# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Streaming detection and parsing for function calls.
"""

import logging
from typing import List, Tuple

from ..models import FunctionCall
from .parser import FUNCTION_CALL_START_TAG, has_complete_function_call_tags, parse_function_calls

logger = logging.getLogger(__name__)


class StreamingFunctionCallDetector:
    """Detects the tool-call start marker in a streamed model response.

    Prose before the marker is released as soon as it can no longer be the
    beginning of a split marker. From the marker on, everything is buffered
    and parsed by finalize().
    """

    def __init__(self, start_tag: str = FUNCTION_CALL_START_TAG):
        self.start_tag = start_tag
        self.reset()

    def reset(self):
        self.content_buffer = ""
        self.state = "detecting"  # detecting, tool_parsing

    def process_chunk(self, delta_content: str) -> Tuple[bool, str]:
        """
        Process streaming content chunk.
        Returns: (is_tool_call_detected, content_to_yield)
        """
        if not delta_content:
            return False, ""

        self.content_buffer += delta_content
        if self.state == "tool_parsing":
            return False, ""

        logger.debug(
            f"🔧 Processing chunk: {repr(delta_content[:50])}{'...' if len(delta_content) > 50 else ''}, "
            f"buffer length: {len(self.content_buffer)}")

        pos = self.content_buffer.find(self.start_tag)
        if pos != -1:
            logger.debug(f"🔧 Detected tool call start marker at position {pos}")
            content_to_yield = self.content_buffer[:pos]
            self.content_buffer = self.content_buffer[pos:]
            self.state = "tool_parsing"
            return True, content_to_yield

        # Keep back a tail that could still grow into the marker.
        keep = 0
        for size in range(min(len(self.start_tag) - 1, len(self.content_buffer)), 0, -1):
            if self.start_tag.startswith(self.content_buffer[-size:]):
                keep = size
                break

        split_at = len(self.content_buffer) - keep
        content_to_yield = self.content_buffer[:split_at]
        self.content_buffer = self.content_buffer[split_at:]
        return False, content_to_yield

    @property
    def is_complete(self) -> bool:
        """True once the buffered tool region has its closing marker."""
        return self.state == "tool_parsing" and has_complete_function_call_tags(self.content_buffer)

    def flush(self) -> str:
        """Release text held back while detecting; empty once a call was detected."""
        if self.state == "tool_parsing":
            return ""
        pending, self.content_buffer = self.content_buffer, ""
        return pending

    def finalize(self) -> List[FunctionCall]:
        """Final processing when stream ends."""
        if self.state == "tool_parsing":
            return parse_function_calls(self.content_buffer)
        return []

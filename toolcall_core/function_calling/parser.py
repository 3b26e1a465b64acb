# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Extraction of function calls from model output.
"""

import re
import json
import logging
from typing import List, Dict, Any, Optional, Union

from json_repair import repair_json

from ..models import FunctionCall

logger = logging.getLogger(__name__)

FUNCTION_CALL_START_TAG = "<==start_tool_calls==>"
FUNCTION_CALL_END_TAG = "<==end_tool_calls==>"
BATCH_FIELD = "function_calls"

_JSON_BLOCK_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)

_NOT_JSON = object()


def _loads(text: str) -> Any:
    """json.loads that returns _NOT_JSON instead of raising."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError):
        return _NOT_JSON


def _loads_repaired(text: str) -> Any:
    """
    Like _loads, but malformed JSON (trailing commas, single quotes,
    unclosed brackets) is repaired. Only text that starts like an object
    or array is repaired, and only an object or array is accepted back.
    """
    value = _loads(text)
    if value is not _NOT_JSON:
        return value
    if not text.strip().startswith(("{", "[")):
        return _NOT_JSON
    repaired = repair_json(text, return_objects=True)
    if isinstance(repaired, (dict, list)):
        logger.debug("🔧 Repaired malformed JSON")
        return repaired
    return _NOT_JSON


def _coerce_arguments(arguments: Any) -> Any:
    if arguments is None:
        return {}
    if isinstance(arguments, str):
        decoded = _loads_repaired(arguments)
        return arguments if decoded is _NOT_JSON else decoded
    return arguments


def _extract_batch(entries: List[Any]) -> List[FunctionCall]:
    calls = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.debug(f"🔧 Skipping batch entry #{i + 1}: not an object")
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.debug(f"🔧 Skipping batch entry #{i + 1}: missing function name")
            continue
        call_id = entry.get("id")
        calls.append(FunctionCall(
            name=name,
            arguments=_coerce_arguments(entry.get("arguments")),
            id=call_id if isinstance(call_id, str) else None,
        ))
    return calls


def _batch_entries(value: Any) -> Optional[List[Any]]:
    if isinstance(value, dict) and isinstance(value.get(BATCH_FIELD), list):
        return value[BATCH_FIELD]
    return None


def _extract_from_object(obj: Any) -> List[FunctionCall]:
    """Top-level batch field first, then the immediate fields of ``obj``."""
    entries = _batch_entries(obj)
    if entries is not None:
        return _extract_batch(entries)

    if not isinstance(obj, dict):
        return []

    # Fixed depth: only the immediate fields of obj are searched.
    for key, value in obj.items():
        # Lists are sequences, not call containers.
        if not isinstance(value, dict):
            continue
        nested = _batch_entries(value)
        if nested is not None:
            logger.debug(f"🔧 Found nested function calls under '{key}'")
            return _extract_batch(nested)
    return []


def _extract_from_text(text: str, repair: bool = False) -> List[FunctionCall]:
    text = text.strip()
    parsed = _loads_repaired(text) if repair else _loads(text)
    if parsed is _NOT_JSON:
        return []
    return _extract_from_object(parsed)


def _extract_tagged(content: str) -> List[FunctionCall]:
    calls = []
    for i, region in enumerate(_tagged_regions(content)):
        region_calls = _extract_from_text(region, repair=True)
        logger.debug(f"🔧 Tagged region #{i + 1} yielded {len(region_calls)} calls")
        calls.extend(region_calls)
    return calls


def _tagged_regions(content: str) -> List[str]:
    regions = []
    start_pos = content.find(FUNCTION_CALL_START_TAG)
    while start_pos != -1:
        body_start = start_pos + len(FUNCTION_CALL_START_TAG)
        end_pos = content.find(FUNCTION_CALL_END_TAG, body_start)
        if end_pos == -1:
            break
        regions.append(content[body_start:end_pos])
        start_pos = content.find(FUNCTION_CALL_START_TAG, end_pos + len(FUNCTION_CALL_END_TAG))
    return regions


def _extract_code_blocks(content: str) -> List[FunctionCall]:
    calls = []
    blocks = _JSON_BLOCK_RE.findall(content)
    logger.debug(f"🔧 Found {len(blocks)} json code blocks")
    for i, block in enumerate(blocks):
        try:
            block_calls = _extract_from_text(block, repair=True)
        except Exception as e:
            logger.debug(f"🔧 Ignoring json code block #{i + 1}: {e}")
            continue
        calls.extend(block_calls)
    return calls


def parse_function_calls(content: Union[str, Dict[str, Any], List[Any], None]) -> List[FunctionCall]:
    """
    Extract the ordered list of function calls from a model response.

    Strategies, stopping at the first that yields a call:
    1. Tagged regions between the start and end tool-call markers
    2. The whole content as one strict JSON document, with a top-level
       ``function_calls`` array or one nested a single level down
    3. Every ```json fenced block, concatenated in textual order

    Tagged regions, fenced blocks and string ``arguments`` go through
    JSON repair; the whole-content strategy does not.

    Structured content skips the text-only strategies. Never raises;
    anything unusable yields an empty list.
    """
    if content is None:
        return []

    if not isinstance(content, str):
        try:
            calls = _extract_from_object(content)
        except Exception as e:
            logger.debug(f"🔧 Failed to extract from structured content: {e}")
            return []
        logger.debug(f"🔧 Extracted {len(calls)} calls from structured content")
        return calls

    logger.debug(f"🔧 Extracting function calls, input length: {len(content)}")
    strategies = (
        ("tagged", _extract_tagged),
        ("json", _extract_from_text),
        ("code_block", _extract_code_blocks),
    )
    for label, strategy in strategies:
        try:
            calls = strategy(content)
        except Exception as e:
            logger.debug(f"🔧 Strategy '{label}' failed: {e}")
            continue
        if calls:
            logger.debug(f"🔧 Strategy '{label}' extracted {len(calls)} calls: {[c.name for c in calls]}")
            return calls

    logger.debug("🔧 No function calls found")
    return []


def remove_tagged_function_calls(content: str) -> str:
    """Remove every complete tagged tool-call region, markers included."""
    result = content
    start_pos = result.find(FUNCTION_CALL_START_TAG)
    while start_pos != -1:
        end_pos = result.find(FUNCTION_CALL_END_TAG, start_pos)
        if end_pos == -1:
            break
        result = result[:start_pos] + result[end_pos + len(FUNCTION_CALL_END_TAG):]
        start_pos = result.find(FUNCTION_CALL_START_TAG)
    return result


def has_complete_function_call_tags(content: str) -> bool:
    start_pos = content.find(FUNCTION_CALL_START_TAG)
    if start_pos == -1:
        return False
    return content.find(FUNCTION_CALL_END_TAG, start_pos) != -1

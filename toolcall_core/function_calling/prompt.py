# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Prompt generation for function calling.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..models import AgentFunction, FunctionCall, ResponseFormat
from ..token_counter import TokenCounter
from .parser import FUNCTION_CALL_START_TAG, FUNCTION_CALL_END_TAG

logger = logging.getLogger(__name__)

OPTIMIZED_DESCRIPTION_LIMIT = 200
TRUNCATION_MARKER = "... [truncated]"


def get_function_call_prompt_template(custom_template: str = None) -> str:
    """
    Return the instruction template. ``{tools_list}``, ``{start_tag}`` and
    ``{end_tag}`` are substituted by generate_function_prompt.
    """
    if custom_template:
        logger.info("🔧 Using custom prompt template from configuration")
        return custom_template

    return """You can call the following tools. Use the tool names and parameters exactly as listed; do not rename them or add new ones.
Tool list:
{tools_list}

When calling tools, follow these rules strictly:
- Only use the tool names provided above. Never invent or change a tool name.
- Only use the format shown below. Do not use any other format or property names.
- Put only the JSON object between the markers, with no extra text or formatting.

When you need to call one or more tools, use exactly this format, markers included:
{start_tag}
{
  "function_calls": [
    {
      "name": "tool_name_1",
      "arguments": {
        "parameter_name": "parameter_value"
      }
    },
    {
      "name": "tool_name_2",
      "arguments": {
        "parameter_name": "parameter_value"
      }
    }
  ]
}
{end_tag}"""


def _function_definition(func: AgentFunction, optimize: bool) -> Dict[str, Any]:
    definition = func.to_definition()
    description = definition["description"] or ""
    if optimize and len(description) > OPTIMIZED_DESCRIPTION_LIMIT:
        definition["description"] = description[:OPTIMIZED_DESCRIPTION_LIMIT - 3] + "..."
    return definition


def generate_function_prompt(prompt: str, functions: Iterable[AgentFunction], custom_template: str = None,
                             optimize: bool = False) -> str:
    """
    Append tool definitions and call-format instructions to ``prompt``.

    Args:
        prompt: The user prompt
        functions: Functions the model may call (a FunctionRegistry works too)
        custom_template: Custom instruction template (optional)
        optimize: If True, emit compact JSON and shortened descriptions

    Returns the prompt unchanged when there are no functions.
    """
    functions = list(functions)
    if not functions:
        return prompt

    definitions = [_function_definition(f, optimize) for f in functions]
    if optimize:
        tools_list = json.dumps(definitions, ensure_ascii=False, separators=(",", ":"))
    else:
        tools_list = json.dumps(definitions, ensure_ascii=False, indent=2)

    instructions = (
        get_function_call_prompt_template(custom_template)
        .replace("{tools_list}", tools_list)
        .replace("{start_tag}", FUNCTION_CALL_START_TAG)
        .replace("{end_tag}", FUNCTION_CALL_END_TAG)
    )
    prompt_content = f"{prompt}\n\n{instructions}"

    if optimize:
        logger.info(f"🔧 Generated optimized prompt: {len(prompt_content)} chars (optimization enabled)")
    else:
        logger.debug(f"🔧 Generated function prompt for {len(functions)} tools: {len(prompt_content)} chars")
    return prompt_content


def generate_followup_prompt(original_prompt: str, previous_response: str, results_summary: str,
                             response_format: Optional[ResponseFormat] = None) -> str:
    """Compose the next turn that feeds function results back to the model."""
    format_instruction = ""
    if response_format == ResponseFormat.JSON:
        format_instruction = "\nReturn your response in valid JSON format."

    return f"""
My previous question was: {original_prompt}

Your response was:
{previous_response}

Here are the results of the function calls:
{results_summary}

Please generate a final response that incorporates all this information. If you need to call additional functions, please clearly indicate this.
{format_instruction}
"""


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def summarize_function_results(calls: List[FunctionCall], max_result_tokens: Optional[int] = None,
                               token_counter: Optional[TokenCounter] = None, model: str = "gpt-4o") -> str:
    """
    Format executed calls for the followup prompt.

    When ``max_result_tokens`` is set, each serialized result longer than
    the limit is cut down and marked as truncated.
    """
    if max_result_tokens is not None and token_counter is None:
        token_counter = TokenCounter()

    parts = []
    for call in calls:
        result_text = _dump(call.result)
        if max_result_tokens is not None:
            truncated = token_counter.truncate_text(result_text, max_result_tokens, model)
            if truncated != result_text:
                logger.debug(f"🔧 Truncated result of '{call.name}' to {max_result_tokens} tokens")
                result_text = truncated + TRUNCATION_MARKER
        parts.append(
            f"Function: {call.name}\n"
            f"Parameters: {_dump(call.arguments)}\n"
            f"Result: {result_text}"
        )
    return "\n\n".join(parts)

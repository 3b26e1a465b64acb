# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Data models shared by the encoder, extractor and dispatcher.
"""

import time
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseFormat(str, Enum):
    """Format the model is asked to answer in."""
    TEXT = "text"
    JSON = "json"


class EventKind(str, Enum):
    """Kinds of events reported through an EventSink."""
    FUNCTION_CALL_START = "function_call_start"
    FUNCTION_CALL_END = "function_call_end"
    ERROR = "error"
    RECURSION_START = "recursion_start"
    RECURSION_END = "recursion_end"


ParametersSpec = Union[Dict[str, Any], Type[BaseModel]]


class ToolSchema(BaseModel):
    """Contract advertised to the model for one tool."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Tool name, unique within a registry")
    description: str = Field(default="", description="What the tool does")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="JSON Schema of the arguments")

    @field_validator("parameters", mode="before")
    def schema_from_model(cls, v):
        """A pydantic model class is accepted in place of a raw JSON Schema."""
        if isinstance(v, type) and issubclass(v, BaseModel):
            return v.model_json_schema()
        return v

    def to_definition(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class LocalBinding(BaseModel):
    """Function executed in-process. The executor may be sync or async."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    executor: Callable[..., Any]


class RemoteBinding(BaseModel):
    """Function executed through the remote tool capability."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["remote"] = "remote"


Binding = Union[LocalBinding, RemoteBinding]


class AgentFunction(ToolSchema):
    """A ToolSchema bound to exactly one way of executing it."""

    binding: Binding = Field(discriminator="kind")

    @classmethod
    def local(cls, name: str, executor: Callable[..., Any], description: str = "",
              parameters: Optional[ParametersSpec] = None) -> "AgentFunction":
        return cls(
            name=name,
            description=description,
            parameters=parameters or {},
            binding=LocalBinding(executor=executor),
        )

    @classmethod
    def remote(cls, name: str, description: str = "",
               parameters: Optional[ParametersSpec] = None) -> "AgentFunction":
        return cls(
            name=name,
            description=description,
            parameters=parameters or {},
            binding=RemoteBinding(),
        )

    @property
    def is_local(self) -> bool:
        return isinstance(self.binding, LocalBinding)


class FunctionCall(BaseModel):
    """
    A call requested by the model.

    The extractor creates it without a result; the dispatcher returns a copy
    with ``result`` set to the return value or to ``{"error": message}``.
    """
    name: str
    arguments: Any = Field(default_factory=dict)
    result: Any = None
    id: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return "result" in self.model_fields_set

    @property
    def error(self) -> Optional[str]:
        if self.is_resolved and isinstance(self.result, dict) and "error" in self.result:
            return self.result["error"]
        return None

    def with_result(self, result: Any) -> "FunctionCall":
        return self.model_copy(update={"result": result})

    def with_error(self, message: str) -> "FunctionCall":
        return self.with_result({"error": message})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "arguments": self.arguments}
        if self.id is not None:
            data["id"] = self.id
        if self.is_resolved:
            data["result"] = self.result
        return data


CallBatch = List[FunctionCall]


class ExecutionEvent(BaseModel):
    """Observational event emitted while a batch is processed."""
    kind: EventKind
    calls: List[FunctionCall] = Field(default_factory=list)
    call: Optional[FunctionCall] = None
    message: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)

    def payload(self) -> Dict[str, Any]:
        """Event data in the shape handed to plain callbacks."""
        if self.kind == EventKind.ERROR:
            return {"call": self.call, "message": self.message}
        return {"calls": self.calls}

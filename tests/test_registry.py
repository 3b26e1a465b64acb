"""
Tests for the function registry and the shared data models.
"""

import pytest
from pydantic import ValidationError

from toolcall_core import (
    AgentFunction,
    DuplicateFunctionError,
    ExecutionEvent,
    EventKind,
    FunctionCall,
    FunctionRegistry,
    LocalBinding,
    RemoteBinding,
    ToolSchema,
)


def test_lookup_by_name():
    registry = FunctionRegistry()
    func = registry.register_local("add", lambda args: args["a"] + args["b"], "Add two numbers")
    assert registry.get("add") is func
    assert "add" in registry
    assert len(registry) == 1


def test_unknown_name_returns_none():
    assert FunctionRegistry().get("missing") is None
    assert "missing" not in FunctionRegistry()


def test_duplicate_name_is_rejected():
    registry = FunctionRegistry([AgentFunction.remote("search")])
    with pytest.raises(DuplicateFunctionError) as exc_info:
        registry.register(AgentFunction.local("search", lambda args: None))
    assert exc_info.value.name == "search"
    assert len(registry) == 1


def test_duplicate_name_in_constructor_is_rejected():
    with pytest.raises(DuplicateFunctionError):
        FunctionRegistry([AgentFunction.remote("a"), AgentFunction.remote("a")])


def test_iteration_follows_registration_order():
    registry = FunctionRegistry()
    registry.register_remote("b")
    registry.register_local("a", lambda args: None)
    registry.register_remote("c")
    assert registry.names() == ["b", "a", "c"]
    assert [f.name for f in registry] == ["b", "a", "c"]


def test_bindings_are_explicit_variants():
    local = AgentFunction.local("l", lambda args: 1)
    remote = AgentFunction.remote("r")
    assert isinstance(local.binding, LocalBinding)
    assert local.is_local
    assert isinstance(remote.binding, RemoteBinding)
    assert not remote.is_local


def test_binding_is_required():
    with pytest.raises(ValidationError):
        AgentFunction(name="unbound")


def test_tool_schema_is_immutable():
    schema = ToolSchema(name="t", description="d", parameters={"type": "object"})
    with pytest.raises(ValidationError):
        schema.name = "other"


def test_tool_schema_requires_name():
    with pytest.raises(ValidationError):
        ToolSchema(name="")


def test_tool_definition():
    func = AgentFunction.remote("t", "desc", {"type": "object"})
    assert func.to_definition() == {"name": "t", "description": "desc", "parameters": {"type": "object"}}


def test_function_call_result_tracking():
    call = FunctionCall(name="a", arguments={"x": 1})
    assert not call.is_resolved
    assert call.error is None

    done = call.with_result({"ok": True})
    assert done.is_resolved
    assert done.result == {"ok": True}
    assert not call.is_resolved

    failed = call.with_error("boom")
    assert failed.error == "boom"
    assert failed.to_dict() == {"name": "a", "arguments": {"x": 1}, "result": {"error": "boom"}}


def test_event_payload_shapes():
    call = FunctionCall(name="a")
    error = ExecutionEvent(kind=EventKind.ERROR, call=call, message="boom")
    assert error.payload() == {"call": call, "message": "boom"}

    start = ExecutionEvent(kind=EventKind.FUNCTION_CALL_START, calls=[call])
    assert start.payload() == {"calls": [call]}
    assert start.timestamp > 0

"""
Tests for detecting tool calls in streamed model output.
"""

from toolcall_core.function_calling import (
    FUNCTION_CALL_END_TAG,
    FUNCTION_CALL_START_TAG,
    StreamingFunctionCallDetector,
)

CALLS_JSON = '{"function_calls":[{"name":"get_weather","arguments":{"city":"Paris"}}]}'


def _feed(detector, chunks):
    yielded = []
    detected = False
    for chunk in chunks:
        hit, text = detector.process_chunk(chunk)
        detected = detected or hit
        yielded.append(text)
    return detected, "".join(yielded)


def test_plain_text_is_passed_through():
    detector = StreamingFunctionCallDetector()
    detected, text = _feed(detector, ["Hello ", "there, ", "how are you?"])
    text += detector.flush()
    assert not detected
    assert text == "Hello there, how are you?"
    assert detector.finalize() == []


def test_marker_split_across_chunks():
    reply = f"Let me check.\n{FUNCTION_CALL_START_TAG}\n{CALLS_JSON}\n{FUNCTION_CALL_END_TAG}"
    chunks = [reply[i:i + 5] for i in range(0, len(reply), 5)]

    detector = StreamingFunctionCallDetector()
    detected, text = _feed(detector, chunks)

    assert detected
    assert text == "Let me check.\n"
    assert detector.is_complete
    calls = detector.finalize()
    assert [c.name for c in calls] == ["get_weather"]
    assert calls[0].arguments == {"city": "Paris"}


def test_partial_marker_prefix_is_held_back():
    detector = StreamingFunctionCallDetector()
    detected, text = detector.process_chunk("Answer <==start")
    assert not detected
    assert text == "Answer "
    assert detector.flush() == "<==start"


def test_incomplete_tool_region():
    detector = StreamingFunctionCallDetector()
    _feed(detector, [f"{FUNCTION_CALL_START_TAG}\n", CALLS_JSON])
    assert not detector.is_complete
    assert detector.finalize() == []
    assert detector.flush() == ""


def test_reset():
    detector = StreamingFunctionCallDetector()
    detector.process_chunk(FUNCTION_CALL_START_TAG)
    assert detector.state == "tool_parsing"
    detector.reset()
    assert detector.state == "detecting"
    assert detector.content_buffer == ""


def test_empty_chunk():
    assert StreamingFunctionCallDetector().process_chunk("") == (False, "")

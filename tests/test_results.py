from volc_asr.engine.results import (
    ErrorEvent,
    MessageKind,
    RecognitionEvent,
    normalize,
    parse_error,
    parse_result,
)


def test_array_wrapped_result() -> None:
    event = parse_result(b'{"result":[{"text":"hello"}]}', is_final=False)
    assert event == RecognitionEvent(text="hello", is_final=False)


def test_dictionary_result() -> None:
    event = parse_result(b'{"result":{"text":"world"}}', is_final=True)
    assert event == RecognitionEvent(text="world", is_final=True)


def test_first_array_element_wins() -> None:
    event = parse_result('{"result":[{"text":"a"},{"text":"b"}]}', is_final=False)
    assert event is not None and event.text == "a"


def test_unusable_shapes_yield_none() -> None:
    for payload in (
        b'{"result":[]}',
        b"{}",
        b'{"result":{"text":""}}',
        b'{"result":[{"text":"   "}]}',
        b'{"result":"hello"}',
        b'{"result":[42]}',
        b'{"result":{"text":7}}',
        b'["result"]',
        b"not json",
        b"\xff\xfe\x00",
        b"",
    ):
        assert parse_result(payload, is_final=True) is None


def test_error_payload() -> None:
    assert parse_error(b'{"err_msg":"boom"}') == ErrorEvent(message="boom")


def test_error_payload_without_message_is_dropped() -> None:
    assert parse_error(b'{"err_code":1}') is None
    assert parse_error(b"garbage") is None


def test_normalize_uses_message_tag_for_finality() -> None:
    payload = b'{"result":{"text":"done"}}'
    assert normalize(MessageKind.FINAL_RESULT, payload) == RecognitionEvent("done", True)
    assert normalize(MessageKind.PARTIAL_RESULT, payload) == RecognitionEvent("done", False)


def test_normalize_errors_and_lifecycle() -> None:
    assert normalize(MessageKind.ENGINE_ERROR, b'{"err_msg":"x"}') == ErrorEvent("x")
    assert normalize(MessageKind.ENGINE_START, b"{}") is None
    assert normalize(MessageKind.OTHER, b'{"result":{"text":"ignored"}}') is None


def test_deeply_nested_payload_yields_none() -> None:
    depth = 100_000
    payload = b'{"result":' + b"[" * depth + b"]" * depth + b"}"
    assert parse_result(payload, is_final=False) is None
    assert parse_error(b'{"err_msg":' + b"[" * depth + b"]" * depth + b"}") is None
    assert normalize(MessageKind.FINAL_RESULT, payload) is None

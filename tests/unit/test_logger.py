from petcatalog.utils.logger import add_trace_id, set_trace_id


def test_trace_id_is_attached_to_log_events() -> None:
    set_trace_id("req-42")
    event = add_trace_id(None, "info", {"event": "option_parse_request"})
    assert event["trace_id"] == "req-42"


def test_new_trace_id_per_request() -> None:
    first = set_trace_id()
    second = set_trace_id()

    assert len(first) == 8
    assert first != second
    assert add_trace_id(None, "info", {})["trace_id"] == second

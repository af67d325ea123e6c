from __future__ import annotations

from scenario_report.errors import RecordedError
from scenario_report.stack_trace import error_report_of, stack_trace_of


class TodoList:
    def remove(self, name: str) -> None:
        raise KeyError(name)


def _remove_missing_item() -> KeyError:
    try:
        TodoList().remove("Buy milk")
    except KeyError as exc:
        return exc
    raise AssertionError("remove() should have raised")


def _nested_failure() -> ValueError:
    def parse() -> None:
        raise ValueError("not a number")

    try:
        parse()
    except ValueError as exc:
        return exc
    raise AssertionError("parse() should have raised")


def test_frames_are_innermost_first_with_declaring_class() -> None:
    frames = stack_trace_of(_remove_missing_item())

    assert [frame.method_name for frame in frames] == ["remove", "_remove_missing_item"]
    assert frames[0].declaring_class == "TodoList"
    assert frames[1].declaring_class == "_remove_missing_item"
    assert frames[0].file_name == __file__
    assert frames[0].line_number > 0


def test_nested_function_falls_back_to_function_name() -> None:
    frames = stack_trace_of(_nested_failure())

    assert frames[0].method_name == "parse"
    assert frames[0].declaring_class == "parse"


def test_error_without_traceback_has_empty_stack() -> None:
    assert stack_trace_of(RuntimeError("never raised")) == []


def test_recorded_error_keeps_its_frames() -> None:
    error = RecordedError(
        "Timed out",
        error_type="TimeoutError",
        frames=[{"declaringClass": "Browser", "methodName": "click", "fileName": "browser.js", "lineNumber": 42}],
    )

    report = error_report_of(error).as_serializable()

    assert report == {
        "errorType": "TimeoutError",
        "message": "Timed out",
        "stackTrace": [
            {"declaringClass": "Browser", "methodName": "click", "fileName": "browser.js", "lineNumber": 42}
        ],
    }


def test_no_error_no_report() -> None:
    assert error_report_of(None) is None


def test_message_is_the_raw_argument() -> None:
    report = error_report_of(_remove_missing_item())

    assert report.error_type == "KeyError"
    assert report.message == "Buy milk"


def test_message_of_error_without_arguments() -> None:
    assert error_report_of(RuntimeError()).message == ""

"""Tests for bridge.processor: decode, correlate, render, resume."""

import json
import random

from bitbridge.bridge.pending import PendingRequestTable
from bitbridge.bridge.processor import ResponseProcessor
from bitbridge.bridge.resume import ResumeSignal
from bitbridge.protocol.builder import RequestBuilder, RequestIdAllocator
from bitbridge.protocol.models import OperationKind, Request


def _processor(reporter=None):
    table = PendingRequestTable()
    resume = ResumeSignal()
    return table, resume, ResponseProcessor(table, resume, reporter)


def _reply(request_id: int, **fields) -> str:
    return json.dumps({"jsonrpc": "2.0", "id": request_id, **fields})


def test_push_file_result_renders_filename_from_request() -> None:
    table, resume, processor = _processor()
    table.register(
        Request(
            id=7,
            method=OperationKind.PUSH_FILE,
            params={"server": "home", "filename": "a.js", "content": "x"},
        )
    )
    outcome = processor.process(_reply(7, result="ok", error=None))
    assert outcome.ok is True
    assert outcome.filename == "a.js"
    assert outcome.text == "a.js: ok"
    assert table.is_empty()
    assert resume.wakes == 1


def test_list_result_renders_all_names() -> None:
    table, _, processor = _processor()
    table.register(Request(id=3, method=OperationKind.GET_FILE_NAMES, params={"server": "home"}))
    outcome = processor.process(_reply(3, result=["a.js", "b.js"], error=None))
    assert outcome.ok is True
    assert outcome.result == ["a.js", "b.js"]
    assert outcome.text.splitlines() == ["a.js", "b.js"]
    assert table.resolve(3) is None


def test_other_kinds_render_raw_result() -> None:
    table, _, processor = _processor()
    request = RequestBuilder().get_definition_file()
    table.register(request)
    outcome = processor.process(_reply(request.id, result="interface NS {}"))
    assert outcome.operation is OperationKind.GET_DEFINITION_FILE
    assert outcome.text == "interface NS {}"


def test_unknown_id_is_reported_and_processing_continues() -> None:
    seen = []
    table, resume, processor = _processor(seen.append)
    request = RequestBuilder().get_file_names()
    table.register(request)

    assert processor.process(_reply(42, result="OK")) is None
    assert processor.correlation_errors == 1
    assert table.pending_ids() == [request.id]
    assert resume.wakes == 0

    outcome = processor.process(_reply(request.id, result=["x.js"]))
    assert outcome is not None and outcome.ok
    assert seen == [outcome]
    assert table.is_empty()


def test_duplicate_reply_is_a_correlation_error() -> None:
    table, resume, processor = _processor()
    request = RequestBuilder().get_file_names()
    table.register(request)
    assert processor.process(_reply(request.id, result=[])) is not None
    assert processor.process(_reply(request.id, result=[])) is None
    assert processor.correlation_errors == 1
    assert resume.wakes == 1


def test_decode_error_is_discarded() -> None:
    table, resume, processor = _processor()
    request = RequestBuilder().get_file_names()
    table.register(request)
    assert processor.process("{garbage") is None
    assert processor.process('{"result": "no id"}') is None
    assert processor.decode_errors == 2
    assert len(table) == 1
    assert resume.wakes == 0


def test_remote_error_tagged_with_operation_and_filename() -> None:
    table, _, processor = _processor()
    builder = RequestBuilder()
    failing = builder.push_file("sub/b.js", "x")
    other = builder.push_file("a.js", "y")
    table.register_all([failing, other])

    outcome = processor.process(_reply(failing.id, error="Invalid filename"))
    assert outcome.ok is False
    assert outcome.error.code == "REMOTE_ERROR"
    assert outcome.error.operation == "pushFile"
    assert outcome.error.filename == "sub/b.js"
    assert "Invalid filename" in outcome.text
    assert table.pending_ids() == [other.id]


def test_empty_reply_is_an_error_not_ignored() -> None:
    table, resume, processor = _processor()
    request = RequestBuilder().get_file_names()
    table.register(request)
    outcome = processor.process(_reply(request.id))
    assert outcome.ok is False
    assert outcome.error.code == "EMPTY_RESPONSE"
    assert table.is_empty()
    assert resume.wakes == 1


def test_resume_fires_once_after_last_of_many_replies() -> None:
    table, resume, processor = _processor()
    builder = RequestBuilder(RequestIdAllocator())
    requests = [builder.push_file(f"{i}.js", "") for i in range(25)]
    table.register_all(requests)
    order = [r.id for r in requests]
    random.Random(3).shuffle(order)

    for index, request_id in enumerate(order):
        processor.process(_reply(request_id, result="OK"))
        expected = 1 if index == len(order) - 1 else 0
        assert resume.wakes == expected
    assert table.is_empty()


def test_reporter_failure_does_not_break_processing() -> None:
    def _boom(_outcome):
        raise RuntimeError("render failed")

    table, resume, processor = _processor(_boom)
    request = RequestBuilder().get_file_names()
    table.register(request)
    outcome = processor.process(_reply(request.id, result=["a.js"]))
    assert outcome is not None
    assert resume.wakes == 1

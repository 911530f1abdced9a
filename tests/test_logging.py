"""Tests for log context propagation."""

import asyncio
import logging

import pytest

from expensebot.core.logging import ContextFilter, LogContext, get_log_context, get_logger


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.addFilter(ContextFilter())

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    handler = ListHandler()
    logger = logging.getLogger("expensebot")
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)


def test_logger_names_are_module_names():
    assert get_logger("expensebot.flow.engine").name == "expensebot.flow.engine"


def test_context_is_attached_to_records(captured):
    logger = get_logger("expensebot.tests")
    with LogContext(user_id="u1"):
        with LogContext(expense_id="e1"):
            logger.info("inside")
    logger.info("outside")

    inside, outside = captured.records
    assert (inside.user_id, inside.expense_id) == ("u1", "e1")
    assert not hasattr(outside, "user_id")


def test_explicit_extra_wins_over_context(captured):
    logger = get_logger("expensebot.tests")
    with LogContext(user_id="u1", post_id="p1"):
        logger.info("override", extra={"post_id": "p2"})

    record = captured.records[0]
    assert record.post_id == "p2"
    assert record.user_id == "u1"


@pytest.mark.asyncio
async def test_concurrent_contexts_do_not_leak(captured):
    logger = get_logger("expensebot.tests")
    a_entered = asyncio.Event()
    b_entered = asyncio.Event()
    a_exited = asyncio.Event()

    async def first():
        with LogContext(user_id="alice"):
            a_entered.set()
            await b_entered.wait()
            logger.info("first")
        a_exited.set()

    async def second():
        await a_entered.wait()
        with LogContext(user_id="bob"):
            b_entered.set()
            await a_exited.wait()
            logger.info("second")

    await asyncio.gather(first(), second())
    logger.warning("unrelated")

    by_message = {record.getMessage(): record for record in captured.records}
    assert by_message["first"].user_id == "alice"
    assert by_message["second"].user_id == "bob"
    assert not hasattr(by_message["unrelated"], "user_id")
    assert get_log_context() == {}


@pytest.mark.asyncio
async def test_dialog_steps_log_with_user_context(engine, captured):
    from expensebot.core.logging import setup_logging

    setup_logging("INFO")
    try:
        replies = await engine.handle_message("u1", "expense")
        replies += await engine.handle_message("u1", "DE89370400440532013000")
    finally:
        setup_logging("DEBUG")

    assert len(replies) == 3
    progress = [r for r in captured.records if r.getMessage().startswith("Draft now at")]
    assert [r.user_id for r in progress] == ["u1", "u1"]

"""Tests for the approval callback and event webhook endpoints."""

import asyncio
import json
import logging

import pytest
from fastapi.testclient import TestClient

from expensebot.api.deps import get_chat, get_record_store
from expensebot.main import app
from expensebot.models.expense import Expense, ExpenseState

CALLBACK_BODY = {"post_id": "claim1", "channel_id": "finance", "user_id": "approver"}
AUTH = {"Mattermost-User-ID": "approver"}


@pytest.fixture
def client(store, chat):
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_chat] = lambda: chat
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def expense(store):
    expense = Expense(
        id="e1",
        post_id="dm_post",
        user_id="u1",
        state=ExpenseState.SUBMITTED,
        account="DE89370400440532013000",
        name="Jane Doe",
        amount="42.50",
        description="taxi",
        file_ids=["f1"],
    )
    asyncio.run(store.save_expense(expense))
    return expense


def stored_state(store, expense_id):
    return asyncio.run(store.get_expense(expense_id)).state


def posted_event(message="expense", channel_type="D", user_id="u1", file_ids=None):
    return {
        "event": "posted",
        "data": {
            "channel_type": channel_type,
            "post": {
                "id": "m1",
                "user_id": user_id,
                "channel_id": "dm_u1",
                "message": message,
                "file_ids": file_ids or [],
            },
        },
    }


class TestExpenseCallback:

    def test_missing_user_header_is_401(self, client, store, expense):
        response = client.post("/api/expenses/e1/Paid", json=CALLBACK_BODY)

        assert response.status_code == 401
        assert stored_state(store, "e1") == ExpenseState.SUBMITTED

    def test_malformed_body_is_400(self, client, store, expense):
        response = client.post(
            "/api/expenses/e1/Paid",
            content=b"not json",
            headers={**AUTH, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.text == "invalid request"
        assert stored_state(store, "e1") == ExpenseState.SUBMITTED

    def test_body_without_post_id_is_400(self, client, expense):
        response = client.post("/api/expenses/e1/Paid", json={"channel_id": "finance"}, headers=AUTH)
        assert response.status_code == 400

    def test_unknown_state_is_400(self, client, store, chat, expense):
        response = client.post("/api/expenses/e1/Archived", json=CALLBACK_BODY, headers=AUTH)

        assert response.status_code == 400
        assert "Archived" in response.text
        assert stored_state(store, "e1") == ExpenseState.SUBMITTED
        assert chat.updates == []

    def test_unknown_expense_is_404(self, client, backend):
        response = client.post("/api/expenses/missing/Paid", json=CALLBACK_BODY, headers=AUTH)

        assert response.status_code == 404
        assert "missing" in response.text
        assert backend.keys() == []

    @pytest.mark.parametrize("state", ["Paid", "Rejected", "Submitted"])
    def test_state_change_returns_ok(self, client, store, chat, expense, state):
        response = client.post(f"/api/expenses/e1/{state}", json=CALLBACK_BODY, headers=AUTH)

        assert response.status_code == 200
        assert response.text == "OK"
        assert stored_state(store, "e1") == ExpenseState(state)
        assert [post["id"] for post in chat.updates] == ["dm_post", "claim1"]

    def test_failed_post_update_is_500(self, client, store, chat, expense):
        chat.fail_on.add("update_post")

        response = client.post("/api/expenses/e1/Rejected", json=CALLBACK_BODY, headers=AUTH)

        assert response.status_code == 500
        assert "failed to update" in response.text
        assert stored_state(store, "e1") == ExpenseState.REJECTED

    def test_failed_render_is_logged(self, client, store, chat, expense, caplog):
        chat.fail_on.add("get_file_info")

        with caplog.at_level(logging.ERROR):
            response = client.post("/api/expenses/e1/Paid", json=CALLBACK_BODY, headers=AUTH)

        assert response.status_code == 500
        assert stored_state(store, "e1") == ExpenseState.PAID
        failures = [r for r in caplog.records if r.levelno == logging.ERROR and getattr(r, "expense_id", None) == "e1"]
        assert any("State change to Paid failed" in r.getMessage() for r in failures)


class TestWebhook:

    def test_direct_message_is_processed(self, client, chat):
        response = client.post("/api/v1/webhook", json=posted_event())

        assert response.status_code == 200
        assert response.json() == {"status": "processed", "reason": None, "replies": 2}
        assert len(chat.direct_messages) == 2

    def test_channel_message_is_ignored(self, client, chat):
        response = client.post("/api/v1/webhook", json=posted_event(channel_type="O"))

        assert response.json()["status"] == "ignored"
        assert chat.direct_messages == []

    def test_own_message_is_ignored(self, client):
        response = client.post("/api/v1/webhook", json=posted_event(user_id="bot"))
        assert response.json()["reason"] == "own_message"

    def test_other_events_are_ignored(self, client):
        response = client.post("/api/v1/webhook", json={"event": "typing", "data": {}})
        assert response.json() == {"status": "ignored", "reason": "unsupported_event", "replies": 0}

    @pytest.mark.parametrize("payload", [
        [1, 2],
        {"event": "posted", "data": {"post": {}}},
        {"event": "posted", "data": "not an object"},
        {"event": "posted", "data": {"post": "{\"user_id\": \"u1\"}"}},
        {"event": "posted", "data": {"post": "not json"}},
        {"event": "posted", "data": {"post": ["m1"]}},
    ])
    def test_invalid_payload_is_400(self, client, payload):
        response = client.post("/api/v1/webhook", json=payload)

        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_full_dialog_over_webhook(self, client, store, chat):
        for text in ["expense", "DE89370400440532013000", "Jane Doe", "42.50", "taxi"]:
            client.post("/api/v1/webhook", json=posted_event(text))
        response = client.post("/api/v1/webhook", json=posted_event("", file_ids=["f1"]))

        assert response.json()["status"] == "processed"
        assert asyncio.run(store.get_draft("u1")) is None
        assert len(chat.channel_posts) == 1

    def test_verification_endpoint(self, client):
        assert client.get("/api/v1/webhook").json()["status"] == "ok"

    def test_json_encoded_post_is_decoded(self, client, chat):
        event = posted_event()
        event["data"]["post"] = json.dumps(event["data"]["post"])

        response = client.post("/api/v1/webhook", json=event)

        assert response.json()["status"] == "processed"
        assert len(chat.direct_messages) == 2

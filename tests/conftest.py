"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("BOT_USER_ID", "bot")
os.environ.setdefault("EXPENSE_CHANNEL_ID", "finance")
os.environ.setdefault("SITE_URL", "https://chat.example.com")
os.environ.setdefault("CALLBACK_BASE_URL", "/plugins/expensebot")
os.environ.setdefault("LOG_LEVEL", "INFO")

from expensebot.core.config import get_settings  # noqa: E402
from expensebot.core.exceptions import ChatServiceError  # noqa: E402
from expensebot.core.logging import setup_logging  # noqa: E402
from expensebot.db.kvstore import MemoryKVBackend  # noqa: E402
from expensebot.flow.engine import ConversationEngine  # noqa: E402
from expensebot.services.expense_service import ExpenseService  # noqa: E402
from expensebot.services.record_store import RecordStore  # noqa: E402


class FakeChatService:
    """
    In-memory stand-in for the chat server.

    Add method names to `fail_on` to make those calls raise ChatServiceError.
    """

    def __init__(self, bot_user_id="bot"):
        self.bot_user_id = bot_user_id
        self.posts = {}
        self.direct_messages = []
        self.channel_posts = []
        self.updates = []
        self.channels = {}
        self.users = {"u1": {"id": "u1", "first_name": "Jane", "last_name": "Doe"}}
        self.files = {"f1": {"id": "f1", "name": "receipt.jpg"}}
        self.fail_on = set()
        self._next_id = 0

    def _check(self, name):
        if name in self.fail_on:
            raise ChatServiceError(f"{name} failed")

    def _new_id(self):
        self._next_id += 1
        return f"post{self._next_id}"

    async def get_channel(self, channel_id):
        self._check("get_channel")
        return self.channels.get(channel_id, {"id": channel_id, "type": "O"})

    async def is_channel_member(self, channel_id, user_id):
        return "is_channel_member" not in self.fail_on

    async def get_direct_channel(self, user_id):
        self._check("get_direct_channel")
        return {"id": f"dm_{user_id}", "type": "D"}

    async def create_post(self, channel_id, message, file_ids=None, props=None, is_pinned=False):
        self._check("create_post")
        post = {
            "id": self._new_id(),
            "channel_id": channel_id,
            "message": message,
            "file_ids": file_ids or [],
            "props": props or {},
            "is_pinned": is_pinned,
        }
        self.posts[post["id"]] = post
        if not channel_id.startswith("dm_"):
            self.channel_posts.append(post)
        return post

    async def send_direct_message(self, user_id, message, is_pinned=False):
        self._check("send_direct_message")
        channel = await self.get_direct_channel(user_id)
        post = await self.create_post(channel["id"], message, is_pinned=is_pinned)
        self.direct_messages.append((user_id, message))
        return post

    async def update_post(self, post_id, message, file_ids=None, props=None):
        self._check("update_post")
        post = dict(self.posts.get(post_id, {"id": post_id}))
        post["message"] = message
        if file_ids is not None:
            post["file_ids"] = file_ids
        if props is not None:
            post["props"] = props
        self.posts[post_id] = post
        self.updates.append(post)
        return post

    async def get_user(self, user_id):
        self._check("get_user")
        return self.users.get(user_id, {"id": user_id, "first_name": "", "last_name": ""})

    async def get_file_info(self, file_id):
        self._check("get_file_info")
        return self.files.get(file_id, {"id": file_id, "name": file_id})

    async def close(self):
        pass


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    # Same handler, filter and formatter as the running service
    setup_logging("DEBUG")


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def backend():
    return MemoryKVBackend()


@pytest.fixture
def store(backend):
    return RecordStore(backend)


@pytest.fixture
def chat():
    return FakeChatService()


@pytest.fixture
def expense_service(store, chat, settings):
    return ExpenseService(store, chat, settings)


@pytest.fixture
def engine(store, expense_service):
    return ConversationEngine(store, expense_service)

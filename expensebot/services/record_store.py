"""
expensebot/services/record_store.py

Purpose: Durable persistence of drafts, expenses and user defaults

- One namespaced key per record in a shared flat key space
- Each entity is serialized on its own (no cross-entity transaction)
- Absent or empty records load as None, never as an error
- Undecodable records (unknown state values, missing fields) raise StorageError
"""

from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger
from expensebot.db.kvstore import KVBackend
from expensebot.models.draft import Draft
from expensebot.models.expense import Expense, UserDefaults

logger = get_logger(__name__)

USER_DEFAULTS_PREFIX = "user:"
DRAFT_PREFIX = "draft:"
EXPENSE_PREFIX = "expense:"

RecordT = TypeVar("RecordT", bound=BaseModel)


def user_defaults_key(user_id: str) -> str:
    return USER_DEFAULTS_PREFIX + user_id


def draft_key(user_id: str) -> str:
    return DRAFT_PREFIX + user_id


def expense_key(expense_id: str) -> str:
    return EXPENSE_PREFIX + expense_id


class RecordStore:
    """
    Typed access to the three record kinds on top of a KVBackend.
    """

    def __init__(self, backend: KVBackend):
        self.backend = backend

    async def get_user_defaults(self, user_id: str) -> Optional[UserDefaults]:
        return await self._load(user_defaults_key(user_id), UserDefaults)

    async def save_user_defaults(self, defaults: UserDefaults) -> None:
        await self._store(user_defaults_key(defaults.user_id), defaults)

    async def get_draft(self, user_id: str) -> Optional[Draft]:
        return await self._load(draft_key(user_id), Draft)

    async def save_draft(self, user_id: str, draft: Draft) -> None:
        await self._store(draft_key(user_id), draft)

    async def delete_draft(self, user_id: str) -> None:
        await self.backend.delete(draft_key(user_id))
        logger.debug(f"Deleted {draft_key(user_id)}")

    async def get_expense(self, expense_id: str) -> Optional[Expense]:
        return await self._load(expense_key(expense_id), Expense)

    async def save_expense(self, expense: Expense) -> None:
        await self._store(expense_key(expense.id), expense)

    async def ping(self) -> bool:
        return await self.backend.ping()

    async def _load(self, key: str, model: Type[RecordT]) -> Optional[RecordT]:
        raw = await self.backend.get(key)
        if not raw:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise StorageError(f"failed to decode {key}", details={"errors": e.error_count()}) from e

    async def _store(self, key: str, record: BaseModel) -> None:
        payload = record.model_dump(mode="json", by_alias=True, exclude_none=True)
        await self.backend.set(key, payload)
        logger.debug(f"Stored {key}")

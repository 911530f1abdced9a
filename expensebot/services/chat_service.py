"""
expensebot/services/chat_service.py

Purpose: Chat server REST integration

- Posts and updates messages (direct and shared channel)
- Looks up channels, channel membership, users and file metadata
- Acts as the bot account (bearer token)

Every failure raises ChatServiceError; callers decide whether a failed
delivery aborts their operation or is only logged.
"""

import httpx
from typing import Any, Dict, List, Optional

from expensebot.core.config import Settings, get_settings
from expensebot.core.exceptions import ChatServiceError
from expensebot.core.logging import get_logger

logger = get_logger(__name__)

DIRECT_CHANNEL_TYPE = "D"


class ChatService:
    """Service for talking to the chat server as the bot user"""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self.bot_user_id = settings.BOT_USER_ID
        headers = {}
        if settings.CHAT_BOT_TOKEN:
            headers["Authorization"] = f"Bearer {settings.CHAT_BOT_TOKEN}"
        self._client = httpx.AsyncClient(
            base_url=f"{settings.CHAT_SERVER_URL.rstrip('/')}/api/v4",
            headers=headers,
            timeout=settings.CHAT_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _request(self, method: str, path: str, json: Any = None) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error(f"Chat server timeout: {method} {path}")
            raise ChatServiceError(f"chat server timeout on {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"Chat server request failed: {method} {path}: {e}")
            raise ChatServiceError(f"chat server request failed on {method} {path}: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(f"Chat server error: {response.status_code} - {response.text[:200]}")
            raise ChatServiceError(
                f"chat server returned {response.status_code} on {method} {path}",
                details={"status_code": response.status_code},
            )

        if not response.content:
            return {}
        return response.json()

    async def get_channel(self, channel_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/channels/{channel_id}")

    async def is_channel_member(self, channel_id: str, user_id: str) -> bool:
        try:
            member = await self._request("GET", f"/channels/{channel_id}/members/{user_id}")
        except ChatServiceError:
            return False
        return bool(member)

    async def get_direct_channel(self, user_id: str) -> Dict[str, Any]:
        """Gets (or creates) the direct channel between the bot and a user."""
        return await self._request("POST", "/channels/direct", json=[self.bot_user_id, user_id])

    async def create_post(
        self,
        channel_id: str,
        message: str,
        file_ids: Optional[List[str]] = None,
        props: Optional[Dict[str, Any]] = None,
        is_pinned: bool = False,
    ) -> Dict[str, Any]:
        """
        Creates a post as the bot.

        Returns:
            The created post, including its "id"
        """
        body: Dict[str, Any] = {"channel_id": channel_id, "message": message}
        if file_ids:
            body["file_ids"] = file_ids
        if props:
            body["props"] = props

        post = await self._request("POST", "/posts", json=body)
        if is_pinned:
            await self._request("POST", f"/posts/{post['id']}/pin")
            post["is_pinned"] = True

        logger.info(f"Post created: {post.get('id')}", extra={"channel_id": channel_id})
        return post

    async def send_direct_message(self, user_id: str, message: str, is_pinned: bool = False) -> Dict[str, Any]:
        channel = await self.get_direct_channel(user_id)
        return await self.create_post(channel["id"], message, is_pinned=is_pinned)

    async def update_post(
        self,
        post_id: str,
        message: str,
        file_ids: Optional[List[str]] = None,
        props: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Updates an existing post in place (same id)."""
        body: Dict[str, Any] = {"message": message}
        if file_ids is not None:
            body["file_ids"] = file_ids
        if props is not None:
            body["props"] = props

        post = await self._request("PUT", f"/posts/{post_id}/patch", json=body)
        logger.info(f"Post updated: {post_id}", extra={"post_id": post_id})
        return post

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/users/{user_id}")

    async def get_file_info(self, file_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/files/{file_id}/info")

    async def close(self):
        await self._client.aclose()


_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the global chat service instance."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


async def close_chat_service():
    """Close chat service and cleanup resources."""
    global _chat_service
    if _chat_service:
        await _chat_service.close()
        _chat_service = None

from __future__ import annotations

import time
from typing import Dict, List, Optional, Tuple

from ..db import get_db
from ..models.message import ConversationSummary, ConversationUser, Message, MessageCreateRequest
from ..repositories.message import MessageRepository
from ..repositories.user import UserRepository
from .exceptions import InvalidArgumentError


def _clean_id(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _latest_per_counterparty(user_id: str, messages: List[Message]) -> Dict[str, Message]:
    """Reduce a flat message list to the newest message exchanged with each counterparty."""

    latest: Dict[str, Message] = {}
    for message in messages:
        other = message.recipient if message.sender == user_id else message.sender
        if other == user_id:
            continue
        current = latest.get(other)
        if current is None or (message.timestamp, message.id) > (current.timestamp, current.id):
            latest[other] = message
    return latest


class MessageService:
    """Direct messages between users: send, fetch a thread, list conversations."""

    def __init__(self, messages: MessageRepository, users: UserRepository) -> None:
        self._messages = messages
        self._users = users

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def send_message(self, payload: MessageCreateRequest) -> Message:
        sender = _clean_id(payload.sender)
        recipient = _clean_id(payload.recipient)
        text = payload.text if isinstance(payload.text, str) else ""
        if not sender or not recipient or not text.strip():
            raise InvalidArgumentError("Missing required fields")
        return await self._messages.create_message(
            sender=sender,
            recipient=recipient,
            text=text,
            timestamp=self._now_ms(),
        )

    async def get_thread(self, user_id: str, other_user_id: str) -> List[Message]:
        """Return the thread oldest-first, marking messages addressed to ``user_id`` as read."""

        user_id = _clean_id(user_id)
        other_user_id = _clean_id(other_user_id)
        await self._messages.mark_thread_read(sender=other_user_id, recipient=user_id)
        return await self._messages.get_thread(user_id, other_user_id)

    async def list_conversations(self, user_id: str) -> List[ConversationSummary]:
        user_id = _clean_id(user_id)
        messages = await self._messages.list_for_participant(user_id)
        latest = _latest_per_counterparty(user_id, messages)
        if not latest:
            return []

        users = await self._users.get_many(latest.keys())
        ordered: List[Tuple[Tuple[int, object], ConversationSummary]] = []
        for other_id, message in latest.items():
            other = users.get(other_id)
            if other is None:
                continue
            summary = ConversationSummary(
                other_user_id=other_id,
                other_user=ConversationUser(id=other.user_id, name=other.name, image=other.display_image),
                last_message=message.text,
                timestamp=message.timestamp,
                unread=message.sender == other_id and not message.read,
            )
            ordered.append(((message.timestamp, message.id), summary))

        ordered.sort(key=lambda item: item[0], reverse=True)
        return [summary for _, summary in ordered]


def get_message_service() -> MessageService:
    db = get_db()
    return MessageService(MessageRepository(db), UserRepository(db))


__all__ = ["MessageService", "get_message_service"]

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..models.message import ConversationSummary, Message, MessageCreateRequest
from ..services.exceptions import InvalidArgumentError
from ..services.message_service import MessageService, get_message_service

router = APIRouter(prefix="/messages", tags=["messages"])


# Declared before the two-segment thread route so "conversations" is not read as a user id.
@router.get("/conversations/{user_id}", response_model=List[ConversationSummary])
async def list_conversations(
    user_id: str,
    service: MessageService = Depends(get_message_service),
) -> List[ConversationSummary]:
    return await service.list_conversations(user_id)


@router.get("/{user_id}/{other_user_id}", response_model=List[Message])
async def get_thread(
    user_id: str,
    other_user_id: str,
    service: MessageService = Depends(get_message_service),
) -> List[Message]:
    return await service.get_thread(user_id, other_user_id)


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreateRequest,
    service: MessageService = Depends(get_message_service),
) -> Message:
    try:
        return await service.send_message(payload)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


__all__ = ["router"]

# 📄 File: sprout/modules/messaging/presentation/api/v1/chats.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for the inbox, a conversation, sending a message and seeing who you
# are talking to.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over ChatService. GET /chats/{id}/messages?since=... is the polling
# endpoint for new messages.
#
# 🔗 Dependencies:
# - FastAPI router, ChatService, chat and user schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sprout.modules.messaging.domain.services.chat_service import ChatService
from sprout.modules.messaging.presentation.api.schemas.chat_schemas import (
    ChatCreateRequest,
    ChatListResponse,
    ChatResponse,
    MarkReadResponse,
    MessageCreateRequest,
    MessageListResponse,
    MessageResponse,
)
from sprout.modules.user_management.presentation.api.schemas.user_schemas import PublicProfileResponse
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/chats", tags=["Messaging"])


@router.get("", response_model=ChatListResponse, summary="My conversations")
async def get_my_chats(
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> ChatListResponse:
    chats = await chat_service.get_user_chats(current_user.user_id)
    return ChatListResponse(chats=[ChatResponse.from_domain(c) for c in chats])


@router.post(
    "",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Open a conversation",
    description="Returns the existing chat with this member or creates it",
    responses={404: {"description": "Member not found"}, 422: {"description": "Chat with yourself"}},
)
async def create_or_get_chat(
    request: ChatCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> ChatResponse:
    chat = await chat_service.create_or_get_chat(current_user.user_id, request.other_user_id)
    return ChatResponse.from_domain(chat)


@router.get("/{chat_id}", response_model=ChatResponse, summary="Get a conversation")
async def get_chat(
    chat_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> ChatResponse:
    return ChatResponse.from_domain(await chat_service.get_chat(chat_id, current_user.user_id))


@router.get(
    "/{chat_id}/messages",
    response_model=MessageListResponse,
    summary="Read messages",
    description="Oldest first. Pass the timestamp of the newest message you have as `since` to poll.",
)
async def get_messages(
    chat_id: str,
    since: Optional[datetime] = Query(None, description="Only messages after this instant"),
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> MessageListResponse:
    messages = await chat_service.get_messages(chat_id, current_user.user_id, since=since)
    return MessageListResponse(messages=[MessageResponse.from_domain(m) for m in messages])


@router.post(
    "/{chat_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    chat_id: str,
    request: MessageCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> MessageResponse:
    message = await chat_service.send_message(chat_id, current_user.user_id, request.text)
    return MessageResponse.from_domain(message)


@router.get("/{chat_id}/participant", response_model=PublicProfileResponse, summary="Who am I talking to")
async def get_other_participant(
    chat_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> PublicProfileResponse:
    other = await chat_service.get_other_participant_profile(chat_id, current_user.user_id)
    return PublicProfileResponse.from_domain(other)


@router.post("/{chat_id}/read", response_model=MarkReadResponse, summary="Mark a conversation as read")
async def mark_chat_read(
    chat_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    chat_service: ChatService = Depends(),
) -> MarkReadResponse:
    return MarkReadResponse(updated=await chat_service.mark_chat_read(chat_id, current_user.user_id))

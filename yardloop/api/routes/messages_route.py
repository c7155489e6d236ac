from fastapi import APIRouter, Depends, Response, status

from yardloop.api.dependencies import get_request_context
from yardloop.schemas.message_schema import (
    ConversationCreate,
    ConversationRead,
    ConversationSummary,
    MessageCreate,
    MessageRead,
)
from yardloop.services.context import RequestContext
from yardloop.services.message.message_service import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get(
    "/conversations",
    response_model=list[ConversationSummary],
    summary="Get conversations of current user",
)
async def get_conversations(
    *,
    ctx: RequestContext = Depends(get_request_context),
    message_service: MessageService = Depends(MessageService.get_dependency),
):
    return await message_service.list_conversations(ctx)


@router.post(
    "/conversations",
    response_model=ConversationRead,
    responses={status.HTTP_201_CREATED: {"model": ConversationRead}},
    summary="Start or reopen a conversation about a listing",
)
async def start_conversation(
    *,
    conversation_data: ConversationCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    message_service: MessageService = Depends(MessageService.get_dependency),
):
    conversation, created = await message_service.start_conversation(
        ctx, conversation_data.listing_id
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return conversation


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=list[MessageRead],
    summary="Get messages of a conversation",
)
async def get_messages(
    *,
    conversation_id: int,
    ctx: RequestContext = Depends(get_request_context),
    message_service: MessageService = Depends(MessageService.get_dependency),
):
    return await message_service.list_messages(ctx, conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    *,
    conversation_id: int,
    message_data: MessageCreate,
    ctx: RequestContext = Depends(get_request_context),
    message_service: MessageService = Depends(MessageService.get_dependency),
):
    return await message_service.send_message(ctx, conversation_id, message_data)

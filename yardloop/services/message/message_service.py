import logging

from fastapi import Depends
from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import desc, select

from yardloop.api.dependencies import get_async_session
from yardloop.api.realtime import notify_user
from yardloop.models.conversation_model import Conversation, Message
from yardloop.models.listing_model import Listing
from yardloop.models.timestamps import utc_now
from yardloop.schemas.message_schema import (
    ConversationSummary,
    LastMessage,
    MessageCreate,
    MessageRead,
)
from yardloop.services.context import RequestContext
from yardloop.services.exceptions import EntityNotFound, NotAuthorized, ValidationFailed

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "new_message"


class MessageService:
    """Buyer to seller conversations, one per listing and buyer."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _conversation_for(
        self, ctx: RequestContext, conversation_id: int, action: str
    ) -> tuple[Conversation, int]:
        user_id = ctx.require_user(action)
        result = await self.session.execute(
            select(Conversation)
            .options(selectinload(Conversation.buyer), selectinload(Conversation.seller))
            .where(Conversation.id == conversation_id)
        )
        conversation = result.scalars().one_or_none()
        if conversation is None:
            raise EntityNotFound(f"Conversation with ID {conversation_id} not found.")
        if user_id not in (conversation.buyer_id, conversation.seller_id):
            raise NotAuthorized("Only participants can access this conversation.")
        return conversation, user_id

    async def _find_conversation(
        self, listing_id: int, buyer_id: int, seller_id: int
    ) -> Conversation | None:
        result = await self.session.execute(
            select(Conversation).where(
                Conversation.listing_id == listing_id,
                Conversation.buyer_id == buyer_id,
                Conversation.seller_id == seller_id,
            )
        )
        return result.scalars().one_or_none()

    async def list_conversations(self, ctx: RequestContext) -> list[ConversationSummary]:
        user_id = ctx.require_user("read messages")
        result = await self.session.execute(
            select(Conversation)
            .options(
                selectinload(Conversation.listing),
                selectinload(Conversation.buyer),
                selectinload(Conversation.seller),
            )
            .where(
                or_(Conversation.buyer_id == user_id, Conversation.seller_id == user_id)
            )
            .order_by(desc(Conversation.updated_at), desc(Conversation.id))
        )
        conversations = result.scalars().all()
        if not conversations:
            return []
        ids = [conversation.id for conversation in conversations]

        # message ids grow with time, the highest one is the latest message
        latest_ids = (
            select(func.max(Message.id))
            .where(Message.conversation_id.in_(ids))
            .group_by(Message.conversation_id)
        )
        latest = await self.session.execute(select(Message).where(Message.id.in_(latest_ids)))
        last_messages = {
            message.conversation_id: message for message in latest.scalars().all()
        }

        unread = await self.session.execute(
            select(Message.conversation_id, func.count(Message.id))
            .where(
                Message.conversation_id.in_(ids),
                Message.sender_id != user_id,
                Message.read_at.is_(None),
            )
            .group_by(Message.conversation_id)
        )
        unread_counts = dict(unread.all())

        summaries = []
        for conversation in conversations:
            last = last_messages.get(conversation.id)
            summaries.append(
                ConversationSummary(
                    **conversation.model_dump(),
                    listing_title=conversation.listing.title,
                    listing_location=conversation.listing.location,
                    buyer_username=conversation.buyer.username,
                    buyer_avatar=conversation.buyer.avatarurl,
                    seller_username=conversation.seller.username,
                    seller_avatar=conversation.seller.avatarurl,
                    last_message=(
                        LastMessage(
                            body=last.body,
                            sender_id=last.sender_id,
                            created_at=last.created_at,
                        )
                        if last
                        else None
                    ),
                    unread_count=unread_counts.get(conversation.id, 0),
                )
            )
        return summaries

    async def start_conversation(
        self, ctx: RequestContext, listing_id: int
    ) -> tuple[Conversation, bool]:
        """
        Get or create the conversation between the caller and the seller
        of a listing.

        :return: the conversation and whether it was created by this call.
        """
        buyer_id = ctx.require_user("message a seller")
        listing = await self.session.get(Listing, listing_id)
        if listing is None:
            raise EntityNotFound(f"Listing with ID {listing_id} not found.")
        if listing.seller_id == buyer_id:
            raise ValidationFailed("You cannot message yourself about your own listing.")

        existing = await self._find_conversation(listing_id, buyer_id, listing.seller_id)
        if existing is not None:
            return existing, False

        conversation = Conversation(
            listing_id=listing_id, buyer_id=buyer_id, seller_id=listing.seller_id
        )
        self.session.add(conversation)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self._find_conversation(
                listing_id, buyer_id, listing.seller_id
            )
            if existing is None:
                raise
            return existing, False
        await self.session.refresh(conversation)
        return conversation, True

    async def list_messages(
        self, ctx: RequestContext, conversation_id: int
    ) -> list[MessageRead]:
        """Messages oldest first; the other party's messages become read."""
        conversation, user_id = await self._conversation_for(
            ctx, conversation_id, "read messages"
        )
        result = await self.session.execute(
            select(Message)
            .where(Message.conversation_id == conversation.id)
            .order_by(Message.created_at, Message.id)
        )
        messages = [MessageRead.model_validate(m) for m in result.scalars().all()]

        await self.session.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation.id,
                Message.sender_id != user_id,
                Message.read_at.is_(None),
            )
            .values(read_at=utc_now())
        )
        await self.session.commit()
        return messages

    async def send_message(
        self, ctx: RequestContext, conversation_id: int, data: MessageCreate
    ) -> MessageRead:
        conversation, user_id = await self._conversation_for(
            ctx, conversation_id, "send messages"
        )
        message = Message(conversation_id=conversation.id, sender_id=user_id, body=data.body)
        conversation.updated_at = utc_now()
        self.session.add_all([message, conversation])
        await self.session.commit()
        await self.session.refresh(message)
        sent = MessageRead.model_validate(message)

        recipient = (
            conversation.seller
            if user_id == conversation.buyer_id
            else conversation.buyer
        )
        await notify_user(
            recipient.firebase_uid, NEW_MESSAGE_EVENT, sent.model_dump(mode="json")
        )
        logger.debug("Message %s sent in conversation %s", sent.id, conversation.id)
        return sent

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "MessageService":
        return cls(session)

"""Telegram webhook endpoint."""

import secrets
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request
from pydantic import BaseModel, Field

from ..bot.transport import InboundEvent
from ..logging import get_logger

logger = get_logger("telegram")

router = APIRouter(prefix="/telegram", tags=["telegram"])


# --- Update Models ---

class TelegramUser(BaseModel):
    id: int
    username: Optional[str] = None


class TelegramChat(BaseModel):
    id: int
    type: str = "private"


class TelegramMessage(BaseModel):
    message_id: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    text: Optional[str] = None


class TelegramCallbackQuery(BaseModel):
    id: str
    from_user: TelegramUser = Field(alias="from")
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None


class TelegramUpdate(BaseModel):
    """The subset of a Bot API Update the wallet reacts to."""
    update_id: int
    message: Optional[TelegramMessage] = None
    callback_query: Optional[TelegramCallbackQuery] = None

    def to_event(self) -> Optional[InboundEvent]:
        if self.callback_query is not None:
            query = self.callback_query
            if query.message is None or query.data is None:
                return None
            return InboundEvent(
                chat_id=query.message.chat.id,
                user_id=query.from_user.id,
                callback_data=query.data,
                message_id=query.message.message_id,
                callback_id=query.id,
            )

        if self.message is not None and self.message.text is not None:
            message = self.message
            user_id = message.from_user.id if message.from_user else message.chat.id
            return InboundEvent(
                chat_id=message.chat.id,
                user_id=user_id,
                text=message.text,
                message_id=message.message_id,
            )

        return None


# --- Endpoint ---

@router.post("/webhook")
async def telegram_webhook(
    update: TelegramUpdate,
    request: Request,
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """Receive one update from the Bot API."""
    expected = request.app.state.config.webhook_secret
    if expected and not secrets.compare_digest(x_telegram_bot_api_secret_token or "", expected):
        logger.warning(f"Rejected update {update.update_id}: bad webhook secret")
        raise HTTPException(status_code=403, detail="Invalid webhook secret")

    event = update.to_event()
    if event is None:
        logger.debug(f"Ignoring update {update.update_id}")
        return {"ok": True}

    await request.app.state.bot.handle(event)
    return {"ok": True}

import logging

import socketio
from firebase_admin import auth

from yardloop.api.middleware import verify_token
from yardloop.core.config import config

logger = logging.getLogger(__name__)

sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=config.cors_origins)


@sio.event
async def connect(sid, environ, auth_data):
    token = (auth_data or {}).get("token")
    if not token:
        return False
    try:
        user = verify_token(token)
    except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError) as e:
        logger.info("Socket %s rejected: %s", sid, e)
        return False

    # one room per firebase uid, every open tab of a user joins it
    await sio.enter_room(sid, user["uid"])
    return True


@sio.event
async def disconnect(sid):
    # rooms are left automatically
    logger.debug("Socket %s disconnected", sid)


async def notify_user(firebase_uid: str, event: str, payload: dict) -> None:
    await sio.emit(event, payload, room=firebase_uid)

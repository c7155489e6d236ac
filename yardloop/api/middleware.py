import logging
import os

from fastapi import Request, status
from fastapi.responses import JSONResponse
from firebase_admin import _apps, auth, credentials, initialize_app

from yardloop.core.config import config

logger = logging.getLogger(__name__)

firebase_app = None


def init_firebase():
    global firebase_app
    if not _apps and os.getenv("TESTING") != "1":
        cred = credentials.Certificate(config.firebase_credentials)
        firebase_app = initialize_app(cred)


def verify_token(token: str) -> dict:
    return auth.verify_id_token(token, firebase_app)


async def authenticate_request(request: Request, call_next):
    """
    Attach the verified identity to request.state.user.

    A request without an Authorization header goes through as anonymous,
    the services decide which operations need a user.
    """
    request.state.user = None
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return await call_next(request)

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing authentication token"},
        )

    # the test suite overrides the identity dependency instead
    if os.getenv("TESTING") == "1":
        return await call_next(request)

    try:
        request.state.user = verify_token(token)
    except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError) as e:
        logger.info("Rejected token on %s: %s", request.url.path, e)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or expired authentication token"},
        )
    return await call_next(request)

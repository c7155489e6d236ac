import logging

import socketio
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from yardloop.api.middleware import authenticate_request, init_firebase
from yardloop.api.realtime import sio
from yardloop.api.routes import (
    auth_route,
    categories_route,
    favorites_route,
    items_route,
    listings_router,
    messages_route,
    search_route,
    users_route,
)
from yardloop.core.config import config
from yardloop.core.logging_config import setup_logging
from yardloop.db.database import init_db
from yardloop.schedulers.expire_sales import deactivate_past_sales
from yardloop.services.exceptions import (
    Conflict,
    EntityNotFound,
    NotAuthenticated,
    NotAuthorized,
    ServiceError,
    ValidationFailed,
)

setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    NotAuthorized: status.HTTP_403_FORBIDDEN,
    EntityNotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
}


async def lifespan(app: FastAPI):
    # Perform startup tasks
    init_firebase()
    await init_db()
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        deactivate_past_sales,
        "interval",
        minutes=config.sale_expiry_interval_minutes,
    )
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info("%s started (%s)", config.app_name, config.render_env)

    yield

    # Cleanup
    scheduler.shutdown()


app = FastAPI(title=config.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(authenticate_request)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy"}


app.include_router(auth_route.router)
app.include_router(listings_router, prefix="/api")
app.include_router(items_route.router, prefix="/api")
app.include_router(search_route.router, prefix="/api")
app.include_router(favorites_route.router, prefix="/api")
app.include_router(categories_route.router, prefix="/api")
app.include_router(users_route.router, prefix="/api")
app.include_router(messages_route.router, prefix="/api")

# socket.io shares the port, everything else falls through to FastAPI
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

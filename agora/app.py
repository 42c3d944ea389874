import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from agora.database import engine
from agora.exceptions import AgoraError
from agora.log import configure_logging
from agora.middleware import add_cors, add_security_headers
from agora.models import table_register
from agora.routers import (
    events,
    organizers,
    ticket_tiers,
    tickets,
    transactions,
    users,
)
from agora.settings import settings

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(table_register.metadata.create_all)
    logger.info('Database schema is ready')

    yield

    await engine.dispose()
    logger.info('Database engine disposed')


app = FastAPI(title='Agora API', lifespan=lifespan)

add_cors(app, settings)
add_security_headers(app, include_hsts=settings.is_production)


@app.exception_handler(AgoraError)
async def handle_agora_error(request: Request, exc: AgoraError):
    if exc.status_code >= 500:
        logger.error(
            '%s %s failed: %s',
            request.method,
            request.url.path,
            exc.detail,
            exc_info=exc.__cause__,
        )
    else:
        logger.warning(
            '%s %s rejected: %s', request.method, request.url.path, exc.detail
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={'detail': exc.detail, 'code': exc.code},
    )


@app.get('/health')
async def health_check():
    return {'status': 'ok', 'service': 'agora-api'}


app.include_router(users.router)
app.include_router(organizers.router)
app.include_router(events.router)
app.include_router(ticket_tiers.router)
app.include_router(tickets.router)
app.include_router(transactions.router)

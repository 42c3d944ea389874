import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from agora.settings import Settings

logger = logging.getLogger(__name__)

PREFLIGHT_MAX_AGE = 86400

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Content-Security-Policy': "default-src 'none'; frame-ancestors 'none'",
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'geolocation=(), microphone=(), camera=()',
}
HSTS_HEADER = (
    'Strict-Transport-Security',
    'max-age=31536000; includeSubDomains',
)


def add_cors(app: FastAPI, settings: Settings) -> None:
    origins = settings.allowed_origins
    if origins:
        logger.info('CORS: %d allowed origin(s)', len(origins))
    else:
        logger.warning('CORS: no origins configured, allowing any origin')
        origins = ['*']

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'OPTIONS'],
        allow_headers=[
            'content-type',
            'authorization',
            'accept',
            'origin',
            'x-requested-with',
        ],
        expose_headers=['content-length', 'content-type', 'x-request-id'],
        max_age=PREFLIGHT_MAX_AGE,
    )


def add_security_headers(app: FastAPI, include_hsts: bool) -> None:
    headers = dict(SECURITY_HEADERS)
    if include_hsts:
        headers[HSTS_HEADER[0]] = HSTS_HEADER[1]
    logger.info(
        'Security: HSTS header %s', 'enabled' if include_hsts else 'disabled'
    )

    @app.middleware('http')
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(headers)
        return response

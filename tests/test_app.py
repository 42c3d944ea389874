from http import HTTPStatus

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from agora.middleware import add_security_headers
from agora.settings import Settings

pytestmark = pytest.mark.anyio


async def test_health_check(async_client: AsyncClient):
    response = await async_client.get('/health')

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {'status': 'ok', 'service': 'agora-api'}


async def test_security_headers(async_client: AsyncClient):
    response = await async_client.get('/health')

    assert response.headers['x-content-type-options'] == 'nosniff'
    assert response.headers['x-frame-options'] == 'DENY'
    assert response.headers['content-security-policy'] == (
        "default-src 'none'; frame-ancestors 'none'"
    )
    assert 'strict-transport-security' not in response.headers


async def test_security_headers_on_errors(async_client: AsyncClient):
    response = await async_client.get('/users/not-a-uuid')

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.headers['x-frame-options'] == 'DENY'


async def test_hsts_in_production():
    app = FastAPI()
    add_security_headers(app, include_hsts=True)

    @app.get('/ping')
    async def ping():
        return {}

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url='http://test'
    ) as client:
        response = await client.get('/ping')

    assert response.headers['strict-transport-security'] == (
        'max-age=31536000; includeSubDomains'
    )


async def test_cors_preflight_for_allowed_origin(async_client: AsyncClient):
    response = await async_client.options(
        '/users',
        headers={
            'Origin': 'http://localhost:3000',
            'Access-Control-Request-Method': 'POST',
        },
    )

    assert response.status_code == HTTPStatus.OK
    assert response.headers['access-control-allow-origin'] == (
        'http://localhost:3000'
    )
    assert response.headers['access-control-max-age'] == '86400'


async def test_cors_preflight_for_unknown_origin(async_client: AsyncClient):
    response = await async_client.options(
        '/users',
        headers={
            'Origin': 'http://evil.example',
            'Access-Control-Request-Method': 'POST',
        },
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_settings_parse_allowed_origins():
    settings = Settings(
        cors_allowed_origins=' http://a.example, ,http://b.example ',
        app_env='Production',
    )

    assert settings.allowed_origins == ['http://a.example', 'http://b.example']
    assert settings.is_production

from typing import cast

import pytest

from linkshortener.dao.memory import LinkMemoryDAO, MemoryDataStore, UserMemoryDAO
from linkshortener.service import LinkService
from linkshortener.types import LambdaContext, LambdaEvent
from linkshortener.utils.config import LinkShortenerConfig


@pytest.fixture(autouse=True)
def deployed(monkeypatch):
    """Run handlers as deployed: authorizer claims only, 500 on unexpected errors."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture
def service() -> LinkService:
    """Memory-backed service on https://sho.rt/ accepting every destination."""
    store = MemoryDataStore()
    return LinkService(
        UserMemoryDAO(datastore=store),
        LinkMemoryDAO(datastore=store),
        config=LinkShortenerConfig(base_url='https://sho.rt/'),
        reachability=lambda url: True,
    )


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test'})


@pytest.fixture
def make_event():
    """Build an API Gateway proxy event."""

    def _make_event(method='GET', user_name='alice', token=None, body=None) -> LambdaEvent:
        event = {
            'httpMethod': method,
            'headers': {'Content-Type': 'application/json'},
            'pathParameters': {'token': token} if token is not None else None,
            'requestContext': {'domainName': 'testhost:1000', 'stage': 'test'},
            'body': body,
        }
        if user_name is not None:
            event['requestContext']['authorizer'] = {'claims': {'username': user_name}}
        return cast(LambdaEvent, event)

    return _make_event

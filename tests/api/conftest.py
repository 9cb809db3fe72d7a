"""Fixtures for API tests against an app built on mock providers."""

import pytest
from dishka import AsyncContainer
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from posty.adapter.email import MockNotificationSender
from posty.domain.repository import UserRepository
from posty.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def container() -> AsyncContainer:
    """Test container with all infrastructure mocked."""
    return build_test_container(None, FastapiProvider())


@pytest.fixture
def client(container: AsyncContainer):
    """Test client that does not follow redirects."""
    with TestClient(create_app(container), follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def mailbox(client: TestClient, container: AsyncContainer) -> MockNotificationSender:
    """The recording sender used by the app."""
    return client.portal.call(container.get, MockNotificationSender)


@pytest.fixture
def user_repository(client: TestClient, container: AsyncContainer) -> UserRepository:
    """The in-memory repository used by the app."""
    return client.portal.call(container.get, UserRepository)

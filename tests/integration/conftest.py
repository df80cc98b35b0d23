"""
Integration test fixtures. Overrides the record store and session registry so
API tests run against the shared in-memory DB.
"""
from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def registry():
    from learnpath.services.session_registry import LessonSessionRegistry

    return LessonSessionRegistry()


@pytest.fixture
def api_client(store, registry):
    """FastAPI TestClient with the store and registry overridden."""
    from fastapi.testclient import TestClient
    from learnpath.api import app
    from learnpath.services.record_store import get_store
    from learnpath.services.session_registry import get_session_registry

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(learner):
    """Bearer header for the test learner, signed with the configured secret."""
    from learnpath.schemas.auth_schemas import AuthTokenPayload
    from learnpath.utils.jwt import create_access_token

    token = create_access_token(
        AuthTokenPayload(
            sub=learner.user_id,
            email=learner.email,
            exp=datetime.now(timezone.utc) + timedelta(minutes=30),
        )
    )
    return {"Authorization": f"Bearer {token}"}

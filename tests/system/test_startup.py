"""
Startup checks: the application refuses to start without a signing key.
"""

import logging
import os

import pytest

from src.config import get_settings
from src.kernel.identity.exceptions import SigningKeyError
from src.kernel.identity.jwt import get_token_service, reset_token_service
from src.main import app, lifespan


@pytest.fixture
def missing_secret_key():
    """Blank SECRET_KEY with fresh settings and no cached token service."""
    previous = os.environ.get("SECRET_KEY")
    root = logging.getLogger()
    root_handlers, root_level = root.handlers[:], root.level

    os.environ["SECRET_KEY"] = ""
    get_settings.cache_clear()
    reset_token_service()
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop("SECRET_KEY", None)
        else:
            os.environ["SECRET_KEY"] = previous
        get_settings.cache_clear()
        reset_token_service()
        root.handlers[:] = root_handlers
        root.setLevel(root_level)


@pytest.mark.asyncio
async def test_startup_aborts_without_signing_key(missing_secret_key):
    with pytest.raises(SigningKeyError):
        async with lifespan(app):
            pass


def test_token_service_rebuilt_after_reset():
    first = get_token_service()
    reset_token_service()
    second = get_token_service()

    assert first is not second
    assert second.issue("ana@x.com")

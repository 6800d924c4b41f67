"""
Portfolio Backend: Application Lifespan Tests
===============================================

What:  Startup refuses to serve with a broken configuration or an
       unreachable store; shutdown releases the connection pool.
How:   Enters app.router.lifespan_context directly (ASGITransport never
       runs the lifespan). setup_logging is patched out so the test run's
       logging configuration is left alone.
"""

from unittest.mock import patch

import pytest

from portfolio_api.exceptions import ConfigError, StorageError
from portfolio_api.main import create_app


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self, app, spy_gateway):
        with patch("portfolio_api.main.setup_logging"):
            async with app.router.lifespan_context(app):
                spy_gateway.ping.assert_awaited_once()
                spy_gateway.dispose.assert_not_awaited()

        spy_gateway.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_review_key_aborts_startup(self, settings, spy_gateway, recording_mailer):
        app = create_app(
            settings=settings.model_copy(update={"review_form_key": ""}),
            gateway=spy_gateway,
            mailer=recording_mailer,
        )

        with patch("portfolio_api.main.setup_logging"):
            with pytest.raises(ConfigError) as exc_info:
                async with app.router.lifespan_context(app):
                    pytest.fail("lifespan must not yield with a broken configuration")

        assert "REVIEW_FORM_KEY" in exc_info.value.context["missing"]
        spy_gateway.ping.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreachable_store_aborts_startup(self, app, spy_gateway):
        spy_gateway.ping.side_effect = StorageError(context={"operation": "ping"})

        with patch("portfolio_api.main.setup_logging"):
            with pytest.raises(StorageError):
                async with app.router.lifespan_context(app):
                    pytest.fail("lifespan must not yield without a database")

        spy_gateway.dispose.assert_awaited_once()

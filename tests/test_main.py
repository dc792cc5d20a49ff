from unittest.mock import AsyncMock, MagicMock

from fastapi.middleware.cors import CORSMiddleware

from src.config import Settings
from src.main import create_app
from src.services.resizer import ImageResizer, build_resizer


def _make_session() -> tuple[MagicMock, MagicMock]:
    s3 = MagicMock()
    s3.head_object = AsyncMock(return_value={})
    session = MagicMock()
    session.client.return_value.__aenter__.return_value = s3
    return session, s3


class TestLifespan:
    async def test_stores_share_clients_while_running(self, settings: Settings) -> None:
        session, s3 = _make_session()
        resizer = build_resizer(settings, session=session)
        app = create_app(settings, resizer=resizer)

        async with app.router.lifespan_context(app):
            assert session.client.call_count == 2
            assert await resizer.cache.exists("a") is True
            assert await resizer.origin.exists("b") is True
            assert session.client.call_count == 2

        assert session.client.return_value.__aexit__.await_count == 2

    async def test_fake_stores_left_alone(self, settings: Settings, resizer: ImageResizer) -> None:
        app = create_app(settings, resizer=resizer)
        async with app.router.lifespan_context(app):
            assert app.state.resizer is resizer


class TestCreateApp:
    def test_no_cors_middleware(self, settings: Settings, resizer: ImageResizer) -> None:
        app = create_app(settings, resizer=resizer)
        assert all(m.cls is not CORSMiddleware for m in app.user_middleware)

    def test_settings_have_no_cors_origins(self) -> None:
        assert "cors_origins" not in Settings.model_fields

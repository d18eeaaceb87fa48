"""ASGI application factory for the Sacristy admin panel.

Run with ``sacristy serve`` or any ASGI server pointed at ``sacristy.asgi:app``.
"""

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    EngineConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar, Request, get
from litestar.config.compression import CompressionConfig
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.exceptions import HTTPException
from litestar.middleware.session.client_side import CookieBackendConfig
from litestar.response import Redirect
from litestar.static_files import create_static_files_router
from litestar.template import TemplateConfig

from sacristy.admin import admin_controllers
from sacristy.config import Settings, get_settings
from sacristy.db import models  # noqa: F401  registers tables on Base.metadata
from sacristy.db.base import Base
from sacristy.lib.errors import EntityNotFoundError
from sacristy.lib.exceptions import (
    http_exception_handler,
    internal_server_error_handler,
    not_found_handler,
)
from sacristy.lib.storage import StorageManager
from sacristy.lib.theme import refresh_theme, theme_context, theme_css
from sacristy.lib.weekdays import day_label

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"


def create_session_config(secret_key: str, max_age: int, secure: bool, cookie_domain: str | None) -> CookieBackendConfig:
    """Client-side encrypted cookie sessions.

    The secret key is hashed so it is exactly 32 bytes, whatever its length.
    """
    return CookieBackendConfig(
        secret=hashlib.sha256(secret_key.encode()).digest(),
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
        domain=cookie_domain,
    )


def create_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_kwargs: dict[str, Any] = dict(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            echo=settings.db.echo,
        )
        engine_config = EngineConfig(**engine_kwargs)

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


@get("/", include_in_schema=False)
async def root_redirect() -> Redirect:
    return Redirect(path="/admin/")


def create_app(settings: Settings | None = None) -> Litestar:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()

    db_config = create_db_config(settings)
    session_config = create_session_config(
        secret_key=settings.secret_key,
        max_age=settings.session.max_age,
        secure=not settings.debug,
        cookie_domain=settings.session.cookie_domain,
    )

    storage_manager = StorageManager(settings.storage)

    template_config = TemplateConfig(
        directory=TEMPLATE_DIR,
        engine=JinjaTemplateEngine,
        engine_callback=lambda engine: engine.engine.globals.update({
            "now": datetime.now,
            "theme_css": theme_css,
            "day_label": day_label,
        }),
    )

    # Uploaded media served from local stores
    for _, directory in storage_manager.local_mounts():
        directory.mkdir(parents=True, exist_ok=True)
    upload_routers = [
        create_static_files_router(path=url_prefix, directories=[directory], name=f"uploads-{i}")
        for i, (url_prefix, directory) in enumerate(storage_manager.local_mounts())
    ]
    static_routers = []
    if STATIC_DIR.is_dir():
        static_routers.append(create_static_files_router(path="/static", directories=[STATIC_DIR]))

    async def load_theme() -> None:
        try:
            async with db_config.get_session() as session:
                await refresh_theme(session)
        except Exception:
            logger.warning("Could not load theme settings; using defaults", exc_info=True)

    async def on_startup(_app: Litestar) -> None:
        await load_theme()

    async def refresh_stale_theme(_request: Request) -> None:
        if not theme_context.is_fresh:
            await load_theme()

    app = Litestar(
        on_startup=[on_startup],
        route_handlers=[root_redirect, *admin_controllers(), *upload_routers, *static_routers],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        middleware=[session_config.middleware],
        template_config=template_config,
        compression_config=CompressionConfig(backend="gzip"),
        before_request=refresh_stale_theme,
        exception_handlers={
            EntityNotFoundError: not_found_handler,
            HTTPException: http_exception_handler,
            Exception: internal_server_error_handler,
        },
        debug=settings.debug,
    )
    app.state.storage_manager = storage_manager
    app.state.site_name = settings.site_name

    return app


app = create_app()

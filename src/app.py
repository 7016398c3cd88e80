"""Marketplace FastAPI application.

Single web server for the ordering, revenue and promotions packages. The
composition root owns the adapters: they are created (or injected by tests)
in ``create_app`` and stored on ``app.state`` for the routers to resolve.
Orders and promotions live in the marketplace domain, whose context is
pushed for every request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from shared.domain import init_marketplace, marketplace  # noqa: E402

init_marketplace()

from catalogue.lookup.fake_adapter import InMemoryProductCatalogue  # noqa: E402
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from ordering.api import order_router  # noqa: E402
from ordering.notification import set_notification_sink  # noqa: E402
from promotions.api import promotional_router  # noqa: E402
from promotions.pool.adapter import RepositoryPromotionPool  # noqa: E402
from revenue.api import revenue_router  # noqa: E402
from shared.api import register_exception_handlers  # noqa: E402
from shared.config import get_settings  # noqa: E402
from shared.utils.logging import add_context, clear_context, configure_logging, get_logger  # noqa: E402

logger = get_logger(__name__)


def create_app(product_lookup=None, promotion_pool=None, notifier=None) -> FastAPI:
    """Build the application, falling back to in-memory adapters."""
    product_lookup = product_lookup or InMemoryProductCatalogue()

    app = FastAPI(
        title="Marketplace API",
        description="Order lifecycle, revenue allocation and promotional placements",
    )

    # -----------------------------------------------------------------------
    # Adapters
    # -----------------------------------------------------------------------
    app.state.product_lookup = product_lookup
    app.state.promotion_pool = promotion_pool or RepositoryPromotionPool(product_lookup)
    if notifier is not None:
        set_notification_sink(notifier)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the marketplace domain context and bind request details to every log line."""
        add_context(path=request.url.path, actor_id=request.headers.get("x-actor-id"))
        try:
            with marketplace.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(order_router)
    app.include_router(revenue_router)
    app.include_router(promotional_router)

    # -----------------------------------------------------------------------
    # Health / root
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "env": get_settings().env,
                "domain": {"name": marketplace.name},
            }
        )

    logger.info("Marketplace application created", env=get_settings().env)
    return app


configure_logging()
app = create_app()

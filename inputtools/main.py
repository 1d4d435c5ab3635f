import logging
from fastapi import FastAPI
from inputtools.api.routes import router as api_router
from inputtools.core import config
from inputtools.core.logging import configure_logging
from inputtools.middleware.request_id import RequestIDMiddleware
from inputtools.middleware.metrics import MetricsMiddleware
from inputtools.services.input_tools import InputToolsService


def create_app() -> FastAPI:
    configure_logging()
    settings = config.settings
    app = FastAPI(title="Input Tools IME", version="1.0.0")
    app.state.service = InputToolsService(settings)

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    logging.info(
        "input_tools_configured itc=%s num=%d simplified=%s copy_mode=%s",
        settings.INPUT_TOOLS_ITC,
        settings.INPUT_TOOLS_NUM,
        settings.SIMPLIFIED_CHINESE,
        app.state.service.copy_mode,
    )

    @app.on_event("shutdown")
    async def close_sessions():
        app.state.service.close_all()

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

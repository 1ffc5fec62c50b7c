from typing import Optional
from fastapi import FastAPI
from .config import get_settings
from .api.routers import health as health_router
from .api.routers import otp as otp_router
from .handler import OtpRelayHandler
from .observability.logging import setup_logging
from .middleware.request_context import RequestContextMiddleware
from .observability.metrics import MetricsHTTPMiddleware, metrics_app
import uvicorn

settings = get_settings()
setup_logging()

def create_app(relay: Optional[OtpRelayHandler] = None) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    # None means the process-wide handler from get_relay_handler()
    app.state.relay = relay

    # no CORSMiddleware: it would answer OPTIONS preflights itself, while the
    # relay answers every non-POST with 405 and sets Access-Control-Allow-Origin
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(MetricsHTTPMiddleware)

    app.include_router(health_router.router)
    app.add_route(otp_router.SEND_OTP_PATH, otp_router.send_otp, methods=None, include_in_schema=False)
    app.add_api_route("/metrics", metrics_app(), methods=["GET"], tags=["metrics"])

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("otp_relay.main:app", host=settings.APP_HOST, port=settings.APP_PORT)

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
from src.adapter.services.mail_sender import MailSettings, build_mail_sender
from src.app.services.reset_policy import ResetPolicy
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()]
    error_dict = {
        "code": "VALIDATION_ERROR",
        "message": f"Invalid or missing fields: {', '.join(fields)}",
    }
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Feedback Talent API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Built once per process and handed to use cases through dependencies
    app.state.reset_policy = ResetPolicy.from_config(ApplicationConfig)
    app.state.mail_sender = build_mail_sender(MailSettings.from_config(ApplicationConfig))

    from src.api.routes import auth, debug, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    if ApplicationConfig.ENABLE_DEBUG_ROUTES:
        app.include_router(debug.router, tags=["Debug"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app

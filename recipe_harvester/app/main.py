import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from recipe_harvester.app.api.routes import api_router
from recipe_harvester.app.core.config import get_settings
from recipe_harvester.app.services.url_parsing.errors import ErrorKind, ExtractionError

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ALL_PROXIES_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.NO_STRUCTURED_DATA: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.TITLE_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INGREDIENTS_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INSTRUCTIONS_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INCOMPLETE_RESULT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def extraction_exception_handler(request, exc: ExtractionError):
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=exc.to_dict(),
    )


async def validation_exception_handler(request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    return await extraction_exception_handler(request, ExtractionError(ErrorKind.INVALID_INPUT, detail=details))


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Recipe Harvester", version="0.1.0")
    app.add_exception_handler(ExtractionError, extraction_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

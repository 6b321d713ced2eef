"""FastAPI application exposing the catalog batch jobs."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .routes import router


def create_app() -> FastAPI:
    app = FastAPI(title="Team Radio Catalog API")
    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Invalid request body",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    return app


app = create_app()

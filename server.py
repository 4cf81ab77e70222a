"""
FastAPI REST server for the human date → ISO 8601 resolver.

Endpoints
---------
GET  /                 – health check
POST /api/parse-date   – strict: separate date and time phrases, required
                         timezone and client reference time
POST /api/parse-text   – best-effort: one combined phrase, optional timezone
                         and reference time

Both endpoints answer OPTIONS pre-flight requests with an empty 200 and reject
every other method with 405. Any origin may call them.

Usage example
-------------
# Start the server
python server.py

# Resolve a date
curl -X POST http://localhost:8000/api/parse-date \\
     -H "Content-Type: application/json" \\
     -d '{"humanDate": "next week monday", "humanTime": "2pm",
          "timeZone": "America/Chicago", "clientCurrentTime": "2024-01-15T10:00:00Z"}'
"""
import logging
from typing import Any, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import config
from date_phrase import DateparserPhraseParser, DatePhraseParser
from date_resolver import resolve_human_datetime, resolve_text
from errors import DateResolutionError
from timezone_utils import Clock, system_clock

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Human Date to ISO API",
    description=(
        "Converts natural language dates and times into ISO 8601 timestamps "
        "in a requested IANA timezone."
    ),
    version="1.0.0",
)

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_date_parser = DateparserPhraseParser()


def get_date_parser() -> DatePhraseParser:
    return _date_parser


def get_clock() -> Clock:
    return system_clock


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(_CORS_HEADERS)
    return response


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class ParseDateResponse(BaseModel):
    convertedDate: str
    timeZone: str
    humanDate: str
    humanTime: str
    clientCurrentTime: str


class ParseTextResponse(BaseModel):
    convertedDate: str
    timeZone: str
    originalText: str
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: str


class StatusResponse(BaseModel):
    status: str
    message: str


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _internal_error(exc: Exception) -> JSONResponse:
    logger.exception("Parse date error")
    return _error(
        500,
        "Internal server error",
        str(exc) or "An unexpected error occurred while parsing the date",
    )


def _as_object(payload: Any) -> Optional[dict]:
    if payload is None:
        return {}
    if isinstance(payload, dict):
        return payload
    return None


_INVALID_BODY = ("Invalid request body", "The request body must be a JSON object")


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, *_INVALID_BODY)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/", response_model=StatusResponse)
def health_check() -> StatusResponse:
    return StatusResponse(status="ok", message="Human date to ISO API is running.")


@app.post(
    "/api/parse-date",
    response_model=ParseDateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def parse_date(
    payload: Any = Body(default=None),
    date_parser: DatePhraseParser = Depends(get_date_parser),
):
    """
    Convert a date phrase and a time phrase into an ISO 8601 timestamp.

    Every problem with the inputs is reported as a 400; nothing falls back
    to the server clock or timezone.
    """
    body = _as_object(payload)
    if body is None:
        return _error(400, *_INVALID_BODY)

    try:
        result = resolve_human_datetime(
            body.get("humanDate"),
            body.get("humanTime"),
            body.get("timeZone"),
            body.get("clientCurrentTime"),
            parser=date_parser,
        )
    except DateResolutionError as exc:
        return JSONResponse(status_code=400, content=exc.to_dict())
    except Exception as exc:  # noqa: BLE001
        return _internal_error(exc)

    return ParseDateResponse(**result.to_dict())


@app.post(
    "/api/parse-text",
    response_model=ParseTextResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def parse_text(
    payload: Any = Body(default=None),
    date_parser: DatePhraseParser = Depends(get_date_parser),
    clock: Clock = Depends(get_clock),
):
    """
    Convert one combined phrase into an ISO 8601 timestamp, best effort.

    A phrase with no recognisable date returns the current time along with
    an explanatory ``message`` instead of an error.
    """
    body = _as_object(payload)
    if body is None:
        return _error(400, *_INVALID_BODY)

    try:
        result = resolve_text(
            body.get("text"),
            time_zone=body.get("timeZone"),
            now=body.get("now"),
            parser=date_parser,
            clock=clock,
        )
    except DateResolutionError as exc:
        return JSONResponse(status_code=400, content=exc.to_dict())
    except Exception as exc:  # noqa: BLE001
        return _internal_error(exc)

    return ParseTextResponse(**result.to_dict())


@app.options("/api/parse-date", include_in_schema=False)
@app.options("/api/parse-text", include_in_schema=False)
def preflight() -> Response:
    return Response(status_code=200)


@app.api_route("/api/parse-date", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@app.api_route("/api/parse-text", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def method_not_allowed() -> JSONResponse:
    return _error(405, "Method not allowed", "Only POST requests are supported")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    config.configure_logging()
    uvicorn.run("server:app", host=config.HOST, port=config.PORT, reload=True)

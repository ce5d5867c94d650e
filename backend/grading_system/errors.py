"""API exceptions and the handlers that render them.

Controllers raise `InvalidRequest` and `NotFound`; anything else that
escapes a handler (database errors included) is reported as an opaque
500. Register with `register_exception_handlers(app)`.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .utils.headers import failure_alert

logger = logging.getLogger("grading_system.errors")

PROBLEM_CONTENT_TYPE = "application/problem+json"


class InvalidRequest(Exception):
    """A request violates an id invariant of the target entity.

    `error_key` is one of `idexists`, `idnull`, `idinvalid`, `idnotfound`.
    """

    status_code = 400

    def __init__(self, title: str, entity_name: str, error_key: str):
        self.title = title
        self.entity_name = entity_name
        self.error_key = error_key
        super().__init__(title)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "about:blank",
            "title": self.title,
            "detail": self.title,
            "status": self.status_code,
            "entityName": self.entity_name,
            "errorKey": self.error_key,
            "message": f"error.{self.error_key}",
            "params": self.entity_name,
        }


class NotFound(Exception):
    """A lookup by id found nothing."""

    status_code = 404

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or "Not Found"
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "about:blank",
            "title": "Not Found",
            "status": self.status_code,
            "detail": self.detail,
            "message": "error.http.404",
        }


def _problem(request: Request, status_code: int, body: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body.setdefault("path", request.url.path)
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=headers,
        media_type=PROBLEM_CONTENT_TYPE,
    )


def _invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
    logger.warning("bad request on %s: %s (%s)", request.url.path, exc.title, exc.error_key)
    return _problem(request, exc.status_code, exc.to_dict(), failure_alert(exc.entity_name, exc.error_key))


def _not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _problem(request, exc.status_code, exc.to_dict())


def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return an opaque 500; the traceback only goes to the log.

    This response is built outside the request middleware, so the
    request id it assigned is copied here.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    req_id = getattr(request.state, "request_id", None)
    return _problem(
        request,
        500,
        {
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "Internal server error",
            "message": "error.http.500",
        },
        {"X-Request-ID": req_id} if req_id else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidRequest, _invalid_request_handler)
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(Exception, _internal_error_handler)

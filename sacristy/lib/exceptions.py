import logging

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from sacristy.lib.errors import EntityNotFoundError

logger = logging.getLogger(__name__)


def _wants_html(request: Request) -> bool:
    """Browsers send text/html in Accept; fetch() calls from the panel do not."""
    return "text/html" in request.headers.get("accept", "")


def _render(request: Request, status_code: int, message: str, json_detail: str) -> Response:
    if _wants_html(request):
        template = request.app.template_engine.get_template("error.html")
        content = template.render(
            status_code=status_code,
            message=message,
            site_name=request.app.state.site_name,
        )
        return Response(content=content, status_code=status_code, media_type="text/html")

    return Response(
        content={"status_code": status_code, "detail": json_detail},
        status_code=status_code,
        media_type="application/json",
    )


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _render(request, exc.status_code, detail, detail)


def not_found_handler(request: Request, exc: EntityNotFoundError) -> Response:
    return _render(request, HTTP_404_NOT_FOUND, str(exc), str(exc))


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(
        request,
        HTTP_500_INTERNAL_SERVER_ERROR,
        "Ocorreu um erro inesperado.",
        "Internal Server Error",
    )

"""HTTP handlers for link status checks and PDF reports."""

from __future__ import annotations

import json
from typing import Callable, Protocol

from aiohttp import web

from linkstatus.models import (
    ERROR_CODE_BAD_REQUEST,
    ERROR_CODE_INTERNAL_SERVER_ERROR,
    ErrorResponse,
    LinkGetStatusResult,
    LinkState,
    LinkStatus,
    RequestValidationError,
    encode_get_status_response,
    parse_build_pdf_request,
    parse_get_status_request,
    to_link_statuses,
)

REPORT_FILENAME = "products_report.pdf"


class BadOperationsSequenceError(Exception):
    """Operations were requested in an order that cannot be served."""

    def __init__(self, message: str = "bad sequence of operations") -> None:
        super().__init__(message)


class LinkServiceProtocol(Protocol):
    async def get_status(self, links: list[str]) -> LinkGetStatusResult: ...

    async def get_statuses_of_link_sets(self, link_nums: list[int]) -> list[LinkState]: ...


PDFBuilder = Callable[[list[LinkStatus]], bytes]


def _json_response(status: int, body: str) -> web.Response:
    return web.Response(
        text=body + "\n", status=status, content_type="application/json", charset="utf-8"
    )


def _error(status: int, code: str, message: str) -> web.Response:
    payload = json.dumps(
        ErrorResponse(code, message).to_dict(), separators=(",", ":"), ensure_ascii=False
    )
    return _json_response(status, payload)


async def _read_body(request: web.Request) -> bytes:
    body = await request.read()
    if body and request.content_type != "application/json":
        raise RequestValidationError("code=415, message=Unsupported Media Type")
    return body


class LinkHandler:
    """Serves link status and report requests through the link service."""

    def __init__(self, service: LinkServiceProtocol, pdf_builder: PDFBuilder) -> None:
        self.service = service
        self.pdf_builder = pdf_builder

    async def get_status(self, request: web.Request) -> web.Response:
        """Check the posted links and answer with their statuses and link set number."""
        try:
            links = parse_get_status_request(await _read_body(request))
        except RequestValidationError as exc:
            return _error(400, ERROR_CODE_BAD_REQUEST, str(exc))

        try:
            result = await self.service.get_status(links)
        except Exception as exc:
            return _error(500, ERROR_CODE_INTERNAL_SERVER_ERROR, str(exc))

        body = encode_get_status_response(to_link_statuses(result.link_states), result.link_num)
        return _json_response(200, body)

    async def build_pdf(self, request: web.Request) -> web.Response:
        """Answer with a PDF report of all links in the posted link sets."""
        try:
            link_nums = parse_build_pdf_request(await _read_body(request))
        except RequestValidationError as exc:
            return _error(400, ERROR_CODE_BAD_REQUEST, str(exc))

        try:
            link_states = await self.service.get_statuses_of_link_sets(link_nums)
        except Exception as exc:
            return _error(500, ERROR_CODE_INTERNAL_SERVER_ERROR, str(exc))

        try:
            document = self.pdf_builder(to_link_statuses(link_states))
        except Exception as exc:
            return _error(
                500, ERROR_CODE_INTERNAL_SERVER_ERROR, f"cannot generate PDF: {exc}"
            )

        return web.Response(
            body=document,
            content_type="application/pdf",
            headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
        )
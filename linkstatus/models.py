"""Domain records, request parsing and response encoding for link status checks."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Iterable

ERROR_CODE_BAD_REQUEST = "BAD_REQUEST"
ERROR_CODE_INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

AVAILABLE = "available"
NOT_AVAILABLE = "not " + AVAILABLE

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# Characters that the JSON encoder of the wire format always escapes.
_JSON_ESCAPES = {
    ord("<"): "\\u003c",
    ord(">"): "\\u003e",
    ord("&"): "\\u0026",
    0x2028: "\\u2028",
    0x2029: "\\u2029",
}


@dataclass(frozen=True)
class LinkState:
    """Availability of a single link."""

    link: str
    is_available: bool


@dataclass(frozen=True)
class LinkStatus:
    """A link address with its human-readable status."""

    address: str
    status: str


@dataclass
class LinkGetStatusResult:
    """Link states of a request together with the number assigned to its link set."""

    link_states: list[LinkState]
    link_num: int


@dataclass(frozen=True)
class ErrorResponse:
    """Error body returned to API clients."""

    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class RequestValidationError(ValueError):
    """The request body could not be decoded or failed validation."""


def _validation_error(struct: str, field: str, tag: str) -> RequestValidationError:
    return RequestValidationError(
        f"code=400, message=Key: '{struct}.{field}' "
        f"Error:Field validation for '{field}' failed on the '{tag}' tag"
    )


def _decode_object(body: bytes | str) -> dict[str, Any]:
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RequestValidationError(f"code=400, message={exc}") from exc
    if body == "":
        raise RequestValidationError("code=400, message=Request body can't be empty")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise RequestValidationError(f"code=400, message=Syntax error: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RequestValidationError(
            f"code=400, message=cannot unmarshal {type(data).__name__} into request object"
        )
    return data


def parse_links(value: Any) -> list[str]:
    """Accept a single link string or a list of link strings.

    An empty string (or null) gives an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        links = []
        for item in value:
            if item is None:
                links.append("")
            elif isinstance(item, str):
                links.append(item)
            else:
                raise RequestValidationError(
                    f"cannot unmarshal {type(item).__name__} into a link string"
                )
        return links
    raise RequestValidationError(f"cannot unmarshal {type(value).__name__} into links")


def parse_get_status_request(body: bytes | str) -> list[str]:
    """Decode and validate a status request body; return its links."""
    data = _decode_object(body)
    if "links" not in data:
        raise _validation_error("LinksGetStatusRequest", "Links", "required")
    try:
        links = parse_links(data["links"])
    except RequestValidationError as exc:
        raise RequestValidationError(f"code=400, message={exc}") from exc
    if not links:
        raise _validation_error("LinksGetStatusRequest", "Links", "min")
    return links


def parse_build_pdf_request(body: bytes | str) -> list[int]:
    """Decode and validate a report request body; return its link set numbers."""
    data = _decode_object(body)
    raw = data.get("links_list")
    if raw is None:
        raise _validation_error("LinkBuildPDFRequest", "LinkNums", "required")
    if not isinstance(raw, list):
        raise RequestValidationError(
            f"code=400, message=cannot unmarshal {type(raw).__name__} into links_list"
        )
    link_nums = []
    for item in raw:
        if item is None:
            link_nums.append(0)
        elif isinstance(item, int) and not isinstance(item, bool):
            if not _INT64_MIN <= item <= _INT64_MAX:
                raise RequestValidationError(
                    f"code=400, message=number {item} overflows links_list item"
                )
            link_nums.append(item)
        else:
            raise RequestValidationError(
                f"code=400, message=cannot unmarshal {type(item).__name__} into links_list item"
            )
    if not link_nums:
        raise _validation_error("LinkBuildPDFRequest", "LinkNums", "min")
    return link_nums


def status_text(is_available: bool) -> str:
    return AVAILABLE if is_available else NOT_AVAILABLE


def to_link_statuses(link_states: Iterable[LinkState]) -> list[LinkStatus]:
    return [LinkStatus(state.link, status_text(state.is_available)) for state in link_states]


def _json_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False).translate(_JSON_ESCAPES)


def encode_link_statuses(statuses: Iterable[LinkStatus]) -> str:
    """Encode statuses as a JSON object keyed by address, keeping order and duplicates."""
    members = (f"{_json_string(s.address)}:{_json_string(s.status)}" for s in statuses)
    return "{" + ",".join(members) + "}"


def encode_get_status_response(statuses: Iterable[LinkStatus], links_num: int) -> str:
    return f'{{"links":{encode_link_statuses(statuses)},"links_num":{links_num}}}'


def sort_strings(items: list[str]) -> list[str]:
    """Sort the list in place and return it."""
    items.sort()
    return items
"""A4 PDF report with a table of link addresses and their statuses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from linkstatus.models import LinkStatus

_K = 72 / 25.4  # points per millimetre

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 28.35 / _K
CELL_MARGIN = MARGIN / 10
LINE_WIDTH = 0.567 / _K
PAGE_BREAK_TRIGGER = PAGE_HEIGHT - 2 * MARGIN

LINE_HEIGHT = 10.0
HEADER_WIDTH = 60.0
HEADER_FONT_SIZE = 16.0
LINK_COLUMN_WIDTH = 130.0
STATUS_COLUMN_WIDTH = 60.0
TABLE_CELL_FONT_SIZE = 12.0

TITLE = "Links availablity"

_DEFAULT_WIDTH = 556

_HELVETICA_WIDTHS = (
    (278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278)
    + (556,) * 10
    + (278, 278, 584, 584, 584, 556, 1015)
    + (667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833,
       722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611)
    + (278, 278, 278, 469, 556, 333)
    + (556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833,
       556, 556, 556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500)
    + (334, 260, 334, 584)
)

_HELVETICA_BOLD_WIDTHS = (
    (278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278)
    + (556,) * 10
    + (333, 333, 584, 584, 584, 611, 975)
    + (722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833,
       722, 778, 667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611)
    + (333, 278, 333, 584, 556, 333)
    + (556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889,
       611, 611, 611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500)
    + (389, 280, 389, 584)
)


@dataclass(frozen=True)
class _Font:
    resource: str
    base_font: str
    widths: dict[int, int]


_REGULAR = _Font("F1", "Helvetica", dict(zip(range(32, 127), _HELVETICA_WIDTHS)))
_BOLD = _Font("F2", "Helvetica-Bold", dict(zip(range(32, 127), _HELVETICA_BOLD_WIDTHS)))
_FONTS = (_REGULAR, _BOLD)


def _encode(text: str) -> bytes:
    return text.encode("cp1252", errors="replace")


def _escape(data: bytes) -> bytes:
    return (
        data.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
    )


class _Document:
    """Minimal page-flowing PDF writer with cells and automatic page breaks."""

    def __init__(self) -> None:
        self.pages: list[list[bytes]] = []
        self.font = _REGULAR
        self.font_size = TABLE_CELL_FONT_SIZE
        self._font_selected = False
        self.x = MARGIN
        self.y = MARGIN

    def _emit(self, line: str | bytes) -> None:
        self.pages[-1].append(line.encode("ascii") if isinstance(line, str) else line)

    def _select_font(self) -> None:
        self._emit(f"BT /{self.font.resource} {self.font_size:.2f} Tf ET")

    def add_page(self) -> None:
        self.pages.append([])
        self.x, self.y = MARGIN, MARGIN
        self._emit(f"{LINE_WIDTH * _K:.2f} w")
        if self._font_selected:
            self._select_font()

    def set_font(self, font: _Font, size: float) -> None:
        self.font, self.font_size, self._font_selected = font, size, True
        if self.pages:
            self._select_font()

    def string_width(self, data: bytes) -> float:
        units = sum(self.font.widths.get(byte, _DEFAULT_WIDTH) for byte in data)
        return units * self.font_size / 1000 / _K

    def cell(self, width: float, height: float, text: str = "",
             border: bool = False, align: str = "L") -> None:
        if self.y + height > PAGE_BREAK_TRIGGER:
            x = self.x
            self.add_page()
            self.x = x
        if border:
            self._emit(
                f"{self.x * _K:.2f} {(PAGE_HEIGHT - self.y) * _K:.2f} "
                f"{width * _K:.2f} {-height * _K:.2f} re S"
            )
        data = _encode(text)
        if data:
            if align == "C":
                dx = (width - self.string_width(data)) / 2
            else:
                dx = CELL_MARGIN
            tx = (self.x + dx) * _K
            ty = (PAGE_HEIGHT - (self.y + height / 2 + 0.3 * self.font_size / _K)) * _K
            self._emit(f"BT {tx:.2f} {ty:.2f} Td (".encode("ascii") + _escape(data) + b") Tj ET")
        self.x += width

    def ln(self, height: float) -> None:
        self.x = MARGIN
        self.y += height

    def output(self) -> bytes:
        first_page_id = 3 + len(_FONTS) + 1
        page_ids = [first_page_id + 2 * index for index in range(len(self.pages))]
        resources = "<< /Font << " + " ".join(
            f"/{font.resource} {3 + index} 0 R" for index, font in enumerate(_FONTS)
        ) + " >> >>"
        bodies: dict[int, bytes] = {
            1: b"<< /Type /Catalog /Pages 2 0 R >>",
            2: (
                f"<< /Type /Pages /Kids [{' '.join(f'{pid} 0 R' for pid in page_ids)}] "
                f"/Count {len(page_ids)} "
                f"/MediaBox [0 0 {PAGE_WIDTH * _K:.2f} {PAGE_HEIGHT * _K:.2f}] >>"
            ).encode("ascii"),
        }
        for index, font in enumerate(_FONTS):
            bodies[3 + index] = (
                f"<< /Type /Font /Subtype /Type1 /BaseFont /{font.base_font} "
                "/Encoding /WinAnsiEncoding >>"
            ).encode("ascii")
        info_id = 3 + len(_FONTS)
        bodies[info_id] = f"<< /Producer (linkstatus) /Title ({TITLE}) >>".encode("ascii")
        for page_id, content in zip(page_ids, self.pages):
            stream = b"\n".join(content)
            bodies[page_id] = (
                f"<< /Type /Page /Parent 2 0 R /Resources {resources} "
                f"/Contents {page_id + 1} 0 R >>"
            ).encode("ascii")
            bodies[page_id + 1] = (
                f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream"
            )

        out = bytearray(b"%PDF-1.3\n")
        offsets = []
        for number in range(1, len(bodies) + 1):
            offsets.append(len(out))
            out += f"{number} 0 obj\n".encode("ascii") + bodies[number] + b"\nendobj\n"
        xref_at = len(out)
        out += f"xref\n0 {len(bodies) + 1}\n0000000000 65535 f \n".encode("ascii")
        for offset in offsets:
            out += f"{offset:010d} 00000 n \n".encode("ascii")
        out += (
            f"trailer\n<< /Size {len(bodies) + 1} /Root 1 0 R /Info {info_id} 0 R >>\n"
            f"startxref\n{xref_at}\n%%EOF\n"
        ).encode("ascii")
        return bytes(out)


def build_pdf(link_statuses: Iterable[LinkStatus]) -> bytes:
    """Render a report table of link addresses and statuses as PDF bytes."""
    doc = _Document()
    doc.add_page()

    doc.set_font(_BOLD, HEADER_FONT_SIZE)
    doc.cell(HEADER_WIDTH, LINE_HEIGHT, TITLE)
    doc.ln(LINE_HEIGHT)

    doc.set_font(_BOLD, TABLE_CELL_FONT_SIZE)
    doc.cell(LINK_COLUMN_WIDTH, LINE_HEIGHT, "Link", border=True, align="C")
    doc.cell(STATUS_COLUMN_WIDTH, LINE_HEIGHT, "Status", border=True, align="C")
    doc.ln(LINE_HEIGHT)

    doc.set_font(_REGULAR, TABLE_CELL_FONT_SIZE)
    for link_status in link_statuses:
        doc.cell(LINK_COLUMN_WIDTH, LINE_HEIGHT, link_status.address, border=True, align="C")
        doc.cell(STATUS_COLUMN_WIDTH, LINE_HEIGHT, link_status.status, border=True, align="C")
        doc.ln(LINE_HEIGHT)
    return doc.output()
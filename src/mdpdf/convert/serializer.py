"""Minimal PDF 1.4 writer for pages of text draw commands."""

from .models import LETTER, Page, PageGeometry

PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"

# (alias, base font) in allocation order
STANDARD_FONTS = [("F1", "Helvetica"), ("F2", "Helvetica-Bold"), ("F3", "Courier")]


class _ObjectArena:
    """Append-only indirect object table with patchable placeholder slots.

    Object numbers are 1-based and follow insertion order.
    """

    def __init__(self):
        self._bodies: list[bytes | None] = []

    def __len__(self) -> int:
        return len(self._bodies)

    def add(self, body: str | bytes) -> int:
        self._bodies.append(_to_bytes(body))
        return len(self._bodies)

    def reserve(self) -> int:
        self._bodies.append(None)
        return len(self._bodies)

    def fill(self, number: int, body: str | bytes) -> None:
        if self._bodies[number - 1] is not None:
            raise ValueError(f"Object {number} is already filled")
        self._bodies[number - 1] = _to_bytes(body)

    def items(self) -> list[tuple[int, bytes]]:
        missing = [i + 1 for i, body in enumerate(self._bodies) if body is None]
        if missing:
            raise ValueError(f"Objects never filled: {missing}")
        return [(i + 1, body) for i, body in enumerate(self._bodies)]


def _to_bytes(body: str | bytes) -> bytes:
    return body if isinstance(body, bytes) else body.encode("ascii")


def _content_stream(page: Page) -> bytes:
    stream = "\n".join(command.to_operator() for command in page.commands)
    stream = stream.encode("ascii", errors="replace")
    return (
        f"<< /Length {len(stream)} >>\nstream\n".encode("ascii")
        + stream
        + b"\nendstream"
    )


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def serialize(pages: list[Page], geometry: PageGeometry = LETTER) -> bytes:
    """Serialize pages into a complete PDF document.

    Objects are numbered fonts first, then a (content stream, page) pair
    per page, then the page tree, then the catalog.

    Args:
        pages: Laid-out pages, at least one.
        geometry: Page size used for every /MediaBox.

    Returns:
        The PDF file contents.
    """
    if not pages:
        raise ValueError("A PDF needs at least one page")

    arena = _ObjectArena()
    font_ids = {
        alias: arena.add(f"<< /Type /Font /Subtype /Type1 /BaseFont /{base_font} >>")
        for alias, base_font in STANDARD_FONTS
    }

    page_entries: list[tuple[int, int]] = []
    for page in pages:
        content_id = arena.add(_content_stream(page))
        page_id = arena.reserve()
        page_entries.append((content_id, page_id))

    pages_id = arena.reserve()

    font_resources = " ".join(f"/{alias} {num} 0 R" for alias, num in font_ids.items())
    media_box = (
        f"[0 0 {_format_number(geometry.width)} {_format_number(geometry.height)}]"
    )
    for content_id, page_id in page_entries:
        arena.fill(
            page_id,
            f"<< /Type /Page /Parent {pages_id} 0 R /MediaBox {media_box} "
            f"/Resources << /Font << {font_resources} >> >> "
            f"/Contents {content_id} 0 R >>",
        )

    kids = " ".join(f"{page_id} 0 R" for _, page_id in page_entries)
    arena.fill(pages_id, f"<< /Type /Pages /Kids [{kids}] /Count {len(page_entries)} >>")

    catalog_id = arena.add(f"<< /Type /Catalog /Pages {pages_id} 0 R >>")

    output = bytearray(PDF_HEADER)
    offsets: list[int] = []
    for number, body in arena.items():
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

    xref_offset = len(output)
    object_count = len(arena)
    output += f"xref\n0 {object_count + 1}\n".encode("ascii")
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode("ascii")
    output += (
        f"trailer\n<< /Size {object_count + 1} /Root {catalog_id} 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("ascii")

    return bytes(output)

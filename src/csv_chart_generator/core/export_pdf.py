from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

from csv_chart_generator.core.errors import ExportError, NoSurfaceError
from csv_chart_generator.utils.log import log_exception

DEFAULT_DOCUMENT_NAME = "chart.pdf"


@dataclass(frozen=True)
class ExportedDocument:
    name: str
    payload: bytes
    mime: str = "application/pdf"
    orientation: str = "portrait"


def capture_surface(surface: Any) -> bytes:
    """Rasterize a rendered chart surface to PNG bytes.

    Accepts a matplotlib Figure (anything with ``savefig``) or PNG bytes
    that were captured elsewhere.
    """
    if surface is None:
        raise NoSurfaceError()
    if isinstance(surface, (bytes, bytearray)):
        if not surface:
            raise NoSurfaceError("Nothing to export: the captured image is empty.")
        return bytes(surface)
    savefig = getattr(surface, "savefig", None)
    if not callable(savefig):
        raise NoSurfaceError(f"Cannot export a {type(surface).__name__}; it is not a rendered chart.")
    buf = io.BytesIO()
    try:
        savefig(buf, format="png", bbox_inches="tight")
    except Exception as exc:
        log_exception("capture_surface failed")
        raise ExportError(f"Failed to capture chart image: {exc}") from exc
    return buf.getvalue()


def export_as_document(
    surface: Any,
    name: str = DEFAULT_DOCUMENT_NAME,
    title: str = "Chart",
) -> ExportedDocument:
    """Embed a chart surface into a single-page PDF.

    The page is landscape when the captured image is wider than tall,
    portrait otherwise. The image keeps its aspect ratio and is scaled to
    fit a footprint at most 180 mm wide inside 10 mm margins.
    """
    png = capture_surface(surface)

    from reportlab.lib.pagesizes import A4, landscape, portrait
    from reportlab.lib.units import mm
    from reportlab.lib.utils import ImageReader
    from reportlab.platypus import Image, SimpleDocTemplate

    try:
        iw, ih = ImageReader(io.BytesIO(png)).getSize()
    except Exception as exc:
        log_exception("export_as_document: unreadable image")
        raise ExportError(f"Captured chart is not a readable image: {exc}") from exc
    if iw <= 0 or ih <= 0:
        raise NoSurfaceError("Nothing to export: the captured image has no area.")

    orientation = "landscape" if iw > ih else "portrait"
    pagesize = landscape(A4) if orientation == "landscape" else portrait(A4)

    out = io.BytesIO()
    doc = SimpleDocTemplate(
        out,
        pagesize=pagesize,
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=str(title),
    )
    # Frame padding is 6pt on each side.
    max_img_width = min(180 * mm, doc.width - 12)
    max_img_height = doc.height - 12
    scale = min(max_img_width / float(iw), max_img_height / float(ih))
    story = [Image(io.BytesIO(png), width=iw * scale, height=ih * scale, hAlign="LEFT")]
    try:
        doc.build(story)
    except Exception as exc:
        log_exception("export_as_document: build failed")
        raise ExportError(f"Failed to build PDF: {exc}") from exc
    return ExportedDocument(name=name, payload=out.getvalue(), orientation=orientation)

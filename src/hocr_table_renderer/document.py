from __future__ import annotations

import html
import logging
from typing import Iterable, List, Optional

from . import __version__
from .config import RenderOptions
from .membership import TableLocator
from .serializer import format_attrs, serialize_page
from .structures import RecognizedPage

log = logging.getLogger(__name__)

BASE_CAPABILITIES = "ocr_page ocr_carea ocr_par ocr_line ocrx_word ocrp_wconf"
FONT_CAPABILITIES = "ocrp_lang ocrp_dir ocrp_font ocrp_fsize"


def begin_document(title: str = "", font_info: bool = False) -> str:
    capabilities = BASE_CAPABILITIES + (" " + FONT_CAPABILITIES if font_info else "")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN"\n'
        '    "http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">\n'
        '<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="en" lang="en">\n'
        " <head>\n"
        f"  <title>{html.escape(title)}</title>\n"
        '  <meta http-equiv="Content-Type" content="text/html;charset=utf-8"/>\n'
        f"  <meta name='ocr-system' content='hocr-table-renderer {__version__}' />\n"
        f"  <meta name='ocr-capabilities' content='{capabilities}'/>\n"
        " </head>\n"
        " <body>\n"
    )


def end_document() -> str:
    return " </body>\n</html>\n"


def render_page(page: Optional[RecognizedPage],
                locator: Optional[TableLocator] = None,
                options: Optional[RenderOptions] = None) -> Optional[str]:
    """Marcado de una página envuelto en su <div class='page'>.

    Devuelve None si la página no se reconoció (distinto de una página vacía,
    que produce sólo el contenedor).
    """
    if page is None:
        return None
    attrs = format_attrs(**{"class": "page"},
                         id=f"page_{page.page_number + 1}",
                         filename=page.image_path or "unknown",
                         left=page.bbox.x1,
                         top=page.bbox.y1,
                         width=page.bbox.width,
                         height=page.bbox.height,
                         ppageno=page.page_number)
    body = serialize_page(page.words, locator=locator, page_number=page.page_number, options=options)
    if not page.words:
        log.info("Página %d sin contenido reconocido.", page.page_number + 1)
    return f"  <div {attrs}>{body}\n  </div>\n"


def render_document(rendered_pages: Iterable[Optional[str]],
                    title: str = "",
                    font_info: bool = False) -> str:
    parts: List[str] = [begin_document(title, font_info=font_info)]
    for i, page in enumerate(rendered_pages):
        if page is None:
            log.warning("Página %d sin resultados de reconocimiento; se omite.", i + 1)
            continue
        parts.append(page)
    parts.append(end_document())
    return "".join(parts)

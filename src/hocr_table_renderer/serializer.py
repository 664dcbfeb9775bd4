# src/hocr_table_renderer/serializer.py
"""
Serialización de una página: mezcla el flujo de texto (bloque/párrafo/línea)
con la estructura de tabla (table/tbody/tr/td) según la celda de cada palabra.

Las palabras se procesan estrictamente en orden de lectura; el cursor es un
autómata explícito con estados FLOW → TABLE → ROW → CELL.
"""
from __future__ import annotations
import html
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .config import RenderOptions
from .membership import TableLocator
from .spatial import CellAddress
from .structures import BBox, Word, WordDirection

log = logging.getLogger(__name__)

INDENT = " "


class CursorState(Enum):
    FLOW = "flow"
    TABLE = "table"  # table open, no row
    ROW = "row"      # row open, no cell
    CELL = "cell"


@dataclass
class SerializationCursor:
    state: CursorState = CursorState.FLOW
    table: Optional[int] = None
    row: int = 0
    col: int = 0
    block_open: bool = False
    para_open: bool = False
    line_open: bool = False
    para_is_ltr: bool = True
    para_lang: Optional[str] = None
    counters: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def next_id(self, role: str, page_id: int) -> str:
        self.counters[role] += 1
        return f"{role}_{page_id}_{self.counters[role]}"

    @property
    def in_table(self) -> bool:
        return self.state is not CursorState.FLOW


def format_attrs(**values) -> str:
    parts = []
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = int(value)
        parts.append(f"{key}='{html.escape(str(value), quote=True)}'")
    return " ".join(parts)


def box_attrs(box: BBox) -> Dict[str, int]:
    return dict(left=box.x1, top=box.y1, right=box.x2, bottom=box.y2)


class LayoutSerializer:
    """Convierte el flujo de palabras de una página en marcado anidado.

    Uso::

        ser = LayoutSerializer(page_number=0, locator=locator)
        for word in words:
            ser.feed(word)
        markup = ser.finish()
    """

    def __init__(self,
                 page_number: int = 0,
                 locator: Optional[TableLocator] = None,
                 options: Optional[RenderOptions] = None):
        self.page_id = page_number + 1
        self.locator = locator
        self.options = options or RenderOptions()
        self.cursor = SerializationCursor()
        self._parts: List[str] = []
        self._stack: List[str] = []

    # -- low level -------------------------------------------------------

    def _open(self, tag: str, attrs: str = "") -> None:
        text = f"<{tag} {attrs}>" if attrs else f"<{tag}>"
        self._parts.append("\n" + INDENT * (len(self._stack) + 3) + text)
        self._stack.append(tag)

    def _close(self, tag: str) -> None:
        if not self._stack or self._stack[-1] != tag:
            raise RuntimeError(f"Cierre inesperado </{tag}>; pila abierta: {self._stack}")
        self._stack.pop()
        self._parts.append("\n" + INDENT * (len(self._stack) + 3) + f"</{tag}>")

    @property
    def open_elements(self) -> List[str]:
        return list(self._stack)

    # -- block / flow ----------------------------------------------------

    def open_block(self, word: Word) -> None:
        c = self.cursor
        c.para_is_ltr = True
        attrs = format_attrs(**{"class": "block"}, id=c.next_id("block", self.page_id),
                             **box_attrs(word.block_bbox or word.bbox))
        self._open("div", attrs)
        c.block_open = True

    def open_paragraph(self, word: Word) -> None:
        c = self.cursor
        c.para_is_ltr = word.para_is_ltr
        c.para_lang = word.para_lang or word.lang
        attrs = format_attrs(**{"class": "paragraph"},
                             dir=None if c.para_is_ltr else "rtl",
                             id=c.next_id("par", self.page_id),
                             lang=c.para_lang,
                             **box_attrs(word.para_bbox or word.bbox))
        self._open("p", attrs)
        c.para_open = True

    def open_line(self, word: Word) -> None:
        c = self.cursor
        attrs = format_attrs(**{"class": "line"}, id=c.next_id("line", self.page_id),
                             **box_attrs(word.line_bbox or word.bbox))
        self._open("span", attrs)
        c.line_open = True

    def close_line(self) -> None:
        if self.cursor.line_open:
            self._close("span")
            self.cursor.line_open = False

    def close_paragraph(self) -> None:
        c = self.cursor
        self.close_line()
        if c.para_open:
            self._close("p")
            c.para_open = False
        c.para_is_ltr = True
        c.para_lang = None

    # -- table -----------------------------------------------------------

    def enter_table(self, table: int) -> None:
        c = self.cursor
        # a table cannot live inside a paragraph
        self.close_paragraph()
        box = self.locator.regions[table].bbox if self.locator else None
        attrs = format_attrs(**{"class": "table"}, id=c.next_id("table", self.page_id),
                             **(box_attrs(box) if box else {}))
        self._open("table", attrs)
        self._open("tbody")
        c.state = CursorState.TABLE
        c.table = table
        c.row = 0
        c.col = 0

    def close_cell(self) -> None:
        c = self.cursor
        if c.state is CursorState.CELL:
            self._close("td")
            c.state = CursorState.ROW

    def close_row(self) -> None:
        c = self.cursor
        self.close_cell()
        if c.state is CursorState.ROW:
            self._close("tr")
            c.state = CursorState.TABLE
            c.col = 0

    def leave_table(self) -> None:
        c = self.cursor
        self.close_row()
        if c.state is CursorState.TABLE:
            self._close("tbody")
            self._close("table")
        c.state = CursorState.FLOW
        c.table = None
        c.row = 0
        c.col = 0

    def open_row(self, row: int) -> None:
        c = self.cursor
        self.close_row()
        grid = self.locator.grids[c.table] if self.locator and c.table is not None else None
        attrs = format_attrs(id=c.next_id("row", self.page_id),
                             **(box_attrs(grid.row_bbox(row)) if grid else {}))
        self._open("tr", attrs)
        c.state = CursorState.ROW
        c.row = row
        c.col = 0

    def open_cell(self, col: int) -> None:
        c = self.cursor
        self.close_cell()
        grid = self.locator.grids[c.table] if self.locator and c.table is not None else None
        attrs = format_attrs(id=c.next_id("cell", self.page_id),
                             **(box_attrs(grid.cell_bbox(c.row, col)) if grid else {}))
        self._open("td", attrs)
        c.state = CursorState.CELL
        c.col = col

    def route(self, address: Optional[CellAddress]) -> None:
        """Apply the transitions implied by the next word's cell address."""
        c = self.cursor
        target = address.table if address is not None else None
        if target != c.table:
            self.leave_table()
            if target is not None:
                self.enter_table(target)
        if address is None:
            return
        if address.row > c.row:
            if self.options.debug:
                log.debug("Nueva fila: %d -> %d (tabla %d)", c.row, address.row, address.table)
            self.open_row(address.row)
        if address.col > c.col:
            if self.options.debug:
                log.debug("Nueva celda: %d -> %d (fila %d)", c.col, address.col, c.row)
            self.open_cell(address.col)

    # -- words -----------------------------------------------------------

    def _word_markup(self, word: Word) -> str:
        c = self.cursor
        lang = word.lang if word.lang and word.lang != c.para_lang else None
        direction = None
        if word.direction is WordDirection.LTR and not c.para_is_ltr:
            direction = "ltr"
        elif word.direction is WordDirection.RTL and c.para_is_ltr:
            direction = "rtl"
        font_name = word.font.font_name if self.options.font_info else None

        attrs = format_attrs(**{"class": "word"},
                             wordconfidence=int(word.confidence),
                             **box_attrs(word.bbox),
                             wordfirst=word.first_in_line,
                             lang=lang,
                             wordfromdictionary=word.from_dictionary,
                             wordnumeric=word.numeric,
                             font_name=font_name,
                             fontsize=word.font.pointsize,
                             dir=direction)

        if self.options.char_boxes and word.chars:
            body = "".join(
                "<span class='ocrx_cinfo' title='x_bboxes {} {} {} {}; x_conf {:g}'>{}</span>".format(
                    ch.bbox.x1, ch.bbox.y1, ch.bbox.x2, ch.bbox.y2, ch.confidence, html.escape(ch.text))
                for ch in word.chars
            )
        else:
            body = html.escape(word.text.strip())
        if word.font.italic:
            body = f"<em>{body}</em>"
        if word.font.bold:
            body = f"<strong>{body}</strong>"
        return f"<span {attrs}>{body}</span>"

    def emit_word(self, word: Word) -> None:
        self._parts.append("\n" + INDENT * (len(self._stack) + 3) + self._word_markup(word))

    def feed(self, word: Word) -> None:
        c = self.cursor
        if word.is_blank:
            # no span, but its reading-order flags still close the flow elements
            if word.first_in_block and c.block_open:
                self.end_block()
            if not c.in_table:
                if word.last_in_line:
                    self.close_line()
                if word.last_in_para:
                    self.close_paragraph()
            if word.last_in_block:
                self.end_block()
            return

        address = self.locator.locate(word) if self.locator and len(self.locator) else None

        if word.first_in_block and c.block_open:
            self.end_block()
        if not c.block_open:
            self.open_block(word)

        self.route(address)

        if address is None:
            if not c.para_open:
                self.open_paragraph(word)
            if not c.line_open:
                self.open_line(word)
        self.emit_word(word)

        if address is None:
            if word.last_in_line:
                self.close_line()
            if word.last_in_para:
                self.close_paragraph()
        if word.last_in_block:
            self.end_block()

    def end_block(self) -> None:
        """Close, innermost first, everything still open and then the block itself."""
        self.leave_table()
        self.close_paragraph()
        if self.cursor.block_open:
            self._close("div")
            self.cursor.block_open = False

    def finish(self) -> str:
        self.end_block()
        if self._stack:
            raise RuntimeError(f"Elementos sin cerrar: {self._stack}")
        return "".join(self._parts)


def serialize_page(words: Iterable[Word],
                   locator: Optional[TableLocator] = None,
                   page_number: int = 0,
                   options: Optional[RenderOptions] = None) -> str:
    serializer = LayoutSerializer(page_number=page_number, locator=locator, options=options)
    for word in words:
        serializer.feed(word)
    return serializer.finish()

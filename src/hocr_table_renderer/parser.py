# src/hocr_table_renderer/parser.py
from __future__ import annotations
import logging
import re
from typing import Callable, Dict, List, Optional, Tuple
from bs4 import BeautifulSoup, Tag
from .structures import (BBox, CharBox, FontAttributes, RecognizedPage, Word, WordDirection,
                         is_numeric_text, parse_bbox, parse_title)

log = logging.getLogger(__name__)

LINE_CLASSES = ("ocr_line", "ocr_header", "ocr_caption", "ocr_textfloat")
IMAGE_RE = re.compile(r'image\s+"([^"]*)"')

def _has_class(*names: str) -> Callable[[Optional[str]], bool]:
    return lambda c: bool(c) and any(n in c.split() for n in names)

def _load_soup(text: str) -> BeautifulSoup:
    """
    Intenta XML (lxml-xml) y, si no hay nodos HOCR, fallback a HTML (lxml).
    """
    soup_xml = BeautifulSoup(text, "lxml-xml")
    if soup_xml.find(class_=_has_class("ocr_page")):
        return soup_xml
    return BeautifulSoup(text, "lxml")

def _box(tag: Tag) -> Optional[BBox]:
    bb = parse_bbox(tag.get("title", ""))
    return BBox.from_tuple(bb) if bb else None

def _to_int(value: Optional[str], default: int = 0) -> int:
    try:
        return int(float(value)) if value is not None else default
    except ValueError:
        return default

def _direction(value: Optional[str], default: WordDirection) -> WordDirection:
    try:
        return WordDirection((value or "").lower())
    except ValueError:
        return default

def _char_boxes(word: Tag) -> Tuple[CharBox, ...]:
    chars = []
    for cinfo in word.find_all(class_=_has_class("ocrx_cinfo")):
        props = parse_title(cinfo.get("title", ""))
        coords = props.get("x_bboxes", "").split()
        if len(coords) != 4:
            continue
        box = BBox(*(int(v) for v in coords))
        chars.append(CharBox(text=cinfo.get_text(), bbox=box,
                             confidence=float(props.get("x_conf", 0) or 0)))
    return tuple(chars)

def _parse_page(page: Tag, index: int) -> RecognizedPage:
    title = page.get("title", "")
    props = parse_title(title)
    image = IMAGE_RE.search(title)
    page_box = _box(page) or BBox(0, 0, 0, 0)
    page_number = _to_int(props.get("ppageno"), index)

    words: List[Word] = []
    for block in page.find_all(class_=_has_class("ocr_carea")):
        block_box = _box(block)
        # (paragraph tag, [(line tag, [word tags])])
        paras = []
        for par in block.find_all(class_=_has_class("ocr_par")):
            lines = []
            for line in par.find_all(class_=_has_class(*LINE_CLASSES)):
                spans = [w for w in line.find_all(class_=_has_class("ocrx_word"))
                         if _box(w) and w.get_text().strip()]
                if spans:
                    lines.append((line, spans))
            if lines:
                paras.append((par, lines))

        for pi, (par, lines) in enumerate(paras):
            para_is_ltr = (par.get("dir") or "ltr").lower() != "rtl"
            para_lang = par.get("lang")
            para_dir = WordDirection.LTR if para_is_ltr else WordDirection.RTL
            for li, (line, spans) in enumerate(lines):
                for wi, span in enumerate(spans):
                    wprops = parse_title(span.get("title", ""))
                    text = span.get_text().strip()
                    first_line = wi == 0
                    last_line = wi == len(spans) - 1
                    first_para = first_line and li == 0
                    last_para = last_line and li == len(lines) - 1
                    words.append(Word(
                        text=text,
                        bbox=_box(span),
                        confidence=_to_int(wprops.get("x_wconf")),
                        font=FontAttributes(
                            bold=span.find(["strong", "b"]) is not None,
                            italic=span.find(["em", "i"]) is not None,
                            pointsize=_to_int(wprops.get("x_fsize")),
                            font_name=wprops.get("x_font", "").strip('"') or None,
                        ),
                        lang=span.get("lang") or para_lang,
                        direction=_direction(span.get("dir"), para_dir),
                        numeric=is_numeric_text(text),
                        first_in_block=first_para and pi == 0,
                        first_in_para=first_para,
                        first_in_line=first_line,
                        last_in_block=last_para and pi == len(paras) - 1,
                        last_in_para=last_para,
                        last_in_line=last_line,
                        block_bbox=block_box,
                        para_bbox=_box(par),
                        line_bbox=_box(line),
                        para_is_ltr=para_is_ltr,
                        para_lang=para_lang,
                        chars=_char_boxes(span),
                    ))

    return RecognizedPage(page_number=page_number, words=tuple(words),
                          image_path=image.group(1) if image else None, bbox=page_box)

def parse_hocr_text(text: str) -> List[RecognizedPage]:
    soup = _load_soup(text)
    pages = soup.find_all(class_=_has_class("ocr_page"))
    result = [_parse_page(page, i) for i, page in enumerate(pages)]
    for page in result:
        log.debug("Página %d: %d palabras", page.page_number + 1, len(page.words))
    return result

def parse_hocr_pages(hocr_path: str) -> List[RecognizedPage]:
    """
    Lee un archivo HOCR de Tesseract y devuelve, por página, las palabras en
    orden de lectura con sus marcas de inicio/fin de bloque, párrafo y línea.
    """
    with open(hocr_path, "r", encoding="utf-8") as f:
        raw = f.read()
    return parse_hocr_text(raw)

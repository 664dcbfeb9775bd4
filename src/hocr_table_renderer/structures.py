from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple
import re

BBOX_RE = re.compile(r"bbox (-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")
NUMERIC_RE = re.compile(r"^[\$\(\-+]?\d[\d,.\s]*%?\)?$")

def parse_bbox(title_attr: str) -> Optional[Tuple[int, int, int, int]]:
    if not title_attr:
        return None
    m = BBOX_RE.search(title_attr)
    if not m:
        return None
    x1, y1, x2, y2 = map(int, m.groups())
    return x1, y1, x2, y2

def parse_title(title_attr: str) -> Dict[str, str]:
    """Split an hOCR title ("bbox 1 2 3 4; x_wconf 91") into {prop: value}."""
    props: Dict[str, str] = {}
    for part in (title_attr or "").split(";"):
        part = part.strip()
        if not part:
            continue
        key, _, value = part.partition(" ")
        props[key] = value.strip()
    return props

def is_numeric_text(text: str) -> bool:
    return bool(NUMERIC_RE.match((text or "").strip()))


@dataclass(frozen=True)
class BBox:
    """Axis-aligned box in page pixels. Containment is inclusive on every edge."""
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_tuple(cls, box: Tuple[int, int, int, int]) -> "BBox":
        return cls(*map(int, box))

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def union(self, other: "BBox") -> "BBox":
        return BBox(min(self.x1, other.x1), min(self.y1, other.y1),
                    max(self.x2, other.x2), max(self.y2, other.y2))


class WordDirection(str, Enum):
    LTR = "ltr"
    RTL = "rtl"
    MIX = "mix"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class FontAttributes:
    bold: bool = False
    italic: bool = False
    underlined: bool = False
    monospace: bool = False
    serif: bool = False
    smallcaps: bool = False
    pointsize: int = 0
    font_name: Optional[str] = None


@dataclass(frozen=True)
class CharBox:
    text: str
    bbox: BBox
    confidence: float = 0.0


@dataclass(frozen=True)
class Word:
    """One recognized word, as handed over by the recognizer.

    The enclosing block/paragraph/line boxes travel with the word so the
    serializer can open those elements without going back to the engine.
    """
    text: str
    bbox: BBox
    confidence: int = 0
    font: FontAttributes = field(default_factory=FontAttributes)
    lang: Optional[str] = None
    direction: WordDirection = WordDirection.LTR
    from_dictionary: bool = False
    numeric: bool = False
    first_in_block: bool = False
    first_in_para: bool = False
    first_in_line: bool = False
    last_in_block: bool = False
    last_in_para: bool = False
    last_in_line: bool = False
    block_bbox: Optional[BBox] = None
    para_bbox: Optional[BBox] = None
    line_bbox: Optional[BBox] = None
    para_is_ltr: bool = True
    para_lang: Optional[str] = None
    chars: Tuple[CharBox, ...] = ()

    @property
    def center(self) -> Tuple[int, int]:
        return self.bbox.center

    @property
    def is_blank(self) -> bool:
        return not (self.text or "").strip()


@dataclass(frozen=True)
class RecognizedPage:
    """Words of one page in reading order. `page_number` is 0-based."""
    page_number: int
    words: Tuple[Word, ...]
    image_path: Optional[str] = None
    bbox: BBox = BBox(0, 0, 0, 0)

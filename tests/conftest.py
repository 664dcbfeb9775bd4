"""Shared fixtures: synthetic ruled pages and hand-built word streams."""

from collections import Counter
from html.parser import HTMLParser
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np
import pytest

from hocr_table_renderer.spatial import TableRegion
from hocr_table_renderer.structures import BBox, FontAttributes, Word

LINE_THICKNESS = 2


def draw_ruled_page(
    xs: Sequence[int],
    ys: Sequence[int],
    width: int = 400,
    height: int = 300,
    thickness: int = LINE_THICKNESS,
) -> np.ndarray:
    """White BGR page with a full grid of black rules at the given coordinates."""
    img = np.full((height, width, 3), 255, dtype=np.uint8)
    for y in ys:
        img[y:y + thickness, xs[0]:xs[-1] + thickness] = 0
    for x in xs:
        img[ys[0]:ys[-1] + thickness, x:x + thickness] = 0
    return img


def make_word(text: str, box: Sequence[int], **kwargs) -> Word:
    kwargs.setdefault("confidence", 90)
    kwargs.setdefault("font", FontAttributes(pointsize=10))
    return Word(text=text, bbox=BBox(*box), **kwargs)


def region_for(xs: Sequence[int], ys: Sequence[int]) -> TableRegion:
    return TableRegion.from_joints([[(x, y)] for y in ys for x in xs])


class StackValidator(HTMLParser):
    """Checks that every start tag is closed, in nesting order."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.stack = []
        self.errors = []
        self.opened = Counter()
        self.closed = Counter()

    def handle_starttag(self, tag, attrs):
        self.stack.append(tag)
        self.opened[tag] += 1

    def handle_endtag(self, tag):
        self.closed[tag] += 1
        if not self.stack or self.stack[-1] != tag:
            self.errors.append((tag, list(self.stack)))
            return
        self.stack.pop()


def assert_well_formed(markup: str) -> None:
    validator = StackValidator()
    validator.feed(markup)
    validator.close()
    assert validator.errors == []
    assert validator.stack == []
    assert validator.opened == validator.closed


@pytest.fixture
def ruled_page_path(tmp_path: Path):
    """Factory: write a ruled page to disk and return its path."""

    def _write(xs, ys, name="page.png", **kwargs) -> str:
        path = tmp_path / name
        cv2.imwrite(str(path), draw_ruled_page(xs, ys, **kwargs))
        return str(path)

    return _write

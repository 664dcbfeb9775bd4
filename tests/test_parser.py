"""Tests for reading Tesseract hOCR into word streams."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from hocr_table_renderer.parser import parse_hocr_pages, parse_hocr_text
from hocr_table_renderer.structures import BBox, WordDirection, parse_bbox, parse_title

HOCR = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN"
    "http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="en" lang="en">
 <head><title></title></head>
 <body>
  <div class='ocr_page' id='page_1' title='image "scan.png"; bbox 0 0 400 300; ppageno 0'>
   <div class='ocr_carea' id='block_1_1' title="bbox 10 10 300 80">
    <p class='ocr_par' id='par_1_1' lang='eng' title="bbox 10 10 300 40">
     <span class='ocr_line' id='line_1_1' title="bbox 10 10 300 20; baseline 0 -3; x_size 12">
      <span class='ocrx_word' id='word_1_1' title='bbox 10 10 60 20; x_wconf 95; x_font Times; x_fsize 10'><strong>Total</strong></span>
      <span class='ocrx_word' id='word_1_2' title='bbox 70 10 120 20; x_wconf 88' lang='spa'><em>neto</em></span>
     </span>
     <span class='ocr_line' id='line_1_2' title="bbox 10 30 300 40">
      <span class='ocrx_word' id='word_1_3' title='bbox 10 30 60 40; x_wconf 91'>1,250.00</span>
     </span>
    </p>
    <p class='ocr_par' id='par_1_2' lang='ara' dir='rtl' title="bbox 10 50 300 80">
     <span class='ocr_header' id='line_1_3' title="bbox 10 50 300 80">
      <span class='ocrx_word' id='word_1_4' title='bbox 10 50 60 80; x_wconf 70'>مرحبا</span>
      <span class='ocrx_word' id='word_1_5' title='bbox 70 50 90 80; x_wconf 60' dir='ltr'>OCR</span>
      <span class='ocrx_word' id='word_1_6' title='bbox 95 50 99 80; x_wconf 0'> </span>
     </span>
    </p>
   </div>
   <div class='ocr_carea' id='block_1_2' title="bbox 10 200 100 220">
    <p class='ocr_par' id='par_1_3' lang='eng' title="bbox 10 200 100 220">
     <span class='ocr_line' id='line_1_4' title="bbox 10 200 100 220">
      <span class='ocrx_word' id='word_1_7' title='bbox 10 200 40 220; x_wconf 93'><span class='ocrx_cinfo' title='x_bboxes 10 200 20 220; x_conf 99.1'>o</span><span class='ocrx_cinfo' title='x_bboxes 21 200 40 220; x_conf 97'>k</span></span>
     </span>
    </p>
   </div>
  </div>
 </body>
</html>
"""


class TestTitleHelpers:

    def test_parse_bbox(self):
        assert parse_bbox("bbox 1 2 3 4; x_wconf 9") == (1, 2, 3, 4)
        assert parse_bbox("x_wconf 9") is None
        assert parse_bbox("") is None

    def test_parse_title(self):
        props = parse_title("bbox 1 2 3 4; x_wconf 95; x_font Times")
        assert props == {"bbox": "1 2 3 4", "x_wconf": "95", "x_font": "Times"}


class TestParseHocr:

    def test_page_metadata(self):
        (page,) = parse_hocr_text(HOCR)
        assert page.page_number == 0
        assert page.image_path == "scan.png"
        assert page.bbox == BBox(0, 0, 400, 300)

    def test_words_in_reading_order_without_blanks(self):
        (page,) = parse_hocr_text(HOCR)
        assert [w.text for w in page.words] == ["Total", "neto", "1,250.00", "مرحبا", "OCR", "ok"]

    def test_reading_order_flags(self):
        words = parse_hocr_text(HOCR)[0].words
        assert [w.first_in_block for w in words] == [True, False, False, False, False, True]
        assert [w.last_in_block for w in words] == [False, False, False, False, True, True]
        assert [w.first_in_para for w in words] == [True, False, False, True, False, True]
        assert [w.last_in_para for w in words] == [False, False, True, False, True, True]
        assert [w.first_in_line for w in words] == [True, False, True, True, False, True]
        assert [w.last_in_line for w in words] == [False, True, True, False, True, True]

    def test_word_properties(self):
        total, neto, amount, arabic, ocr, ok = parse_hocr_text(HOCR)[0].words
        assert total.bbox == BBox(10, 10, 60, 20)
        assert total.confidence == 95
        assert total.font.bold and not total.font.italic
        assert total.font.pointsize == 10
        assert total.font.font_name == "Times"
        assert total.lang == "eng" and total.para_lang == "eng"
        assert neto.font.italic
        assert neto.lang == "spa"
        assert amount.numeric and not total.numeric

        assert not arabic.para_is_ltr
        assert arabic.direction is WordDirection.RTL
        assert ocr.direction is WordDirection.LTR

        assert total.block_bbox == BBox(10, 10, 300, 80)
        assert total.para_bbox == BBox(10, 10, 300, 40)
        assert amount.line_bbox == BBox(10, 30, 300, 40)

    def test_char_boxes(self):
        ok = parse_hocr_text(HOCR)[0].words[-1]
        assert [c.text for c in ok.chars] == ["o", "k"]
        assert ok.chars[0].bbox == BBox(10, 200, 20, 220)
        assert ok.chars[0].confidence == 99.1

    def test_plain_html_fallback(self):
        html_doc = (
            "<html><body><div class='ocr_page' title='bbox 0 0 10 10'>"
            "<div class='ocr_carea'><p class='ocr_par'><span class='ocr_line'>"
            "<span class='ocrx_word' title='bbox 1 1 5 5; x_wconf 50'>hi<br></span>"
            "</span></p></div></div></body></html>"
        )
        (page,) = parse_hocr_text(html_doc)
        assert [w.text for w in page.words] == ["hi"]
        assert page.image_path is None

    def test_no_pages(self):
        assert parse_hocr_text("<html><body></body></html>") == []

    def test_from_file(self, tmp_path):
        path = tmp_path / "page.hocr"
        path.write_text(HOCR, encoding="utf-8")
        assert len(parse_hocr_pages(str(path))[0].words) == 6

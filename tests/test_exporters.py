"""Tests for reading rendered tables back and exporting them to CSV."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import csv
import dataclasses
from pathlib import Path

from conftest import make_word, region_for
from hocr_table_renderer.exporters import rows_to_csv, tables_from_markup, tables_to_csv
from hocr_table_renderer.membership import TableLocator
from hocr_table_renderer.serializer import serialize_page
from hocr_table_renderer.spatial import Grid

XS = (50, 200, 350)
YS = (50, 140, 230)


def cell_word(text, row, col):
    cx = (XS[col - 1] + XS[col]) // 2
    cy = (YS[row - 1] + YS[row]) // 2
    return make_word(text, (cx - 10, cy - 5, cx + 10, cy + 5))

MARKUP = """
<div class='block'>
 <p class='paragraph'><span class='line'><span class='word'>fuera</span></span></p>
 <table class='table'><tbody>
  <tr><td><span class='word'><strong>Cuenta</strong></span></td><td><span class='word'>2023</span></td></tr>
  <tr><td><span class='word'>Caja</span> <span class='word'>chica</span></td><td><span class='word'>1,200</span></td></tr>
 </tbody></table>
 <table class='table'><tbody><tr><td><span class='word'>solo</span></td></tr></tbody></table>
</div>
"""


class TestTablesFromMarkup:

    def test_reads_every_table(self):
        assert tables_from_markup(MARKUP) == [
            [["Cuenta", "2023"], ["Caja chica", "1,200"]],
            [["solo"]],
        ]

    def test_empty_cells_keep_their_column(self):
        words = [cell_word("A", 1, 1), cell_word("D", 2, 2)]
        words[0] = dataclasses.replace(words[0], first_in_block=True)
        words[-1] = dataclasses.replace(words[-1], last_in_block=True)
        markup = serialize_page(words, locator=TableLocator([region_for(XS, YS)], [Grid(xs=XS, ys=YS)]))
        assert tables_from_markup(markup) == [[["A", ""], ["", "D"]]]

    def test_empty_rows_and_columns_between_filled_ones(self):
        markup = """
        <table><tbody>
         <tr left='0' top='0' right='40' bottom='10'>
          <td left='0' top='0' right='10' bottom='10'><span class='word'>a</span></td>
          <td left='30' top='0' right='40' bottom='10'><span class='word'>b</span></td>
         </tr>
         <tr left='0' top='20' right='40' bottom='30'>
          <td left='10' top='20' right='20' bottom='30'><span class='word'>c</span></td>
         </tr>
        </tbody></table>
        """
        assert tables_from_markup(markup) == [[
            ["a", "", "", "b"],
            ["", "", "", ""],
            ["", "c", "", ""],
        ]]

    def test_no_tables(self):
        assert tables_from_markup("<div class='block'></div>") == []


class TestCsv:

    def test_rows_are_padded(self, tmp_path):
        path = tmp_path / "t.csv"
        rows_to_csv([["a", "b"], ["c"]], str(path))
        with open(path, encoding="utf-8-sig", newline="") as fh:
            assert list(csv.reader(fh)) == [["a", "b"], ["c", ""]]

    def test_one_file_per_table(self, tmp_path):
        paths = tables_to_csv(tables_from_markup(MARKUP), str(tmp_path / "out"), stem="scan")
        assert [Path(p).name for p in paths] == ["scan_1.csv", "scan_2.csv"]
        with open(paths[0], encoding="utf-8-sig", newline="") as fh:
            assert list(csv.reader(fh))[1] == ["Caja chica", "1,200"]

# src/hocr_table_renderer/exporters.py
from __future__ import annotations
from pathlib import Path
from typing import List
import csv
import logging

from bs4 import BeautifulSoup, Tag

log = logging.getLogger(__name__)

Table = List[List[str]]

def _cell_text(td: Tag) -> str:
    words = [w.get_text().strip() for w in td.find_all("span", class_="word")]
    return " ".join(w for w in words if w)


def _has_box(tag: Tag) -> bool:
    return all(tag.get(side) is not None for side in ("left", "top", "right", "bottom"))


def _read_in_order(trs: List[Tag]) -> Table:
    return [[_cell_text(td) for td in tr.find_all("td")] for tr in trs]


def _read_positioned(trs: List[Tag]) -> Table:
    """
    Reconstruye la rejilla a partir de las cajas de <tr>/<td>.
    Sólo se emiten filas y celdas con palabras, así que los huecos se
    recuperan con los bordes distintos: la fila cubre todo el ancho de la
    tabla y cada celda aporta sus bordes de columna.
    """
    tds = [(tr, td) for tr in trs for td in tr.find_all("td")]
    xs = sorted({int(tr[k]) for tr in trs for k in ("left", "right")}
                | {int(td[k]) for _, td in tds for k in ("left", "right")})
    ys = sorted({int(tr[k]) for tr in trs for k in ("top", "bottom")})
    rows: Table = [[""] * (len(xs) - 1) for _ in range(len(ys) - 1)]
    for tr, td in tds:
        row, col = ys.index(int(tr["top"])), xs.index(int(td["left"]))
        text = _cell_text(td)
        rows[row][col] = f"{rows[row][col]} {text}".strip() if rows[row][col] else text
    return rows


def tables_from_markup(markup: str) -> List[Table]:
    """Read every rendered <table> back as rows of cell texts (words joined by spaces).

    When rows and cells carry their grid boxes, empty cells and rows between
    filled ones come back as "" so every value keeps its column.
    """
    soup = BeautifulSoup(markup, "lxml")
    tables: List[Table] = []
    for table in soup.find_all("table"):
        trs = table.find_all("tr")
        positioned = bool(trs) and all(_has_box(tr) for tr in trs) \
            and all(_has_box(td) for tr in trs for td in tr.find_all("td"))
        tables.append(_read_positioned(trs) if positioned else _read_in_order(trs))
    return tables

def rows_to_csv(rows: Table, csv_path: str) -> None:
    width = max((len(r) for r in rows), default=0)
    with open(csv_path, "w", encoding="utf-8-sig", newline="") as f:
        w = csv.writer(f)
        w.writerows([r + [""] * (width - len(r)) for r in rows])

def tables_to_csv(tables: List[Table], out_dir: str, stem: str = "table") -> List[str]:
    """Un CSV por tabla: <out_dir>/<stem>_<n>.csv. Devuelve las rutas escritas."""
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    paths = []
    for i, rows in enumerate(tables, start=1):
        csv_path = str(Path(out_dir) / f"{stem}_{i}.csv")
        rows_to_csv(rows, csv_path)
        log.info("Tabla %d exportada a %s (%d filas)", i, csv_path, len(rows))
        paths.append(csv_path)
    return paths

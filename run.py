# run.py
# Lanzador sin instalar el paquete: añade src/ al path y delega en la CLI.
from __future__ import annotations
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent / "src"))
from importlib import import_module

if __name__ == "__main__":
    import_module("hocr_table_renderer.cli").main()

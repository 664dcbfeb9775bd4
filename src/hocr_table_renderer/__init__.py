__version__ = "0.1.0"

from .config import DetectionParams, RenderOptions
from .detection import detect_table_regions, extract_table_regions
from .grid_builder import build_grid, build_grids, cluster_coordinates
from .lines import ImageLoadError, binarize, extract_rule_lines, load_page_image
from .main import detect_page_tables, image_to_abbyy, render_recognized_page
from .membership import TableLocator, find_table, locate_column, locate_row
from .serializer import LayoutSerializer, serialize_page
from .spatial import CellAddress, Grid, TableRegion
from .structures import BBox, FontAttributes, RecognizedPage, Word, WordDirection

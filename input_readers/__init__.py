from .delimited import read_delimited
from .excel import Grid, cell_text, is_numeric_cell, read_sheet_grid

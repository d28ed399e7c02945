from .excel_writer import export_catalog, report_filename
from .frames import catalog_to_frame, report_columns, sorted_entries
from .palette import SUPPLIER_COLORS

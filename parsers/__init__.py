from .base import SupplierParser, build_outcome
from .cobeca import CobecaParser
from .delimited import DroactivaParser, DromarkoParser
from .f24 import F24Parser
from .generic import GenericExcelParser
from .headers import ColumnRule, HeaderDetectionError, HeaderLayout, detect_header, infer_price_column
from .nena import NenaParser
from .registry import parser_for
from .spreadsheet import SpreadsheetParser

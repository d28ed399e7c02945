from .normalization import (
    clean_barcode,
    clean_description,
    fold_accents,
    parse_embedded_discount,
    parse_locale_decimal,
    parse_percent_cell,
    parse_stock,
)

"""
Presentation-only supplier colours (hex RGB), shared by the Excel report and the UI.
"""

from __future__ import annotations

from domain.suppliers import Supplier

SUPPLIER_COLORS = {
    Supplier.DROACTIVA: "4285F4",
    Supplier.DROMARKO: "EA4335",
    Supplier.COBECA: "34A853",
    Supplier.NENA: "FBBC04",
    Supplier.F24: "AB47BC",
    Supplier.P365: "FF7043",
}

TITLE_FILL = "1E2128"
HEADER_FILL = "212529"
SUPPLIER_HEADER_FILL = "34495E"
WINNER_FILL = "27AE60"

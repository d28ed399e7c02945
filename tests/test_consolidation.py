from __future__ import annotations

import pytest

from domain.suppliers import Supplier
from engine import (
    ConsolidationEngine,
    EngineState,
    EngineStateError,
    JoinStrategy,
    build_anchor_centric,
    build_full_outer,
    convert_records,
    convert_supplier_data,
)

from .factories import record


@pytest.fixture
def raw_data():
    return {
        Supplier.DROACTIVA: [
            record(Supplier.DROACTIVA, "A", 10.0, "ACETAMINOFEN 500MG", stock=5),
            record(Supplier.DROACTIVA, "C", 4.0, "", stock=0),
        ],
        Supplier.COBECA: [
            record(Supplier.COBECA, "A", 9.0, "ACETAMINOFEN 500MG CALOX", stock=2),
            record(Supplier.COBECA, "B", 3.0, "DOLO NEUROBION TAB", stock=8),
            record(Supplier.COBECA, "C", 5.0, "true", stock=3),
        ],
        Supplier.P365: [
            record(Supplier.P365, "B", 2.5, "DOLO-NEUROBION FORTE", stock=0),
            record(Supplier.P365, "C", 4.5, "IBUPROFENO 400MG SUSPENSION", stock=1),
        ],
    }


# ---------------------------------------------------------------------------
# Joins
# ---------------------------------------------------------------------------
def test_anchor_join_keeps_only_anchor_barcodes() -> None:
    raw = {
        Supplier.DROACTIVA: [record(Supplier.DROACTIVA, "A", 10.0)],
        Supplier.COBECA: [record(Supplier.COBECA, "A", 9.0), record(Supplier.COBECA, "B", 3.0)],
    }
    catalog = build_anchor_centric(raw, Supplier.DROACTIVA)
    assert set(catalog) == {"A"}
    assert catalog["A"].winner is Supplier.COBECA
    assert catalog["A"].supplier_count == 2


def test_full_outer_join_keeps_every_barcode() -> None:
    raw = {
        Supplier.DROACTIVA: [record(Supplier.DROACTIVA, "A", 10.0)],
        Supplier.COBECA: [record(Supplier.COBECA, "A", 9.0), record(Supplier.COBECA, "B", 3.0)],
    }
    catalog = build_full_outer(raw)
    assert set(catalog) == {"A", "B"}
    assert catalog["B"].winner is Supplier.COBECA
    assert catalog["B"].loser is None


def test_anchor_join_without_anchor_data_is_empty() -> None:
    raw = {Supplier.COBECA: [record(Supplier.COBECA, "A", 9.0)]}
    assert build_anchor_centric(raw, Supplier.DROACTIVA) == {}


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------
def test_convert_records_only_touches_local_currency() -> None:
    nena = record(Supplier.NENA, "A", 400.0)
    cobeca = record(Supplier.COBECA, "A", 400.0)
    assert convert_records([nena, cobeca], 40.0) == 1
    assert nena.base_price == pytest.approx(10.0)
    assert cobeca.base_price == pytest.approx(400.0)


def test_unconfigured_rate_leaves_prices_and_warns(caplog) -> None:
    raw = {Supplier.F24: [record(Supplier.F24, "A", 400.0)]}
    assert convert_supplier_data(raw, 1.0) == 0
    assert raw[Supplier.F24][0].base_price == pytest.approx(400.0)
    assert "not configured" in caplog.text


def test_reprocessing_converts_from_source_prices() -> None:
    nena = record(Supplier.NENA, "A", 400.0, offer_pct=10.0)
    raw = {Supplier.NENA: [nena]}
    engine = ConsolidationEngine()

    engine.process(raw, 30.0, exchange_rate=40.0)
    assert engine.catalog["A"].base_price_for(Supplier.NENA) == pytest.approx(10.0)
    assert engine.catalog["A"].best_price == pytest.approx(9.0)

    engine.process(raw, 30.0, exchange_rate=50.0)
    assert engine.catalog["A"].base_price_for(Supplier.NENA) == pytest.approx(8.0)
    assert engine.catalog["A"].best_price == pytest.approx(7.2)

    # The caller's records keep their local-currency prices.
    assert nena.base_price == pytest.approx(400.0)
    assert nena.converted is False


def test_recalculate_does_not_convert_again() -> None:
    raw = {Supplier.F24: [record(Supplier.F24, "A", 400.0)]}
    engine = ConsolidationEngine()
    engine.process(raw, 30.0, exchange_rate=40.0)
    engine.recalculate(10.0)
    engine.recalculate(20.0, JoinStrategy.ANCHOR)
    assert engine.universal_catalog["A"].best_price == pytest.approx(10.0)


# ---------------------------------------------------------------------------
# Engine lifecycle
# ---------------------------------------------------------------------------
def test_queries_before_processing_raise() -> None:
    engine = ConsolidationEngine()
    assert engine.state is EngineState.IDLE
    with pytest.raises(EngineStateError):
        engine.recalculate(30.0)
    with pytest.raises(EngineStateError):
        engine.gap_products()
    with pytest.raises(EngineStateError):
        engine.cheapest_by_molecule("dolo")
    with pytest.raises(EngineStateError):
        engine.analytics


def test_state_transitions(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.load(raw_data)
    assert engine.state is EngineState.PARSED
    with pytest.raises(EngineStateError):
        engine.simulate_margin(10.0)
    engine.consolidate(JoinStrategy.ANCHOR)
    assert engine.state is EngineState.CONSOLIDATED
    engine.analyze()
    assert engine.state is EngineState.ANALYZED
    engine.simulate_margin(10.0)
    assert engine.state is EngineState.SIMULATED

    engine.reset()
    assert engine.state is EngineState.IDLE
    assert engine.catalog == {}
    assert engine.raw_data == {}


def test_process_with_each_strategy(raw_data) -> None:
    engine = ConsolidationEngine()
    catalog = engine.process(raw_data, 30.0, JoinStrategy.ANCHOR)
    assert set(catalog) == {"A", "C"}
    assert engine.total_products == 2
    assert engine.comparable_products == 2
    assert set(engine.universal_catalog) == {"A", "B", "C"}

    catalog = engine.recalculate(30.0, JoinStrategy.FULL_OUTER)
    assert set(catalog) == {"A", "B", "C"}
    assert engine.join_strategy is JoinStrategy.FULL_OUTER
    assert catalog["A"].winner is Supplier.COBECA
    assert catalog["A"].simulated_sale_price == pytest.approx(9.0 * 1.3)


def test_recalculate_applies_new_margin(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0)
    engine.recalculate(50.0)
    assert engine.margin_pct == 50.0
    assert engine.catalog["B"].simulated_sale_price == pytest.approx(2.5 * 1.5)
    assert engine.universal_catalog["B"].simulated_margin == pytest.approx(1.25)


def test_description_backfill(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0, JoinStrategy.ANCHOR)
    # Droactiva's blank and Cobeca's "true" never become the description.
    assert engine.catalog["C"].description == "IBUPROFENO 400MG SUSPENSION"

    engine.catalog["C"].description = ""
    engine.universal_catalog["C"].description = "null"
    assert engine.backfill_descriptions() == 2
    assert engine.catalog["C"].description == "IBUPROFENO 400MG SUSPENSION"
    assert engine.universal_catalog["C"].description == "IBUPROFENO 400MG SUSPENSION"
    assert engine.backfill_descriptions() == 0


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def test_gap_products_for_anchor(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0, JoinStrategy.ANCHOR)
    # B: anchor never listed it, Cobeca has stock. C: anchor out of stock, others in stock.
    gaps = {e.barcode for e in engine.gap_products()}
    assert gaps == {"B", "C"}
    # Stock units across gaps: Cobeca 8 (B) + 3 (C), P365 1 (C, out of stock on B).
    assert engine.gap_summary_by_supplier() == {Supplier.COBECA: 11, Supplier.P365: 1}


def test_gap_products_for_other_target(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0)
    # P365 has no record for A, and is out of stock for B.
    assert {e.barcode for e in engine.gap_products(Supplier.P365)} == {"A", "B"}


def test_cheapest_by_molecule(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0, JoinStrategy.ANCHOR)
    matches = engine.cheapest_by_molecule("dolo")
    assert [e.barcode for e in matches] == ["B"]
    assert matches[0].best_price == pytest.approx(2.5)

    matches = engine.cheapest_by_molecule("  ACETA  500 ")
    assert [e.barcode for e in matches] == ["A"]
    assert engine.cheapest_by_molecule("aceta ibupro") == []
    assert engine.cheapest_by_molecule("   ") == []


def test_cheapest_by_molecule_orders_by_best_price() -> None:
    raw = {
        Supplier.COBECA: [
            record(Supplier.COBECA, "1", 7.0, "LOSARTAN 50MG"),
            record(Supplier.COBECA, "2", 3.0, "LOSARTAN 100MG"),
            record(Supplier.COBECA, "3", 5.0, "LOSARTAN POTASICO", offer_pct=100.0),
        ],
    }
    engine = ConsolidationEngine()
    engine.process(raw, 0.0)
    assert [e.barcode for e in engine.cheapest_by_molecule("losartan")] == ["2", "1", "3"]


def test_analytics(raw_data) -> None:
    engine = ConsolidationEngine()
    engine.process(raw_data, 30.0)
    stats = engine.analytics

    # A: Cobeca 9 < Droactiva 10. B: P365 2.5 < Cobeca 3. C: Droactiva 4 < P365 4.5 < Cobeca 5.
    assert stats.total_products == 3
    assert stats.comparable_products == 3
    assert engine.win_count_by_supplier()[Supplier.COBECA] == 1
    assert engine.win_count_by_supplier()[Supplier.NENA] == 0
    assert engine.loss_count_by_supplier()[Supplier.COBECA] == 2
    assert engine.supplier_with_most_losses() is Supplier.COBECA
    # Three suppliers tie on one win; declaration order decides.
    assert engine.supplier_with_most_wins() is Supplier.DROACTIVA

    assert engine.average_price_by_supplier()[Supplier.P365] == pytest.approx(3.5)
    assert engine.total_stock_by_supplier()[Supplier.COBECA] == 13
    assert engine.offer_count_by_supplier() == {}
    assert engine.supplier_with_best_avg_discount() is None
    base, net = engine.base_vs_net_by_supplier()[Supplier.DROACTIVA]
    assert base == pytest.approx(7.0)
    assert net == pytest.approx(7.0)


def test_analytics_discount_selectors() -> None:
    raw = {
        Supplier.DROACTIVA: [record(Supplier.DROACTIVA, "A", 10.0, offer_pct=5.0)],
        Supplier.NENA: [record(Supplier.NENA, "A", 10.0, offer_pct=15.0), record(Supplier.NENA, "B", 4.0)],
        Supplier.P365: [record(Supplier.P365, "A", 10.0)],
    }
    engine = ConsolidationEngine()
    engine.process(raw, 30.0)
    assert engine.analytics.average_discount[Supplier.NENA] == pytest.approx(7.5)
    assert engine.supplier_with_best_avg_discount() is Supplier.NENA
    assert engine.supplier_with_worst_avg_discount() is Supplier.P365
    assert engine.offer_count_by_supplier() == {Supplier.DROACTIVA: 1, Supplier.NENA: 1}


def test_anchor_scenario_with_two_suppliers() -> None:
    raw = {
        Supplier.DROACTIVA: [
            record(Supplier.DROACTIVA, "X", 10.0),
            record(Supplier.DROACTIVA, "Y", 12.0),
            record(Supplier.DROACTIVA, "Z", 8.0),
        ],
        Supplier.COBECA: [record(Supplier.COBECA, "X", 11.0), record(Supplier.COBECA, "W", 9.0)],
    }
    engine = ConsolidationEngine()
    catalog = engine.process(raw, 30.0, JoinStrategy.ANCHOR)

    assert list(catalog) == ["X", "Y", "Z"]
    assert catalog["X"].winner is Supplier.DROACTIVA
    assert catalog["X"].loser is Supplier.COBECA
    assert catalog["X"].diff_pct == pytest.approx(10.0)
    assert catalog["Y"].loser is None
    assert "W" not in catalog
    assert list(engine.universal_catalog["W"].suppliers) == [Supplier.COBECA]


def test_gap_summary_counts_stock_units() -> None:
    raw = {
        Supplier.DROACTIVA: [record(Supplier.DROACTIVA, "A", 10.0, stock=0)],
        Supplier.COBECA: [record(Supplier.COBECA, "A", 9.0, stock=40)],
        Supplier.P365: [record(Supplier.P365, "A", 0.0, stock=25)],
    }
    engine = ConsolidationEngine()
    engine.process(raw, 30.0, JoinStrategy.ANCHOR)
    assert [e.barcode for e in engine.gap_products()] == ["A"]
    # P365 has no usable price, so its stock does not count.
    assert engine.gap_summary_by_supplier() == {Supplier.COBECA: 40}

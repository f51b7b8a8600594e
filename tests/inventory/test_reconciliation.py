from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.sigrap.sigrap.core.exceptions import InsufficientStockError, NotFoundError
from src.sigrap.sigrap.inventory.reconciliation import StockReconciler, allocation, merge, negate, net_change
from tests.fakes import NOTEBOOK, PAPER_REAM, PEN


@dataclass(frozen=True)
class Line:
    product_id: int
    quantity: int


def test_allocation_sums_quantities_per_product():
    lines = [Line(NOTEBOOK, 2), Line(PEN, 1), Line(NOTEBOOK, 3)]

    assert allocation(lines) == {NOTEBOOK: 5, PEN: 1}


def test_net_change_drops_unchanged_products():
    before = {NOTEBOOK: 3, PEN: 2}
    after = {NOTEBOOK: 3, PEN: 5, PAPER_REAM: 1}

    assert net_change(before, after) == {PEN: 3, PAPER_REAM: 1}
    assert net_change(after, before) == {PEN: -3, PAPER_REAM: -1}
    assert net_change(before, before) == {}


def test_negate_and_merge():
    assert negate({NOTEBOOK: 2, PEN: -1}) == {NOTEBOOK: -2, PEN: 1}
    assert merge({NOTEBOOK: 2}, {NOTEBOOK: -2, PEN: 4}, {PEN: 1}) == {PEN: 5}


def test_plan_validates_without_writing(products_repo, store):
    reconciler = StockReconciler(products_repo)

    changes = reconciler.plan({NOTEBOOK: -10, PEN: 5})

    assert [(c.product.product_id, c.delta, c.stock_after) for c in changes] == [(NOTEBOOK, -10, 0), (PEN, 5, 55)]
    assert store.stock(NOTEBOOK) == 10
    assert store.stock(PEN) == 50


def test_plan_reports_product_and_available_stock(products_repo):
    reconciler = StockReconciler(products_repo)

    with pytest.raises(InsufficientStockError) as exc:
        reconciler.plan({PEN: -1, PAPER_REAM: -6})

    assert exc.value.product_id == PAPER_REAM
    assert "Resma A4" in str(exc.value)
    assert "available 5" in str(exc.value)


def test_plan_skips_zero_deltas(products_repo):
    assert StockReconciler(products_repo).plan({NOTEBOOK: 0}) == []


def test_reconcile_applies_all_changes(products_repo, store):
    StockReconciler(products_repo).reconcile({NOTEBOOK: -4, PAPER_REAM: 2})

    assert store.stock(NOTEBOOK) == 6
    assert store.stock(PAPER_REAM) == 7


def test_apply_raises_when_guarded_update_is_refused(products_repo, store):
    reconciler = StockReconciler(products_repo)
    changes = reconciler.plan({NOTEBOOK: -10})
    products_repo.adjust_stock(NOTEBOOK, -1)

    with pytest.raises(InsufficientStockError):
        reconciler.apply(changes)

    assert store.stock(NOTEBOOK) == 9


def test_require_products_loads_in_ascending_order(products_repo):
    found = StockReconciler(products_repo).require_products([PAPER_REAM, NOTEBOOK, PAPER_REAM])

    assert list(found) == [NOTEBOOK, PAPER_REAM]
    assert products_repo.locked == [NOTEBOOK, PAPER_REAM]


def test_require_products_raises_for_unknown_id(products_repo):
    with pytest.raises(NotFoundError) as exc:
        StockReconciler(products_repo).require_products([NOTEBOOK, 404])

    assert "404" in str(exc.value)

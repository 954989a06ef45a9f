from decimal import Decimal

import pytest

from tricol.app.db.models.models_v1 import Order, OrderLine, Product, Supplier
from tricol.services.errors import Conflict, InsufficientStock, InvalidInput, NotFound
from tricol.services.ledger import (
    adjust_on_hand,
    delete_product,
    receive_stock,
    update_product,
    weighted_average_cost,
)


def test_first_receipt_creates_product_with_cost_equal_to_price(db_session):
    p = receive_stock(db_session, name="Produit A", quantity=10, unit_price=100)
    db_session.commit()

    assert p.id is not None
    assert p.quantity_on_hand == 10
    assert p.unit_price == Decimal("100")
    assert p.cost_per_unit == Decimal("100")


def test_second_receipt_recomputes_weighted_average_cost(db_session):
    """
    GIVEN  un produit (10 unités, CUMP 100)
    WHEN   réception de 5 unités à 200
    THEN   stock 15, CUMP = (10*100 + 5*200) / 15 ~ 133.33, prix courant 200
    """
    receive_stock(db_session, name="Produit A", quantity=10, unit_price=100)
    p = receive_stock(db_session, name="Produit A", quantity=5, unit_price=200)
    db_session.commit()

    assert p.quantity_on_hand == 15
    assert p.unit_price == Decimal("200")
    assert float(p.cost_per_unit) == pytest.approx(133.33, abs=0.01)
    assert db_session.query(Product).count() == 1


def test_zero_quantity_receipt_keeps_cost(db_session):
    receive_stock(db_session, name="Vis", quantity=0, unit_price=3)
    p = receive_stock(db_session, name="Vis", quantity=0, unit_price=9)

    assert p.quantity_on_hand == 0
    assert p.cost_per_unit == Decimal("3")
    assert p.unit_price == Decimal("9")


def test_receipt_refreshes_description_only_when_given(db_session):
    receive_stock(db_session, name="Clavier", quantity=1, unit_price=20, description="AZERTY", category="Informatique")
    p = receive_stock(db_session, name="Clavier", quantity=1, unit_price=20)

    assert p.description == "AZERTY"
    assert p.category == "Informatique"


@pytest.mark.parametrize("quantity, price", [(-1, 10), (1, -5)])
def test_receipt_rejects_negative_values(db_session, quantity, price):
    with pytest.raises(InvalidInput):
        receive_stock(db_session, name="X", quantity=quantity, unit_price=price)


def test_weighted_average_cost_skips_division_when_total_is_zero():
    assert weighted_average_cost(0, Decimal("12.5"), 0, Decimal("99")) == Decimal("12.5")
    assert weighted_average_cost(1, Decimal("1"), 2, Decimal("4")) == Decimal("3.0000")


def test_adjust_on_hand_decrements_and_increments(db_session):
    p = receive_stock(db_session, name="Souris", quantity=50, unit_price=10)

    adjust_on_hand(db_session, p.id, -10)
    assert p.quantity_on_hand == 40

    adjust_on_hand(db_session, p.id, 5)
    assert p.quantity_on_hand == 45


def test_adjust_on_hand_refuses_to_go_negative(db_session):
    p = receive_stock(db_session, name="Souris", quantity=5, unit_price=10)

    with pytest.raises(InsufficientStock) as exc_info:
        adjust_on_hand(db_session, p.id, -10)

    assert exc_info.value.product_id == p.id
    assert exc_info.value.requested == 10
    assert exc_info.value.available == 5
    assert exc_info.value.shortfall == 5
    assert p.quantity_on_hand == 5


def test_adjust_on_hand_unknown_product(db_session):
    with pytest.raises(NotFound):
        adjust_on_hand(db_session, 999, 1)


def test_update_product_overwrites_without_touching_cost(db_session):
    p = receive_stock(db_session, name="Produit A", quantity=10, unit_price=100)

    update_product(
        db_session,
        p.id,
        name="Produit B",
        description="Desc",
        category="Cat",
        unit_price=150,
        quantity_on_hand=20,
    )

    assert p.name == "Produit B"
    assert p.unit_price == Decimal("150")
    assert p.quantity_on_hand == 20
    assert p.cost_per_unit == Decimal("100")


def test_update_product_rejects_duplicate_name(db_session):
    receive_stock(db_session, name="A", quantity=1, unit_price=1)
    b = receive_stock(db_session, name="B", quantity=1, unit_price=1)

    with pytest.raises(Conflict):
        update_product(db_session, b.id, name="A", description=None, category=None, unit_price=1, quantity_on_hand=1)


def test_delete_product_referenced_by_order_line_is_refused(db_session):
    p = receive_stock(db_session, name="Écran", quantity=3, unit_price=150)
    s = Supplier(company_name="ABC SARL")
    db_session.add(s)
    db_session.flush()
    o = Order(supplier_id=s.id)
    db_session.add(o)
    db_session.flush()
    db_session.add(OrderLine(order_id=o.id, product_id=p.id, quantity=1))
    db_session.flush()

    with pytest.raises(Conflict):
        delete_product(db_session, p.id)


def test_delete_product(db_session):
    p = receive_stock(db_session, name="Câble", quantity=3, unit_price=2)
    db_session.commit()

    delete_product(db_session, p.id)
    db_session.commit()

    assert db_session.get(Product, p.id) is None


def test_update_product_with_only_a_price_keeps_stock(db_session):
    p = receive_stock(db_session, name="Clavier", quantity=50, unit_price=10, category="Informatique")

    update_product(db_session, p.id, unit_price=12)

    assert p.quantity_on_hand == 50
    assert p.unit_price == Decimal("12")
    assert p.category == "Informatique"
    assert p.name == "Clavier"

from datetime import datetime
from decimal import Decimal

import pytest

from rutz import fixtures, schemas
from rutz.errors import CheckoutError, InvariantViolation
from rutz.mem_storage import MemStorage
from rutz.services import checkout, impact, journey, learning, recommendations
from rutz.services.pdf import generate_receipt_pdf


def _user(**overrides):
    fields = dict(id="u1", email="u@example.org", first_name="U", last_name="Ser",
                  created_at=datetime(2024, 1, 1), updated_at=datetime(2024, 1, 1))
    fields.update(overrides)
    return schemas.User(**fields)


# -------------------- Impact -------------------- #
def test_funding_percentage_half_funded():
    project = schemas.CommunityProject(
        id="p", name="n", description="d", location="l", community="c", category="education",
        funding_goal=Decimal("100.00"), current_funding=Decimal("50.00"),
        created_at=datetime(2024, 1, 1), last_updated=datetime(2024, 1, 1),
    )
    assert project.funding_percentage == 50
    assert impact.funding_percentage(Decimal("50.00"), Decimal("100.00")) == 50
    assert impact.funding_percentage(Decimal("0"), Decimal("0")) == 0.0


def test_project_changes_checks_merged_funding():
    current = {"funding_goal": Decimal("100"), "current_funding": Decimal("90"), "status": "active"}
    with pytest.raises(InvariantViolation):
        impact.project_changes(current, {"funding_goal": Decimal("80")})
    changes = impact.project_changes(current, {"status": "completed"})
    assert changes["completion_date"] is not None
    assert "last_updated" in changes


# -------------------- Journey -------------------- #
@pytest.mark.parametrize("spent, points, learned, expected", [
    (Decimal("1000"), 500, 75, True),
    (Decimal("999"), 500, 75, False),
    (Decimal("1000"), 499, 75, False),
    (Decimal("1000"), 500, 74, False),
])
def test_requirements_need_every_threshold(spent, points, learned, expected):
    requirements = schemas.StageRequirements(min_purchases=1000, min_loyalty_points=500, min_learning_progress=75)
    user = _user(total_spent=spent, loyalty_points=points, learning_progress=learned)
    assert journey.requirements_met(requirements, user) is expected


def test_unset_thresholds_are_ignored():
    assert journey.requirements_met(schemas.StageRequirements(), _user()) is True


def test_level_for_xp():
    assert journey.level_for_xp(0) == 1
    assert journey.level_for_xp(999) == 1
    assert journey.level_for_xp(2500) == 3


def test_next_stage_after_last_is_none():
    stages = fixtures.journey_stages()
    assert journey.next_stage(stages, "explorer").id == "seeker"
    assert journey.next_stage(stages, "guardian") is None
    assert journey.next_stage(stages, None).id == "explorer"


# -------------------- Learning -------------------- #
def test_merged_progress_is_monotonic_and_capped():
    assert learning.merged_progress(60, 20) == 60
    assert learning.merged_progress(60, 150) == 100
    assert learning.status_for(100) == "completed"
    assert learning.status_for(0) == "in_progress"


# -------------------- Recommendations -------------------- #
def test_immune_goal_favours_chaga_capsules():
    prefs = schemas.PreferencesRequest(health_goals=["immune_support"], preferred_formats=["capsules"],
                                       budget_range="medium", experience_level="advanced")
    ranked = recommendations.rank_products(fixtures.products(), prefs)
    top = ranked[0]
    # 0.5 base + 0.3 goal + 0.15 format + 0.1 budget
    assert top.product_id == "chaga-capsules"
    assert top.score == 1.0
    assert top.priority == 1
    assert [r.score for r in ranked] == sorted((r.score for r in ranked), reverse=True)


def test_beginner_tea_bonus_and_reason():
    prefs = schemas.PreferencesRequest(experience_level="beginner", budget_range="high")
    scored = {r.product_id: r for r in recommendations.rank_products(fixtures.products(), prefs, limit=20)}
    tea = scored["labrador-tea-premium-blend"]
    assert tea.reason.endswith("Great for beginners")
    assert tea.score == 0.6


def test_confidence_and_explanation():
    assert recommendations.confidence_score([]) == Decimal("0.50")
    recs = [schemas.RecommendedProduct(product_id="a", score=0.9, reason="r", priority=1)]
    explanation = recommendations.build_explanation(
        schemas.PreferencesRequest(health_goals=["immune_support"]), recs)
    assert explanation.startswith("Based on your health goals of immune_support")
    assert "90% compatibility" in explanation


# -------------------- Checkout -------------------- #
def test_place_order_reserves_stock_and_clears_cart():
    storage = MemStorage()
    user = storage.create_user(schemas.UserCreate(email="b@example.org", first_name="B", last_name="C"))
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="turmeric-extract", quantity=2))

    order = checkout.place_order(storage, "s", user.id)

    assert order.subtotal == Decimal("99.98")
    assert order.total == order.subtotal + order.tax + order.shipping
    assert order.items[0].total == Decimal("99.98")
    assert storage.get_inventory("turmeric-extract").reserved_stock == 2
    assert storage.get_cart_items("s") == []
    assert storage.get_user(user.id).total_spent == order.total


def test_place_order_rolls_back_on_short_stock():
    storage = MemStorage()
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="turmeric-extract", quantity=1))
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="chaga-wound-care-gel", quantity=16))

    with pytest.raises(CheckoutError):
        checkout.place_order(storage, "s")

    assert storage.get_inventory("turmeric-extract").reserved_stock == 0
    assert len(storage.get_cart_items("s")) == 2
    assert [o.status for o in storage.orders.values()] == ["cancelled"]


def test_empty_cart_cannot_check_out():
    with pytest.raises(CheckoutError):
        checkout.place_order(MemStorage(), "nobody")


def test_cancel_order_releases_reservations_once():
    storage = MemStorage()
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="chaga-capsules", quantity=3))
    order = checkout.place_order(storage, "s")

    assert checkout.cancel_order(storage, order.id).status == "cancelled"
    checkout.cancel_order(storage, order.id)
    assert storage.get_inventory("chaga-capsules").reserved_stock == 0
    assert [m.type for m in storage.get_inventory_movements("chaga-capsules")] == ["release", "reservation"]
    assert checkout.cancel_order(storage, "missing") is None


def test_cancelled_order_cannot_release_twice(storage):
    storage.add_to_cart(schemas.CartItemCreate(session_id="a", product_id="chaga-capsules", quantity=2))
    storage.add_to_cart(schemas.CartItemCreate(session_id="b", product_id="chaga-capsules", quantity=3))
    first = checkout.place_order(storage, "a")
    checkout.place_order(storage, "b")

    checkout.cancel_order(storage, first.id)
    with pytest.raises(InvariantViolation):
        storage.update_order_status(first.id, "pending")
    checkout.cancel_order(storage, first.id)

    assert storage.get_order(first.id).status == "cancelled"
    assert storage.get_inventory("chaga-capsules").reserved_stock == 3


def test_cancel_order_debits_total_spent(storage):
    user = storage.create_user(schemas.UserCreate(email="d@example.org", first_name="D", last_name="E"))
    storage.add_user_spend(user.id, Decimal("5.00"))
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="turmeric-extract", quantity=2))
    order = checkout.place_order(storage, "s", user.id)
    assert storage.get_user(user.id).total_spent == Decimal("5.00") + order.total

    checkout.cancel_order(storage, order.id)
    checkout.cancel_order(storage, order.id)
    assert storage.get_user(user.id).total_spent == Decimal("5.00")


def test_receipt_is_a_pdf():
    storage = MemStorage()
    storage.add_to_cart(schemas.CartItemCreate(session_id="s", product_id="chaga-extract-powder", quantity=1))
    order = checkout.place_order(storage, "s")
    assert generate_receipt_pdf(order).startswith(b"%PDF")

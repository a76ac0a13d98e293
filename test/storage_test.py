"""Behaviour shared by MemStorage and DatabaseStorage (run against both)."""

import threading
from decimal import Decimal

import pytest

from rutz import schemas
from rutz.errors import InvariantViolation
from rutz.mem_storage import MemStorage


def _product(**overrides):
    fields = dict(
        name="Wild Blueberry Powder",
        description="Freeze-dried wild blueberry powder.",
        short_description="Freeze-dried berry powder",
        price=Decimal("19.50"),
        origin="Quebec, Canada",
        category="Superfood Powders",
        sector="Functional Foods",
        plant_material="Wild Blueberry",
        product_type="Fine ground superfood powder",
        rating=Decimal("4.5"),
        review_count=3,
        bioactive_compounds=["Anthocyanins"],
        research_papers=[schemas.ResearchPaper(title="Berry polyphenols", url="https://example.org", year=2020)],
    )
    fields.update(overrides)
    return schemas.ProductCreate(**fields)


def _user(storage, **overrides):
    fields = dict(email="ada@example.org", first_name="Ada", last_name="Lovelace")
    fields.update(overrides)
    return storage.create_user(schemas.UserCreate(**fields))


# -------------------- Catalog -------------------- #
def test_created_product_reads_back_equal(storage):
    data = _product()
    created = storage.create_product(data)
    fetched = storage.get_product(created.id)
    assert fetched is not None
    assert fetched.model_dump(exclude={"id"}) == data.model_dump()


def test_created_product_starts_with_empty_inventory(storage):
    created = storage.create_product(_product())
    row = storage.get_inventory(created.id)
    assert row is not None
    assert row.current_stock == 0
    assert row.reserved_stock == 0
    assert storage.reserve_stock(created.id, 1, "order-1") is False
    storage.update_inventory(created.id, schemas.InventoryUpdate(current_stock=5))
    assert storage.reserve_stock(created.id, 2, "order-1") is True


def test_unknown_product_is_none(storage):
    assert storage.get_product("no-such-product") is None


def test_product_filters_narrow_catalog(storage):
    chaga = storage.get_products(schemas.ProductFilters(plant_material="Chaga Mushroom"))
    assert len(chaga) == 5
    assert all(p.plant_material == "Chaga Mushroom" for p in chaga)
    assert len(storage.get_products()) == 15


def test_filter_options_are_sorted_and_distinct(storage):
    options = storage.get_product_filters()
    assert options.sectors == sorted(set(options.sectors))
    assert "Turmeric" in options.plant_materials


def test_products_by_plant_groups_by_sector(storage):
    group = storage.get_products_by_plant("chaga mushroom")
    assert group.total_products == 5
    assert sum(len(products) for products in group.sectors.values()) == 5
    assert storage.get_products_by_plant("Mandrake") is None


# -------------------- Cart -------------------- #
def test_clear_cart_empties_only_that_session(storage):
    storage.add_to_cart(schemas.CartItemCreate(session_id="s1", product_id="turmeric-extract", quantity=1))
    storage.add_to_cart(schemas.CartItemCreate(session_id="s1", product_id="chaga-capsules", quantity=3))
    storage.add_to_cart(schemas.CartItemCreate(session_id="s2", product_id="chaga-capsules", quantity=1))

    storage.clear_cart("s1")

    assert storage.get_cart_items("s1") == []
    assert len(storage.get_cart_items("s2")) == 1


def test_update_cart_item_stores_quantity(storage):
    item = storage.add_to_cart(schemas.CartItemCreate(session_id="s1", product_id="turmeric-extract"))
    assert storage.update_cart_item(item.id, 7).quantity == 7
    assert storage.get_cart_items("s1")[0].quantity == 7
    assert storage.update_cart_item("missing", 1) is None


# -------------------- Inventory -------------------- #
def test_reserve_beyond_available_changes_nothing(storage):
    before = storage.get_inventory("turmeric-extract")
    assert storage.reserve_stock("turmeric-extract", before.available_stock + 1, "order-1") is False
    after = storage.get_inventory("turmeric-extract")
    assert after.reserved_stock == before.reserved_stock
    assert after.current_stock == before.current_stock
    assert storage.get_inventory_movements("turmeric-extract") == []


def test_reserve_increments_exactly_and_records_one_movement(storage):
    before = storage.get_inventory("turmeric-extract")
    assert storage.reserve_stock("turmeric-extract", 5, "order-1") is True

    after = storage.get_inventory("turmeric-extract")
    assert after.reserved_stock == before.reserved_stock + 5
    assert after.current_stock == before.current_stock

    movements = storage.get_inventory_movements("turmeric-extract")
    assert len(movements) == 1
    movement = movements[0]
    assert movement.type == "reservation"
    assert movement.order_id == "order-1"
    assert movement.new_stock - movement.previous_stock == movement.quantity == -5


def test_release_returns_reserved_units(storage):
    storage.reserve_stock("chaga-capsules", 10, "order-2")
    assert storage.release_stock("chaga-capsules", 4, "order-2") is True
    assert storage.get_inventory("chaga-capsules").reserved_stock == 6
    assert storage.release_stock("no-such-product", 1, "order-2") is False


@pytest.mark.parametrize("quantity", [0, -5])
def test_non_positive_stock_quantities_are_rejected(storage, quantity):
    storage.reserve_stock("turmeric-extract", 3, "order-1")
    before = storage.get_inventory("turmeric-extract")
    with pytest.raises(InvariantViolation):
        storage.reserve_stock("turmeric-extract", quantity, "order-2")
    with pytest.raises(InvariantViolation):
        storage.release_stock("turmeric-extract", quantity, "order-1")
    after = storage.get_inventory("turmeric-extract")
    assert (after.current_stock, after.reserved_stock) == (before.current_stock, before.reserved_stock)
    assert len(storage.get_inventory_movements("turmeric-extract")) == 1


def test_inventory_update_cannot_drop_below_reserved(storage):
    storage.reserve_stock("chaga-face-serum", 50, "order-3")
    with pytest.raises(InvariantViolation):
        storage.update_inventory("chaga-face-serum", schemas.InventoryUpdate(current_stock=10))
    assert storage.get_inventory("chaga-face-serum").current_stock == 60


def test_inventory_adjustment_is_logged(storage):
    updated = storage.update_inventory("turmeric-extract", schemas.InventoryUpdate(current_stock=410))
    assert updated.current_stock == 410
    movement = storage.get_inventory_movements("turmeric-extract")[0]
    assert movement.type == "adjustment"
    assert movement.quantity == 10


def test_low_stock_lists_wound_care_gel(storage):
    low = storage.get_low_stock_products()
    assert [row.product_id for row in low] == ["chaga-wound-care-gel"]
    assert low[0].product.name


def test_check_availability(storage):
    assert storage.check_availability("turmeric-extract", 400) is True
    assert storage.check_availability("turmeric-extract", 401) is False
    assert storage.check_availability("missing", 1) is False


# -------------------- Community impact -------------------- #
def test_funding_above_goal_is_rejected(storage):
    with pytest.raises(InvariantViolation):
        storage.create_community_project(schemas.CommunityProjectCreate(
            name="Well", description="Clean water", location="Nunavut", community="Inuit",
            category="infrastructure", funding_goal=Decimal("100.00"), current_funding=Decimal("150.00"),
        ))
    with pytest.raises(InvariantViolation):
        storage.update_community_project("proj-001", schemas.CommunityProjectUpdate(
            current_funding=Decimal("999999.00")))


def test_completing_project_stamps_completion_date(storage):
    project = storage.update_community_project("proj-002", schemas.CommunityProjectUpdate(status="completed"))
    assert project.status == "completed"
    assert project.completion_date is not None
    assert storage.get_community_projects()[0].id == "proj-002"


def test_live_updates_are_public_and_newest_first(storage):
    updates = storage.get_live_impact_updates()
    assert updates[0].id == "update-003"
    assert all(u.is_public for u in updates)
    assert len(storage.get_live_impact_updates(limit=2)) == 2


def test_achieving_milestone_stamps_date(storage):
    assert storage.get_impact_milestones()[0].id == "mile-003"
    updated = storage.update_impact_milestone("mile-003", schemas.ImpactMilestoneUpdate(is_achieved=True))
    assert updated.is_achieved is True
    assert updated.achieved_date is not None
    assert {m.id for m in storage.get_impact_milestones("proj-001")} == {"mile-001", "mile-002"}


# -------------------- Recommendations -------------------- #
def test_recommendations_are_deterministic(storage):
    prefs = schemas.PreferencesRequest(
        health_goals=["immune_support", "stress_relief"],
        preferred_formats=["capsules"],
        budget_range="medium",
    )
    first = storage.generate_recommendations("s1", prefs)
    second = storage.generate_recommendations("s1", prefs)

    ids = [r.product_id for r in first.recommended_products]
    assert len(ids) == 6
    assert ids == [r.product_id for r in second.recommended_products]
    assert storage.get_recommendations("s1").id == second.id
    assert storage.get_user_preferences("s1").health_goals == ["immune_support", "stress_relief"]


# -------------------- Users, learning, badges, journey -------------------- #
def test_user_lookup_by_email(storage):
    user = _user(storage)
    assert storage.get_user_by_email("ada@example.org").id == user.id
    assert storage.get_user_by_email("nobody@example.org") is None


def test_learning_progress_never_decreases(storage):
    user = _user(storage)
    storage.update_learning_progress(user.id, "intro-traditional-medicine", 60)
    row = storage.update_learning_progress(user.id, "intro-traditional-medicine", 20)
    assert row.progress == 60
    assert row.status == "in_progress"
    # one of two modules at 60% averages to 30
    assert storage.get_user(user.id).learning_progress == 30


def test_completing_module_records_xp(storage):
    user = _user(storage)
    row = storage.complete_learning_module(user.id, "intro-traditional-medicine", 100)
    assert row.status == "completed"
    assert row.xp_earned == 100
    assert row.completed_at is not None


def test_module_xp_is_claimed_once(storage):
    user = _user(storage)
    assert storage.claim_module_xp(user.id, "intro-traditional-medicine", 100) is None
    storage.update_learning_progress(user.id, "intro-traditional-medicine", 100)

    claimed = storage.claim_module_xp(user.id, "intro-traditional-medicine", 100)
    assert claimed.xp_earned == 100
    assert storage.claim_module_xp(user.id, "intro-traditional-medicine", 100) is None
    again = storage.complete_learning_module(user.id, "intro-traditional-medicine", 100)
    assert again.xp_earned == 100
    assert len(storage.get_user_learning_progress(user.id)) == 1


def test_modules_ordered_by_difficulty(storage):
    assert [m.difficulty for m in storage.get_learning_modules()] == ["beginner", "intermediate"]


def test_awarded_badge_is_no_longer_eligible(storage):
    user = _user(storage)
    assert "first-purchase" in {b.id for b in storage.check_badge_eligibility(user.id)}
    storage.award_badge(user.id, "first-purchase")
    assert "first-purchase" not in {b.id for b in storage.check_badge_eligibility(user.id)}
    held = storage.get_user_badges(user.id)
    assert held[0].badge.name


def test_stage_progression_requires_every_threshold(storage):
    user = _user(storage)
    storage.update_user_level(user.id, 0)
    # seeker needs total spent >= 1 and learning progress >= 25
    storage.update_user(user.id, schemas.UserUpdate(total_spent=Decimal("10.00")))
    assert storage.check_stage_progression(user.id).can_advance is False
    assert storage.advance_journey_stage(user.id) is None

    storage.update_user(user.id, schemas.UserUpdate(learning_progress=25))
    decision = storage.can_advance_journey_stage(user.id)
    assert decision.can_advance is True
    assert decision.next_stage.id == "seeker"

    progress = storage.advance_journey_stage(user.id)
    assert progress.current_stage_id == "seeker"
    assert progress.completed_stages == ["explorer"]
    assert progress.total_xp == 100
    assert storage.get_user(user.id).loyalty_points == 200


def test_update_user_level_accumulates_xp(storage):
    user = _user(storage)
    storage.update_user_level(user.id, 600)
    progress = storage.update_user_level(user.id, 600, progress_to_next=40)
    assert progress.total_xp == 1200
    assert progress.level == 2
    assert progress.progress_to_next == 40


def test_impact_summary_sums_actions(storage):
    user = _user(storage)
    for value in ("12.50", "7.50"):
        storage.record_impact_action(schemas.ImpactActionCreate(
            user_id=user.id, action_type="purchase", description="Bought chaga",
            impact_value=Decimal(value), xp_earned=10, loyalty_points_earned=5,
        ))
    summary = storage.calculate_user_impact(user.id)
    assert summary.total_impact == 20.0
    assert summary.total_xp == 20
    assert summary.total_loyalty_points == 10


def test_add_user_spend(storage):
    user = _user(storage)
    storage.add_user_spend(user.id, Decimal("49.99"))
    assert storage.add_user_spend(user.id, Decimal("0.01")).total_spent == Decimal("50.00")
    assert storage.add_user_spend("missing", Decimal("1.00")) is None


def test_user_spend_debit_stops_at_zero(storage):
    user = _user(storage)
    storage.add_user_spend(user.id, Decimal("30.00"))
    assert storage.add_user_spend(user.id, Decimal("-10.00")).total_spent == Decimal("20.00")
    assert storage.add_user_spend(user.id, Decimal("-50.00")).total_spent == Decimal("0.00")


def test_add_loyalty_points_increments(storage):
    user = _user(storage)
    storage.add_loyalty_points(user.id, 15)
    assert storage.add_loyalty_points(user.id, 10).loyalty_points == 25
    assert storage.get_user(user.id).loyalty_points == 25
    assert storage.add_loyalty_points("missing", 5) is None


# -------------------- Orders -------------------- #
def _order(storage, **overrides):
    fields = dict(session_id="s", subtotal=Decimal("10.00"), total=Decimal("10.00"),
                  items=[schemas.OrderItemCreate(product_id="chaga-capsules", quantity=1, price=Decimal("10.00"))])
    fields.update(overrides)
    return storage.create_order(schemas.OrderCreate(**fields))


def test_order_is_marked_cancelled_once(storage):
    order = _order(storage)
    assert storage.mark_order_cancelled(order.id) is True
    assert storage.mark_order_cancelled(order.id) is False
    assert storage.get_order(order.id).status == "cancelled"
    assert storage.mark_order_cancelled("missing") is False


def test_cancelled_order_cannot_be_reopened(storage):
    order = _order(storage)
    assert storage.update_order_status(order.id, "shipped").status == "shipped"
    storage.mark_order_cancelled(order.id)
    with pytest.raises(InvariantViolation):
        storage.update_order_status(order.id, "pending")
    assert storage.get_order(order.id).status == "cancelled"
    assert storage.update_order_status("missing", "pending") is None


# -------------------- Plants -------------------- #
def test_plant_search_combines_filters(storage):
    assert {p.id for p in storage.get_plants_by_tribe("cherokee")} == {"echinacea-purpurea", "goldenseal"}
    assert len(storage.get_plants_by_region("north america")) == 4

    veterinary = storage.search_plants(schemas.PlantSearch(region="Africa", veterinary_use=True))
    assert {p.id for p in veterinary} == {"buchu", "devils-claw"}

    ceremonial = storage.search_plants(schemas.PlantSearch(search_term="ginseng", ceremonial_use=True))
    assert [p.id for p in ceremonial] == ["american-ginseng"]


def test_replace_plant_catalog(storage):
    storage.delete_all_global_indigenous_plants()
    assert storage.get_global_indigenous_plants() == []
    created = storage.create_global_indigenous_plants([schemas.GlobalIndigenousPlantCreate(
        id="sweetgrass", plant_name="Sweetgrass", scientific_name="Hierochloe odorata",
        region="North America", country_of_origin="Canada", traditional_uses="Smudging",
        popular_product_form="Braids", indigenous_tribes_or_group="Anishinaabe",
    )])
    assert created[0].id == "sweetgrass"
    assert storage.get_global_indigenous_plant("sweetgrass").plant_name == "Sweetgrass"


# -------------------- Concurrency (in-memory store) -------------------- #
def _run_together(*targets):
    threads = [threading.Thread(target=target) for target in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_reads_survive_concurrent_writes():
    storage = MemStorage()
    user = _user(storage)
    errors = []
    writing = threading.Event()
    writing.set()

    def write():
        try:
            for i in range(2000):
                storage.add_to_cart(schemas.CartItemCreate(session_id="w", product_id="chaga-capsules"))
                storage.update_learning_progress(user.id, "intro-traditional-medicine", i % 100)
        finally:
            writing.clear()

    def read():
        while writing.is_set():
            try:
                storage.get_cart_items("x")
                storage.get_user_learning_progress(user.id)
                storage.get_user_by_email("nobody@example.org")
            except RuntimeError as e:
                errors.append(e)

    _run_together(write, *[read] * 4)
    assert errors == []
    assert len(storage.get_cart_items("w")) == 2000


def test_concurrent_loyalty_credits_are_not_lost():
    storage = MemStorage()
    user = _user(storage)

    def credit():
        for _ in range(100):
            storage.add_loyalty_points(user.id, 1)

    _run_together(*[credit] * 8)
    assert storage.get_user(user.id).loyalty_points == 800


def test_concurrent_module_xp_claims_pay_once():
    storage = MemStorage()
    user = _user(storage)
    storage.update_learning_progress(user.id, "intro-traditional-medicine", 100)
    claims = []

    def claim():
        claims.append(storage.claim_module_xp(user.id, "intro-traditional-medicine", 100))

    _run_together(*[claim] * 8)
    assert len([c for c in claims if c is not None]) == 1

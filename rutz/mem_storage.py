# Filename: rutz/mem_storage.py
# In-process IStorage: ordered dicts of pydantic records seeded from
# rutz.fixtures. Records are replaced (model_copy), never mutated in place.
# Writes and any read that walks a container run under one re-entrant lock.

import functools
import threading
from collections import OrderedDict
from decimal import Decimal
from typing import List, Optional

from rutz import fixtures, schemas
from rutz.errors import InvariantViolation
from rutz.services import impact, journey, learning, recommendations, search
from rutz.storage import IStorage, require_positive_quantity
from rutz.utils import logger, new_id, to_money, utcnow


def _newest_first(records, key):
    # stable: equal timestamps keep reverse insertion order
    return sorted(reversed(list(records)), key=key, reverse=True)


def _synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class MemStorage(IStorage):

    def __init__(self):
        self._lock = threading.RLock()

        self.products = OrderedDict((p.id, p) for p in fixtures.products())
        self.supply_chain_steps = OrderedDict((s.id, s) for s in fixtures.supply_chain_steps())
        self.impact_metrics: Optional[schemas.ImpactMetrics] = fixtures.impact_metrics()
        self.cart_items = OrderedDict()

        self.community_projects = OrderedDict((p.id, p) for p in fixtures.community_projects())
        self.live_impact_updates = list(fixtures.live_impact_updates())
        self.impact_milestones = OrderedDict((m.id, m) for m in fixtures.impact_milestones())

        self.user_preferences: List[schemas.UserPreferences] = []
        self.recommendation_results: List[schemas.RecommendationResults] = []

        self.users = OrderedDict()
        self.orders = OrderedDict()
        self.order_items = OrderedDict()

        # keyed by product id
        self.inventory = OrderedDict((i.product_id, i) for i in fixtures.inventory(list(self.products)))
        self.inventory_movements: List[schemas.InventoryMovement] = []

        self.learning_modules = OrderedDict((m.id, m) for m in fixtures.learning_modules())
        self.learning_progress = OrderedDict()
        self.badges = OrderedDict((b.id, b) for b in fixtures.badges())
        self.user_badges: List[schemas.UserBadge] = []
        self.impact_actions: List[schemas.ImpactAction] = []
        self.journey_stages = OrderedDict((s.id, s) for s in fixtures.journey_stages())
        # keyed by user id
        self.journey_progress = OrderedDict()

        self.global_indigenous_plants = OrderedDict(
            (p.id, p) for p in fixtures.global_indigenous_plants()
        )

    # ---------------- Catalog ----------------

    @_synchronized
    def get_products(self, filters=None):
        predicates = search.product_predicates(filters) if filters else []
        return [p for p in self.products.values() if search.matches_all(p, predicates)]

    def get_product(self, product_id):
        return self.products.get(product_id)

    def create_product(self, data):
        with self._lock:
            product = schemas.Product(id=new_id(), **data.model_dump())
            self.products[product.id] = product
            self.inventory[product.id] = schemas.Inventory(
                id=f"inv-{product.id}", product_id=product.id, last_updated=utcnow()
            )
            return product

    @_synchronized
    def get_product_filters(self):
        products = list(self.products.values())
        return schemas.ProductFilterOptions(
            sectors=sorted({p.sector for p in products}),
            plant_materials=sorted({p.plant_material for p in products}),
            product_types=sorted({p.product_type for p in products}),
        )

    @_synchronized
    def get_products_by_plant(self, plant_material):
        matches = [p for p in self.products.values()
                   if p.plant_material.lower() == plant_material.lower()]
        if not matches:
            return None
        sectors = OrderedDict()
        for product in matches:
            sectors.setdefault(product.sector, []).append(product)
        return schemas.PlantProductGroup(
            plant_material=matches[0].plant_material,
            total_products=len(matches),
            sectors=sectors,
        )

    @_synchronized
    def get_supply_chain_steps(self):
        return sorted(self.supply_chain_steps.values(), key=lambda s: s.step_number)

    def get_supply_chain_step(self, step_id):
        return self.supply_chain_steps.get(step_id)

    def get_impact_metrics(self):
        return self.impact_metrics

    # ---------------- Cart ----------------

    @_synchronized
    def get_cart_items(self, session_id):
        items = []
        for item in self.cart_items.values():
            if item.session_id != session_id:
                continue
            product = self.products.get(item.product_id)
            if product is None:
                continue
            items.append(schemas.CartItemWithProduct(**item.model_dump(), product=product))
        return items

    def add_to_cart(self, item):
        with self._lock:
            cart_item = schemas.CartItem(id=new_id(), **item.model_dump())
            self.cart_items[cart_item.id] = cart_item
            return cart_item

    def update_cart_item(self, item_id, quantity):
        with self._lock:
            item = self.cart_items.get(item_id)
            if item is None:
                return None
            item = item.model_copy(update={"quantity": quantity})
            self.cart_items[item_id] = item
            return item

    def remove_from_cart(self, item_id):
        with self._lock:
            return self.cart_items.pop(item_id, None) is not None

    def clear_cart(self, session_id):
        with self._lock:
            for item_id in [k for k, v in self.cart_items.items() if v.session_id == session_id]:
                del self.cart_items[item_id]

    # ---------------- Community impact ----------------

    @_synchronized
    def get_community_projects(self):
        return _newest_first(self.community_projects.values(), key=lambda p: p.last_updated)

    def get_community_project(self, project_id):
        return self.community_projects.get(project_id)

    def create_community_project(self, data):
        impact.check_funding(data.funding_goal, data.current_funding)
        with self._lock:
            now = utcnow()
            project = schemas.CommunityProject(
                id=new_id(), created_at=now, last_updated=now, **data.model_dump()
            )
            self.community_projects[project.id] = project
            return project

    def update_community_project(self, project_id, updates):
        with self._lock:
            project = self.community_projects.get(project_id)
            if project is None:
                return None
            changes = impact.project_changes(project.model_dump(), updates.model_dump(exclude_unset=True))
            project = project.model_copy(update=changes)
            self.community_projects[project_id] = project
            return project

    @_synchronized
    def get_live_impact_updates(self, limit=20):
        public = [u for u in self.live_impact_updates if u.is_public]
        return _newest_first(public, key=lambda u: u.created_at)[:limit]

    def create_live_impact_update(self, data):
        with self._lock:
            update = schemas.LiveImpactUpdate(id=new_id(), created_at=utcnow(), **data.model_dump())
            self.live_impact_updates.append(update)
            return update

    @_synchronized
    def get_impact_milestones(self, project_id=None):
        milestones = list(self.impact_milestones.values())
        if project_id:
            return [m for m in milestones if m.project_id == project_id]
        return sorted(milestones, key=lambda m: m.target_date, reverse=True)

    def create_impact_milestone(self, data):
        with self._lock:
            milestone = schemas.ImpactMilestone(id=new_id(), created_at=utcnow(), **data.model_dump())
            self.impact_milestones[milestone.id] = milestone
            return milestone

    def update_impact_milestone(self, milestone_id, updates):
        with self._lock:
            milestone = self.impact_milestones.get(milestone_id)
            if milestone is None:
                return None
            changes = impact.milestone_changes(milestone.model_dump(), updates.model_dump(exclude_unset=True))
            milestone = milestone.model_copy(update=changes)
            self.impact_milestones[milestone_id] = milestone
            return milestone

    # ---------------- Recommendations ----------------

    @_synchronized
    def get_user_preferences(self, session_id):
        for prefs in reversed(self.user_preferences):
            if prefs.session_id == session_id:
                return prefs
        return None

    def save_user_preferences(self, data):
        with self._lock:
            now = utcnow()
            prefs = schemas.UserPreferences(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
            self.user_preferences.append(prefs)
            return prefs

    def generate_recommendations(self, session_id, preferences):
        with self._lock:
            saved = self.save_user_preferences(
                schemas.UserPreferencesCreate(session_id=session_id, **preferences.model_dump())
            )
            ranked = recommendations.rank_products(self.products.values(), preferences)
            result = schemas.RecommendationResults(
                id=new_id(),
                session_id=session_id,
                user_preferences_id=saved.id,
                recommended_products=ranked,
                explanation=recommendations.build_explanation(preferences, ranked),
                confidence_score=recommendations.confidence_score(ranked),
                created_at=utcnow(),
            )
            self.recommendation_results.append(result)
            return result

    @_synchronized
    def get_recommendations(self, session_id):
        for result in reversed(self.recommendation_results):
            if result.session_id == session_id:
                return result
        return None

    # ---------------- Users ----------------

    def create_user(self, data):
        with self._lock:
            now = utcnow()
            user = schemas.User(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
            self.users[user.id] = user
            return user

    def get_user(self, user_id):
        return self.users.get(user_id)

    @_synchronized
    def get_user_by_email(self, email):
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def update_user(self, user_id, updates):
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            changes = updates.model_dump(exclude_unset=True)
            changes["updated_at"] = utcnow()
            user = user.model_copy(update=changes)
            self.users[user_id] = user
            return user

    def add_user_spend(self, user_id, amount):
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            user = user.model_copy(update={
                "total_spent": max(to_money(user.total_spent + amount), Decimal("0.00")),
                "updated_at": utcnow(),
            })
            self.users[user_id] = user
            return user

    def add_loyalty_points(self, user_id, points):
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            if points:
                user = user.model_copy(update={
                    "loyalty_points": user.loyalty_points + points,
                    "updated_at": utcnow(),
                })
                self.users[user_id] = user
            return user

    @_synchronized
    def get_user_with_progress(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            return None
        return schemas.UserWithProgress(
            **user.model_dump(),
            progress=self.journey_progress.get(user_id),
            badges=self.get_user_badges(user_id),
        )

    # ---------------- Orders ----------------

    def create_order(self, order):
        with self._lock:
            now = utcnow()
            fields = order.model_dump(exclude={"items"})
            created = schemas.Order(id=new_id(), created_at=now, updated_at=now, **fields)
            self.orders[created.id] = created
            for line in order.items:
                item = schemas.OrderItem(
                    id=new_id(),
                    order_id=created.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                    total=to_money(line.price * line.quantity),
                )
                self.order_items[item.id] = item
            return created

    def get_order(self, order_id):
        return self.orders.get(order_id)

    @_synchronized
    def get_user_orders(self, user_id):
        orders = [o for o in self.orders.values() if o.user_id == user_id]
        return _newest_first(orders, key=lambda o: o.created_at)

    def update_order_status(self, order_id, status):
        with self._lock:
            order = self.orders.get(order_id)
            if order is None:
                return None
            if order.status == "cancelled" and status != "cancelled":
                raise InvariantViolation(f"Order {order_id} is cancelled and cannot move to {status}")
            order = order.model_copy(update={"status": status, "updated_at": utcnow()})
            self.orders[order_id] = order
            return order

    def mark_order_cancelled(self, order_id):
        with self._lock:
            order = self.orders.get(order_id)
            if order is None or order.status == "cancelled":
                return False
            self.orders[order_id] = order.model_copy(update={"status": "cancelled", "updated_at": utcnow()})
            return True

    @_synchronized
    def get_order_with_items(self, order_id):
        order = self.orders.get(order_id)
        if order is None:
            return None
        items = [
            schemas.OrderItemWithProduct(**i.model_dump(), product=self.products.get(i.product_id))
            for i in self.order_items.values() if i.order_id == order_id
        ]
        return schemas.OrderWithItems(**order.model_dump(), items=items)

    # ---------------- Inventory ----------------

    def _with_product(self, row):
        return schemas.InventoryWithProduct(
            **row.model_dump(exclude={"available_stock"}),
            product=self.products.get(row.product_id),
        )

    def _record_movement(self, product_id, movement_type, quantity, previous, new,
                         reason=None, order_id=None):
        movement = schemas.InventoryMovement(
            id=new_id(),
            product_id=product_id,
            type=movement_type,
            quantity=quantity,
            previous_stock=previous,
            new_stock=new,
            reason=reason,
            order_id=order_id,
            created_at=utcnow(),
        )
        self.inventory_movements.append(movement)
        return movement

    @_synchronized
    def get_all_inventory(self):
        return [self._with_product(row) for row in self.inventory.values()]

    def get_inventory(self, product_id):
        return self.inventory.get(product_id)

    def update_inventory(self, product_id, updates):
        with self._lock:
            row = self.inventory.get(product_id)
            if row is None:
                return None
            changes = updates.model_dump(exclude_unset=True, exclude={"reason"})
            new_current = changes.get("current_stock", row.current_stock)
            if row.reserved_stock > new_current:
                raise InvariantViolation(
                    f"currentStock ({new_current}) below reservedStock ({row.reserved_stock})"
                )
            changes["last_updated"] = utcnow()
            updated = row.model_copy(update=changes)
            if updated.current_stock != row.current_stock:
                self._record_movement(
                    product_id, "adjustment",
                    updated.current_stock - row.current_stock,
                    row.available_stock, updated.available_stock,
                    reason=updates.reason or "Manual stock adjustment",
                )
            self.inventory[product_id] = updated
            return updated

    def check_availability(self, product_id, quantity):
        row = self.inventory.get(product_id)
        return row is not None and row.available_stock >= quantity

    def reserve_stock(self, product_id, quantity, order_id):
        require_positive_quantity(quantity)
        with self._lock:
            row = self.inventory.get(product_id)
            if row is None or row.available_stock < quantity:
                return False
            updated = row.model_copy(update={
                "reserved_stock": row.reserved_stock + quantity,
                "last_updated": utcnow(),
            })
            self.inventory[product_id] = updated
            self._record_movement(
                product_id, "reservation", -quantity,
                row.available_stock, updated.available_stock,
                reason=f"Reserved for order {order_id}", order_id=order_id,
            )
            logger.info(f"Reserved {quantity} x {product_id} for order {order_id}")
            return True

    def release_stock(self, product_id, quantity, order_id):
        require_positive_quantity(quantity)
        with self._lock:
            row = self.inventory.get(product_id)
            if row is None:
                return False
            released = min(quantity, row.reserved_stock)
            if released == 0:
                return True
            updated = row.model_copy(update={
                "reserved_stock": row.reserved_stock - released,
                "last_updated": utcnow(),
            })
            self.inventory[product_id] = updated
            self._record_movement(
                product_id, "release", released,
                row.available_stock, updated.available_stock,
                reason=f"Released from order {order_id}", order_id=order_id,
            )
            return True

    @_synchronized
    def get_low_stock_products(self):
        return [self._with_product(row) for row in self.inventory.values()
                if row.current_stock <= row.low_stock_threshold]

    @_synchronized
    def get_inventory_movements(self, product_id=None, limit=100):
        movements = [m for m in self.inventory_movements
                     if product_id is None or m.product_id == product_id]
        return _newest_first(movements, key=lambda m: m.created_at)[:limit]

    # ---------------- Learning ----------------

    @_synchronized
    def get_learning_modules(self):
        return learning.sort_modules(m for m in self.learning_modules.values() if m.is_active)

    def get_learning_module(self, module_id):
        return self.learning_modules.get(module_id)

    @_synchronized
    def get_user_learning_progress(self, user_id):
        return [r for r in self.learning_progress.values() if r.user_id == user_id]

    def _find_progress(self, user_id, module_id):
        for row in self.learning_progress.values():
            if row.user_id == user_id and row.module_id == module_id:
                return row
        return None

    def _save_progress(self, user_id, module_id, progress):
        now = utcnow()
        existing = self._find_progress(user_id, module_id)
        previous = existing.progress if existing else 0
        merged = learning.merged_progress(previous, progress)
        status = learning.status_for(merged)
        completed_at = existing.completed_at if existing else None
        if status == "completed" and completed_at is None:
            completed_at = now
        row = schemas.UserLearningProgress(
            id=existing.id if existing else new_id(),
            user_id=user_id,
            module_id=module_id,
            status=status,
            progress=merged,
            xp_earned=existing.xp_earned if existing else 0,
            started_at=existing.started_at if existing else now,
            completed_at=completed_at,
            last_activity=now,
        )
        self.learning_progress[row.id] = row
        self._refresh_learning_percentage(user_id)
        return row

    def _refresh_learning_percentage(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            return
        overall = learning.overall_progress(self.get_user_learning_progress(user_id), self.get_learning_modules())
        self.users[user_id] = user.model_copy(update={"learning_progress": overall, "updated_at": utcnow()})

    def update_learning_progress(self, user_id, module_id, progress):
        with self._lock:
            return self._save_progress(user_id, module_id, progress)

    def complete_learning_module(self, user_id, module_id, xp_earned):
        with self._lock:
            row = self._save_progress(user_id, module_id, 100)
            return self.claim_module_xp(user_id, module_id, xp_earned) or row

    def claim_module_xp(self, user_id, module_id, xp_earned):
        with self._lock:
            row = self._find_progress(user_id, module_id)
            if row is None or row.status != "completed" or row.xp_earned != 0:
                return None
            row = row.model_copy(update={"xp_earned": xp_earned})
            self.learning_progress[row.id] = row
            return row

    # ---------------- Badges ----------------

    @_synchronized
    def get_badges(self):
        return [b for b in self.badges.values() if b.is_active]

    @_synchronized
    def get_user_badges(self, user_id):
        held = [b for b in self.user_badges if b.user_id == user_id]
        return [
            schemas.UserBadgeWithBadge(**b.model_dump(), badge=self.badges.get(b.badge_id))
            for b in _newest_first(held, key=lambda b: b.earned_at)
        ]

    def award_badge(self, user_id, badge_id):
        with self._lock:
            awarded = schemas.UserBadge(id=new_id(), user_id=user_id, badge_id=badge_id, earned_at=utcnow())
            self.user_badges.append(awarded)
            return awarded

    @_synchronized
    def check_badge_eligibility(self, user_id):
        earned = {b.badge_id for b in self.user_badges if b.user_id == user_id}
        return [b for b in self.get_badges() if b.id not in earned]

    # ---------------- Impact actions ----------------

    def record_impact_action(self, data):
        with self._lock:
            action = schemas.ImpactAction(id=new_id(), created_at=utcnow(), **data.model_dump())
            self.impact_actions.append(action)
            return action

    @_synchronized
    def get_user_impact_actions(self, user_id):
        actions = [a for a in self.impact_actions if a.user_id == user_id]
        return _newest_first(actions, key=lambda a: a.created_at)

    @_synchronized
    def calculate_user_impact(self, user_id):
        actions = self.get_user_impact_actions(user_id)
        return schemas.UserImpactSummary(
            total_impact=float(sum((a.impact_value for a in actions), Decimal("0"))),
            total_xp=sum(a.xp_earned for a in actions),
            total_loyalty_points=sum(a.loyalty_points_earned for a in actions),
        )

    # ---------------- Journey ----------------

    @_synchronized
    def get_journey_stages(self):
        return sorted((s for s in self.journey_stages.values() if s.is_active), key=lambda s: s.order)

    def get_user_journey_progress(self, user_id):
        return self.journey_progress.get(user_id)

    def update_user_level(self, user_id, xp, progress_to_next=None):
        with self._lock:
            existing = self.journey_progress.get(user_id)
            if existing is None:
                stages = self.get_journey_stages()
                if not stages:
                    return None
                total = xp
                progress = schemas.UserJourneyProgress(
                    id=new_id(),
                    user_id=user_id,
                    current_stage_id=stages[0].id,
                    total_xp=total,
                    level=journey.level_for_xp(total),
                    progress_to_next=progress_to_next or 0,
                    last_updated=utcnow(),
                )
            else:
                total = existing.total_xp + xp
                changes = {
                    "total_xp": total,
                    "level": journey.level_for_xp(total),
                    "last_updated": utcnow(),
                }
                if progress_to_next is not None:
                    changes["progress_to_next"] = progress_to_next
                progress = existing.model_copy(update=changes)
            self.journey_progress[user_id] = progress
            return progress

    @_synchronized
    def check_stage_progression(self, user_id):
        return journey.evaluate_stage_progression(
            self.users.get(user_id),
            self.journey_progress.get(user_id),
            self.get_journey_stages(),
        )

    def advance_journey_stage(self, user_id):
        with self._lock:
            decision = self.check_stage_progression(user_id)
            if not decision.can_advance:
                return None
            current = self.journey_progress[user_id]
            stage = decision.next_stage
            total = current.total_xp + stage.rewards.xp
            completed = list(current.completed_stages)
            if current.current_stage_id:
                completed.append(current.current_stage_id)
            advanced = current.model_copy(update={
                "current_stage_id": stage.id,
                "completed_stages": completed,
                "total_xp": total,
                "level": journey.level_for_xp(total),
                "progress_to_next": 0,
                "last_updated": utcnow(),
            })
            self.journey_progress[user_id] = advanced
            self.add_loyalty_points(user_id, stage.rewards.loyalty_points)
            logger.info(f"User {user_id} advanced to journey stage {stage.name}")
            return advanced

    # ---------------- Global indigenous plants ----------------

    @_synchronized
    def get_global_indigenous_plants(self):
        return list(self.global_indigenous_plants.values())

    def get_global_indigenous_plant(self, plant_id):
        return self.global_indigenous_plants.get(plant_id)

    def create_global_indigenous_plants(self, plants):
        with self._lock:
            now = utcnow()
            created = []
            for data in plants:
                fields = data.model_dump(exclude={"id"})
                plant = schemas.GlobalIndigenousPlant(
                    id=data.id or new_id(), created_at=now, updated_at=now, **fields
                )
                self.global_indigenous_plants[plant.id] = plant
                created.append(plant)
            return created

    def delete_all_global_indigenous_plants(self):
        with self._lock:
            self.global_indigenous_plants.clear()

    def get_plants_by_region(self, region):
        return self.search_plants(schemas.PlantSearch(region=region))

    def get_plants_by_tribe(self, tribe):
        return self.search_plants(schemas.PlantSearch(tribe=tribe))

    @_synchronized
    def search_plants(self, search_filters):
        predicates = search.plant_predicates(search_filters)
        return [p for p in self.global_indigenous_plants.values() if search.matches_all(p, predicates)]

# Filename: rutz/database_storage.py
# IStorage over SQLAlchemy. Each public method runs in its own session scope:
# commit on success, rollback on failure (database errors are logged).
# ORM rows are converted to rutz.schemas records before the session closes.

from contextlib import contextmanager
from typing import Optional

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from rutz import fixtures, models, schemas
from rutz.database import Base, make_session_factory
from rutz.errors import InvariantViolation
from rutz.services import impact, journey, learning, recommendations
from rutz.storage import IStorage, require_positive_quantity
from rutz.utils import logger, to_money, utcnow


def _row(model, record, **extra):
    """ORM row from a pydantic record (derived fields are not columns)."""
    values = record.model_dump(exclude=set(type(record).model_computed_fields))
    values.update(extra)
    return model(**values)


def _like(value):
    return f"%{value}%"


def _present(column):
    return and_(column.isnot(None), column != "")


class DatabaseStorage(IStorage):

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    @contextmanager
    def _session_scope(self):
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error, transaction rolled back: {e}")
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def initialize(self):
        """Create missing tables and seed the catalog into an empty database."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured.")
        with self._session_scope() as session:
            if session.query(models.Product).first() is not None:
                logger.info("Database already has data, skipping seed.")
                return
            self._seed(session)

    def _seed(self, session):
        products = fixtures.products()
        session.add_all(_row(models.Product, p) for p in products)
        session.add_all(_row(models.SupplyChainStep, s) for s in fixtures.supply_chain_steps())
        session.add(_row(models.ImpactMetrics, fixtures.impact_metrics()))
        session.add_all(_row(models.CommunityProject, p) for p in fixtures.community_projects())
        session.flush()
        session.add_all(_row(models.LiveImpactUpdate, u) for u in fixtures.live_impact_updates())
        session.add_all(_row(models.ImpactMilestone, m) for m in fixtures.impact_milestones())
        session.add_all(_row(models.LearningModule, m) for m in fixtures.learning_modules())
        session.add_all(_row(models.Badge, b) for b in fixtures.badges())
        session.add_all(_row(models.JourneyStage, s) for s in fixtures.journey_stages())
        session.add_all(_row(models.Inventory, i) for i in fixtures.inventory([p.id for p in products]))
        session.add_all(_row(models.GlobalIndigenousPlant, p) for p in fixtures.global_indigenous_plants())
        logger.info(f"Seeded database with {len(products)} products.")

    # ---------------- Catalog ----------------

    def get_products(self, filters=None):
        conditions = []
        if filters:
            if filters.category:
                conditions.append(models.Product.category == filters.category)
            if filters.sector:
                conditions.append(models.Product.sector == filters.sector)
            if filters.plant_material:
                conditions.append(models.Product.plant_material == filters.plant_material)
            if filters.product_type:
                conditions.append(models.Product.product_type == filters.product_type)
        with self._session_scope() as session:
            rows = session.query(models.Product).filter(*conditions).all()
            return [schemas.Product.model_validate(r) for r in rows]

    def get_product(self, product_id):
        with self._session_scope() as session:
            row = session.get(models.Product, product_id)
            return schemas.Product.model_validate(row) if row else None

    def create_product(self, data):
        with self._session_scope() as session:
            row = models.Product(**data.model_dump())
            session.add(row)
            session.flush()
            session.add(models.Inventory(id=f"inv-{row.id}", product_id=row.id, current_stock=0))
            session.flush()
            return schemas.Product.model_validate(row)

    def get_product_filters(self):
        def distinct_values(session, column):
            return [value for (value,) in session.query(column).distinct().order_by(column).all()]

        with self._session_scope() as session:
            return schemas.ProductFilterOptions(
                sectors=distinct_values(session, models.Product.sector),
                plant_materials=distinct_values(session, models.Product.plant_material),
                product_types=distinct_values(session, models.Product.product_type),
            )

    def get_products_by_plant(self, plant_material):
        with self._session_scope() as session:
            rows = (
                session.query(models.Product)
                .filter(func.lower(models.Product.plant_material) == plant_material.lower())
                .all()
            )
            if not rows:
                return None
            sectors = {}
            for row in rows:
                sectors.setdefault(row.sector, []).append(schemas.Product.model_validate(row))
            return schemas.PlantProductGroup(
                plant_material=rows[0].plant_material,
                total_products=len(rows),
                sectors=sectors,
            )

    def get_supply_chain_steps(self):
        with self._session_scope() as session:
            rows = session.query(models.SupplyChainStep).order_by(models.SupplyChainStep.step_number).all()
            return [schemas.SupplyChainStep.model_validate(r) for r in rows]

    def get_supply_chain_step(self, step_id):
        with self._session_scope() as session:
            row = session.get(models.SupplyChainStep, step_id)
            return schemas.SupplyChainStep.model_validate(row) if row else None

    def get_impact_metrics(self):
        with self._session_scope() as session:
            row = session.query(models.ImpactMetrics).first()
            return schemas.ImpactMetrics.model_validate(row) if row else None

    # ---------------- Cart ----------------

    def get_cart_items(self, session_id):
        with self._session_scope() as session:
            rows = (
                session.query(models.CartItem, models.Product)
                .outerjoin(models.Product, models.CartItem.product_id == models.Product.id)
                .filter(models.CartItem.session_id == session_id)
                .all()
            )
            return [
                schemas.CartItemWithProduct(
                    **schemas.CartItem.model_validate(item).model_dump(),
                    product=schemas.Product.model_validate(product),
                )
                for item, product in rows if product is not None
            ]

    def add_to_cart(self, item):
        with self._session_scope() as session:
            row = models.CartItem(**item.model_dump())
            session.add(row)
            session.flush()
            return schemas.CartItem.model_validate(row)

    def update_cart_item(self, item_id, quantity):
        with self._session_scope() as session:
            row = session.get(models.CartItem, item_id)
            if row is None:
                return None
            row.quantity = quantity
            session.flush()
            return schemas.CartItem.model_validate(row)

    def remove_from_cart(self, item_id):
        with self._session_scope() as session:
            deleted = session.query(models.CartItem).filter(models.CartItem.id == item_id).delete()
            return deleted > 0

    def clear_cart(self, session_id):
        with self._session_scope() as session:
            session.query(models.CartItem).filter(models.CartItem.session_id == session_id).delete()

    # ---------------- Community impact ----------------

    def get_community_projects(self):
        with self._session_scope() as session:
            rows = session.query(models.CommunityProject).order_by(models.CommunityProject.last_updated.desc()).all()
            return [schemas.CommunityProject.model_validate(r) for r in rows]

    def get_community_project(self, project_id):
        with self._session_scope() as session:
            row = session.get(models.CommunityProject, project_id)
            return schemas.CommunityProject.model_validate(row) if row else None

    def create_community_project(self, data):
        impact.check_funding(data.funding_goal, data.current_funding)
        with self._session_scope() as session:
            now = utcnow()
            row = models.CommunityProject(created_at=now, last_updated=now, **data.model_dump())
            session.add(row)
            session.flush()
            return schemas.CommunityProject.model_validate(row)

    def update_community_project(self, project_id, updates):
        with self._session_scope() as session:
            row = session.get(models.CommunityProject, project_id)
            if row is None:
                return None
            current = schemas.CommunityProject.model_validate(row).model_dump()
            for key, value in impact.project_changes(current, updates.model_dump(exclude_unset=True)).items():
                setattr(row, key, value)
            session.flush()
            return schemas.CommunityProject.model_validate(row)

    def get_live_impact_updates(self, limit=20):
        with self._session_scope() as session:
            rows = (
                session.query(models.LiveImpactUpdate)
                .filter(models.LiveImpactUpdate.is_public.is_(True))
                .order_by(models.LiveImpactUpdate.created_at.desc())
                .limit(limit)
                .all()
            )
            return [schemas.LiveImpactUpdate.model_validate(r) for r in rows]

    def create_live_impact_update(self, data):
        with self._session_scope() as session:
            row = models.LiveImpactUpdate(**data.model_dump())
            session.add(row)
            session.flush()
            return schemas.LiveImpactUpdate.model_validate(row)

    def get_impact_milestones(self, project_id=None):
        with self._session_scope() as session:
            query = session.query(models.ImpactMilestone)
            if project_id:
                query = query.filter(models.ImpactMilestone.project_id == project_id)
            else:
                query = query.order_by(models.ImpactMilestone.target_date.desc())
            return [schemas.ImpactMilestone.model_validate(r) for r in query.all()]

    def create_impact_milestone(self, data):
        with self._session_scope() as session:
            row = models.ImpactMilestone(**data.model_dump())
            session.add(row)
            session.flush()
            return schemas.ImpactMilestone.model_validate(row)

    def update_impact_milestone(self, milestone_id, updates):
        with self._session_scope() as session:
            row = session.get(models.ImpactMilestone, milestone_id)
            if row is None:
                return None
            current = schemas.ImpactMilestone.model_validate(row).model_dump()
            for key, value in impact.milestone_changes(current, updates.model_dump(exclude_unset=True)).items():
                setattr(row, key, value)
            session.flush()
            return schemas.ImpactMilestone.model_validate(row)

    # ---------------- Recommendations ----------------

    def get_user_preferences(self, session_id):
        with self._session_scope() as session:
            row = (
                session.query(models.UserPreferences)
                .filter(models.UserPreferences.session_id == session_id)
                .order_by(models.UserPreferences.created_at.desc())
                .first()
            )
            return schemas.UserPreferences.model_validate(row) if row else None

    def save_user_preferences(self, data):
        with self._session_scope() as session:
            row = models.UserPreferences(**data.model_dump())
            session.add(row)
            session.flush()
            return schemas.UserPreferences.model_validate(row)

    def generate_recommendations(self, session_id, preferences):
        with self._session_scope() as session:
            prefs = models.UserPreferences(session_id=session_id, **preferences.model_dump())
            session.add(prefs)
            session.flush()
            products = [schemas.Product.model_validate(r) for r in session.query(models.Product).all()]
            ranked = recommendations.rank_products(products, preferences)
            row = models.RecommendationResults(
                session_id=session_id,
                user_preferences_id=prefs.id,
                recommended_products=[r.model_dump() for r in ranked],
                explanation=recommendations.build_explanation(preferences, ranked),
                confidence_score=recommendations.confidence_score(ranked),
            )
            session.add(row)
            session.flush()
            return schemas.RecommendationResults.model_validate(row)

    def get_recommendations(self, session_id):
        with self._session_scope() as session:
            row = (
                session.query(models.RecommendationResults)
                .filter(models.RecommendationResults.session_id == session_id)
                .order_by(models.RecommendationResults.created_at.desc())
                .first()
            )
            return schemas.RecommendationResults.model_validate(row) if row else None

    # ---------------- Users ----------------

    def create_user(self, data):
        with self._session_scope() as session:
            row = models.User(**data.model_dump())
            session.add(row)
            session.flush()
            return schemas.User.model_validate(row)

    def get_user(self, user_id):
        with self._session_scope() as session:
            row = session.get(models.User, user_id)
            return schemas.User.model_validate(row) if row else None

    def get_user_by_email(self, email):
        with self._session_scope() as session:
            row = session.query(models.User).filter(models.User.email == email).first()
            return schemas.User.model_validate(row) if row else None

    def update_user(self, user_id, updates):
        with self._session_scope() as session:
            row = session.get(models.User, user_id)
            if row is None:
                return None
            for key, value in updates.model_dump(exclude_unset=True).items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            session.flush()
            return schemas.User.model_validate(row)

    def add_user_spend(self, user_id, amount):
        spent = models.User.total_spent + to_money(amount)
        with self._session_scope() as session:
            updated = (
                session.query(models.User)
                .filter(models.User.id == user_id)
                .update({
                    models.User.total_spent: case((spent < 0, 0), else_=spent),
                    models.User.updated_at: utcnow(),
                }, synchronize_session=False)
            )
            if not updated:
                return None
            row = session.query(models.User).filter(models.User.id == user_id).populate_existing().one()
            return schemas.User.model_validate(row)

    @staticmethod
    def _increment_loyalty(session, user_id, points):
        return (
            session.query(models.User)
            .filter(models.User.id == user_id)
            .update({
                models.User.loyalty_points: models.User.loyalty_points + points,
                models.User.updated_at: utcnow(),
            }, synchronize_session=False)
        )

    def add_loyalty_points(self, user_id, points):
        with self._session_scope() as session:
            if not self._increment_loyalty(session, user_id, points):
                return None
            row = session.query(models.User).filter(models.User.id == user_id).populate_existing().one()
            return schemas.User.model_validate(row)

    def get_user_with_progress(self, user_id):
        user = self.get_user(user_id)
        if user is None:
            return None
        return schemas.UserWithProgress(
            **user.model_dump(),
            progress=self.get_user_journey_progress(user_id),
            badges=self.get_user_badges(user_id),
        )

    # ---------------- Orders ----------------

    def create_order(self, order):
        with self._session_scope() as session:
            row = models.Order(**order.model_dump(exclude={"items"}))
            session.add(row)
            session.flush()
            for line in order.items:
                session.add(models.OrderItem(
                    order_id=row.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                    total=to_money(line.price * line.quantity),
                ))
            session.flush()
            return schemas.Order.model_validate(row)

    def get_order(self, order_id):
        with self._session_scope() as session:
            row = session.get(models.Order, order_id)
            return schemas.Order.model_validate(row) if row else None

    def get_user_orders(self, user_id):
        with self._session_scope() as session:
            rows = (
                session.query(models.Order)
                .filter(models.Order.user_id == user_id)
                .order_by(models.Order.created_at.desc())
                .all()
            )
            return [schemas.Order.model_validate(r) for r in rows]

    def update_order_status(self, order_id, status):
        with self._session_scope() as session:
            row = (
                session.query(models.Order)
                .filter(models.Order.id == order_id)
                .with_for_update()
                .first()
            )
            if row is None:
                return None
            if row.status == "cancelled" and status != "cancelled":
                raise InvariantViolation(f"Order {order_id} is cancelled and cannot move to {status}")
            row.status = status
            row.updated_at = utcnow()
            session.flush()
            return schemas.Order.model_validate(row)

    def mark_order_cancelled(self, order_id):
        with self._session_scope() as session:
            cancelled = (
                session.query(models.Order)
                .filter(models.Order.id == order_id, models.Order.status != "cancelled")
                .update({
                    models.Order.status: "cancelled",
                    models.Order.updated_at: utcnow(),
                }, synchronize_session=False)
            )
            return bool(cancelled)

    def get_order_with_items(self, order_id):
        with self._session_scope() as session:
            order = session.get(models.Order, order_id)
            if order is None:
                return None
            rows = (
                session.query(models.OrderItem, models.Product)
                .outerjoin(models.Product, models.OrderItem.product_id == models.Product.id)
                .filter(models.OrderItem.order_id == order_id)
                .all()
            )
            items = [
                schemas.OrderItemWithProduct(
                    **schemas.OrderItem.model_validate(item).model_dump(),
                    product=schemas.Product.model_validate(product) if product else None,
                )
                for item, product in rows
            ]
            return schemas.OrderWithItems(**schemas.Order.model_validate(order).model_dump(), items=items)

    # ---------------- Inventory ----------------

    @staticmethod
    def _inventory_with_product(row, product):
        return schemas.InventoryWithProduct(
            **schemas.Inventory.model_validate(row).model_dump(exclude={"available_stock"}),
            product=schemas.Product.model_validate(product) if product else None,
        )

    def _inventory_joined(self, session):
        return (
            session.query(models.Inventory, models.Product)
            .outerjoin(models.Product, models.Inventory.product_id == models.Product.id)
        )

    def get_all_inventory(self):
        with self._session_scope() as session:
            return [self._inventory_with_product(i, p) for i, p in self._inventory_joined(session).all()]

    def get_inventory(self, product_id):
        with self._session_scope() as session:
            row = session.query(models.Inventory).filter(models.Inventory.product_id == product_id).first()
            return schemas.Inventory.model_validate(row) if row else None

    def update_inventory(self, product_id, updates):
        with self._session_scope() as session:
            row = session.query(models.Inventory).filter(models.Inventory.product_id == product_id).first()
            if row is None:
                return None
            previous_current = row.current_stock
            previous_available = row.current_stock - row.reserved_stock

            changes = updates.model_dump(exclude_unset=True, exclude={"reason"})
            new_current = changes.get("current_stock", row.current_stock)
            changes["last_updated"] = utcnow()
            updated = (
                session.query(models.Inventory)
                .filter(
                    models.Inventory.product_id == product_id,
                    models.Inventory.reserved_stock <= new_current,
                )
                .update(changes, synchronize_session=False)
            )
            if not updated:
                raise InvariantViolation(
                    f"currentStock ({new_current}) below reservedStock ({row.reserved_stock})"
                )
            session.refresh(row)
            if row.current_stock != previous_current:
                session.add(models.InventoryMovement(
                    product_id=product_id,
                    type="adjustment",
                    quantity=row.current_stock - previous_current,
                    previous_stock=previous_available,
                    new_stock=row.current_stock - row.reserved_stock,
                    reason=updates.reason or "Manual stock adjustment",
                ))
            return schemas.Inventory.model_validate(row)

    def check_availability(self, product_id, quantity):
        inventory = self.get_inventory(product_id)
        return inventory is not None and inventory.available_stock >= quantity

    def reserve_stock(self, product_id, quantity, order_id):
        require_positive_quantity(quantity)
        with self._session_scope() as session:
            reserved = (
                session.query(models.Inventory)
                .filter(
                    models.Inventory.product_id == product_id,
                    models.Inventory.current_stock - models.Inventory.reserved_stock >= quantity,
                )
                .update({
                    models.Inventory.reserved_stock: models.Inventory.reserved_stock + quantity,
                    models.Inventory.last_updated: utcnow(),
                }, synchronize_session=False)
            )
            if not reserved:
                return False
            row = session.query(models.Inventory).filter(models.Inventory.product_id == product_id).one()
            available = row.current_stock - row.reserved_stock
            session.add(models.InventoryMovement(
                product_id=product_id,
                type="reservation",
                quantity=-quantity,
                previous_stock=available + quantity,
                new_stock=available,
                reason=f"Reserved for order {order_id}",
                order_id=order_id,
            ))
            logger.info(f"Reserved {quantity} x {product_id} for order {order_id}")
            return True

    def release_stock(self, product_id, quantity, order_id):
        require_positive_quantity(quantity)
        with self._session_scope() as session:
            row = (
                session.query(models.Inventory)
                .filter(models.Inventory.product_id == product_id)
                .with_for_update()
                .first()
            )
            if row is None:
                return False
            released = min(quantity, row.reserved_stock)
            if released == 0:
                return True
            previous_available = row.current_stock - row.reserved_stock
            row.reserved_stock = row.reserved_stock - released
            row.last_updated = utcnow()
            session.add(models.InventoryMovement(
                product_id=product_id,
                type="release",
                quantity=released,
                previous_stock=previous_available,
                new_stock=previous_available + released,
                reason=f"Released from order {order_id}",
                order_id=order_id,
            ))
            return True

    def get_low_stock_products(self):
        with self._session_scope() as session:
            rows = (
                self._inventory_joined(session)
                .filter(models.Inventory.current_stock <= models.Inventory.low_stock_threshold)
                .all()
            )
            return [self._inventory_with_product(i, p) for i, p in rows]

    def get_inventory_movements(self, product_id=None, limit=100):
        with self._session_scope() as session:
            query = session.query(models.InventoryMovement)
            if product_id:
                query = query.filter(models.InventoryMovement.product_id == product_id)
            rows = query.order_by(models.InventoryMovement.created_at.desc()).limit(limit).all()
            return [schemas.InventoryMovement.model_validate(r) for r in rows]

    # ---------------- Learning ----------------

    @staticmethod
    def _active_modules(session):
        difficulty_rank = case(learning.DIFFICULTY_ORDER, value=models.LearningModule.difficulty, else_=99)
        rows = (
            session.query(models.LearningModule)
            .filter(models.LearningModule.is_active.is_(True))
            .order_by(difficulty_rank, models.LearningModule.title)
            .all()
        )
        return [schemas.LearningModule.model_validate(r) for r in rows]

    def get_learning_modules(self):
        with self._session_scope() as session:
            return self._active_modules(session)

    def get_learning_module(self, module_id):
        with self._session_scope() as session:
            row = session.get(models.LearningModule, module_id)
            return schemas.LearningModule.model_validate(row) if row else None

    def get_user_learning_progress(self, user_id):
        with self._session_scope() as session:
            rows = (
                session.query(models.UserLearningProgress)
                .filter(models.UserLearningProgress.user_id == user_id)
                .all()
            )
            return [schemas.UserLearningProgress.model_validate(r) for r in rows]

    def _save_progress(self, session, user_id, module_id, progress):
        now = utcnow()
        row = (
            session.query(models.UserLearningProgress)
            .filter(
                models.UserLearningProgress.user_id == user_id,
                models.UserLearningProgress.module_id == module_id,
            )
            .with_for_update()
            .first()
        )
        if row is None:
            row = models.UserLearningProgress(
                user_id=user_id, module_id=module_id, progress=0, xp_earned=0, started_at=now,
            )
            session.add(row)
        row.progress = learning.merged_progress(row.progress or 0, progress)
        row.status = learning.status_for(row.progress)
        if row.status == "completed" and row.completed_at is None:
            row.completed_at = now
        row.last_activity = now
        session.flush()

        rows = (
            session.query(models.UserLearningProgress)
            .filter(models.UserLearningProgress.user_id == user_id)
            .all()
        )
        overall = learning.overall_progress(
            [schemas.UserLearningProgress.model_validate(r) for r in rows],
            self._active_modules(session),
        )
        session.query(models.User).filter(models.User.id == user_id).update(
            {models.User.learning_progress: overall, models.User.updated_at: now},
            synchronize_session=False,
        )
        return schemas.UserLearningProgress.model_validate(row)

    def update_learning_progress(self, user_id, module_id, progress):
        with self._session_scope() as session:
            return self._save_progress(session, user_id, module_id, progress)

    @staticmethod
    def _claim_xp(session, user_id, module_id, xp_earned):
        claimed = (
            session.query(models.UserLearningProgress)
            .filter(
                models.UserLearningProgress.user_id == user_id,
                models.UserLearningProgress.module_id == module_id,
                models.UserLearningProgress.status == "completed",
                models.UserLearningProgress.xp_earned == 0,
            )
            .update({models.UserLearningProgress.xp_earned: xp_earned}, synchronize_session=False)
        )
        if not claimed:
            return None
        row = (
            session.query(models.UserLearningProgress)
            .filter(
                models.UserLearningProgress.user_id == user_id,
                models.UserLearningProgress.module_id == module_id,
            )
            .populate_existing()
            .one()
        )
        return schemas.UserLearningProgress.model_validate(row)

    def complete_learning_module(self, user_id, module_id, xp_earned):
        with self._session_scope() as session:
            row = self._save_progress(session, user_id, module_id, 100)
            return self._claim_xp(session, user_id, module_id, xp_earned) or row

    def claim_module_xp(self, user_id, module_id, xp_earned):
        with self._session_scope() as session:
            return self._claim_xp(session, user_id, module_id, xp_earned)

    # ---------------- Badges ----------------

    def get_badges(self):
        with self._session_scope() as session:
            rows = session.query(models.Badge).filter(models.Badge.is_active.is_(True)).all()
            return [schemas.Badge.model_validate(r) for r in rows]

    def get_user_badges(self, user_id):
        with self._session_scope() as session:
            rows = (
                session.query(models.UserBadge, models.Badge)
                .outerjoin(models.Badge, models.UserBadge.badge_id == models.Badge.id)
                .filter(models.UserBadge.user_id == user_id)
                .order_by(models.UserBadge.earned_at.desc())
                .all()
            )
            return [
                schemas.UserBadgeWithBadge(
                    **schemas.UserBadge.model_validate(held).model_dump(),
                    badge=schemas.Badge.model_validate(badge) if badge else None,
                )
                for held, badge in rows
            ]

    def award_badge(self, user_id, badge_id):
        with self._session_scope() as session:
            row = models.UserBadge(user_id=user_id, badge_id=badge_id)
            session.add(row)
            session.flush()
            return schemas.UserBadge.model_validate(row)

    def check_badge_eligibility(self, user_id):
        with self._session_scope() as session:
            earned = select(models.UserBadge.badge_id).where(models.UserBadge.user_id == user_id)
            rows = (
                session.query(models.Badge)
                .filter(models.Badge.is_active.is_(True), ~models.Badge.id.in_(earned))
                .all()
            )
            return [schemas.Badge.model_validate(r) for r in rows]

    # ---------------- Impact actions ----------------

    def record_impact_action(self, data):
        with self._session_scope() as session:
            row = models.ImpactAction(**data.model_dump())
            session.add(row)
            session.flush()
            return schemas.ImpactAction.model_validate(row)

    def get_user_impact_actions(self, user_id):
        with self._session_scope() as session:
            rows = (
                session.query(models.ImpactAction)
                .filter(models.ImpactAction.user_id == user_id)
                .order_by(models.ImpactAction.created_at.desc())
                .all()
            )
            return [schemas.ImpactAction.model_validate(r) for r in rows]

    def calculate_user_impact(self, user_id):
        with self._session_scope() as session:
            total_impact, total_xp, total_points = (
                session.query(
                    func.coalesce(func.sum(models.ImpactAction.impact_value), 0),
                    func.coalesce(func.sum(models.ImpactAction.xp_earned), 0),
                    func.coalesce(func.sum(models.ImpactAction.loyalty_points_earned), 0),
                )
                .filter(models.ImpactAction.user_id == user_id)
                .one()
            )
            return schemas.UserImpactSummary(
                total_impact=float(total_impact),
                total_xp=int(total_xp),
                total_loyalty_points=int(total_points),
            )

    # ---------------- Journey ----------------

    @staticmethod
    def _stages(session):
        rows = (
            session.query(models.JourneyStage)
            .filter(models.JourneyStage.is_active.is_(True))
            .order_by(models.JourneyStage.order)
            .all()
        )
        return [schemas.JourneyStage.model_validate(r) for r in rows]

    @staticmethod
    def _progress_row(session, user_id):
        return (
            session.query(models.UserJourneyProgress)
            .filter(models.UserJourneyProgress.user_id == user_id)
            .first()
        )

    def get_journey_stages(self):
        with self._session_scope() as session:
            return self._stages(session)

    def get_user_journey_progress(self, user_id):
        with self._session_scope() as session:
            row = self._progress_row(session, user_id)
            return schemas.UserJourneyProgress.model_validate(row) if row else None

    def update_user_level(self, user_id, xp, progress_to_next=None):
        with self._session_scope() as session:
            row = (
                session.query(models.UserJourneyProgress)
                .filter(models.UserJourneyProgress.user_id == user_id)
                .with_for_update()
                .first()
            )
            if row is None:
                stages = self._stages(session)
                if not stages:
                    return None
                row = models.UserJourneyProgress(
                    user_id=user_id,
                    current_stage_id=stages[0].id,
                    completed_stages=[],
                    total_xp=xp,
                    level=journey.level_for_xp(xp),
                    progress_to_next=progress_to_next or 0,
                )
                session.add(row)
            else:
                row.total_xp = row.total_xp + xp
                row.level = journey.level_for_xp(row.total_xp)
                if progress_to_next is not None:
                    row.progress_to_next = progress_to_next
                row.last_updated = utcnow()
            session.flush()
            return schemas.UserJourneyProgress.model_validate(row)

    def _evaluate(self, session, user_id):
        user = session.get(models.User, user_id)
        row = self._progress_row(session, user_id)
        progress = schemas.UserJourneyProgress.model_validate(row) if row else None
        decision = journey.evaluate_stage_progression(
            schemas.User.model_validate(user) if user else None,
            progress,
            self._stages(session),
        )
        return decision, progress

    def check_stage_progression(self, user_id):
        with self._session_scope() as session:
            decision, _ = self._evaluate(session, user_id)
            return decision

    def advance_journey_stage(self, user_id):
        with self._session_scope() as session:
            decision, current = self._evaluate(session, user_id)
            if not decision.can_advance:
                return None
            stage = decision.next_stage
            total = current.total_xp + stage.rewards.xp
            completed = list(current.completed_stages)
            if current.current_stage_id:
                completed.append(current.current_stage_id)

            if current.current_stage_id is None:
                same_stage = models.UserJourneyProgress.current_stage_id.is_(None)
            else:
                same_stage = models.UserJourneyProgress.current_stage_id == current.current_stage_id
            # compare-and-swap on the stage the decision was made from
            advanced = (
                session.query(models.UserJourneyProgress)
                .filter(models.UserJourneyProgress.user_id == user_id, same_stage)
                .update({
                    models.UserJourneyProgress.current_stage_id: stage.id,
                    models.UserJourneyProgress.completed_stages: completed,
                    models.UserJourneyProgress.total_xp: total,
                    models.UserJourneyProgress.level: journey.level_for_xp(total),
                    models.UserJourneyProgress.progress_to_next: 0,
                    models.UserJourneyProgress.last_updated: utcnow(),
                }, synchronize_session=False)
            )
            if not advanced:
                return None
            if stage.rewards.loyalty_points:
                self._increment_loyalty(session, user_id, stage.rewards.loyalty_points)
            row = (
                session.query(models.UserJourneyProgress)
                .filter(models.UserJourneyProgress.user_id == user_id)
                .populate_existing()
                .one()
            )
            logger.info(f"User {user_id} advanced to journey stage {stage.name}")
            return schemas.UserJourneyProgress.model_validate(row)

    # ---------------- Global indigenous plants ----------------

    def get_global_indigenous_plants(self):
        with self._session_scope() as session:
            rows = session.query(models.GlobalIndigenousPlant).all()
            return [schemas.GlobalIndigenousPlant.model_validate(r) for r in rows]

    def get_global_indigenous_plant(self, plant_id):
        with self._session_scope() as session:
            row = session.get(models.GlobalIndigenousPlant, plant_id)
            return schemas.GlobalIndigenousPlant.model_validate(row) if row else None

    def create_global_indigenous_plants(self, plants):
        with self._session_scope() as session:
            rows = []
            for data in plants:
                values = data.model_dump(exclude={"id"})
                if data.id:
                    values["id"] = data.id
                rows.append(models.GlobalIndigenousPlant(**values))
            session.add_all(rows)
            session.flush()
            return [schemas.GlobalIndigenousPlant.model_validate(r) for r in rows]

    def delete_all_global_indigenous_plants(self):
        with self._session_scope() as session:
            session.query(models.GlobalIndigenousPlant).delete()

    def get_plants_by_region(self, region):
        return self.search_plants(schemas.PlantSearch(region=region))

    def get_plants_by_tribe(self, tribe):
        return self.search_plants(schemas.PlantSearch(tribe=tribe))

    def search_plants(self, search):
        plant = models.GlobalIndigenousPlant
        conditions = []
        if search.search_term:
            term = _like(search.search_term)
            conditions.append(or_(
                plant.plant_name.ilike(term),
                plant.scientific_name.ilike(term),
                plant.traditional_uses.ilike(term),
                plant.indigenous_tribes_or_group.ilike(term),
            ))
        if search.region:
            conditions.append(func.lower(plant.region) == search.region.lower())
        if search.country:
            conditions.append(plant.country_of_origin.ilike(_like(search.country)))
        if search.tribe:
            conditions.append(plant.indigenous_tribes_or_group.ilike(_like(search.tribe)))
        if search.product_form:
            conditions.append(plant.popular_product_form.ilike(_like(search.product_form)))
        if search.ceremonial_use:
            conditions.append(_present(plant.associated_ceremony))
        if search.veterinary_use:
            conditions.append(_present(plant.veterinary_use))
        with self._session_scope() as session:
            rows = session.query(plant).filter(*conditions).all()
            return [schemas.GlobalIndigenousPlant.model_validate(r) for r in rows]

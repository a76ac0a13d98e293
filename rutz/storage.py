"""
Storage interface

One abstract method per persistence operation. MemStorage and
DatabaseStorage implement it with the same observable results, so the
route layer only ever talks to an IStorage.

Conventions shared by both backends:
  * not-found is reported as None / False, never raised;
  * mutations that would break reservedStock <= currentStock or
    currentFunding <= fundingGoal raise InvariantViolation, as do
    non-positive stock quantities and moving a cancelled order elsewhere.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from rutz import schemas
from rutz.errors import InvariantViolation


def require_positive_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise InvariantViolation(f"Stock quantity must be positive, got {quantity}")


class IStorage(ABC):

    # ---------------- Catalog ----------------

    @abstractmethod
    def get_products(self, filters: Optional[schemas.ProductFilters] = None) -> List[schemas.Product]:
        """Products matching every set field of `filters` (all products when None)."""

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[schemas.Product]: ...

    @abstractmethod
    def create_product(self, data: schemas.ProductCreate) -> schemas.Product:
        """Insert the product together with an empty inventory row."""

    @abstractmethod
    def get_product_filters(self) -> schemas.ProductFilterOptions:
        """Sorted distinct sectors, plant materials and product types."""

    @abstractmethod
    def get_products_by_plant(self, plant_material: str) -> Optional[schemas.PlantProductGroup]:
        """Products of one plant material grouped by sector; None when there are none."""

    @abstractmethod
    def get_supply_chain_steps(self) -> List[schemas.SupplyChainStep]: ...

    @abstractmethod
    def get_supply_chain_step(self, step_id: str) -> Optional[schemas.SupplyChainStep]: ...

    @abstractmethod
    def get_impact_metrics(self) -> Optional[schemas.ImpactMetrics]: ...

    # ---------------- Cart ----------------

    @abstractmethod
    def get_cart_items(self, session_id: str) -> List[schemas.CartItemWithProduct]:
        """Cart lines of one session with the product attached.

        Lines whose product no longer exists are left out.
        """

    @abstractmethod
    def add_to_cart(self, item: schemas.CartItemCreate) -> schemas.CartItem: ...

    @abstractmethod
    def update_cart_item(self, item_id: str, quantity: int) -> Optional[schemas.CartItem]: ...

    @abstractmethod
    def remove_from_cart(self, item_id: str) -> bool: ...

    @abstractmethod
    def clear_cart(self, session_id: str) -> None: ...

    # ---------------- Community impact ----------------

    @abstractmethod
    def get_community_projects(self) -> List[schemas.CommunityProject]:
        """All projects, most recently updated first."""

    @abstractmethod
    def get_community_project(self, project_id: str) -> Optional[schemas.CommunityProject]: ...

    @abstractmethod
    def create_community_project(self, data: schemas.CommunityProjectCreate) -> schemas.CommunityProject: ...

    @abstractmethod
    def update_community_project(self, project_id: str,
                                 updates: schemas.CommunityProjectUpdate) -> Optional[schemas.CommunityProject]: ...

    @abstractmethod
    def get_live_impact_updates(self, limit: int = 20) -> List[schemas.LiveImpactUpdate]:
        """Public updates, newest first."""

    @abstractmethod
    def create_live_impact_update(self, data: schemas.LiveImpactUpdateCreate) -> schemas.LiveImpactUpdate: ...

    @abstractmethod
    def get_impact_milestones(self, project_id: Optional[str] = None) -> List[schemas.ImpactMilestone]: ...

    @abstractmethod
    def create_impact_milestone(self, data: schemas.ImpactMilestoneCreate) -> schemas.ImpactMilestone: ...

    @abstractmethod
    def update_impact_milestone(self, milestone_id: str,
                                updates: schemas.ImpactMilestoneUpdate) -> Optional[schemas.ImpactMilestone]: ...

    # ---------------- Recommendations ----------------

    @abstractmethod
    def get_user_preferences(self, session_id: str) -> Optional[schemas.UserPreferences]:
        """Latest preferences saved for the session."""

    @abstractmethod
    def save_user_preferences(self, data: schemas.UserPreferencesCreate) -> schemas.UserPreferences: ...

    @abstractmethod
    def generate_recommendations(self, session_id: str,
                                 preferences: schemas.PreferencesRequest) -> schemas.RecommendationResults:
        """Save the preferences, score the catalog and store the result."""

    @abstractmethod
    def get_recommendations(self, session_id: str) -> Optional[schemas.RecommendationResults]: ...

    # ---------------- Users ----------------

    @abstractmethod
    def create_user(self, data: schemas.UserCreate) -> schemas.User: ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[schemas.User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[schemas.User]: ...

    @abstractmethod
    def update_user(self, user_id: str, updates: schemas.UserUpdate) -> Optional[schemas.User]: ...

    @abstractmethod
    def add_user_spend(self, user_id: str, amount: Decimal) -> Optional[schemas.User]:
        """Add `amount` (negative to debit) to the user's total spend, floored at zero."""

    @abstractmethod
    def add_loyalty_points(self, user_id: str, points: int) -> Optional[schemas.User]:
        """Increment loyalty points in one atomic step; None for an unknown user."""

    @abstractmethod
    def get_user_with_progress(self, user_id: str) -> Optional[schemas.UserWithProgress]: ...

    # ---------------- Orders ----------------

    @abstractmethod
    def create_order(self, order: schemas.OrderCreate) -> schemas.Order:
        """Insert the order and its line items together."""

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[schemas.Order]: ...

    @abstractmethod
    def get_user_orders(self, user_id: str) -> List[schemas.Order]:
        """Orders of a user, newest first."""

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> Optional[schemas.Order]:
        """Set the status; raises InvariantViolation when moving a cancelled order elsewhere."""

    @abstractmethod
    def mark_order_cancelled(self, order_id: str) -> bool:
        """Cancel the order unless it already is; True only for the call that cancelled it."""

    @abstractmethod
    def get_order_with_items(self, order_id: str) -> Optional[schemas.OrderWithItems]: ...

    # ---------------- Inventory ----------------

    @abstractmethod
    def get_all_inventory(self) -> List[schemas.InventoryWithProduct]: ...

    @abstractmethod
    def get_inventory(self, product_id: str) -> Optional[schemas.Inventory]: ...

    @abstractmethod
    def update_inventory(self, product_id: str,
                         updates: schemas.InventoryUpdate) -> Optional[schemas.Inventory]:
        """Apply stock-level changes; raises InvariantViolation if reserved would exceed current."""

    @abstractmethod
    def check_availability(self, product_id: str, quantity: int) -> bool: ...

    @abstractmethod
    def reserve_stock(self, product_id: str, quantity: int, order_id: str) -> bool:
        """Atomically reserve `quantity` units.

        False (with nothing changed) when fewer than `quantity` units are
        available; otherwise reservedStock grows by exactly `quantity` and
        one reservation movement is recorded. Raises InvariantViolation
        when `quantity` is not positive.
        """

    @abstractmethod
    def release_stock(self, product_id: str, quantity: int, order_id: str) -> bool:
        """Hand back up to `quantity` reserved units; raises InvariantViolation when `quantity` is not positive."""

    @abstractmethod
    def get_low_stock_products(self) -> List[schemas.InventoryWithProduct]: ...

    @abstractmethod
    def get_inventory_movements(self, product_id: Optional[str] = None,
                                limit: int = 100) -> List[schemas.InventoryMovement]:
        """Ledger entries, newest first."""

    # ---------------- Learning ----------------

    @abstractmethod
    def get_learning_modules(self) -> List[schemas.LearningModule]:
        """Active modules, beginner first."""

    @abstractmethod
    def get_learning_module(self, module_id: str) -> Optional[schemas.LearningModule]: ...

    @abstractmethod
    def get_user_learning_progress(self, user_id: str) -> List[schemas.UserLearningProgress]: ...

    @abstractmethod
    def update_learning_progress(self, user_id: str, module_id: str,
                                 progress: int) -> schemas.UserLearningProgress:
        """Upsert progress for one module; progress never decreases."""

    @abstractmethod
    def complete_learning_module(self, user_id: str, module_id: str,
                                 xp_earned: int) -> schemas.UserLearningProgress:
        """Mark the module completed and record its XP unless XP was already recorded."""

    @abstractmethod
    def claim_module_xp(self, user_id: str, module_id: str,
                        xp_earned: int) -> Optional[schemas.UserLearningProgress]:
        """Record XP on a completed module that has none yet.

        Returns the updated row to the single caller that recorded it and
        None to everyone else, so the XP is paid exactly once.
        """

    # ---------------- Badges ----------------

    @abstractmethod
    def get_badges(self) -> List[schemas.Badge]: ...

    @abstractmethod
    def get_user_badges(self, user_id: str) -> List[schemas.UserBadgeWithBadge]: ...

    @abstractmethod
    def award_badge(self, user_id: str, badge_id: str) -> schemas.UserBadge: ...

    @abstractmethod
    def check_badge_eligibility(self, user_id: str) -> List[schemas.Badge]:
        """Active badges the user does not hold yet."""

    # ---------------- Impact actions ----------------

    @abstractmethod
    def record_impact_action(self, data: schemas.ImpactActionCreate) -> schemas.ImpactAction: ...

    @abstractmethod
    def get_user_impact_actions(self, user_id: str) -> List[schemas.ImpactAction]: ...

    @abstractmethod
    def calculate_user_impact(self, user_id: str) -> schemas.UserImpactSummary: ...

    # ---------------- Journey ----------------

    @abstractmethod
    def get_journey_stages(self) -> List[schemas.JourneyStage]:
        """Active stages by ascending order."""

    @abstractmethod
    def get_user_journey_progress(self, user_id: str) -> Optional[schemas.UserJourneyProgress]: ...

    @abstractmethod
    def update_user_level(self, user_id: str, xp: int,
                          progress_to_next: Optional[int] = None) -> Optional[schemas.UserJourneyProgress]:
        """Add `xp` to the running total and recompute the level."""

    @abstractmethod
    def check_stage_progression(self, user_id: str) -> schemas.StageProgression: ...

    def can_advance_journey_stage(self, user_id: str) -> schemas.StageProgression:
        return self.check_stage_progression(user_id)

    @abstractmethod
    def advance_journey_stage(self, user_id: str) -> Optional[schemas.UserJourneyProgress]:
        """Move the user to the next stage if eligible; None otherwise."""

    # ---------------- Global indigenous plants ----------------

    @abstractmethod
    def get_global_indigenous_plants(self) -> List[schemas.GlobalIndigenousPlant]: ...

    @abstractmethod
    def get_global_indigenous_plant(self, plant_id: str) -> Optional[schemas.GlobalIndigenousPlant]: ...

    @abstractmethod
    def create_global_indigenous_plants(
            self, plants: List[schemas.GlobalIndigenousPlantCreate]) -> List[schemas.GlobalIndigenousPlant]: ...

    @abstractmethod
    def delete_all_global_indigenous_plants(self) -> None: ...

    @abstractmethod
    def get_plants_by_region(self, region: str) -> List[schemas.GlobalIndigenousPlant]: ...

    @abstractmethod
    def get_plants_by_tribe(self, tribe: str) -> List[schemas.GlobalIndigenousPlant]: ...

    @abstractmethod
    def search_plants(self, search: schemas.PlantSearch) -> List[schemas.GlobalIndigenousPlant]: ...

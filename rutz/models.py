# Filename: rutz/models.py
# Relational tables behind DatabaseStorage. Column names match the attribute
# names of rutz.schemas so rows validate straight into the pydantic records.
# List/dict shaped fields are JSON columns; money is Numeric(…, 2).

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from rutz.database import Base
from rutz.utils import new_id, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    origin = Column(Text, nullable=False)
    category = Column(String(128), nullable=False, index=True)
    sector = Column(String(128), nullable=False, index=True)
    plant_material = Column(String(128), nullable=False, index=True)
    product_type = Column(String(255), nullable=False)
    rating = Column(Numeric(2, 1), nullable=False)
    review_count = Column(Integer, nullable=False, default=0)
    image_url = Column(Text, nullable=False, default="")
    qr_code = Column(String(64), nullable=False, default="")
    scientific_name = Column(Text)
    extraction_method = Column(Text)
    bioactive_compounds = Column(JSON)
    certifications = Column(JSON)
    sustainability_story = Column(Text)
    community_impact = Column(Text)
    research_papers = Column(JSON)
    in_stock = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} name={self.name!r}>"


class SupplyChainStep(Base):
    __tablename__ = "supply_chain_steps"

    id = Column(String(64), primary_key=True, default=new_id)
    step_number = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    details = Column(Text, nullable=False)
    location = Column(Text)
    certifications = Column(JSON)


class ImpactMetrics(Base):
    __tablename__ = "impact_metrics"

    id = Column(String(64), primary_key=True, default=new_id)
    schools_built = Column(Integer, nullable=False)
    families_supported = Column(Integer, nullable=False)
    hectares_protected = Column(Integer, nullable=False)
    amount_reinvested = Column(Numeric(12, 2), nullable=False)
    research_papers = Column(Integer, nullable=False)
    clinical_trials = Column(Integer, nullable=False)
    patents = Column(Integer, nullable=False)


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(64), primary_key=True, default=new_id)
    product_id = Column(String(64), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    session_id = Column(String(128), nullable=False, index=True)


class CommunityProject(Base):
    __tablename__ = "community_projects"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    community = Column(Text, nullable=False)
    category = Column(String(32), nullable=False)
    status = Column(String(32), nullable=False, default="planning")
    progress = Column(Integer, nullable=False, default=0)
    funding_goal = Column(Numeric(12, 2), nullable=False)
    current_funding = Column(Numeric(12, 2), nullable=False, default=0)
    start_date = Column(DateTime)
    target_completion_date = Column(DateTime)
    completion_date = Column(DateTime)
    beneficiaries = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_updated = Column(DateTime, nullable=False, default=utcnow)


class LiveImpactUpdate(Base):
    __tablename__ = "live_impact_updates"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("community_projects.id"), nullable=False)
    update_type = Column(String(32), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    previous_value = Column(Numeric(12, 2))
    new_value = Column(Numeric(12, 2))
    impact_metric = Column(String(64))
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class ImpactMilestone(Base):
    __tablename__ = "impact_milestones"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("community_projects.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    target_date = Column(DateTime, nullable=False)
    achieved_date = Column(DateTime)
    is_achieved = Column(Boolean, nullable=False, default=False)
    celebration_message = Column(Text)
    impact_value = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(String(64), primary_key=True, default=new_id)
    session_id = Column(String(128), nullable=False, index=True)
    health_goals = Column(JSON, nullable=False, default=list)
    lifestyle = Column(String(64), nullable=False)
    dietary_restrictions = Column(JSON, nullable=False, default=list)
    preferred_formats = Column(JSON, nullable=False, default=list)
    budget_range = Column(String(16), nullable=False)
    experience_level = Column(String(32), nullable=False)
    specific_concerns = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)


class RecommendationResults(Base):
    __tablename__ = "recommendation_results"

    id = Column(String(64), primary_key=True, default=new_id)
    session_id = Column(String(128), nullable=False, index=True)
    user_preferences_id = Column(String(64), ForeignKey("user_preferences.id"))
    recommended_products = Column(JSON, nullable=False)
    explanation = Column(Text, nullable=False)
    confidence_score = Column(Numeric(3, 2), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(String(64))
    loyalty_points = Column(Integer, nullable=False, default=0)
    total_spent = Column(Numeric(12, 2), nullable=False, default=0)
    learning_progress = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r}>"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("users.id"), index=True)
    session_id = Column(String(128))
    status = Column(String(32), nullable=False, default="pending")
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    shipping = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    tracking_number = Column(String(64))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(64), primary_key=True, default=new_id)
    order_id = Column(String(64), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(64), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)


class Inventory(Base):
    __tablename__ = "inventory"

    id = Column(String(64), primary_key=True, default=new_id)
    product_id = Column(String(64), ForeignKey("products.id"), nullable=False, unique=True)
    current_stock = Column(Integer, nullable=False, default=0)
    reserved_stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=20)
    reorder_point = Column(Integer, nullable=False, default=50)
    max_stock = Column(Integer, nullable=False, default=1000)
    last_updated = Column(DateTime, nullable=False, default=utcnow)


class InventoryMovement(Base):
    __tablename__ = "inventory_movements"

    id = Column(String(64), primary_key=True, default=new_id)
    product_id = Column(String(64), ForeignKey("products.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    quantity = Column(Integer, nullable=False)
    previous_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    reason = Column(Text)
    order_id = Column(String(64))
    created_by = Column(String(64), nullable=False, default="system")
    created_at = Column(DateTime, nullable=False, default=utcnow)


class LearningModule(Base):
    __tablename__ = "learning_modules"

    id = Column(String(64), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    plant_material = Column(String(128))
    difficulty = Column(String(32), nullable=False)
    estimated_time = Column(Integer, nullable=False)
    xp_reward = Column(Integer, nullable=False)
    content = Column(JSON, nullable=False)
    prerequisites = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)


class UserLearningProgress(Base):
    __tablename__ = "user_learning_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_learning_user_module"),)

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False)
    module_id = Column(String(64), ForeignKey("learning_modules.id"), nullable=False)
    status = Column(String(32), nullable=False, default="not_started")
    progress = Column(Integer, nullable=False, default=0)
    xp_earned = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    last_activity = Column(DateTime, nullable=False, default=utcnow)


class Badge(Base):
    __tablename__ = "badges"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    icon_url = Column(Text, nullable=False)
    category = Column(String(64), nullable=False)
    requirement = Column(JSON, nullable=False)
    rarity = Column(String(32), nullable=False)
    xp_reward = Column(Integer, nullable=False, default=0)
    loyalty_points_reward = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class UserBadge(Base):
    __tablename__ = "user_badges"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    badge_id = Column(String(64), ForeignKey("badges.id"), nullable=False)
    earned_at = Column(DateTime, nullable=False, default=utcnow)


class ImpactAction(Base):
    __tablename__ = "impact_actions"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    action_type = Column(String(64), nullable=False)
    description = Column(Text, nullable=False)
    impact_value = Column(Numeric(12, 2), nullable=False, default=0)
    xp_earned = Column(Integer, nullable=False, default=0)
    loyalty_points_earned = Column(Integer, nullable=False, default=0)
    project_id = Column(String(64))
    order_id = Column(String(64))
    created_at = Column(DateTime, nullable=False, default=utcnow)


class JourneyStage(Base):
    __tablename__ = "journey_stages"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(64), nullable=False)
    description = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)
    requirements = Column(JSON, nullable=False, default=dict)
    rewards = Column(JSON, nullable=False, default=dict)
    icon_url = Column(Text)
    color_scheme = Column(String(32))
    is_active = Column(Boolean, nullable=False, default=True)


class UserJourneyProgress(Base):
    __tablename__ = "user_journey_progress"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, unique=True)
    current_stage_id = Column(String(64), ForeignKey("journey_stages.id"))
    completed_stages = Column(JSON, nullable=False, default=list)
    total_xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    progress_to_next = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False, default=utcnow)


class GlobalIndigenousPlant(Base):
    __tablename__ = "global_indigenous_plants"

    id = Column(String(64), primary_key=True, default=new_id)
    plant_name = Column(Text, nullable=False)
    scientific_name = Column(Text, nullable=False)
    region = Column(String(64), nullable=False, index=True)
    country_of_origin = Column(Text, nullable=False)
    traditional_uses = Column(Text, nullable=False)
    popular_product_form = Column(Text, nullable=False)
    timeframe = Column(Text)
    indigenous_tribes_or_group = Column(Text, nullable=False)
    associated_ceremony = Column(Text)
    veterinary_use = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<GlobalIndigenousPlant id={self.id!r} plant_name={self.plant_name!r}>"

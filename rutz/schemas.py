"""
Entity schemas

Pydantic records shared by both storage backends and the HTTP layer.
Python attributes are snake_case; the JSON wire format is camelCase
(`plant_material` <-> "plantMaterial"). Money/decimal fields are Decimal and
serialise as strings ("49.99").

`*Create` models are insert shapes (no id / server timestamps), `*Update`
models are partial updates where every field is optional and an unset field
means "leave unchanged".
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------- Catalog ----------------

class ResearchPaper(CamelModel):
    title: str
    url: str
    year: int


class ProductCreate(CamelModel):
    name: str
    description: str
    short_description: str
    price: Decimal = Field(..., ge=0, description="Unit price, two decimals")
    origin: str
    category: str
    sector: str
    plant_material: str
    product_type: str
    rating: Decimal = Field(Decimal("0.0"), ge=0, le=5)
    review_count: int = Field(0, ge=0)
    image_url: str = ""
    qr_code: str = ""
    scientific_name: Optional[str] = None
    extraction_method: Optional[str] = None
    bioactive_compounds: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    sustainability_story: Optional[str] = None
    community_impact: Optional[str] = None
    research_papers: Optional[List[ResearchPaper]] = None
    in_stock: bool = True


class Product(ProductCreate):
    id: str


class ProductFilters(CamelModel):
    """Catalog query; an unset field places no constraint."""
    category: Optional[str] = None
    sector: Optional[str] = None
    plant_material: Optional[str] = None
    product_type: Optional[str] = None


class ProductFilterOptions(CamelModel):
    sectors: List[str]
    plant_materials: List[str]
    product_types: List[str]


class PlantProductGroup(CamelModel):
    plant_material: str
    total_products: int
    sectors: Dict[str, List[Product]]


class SupplyChainStep(CamelModel):
    id: str
    step_number: int
    title: str
    description: str
    image_url: str
    details: str
    location: Optional[str] = None
    certifications: Optional[List[str]] = None


class ImpactMetrics(CamelModel):
    id: str
    schools_built: int
    families_supported: int
    hectares_protected: int
    amount_reinvested: Decimal
    research_papers: int
    clinical_trials: int
    patents: int


# ---------------- Cart ----------------

class CartItemRequest(CamelModel):
    product_id: str
    quantity: int = Field(1, ge=0)


class CartItemCreate(CartItemRequest):
    session_id: str


class CartItem(CartItemCreate):
    id: str


class CartItemWithProduct(CartItem):
    product: Product


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., ge=0)


# ---------------- Community impact ----------------

ProjectCategory = Literal["education", "infrastructure", "healthcare", "environment"]
ProjectStatus = Literal["planning", "active", "completed"]


class CommunityProjectCreate(CamelModel):
    name: str
    description: str
    location: str
    community: str
    category: ProjectCategory
    status: ProjectStatus = "planning"
    progress: int = Field(0, ge=0, le=100)
    funding_goal: Decimal = Field(..., ge=0)
    current_funding: Decimal = Field(Decimal("0.00"), ge=0)
    start_date: Optional[datetime] = None
    target_completion_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    beneficiaries: int = Field(0, ge=0)


class CommunityProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    community: Optional[str] = None
    category: Optional[ProjectCategory] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    funding_goal: Optional[Decimal] = Field(None, ge=0)
    current_funding: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[datetime] = None
    target_completion_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    beneficiaries: Optional[int] = Field(None, ge=0)


class CommunityProject(CommunityProjectCreate):
    id: str
    created_at: datetime
    last_updated: datetime

    @computed_field
    @property
    def funding_percentage(self) -> float:
        if not self.funding_goal:
            return 0.0
        return round(float(self.current_funding / self.funding_goal * 100), 2)


UpdateType = Literal["progress", "funding", "completion", "milestone"]


class LiveImpactUpdateCreate(CamelModel):
    project_id: str
    update_type: UpdateType
    title: str
    description: str
    previous_value: Optional[Decimal] = None
    new_value: Optional[Decimal] = None
    impact_metric: Optional[str] = None
    is_public: bool = True


class LiveImpactUpdate(LiveImpactUpdateCreate):
    id: str
    created_at: datetime


class ImpactMilestoneCreate(CamelModel):
    project_id: str
    title: str
    description: str
    target_date: datetime
    achieved_date: Optional[datetime] = None
    is_achieved: bool = False
    celebration_message: Optional[str] = None
    impact_value: int = 0


class ImpactMilestoneUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    target_date: Optional[datetime] = None
    achieved_date: Optional[datetime] = None
    is_achieved: Optional[bool] = None
    celebration_message: Optional[str] = None
    impact_value: Optional[int] = None


class ImpactMilestone(ImpactMilestoneCreate):
    id: str
    created_at: datetime


# ---------------- Recommendations ----------------

BudgetRange = Literal["low", "medium", "high"]


class PreferencesRequest(CamelModel):
    health_goals: List[str] = Field(default_factory=list)
    lifestyle: str = "moderate"
    dietary_restrictions: List[str] = Field(default_factory=list)
    preferred_formats: List[str] = Field(default_factory=list)
    budget_range: BudgetRange = "medium"
    experience_level: str = "beginner"
    specific_concerns: List[str] = Field(default_factory=list)


class UserPreferencesCreate(PreferencesRequest):
    session_id: str


class UserPreferences(UserPreferencesCreate):
    id: str
    created_at: datetime
    updated_at: datetime


class RecommendedProduct(CamelModel):
    product_id: str
    score: float = Field(..., ge=0, le=1)
    reason: str
    priority: int


class RecommendationResults(CamelModel):
    id: str
    session_id: str
    user_preferences_id: Optional[str] = None
    recommended_products: List[RecommendedProduct]
    explanation: str
    confidence_score: Decimal
    created_at: datetime


# ---------------- Users & orders ----------------

class UserCreate(CamelModel):
    email: str = Field(..., min_length=3)
    first_name: str
    last_name: str
    phone: Optional[str] = None
    loyalty_points: int = Field(0, ge=0)
    total_spent: Decimal = Field(Decimal("0.00"), ge=0)
    learning_progress: int = Field(0, ge=0, le=100)


class UserUpdate(CamelModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    loyalty_points: Optional[int] = Field(None, ge=0)
    total_spent: Optional[Decimal] = Field(None, ge=0)
    learning_progress: Optional[int] = Field(None, ge=0, le=100)


class User(UserCreate):
    id: str
    created_at: datetime
    updated_at: datetime


OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class OrderItemCreate(CamelModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)


class OrderCreate(CamelModel):
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    status: OrderStatus = "pending"
    subtotal: Decimal
    tax: Decimal = Decimal("0.00")
    shipping: Decimal = Decimal("0.00")
    total: Decimal
    items: List[OrderItemCreate] = Field(default_factory=list)


class Order(CamelModel):
    id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    status: OrderStatus
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    tracking_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderItem(CamelModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: Decimal
    total: Decimal


class OrderItemWithProduct(OrderItem):
    product: Optional[Product] = None


class OrderWithItems(Order):
    items: List[OrderItemWithProduct]


class CheckoutRequest(CamelModel):
    user_id: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


# ---------------- Inventory ----------------

MovementType = Literal["sale", "restock", "adjustment", "return", "reservation", "release"]


class InventoryCreate(CamelModel):
    product_id: str
    current_stock: int = Field(0, ge=0)
    reserved_stock: int = Field(0, ge=0)
    low_stock_threshold: int = 20
    reorder_point: int = 50
    max_stock: int = 1000


class Inventory(InventoryCreate):
    id: str
    last_updated: datetime

    @computed_field
    @property
    def available_stock(self) -> int:
        return self.current_stock - self.reserved_stock


class InventoryWithProduct(Inventory):
    product: Optional[Product] = None


class InventoryUpdate(CamelModel):
    current_stock: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)
    max_stock: Optional[int] = Field(None, ge=0)
    reason: Optional[str] = None


class InventoryMovement(CamelModel):
    id: str
    product_id: str
    type: MovementType
    quantity: int
    previous_stock: int
    new_stock: int
    reason: Optional[str] = None
    order_id: Optional[str] = None
    created_by: str = "system"
    created_at: datetime


class StockRequest(CamelModel):
    quantity: int = Field(..., ge=1)
    order_id: str


class Availability(CamelModel):
    product_id: str
    quantity: int
    available: bool


# ---------------- Learning ----------------

class ContentSection(CamelModel):
    title: str
    type: Literal["text", "video", "quiz", "interactive"]
    content: str


class ModuleContent(CamelModel):
    sections: List[ContentSection] = Field(default_factory=list)


Difficulty = Literal["beginner", "intermediate", "advanced"]


class LearningModule(CamelModel):
    id: str
    title: str
    description: str
    plant_material: Optional[str] = None
    difficulty: Difficulty
    estimated_time: int
    xp_reward: int
    content: ModuleContent
    prerequisites: List[str] = Field(default_factory=list)
    is_active: bool = True


LearningStatus = Literal["not_started", "in_progress", "completed"]


class UserLearningProgress(CamelModel):
    id: str
    user_id: str
    module_id: str
    status: LearningStatus
    progress: int
    xp_earned: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    last_activity: datetime


class LearningProgressUpdate(CamelModel):
    progress: int = Field(..., ge=0, le=100)


# ---------------- Badges & impact rewards ----------------

class BadgeRequirement(CamelModel):
    type: str
    value: int
    timeframe: Optional[str] = None
    criteria: Optional[Dict[str, Any]] = None


class Badge(CamelModel):
    id: str
    name: str
    description: str
    icon_url: str
    category: str
    requirement: BadgeRequirement
    rarity: Literal["common", "rare", "epic", "legendary"]
    xp_reward: int = 0
    loyalty_points_reward: int = 0
    is_active: bool = True


class UserBadge(CamelModel):
    id: str
    user_id: str
    badge_id: str
    earned_at: datetime


class UserBadgeWithBadge(UserBadge):
    badge: Optional[Badge] = None


class ImpactActionCreate(CamelModel):
    user_id: str
    action_type: str
    description: str
    impact_value: Decimal = Decimal("0.00")
    xp_earned: int = 0
    loyalty_points_earned: int = 0
    project_id: Optional[str] = None
    order_id: Optional[str] = None


class ImpactActionRequest(CamelModel):
    action_type: str
    description: str
    impact_value: Decimal = Decimal("0.00")
    xp_earned: int = Field(0, ge=0)
    loyalty_points_earned: int = Field(0, ge=0)
    project_id: Optional[str] = None
    order_id: Optional[str] = None


class ImpactAction(ImpactActionCreate):
    id: str
    created_at: datetime


class UserImpactSummary(CamelModel):
    total_impact: float
    total_xp: int
    total_loyalty_points: int


# ---------------- Journey ----------------

class StageRequirements(CamelModel):
    min_purchases: Optional[int] = None
    min_learning_progress: Optional[int] = None
    min_loyalty_points: Optional[int] = None


class StageRewards(CamelModel):
    xp: int = 0
    loyalty_points: int = 0
    discount: Optional[int] = None


class JourneyStage(CamelModel):
    id: str
    name: str
    description: str
    order: int
    requirements: StageRequirements = Field(default_factory=StageRequirements)
    rewards: StageRewards = Field(default_factory=StageRewards)
    icon_url: Optional[str] = None
    color_scheme: Optional[str] = None
    is_active: bool = True


class UserJourneyProgress(CamelModel):
    id: str
    user_id: str
    current_stage_id: Optional[str] = None
    completed_stages: List[str] = Field(default_factory=list)
    total_xp: int = 0
    level: int = 1
    progress_to_next: int = 0
    last_updated: datetime


class StageProgression(CamelModel):
    can_advance: bool
    next_stage: Optional[JourneyStage] = None


class XpGrant(CamelModel):
    xp: int = Field(..., ge=0)
    progress_to_next: Optional[int] = Field(None, ge=0, le=100)


class UserWithProgress(User):
    progress: Optional[UserJourneyProgress] = None
    badges: List[UserBadgeWithBadge] = Field(default_factory=list)


# ---------------- Global indigenous plants ----------------

class GlobalIndigenousPlantCreate(CamelModel):
    id: Optional[str] = None
    plant_name: str
    scientific_name: str
    region: str
    country_of_origin: str
    traditional_uses: str
    popular_product_form: str
    timeframe: Optional[str] = None
    indigenous_tribes_or_group: str
    associated_ceremony: Optional[str] = None
    veterinary_use: Optional[str] = None


class GlobalIndigenousPlant(GlobalIndigenousPlantCreate):
    id: str
    created_at: datetime
    updated_at: datetime


class PlantSearch(CamelModel):
    """Plant catalog query; every unset field places no constraint."""
    search_term: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    tribe: Optional[str] = None
    product_form: Optional[str] = None
    ceremonial_use: Optional[bool] = None
    veterinary_use: Optional[bool] = None


class Message(CamelModel):
    message: str

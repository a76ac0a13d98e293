# Filename: rutz/services/recommendations.py
# Keyword scorer behind POST /api/recommendations. Pure function of
# (catalog, preferences): both storage backends call it, so identical
# inputs always produce the identical ordered top list.

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from rutz.schemas import PreferencesRequest, Product, RecommendedProduct

BASE_SCORE = 0.5
MAX_RESULTS = 6
DEFAULT_REASON = "General botanical wellness support"
DEFAULT_PRIORITY = 3


@dataclass(frozen=True)
class GoalRule:
    goal: str
    keywords: Tuple[str, ...]  # matched against plant_material
    increment: float
    reason: str
    priority: int


GOAL_RULES = (
    GoalRule("immune_support", ("chaga", "echinacea"), 0.3,
             "Excellent for immune system support based on your goals", 1),
    GoalRule("stress_relief", ("ashwagandha", "rhodiola"), 0.3,
             "Perfect for stress management and adaptation", 1),
    GoalRule("energy_boost", ("ginseng", "rhodiola"), 0.25,
             "Natural energy enhancement without stimulants", 2),
)

# preferred format -> keyword in product_type
FORMAT_RULES = {
    "tea": "tea",
    "capsules": "capsule",
    "powder": "powder",
}
FORMAT_INCREMENT = 0.15

BEGINNER_INCREMENT = 0.1
BUDGET_INCREMENT = 0.1


def in_budget(budget_range: str, price: Decimal) -> bool:
    if budget_range == "low":
        return price < 30
    if budget_range == "medium":
        return 30 <= price <= 80
    if budget_range == "high":
        return price > 80
    return False


def score_product(product: Product, preferences: PreferencesRequest) -> RecommendedProduct:
    score = BASE_SCORE
    reason = DEFAULT_REASON
    priority = DEFAULT_PRIORITY
    material = product.plant_material.lower()
    product_type = product.product_type.lower()

    for rule in GOAL_RULES:
        if rule.goal in preferences.health_goals and any(k in material for k in rule.keywords):
            score += rule.increment
            reason = rule.reason
            priority = rule.priority

    for fmt, keyword in FORMAT_RULES.items():
        if fmt in preferences.preferred_formats and keyword in product_type:
            score += FORMAT_INCREMENT

    if preferences.experience_level == "beginner" and "tea" in product_type:
        score += BEGINNER_INCREMENT
        reason += " - Great for beginners"

    if in_budget(preferences.budget_range, product.price):
        score += BUDGET_INCREMENT

    return RecommendedProduct(
        product_id=product.id,
        score=round(min(score, 1.0), 2),
        reason=reason,
        priority=priority,
    )


def rank_products(products: Iterable[Product], preferences: PreferencesRequest,
                  limit: int = MAX_RESULTS) -> List[RecommendedProduct]:
    """Score every product, best first (score desc, priority asc, id asc)."""
    scored = [score_product(p, preferences) for p in products]
    scored.sort(key=lambda r: (-r.score, r.priority, r.product_id))
    return scored[:limit]


def confidence_score(recommendations: List[RecommendedProduct]) -> Decimal:
    if not recommendations:
        return Decimal("0.50")
    mean = sum(r.score for r in recommendations) / len(recommendations)
    return Decimal(str(round(mean, 2))).quantize(Decimal("0.01"))


def build_explanation(preferences: PreferencesRequest,
                      recommendations: List[RecommendedProduct]) -> str:
    goals = preferences.health_goals[:2]
    if goals:
        explanation = f"Based on your health goals of {' and '.join(goals)}, "
    else:
        explanation = "Based on your preferences, "
    explanation += (
        f"we've identified {len(recommendations)} botanical extracts that align with your needs. "
    )

    top: Optional[RecommendedProduct] = recommendations[0] if recommendations else None
    if top and top.score > 0.8:
        explanation += (
            f"Our top recommendation has a {round(top.score * 100)}% compatibility match "
            "with your preferences."
        )
    else:
        explanation += "These recommendations are tailored to your experience level and preferred formats."
    return explanation

# Filename: rutz/services/search.py
# Predicate builders for the in-memory backend. Each set field of a filter
# struct appends one predicate; a record matches when all predicates hold.

from typing import Callable, List

from rutz.schemas import GlobalIndigenousPlant, PlantSearch, Product, ProductFilters

ProductPredicate = Callable[[Product], bool]
PlantPredicate = Callable[[GlobalIndigenousPlant], bool]


def _contains(haystack, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def product_predicates(filters: ProductFilters) -> List[ProductPredicate]:
    predicates: List[ProductPredicate] = []
    if filters.category:
        predicates.append(lambda p: p.category == filters.category)
    if filters.sector:
        predicates.append(lambda p: p.sector == filters.sector)
    if filters.plant_material:
        predicates.append(lambda p: p.plant_material == filters.plant_material)
    if filters.product_type:
        predicates.append(lambda p: p.product_type == filters.product_type)
    return predicates


def plant_predicates(search: PlantSearch) -> List[PlantPredicate]:
    predicates: List[PlantPredicate] = []
    if search.search_term:
        term = search.search_term
        predicates.append(lambda p: (
            _contains(p.plant_name, term)
            or _contains(p.scientific_name, term)
            or _contains(p.traditional_uses, term)
            or _contains(p.indigenous_tribes_or_group, term)
        ))
    if search.region:
        predicates.append(lambda p: p.region.lower() == search.region.lower())
    if search.country:
        predicates.append(lambda p: _contains(p.country_of_origin, search.country))
    if search.tribe:
        predicates.append(lambda p: _contains(p.indigenous_tribes_or_group, search.tribe))
    if search.product_form:
        predicates.append(lambda p: _contains(p.popular_product_form, search.product_form))
    if search.ceremonial_use:
        predicates.append(lambda p: bool(p.associated_ceremony))
    if search.veterinary_use:
        predicates.append(lambda p: bool(p.veterinary_use))
    return predicates


def matches_all(record, predicates) -> bool:
    return all(predicate(record) for predicate in predicates)

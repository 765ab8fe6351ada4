"""
Product catalogue fixtures and engine factories.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence

from cascading.bootstrap.config import EngineConfig
from cascading.core.engine import CascadeEngine
from cascading.core.records import Record
from cascading.dependencies.graph import DeclarationLike, DependencyDeclaration
from cascading.errors import ErrorAggregator


PRODUCT_DEPENDENCIES: List[DependencyDeclaration] = [
    DependencyDeclaration(field="category", depends_on=()),
    DependencyDeclaration(field="subcategory", depends_on=("category",)),
    DependencyDeclaration(field="brand", depends_on=("category", "subcategory")),
    DependencyDeclaration(field="name", depends_on=("category", "subcategory", "brand")),
]


SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {"id": "1", "name": "iPhone 14", "category": "Electronics", "subcategory": "Smartphones", "brand": "Apple"},
    {"id": "2", "name": "Galaxy S23", "category": "Electronics", "subcategory": "Smartphones", "brand": "Samsung"},
    {"id": "3", "name": "MacBook Pro", "category": "Electronics", "subcategory": "Laptops", "brand": "Apple"},
    {"id": "4", "name": "Running Shoes", "category": "Sports", "subcategory": "Footwear", "brand": "Nike"},
    {"id": "5", "name": "T-Shirt", "category": "Clothing", "subcategory": "Casual", "brand": "H&M"},
]


COMPREHENSIVE_PRODUCTS: List[Dict[str, Any]] = [
    # Electronics - Smartphones
    {"id": "1", "name": "iPhone 14", "category": "Electronics", "subcategory": "Smartphones", "brand": "Apple"},
    {"id": "2", "name": "iPhone 13", "category": "Electronics", "subcategory": "Smartphones", "brand": "Apple"},
    {"id": "3", "name": "Galaxy S23", "category": "Electronics", "subcategory": "Smartphones", "brand": "Samsung"},
    {"id": "4", "name": "Galaxy S22", "category": "Electronics", "subcategory": "Smartphones", "brand": "Samsung"},
    {"id": "5", "name": "Pixel 7", "category": "Electronics", "subcategory": "Smartphones", "brand": "Google"},

    # Electronics - Laptops
    {"id": "6", "name": "MacBook Pro", "category": "Electronics", "subcategory": "Laptops", "brand": "Apple"},
    {"id": "7", "name": "MacBook Air", "category": "Electronics", "subcategory": "Laptops", "brand": "Apple"},
    {"id": "8", "name": "Dell XPS 13", "category": "Electronics", "subcategory": "Laptops", "brand": "Dell"},
    {"id": "9", "name": "ThinkPad X1", "category": "Electronics", "subcategory": "Laptops", "brand": "Lenovo"},

    # Sports - Footwear
    {"id": "10", "name": "Air Max 90", "category": "Sports", "subcategory": "Footwear", "brand": "Nike"},
    {"id": "11", "name": "Stan Smith", "category": "Sports", "subcategory": "Footwear", "brand": "Adidas"},
    {"id": "12", "name": "Chuck Taylor", "category": "Sports", "subcategory": "Footwear", "brand": "Converse"},

    # Sports - Equipment
    {"id": "13", "name": "Tennis Racket Pro", "category": "Sports", "subcategory": "Equipment", "brand": "Wilson"},
    {"id": "14", "name": "Basketball", "category": "Sports", "subcategory": "Equipment", "brand": "Spalding"},

    # Clothing - Casual
    {"id": "15", "name": "Basic T-Shirt", "category": "Clothing", "subcategory": "Casual", "brand": "H&M"},
    {"id": "16", "name": "Denim Jacket", "category": "Clothing", "subcategory": "Casual", "brand": "Levi's"},
    {"id": "17", "name": "Hoodie", "category": "Clothing", "subcategory": "Casual", "brand": "Nike"},

    # Clothing - Formal
    {"id": "18", "name": "Business Suit", "category": "Clothing", "subcategory": "Formal", "brand": "Hugo Boss"},
    {"id": "19", "name": "Dress Shirt", "category": "Clothing", "subcategory": "Formal", "brand": "Ralph Lauren"},
]


def create_engine(
    data: Sequence[Record],
    dependencies: Iterable[DeclarationLike],
    config: Optional[EngineConfig] = None,
    error_aggregator: Optional[ErrorAggregator] = None,
) -> CascadeEngine:
    """Build an engine over any dataset."""
    return CascadeEngine(data, dependencies, config=config, error_aggregator=error_aggregator)


def create_product_engine(
    products: Optional[Sequence[Record]] = None,
    config: Optional[EngineConfig] = None,
    error_aggregator: Optional[ErrorAggregator] = None,
) -> CascadeEngine:
    """Build an engine over products with the category/subcategory/brand/name chain."""
    if products is None:
        products = COMPREHENSIVE_PRODUCTS
    return CascadeEngine(products, PRODUCT_DEPENDENCIES, config=config, error_aggregator=error_aggregator)

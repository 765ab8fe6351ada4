"""
Sample product catalogues and factories for demos and tests.
"""

from .products import (
    PRODUCT_DEPENDENCIES,
    SAMPLE_PRODUCTS,
    COMPREHENSIVE_PRODUCTS,
    create_engine,
    create_product_engine,
)

__all__ = [
    "PRODUCT_DEPENDENCIES",
    "SAMPLE_PRODUCTS",
    "COMPREHENSIVE_PRODUCTS",
    "create_engine",
    "create_product_engine",
]

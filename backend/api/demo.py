# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Demo catalogue loaded on start-up when SEED_DEMO_PRODUCTS is set."""

from core.logger import logger
from models.product import Product
from repositories.base import Repository

DEMO_PRODUCTS = [
    {"name": "Laptop", "price": 999.99, "category": "electronics", "stock": 10},
    {"name": "Smartphone", "price": 599.99, "category": "electronics", "stock": 25},
    {"name": "Libro", "price": 19.99, "category": "books", "stock": 50},
]


def seed_demo_products(products: Repository) -> int:
    """Fill an empty product collection with the demo catalogue."""
    if products.list():
        logger.info("Products already present – skipping demo seed")
        return 0
    for values in DEMO_PRODUCTS:
        products.put(Product(**values))
    logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)

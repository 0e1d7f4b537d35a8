"""
Catalog service.

Holds the immutable in-memory product list the recommendation client
ranks against. The catalog is loaded once at startup from a static JSON
file; load failures are fatal and propagate to the caller.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from pydantic import ValidationError

from shopadvisor.config import settings
from shopadvisor.schemas.products import Product
from shopadvisor.schemas.recommendations import Recommendation, RecommendationResponse

logger = logging.getLogger(__name__)

# Process-wide catalog (lazy initialization)
_catalog: Optional["Catalog"] = None


class Catalog:
    """Read-only product list with id lookup."""

    def __init__(self, products: List[Product]):
        by_id: Dict[str, Product] = {}
        for product in products:
            if product.id in by_id:
                raise ValueError(f"Duplicate product id in catalog: {product.id}")
            by_id[product.id] = product
        self._products: Tuple[Product, ...] = tuple(products)
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._products)

    def all(self) -> List[Product]:
        """Every product, in catalog order."""
        return list(self._products)

    def by_id(self, product_id: str) -> Optional[Product]:
        """Point lookup; None for ids the catalog does not know."""
        return self._by_id.get(product_id)

    def categories(self) -> Set[str]:
        return {p.category for p in self._products}

    def sorted_categories(self) -> List[str]:
        return sorted(self.categories())

    def resolve(
        self, response: RecommendationResponse
    ) -> List[Tuple[Recommendation, Product]]:
        """
        Pair each recommendation with its product, in rank order.

        Recommendations that reference an unknown product id are skipped;
        the remote model is free to invent identifiers.
        """
        resolved: List[Tuple[Recommendation, Product]] = []
        for rec in response.recommendations:
            product = self.by_id(rec.product_id)
            if product is None:
                logger.debug(f"Skipping dangling product reference: {rec.product_id}")
                continue
            resolved.append((rec, product))
        return resolved


def _read_catalog_text(path: Optional[Union[str, Path]]) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return (
        resources.files("shopadvisor.data")
        .joinpath("products.json")
        .read_text(encoding="utf-8")
    )


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """
    Load a catalog from a JSON array of product records.

    Args:
        path: JSON file to read. Defaults to settings.CATALOG_PATH, or the
              products.json shipped with the package when that is empty.

    Returns:
        Catalog

    Raises:
        OSError: file cannot be read
        ValueError: invalid JSON, a record failing validation, or a
                    duplicate product id
    """
    source = path or settings.CATALOG_PATH or None
    raw = json.loads(_read_catalog_text(source))
    if not isinstance(raw, list):
        raise ValueError("Catalog data must be a JSON array of products")

    try:
        products = [Product.model_validate(item) for item in raw]
    except ValidationError as e:
        raise ValueError(f"Invalid product record in catalog: {e}") from e

    catalog = Catalog(products)
    logger.info(
        f"Loaded catalog with {len(catalog)} products "
        f"in {len(catalog.categories())} categories"
    )
    return catalog


def get_catalog() -> Catalog:
    """Process-wide catalog, loaded on first use."""
    global _catalog

    if _catalog is None:
        _catalog = load_catalog()
    return _catalog

"""
Tests for the catalog service.
"""

import json

import pytest

from shopadvisor.schemas.products import Product
from shopadvisor.schemas.recommendations import Recommendation, RecommendationResponse
from shopadvisor.services import catalog_service
from shopadvisor.services.catalog_service import Catalog, get_catalog, load_catalog


def _product(product_id: str, category: str = "Laptops") -> Product:
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        brand="Brand",
        category=category,
        price=100,
        description="",
    )


class TestPackagedCatalog:

    def test_loads_all_products(self, catalog):
        assert len(catalog) == 46
        assert catalog.all()[0].name == "MacBook Air M2"
        assert catalog.all()[-1].id == "46"

    def test_ids_are_unique(self, catalog):
        ids = [p.id for p in catalog.all()]
        assert len(ids) == len(set(ids))

    def test_by_id(self, catalog):
        product = catalog.by_id("27")
        assert product is not None
        assert product.name == "PlayStation 5"
        assert product.in_stock is False

    def test_unknown_id_is_none(self, catalog):
        assert catalog.by_id("999") is None
        assert catalog.by_id("") is None

    def test_categories(self, catalog):
        assert {"Laptops", "Headphones", "Gaming", "Smart Home"} <= catalog.categories()
        assert catalog.sorted_categories() == sorted(catalog.categories())

    def test_all_returns_copy(self, catalog):
        products = catalog.all()
        products.clear()
        assert len(catalog.all()) == 46

    def test_products_are_frozen(self, catalog):
        with pytest.raises(Exception):
            catalog.by_id("1").price = 1


class TestCatalogConstruction:

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate product id"):
            Catalog([_product("1"), _product("1")])

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([
            {"id": "a", "name": "A", "brand": "X", "category": "Tools", "price": 5, "description": "d"},
        ]))

        catalog = load_catalog(path)

        assert catalog.by_id("a").features == []
        assert catalog.categories() == {"Tools"}

    def test_invalid_record_raises(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{"id": "a", "name": "A", "price": -1}]))

        with pytest.raises(ValueError, match="Invalid product record"):
            load_catalog(path)

    def test_not_a_list_raises(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps({"id": "a"}))

        with pytest.raises(ValueError):
            load_catalog(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_catalog(tmp_path / "missing.json")

    def test_get_catalog_is_cached(self, monkeypatch):
        monkeypatch.setattr(catalog_service, "_catalog", None)
        first = get_catalog()
        assert get_catalog() is first


class TestResolve:

    def test_dangling_references_are_skipped(self, catalog):
        response = RecommendationResponse(
            recommendations=[
                Recommendation(product_id="11", relevance_score=95),
                Recommendation(product_id="404", relevance_score=90),
                Recommendation(product_id="12", relevance_score=85),
            ],
            query_analysis="",
        )

        resolved = catalog.resolve(response)

        assert [(rec.product_id, product.name) for rec, product in resolved] == [
            ("11", "Sony WH-1000XM5"),
            ("12", "Bose QuietComfort 45"),
        ]

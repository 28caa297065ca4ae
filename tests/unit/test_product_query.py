import uuid

import pytest
from pydantic import ValidationError

from storefront.db import models
from storefront.db.product_query import (
    ProductFilters,
    apply_pagination,
    apply_product_filters,
    apply_product_ordering,
)


def test_defaults():
    f = ProductFilters.model_validate({})
    assert (f.page, f.limit, f.sort_by, f.sort_order) == (1, 20, "createdAt", "desc")
    assert f.offset == 0


def test_parses_camel_case_query_values():
    cid = uuid.uuid4()
    f = ProductFilters.model_validate(
        {"page": "3", "limit": "10", "categoryId": str(cid), "minPrice": "100", "sortBy": "price", "sortOrder": "asc"}
    )
    assert f.page == 3 and f.limit == 10
    assert f.offset == 20
    assert f.category_id == cid
    assert f.min_price == 100
    assert (f.sort_by, f.sort_order) == ("price", "asc")


def test_blank_values_are_ignored():
    f = ProductFilters.model_validate({"search": "", "categoryId": "", "page": ""})
    assert f.search is None and f.category_id is None and f.page == 1


@pytest.mark.parametrize(
    "params",
    [
        {"page": "0"},
        {"page": "abc"},
        {"limit": "101"},
        {"limit": "0"},
        {"minPrice": "-1"},
        {"categoryId": "not-a-uuid"},
        {"sortBy": "rating"},
        {"sortOrder": "up"},
    ],
)
def test_invalid_values_rejected(params):
    with pytest.raises(ValidationError):
        ProductFilters.model_validate(params)


def _seed(db_session):
    shoes = models.Category(name="Shoes", slug="shoes")
    bags = models.Category(name="Bags", slug="bags")
    db_session.add_all([shoes, bags])
    db_session.flush()
    db_session.add_all(
        [
            models.Product(name="Running Shoes", description="Cushioned", price=150, stock=3, category_id=shoes.id),
            models.Product(name="Sneakers", description="Classic canvas", price=90, stock=8, category_id=shoes.id),
            models.Product(name="Tote", description="Canvas tote bag", price=40, stock=1, category_id=bags.id),
        ]
    )
    db_session.commit()
    return shoes, bags


def _names(query):
    return [p.name for p in query.all()]


def test_filters_sort_and_paginate(db_session):
    shoes, _ = _seed(db_session)
    base = db_session.query(models.Product)

    by_cat = ProductFilters(category_id=shoes.id, sort_by="price", sort_order="asc")
    assert _names(apply_product_ordering(apply_product_filters(base, by_cat), by_cat)) == ["Sneakers", "Running Shoes"]

    price_range = ProductFilters(min_price=40, max_price=90, sort_by="name", sort_order="asc")
    assert _names(apply_product_ordering(apply_product_filters(base, price_range), price_range)) == ["Sneakers", "Tote"]

    # case-insensitive match on name or description
    search = ProductFilters(search="CANVAS", sort_by="name", sort_order="asc")
    assert _names(apply_product_ordering(apply_product_filters(base, search), search)) == ["Sneakers", "Tote"]

    page2 = ProductFilters(page=2, limit=2, sort_by="price", sort_order="desc")
    assert _names(apply_pagination(apply_product_ordering(base, page2), page2)) == ["Tote"]

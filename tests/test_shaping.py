import pytest

from ecofinds.core.errors import ValidationError
from ecofinds.models.product import ProductImage, ProductListing
from ecofinds.services.shaping import build_pagination, page_offset, primary_image_url, resolve_sort


def _img(url, is_primary=False):
    return ProductImage(product_id=1, url=url, is_primary=is_primary)


def test_primary_image_prefers_flagged_image():
    images = [_img("a.png"), _img("b.png", True), _img("c.png", True)]
    assert primary_image_url(images) == "b.png"


def test_primary_image_falls_back_to_first():
    assert primary_image_url([_img("a.png"), _img("b.png")]) == "a.png"


def test_primary_image_absent():
    assert primary_image_url([]) is None
    assert primary_image_url(None) is None


def test_pagination_block():
    skip = page_offset(2, 2)
    assert skip == 2

    page = build_pagination(page=2, limit=2, skip=skip, returned=2, total=5)
    assert page.current_page == 2
    assert page.total_pages == 3
    assert page.total_items == 5
    assert page.has_more is True

    last = build_pagination(page=3, limit=2, skip=4, returned=1, total=5)
    assert last.has_more is False


def test_pagination_empty():
    page = build_pagination(page=1, limit=10, skip=0, returned=0, total=0)
    assert page.total_pages == 0
    assert page.has_more is False


def test_resolve_sort_accepts_camel_and_snake():
    camel = resolve_sort(ProductListing, "createdAt", "asc", default="id")
    snake = resolve_sort(ProductListing, "created_at", "ASC", default="id")
    assert str(camel[0]) == str(snake[0])
    assert len(camel) == 2


def test_resolve_sort_rejects_unknown_field():
    with pytest.raises(ValidationError):
        resolve_sort(ProductListing, "nope", "desc", default="id")


def test_resolve_sort_rejects_unknown_order():
    with pytest.raises(ValidationError):
        resolve_sort(ProductListing, "price", "sideways", default="id")

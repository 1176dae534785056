from decimal import Decimal

from app.models.catalog_models import Category, Product, Variant
from app.services.catalog.reporting import (
    DEFAULT_VARIANT_NAME,
    UNCATEGORIZED_LABEL,
    build_inventory_summary,
    build_low_stock_report,
    parse_threshold,
)


def _variant(variant_id, stock, name="Size", value=None, sku=None):
    return Variant(
        id=variant_id,
        name=name,
        value=value or f"V{variant_id}",
        price=Decimal("10.00"),
        stock=stock,
        sku=sku or f"SKU-{variant_id}",
    )


def _product(product_id, category, variants=(), name=None, is_active=True, base_price="10.00"):
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        description="A product used in report tests",
        base_price=Decimal(base_price),
        discount_percentage=Decimal("0"),
        category=category,
        variants=list(variants),
        is_active=is_active,
    )


# ----------------------------------------------------------------------------
# parse_threshold
# ----------------------------------------------------------------------------

def test_parse_threshold_reads_integers():
    assert parse_threshold("12", 10) == 12
    assert parse_threshold("0", 10) == 0


def test_parse_threshold_uses_leading_integer():
    assert parse_threshold("12abc", 10) == 12
    assert parse_threshold("7.9", 10) == 7


def test_parse_threshold_falls_back_to_default():
    assert parse_threshold(None, 10) == 10
    assert parse_threshold("", 10) == 10
    assert parse_threshold("   ", 10) == 10
    assert parse_threshold("abc", 10) == 10


def test_parse_threshold_passes_ints_through():
    assert parse_threshold(3, 10) == 3


# ----------------------------------------------------------------------------
# Low-stock report
# ----------------------------------------------------------------------------

def test_low_stock_reports_only_variants_at_or_below_threshold():
    shirts = Category(id=1, name="Shirts")
    product = _product(
        1,
        shirts,
        [_variant(1, 5, value="Small"), _variant(2, 15, value="Large")],
        name="Tee",
    )

    report = build_low_stock_report([product], threshold=10)

    assert report.threshold == 10
    assert report.total_low_stock_items == 1
    item = report.items[0]
    assert item.variant_id == 1
    assert item.variant_name == "Size: Small"
    assert item.current_stock == 5
    assert item.sku == "SKU-1"
    assert item.category == "Shirts"
    assert item.category_id == 1
    assert item.product_name == "Tee"
    assert item.threshold == 10


def test_low_stock_threshold_is_inclusive():
    product = _product(1, Category(id=1, name="Shirts"), [_variant(1, 10), _variant(2, 11)])

    report = build_low_stock_report([product], threshold=10)

    assert [item.variant_id for item in report.items] == [1]


def test_variantless_product_always_reported_as_default_line():
    product = _product(1, Category(id=1, name="Books"))

    for threshold in (0, 10, 1000):
        report = build_low_stock_report([product], threshold=threshold)
        assert report.total_low_stock_items == 1
        item = report.items[0]
        assert item.variant_id is None
        assert item.variant_name == DEFAULT_VARIANT_NAME
        assert item.current_stock == 0
        assert item.sku is None


def test_zero_threshold_reports_only_empty_variants():
    product = _product(1, Category(id=1, name="Shirts"), [_variant(1, 0), _variant(2, 1)])

    report = build_low_stock_report([product], threshold=0)

    assert [item.variant_id for item in report.items] == [1]


def test_low_stock_item_order_follows_products_then_variants():
    category = Category(id=1, name="Shirts")
    first = _product(1, category, [_variant(11, 1), _variant(12, 2)])
    second = _product(2, category)
    third = _product(3, category, [_variant(31, 3)])

    report = build_low_stock_report([first, second, third], threshold=10)

    assert [(i.product_id, i.variant_id) for i in report.items] == [
        (1, 11),
        (1, 12),
        (2, None),
        (3, 31),
    ]
    assert report.total_low_stock_items == len(report.items)


def test_low_stock_skips_inactive_products():
    category = Category(id=1, name="Shirts")
    products = [_product(1, category, is_active=False), _product(2, category, [_variant(1, 1)])]

    report = build_low_stock_report(products, threshold=10)

    assert [item.product_id for item in report.items] == [2]


def test_low_stock_labels_unresolved_category():
    product = _product(1, None, [_variant(1, 1)])

    report = build_low_stock_report([product], threshold=10)

    assert report.items[0].category == UNCATEGORIZED_LABEL
    assert report.items[0].category_id is None


def test_low_stock_does_not_mutate_products():
    variant = _variant(1, 4)
    product = _product(1, Category(id=1, name="Shirts"), [variant])

    first = build_low_stock_report([product], threshold=10)
    second = build_low_stock_report([product], threshold=10)

    assert first == second
    assert variant.stock == 4
    assert len(product.variants) == 1


# ----------------------------------------------------------------------------
# Inventory summary
# ----------------------------------------------------------------------------

def test_summary_of_empty_catalog_is_all_zero():
    summary = build_inventory_summary([])

    assert summary.total_products == 0
    assert summary.total_variants == 0
    assert summary.total_stock == 0
    assert summary.out_of_stock_items == 0
    assert summary.category_summary == {}


def test_zero_stock_variant_counts_once_toward_out_of_stock():
    product = _product(1, Category(id=1, name="Shirts"), [_variant(1, 0), _variant(2, 5)])

    summary = build_inventory_summary([product])

    assert summary.out_of_stock_items == 1
    assert summary.total_variants == 2
    assert summary.total_stock == 5


def test_variantless_product_counts_as_out_of_stock():
    product = _product(1, Category(id=1, name="Books"))

    summary = build_inventory_summary([product])

    assert summary.total_products == 1
    assert summary.total_variants == 0
    assert summary.out_of_stock_items == 1
    assert summary.category_summary["Books"].products == 1
    assert summary.category_summary["Books"].variants == 0


def test_category_breakdown_adds_up_to_totals():
    shirts = Category(id=1, name="Shirts")
    books = Category(id=2, name="Books")
    products = [
        _product(1, shirts, [_variant(1, 3), _variant(2, 4)]),
        _product(2, shirts, [_variant(3, 0)]),
        _product(3, books, [_variant(4, 10)]),
        _product(4, books),
    ]

    summary = build_inventory_summary(products)

    assert summary.total_products == 4
    assert summary.total_variants == 4
    assert summary.total_stock == 17
    assert summary.out_of_stock_items == 2
    assert set(summary.category_summary) == {"Shirts", "Books"}
    assert summary.category_summary["Shirts"].products == 2
    assert summary.category_summary["Shirts"].variants == 3
    assert summary.category_summary["Shirts"].total_stock == 7
    assert summary.category_summary["Books"].total_stock == 10

    entries = summary.category_summary.values()
    assert sum(e.products for e in entries) == summary.total_products
    assert sum(e.variants for e in entries) == summary.total_variants
    assert sum(e.total_stock for e in entries) == summary.total_stock


def test_categories_sharing_a_name_are_not_merged():
    first = Category(id=1, name="Accessories")
    second = Category(id=7, name="Accessories")
    products = [
        _product(1, first, [_variant(1, 2)]),
        _product(2, second, [_variant(2, 3)]),
    ]

    summary = build_inventory_summary(products)

    assert set(summary.category_summary) == {"Accessories", "Accessories (#7)"}
    assert summary.category_summary["Accessories"].category_id == 1
    assert summary.category_summary["Accessories"].total_stock == 2
    assert summary.category_summary["Accessories (#7)"].category_id == 7
    assert summary.category_summary["Accessories (#7)"].total_stock == 3


def test_summary_groups_unresolved_categories():
    products = [_product(1, None, [_variant(1, 2)]), _product(2, None)]

    summary = build_inventory_summary(products)

    entry = summary.category_summary[UNCATEGORIZED_LABEL]
    assert entry.category_id is None
    assert entry.products == 2
    assert entry.variants == 1


def test_summary_ignores_inactive_products():
    category = Category(id=1, name="Shirts")
    products = [
        _product(1, category, [_variant(1, 0)], is_active=False),
        _product(2, category, [_variant(2, 5)]),
    ]

    summary = build_inventory_summary(products)

    assert summary.total_products == 1
    assert summary.out_of_stock_items == 0


def test_disambiguated_label_never_overwrites_an_existing_category():
    literal = Category(id=3, name="A (#7)")
    first = Category(id=1, name="A")
    second = Category(id=7, name="A")
    products = [
        _product(1, literal, [_variant(1, 4)]),
        _product(2, first, [_variant(2, 5)]),
        _product(3, second, [_variant(3, 6)]),
    ]

    summary = build_inventory_summary(products)

    assert len(summary.category_summary) == 3
    by_id = {entry.category_id: entry for entry in summary.category_summary.values()}
    assert by_id[3].total_stock == 4
    assert by_id[1].total_stock == 5
    assert by_id[7].total_stock == 6
    assert summary.category_summary["A (#7)"].category_id == 3
    assert summary.category_summary["A"].category_id == 1
    assert summary.total_stock == sum(e.total_stock for e in summary.category_summary.values())


def test_inventory_summary_is_repeatable():
    category = Category(id=1, name="Shirts")
    products = [
        _product(1, category, [_variant(1, 0), _variant(2, 5)]),
        _product(2, category),
    ]

    assert build_inventory_summary(products) == build_inventory_summary(products)

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreReadError
from app.db.base_class import Base
from app.models.catalog_schemas import CategoryCreate, ProductCreate
from app.services.catalog import build_catalog_service
from app.services.catalog.product_service import ProductService
from app.services.catalog.report_service import InventoryReportService


def _make_product(service, category_id, name, base_price="10.00", variants=(), is_active=True):
    return service.create_product(
        ProductCreate(
            name=name,
            description="Product description for reports",
            category=category_id,
            base_price=Decimal(base_price),
            variants=[
                {"name": "Size", "value": value, "price": "10.00", "stock": stock, "sku": sku}
                for value, stock, sku in variants
            ],
            is_active=is_active,
        )
    )


@pytest.fixture
def service(db_session):
    return build_catalog_service(db_session)


def test_low_stock_report_reads_from_store(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    _make_product(service, shirts.id, "Tee", variants=[("S", 5, "TEE-S"), ("L", 15, "TEE-L")])
    _make_product(service, shirts.id, "Polo", variants=[("M", 50, "POLO-M")])
    _make_product(service, shirts.id, "Blank")

    report = service.low_stock_report(10)

    assert report.total_low_stock_items == 2
    assert [(i.product_name, i.variant_name) for i in report.items] == [
        ("Tee", "Size: S"),
        ("Blank", "Default"),
    ]
    assert all(i.category == "Shirts" for i in report.items)


def test_low_stock_report_uses_configured_default(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    _make_product(service, shirts.id, "Tee", variants=[("S", 10, "TEE-S"), ("L", 11, "TEE-L")])

    report = service.low_stock_report()

    assert report.threshold == 10
    assert [i.sku for i in report.items] == ["TEE-S"]


def test_low_stock_report_excludes_inactive_products(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    _make_product(service, shirts.id, "Hidden", variants=[("S", 0, "HID-S")], is_active=False)

    assert service.low_stock_report(10).items == []


def test_inventory_summary_over_store(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    books = service.create_category(CategoryCreate(name="Books"))
    _make_product(service, shirts.id, "Tee", variants=[("S", 0, "TEE-S"), ("L", 5, "TEE-L")])
    _make_product(service, books.id, "Novel")

    summary = service.inventory_summary()

    assert summary.total_products == 2
    assert summary.total_variants == 2
    assert summary.total_stock == 5
    assert summary.out_of_stock_items == 2
    assert summary.category_summary["Shirts"].variants == 2
    assert summary.category_summary["Books"].products == 1


def test_inventory_summary_of_empty_store(service):
    summary = service.inventory_summary()

    assert summary.total_products == 0
    assert summary.category_summary == {}


def test_products_by_category_averages_base_price(service):
    books = service.create_category(CategoryCreate(name="Books"))
    _make_product(service, books.id, "Novel", base_price="10.00")
    _make_product(service, books.id, "Atlas", base_price="20.00", variants=[("HB", 1, "ATL-HB")])

    rows = service.products_by_category()

    assert len(rows) == 1
    row = rows[0]
    assert row.category_id == books.id
    assert row.category_name == "Books"
    assert row.product_count == 2
    assert row.average_price == 15
    assert row.total_variants == 1


def test_products_by_category_orders_by_count_then_first_use(service):
    toys = service.create_category(CategoryCreate(name="Toys"))
    books = service.create_category(CategoryCreate(name="Books"))
    games = service.create_category(CategoryCreate(name="Games"))
    _make_product(service, toys.id, "Yo-yo")
    _make_product(service, books.id, "Novel")
    _make_product(service, books.id, "Atlas")
    _make_product(service, games.id, "Chess")

    rows = service.products_by_category()

    assert [row.category_name for row in rows] == ["Books", "Toys", "Games"]
    assert [row.product_count for row in rows] == [2, 1, 1]


def test_products_by_category_skips_inactive_and_empty_categories(service):
    books = service.create_category(CategoryCreate(name="Books"))
    service.create_category(CategoryCreate(name="Empty"))
    _make_product(service, books.id, "Novel", base_price="10.00")
    _make_product(service, books.id, "Draft", base_price="90.00", is_active=False)

    rows = service.products_by_category()

    assert [row.category_name for row in rows] == ["Books"]
    assert rows[0].product_count == 1
    assert rows[0].average_price == 10


def test_products_by_category_counts_every_variant(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    _make_product(service, shirts.id, "Tee", variants=[("S", 1, "T-S"), ("M", 1, "T-M")])
    _make_product(service, shirts.id, "Polo", variants=[("L", 1, "P-L")])

    rows = service.products_by_category()

    assert rows[0].total_variants == 3


@pytest.fixture
def missing_tables(db_session):
    Base.metadata.drop_all(bind=db_session.get_bind())
    yield db_session
    db_session.rollback()


def test_rollup_store_failure_surfaces_as_store_read_error(missing_tables):
    reports = InventoryReportService(missing_tables, products=ProductService(missing_tables))

    with pytest.raises(StoreReadError) as exc_info:
        reports.products_by_category()

    assert exc_info.value.code == "SYS400"
    assert exc_info.value.status_code == 500
    assert exc_info.value.details == {"operation": "products_by_category"}
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_low_stock_store_failure_is_not_reported_as_empty(missing_tables):
    reports = InventoryReportService(missing_tables)

    with pytest.raises(StoreReadError) as exc_info:
        reports.low_stock_report(10)

    assert exc_info.value.details == {"operation": "find_active_products"}


def test_reports_are_repeatable_over_an_unchanged_store(service):
    shirts = service.create_category(CategoryCreate(name="Shirts"))
    books = service.create_category(CategoryCreate(name="Books"))
    _make_product(service, shirts.id, "Tee", variants=[("S", 0, "TEE-S"), ("L", 5, "TEE-L")])
    _make_product(service, books.id, "Novel", base_price="12.00")
    _make_product(service, books.id, "Atlas", base_price="19.99", variants=[("HB", 3, "ATL-HB")])

    assert service.inventory_summary() == service.inventory_summary()
    assert service.products_by_category() == service.products_by_category()
    assert service.low_stock_report(10) == service.low_stock_report(10)

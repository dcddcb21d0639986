import io

import pandas as pd
import pytest

from services.items_report_service import (
    build_items_report_excel,
    fetch_item_report,
    fetch_route_names,
    filter_item_rows,
    items_report_filename,
    sort_item_rows,
)
from tests.conftest import FakeResponse

ROWS = [
    {"route": "North", "product_name": "Toned Milk 500ML", "total_quantity": 120},
    {"route": "South", "product_name": "Curd 400GM", "total_quantity": 40},
    {"route": "North", "product_name": "Paneer 200GM", "total_quantity": 15},
    {"route": "A Very Long Route Name Beyond Excel Limits", "product_name": "Ghee 1KG", "total_quantity": 3},
]


def test_filter_by_route_and_search():
    assert len(filter_item_rows(ROWS)) == 4
    assert [r["product_name"] for r in filter_item_rows(ROWS, ["North"])] == ["Toned Milk 500ML", "Paneer 200GM"]
    assert [r["route"] for r in filter_item_rows(ROWS, search="SOUTH")] == ["South"]
    assert [r["product_name"] for r in filter_item_rows(ROWS, ["North"], search="paneer")] == ["Paneer 200GM"]


def test_sort_rows():
    asc = sort_item_rows(ROWS, "total_quantity")
    assert [r["total_quantity"] for r in asc] == [3, 15, 40, 120]

    desc = sort_item_rows(ROWS + [{"route": "X", "product_name": "Y"}], "total_quantity", descending=True)
    assert [r.get("total_quantity") for r in desc] == [120, 40, 15, 3, None]


def test_filename():
    assert items_report_filename("2024-05-01", "2024-05-02") == "item_report_2024-05-01_to_2024-05-02.xlsx"
    assert items_report_filename(None, "") == "item_report_start_to_end.xlsx"


def test_excel_without_routes_has_single_sheet():
    sheets = pd.read_excel(io.BytesIO(build_items_report_excel(ROWS)), sheet_name=None)

    assert list(sheets) == ["AllRoutes"]
    assert list(sheets["AllRoutes"].columns) == ["Route", "Product Name", "Total Quantity"]
    assert len(sheets["AllRoutes"]) == 4


def test_excel_with_routes_has_sheet_per_route():
    routes = ["North", "Empty Route", "A Very Long Route Name Beyond Excel Limits"]
    rows = filter_item_rows(ROWS, routes)

    sheets = pd.read_excel(io.BytesIO(build_items_report_excel(rows, routes)), sheet_name=None)

    assert list(sheets) == ["North", "A Very Long Route Name Beyond E", "AllRoutes"]
    assert len(sheets["North"]) == 2
    assert len(sheets["AllRoutes"]) == 3


def test_excel_sheet_names_drop_invalid_characters():
    rows = [{"route": "Route 1/2", "product_name": "Toned Milk 500ML", "total_quantity": 10}]

    sheets = pd.read_excel(io.BytesIO(build_items_report_excel(rows, ["Route 1/2"])), sheet_name=None)

    assert list(sheets) == ["Route 12", "AllRoutes"]
    assert sheets["Route 12"].iloc[0]["Route"] == "Route 1/2"


def test_excel_routes_sharing_a_long_prefix_keep_all_rows():
    north, south = "A" * 31 + "-north", "A" * 31 + "-south"
    rows = [
        {"route": north, "product_name": "Toned Milk 500ML", "total_quantity": 10},
        {"route": north, "product_name": "Curd 400GM", "total_quantity": 4},
        {"route": south, "product_name": "Paneer 200GM", "total_quantity": 2},
    ]

    sheets = pd.read_excel(io.BytesIO(build_items_report_excel(rows, [north, south])), sheet_name=None)

    assert list(sheets) == ["A" * 31, "A" * 29 + "~2", "AllRoutes"]
    assert list(sheets["A" * 31]["Route"]) == [north, north]
    assert list(sheets["A" * 29 + "~2"]["Route"]) == [south]
    assert len(sheets["AllRoutes"]) == 3


def test_excel_route_named_like_all_routes_sheet_is_kept_apart():
    rows = [
        {"route": "allroutes", "product_name": "Ghee 1KG", "total_quantity": 1},
        {"route": "North", "product_name": "Curd 400GM", "total_quantity": 6},
    ]

    sheets = pd.read_excel(io.BytesIO(build_items_report_excel(rows, ["allroutes", "North"])), sheet_name=None)

    assert list(sheets) == ["allroutes~2", "North", "AllRoutes"]
    assert len(sheets["allroutes~2"]) == 1
    assert len(sheets["AllRoutes"]) == 2


def test_excel_requires_rows():
    with pytest.raises(ValueError):
        build_items_report_excel([])


def test_fetch_item_report_handles_failure(make_client):
    client, _ = make_client({"/item_report": FakeResponse(None, status_code=500)})
    assert fetch_item_report(client, "2024-05-01", "2024-05-01") == (False, "No item report data", [])


def test_fetch_route_names(make_client):
    client, _ = make_client({
        "/routes_crud": FakeResponse([{"id": 2, "name": "South"}, {"id": 1, "name": "North"}, {"id": 3}]),
    })
    assert fetch_route_names(client) == (True, "Fetched", ["North", "South"])

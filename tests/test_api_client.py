import pytest
import requests

from api_client import ApiError
from tests.conftest import FakeResponse


def test_bearer_token_header(make_client):
    _, session = make_client({}, token="abc123")
    assert session.headers["Authorization"] == "Bearer abc123"


def test_no_token_no_header(make_client):
    _, session = make_client({})
    assert "Authorization" not in session.headers


def test_am_order_type_passes_through(make_client):
    client, session = make_client({
        "/brand_report": FakeResponse({"success": True, "data": {"orders": []}}),
    })

    assert client.get_brand_report("2024-05-01", "2024-05-01", "AM", "Heritage") == {"orders": []}
    assert session.calls[0][1]["order_type"] == "AM"


def test_retries_network_errors_then_succeeds(make_client):
    client, session = make_client({
        "/fetch_unique_brands": [
            requests.ConnectionError("reset"),
            requests.Timeout("slow"),
            FakeResponse({"success": True, "data": {"brands": ["Jersey"]}}),
        ],
    })

    assert client.get_unique_brands() == ["Jersey"]
    assert len(session.calls) == 3


def test_gives_up_after_max_retries(make_client):
    client, session = make_client({
        "/fetch_unique_brands": [requests.ConnectionError("down")] * 3,
    })

    with pytest.raises(ApiError):
        client.get_unique_brands()
    assert len(session.calls) == 3


def test_http_error_is_not_retried(make_client):
    client, session = make_client({"/routes_crud": FakeResponse(None, status_code=404)})

    with pytest.raises(ApiError):
        client.get_routes()
    assert len(session.calls) == 1


def test_routes_sorted_by_id(make_client):
    client, _ = make_client({
        "/routes_crud": FakeResponse([{"id": 3, "name": "C"}, {"id": 1, "name": "A"}, {"id": 2, "name": "B"}]),
    })

    assert [r["name"] for r in client.get_routes()] == ["A", "B", "C"]


def test_item_report_joins_routes(make_client):
    client, session = make_client({
        "/item_report": FakeResponse({"itemReportData": [{"route": "R1", "product_name": "Curd 1KG", "total_quantity": 4}]}),
    })

    rows = client.get_item_report("2024-05-01", "2024-05-02", ["R1", "R2"])

    assert rows == [{"route": "R1", "product_name": "Curd 1KG", "total_quantity": 4}]
    assert session.calls[0][1] == {"from_date": "2024-05-01", "to_date": "2024-05-02", "route": "R1,R2"}


def test_item_report_without_routes(make_client):
    client, session = make_client({"/item_report": FakeResponse({})})

    assert client.get_item_report("2024-05-01", "2024-05-02") == []
    assert "route" not in session.calls[0][1]

from streamlit.testing.v1 import AppTest

from tests.conftest import FakeResponse

BRANDS = FakeResponse({"success": True, "data": {"brands": ["Heritage"]}})


def _app(path, client):
    at = AppTest.from_file(path, default_timeout=30)
    at.session_state["api_client"] = client
    return at


def _calls(session, path):
    return [c for c in session.calls if c[0] == path]


def test_brand_list_is_fetched_again_after_a_failure(make_client):
    client, session = make_client({
        "/fetch_unique_brands": [FakeResponse({}, status_code=500), BRANDS],
        "/brand_report": FakeResponse({"success": True, "data": {"orders": []}}),
    })
    at = _app("../Brand_Wise_Report.py", client)

    at.run()

    assert [e.value for e in at.error] == ["Failed to fetch brands"]
    assert "brands" not in at.session_state

    at.run()

    assert len(_calls(session, "/fetch_unique_brands")) == 2
    assert at.session_state["brands"] == ["Heritage"]
    assert not at.error


def test_orders_without_products_show_one_notice(make_client):
    client, _ = make_client({
        "/fetch_unique_brands": BRANDS,
        "/brand_report": FakeResponse({"success": True, "data": {"orders": [{"products": []}]}}),
    })
    at = _app("../Brand_Wise_Report.py", client)

    at.run()

    assert not at.exception
    assert [e.value for e in at.info] == ["Found 1 AM orders but no products from Heritage brand"]


def test_items_report_fetches_only_when_filters_change(make_client):
    client, session = make_client({
        "/routes_crud": FakeResponse([{"id": 1, "name": "North"}, {"id": 2, "name": "Route 1/2"}]),
        "/item_report": FakeResponse({"itemReportData": [
            {"route": "North", "product_name": "Toned Milk 500ML", "total_quantity": 120},
            {"route": "Route 1/2", "product_name": "Curd 400GM", "total_quantity": 40},
        ]}),
    })
    at = _app("../pages/1_Items_Report.py", client)

    at.run()
    at.text_input(key="items_search").input("curd").run()

    assert not at.exception
    assert len(_calls(session, "/item_report")) == 1

    at.multiselect(key="items_routes").select("Route 1/2").run()

    assert not at.exception
    assert not at.error
    calls = _calls(session, "/item_report")
    assert len(calls) == 2
    assert calls[-1][1]["route"] == "Route 1/2"

from services.request_tracker import RequestTracker


def test_latest_request_is_accepted():
    tracker = RequestTracker()
    token = tracker.begin({"brand": "Heritage"})
    assert tracker.accept(token)


def test_stale_response_is_dropped():
    tracker = RequestTracker()
    first = tracker.begin({"brand": "Heritage", "order_type": "AM"})
    second = tracker.begin({"brand": "Heritage", "order_type": "Evening"})

    # first response arrives after the second request started
    assert not tracker.accept(first)
    assert tracker.accept(second)


def test_needs_refresh_only_when_filters_change():
    tracker = RequestTracker()
    filters = {"from_date": "2024-05-01", "to_date": "2024-05-01", "order_type": "AM", "brand": "Heritage"}

    assert tracker.needs_refresh(filters)
    tracker.begin(filters)
    assert not tracker.needs_refresh(dict(reversed(list(filters.items()))))
    assert tracker.needs_refresh({**filters, "brand": "Jersey"})

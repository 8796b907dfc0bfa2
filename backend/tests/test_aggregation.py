from clerkdesk.services.aggregation import (
    aggregate_societies,
    count_by_status,
    matches_search,
    total_amount,
)
from clerkdesk.services.list_view import patch_record, prepend_record, remove_record


def test_societies_are_trimmed_counted_and_sorted():
    rows = [
        {"society": "Acme Society"},
        {"society": "Acme Society "},
        {"society": "Acme society"},
        {"society": "  beta Co-op"},
        {"society": ""},
        {"society": "   "},
        {"society": None},
        {},
    ]

    stats = aggregate_societies(rows)

    assert stats == [
        {"name": "Acme society", "count": 1},
        {"name": "Acme Society", "count": 2},
        {"name": "beta Co-op", "count": 1},
    ]
    # Total across groups equals the rows with a usable society
    assert sum(s["count"] for s in stats) == 4


def test_societies_empty_input():
    assert aggregate_societies([]) == []


def test_count_by_status_skips_missing_status():
    rows = [{"status": "Open"}, {"status": "Open"}, {"status": "Closed"}, {"status": None}]
    assert count_by_status(rows) == {"Open": 2, "Closed": 1}


def test_search_matches_text_case_insensitively_and_numbers_by_digits():
    record = {"case_name": "WP(C)", "name": "Ravi Kumar", "case_no": 1024}

    assert matches_search(record, "ravi", ("case_name", "name"), ("case_no",))
    assert matches_search(record, "wp(c)", ("case_name", "name"), ("case_no",))
    assert matches_search(record, "102", ("case_name", "name"), ("case_no",))
    assert not matches_search(record, "9999", ("case_name", "name"), ("case_no",))
    assert matches_search(record, "", ("case_name",))


def test_total_amount_ignores_unusable_values():
    assert total_amount([{"amount": 1500}, {"amount": "250.5"}, {"amount": None}, {"amount": "n/a"}]) == 1750.5


def test_reducers_touch_only_the_addressed_record():
    items = [
        {"id": 1, "status": "Open", "admin_response": None},
        {"id": 2, "status": "Open", "admin_response": "noted"},
    ]

    patched = patch_record(items, "2", {"status": "Resolved"})
    assert patched[1] == {"id": 2, "status": "Resolved", "admin_response": "noted"}
    assert patched[0] is items[0]
    assert items[1]["status"] == "Open"

    assert remove_record(items, 1) == [items[1]]
    assert remove_record(items, 99) == items
    assert prepend_record(items, {"id": 3})[0] == {"id": 3}

import pytest

PENDING = [
    {"id": "u1", "email": "one@example.com", "full_name": "One", "status": "application_submitted"},
    {"id": "u2", "email": "two@example.com", "full_name": "Two", "status": "application_submitted"},
    {"id": "u3", "email": "three@example.com", "full_name": "Three", "status": "application_submitted"},
]

TICKETS = [
    {"id": 1, "user_email": "a@example.com", "subject": "Export", "status": "Resolved", "admin_response": "Shipped"},
    {"id": 2, "user_email": "b@example.com", "subject": "Crash", "status": "Open", "admin_response": None},
]


@pytest.fixture
def admin_client(client):
    client.cookies.set("admin_session", "true")
    return client


@pytest.mark.parametrize("action, new_status", [("approve", "approved"), ("reject", "inactive")])
def test_decision_issues_one_status_update_and_drops_only_that_request(admin_client, hosted, action, new_status):
    hosted.rpc_results["get_pending_requests"] = PENDING
    hosted.rpc_results["update_clerk_status"] = None

    response = admin_client.post(f"/api/v1/admin/requests/u2/{action}")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == ["u1", "u3"]
    updates = hosted.rpc_calls("update_clerk_status")
    assert len(updates) == 1
    assert updates[0].body == {"user_id": "u2", "new_status": new_status}
    # No reload after the write
    assert len(hosted.rpc_calls("get_pending_requests")) == 1


def test_failed_decision_reports_action(admin_client, hosted):
    hosted.rpc_results["get_pending_requests"] = PENDING
    hosted.fail_rpc("update_clerk_status")

    response = admin_client.post("/api/v1/admin/requests/u1/reject")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to reject user."


def test_active_clerks_list(admin_client, hosted):
    hosted.rpc_results["get_active_clerks"] = [{"id": "u9", "status": "active"}]

    response = admin_client.get("/api/v1/admin/clerks")

    assert response.json()["items"][0]["id"] == "u9"


def test_pending_list_read_failure_is_inline(admin_client, hosted):
    hosted.fail_rpc("get_pending_requests", message="permission denied")

    response = admin_client.get("/api/v1/admin/requests")

    assert response.status_code == 200
    assert response.json() == {"items": [], "error": "permission denied"}


def test_ticket_status_change_patches_status_only(admin_client, hosted):
    hosted.rpc_results["get_all_support_tickets"] = TICKETS
    hosted.rpc_results["update_support_status"] = None

    # Backward move from Resolved is allowed
    response = admin_client.patch("/api/v1/admin/tickets/1/status", json={"status": "Open"})

    assert response.status_code == 200
    items = response.json()["items"]
    assert items[0]["status"] == "Open"
    assert items[0]["admin_response"] == "Shipped"
    assert (items[1]["status"], items[1]["admin_response"]) == ("Open", None)
    (call,) = hosted.rpc_calls("update_support_status")
    assert call.body == {"ticket_id": 1, "new_status": "Open"}


def test_ticket_status_rejects_unknown_value(admin_client, hosted):
    response = admin_client.patch("/api/v1/admin/tickets/1/status", json={"status": "Escalated"})

    assert response.status_code == 422
    assert hosted.rpc_calls("update_support_status") == []


def test_ticket_status_failure(admin_client, hosted):
    hosted.rpc_results["get_all_support_tickets"] = TICKETS
    hosted.fail_rpc("update_support_status")

    response = admin_client.patch("/api/v1/admin/tickets/2/status", json={"status": "Closed"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to update status"


def test_reply_patches_admin_response_only(admin_client, hosted):
    hosted.rpc_results["get_all_support_tickets"] = TICKETS
    hosted.rpc_results["admin_reply_to_ticket"] = None

    response = admin_client.post("/api/v1/admin/tickets/2/reply", json={"response_text": "Looking into it"})

    assert response.status_code == 200
    ticket = response.json()["items"][1]
    assert ticket["admin_response"] == "Looking into it"
    assert ticket["status"] == "Open"
    (call,) = hosted.rpc_calls("admin_reply_to_ticket")
    assert call.body == {"ticket_id": 2, "response_text": "Looking into it"}
    assert hosted.rpc_calls("update_support_status") == []


def test_blank_reply_is_refused_before_any_call(admin_client, hosted):
    hosted.rpc_results["get_all_support_tickets"] = TICKETS

    response = admin_client.post("/api/v1/admin/tickets/2/reply", json={"response_text": "   "})

    assert response.status_code == 400
    assert hosted.rpc_calls("admin_reply_to_ticket") == []


def test_reply_failure(admin_client, hosted):
    hosted.rpc_results["get_all_support_tickets"] = TICKETS
    hosted.fail_rpc("admin_reply_to_ticket")

    response = admin_client.post("/api/v1/admin/tickets/2/reply", json={"response_text": "Hi"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to send reply."

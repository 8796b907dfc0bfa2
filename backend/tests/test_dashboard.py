from datetime import date, timedelta


def seed_dashboard(hosted):
    today = date.today()
    hosted.seed("cases", [
        {"id": 1, "status": "Open", "society": "Acme"},
        {"id": 2, "status": "In Progress", "society": "Acme "},
        {"id": 3, "status": "Active", "society": "Beta"},
        {"id": 4, "status": "Closed", "society": None},
        {"id": 5, "status": "Archived", "society": ""},
        {"id": 6, "status": "Disposed", "society": "Gamma"},
    ])
    hosted.seed("interim_orders", [
        {"id": 1, "next_date": (today + timedelta(days=3)).isoformat()},
        {"id": 2, "next_date": (today + timedelta(days=14)).isoformat()},
        {"id": 3, "next_date": (today + timedelta(days=15)).isoformat()},
        {"id": 4, "next_date": (today - timedelta(days=1)).isoformat()},
        {"id": 5, "next_date": None},
    ])
    hosted.seed("judgments", [{"id": n} for n in range(4)])


def test_dashboard_metrics(clerk_client, hosted):
    seed_dashboard(hosted)

    response = clerk_client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    assert response.json() == {
        "active_cases": "3",
        "societies": "3",
        "upcoming_hearings": "2",
        "total_judgments": "4",
    }
    heads = [c for c in hosted.calls if c.method == "HEAD"]
    assert len(heads) == 3


def test_each_metric_fails_on_its_own(clerk_client, hosted):
    seed_dashboard(hosted)
    hosted.fail("judgments")
    hosted.fail("cases", "GET")

    body = clerk_client.get("/api/v1/dashboard/stats").json()

    assert body == {
        "active_cases": "3",
        "societies": "0",
        "upcoming_hearings": "2",
        "total_judgments": "0",
    }


def test_dashboard_all_failing_reads_zero(clerk_client, hosted):
    for table in ("cases", "interim_orders", "judgments"):
        hosted.fail(table)

    body = clerk_client.get("/api/v1/dashboard/stats").json()

    assert set(body.values()) == {"0"}

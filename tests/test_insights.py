from datetime import date

from ecoquest.services.insights import (
    aggregate_by_category,
    aggregate_by_date,
    period_params,
)

from conftest import USER_ID

ACTIVITY_ROWS = [
    {
        "activity_date": "2025-01-02",
        "carbon_amount": 1.5,
        "activity_categories": {"id": 1, "name": "Transportation"},
    },
    {
        "activity_date": "2025-01-01",
        "carbon_amount": 2.25,
        "activity_categories": {"id": 2, "name": "Food"},
    },
    {
        "activity_date": "2025-01-02",
        "carbon_amount": 0.5,
        "activity_categories": {"id": 1, "name": "Transportation"},
    },
    {
        "activity_date": "2025-02-10",
        "carbon_amount": 4.0,
        "activity_categories": {"id": 2, "name": "Food"},
    },
]

PROFILE = {
    "id": USER_ID,
    "username": "ecofan",
    "avatar_url": None,
    "total_carbon_saved": 12.5,
    "total_points": 150,
}


def test_period_params():
    week = period_params("week", date(2025, 3, 10))
    assert (week.start_date, week.end_date, week.format) == (date(2025, 3, 3), date(2025, 3, 10), "day")

    month = period_params("month", date(2025, 3, 31))
    assert month.start_date == date(2025, 2, 28)
    assert month.format == "day"

    year = period_params("year", date(2024, 2, 29))
    assert year.start_date == date(2023, 2, 28)
    assert year.format == "month"

    fallback = period_params("decade", date(2025, 1, 15))
    assert fallback.range == "month"
    assert fallback.start_date == date(2024, 12, 15)


def test_aggregate_by_date_per_day_and_month():
    daily = aggregate_by_date(ACTIVITY_ROWS, "day")
    assert [(p.date, p.carbon) for p in daily] == [
        ("2025-01-01", 2.25),
        ("2025-01-02", 2.0),
        ("2025-02-10", 4.0),
    ]

    monthly = aggregate_by_date(ACTIVITY_ROWS, "month")
    assert [(p.date, p.carbon) for p in monthly] == [("2025-01", 4.25), ("2025-02", 4.0)]


def test_aggregate_by_category_keeps_first_seen_order():
    totals = aggregate_by_category(ACTIVITY_ROWS)
    assert [(t.category_id, t.category_name, t.total_carbon) for t in totals] == [
        (1, "Transportation", 2.0),
        (2, "Food", 6.25),
    ]


def test_aggregate_by_category_without_join():
    totals = aggregate_by_category([{"category_id": 5, "carbon_amount": 1}])
    assert totals[0].category_name == "Uncategorized"
    assert totals[0].category_id == 5


def test_insights_route(client, fake_supabase, auth_headers):
    fake_supabase.rows["profiles"] = PROFILE
    fake_supabase.tables["carbon_activities"] = ACTIVITY_ROWS
    fake_supabase.tables["carbon_tips"] = [
        {"id": 1, "title": "Cycle to work", "points_potential": 40, "category": "Transportation"},
    ]

    r = client.get("/insights", headers=auth_headers, params={"range": "year"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["range"] == "year"
    assert data["profile"]["username"] == "ecofan"
    assert [p["date"] for p in data["trends"]] == ["2025-01", "2025-02"]
    assert data["footprint_by_category"][1]["total_carbon"] == 6.25
    assert data["recommendations"][0]["title"] == "Cycle to work"

    (tips,) = fake_supabase.calls_to("select", "carbon_tips")
    assert tips[3] == "points_potential.desc"
    assert tips[4] == 5


def test_insights_rejects_unknown_range(client, fake_supabase, auth_headers):
    r = client.get("/insights", headers=auth_headers, params={"range": "decade"})
    assert r.status_code == 422


def test_insights_missing_profile(client, fake_supabase, auth_headers):
    fake_supabase.rows["profiles"] = None
    r = client.get("/insights", headers=auth_headers)
    assert r.status_code == 404


def test_dashboard_uses_stored_procedure(client, fake_supabase, auth_headers):
    fake_supabase.rows["profiles"] = PROFILE
    fake_supabase.rpc_results["get_carbon_by_category"] = [
        {"category_id": 1, "category_name": "Transportation", "total_carbon": 9.5},
    ]
    fake_supabase.tables["carbon_activities"] = ACTIVITY_ROWS

    r = client.get("/dashboard", headers=auth_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["carbon_by_category"] == [
        {"category_id": 1, "category_name": "Transportation", "total_carbon": 9.5}
    ]
    assert len(data["recent_activities"]) == 4
    (recent,) = fake_supabase.calls_to("select", "carbon_activities")
    assert recent[4] == 5


def test_dashboard_falls_back_to_manual_aggregation(client, fake_supabase, auth_headers):
    fake_supabase.rows["profiles"] = PROFILE
    fake_supabase.rpc_failures.add("get_carbon_by_category")
    fake_supabase.tables["carbon_activities"] = ACTIVITY_ROWS

    r = client.get("/dashboard", headers=auth_headers)
    assert r.status_code == 200, r.text
    totals = r.json()["carbon_by_category"]
    assert [t["category_name"] for t in totals] == ["Transportation", "Food"]
    assert totals[0]["total_carbon"] == 2.0

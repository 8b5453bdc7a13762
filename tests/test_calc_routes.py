def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_calc_activity_carpool(client):
    r = client.post(
        "/calc/activity",
        json={
            "category": "Transportation",
            "activityType": "commute",
            "details": {"mode": "car", "distance": "100", "passengers": "4"},
        },
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["carbonAmount"] == 4.8
    assert data["pointsEarned"] == 25
    assert data["defaultedFields"] == []
    assert data["details"] == {
        "category": "Transportation",
        "mode": "car",
        "distance": 100.0,
        "passengers": 4,
    }


def test_calc_activity_reports_defaulted_fields(client):
    r = client.post(
        "/calc/activity",
        json={"category": "Food", "details": {"meal_type": "keto", "servings": "2", "organic": "on"}},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["details"]["meal_type"] == "meat_low"
    assert data["details"]["organic"] is True
    assert data["defaultedFields"] == ["meal_type"]
    # 3.5 * 2 * 0.95
    assert data["carbonAmount"] == 6.65
    assert data["pointsEarned"] == 15


def test_calc_activity_custom_category(client):
    r = client.post("/calc/activity", json={"category": "Composting", "details": {"amount": 2}})
    assert r.status_code == 200
    data = r.json()
    assert data["category"] == "custom"
    assert data["carbonAmount"] == 2.0
    assert data["pointsEarned"] == 5


def test_calc_activity_requires_category(client):
    r = client.post("/calc/activity", json={"details": {}})
    assert r.status_code == 422


def test_form_fields(client):
    r = client.get("/calc/form_fields/Home Energy")
    assert r.status_code == 200
    fields = r.json()
    assert [f["name"] for f in fields] == ["energy_type", "amount", "green_energy"]
    assert [o["value"] for o in fields[0]["options"]] == [
        "electricity",
        "natural_gas",
        "heating_oil",
        "renewable",
    ]

    custom = client.get("/calc/form_fields/Anything").json()
    assert [f["name"] for f in custom] == ["description", "amount"]


def test_calc_activity_huge_distance(client):
    r = client.post(
        "/calc/activity",
        json={"category": "Transportation", "details": {"mode": "bike", "distance": 1e308}},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["carbonAmount"] == 0.0
    assert data["pointsEarned"] == 1
    assert data["defaultedFields"] == ["distance", "passengers"]

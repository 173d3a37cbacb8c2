import pytest

DAY = "2030-03-14"
LOCATION = {"address": "1 Main St", "city": "Springfield", "state": "IL", "zip_code": "62701"}


def book(client, headers, lead_id, when=f"{DAY}T10:00:00Z", **extra):
    r = client.post(
        "/api/appointments",
        json={
            "lead_id": lead_id,
            "scheduled_date": when,
            "service_type": "hvac",
            "location": LOCATION,
            **extra,
        },
        headers=headers,
    )
    return r


def test_booking_qualifies_lead(client, auth_headers, provider, make_lead):
    lead = make_lead()
    r = book(client, auth_headers, lead["id"], estimated_cost=250)
    assert r.status_code == 201, r.text
    appointment = r.json()["appointment"]
    assert appointment["status"] == "scheduled"
    assert appointment["duration"] == 60
    assert appointment["location"]["city"] == "Springfield"
    assert appointment["provider_id"] == provider["provider"]["id"]

    stored = client.get(f"/api/leads/{lead['id']}", headers=auth_headers).json()
    assert stored["status"] == "qualified"
    assert stored["appointment_booked"] is True
    assert stored["assigned_to"] == provider["provider"]["id"]
    assert 0 <= stored["score"] <= 10


def test_booking_adds_instant_booking_point(client, auth_headers, make_lead, no_behavior_signals):
    lead = make_lead(service_type="hvac", source="google")
    assert lead["score"] == 2
    assert book(client, auth_headers, lead["id"]).status_code == 201

    stored = client.get(f"/api/leads/{lead['id']}", headers=auth_headers).json()
    assert stored["score"] == 3
    assert stored["category"] == "cold"


def test_booking_unknown_lead(client, auth_headers):
    r = book(client, auth_headers, "6f1c1f7e-0000-4000-8000-000000000000")
    assert r.status_code == 404


def test_booking_duration_bounds(client, auth_headers, make_lead):
    lead = make_lead()
    assert book(client, auth_headers, lead["id"], duration=5).status_code == 422
    assert book(client, auth_headers, lead["id"], duration=600).status_code == 422


def test_list_by_date_only_own(client, auth_headers, make_lead, register_provider):
    lead = make_lead()
    book(client, auth_headers, lead["id"], when=f"{DAY}T15:00:00Z")
    book(client, auth_headers, lead["id"], when=f"{DAY}T09:00:00Z")
    book(client, auth_headers, lead["id"], when="2030-03-15T09:00:00Z")

    other = register_provider(email="rival@example.com")
    other_headers = {"Authorization": f"Bearer {other['token']}"}
    book(client, other_headers, lead["id"], when=f"{DAY}T11:00:00Z")

    r = client.get("/api/appointments", params={"date": DAY}, headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total"] == 2
    times = [a["scheduled_date"] for a in body["appointments"]]
    assert times == sorted(times)
    assert times[0].startswith(f"{DAY}T09:00:00")


def test_available_slots_skip_booked_hours(client, auth_headers, make_lead):
    lead = make_lead()
    book(client, auth_headers, lead["id"], when=f"{DAY}T10:00:00Z")
    cancelled = book(client, auth_headers, lead["id"], when=f"{DAY}T13:00:00Z").json()["appointment"]
    client.patch(
        f"/api/appointments/{cancelled['id']}/status", json={"status": "cancelled"}, headers=auth_headers
    )

    r = client.get("/api/appointments/slots/available", params={"date": DAY}, headers=auth_headers)
    assert r.status_code == 200
    displays = [slot["display"] for slot in r.json()["available_slots"]]
    assert "10:00 AM" not in displays
    assert "1:00 PM" in displays
    assert len(displays) == 7


def test_available_slots_requires_date(client, auth_headers):
    r = client.get("/api/appointments/slots/available", headers=auth_headers)
    assert r.status_code == 422


def test_get_appointment_scoped_to_provider(client, auth_headers, make_lead, register_provider):
    lead = make_lead()
    appointment = book(client, auth_headers, lead["id"]).json()["appointment"]
    assert client.get(f"/api/appointments/{appointment['id']}", headers=auth_headers).status_code == 200

    other = register_provider(email="rival@example.com")
    r = client.get(
        f"/api/appointments/{appointment['id']}",
        headers={"Authorization": f"Bearer {other['token']}"},
    )
    assert r.status_code == 404


def test_completion_converts_lead(client, auth_headers, make_lead):
    lead = make_lead()
    appointment = book(client, auth_headers, lead["id"]).json()["appointment"]
    r = client.patch(
        f"/api/appointments/{appointment['id']}/status",
        json={"status": "completed", "actual_cost": 310.5, "completion_notes": "Replaced igniter"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["actual_cost"] == 310.5
    assert r.json()["completion_notes"] == "Replaced igniter"

    stored = client.get(f"/api/leads/{lead['id']}", headers=auth_headers).json()
    assert stored["status"] == "converted"


def test_no_show_closes_lead(client, auth_headers, make_lead):
    lead = make_lead()
    appointment = book(client, auth_headers, lead["id"]).json()["appointment"]
    client.patch(
        f"/api/appointments/{appointment['id']}/status", json={"status": "no_show"}, headers=auth_headers
    )
    stored = client.get(f"/api/leads/{lead['id']}", headers=auth_headers).json()
    assert stored["status"] == "closed"


def test_confirming_leaves_lead_status(client, auth_headers, make_lead):
    lead = make_lead()
    appointment = book(client, auth_headers, lead["id"]).json()["appointment"]
    client.patch(
        f"/api/appointments/{appointment['id']}/status", json={"status": "confirmed"}, headers=auth_headers
    )
    stored = client.get(f"/api/leads/{lead['id']}", headers=auth_headers).json()
    assert stored["status"] == "qualified"


def test_customer_history_and_review(
    client, auth_headers, provider, make_lead, register_customer
):
    customer = register_customer(email="jane@example.com")
    customer_headers = {"Authorization": f"Bearer {customer['token']}"}
    lead = make_lead(email="jane@example.com")
    appointment = book(client, auth_headers, lead["id"]).json()["appointment"]
    assert appointment["customer_id"] == customer["customer"]["id"]

    mine = client.get("/api/appointments/customer/mine", headers=customer_headers)
    assert mine.status_code == 200
    assert [a["id"] for a in mine.json()] == [appointment["id"]]

    url = f"/api/appointments/{appointment['id']}/review"
    early = client.post(url, json={"rating": 5}, headers=customer_headers)
    assert early.status_code == 400

    client.patch(
        f"/api/appointments/{appointment['id']}/status", json={"status": "completed"}, headers=auth_headers
    )
    r = client.post(url, json={"rating": 4, "review": "Quick and tidy"}, headers=customer_headers)
    assert r.status_code == 200
    assert r.json()["customer_rating"] == 4

    again = client.post(url, json={"rating": 1}, headers=customer_headers)
    assert again.status_code == 400

    profile = client.get("/api/auth/profile", headers=auth_headers).json()["user"]
    assert profile["rating_average"] == 4.0
    assert profile["rating_count"] == 1


def test_provider_cannot_use_customer_routes(client, auth_headers):
    r = client.get("/api/appointments/customer/mine", headers=auth_headers)
    assert r.status_code == 403


def test_provider_rating_is_mean_of_reviews(client, auth_headers, make_lead, register_customer):
    customer = register_customer(email="jane@example.com")
    customer_headers = {"Authorization": f"Bearer {customer['token']}"}
    lead = make_lead(email="jane@example.com")

    ratings = [5, 4, 4]
    for hour, rating in zip((9, 10, 11), ratings):
        appointment = book(client, auth_headers, lead["id"], when=f"{DAY}T{hour:02d}:00:00Z").json()
        appointment_id = appointment["appointment"]["id"]
        client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "completed"}, headers=auth_headers
        )
        r = client.post(
            f"/api/appointments/{appointment_id}/review", json={"rating": rating}, headers=customer_headers
        )
        assert r.status_code == 200

    profile = client.get("/api/auth/profile", headers=auth_headers).json()["user"]
    assert profile["rating_count"] == 3
    assert profile["rating_average"] == pytest.approx(13 / 3)

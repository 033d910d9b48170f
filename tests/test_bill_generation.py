def generate(client, month):
    return client.post("/billing/generate", json={"month_year": month})


def add_month(client, room_id, month, reading):
    r = client.post(
        "/billing/rates",
        json={"month_year": month, "electricity_rate": 12.5, "water_rate": 200, "wifi_rate": 150},
    )
    assert r.status_code == 201, r.text
    r = client.post("/billing/readings", json={"room_id": room_id, "month_year": month, "reading": reading})
    assert r.status_code == 201, r.text


def test_generate_monthly_bill(client, march_setup):
    r = generate(client, "2024-03")
    assert r.status_code == 201, r.text
    body = r.json()

    assert body["month_year"] == "2024-03"
    assert body["due_date"] == "2024-03-27"
    assert body["skipped"] == []
    assert len(body["generated"]) == 1

    bill = body["generated"][0]
    assert bill["tenant_id"] == march_setup["tenant"]["id"]
    assert bill["description"] == "Monthly Bill - 2024-03"
    assert bill["bill_period"] == "2024-03"
    # rent 5000 + 100 kWh * 12.5 + water 200 + wifi 150
    assert bill["amount"] == 6600
    assert bill["remaining"] == 6600
    assert [i["item_type"] for i in bill["items"]] == ["room_rent", "electricity", "water", "wifi"]
    assert bill["items"][0]["details"] == "Room Rent: 101"
    assert bill["items"][1]["details"] == "Electricity: 100.00 kWh × ₱12.5000/kWh"


def test_generate_twice_for_same_month_conflicts(client, march_setup):
    assert generate(client, "2024-03").status_code == 201
    r = generate(client, "2024-03")
    assert r.status_code == 409


def test_generate_without_rates_is_not_found(client, march_setup):
    r = generate(client, "2024-06")
    assert r.status_code == 404


def test_generate_rejects_bad_month(client):
    r = generate(client, "March")
    assert r.status_code == 422


def test_room_without_reading_is_skipped(client, march_setup):
    r = client.post("/rooms", json={"room_number": "102", "type": "double", "rent_amount": 4000})
    other_room = r.json()
    r = client.post(
        "/tenants",
        json={
            "user_id": "tenant-user-2",
            "room_id": other_room["id"],
            "name": "Jose Reyes",
            "contact": "09181234567",
            "start_date": "2024-02-01",
        },
    )
    assert r.status_code == 201

    body = generate(client, "2024-03").json()
    assert len(body["generated"]) == 1
    assert len(body["skipped"]) == 1
    assert body["skipped"][0]["room_number"] == "102"
    assert body["skipped"][0]["reason"] == "No electric reading for 2024-03"


def test_unoccupied_rooms_are_not_billed(client, march_setup):
    r = client.patch(f"/rooms/{march_setup['room']['id']}", json={"status": "maintenance"})
    assert r.status_code == 200
    body = generate(client, "2024-03").json()
    assert body["generated"] == []
    assert body["skipped"] == []


def test_unpaid_balance_carries_into_next_month(client, march_setup):
    room_id = march_setup["room"]["id"]
    march = generate(client, "2024-03").json()["generated"][0]

    r = client.post(
        "/payments",
        json={
            "bill_id": march["id"],
            "amount_paid": 6000,
            "payment_date": "2024-03-20",
            "method": "gcash",
            "reference_number": "GC-0001",
        },
    )
    assert r.status_code == 201, r.text

    add_month(client, room_id, "2024-04", 1150)
    april = generate(client, "2024-04").json()["generated"][0]

    # 5000 + 50 kWh * 12.5 + 200 + 150 + 600 left on March
    assert april["amount"] == 6575
    carry = april["items"][-1]
    assert carry["item_type"] == "remaining_balance"
    assert carry["amount"] == 600
    assert carry["details"] == "Remaining Balance from 2024-03"
    assert april["due_date"] == "2024-04-26"


def test_carry_over_is_refreshed_when_previous_bill_is_settled(client, march_setup):
    room_id = march_setup["room"]["id"]
    march = generate(client, "2024-03").json()["generated"][0]
    client.post(
        "/payments",
        json={
            "bill_id": march["id"],
            "amount_paid": 6000,
            "payment_date": "2024-03-20",
            "method": "in_person",
            "received_by": "Landlord",
        },
    )
    add_month(client, room_id, "2024-04", 1150)
    generate(client, "2024-04")

    # late payment for the rest of March, submitted pending then accepted
    r = client.post(
        "/payments",
        json={
            "bill_id": march["id"],
            "amount_paid": 600,
            "payment_date": "2024-04-05",
            "method": "bank",
            "reference_number": "BDO-778",
            "status": "pending",
        },
    )
    pending_id = r.json()["id"]

    april = client.get("/bills", params={"month": "2024-04"}).json()[0]
    assert april["amount"] == 6575

    r = client.post(f"/payments/{pending_id}/accept")
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"

    april = client.get("/bills", params={"month": "2024-04"}).json()[0]
    assert [i["item_type"] for i in april["items"]] == ["room_rent", "electricity", "water", "wifi"]
    assert april["amount"] == 5975

    march_view = client.get(f"/bills/{march['id']}").json()
    assert march_view["status"] == "paid"
    assert march_view["remaining"] == 0


def test_overpayment_becomes_credit(client, march_setup):
    room_id = march_setup["room"]["id"]
    march = generate(client, "2024-03").json()["generated"][0]
    client.post(
        "/payments",
        json={
            "bill_id": march["id"],
            "amount_paid": 6700,
            "payment_date": "2024-03-20",
            "method": "gcash",
            "reference_number": "GC-0002",
        },
    )
    add_month(client, room_id, "2024-04", 1100)
    april = generate(client, "2024-04").json()["generated"][0]

    carry = april["items"][-1]
    assert carry["amount"] == -100
    assert carry["details"] == "Credit from Overpayment in 2024-03"
    assert april["amount"] == 5250


def test_bulk_readings_upsert(client, room, tenant):
    r = client.post(
        "/billing/readings/bulk",
        json={"month_year": "2024-05", "readings": [{"room_id": room["id"], "reading": "1500"}]},
    )
    assert r.status_code == 200, r.text
    assert r.json()["created"] == 1

    r = client.post(
        "/billing/readings/bulk",
        json={"month_year": "2024-05", "readings": [{"room_id": room["id"], "reading": 1520}]},
    )
    body = r.json()
    assert body["updated"] == 1
    assert body["created"] == 0
    assert body["readings"][0]["reading"] == 1520

    form = client.get("/billing/readings/bulk-form", params={"month_year": "2024-05"}).json()
    assert form == [{"room_id": room["id"], "reading": "1520.0"}]


def test_bulk_readings_need_at_least_one_value(client, room):
    r = client.post(
        "/billing/readings/bulk",
        json={"month_year": "2024-05", "readings": [{"room_id": room["id"], "reading": "  "}]},
    )
    assert r.status_code == 400


def test_duplicate_rates_conflict(client):
    payload = {"month_year": "2024-03", "electricity_rate": 12.5}
    assert client.post("/billing/rates", json=payload).status_code == 201
    assert client.post("/billing/rates", json=payload).status_code == 409


def test_rate_and_reading_updates_reject_nulls(client, march_setup):
    rate = client.get("/billing/rates").json()[0]
    reading = client.get("/billing/readings", params={"month_year": "2024-03"}).json()[0]

    assert client.patch(f"/billing/rates/{rate['id']}", json={"water_rate": None}).status_code == 422
    assert client.patch(f"/billing/readings/{reading['id']}", json={"reading": None}).status_code == 422

    r = client.patch(f"/billing/readings/{reading['id']}", json={"reading": 1150})
    assert r.status_code == 200
    assert r.json()["reading"] == 1150

"""
RoomLedger Backend — Household API Tests
==========================================

What:  End-to-end tests of the /api routes through the ASGI app.
How:   HTTPX AsyncClient + ASGITransport against a fresh SQLite schema per test.

What we test:
    ✅ Household isolation
    ✅ Duplicate roommate add is a no-op
    ✅ Invalid expenses are rejected without writes
    ✅ Implicit roommate creation from expense-add
    ✅ Rename cascades to expenses of the same household only
    ✅ Remove keeps expenses; delete of unknown id succeeds
    ✅ Routing: ping, OPTIONS, 404 plain text, malformed JSON, default hid
"""

import pytest


async def _state(client, hid=None):
    params = {"hid": hid} if hid is not None else {}
    response = await client.get("/api/state", params=params)
    assert response.status_code == 200
    return response.json()


async def _post(client, route, body, hid="flat1"):
    return await client.post(f"/api/{route}", params={"hid": hid}, json=body)


class TestStateAndIsolation:
    """GET /api/state contract and household scoping."""

    @pytest.mark.asyncio
    async def test_empty_household(self, test_client):
        assert await _state(test_client, "flat1") == {"roommates": [], "expenses": []}

    @pytest.mark.asyncio
    async def test_households_are_isolated(self, test_client):
        await _post(test_client, "roommate-add", {"name": "Ana"}, hid="flat1")
        await _post(
            test_client, "expense-add",
            {"payer": "Ana", "name": "Rent", "amount": 500}, hid="flat1",
        )

        other = await _state(test_client, "flat2")

        assert other == {"roommates": [], "expenses": []}

    @pytest.mark.asyncio
    async def test_roommates_sorted_and_expenses_in_creation_order(self, test_client):
        for name in ["Zoe", "Ana", "Mia"]:
            await _post(test_client, "roommate-add", {"name": name})
        for item in ["Rent", "Gas", "Bread"]:
            await _post(test_client, "expense-add", {"payer": "Mia", "name": item, "amount": 3})

        state = await _state(test_client, "flat1")

        assert state["roommates"] == ["Ana", "Mia", "Zoe"]
        assert [e["name"] for e in state["expenses"]] == ["Rent", "Gas", "Bread"]
        assert [e["id"] for e in state["expenses"]] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_missing_or_empty_hid_uses_default_household(self, test_client):
        await test_client.post("/api/roommate-add", json={"name": "Ana"})

        assert (await _state(test_client))["roommates"] == ["Ana"]
        assert (await _state(test_client, ""))["roommates"] == ["Ana"]
        assert (await _state(test_client, "default"))["roommates"] == ["Ana"]


class TestRoommates:
    """roommate-add / roommate-rename / roommate-remove."""

    @pytest.mark.asyncio
    async def test_duplicate_add_is_noop(self, test_client):
        first = await _post(test_client, "roommate-add", {"name": "Ana"})
        second = await _post(test_client, "roommate-add", {"name": "Ana"})

        assert first.status_code == 200 and first.json() == {"ok": True}
        assert second.status_code == 200 and second.json() == {"ok": True}
        assert (await _state(test_client, "flat1"))["roommates"] == ["Ana"]

    @pytest.mark.asyncio
    async def test_add_without_name_is_400(self, test_client):
        response = await _post(test_client, "roommate-add", {})

        assert response.status_code == 400
        assert response.json() == {"error": "name required"}
        assert response.headers["content-type"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_truthy_non_string_name_is_stored_as_text(self, test_client):
        response = await _post(test_client, "roommate-add", {"name": 5})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert (await _state(test_client, "flat1"))["roommates"] == ["5"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", 0, False, None])
    async def test_falsy_name_is_400(self, test_client, name):
        response = await _post(test_client, "roommate-add", {"name": name})

        assert response.status_code == 400
        assert response.json() == {"error": "name required"}

    @pytest.mark.asyncio
    async def test_rename_cascades_within_household_only(self, test_client):
        for hid in ["flat1", "flat2"]:
            await _post(
                test_client, "expense-add",
                {"payer": "Ana", "name": "Groceries", "amount": 10}, hid=hid,
            )

        response = await _post(test_client, "roommate-rename", {"oldName": "Ana", "newName": "Anna"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        renamed = await _state(test_client, "flat1")
        untouched = await _state(test_client, "flat2")
        assert renamed["roommates"] == ["Anna"]
        assert [e["payer"] for e in renamed["expenses"]] == ["Anna"]
        assert untouched["roommates"] == ["Ana"]
        assert [e["payer"] for e in untouched["expenses"]] == ["Ana"]

    @pytest.mark.asyncio
    async def test_rename_requires_both_names(self, test_client):
        response = await _post(test_client, "roommate-rename", {"oldName": "Ana"})

        assert response.status_code == 400
        assert response.json() == {"error": "oldName/newName required"}

    @pytest.mark.asyncio
    async def test_rename_without_roommate_row_still_moves_expenses(self, test_client):
        await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 800})
        await _post(test_client, "roommate-remove", {"name": "Ana"})

        response = await _post(test_client, "roommate-rename", {"oldName": "Ana", "newName": "Anna"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        state = await _state(test_client, "flat1")
        assert state["roommates"] == []
        assert [e["payer"] for e in state["expenses"]] == ["Anna"]

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name_fails_and_rolls_back(self, test_client):
        await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 1})
        await _post(test_client, "roommate-add", {"name": "Bo"})

        response = await _post(test_client, "roommate-rename", {"oldName": "Ana", "newName": "Bo"})

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        state = await _state(test_client, "flat1")
        assert state["roommates"] == ["Ana", "Bo"]
        assert state["expenses"][0]["payer"] == "Ana"

    @pytest.mark.asyncio
    async def test_remove_keeps_expenses(self, test_client):
        await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 800})

        response = await _post(test_client, "roommate-remove", {"name": "Ana"})

        assert response.json() == {"ok": True}
        state = await _state(test_client, "flat1")
        assert state["roommates"] == []
        assert state["expenses"][0]["payer"] == "Ana"

    @pytest.mark.asyncio
    async def test_remove_unknown_roommate_succeeds(self, test_client):
        response = await _post(test_client, "roommate-remove", {"name": "Nobody"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestExpenses:
    """expense-add / expense-delete."""

    @pytest.mark.asyncio
    async def test_add_expense_scenario(self, test_client):
        response = await _post(
            test_client, "expense-add",
            {"payer": "Ana", "name": "Groceries", "amount": 42.50},
        )

        assert response.status_code == 200
        assert response.json() == {"id": 1}

        state = await _state(test_client, "flat1")
        assert "Ana" in state["roommates"]
        expense = state["expenses"][0]
        assert expense["id"] == 1
        assert expense["payer"] == "Ana"
        assert expense["name"] == "Groceries"
        assert expense["amount"] == 42.5
        assert expense["created_at"]

        await _post(test_client, "roommate-rename", {"oldName": "Ana", "newName": "Anna"})
        state = await _state(test_client, "flat1")
        assert state["expenses"][0]["payer"] == "Anna"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5, "abc", None, True])
    async def test_invalid_amount_rejected_without_writes(self, test_client, amount):
        response = await _post(
            test_client, "expense-add",
            {"payer": "Ana", "name": "Groceries", "amount": amount},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid expense"}
        assert await _state(test_client, "flat1") == {"roommates": [], "expenses": []}

    @pytest.mark.asyncio
    async def test_numeric_string_amount_accepted(self, test_client):
        response = await _post(
            test_client, "expense-add", {"payer": "Ana", "name": "Wifi", "amount": "19.99"}
        )

        assert response.status_code == 200
        assert (await _state(test_client, "flat1"))["expenses"][0]["amount"] == 19.99

    @pytest.mark.asyncio
    async def test_numeric_expense_name_is_stored_as_text(self, test_client):
        response = await _post(
            test_client, "expense-add", {"payer": "Ana", "name": 7, "amount": 3}
        )

        assert response.status_code == 200
        assert (await _state(test_client, "flat1"))["expenses"][0]["name"] == "7"

    @pytest.mark.asyncio
    async def test_payer_already_roommate_not_duplicated(self, test_client):
        await _post(test_client, "roommate-add", {"name": "Ana"})
        await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 1})

        assert (await _state(test_client, "flat1"))["roommates"] == ["Ana"]

    @pytest.mark.asyncio
    async def test_delete_expense(self, test_client):
        created = await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 1})
        expense_id = created.json()["id"]

        response = await _post(test_client, "expense-delete", {"id": expense_id})

        assert response.json() == {"ok": True}
        assert (await _state(test_client, "flat1"))["expenses"] == []

    @pytest.mark.asyncio
    async def test_delete_accepts_integral_float_id(self, test_client):
        created = await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 1})
        expense_id = created.json()["id"]

        response = await _post(test_client, "expense-delete", {"id": float(expense_id)})

        assert response.json() == {"ok": True}
        assert (await _state(test_client, "flat1"))["expenses"] == []

    @pytest.mark.asyncio
    async def test_delete_unknown_or_foreign_id_is_noop(self, test_client):
        created = await _post(test_client, "expense-add", {"payer": "Ana", "name": "Rent", "amount": 1})
        expense_id = created.json()["id"]

        unknown = await _post(test_client, "expense-delete", {"id": 999})
        foreign = await _post(test_client, "expense-delete", {"id": expense_id}, hid="flat2")

        assert unknown.status_code == 200 and unknown.json() == {"ok": True}
        assert foreign.status_code == 200 and foreign.json() == {"ok": True}
        assert len((await _state(test_client, "flat1"))["expenses"]) == 1

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, test_client):
        missing = await _post(test_client, "expense-delete", {})
        zero = await _post(test_client, "expense-delete", {"id": 0})

        assert missing.status_code == 400 and missing.json() == {"error": "id required"}
        assert zero.status_code == 400 and zero.json() == {"error": "id required"}


class TestRouting:
    """Dispatch table edges: ping, OPTIONS, 404s, body parsing."""

    @pytest.mark.asyncio
    async def test_ping(self, test_client):
        response = await test_client.get("/api/ping", params={"hid": "flat1"})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["hid"] == "flat1"
        assert body["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api", "/api/"])
    async def test_empty_suffix_is_ping(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 200
        assert response.json()["hid"] == "default"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/state", "/api/expense-add", "/anything/else"])
    async def test_options_is_empty_204(self, test_client, path):
        response = await test_client.options(path)

        assert response.status_code == 204
        assert response.content == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/unknown"),
            ("GET", "/api/roommate-add"),
            ("POST", "/api/state"),
            ("PUT", "/api/expense-add"),
            ("DELETE", "/api/expense-delete"),
            ("GET", "/nowhere"),
        ],
    )
    async def test_unmatched_routes_are_plain_404(self, test_client, method, path):
        response = await test_client.request(method, path)

        assert response.status_code == 404
        assert response.text == "Not Found"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_malformed_json_is_treated_as_empty_body(self, test_client):
        response = await test_client.post(
            "/api/roommate-add",
            params={"hid": "flat1"},
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "name required"}

    @pytest.mark.asyncio
    async def test_non_object_json_is_treated_as_empty_body(self, test_client):
        response = await _post(test_client, "expense-add", ["Ana", "Rent", 5])

        assert response.status_code == 400
        assert response.json() == {"error": "invalid expense"}

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        generated = await test_client.get("/api/ping")
        echoed = await test_client.get("/api/ping", headers={"X-Request-ID": "abc123"})

        assert generated.headers["X-Request-ID"]
        assert echoed.headers["X-Request-ID"] == "abc123"

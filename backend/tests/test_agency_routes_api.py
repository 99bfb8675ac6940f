"""HTTP tests for the agency route catalog and price quotes."""

import pytest

from conftest import agency_route_payload
from routedesk.services.agency_routes import quote_price


async def _create(client, **overrides):
    resp = await client.post("/api/agency/routes/", json=agency_route_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.api
@pytest.mark.asyncio
class TestAgencyRouteCatalog:

    async def test_create_derives_name(self, client):
        route = await _create(client)
        assert route["name"] == "HOTEL RIU / TOCUMEN AIRPORT"
        assert route["pickupLocation"] == "HOTEL RIU"
        assert route["isActive"] is True
        assert route["pricing"][0]["passengerRanges"][1]["price"] == 150

    async def test_site_type_wins_over_location(self, client):
        route = await _create(client, pickupSiteType="hotel", dropoffSiteType="airport")
        assert route["name"] == "HOTEL / AIRPORT"
        assert route["pickupSiteType"] == "HOTEL"

    async def test_duplicate_locations_conflict(self, client):
        await _create(client)
        resp = await client.post(
            "/api/agency/routes/",
            json=agency_route_payload(pickupLocation="hotel riu "),
        )
        assert resp.status_code == 409

    @pytest.mark.parametrize("overrides,code", [
        ({"dropoffLocation": "hotel riu"}, "SAME_LOCATIONS"),
        ({"pricing": []}, "PRICING_REQUIRED"),
        ({"pricing": [{"routeType": "single", "passengerRanges": []}]}, "INVALID_PRICING"),
        ({"pricing": [{"routeType": "single", "passengerRanges": [
            {"minPassengers": 5, "maxPassengers": 2, "price": 10}]}]}, "INVALID_PRICING"),
        ({"pickupLocation": None}, "LOCATIONS_REQUIRED"),
    ])
    async def test_create_validation(self, client, overrides, code):
        resp = await client.post("/api/agency/routes/", json=agency_route_payload(**overrides))
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == code

    async def test_unknown_route_type_is_rejected(self, client):
        resp = await client.post("/api/agency/routes/", json=agency_route_payload(
            pricing=[{"routeType": "helicopter", "passengerRanges": [
                {"minPassengers": 1, "maxPassengers": 2, "price": 10}]}]
        ))
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_get_update_and_delete(self, client):
        route = await _create(client)

        resp = await client.put(
            f"/api/agency/routes/{route['id']}",
            json={"dropoffLocation": "Albrook Mall", "notes": "via corridor"},
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "HOTEL RIU / ALBROOK MALL"
        assert resp.json()["notes"] == "via corridor"

        assert (await client.get(f"/api/agency/routes/{route['id']}")).status_code == 200
        assert (await client.delete(f"/api/agency/routes/{route['id']}")).status_code == 204
        missing = await client.get(f"/api/agency/routes/{route['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    async def test_deactivate_hides_from_lookup(self, client):
        route = await _create(client)
        params = {"pickup_location": "hotel riu", "dropoff_location": "tocumen airport"}

        assert (await client.get("/api/agency/routes/lookup", params=params)).status_code == 200

        await client.put(f"/api/agency/routes/{route['id']}/deactivate")
        assert (await client.get("/api/agency/routes/lookup", params=params)).status_code == 404

        resp = await client.put(f"/api/agency/routes/{route['id']}/reactivate")
        assert resp.json()["isActive"] is True
        assert (await client.get("/api/agency/routes/lookup", params=params)).status_code == 200

    async def test_list_filters(self, client):
        await _create(client)
        second = await _create(client, pickupLocation="Albrook Mall", description="mall shuttle")
        await client.put(f"/api/agency/routes/{second['id']}/deactivate")

        everything = (await client.get("/api/agency/routes/")).json()
        assert everything["total"] == 2

        active = (await client.get("/api/agency/routes/", params={"is_active": True})).json()
        assert [r["name"] for r in active["items"]] == ["HOTEL RIU / TOCUMEN AIRPORT"]

        found = (await client.get("/api/agency/routes/", params={"search": "shuttle"})).json()
        assert found["total"] == 1
        assert found["items"][0]["id"] == second["id"]


@pytest.mark.api
@pytest.mark.asyncio
class TestPriceQuotes:

    async def test_single_quote_with_waiting_time(self, client):
        await _create(client)
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "hotel riu",
            "dropoffLocation": "tocumen airport",
            "routeType": "single",
            "passengerCount": 2,
            "waitingTimeHours": 3,
        })
        assert resp.status_code == 200
        quote = resp.json()
        assert quote["price"] == 130
        assert quote["breakdown"] == {
            "basePrice": 100, "waitingTime": 30, "extraPassengers": 0, "total": 130,
        }
        assert quote["calculation"]["isRoundTrip"] is False

    async def test_minutes_win_over_hours(self, client):
        await _create(client)
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "HOTEL RIU",
            "dropoffLocation": "TOCUMEN AIRPORT",
            "routeType": "single",
            "passengerCount": 5,
            "waitingTimeHours": 10,
            "waitingTime": 30,
        })
        assert resp.json()["price"] == 155
        assert resp.json()["calculation"]["waitingTimeHours"] == 0.5

    async def test_round_trip_with_return_leg(self, client):
        await _create(client)
        await _create(
            client,
            pickupLocation="Tocumen Airport",
            dropoffLocation="Hotel Decameron",
            pricing=[{"routeType": "roundtrip", "passengerRanges": [
                {"minPassengers": 1, "maxPassengers": 6, "price": 200}]}],
        )
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "Hotel Riu",
            "dropoffLocation": "Tocumen Airport",
            "returnDropoffLocation": "Hotel Decameron",
            "routeType": "roundtrip",
            "passengerCount": 2,
            "waitingTime": 120,
        })
        quote = resp.json()
        assert resp.status_code == 200
        assert quote["price"] == 400
        assert quote["breakdown"] == {
            "basePrice": 380, "waitingTime": 20, "extraPassengers": 0, "total": 400,
        }
        assert [r["name"] for r in quote["routes"]] == [
            "HOTEL RIU / TOCUMEN AIRPORT", "TOCUMEN AIRPORT / HOTEL DECAMERON",
        ]
        assert quote["calculation"]["isRoundTrip"] is True

    async def test_round_trip_without_return_leg(self, client):
        await _create(client)
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "Hotel Riu",
            "dropoffLocation": "Tocumen Airport",
            "routeType": "roundtrip",
            "passengerCount": 4,
            "waitingTimeHours": 1,
        })
        assert resp.json()["price"] == 190

    async def test_unknown_route_is_404(self, client):
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "Nowhere", "dropoffLocation": "Elsewhere",
            "routeType": "single", "passengerCount": 1,
        })
        assert resp.status_code == 404

    async def test_unpriced_count_is_422(self, client):
        await _create(client)
        resp = await client.post("/api/agency/routes/calculate-price", json={
            "pickupLocation": "Hotel Riu", "dropoffLocation": "Tocumen Airport",
            "routeType": "single", "passengerCount": 10,
        })
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "PRICE_NOT_AVAILABLE"

    async def test_quote_price_for_internal_callers(self, client, sqlite_store):
        await _create(client)

        breakdown = await quote_price(sqlite_store, "Hotel Riu", "Tocumen Airport", "single", 5)
        assert breakdown.total == 150

        assert await quote_price(sqlite_store, "Hotel Riu", "Tocumen Airport", "single", 10) is None
        assert await quote_price(sqlite_store, "Hotel Riu", "Nowhere", "single", 1) is None

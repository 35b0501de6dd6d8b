"""Population, year and farm routes — CRUD, uniqueness and error envelopes.

Invariants:
    - Duplicate years / farm codes in a population are 409 DUPLICATE_ENTITY
    - Unknown ids are 404 with the structured error envelope
    - Deleting a population removes its farms
"""

from sqlalchemy import func, select

from farmdata.models import Farm


async def test_create_and_list_populations(client):
    """Created populations are listed in id order."""
    first = await client.post("/api/v1/populations", json={"description": "  North  "})
    second = await client.post("/api/v1/populations", json={"description": "South"})
    assert first.status_code == 201
    assert first.json()["description"] == "North"

    listed = await client.get("/api/v1/populations")
    assert [p["id"] for p in listed.json()] == [first.json()["id"], second.json()["id"]]


async def test_unknown_population_is_404_envelope(client):
    response = await client.get("/api/v1/populations/999")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["category"] == "resource_not_found"


async def test_duplicate_year_is_conflict(client):
    pid = (await client.post("/api/v1/populations", json={})).json()["id"]
    created = await client.post(f"/api/v1/populations/{pid}/years", json={"year_number": 2020})
    duplicate = await client.post(f"/api/v1/populations/{pid}/years", json={"year_number": 2020})

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "DUPLICATE_ENTITY"


async def test_years_listed_by_number(client, seeded_population):
    pid = seeded_population.population_id
    response = await client.get(f"/api/v1/populations/{pid}/years")
    assert [y["year_number"] for y in response.json()] == [2020, 2021]


async def test_invalid_year_payload_is_400(client):
    """Validation errors use the error envelope with field-level details."""
    pid = (await client.post("/api/v1/populations", json={})).json()["id"]
    response = await client.post(f"/api/v1/populations/{pid}/years", json={"year_number": -1})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["body.year_number"]


async def test_farm_crud_and_region_filter(client, seeded_population):
    pid = seeded_population.population_id
    created = await client.post(
        f"/api/v1/populations/{pid}/farms",
        json={"farm_code": "NEW", "region_level_3": 300, "altitude": 1},
    )
    assert created.status_code == 201
    assert created.json()["altitude"] == 1

    duplicate = await client.post(f"/api/v1/populations/{pid}/farms", json={"farm_code": "NEW"})
    assert duplicate.status_code == 409

    region = await client.get(f"/api/v1/populations/{pid}/farms", params={"region_level_3": 100})
    assert len(region.json()) == 2

    farm_id = created.json()["id"]
    assert (await client.delete(f"/api/v1/farms/{farm_id}")).status_code == 204
    assert (await client.get(f"/api/v1/farms/{farm_id}")).status_code == 404


async def test_farm_year_rows(client, seeded_population):
    """Holder data is added once per farm and year; listing filters on year."""
    farm_id = seeded_population.farms[0]
    y2021 = seeded_population.years[2021]
    body = {"year_id": y2021, "holder_age": 51, "holder_successors": 1}

    created = await client.post(f"/api/v1/farms/{farm_id}/holder-data", json=body)
    duplicate = await client.post(f"/api/v1/farms/{farm_id}/holder-data", json=body)
    assert created.status_code == 201
    assert duplicate.status_code == 409

    listed = await client.get(f"/api/v1/farms/{farm_id}/holder-data", params={"year_id": y2021})
    assert [h["holder_age"] for h in listed.json()] == [51]
    everything = await client.get(f"/api/v1/farms/{farm_id}/holder-data")
    assert len(everything.json()) == 2


async def test_closing_value_for_foreign_year_is_404(client, seeded_population):
    other = (await client.post("/api/v1/populations", json={})).json()["id"]
    year = (await client.post(f"/api/v1/populations/{other}/years", json={"year_number": 2020})).json()
    response = await client.post(
        f"/api/v1/farms/{seeded_population.farms[0]}/closing-values",
        json={"year_id": year["id"], "total_current_assets": 1.0},
    )
    assert response.status_code == 404


async def test_delete_population_removes_farms(client, seeded_population, test_db):
    pid = seeded_population.population_id
    response = await client.delete(f"/api/v1/populations/{pid}")
    assert response.status_code == 204

    count = await test_db.scalar(
        select(func.count()).select_from(Farm).where(Farm.population_id == pid),
    )
    assert count == 0


async def test_income_margin_recompute(client, seeded_population):
    """SE410/SE420 follow stored productions, subsidies and rents."""
    pid = seeded_population.population_id
    response = await client.post(f"/api/v1/populations/{pid}/income-margin", params={"year": 2020})
    assert response.json() == {"population_id": pid, "closing_values_updated": 3}

    y2020 = seeded_population.years[2020]
    incomes = []
    for farm_id in seeded_population.farms:
        [closing] = (await client.get(
            f"/api/v1/farms/{farm_id}/closing-values", params={"year_id": y2020},
        )).json()
        incomes.append((closing["gross_farm_income"], closing["farm_net_income"]))

    # farm 0: wheat 200 + forestry 50 + subsidy 100, wheat costs 50
    # farm 1: wheat 200 + milk 400 + subsidy 100, costs 50 + 110, rent received 50
    # farm 2: wheat 200 + subsidy 100, costs 50, rent paid 50
    assert incomes == [(350.0, 300.0), (700.0, 590.0), (300.0, 200.0)]

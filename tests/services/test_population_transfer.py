"""Population export / import — the id-free JSON tree of a population.

Invariants:
    - Exported trees reference farms by code, years by number, groups by name
    - Importing an exported tree rebuilds the same farms and year data
    - A tree naming an unknown product group is rejected without writing anything
"""

from sqlalchemy import func, select

from farmdata.models import Population


async def _export(client, population_id, **params):
    response = await client.get(f"/api/v1/populations/{population_id}/export", params=params)
    assert response.status_code == 200
    return response.json()


async def _sell_wheat(client, seed, share=0.3):
    farm_0, _, farm_2 = seed.farms
    y2021 = seed.years[2021]
    await client.post("/api/v1/land-transactions", json={
        "production_id": seed.crops[(farm_0, "WHEAT")],
        "destination_farm_id": farm_2, "year_id": y2021, "percentage": share,
        "sale_price": 900.0,
    })


async def test_export_tree(client, seeded_population):
    tree = await _export(client, seeded_population.population_id)

    assert tree["description"] == "Test population"
    assert tree["year_numbers"] == [2020, 2021]
    assert [f["farm_code"] for f in tree["farms"]] == ["F0", "F1", "F2"]
    f0 = tree["farms"][0]
    assert {p["product_name"] for p in f0["agricultural_productions"]} == {"WHEAT", "FORESTRY"}
    assert f0["closing_values"][0]["year_number"] == 2020
    assert f0["farm_year_subsidies"][0]["policy_identifier"] == "BASIC"
    assert tree["land_rents"] == [{
        "year_number": 2020, "origin_farm_code": "F1", "destination_farm_code": "F2",
        "rent_value": 50.0, "rent_area": 1.0,
    }]
    assert {
        (r["policy_identifier"], r["product_group_name"]) for r in tree["policy_group_relations"]
    } == {("BASIC", "WHEAT"), ("FOREST_AID", "FORESTRY")}


async def test_export_pages_over_farms(client, seeded_population):
    pid = seeded_population.population_id
    first = await _export(client, pid, limit=1)
    second = await _export(client, pid, limit=1, after_farm_id=seeded_population.farms[0])

    assert [f["farm_code"] for f in first["farms"]] == ["F0"]
    assert [f["farm_code"] for f in second["farms"]] == ["F1"]


async def test_export_land_transaction_names_production_year(client, seeded_population):
    await _sell_wheat(client, seeded_population)
    tree = await _export(client, seeded_population.population_id)

    assert tree["land_transactions"] == [{
        "year_number": 2021, "product_group_name": "WHEAT",
        "origin_farm_code": "F0", "destination_farm_code": "F2",
        "production_year_number": 2020, "percentage": 0.3, "sale_price": 900.0,
    }]


async def test_import_round_trip(client, seeded_population):
    """Importing an export creates a second, equivalent population."""
    await _sell_wheat(client, seeded_population)
    tree = await _export(client, seeded_population.population_id)

    created = await client.post("/api/v1/populations/import", json=tree)
    assert created.status_code == 201
    new_id = created.json()["id"]
    assert new_id != seeded_population.population_id

    copy = await _export(client, new_id)
    assert copy["year_numbers"] == tree["year_numbers"]
    assert [f["farm_code"] for f in copy["farms"]] == ["F0", "F1", "F2"]
    for original, imported in zip(tree["farms"], copy["farms"]):
        assert len(imported["agricultural_productions"]) == len(original["agricultural_productions"])
        assert len(imported["livestock_productions"]) == len(original["livestock_productions"])
        assert len(imported["holder_farm_year_data"]) == len(original["holder_farm_year_data"])
    assert copy["land_rents"] == tree["land_rents"]
    assert copy["land_transactions"] == tree["land_transactions"]


async def test_import_recomputes_income(client, seeded_population):
    tree = await _export(client, seeded_population.population_id)
    new_id = (await client.post("/api/v1/populations/import", json=tree)).json()["id"]

    copy = await _export(client, new_id)
    closing = copy["farms"][0]["closing_values"][0]
    assert closing["gross_farm_income"] == 350.0
    assert closing["farm_net_income"] == 300.0


async def test_import_unknown_product_is_rejected(client, seeded_population, test_db):
    tree = await _export(client, seeded_population.population_id)
    tree["farms"][0]["agricultural_productions"][0]["product_name"] = "RICE"

    response = await client.post("/api/v1/populations/import", json=tree)

    assert response.status_code == 400
    assert "RICE" in response.json()["error"]["message"]
    assert await test_db.scalar(select(func.count()).select_from(Population)) == 1

"""Long period routes — LP input data and LP result ingestion.

Invariants:
    - LP data is built from year − 1 closing values, holders and subsidies
    - Stored decisions cover every farm; failed farms get a default decision
    - Holder data advances one year, with a hand-over when decided and possible
"""

import pytest

LP_RESULTS_URL = "/api/v1/results/longperiod"


def _decision(farm_id, year_id, **kwargs):
    decision = {
        "farm_id": farm_id, "year_id": year_id, "agricultural_land_area": 20.0,
        "agricultural_land_value": 2000.0, "total_current_assets": 900.0,
    }
    decision.update(kwargs)
    return decision


async def test_lp_data(client, seeded_population):
    pid = seeded_population.population_id
    response = await client.get(
        f"/api/v1/populations/{pid}/simulationdata/longperiod",
        params={"year": 2021, "ignore_lmm": True},
    )
    assert response.status_code == 200
    data = response.json()

    assert len(data["values"]) == 3
    first = data["values"][0]
    assert first["farm_id"] == seeded_population.farms[0]
    assert first["se465"] == 1000.0
    assert first["average_ha_price"] == pytest.approx(100.0)
    assert first["agent_holder"]["year_number"] == 2020
    assert [s["policy_identifier"] for s in first["agent_subsidies"]] == ["BASIC"]
    assert len(data["agricultural_productions"]) == 4
    assert len(data["rent_operations"]) == 1
    assert data["ignore_lmm"] is True
    assert data["ignore_lp"] is False


async def test_lp_data_without_previous_year_is_404(client, seeded_population):
    pid = seeded_population.population_id
    response = await client.get(
        f"/api/v1/populations/{pid}/simulationdata/longperiod", params={"year": 2020},
    )
    assert response.status_code == 404


async def test_lp_data_unknown_population_is_conflict(client):
    response = await client.get(
        "/api/v1/populations/999/simulationdata/longperiod", params={"year": 2021},
    )
    assert response.status_code == 409


async def test_lp_results_store_decisions_and_advance_holders(client, seeded_population):
    farm_0, farm_1, farm_2 = seeded_population.farms
    y2021 = seeded_population.years[2021]
    body = {
        "agro_management_decisions": [
            _decision(farm_0, y2021, retire_and_hand_over=True),
            _decision(farm_1, y2021),
        ],
        "land_transactions": [{
            "production_id": seeded_population.crops[(farm_0, "WHEAT")],
            "destination_farm_id": farm_2, "year_id": y2021,
            "percentage": 0.3, "sale_price": 900.0,
        }],
        "error_list": [farm_2],
    }
    response = await client.post(LP_RESULTS_URL, json=body)
    assert response.status_code == 201
    data = response.json()
    assert len(data["agro_management_decisions"]) == 3
    assert len(data["land_transactions"]) == 1

    # farm 2 failed in LP and keeps its 2020 state
    [default] = (await client.get(
        f"/api/v1/farms/{farm_2}/decisions", params={"year_id": y2021},
    )).json()
    assert default["total_current_assets"] == 1000.0
    assert default["retire_and_hand_over"] is False

    holders = {}
    for farm_id in seeded_population.farms:
        [holder] = (await client.get(
            f"/api/v1/farms/{farm_id}/holder-data", params={"year_id": y2021},
        )).json()
        holders[farm_id] = holder["holder_age"]
    # farm 0 handed over to its 20-year-old successor
    assert holders == {farm_0: 21, farm_1: 51, farm_2: 51}


async def test_lp_results_feed_sp_simulation_data(client, seeded_population):
    """Land sold in the LP step moves between farms in the SP simulation data."""
    farm_0, farm_1, farm_2 = seeded_population.farms
    y2021 = seeded_population.years[2021]
    await client.post(LP_RESULTS_URL, json={
        "agro_management_decisions": [_decision(f, y2021) for f in seeded_population.farms],
        "land_transactions": [{
            "production_id": seeded_population.crops[(farm_0, "WHEAT")],
            "destination_farm_id": farm_2, "year_id": y2021, "percentage": 0.3,
        }],
    })

    response = await client.get(
        f"/api/v1/populations/{seeded_population.population_id}/simulationdata/shortperiod",
        params={"year": 2021},
    )
    values = {v["farm_code"]: v for v in response.json()["values"]}
    assert values[farm_0]["crops"]["WHEAT"]["uaa"] == pytest.approx(7.0)
    assert values[farm_2]["crops"]["WHEAT"]["uaa"] == pytest.approx(13.0)
    assert values[farm_1]["current_assets"] == 900.0


async def test_lp_results_replace_previous_run(client, seeded_population):
    y2021 = seeded_population.years[2021]
    decisions = [_decision(f, y2021) for f in seeded_population.farms]
    await client.post(LP_RESULTS_URL, json={"agro_management_decisions": decisions})
    response = await client.post(LP_RESULTS_URL, json={"agro_management_decisions": decisions})

    assert response.status_code == 201
    listed = (await client.get(
        f"/api/v1/farms/{seeded_population.farms[0]}/decisions", params={"year_id": y2021},
    )).json()
    assert len(listed) == 1


async def test_lp_results_must_cover_every_farm(client, seeded_population):
    y2021 = seeded_population.years[2021]
    response = await client.post(LP_RESULTS_URL, json={
        "agro_management_decisions": [_decision(seeded_population.farms[0], y2021)],
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"


async def test_lp_results_without_decisions_are_rejected(client, seeded_population):
    response = await client.post(LP_RESULTS_URL, json={"agro_management_decisions": []})
    assert response.status_code == 400


async def test_lp_results_with_unknown_year_are_rejected(client, seeded_population):
    response = await client.post(LP_RESULTS_URL, json={
        "agro_management_decisions": [_decision(seeded_population.farms[0], 999)],
    })
    assert response.status_code == 400

"""Synthetic populations, scenarios, runs and run log messages.

Invariants:
    - Duplicating a synthetic population copies its whole population
    - A scenario runs on its own copy; a failed creation leaves no copy behind
    - Without a configured simulation manager, scenarios are stored but not dispatched
"""

import httpx
from sqlalchemy import func, select

from farmdata.infrastructure.simulation_manager_client import SimulationManagerClient
from farmdata.models import Population, SyntheticPopulation
from farmdata.schemas.simulation import ScenarioCreate
from farmdata.services.simulation_tasks import create_scenario

SP_URL = "/api/v1/synthetic-populations"


async def _synthetic(client, seed, name="Baseline"):
    response = await client.post(SP_URL, json={
        "name": name, "description": "base run",
        "population_id": seed.population_id, "year_id": seed.years[2020],
    })
    assert response.status_code == 201
    return response.json()


async def _population_count(test_db):
    return await test_db.scalar(select(func.count()).select_from(Population))


async def test_synthetic_population_crud(client, seeded_population):
    synthetic = await _synthetic(client, seeded_population)

    updated = await client.patch(f"{SP_URL}/{synthetic['id']}", json={"description": "renamed"})
    assert updated.json()["description"] == "renamed"
    assert updated.json()["name"] == "Baseline"

    listed = await client.get(SP_URL)
    assert [s["id"] for s in listed.json()] == [synthetic["id"]]


async def test_synthetic_population_with_foreign_year_is_404(client, seeded_population):
    other = (await client.post("/api/v1/populations", json={})).json()["id"]
    response = await client.post(SP_URL, json={
        "name": "x", "population_id": other, "year_id": seeded_population.years[2020],
    })
    assert response.status_code == 404


async def test_duplicate_synthetic_population(client, seeded_population):
    synthetic = await _synthetic(client, seeded_population)

    response = await client.post(f"{SP_URL}/{synthetic['id']}/duplicate")
    assert response.status_code == 201
    copy = response.json()
    assert copy["name"] == f"Duplicated from SP: Baseline - {copy['id']}"
    assert copy["population_id"] != seeded_population.population_id

    population = (await client.get(f"/api/v1/populations/{copy['population_id']}")).json()
    assert population["description"].startswith("(Duplicated from SP: Baseline")

    exported = (await client.get(f"{SP_URL}/{copy['id']}/export")).json()
    assert exported["year_number"] == 2020
    farms = exported["population"]["farms"]
    assert [f["farm_code"] for f in farms] == ["F0", "F1", "F2"]
    assert len(farms[0]["agricultural_productions"]) == 2
    assert len(exported["population"]["land_rents"]) == 1


async def test_delete_synthetic_population_removes_population(client, seeded_population):
    synthetic = await _synthetic(client, seeded_population)
    response = await client.delete(f"{SP_URL}/{synthetic['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/api/v1/populations/{seeded_population.population_id}")).status_code == 404


async def test_create_scenario_without_manager(client, seeded_population, test_db):
    synthetic = await _synthetic(client, seeded_population)
    response = await client.post("/api/v1/scenarios", json={
        "synthetic_population_id": synthetic["id"],
        "horizon": 5,
        "additional_policies": [{
            "policy_identifier": "GREEN", "is_coupled": True,
            "start_year_number": 2021, "end_year_number": 2030,
            "coupled_compensations": [{"product_group": "WHEAT", "economic_compensation": 20.0}],
        }],
    })

    assert response.status_code == 201
    created = response.json()
    assert created["dispatched"] is False
    assert created["dispatch_error"] is None
    scenario = created["scenario"]
    assert scenario["horizon"] == 5
    assert scenario["population_id"] != seeded_population.population_id
    assert scenario["additional_policies"][0]["policy_identifier"] == "GREEN"
    assert await _population_count(test_db) == 2

    policies = (await client.get(
        f"/api/v1/populations/{scenario['population_id']}/policies",
    )).json()
    assert "GREEN" in {p["policy_identifier"] for p in policies}
    relations = (await client.get(
        f"/api/v1/populations/{scenario['population_id']}/policy-group-relations",
    )).json()
    assert 20.0 in {r["economic_compensation"] for r in relations}


async def test_scenario_with_unknown_group_leaves_no_copy(client, seeded_population, test_db):
    synthetic = await _synthetic(client, seeded_population)
    response = await client.post("/api/v1/scenarios", json={
        "synthetic_population_id": synthetic["id"],
        "additional_policies": [{
            "policy_identifier": "GREEN", "is_coupled": True,
            "coupled_compensations": [{"product_group": "RICE"}],
        }],
    })

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "SCENARIO_CREATION_FAILED"
    assert await _population_count(test_db) == 1


async def test_scenario_with_existing_policy_is_rejected(client, seeded_population, test_db):
    synthetic = await _synthetic(client, seeded_population)
    response = await client.post("/api/v1/scenarios", json={
        "synthetic_population_id": synthetic["id"],
        "additional_policies": [{"policy_identifier": "BASIC"}],
    })
    assert response.status_code == 500
    assert await _population_count(test_db) == 1


async def test_dispatch_failure_keeps_scenario(test_db, seeded_population, test_settings):
    """A manager answering 503 is reported in the response, not raised."""
    synthetic = SyntheticPopulation(
        name="Baseline", population_id=seeded_population.population_id,
        year_id=seeded_population.years[2020],
    )
    test_db.add(synthetic)
    await test_db.commit()
    manager = SimulationManagerClient(
        "http://manager", max_retries=0,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    created = await create_scenario(
        test_db, ScenarioCreate(synthetic_population_id=synthetic.id), test_settings, manager,
    )

    assert created.dispatched is False
    assert "retries" in created.dispatch_error
    assert created.scenario.id is not None


async def test_dispatch_success(test_db, seeded_population, test_settings):
    synthetic = SyntheticPopulation(
        name="Baseline", population_id=seeded_population.population_id,
        year_id=seeded_population.years[2020],
    )
    test_db.add(synthetic)
    await test_db.commit()
    sent = []

    def handler(request):
        sent.append(request)
        return httpx.Response(200, json={})

    manager = SimulationManagerClient("http://manager", transport=httpx.MockTransport(handler))
    created = await create_scenario(
        test_db, ScenarioCreate(synthetic_population_id=synthetic.id, queue_suffix="_b"),
        test_settings, manager,
    )

    assert created.dispatched is True
    assert len(sent) == 1


async def test_runs_and_log_messages(client, seeded_population):
    synthetic = await _synthetic(client, seeded_population)
    scenario = (await client.post(
        "/api/v1/scenarios", json={"synthetic_population_id": synthetic["id"]},
    )).json()["scenario"]

    run = await client.post("/api/v1/runs", json={"simulation_scenario_id": scenario["id"]})
    assert run.status_code == 201
    run_id = run.json()["id"]

    progress = await client.put(f"/api/v1/runs/{run_id}/progress", json={
        "overall_status": 1, "current_stage": 4, "current_year": 2021,
        "current_stage_progress": 50,
    })
    assert progress.json()["current_stage"] == 4
    bad = await client.put(f"/api/v1/runs/{run_id}/progress", json={"current_stage_progress": 101})
    assert bad.status_code == 400
    assert bad.json()["error"]["details"][0]["field"] == "body.current_stage_progress"

    for level, title in ((20, "started"), (40, "failed farm")):
        await client.post(f"/api/v1/runs/{run_id}/log-messages", json={
            "time_stamp": 1000 + level, "source": "sp", "log_level": level, "title": title,
        })
    errors = await client.get(f"/api/v1/runs/{run_id}/log-messages", params={"min_level": 30})
    assert [m["title"] for m in errors.json()] == ["failed farm"]

    listed = (await client.get(f"/api/v1/scenarios/{scenario['id']}")).json()
    assert [r["id"] for r in listed["runs"]] == [run_id]

    assert (await client.delete(f"/api/v1/runs/{run_id}")).status_code == 204
    assert (await client.get(f"/api/v1/runs/{run_id}")).status_code == 404


async def test_run_for_unknown_scenario_is_404(client):
    response = await client.post("/api/v1/runs", json={"simulation_scenario_id": 999})
    assert response.status_code == 404


async def test_cascade_delete_scenario_removes_copy(client, seeded_population, test_db):
    synthetic = await _synthetic(client, seeded_population)
    scenario = (await client.post(
        "/api/v1/scenarios", json={"synthetic_population_id": synthetic["id"]},
    )).json()["scenario"]
    assert await _population_count(test_db) == 2

    response = await client.delete(f"/api/v1/scenarios/{scenario['id']}", params={"cascade": True})

    assert response.status_code == 204
    assert await _population_count(test_db) == 1

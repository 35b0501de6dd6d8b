"""Policy, product group and FADN routes.

Invariants:
    - Policy identifiers and product group names are unique per population
    - FADN CSV import upserts by FADN code
    - The "Arable" category follows the strict majority of related FADN products
"""

FADN_CSV = (
    "FADN code,Crop description,Arable\n"
    "10110,Common wheat,true\n"
    "10120,Durum wheat,true\n"
    "10900,Forest,false\n"
)


async def test_policies_filtered_by_active_year(client, seeded_population):
    pid = seeded_population.population_id
    everything = await client.get(f"/api/v1/populations/{pid}/policies")
    active = await client.get(f"/api/v1/populations/{pid}/policies", params={"active_in": 2020})

    assert len(everything.json()) == 3
    assert {p["policy_identifier"] for p in active.json()} == {"BASIC", "FOREST_AID"}


async def test_duplicate_policy_identifier_is_conflict(client, seeded_population):
    pid = seeded_population.population_id
    response = await client.post(
        f"/api/v1/populations/{pid}/policies", json={"policy_identifier": "BASIC"},
    )
    assert response.status_code == 409


async def test_relation_with_foreign_group_is_404(client, seeded_population):
    other = (await client.post("/api/v1/populations", json={})).json()["id"]
    group = (await client.post(
        f"/api/v1/populations/{other}/product-groups", json={"name": "RYE"},
    )).json()

    response = await client.post(
        f"/api/v1/populations/{seeded_population.population_id}/policy-group-relations",
        json={"policy_id": seeded_population.policies["BASIC"], "product_group_id": group["id"]},
    )
    assert response.status_code == 404


async def test_fadn_csv_import_upserts(client):
    first = await client.post("/api/v1/fadn-products/import", content=FADN_CSV.encode())
    assert first.json() == {"created": 3, "updated": 0}

    changed = FADN_CSV.replace("10900,Forest,false", "10900,Forest land,yes")
    second = await client.post("/api/v1/fadn-products/import", content=("\ufeff" + changed).encode())
    assert second.json() == {"created": 0, "updated": 3}

    products = {p["fadn_identifier"]: p for p in (await client.get("/api/v1/fadn-products")).json()}
    assert products["10900"]["description"] == "Forest land"
    assert products["10900"]["arable"] is True


async def test_fadn_csv_with_bad_row_is_rejected(client):
    response = await client.post(
        "/api/v1/fadn-products/import",
        content=b"fadn code,crop description,arable\n1,Oats,perhaps\n",
    )
    assert response.status_code == 400
    assert "line 2" in response.json()["error"]["message"]


async def test_arable_update_from_fadn_relations(client, seeded_population):
    """WHEAT relates to two arable products and one non-arable: it becomes arable."""
    pid = seeded_population.population_id
    await client.post("/api/v1/fadn-products/import", content=FADN_CSV.encode())
    products = {p["fadn_identifier"]: p["id"] for p in (await client.get("/api/v1/fadn-products")).json()}

    for code, group in (("10110", "WHEAT"), ("10120", "WHEAT"), ("10900", "WHEAT"), ("10900", "FORESTRY")):
        response = await client.post(
            f"/api/v1/populations/{pid}/fadn-product-relations",
            json={"product_group_id": seeded_population.groups[group], "fadn_product_id": products[code]},
        )
        assert response.status_code == 201

    summary = await client.post(f"/api/v1/populations/{pid}/product-groups/arable")
    assert summary.json() == {"product_groups": 3, "arable": ["WHEAT"]}

    groups = {g["name"]: g for g in (await client.get(f"/api/v1/populations/{pid}/product-groups")).json()}
    assert groups["WHEAT"]["model_specific_categories"] == ["Arable"]
    assert groups["FORESTRY"]["model_specific_categories"] == ["Other"]
    assert groups["DAIRY"]["model_specific_categories"] == []


async def test_subsidy_for_foreign_policy_is_404(client, seeded_population):
    other = (await client.post("/api/v1/populations", json={})).json()["id"]
    policy = (await client.post(
        f"/api/v1/populations/{other}/policies", json={"policy_identifier": "X"},
    )).json()
    response = await client.post(
        f"/api/v1/farms/{seeded_population.farms[0]}/subsidies",
        json={"year_id": seeded_population.years[2020], "policy_id": policy["id"], "value": 1.0},
    )
    assert response.status_code == 404

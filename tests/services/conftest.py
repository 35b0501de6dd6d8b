"""Service test fixtures — async DB, FastAPI test client and a seeded population.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_settings overridden: no simulation manager is ever contacted
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - seeded_population inserts ORM rows directly: tests exercise one route at a time
      without depending on the CRUD routes that would otherwise build the data
"""

from dataclasses import dataclass, field

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from farmdata.config import Settings, get_settings
from farmdata.core.domain_types import ProductType
from farmdata.db.base import Base
from farmdata.infrastructure.database import get_db, DatabaseSessionManager
from farmdata.models import (
    AgriculturalProduction, ClosingValFarmValue, Farm, FarmYearSubsidy,
    GreeningFarmYearData, HolderFarmYearData, LandRent, LivestockProduction, Policy,
    PolicyGroupRelation, Population, ProductGroup, Year,
)
import farmdata.infrastructure.database as db_module
from farmdata.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        simulation_manager_base=None,
        duplication_batch_size=2,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, test_settings):
    """FastAPI test client with DB and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@dataclass
class Seed:
    """Ids of the rows inserted by seeded_population."""
    population_id: int
    years: dict[int, int]
    groups: dict[str, int]
    policies: dict[str, int]
    farms: list[int]
    crops: dict[tuple[int, str], int] = field(default_factory=dict)


@pytest.fixture
async def seeded_population(test_db) -> Seed:
    """Population with years 2020/2021 and complete 2020 data for three farms.

    Farms 0 and 1 share region 100, farm 2 is alone in region 200. Farm 0 also grows
    FORESTRY (an "Other" group); farm 1 keeps the dairy herd; farm 1 rents land to farm 2.
    """
    population = Population(description="Test population")
    test_db.add(population)
    await test_db.flush()
    pid = population.id

    years = {n: Year(year_number=n, population_id=pid) for n in (2020, 2021)}
    groups = {
        "WHEAT": ProductGroup(name="WHEAT", population_id=pid, model_specific_categories=[]),
        "DAIRY": ProductGroup(
            name="DAIRY", population_id=pid, product_type=ProductType.LIVESTOCK,
            model_specific_categories=[],
        ),
        "FORESTRY": ProductGroup(
            name="FORESTRY", population_id=pid, model_specific_categories=["Other"],
        ),
    }
    policies = {
        "BASIC": Policy(
            policy_identifier="BASIC", is_coupled=True, population_id=pid,
            start_year_number=2019, end_year_number=2025,
        ),
        "FOREST_AID": Policy(
            policy_identifier="FOREST_AID", is_coupled=True, population_id=pid,
            start_year_number=2019, end_year_number=2025,
        ),
        "EXPIRED": Policy(
            policy_identifier="EXPIRED", population_id=pid,
            start_year_number=2000, end_year_number=2010,
        ),
    }
    farms = [
        Farm(farm_code=f"F{i}", population_id=pid, region_level_1="R1", region_level_2="R2",
             region_level_3=region, technical_economic_orientation=15)
        for i, region in enumerate((100, 100, 200))
    ]
    test_db.add_all([*years.values(), *groups.values(), *policies.values(), *farms])
    await test_db.flush()

    test_db.add_all([
        PolicyGroupRelation(
            policy_id=policies["BASIC"].id, product_group_id=groups["WHEAT"].id,
            population_id=pid, economic_compensation=100.0,
        ),
        PolicyGroupRelation(
            policy_id=policies["FOREST_AID"].id, product_group_id=groups["FORESTRY"].id,
            population_id=pid, economic_compensation=50.0,
        ),
    ])

    y2020 = years[2020].id
    seed = Seed(
        population_id=pid,
        years={n: y.id for n, y in years.items()},
        groups={name: g.id for name, g in groups.items()},
        policies={name: p.id for name, p in policies.items()},
        farms=[f.id for f in farms],
    )
    for farm in farms:
        test_db.add_all([
            ClosingValFarmValue(
                farm_id=farm.id, year_id=y2020, agricultural_land_value=2000.0,
                agricultural_land_area=20.0, total_current_assets=1000.0,
                gross_farm_income=400.0, taxes=40.0, depreciation=10.0,
                long_and_medium_term_loans=300.0,
            ),
            HolderFarmYearData(
                farm_id=farm.id, year_id=y2020, holder_age=50, holder_family_members=3,
                holder_successors=1, holder_successors_age=20,
            ),
            FarmYearSubsidy(
                farm_id=farm.id, year_id=y2020, policy_id=policies["BASIC"].id, value=100.0,
            ),
        ])
        wheat = AgriculturalProduction(
            farm_id=farm.id, year_id=y2020, product_group_id=groups["WHEAT"].id,
            cultivated_area=10.0, quantity_sold=100.0, value_sales=200.0,
            selling_price=2.0, variable_costs=0.5, land_value=1000.0,
        )
        test_db.add(wheat)
        await test_db.flush()
        seed.crops[(farm.id, "WHEAT")] = wheat.id

    forestry = AgriculturalProduction(
        farm_id=farms[0].id, year_id=y2020, product_group_id=groups["FORESTRY"].id,
        cultivated_area=5.0, value_sales=50.0,
    )
    test_db.add_all([
        forestry,
        LivestockProduction(
            farm_id=farms[1].id, year_id=y2020, product_group_id=groups["DAIRY"].id,
            number_of_animals=12.0, dairy_cows=10, number_animals_rearing_breading=2.0,
            milk_total_production=1100.0, milk_production_sold=1000.0,
            milk_total_sales=400.0, milk_variable_costs=0.1, variable_costs=0.1,
        ),
        GreeningFarmYearData(farm_id=farms[0].id, year_id=y2020, greening_surface=3.0),
        LandRent(
            origin_farm_id=farms[1].id, destination_farm_id=farms[2].id, year_id=y2020,
            rent_value=50.0, rent_area=1.0,
        ),
    ])
    await test_db.commit()
    seed.crops[(farms[0].id, "FORESTRY")] = forestry.id
    return seed

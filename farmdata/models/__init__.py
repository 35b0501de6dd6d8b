"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Population is the aggregate root; every farm-year row is scoped by farm and year

Design Decisions:
    - One file per entity (closely coupled families share a file: FADN, simulation)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from farmdata.models.population import Population  # noqa: F401
from farmdata.models.year import Year  # noqa: F401
from farmdata.models.farm import Farm  # noqa: F401
from farmdata.models.agricultural_production import AgriculturalProduction  # noqa: F401
from farmdata.models.livestock_production import LivestockProduction  # noqa: F401
from farmdata.models.closing_val_farm_value import ClosingValFarmValue  # noqa: F401
from farmdata.models.agro_management_decision import AgroManagementDecision  # noqa: F401
from farmdata.models.farm_year_subsidy import FarmYearSubsidy  # noqa: F401
from farmdata.models.holder_farm_year_data import HolderFarmYearData  # noqa: F401
from farmdata.models.greening_farm_year_data import GreeningFarmYearData  # noqa: F401
from farmdata.models.land_rent import LandRent  # noqa: F401
from farmdata.models.land_transaction import LandTransaction  # noqa: F401
from farmdata.models.policy import Policy  # noqa: F401
from farmdata.models.policy_group_relation import PolicyGroupRelation  # noqa: F401
from farmdata.models.product_group import ProductGroup  # noqa: F401
from farmdata.models.fadn_product import FADNProduct, FADNProductRelation  # noqa: F401
from farmdata.models.synthetic_population import SyntheticPopulation  # noqa: F401
from farmdata.models.simulation import SimulationScenario, SimulationRun, LogMessage  # noqa: F401

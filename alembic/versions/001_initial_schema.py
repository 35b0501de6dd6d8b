"""Initial schema — populations, farms, farm-year data, policies, FADN, simulations.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer, primary_key=True, autoincrement=True)


def _fk(name: str, target: str, index: bool = True) -> sa.Column:
    return sa.Column(
        name, sa.Integer, sa.ForeignKey(f"{target}.id", ondelete="CASCADE"),
        nullable=False, index=index,
    )


def _float(name: str) -> sa.Column:
    return sa.Column(name, sa.Float, nullable=False, server_default="0")


def _int(name: str, default: str = "0", type_=sa.Integer) -> sa.Column:
    return sa.Column(name, type_, nullable=False, server_default=default)


CLOSING_VALUE_COLUMNS = (
    "agricultural_land_value", "agricultural_land_area", "land_improvements",
    "plantations_value", "forest_land_value", "forest_land_area", "farm_buildings_value",
    "machinery_and_equipment", "intangible_assets_tradable", "intangible_assets_non_tradable",
    "other_non_current_assets", "long_and_medium_term_loans", "total_current_assets",
    "farm_net_income", "gross_farm_income", "subsidies_on_investments",
    "vat_balance_on_investments", "total_output_crops_and_crop_production",
    "total_output_livestock_and_livestock_production", "other_outputs",
    "total_intermediate_consumption", "taxes", "vat_balance_excluding_investments",
    "fixed_assets", "depreciation", "total_external_factors", "machinery", "rent_balance",
)


def upgrade() -> None:
    op.create_table(
        "populations",
        _id(),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
    )

    op.create_table(
        "years",
        _id(),
        sa.Column("year_number", sa.Integer, nullable=False),
        _fk("population_id", "populations"),
        sa.UniqueConstraint("year_number", "population_id", name="uq_year_number_population"),
    )

    op.create_table(
        "farms",
        _id(),
        sa.Column("farm_code", sa.String(64), nullable=False),
        _int("lat", type_=sa.BigInteger),
        _int("long", type_=sa.BigInteger),
        _int("altitude", "3"),
        sa.Column("region_level_1", sa.String(64), nullable=False, server_default=""),
        sa.Column("region_level_1_name", sa.String(255), nullable=True),
        sa.Column("region_level_2", sa.String(64), nullable=False, server_default=""),
        sa.Column("region_level_2_name", sa.String(255), nullable=True),
        _int("region_level_3", type_=sa.BigInteger),
        sa.Column("region_level_3_name", sa.String(255), nullable=True),
        _int("technical_economic_orientation"),
        _fk("population_id", "populations"),
        sa.UniqueConstraint("farm_code", "population_id", name="uq_farm_code_population"),
    )
    op.create_index("ix_farms_region_level_3", "farms", ["region_level_3"])

    op.create_table(
        "product_groups",
        _id(),
        sa.Column("name", sa.String(128), nullable=False),
        _int("product_type"),
        sa.Column("original_name_datasource", sa.String(255), nullable=True),
        sa.Column("products_included_in_original_dataset", sa.Text, nullable=True),
        _int("organic", "2"),
        sa.Column("model_specific_categories", sa.JSON, nullable=False),
        _fk("population_id", "populations"),
        sa.UniqueConstraint("name", "population_id", name="uq_product_group_name"),
    )

    op.create_table(
        "policies",
        _id(),
        sa.Column("policy_identifier", sa.String(128), nullable=False),
        sa.Column("policy_description", sa.Text, nullable=False, server_default=""),
        sa.Column("is_coupled", sa.Boolean, nullable=False, server_default=sa.false()),
        _float("economic_compensation"),
        sa.Column("model_label", sa.String(128), nullable=True),
        _int("start_year_number"),
        _int("end_year_number"),
        _fk("population_id", "populations"),
        sa.UniqueConstraint("population_id", "policy_identifier", name="uq_policy_identifier"),
    )

    op.create_table(
        "policy_group_relations",
        _id(),
        _fk("product_group_id", "product_groups"),
        _fk("policy_id", "policies"),
        _fk("population_id", "populations"),
        _float("economic_compensation"),
        sa.UniqueConstraint(
            "product_group_id", "policy_id", "population_id", name="uq_policy_group_relation",
        ),
    )

    op.create_table(
        "fadn_products",
        _id(),
        sa.Column("fadn_identifier", sa.String(64), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        _int("product_type"),
        sa.Column("arable", sa.Boolean, nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "fadn_product_relations",
        _id(),
        _fk("product_group_id", "product_groups"),
        _fk("fadn_product_id", "fadn_products"),
        _fk("population_id", "populations"),
        _float("representativeness_occurrence"),
        _float("representativeness_area"),
        _float("representativeness_value"),
        sa.UniqueConstraint(
            "product_group_id", "fadn_product_id", "population_id",
            name="uq_fadn_product_relation",
        ),
    )

    op.create_table(
        "agricultural_productions",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        _fk("product_group_id", "product_groups", index=False),
        _int("organic_production_type", "2"),
        *(_float(name) for name in (
            "cultivated_area", "irrigated_area", "crop_production", "quantity_sold",
            "quantity_used", "value_sales", "variable_costs", "land_value", "selling_price",
        )),
        sa.UniqueConstraint(
            "farm_id", "product_group_id", "year_id", name="uq_agricultural_production",
        ),
    )

    op.create_table(
        "livestock_productions",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        _fk("product_group_id", "product_groups", index=False),
        _float("number_of_animals"),
        _int("dairy_cows"),
        _int("number_of_animals_sold"),
        _float("value_sold_animals"),
        _int("number_animals_for_slaughtering"),
        *(_float(name) for name in (
            "value_slaughtered_animals", "number_animals_rearing_breading",
            "value_animals_rearing_breading", "milk_total_production", "milk_production_sold",
            "milk_total_sales", "milk_variable_costs", "wool_total_production",
            "wool_production_sold", "eggs_total_sales", "eggs_total_production",
            "eggs_production_sold", "manure_total_sales", "variable_costs", "selling_price",
        )),
        sa.UniqueConstraint(
            "farm_id", "product_group_id", "year_id", name="uq_livestock_production",
        ),
    )

    op.create_table(
        "closing_val_farm_values",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        *(_float(name) for name in CLOSING_VALUE_COLUMNS),
        sa.UniqueConstraint("farm_id", "year_id", name="uq_closing_value_farm_year"),
    )

    op.create_table(
        "agro_management_decisions",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        *(_float(name) for name in (
            "agricultural_land_area", "agricultural_land_value", "long_and_medium_term_loans",
            "total_current_assets", "average_land_value", "targeted_land_aquisition_area",
            "targeted_land_aquisition_hectar_price",
        )),
        sa.Column("retire_and_hand_over", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("farm_id", "year_id", name="uq_decision_farm_year"),
    )

    op.create_table(
        "farm_year_subsidies",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        _fk("policy_id", "policies"),
        _float("value"),
        sa.UniqueConstraint("farm_id", "year_id", "policy_id", name="uq_subsidy_farm_year_policy"),
    )

    op.create_table(
        "holder_farm_year_data",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        sa.Column("holder_age", sa.Integer, nullable=False),
        _int("holder_family_members"),
        _int("holder_successors"),
        _int("holder_successors_age"),
        _int("holder_gender", "1"),
        sa.UniqueConstraint("farm_id", "year_id", name="uq_holder_farm_year"),
    )

    op.create_table(
        "greening_farm_year_data",
        _id(),
        _fk("farm_id", "farms"),
        _fk("year_id", "years"),
        _float("greening_surface"),
        sa.UniqueConstraint("farm_id", "year_id", name="uq_greening_farm_year"),
    )

    op.create_table(
        "land_rents",
        _id(),
        _fk("origin_farm_id", "farms"),
        _fk("destination_farm_id", "farms"),
        _fk("year_id", "years"),
        _float("rent_value"),
        _float("rent_area"),
        sa.UniqueConstraint(
            "origin_farm_id", "destination_farm_id", "year_id", name="uq_land_rent",
        ),
    )

    op.create_table(
        "land_transactions",
        _id(),
        _fk("production_id", "agricultural_productions"),
        _fk("destination_farm_id", "farms"),
        _fk("year_id", "years"),
        _float("percentage"),
        _float("sale_price"),
        sa.UniqueConstraint(
            "production_id", "destination_farm_id", "year_id", name="uq_land_transaction",
        ),
        sa.CheckConstraint(
            "percentage >= 0 AND percentage <= 1", name="ck_land_transaction_percentage",
        ),
    )

    op.create_table(
        "synthetic_populations",
        _id(),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        _fk("population_id", "populations"),
        _fk("year_id", "years", index=False),
    )

    op.create_table(
        "simulation_scenarios",
        _id(),
        _fk("population_id", "populations"),
        _fk("year_id", "years", index=False),
        sa.Column("ignore_lp", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("ignore_lmm", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("compress", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("short_term_model_branch", sa.String(128), nullable=False, server_default=""),
        sa.Column("long_term_model_branch", sa.String(128), nullable=False, server_default=""),
        _int("horizon"),
        sa.Column("additional_policies", sa.JSON, nullable=False),
    )

    op.create_table(
        "simulation_runs",
        _id(),
        _fk("simulation_scenario_id", "simulation_scenarios"),
        _int("overall_status", "1"),
        _int("current_stage", "1"),
        _int("current_year"),
        sa.Column("current_substage", sa.String(255), nullable=False, server_default=""),
        _int("current_stage_progress"),
        _int("current_substage_progress"),
        sa.CheckConstraint(
            "current_stage_progress BETWEEN 0 AND 100", name="ck_run_stage_progress",
        ),
        sa.CheckConstraint(
            "current_substage_progress BETWEEN 0 AND 100", name="ck_run_substage_progress",
        ),
    )

    op.create_table(
        "log_messages",
        _id(),
        _fk("simulation_run_id", "simulation_runs"),
        sa.Column("time_stamp", sa.BigInteger, nullable=False),
        sa.Column("source", sa.String(255), nullable=False, server_default=""),
        _int("log_level", "20"),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
    )


def downgrade() -> None:
    for table in (
        "log_messages", "simulation_runs", "simulation_scenarios", "synthetic_populations",
        "land_transactions", "land_rents", "greening_farm_year_data", "holder_farm_year_data",
        "farm_year_subsidies", "agro_management_decisions", "closing_val_farm_values",
        "livestock_productions", "agricultural_productions", "fadn_product_relations",
        "fadn_products", "policy_group_relations", "policies", "product_groups", "farms",
        "years", "populations",
    ):
        op.drop_table(table)

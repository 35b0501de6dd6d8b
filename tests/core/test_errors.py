"""Error Hierarchy — verifies status codes and the REST error envelope."""

from farmdata.core.errors import (
    DataConflictError, DuplicateEntityError, EmptyResultError, ErrorCategory,
    ErrorContext, InvalidInputError, ResourceNotFoundError, ScenarioCreationError,
    SimulationManagerError,
)


def test_http_status_per_error():
    assert InvalidInputError("bad").http_status == 400
    assert EmptyResultError("nothing").http_status == 400
    assert ResourceNotFoundError("Farm", 3).http_status == 404
    assert DataConflictError("gap").http_status == 409
    assert DuplicateEntityError("Year", "2020").http_status == 409
    assert SimulationManagerError("down").http_status == 502
    assert ScenarioCreationError("copy failed").http_status == 500


def test_not_found_message_names_resource():
    error = ResourceNotFoundError("Population", 12)
    assert error.message == "Population '12' not found"
    assert error.category == ErrorCategory.RESOURCE_NOT_FOUND


def test_to_response_carries_context_ids():
    error = DataConflictError("missing closing value", ErrorContext(population_id=1, year=2021, farm_id=7))
    body = error.to_response()["error"]
    assert body["code"] == "DATA_CONFLICT"
    assert body["category"] == "conflict"
    assert body["context"]["population_id"] == 1
    assert body["context"]["year"] == 2021
    assert body["context"]["farm_id"] == 7
    assert body["context"]["simulation_run_id"] is None


def test_invalid_input_keeps_field():
    assert InvalidInputError("bad year", field="year").field == "year"

"""Tests for batch dispatch semantics."""

import pytest

from clarity_ppm_core.constants import OperationType, ResourceType
from clarity_ppm_core.dispatch.dispatcher import OperationDispatcher
from clarity_ppm_core.exceptions import (
    BackendRequestError,
    ErrorCode,
    ValidationError,
    get_correlation_id,
)
from clarity_ppm_core.schemas.item_schemas import WorkItem

from fakes import backend_failure, envelope


@pytest.fixture
def dispatcher(executor, walker):
    return OperationDispatcher(executor, walker)


def _get_project(project_id):
    return WorkItem(
        resource=ResourceType.PROJECT,
        operation=OperationType.GET,
        parameters={"projectId": project_id},
    )


class TestBatchSemantics:
    """Test ordering and failure policy across a batch."""

    def test_failure_aborts_remaining_items(self, dispatcher, transport):
        transport.queue(
            {"_internalId": 1},
            backend_failure({"_errors": [{"errorMessage": "Project not found"}]}, 404),
            {"_internalId": 3},
        )

        with pytest.raises(BackendRequestError, match="Project not found"):
            dispatcher.run([_get_project(1), _get_project(2), _get_project(3)])

        assert len(transport.requests) == 2

    def test_continue_on_fail_records_item_error(self, dispatcher, transport):
        transport.queue(
            {"_internalId": 1},
            backend_failure({"_errors": [{"errorMessage": "Project not found"}]}, 404),
            {"_internalId": 3},
        )

        results = dispatcher.run(
            [_get_project(1), _get_project(2), _get_project(3)], continue_on_fail=True
        )

        assert [r.item_index for r in results] == [0, 1, 2]
        assert results[0].record == {"_internalId": 1}
        assert results[1].record == {"error": "Project not found"}
        assert results[1].success is False
        assert results[1].error_code == ErrorCode.EXTERNAL_API_ERROR.value
        assert results[2].record == {"_internalId": 3}
        assert len(transport.requests) == 3

    def test_validation_errors_are_item_scoped(self, dispatcher, transport):
        results = dispatcher.run(
            [
                {"resource": "project", "operation": "create", "parameters": {"code": "P1"}},
                _get_project(2),
            ],
            continue_on_fail=True,
        )

        assert results[0].record == {
            "error": "Missing required fields for create operation: name"
        }
        assert results[0].error_code == ErrorCode.MISSING_REQUIRED.value
        assert results[1].success is True
        assert len(transport.requests) == 1

    def test_unknown_resource_name_is_item_scoped(self, dispatcher, transport):
        transport.queue({"_internalId": 2})

        results = dispatcher.run(
            [
                {"resource": "portfolio", "operation": "get", "parameters": {"id": 1}},
                _get_project(2),
            ],
            continue_on_fail=True,
        )

        assert [r.item_index for r in results] == [0, 1]
        assert results[0].success is False
        assert results[0].error_code == ErrorCode.INVALID_FORMAT.value
        assert results[0].record["error"].startswith("Validation failed for item: resource")
        assert results[1].record == {"_internalId": 2}
        assert len(transport.requests) == 1

    def test_unknown_operation_name_aborts_without_continue(self, dispatcher, transport):
        with pytest.raises(ValidationError, match="operation"):
            dispatcher.run(
                [
                    {"resource": "project", "operation": "archive"},
                    _get_project(2),
                ]
            )
        assert transport.requests == []

    def test_list_results_are_tagged_per_record(self, dispatcher, transport):
        transport.queue(envelope([{"code": "P1"}, {"code": "P2"}]), {"_internalId": 9})

        results = dispatcher.run(
            [
                {"resource": "project", "operation": "getMany", "parameters": {}},
                _get_project(9),
            ]
        )

        assert [(r.item_index, r.record) for r in results] == [
            (0, {"code": "P1"}),
            (0, {"code": "P2"}),
            (1, {"_internalId": 9}),
        ]

    def test_unsupported_combination_produces_no_output(self, dispatcher, transport):
        results = dispatcher.run(
            [
                {"resource": "roadmap", "operation": "delete", "parameters": {"roadmapId": 1}},
                _get_project(2),
            ]
        )

        assert [r.item_index for r in results] == [1]
        assert len(transport.requests) == 1

    def test_empty_response_body_is_an_empty_record(self, dispatcher, transport):
        transport.queue({})
        results = dispatcher.run(
            [{"resource": "team", "operation": "delete", "parameters": {"teamId": 1}}]
        )
        assert results[0].record == {}

    def test_run_batch(self, dispatcher, transport):
        transport.queue({"_internalId": 1}, {"_internalId": 2})

        results = dispatcher.run_batch("project", "get", [{"projectId": 1}, {"projectId": 2}])

        assert [r.record["_internalId"] for r in results] == [1, 2]
        assert transport.requests[1].url.endswith("/projects/2")


class TestSimplify:
    def test_simplify_strips_metadata(self, dispatcher, transport):
        transport.queue(
            envelope([{"_internalId": 1, "_self": "x", "code": "P1"}]),
        )

        results = dispatcher.run(
            [{"resource": "project", "operation": "getMany", "parameters": {"simplify": True}}]
        )

        assert results[0].record == {"_internalId": 1, "code": "P1"}


class TestCorrelationId:
    def test_batch_sets_and_clears_correlation_id(self, dispatcher, transport):
        seen = []
        original_send = transport.send

        def recording_send(request):
            seen.append(get_correlation_id())
            return original_send(request)

        transport.send = recording_send
        dispatcher.run([_get_project(1), _get_project(2)])

        assert seen[0] is not None
        assert seen[0] == seen[1]
        assert get_correlation_id() is None

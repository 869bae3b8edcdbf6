"""
Tests for the per-variant operation handlers.

Each test runs one item through the dispatcher and checks the request that
reached the transport.
"""

import pytest

from clarity_ppm_core.constants import HttpMethod
from clarity_ppm_core.dispatch.dispatcher import OperationDispatcher
from clarity_ppm_core.exceptions import ValidationError

from fakes import HOST, envelope

BASE = f"{HOST}/ppm/rest/v1"


@pytest.fixture
def dispatcher(executor, walker):
    return OperationDispatcher(executor, walker)


def run(dispatcher, resource, operation, **parameters):
    return dispatcher.execute_item(
        {"resource": resource, "operation": operation, "parameters": parameters}
    )


class TestCreateHandlers:
    """Test create operations."""

    def test_project_create_merges_additional_fields(self, dispatcher, transport):
        transport.queue({"_internalId": 1, "code": "P1"})

        result = run(
            dispatcher,
            "project",
            "create",
            code="P1",
            name="Alpha",
            additionalFields={"name": "Alpha Prime", "description": "New"},
        )

        request = transport.last_request
        assert result == {"_internalId": 1, "code": "P1"}
        assert request.method == HttpMethod.POST
        assert request.url == f"{BASE}/projects"
        assert request.body == {"code": "P1", "name": "Alpha Prime", "description": "New"}

    def test_project_create_missing_fields_sends_nothing(self, dispatcher, transport):
        with pytest.raises(ValidationError) as exc_info:
            run(dispatcher, "project", "create", code="P1")

        assert exc_info.value.message == "Missing required fields for create operation: name"
        assert transport.requests == []

    def test_task_create(self, dispatcher, transport):
        run(dispatcher, "task", "create", projectId=5000001, name="Design")

        assert transport.last_request.url == f"{BASE}/projects/5000001/tasks"
        assert transport.last_request.body == {"name": "Design"}

    def test_cost_plan_create_requires_all_fields(self, dispatcher, transport):
        with pytest.raises(ValidationError, match="investmentId, planType"):
            run(dispatcher, "costPlan", "create", name="FY25")

    def test_timesheet_create_sends_dates_as_given(self, dispatcher, transport):
        """Offset dates are not shifted onto another calendar day."""
        run(
            dispatcher,
            "timesheet",
            "create",
            resourceId=5000010,
            periodStart="2024-01-15T00:00:00+05:00",
            periodFinish="2024-01-21",
            notes="ignored",
        )

        assert transport.last_request.url == f"{BASE}/timesheets"
        assert transport.last_request.body == {
            "resourceId": 5000010,
            "periodStart": "2024-01-15T00:00:00+05:00",
            "periodFinish": "2024-01-21",
        }

    def test_timesheet_create_missing_period(self, dispatcher, transport):
        with pytest.raises(ValidationError, match="periodFinish"):
            run(dispatcher, "timesheet", "create", resourceId=5000010, periodStart="2024-01-15")
        assert transport.requests == []

    def test_integration_create_parses_json(self, dispatcher, transport):
        run(dispatcher, "integration", "create", integrationData='{"code": "INT1"}')

        assert transport.last_request.method == HttpMethod.POST
        assert transport.last_request.url == f"{BASE}/integration"
        assert transport.last_request.body == {"code": "INT1"}

    def test_integration_create_rejects_bad_json(self, dispatcher, transport):
        with pytest.raises(ValidationError):
            run(dispatcher, "integration", "create", integrationData="{oops")
        assert transport.requests == []


class TestGetHandlers:
    """Test single-record reads."""

    def test_project_get_with_options(self, dispatcher, transport):
        run(
            dispatcher,
            "project",
            "get",
            projectId=5000001,
            options={"fields": "code,name", "expand": "tasks", "links": True, "sort": "code"},
        )

        request = transport.last_request
        assert request.url == f"{BASE}/projects/5000001"
        # sort is a list option only
        assert request.query == {"fields": "code,name", "expand": "(tasks)", "links": True}

    def test_task_get_without_expand(self, dispatcher, transport):
        run(dispatcher, "task", "get", projectId=1, taskId=2, options={"expand": "x", "links": True})

        assert transport.last_request.url == f"{BASE}/projects/1/tasks/2"
        assert transport.last_request.query == {"links": True}

    def test_get_missing_id(self, dispatcher, transport):
        with pytest.raises(ValidationError, match="projectId"):
            run(dispatcher, "project", "get")

    def test_user_profile(self, dispatcher, transport):
        transport.queue({"userName": "admin"})

        assert run(dispatcher, "userProfile", "get") == {"userName": "admin"}
        assert transport.last_request.url == f"{BASE}/virtual/userProfile"
        assert transport.last_request.query is None


class TestListHandlers:
    """Test list operations."""

    def test_bounded_list_uses_default_limit(self, dispatcher, transport):
        records = [{"code": "P1"}, {"code": "P2"}]
        transport.queue(envelope(records, has_next=True))

        result = run(dispatcher, "project", "getMany", filters={"isActive": True})

        assert result == records
        assert len(transport.requests) == 1
        assert transport.last_request.query == {"filter": "(isActive = true)", "limit": 50}

    def test_explicit_limit(self, dispatcher, transport):
        transport.queue(envelope([]))
        run(dispatcher, "team", "getMany", limit=5)
        assert transport.last_request.query == {"limit": 5}

    def test_return_all_walks_pages(self, dispatcher, transport):
        transport.queue(envelope([{"id": 1}], has_next=True), envelope([{"id": 2}]))

        result = run(dispatcher, "resource", "getMany", returnAll=True, filters={"lastName": "Lee"})

        assert result == [{"id": 1}, {"id": 2}]
        assert transport.requests[0].query == {
            "filter": "(lastName = 'Lee')",
            "limit": 100,
            "offset": 0,
        }
        assert transport.requests[1].query["offset"] == 100

    def test_raw_filter_replaces_structured_filters(self, dispatcher, transport):
        run(
            dispatcher,
            "project",
            "getMany",
            filters={"filter": "(code startsWith 'PR')", "status": "APPROVED"},
        )
        assert transport.last_request.query["filter"] == "(code startsWith 'PR')"

    def test_no_filter_parameter_without_filters(self, dispatcher, transport):
        run(dispatcher, "roadmap", "getMany", options={"sort": "name"})
        assert transport.last_request.query == {"sort": "name", "limit": 50}

    def test_timesheet_status_zero_is_kept(self, dispatcher, transport):
        run(dispatcher, "timesheet", "getMany", filters={"status": 0, "resourceId": ""})
        assert transport.last_request.query["filter"] == "(status = 0)"

    def test_task_list_path(self, dispatcher, transport):
        run(dispatcher, "task", "getMany", projectId=9, filters={"milestone": False})

        assert transport.last_request.url == f"{BASE}/projects/9/tasks"
        assert transport.last_request.query["filter"] == "(milestone = false)"

    def test_cost_plans_filter(self, dispatcher, transport):
        run(
            dispatcher,
            "costPlan",
            "getMany",
            investmentIdFilter=5000001,
            filters={
                "planType": "FORECAST",
                "isPlanOfRecord": False,
                "filter": "(code startsWith 'CP')",
            },
        )

        assert transport.last_request.query["filter"] == (
            "(investmentId = 5000001) and (planType = 'FORECAST') and "
            "(isPlanOfRecord = false) and (code startsWith 'CP')"
        )

    def test_cost_plans_require_investment(self, dispatcher, transport):
        with pytest.raises(ValidationError, match="investmentIdFilter"):
            run(dispatcher, "costPlan", "getMany")

    def test_benefit_plans_filter(self, dispatcher, transport):
        run(
            dispatcher,
            "benefitPlan",
            "getMany",
            investmentId=42,
            options={"filter": "(status = 'ACTIVE')", "fields": "name"},
        )

        assert transport.last_request.query == {
            "fields": "name",
            "filter": "(investmentId = 42) and (status = 'ACTIVE')",
            "limit": 50,
        }

    def test_lookup_values(self, dispatcher, transport):
        run(
            dispatcher,
            "lookup",
            "getValues",
            lookupCode="INVESTMENT_TYPE",
            options={"isActive": False, "filter": "(code = 'A')", "sort": "name"},
        )

        assert transport.last_request.url == f"{BASE}/lookups/INVESTMENT_TYPE/lookupValues"
        assert transport.last_request.query == {
            "sort": "name",
            "filter": "(isActive = false) and (code = 'A')",
            "limit": 50,
        }

    def test_integration_list(self, dispatcher, transport):
        run(dispatcher, "integration", "getMany", options={"filter": "(code = 'X')"})
        assert transport.last_request.query == {"filter": "(code = 'X')", "limit": 50}


class TestUpdateAndDeleteHandlers:
    """Test update, delete and status transitions."""

    def test_project_update(self, dispatcher, transport):
        run(dispatcher, "project", "update", projectId=1, updateFields={"name": "Renamed"})

        assert transport.last_request.method == HttpMethod.PATCH
        assert transport.last_request.url == f"{BASE}/projects/1"
        assert transport.last_request.body == {"name": "Renamed"}

    def test_timesheet_update_uses_put(self, dispatcher, transport):
        run(dispatcher, "timesheet", "update", timesheetId=3, updateFields={"notes": "x"})
        assert transport.last_request.method == HttpMethod.PUT

    def test_integration_update_parses_json(self, dispatcher, transport):
        run(dispatcher, "integration", "update", integrationId=7, updateData='{"name": "Feed"}')

        assert transport.last_request.method == HttpMethod.PATCH
        assert transport.last_request.url == f"{BASE}/integration/7"
        assert transport.last_request.body == {"name": "Feed"}

    def test_delete(self, dispatcher, transport):
        run(dispatcher, "team", "delete", teamId=12)

        assert transport.last_request.method == HttpMethod.DELETE
        assert transport.last_request.url == f"{BASE}/teams/12"
        assert transport.last_request.body is None

    @pytest.mark.parametrize("operation, status", [("submit", 1), ("approve", 3)])
    def test_timesheet_status_transitions(self, dispatcher, transport, operation, status):
        run(dispatcher, "timesheet", operation, timesheetId=3)

        assert transport.last_request.method == HttpMethod.PUT
        assert transport.last_request.url == f"{BASE}/timesheets/3"
        assert transport.last_request.body == {"status": status}

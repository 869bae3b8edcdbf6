"""
Static operation table for the Clarity PPM adapter.

Each (resource, operation) pair the adapter supports has exactly one
OperationPlan describing the HTTP method, the endpoint template, the
parameters that must be present and the query options and filter keys it
accepts. The table is read-only for the life of the process.
"""

from dataclasses import dataclass, field
from string import Formatter
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from ..constants import HttpMethod, OperationType, ResourceType, TimesheetStatus
from ..exceptions import missing_required_fields
from ..utils.field_utils import is_blank

# Query options accepted by get/list calls
FIELDS = "fields"
EXPAND = "expand"
LINKS = "links"
SORT = "sort"

ALL_OPTIONS = (FIELDS, EXPAND, LINKS, SORT)
GET_OPTIONS = (FIELDS, EXPAND, LINKS)
GET_OPTIONS_NO_EXPAND = (FIELDS, LINKS)
LIST_OPTIONS_NO_EXPAND = (FIELDS, LINKS, SORT)


@dataclass(frozen=True)
class FilterKey:
    """
    A structured filter accepted by a list operation.

    keep_falsy keeps False/0 values (boolean flags, status codes); other keys
    are only used when truthy.
    """

    name: str
    keep_falsy: bool = False


@dataclass(frozen=True)
class OperationPlan:
    """How one (resource, operation) pair maps onto the REST API."""

    resource: ResourceType
    operation: OperationType
    method: HttpMethod
    endpoint_template: str
    required_params: Tuple[str, ...] = ()
    optional_params: Tuple[str, ...] = ()
    filter_keys: Tuple[FilterKey, ...] = ()
    fixed_body: Optional[Mapping[str, Any]] = field(default=None, compare=False, hash=False)

    @property
    def key(self) -> Tuple[ResourceType, OperationType]:
        return (self.resource, self.operation)

    @property
    def path_params(self) -> Tuple[str, ...]:
        """Parameter names substituted into the endpoint template, in order."""
        return tuple(
            name for _, name, _, _ in Formatter().parse(self.endpoint_template) if name
        )

    @property
    def is_list(self) -> bool:
        return self.operation in (OperationType.GET_MANY, OperationType.GET_VALUES)

    def render_path(self, parameters: Mapping[str, Any]) -> str:
        """
        Substitute path parameters into the endpoint template.

        Raises:
            ValidationError: If any path parameter is missing or empty
        """
        names = self.path_params
        missing = [name for name in names if is_blank(parameters.get(name))]
        if missing:
            raise missing_required_fields(self.operation.value, missing)
        return self.endpoint_template.format(**{name: parameters[name] for name in names})


def _plan(resource, operation, method, template, **kwargs) -> OperationPlan:
    return OperationPlan(resource, operation, method, template, **kwargs)


R = ResourceType
O = OperationType
M = HttpMethod

_PLANS = (
    # Project
    _plan(R.PROJECT, O.CREATE, M.POST, "/projects",
          required_params=("code", "name"), optional_params=("additionalFields",)),
    _plan(R.PROJECT, O.GET, M.GET, "/projects/{projectId}", optional_params=GET_OPTIONS),
    _plan(R.PROJECT, O.GET_MANY, M.GET, "/projects", optional_params=ALL_OPTIONS,
          filter_keys=(FilterKey("isActive", keep_falsy=True), FilterKey("manager"),
                       FilterKey("status"))),
    _plan(R.PROJECT, O.UPDATE, M.PATCH, "/projects/{projectId}",
          optional_params=("updateFields",)),
    _plan(R.PROJECT, O.DELETE, M.DELETE, "/projects/{projectId}"),
    # Task
    _plan(R.TASK, O.CREATE, M.POST, "/projects/{projectId}/tasks",
          required_params=("name",), optional_params=("additionalFields",)),
    _plan(R.TASK, O.GET, M.GET, "/projects/{projectId}/tasks/{taskId}",
          optional_params=GET_OPTIONS_NO_EXPAND),
    _plan(R.TASK, O.GET_MANY, M.GET, "/projects/{projectId}/tasks",
          optional_params=LIST_OPTIONS_NO_EXPAND,
          filter_keys=(FilterKey("milestone", keep_falsy=True), FilterKey("status"))),
    _plan(R.TASK, O.UPDATE, M.PATCH, "/projects/{projectId}/tasks/{taskId}",
          optional_params=("updateFields",)),
    _plan(R.TASK, O.DELETE, M.DELETE, "/projects/{projectId}/tasks/{taskId}"),
    # Timesheet
    _plan(R.TIMESHEET, O.CREATE, M.POST, "/timesheets",
          required_params=("resourceId", "periodStart", "periodFinish")),
    _plan(R.TIMESHEET, O.GET, M.GET, "/timesheets/{timesheetId}", optional_params=GET_OPTIONS),
    _plan(R.TIMESHEET, O.GET_MANY, M.GET, "/timesheets", optional_params=ALL_OPTIONS,
          filter_keys=(FilterKey("resourceId"), FilterKey("status", keep_falsy=True))),
    _plan(R.TIMESHEET, O.UPDATE, M.PUT, "/timesheets/{timesheetId}",
          optional_params=("updateFields",)),
    _plan(R.TIMESHEET, O.DELETE, M.DELETE, "/timesheets/{timesheetId}"),
    _plan(R.TIMESHEET, O.SUBMIT, M.PUT, "/timesheets/{timesheetId}",
          fixed_body=MappingProxyType({"status": TimesheetStatus.SUBMITTED.value})),
    _plan(R.TIMESHEET, O.APPROVE, M.PUT, "/timesheets/{timesheetId}",
          fixed_body=MappingProxyType({"status": TimesheetStatus.APPROVED.value})),
    # Resource
    _plan(R.RESOURCE, O.GET, M.GET, "/resources/{resourceId}",
          optional_params=GET_OPTIONS_NO_EXPAND),
    _plan(R.RESOURCE, O.GET_MANY, M.GET, "/resources", optional_params=LIST_OPTIONS_NO_EXPAND,
          filter_keys=(FilterKey("isActive", keep_falsy=True), FilterKey("firstName"),
                       FilterKey("lastName"), FilterKey("email"), FilterKey("resourceType"))),
    # Roadmap
    _plan(R.ROADMAP, O.CREATE, M.POST, "/roadmaps",
          required_params=("code", "name"), optional_params=("additionalFields",)),
    _plan(R.ROADMAP, O.GET, M.GET, "/roadmaps/{roadmapId}", optional_params=GET_OPTIONS),
    _plan(R.ROADMAP, O.GET_MANY, M.GET, "/roadmaps", optional_params=ALL_OPTIONS,
          filter_keys=(FilterKey("status"), FilterKey("type"), FilterKey("author"))),
    _plan(R.ROADMAP, O.UPDATE, M.PATCH, "/roadmaps/{roadmapId}",
          optional_params=("updateFields",)),
    # Team
    _plan(R.TEAM, O.CREATE, M.POST, "/teams",
          required_params=("name",), optional_params=("additionalFields",)),
    _plan(R.TEAM, O.GET, M.GET, "/teams/{teamId}", optional_params=GET_OPTIONS),
    _plan(R.TEAM, O.GET_MANY, M.GET, "/teams", optional_params=ALL_OPTIONS,
          filter_keys=(FilterKey("isActive", keep_falsy=True), FilterKey("name"))),
    _plan(R.TEAM, O.UPDATE, M.PATCH, "/teams/{teamId}", optional_params=("updateFields",)),
    _plan(R.TEAM, O.DELETE, M.DELETE, "/teams/{teamId}"),
    # Cost plan
    _plan(R.COST_PLAN, O.CREATE, M.POST, "/costPlans",
          required_params=("name", "investmentId", "planType"),
          optional_params=("additionalFields",)),
    _plan(R.COST_PLAN, O.GET, M.GET, "/costPlans/{costPlanId}", optional_params=GET_OPTIONS),
    _plan(R.COST_PLAN, O.GET_MANY, M.GET, "/costPlans",
          required_params=("investmentIdFilter",), optional_params=ALL_OPTIONS,
          filter_keys=(FilterKey("planType"), FilterKey("isPlanOfRecord", keep_falsy=True))),
    _plan(R.COST_PLAN, O.UPDATE, M.PATCH, "/costPlans/{costPlanId}",
          optional_params=("updateFields",)),
    _plan(R.COST_PLAN, O.DELETE, M.DELETE, "/costPlans/{costPlanId}"),
    # Benefit plan
    _plan(R.BENEFIT_PLAN, O.GET, M.GET, "/benefitPlans/{benefitPlanId}",
          optional_params=GET_OPTIONS_NO_EXPAND),
    _plan(R.BENEFIT_PLAN, O.GET_MANY, M.GET, "/benefitPlans",
          required_params=("investmentId",), optional_params=LIST_OPTIONS_NO_EXPAND),
    # Lookup
    _plan(R.LOOKUP, O.GET_VALUES, M.GET, "/lookups/{lookupCode}/lookupValues",
          optional_params=(FIELDS, SORT)),
    # Integration
    _plan(R.INTEGRATION, O.CREATE, M.POST, "/integration", required_params=("integrationData",)),
    _plan(R.INTEGRATION, O.GET, M.GET, "/integration/{integrationId}",
          optional_params=(FIELDS,)),
    _plan(R.INTEGRATION, O.GET_MANY, M.GET, "/integration", optional_params=(FIELDS, SORT)),
    _plan(R.INTEGRATION, O.UPDATE, M.PATCH, "/integration/{integrationId}",
          required_params=("updateData",)),
    # User profile
    _plan(R.USER_PROFILE, O.GET, M.GET, "/virtual/userProfile"),
)

OPERATION_PLANS: Mapping[Tuple[ResourceType, OperationType], OperationPlan] = MappingProxyType(
    {plan.key: plan for plan in _PLANS}
)


def get_plan(resource: ResourceType, operation: OperationType) -> Optional[OperationPlan]:
    """The plan for a pair, or None when the pair is not supported."""
    return OPERATION_PLANS.get((resource, operation))

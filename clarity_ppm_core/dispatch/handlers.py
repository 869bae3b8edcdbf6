"""
Operation handlers - one function per (resource, operation) variant.

Handlers are registered against the keys of the static operation table and
share the executor and pagination walker through an OperationContext. Each
handler receives its plan and the item's parameters and returns either a
single record or a list of records.

Example handler:
```python
@handler((ResourceType.TIMESHEET, OperationType.SUBMIT))
def submit_timesheet(context, plan, params):
    return context.executor.execute(
        plan.method, plan.render_path(params.data), dict(plan.fixed_body)
    )
```
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..client.pagination import PaginationWalker
from ..client.request_executor import RequestExecutor
from ..config import get_config
from ..constants import OperationType, ResourceType
from ..exceptions import missing_required_fields
from ..utils.field_utils import is_blank, validate_required_fields
from ..utils.filter_utils import build_filter_expression, combine_filter_expressions
from ..utils.json_utils import parse_json_parameter
from .operation_plan import OPERATION_PLANS, OperationPlan
from .query_builder import RAW_FILTER_KEY, build_list_filter, build_options_query, select_filter_values

HandlerResult = Union[Dict[str, Any], List[Any]]
HandlerKey = Tuple[ResourceType, OperationType]


@dataclass
class OperationContext:
    """Collaborators shared by every handler in a batch."""

    executor: RequestExecutor
    walker: PaginationWalker
    default_limit: Optional[int] = None

    def __post_init__(self):
        if self.default_limit is None:
            self.default_limit = get_config().pagination.default_limit


class ParameterBag:
    """Read access to one item's parameters."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    def get(self, name: str, default: Any = None) -> Any:
        value = self.data.get(name)
        return default if value is None else value

    def require(self, name: str, operation: str) -> Any:
        """
        Value of a required parameter.

        Raises:
            ValidationError: If the parameter is missing or empty
        """
        value = self.data.get(name)
        if is_blank(value):
            raise missing_required_fields(operation, [name])
        return value

    def collection(self, name: str) -> Dict[str, Any]:
        """A nested parameter collection (options, filters, additionalFields...)."""
        value = self.data.get(name)
        return dict(value) if isinstance(value, Mapping) else {}


Handler = Callable[[OperationContext, OperationPlan, ParameterBag], HandlerResult]

_HANDLERS: Dict[HandlerKey, Handler] = {}


def handler(*keys: HandlerKey) -> Callable[[Handler], Handler]:
    """Register a function as the handler for one or more plan keys."""

    def decorator(func: Handler) -> Handler:
        for key in keys:
            if key not in OPERATION_PLANS:
                raise KeyError(f"No operation plan for {key[0].value}.{key[1].value}")
            _HANDLERS[key] = func
        return func

    return decorator


def get_handler(resource: ResourceType, operation: OperationType) -> Optional[Handler]:
    return _HANDLERS.get((resource, operation))


def registered_keys() -> List[HandlerKey]:
    return list(_HANDLERS)


def _keys_for(operation: OperationType, *resources: ResourceType) -> List[HandlerKey]:
    return [(resource, operation) for resource in resources]


def _fetch_list(
    context: OperationContext,
    plan: OperationPlan,
    path: str,
    params: ParameterBag,
    query: Dict[str, Any],
) -> List[Any]:
    if params.get("returnAll", False):
        return context.walker.fetch_all(plan.method, path, query=query)
    limit = params.get("limit") or context.default_limit
    return context.walker.fetch_page(plan.method, path, limit, query=query)


# Generic variants


@handler(
    *_keys_for(
        OperationType.CREATE,
        ResourceType.PROJECT,
        ResourceType.TASK,
        ResourceType.ROADMAP,
        ResourceType.TEAM,
        ResourceType.COST_PLAN,
    )
)
def create_record(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    """Required fields merged with additionalFields; caller values win."""
    path = plan.render_path(params.data)
    validate_required_fields(params.data, plan.required_params, plan.operation.value)

    body = {name: params.data[name] for name in plan.required_params}
    body.update(params.collection("additionalFields"))
    return context.executor.execute(plan.method, path, body)


@handler(
    *_keys_for(
        OperationType.GET,
        ResourceType.PROJECT,
        ResourceType.TASK,
        ResourceType.TIMESHEET,
        ResourceType.RESOURCE,
        ResourceType.ROADMAP,
        ResourceType.TEAM,
        ResourceType.COST_PLAN,
        ResourceType.BENEFIT_PLAN,
        ResourceType.INTEGRATION,
        ResourceType.USER_PROFILE,
    )
)
def get_record(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    query = build_options_query(params.collection("options"), plan.optional_params)
    return context.executor.execute(plan.method, path, query=query)


@handler(
    *_keys_for(
        OperationType.GET_MANY,
        ResourceType.PROJECT,
        ResourceType.TASK,
        ResourceType.TIMESHEET,
        ResourceType.RESOURCE,
        ResourceType.ROADMAP,
        ResourceType.TEAM,
    )
)
def list_records(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    query = build_options_query(params.collection("options"), plan.optional_params)

    filter_expression = build_list_filter(params.collection("filters"), plan.filter_keys)
    if filter_expression:
        query[RAW_FILTER_KEY] = filter_expression

    return _fetch_list(context, plan, path, params, query)


@handler(
    *_keys_for(
        OperationType.UPDATE,
        ResourceType.PROJECT,
        ResourceType.TASK,
        ResourceType.TIMESHEET,
        ResourceType.ROADMAP,
        ResourceType.TEAM,
        ResourceType.COST_PLAN,
    )
)
def update_record(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    return context.executor.execute(plan.method, path, params.collection("updateFields"))


@handler(
    *_keys_for(
        OperationType.DELETE,
        ResourceType.PROJECT,
        ResourceType.TASK,
        ResourceType.TIMESHEET,
        ResourceType.TEAM,
        ResourceType.COST_PLAN,
    )
)
def delete_record(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    return context.executor.execute(plan.method, path)


# Timesheet


@handler((ResourceType.TIMESHEET, OperationType.CREATE))
def create_timesheet(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    """Only resourceId and the period dates are sent, exactly as given."""
    validate_required_fields(params.data, plan.required_params, plan.operation.value)
    body = {name: params.data[name] for name in ("resourceId", "periodStart", "periodFinish")}
    return context.executor.execute(plan.method, plan.render_path(params.data), body)


@handler(
    (ResourceType.TIMESHEET, OperationType.SUBMIT),
    (ResourceType.TIMESHEET, OperationType.APPROVE),
)
def set_timesheet_status(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    """Fixed status transition; the backend validates it."""
    path = plan.render_path(params.data)
    return context.executor.execute(plan.method, path, dict(plan.fixed_body))


# Cost and benefit plans


@handler((ResourceType.COST_PLAN, OperationType.GET_MANY))
def list_cost_plans(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    """Investment filter always applies; planType, isPlanOfRecord and a raw filter narrow it."""
    investment_id = params.require("investmentIdFilter", plan.operation.value)
    filters = params.collection("filters")

    structured = {"investmentId": investment_id}
    structured.update(select_filter_values(filters, plan.filter_keys))

    query = build_options_query(params.collection("options"), plan.optional_params)
    query[RAW_FILTER_KEY] = combine_filter_expressions(
        build_filter_expression(structured), filters.get(RAW_FILTER_KEY)
    )
    return _fetch_list(context, plan, plan.render_path(params.data), params, query)


@handler((ResourceType.BENEFIT_PLAN, OperationType.GET_MANY))
def list_benefit_plans(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    investment_id = params.require("investmentId", plan.operation.value)
    options = params.collection("options")

    query = build_options_query(options, plan.optional_params)
    query[RAW_FILTER_KEY] = combine_filter_expressions(
        build_filter_expression({"investmentId": investment_id}), options.get(RAW_FILTER_KEY)
    )
    return _fetch_list(context, plan, plan.render_path(params.data), params, query)


# Lookups


@handler((ResourceType.LOOKUP, OperationType.GET_VALUES))
def get_lookup_values(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    options = params.collection("options")

    query = build_options_query(options, plan.optional_params)
    is_active = options.get("isActive")
    filter_expression = combine_filter_expressions(
        build_filter_expression({"isActive": is_active}) if is_active is not None else "",
        options.get(RAW_FILTER_KEY),
    )
    if filter_expression:
        query[RAW_FILTER_KEY] = filter_expression

    return _fetch_list(context, plan, path, params, query)


# Integration objects


@handler((ResourceType.INTEGRATION, OperationType.CREATE))
def create_integration(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    body = parse_json_parameter(
        "integrationData", params.require("integrationData", plan.operation.value)
    )
    return context.executor.execute(plan.method, plan.render_path(params.data), body)


@handler((ResourceType.INTEGRATION, OperationType.GET_MANY))
def list_integrations(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    options = params.collection("options")
    query = build_options_query(options, plan.optional_params)
    if options.get(RAW_FILTER_KEY):
        query[RAW_FILTER_KEY] = options[RAW_FILTER_KEY]
    return _fetch_list(context, plan, plan.render_path(params.data), params, query)


@handler((ResourceType.INTEGRATION, OperationType.UPDATE))
def update_integration(context: OperationContext, plan: OperationPlan, params: ParameterBag):
    path = plan.render_path(params.data)
    body = parse_json_parameter("updateData", params.require("updateData", plan.operation.value))
    return context.executor.execute(plan.method, path, body)

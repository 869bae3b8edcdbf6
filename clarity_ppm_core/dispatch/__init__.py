"""Operation dispatch: the static operation table, handlers and batch runner."""

from .dispatcher import OperationDispatcher
from .handlers import OperationContext, ParameterBag, get_handler, handler, registered_keys
from .operation_plan import OPERATION_PLANS, FilterKey, OperationPlan, get_plan
from .query_builder import build_list_filter, build_options_query

__all__ = [
    "OperationDispatcher",
    "OperationContext",
    "ParameterBag",
    "get_handler",
    "handler",
    "registered_keys",
    "OPERATION_PLANS",
    "FilterKey",
    "OperationPlan",
    "get_plan",
    "build_list_filter",
    "build_options_query",
]

"""
Batch dispatcher for Clarity PPM operations.

Runs a batch of work items strictly in input order, one at a time, and folds
each item's records or error into an item-indexed result list.
"""

import uuid
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ..client.pagination import PaginationWalker
from ..client.request_executor import RequestExecutor
from ..constants import LogContextKey, OperationType, ResourceType
from ..exceptions import (
    BaseError,
    ErrorCode,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
    validation_failed,
)
from ..schemas.item_schemas import ItemResult, WorkItem
from ..utils.field_utils import simplify_response
from ..utils.logger import get_logger
from .handlers import OperationContext, ParameterBag, get_handler
from .operation_plan import get_plan

WorkItemInput = Union[WorkItem, Mapping[str, Any]]


def _as_work_item(item: WorkItemInput) -> WorkItem:
    if isinstance(item, WorkItem):
        return item
    try:
        return WorkItem.model_validate(item)
    except PydanticValidationError as e:
        reason = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise validation_failed("item", item, reason, cause=e)


def _simplify(result: Any) -> Any:
    if isinstance(result, list):
        return [
            simplify_response(record) if isinstance(record, dict) else record for record in result
        ]
    if isinstance(result, dict):
        return simplify_response(result)
    return result


class OperationDispatcher:
    """Resolves each item to its handler and collects item-tagged results."""

    def __init__(
        self,
        executor: RequestExecutor,
        walker: Optional[PaginationWalker] = None,
        default_limit: Optional[int] = None,
    ):
        self.context = OperationContext(
            executor=executor,
            walker=walker or PaginationWalker(executor),
            default_limit=default_limit,
        )
        self.logger = get_logger()

    def run(
        self, items: Sequence[WorkItemInput], continue_on_fail: bool = False
    ) -> List[ItemResult]:
        """
        Process a batch of items.

        Args:
            items: Work items (or mappings validating as WorkItem)
            continue_on_fail: Record failures as error results instead of aborting

        Returns:
            Results in input order; list operations contribute one result per record

        Raises:
            ClarityPpmError: The first failure, when continue_on_fail is False
        """
        owns_correlation_id = get_correlation_id() is None
        if owns_correlation_id:
            set_correlation_id(str(uuid.uuid4()))

        self.logger.info(
            "Starting Clarity PPM batch",
            extra={"items": len(items), "continue_on_fail": continue_on_fail},
        )

        results: List[ItemResult] = []
        try:
            for index, item in enumerate(items):
                results.extend(self._run_item(index, item, continue_on_fail))
        finally:
            if owns_correlation_id:
                clear_correlation_id()

        self.logger.info(
            "Finished Clarity PPM batch",
            extra={
                "items": len(items),
                "results": len(results),
                "failed": sum(1 for result in results if not result.success),
            },
        )
        return results

    def run_batch(
        self,
        resource: Union[ResourceType, str],
        operation: Union[OperationType, str],
        parameter_bags: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> List[ItemResult]:
        """Run the same resource/operation over a list of parameter bags."""
        items = [
            WorkItem(
                resource=ResourceType(resource),
                operation=OperationType(operation),
                parameters=dict(parameters),
            )
            for parameters in parameter_bags
        ]
        return self.run(items, continue_on_fail=continue_on_fail)

    def execute_item(self, item: WorkItemInput) -> Any:
        """
        Run one item and return the raw handler result.

        Returns:
            A record, a list of records, or None for unsupported combinations
        """
        item = _as_work_item(item)
        plan = get_plan(item.resource, item.operation)
        item_handler = get_handler(item.resource, item.operation)

        if plan is None or item_handler is None:
            self.logger.warning(
                f"Unsupported operation {item.resource.value}.{item.operation.value}",
                extra={
                    LogContextKey.RESOURCE.value: item.resource.value,
                    LogContextKey.OPERATION.value: item.operation.value,
                },
            )
            return None

        params = ParameterBag(item.parameters)
        result = item_handler(self.context, plan, params)
        if params.get("simplify", False):
            result = _simplify(result)
        return result

    def _run_item(
        self, index: int, item: WorkItemInput, continue_on_fail: bool
    ) -> List[ItemResult]:
        try:
            result = self.execute_item(item)
        except Exception as e:
            if not continue_on_fail:
                raise

            if isinstance(e, BaseError):
                message, error_code = e.message, e.error_code
            else:
                message, error_code = str(e), ErrorCode.INTERNAL_ERROR

            if isinstance(item, WorkItem):
                resource, operation = item.resource.value, item.operation.value
            else:
                resource, operation = item.get("resource"), item.get("operation")

            self.logger.warning(
                f"Item {index} failed; continuing",
                extra={
                    LogContextKey.ITEM_INDEX.value: index,
                    LogContextKey.RESOURCE.value: resource,
                    LogContextKey.OPERATION.value: operation,
                    "error_message": message,
                },
            )
            return [ItemResult.failure_result(index, message, error_code.value)]

        if result is None:
            return []
        if isinstance(result, list):
            return [ItemResult.success_result(index, record) for record in result]
        return [ItemResult.success_result(index, result)]

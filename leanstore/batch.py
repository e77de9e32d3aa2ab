"""
Batch operations
Multiplexes logical operations into one request to the batch endpoint
and maps the response back onto them, index for index.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import pydantic

from .client import LeanCloudClient
from .exceptions import BatchRequestFailed, ValidationError
from .models import (
    BatchOutcome,
    Create,
    Get,
    GetById,
    LogicalOperation,
    OperationFailed,
    Patch,
    Success,
    Update,
)

logger = logging.getLogger(__name__)


class BatchExecutor:
    """Runs lists of logical operations against the batch endpoint"""

    def __init__(self, client: LeanCloudClient):
        self.client = client
        self.config = client.config

    async def execute_batch(self, operations: Sequence[LogicalOperation]) -> List[BatchOutcome]:
        """
        Send operations as one batch call

        Args:
            operations: Ordered logical operations

        Returns:
            One outcome per operation, in the same order. ``outcomes[i]`` is
            a ``Success`` or an ``OperationFailed`` for ``operations[i]``.

        Raises:
            BatchRequestFailed: If the call is rejected as a whole, or the
                response is not a JSON array of matching length
            ConfigurationInvalid: If a write is batched without a session token
        """
        operations = list(operations)
        for operation in operations:
            if not isinstance(operation, LogicalOperation):
                raise ValidationError(f"Unsupported batch operation: {operation!r}")
        if not operations:
            return []

        payload = {
            "requests": [op.to_request(self.config.table_name) for op in operations]
        }
        write = any(op.is_write for op in operations)

        body = await self.client.post(
            self.config.batch_endpoint,
            BatchRequestFailed,
            json=payload,
            write=write,
        )

        if not isinstance(body, list) or len(body) != len(operations):
            raise BatchRequestFailed(
                f"Malformed batch response, expected a list of {len(operations)} items",
                url=self.config.batch_endpoint,
                request={"method": "POST", "body": payload},
                body=body,
            )

        outcomes = []
        for index, item in enumerate(body):
            if isinstance(item, dict) and "success" in item:
                outcomes.append(Success(value=item["success"]))
            else:
                logger.debug("batch item %d failed: %s", index, item)
                outcomes.append(OperationFailed(index=index, error=item))

        logger.debug(
            "batch of %d done, %d failed",
            len(outcomes),
            sum(1 for outcome in outcomes if not outcome.ok),
        )
        return outcomes

    async def query_by_ids(self, ids: Iterable[Any]) -> List[BatchOutcome]:
        """
        Fetch records by their application-level ``id`` field

        A filter on ``id`` matches at most one record, so each successful
        outcome carries that record rather than the query envelope. No match
        is reported as ``OperationFailed``.
        """
        outcomes = await self.execute_batch([Get(where={"id": id_}) for id_ in ids])

        records = []
        for index, outcome in enumerate(outcomes):
            if not outcome.ok:
                records.append(outcome)
                continue
            results = outcome.value.get("results") if isinstance(outcome.value, dict) else None
            if results:
                records.append(Success(value=results[0]))
            else:
                records.append(OperationFailed(index=index, error=outcome.value))
        return records

    async def query_by_object_ids(self, object_ids: Iterable[str]) -> List[BatchOutcome]:
        """Fetch records by objectId, one direct object fetch per id"""
        operations = []
        for object_id in object_ids:
            try:
                operations.append(GetById(object_id=object_id))
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid objectId {object_id!r}: {e}")
        return await self.execute_batch(operations)

    async def batch_update(self, patches: Iterable[Union[Patch, Mapping[str, Any]]]) -> List[BatchOutcome]:
        """
        Update several objects in one call

        Args:
            patches: ``Patch`` objects or mappings like
                ``{"objectId": "...", "body": {...}}``
        """
        operations = []
        for patch in patches:
            if not isinstance(patch, Patch):
                try:
                    patch = Patch.model_validate(patch)
                except pydantic.ValidationError as e:
                    raise ValidationError(f"Invalid patch: {e}")
            operations.append(Update(object_id=patch.object_id, body=patch.body))
        return await self.execute_batch(operations)

    async def batch_create(self, items: Iterable[Dict[str, Any]]) -> List[BatchOutcome]:
        """Create one object per item in one call"""
        operations = []
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError("Items must be dictionaries")
            operations.append(Create(body=item))
        return await self.execute_batch(operations)

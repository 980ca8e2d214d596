from __future__ import annotations

from collections.abc import Sequence
from functools import partial
from typing import Any, Final, override

from anyio import to_thread
from attrs import define
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from grading_allocation.assignment.model import AssignmentSet
from grading_allocation.result.model import Result

from ..abc import AssignmentSetStore, ResultStore
from ..exceptions import DuplicateKeyError, StoreOperationError

RESULT_ID_INDEX: Final = "result_id-index"
_CONDITION_FAILED: Final = "ConditionalCheckFailedException"


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


async def _call(func: Any, /, **kwargs: Any) -> Any:
    """Run a blocking boto3 call in a worker thread."""
    try:
        return await to_thread.run_sync(partial(func, **kwargs))
    except ClientError as exc:
        if _error_code(exc) == _CONDITION_FAILED:
            raise
        raise StoreOperationError(f"DynamoDB request failed: {exc}") from exc


async def _query_all(table: Any, **kwargs: Any) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    while True:
        resp = await _call(table.query, **kwargs)
        items.extend(resp.get("Items", []))
        if "LastEvaluatedKey" not in resp:
            return items
        kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]


@define
class DynamoAssignmentSetStore(AssignmentSetStore):
    """
    Assignment sets in a table whose hash key is `assessment_id`.

    The document itself is kept as JSON in the `document` attribute.
    """

    table: Any

    @override
    async def find(self, assessment_id: str) -> AssignmentSet | None:
        resp = await _call(self.table.get_item, Key={"assessment_id": assessment_id})
        item = resp.get("Item")
        if not item:
            return None
        return AssignmentSet.model_validate_json(item["document"])

    @override
    async def insert(self, assignment_set: AssignmentSet) -> None:
        try:
            await _call(
                self.table.put_item,
                Item=self._to_item(assignment_set),
                ConditionExpression="attribute_not_exists(assessment_id)",
            )
        except ClientError as exc:
            raise DuplicateKeyError([assignment_set.assessment_id]) from exc

    @override
    async def replace(self, assignment_set: AssignmentSet) -> None:
        try:
            await _call(
                self.table.put_item,
                Item=self._to_item(assignment_set),
                ConditionExpression="attribute_exists(assessment_id)",
            )
        except ClientError as exc:
            raise StoreOperationError(
                f"No assignment set stored for {assignment_set.assessment_id}"
            ) from exc

    @override
    async def delete(self, assessment_id: str) -> bool:
        resp = await _call(
            self.table.delete_item,
            Key={"assessment_id": assessment_id},
            ReturnValues="ALL_OLD",
        )
        return bool(resp.get("Attributes"))

    @staticmethod
    def _to_item(assignment_set: AssignmentSet) -> dict[str, Any]:
        return {
            "assessment_id": assignment_set.assessment_id,
            "document": assignment_set.model_dump_json(),
        }


@define
class DynamoResultStore(ResultStore):
    """
    Results in a table keyed by (`assessment_id`, `student_id`).

    A global secondary index on `result_id` serves lookups by id.
    """

    table: Any

    @override
    async def get(self, result_id: str) -> Result | None:
        items = await _query_all(
            self.table,
            IndexName=RESULT_ID_INDEX,
            KeyConditionExpression=Key("result_id").eq(result_id),
        )
        if not items:
            return None
        return Result.model_validate_json(items[0]["document"])

    @override
    async def find_for_students(
        self, assessment_id: str, student_ids: Sequence[str]
    ) -> list[Result]:
        wanted = set(student_ids)
        items = await _query_all(
            self.table,
            KeyConditionExpression=Key("assessment_id").eq(assessment_id),
        )
        return [
            Result.model_validate_json(item["document"])
            for item in items
            if item["student_id"] in wanted
        ]

    @override
    async def insert_many(self, results: Sequence[Result]) -> None:
        # batch writes cannot carry conditions, so each row is put on its own
        duplicates: list[tuple[str, str]] = []
        for result in results:
            try:
                await _call(
                    self.table.put_item,
                    Item=self._to_item(result),
                    ConditionExpression="attribute_not_exists(student_id)",
                )
            except ClientError:
                duplicates.append(result.key)
        if duplicates:
            raise DuplicateKeyError(duplicates)

    @override
    async def replace(self, result: Result) -> None:
        try:
            await _call(
                self.table.put_item,
                Item=self._to_item(result),
                ConditionExpression="result_id = :rid",
                ExpressionAttributeValues={":rid": result.id},
            )
        except ClientError as exc:
            raise StoreOperationError(f"No result stored with id {result.id}") from exc

    @override
    async def delete_for_assessment(self, assessment_id: str) -> int:
        items = await _query_all(
            self.table,
            KeyConditionExpression=Key("assessment_id").eq(assessment_id),
            ProjectionExpression="assessment_id, student_id",
        )
        for item in items:
            await _call(
                self.table.delete_item,
                Key={
                    "assessment_id": item["assessment_id"],
                    "student_id": item["student_id"],
                },
            )
        return len(items)

    @staticmethod
    def _to_item(result: Result) -> dict[str, Any]:
        return {
            "assessment_id": result.assessment_id,
            "student_id": result.student_id,
            "result_id": result.id,
            "document": result.model_dump_json(),
        }


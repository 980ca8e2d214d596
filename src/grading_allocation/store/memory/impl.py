from __future__ import annotations

from collections.abc import Sequence
from typing import Any, override

import anyio
from attrs import define, field

from grading_allocation.assignment.model import AssignmentSet
from grading_allocation.result.model import Result

from ..abc import AssignmentSetStore, ResultStore
from ..exceptions import DuplicateKeyError, StoreOperationError


@define
class MemoryAssignmentSetStore(AssignmentSetStore):
    _documents: dict[str, AssignmentSet] = field(factory=dict, alias="documents")
    _lock: anyio.Lock = field(init=False, factory=anyio.Lock)

    @override
    async def find(self, assessment_id: str) -> AssignmentSet | None:
        doc = self._documents.get(assessment_id)
        return doc.model_copy(deep=True) if doc else None

    @override
    async def insert(self, assignment_set: AssignmentSet) -> None:
        async with self._lock:
            key = assignment_set.assessment_id
            if key in self._documents:
                raise DuplicateKeyError([key])
            self._documents[key] = assignment_set.model_copy(deep=True)

    @override
    async def replace(self, assignment_set: AssignmentSet) -> None:
        async with self._lock:
            key = assignment_set.assessment_id
            if key not in self._documents:
                raise StoreOperationError(f"No assignment set stored for {key}")
            self._documents[key] = assignment_set.model_copy(deep=True)

    @override
    async def delete(self, assessment_id: str) -> bool:
        async with self._lock:
            return self._documents.pop(assessment_id, None) is not None

    def dump(self) -> list[dict[str, Any]]:
        return [doc.model_dump(mode="json") for doc in self._documents.values()]

    @classmethod
    def load(cls, raw: Sequence[dict[str, Any]]) -> MemoryAssignmentSetStore:
        docs = [AssignmentSet.model_validate(item) for item in raw]
        return cls(documents={doc.assessment_id: doc for doc in docs})


@define
class MemoryResultStore(ResultStore):
    _documents: dict[tuple[str, str], Result] = field(factory=dict, alias="documents")
    _lock: anyio.Lock = field(init=False, factory=anyio.Lock)

    @override
    async def get(self, result_id: str) -> Result | None:
        for doc in self._documents.values():
            if doc.id == result_id:
                return doc.model_copy(deep=True)
        return None

    @override
    async def find_for_students(
        self, assessment_id: str, student_ids: Sequence[str]
    ) -> list[Result]:
        return [
            doc.model_copy(deep=True)
            for student_id in dict.fromkeys(student_ids)
            if (doc := self._documents.get((assessment_id, student_id)))
        ]

    @override
    async def insert_many(self, results: Sequence[Result]) -> None:
        duplicates: list[tuple[str, str]] = []
        async with self._lock:
            for result in results:
                if result.key in self._documents:
                    duplicates.append(result.key)
                    continue
                self._documents[result.key] = result.model_copy(deep=True)
        if duplicates:
            raise DuplicateKeyError(duplicates)

    @override
    async def replace(self, result: Result) -> None:
        async with self._lock:
            stored = self._documents.get(result.key)
            if stored is None or stored.id != result.id:
                raise StoreOperationError(f"No result stored with id {result.id}")
            self._documents[result.key] = result.model_copy(deep=True)

    @override
    async def delete_for_assessment(self, assessment_id: str) -> int:
        async with self._lock:
            keys = [key for key in self._documents if key[0] == assessment_id]
            for key in keys:
                del self._documents[key]
            return len(keys)

    def dump(self) -> list[dict[str, Any]]:
        return [doc.model_dump(mode="json") for doc in self._documents.values()]

    @classmethod
    def load(cls, raw: Sequence[dict[str, Any]]) -> MemoryResultStore:
        docs = [Result.model_validate(item) for item in raw]
        return cls(documents={doc.key: doc for doc in docs})

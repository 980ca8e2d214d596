from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final, Literal, Self

from attrs import frozen

ENV_PREFIX: Final = "GRADING_ALLOCATION_"

type StoreBackend = Literal["memory", "dynamodb"]


@frozen
class Settings:
    """Runtime configuration of the allocation services."""

    store_backend: StoreBackend = "memory"
    """Where assignment sets and results are persisted."""

    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None
    """Override the DynamoDB endpoint, e.g. for LocalStack."""

    assignment_set_table: str = "assignment_sets"
    result_table: str = "results"

    submission_concurrency: int = 4
    """Number of graders whose submissions are fetched at once when computing marking progress."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """
        Build settings from `GRADING_ALLOCATION_*` variables.

        The AWS region and endpoint also honour the standard `AWS_REGION`,
        `AWS_DEFAULT_REGION` and `AWS_ENDPOINT_URL` variables.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}", default)

        backend = get("STORE_BACKEND", "memory").lower()
        if backend not in ("memory", "dynamodb"):
            raise ValueError(f"Unsupported store backend: {backend!r}")

        region = env.get("AWS_REGION", env.get("AWS_DEFAULT_REGION", "us-east-1"))
        return cls(
            store_backend=backend,  # ty: ignore[invalid-argument-type]
            aws_region=get("AWS_REGION", region),
            aws_endpoint_url=get("AWS_ENDPOINT_URL", env.get("AWS_ENDPOINT_URL", ""))
            or None,
            assignment_set_table=get("ASSIGNMENT_SET_TABLE", "assignment_sets"),
            result_table=get("RESULT_TABLE", "results"),
            submission_concurrency=int(get("SUBMISSION_CONCURRENCY", "4")),
            log_level=get("LOG_LEVEL", "INFO").upper(),
        )

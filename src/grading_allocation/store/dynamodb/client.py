from __future__ import annotations

from typing import Any

import boto3

from grading_allocation.config import Settings


def _client_kwargs(settings: Settings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_endpoint_url:
        # e.g. http://localhost:4566 for LocalStack
        kwargs["endpoint_url"] = settings.aws_endpoint_url
    return kwargs


def dynamodb_resource(settings: Settings) -> Any:
    return boto3.resource("dynamodb", **_client_kwargs(settings))

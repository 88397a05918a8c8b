"""Inbound port for describing a video."""
from __future__ import annotations
from typing import TYPE_CHECKING, Protocol, runtime_checkable
if TYPE_CHECKING:
    from vidscribe.application.dto.describe_request import DescribeRequest
    from vidscribe.application.dto.describe_result import DescribeResult


@runtime_checkable
class DescribeVideoUseCase(Protocol):
    async def execute(self, request: DescribeRequest) -> DescribeResult: ...

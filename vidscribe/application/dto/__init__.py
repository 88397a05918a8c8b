from vidscribe.application.dto.describe_request import DescribeRequest
from vidscribe.application.dto.describe_result import DescribeResult

__all__ = ["DescribeRequest", "DescribeResult"]

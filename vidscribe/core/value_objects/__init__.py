from vidscribe.core.value_objects.cancellation import CancellationToken
from vidscribe.core.value_objects.sample_timestamps import SampleTimestamps

__all__ = ["CancellationToken", "SampleTimestamps"]

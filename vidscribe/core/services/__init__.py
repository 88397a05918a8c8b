from vidscribe.core.services.frame_sampler import DEFAULT_JPEG_QUALITY, FrameSampler, SamplerState

__all__ = [
    "DEFAULT_JPEG_QUALITY",
    "FrameSampler",
    "SamplerState",
]

from vidscribe.ports.outbound.frame_renderer_port import FrameRendererPort, RenderSurfacePort
from vidscribe.ports.outbound.video_decoder_port import DecodingSessionPort, VideoDecoderPort
from vidscribe.ports.outbound.video_describer_port import VideoDescriberPort

__all__ = [
    "VideoDecoderPort",
    "DecodingSessionPort",
    "FrameRendererPort",
    "RenderSurfacePort",
    "VideoDescriberPort",
]

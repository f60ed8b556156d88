"""Engine.IO frame, packet and payload codecs with room broadcasting."""

__version__ = "0.1.0"

__all__ = [
    "adapter_options",
    "broadcast",
    "fake_conn",
    "frame",
    "packet",
    "pauser",
    "payload",
    "payload_decoder",
    "payload_encoder",
    "payload_errors",
    "payload_util",
]
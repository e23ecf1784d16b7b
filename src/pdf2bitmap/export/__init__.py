"""Export stage: PNG encoding and output persistence."""

from .sink import encode_png, resolve_output_path, synthesize_filename, write_atomic

__all__ = [
    "encode_png",
    "resolve_output_path",
    "synthesize_filename",
    "write_atomic",
]

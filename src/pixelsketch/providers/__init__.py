"""Inference backend port.

Concrete backends (ONNX runtimes, remote services) implement
:class:`InferenceBackend` outside this package.
"""

from __future__ import annotations

from pixelsketch.providers._base import InferenceBackend

__all__ = [
    "InferenceBackend",
]

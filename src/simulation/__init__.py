"""
Synthetic decibel signal generators for the mock device.
"""

from .decibel_simulation import (
    clamp,
    UniformDecibelGenerator,
    SineWalkDecibelGenerator,
    make_generator,
)

__all__ = [
    'clamp',
    'UniformDecibelGenerator',
    'SineWalkDecibelGenerator',
    'make_generator',
]

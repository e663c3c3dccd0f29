"""
Decibel signal simulation for the mock device.

Two interchangeable generators expose ``next_decibels()``:

- UniformDecibelGenerator: independent integers in [55, 65]
- SineWalkDecibelGenerator: slowly re-parameterized sine wave plus a bounded
  random walk, giving a smooth ambient-noise-like signal in [50.0, 80.0]
"""

import math
import random
from typing import Optional

# Uniform variant bounds (inclusive)
UNIFORM_MIN_DB = 55
UNIFORM_MAX_DB = 65

# Sine-walk variant parameters
BASE_DB = 65.0
MIN_DB = 50.0
MAX_DB = 80.0
RERANDOMIZE_EVERY = 200
WALK_STEP = 0.5  # step is uniform in [-WALK_STEP/2, WALK_STEP/2)
WALK_LIMIT = 5.0


def clamp(value, low, high):
    """Limit value to the closed range [low, high]"""
    return max(low, min(high, value))


class UniformDecibelGenerator:
    """Stateless generator returning a random integer level each call."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def next_decibels(self) -> int:
        return self.rng.randint(UNIFORM_MIN_DB, UNIFORM_MAX_DB)


class SineWalkDecibelGenerator:
    """Noisy sine wave with periodic re-randomization and a bounded random walk."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.tick = 0
        self.random_offset = 0.0
        self.randomize_sine_params()

    def randomize_sine_params(self):
        """Redraw amplitude, frequency and phase uniformly"""
        self.amplitude = 10.0 + self.rng.random() * 10.0
        self.frequency = 20.0 + self.rng.random() * 40.0
        self.phase = self.rng.random() * 2 * math.pi

    def next_decibels(self) -> float:
        """
        Produce the next reading and advance the signal by one tick.

        Returns:
            Level in [50.0, 80.0], rounded to one decimal place
        """
        if self.tick % RERANDOMIZE_EVERY == 0:
            self.randomize_sine_params()

        # Smooth periodic fluctuation
        sine = self.amplitude * math.sin((self.tick + self.phase) / self.frequency)

        # Small random walk for realism, kept bounded
        self.random_offset += (self.rng.random() - 0.5) * WALK_STEP
        self.random_offset = clamp(self.random_offset, -WALK_LIMIT, WALK_LIMIT)

        decibels = clamp(BASE_DB + sine + self.random_offset, MIN_DB, MAX_DB)
        self.tick += 1

        return round(decibels, 1)


GENERATORS = {
    "sine": SineWalkDecibelGenerator,
    "uniform": UniformDecibelGenerator,
}


def make_generator(kind: str, rng: Optional[random.Random] = None):
    """Build the generator registered under ``kind`` ("sine" or "uniform")."""
    try:
        generator_cls = GENERATORS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown generator '{kind}', expected one of {sorted(GENERATORS)}"
        )
    return generator_cls(rng=rng)

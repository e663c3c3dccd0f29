#!/usr/bin/env python3
"""
Tests for the decibel signal generators.
"""

import pytest
import sys
import os
import math
import random

# Add src to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from simulation import (
    clamp,
    make_generator,
    SineWalkDecibelGenerator,
    UniformDecibelGenerator,
)


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class TestUniformGenerator:
    """Test suite for UniformDecibelGenerator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.generator = UniformDecibelGenerator(rng=random.Random(42))

    def test_values_are_integers_in_range(self):
        """Every reading is an integer between 55 and 65 inclusive."""
        readings = [self.generator.next_decibels() for _ in range(1000)]

        assert all(isinstance(value, int) for value in readings)
        assert all(55 <= value <= 65 for value in readings)

    def test_covers_whole_range(self):
        """Both bounds are reachable."""
        readings = {self.generator.next_decibels() for _ in range(1000)}
        assert readings == set(range(55, 66))


class TestSineWalkGenerator:
    """Test suite for SineWalkDecibelGenerator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.generator = SineWalkDecibelGenerator(rng=random.Random(7))

    def test_values_bounded_and_rounded(self):
        """Readings stay in [50, 80] and carry one decimal place."""
        for _ in range(5000):
            value = self.generator.next_decibels()
            assert 50.0 <= value <= 80.0
            assert abs(value * 10 - round(value * 10)) < 1e-9

    def test_tick_advances(self):
        """Each call advances the tick counter by one."""
        for expected in range(1, 6):
            self.generator.next_decibels()
            assert self.generator.tick == expected

    def test_rerandomizes_only_on_200_tick_boundaries(self):
        """Sine parameters change exactly when tick is a multiple of 200."""
        changes = []
        params = None
        for _ in range(801):
            tick = self.generator.tick
            self.generator.next_decibels()
            current = (
                self.generator.amplitude,
                self.generator.frequency,
                self.generator.phase,
            )
            if params is not None and current != params:
                changes.append(tick)
            params = current

        assert changes == [200, 400, 600, 800]

    def test_parameter_ranges(self):
        """Redrawn parameters fall in their documented ranges."""
        for _ in range(50):
            self.generator.randomize_sine_params()
            assert 10.0 <= self.generator.amplitude < 20.0
            assert 20.0 <= self.generator.frequency < 60.0
            assert 0.0 <= self.generator.phase < 2 * math.pi

    def test_random_walk_saturates_at_upper_bound(self):
        """A walk that always steps up is held at +5."""
        generator = SineWalkDecibelGenerator(rng=FixedRandom(0.999))
        for _ in range(500):
            value = generator.next_decibels()
            assert -5.0 <= generator.random_offset <= 5.0
            assert 50.0 <= value <= 80.0

        assert generator.random_offset == 5.0

    def test_random_walk_saturates_at_lower_bound(self):
        """A walk that always steps down is held at -5."""
        generator = SineWalkDecibelGenerator(rng=FixedRandom(0.0))
        for _ in range(500):
            generator.next_decibels()
            assert generator.random_offset >= -5.0

        assert generator.random_offset == -5.0

    def test_extreme_signal_is_clamped(self):
        """Peak amplitude plus walk is clamped to 80."""
        generator = SineWalkDecibelGenerator(rng=FixedRandom(0.999))
        readings = [generator.next_decibels() for _ in range(400)]

        assert max(readings) == 80.0

    def test_consecutive_readings_change_smoothly(self):
        """Between re-randomizations the signal drifts rather than jumps."""
        readings = [self.generator.next_decibels() for _ in range(199)]
        steps = [abs(b - a) for a, b in zip(readings, readings[1:])]

        # Max sine slope is amplitude / frequency (< 1) plus a 0.25 walk step
        assert max(steps) < 1.5


class TestHelpers:
    """Test generator factory and clamp helper."""

    def test_make_generator_kinds(self):
        """Factory maps mode names to generator classes."""
        assert isinstance(make_generator("sine"), SineWalkDecibelGenerator)
        assert isinstance(make_generator("uniform"), UniformDecibelGenerator)

    def test_make_generator_unknown(self):
        """Unknown modes are rejected."""
        with pytest.raises(ValueError):
            make_generator("square")

    def test_clamp(self):
        """Clamp limits values to the closed range."""
        assert clamp(90, 50, 80) == 80
        assert clamp(40, 50, 80) == 50
        assert clamp(65.5, 50, 80) == 65.5


if __name__ == "__main__":
    pytest.main([__file__])

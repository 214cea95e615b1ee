import math
from dataclasses import dataclass, fields, replace


class Config:
    # Simulation Parameters
    N_AGENTS = 30             # Number of boids
    STEPS = 2000              # Default run length (ticks)
    WIDTH = 1280.0            # Fallback viewport width
    HEIGHT = 720.0            # Fallback viewport height

    # Interaction
    NEIGHBOR_RADIUS = 200.0   # Pairs further apart than this ignore each other

    # Walls
    WALL_MARGIN = 50.0        # Distance from an edge where steering kicks in
    WALL_TURN_X = 1.0         # Velocity nudge near the left/right walls
    WALL_TURN_Y = 0.5         # Velocity nudge near the top/bottom walls

    # Speed limits
    MIN_SPEED = 0.1
    MAX_SPEED = 1.0

    @staticmethod
    def neighbor_radius_sq():
        return Config.NEIGHBOR_RADIUS ** 2

    @staticmethod
    def info():
        return (
            f"Flocking Config: N={Config.N_AGENTS}, "
            f"Arena={Config.WIDTH:.0f}x{Config.HEIGHT:.0f}, "
            f"Radius={Config.NEIGHBOR_RADIUS}"
        )


@dataclass
class Configuration:
    """
    Live-tunable flocking weights.

    Larger values mean *weaker* rules: every weight divides its term.
    Any field may be edited at any time (e.g. from a slider callback);
    the simulator takes a snapshot once per tick.
    """

    attraction: float = 100.0
    repulsion: float = 10.0
    direction: float = 10.0
    closeness: float = 20.0

    # Inspector ranges (min, max)
    BOUNDS = {
        "attraction": (1.0, 10000.0),
        "repulsion": (1.0, 1000.0),
        "direction": (1.0, 100.0),
        "closeness": (1.0, 1000.0),
    }

    def snapshot(self):
        """Return an independent copy of the current values."""
        return replace(self)

    def update(self, **values):
        for name, value in values.items():
            if name not in self.BOUNDS:
                raise AttributeError(f"Unknown configuration field: {name}")
            setattr(self, name, float(value))
        return self

    def validate(self):
        """
        Names of fields that cannot be used as divisors this tick.

        Zero, negative and non-finite values are all degenerate.
        """
        return tuple(
            f.name for f in fields(self) if not _usable(getattr(self, f.name))
        )

    def out_of_range(self):
        return tuple(
            name
            for name, (lo, hi) in self.BOUNDS.items()
            if not lo <= getattr(self, name) <= hi
        )

    def clamped(self):
        values = {}
        for name, (lo, hi) in self.BOUNDS.items():
            value = getattr(self, name)
            if math.isnan(value):
                value = lo
            values[name] = min(max(value, lo), hi)
        return replace(self, **values)


@dataclass(frozen=True)
class Viewport:
    width: float = Config.WIDTH
    height: float = Config.HEIGHT

    @property
    def is_empty(self):
        return not (self.width > 0 and self.height > 0)


def _usable(value):
    return math.isfinite(value) and value > 0

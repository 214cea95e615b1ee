import logging
import math

import numpy as np

from flocksim.config import Config, Configuration, Viewport

logger = logging.getLogger(__name__)

# Heading used wherever a zero-length vector has to be normalized
FALLBACK_HEADING = np.array([1.0, 0.0, 0.0])

FLOAT_MAX = np.finfo(float).max


def normalize_rows(vec):
    """Unit-length copy of every row. Zero rows get FALLBACK_HEADING."""
    norms = np.linalg.norm(vec, axis=1, keepdims=True)
    zero = norms.flatten() == 0
    norms[zero] = 1.0
    unit = vec / norms
    unit[zero] = FALLBACK_HEADING
    return unit


def saturate(vec):
    """In place: NaN -> 0, +/-inf -> largest finite float."""
    return np.nan_to_num(vec, copy=False, nan=0.0, posinf=FLOAT_MAX, neginf=-FLOAT_MAX)


def clamp_speed(vel, min_speed, max_speed):
    """
    Scale every row of `vel` in place so its length is within
    [min_speed, max_speed], keeping its direction.

    Rows already in range are left untouched. Lengths are measured on
    rows divided by their largest component, so huge velocities do not
    overflow to inf while being clamped.
    """
    saturate(vel)
    scale = np.max(np.abs(vel), axis=1)
    zero = scale == 0
    if np.any(zero):
        vel[zero] = FALLBACK_HEADING * min_speed
        scale[zero] = min_speed

    direction = vel / scale[:, None]
    lengths = np.linalg.norm(direction, axis=1)
    with np.errstate(over="ignore"):
        speeds = scale * lengths

    outside = (speeds < min_speed) | (speeds > max_speed)
    if np.any(outside):
        target = np.clip(speeds[outside], min_speed, max_speed)
        vel[outside] = direction[outside] * (target / lengths[outside])[:, None]
    return vel


class Flock:
    """
    Bounded 2-D boids.

    Agents live in two (N, 3) arrays, `pos` and `vel`, with z pinned at 0.
    Each tick runs the pairwise rules, steers agents off the walls and
    finally clamps them into the viewport.
    """

    def __init__(self, n=None, viewport=None, config=None, rng=None):
        self.N = Config.N_AGENTS if n is None else int(n)
        if self.N < 2:
            raise ValueError(f"A flock needs at least 2 agents, got {self.N}")

        self.config = config if config is not None else Configuration()
        self.viewport = viewport if viewport is not None else Viewport()
        self.rng = np.random.default_rng(rng)

        # Weights are divided by the number of potential neighbours
        self.scaler = float(self.N - 1)
        self.ticks = 0
        self.skipped_terms = ()
        self._viewport_missing = False

        view = self.query_viewport()
        if view is None or view.is_empty:
            view = Viewport()

        # State: Position, Velocity
        # Positions start in the lower-left quarter of the viewport
        self.pos = np.zeros((self.N, 3))
        self.pos[:, :2] = self.rng.random((self.N, 2)) * np.array(
            [view.width / 2.0, view.height / 2.0]
        )

        # Random unit headings with non-negative components
        raw = self.rng.random((self.N, 3))
        raw[:, 2] = 0.0
        self.vel = normalize_rows(raw)

    @classmethod
    def from_state(cls, pos, vel, viewport=None, config=None):
        """Build a flock from explicit positions and velocities (2 or 3 columns)."""
        pos = np.asarray(pos, dtype=float)
        vel = np.asarray(vel, dtype=float)
        if pos.shape != vel.shape or pos.ndim != 2 or pos.shape[1] not in (2, 3):
            raise ValueError(
                f"pos and vel must share an (N, 2) or (N, 3) shape, "
                f"got {pos.shape} and {vel.shape}"
            )

        flock = cls(n=pos.shape[0], viewport=viewport, config=config)
        flock.pos[:] = 0.0
        flock.vel[:] = 0.0
        flock.pos[:, : pos.shape[1]] = pos
        flock.vel[:, : vel.shape[1]] = vel
        flock.pos[:, 2] = 0.0
        flock.vel[:, 2] = 0.0
        return flock

    def __len__(self):
        return self.N

    # --- Collaborator inputs ---

    def query_viewport(self, viewport=None):
        """
        Current viewport, or None when the host has none to offer.

        `viewport` overrides the bound source for this call. The bound
        source may be a Viewport or a zero-argument callable.
        """
        source = viewport if viewport is not None else self.viewport
        view = source() if callable(source) else source

        missing = view is None or view.is_empty
        if missing and not self._viewport_missing:
            logger.warning("No usable viewport (%r), boundary phases disabled", view)
        self._viewport_missing = missing
        return view

    def degenerate_terms(self, cfg):
        """
        Rule terms that cannot be evaluated with `cfg` this tick.

        Zero or non-finite attraction trips the guard and skips the whole
        interaction phase. A negative attraction only drops cohesion.
        """
        attraction = cfg.attraction
        if attraction == 0 or not math.isfinite(attraction):
            return ("interaction",)

        bad = set(cfg.validate())
        terms = []
        if "direction" in bad:
            terms.append("alignment")
        if attraction < 0:
            terms.append("cohesion")
        if "repulsion" in bad or "closeness" in bad:
            terms.append("separation")
        return tuple(terms)

    def _report(self, skipped):
        if skipped == self.skipped_terms:
            return
        if skipped:
            logger.warning(
                "Degenerate configuration at tick %d, skipping: %s",
                self.ticks,
                ", ".join(skipped),
            )
        else:
            logger.info("Configuration usable again at tick %d", self.ticks)
        self.skipped_terms = skipped

    # --- Phases ---

    def interact(self, config=None):
        """
        Pairwise alignment, cohesion and separation, then integrate.

        Every delta is computed from the pre-tick state and applied at
        once, so the result does not depend on pair order. Tiny weights
        can overflow a delta; such velocities saturate at the largest
        finite float and the speed clamp brings them back.
        """
        cfg = (config if config is not None else self.config).snapshot()
        skipped = self.degenerate_terms(cfg)
        self._report(skipped)
        if "interaction" in skipped:
            return

        with np.errstate(over="ignore", invalid="ignore"):
            # dx[i, j] = pos[j] - pos[i]
            dx = self.pos[np.newaxis, :, :] - self.pos[:, np.newaxis, :]
            dist_sq = np.sum(dx * dx, axis=2)

            neighbors = dist_sq < Config.neighbor_radius_sq()
            np.fill_diagonal(neighbors, False)
            mask = neighbors[:, :, np.newaxis]

            delta = np.zeros_like(self.vel)

            # Alignment: drift toward the neighbour's heading
            if "alignment" not in skipped:
                dv = self.vel[np.newaxis, :, :] - self.vel[:, np.newaxis, :]
                delta += np.sum(np.where(mask, dv, 0.0), axis=1) / (
                    self.scaler * cfg.direction
                )

            # Cohesion: drift toward the neighbour's position
            if "cohesion" not in skipped:
                delta += np.sum(np.where(mask, dx, 0.0), axis=1) / (
                    self.scaler * cfg.attraction
                )

            # Separation: push away from anyone inside `closeness`
            if "separation" not in skipped:
                close = neighbors & (dist_sq < cfg.closeness ** 2)
                delta += (
                    np.sum(np.where(close[:, :, np.newaxis], -dx, 0.0), axis=1)
                    / cfg.repulsion
                )

            self.vel += delta
            saturate(self.vel)
            self.pos += self.vel
            saturate(self.pos)

    def avoid_walls(self, viewport=None):
        """Steer agents inside the wall margin back inward, then clamp speed."""
        view = self.query_viewport(viewport)
        margin = Config.WALL_MARGIN

        if view is not None and view.height > 0:
            y = self.pos[:, 1]
            low = y < margin
            high = ~low & (y > view.height - margin)
            self.vel[low, 1] += Config.WALL_TURN_Y
            self.vel[high, 1] -= Config.WALL_TURN_Y

        if view is not None and view.width > 0:
            x = self.pos[:, 0]
            low = x < margin
            high = ~low & (x > view.width - margin)
            self.vel[low, 0] += Config.WALL_TURN_X
            self.vel[high, 0] -= Config.WALL_TURN_X

        clamp_speed(self.vel, Config.MIN_SPEED, Config.MAX_SPEED)

    def confine(self, viewport=None):
        """Saturate positions into [0, width] x [0, height]. Velocity is untouched."""
        view = self.query_viewport(viewport)
        if view is None:
            return
        if view.width > 0:
            self.pos[:, 0] = np.clip(self.pos[:, 0], 0.0, view.width)
        if view.height > 0:
            self.pos[:, 1] = np.clip(self.pos[:, 1], 0.0, view.height)

    def step(self, config=None, viewport=None):
        """One simulation tick."""
        self.interact(config)
        self.avoid_walls(viewport)
        self.confine(viewport)
        self.ticks += 1

    def run(self, steps, config=None, viewport=None):
        for _ in range(steps):
            self.step(config=config, viewport=viewport)
        return self

    # --- Read-only views for hosts ---

    def positions(self):
        view = self.pos.view()
        view.flags.writeable = False
        return view

    def velocities(self):
        view = self.vel.view()
        view.flags.writeable = False
        return view

    def agents(self):
        """Yield (position, velocity) per agent, in creation order."""
        return zip(self.positions(), self.velocities())

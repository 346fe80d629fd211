"""
The optimization loop.

Each iteration samples a candidate line, rasterizes it, scores the change in
distance it would cause and draws it only when that change is strictly
negative. The running distance is updated with the same delta used for the
decision, so it always equals the true full-image distance without a rescan.

The loop runs until a CancellationToken fires. A fault in one iteration is
logged and skipped; it never ends the run.
"""

import threading

from linez.errors import LoopStoppedError, ReadOnlyBufferError
from linez.evaluator import full_distance, normalized_error, propose
from linez.models import LoopState, RunStats
from linez.raster import RasterBuffer, check_same_dimensions
from linez.rasterizer import rasterize
from linez.sampler import LineSampler, make_rng
from linez.tracer import get_tracer


class CancellationToken:
    """Cooperative stop signal shared between the loop and its controller."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def wait(self, timeout=None):
        """Block until cancelled or timeout; returns whether cancelled."""
        return self._event.wait(timeout)


class OptimizationLoop:
    """
    Owns the canvas, the running distance and the random stream of one run.

    The canvas is only written by this object. Other threads read it through
    snapshot(), which copies under the same lock that guards writes.
    """

    def __init__(self, target, canvas=None, sampler=None, rng=None, antialias=False):
        if canvas is None:
            canvas = RasterBuffer.blank(target.width, target.height)
        check_same_dimensions(target, canvas)
        if canvas.readonly:
            raise ReadOnlyBufferError("canvas must be writable")
        if not target.readonly:
            target = target.copy(readonly=True)

        self._target = target
        self._canvas = canvas
        self._sampler = sampler if sampler is not None else LineSampler()
        self._rng = rng if rng is not None else make_rng()
        self._antialias = antialias

        self._lock = threading.Lock()
        self._state = LoopState.RUNNING
        self._distance = full_distance(canvas, target)

        self._iterations = 0
        self._accepted = 0
        self._rejected = 0
        self._faults = 0

    @classmethod
    def from_config(cls, target, config):
        """Build a loop from an AppConfig."""
        return cls(
            target,
            sampler=LineSampler.from_config(config.sampler),
            rng=make_rng(config.loop.seed),
            antialias=config.sampler.antialias,
        )

    @property
    def target(self):
        return self._target

    @property
    def width(self):
        return self._target.width

    @property
    def height(self):
        return self._target.height

    @property
    def state(self):
        return self._state

    @property
    def distance(self):
        return self._distance

    @property
    def stats(self):
        with self._lock:
            return RunStats(
                iterations=self._iterations,
                accepted=self._accepted,
                rejected=self._rejected,
                faults=self._faults,
                distance=self._distance,
                normalized_error=normalized_error(self._distance, self.width, self.height),
            )

    def snapshot(self):
        """Consistent copy of the canvas pixels."""
        with self._lock:
            return self._canvas.snapshot()

    def recompute_distance(self):
        """Brute-force distance of the current canvas, for verification."""
        with self._lock:
            return full_distance(self._canvas, self._target)

    def step(self):
        """Sample and try one candidate. Returns True if it was drawn."""
        candidate = self._sampler.sample((self.width, self.height), self._rng)
        return self.try_candidate(candidate)

    def try_candidate(self, candidate):
        """
        Rasterize, score and possibly draw a given candidate.

        Errors propagate to the caller; the canvas and distance are only
        touched once every check has passed.
        """
        coverage = rasterize(candidate, self.width, self.height, antialias=self._antialias)
        coverage, delta, after = propose(coverage, candidate.color, self._canvas, self._target)

        if delta >= 0:
            with self._lock:
                self._rejected += 1
            return False

        with self._lock:
            self._canvas.scatter(coverage.xs, coverage.ys, after)
            self._distance += delta
            self._accepted += 1

        tracer = get_tracer()
        if tracer.is_enabled_for("DEBUG"):
            tracer.event(
                "Accepted line", level="DEBUG",
                start=candidate.start, end=candidate.end,
                pixels=len(coverage), delta=delta,
            )
        return True

    def _iterate(self):
        """One guarded iteration: faults are logged and counted, never raised."""
        try:
            return self.step()
        except Exception as e:
            with self._lock:
                self._faults += 1
            get_tracer().event(
                f"Skipped iteration: {type(e).__name__}: {str(e)[:100]}",
                level="WARN",
                iteration=self._iterations,
            )
            return False
        finally:
            with self._lock:
                self._iterations += 1

    def run_batch(self, count, token=None):
        """
        Run up to count iterations, stopping early if token is cancelled.

        Returns True if at least one line was drawn.
        """
        self._ensure_running()

        improved = False
        for _ in range(count):
            if token is not None and token.cancelled:
                break
            improved |= self._iterate()
        return improved

    def run(self, token):
        """
        Iterate until token is cancelled, then stop for good.

        Returns the final RunStats.
        """
        self._ensure_running()
        tracer = get_tracer()

        with tracer.span("optimize", module="loop", width=self.width, height=self.height):
            try:
                while not token.cancelled:
                    self._iterate()
            finally:
                self.stop()

            stats = self.stats
            tracer.event(
                "Loop stopped",
                iterations=stats.iterations,
                accepted=stats.accepted,
                faults=stats.faults,
                rmse=stats.normalized_error,
            )
        return stats

    def stop(self):
        """Transition to the terminal STOPPED state."""
        self._state = LoopState.STOPPED

    def _ensure_running(self):
        if self._state is LoopState.STOPPED:
            raise LoopStoppedError("optimization loop has stopped")

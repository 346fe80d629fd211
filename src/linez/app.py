"""
Driver that connects the optimization loop to a display sink.

The loop runs on a worker thread. The calling thread owns the sink: it pulls
canvas snapshots, renders them and polls for a quit request, then cancels the
loop and waits for it to finish its current iteration.
"""

import threading
import time

from linez.display import make_sink
from linez.loop import CancellationToken, OptimizationLoop
from linez.tracer import get_tracer, trace


@trace(label="run_app")
def run_app(target, config, sink=None, token=None):
    """
    Approximate target until the sink or token requests a stop.

    A new frame is pulled once at least iterations_per_frame iterations have
    run since the previous one and some of them drew a line.

    Returns the final RunStats.
    """
    tracer = get_tracer()

    loop = OptimizationLoop.from_config(target, config)
    token = token if token is not None else CancellationToken()
    sink = sink if sink is not None else make_sink(config.display)

    per_frame = max(1, config.loop.iterations_per_frame)
    refresh_ms = config.display.refresh_ms

    tracer.event(
        f"Optimizing {target.width}x{target.height} target",
        thickness=config.sampler.thickness,
        antialias=config.sampler.antialias,
        seed=config.loop.seed,
    )

    worker = threading.Thread(target=loop.run, args=(token,), name="linez-optimizer", daemon=True)

    with sink:
        sink.show(loop.snapshot())
        worker.start()

        shown_iterations = 0
        shown_accepted = 0
        last_report = time.monotonic()

        try:
            while not token.cancelled and worker.is_alive():
                stats = loop.stats
                if stats.iterations - shown_iterations >= per_frame and stats.accepted != shown_accepted:
                    sink.show(loop.snapshot())
                    shown_iterations = stats.iterations
                    shown_accepted = stats.accepted

                if sink.poll_quit(refresh_ms):
                    tracer.event("Quit requested")
                    break

                now = time.monotonic()
                if now - last_report >= config.loop.report_interval:
                    last_report = now
                    tracer.event(
                        "Progress",
                        iterations=stats.iterations,
                        accepted=stats.accepted,
                        rate=stats.acceptance_rate,
                        faults=stats.faults,
                        rmse=stats.normalized_error,
                    )
        except KeyboardInterrupt:
            tracer.event("Interrupted", level="WARN")
        finally:
            token.cancel()
            worker.join()

    return loop.stats

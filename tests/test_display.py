"""Tests for display sinks and the driver."""

import numpy as np

from linez.display import HeadlessSink, WindowSink, make_sink, prepare_frame
from linez.loop import CancellationToken


class CountingSink:
    """Sink that quits after a fixed number of polls."""

    def __init__(self, polls_before_quit):
        self.polls_before_quit = polls_before_quit
        self.polls = 0
        self.frames = []
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True
        return False

    def show(self, rgb):
        self.frames.append(rgb)

    def poll_quit(self, delay_ms=1):
        self.polls += 1
        return self.polls >= self.polls_before_quit


class InterruptingSink(CountingSink):
    """Sink whose second poll behaves like Ctrl-C."""

    def poll_quit(self, delay_ms=1):
        self.polls += 1
        if self.polls >= 2:
            raise KeyboardInterrupt
        return False


class TestPrepareFrame:
    """Tests for frame conversion."""

    def test_rgb_to_bgr(self):
        rgb = np.zeros((1, 1, 3), dtype=np.uint8)
        rgb[0, 0] = [255, 0, 10]

        assert prepare_frame(rgb)[0, 0].tolist() == [10, 0, 255]

    def test_integer_upscale(self):
        rgb = np.arange(12, dtype=np.uint8).reshape(2, 2, 3)

        frame = prepare_frame(rgb, scale=3)

        assert frame.shape == (6, 6, 3)
        assert frame[0, 0].tolist() == frame[2, 2].tolist()


class TestSinks:
    """Tests for sink selection and the headless sink."""

    def test_make_sink(self, default_config):
        assert isinstance(make_sink(default_config.display), WindowSink)

        default_config.display.headless = True
        assert isinstance(make_sink(default_config.display), HeadlessSink)

    def test_headless_never_quits(self):
        with HeadlessSink() as sink:
            sink.show(np.zeros((2, 2, 3), dtype=np.uint8))

            assert sink.poll_quit(1) is False
            assert sink.frames_shown == 1


class TestRunApp:
    """Tests for the threaded driver."""

    def test_quits_when_sink_asks(self, gradient_target, default_config):
        from linez.app import run_app

        default_config.loop.iterations_per_frame = 1
        default_config.display.refresh_ms = 1
        sink = CountingSink(polls_before_quit=5)

        stats = run_app(gradient_target, default_config, sink=sink)

        assert sink.entered and sink.exited
        assert sink.polls == 5
        assert len(sink.frames) >= 1
        assert not sink.frames[0].any()
        assert stats.faults == 0

    def test_precancelled_token(self, gradient_target, default_config):
        from linez.app import run_app

        token = CancellationToken()
        token.cancel()
        sink = CountingSink(polls_before_quit=100)

        stats = run_app(gradient_target, default_config, sink=sink, token=token)

        assert stats.iterations == 0
        assert sink.polls == 0

    def test_keyboard_interrupt_cancels(self, gradient_target, default_config):
        from linez.app import run_app

        default_config.display.refresh_ms = 1
        token = CancellationToken()
        sink = InterruptingSink(polls_before_quit=100)

        run_app(gradient_target, default_config, sink=sink, token=token)

        assert token.cancelled
        assert sink.exited

    def test_frames_are_consistent_snapshots(self, gradient_target, default_config):
        """Every frame handed to the sink is an independent copy."""
        from linez.app import run_app

        default_config.loop.iterations_per_frame = 1
        default_config.loop.seed = 3
        default_config.display.refresh_ms = 1
        sink = CountingSink(polls_before_quit=50)

        run_app(gradient_target, default_config, sink=sink)

        ids = {id(frame) for frame in sink.frames}
        assert len(ids) == len(sink.frames)
        assert all(frame.shape == (24, 32, 3) for frame in sink.frames)


import numpy as np
import pytest

from gifplayback.core import DisposalMethod, FrameRect, RawFrame
from gifplayback.core.compositor import compute_canvas_bounds, resolve, resolve_all
from gifplayback.core.errors import InvalidAnimationError

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


def solid(color, disposal, width=2, height=2, x=0, y=0) -> RawFrame:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return RawFrame(pixels=pixels, rect=FrameRect(x, y, width, height), disposal=disposal)


def with_pixel(frame: RawFrame, x: int, y: int, color) -> RawFrame:
    pixels = frame.pixels.copy()
    pixels[y, x] = color
    return RawFrame(pixels=pixels, rect=frame.rect, disposal=frame.disposal)


def all_pixels(frame):
    return {frame.pixel(x, y) for y in range(frame.height) for x in range(frame.width)}


class TestDisposalTable:
    def test_documented_three_frame_sequence(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            with_pixel(solid(GREEN, DisposalMethod.DO_NOT_DISPOSE), 0, 0, CLEAR),
            solid(CLEAR, DisposalMethod.RESTORE_BACKGROUND),
        ]
        resolved = resolve(frames, 2, 2)

        assert all_pixels(resolved[0]) == {RED}
        assert resolved[1].pixel(0, 0) == RED
        assert resolved[1].pixel(1, 0) == GREEN
        assert resolved[1].pixel(0, 1) == GREEN
        assert resolved[1].pixel(1, 1) == GREEN
        assert all_pixels(resolved[2]) == {CLEAR}

    def test_none_ignores_previous_content(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            with_pixel(solid(GREEN, DisposalMethod.NONE), 1, 1, CLEAR),
        ]
        resolved = resolve(frames, 2, 2)
        assert resolved[1].pixel(1, 1) == CLEAR
        assert resolved[1].pixel(0, 0) == GREEN

    def test_restore_background_uses_first_frame_when_it_is_not_disposed(self):
        frames = [
            solid(RED, DisposalMethod.DO_NOT_DISPOSE),
            with_pixel(solid(GREEN, DisposalMethod.RESTORE_BACKGROUND), 0, 0, CLEAR),
        ]
        resolved = resolve(frames, 2, 2)
        assert resolved[1].pixel(0, 0) == RED
        assert resolved[1].pixel(1, 1) == GREEN

    def test_restore_background_keeps_transparency_otherwise(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            solid(BLUE, DisposalMethod.DO_NOT_DISPOSE),
            with_pixel(solid(GREEN, DisposalMethod.RESTORE_BACKGROUND), 1, 0, CLEAR),
        ]
        resolved = resolve(frames, 2, 2)
        assert resolved[2].pixel(1, 0) == CLEAR
        assert resolved[2].pixel(0, 0) == GREEN

    def test_restore_previous_reads_last_non_disposed_raw_frame(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            with_pixel(solid(BLUE, DisposalMethod.RESTORE_PREVIOUS), 0, 0, CLEAR),
            solid(CLEAR, DisposalMethod.RESTORE_PREVIOUS),
            solid(GREEN, DisposalMethod.DO_NOT_DISPOSE),
            solid(CLEAR, DisposalMethod.RESTORE_PREVIOUS),
        ]
        resolved = resolve(frames, 2, 2)
        assert resolved[1].pixel(0, 0) == RED
        assert resolved[1].pixel(1, 0) == BLUE
        assert all_pixels(resolved[2]) == {RED}
        assert all_pixels(resolved[4]) == {GREEN}

    def test_restore_previous_after_restore_background_reads_that_frame(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            solid(GREEN, DisposalMethod.RESTORE_BACKGROUND),
            solid(CLEAR, DisposalMethod.RESTORE_PREVIOUS),
        ]
        resolved = resolve(frames, 2, 2)
        assert all_pixels(resolved[2]) == {GREEN}

    def test_restoring_frames_leave_the_accumulation_untouched(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            solid(GREEN, DisposalMethod.RESTORE_BACKGROUND),
            solid(BLUE, DisposalMethod.RESTORE_PREVIOUS),
            solid(CLEAR, DisposalMethod.DO_NOT_DISPOSE),
        ]
        resolved = resolve(frames, 2, 2)
        assert all_pixels(resolved[3]) == {RED}

    def test_do_not_dispose_accumulates_over_several_frames(self):
        first = solid(CLEAR, DisposalMethod.DO_NOT_DISPOSE)
        frames = [
            with_pixel(first, 0, 0, RED),
            with_pixel(solid(CLEAR, DisposalMethod.DO_NOT_DISPOSE), 1, 0, GREEN),
            with_pixel(solid(CLEAR, DisposalMethod.DO_NOT_DISPOSE), 0, 1, BLUE),
        ]
        resolved = resolve(frames, 2, 2)
        assert resolved[2].pixel(0, 0) == RED
        assert resolved[2].pixel(1, 0) == GREEN
        assert resolved[2].pixel(0, 1) == BLUE
        assert resolved[2].pixel(1, 1) == CLEAR

    def test_partial_frame_is_placed_at_its_rectangle(self):
        frames = [
            solid(RED, DisposalMethod.NONE),
            solid(GREEN, DisposalMethod.DO_NOT_DISPOSE, width=1, height=1, x=1, y=1),
        ]
        bounds, resolved = resolve_all(frames)
        assert bounds == FrameRect(0, 0, 2, 2)
        assert resolved[1].pixel(1, 1) == GREEN
        assert resolved[1].pixel(0, 0) == RED


def test_resolution_is_deterministic():
    rng = np.random.default_rng(7)
    frames = []
    for index in range(8):
        pixels = rng.integers(0, 256, size=(5, 6, 4), dtype=np.uint8)
        pixels[..., 3] = np.where(rng.random((5, 6)) < 0.4, 0, pixels[..., 3])
        frames.append(RawFrame(pixels=pixels, rect=FrameRect(0, 0, 6, 5), disposal=DisposalMethod(index % 4)))

    first = [frame.to_bytes() for frame in resolve(frames, 6, 5)]
    second = [frame.to_bytes() for frame in resolve(frames, 6, 5)]
    assert first == second


@pytest.mark.parametrize("count", [1, 2, 3, 7])
def test_one_buffer_per_frame_with_identical_dimensions(count):
    frames = [solid(RED, DisposalMethod(index % 4), width=3, height=4) for index in range(count)]
    resolved = resolve(frames, 3, 4)
    assert len(resolved) == count
    assert {(frame.width, frame.height) for frame in resolved} == {(3, 4)}


def test_resolved_buffers_are_read_only():
    resolved = resolve([solid(RED, DisposalMethod.NONE)], 2, 2)
    with pytest.raises(ValueError):
        resolved[0].pixels[0, 0] = GREEN


def test_resolved_buffers_do_not_alias_raw_input():
    frame = solid(RED, DisposalMethod.NONE)
    resolved = resolve([frame], 2, 2)
    frame.pixels[:, :] = BLUE
    assert all_pixels(resolved[0]) == {RED}


def test_canvas_bounds_span_all_frames():
    frames = [
        solid(RED, DisposalMethod.NONE, width=2, height=2, x=1, y=1),
        solid(RED, DisposalMethod.NONE, width=3, height=1, x=2, y=4),
    ]
    assert compute_canvas_bounds(frames) == FrameRect(1, 1, 4, 4)


def test_canvas_bounds_reject_empty_animation():
    with pytest.raises(InvalidAnimationError):
        compute_canvas_bounds([])


def test_canvas_bounds_reject_zero_area():
    frame = RawFrame(pixels=np.zeros((0, 0, 4), dtype=np.uint8), rect=FrameRect(0, 0, 0, 0))
    with pytest.raises(InvalidAnimationError):
        compute_canvas_bounds([frame])


def test_resolve_rejects_bad_preconditions():
    with pytest.raises(InvalidAnimationError):
        resolve([], 2, 2)
    with pytest.raises(InvalidAnimationError):
        resolve([solid(RED, DisposalMethod.NONE)], 0, 2)
    mismatched = RawFrame(pixels=np.zeros((3, 3, 4), dtype=np.uint8), rect=FrameRect(0, 0, 2, 2))
    with pytest.raises(InvalidAnimationError):
        resolve([mismatched], 2, 2)


def test_unknown_disposal_code_is_invalid():
    with pytest.raises(InvalidAnimationError):
        DisposalMethod.from_code(5)
    assert DisposalMethod.from_code(3) is DisposalMethod.RESTORE_PREVIOUS


def test_raw_frame_samples_outside_rectangle_are_transparent():
    frame = solid(GREEN, DisposalMethod.NONE, width=1, height=1, x=2, y=3)
    assert frame.sample(2, 3) == GREEN
    assert frame.sample(0, 0) == CLEAR

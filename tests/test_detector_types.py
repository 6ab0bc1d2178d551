import numpy as np
import pytest

from face_verify.detectors.types import FaceRegion, select_face


def yunet_row():
    return np.array(
        [10, 20, 30, 40, 15, 30, 32, 30, 24, 40, 17, 50, 31, 50, 0.87],
        dtype=np.float32,
    )


def test_region_from_yunet_row():
    region = FaceRegion.from_row(yunet_row())

    assert region.rect == (10.0, 20.0, 30.0, 40.0)
    assert region.landmark[0] == (15.0, 30.0)
    assert region.landmark[4] == (31.0, 50.0)
    assert region.face_prob == pytest.approx(0.87)
    assert region.has_landmarks


def test_region_row_round_trip_keeps_layout():
    row = yunet_row()
    out = FaceRegion.from_row(row).to_row()

    assert out.shape == (1, 15)
    assert out.dtype == np.float32
    np.testing.assert_allclose(out[0], row)


def test_row_without_landmarks():
    region = FaceRegion.from_row([1, 2, 3, 4])
    assert region.landmark == ()
    assert not region.has_landmarks


def test_short_row_is_rejected():
    with pytest.raises(ValueError):
        FaceRegion.from_row([1, 2])


@pytest.mark.parametrize(
    "rect, inside",
    [
        ((10, 10, 20, 20), True),
        ((-5, -5, 20, 20), True),
        ((10, 10, 0, 20), False),
        ((10, 10, 20, -1), False),
        ((100, 10, 20, 20), False),
        ((-30, 10, 20, 20), False),
        ((float("nan"), 10, 20, 20), False),
    ],
)
def test_region_within_frame(rect, inside):
    assert FaceRegion(rect=rect).is_within(64, 48) is inside


def test_select_first_keeps_detector_order():
    low = FaceRegion(rect=(0, 0, 1, 1), face_prob=0.6)
    high = FaceRegion(rect=(5, 5, 1, 1), face_prob=0.99)
    assert select_face([low, high], "first") is low


def test_select_best_uses_confidence():
    low = FaceRegion(rect=(0, 0, 1, 1), face_prob=0.6)
    high = FaceRegion(rect=(5, 5, 1, 1), face_prob=0.99)
    assert select_face([low, high], "best") is high


def test_select_best_tie_keeps_earliest():
    a = FaceRegion(rect=(0, 0, 1, 1), face_prob=0.9)
    b = FaceRegion(rect=(5, 5, 1, 1), face_prob=0.9)
    assert select_face([a, b], "best") is a


def test_select_rejects_empty_and_unknown_policy():
    with pytest.raises(ValueError):
        select_face([], "first")
    with pytest.raises(ValueError):
        select_face([FaceRegion(rect=(0, 0, 1, 1))], "largest")

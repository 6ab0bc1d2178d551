import numpy as np

from face_verify.annotator import annotate
from face_verify.detectors.types import FaceRegion

from conftest import LANDMARKS


def blank(width=100, height=100):
    return np.zeros((height, width, 3), dtype=np.uint8)


def test_annotate_returns_new_frame():
    frame = blank()
    result = annotate(frame, FaceRegion(rect=(10, 20, 30, 30)), "Match")

    assert result is not frame
    assert result.shape == frame.shape
    assert not frame.any()


def test_rectangle_drawn_at_region():
    result = annotate(blank(), FaceRegion(rect=(10, 40, 30, 30)), "Match")

    assert tuple(result[40, 10]) == (0, 255, 0)
    assert tuple(result[70, 40]) == (0, 255, 0)
    # interior of the box stays untouched
    assert not result[55, 25].any()


def test_custom_color_and_text_near_top_edge():
    result = annotate(
        blank(200, 100),
        FaceRegion(rect=(5, 0, 40, 40)),
        "Unknown Person",
        color=(0, 0, 255),
    )

    red = (result[..., 2] == 255) & (result[..., 0] == 0) & (result[..., 1] == 0)
    assert red.any()
    assert not result[..., 1].any()


def test_landmarks_only_when_requested():
    region = FaceRegion(rect=(4, 4, 40, 40), landmark=LANDMARKS)
    x, y = (int(v) for v in LANDMARKS[2])

    plain = annotate(blank(), region, " ")
    dotted = annotate(blank(), region, " ", show_landmarks=True)

    assert not plain[y, x].any()
    assert tuple(dotted[y, x]) == (0, 255, 255)

"""Subject selection — pick the instance nearest the image center. No engine imports."""

from __future__ import annotations

import numpy as np

from stickerlab.models.instance_mask import (
    BoundingBox,
    CandidateInstanceSet,
    InstanceMaskBuffer,
)

# Every 5th row and column → 1/25 of the pixels are visited.
DEFAULT_STRIDE = 5


def instance_bounding_boxes(
    mask: InstanceMaskBuffer,
    candidates: CandidateInstanceSet,
    stride: int = DEFAULT_STRIDE,
) -> dict[int, BoundingBox]:
    """Bounding boxes of candidate ids seen on the sub-sampled grid.

    Ids that never land on a sampled pixel are absent from the result.
    """
    stride = max(1, int(stride))
    sampled = mask.ids[::stride, ::stride]
    boxes: dict[int, BoundingBox] = {}

    for iid in sorted(candidates):
        rows, cols = np.nonzero(sampled == iid)
        if rows.size == 0:
            continue
        boxes[iid] = BoundingBox(
            min_x=int(cols.min()) * stride,
            max_x=int(cols.max()) * stride,
            min_y=int(rows.min()) * stride,
            max_y=int(rows.max()) * stride,
        )
    return boxes


def center_distances(
    boxes: dict[int, BoundingBox], width: int, height: int
) -> dict[int, float]:
    """Squared distance from each box center to the image center."""
    cx, cy = width / 2.0, height / 2.0
    result: dict[int, float] = {}
    for iid, box in boxes.items():
        bx, by = box.center
        result[iid] = (bx - cx) ** 2 + (by - cy) ** 2
    return result


def select_subject(
    mask: InstanceMaskBuffer,
    candidates: CandidateInstanceSet,
    stride: int = DEFAULT_STRIDE,
    boxes: dict[int, BoundingBox] | None = None,
) -> CandidateInstanceSet:
    """Return the single instance judged to be the subject.

    0 or 1 candidates come back unchanged. Equal distances resolve to the
    lowest id. If no candidate is observed on the sampled grid, the whole
    candidate set is returned so the caller treats every instance as the
    subject.

    Pass precomputed ``boxes`` to skip scanning the mask again.
    """
    if len(candidates) <= 1:
        return frozenset(candidates)

    if boxes is None:
        boxes = instance_bounding_boxes(mask, candidates, stride)
    distances = center_distances(boxes, mask.width, mask.height)
    if not distances:
        return frozenset(candidates)

    best_id = min(sorted(distances), key=lambda iid: distances[iid])
    return frozenset({best_id})

"""IsolationContext — the single mutable state object flowing through all stages.

One context per image. Stages read what upstream stages wrote and fill in
their own slot; nothing here is shared between invocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from stickerlab.models.contour_path import NormalizedContourPath
from stickerlab.models.instance_mask import (
    BoundingBox,
    CandidateInstanceSet,
    InstanceMaskBuffer,
)


@dataclass
class IsolationContext:
    """Shared state for one pipeline run."""

    # --- Inputs ---
    # Reference RGB/RGBA image the mask was computed on
    image: NDArray[np.uint8] | None = None
    # Segmentation output: per-pixel instance ids + valid ids
    instance_mask: InstanceMaskBuffer | None = None
    candidates: CandidateInstanceSet = frozenset()

    # --- Subject selection (T0.01) ---
    selected_ids: CandidateInstanceSet = frozenset()
    bounding_boxes: dict[int, BoundingBox] = field(default_factory=dict)
    no_subject: bool = False

    # --- Masked cut-out (T0.02), cropped to the subject's extent ---
    masked_image: NDArray[np.uint8] | None = None

    # --- Contour intermediates (T1.01, T1.02) ---
    edges: NDArray[np.bool_] | None = None
    contour: NDArray[np.int64] | None = None

    # --- Outputs ---
    contour_path: NormalizedContourPath | None = None
    canvas_image: NDArray[np.uint8] | None = None
    padded_image: NDArray[np.uint8] | None = None
    outline_image: NDArray[np.uint8] | None = None

    # --- Pipeline metadata ---
    cancelled: bool = False
    completed_stages: set[str] = field(default_factory=set)
    skipped_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)
    timings_ms: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_segmentation(
        cls,
        image: NDArray[np.uint8],
        instance_mask: InstanceMaskBuffer,
        candidates: CandidateInstanceSet | None = None,
    ) -> "IsolationContext":
        if candidates is None:
            candidates = instance_mask.present_ids()
        return cls(image=image, instance_mask=instance_mask, candidates=frozenset(candidates))

    @classmethod
    def from_masked_image(cls, masked_image: NDArray[np.uint8]) -> "IsolationContext":
        """Enter the pipeline with a cut-out that is already isolated."""
        return cls(masked_image=masked_image)

    @property
    def status(self) -> str:
        if self.cancelled:
            return "cancelled"
        if self.no_subject:
            return "no_subject"
        return "ok"

    @property
    def masked_size(self) -> tuple[int, int]:
        """(width, height) of the cut-out, (0, 0) before T0.02."""
        if self.masked_image is None:
            return (0, 0)
        return (int(self.masked_image.shape[1]), int(self.masked_image.shape[0]))

    def release_intermediates(self) -> None:
        self.edges = None
        self.contour = None

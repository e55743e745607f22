"""Instance mask types — the typed boundary over the segmentation model's output.

The segmentation model hands back a loosely typed mapping (camelCase keys from
the capture side, snake_case from Python callers). Everything downstream of
``InstanceMaskBuffer.from_observation`` works with the typed buffer only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

# Instance ids live in a single unsigned byte: 0 = background, 1..255 = instances.
MAX_INSTANCE_ID = 255

CandidateInstanceSet = frozenset[int]

_MASK_KEYS = ("instance_mask", "instanceMask")
_INSTANCE_KEYS = ("all_instances", "allInstances")


@dataclass(frozen=True)
class BoundingBox:
    """Per-instance extent in mask pixel coordinates (inclusive)."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


@dataclass(frozen=True)
class InstanceMaskBuffer:
    """Read-only width×height grid of instance ids."""

    ids: NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.ids.ndim != 2:
            raise ValueError(f"instance mask must be 2-D, got shape {self.ids.shape}")

    @property
    def width(self) -> int:
        return int(self.ids.shape[1])

    @property
    def height(self) -> int:
        return int(self.ids.shape[0])

    def present_ids(self) -> CandidateInstanceSet:
        """Non-zero ids that actually occur in the buffer."""
        values = np.unique(self.ids)
        return frozenset(int(v) for v in values if v != 0)

    @classmethod
    def from_array(cls, array: Any) -> "InstanceMaskBuffer":
        arr = np.asarray(array)
        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]
        if arr.ndim != 2:
            raise ValueError(f"instance mask must be 2-D, got shape {arr.shape}")
        if arr.size and (arr.min() < 0 or arr.max() > MAX_INSTANCE_ID):
            raise ValueError(f"instance ids must be in 0..{MAX_INSTANCE_ID}")
        return cls(ids=np.ascontiguousarray(arr, dtype=np.uint8))

    @classmethod
    def from_observation(
        cls, observation: Mapping[str, Any]
    ) -> tuple["InstanceMaskBuffer", CandidateInstanceSet]:
        """Map a segmentation result mapping into (buffer, candidate set).

        When no instance list is supplied the candidates are the ids present
        in the mask.
        """
        raw_mask = _first_present(observation, _MASK_KEYS)
        if raw_mask is None:
            raise ValueError(f"observation has none of the keys {_MASK_KEYS}")
        buffer = cls.from_array(raw_mask)

        raw_instances = _first_present(observation, _INSTANCE_KEYS)
        if raw_instances is None:
            return buffer, buffer.present_ids()
        return buffer, candidate_set(raw_instances)


def candidate_set(ids: Iterable[Any]) -> CandidateInstanceSet:
    """Normalize an iterable of instance ids, rejecting out-of-range values."""
    result: set[int] = set()
    for value in ids:
        iid = int(value)
        if not 0 < iid <= MAX_INSTANCE_ID:
            raise ValueError(f"instance id {value!r} outside 1..{MAX_INSTANCE_ID}")
        result.add(iid)
    return frozenset(result)


def _first_present(mapping: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    return None

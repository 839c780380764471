import itertools
import uuid
from typing import Callable

FusionIdFactory = Callable[[int], str]


def uuid_fusion_id(level: int) -> str:
    return f"fusion_level{level}_{uuid.uuid4().hex}"


class SequentialFusionIds:
    """Deterministic ids: ``fusion_level<L>_000001``, ``fusion_level<L>_000002``, ..."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def __call__(self, level: int) -> str:
        return f"fusion_level{level}_{next(self._counter):06d}"

"""
Frame transform capability

The core only consumes poses; where they come from (tf2, a fixed
table in tests) is decided by whoever builds the provider.
"""

import abc
from typing import Dict, Tuple

from .errors import TransformUnavailableError
from .geometry import Pose


class TransformProvider(abc.ABC):

    @abc.abstractmethod
    def lookup_transform(self, target_frame: str, source_frame: str) -> Pose:
        """Pose of `source_frame` expressed in `target_frame`."""

    @abc.abstractmethod
    def broadcast_transform(self, pose: Pose, parent_frame: str, child_frame: str) -> None:
        """Publish `pose` as the transform parent_frame -> child_frame."""

    def transform_pose(self, pose: Pose, target_frame: str, source_frame: str) -> Pose:
        if target_frame == source_frame:
            return pose
        return self.lookup_transform(target_frame, source_frame).compose(pose)


class StaticTransformProvider(TransformProvider):
    """In-memory transform table. Resolves direct and inverse edges only."""

    def __init__(self):
        self._transforms: Dict[Tuple[str, str], Pose] = {}

    def lookup_transform(self, target_frame: str, source_frame: str) -> Pose:
        if target_frame == source_frame:
            return Pose(0.0, 0.0)
        direct = self._transforms.get((target_frame, source_frame))
        if direct is not None:
            return direct
        inverse = self._transforms.get((source_frame, target_frame))
        if inverse is not None:
            return inverse.inverse()
        raise TransformUnavailableError(
            f'no transform from {source_frame} to {target_frame}')

    def broadcast_transform(self, pose: Pose, parent_frame: str, child_frame: str) -> None:
        self._transforms[(parent_frame, child_frame)] = pose

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import InvalidParametersError

# ROS parameter name -> field name
PARAMETER_ALIASES = {
    'lookahead_distance': 'lookahead_velocity_factor',
}


@dataclass(frozen=True)
class ControllerParameters:
    max_throttle: float = 0.5
    throttle_gain: float = 0.2
    robot_length: float = 0.5
    lookahead_velocity_factor: float = 1.0

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidParametersError(
                    f'{f.name} must be a number, got {value!r}')
            if not math.isfinite(value) or value <= 0.0:
                raise InvalidParametersError(
                    f'{f.name} must be a finite positive number, got {value!r}')

    def replace(self, **changes: Any) -> 'ControllerParameters':
        """Return a new validated snapshot with `changes` applied."""
        names = {f.name for f in dataclasses.fields(self)}
        resolved: Dict[str, Any] = {}
        for key, value in changes.items():
            name = PARAMETER_ALIASES.get(key, key)
            if name not in names:
                raise InvalidParametersError(f'unknown controller parameter: {key}')
            # lookahead_distance is historically a flag; True/False map to 1.0/0.0
            if name == 'lookahead_velocity_factor' and isinstance(value, bool):
                value = float(value)
            resolved[name] = value
        return dataclasses.replace(self, **resolved)

    def as_dict(self) -> Dict[str, float]:
        return dataclasses.asdict(self)


class ParameterStore:
    """
    Holds the active ControllerParameters snapshot.

    Updates build a complete new snapshot and swap it in with a single
    assignment, so a reader always sees either the old or the new set.
    A rejected update leaves the active snapshot untouched.
    """

    def __init__(self, parameters: Optional[ControllerParameters] = None):
        self._parameters = parameters if parameters is not None else ControllerParameters()

    def snapshot(self) -> ControllerParameters:
        return self._parameters

    def update(self, **changes: Any) -> ControllerParameters:
        updated = self._parameters.replace(**changes)
        self._parameters = updated
        return updated

"""Trait -> coefficient lookup tables for driver personalities.

Values are fractions:
- top speed: fraction of the speed limit a temperament drives at.
- brake threshold: fraction of sight distance at which braking is considered;
  values over 1.0 are ineffective as nothing beyond sight distance is seen.
- tail threshold: car lengths kept behind the car ahead (0.5 = half a car).
- min speed to pass: fraction of the speed limit below which a driver stuck
  behind another car wants to pass.
"""

from enum import Enum
from typing import Dict, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lanesim.domain.errors import UnknownTraitError
from lanesim.domain.models import Patience, Temperament


def _default_top_speeds() -> Dict[Temperament, float]:
    return {
        Temperament.PSYCHOTIC: 1.5,
        Temperament.AGGRESSIVE: 1.3,
        Temperament.CALM: 1.0,
        Temperament.PASSIVE: 0.8,
    }


def _default_brake_thresholds() -> Dict[Temperament, float]:
    return {
        Temperament.PSYCHOTIC: 0.5,
        Temperament.AGGRESSIVE: 0.7,
        Temperament.CALM: 1.0,
        Temperament.PASSIVE: 1.0,
    }


def _default_tail_thresholds() -> Dict[Temperament, float]:
    return {
        Temperament.PSYCHOTIC: 1.5,
        Temperament.AGGRESSIVE: 3.0,
        Temperament.CALM: 4.5,
        Temperament.PASSIVE: 6.0,
    }


def _default_min_speeds() -> Dict[Patience, float]:
    return {
        Patience.ENLIGHTENED: 0.2,
        Patience.PATIENT: 0.7,
        Patience.NORMAL: 0.9,
        Patience.WILD: 1.0,  # always tries to pass
    }


class PersonalityTables(BaseModel):
    model_config = ConfigDict(frozen=True)

    top_speeds: Dict[Temperament, float] = Field(default_factory=_default_top_speeds)
    brake_thresholds: Dict[Temperament, float] = Field(default_factory=_default_brake_thresholds)
    tail_thresholds: Dict[Temperament, float] = Field(default_factory=_default_tail_thresholds)
    min_speeds_to_pass: Dict[Patience, float] = Field(default_factory=_default_min_speeds)

    @model_validator(mode="after")
    def _exhaustive_and_positive(self) -> "PersonalityTables":
        tables = (
            ("top_speeds", self.top_speeds, Temperament),
            ("brake_thresholds", self.brake_thresholds, Temperament),
            ("tail_thresholds", self.tail_thresholds, Temperament),
            ("min_speeds_to_pass", self.min_speeds_to_pass, Patience),
        )
        for name, table, trait_enum in tables:
            missing = _missing_traits(table, trait_enum)
            if missing:
                raise ValueError(f"{name} is missing {', '.join(missing)}")
            if any(value <= 0 for value in table.values()):
                raise ValueError(f"{name} values must be > 0")
        return self

    def top_speed_pct(self, temperament: Temperament) -> float:
        return _lookup("top speed", self.top_speeds, temperament)

    def brake_threshold_pct(self, temperament: Temperament) -> float:
        return _lookup("brake threshold", self.brake_thresholds, temperament)

    def tail_threshold_pct(self, temperament: Temperament) -> float:
        return _lookup("tail threshold", self.tail_thresholds, temperament)

    def min_speed_to_pass_pct(self, patience: Patience) -> float:
        return _lookup("min speed to pass", self.min_speeds_to_pass, patience)


def _missing_traits(table: Dict, trait_enum: Type[Enum]):
    return [member.value for member in trait_enum if member not in table]


def _lookup(name: str, table: Dict, trait) -> float:
    try:
        return table[trait]
    except KeyError:
        raise UnknownTraitError(name, trait) from None

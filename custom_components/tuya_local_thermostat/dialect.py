"""DP layouts spoken by the supported thermostat firmwares."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .const import DIALECT_V1, DIALECT_V2, MIN_TEMP_TENTHS
from .models import DataPointWrite, DeviceStateUpdate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtocolDialect:
    """
    Maps DP indices to thermostat fields for one firmware generation.

    `scale` is the number of raw units per degree Celsius. Heating activity
    is reported as a string on `activity_dp`: when `activity_inverted` is
    False the device is warming iff the value equals `activity_value`,
    otherwise it is warming iff the value differs from it.
    """
    name: str
    power_dp: str
    target_dp: str
    current_dp: str
    activity_dp: str
    activity_value: str
    activity_inverted: bool
    scale: int

    @property
    def temperature_step(self) -> float:
        return 1.0 / self.scale

    def raw_to_tenths(self, raw: Any) -> Optional[int]:
        """Zero, missing and non-numeric readings are rejected (None)."""
        if raw is None or isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None
        if value == 0:
            return None
        return max(MIN_TEMP_TENTHS, int(round(value * 10 / self.scale)))

    def tenths_to_raw(self, tenths: int) -> int:
        return int(round(tenths * self.scale / 10))

    def decode(self, dps: Mapping[Any, Any]) -> DeviceStateUpdate:
        values: Dict[str, Any] = {str(k): v for k, v in dps.items()}

        power = values.get(self.power_dp)
        activity = values.get(self.activity_dp)
        active: Optional[bool] = None
        if self.activity_dp in values:
            matches = str(activity) == self.activity_value
            active = not matches if self.activity_inverted else matches

        update = DeviceStateUpdate(
            power_on=bool(power) if self.power_dp in values and power is not None else None,
            is_heating_active=active,
            current_temperature_tenths=self.raw_to_tenths(values.get(self.current_dp)),
            target_temperature_tenths=self.raw_to_tenths(values.get(self.target_dp)),
        )
        _LOGGER.debug("Decoded %s dps=%s -> %s", self.name, values, update)
        return update

    def encode_set_power(self, on: bool) -> DataPointWrite:
        return DataPointWrite(self.power_dp, bool(on))

    def encode_set_target(self, tenths: int) -> DataPointWrite:
        return DataPointWrite(self.target_dp, self.tenths_to_raw(tenths))


DIALECTS: Dict[str, ProtocolDialect] = {
    DIALECT_V1: ProtocolDialect(
        name=DIALECT_V1,
        power_dp="1",
        target_dp="2",
        current_dp="3",
        activity_dp="102",
        activity_value="0",
        activity_inverted=True,
        scale=2,
    ),
    DIALECT_V2: ProtocolDialect(
        name=DIALECT_V2,
        power_dp="101",
        target_dp="102",
        current_dp="106",
        activity_dp="118",
        activity_value="heating",
        activity_inverted=False,
        scale=10,
    ),
}

"""Models for Tuya Local Thermostat."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from homeassistant.const import CONF_DEVICE_ID, CONF_HOST, CONF_NAME

from .const import (
    CONF_DIALECT,
    CONF_DISABLE_AFTER_SECONDS,
    CONF_LOCAL_KEY,
    CONF_PROTOCOL_VERSION,
    DEFAULT_DIALECT,
    DEFAULT_PROTOCOL_VERSION,
)


@dataclass(frozen=True)
class DeviceConfig:
    """Static settings of one thermostat."""
    device_id: str
    local_key: str
    name: str
    host: Optional[str] = None
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    dialect: str = DEFAULT_DIALECT
    disable_after_seconds: Optional[int] = None

    @classmethod
    def from_entry_data(
        cls, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> "DeviceConfig":
        """Build from config entry data; options win over data."""
        merged = dict(data)
        merged.update(options or {})
        disable_after = merged.get(CONF_DISABLE_AFTER_SECONDS)
        return cls(
            device_id=merged[CONF_DEVICE_ID],
            local_key=merged[CONF_LOCAL_KEY],
            name=merged.get(CONF_NAME) or f"Thermostat {merged[CONF_DEVICE_ID][-6:]}",
            host=merged.get(CONF_HOST) or None,
            protocol_version=str(merged.get(CONF_PROTOCOL_VERSION, DEFAULT_PROTOCOL_VERSION)),
            dialect=merged.get(CONF_DIALECT, DEFAULT_DIALECT),
            disable_after_seconds=int(disable_after) if disable_after else None,
        )


@dataclass
class DeviceState:
    """Local mirror of the device."""
    power_on: bool = False
    is_heating_active: bool = False
    current_temperature_tenths: Optional[int] = None
    target_temperature_tenths: Optional[int] = None
    heating_since: Optional[float] = None


@dataclass(frozen=True)
class DeviceStateUpdate:
    """Partial state update; None means the field was not reported."""
    power_on: Optional[bool] = None
    is_heating_active: Optional[bool] = None
    current_temperature_tenths: Optional[int] = None
    target_temperature_tenths: Optional[int] = None

    def is_empty(self) -> bool:
        return (
            self.power_on is None
            and self.is_heating_active is None
            and self.current_temperature_tenths is None
            and self.target_temperature_tenths is None
        )


@dataclass(frozen=True)
class DataPointWrite:
    """A single DP write."""
    dp: str
    value: Any


@dataclass(frozen=True)
class ThermostatSnapshot:
    """State as exposed to Home Assistant, temperatures in °C."""
    power_on: bool
    is_heating_active: bool
    current_temperature: float
    target_temperature: float
    heating_since: Optional[float] = None

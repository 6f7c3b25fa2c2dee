from __future__ import annotations

import logging
from typing import Any, Dict

import voluptuous as vol
from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv, entity_platform
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import (
    ATTR_UNIT,
    DOMAIN,
    MANUFACTURER,
    MAX_TEMP_TENTHS,
    MIN_TEMP_TENTHS,
    SERVICE_SET_TEMPERATURE_UNIT,
    UNIT_CELSIUS,
)
from .coordinator import ThermostatCoordinator
from .models import ThermostatSnapshot

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback):
    coordinator: ThermostatCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([TuyaLocalThermostatEntity(coordinator)])

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_SET_TEMPERATURE_UNIT,
        {vol.Required(ATTR_UNIT): vol.All(cv.string, vol.Lower)},
        "async_set_temperature_unit",
    )


def _celsius_to_tenths(val_c: float) -> int:
    return int(round(float(val_c) * 10))


class TuyaLocalThermostatEntity(CoordinatorEntity[ThermostatCoordinator], ClimateEntity):
    _attr_has_entity_name = True
    _attr_name = None
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_hvac_modes = [HVACMode.OFF, HVACMode.HEAT]
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.TURN_ON
        | ClimateEntityFeature.TURN_OFF
    )
    _attr_min_temp = MIN_TEMP_TENTHS / 10
    _attr_max_temp = MAX_TEMP_TENTHS / 10

    def __init__(self, coordinator: ThermostatCoordinator) -> None:
        super().__init__(coordinator)
        device = coordinator.device
        self._device_id = device.device_id
        self._attr_unique_id = f"{DOMAIN}_{device.device_id}"
        self._attr_target_temperature_step = coordinator.dialect.temperature_step
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device.device_id)},
            manufacturer=MANUFACTURER,
            model=f"Wi-Fi thermostat ({device.dialect})",
            name=device.name,
            serial_number=device.device_id,
        )

    def _snapshot(self) -> ThermostatSnapshot:
        # Read the store directly: status pushed between ticks is already merged there.
        return self.coordinator.store.read()

    @property
    def current_temperature(self) -> float:
        return self._snapshot().current_temperature

    @property
    def target_temperature(self) -> float:
        return self._snapshot().target_temperature

    @property
    def hvac_mode(self) -> HVACMode:
        return HVACMode.HEAT if self._snapshot().power_on else HVACMode.OFF

    @property
    def hvac_action(self) -> HVACAction:
        snap = self._snapshot()
        if not snap.power_on:
            return HVACAction.OFF
        return HVACAction.HEATING if snap.is_heating_active else HVACAction.IDLE

    async def async_set_temperature(self, **kwargs: Any) -> None:
        tgt = kwargs.get(ATTR_TEMPERATURE)
        if tgt is None:
            return
        tgt = max(self.min_temp, min(self.max_temp, float(tgt)))
        await self.coordinator.gateway.async_set_target(_celsius_to_tenths(tgt))
        await self.coordinator.async_request_refresh()

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        if hvac_mode == HVACMode.OFF:
            on = False
        elif hvac_mode == HVACMode.HEAT:
            on = True
        else:
            _LOGGER.warning("Unsupported hvac_mode=%s for device=%s", hvac_mode, self._device_id)
            return
        await self.coordinator.gateway.async_set_power(on)
        await self.coordinator.async_request_refresh()

    async def async_turn_on(self) -> None:
        await self.async_set_hvac_mode(HVACMode.HEAT)

    async def async_turn_off(self) -> None:
        await self.async_set_hvac_mode(HVACMode.OFF)

    async def async_set_temperature_unit(self, unit: str) -> None:
        """Display units are fixed to Celsius; anything else is only logged."""
        if unit != UNIT_CELSIUS:
            _LOGGER.warning("Ignoring temperature unit %s for device=%s", unit, self._device_id)
            return
        _LOGGER.debug("Temperature unit for device=%s already %s", self._device_id, unit)

    @property
    def extra_state_attributes(self) -> Dict[str, Any]:
        return {
            "device_id": self._device_id,
            "dialect": self.coordinator.dialect.name,
            "disable_after_seconds": self.coordinator.device.disable_after_seconds,
            "heating_session_tracked": self._snapshot().heating_since is not None,
        }

import logging
from typing import Optional

from .const import MIN_TEMP_TENTHS
from .models import DeviceState, DeviceStateUpdate, ThermostatSnapshot

_LOGGER = logging.getLogger(__name__)


def _tenths_to_celsius(tenths: Optional[int]) -> float:
    if not tenths:
        tenths = MIN_TEMP_TENTHS
    return max(tenths, MIN_TEMP_TENTHS) / 10.0


class DeviceStateStore:
    """
    In-memory mirror of one thermostat.
    Updates are merged field by field, last writer wins.
    """

    def __init__(self, name: str, state: Optional[DeviceState] = None) -> None:
        self._name = name
        self._state = state or DeviceState()

    @property
    def state(self) -> DeviceState:
        return self._state

    def apply_update(self, update: DeviceStateUpdate) -> None:
        state = self._state
        if update.power_on is not None:
            state.power_on = update.power_on
        if update.is_heating_active is not None:
            state.is_heating_active = update.is_heating_active
        if update.current_temperature_tenths is not None:
            state.current_temperature_tenths = max(MIN_TEMP_TENTHS, update.current_temperature_tenths)
        if update.target_temperature_tenths is not None:
            state.target_temperature_tenths = max(MIN_TEMP_TENTHS, update.target_temperature_tenths)
        _LOGGER.debug("Device %s synced: %s", self._name, self.read())

    def read(self) -> ThermostatSnapshot:
        state = self._state
        return ThermostatSnapshot(
            power_on=state.power_on,
            is_heating_active=state.is_heating_active,
            current_temperature=_tenths_to_celsius(state.current_temperature_tenths),
            target_temperature=_tenths_to_celsius(state.target_temperature_tenths),
            heating_since=state.heating_since,
        )

    def mark_heating_started(self, now: float) -> None:
        self._state.heating_since = now

    def clear_heating_session(self) -> None:
        self._state.heating_since = None

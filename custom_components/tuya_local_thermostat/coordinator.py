import logging
import time
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .api import DeviceConnection
from .const import DEFAULT_SCAN_INTERVAL
from .dialect import DIALECTS, ProtocolDialect
from .gateway import CommandGateway
from .models import DeviceConfig, ThermostatSnapshot
from .safety import SafetyPolicy
from .store import DeviceStateStore

_LOGGER = logging.getLogger(__name__)


class ThermostatCoordinator(DataUpdateCoordinator[ThermostatSnapshot]):
    """
    Keeps the local mirror of one thermostat in sync.
    Every tick: find + connect (no-op when connected), request status,
    then run the safety policy. Status payloads reach the store through the
    client subscription, whichever call produced them.
    A failing tick is logged and leaves the mirror untouched; it never
    marks the coordinator as failed.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: Optional[ConfigEntry],
        device: DeviceConfig,
        client: DeviceConnection,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.device = device
        self.dialect: ProtocolDialect = DIALECTS[device.dialect]
        self.store = DeviceStateStore(device.name)
        self.gateway = CommandGateway(client, self.dialect)
        self.safety = SafetyPolicy(self.store, self.gateway, device.disable_after_seconds)
        self._client = client
        self._clock = clock
        self._unsubscribe = client.subscribe(self._handle_data, self._handle_error)
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"Tuya Local Thermostat {device.name}",
            update_interval=timedelta(seconds=DEFAULT_SCAN_INTERVAL),
        )

    def _handle_data(self, dps: Mapping[str, Any]) -> None:
        try:
            self.store.apply_update(self.dialect.decode(dps))
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Failed to apply status from %s: %s", self.device.device_id, dps)

    def _handle_error(self, err: Exception) -> None:
        _LOGGER.warning("Device connection error for %s: %s", self.device.device_id, err)

    async def _async_update_data(self) -> ThermostatSnapshot:
        try:
            await self._client.async_find()
            await self._client.async_connect()
            await self._client.async_get()
            await self.safety.async_tick(self._clock())
        except Exception as err:  # noqa: BLE001
            _LOGGER.warning("Error in device reconnect attempt for %s: %s", self.device.name, err)
        return self.store.read()

    async def async_shutdown(self) -> None:
        await super().async_shutdown()
        self._unsubscribe()
        await self._client.async_close()

import logging

import voluptuous as vol
from homeassistant.config_entries import SOURCE_IMPORT, ConfigEntry
from homeassistant.const import CONF_DEVICE_ID, CONF_DEVICES, CONF_HOST, CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .api import TuyaLocalClient
from .const import (
    CONF_DIALECT,
    CONF_DISABLE_AFTER_SECONDS,
    CONF_LOCAL_KEY,
    CONF_PROTOCOL_VERSION,
    DEFAULT_DIALECT,
    DEFAULT_PROTOCOL_VERSION,
    DOMAIN,
    PROTOCOL_VERSIONS,
)
from .coordinator import ThermostatCoordinator
from .dialect import DIALECTS
from .models import DeviceConfig

_LOGGER = logging.getLogger(__name__)

PLATFORMS = ["climate"]

DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NAME): cv.string,
        vol.Required(CONF_DEVICE_ID): cv.string,
        vol.Required(CONF_LOCAL_KEY): cv.string,
        vol.Optional(CONF_HOST): cv.string,
        vol.Optional(CONF_PROTOCOL_VERSION, default=DEFAULT_PROTOCOL_VERSION): vol.In(PROTOCOL_VERSIONS),
        vol.Optional(CONF_DIALECT, default=DEFAULT_DIALECT): vol.In(list(DIALECTS)),
        vol.Optional(CONF_DISABLE_AFTER_SECONDS): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)

CONFIG_SCHEMA = vol.Schema(
    {DOMAIN: vol.Schema({vol.Required(CONF_DEVICES): vol.All(cv.ensure_list, [DEVICE_SCHEMA])})},
    extra=vol.ALLOW_EXTRA,
)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Import thermostats listed in configuration.yaml as config entries."""
    for device in config.get(DOMAIN, {}).get(CONF_DEVICES, []):
        hass.async_create_task(
            hass.config_entries.flow.async_init(DOMAIN, context={"source": SOURCE_IMPORT}, data=dict(device))
        )
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    device = DeviceConfig.from_entry_data(entry.data, entry.options)

    client = TuyaLocalClient(
        hass,
        device.device_id,
        device.local_key,
        host=device.host,
        protocol_version=device.protocol_version,
    )

    coordinator = ThermostatCoordinator(hass, entry, device, client)
    # A failed first sync is tolerated; the device catches up on later ticks.
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = coordinator

    # The coordinator only reschedules while something listens. Keep ticking
    # (and the auto-shutoff armed) even when the climate entity is disabled.
    entry.async_on_unload(coordinator.async_add_listener(lambda: None))
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok and entry.entry_id in hass.data.get(DOMAIN, {}):
        coordinator: ThermostatCoordinator = hass.data[DOMAIN].pop(entry.entry_id)
        await coordinator.async_shutdown()
    return unload_ok


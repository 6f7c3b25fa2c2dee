from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.const import CONF_DEVICE_ID, CONF_HOST, CONF_NAME
from homeassistant.core import callback

from .api import TuyaLocalClient, TuyaLocalError
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
from .dialect import DIALECTS

_LOGGER = logging.getLogger(__name__)


def _user_schema(defaults: Dict[str, Any]) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_NAME, default=defaults.get(CONF_NAME, "")): str,
            vol.Required(CONF_DEVICE_ID, default=defaults.get(CONF_DEVICE_ID, "")): str,
            vol.Required(CONF_LOCAL_KEY, default=defaults.get(CONF_LOCAL_KEY, "")): str,
            vol.Optional(CONF_HOST, default=defaults.get(CONF_HOST, "")): str,
            vol.Required(
                CONF_PROTOCOL_VERSION, default=defaults.get(CONF_PROTOCOL_VERSION, DEFAULT_PROTOCOL_VERSION)
            ): vol.In(PROTOCOL_VERSIONS),
            vol.Required(CONF_DIALECT, default=defaults.get(CONF_DIALECT, DEFAULT_DIALECT)): vol.In(list(DIALECTS)),
            vol.Optional(CONF_DISABLE_AFTER_SECONDS): vol.All(vol.Coerce(int), vol.Range(min=1)),
        }
    )


class TuyaLocalConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def _async_validate(self, user_input: Dict[str, Any]) -> None:
        """Round trip one status request; raises TuyaLocalError."""
        client = TuyaLocalClient(
            self.hass,
            user_input[CONF_DEVICE_ID],
            user_input[CONF_LOCAL_KEY],
            host=user_input.get(CONF_HOST) or None,
            protocol_version=user_input[CONF_PROTOCOL_VERSION],
        )
        try:
            await client.async_find()
            await client.async_connect()
            await client.async_get()
        finally:
            await client.async_close()

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None):
        errors: Dict[str, str] = {}
        if user_input is not None:
            await self.async_set_unique_id(user_input[CONF_DEVICE_ID])
            self._abort_if_unique_id_configured()
            try:
                await self._async_validate(user_input)
            except TuyaLocalError:
                _LOGGER.exception("Failed to connect to Tuya device %s", user_input[CONF_DEVICE_ID])
                errors["base"] = "cannot_connect"
            else:
                data = {k: v for k, v in user_input.items() if v not in ("", None)}
                return self.async_create_entry(title=user_input[CONF_NAME], data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=_user_schema(user_input or {}),
            errors=errors,
        )

    async def async_step_import(self, import_data: Dict[str, Any]):
        """Device records from configuration.yaml; not validated against the device."""
        await self.async_set_unique_id(import_data[CONF_DEVICE_ID])
        self._abort_if_unique_id_configured(updates=import_data)
        return self.async_create_entry(title=import_data[CONF_NAME], data=import_data)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return TuyaLocalOptionsFlow()


class TuyaLocalOptionsFlow(config_entries.OptionsFlow):
    async def async_step_init(self, user_input=None):
        if user_input is not None:
            # An empty value turns the auto-shutoff off.
            return self.async_create_entry(
                title="",
                data={CONF_DISABLE_AFTER_SECONDS: user_input.get(CONF_DISABLE_AFTER_SECONDS) or None},
            )

        current = self.config_entry.options.get(
            CONF_DISABLE_AFTER_SECONDS, self.config_entry.data.get(CONF_DISABLE_AFTER_SECONDS)
        )
        key = (
            vol.Optional(CONF_DISABLE_AFTER_SECONDS, description={"suggested_value": current})
        )
        schema = vol.Schema({key: vol.All(vol.Coerce(int), vol.Range(min=0))})
        return self.async_show_form(step_id="init", data_schema=schema)

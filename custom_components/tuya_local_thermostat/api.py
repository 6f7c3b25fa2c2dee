import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

import tinytuya
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from .models import DataPointWrite

_LOGGER = logging.getLogger(__name__)

DataCallback = Callable[[Mapping[str, Any]], None]
ErrorCallback = Callable[[Exception], None]


class TuyaLocalError(HomeAssistantError):
    """Base error talking to a thermostat."""


class TuyaConnectionError(TuyaLocalError):
    """The device did not answer or answered with an error payload."""


class TuyaDeviceNotFound(TuyaLocalError):
    """No address could be found for the device id."""


class DeviceConnection(Protocol):
    """What the sync loop and the command gateway need from a device client."""

    async def async_find(self) -> str: ...

    async def async_connect(self) -> None: ...

    async def async_get(self) -> Dict[str, Any]: ...

    async def async_set(self, write: DataPointWrite) -> Optional[Dict[str, Any]]: ...

    def subscribe(self, on_data: DataCallback, on_error: ErrorCallback) -> Callable[[], None]: ...

    async def async_close(self) -> None: ...


class TuyaLocalClient:
    """
    Wrapper around tinytuya.Device for the local (LAN) Tuya protocol.
    tinytuya is blocking, so every round trip runs in the executor.
    Status payloads from get/set are fanned out to subscribers.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        device_id: str,
        local_key: str,
        host: Optional[str] = None,
        protocol_version: str = "3.3",
    ) -> None:
        self._hass = hass
        self._device_id = device_id
        self._local_key = local_key
        self._fixed_host = host
        self._host = host
        self._protocol_version = protocol_version
        self._device: Optional[tinytuya.Device] = None
        self._listeners: List[Tuple[DataCallback, ErrorCallback]] = []
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._device is not None

    def subscribe(self, on_data: DataCallback, on_error: ErrorCallback) -> Callable[[], None]:
        entry = (on_data, on_error)
        self._listeners.append(entry)

        def _remove() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return _remove

    async def async_find(self) -> str:
        """Resolve the device address by id; no-op when already known."""
        if self._host:
            return self._host
        _LOGGER.debug("Looking up address of %s", self._device_id)
        found = await self._hass.async_add_executor_job(tinytuya.find_device, self._device_id)
        ip = (found or {}).get("ip")
        if not ip:
            err = TuyaDeviceNotFound(f"Device {self._device_id} not found on the network")
            self._notify_error(err)
            raise err
        self._host = ip
        _LOGGER.info("Found %s at %s", self._device_id, ip)
        return ip

    async def async_connect(self) -> None:
        async with self._lock:
            if self._device is not None:
                return
            if not self._host:
                raise TuyaConnectionError(f"No address for {self._device_id}, call find first")
            _LOGGER.debug("Connecting to %s at %s (v%s)", self._device_id, self._host, self._protocol_version)
            self._device = await self._hass.async_add_executor_job(self._create_device)
        _LOGGER.info("Connected to %s.", self._device_id)

    def _create_device(self) -> tinytuya.Device:
        return tinytuya.Device(
            self._device_id,
            address=self._host,
            local_key=self._local_key,
            version=float(self._protocol_version),
            persist=True,
        )

    async def async_get(self) -> Dict[str, Any]:
        res = await self._call("status")
        if res is None:
            raise await self._async_fail(TuyaConnectionError(f"Empty status from {self._device_id}"))
        return res

    async def async_set(self, write: DataPointWrite) -> Optional[Dict[str, Any]]:
        _LOGGER.debug("Writing dp %s=%s to %s", write.dp, write.value, self._device_id)
        return await self._call("set_value", write.dp, write.value)

    async def async_close(self) -> None:
        async with self._lock:
            device, self._device = self._device, None
            if device is not None:
                await self._hass.async_add_executor_job(device.close)

    def _require_device(self) -> tinytuya.Device:
        if self._device is None:
            raise TuyaConnectionError(f"Tuya device {self._device_id} not connected.")
        return self._device

    async def _call(self, method: str, *args: Any) -> Optional[Dict[str, Any]]:
        # One round trip at a time: the persistent socket is not thread-safe.
        async with self._lock:
            func = getattr(self._require_device(), method)
            try:
                res = await self._hass.async_add_executor_job(func, *args)
            except (OSError, ValueError) as err:
                failure: Optional[Exception] = err
            else:
                failure = None

        if failure is not None:
            raise await self._async_fail(TuyaConnectionError(f"{self._device_id}: {failure}")) from failure

        if isinstance(res, dict) and "Error" in res:
            raise await self._async_fail(
                TuyaConnectionError(f"{self._device_id}: {res.get('Error')} (code {res.get('Err')})")
            )

        dps = res.get("dps") if isinstance(res, dict) else None
        if dps:
            self._notify_data(dps)
        return res

    async def _async_fail(self, err: TuyaLocalError) -> TuyaLocalError:
        """Drop the socket so the next tick reconnects, and tell subscribers."""
        await self.async_close()
        self._host = self._fixed_host
        self._notify_error(err)
        return err

    def _notify_data(self, dps: Mapping[str, Any]) -> None:
        for on_data, _ in list(self._listeners):
            on_data(dps)

    def _notify_error(self, err: Exception) -> None:
        for _, on_error in list(self._listeners):
            on_error(err)

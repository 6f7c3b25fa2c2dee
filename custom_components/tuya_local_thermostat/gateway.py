import logging

from .api import DeviceConnection, TuyaLocalError
from .dialect import ProtocolDialect
from .models import DataPointWrite

_LOGGER = logging.getLogger(__name__)


class CommandGateway:
    """
    Turns Home Assistant commands into DP writes.
    Each call sends exactly one write and does not wait for the device to
    report the new state back; that arrives with the next status event.
    """

    def __init__(self, client: DeviceConnection, dialect: ProtocolDialect) -> None:
        self._client = client
        self._dialect = dialect

    async def async_set_power(self, on: bool) -> None:
        write = self._dialect.encode_set_power(on)
        _LOGGER.debug("Setting power=%s via dp %s", on, write.dp)
        await self._send(write)

    async def async_set_target(self, tenths: int) -> None:
        # Setpoint only; the power DP is left alone.
        write = self._dialect.encode_set_target(tenths)
        _LOGGER.debug("Setting target=%s tenths via dp %s=%s", tenths, write.dp, write.value)
        await self._send(write)

    async def _send(self, write: DataPointWrite) -> None:
        try:
            await self._client.async_set(write)
        except TuyaLocalError as err:
            _LOGGER.error("Failed to write dp %s=%s: %s", write.dp, write.value, err)
            raise

import logging
from typing import Optional

from .gateway import CommandGateway
from .store import DeviceStateStore

_LOGGER = logging.getLogger(__name__)


class SafetyPolicy:
    """
    Auto-shutoff after the device has been powered on for
    `disable_after_seconds`.

    Idle (no heating_since) -> HeatingTracked once power on is seen,
    HeatingTracked -> Idle after the forced power off. A power off made on
    the device itself does not end the tracked session; only the forced
    shutoff clears it.
    """

    def __init__(
        self,
        store: DeviceStateStore,
        gateway: CommandGateway,
        disable_after_seconds: Optional[int],
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._disable_after = disable_after_seconds

    @property
    def enabled(self) -> bool:
        return self._disable_after is not None

    async def async_tick(self, now: float) -> bool:
        """Returns True when a forced shutoff was sent."""
        if self._disable_after is None:
            return False

        state = self._store.state
        if state.heating_since is None:
            if state.power_on:
                _LOGGER.debug("Heating session started at %s", now)
                self._store.mark_heating_started(now)
            return False

        elapsed = now - state.heating_since
        if elapsed < self._disable_after:
            return False

        _LOGGER.info(
            "Heating on for %.0fs (limit %ss), forcing power off", elapsed, self._disable_after
        )
        await self._gateway.async_set_power(False)
        self._store.clear_heating_session()
        return True

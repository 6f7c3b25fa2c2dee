"""Shared fixtures for the Tuya Local Thermostat tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pytest

from custom_components.tuya_local_thermostat.api import TuyaConnectionError
from custom_components.tuya_local_thermostat.models import DataPointWrite


class FakeConnection:
    """In-memory DeviceConnection.

    `status` is what the next get() answers with; set `fail_next_get` to make
    the next round trip raise.
    """

    def __init__(self, status: Optional[Dict[str, Any]] = None) -> None:
        self.status: Dict[str, Any] = dict(status or {})
        self.writes: List[DataPointWrite] = []
        self.find_calls = 0
        self.connect_calls = 0
        self.get_calls = 0
        self.closed = False
        self.fail_next_get = False
        self.fail_next_set = False
        self._listeners: List[Tuple[Callable, Callable]] = []

    def subscribe(self, on_data, on_error) -> Callable[[], None]:
        entry = (on_data, on_error)
        self._listeners.append(entry)
        return lambda: self._listeners.remove(entry) if entry in self._listeners else None

    def push(self, dps: Mapping[str, Any]) -> None:
        """Simulate an unsolicited status event from the device."""
        for on_data, _ in list(self._listeners):
            on_data(dps)

    async def async_find(self) -> str:
        self.find_calls += 1
        return "192.0.2.10"

    async def async_connect(self) -> None:
        self.connect_calls += 1

    async def async_get(self) -> Dict[str, Any]:
        self.get_calls += 1
        if self.fail_next_get:
            self.fail_next_get = False
            err = TuyaConnectionError("timeout")
            for _, on_error in list(self._listeners):
                on_error(err)
            raise err
        self.push(self.status)
        return {"dps": dict(self.status)}

    async def async_set(self, write: DataPointWrite) -> Optional[Dict[str, Any]]:
        if self.fail_next_set:
            self.fail_next_set = False
            raise TuyaConnectionError("set failed")
        self.writes.append(write)
        return None

    async def async_close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()

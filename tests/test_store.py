"""Tests for DeviceStateStore."""

from __future__ import annotations

import logging

import pytest

from custom_components.tuya_local_thermostat.const import DIALECT_V1
from custom_components.tuya_local_thermostat.dialect import DIALECTS
from custom_components.tuya_local_thermostat.models import DeviceState, DeviceStateUpdate
from custom_components.tuya_local_thermostat.store import DeviceStateStore


@pytest.fixture
def store() -> DeviceStateStore:
    return DeviceStateStore(
        "Bathroom",
        DeviceState(
            power_on=True,
            is_heating_active=True,
            current_temperature_tenths=190,
            target_temperature_tenths=220,
            heating_since=12.0,
        ),
    )


def test_read_before_any_reading_uses_floor() -> None:
    snap = DeviceStateStore("empty").read()
    assert snap.current_temperature == 10.0
    assert snap.target_temperature == 10.0
    assert snap.power_on is False
    assert snap.is_heating_active is False
    assert snap.heating_since is None


def test_read_converts_tenths_to_celsius(store: DeviceStateStore) -> None:
    snap = store.read()
    assert snap.current_temperature == 19.0
    assert snap.target_temperature == 22.0


def test_zero_reading_never_surfaces(store: DeviceStateStore) -> None:
    store.apply_update(DIALECTS[DIALECT_V1].decode({"3": 0}))
    assert store.read().current_temperature == 19.0

    empty = DeviceStateStore("empty")
    empty.apply_update(DIALECTS[DIALECT_V1].decode({"3": 0, "2": 0}))
    assert empty.read().current_temperature == 10.0
    assert empty.read().target_temperature == 10.0


def test_partial_update_only_touches_present_fields(store: DeviceStateStore) -> None:
    store.apply_update(DIALECTS[DIALECT_V1].decode({"3": 41}))
    state = store.state
    assert state.current_temperature_tenths == 205
    assert state.power_on is True
    assert state.is_heating_active is True
    assert state.target_temperature_tenths == 220
    assert state.heating_since == 12.0


def test_last_writer_wins_per_field(store: DeviceStateStore) -> None:
    store.apply_update(DeviceStateUpdate(power_on=False))
    store.apply_update(DeviceStateUpdate(target_temperature_tenths=180))
    store.apply_update(DeviceStateUpdate(power_on=True, target_temperature_tenths=185))
    assert store.state.power_on is True
    assert store.state.target_temperature_tenths == 185


def test_below_floor_update_is_clamped(store: DeviceStateStore) -> None:
    store.apply_update(DeviceStateUpdate(current_temperature_tenths=40))
    assert store.state.current_temperature_tenths == 100


def test_unknown_dps_leave_state_untouched(store: DeviceStateStore) -> None:
    before = store.read()
    store.apply_update(DIALECTS[DIALECT_V1].decode({"55": True, "104": "auto"}))
    assert store.read() == before


def test_apply_update_logs_snapshot(store: DeviceStateStore, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="custom_components.tuya_local_thermostat.store"):
        store.apply_update(DeviceStateUpdate(power_on=False))
    assert "Bathroom synced" in caplog.text
    assert "power_on=False" in caplog.text


def test_heating_session_markers(store: DeviceStateStore) -> None:
    store.clear_heating_session()
    assert store.state.heating_since is None
    store.mark_heating_started(30.5)
    assert store.read().heating_since == 30.5

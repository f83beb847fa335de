#!/usr/bin/env python3
"""Tests for device listing, telemetry and power commands."""

import json

import pytest

from conftest import body
from pyrevogi import Device, DeviceConfig
from pyrevogi.exceptions import (
    RevogiMalformedResponseError,
    RevogiNotFoundError,
    RevogiUnexpectedResultError,
)

DEVICE = {
    "ver": "5.12",
    "pname": ["PORT 1", "PORT 2", "PORT 3", "PORT 4", "PORT 5", "PORT 6"],
    "nver": "0.00",
    "line": 1,
    "socket_type": "WebSocket",
    "ip": "192.168.1.20",
    "mac": "00:00:00:00:00:00",
    "dateAdd": "2018-01-01 00:00:00",
    "name": "SmartStrip",
    "gateway_ip": "127.0.0.1",
    "sn": "SWW6010040000001",
    "protect": 0,
    "sak": "222B2022222B",
    "register": 1,
}

STATS = {
    "softver": "5.12",
    "amp": [0, 120, 0, 0, 0, 0],
    "online": 1,
    "sn": "SWW6010040000001",
    "watt": [0, 25, 0, 0, 0, 0],
    "switch": [0, 1, 0, 0, 0, 1],
}


def devices_body(*devices):
    return body(200, {"dev": list(devices), "url": "http://lon.revogi.net/services/ajax.html"}, response=500)


def test_get_devices(make_client):
    client, http = make_client({500: [devices_body({"sn": "1234"})]}, logged_in=True)

    devices = client.get_devices()

    assert len(devices) == 1
    assert devices[0].sn == "1234"
    assert json.loads(http.sent(500)[0]["json"]) == {"protocol": "3", "dev": "all"}


def test_get_devices_full_record(make_client):
    client, _ = make_client({500: [devices_body(DEVICE)]}, logged_in=True)

    device = client.get_devices()[0]

    assert device.sn == "SWW6010040000001"
    assert device.date_added == "2018-01-01 00:00:00"
    assert device.port_name(2) == "PORT 2"
    assert device.is_registered
    assert device.stats is None


def test_get_device(make_client):
    client, http = make_client({500: [devices_body(DEVICE)]}, logged_in=True)

    device = client.get_device("SWW6010040000001")

    assert device.name == "SmartStrip"
    assert json.loads(http.sent(500)[0]["json"]) == {"protocol": "3", "dev": "SWW6010040000001"}


def test_get_device_none_returned(make_client):
    client, _ = make_client({500: [devices_body()]}, logged_in=True)

    device = client.get_device("1234")

    assert device.sn == ""
    assert device.pname == []


def test_get_devices_malformed_data(make_client):
    client, _ = make_client({500: [body(200, ["not", "a", "dict"], response=500)]}, logged_in=True)

    with pytest.raises(RevogiMalformedResponseError):
        client.get_devices()


def test_get_device_stats(make_client):
    client, http = make_client({511: [body(200, [STATS], response=511)]}, logged_in=True)

    stats = client.get_device_stats("SWW6010040000001")

    assert stats.is_online
    assert stats.port_state(2) is True
    assert stats.port_state(1) is False
    assert stats.port_watts(2) == 25
    assert stats.port_amps(2) == 120
    assert json.loads(http.sent(511)[0]["json"]) == {"protocol": "3", "sn": ["SWW6010040000001"]}


def test_get_device_stats_empty(make_client):
    client, _ = make_client({511: [body(200, [], response=511)]}, logged_in=True)

    with pytest.raises(RevogiNotFoundError):
        client.get_device_stats("1234")


def test_set_power(make_client):
    client, http = make_client({200: [body(200, "send2:SWW1234", response=200, sn="SWW1234")]}, logged_in=True)

    assert client.set_power("SWW1234", 0, True) is True
    assert json.loads(http.sent(200)[0]["json"]) == {"protocol": "3", "sn": "SWW1234", "port": 0, "state": 1}


def test_turn_off_sends_state_zero(make_client):
    client, http = make_client({200: [body(200, "send2:SWW1234", response=200)]}, logged_in=True)

    client.turn_off("SWW1234", 3)

    assert json.loads(http.sent(200)[0]["json"])["state"] == 0


@pytest.mark.parametrize(
    "data",
    ["send2:SWW9999", "send2:SWW12345", "send1:SWW1234", "send2", "SWW1234", "", 1, {"sn": "SWW1234"}],
)
def test_set_power_unexpected_echo(make_client, data):
    client, _ = make_client({200: [body(200, data, response=200)]}, logged_in=True)

    with pytest.raises(RevogiUnexpectedResultError):
        client.set_power("SWW1234", 1, True)


@pytest.mark.parametrize("port", [-1, True, "1"])
def test_set_power_invalid_port(make_client, port):
    client, http = make_client({200: [body(200, "send2:SWW1234")]}, logged_in=True)

    with pytest.raises(ValueError):
        client.set_power("SWW1234", port, True)
    assert http.requests == []


def test_empty_serial_rejected(make_client):
    client, http = make_client({511: [body(200, [STATS])]}, logged_in=True)

    with pytest.raises(ValueError):
        client.get_device_stats("")
    assert http.requests == []


def test_refresh_devices_attaches_stats(make_client):
    other = dict(DEVICE, sn="SWW6010040000002")
    client, _ = make_client(
        {
            500: [devices_body(DEVICE, other)],
            511: [body(200, [STATS], response=511), body(200, [], response=511)],
        },
        logged_in=True,
    )

    devices = client.refresh_devices()

    assert devices[0].stats.sn == "SWW6010040000001"
    assert devices[1].stats is None


def test_enforce_pinned_states(make_client):
    client, http = make_client(
        {
            500: [devices_body(DEVICE)],
            511: [body(200, [STATS], response=511)],
            200: [body(200, "send2:SWW6010040000001", response=200)],
        },
        logged_in=True,
        devices={"SWW6010040000001": DeviceConfig(state={1: 1, 2: 1, 6: 0})},
    )
    device = client.refresh_devices()[0]

    changed = client.enforce_pinned_states(device)

    assert changed == [1, 6]
    sent = [json.loads(form["json"]) for form in http.sent(200)]
    assert [(p["port"], p["state"]) for p in sent] == [(1, 1), (6, 0)]


def test_enforce_pinned_states_without_stats(make_client):
    client, http = make_client({}, logged_in=True, devices={"1234": DeviceConfig(state={1: 1})})

    assert client.enforce_pinned_states(Device(sn="1234")) == []
    assert http.requests == []

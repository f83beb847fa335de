#!/usr/bin/env python3
"""Tests for models, per-device overrides and validation helpers."""

import pytest

from pyrevogi.exceptions import RevogiMalformedResponseError
from pyrevogi.models import (
    Config,
    DeviceConfig,
    DeviceStats,
    device_configs_from_dict,
    parse_device,
    parse_device_stats,
    parse_login_data,
)
from pyrevogi.utils import (
    format_port_list,
    format_port_map,
    mask_token,
    parse_port_list,
    parse_port_map,
    validate_port,
    validate_serial,
)


def test_device_config_from_stored_options():
    configs = device_configs_from_dict(
        {"SWW1": {"state": {"1": "1", "3": 0}, "usage": {"2": 15}}, "SWW2": {}}
    )

    assert configs["SWW1"].state == {1: 1, 3: 0}
    assert configs["SWW1"].usage == {2: 15}
    assert configs["SWW2"] == DeviceConfig()


def test_device_config_invalid_port_key():
    with pytest.raises(ValueError):
        DeviceConfig.from_dict({"state": {"first": 1}})


def test_config_device_config_default():
    config = Config(username="user", password="password", devices={"SWW1": DeviceConfig(usage={1: 5})})

    assert config.device_config("SWW1").usage == {1: 5}
    assert config.device_config("other") == DeviceConfig()
    assert config.max_retries == 3


def test_in_use_threshold():
    device_config = DeviceConfig(usage={2: 10})

    assert device_config.in_use(2, 11) is True
    assert device_config.in_use(2, 10) is False
    assert device_config.in_use(1, 1) is True
    assert device_config.in_use(1, 0) is False
    assert device_config.in_use(1, None) is None


def test_ports_out_of_state_ignores_unknown_ports():
    stats = DeviceStats(switch=[1, 0])
    device_config = DeviceConfig(state={1: 0, 2: 0, 7: 1})

    assert device_config.ports_out_of_state(stats) == {1: False}


def test_stats_accessors_out_of_range():
    stats = DeviceStats(amp=[1], watt=[2], switch=[1])

    assert stats.port_count == 1
    assert stats.port_state(0) is None
    assert stats.port_watts(2) is None
    assert stats.port_amps(1) == 1


def test_parse_device_missing_fields():
    device = parse_device({"sn": "1234", "pname": None})

    assert device.sn == "1234"
    assert device.pname == []
    assert device.port_name(1) == "Port 1"
    assert not device.is_registered


def test_parse_device_bad_number():
    with pytest.raises(RevogiMalformedResponseError):
        parse_device({"sn": "1234", "register": "yes"})


def test_parse_device_stats_bad_list():
    with pytest.raises(RevogiMalformedResponseError):
        parse_device_stats({"sn": "1234", "watt": ["a"]})


def test_parse_login_data_null_fields():
    login = parse_login_data({"domain": None, "token": None, "user_id": "42"})

    assert login.domain == ""
    assert login.token == ""
    assert login.user_id == "42"


def test_validate_serial():
    validate_serial("SWW1234")
    for bad in ("", "   ", None, 1234):
        with pytest.raises(ValueError):
            validate_serial(bad)


def test_validate_port():
    assert validate_port(0) is True
    assert validate_port(6, max_ports=6) is True
    assert validate_port(7, max_ports=6) is False
    assert validate_port(-1) is False


def test_mask_token():
    assert mask_token("0123456789abcdef") == "0123...cdef"
    assert mask_token("short") == "*****"


def test_parse_port_options():
    assert parse_port_list("3, 1,,1") == [1, 3]
    assert parse_port_list("") == []
    assert parse_port_map("2:15, 4 : 40") == {2: 15, 4: 40}
    for bad in ("0", "x", "-2"):
        with pytest.raises(ValueError):
            parse_port_list(bad)
    for bad in ("2", "2:x", "2:-1", "0:5"):
        with pytest.raises(ValueError):
            parse_port_map(bad)


def test_device_config_stored_form():
    device_config = DeviceConfig(state={3: 0, 1: 1}, usage={2: 15})
    stored = device_config.to_dict()

    assert stored == {"state": {"1": 1, "3": 0}, "usage": {"2": 15}}
    assert DeviceConfig.from_dict(stored) == device_config
    assert device_config.pinned_ports(True) == [1]
    assert device_config.pinned_ports(False) == [3]
    assert format_port_list(device_config.pinned_ports(True)) == "1"
    assert format_port_map(device_config.usage) == "2:15"

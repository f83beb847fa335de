#!/usr/bin/env python3
"""Tests for login and session state."""

import pytest

from conftest import TOKEN, body, login_ok
from pyrevogi.exceptions import (
    RevogiAuthenticationError,
    RevogiMalformedResponseError,
    RevogiTransportError,
)


def test_login_ok(make_client):
    client, http = make_client({101: [login_ok(domain="lon.revogi.net")]})

    client.login()

    assert client.session.token == TOKEN
    assert client.session.domain == "lon.revogi.net"
    assert client.session.retry_count == 0
    assert http.hosts() == ["server.revogi.net"]
    assert http.sent(101)[0]["json"] == '{"username": "user", "password": "password"}'


def test_login_without_token_fails(make_client):
    client, _ = make_client({101: [body(200, {}, response=101)]})

    with pytest.raises(RevogiAuthenticationError, match="token"):
        client.login()

    assert client.session.token == ""
    assert client.session.domain == ""


def test_login_rejected(make_client):
    client, _ = make_client({101: [body(500, "{}", response=101)]})

    with pytest.raises(RevogiAuthenticationError):
        client.login()


def test_login_transport_error(make_client):
    client, _ = make_client({101: [RevogiTransportError("unexpected http response code: 500")]})

    with pytest.raises(RevogiTransportError):
        client.login()


def test_login_invalid_body(make_client):
    client, _ = make_client({101: [b'{"code":200,"data":{"incomplete":"data...,"response":101,"sn":""}']})

    with pytest.raises(RevogiMalformedResponseError):
        client.login()


def test_login_data_not_an_object(make_client):
    client, _ = make_client({101: [body(200, "ok", response=101)]})

    with pytest.raises(RevogiMalformedResponseError):
        client.login()


def test_failed_login_keeps_previous_session(make_client):
    client, _ = make_client({101: [login_ok(token="first", domain="lon.revogi.net"), body(200, {})]})
    client.login()

    with pytest.raises(RevogiAuthenticationError):
        client.login()

    assert client.session.token == "first"
    assert client.session.domain == "lon.revogi.net"


def test_session_domain_used_after_login(make_client):
    client, http = make_client(
        {
            101: [login_ok(domain="lon.revogi.net")],
            500: [body(200, {"dev": [], "url": ""}, response=500)],
        }
    )

    client.get_devices()

    assert http.hosts() == ["server.revogi.net", "lon.revogi.net"]
    assert http.sent(500)[0]["tokenlogin"] == TOKEN

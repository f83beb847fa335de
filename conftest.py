"""Shared fixtures: a fake transport that replays canned Revogi responses."""

import json
from urllib.parse import urlparse

import pytest

from pyrevogi import Config, RevogiClient

TOKEN = "0123456789abcdef"


def body(code=200, data=None, response=0, sn=""):
    return json.dumps({"code": code, "data": {} if data is None else data, "response": response, "sn": sn}).encode()


def login_ok(token=TOKEN, domain=""):
    return body(200, {"user_id": "42", "domain": domain, "token": token}, response=101)


class FakeHttpClient:
    """Records posted forms and answers them.

    ``routes`` maps a command code to a list of replies, consumed in order;
    the last reply repeats. A reply is a body (bytes) or an exception.
    """

    def __init__(self, routes=None):
        self.routes = {code: list(replies) for code, replies in (routes or {}).items()}
        self.requests = []

    def post_form(self, url, data):
        self.requests.append((url, dict(data)))
        replies = self.routes[int(data["cmd"])]
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self):
        pass

    def sent(self, code):
        return [form for _, form in self.requests if form["cmd"] == str(code)]

    def hosts(self):
        return [urlparse(url).netloc for url, _ in self.requests]


@pytest.fixture
def make_client():
    def _make(routes, logged_in=False, **config):
        http = FakeHttpClient(routes)
        config.setdefault("cooldown_seconds", 0)
        client = RevogiClient(Config(username="user", password="password", **config), http)
        if logged_in:
            client.session.update("", TOKEN)
        return client, http

    return _make

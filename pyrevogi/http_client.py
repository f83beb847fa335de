"""
Revogi HTTP transport and envelope codec.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import requests

from .exceptions import RevogiMalformedResponseError, RevogiTransportError
from .models import Command, Envelope


def encode_command(command: Command, token: Optional[str] = None) -> Dict[str, str]:
    """Build the form fields for a command."""
    form = {
        "cmd": str(command.code),
        "json": json.dumps(command.payload),
    }
    if command.requires_session:
        form["tokenlogin"] = token or ""
    return form


def decode_envelope(raw: Union[bytes, str]) -> Envelope:
    """Parse a response body into an Envelope."""
    try:
        body: Any = json.loads(raw)
    except (TypeError, ValueError) as err:
        raise RevogiMalformedResponseError(f"failed to read body: {err}") from err

    if not isinstance(body, dict):
        raise RevogiMalformedResponseError(f"response body is not an object: {body!r}")

    code = body.get("code")
    # bool is an int subclass
    if not isinstance(code, int) or isinstance(code, bool):
        raise RevogiMalformedResponseError(f"response body has no status code: {body!r}")

    response = body.get("response", 0)
    return Envelope(
        status_code=code,
        data=body.get("data"),
        response_code=response if isinstance(response, int) else 0,
        correlation=str(body.get("sn") or ""),
    )


@dataclass
class RevogiHttpClient:
    timeout: float = 10.0
    verify: Union[bool, str] = True
    user_agent: str = "pyrevogi/1.0"
    session: requests.Session = field(default_factory=requests.Session)

    def post_form(self, url: str, data: Dict[str, str]) -> bytes:
        """POST form fields and return the raw body of a 2xx response."""
        try:
            resp = self.session.post(
                url,
                data=data,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                verify=self.verify,
            )
        except requests.RequestException as err:
            raise RevogiTransportError(f"request failed: {err}") from err

        if not 200 <= resp.status_code < 300:
            raise RevogiTransportError(f"unexpected http response code: {resp.status_code}")
        return resp.content

    def close(self) -> None:
        self.session.close()

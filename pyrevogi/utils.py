"""
Revogi API Utilities

Helper functions for validating command arguments and port option strings.
"""

from typing import Dict, List, Optional


def validate_serial(serial: str) -> None:
    """Raise ValueError unless serial is a non-empty string."""
    if not isinstance(serial, str) or not serial.strip():
        raise ValueError(f"Invalid device serial: {serial!r}")


def validate_port(port: int, max_ports: Optional[int] = None) -> bool:
    """Validate a port number; 0 addresses every port."""
    if not isinstance(port, int) or isinstance(port, bool) or port < 0:
        return False
    return max_ports is None or port <= max_ports


def mask_token(token: str) -> str:
    """Shorten a session token for log output."""
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


def parse_port_list(text: str) -> List[int]:
    """Parse "1, 3" into [1, 3]. Raises ValueError on anything but positive ports."""
    ports = []
    for item in (text or "").replace(" ", "").split(","):
        if not item:
            continue
        port = int(item)
        if port < 1:
            raise ValueError(f"Invalid port: {port}")
        ports.append(port)
    return sorted(set(ports))


def parse_port_map(text: str) -> Dict[int, int]:
    """Parse "2:15, 4:40" into {2: 15, 4: 40}."""
    mapping = {}
    for item in (text or "").replace(" ", "").split(","):
        if not item:
            continue
        port, sep, value = item.partition(":")
        if not sep:
            raise ValueError(f"Expected port:watts, got {item!r}")
        watts = int(value)
        if watts < 0:
            raise ValueError(f"Invalid threshold for port {port}: {watts}")
        for p in parse_port_list(port):
            mapping[p] = watts
    return mapping


def format_port_list(ports) -> str:
    return ", ".join(str(port) for port in sorted(ports))


def format_port_map(mapping: Dict[int, int]) -> str:
    return ", ".join(f"{port}:{value}" for port, value in sorted(mapping.items()))

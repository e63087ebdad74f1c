from __future__ import annotations

import socket

from flask import Request


def get_client_ip(request: Request) -> str | None:
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    xff = request.headers.get("X-Forwarded-For")
    if xff:
        parts = [p.strip() for p in xff.split(",") if p.strip()]
        if parts:
            return parts[0]

    return request.remote_addr or None


def lan_ipv4_addresses() -> list[str]:
    """Non-loopback IPv4 addresses students on the same network can reach."""
    found: list[str] = []

    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        addr = info[4][0]
        if not addr.startswith("127.") and addr not in found:
            found.append(addr)

    # Route lookup only, no packet is sent.
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("10.255.255.255", 1))
        addr = s.getsockname()[0]
        if not addr.startswith("127.") and addr not in found:
            found.append(addr)
    except OSError:
        pass
    finally:
        s.close()

    return found

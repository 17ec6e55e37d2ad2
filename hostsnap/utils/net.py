from __future__ import annotations
import re
from typing import Optional

_UINT_RE = re.compile(r"^[0-9]+$")
_INT_RE = re.compile(r"^-?[0-9]+$")

PORT_MAX = 0xFFFF
INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
UINT32_MAX = 2 ** 32 - 1

def parse_uint(s: str, maximum: int) -> Optional[int]:
    # int() alone would accept '+80', ' 80' and '8_0'
    if not s or not _UINT_RE.match(s):
        return None
    v = int(s)
    return v if v <= maximum else None

def parse_port(s: str) -> Optional[int]:
    return parse_uint(s, PORT_MAX)

def parse_pid(s: str) -> Optional[int]:
    if not s or not _INT_RE.match(s):
        return None
    v = int(s)
    return v if INT32_MIN <= v <= INT32_MAX else None

def port_of(addr: str) -> Optional[int]:
    """
    Port of a netstat local-address field.
    Supports:
      - '1.2.3.4:5678', '0.0.0.0:135'
      - '[::1]:443', '[fe80::1%4]:139'
    Unbracketed IPv6 ('::1', 'fe80::1:80') is ambiguous and yields None,
    as do '*:*' and addresses without a port.
    """
    if not addr:
        return None
    if addr.startswith('['):
        host, sep, port = addr.rpartition(']:')
        if not sep or not host:
            return None
        return parse_port(port)
    if addr.count(':') != 1:
        return None
    _, port = addr.rsplit(':', 1)
    return parse_port(port)

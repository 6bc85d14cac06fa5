from __future__ import annotations

import re

# Plain CRC-32 polynomial. Older copies of this scheme call it "Castagnoli",
# but stored page ids depend on this exact value.
CRC32_POLYNOMIAL = 0x04C11DB7
UINT32_MASK = 0xFFFFFFFF

PAGE_ID_RE = re.compile(r"^[0-9A-F]{8}$")


def _build_table() -> tuple[int, ...]:
    table: list[int] = []
    for byte in range(256):
        k = byte << 24
        for _ in range(8):
            if k & 0x80000000:
                k = ((k << 1) ^ CRC32_POLYNOMIAL) & UINT32_MASK
            else:
                k = (k << 1) & UINT32_MASK
        table.append(k)
    return tuple(table)


CRC_TABLE = _build_table()


def crc32_msb(data: bytes) -> int:
    """MSB-first CRC-32 with a zero initial value and no final xor."""
    ret = 0
    for byte in data:
        ret = ((ret << 8) & UINT32_MASK) ^ CRC_TABLE[(ret >> 24) ^ byte]
    return ret


def hash_page_name(name: str) -> str:
    """Hash a page name into an 8-character uppercase hex identifier.

    The name is hashed over its UTF-8 bytes, one step per byte.
    """
    data = name.encode("utf-8", errors="surrogatepass")
    return f"{crc32_msb(data):08X}"


def shard_key(page_id: str) -> str:
    return page_id[:1]


def is_page_id(value: str) -> bool:
    return bool(PAGE_ID_RE.match(value))

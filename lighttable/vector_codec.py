from __future__ import annotations

from collections.abc import Iterable

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
GROUP_BITS = 6

_INDEX = {char: index for index, char in enumerate(ALPHABET)}


def padded_length(count: int) -> int:
    return -(-count // GROUP_BITS) * GROUP_BITS


def encode_vector(bits: Iterable[int]) -> str:
    """Pack marks six at a time into alphabet characters.

    The first mark of each group is the most significant bit; a short final
    group is padded with zeros on the right.
    """
    values = [1 if bit else 0 for bit in bits]
    chars: list[str] = []
    for start in range(0, len(values), GROUP_BITS):
        group = values[start : start + GROUP_BITS]
        group += [0] * (GROUP_BITS - len(group))
        index = 0
        for bit in group:
            index = 2 * index + bit
        chars.append(ALPHABET[index])
    return "".join(chars)


def decode_vector(text: str) -> list[int]:
    """Expand each character into six marks.

    Characters outside the alphabet decode as six zero marks. The result is
    always a multiple of six long; callers truncate to the real cell count.
    """
    bits: list[int] = []
    for char in text:
        index = _INDEX.get(char, 0)
        bits.extend((index >> shift) & 1 for shift in range(GROUP_BITS - 1, -1, -1))
    return bits

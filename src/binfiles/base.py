# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""Base types, constants and validators."""

from typing import Any
from typing import Iterable
from typing import Union

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]

ADDRESS_SPACE: int = 0x10000
r"""Size of the addressable space (16-bit addresses)."""

ADDRESS_MAX: int = ADDRESS_SPACE - 1
r"""Highest valid address."""

BYTE_MAX: int = 0xFF
r"""Highest valid byte value."""

DEFAULT_STEP: int = 64
r"""Window width of the default sparse file traversal."""


class CollisionError(ValueError):
    r"""An address is written twice.

    Addresses of a write-once storage can be assigned just once; any further
    attempt to assign the same address raises this error, regardless of the
    value being written.
    """


class NotPresentError(LookupError):
    r"""Strict read of an unset address."""


def check_index(value: Any, name: str) -> int:
    r"""Converts a value into a plain integer.

    Args:
        value:
            Object supporting the ``__index__`` protocol.

        name (str):
            Argument name, for diagnostics.

    Returns:
        int: Integer value.

    Raises:
        TypeError: `value` is not an integer.

    Examples:
        >>> from binfiles.base import check_index
        >>> check_index(True, 'address')
        1
        >>> check_index(1.5, 'address')
        Traceback (most recent call last):
            ...
        TypeError: address must be an integer, got float
    """

    try:
        return value.__index__()
    except AttributeError:
        raise TypeError(f'{name} must be an integer, '
                        f'got {type(value).__name__}') from None


def check_byte(value: Any) -> int:
    r"""Checks a single byte value.

    Returns:
        int: Byte value, within ``0`` and :data:`BYTE_MAX`.

    Raises:
        TypeError: `value` is not an integer.
        ValueError: `value` does not fit a byte.
    """

    value = check_index(value, 'value')
    if not 0 <= value <= BYTE_MAX:
        raise ValueError('byte value overflow')
    return value


def freeze_bytes(data: Union[AnyBytes, Iterable[int]]) -> bytes:
    r"""Takes an immutable copy of a byte sequence.

    Args:
        data (bytes):
            Byte-like object, or iterable of byte values.

    Returns:
        bytes: Immutable copy of `data`.

    Raises:
        TypeError: `data` is ``None``.
        ValueError: Some item of `data` does not fit a byte.

    Examples:
        >>> from binfiles.base import freeze_bytes
        >>> buffer = bytearray(b'abc')
        >>> frozen = freeze_bytes(buffer)
        >>> buffer[0] = 0x7A
        >>> frozen
        b'abc'
        >>> freeze_bytes([1, 2, 0xFF])
        b'\x01\x02\xff'
    """

    if data is None:
        raise TypeError('data must not be None')

    if isinstance(data, int):
        raise TypeError('data must be a byte sequence')

    try:
        return bytes(data)
    except ValueError:
        raise ValueError('byte value overflow') from None

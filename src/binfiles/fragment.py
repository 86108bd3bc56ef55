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

r"""Data fragments."""

from typing import Any
from typing import Iterable
from typing import Union

from .base import ADDRESS_SPACE
from .base import AnyBytes
from .base import check_index
from .base import freeze_bytes


class Fragment:
    r"""Contiguous run of bytes at an absolute address.

    The whole run must fit within the 16-bit address space, i.e. each byte
    address must be within ``0`` and :data:`binfiles.base.ADDRESS_MAX`.

    A fragment is immutable: `data` is copied on construction, and exposed as
    an immutable :obj:`bytes` object, so that changing the source buffer
    afterwards does not affect the fragment.

    Attributes:
        position (int):
            Address of the first byte.

        data (bytes):
            Fragment content, at least one byte long.

    Args:
        position (int):
            See :attr:`position` attribute.

        data (bytes):
            See :attr:`data` attribute.

    Raises:
        TypeError: `data` is ``None``.
        ValueError: Empty `data`, or run outside of the address space.

    Examples:
        >>> from binfiles.fragment import Fragment
        >>> buffer = bytearray(b'abc')
        >>> fragment = Fragment(100, buffer)
        >>> buffer[0] = 0x7A
        >>> fragment.data
        b'abc'
        >>> fragment
        Fragment(position=100, length=3)
        >>> fragment.endex
        103
    """

    __slots__ = ('_position', '_data')

    def __init__(
        self,
        position: int,
        data: Union[AnyBytes, Iterable[int]],
    ):

        data = freeze_bytes(data)
        position = check_index(position, 'position')
        _check_position(position)
        _check_position(position + len(data) - 1)
        if not data:
            raise ValueError('must contain at least 1 byte of data')

        self._position: int = position
        self._data: bytes = data

    def __eq__(self, other: Any) -> bool:

        if not isinstance(other, Fragment):
            return NotImplemented
        return self._position == other._position and self._data == other._data

    def __hash__(self) -> int:

        return hash((self._position, self._data))

    def __len__(self) -> int:

        return len(self._data)

    def __ne__(self, other: Any) -> bool:

        if not isinstance(other, Fragment):
            return NotImplemented
        return not self == other

    def __repr__(self) -> str:

        return f'{type(self).__name__}(position={self._position}, length={len(self._data)})'

    @property
    def data(self) -> bytes:
        r"""bytes: Fragment content."""

        return self._data

    @property
    def endex(self) -> int:
        r"""int: Exclusive end address."""

        return self._position + len(self._data)

    @property
    def length(self) -> int:
        r"""int: Number of bytes."""

        return len(self._data)

    @property
    def position(self) -> int:
        r"""int: Address of the first byte."""

        return self._position


def _check_position(address: int) -> None:

    if not 0 <= address < ADDRESS_SPACE:
        raise ValueError(f'address out of bounds: {address}')

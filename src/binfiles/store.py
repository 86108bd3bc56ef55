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

r"""Write-once byte storage.

A :class:`ByteStore` holds up to :data:`binfiles.base.ADDRESS_SPACE` byte
cells, each of which is either *unset* or holds a single byte value.

Cells are backed by a bounded :class:`bytesparse.Memory`, so that presence is
kept apart from the stored value (a ``0x00`` byte is not an unset cell).
"""

from typing import List
from typing import Optional
from typing import Tuple

from bytesparse import Memory

from .base import ADDRESS_SPACE
from .base import CollisionError
from .base import NotPresentError
from .base import check_byte
from .base import check_index


class ByteStore:
    r"""Address-indexed write-once byte cells.

    Args:
        size (int):
            Number of addressable cells, within ``1`` and
            :data:`binfiles.base.ADDRESS_SPACE`.

    Raises:
        ValueError: Invalid `size`.

    Examples:
        >>> from binfiles.store import ByteStore
        >>> store = ByteStore(16)
        >>> store.is_set(3)
        False
        >>> store.put(3, 0x00)
        >>> store.is_set(3), store.get(3)
        (True, 0)
        >>> store.get_or_none(4) is None
        True
        >>> store.put(3, 0xFF)
        Traceback (most recent call last):
            ...
        binfiles.base.CollisionError: value already present at address 3
    """

    def __init__(self, size: int):

        size = check_index(size, 'size')
        if not 0 < size <= ADDRESS_SPACE:
            raise ValueError(f'size must be between 1 and {ADDRESS_SPACE}')

        self._size: int = size
        self._memory: Memory = Memory(start=0, endex=size)

    def __len__(self) -> int:

        return self._size

    def __repr__(self) -> str:

        return f'<{type(self).__name__} size={self._size} occupied={self.occupied}>'

    def _check_address(self, address: int) -> int:

        address = check_index(address, 'address')
        if not 0 <= address < self._size:
            raise IndexError(f'address out of bounds: {address}')
        return address

    def blocks(
        self,
        start: int,
        endex: int,
    ) -> List[Tuple[int, bytes]]:
        r"""Lists occupied runs.

        Each run is maximal, i.e. it is surrounded by unset cells (or by the
        range boundaries).

        Args:
            start (int):
                Inclusive start address.

            endex (int):
                Exclusive end address.

        Returns:
            list of (int, bytes): Start address and content of each run,
            clipped to the ``[start, endex)`` range, by ascending address.

        Examples:
            >>> from binfiles.store import ByteStore
            >>> store = ByteStore(16)
            >>> for address in (1, 2, 3, 6):
            ...     store.put(address, address)
            >>> store.blocks(2, 16)
            [(2, b'\x02\x03'), (6, b'\x06')]
        """

        blocks = self._memory.to_blocks(start=start, endex=endex)
        return [(block_start, bytes(block_data)) for block_start, block_data in blocks]

    def get(self, address: int) -> int:
        r"""Reads a set cell.

        Raises:
            IndexError: `address` out of bounds.
            NotPresentError: The cell is unset.
        """

        value = self.get_or_none(address)
        if value is None:
            raise NotPresentError(f'no value set at address {address}')
        return value

    def get_or_none(self, address: int) -> Optional[int]:
        r"""Reads a cell.

        Returns:
            int: Byte value, or ``None`` if unset.

        Raises:
            IndexError: `address` out of bounds.
        """

        address = self._check_address(address)
        return self._memory.peek(address)

    def is_set(self, address: int) -> bool:
        r"""Tells whether a cell is set.

        Returns:
            bool: The cell holds a byte value.

        Raises:
            IndexError: `address` out of bounds.
        """

        return self.get_or_none(address) is not None

    @property
    def occupied(self) -> int:
        r"""int: Number of set cells."""

        return self._memory.content_size

    def put(self, address: int, value: int) -> None:
        r"""Assigns a cell.

        Args:
            address (int):
                Cell address.

            value (int):
                Byte value.

        Raises:
            IndexError: `address` out of bounds.
            CollisionError: The cell is already set.
            ValueError: `value` does not fit a byte.
        """

        address = self._check_address(address)
        value = check_byte(value)

        if self._memory.peek(address) is not None:
            raise CollisionError(f'value already present at address {address}')

        self._memory.poke(address, value)

    @property
    def size(self) -> int:
        r"""int: Number of addressable cells."""

        return self._size

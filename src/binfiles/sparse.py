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

r"""Sparse binary files.

A :class:`SparseFile` models the binary image of a device with a 16-bit
address space, where only some addresses hold data.
Data is deposited byte by byte or by :class:`binfiles.fragment.Fragment`,
without ever overwriting, and extracted as the smallest list of fragments
covering an address range.

+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
+===+===+===+===+===+===+===+===+===+
|   |[A | B | C]|   |   |[x | y]|   |
+---+---+---+---+---+---+---+---+---+

>>> from binfiles.fragment import Fragment
>>> from binfiles.sparse import SparseFile
>>> file = SparseFile(9, [Fragment(1, b'ABC'), Fragment(6, b'xy')])
>>> file.current_size
8
>>> [(f.position, f.data) for f in file.get_fragments(2, 6)]
[(2, b'BC'), (6, b'xy')]
"""

from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional

from deprecated import deprecated

from .base import ADDRESS_SPACE
from .base import DEFAULT_STEP
from .base import CollisionError
from .base import check_index
from .fragment import Fragment
from .store import ByteStore


class SparseFile:
    r"""Sparse binary file.

    The file has a fixed *size limit*, and a *current size*, which is the
    smallest length holding all the data put so far.
    The current size never decreases.

    Args:
        size_limit (int):
            Maximum size of the file, within ``1`` and
            :data:`binfiles.base.ADDRESS_SPACE`.

        fragments (list of :class:`Fragment`):
            Optional fragments to add, in order.

    Raises:
        ValueError: Invalid `size_limit`.
        IndexError: Some fragment does not fit the file.
        CollisionError: Some fragments overlap.
    """

    def __init__(
        self,
        size_limit: int = ADDRESS_SPACE,
        fragments: Optional[Iterable[Fragment]] = None,
    ):

        self._store: ByteStore = ByteStore(size_limit)
        self._current_size: int = 0

        if fragments is not None:
            for fragment in fragments:
                self.add_fragment(fragment)

    def __iter__(self) -> Iterator[Fragment]:
        r"""Iterates with the default step.

        Equivalent to ``self.iterate(DEFAULT_STEP)``.

        See Also:
            :meth:`iterate`
        """

        return self.iterate(DEFAULT_STEP)

    def __repr__(self) -> str:

        return (f'<{type(self).__name__} size_limit={self.size_limit} '
                f'current_size={self._current_size}>')

    @deprecated(reason='Use put_byte() instead')
    def add_byte(self, address: int, value: int) -> None:
        r"""Puts a single byte.

        See Also:
            :meth:`put_byte`
        """

        self.put_byte(address, value)

    def add_fragment(self, fragment: Fragment) -> None:
        r"""Puts the bytes of a fragment.

        The operation is atomic: the whole fragment range is checked before
        writing, so that a failing call leaves the file untouched.

        Args:
            fragment (:class:`Fragment`):
                Fragment to add.

        Raises:
            TypeError: `fragment` is ``None``.
            IndexError: The fragment does not fit the file.
            CollisionError: Some fragment byte is already set.

        Examples:
            >>> from binfiles.fragment import Fragment
            >>> from binfiles.sparse import SparseFile
            >>> file = SparseFile()
            >>> file.add_fragment(Fragment(100, b'\x0C\x0D\x0E\x0F'))
            >>> file.add_fragment(Fragment(102, b'\x00'))
            Traceback (most recent call last):
                ...
            binfiles.base.CollisionError: value already present at address 102
        """

        if fragment is None:
            raise TypeError('fragment must not be None')

        start = fragment.position
        endex = fragment.endex
        store = self._store

        if endex > store.size:
            raise IndexError(f'address out of bounds: {store.size}')

        collisions = store.blocks(start, endex)
        if collisions:
            raise CollisionError(f'value already present at address {collisions[0][0]}')

        for offset, value in enumerate(fragment.data):
            store.put(start + offset, value)

        if self._current_size < endex:
            self._current_size = endex

    @property
    def current_size(self) -> int:
        r"""int: Smallest size holding all the data."""

        return self._current_size

    def get_byte(self, address: int) -> Optional[int]:
        r"""Reads a single byte.

        Returns:
            int: Byte value, or ``None`` if unset.

        Raises:
            IndexError: `address` out of bounds.
        """

        return self._store.get_or_none(address)

    def get_fragments(self, start: int, length: int) -> List[Fragment]:
        r"""Extracts the minimum cover of a range.

        If the range is fully occupied, a single fragment is returned.
        Otherwise, the smallest list of fragments covering all the data within
        the range is returned, by ascending address.
        No fragment holds unset bytes, and no two fragments are contiguous.
        Runs crossing the range boundaries are clipped.

        Args:
            start (int):
                Inclusive start address of the range.

            length (int):
                Range length, at least ``1``.

        Returns:
            list of :class:`Fragment`: Fragments covering the range; empty if
            the range holds no data.

        Raises:
            ValueError: Non-positive `length`.
            IndexError: The range exceeds the file size limit.

        Examples:
            +-----+-----+-----+-----+-----+-----+-----+-----+
            | 100 | 101 | 102 | 103 | 104 | 105 | 106 | 107 |
            +=====+=====+=====+=====+=====+=====+=====+=====+
            | [12 |  13 |  14 |  15]|     | [23 |  24 |  25]|
            +-----+-----+-----+-----+-----+-----+-----+-----+

            >>> from binfiles.fragment import Fragment
            >>> from binfiles.sparse import SparseFile
            >>> file = SparseFile(fragments=[Fragment(100, [12, 13, 14, 15]),
            ...                              Fragment(105, [23, 24, 25])])
            >>> [(f.position, list(f.data)) for f in file.get_fragments(102, 4)]
            [(102, [14, 15]), (105, [23])]
        """

        start = check_index(start, 'start')
        length = check_index(length, 'length')

        if length < 1:
            raise ValueError('length must be greater than zero')

        endex = start + length
        if start < 0 or endex > self._store.size:
            raise IndexError(f'range out of bounds: [{start}, {endex})')

        return [Fragment(block_start, block_data)
                for block_start, block_data in self._store.blocks(start, endex)]

    def iterate(self, step: int = DEFAULT_STEP) -> Iterator[Fragment]:
        r"""Iterates over fixed-size windows.

        The file is scanned by windows ``[0, step)``, ``[step, 2*step)``, and
        so on, while the window start is within :attr:`current_size`.
        Each window yields the fragments returned by :meth:`get_fragments`,
        hence a run crossing a window boundary is split.

        The last window is not clipped: if it exceeds :attr:`size_limit`,
        :obj:`IndexError` is raised when it is reached.

        Args:
            step (int):
                Window width, at least ``1``.

        Returns:
            iterator of :class:`Fragment`: A new independent iterator.

        Raises:
            ValueError: Non-positive `step`.

        Examples:
            >>> from binfiles.fragment import Fragment
            >>> from binfiles.sparse import SparseFile
            >>> file = SparseFile(16, [Fragment(2, b'ABCDEF')])
            >>> [(f.position, f.data) for f in file.iterate(4)]
            [(2, b'AB'), (4, b'CDEF')]
        """

        step = check_index(step, 'step')
        if step < 1:
            raise ValueError('step must be greater than zero')

        return self._iterate(step)

    def _iterate(self, step: int) -> Iterator[Fragment]:

        window_start = 0
        while window_start < self._current_size:
            yield from self.get_fragments(window_start, step)
            window_start += step

    def put_byte(self, address: int, value: int) -> None:
        r"""Puts a single byte.

        Args:
            address (int):
                Byte address.

            value (int):
                Byte value.

        Raises:
            IndexError: `address` out of bounds.
            CollisionError: Data already present at `address`.
            ValueError: `value` does not fit a byte.
        """

        address = check_index(address, 'address')
        self._store.put(address, value)

        if self._current_size <= address:
            self._current_size = address + 1

    @property
    def size_limit(self) -> int:
        r"""int: Maximum size of the file."""

        return self._store.size

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

r"""Intel HEX format.

Streaming reader of raw Intel HEX records.

Each record is serialized as ``:NNAAAATTDD...DDCC``, where all the fields are
uppercase hexadecimal digit pairs:

* ``NN``: data byte count;
* ``AAAA``: big-endian 16-bit address;
* ``TT``: record type (see :class:`IhexTag`);
* ``DD``: data bytes;
* ``CC``: checksum, such that the sum of all the record bytes is zero modulo
  256.

Anything outside of records (line terminators, whitespace, comments) is
ignored.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import enum
import io
from typing import IO
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union

from ..base import ADDRESS_MAX
from ..base import BYTE_MAX
from ..base import AnyBytes
from ..base import check_index
from ..base import freeze_bytes

try:
    from typing import Self
except ImportError:  # pragma: no cover
    Self = Any  # Python < 3.11

RECORD_BEGIN: bytes = b':'
r"""Record start marker."""

HEX_DIGITS: Mapping[int, int] = {char: value
                                 for value, char in enumerate(b'0123456789ABCDEF')}
r"""Accepted hexadecimal digit characters, to their nibble value."""


class IhexTag(enum.IntEnum):
    r"""Intel HEX record type."""

    DATA = 0
    r"""Binary data."""

    END_OF_FILE = 1
    r"""End Of File."""

    EXTENDED_SEGMENT_ADDRESS = 2
    r"""Extended Segment Address."""

    START_SEGMENT_ADDRESS = 3
    r"""Start Segment Address."""

    EXTENDED_LINEAR_ADDRESS = 4
    r"""Extended Linear Address."""

    START_LINEAR_ADDRESS = 5
    r"""Start Linear Address."""


class HexRecordParsingError(ValueError):
    r"""Format-level error while reading Intel HEX records."""


class HexRecord:
    r"""Raw Intel HEX record.

    The record holds its fields as they were read, without any knowledge of
    their meaning: extended address records are kept as they are, with no
    address arithmetic applied.

    Attributes:
        tag (int):
            Record type, within ``0`` and ``255``.
            Standard values are enumerated by :class:`IhexTag`.

        address (int):
            Address field, within ``0`` and ``0xFFFF``.

        data (bytes):
            Data field, up to 255 bytes.

    Args:
        tag (int):
            See :attr:`tag` attribute.

        address (int):
            See :attr:`address` attribute.

        data (bytes):
            See :attr:`data` attribute.
            It is copied, so that changing the source buffer afterwards does
            not affect the record.

    Raises:
        TypeError: `data` is ``None``.
        ValueError: Some field overflows.

    Examples:
        >>> from binfiles.formats.ihex import HexRecord, IhexTag
        >>> record = HexRecord(IhexTag.DATA, 0x0030, b'\x02\x33\x7A')
        >>> record.count
        3
        >>> hex(record.compute_checksum())
        '0x1e'
    """

    __slots__ = ('_tag', '_address', '_data')

    def __init__(
        self,
        tag: int,
        address: int,
        data: Union[AnyBytes, Iterable[int]] = b'',
    ):

        tag = check_index(tag, 'tag')
        if not 0 <= tag <= BYTE_MAX:
            raise ValueError('tag overflow')

        address = check_index(address, 'address')
        if not 0 <= address <= ADDRESS_MAX:
            raise ValueError('address overflow')

        data = freeze_bytes(data)
        if len(data) > BYTE_MAX:
            raise ValueError('data size overflow')

        self._tag: int = tag
        self._address: int = address
        self._data: bytes = data

    def __eq__(self, other: Any) -> bool:

        if not isinstance(other, HexRecord):
            return NotImplemented
        return (self._tag == other._tag and
                self._address == other._address and
                self._data == other._data)

    def __hash__(self) -> int:

        return hash((self._tag, self._address, self._data))

    def __ne__(self, other: Any) -> bool:

        if not isinstance(other, HexRecord):
            return NotImplemented
        return not self == other

    def __repr__(self) -> str:

        return (f'{type(self).__name__}(tag={self._tag}, '
                f'address=0x{self._address:04X}, data={self._data!r})')

    @property
    def address(self) -> int:
        r"""int: Address field."""

        return self._address

    def compute_checksum(self) -> int:
        r"""Computes the checksum field value.

        This is the value a writer would serialize as the last byte of the
        record, so that the sum of all the record bytes is zero modulo 256.

        Returns:
            int: Checksum byte value.

        Examples:
            >>> from binfiles.formats.ihex import HexRecord, IhexTag
            >>> HexRecord(IhexTag.END_OF_FILE, 0).compute_checksum()
            255
        """

        address = self._address
        checksum = (len(self._data) + (address >> 8) + (address & 0xFF) +
                    self._tag + sum(self._data))
        checksum = (0x100 - (checksum & 0xFF)) & 0xFF
        return checksum

    @property
    def count(self) -> int:
        r"""int: Data byte count."""

        return len(self._data)

    @property
    def data(self) -> bytes:
        r"""bytes: Data field."""

        return self._data

    def is_data(self) -> bool:
        r"""Tells whether this is a data record.

        Returns:
            bool: The tag is :attr:`IhexTag.DATA`.
        """

        return self._tag == IhexTag.DATA

    def is_eof(self) -> bool:
        r"""Tells whether this is an End Of File record.

        Returns:
            bool: The tag is :attr:`IhexTag.END_OF_FILE`.
        """

        return self._tag == IhexTag.END_OF_FILE

    @property
    def tag(self) -> int:
        r"""int: Record type."""

        return self._tag


class HexReaderState(enum.Enum):
    r"""State of a :class:`HexReader`.

    Any state but :attr:`VALID` is terminal.
    """

    VALID = 'valid'
    r"""Records can be read."""

    COMPLETED = 'completed'
    r"""The stream ended between records."""

    CLOSED = 'closed'
    r"""The reader was closed."""

    IO_ERROR = 'io_error'
    r"""The stream raised an I/O error."""

    PARSING_ERROR = 'parsing_error'
    r"""A malformed record was found."""


class HexReader:
    r"""Intel HEX record reader.

    It reads :class:`HexRecord` objects from a binary stream, one at a time.

    While looking for the next record, any bytes are ignored until a record
    start marker (``:``) is found.
    After returning a record, the stream is consumed exactly up to and
    including the last byte of that record.

    The first error met makes the reader unusable: any further read raises
    an error of the same kind.

    The reader owns the stream, closing it via :meth:`close`.
    It can also be used as a context manager, and as an iterator.

    Args:
        stream (bytes IO or buffer):
            Binary stream, or byte buffer, to read records from.

    Raises:
        TypeError: `stream` is ``None``, or a text stream.

    Examples:
        >>> from binfiles.formats.ihex import HexReader
        >>> buffer = b'''
        ...     :0300300002337A1E
        ...     :00000001FF
        ... '''
        >>> with HexReader(buffer) as reader:
        ...     records = list(reader)
        >>> records  # doctest: +NORMALIZE_WHITESPACE
        [HexRecord(tag=0, address=0x0030, data=b'\x023z'),
         HexRecord(tag=1, address=0x0000, data=b'')]
        >>> reader.state
        <HexReaderState.CLOSED: 'closed'>
    """

    def __init__(
        self,
        stream: Union[AnyBytes, IO],
    ):

        if stream is None:
            raise TypeError('stream must not be None')

        if isinstance(stream, (str, io.TextIOBase)):
            raise TypeError(f'binary stream required, got {type(stream).__name__}')

        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(stream)

        self._stream: IO = stream
        self._state: HexReaderState = HexReaderState.VALID

    def __enter__(self) -> Self:

        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:

        self.close()

    def __iter__(self) -> Iterator[HexRecord]:

        return self

    def __next__(self) -> HexRecord:

        record = self.read_next()
        if record is None:
            raise StopIteration
        return record

    def _read_char(self) -> Optional[int]:

        try:
            chunk = self._stream.read(1)
        except ValueError as exc:  # reading a closed stream
            raise OSError(str(exc)) from exc

        if not isinstance(chunk, (bytes, bytearray)):
            raise TypeError(f'binary stream required, got {type(chunk).__name__} chunks')

        return chunk[0] if chunk else None

    def _read_hex_byte(self) -> int:

        high = self._read_char()
        low = self._read_char()
        if high is None or low is None:
            raise HexRecordParsingError('unexpected EOS')

        return (_parse_hex_digit(high) << 4) | _parse_hex_digit(low)

    def _read_hex_bytes(self, size: int) -> List[int]:

        return [self._read_hex_byte() for _ in range(size)]

    def _read_record(self) -> Optional[HexRecord]:

        while True:
            char = self._read_char()
            if char is None:
                self._state = HexReaderState.COMPLETED
                return None
            if char == RECORD_BEGIN[0]:
                break

        count = self._read_hex_byte()
        fields = self._read_hex_bytes(count + 4)

        if (count + sum(fields)) & 0xFF:
            raise HexRecordParsingError('bad checksum')

        address = (fields[0] << 8) | fields[1]
        tag = fields[2]
        data = bytes(fields[3:(3 + count)])
        return HexRecord(tag, address, data)

    def close(self) -> None:
        r"""Closes the reader.

        The underlying stream is closed on the first call only; any further
        calls do nothing.

        Raises:
            OSError: The stream failed to close.
        """

        if self._state != HexReaderState.CLOSED:
            self._state = HexReaderState.CLOSED
            self._stream.close()

    def read_next(self) -> Optional[HexRecord]:
        r"""Reads the next record.

        Returns:
            :class:`HexRecord`: The next record, or ``None`` if the stream
            ended.

        Raises:
            OSError: I/O error from the stream, now or previously, or the
                reader was closed.
            HexRecordParsingError: Unexpected end of stream within a record,
                non-hexadecimal character within a record, or bad checksum,
                now or previously.
            TypeError: The stream returned text instead of bytes.

        Examples:
            >>> from binfiles.formats.ihex import HexReader
            >>> reader = HexReader(b':00000001FF\r\n:00000001FE\r\n')
            >>> reader.read_next()
            HexRecord(tag=1, address=0x0000, data=b'')
            >>> reader.read_next()
            Traceback (most recent call last):
                ...
            binfiles.formats.ihex.HexRecordParsingError: bad checksum
            >>> reader.read_next()  # doctest: +ELLIPSIS
            Traceback (most recent call last):
                ...
            binfiles.formats.ihex.HexRecordParsingError: reader invalid ...
        """

        state = self._state

        if state == HexReaderState.CLOSED:
            raise OSError('reader already closed')

        if state == HexReaderState.IO_ERROR:
            raise OSError('reader invalid due to previous I/O error')

        if state == HexReaderState.PARSING_ERROR:
            raise HexRecordParsingError('reader invalid due to previous parsing error')

        if state == HexReaderState.COMPLETED:
            return None

        try:
            return self._read_record()
        except OSError:
            self._state = HexReaderState.IO_ERROR
            raise
        except HexRecordParsingError:
            self._state = HexReaderState.PARSING_ERROR
            raise

    @property
    def state(self) -> HexReaderState:
        r""":class:`HexReaderState`: Current reader state."""

        return self._state


def _parse_hex_digit(char: int) -> int:

    try:
        return HEX_DIGITS[char]
    except KeyError:
        raise HexRecordParsingError(f'unable to parse char as hex: {chr(char)!r}') from None

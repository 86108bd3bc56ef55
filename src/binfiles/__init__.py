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

r"""Sparse binary files and Intel HEX records.

The :class:`SparseFile` class stores write-once byte data within a 16-bit
address space, extracting it as minimal lists of :class:`Fragment` objects.

The :class:`HexReader` class reads raw :class:`HexRecord` objects from an
Intel HEX stream.

>>> from binfiles import Fragment, HexReader, SparseFile
>>> file = SparseFile()
>>> with HexReader(b':0300300002337A1E\n:00000001FF\n') as reader:
...     for record in reader:
...         if record.is_data():
...             file.add_fragment(Fragment(record.address, record.data))
>>> file.get_fragments(0, file.current_size)
[Fragment(position=48, length=3)]
"""

__version__ = '0.1.0'

from .base import ADDRESS_SPACE
from .base import CollisionError
from .base import NotPresentError
from .formats.ihex import HexReader
from .formats.ihex import HexReaderState
from .formats.ihex import HexRecord
from .formats.ihex import HexRecordParsingError
from .formats.ihex import IhexTag
from .fragment import Fragment
from .sparse import SparseFile
from .store import ByteStore

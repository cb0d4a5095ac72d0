# Copyright (c) 2020-2023, Andrea Zoppi.
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

r"""Python implementation."""

import logging
from typing import Any
from typing import Iterator
from typing import List
from typing import Optional
from typing import Type
from typing import TypeVar

from bytesparse import Memory as _Memory
from bytesparse.base import STR_MAX_CONTENT_SIZE
from bytesparse.base import Address
from bytesparse.base import AnyBytes
from bytesparse.base import Block
from bytesparse.base import BlockIndex
from bytesparse.base import BlockList
from bytesparse.base import ClosedInterval
from bytesparse.base import Value

from .base import ADDRESS_ENDEX
from .base import ADDRESS_MAX
from .base import ADDRESS_MIN
from .base import AddressOverflowError
from .base import BaseAddressSpace
from .base import BaseSection
from .base import SectionNotContiguousError
from .base import SectionOverlapError
from .base import check_address
from .base import check_range

__all__ = [
    'AddressSpace',
    'Section',
    'merge_sections',
]

_logger = logging.getLogger(__name__)

_SectionSelf = TypeVar('_SectionSelf', bound='Section')
_AddressSpaceSelf = TypeVar('_AddressSpaceSelf', bound='AddressSpace')


class Section(BaseSection):
    __doc__ = BaseSection.__doc__

    def __eq__(
        self,
        other: Any,
    ) -> bool:

        if isinstance(other, Section):
            return self._start == other._start and self._data == other._data

        elif isinstance(other, (tuple, list)) and len(other) == 2:
            other_start, other_data = other
            return self._start == other_start and self._data == other_data

        else:
            return NotImplemented

    def __init__(
        self,
        start: Address,
        data: AnyBytes,
    ):

        if isinstance(data, Value):
            data = (data,)
        data = bytearray(data)
        if not data:
            raise ValueError('empty section')
        check_range(start, len(data))

        self._start: Address = start
        self._data: bytearray = data

    def __len__(
        self,
    ) -> Address:

        return len(self._data)

    def __repr__(
        self,
    ) -> str:

        return f'{type(self).__name__}(0x{self._start:X}, {bytes(self._data)!r})'

    def _check_mergeable(
        self,
        other: 'Section',
    ) -> None:

        if self.overlaps(other):
            raise SectionOverlapError(f'overlapping sections at 0x{max(self._start, other._start):X}')

        if not self.is_adjacent(other):
            raise SectionNotContiguousError('non-contiguous sections')

    def append_byte(
        self,
        value: Value,
    ) -> None:

        if self.endex >= ADDRESS_ENDEX:
            raise AddressOverflowError('section at end of address space')

        self._data.append(value)

    def contains(
        self,
        address: Address,
    ) -> bool:

        return self._start <= address < self._start + len(self._data)

    def copy(
        self: _SectionSelf,
    ) -> _SectionSelf:

        return type(self)(self._start, self._data)

    def crop(
        self,
        start: Address,
        endex: Address,
    ) -> None:

        section_start = self._start
        section_endex = section_start + len(self._data)

        if start < section_start:
            start = section_start
        if endex > section_endex:
            endex = section_endex

        if endex <= start:
            raise ValueError('empty section')

        data = self._data
        del data[(endex - section_start):]
        del data[:(start - section_start)]
        self._start = start

    @property
    def data(
        self,
    ) -> bytes:

        return bytes(self._data)

    @property
    def endex(
        self,
    ) -> Address:

        return self._start + len(self._data)

    def is_adjacent(
        self,
        other: 'Section',
    ) -> bool:

        return self.endex == other._start or other.endex == self._start

    def merge_with(
        self: _SectionSelf,
        other: 'Section',
    ) -> _SectionSelf:

        self._check_mergeable(other)

        if self.endex == other._start:
            self._data += other._data
        else:
            self._data[0:0] = other._data
            self._start = other._start
        return self

    def overlaps(
        self,
        other: 'Section',
    ) -> bool:

        return self._start < other.endex and other._start < self.endex

    def read_byte(
        self,
        address: Address,
    ) -> Optional[Value]:

        offset = address - self._start
        if 0 <= offset < len(self._data):
            return self._data[offset]
        else:
            return None

    def read_range(
        self,
        address: Address,
        size: Address,
    ) -> Optional[bytes]:

        offset = address - self._start
        data = self._data
        if 0 <= offset < len(data) and 0 <= size and offset + size <= len(data):
            return bytes(data[offset:(offset + size)])
        else:
            return None

    def split(
        self: _SectionSelf,
        address: Address,
    ) -> _SectionSelf:

        offset = address - self._start
        if not 0 < offset < len(self._data):
            raise ValueError('split address out of section')

        upper = type(self)(address, self._data[offset:])
        del self._data[offset:]
        return upper

    @property
    def start(
        self,
    ) -> Address:

        return self._start

    def to_block(
        self,
    ) -> Block:

        return [self._start, bytes(self._data)]

    def write_byte(
        self,
        address: Address,
        value: Value,
    ) -> None:

        offset = address - self._start
        if not 0 <= offset < len(self._data):
            raise IndexError('address out of section')

        self._data[offset] = value


def merge_sections(
    section1: Section,
    section2: Section,
) -> Section:
    r"""Merges two adjacent sections into a new one.

    Neither argument is modified.

    Arguments:
        section1 (:obj:`Section`):
            A section.

        section2 (:obj:`Section`):
            A section adjacent to `section1`, either before or after it.

    Returns:
        :obj:`Section`: The merged section, with data in ascending address
        order.

    Raises:
        :obj:`SectionOverlapError`: The sections overlap.

        :obj:`SectionNotContiguousError`: The sections are not adjacent.

    Examples:
        >>> from addrspace import Section, merge_sections
        >>> a = Section(0, b'\x01\x02\x03\x04\x05')
        >>> b = Section(5, b'\x06\x07\x08\x09')
        >>> merge_sections(a, b) == merge_sections(b, a)
        True
        >>> merge_sections(a, b)
        Section(0x0, b'\x01\x02\x03\x04\x05\x06\x07\x08\t')
    """

    return section1.copy().merge_with(section2)


class AddressSpace(BaseAddressSpace):
    __doc__ = BaseAddressSpace.__doc__

    def __bool__(
        self,
    ) -> bool:

        return bool(self._sections)

    def __contains__(
        self,
        address: Any,
    ) -> bool:

        if isinstance(address, int) and ADDRESS_MIN <= address <= ADDRESS_MAX:
            return self._section_index_at(address) is not None
        else:
            return False

    def __copy__(
        self: _AddressSpaceSelf,
    ) -> _AddressSpaceSelf:

        return self.copy()

    def __deepcopy__(
        self: _AddressSpaceSelf,
        memo: Optional[dict] = None,
    ) -> _AddressSpaceSelf:

        return self.copy()

    def __eq__(
        self,
        other: Any,
    ) -> bool:

        if isinstance(other, AddressSpace):
            return self._sections == other._sections
        else:
            return NotImplemented

    def __init__(
        self,
    ):

        self._sections: List[Section] = []

    def __iter__(
        self,
    ) -> Iterator[Section]:

        yield from self.sections()

    def __repr__(
        self,
    ) -> str:

        sections = self._sections
        start = f'0x{sections[0].start:X}' if sections else ''
        endex = f'0x{sections[-1].endex:X}' if sections else ''
        return f'<{type(self).__name__}[{start}:{endex}]@0x{id(self):X}>'

    def __str__(
        self,
    ) -> str:

        if self.size() < STR_MAX_CONTENT_SIZE:
            return repr(self.to_blocks())
        else:
            return repr(self)

    def _consolidate(
        self,
        index: BlockIndex,
    ) -> None:

        # A single write can close the gaps on both sides of the touched
        # section: successor pair first, then predecessor pair.
        sections = self._sections
        lower = index - 1 if index > 0 else 0
        upper = index + 1 if index + 1 < len(sections) else index

        while upper > lower:
            section_lower = sections[upper - 1]
            section_upper = sections[upper]

            if section_lower.endex == section_upper.start:
                _logger.debug('merging section at 0x%08X into 0x%08X',
                              section_upper.start, section_lower.start)
                section_lower.merge_with(section_upper)
                del sections[upper]
            upper -= 1

    def _section_index_at(
        self,
        address: Address,
    ) -> Optional[BlockIndex]:

        sections = self._sections
        if sections:
            if address < sections[0].start:
                return None

            if sections[-1].endex <= address:
                return None
        else:
            return None

        left = 0
        right = len(sections)

        while left <= right:
            center = (left + right) >> 1
            section = sections[center]

            if section.endex <= address:
                left = center + 1
            elif address < section.start:
                right = center - 1
            else:
                return center
        else:
            return None

    def _section_index_endex(
        self,
        address: Address,
    ) -> BlockIndex:

        # Index after the last section starting before the address
        sections = self._sections
        left = 0
        right = len(sections)

        while left < right:
            center = (left + right) >> 1
            if sections[center].start < address:
                left = center + 1
            else:
                right = center
        return left

    def _section_index_start(
        self,
        address: Address,
    ) -> BlockIndex:

        # Index of the first section ending after the address
        sections = self._sections
        left = 0
        right = len(sections)

        while left < right:
            center = (left + right) >> 1
            if sections[center].endex <= address:
                left = center + 1
            else:
                right = center
        return left

    def blocks(
        self,
    ) -> Iterator[Block]:

        for section in self._sections:
            yield section.start, section.data

    def copy(
        self: _AddressSpaceSelf,
    ) -> _AddressSpaceSelf:

        space = type(self)()
        space._sections = [section.copy() for section in self._sections]
        return space

    def drain(
        self,
    ) -> Iterator[Section]:

        sections = self._sections
        self._sections = []
        return iter(sections)

    @classmethod
    def from_blocks(
        cls: Type[_AddressSpaceSelf],
        blocks: BlockList,
        offset: Address = 0,
        validate: bool = True,
    ) -> _AddressSpaceSelf:

        sections = []
        for block_start, block_data in blocks:
            section = Section.__new__(Section)
            section._start = block_start + offset
            section._data = bytearray(block_data)
            sections.append(section)

        space = cls()
        space._sections = sections
        if validate:
            space.validate()
        return space

    @classmethod
    def from_memory(
        cls: Type[_AddressSpaceSelf],
        memory: _Memory,
        offset: Address = 0,
    ) -> _AddressSpaceSelf:

        return cls.from_blocks(memory.to_blocks(), offset=offset)

    def intervals(
        self,
    ) -> Iterator[ClosedInterval]:

        for section in self._sections:
            yield section.start, section.endex

    def is_defined(
        self,
        address: Address,
        size: Address = 1,
    ) -> bool:

        return self.read_range(address, size) is not None

    def read_byte(
        self,
        address: Address,
    ) -> Optional[Value]:

        check_address(address)
        index = self._section_index_at(address)
        if index is None:
            return None
        return self._sections[index].read_byte(address)

    def read_range(
        self,
        address: Address,
        size: Address,
    ) -> Optional[bytes]:

        check_range(address, size)
        index = self._section_index_at(address)
        if index is None:
            return None
        return self._sections[index].read_range(address, size)

    def section_count(
        self,
    ) -> int:

        return len(self._sections)

    def sections(
        self,
    ) -> Iterator[Section]:

        for section in self._sections:
            yield section.copy()

    def size(
        self,
    ) -> Address:

        return sum(len(section) for section in self._sections)

    def to_blocks(
        self,
    ) -> BlockList:

        return [section.to_block() for section in self._sections]

    def to_memory(
        self,
    ) -> _Memory:

        return _Memory.from_blocks(self.to_blocks())

    def undefine(
        self,
        address: Address,
        size: Address,
    ) -> None:

        check_range(address, size)
        if not size:
            return

        endex = address + size
        _logger.debug('undefining [0x%08X, 0x%08X)', address, endex)
        sections = self._sections
        index = self._section_index_start(address)

        while index < len(sections):
            section = sections[index]
            section_start = section.start
            section_endex = section.endex

            if endex <= section_start:
                break

            if section_start < address:
                if endex < section_endex:
                    # Split, leaving a gap of `size` undefined bytes
                    upper = section.split(endex)
                    section.crop(section_start, address)
                    sections.insert(index + 1, upper)
                    break

                section.crop(section_start, address)
                index += 1

            elif endex < section_endex:
                section.crop(endex, section_endex)
                break

            else:
                del sections[index]

    def validate(
        self,
    ) -> None:

        previous_endex = None

        for section in self._sections:
            start = section.start
            endex = section.endex

            if endex <= start:
                raise ValueError('invalid section data size')

            if start < ADDRESS_MIN or ADDRESS_ENDEX < endex:
                raise ValueError('invalid section bounds')

            if previous_endex is not None:
                if start < previous_endex:
                    raise ValueError('invalid section interleaving')

                if start == previous_endex:
                    raise ValueError('invalid section adjacency')

            previous_endex = endex

    def write_byte(
        self,
        address: Address,
        value: Value,
    ) -> None:

        check_address(address)
        sections = self._sections
        index = self._section_index_endex(address + 1) - 1

        if index >= 0:
            section = sections[index]
            section_endex = section.endex

            if address < section_endex:
                section.write_byte(address, value)
                return

            elif address == section_endex:
                section.append_byte(value)
                self._consolidate(index)
                return

        section = Section(address, (value,))
        _logger.debug('new section at 0x%08X', address)
        index += 1
        sections.insert(index, section)
        self._consolidate(index)

    def write_range(
        self,
        address: Address,
        data: AnyBytes,
    ) -> None:

        if isinstance(data, Value):
            data = (data,)
        data = bytes(data)

        check_range(address, len(data))
        for offset, value in enumerate(data):
            self.write_byte(address + offset, value)

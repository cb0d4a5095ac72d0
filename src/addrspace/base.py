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

r"""Common stuff, shared across modules."""

import abc
from typing import Any
from typing import Iterator
from typing import Optional

from bytesparse.base import Address
from bytesparse.base import AnyBytes
from bytesparse.base import Block
from bytesparse.base import BlockList
from bytesparse.base import ClosedInterval
from bytesparse.base import Value

__all__ = [
    'ADDRESS_BITS',
    'ADDRESS_ENDEX',
    'ADDRESS_MAX',
    'ADDRESS_MIN',
    'AddressOverflowError',
    'AddressSpaceError',
    'BaseAddressSpace',
    'BaseSection',
    'SectionMergeError',
    'SectionNotContiguousError',
    'SectionOverlapError',
    'check_address',
    'check_range',
]

ADDRESS_BITS: int = 32
ADDRESS_MIN: Address = 0
ADDRESS_MAX: Address = (1 << ADDRESS_BITS) - 1
ADDRESS_ENDEX: Address = 1 << ADDRESS_BITS


class AddressSpaceError(Exception):
    r"""Base class of the errors raised by this package."""


class AddressOverflowError(AddressSpaceError, OverflowError):
    r"""Address or address range outside of the 32-bit address space."""


class SectionMergeError(AddressSpaceError, ValueError):
    r"""Two sections cannot be merged together."""


class SectionOverlapError(SectionMergeError):
    r"""The sections share at least one address."""


class SectionNotContiguousError(SectionMergeError):
    r"""There is a gap between the sections."""


def check_address(
    address: Address,
) -> None:
    r"""Checks an address.

    Arguments:
        address (int):
            Address to check.

    Raises:
        :obj:`TypeError`: `address` is not an integer.

        :obj:`AddressOverflowError`: `address` does not fit 32 bits.

    Examples:
        >>> from addrspace.base import check_address
        >>> check_address(0xFFFFFFFF)
        >>> check_address(0x100000000)
        Traceback (most recent call last):
            ...
        addrspace.base.AddressOverflowError: address out of range: 0x100000000
    """

    if not isinstance(address, int):
        raise TypeError(f'address must be an integer, not {type(address).__name__}')

    if address < ADDRESS_MIN or address > ADDRESS_MAX:
        raise AddressOverflowError(f'address out of range: {hex(address)}')


def check_range(
    address: Address,
    size: Address,
) -> None:
    r"""Checks an address range.

    The range ``[address, address + size)`` must lie within the address
    space; it may end exactly at :data:`ADDRESS_ENDEX`.

    Arguments:
        address (int):
            Inclusive start address of the range.

        size (int):
            Size of the range.

    Raises:
        :obj:`TypeError`: Non-integer arguments.

        :obj:`ValueError`: Negative `size`.

        :obj:`AddressOverflowError`: The range does not fit 32 bits.
    """

    check_address(address)

    if not isinstance(size, int):
        raise TypeError(f'size must be an integer, not {type(size).__name__}')
    if size < 0:
        raise ValueError('negative size')

    if address + size > ADDRESS_ENDEX:
        raise AddressOverflowError('address range out of bounds')


class BaseSection(abc.ABC):
    r"""Contiguous run of bytes.

    A section holds a non-empty sequence of bytes, anchored at its `start`
    address. It covers the addresses ``[start, endex)``, where `endex` is
    the *exclusive* end address ``start + len(data)``.

    +---+---+---+---+---+---+---+---+---+
    | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
    +===+===+===+===+===+===+===+===+===+
    |   |[A | B | C]|   |   |   |   |   |
    +---+---+---+---+---+---+---+---+---+

    >>> from addrspace import Section
    >>> section = Section(1, b'ABC')
    >>> section.start, section.endex
    (1, 4)

    Arguments:
        start (int):
            Address of the first byte.

        data (bytes):
            Non-empty byte data. A single integer is a single byte value.

    Raises:
        :obj:`ValueError`: Empty `data`.

        :obj:`AddressOverflowError`: The section would not fit the address
        space.
    """

    @abc.abstractmethod
    def __eq__(
        self,
        other: Any,
    ) -> bool:
        r"""Equality comparison.

        Arguments:
            other (object):
                Either another section, or a ``(start, data)`` pair.

        Returns:
            bool: Same start address and same data.

        Examples:
            >>> from addrspace import Section
            >>> Section(1, b'ABC') == Section(1, b'ABC')
            True
            >>> Section(1, b'ABC') == (1, b'ABC')
            True
            >>> Section(1, b'ABC') == Section(2, b'ABC')
            False
        """
        ...

    @abc.abstractmethod
    def __len__(
        self,
    ) -> Address:
        r"""Number of bytes held."""
        ...

    @abc.abstractmethod
    def append_byte(
        self,
        value: Value,
    ) -> None:
        r"""Extends the section by one byte.

        The new byte is placed at :attr:`endex`, which then grows by one.

        Arguments:
            value (int):
                Byte value.

        Raises:
            :obj:`AddressOverflowError`: The section already ends at the
            end of the address space.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(1, b'ABC')
            >>> section.append_byte(ord('D'))
            >>> section.endex, section.data
            (5, b'ABCD')
        """
        ...

    @abc.abstractmethod
    def contains(
        self,
        address: Address,
    ) -> bool:
        r"""Address within the section.

        Arguments:
            address (int):
                Address to check.

        Returns:
            bool: ``start <= address < endex``.
        """
        ...

    @abc.abstractmethod
    def copy(
        self,
    ) -> 'BaseSection':
        r"""Creates an independent copy."""
        ...

    @abc.abstractmethod
    def crop(
        self,
        start: Address,
        endex: Address,
    ) -> None:
        r"""Keeps only a range of bytes.

        Bytes outside of ``[start, endex)`` are discarded, and the section
        start is moved accordingly.

        +---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
        +===+===+===+===+===+===+===+===+===+
        |   |[A | B | C | D | E]|   |   |   |
        +---+---+---+---+---+---+---+---+---+
        |   |   |[B | C]|   |   |   |   |   |
        +---+---+---+---+---+---+---+---+---+

        Arguments:
            start (int):
                Inclusive start of the kept range.

            endex (int):
                Exclusive end of the kept range.

        Raises:
            :obj:`ValueError`: Nothing would be kept.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(1, b'ABCDE')
            >>> section.crop(2, 4)
            >>> section
            Section(0x2, b'BC')
        """
        ...

    @property
    @abc.abstractmethod
    def data(
        self,
    ) -> bytes:
        r"""bytes: Copy of the held bytes."""
        ...

    @property
    @abc.abstractmethod
    def endex(
        self,
    ) -> Address:
        r"""int: Exclusive end address."""
        ...

    @abc.abstractmethod
    def is_adjacent(
        self,
        other: 'BaseSection',
    ) -> bool:
        r"""Checks for exact adjacency.

        Two sections are adjacent when the end of one of them is the start
        of the other, in either order.

        Arguments:
            other (:obj:`BaseSection`):
                The other section.

        Returns:
            bool: The sections touch without overlapping.

        Examples:
            >>> from addrspace import Section
            >>> Section(1, b'ABC').is_adjacent(Section(4, b'xyz'))
            True
            >>> Section(4, b'xyz').is_adjacent(Section(1, b'ABC'))
            True
            >>> Section(1, b'ABC').is_adjacent(Section(5, b'xyz'))
            False
        """
        ...

    @abc.abstractmethod
    def merge_with(
        self,
        other: 'BaseSection',
    ) -> 'BaseSection':
        r"""Merges an adjacent section.

        The bytes of `other` are joined with those of this section, in
        ascending address order, regardless of which of the two comes
        first. The caller must drop any reference to `other` after a
        successful merge.

        +---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
        +===+===+===+===+===+===+===+===+===+
        |   |   |   |   |[x | y | z]|   |   |
        +---+---+---+---+---+---+---+---+---+
        |   |[A | B | C]|   |   |   |   |   |
        +---+---+---+---+---+---+---+---+---+
        |   |[A | B | C | x | y | z]|   |   |
        +---+---+---+---+---+---+---+---+---+

        Arguments:
            other (:obj:`BaseSection`):
                Section to merge into this one.

        Returns:
            :obj:`BaseSection`: This section, updated.

        Raises:
            :obj:`SectionOverlapError`: The sections overlap.

            :obj:`SectionNotContiguousError`: There is a gap between the
            sections.

        In case of error, neither section is modified.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(4, b'xyz')
            >>> section.merge_with(Section(1, b'ABC'))
            Section(0x1, b'ABCxyz')
        """
        ...

    @abc.abstractmethod
    def overlaps(
        self,
        other: 'BaseSection',
    ) -> bool:
        r"""Checks for shared addresses.

        Arguments:
            other (:obj:`BaseSection`):
                The other section.

        Returns:
            bool: At least one address belongs to both sections.
        """
        ...

    @abc.abstractmethod
    def read_byte(
        self,
        address: Address,
    ) -> Optional[Value]:
        r"""Reads a single byte.

        Arguments:
            address (int):
                Address of the byte.

        Returns:
            int: Byte value, ``None`` if outside of the section.
        """
        ...

    @abc.abstractmethod
    def read_range(
        self,
        address: Address,
        size: Address,
    ) -> Optional[bytes]:
        r"""Reads a range of bytes.

        The range ``[address, address + size)`` must be fully contained by
        the section, otherwise nothing is read at all.

        Arguments:
            address (int):
                Address of the first byte.

            size (int):
                Number of bytes to read.

        Returns:
            bytes: The requested bytes, ``None`` if the range is not fully
            contained.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(1, b'ABCD')
            >>> section.read_range(2, 2)
            b'BC'
            >>> section.read_range(3, 5) is None
            True
        """
        ...

    @abc.abstractmethod
    def split(
        self,
        address: Address,
    ) -> 'BaseSection':
        r"""Splits the section in two.

        This section keeps ``[start, address)``, while ``[address, endex)``
        is moved into a new section.

        Arguments:
            address (int):
                Split address, strictly within the section.

        Returns:
            :obj:`BaseSection`: The upper part.

        Raises:
            :obj:`ValueError`: Either part would be empty.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(1, b'ABCD')
            >>> section.split(3)
            Section(0x3, b'CD')
            >>> section
            Section(0x1, b'AB')
        """
        ...

    @property
    @abc.abstractmethod
    def start(
        self,
    ) -> Address:
        r"""int: Address of the first byte."""
        ...

    @abc.abstractmethod
    def to_block(
        self,
    ) -> Block:
        r"""Converts into a block.

        Returns:
            list: ``[start, data]`` pair.
        """
        ...

    @abc.abstractmethod
    def write_byte(
        self,
        address: Address,
        value: Value,
    ) -> None:
        r"""Overwrites a single byte.

        Arguments:
            address (int):
                Address of the byte; it must lie within the section.

            value (int):
                Byte value.

        Raises:
            :obj:`IndexError`: Address outside of the section.

        Examples:
            >>> from addrspace import Section
            >>> section = Section(1, b'ABC')
            >>> section.write_byte(2, ord('$'))
            >>> section.data
            b'A$C'
        """
        ...


class BaseAddressSpace(abc.ABC):
    r"""Sparse 32-bit address space.

    Only the written addresses hold data, grouped into sections. Sections
    are kept sorted by start address, never overlap, and are never adjacent:
    sections touching each other are merged as soon as the gap between them
    is filled.

    +---+---+---+---+---+---+---+---+---+---+---+---+
    | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 | 10| 11|
    +===+===+===+===+===+===+===+===+===+===+===+===+
    |   |[A | B | C]|   |   |[x | y | z]|   |   |   |
    +---+---+---+---+---+---+---+---+---+---+---+---+
    |   |[A | B | C | 1 | 2 | x | y | z]|   |   |   |
    +---+---+---+---+---+---+---+---+---+---+---+---+

    >>> from addrspace import AddressSpace
    >>> space = AddressSpace.from_blocks([[1, b'ABC'], [6, b'xyz']])
    >>> space.section_count()
    2
    >>> space.write_range(4, b'12')
    >>> space.to_blocks()
    [[1, b'ABC12xyz']]

    The structure is not thread-safe: concurrent writers must be serialized
    by the caller.
    """

    @abc.abstractmethod
    def __bool__(
        self,
    ) -> bool:
        r"""Has any defined bytes."""
        ...

    @abc.abstractmethod
    def __contains__(
        self,
        address: Any,
    ) -> bool:
        r"""Checks if an address is defined.

        Arguments:
            address (int):
                Address to check.

        Returns:
            bool: The byte at `address` is defined.
        """
        ...

    @abc.abstractmethod
    def __eq__(
        self,
        other: Any,
    ) -> bool:
        r"""Same sections as another address space."""
        ...

    @abc.abstractmethod
    def __iter__(
        self,
    ) -> Iterator[BaseSection]:
        r"""Iterates over sections.

        See :meth:`sections`.
        """
        ...

    @abc.abstractmethod
    def blocks(
        self,
    ) -> Iterator[Block]:
        r"""Iterates over blocks.

        Yields:
            tuple: ``(start, data)`` pair of each section, in ascending
            address order.

        Examples:
            >>> from addrspace import AddressSpace
            >>> space = AddressSpace()
            >>> space.write_byte(1, 10)
            >>> space.write_byte(0, 32)
            >>> space.write_byte(3, 2)
            >>> list(space.blocks())
            [(0, b' \n'), (3, b'\x02')]
        """
        ...

    @abc.abstractmethod
    def copy(
        self,
    ) -> 'BaseAddressSpace':
        r"""Creates an independent copy."""
        ...

    @abc.abstractmethod
    def drain(
        self,
    ) -> Iterator[BaseSection]:
        r"""Consumes all the sections.

        The address space is emptied upfront, and its former sections are
        yielded in ascending address order. Each of them is then owned by
        the caller.

        Yields:
            :obj:`BaseSection`: Former sections.
        """
        ...

    @classmethod
    @abc.abstractmethod
    def from_blocks(
        cls,
        blocks: BlockList,
        offset: Address = 0,
        validate: bool = True,
    ) -> 'BaseAddressSpace':
        r"""Creates an address space from blocks.

        Arguments:
            blocks (list of blocks):
                Sequence of ``[start, data]`` blocks, sorted, non-overlapping
                and non-adjacent.

            offset (int):
                Address offset applied to every block.

            validate (bool):
                Validates the resulting structure.

        Returns:
            :obj:`BaseAddressSpace`: The created address space.

        Raises:
            :obj:`ValueError`: Invalid blocks (see :meth:`validate`).
        """
        ...

    @classmethod
    @abc.abstractmethod
    def from_memory(
        cls,
        memory: Any,
        offset: Address = 0,
    ) -> 'BaseAddressSpace':
        r"""Creates an address space from a :obj:`bytesparse.Memory`.

        Arguments:
            memory (:obj:`bytesparse.Memory`):
                Source memory; its content must fit 32 bits.

            offset (int):
                Address offset applied to every block.

        Returns:
            :obj:`BaseAddressSpace`: The created address space.
        """
        ...

    @abc.abstractmethod
    def intervals(
        self,
    ) -> Iterator[ClosedInterval]:
        r"""Iterates over defined intervals.

        Yields:
            tuple: ``(start, endex)`` of each section.
        """
        ...

    @abc.abstractmethod
    def is_defined(
        self,
        address: Address,
        size: Address = 1,
    ) -> bool:
        r"""Checks if a range is defined.

        Arguments:
            address (int):
                Address of the first byte.

            size (int):
                Size of the range.

        Returns:
            bool: :meth:`read_range` would succeed.
        """
        ...

    @abc.abstractmethod
    def read_byte(
        self,
        address: Address,
    ) -> Optional[Value]:
        r"""Reads a single byte.

        Arguments:
            address (int):
                Address of the byte.

        Returns:
            int: Byte value, ``None`` if undefined.

        Raises:
            :obj:`AddressOverflowError`: Address outside of the address
            space.
        """
        ...

    @abc.abstractmethod
    def read_range(
        self,
        address: Address,
        size: Address,
    ) -> Optional[bytes]:
        r"""Reads a range of bytes.

        The whole range must be defined. Since sections are never adjacent,
        a range spanning more sections necessarily includes undefined bytes,
        thus it is reported as undefined too.

        A null `size` tells whether `address` itself is defined: ``b''`` if
        so, ``None`` otherwise.

        Arguments:
            address (int):
                Address of the first byte.

            size (int):
                Number of bytes to read.

        Returns:
            bytes: The requested bytes, ``None`` if not fully defined.

        Raises:
            :obj:`AddressOverflowError`: Range outside of the address space.

        Examples:
            +---+---+---+---+---+---+---+---+---+---+---+---+
            | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 | 10| 11|
            +===+===+===+===+===+===+===+===+===+===+===+===+
            |   |[A | B | C | D]|   |[$]|   |[x | y | z]|   |
            +---+---+---+---+---+---+---+---+---+---+---+---+

            >>> from addrspace import AddressSpace
            >>> space = AddressSpace.from_blocks([[1, b'ABCD'], [6, b'$'], [8, b'xyz']])
            >>> space.read_range(2, 3)
            b'BCD'
            >>> space.read_range(3, 3) is None
            True
        """
        ...

    @abc.abstractmethod
    def section_count(
        self,
    ) -> int:
        r"""Number of stored sections."""
        ...

    @abc.abstractmethod
    def sections(
        self,
    ) -> Iterator[BaseSection]:
        r"""Iterates over sections.

        Yields:
            :obj:`BaseSection`: Copy of each section, in ascending address
            order.
        """
        ...

    @abc.abstractmethod
    def size(
        self,
    ) -> Address:
        r"""Total number of defined bytes."""
        ...

    @abc.abstractmethod
    def to_blocks(
        self,
    ) -> BlockList:
        r"""Exports into blocks.

        Returns:
            list of blocks: ``[start, data]`` of each section.
        """
        ...

    @abc.abstractmethod
    def to_memory(
        self,
    ) -> Any:
        r"""Exports into a :obj:`bytesparse.Memory`.

        Returns:
            :obj:`bytesparse.Memory`: A new memory object with the same
            content.
        """
        ...

    @abc.abstractmethod
    def undefine(
        self,
        address: Address,
        size: Address,
    ) -> None:
        r"""Undefines a range.

        Every defined byte within ``[address, address + size)`` is cleared.
        Sections fully covered by the range are removed, sections crossing
        one of its boundaries are shrunk, and a section strictly containing
        it is split in two, with a gap of `size` undefined bytes between
        the two parts.

        +---+---+---+---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 | 10| 11|
        +===+===+===+===+===+===+===+===+===+===+===+===+
        |   |[A | B | C | D]|   |[$]|   |[x | y | z]|   |
        +---+---+---+---+---+---+---+---+---+---+---+---+
        |   |[A]|   |   |   |   |   |   |   |[y | z]|   |
        +---+---+---+---+---+---+---+---+---+---+---+---+

        Arguments:
            address (int):
                Inclusive start of the range.

            size (int):
                Size of the range.

        Raises:
            :obj:`AddressOverflowError`: Range outside of the address space.

        Examples:
            >>> from addrspace import AddressSpace
            >>> space = AddressSpace.from_blocks([[1, b'ABCD'], [6, b'$'], [8, b'xyz']])
            >>> space.undefine(2, 7)
            >>> space.to_blocks()
            [[1, b'A'], [9, b'yz']]
        """
        ...

    @abc.abstractmethod
    def validate(
        self,
    ) -> None:
        r"""Validates internal structure.

        It makes sure that all the sections are non-empty, sorted by start
        address, non-overlapping, non-adjacent, and within the address
        space.

        Raises:
            :obj:`ValueError`: Invalid data detected (see exception message).
        """
        ...

    @abc.abstractmethod
    def write_byte(
        self,
        address: Address,
        value: Value,
    ) -> None:
        r"""Writes a single byte.

        If `address` is already defined, its byte is overwritten. If it is
        the end address of a section, that section is extended. Otherwise a
        new section is created. Any section which becomes adjacent to the
        touched one is merged with it before returning, on both sides.

        Arguments:
            address (int):
                Address of the byte.

            value (int):
                Byte value.

        Raises:
            :obj:`AddressOverflowError`: Address outside of the address
            space.

            :obj:`ValueError`: Value not within ``range(256)``.

        Examples:
            +---+---+---+---+---+---+---+---+---+
            | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
            +===+===+===+===+===+===+===+===+===+
            |   |[A | B]|   |[x | y]|   |   |   |
            +---+---+---+---+---+---+---+---+---+
            |   |[A | B | C | x | y]|   |   |   |
            +---+---+---+---+---+---+---+---+---+

            >>> from addrspace import AddressSpace
            >>> space = AddressSpace.from_blocks([[1, b'AB'], [4, b'xy']])
            >>> space.write_byte(3, ord('C'))
            >>> space.to_blocks()
            [[1, b'ABCxy']]
        """
        ...

    @abc.abstractmethod
    def write_range(
        self,
        address: Address,
        data: AnyBytes,
    ) -> None:
        r"""Writes a range of bytes.

        Each byte is written via :meth:`write_byte`, in ascending address
        order. Input values and address range are checked before writing
        anything, but the operation is not transactional otherwise.

        Arguments:
            address (int):
                Address of the first byte.

            data (bytes):
                Bytes to write; a single integer is a single byte value.
                Empty data writes nothing.

        Raises:
            :obj:`AddressOverflowError`: Range outside of the address space.

            :obj:`ValueError`: Values not within ``range(256)``.

        Examples:
            >>> from addrspace import AddressSpace
            >>> space = AddressSpace()
            >>> space.write_range(0, [1, 2, 3, 4, 5])
            >>> space.write_range(5, [6, 7, 8, 9])
            >>> list(space.read_range(0, 9))
            [1, 2, 3, 4, 5, 6, 7, 8, 9]
            >>> space.section_count()
            1
        """
        ...

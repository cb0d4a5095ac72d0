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

import logging
from typing import Type

from _common import *

from addrspace.py import AddressSpace as _AddressSpace
from addrspace.py import Section as _Section
from addrspace.py import merge_sections as _merge_sections


class TestSection(BaseSectionSuite):
    Section: Type['_Section'] = _Section
    merge_sections = _merge_sections


class TestAddressSpace(BaseAddressSpaceSuite):
    AddressSpace: Type['_AddressSpace'] = _AddressSpace
    Section: Type['_Section'] = _Section

    def test__consolidate(self):
        AddressSpace = self.AddressSpace
        blocks = [[0, bytes([2, 3, 4, 5])], [4, bytes([2, 3, 4, 5])]]
        space = AddressSpace.from_blocks(blocks, validate=False)

        space._consolidate(0)
        space.validate()
        assert space.to_blocks() == [[0, bytes([2, 3, 4, 5, 2, 3, 4, 5])]]

    def test__consolidate_hole(self):
        AddressSpace = self.AddressSpace
        blocks = [[0, bytes([2, 3, 4])], [4, bytes([2, 3, 4, 5])]]
        space = AddressSpace.from_blocks(blocks)

        space._consolidate(0)
        space._consolidate(1)
        assert space.section_count() == 2

    def test__section_index_at(self):
        AddressSpace = self.AddressSpace
        space = AddressSpace.from_blocks([[1, b'ABCD'], [6, b'$'], [8, b'xyz']])
        indices = [space._section_index_at(i) for i in range(12)]
        assert indices == [None, 0, 0, 0, 0, None, 1, None, 2, 2, 2, None]

    def test__section_index_start(self):
        AddressSpace = self.AddressSpace
        space = AddressSpace.from_blocks([[1, b'ABCD'], [6, b'$'], [8, b'xyz']])
        indices = [space._section_index_start(i) for i in range(12)]
        assert indices == [0, 0, 0, 0, 0, 1, 1, 2, 2, 2, 2, 3]

    def test__section_index_endex(self):
        AddressSpace = self.AddressSpace
        space = AddressSpace.from_blocks([[1, b'ABCD'], [6, b'$'], [8, b'xyz']])
        indices = [space._section_index_endex(i) for i in range(12)]
        assert indices == [0, 0, 1, 1, 1, 1, 1, 2, 2, 3, 3, 3]

    def test_logging(self, caplog):
        AddressSpace = self.AddressSpace
        space = AddressSpace()

        with caplog.at_level(logging.DEBUG, logger='addrspace.py'):
            space.write_byte(1, 1)
            space.write_byte(3, 3)
            space.write_byte(2, 2)
            space.undefine(2, 1)

        assert 'new section at 0x00000001' in caplog.text
        assert 'merging section at 0x00000003 into 0x00000001' in caplog.text
        assert 'undefining [0x00000002, 0x00000003)' in caplog.text


def test_package_exports():
    import addrspace

    for name in ('AddressSpace', 'Section', 'merge_sections',
                 'AddressOverflowError', 'SectionOverlapError', 'check_range'):
        assert hasattr(addrspace, name)

    for name in ('logging', 'Optional', 'Address', 'abc'):
        assert not hasattr(addrspace, name)

# Copyright (c) 2020-2022, Andrea Zoppi.
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

r"""Sparse 32-bit address space.

The audience of this package are most importantly those who have to manage
a byte-addressable memory image where only some addresses have been
written, across a very broad addressing space (*e.g.* 4 GiB), like
emulators, firmware-image loaders, disassemblers, or patch trackers.

A `section` is a contiguous run of defined bytes, starting at its `start`
address and ending just before its `endex` (*exclusive end*) address:

+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
+===+===+===+===+===+===+===+===+===+
|   |[A | B | C]|   |   |   |   |   |
+---+---+---+---+---+---+---+---+---+

>>> from addrspace import Section
>>> Section(1, b'ABC').endex
4

An `address space` holds sections which are sorted by start address, never
*overlapping*, and never *adjacent*: there is always at least one undefined
address between two sections.

+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
+===+===+===+===+===+===+===+===+===+
|   |[A | B | C]|   |   |   |   |   |
+---+---+---+---+---+---+---+---+---+
|   |   |   |   |   |[x | y | z]|   |
+---+---+---+---+---+---+---+---+---+

>>> from addrspace import AddressSpace
>>> space = AddressSpace()
>>> space.write_range(1, b'ABC')
>>> space.write_range(5, b'xyz')
>>> space.to_blocks()
[[1, b'ABC'], [5, b'xyz']]

Writing the missing byte between two sections merges all of them at once:

+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 |
+===+===+===+===+===+===+===+===+===+
|   |[A | B | C | $ | x | y | z]|   |
+---+---+---+---+---+---+---+---+---+

>>> space.write_byte(4, ord('$'))
>>> space.to_blocks()
[[1, b'ABC$xyz']]

Blocks, *i.e.* ``[start, data]`` pairs, are shared with the
:mod:`bytesparse` package, so that an address space can be converted to
and from a :obj:`bytesparse.Memory` object.
"""

__version__ = '0.1.0'

from .base import *  # noqa: F401, F403
from .py import *  # noqa: F401, F403

"""Self-validating scalar value types with their own mini-grammars.

Each type exposes ``is_valid(value)`` and ``parse(value)`` and can be
constructed directly from a string. :class:`FsPath` is the only object
in mkly that touches the filesystem, and it does so lazily.
"""

from mkly.values.byte_size import ByteSize
from mkly.values.duration import Duration
from mkly.values.fs_path import FsPath

__all__: list[str] = [
    "ByteSize",
    "Duration",
    "FsPath",
]

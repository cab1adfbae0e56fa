"""mkly — declarative command-line interfaces with typed values.

Declare a tree of commands with typed positionals and options, then let
the engine turn an argument vector into validated Python values or a
structured diagnostic.
"""

import logging

from mkly.cli.app import CLI
from mkly.core import (
    ArgumentDef,
    Command,
    OptionDef,
    ParsedToken,
    Resolution,
    ResolutionAction,
    ValueKind,
    classify,
    coerce,
    resolve,
)
from mkly.exceptions import Diagnostic, MklyError
from mkly.values import ByteSize, Duration, FsPath
from mkly.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__: list[str] = [
    "ArgumentDef",
    "ByteSize",
    "CLI",
    "Command",
    "Diagnostic",
    "Duration",
    "FsPath",
    "MklyError",
    "OptionDef",
    "ParsedToken",
    "Resolution",
    "ResolutionAction",
    "ValueKind",
    "__version__",
    "classify",
    "coerce",
    "resolve",
]

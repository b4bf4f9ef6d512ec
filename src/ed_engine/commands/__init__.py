"""Address parsing, command dispatch, substitution, and global commands."""

from .address import AddressRange, parse_range, scan_address, scan_range
from .base import CommandResult, SessionBus
from .dispatcher import run_command
from .global_cmd import (
    GlobalCommand,
    is_global_command,
    parse_and_run_command,
    parse_global_command,
    read_rest_of_command,
    run_global,
)
from .substitute import (
    SubstitutionParams,
    expand_replacement,
    parse_params,
    substitute_on_lines,
)

__all__ = [
    "AddressRange",
    "CommandResult",
    "GlobalCommand",
    "SessionBus",
    "SubstitutionParams",
    "expand_replacement",
    "is_global_command",
    "parse_and_run_command",
    "parse_global_command",
    "parse_params",
    "parse_range",
    "read_rest_of_command",
    "run_command",
    "run_global",
    "scan_address",
    "scan_range",
    "substitute_on_lines",
]

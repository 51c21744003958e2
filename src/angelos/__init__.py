__all__ = [
    # Configuration
    "Settings",
    # Resolver
    "Resolver",
    "ResolvedMessage",
    "Stage",
    "resolve",
    # Resolver errors
    "ResolverError",
    "InvalidAddress",
    "NotAContract",
    "UnverifiedContract",
    "NoMessageFunction",
    "InvocationFailed",
    "TransportError",
    # Revealer
    "Revealer",
    "RevealState",
    "reveal",
    "split_units",
    # Session
    "ReadingSession",
    "MessageResolved",
    "ResolutionFailed",
    # ABI
    "FunctionDescriptor",
    "parse_interface",
    "select_message_function",
    # Address
    "is_address",
    "to_checksum_address",
]

from .config import Settings
from .pneuma.abi import FunctionDescriptor, parse_interface, select_message_function
from .resolver import (
    InvalidAddress,
    InvocationFailed,
    NoMessageFunction,
    NotAContract,
    ResolvedMessage,
    Resolver,
    ResolverError,
    Stage,
    TransportError,
    UnverifiedContract,
    resolve,
)
from .revealer import RevealState, Revealer, reveal, split_units
from .session import MessageResolved, ReadingSession, ResolutionFailed
from .sigil.address import is_address, to_checksum_address

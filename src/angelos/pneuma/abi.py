"""
ABI model - Parses verified contract interfaces and picks the message getter.

A "message function" is a zero-argument ``view``/``pure`` function with
exactly one ``string`` output. The first one in declaration order wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

READ_ONLY_MUTABILITY = frozenset({"view", "pure"})


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> "Parameter":
        kind = entry.get("type")
        return cls(name=str(entry.get("name") or ""), type=kind if isinstance(kind, str) else "")


@dataclass(frozen=True)
class FunctionDescriptor:
    """One entry of a contract ABI."""

    name: str
    kind: str
    mutability: str
    inputs: tuple[Parameter, ...] = field(default_factory=tuple)
    outputs: tuple[Parameter, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, entry: dict[str, Any]) -> "FunctionDescriptor":
        return cls(
            name=entry.get("name") or "",
            kind=entry.get("type") or "",
            mutability=_mutability(entry),
            inputs=_parameters(entry.get("inputs")),
            outputs=_parameters(entry.get("outputs")),
        )

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.inputs)})"

    @property
    def output_types(self) -> list[str]:
        return [p.type for p in self.outputs]


def _parameters(value: Any) -> tuple[Parameter, ...]:
    # Malformed parameters keep their slot with an empty type so the entry
    # can never pass as a zero-input or string-output function
    if value is None:
        return ()
    if not isinstance(value, list):
        return (Parameter(name="", type=""),)
    return tuple(
        Parameter.from_dict(p) if isinstance(p, dict) else Parameter(name="", type="")
        for p in value
    )


def _mutability(entry: dict[str, Any]) -> str:
    # Pre-0.4.16 compilers emit constant/payable instead of stateMutability
    mutability = entry.get("stateMutability")
    if mutability:
        return mutability
    if entry.get("constant"):
        return "view"
    if entry.get("payable"):
        return "payable"
    return "nonpayable"


def parse_interface(abi: Iterable[Any]) -> list[FunctionDescriptor]:
    """
    Convert a decoded ABI list into descriptors, keeping declaration order.

    Non-dict entries are skipped.
    """
    return [FunctionDescriptor.from_dict(entry) for entry in abi if isinstance(entry, dict)]


def is_message_function(descriptor: FunctionDescriptor) -> bool:
    return (
        descriptor.kind == "function"
        and descriptor.mutability in READ_ONLY_MUTABILITY
        and not descriptor.inputs
        and len(descriptor.outputs) == 1
        and descriptor.outputs[0].type == "string"
    )


def select_message_function(
    descriptors: Iterable[FunctionDescriptor],
) -> Optional[FunctionDescriptor]:
    """Return the first message function, or None if there is none."""
    for descriptor in descriptors:
        if is_message_function(descriptor):
            return descriptor
    return None

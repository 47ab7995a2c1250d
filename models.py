from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SortStrategy(Enum):
    PARTITION = "partition"
    RADIX = "radix"
    MERGE_BOTTOM_UP = "merge"
    MERGE_TOP_DOWN = "merge-recursive"

    @classmethod
    def parse(cls, name: str) -> "SortStrategy":
        if not isinstance(name, str):
            raise ValueError(f"sort strategy must be a name, not {type(name).__name__}")
        key = name.strip().lower()
        for strategy in cls:
            if strategy.value == key or strategy.name.lower() == key:
                return strategy
        choices = ", ".join(s.value for s in cls)
        raise ValueError(f"unknown sort strategy {name!r} (choose from {choices})")


class ErrorKind(Enum):
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    INVALID_OPERATION = "INVALID_OPERATION"


# eq=False: nodes are compared by identity, never by value
@dataclass(eq=False)
class ListNode:
    value: str
    next: Optional["ListNode"] = None


class TraceOp(Enum):
    NEW = "new"
    INSERT_HEAD = "ih"
    INSERT_TAIL = "it"
    REMOVE_HEAD = "rh"
    SIZE = "size"
    REVERSE = "reverse"
    SORT = "sort"
    FREE = "free"


@dataclass
class TraceCommand:
    op: TraceOp
    arg: Optional[str] = None
    line_no: int = 0

    def __str__(self) -> str:
        if self.arg is None:
            return self.op.value
        return f"{self.op.value} {self.arg}"


@dataclass
class CommandResult:
    command: TraceCommand
    ok: bool                       # ADT agreed with the reference model
    message: str
    error: Optional[ErrorKind] = None

    def to_dict(self) -> dict:
        return {
            "line": self.command.line_no,
            "command": str(self.command),
            "ok": self.ok,
            "message": self.message,
            "error": None if self.error is None else self.error.value,
        }

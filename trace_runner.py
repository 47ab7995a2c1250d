from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

import queue_list
from config import get_settings
from models import CommandResult, ErrorKind, SortStrategy, TraceCommand, TraceOp
from node_allocator import NodeAllocator, OutOfMemory
from queue_list import StringQueue
from trace_format import parse_line, parse_trace

logger = logging.getLogger(__name__)

Outcome = Tuple[bool, str, Optional[ErrorKind]]


@dataclass
class TraceReport:
    results: List[CommandResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failures(self) -> List[CommandResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "commands": len(self.results),
            "failures": [r.to_dict() for r in self.failures],
        }


class TraceRunner:
    """
    Drives a StringQueue from trace commands and checks it

    - reference model: a deque of the values the queue should hold
    - leak check: the allocator's live count after free
    - sort/reverse: no allocation, link invariants, expected order
    """

    def __init__(
        self,
        strategy: Optional[SortStrategy] = None,
        bufsize: Optional[int] = None,
        allocator: Optional[NodeAllocator] = None,
    ) -> None:
        settings = get_settings()
        self.strategy = strategy if strategy is not None else settings.sort_strategy
        self.bufsize = bufsize if bufsize is not None else settings.remove_bufsize
        if self.bufsize < 1:
            raise ValueError("bufsize must be >= 1")
        self.allocator = allocator if allocator is not None else NodeAllocator(settings.fail_percent)

        self.queue: Optional[StringQueue] = None
        self._reference: Deque[str] = deque()

        self._handlers: Dict[TraceOp, Callable[[TraceCommand], Outcome]] = {
            TraceOp.NEW: self._do_new,
            TraceOp.INSERT_HEAD: self._do_insert,
            TraceOp.INSERT_TAIL: self._do_insert,
            TraceOp.REMOVE_HEAD: self._do_remove,
            TraceOp.SIZE: self._do_size,
            TraceOp.REVERSE: self._do_reorder,
            TraceOp.SORT: self._do_reorder,
            TraceOp.FREE: self._do_free,
        }

    # -------------------------
    # Running
    # -------------------------
    def execute(self, line: str) -> CommandResult:
        command = parse_line(line)
        if command is None:
            raise ValueError("empty command")
        return self.run_command(command)

    def run_command(self, command: TraceCommand) -> CommandResult:
        ok, message, error = self._handlers[command.op](command)
        result = CommandResult(command=command, ok=ok, message=message, error=error)
        if ok:
            logger.debug("cmd> %s: %s", command, message)
        else:
            logger.warning("line %d: %s: %s", command.line_no, command, message)
        return result

    def run(self, lines: Iterable[str]) -> TraceReport:
        report = TraceReport()
        for command in parse_trace(lines):
            report.results.append(self.run_command(command))
        logger.info(
            "Trace finished: %d commands, %d failures",
            len(report.results), len(report.failures),
        )
        return report

    def state(self) -> dict:
        return {
            "exists": self.queue is not None,
            "strategy": self.strategy.value,
            "size": queue_list.size(self.queue),
            "values": [] if self.queue is None else self.queue.to_list(),
            "live_nodes": self.allocator.live,
        }

    # -------------------------
    # Commands
    # -------------------------
    def _do_new(self, command: TraceCommand) -> Outcome:
        if self.queue is not None:
            queue_list.destroy(self.queue)
            self.queue = None
        self._reference = deque()
        try:
            self.queue = queue_list.create(strategy=self.strategy, allocator=self.allocator)
        except OutOfMemory:
            return True, "allocation failed, no queue", ErrorKind.OUT_OF_MEMORY
        return True, f"created queue ({self.strategy.value})", None

    def _do_insert(self, command: TraceCommand) -> Outcome:
        at_head = command.op == TraceOp.INSERT_HEAD
        insert = queue_list.insert_head if at_head else queue_list.insert_tail
        value = command.arg or ""

        try:
            done = insert(self.queue, value)
        except OutOfMemory:
            if not self._matches_reference():
                return False, "queue changed by a failed insertion", ErrorKind.OUT_OF_MEMORY
            return True, "allocation failed, queue unchanged", ErrorKind.OUT_OF_MEMORY

        if self.queue is None:
            if done:
                return False, "insertion into a missing queue reported success", ErrorKind.INVALID_OPERATION
            return True, "no queue", ErrorKind.INVALID_OPERATION

        if at_head:
            self._reference.appendleft(value)
        else:
            self._reference.append(value)
        return True, f"inserted {value}", None

    def _do_remove(self, command: TraceCommand) -> Outcome:
        removed = queue_list.remove_head(self.queue, self.bufsize)

        if self.queue is None or not self._reference:
            what = "no queue" if self.queue is None else "queue is empty"
            if removed is not None:
                return False, f"{what} but removed {removed}", ErrorKind.INVALID_OPERATION
            return True, what, ErrorKind.INVALID_OPERATION

        limit = self.bufsize - 1
        expected = self._reference.popleft()[:limit]
        if removed is None:
            return False, f"removed nothing, expected {expected}", None
        if removed != expected:
            return False, f"removed {removed}, expected {expected}", None
        if command.arg is not None and removed != command.arg[:limit]:
            return False, f"removed {removed}, trace expected {command.arg}", None
        return True, f"removed {removed}", None

    def _do_size(self, command: TraceCommand) -> Outcome:
        got = queue_list.size(self.queue)
        if self.queue is None:
            return got == 0, f"size = {got} (no queue)", ErrorKind.INVALID_OPERATION
        expected = len(self._reference)
        if got != expected:
            return False, f"size = {got}, expected {expected}", None
        return True, f"size = {got}", None

    def _do_reorder(self, command: TraceCommand) -> Outcome:
        if self.queue is None:
            return True, "no queue", ErrorKind.INVALID_OPERATION

        is_sort = command.op == TraceOp.SORT
        allocations = self.allocator.allocations
        releases = self.allocator.releases
        try:
            if is_sort:
                queue_list.sort(self.queue)
            else:
                queue_list.reverse(self.queue)
        except ValueError as exc:
            return False, str(exc), None

        if self.allocator.allocations != allocations or self.allocator.releases != releases:
            return False, f"{command.op.value} allocated or released nodes", None
        if not self.queue.verify():
            return False, f"links broken after {command.op.value}", None

        if is_sort:
            self._reference = deque(sorted(self._reference))
            values = self.queue.to_list()
            for i in range(1, len(values)):
                if values[i - 1] > values[i]:
                    return False, f"not sorted: {values[i - 1]} before {values[i]}", None
        else:
            self._reference.reverse()

        if not self._matches_reference():
            return False, f"contents differ from expected after {command.op.value}", None
        return True, f"{command.op.value} done", None

    def _do_free(self, command: TraceCommand) -> Outcome:
        if self.queue is None:
            return True, "no queue", ErrorKind.INVALID_OPERATION
        queue_list.destroy(self.queue)
        self.queue = None
        self._reference = deque()

        leaked = self.allocator.live
        if leaked:
            return False, f"{leaked} nodes still allocated after free", None
        return True, "freed queue", None

    def _matches_reference(self) -> bool:
        if self.queue is None:
            return not self._reference
        return self.queue.size() == len(self._reference) and self.queue.to_list() == list(self._reference)

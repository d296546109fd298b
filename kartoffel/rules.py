"""Condition/action rules stored as a byte sequence of "axons".

Layout of the buffer::

    0     index of the first condition of the active combined condition
          (255 when none is active)
    1..   axons, ended by a single AX_END byte

Each axon is ``head, instance, kind`` followed by two big-endian bytes per
parameter. The head marks a condition or an action. The number of
parameters is not stored: it is the number of ``[`` in the axon's label.
A combined condition is a run of conditions followed by the actions that
are performed when all of those conditions hold.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableSequence
from dataclasses import dataclass, field

RULES_HANDLE = 253
AX_ACTIVE = 0
AX_END = 0xED
AX_IS_CONDITION = 0xC0
AX_IS_ACTION = 0xA0
AX_FIRST_AXON_ADDRESS = 1
NO_ACTIVE = 255
MAX_PARAMS = 5

_PARAMS_OFFSET = 3

Labels = Callable[[bool, int, int], "str | None"]
"""Called as ``labels(is_condition, instance, kind)``; None if there is no such kind."""


class RulesError(Exception):
    """The rules are malformed or an operation on them is invalid."""

    def __init__(self, code: int, info: int, message: str) -> None:
        super().__init__(f"{message} (code {code}, info {info})")
        self.code = code
        self.info = info


@dataclass(frozen=True)
class Axon:
    """One condition, action or end marker and where it lives in the buffer."""

    head: int
    address: int
    instance: int = 0
    kind: int = 0
    params: tuple[int, ...] = field(default_factory=tuple)
    label: str = ""

    @property
    def is_end(self) -> bool:
        return self.head == AX_END

    @property
    def is_condition(self) -> bool:
        return self.head == AX_IS_CONDITION

    @property
    def is_action(self) -> bool:
        return self.head == AX_IS_ACTION

    @property
    def length(self) -> int:
        """Number of bytes the axon takes in the buffer."""
        if self.is_end:
            return 1
        return _PARAMS_OFFSET + 2 * len(self.params)

    @property
    def next_address(self) -> int:
        return self.address + self.length


def number_of_params(label: str) -> int:
    """Number of parameters an axon with this label takes: one per ``[``."""
    count = label.count("[")
    if count > MAX_PARAMS:
        raise RulesError(44, count, f"label {label!r} has more than {MAX_PARAMS} parameters")
    return count


def _positions_after(text: str, mark: str) -> Iterator[int]:
    """Offsets just past each ``mark``; the character right after a mark is skipped."""
    i = 0
    while i < len(text):
        if text[i] == mark:
            i += 1
            yield i
        i += 1


def _nth(positions: Iterator[int], index: int) -> int | None:
    for position in positions:
        if index == 0:
            return position
        index -= 1
    return None


def parameter_matches(text: str, index: int, name: str) -> bool:
    """Whether parameter ``index`` of a label is written ``[name]``.

    ``"hi [A] and [B]"`` with index 1 matches ``"B"``.
    """
    start = _nth(_positions_after(text, "["), index)
    if start is None:
        raise RulesError(4, index, f"label {text!r} has no parameter {index}")
    return text[start:].startswith(name + "]")


def parameter_label_span(text: str, index: int) -> tuple[int, int]:
    """Slice bounds of the name of parameter ``index`` inside a label."""
    start = _nth(_positions_after(text, "["), index)
    stop = _nth(_positions_after(text, "]"), index)
    if start is None or stop is None:
        raise RulesError(74, index, f"label {text!r} has no parameter {index}")
    return start, stop - 1


class RuleBook:
    """The rules of one instance, kept in a byte buffer."""

    def __init__(self, buffer: MutableSequence[int], labels: Labels) -> None:
        self.buffer = buffer
        self.labels = labels

    @classmethod
    def create(cls, labels: Labels) -> RuleBook:
        """An empty rule book with no active combined condition."""
        return cls(bytearray([NO_ACTIVE, AX_END]), labels)

    def _label(self, is_condition: bool, instance: int, kind: int) -> str:
        label = self.labels(is_condition, instance, kind)
        if label is None:
            what = "condition" if is_condition else "action"
            raise LookupError(f"instance {instance} defines no {what} of kind {kind}")
        return label

    # reading

    def axon_at(self, address: int) -> Axon:
        """The axon whose head byte is at ``address``."""
        head = self.buffer[address]
        if head == AX_END:
            return Axon(head=head, address=address)
        instance = self.buffer[address + 1]
        kind = self.buffer[address + 2]
        label = self._label(head == AX_IS_CONDITION, instance, kind)
        params = tuple(
            self.buffer[p] * 256 + self.buffer[p + 1]
            for p in range(address + _PARAMS_OFFSET, address + _PARAMS_OFFSET + 2 * number_of_params(label), 2)
        )
        return Axon(head=head, address=address, instance=instance, kind=kind, params=params, label=label)

    def next_axon(self, axon: Axon) -> Axon:
        if axon.is_end:
            raise RulesError(2, 2, "there is no axon after the end")
        return self.axon_at(axon.next_address)

    def axon_for_index(self, index: int) -> Axon:
        """The axon at position ``index``; the position after the last one is the end."""
        axon = self.axon_at(AX_FIRST_AXON_ADDRESS)
        for _ in range(index):
            axon = self.next_axon(axon)
        return axon

    def _axons(self) -> Iterator[Axon]:
        axon = self.axon_at(AX_FIRST_AXON_ADDRESS)
        while not axon.is_end:
            yield axon
            axon = self.axon_at(axon.next_address)

    def index_of(self, axon: Axon) -> int | None:
        """Position of the axon with the same address, or None."""
        for index, candidate in enumerate(self._axons()):
            if candidate.address == axon.address:
                return index
        return None

    def __len__(self) -> int:
        return sum(1 for _ in self._axons())

    # writing

    def write_axon(self, axon: Axon) -> None:
        """Store the axon's fields at its address; the space must already exist."""
        address = axon.address
        self.buffer[address] = axon.head
        if axon.is_end:
            return
        self.buffer[address + 1] = axon.instance & 0xFF
        self.buffer[address + 2] = axon.kind & 0xFF
        for offset, value in enumerate(axon.params):
            position = address + _PARAMS_OFFSET + 2 * offset
            self.buffer[position] = value // 256 % 256
            self.buffer[position + 1] = value % 256

    def insert_axon(self, index: int, is_condition: bool, instance: int, kind: int) -> Axon:
        """Insert a new axon with all parameters 0 before the axon at ``index``."""
        label = self._label(bool(is_condition), instance, kind)
        existing = self.axon_for_index(index)
        axon = Axon(
            head=AX_IS_CONDITION if is_condition else AX_IS_ACTION,
            address=existing.address,
            instance=instance,
            kind=kind,
            params=(0,) * number_of_params(label),
            label=label,
        )
        self.buffer[axon.address:axon.address] = bytes(axon.length)
        self.write_axon(axon)
        return axon

    def delete_axon(self, index: int) -> None:
        axon = self.axon_for_index(index)
        if axon.is_end:
            raise RulesError(2, index, f"there is no axon at index {index}")
        del self.buffer[axon.address:axon.next_address]

    # combined conditions

    def active_cc(self) -> Axon | None:
        """First axon of the active combined condition, if any."""
        active = self.buffer[AX_ACTIVE]
        if active == NO_ACTIVE:
            return None
        return self.axon_for_index(active)

    def set_active_cc(self, axon: Axon | None) -> None:
        """Mark the combined condition starting at ``axon`` as active (None for none)."""
        index = None if axon is None else self.index_of(axon)
        self.buffer[AX_ACTIVE] = NO_ACTIVE if index is None else index & 0xFF

    def condition_groups(self) -> Iterator[Axon]:
        """First axon of every combined condition, skipping leading actions."""
        axon = self.axon_at(AX_FIRST_AXON_ADDRESS)
        while axon.is_action:
            axon = self.next_axon(axon)
        while not axon.is_end:
            yield axon
            while axon.is_condition:
                axon = self.next_axon(axon)
            while axon.is_action:
                axon = self.next_axon(axon)

    def _evaluate_cc(
        self,
        cc: Axon,
        evaluate_condition: Callable[[Axon], bool],
        perform_action: Callable[[Axon], None],
    ) -> bool:
        # An active combined condition only stops when another one becomes true.
        active = self.active_cc()
        if active is not None and active.address == cc.address:
            return False
        axon = cc
        while axon.is_condition:
            if not evaluate_condition(axon):
                return False
            axon = self.next_axon(axon)
        self.set_active_cc(cc)
        while axon.is_action:
            perform_action(axon)
            axon = self.next_axon(axon)
        return True

    def evaluate(
        self,
        evaluate_condition: Callable[[Axon], bool],
        perform_action: Callable[[Axon], None],
    ) -> int:
        """Run every combined condition once; return how many became active."""
        return sum(
            self._evaluate_cc(cc, evaluate_condition, perform_action) for cc in self.condition_groups()
        )

    # instance bookkeeping

    def references(self, instance: int) -> bool:
        """Whether any axon belongs to ``instance``."""
        return any(axon.instance == instance for axon in self._axons())

    def instance_removed(self, instance: int) -> None:
        """Renumber axons of instances from ``instance`` on down by one."""
        for axon in list(self._axons()):
            if axon.instance >= instance:
                self.write_axon(
                    Axon(
                        head=axon.head,
                        address=axon.address,
                        instance=axon.instance - 1,
                        kind=axon.kind,
                        params=axon.params,
                        label=axon.label,
                    )
                )

    def dump(self) -> str:
        """Hex bytes up to and including the first end byte, each followed by a space."""
        out = []
        for value in self.buffer:
            out.append(f"{value:02x} ")
            if value == AX_END:
                break
        return "".join(out)
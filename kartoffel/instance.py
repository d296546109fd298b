"""The table of running app instances and the kernel's context stack.

Layout of the table in persistent storage::

    2          number of instances
    3 + 3*i    type id of instance i (two bytes, low byte first)
    5 + 3*i    status flags of instance i

At most 30 instances fit in the table. Exactly one instance is active at a
time; switching to another one pushes the current one on a small stack.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator, MutableSequence, Sequence
from contextlib import contextmanager

NUMBER_OF_INSTANCES_ADDRESS = 2
INSTANCE_TABLE_START = 3
INSTANCE_OVERHEAD = 3
INSTANCE_ID = 0
INSTANCE_STATUS = 2
MAX_NUMBER_OF_INSTANCES = 30
MAX_NUMBER_OF_PUSHED_INSTANCES = 10
NO_INSTANCE_ACTIVE = 254

_TYPE_NAME_CODES = {"Desktop": 302, "Ports Manager": 303}


class InstanceError(Exception):
    """An operation on the instance table failed; ``code`` identifies it."""

    def __init__(self, code: int, info: int, message: str) -> None:
        super().__init__(f"{message} (code {code}, info {info})")
        self.code = code
        self.info = info


class Status(enum.IntFlag):
    """Status flags kept for every instance."""

    OK = 1
    REGISTERP_ACTIVATED = 2
    NO_MEMORY = 4
    REGISTERM_ACTIVATED = 8


class InstanceTable:
    """Instances of app types, persisted in byte storage.

    ``type_names[t]`` is the name of app type ``t``. The optional
    ``on_leave`` and ``on_enter`` callbacks are called with the instance
    being deactivated or activated; every callable in ``removal_hooks`` is
    called with the index of a removed instance once the table has shifted.
    """

    def __init__(self, storage: MutableSequence[int], type_names: Sequence[str]) -> None:
        self.storage = storage
        self.type_names = list(type_names)
        self.foreground = 0
        self.on_leave: Callable[[int], None] | None = None
        self.on_enter: Callable[[int], None] | None = None
        self.removal_hooks: list[Callable[[int], None]] = []
        self._active = NO_INSTANCE_ACTIVE
        self._pushed: list[int] = []

    # table access

    @staticmethod
    def _address(instance: int) -> int:
        return INSTANCE_TABLE_START + INSTANCE_OVERHEAD * instance

    def __len__(self) -> int:
        return self.storage[NUMBER_OF_INSTANCES_ADDRESS]

    def _check(self, instance: int) -> None:
        if not 0 <= instance < len(self):
            raise InstanceError(15, instance, f"there is no instance {instance}")

    def type_of(self, instance: int) -> int:
        """The app type id of ``instance``."""
        self._check(instance)
        address = self._address(instance) + INSTANCE_ID
        return self.storage[address] | self.storage[address + 1] << 8

    def add(self, type_id: int) -> int:
        """Append an instance of ``type_id`` with status OK and return its index."""
        count = len(self)
        if count >= MAX_NUMBER_OF_INSTANCES:
            raise InstanceError(16, type_id, "the instance table is full")
        address = self._address(count)
        self.storage[address + INSTANCE_ID] = type_id & 0xFF
        self.storage[address + INSTANCE_ID + 1] = type_id >> 8 & 0xFF
        self.storage[NUMBER_OF_INSTANCES_ADDRESS] = count + 1
        self.storage[address + INSTANCE_STATUS] = Status.OK
        return count

    # status flags

    def status(self, instance: int) -> Status:
        return Status(self.storage[self._address(instance) + INSTANCE_STATUS])

    def set_status(self, instance: int, status: Status | int) -> None:
        self.storage[self._address(instance) + INSTANCE_STATUS] = int(status) & 0xFF

    def add_status(self, instance: int, status: Status | int) -> None:
        self.set_status(instance, self.status(instance) | status)

    def remove_status(self, instance: int, status: Status | int) -> None:
        self.set_status(instance, self.status(instance) & ~Status(status))

    def instance_with_status(self) -> int | None:
        """The first instance that is not OK, or None."""
        return next((i for i in range(len(self)) if not self.status(i) & Status.OK), None)

    # lookups

    def repetition(self, instance: int) -> int:
        """How many earlier instances share this instance's type.

        For types A,B,C,B,D,C,E,C the repetitions are 0,0,0,1,0,1,0,2.
        """
        own = self.type_of(instance)
        return sum(1 for i in range(instance) if self.type_of(i) == own)

    def instance_for_type(self, type_id: int) -> int:
        """The first instance of ``type_id``."""
        for i in range(len(self)):
            if self.type_of(i) == type_id:
                return i
        raise InstanceError(10, type_id, f"no instance of type {type_id}")

    def type_named(self, name: str) -> int:
        """The first type whose name starts with ``name``."""
        for type_id, type_name in enumerate(self.type_names):
            if type_name.startswith(name):
                return type_id
        raise InstanceError(_TYPE_NAME_CODES.get(name, 302), 0, f"no app type named {name!r}")

    def visible_instances(self, desktop_type: int) -> list[int]:
        """All instances except those of the desktop type, in order."""
        return [i for i in range(len(self)) if self.type_of(i) != desktop_type]

    # context switching

    @property
    def active(self) -> int:
        """The active instance, or NO_INSTANCE_ACTIVE."""
        return self._active

    def _set_active(self, instance: int) -> None:
        if instance != NO_INSTANCE_ACTIVE and instance >= len(self):
            raise InstanceError(14, instance, f"cannot activate instance {instance}")
        if self._active != NO_INSTANCE_ACTIVE and self.on_leave is not None:
            self.on_leave(self._active)
        self._active = instance
        if instance != NO_INSTANCE_ACTIVE and self.on_enter is not None:
            self.on_enter(instance)

    def switch_context(self, instance: int) -> None:
        """Push the active instance and make ``instance`` active."""
        if len(self._pushed) == MAX_NUMBER_OF_PUSHED_INSTANCES:
            raise InstanceError(12, instance, "too many nested context switches")
        self._pushed.append(self._active)
        try:
            self._set_active(instance)
        except InstanceError:
            self._pushed.pop()
            raise

    def pop_context(self) -> None:
        """Make the last pushed instance active again."""
        if not self._pushed:
            raise InstanceError(13, 0, "no context to return to")
        self._set_active(self._pushed.pop())

    @contextmanager
    def context(self, instance: int) -> Iterator[int]:
        """Run a block with ``instance`` active."""
        self.switch_context(instance)
        try:
            yield instance
        finally:
            self.pop_context()

    # removal

    def remove(self, instance: int) -> None:
        """Delete ``instance`` from the table, shifting later ones down."""
        if instance in self._pushed:
            raise InstanceError(11, instance, f"instance {instance} is in use by a context switch")
        self._check(instance)
        self.remove_status(instance, Status.REGISTERM_ACTIVATED | Status.REGISTERP_ACTIVATED)
        count = len(self)
        start = self._address(instance)
        stop = self._address(MAX_NUMBER_OF_INSTANCES - 1)
        for address in range(start, stop):
            self.storage[address] = self.storage[address + INSTANCE_OVERHEAD]
        self.storage[NUMBER_OF_INSTANCES_ADDRESS] = count - 1
        if self._active != NO_INSTANCE_ACTIVE and self._active > instance:
            self._active -= 1
        for hook in self.removal_hooks:
            hook(instance)
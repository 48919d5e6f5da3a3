"""Topics, partitions and offsets, and lists of them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

__all__ = [
    "KafkaError",
    "SetPartitionOffsetError",
    "OffsetFetchError",
    "ErrorCode",
    "OffsetKind",
    "Offset",
    "TopicPartitionListElem",
    "TopicPartitionList",
    "PARTITION_UNASSIGNED",
]

PARTITION_UNASSIGNED = -1

OFFSET_BEGINNING = -2
OFFSET_END = -1
OFFSET_STORED = -1000
OFFSET_INVALID = -1001
OFFSET_TAIL_BASE = -2000

_DEFAULT_CAPACITY = 5
_MIN_GROWTH = 32


class ErrorCode(enum.IntEnum):
    """Error codes that can be attached to a list entry."""

    NO_ERROR = 0
    OFFSET_OUT_OF_RANGE = 1
    UNKNOWN_TOPIC_OR_PARTITION = 3
    INVALID_ARGUMENT = -186
    UNKNOWN_PARTITION = -190

    @property
    def is_error(self) -> bool:
        return self is not ErrorCode.NO_ERROR


class KafkaError(Exception):
    """Base class for errors carrying an error code."""

    description = "Kafka error"

    def __init__(self, code: ErrorCode) -> None:
        self.code = ErrorCode(code)
        super().__init__(f"{self.description}: {self.code.name}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KafkaError):
            return NotImplemented
        return type(self) is type(other) and self.code == other.code

    def __hash__(self) -> int:
        return hash((type(self), self.code))


class SetPartitionOffsetError(KafkaError):
    """An offset could not be set on a partition."""

    description = "Set partition offset error"


class OffsetFetchError(KafkaError):
    """An entry of a list carries an error."""

    description = "Offset fetch error"


class OffsetKind(enum.Enum):
    BEGINNING = "beginning"
    END = "end"
    STORED = "stored"
    INVALID = "invalid"
    OFFSET = "offset"
    OFFSET_TAIL = "offset_tail"


@dataclass(frozen=True)
class Offset:
    """A Kafka offset.

    Only ``OFFSET`` and ``OFFSET_TAIL`` use ``value``. Negative values can be
    built but have no raw representation.
    """

    kind: OffsetKind
    value: int = 0

    @classmethod
    def beginning(cls) -> "Offset":
        return cls(OffsetKind.BEGINNING)

    @classmethod
    def end(cls) -> "Offset":
        return cls(OffsetKind.END)

    @classmethod
    def stored(cls) -> "Offset":
        return cls(OffsetKind.STORED)

    @classmethod
    def invalid(cls) -> "Offset":
        return cls(OffsetKind.INVALID)

    @classmethod
    def at(cls, value: int) -> "Offset":
        """A specific offset."""
        return cls(OffsetKind.OFFSET, int(value))

    @classmethod
    def tail(cls, value: int) -> "Offset":
        """An offset relative to the end of the partition."""
        return cls(OffsetKind.OFFSET_TAIL, int(value))

    @classmethod
    def from_raw(cls, raw_offset: int) -> "Offset":
        """Decode the integer representation of an offset."""
        special = {
            OFFSET_BEGINNING: OffsetKind.BEGINNING,
            OFFSET_END: OffsetKind.END,
            OFFSET_STORED: OffsetKind.STORED,
            OFFSET_INVALID: OffsetKind.INVALID,
        }
        if raw_offset in special:
            return cls(special[raw_offset])
        if raw_offset <= OFFSET_TAIL_BASE:
            return cls.tail(-(raw_offset - OFFSET_TAIL_BASE))
        return cls.at(raw_offset)

    def to_raw(self) -> Optional[int]:
        """The integer representation, or ``None`` if there is none."""
        if self.kind is OffsetKind.BEGINNING:
            return OFFSET_BEGINNING
        if self.kind is OffsetKind.END:
            return OFFSET_END
        if self.kind is OffsetKind.STORED:
            return OFFSET_STORED
        if self.kind is OffsetKind.INVALID:
            return OFFSET_INVALID
        if self.kind is OffsetKind.OFFSET:
            return self.value if self.value >= 0 else None
        return OFFSET_TAIL_BASE - self.value if self.value > 0 else None

    def __repr__(self) -> str:
        if self.kind is OffsetKind.OFFSET:
            return f"Offset.at({self.value})"
        if self.kind is OffsetKind.OFFSET_TAIL:
            return f"Offset.tail({self.value})"
        return f"Offset.{self.kind.value}()"


def _check_topic(topic: str) -> str:
    if "\0" in topic:
        raise ValueError("topic name must not contain a NUL character")
    return topic


class TopicPartitionListElem:
    """One entry of a topic partition list; changes are seen by the list."""

    __slots__ = ("_topic", "_partition", "_raw_offset", "_metadata", "error")

    def __init__(self, topic: str, partition: int) -> None:
        self._topic = _check_topic(topic)
        self._partition = int(partition)
        self._raw_offset = OFFSET_INVALID
        self._metadata = ""
        self.error = ErrorCode.NO_ERROR

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def partition(self) -> int:
        return self._partition

    @property
    def offset(self) -> Offset:
        return Offset.from_raw(self._raw_offset)

    @property
    def metadata(self) -> str:
        return self._metadata

    def check_error(self) -> None:
        """Raise OffsetFetchError if the entry carries an error."""
        code = ErrorCode(self.error)
        if code.is_error:
            raise OffsetFetchError(code)

    def set_offset(self, offset: Offset) -> None:
        raw = offset.to_raw()
        if raw is None:
            raise SetPartitionOffsetError(ErrorCode.INVALID_ARGUMENT)
        self._raw_offset = raw

    def set_metadata(self, metadata: str) -> None:
        self._metadata = str(metadata)

    def _copy(self) -> "TopicPartitionListElem":
        clone = TopicPartitionListElem(self._topic, self._partition)
        clone._raw_offset = self._raw_offset
        clone._metadata = self._metadata
        clone.error = self.error
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionListElem):
            return NotImplemented
        return (
            self.topic == other.topic
            and self.partition == other.partition
            and self.offset == other.offset
            and self.metadata == other.metadata
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        error = None if not ErrorCode(self.error).is_error else ErrorCode(self.error)
        return (
            f"{self.topic}/{self.partition}: offset={self.offset!r} "
            f"metadata={self.metadata!r}, error={error!r}"
        )


class TopicPartitionList:
    """A list of topics and partitions with optional offsets."""

    def __init__(self, capacity: int = _DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._capacity = int(capacity)
        self._elems: List[TopicPartitionListElem] = []

    @classmethod
    def from_topic_map(
        cls, topic_map: Mapping[Tuple[str, int], Offset]
    ) -> "TopicPartitionList":
        tpl = cls(len(topic_map))
        for (topic, partition), offset in topic_map.items():
            tpl.add_partition_offset(topic, partition, offset)
        return tpl

    def copy(self) -> "TopicPartitionList":
        clone = TopicPartitionList(self._capacity)
        clone._elems = [elem._copy() for elem in self._elems]
        return clone

    __copy__ = copy

    def count(self) -> int:
        return len(self._elems)

    def capacity(self) -> int:
        return self._capacity

    def _grow_if_full(self) -> None:
        if len(self._elems) >= self._capacity:
            self._capacity += max(self._capacity, _MIN_GROWTH)

    def add_topic_unassigned(self, topic: str) -> TopicPartitionListElem:
        return self.add_partition(topic, PARTITION_UNASSIGNED)

    def add_partition(self, topic: str, partition: int) -> TopicPartitionListElem:
        elem = TopicPartitionListElem(topic, partition)
        self._grow_if_full()
        self._elems.append(elem)
        return elem

    def add_partition_range(
        self, topic: str, start_partition: int, stop_partition: int
    ) -> None:
        """Add partitions ``start_partition`` to ``stop_partition`` inclusive."""
        _check_topic(topic)
        for partition in range(start_partition, stop_partition + 1):
            self.add_partition(topic, partition)

    def set_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Set the offset of a partition already in the list."""
        _check_topic(topic)
        raw = offset.to_raw()
        if raw is None:
            raise SetPartitionOffsetError(ErrorCode.INVALID_ARGUMENT)
        elem = self.find_partition(topic, partition)
        if elem is None:
            raise SetPartitionOffsetError(ErrorCode.UNKNOWN_PARTITION)
        elem._raw_offset = raw

    def add_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Add a partition, then set its offset.

        The partition stays in the list even if the offset is rejected.
        """
        self.add_partition(topic, partition)
        self.set_partition_offset(topic, partition, offset)

    def find_partition(
        self, topic: str, partition: int
    ) -> Optional[TopicPartitionListElem]:
        _check_topic(topic)
        return next(
            (e for e in self._elems if e.topic == topic and e.partition == partition),
            None,
        )

    def set_all_offsets(self, offset: Offset) -> None:
        for elem in self._elems:
            elem.set_offset(offset)

    def elements(self) -> List[TopicPartitionListElem]:
        return list(self._elems)

    def elements_for_topic(self, topic: str) -> List[TopicPartitionListElem]:
        return [elem for elem in self._elems if elem.topic == topic]

    def to_topic_map(self) -> Dict[Tuple[str, int], Offset]:
        return {(elem.topic, elem.partition): elem.offset for elem in self._elems}

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[TopicPartitionListElem]:
        return iter(self._elems)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionList):
            return NotImplemented
        if self.count() != other.count():
            return False
        for elem in self._elems:
            other_elem = other.find_partition(elem.topic, elem.partition)
            if other_elem is None or elem != other_elem:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "TPL {" + "; ".join(repr(elem) for elem in self._elems) + "}"
# kafkatpl

Plain Python data structures for working with Kafka topics, partitions and
offsets, plus small helpers for timeouts, deadlines and epoch milliseconds.
The package has no dependencies outside the standard library.

## Installation

```
pip install kafkatpl
```

## Offsets

`kafkatpl.topic_partition_list.Offset` is a frozen value with a `kind`
(an `OffsetKind`) and, for concrete and tail offsets, a `value`. It converts to
and from the integer form that Kafka clients use.

```python
from kafkatpl.topic_partition_list import Offset

Offset.at(123).to_raw()          # 123
Offset.tail(10).to_raw()         # -2010
Offset.from_raw(-2010)           # equal to Offset.tail(10)
Offset.beginning().to_raw()      # -2
Offset.end().to_raw()            # -1
Offset.stored().to_raw()         # -1000
Offset.invalid().to_raw()        # -1001
Offset.at(-1).to_raw()           # None: this offset cannot be represented
Offset.tail(0).to_raw()          # None as well
```

## Topic partition lists

```python
from kafkatpl.topic_partition_list import (
    Offset,
    SetPartitionOffsetError,
    TopicPartitionList,
)

tpl = TopicPartitionList()
tpl.add_partition_offset("orders", 0, Offset.beginning())
tpl.add_partition_range("orders", 1, 3)      # partitions 1, 2 and 3
tpl.set_partition_offset("orders", 2, Offset.at(42))

elem = tpl.find_partition("orders", 2)       # None if not in the list
elem.set_metadata("checkpoint")
elem.offset                                  # Offset.at(42)

try:
    tpl.set_partition_offset("missing", 0, Offset.at(1))
except SetPartitionOffsetError as exc:
    print(exc.code)                          # ErrorCode.UNKNOWN_PARTITION

topic_map = tpl.to_topic_map()               # {(topic, partition): Offset}
same = TopicPartitionList.from_topic_map(topic_map)
```

Things to know:

- A new entry's offset is `Offset.invalid()` and its metadata is `""`.
- `add_topic_unassigned(topic)` adds an entry with partition `-1`
  (`PARTITION_UNASSIGNED`).
- Setting an offset that has no raw form raises `SetPartitionOffsetError`
  with `ErrorCode.INVALID_ARGUMENT`; this applies to
  `TopicPartitionListElem.set_offset`, `set_partition_offset`,
  `add_partition_offset` and `set_all_offsets`. `add_partition_offset` keeps
  the new entry in the list even when its offset is rejected.
- Each entry has an `error` attribute holding an `ErrorCode`;
  `check_error()` raises `OffsetFetchError` when it is not `NO_ERROR`.
- `elements()` and `elements_for_topic(topic)` return lists of entries;
  changes made through an entry are seen by the list.
- Lists compare equal when they have the same number of entries and every
  entry has a match with the same topic, partition, offset and metadata,
  whatever the order. `len()` and iteration work as on any sequence, and
  `copy()` returns a list whose entries are independent of the original's.
- `SetPartitionOffsetError` and `OffsetFetchError` derive from `KafkaError`;
  errors compare equal when they are of the same class and carry the same
  code.

## Timeouts and deadlines

```python
from datetime import datetime, timedelta, timezone
from kafkatpl.util import (
    Deadline,
    Timeout,
    TopicPartitionOffset,
    current_time_millis,
    millis_to_epoch,
)

t = Timeout.after(timedelta(seconds=2))
t.as_millis()                                # 2000
Timeout.never().as_millis()                  # -1
Timeout.from_value(None)                     # Timeout.never()
t.saturating_sub(timedelta(seconds=5))       # a zero timeout
t.saturating_sub(timedelta(seconds=5)).is_zero()   # True

deadline = t.to_deadline()
deadline.remaining()                         # timedelta, never negative
deadline.remaining_millis_i32()              # capped to 2**31 - 1
deadline.elapsed()
deadline.to_timeout()

str(TopicPartitionOffset("orders", 0, 42))
# 'Topic: orders, Partition: 0, Offset: 42'

millis_to_epoch(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))  # 1000
current_time_millis()                        # milliseconds since the Unix epoch
```

Any finite `Timeout` orders before `Timeout.never()`. `t -= other` subtracts
two timeouts; subtracting a never-timeout raises `ValueError`. A naive
`datetime` passed to `millis_to_epoch` is taken as UTC, and times before the
epoch give `0`.

## What this package does not do

It holds and manipulates offsets and partition lists only. It has no
producer, consumer or admin client, opens no network connections and never
talks to a broker, and it stores nothing on disk.

## Running the tests

```
pip install -e ".[test]"
pytest
```
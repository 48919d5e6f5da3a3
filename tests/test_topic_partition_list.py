import pytest

from kafkatpl.topic_partition_list import (
    ErrorCode,
    KafkaError,
    Offset,
    OffsetFetchError,
    OffsetKind,
    SetPartitionOffsetError,
    TopicPartitionList,
)


def test_offset_conversion():
    assert Offset.at(123).to_raw() == 123
    assert Offset.from_raw(123) == Offset.at(123)
    assert Offset.tail(10).to_raw() == -2010
    assert Offset.from_raw(-2010) == Offset.tail(10)


@pytest.mark.parametrize(
    "offset, raw",
    [
        (Offset.beginning(), -2),
        (Offset.end(), -1),
        (Offset.stored(), -1000),
        (Offset.invalid(), -1001),
        (Offset.at(0), 0),
    ],
)
def test_offset_special_values_round_trip(offset, raw):
    assert offset.to_raw() == raw
    assert Offset.from_raw(raw) == offset


def test_offset_unrepresentable():
    assert Offset.at(-1).to_raw() is None
    assert Offset.tail(0).to_raw() is None
    assert Offset.tail(-1).to_raw() is None


def test_offset_kind_and_value():
    off = Offset.from_raw(-2000)
    assert off.kind is OffsetKind.OFFSET_TAIL
    assert off.value == 0


def test_add_partition_offset_find():
    tpl = TopicPartitionList()
    tpl.add_partition("topic1", 0)
    tpl.add_partition("topic1", 1)
    tpl.add_partition("topic2", 0)
    tpl.add_partition("topic2", 1)

    tpl.set_partition_offset("topic1", 0, Offset.at(0))
    tpl.set_partition_offset("topic1", 1, Offset.at(1))
    tpl.set_partition_offset("topic2", 0, Offset.at(2))
    tpl.set_partition_offset("topic2", 1, Offset.at(3))

    assert tpl.count() == 4
    with pytest.raises(SetPartitionOffsetError):
        tpl.set_partition_offset("topic0", 3, Offset.at(0))
    with pytest.raises(SetPartitionOffsetError):
        tpl.set_partition_offset("topic3", 0, Offset.at(0))

    tp0 = tpl.find_partition("topic1", 0)
    tp1 = tpl.find_partition("topic1", 1)
    tp2 = tpl.find_partition("topic2", 0)
    tp3 = tpl.find_partition("topic2", 1)

    assert (tp0.topic, tp0.partition, tp0.offset) == ("topic1", 0, Offset.at(0))
    assert (tp1.topic, tp1.partition, tp1.offset) == ("topic1", 1, Offset.at(1))
    assert (tp2.topic, tp2.partition, tp2.offset) == ("topic2", 0, Offset.at(2))
    assert (tp3.topic, tp3.partition, tp3.offset) == ("topic2", 1, Offset.at(3))

    tp3.set_offset(Offset.at(1234))
    assert tp3.offset == Offset.at(1234)
    assert tpl.find_partition("topic2", 1).offset == Offset.at(1234)


def test_add_partition_range():
    tpl = TopicPartitionList()
    tpl.add_partition_range("topic1", 0, 3)
    for i in range(4):
        tpl.set_partition_offset("topic1", i, Offset.at(i))
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.set_partition_offset("topic1", 4, Offset.at(2))
    assert info.value.code is ErrorCode.UNKNOWN_PARTITION
    assert len(tpl) == 4


def test_check_defaults():
    tpl = TopicPartitionList()
    tpl.add_partition("topic1", 0)
    tp = tpl.find_partition("topic1", 0)
    assert tp.offset == Offset.invalid()
    assert tp.metadata == ""


def test_add_partition_offset_clone():
    tpl = TopicPartitionList()
    tpl.add_partition_offset("topic1", 0, Offset.at(0))
    tpl.add_partition_offset("topic1", 1, Offset.at(1))

    for source in (tpl, tpl.copy()):
        tp0 = source.find_partition("topic1", 0)
        tp1 = source.find_partition("topic1", 1)
        assert (tp0.topic, tp0.partition, tp0.offset) == ("topic1", 0, Offset.at(0))
        assert (tp1.topic, tp1.partition, tp1.offset) == ("topic1", 1, Offset.at(1))


def test_copy_is_independent():
    tpl = TopicPartitionList()
    tpl.add_partition_offset("t", 0, Offset.at(5))
    clone = tpl.copy()
    clone.find_partition("t", 0).set_offset(Offset.at(9))
    assert tpl.find_partition("t", 0).offset == Offset.at(5)
    assert tpl != clone


def test_topic_map():
    topic_map = {
        ("topic1", 0): Offset.invalid(),
        ("topic1", 1): Offset.at(123),
        ("topic2", 0): Offset.beginning(),
    }
    tpl = TopicPartitionList.from_topic_map(topic_map)
    topic_map2 = tpl.to_topic_map()
    tpl2 = TopicPartitionList.from_topic_map(topic_map2)
    assert topic_map == topic_map2
    assert tpl == tpl2


def test_invalid_offset_rejected_but_partition_added():
    tpl = TopicPartitionList()
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.add_partition_offset("t", 0, Offset.tail(-1))
    assert info.value.code is ErrorCode.INVALID_ARGUMENT
    assert tpl.count() == 1
    with pytest.raises(SetPartitionOffsetError) as info:
        tpl.set_all_offsets(Offset.tail(-1))
    assert info.value.code is ErrorCode.INVALID_ARGUMENT


def test_set_all_offsets():
    tpl = TopicPartitionList()
    tpl.add_partition_range("t", 0, 2)
    tpl.set_all_offsets(Offset.end())
    assert [e.offset for e in tpl] == [Offset.end()] * 3


def test_set_all_offsets_empty_list_accepts_anything():
    tpl = TopicPartitionList()
    tpl.set_all_offsets(Offset.at(-5))
    assert len(tpl) == 0


def test_elem_set_offset_invalid():
    tpl = TopicPartitionList()
    elem = tpl.add_partition("t", 0)
    with pytest.raises(SetPartitionOffsetError):
        elem.set_offset(Offset.at(-1))
    assert elem.offset == Offset.invalid()


def test_metadata_and_equality():
    a = TopicPartitionList()
    b = TopicPartitionList()
    a.add_partition("t", 0).set_metadata("one")
    b.add_partition("t", 0).set_metadata("one")
    assert a == b
    b.find_partition("t", 0).set_metadata("two")
    assert a != b
    assert a.find_partition("t", 0).metadata == "one"


def test_equality_ignores_order_but_not_count():
    a = TopicPartitionList()
    b = TopicPartitionList()
    a.add_partition("t", 0)
    a.add_partition("t", 1)
    b.add_partition("t", 1)
    b.add_partition("t", 0)
    assert a == b
    b.add_partition("t", 2)
    assert a != b


def test_elements_for_topic():
    tpl = TopicPartitionList()
    tpl.add_partition("a", 0)
    tpl.add_partition("b", 0)
    tpl.add_partition("a", 1)
    assert [e.partition for e in tpl.elements_for_topic("a")] == [0, 1]
    assert tpl.elements_for_topic("c") == []
    assert [e.topic for e in tpl.elements()] == ["a", "b", "a"]


def test_add_topic_unassigned():
    tpl = TopicPartitionList()
    elem = tpl.add_topic_unassigned("t")
    assert elem.partition == -1
    assert tpl.find_partition("t", -1) is not None and tpl.count() == 1


def test_find_missing_returns_none():
    tpl = TopicPartitionList()
    tpl.add_partition("t", 0)
    assert tpl.find_partition("t", 1) is None


def test_capacity():
    assert TopicPartitionList().capacity() == 5
    tpl = TopicPartitionList(2)
    assert tpl.capacity() == 2
    tpl.add_partition_range("t", 0, 9)
    assert tpl.capacity() >= tpl.count() == 10
    with pytest.raises(ValueError):
        TopicPartitionList(-1)


def test_topic_with_nul_rejected():
    tpl = TopicPartitionList()
    with pytest.raises(ValueError):
        tpl.add_partition("bad\0topic", 0)


def test_check_error():
    tpl = TopicPartitionList()
    elem = tpl.add_partition("t", 1)
    elem.check_error()
    assert elem.error is ErrorCode.NO_ERROR
    elem.error = ErrorCode.UNKNOWN_PARTITION
    with pytest.raises(OffsetFetchError) as info:
        elem.check_error()
    assert info.value == OffsetFetchError(ErrorCode.UNKNOWN_PARTITION)
    assert isinstance(info.value, KafkaError)


def test_repr():
    tpl = TopicPartitionList()
    tpl.add_partition_offset("t", 0, Offset.at(3))
    tpl.add_partition("u", 1).set_metadata("m")
    text = repr(tpl)
    assert text == (
        "TPL {t/0: offset=Offset.at(3) metadata='', error=None; "
        "u/1: offset=Offset.invalid() metadata='m', error=None}"
    )
    assert repr(TopicPartitionList()) == "TPL {}"
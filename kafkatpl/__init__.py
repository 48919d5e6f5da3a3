"""Kafka topic, partition and offset lists, with timeout and deadline helpers."""

__version__ = "0.1.0"
__all__ = ["topic_partition_list", "util"]
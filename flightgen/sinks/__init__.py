"""Ingestion sinks that receive finished batches."""

from .base import CountingSink, RecordingSink, Sink
from .questdb import ConnectionSettings, QuestDBSink, encode_batch, parse_connection_string

__all__ = [
    "ConnectionSettings",
    "CountingSink",
    "QuestDBSink",
    "RecordingSink",
    "Sink",
    "encode_batch",
    "parse_connection_string",
]

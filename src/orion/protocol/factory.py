"""Convenience constructors for protocol commands."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .command import Command, Get, Insert, InsertMany, Remove, Search, Update


def insert(record: Mapping[str, Any] = None, **fields) -> Command:
    if record is None:
        record = fields
    return Insert(record)


def insert_many(records: Iterable[Mapping[str, Any]]) -> Command:
    return InsertMany(records)


def update(query: Mapping[str, Any], changes: Mapping[str, Any]) -> Command:
    return Update(query, changes)


def remove(query: Mapping[str, Any] = None, **fields) -> Command:
    if query is None:
        query = fields
    return Remove(query)


def get(flat: bool = True) -> Command:
    return Get(flat)


def search(query: Mapping[str, Any] = None, **fields) -> Command:
    if query is None:
        query = fields
    return Search(query)

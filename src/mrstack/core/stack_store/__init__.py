"""Persistence for stack metadata."""

from mrstack.core.stack_store.abc import StackStore
from mrstack.core.stack_store.fake import FakeStackStore
from mrstack.core.stack_store.real import RealStackStore

__all__ = ["StackStore", "RealStackStore", "FakeStackStore"]

# -*- coding: utf-8 -*-
import itertools
import typing as t
from datetime import datetime

from academics.models import local_naive
from academics.store import RecordNotFound
from productivity_server.models import TodoItem


class TodoStore:
    """In-memory storage for to-do items."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._items: dict[int, TodoItem] = {}

    def add(self, item: TodoItem) -> TodoItem:
        """Adds a to-do item and assigns its id.

        :param item: The item to store.
        """
        item.id = next(self._ids)
        self._items[item.id] = item
        return item

    def get(self, item_id: int) -> TodoItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise RecordNotFound("TodoItem", item_id) from None

    def list(self) -> list[TodoItem]:
        """Items by due date, then creation time. Undated items come first."""
        return sorted(
            self._items.values(),
            key=lambda i: (i.due_date is not None, i.due_date or datetime.min, i.created_at),
        )

    def update(self, item_id: int, title: str, due_date: t.Optional[datetime],
               notes: str) -> TodoItem:
        """Edits the user-editable fields. ``created_at`` never changes."""
        item = self.get(item_id)
        item.title = title
        item.due_date = local_naive(due_date)
        item.notes = notes
        return item

    def toggle(self, item_id: int) -> TodoItem:
        item = self.get(item_id)
        item.is_completed = not item.is_completed
        return item

    def delete(self, item_id: int) -> None:
        self.get(item_id)
        del self._items[item_id]

    def clear(self) -> None:
        self._items.clear()


# In-memory storage for to-do items
# In a real application, this would be replaced with a persistent database
todos = TodoStore()

"""Application state: the topic tree and the list selection."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator

from .mqtt import Message

MAX_MESSAGES = 200


@dataclass(frozen=True)
class TopicNodeFlat:
    """One visible row of the topic tree."""

    depth: int
    label: str
    has_children: bool
    expanded: bool
    message_count: int
    sub_topic_count: int


@dataclass(eq=False)
class TopicNode:
    """A topic level holding its latest messages and its sub-topics."""

    messages: deque[Message] = field(default_factory=lambda: deque(maxlen=MAX_MESSAGES))
    children: dict[str, TopicNode] = field(default_factory=dict)
    total_count: int = 0
    expanded: bool = False

    def insert(self, topic: str, message: Message) -> None:
        """Store ``message`` under ``topic``, counting it at every level."""
        self.total_count += 1
        current = self
        for segment in topic.split("/"):
            current = current.children.setdefault(segment, TopicNode())
            current.total_count += 1
        current.messages.append(message)

    def _sorted_children(self) -> list[tuple[str, TopicNode]]:
        return sorted(self.children.items())

    def _descendant_count(self) -> int:
        return sum(1 + child._descendant_count() for child in self.children.values())

    def _walk(self, depth: int = 0) -> Iterator[tuple[int, str, TopicNode]]:
        for label, child in self._sorted_children():
            yield depth, label, child
            if child.expanded:
                yield from child._walk(depth + 1)

    def flatten(self, depth: int = 0) -> list[TopicNodeFlat]:
        """Visible rows below this node, in display order."""
        return [
            TopicNodeFlat(
                depth=row_depth,
                label=label,
                has_children=bool(node.children),
                expanded=node.expanded,
                message_count=node.total_count,
                sub_topic_count=node._descendant_count(),
            )
            for row_depth, label, node in self._walk(depth)
        ]

    def node_at(self, position: int) -> TopicNode | None:
        """The node shown in visible row ``position``, if any."""
        if position < 0:
            return None
        for index, (_, _, node) in enumerate(self._walk()):
            if index == position:
                return node
        return None

    def toggle_at(self, position: int) -> bool:
        """Expand or collapse the node at visible row ``position``."""
        node = self.node_at(position)
        if node is None:
            return False
        node.expanded = not node.expanded
        return True

    def visible_count(self) -> int:
        """Number of visible rows below this node."""
        return sum(1 for _ in self._walk())


@dataclass
class App:
    """State shown by the terminal interface."""

    topic_tree: TopicNode = field(default_factory=TopicNode)
    message_count: int = 0
    connected: bool = False
    selected: int = 0
    list_selected: int | None = None

    def on_up(self) -> None:
        self.selected = max(self.selected - 1, 0)
        self.list_selected = self.selected

    def on_down(self, max_items: int) -> None:
        self.selected = min(self.selected + 1, max(max_items - 1, 0))
        self.list_selected = self.selected

    def on_enter(self) -> None:
        self.topic_tree.toggle_at(self.selected)

    def on_message(self, message: Message) -> None:
        self.message_count += 1
        self.topic_tree.insert(message.topic, message)

    def on_connected(self) -> None:
        self.connected = True

    def on_disconnected(self) -> None:
        self.connected = False

    def selected_node(self) -> TopicNode | None:
        return self.topic_tree.node_at(self.selected)
"""Min-cut / max-flow on graphs with two terminals (Boykov-Kolmogorov algorithm)."""

from __future__ import annotations

from collections import deque
from enum import IntEnum

INFINITE_D = 1_000_000_000


class Terminal(IntEnum):
    """The two terminals a node can be cut towards."""

    SOURCE = 0
    SINK = 1


class _Sentinel:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


# Special values of a node's parent besides a real arc or None.
_TERMINAL = _Sentinel("TERMINAL")
_ORPHAN = _Sentinel("ORPHAN")


class _Arc:
    __slots__ = ("head", "sister", "r_cap")

    def __init__(self, head: "_Node", r_cap: float) -> None:
        self.head = head
        self.sister: _Arc | None = None
        self.r_cap = r_cap


class _Node:
    __slots__ = ("arcs", "parent", "active", "ts", "dist", "is_sink", "tr_cap")

    def __init__(self) -> None:
        self.arcs: list[_Arc] = []
        self.parent = None
        self.active = False
        self.ts = 0
        self.dist = 0
        self.is_sink = False
        # tr_cap > 0: residual capacity of SOURCE->node,
        # tr_cap < 0: -tr_cap is residual capacity of node->SINK.
        self.tr_cap = 0.0

    def outgoing(self):
        """Outgoing arcs, most recently added first."""
        return reversed(self.arcs)


class Graph:
    """A directed graph with a source and a sink whose maximum flow can be computed."""

    def __init__(self) -> None:
        self._nodes: list[_Node] = []
        self._flow = 0.0
        self._active: deque[_Node] = deque()
        self._orphans: deque[_Node] = deque()
        self._time = 0

    def _node(self, node: int) -> _Node:
        if not 0 <= node < len(self._nodes):
            raise IndexError(f"no node with id {node}")
        return self._nodes[node]

    def add_node(self) -> int:
        """Add a node and return its id."""
        self._nodes.append(_Node())
        return len(self._nodes) - 1

    def add_edge(self, source_node: int, target_node: int, cap: float, rev_cap: float) -> None:
        """Add a pair of arcs: source_node->target_node with cap, and back with rev_cap."""
        start = self._node(source_node)
        end = self._node(target_node)
        arc = _Arc(end, cap)
        rev = _Arc(start, rev_cap)
        arc.sister = rev
        rev.sister = arc
        start.arcs.append(arc)
        end.arcs.append(rev)

    def set_tweights(self, node: int, cap_source: float, cap_sink: float) -> None:
        """Set the weights of SOURCE->node and node->SINK; weights may be negative."""
        n = self._node(node)
        self._flow += min(cap_source, cap_sink)
        n.tr_cap = cap_source - cap_sink

    def add_tweights(self, node: int, cap_source: float, cap_sink: float) -> None:
        """Add to the weights of SOURCE->node and node->SINK; weights may be negative."""
        n = self._node(node)
        delta = n.tr_cap
        if delta > 0:
            cap_source += delta
        else:
            cap_sink -= delta
        self._flow += min(cap_source, cap_sink)
        n.tr_cap = cap_source - cap_sink

    def what_segment(self, node: int) -> Terminal:
        """Return the terminal whose side of the cut the node ended on."""
        n = self._node(node)
        if n.parent is not None and not n.is_sink:
            return Terminal.SOURCE
        return Terminal.SINK

    # -- active list -------------------------------------------------------

    def _set_active(self, node: _Node) -> None:
        if not node.active:
            node.active = True
            self._active.append(node)

    def _next_active(self) -> _Node | None:
        while self._active:
            node = self._active.popleft()
            node.active = False
            if node.parent is not None:
                return node
        return None

    # -- algorithm ---------------------------------------------------------

    def _init(self) -> None:
        self._active.clear()
        self._orphans.clear()
        for node in self._nodes:
            node.active = False
            node.ts = 0
            if node.tr_cap > 0:
                node.is_sink = False
                node.parent = _TERMINAL
                self._set_active(node)
                node.dist = 1
            elif node.tr_cap < 0:
                node.is_sink = True
                node.parent = _TERMINAL
                self._set_active(node)
                node.dist = 1
            else:
                node.parent = None
        self._time = 0

    def _augment(self, middle: _Arc) -> list[_Node]:
        """Push the bottleneck flow along the path through middle; return the new orphans."""
        bottleneck = middle.r_cap
        node = middle.sister.head
        while (arc := node.parent) is not _TERMINAL:
            bottleneck = min(bottleneck, arc.sister.r_cap)
            node = arc.head
        bottleneck = min(bottleneck, node.tr_cap)
        node = middle.head
        while (arc := node.parent) is not _TERMINAL:
            bottleneck = min(bottleneck, arc.r_cap)
            node = arc.head
        bottleneck = min(bottleneck, -node.tr_cap)

        orphans: list[_Node] = []
        middle.sister.r_cap += bottleneck
        middle.r_cap -= bottleneck

        node = middle.sister.head
        while (arc := node.parent) is not _TERMINAL:
            arc.r_cap += bottleneck
            arc.sister.r_cap -= bottleneck
            if not arc.sister.r_cap:
                node.parent = _ORPHAN
                orphans.append(node)
            node = arc.head
        node.tr_cap -= bottleneck
        if not node.tr_cap:
            node.parent = _ORPHAN
            orphans.append(node)

        node = middle.head
        while (arc := node.parent) is not _TERMINAL:
            arc.sister.r_cap += bottleneck
            arc.r_cap -= bottleneck
            if not arc.r_cap:
                node.parent = _ORPHAN
                orphans.append(node)
            node = arc.head
        node.tr_cap += bottleneck
        if not node.tr_cap:
            node.parent = _ORPHAN
            orphans.append(node)

        self._flow += bottleneck
        # Orphans are processed most recent first.
        orphans.reverse()
        return orphans

    def _origin_distance(self, node: _Node) -> int:
        """Distance from node to its terminal, or INFINITE_D if its tree path hits an orphan."""
        d = 0
        while True:
            if node.ts == self._time:
                return d + node.dist
            parent = node.parent
            d += 1
            if parent is _TERMINAL:
                node.ts = self._time
                node.dist = 1
                return d
            if parent is _ORPHAN:
                return INFINITE_D
            node = parent.head

    def _process_orphan(self, orphan: _Node) -> None:
        sink = orphan.is_sink
        best_arc = None
        d_min = INFINITE_D

        for arc in orphan.outgoing():
            residual = arc.r_cap if sink else arc.sister.r_cap
            if not residual:
                continue
            j = arc.head
            if j.is_sink != sink or j.parent is None:
                continue
            d = self._origin_distance(j)
            if d < INFINITE_D:
                if d < d_min:
                    best_arc = arc
                    d_min = d
                j = arc.head
                while j.ts != self._time:
                    j.ts = self._time
                    j.dist = d
                    d -= 1
                    j = j.parent.head

        orphan.parent = best_arc
        if best_arc is not None:
            orphan.ts = self._time
            orphan.dist = d_min + 1
            return

        orphan.ts = 0
        for arc in orphan.outgoing():
            j = arc.head
            parent = j.parent
            if j.is_sink != sink or parent is None:
                continue
            residual = arc.r_cap if sink else arc.sister.r_cap
            if residual:
                self._set_active(j)
            if parent is not _TERMINAL and parent is not _ORPHAN and parent.head is orphan:
                j.parent = _ORPHAN
                self._orphans.append(j)

    def _grow(self, node: _Node) -> _Arc | None:
        """Grow the node's tree; return an arc from source tree to sink tree if one is met."""
        for arc in node.outgoing():
            residual = arc.sister.r_cap if node.is_sink else arc.r_cap
            if not residual:
                continue
            j = arc.head
            if j.parent is None:
                j.is_sink = node.is_sink
                j.parent = arc.sister
                j.ts = node.ts
                j.dist = node.dist + 1
                self._set_active(j)
            elif j.is_sink != node.is_sink:
                return arc.sister if node.is_sink else arc
            elif j.ts <= node.ts and j.dist > node.dist:
                # heuristic: shorten the distance from j to its terminal
                j.parent = arc.sister
                j.ts = node.ts
                j.dist = node.dist + 1
        return None

    def maxflow(self) -> float:
        """Compute the maximum flow and return its value."""
        self._init()
        current = None
        while True:
            node = current
            if node is not None:
                node.active = False
                if node.parent is None:
                    node = None
            if node is None:
                node = self._next_active()
                if node is None:
                    break

            meeting = self._grow(node)
            self._time += 1

            if meeting is None:
                current = None
                continue

            node.active = True
            current = node
            for orphan in self._augment(meeting):
                self._orphans.append(orphan)
                while self._orphans:
                    self._process_orphan(self._orphans.popleft())

        return self._flow
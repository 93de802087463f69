"""
Graph algorithms over task dependency edges.

Adjacency maps a task id to the ids it depends on (task -> dependency).
All walks are iterative so long dependency chains do not hit the
interpreter's recursion limit.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping, Sequence


def find_cycle(adjacency: Mapping[str, Iterable[str]]) -> list[str] | None:
    """
    Depth-first cycle search.

    `visited` holds every node ever entered; `on_stack` holds only the nodes
    on the current DFS path. Meeting an `on_stack` node is a cycle. Meeting a
    node that is visited but no longer on the stack is safe to prune: it was
    fully explored and no cycle runs through it (this is what keeps diamond
    shapes from being reported).

    Returns:
        The cycle as a closed path (first id repeated at the end), or None
    """
    visited: set[str] = set()
    on_stack: set[str] = set()

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        path = [root]
        stack = [(root, iter(adjacency.get(root, ())))]

        while stack:
            node, neighbours = stack[-1]
            descended = False

            for nxt in neighbours:
                if nxt in on_stack:
                    return path[path.index(nxt):] + [nxt]
                if nxt in visited:
                    continue
                visited.add(nxt)
                on_stack.add(nxt)
                path.append(nxt)
                stack.append((nxt, iter(adjacency.get(nxt, ()))))
                descended = True
                break

            if not descended:
                stack.pop()
                on_stack.discard(node)
                path.pop()

    return None


def with_edge(adjacency: Mapping[str, Iterable[str]], source: str, target: str) -> dict[str, list[str]]:
    """Copy of adjacency with source -> target added."""
    graph = {node: list(deps) for node, deps in adjacency.items()}
    graph.setdefault(source, [])
    if target not in graph[source]:
        graph[source].append(target)
    return graph


def reverse_adjacency(adjacency: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
    """Map each id to the ids that depend on it."""
    reverse: dict[str, list[str]] = {node: [] for node in adjacency}
    for node, deps in adjacency.items():
        for dep in deps:
            reverse.setdefault(dep, []).append(node)
    return reverse


def topological_order(
    nodes: Sequence[str],
    adjacency: Mapping[str, Iterable[str]],
) -> tuple[list[str], list[str]]:
    """
    Kahn's algorithm. Dependencies come before their dependents.

    Edges pointing outside `nodes` are ignored. The queue is seeded in the
    order of `nodes`, so independent tasks keep their input order.

    Returns:
        Tuple of (ordered ids, ids left over because they sit on or behind a cycle)
    """
    members = set(nodes)
    in_degree = {node: 0 for node in nodes}
    dependents: dict[str, list[str]] = {node: [] for node in nodes}

    for node in nodes:
        for dep in adjacency.get(node, ()):
            if dep in members and dep != node:
                in_degree[node] += 1
                dependents[dep].append(node)
            elif dep == node:
                in_degree[node] += 1

    queue = deque(node for node in nodes if in_degree[node] == 0)
    ordered: list[str] = []

    while queue:
        node = queue.popleft()
        ordered.append(node)
        for dependent in dependents[node]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    placed = set(ordered)
    leftover = [node for node in nodes if node not in placed]
    return ordered, leftover


def collect_dependents(start: str, reverse: Mapping[str, Iterable[str]]) -> list[tuple[str, int]]:
    """
    Breadth-first walk over everything that transitively depends on `start`.

    Each id is reported once with its shortest distance from `start`; the
    visited set keeps diamond-shaped graphs at O(V+E).
    """
    visited = {start}
    impacted: list[tuple[str, int]] = []
    queue = deque([(start, 0)])

    while queue:
        node, depth = queue.popleft()
        for dependent in reverse.get(node, ()):
            if dependent in visited:
                continue
            visited.add(dependent)
            impacted.append((dependent, depth + 1))
            queue.append((dependent, depth + 1))

    return impacted

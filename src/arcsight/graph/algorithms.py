"""Graph algorithms: strongly connected components."""

from __future__ import annotations

from .models import ImportGraph


def tarjan_scc(graph: ImportGraph) -> list[tuple[str, ...]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    dependency chains. Roots and neighbours are visited in sorted order, and
    each component comes back sorted, so the result never depends on
    set or dict iteration order. Components are returned sorted by their
    smallest member.
    """
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[tuple[str, ...]] = []

    for root in graph.nodes:
        if root in index:
            continue

        # Explicit call stack: each frame is (node, neighbor_iterator)
        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack = [(root, iter(graph.successors(root)))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter(graph.successors(w))))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                # All neighbors processed: "return" from v
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: list[str] = []
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.append(w)
                        if w == v:
                            break
                    result.append(tuple(sorted(component)))

    result.sort()
    return result


def component_index(graph: ImportGraph) -> dict[str, int]:
    """Map each node in a multi-node SCC to its component number."""
    membership: dict[str, int] = {}
    for number, component in enumerate(c for c in tarjan_scc(graph) if len(c) > 1):
        for node in component:
            membership[node] = number
    return membership

import random

import pytest

from planesweep.maxflow import Graph, Terminal


def _build(n_nodes, tweights, edges, *, additive=False):
    graph = Graph()
    nodes = [graph.add_node() for _ in range(n_nodes)]
    for node, (cs, ck) in zip(nodes, tweights):
        if additive:
            graph.add_tweights(node, cs, ck)
        else:
            graph.set_tweights(node, cs, ck)
    for u, v, cap, rev in edges:
        graph.add_edge(nodes[u], nodes[v], cap, rev)
    return graph, nodes


def _cut_cost(graph, nodes, tweights, edges):
    total = 0.0
    for node, (cs, ck) in zip(nodes, tweights):
        total += cs if graph.what_segment(node) == Terminal.SINK else ck
    for u, v, cap, rev in edges:
        su = graph.what_segment(nodes[u])
        sv = graph.what_segment(nodes[v])
        if su == Terminal.SOURCE and sv == Terminal.SINK:
            total += cap
        elif su == Terminal.SINK and sv == Terminal.SOURCE:
            total += rev
    return total


def _random_problem(seed, n_nodes=12, n_edges=30, allow_negative=False):
    rng = random.Random(seed)
    low = -5 if allow_negative else 0
    tweights = [(float(rng.randint(low, 10)), float(rng.randint(low, 10))) for _ in range(n_nodes)]
    edges = []
    for _ in range(n_edges):
        u = rng.randrange(n_nodes)
        v = rng.randrange(n_nodes)
        if u == v:
            continue
        edges.append((u, v, float(rng.randint(0, 8)), float(rng.randint(0, 8))))
    return tweights, edges


def test_chain_worked_example():
    tweights = [(5.0, 0.0), (0.0, 3.0)]
    edges = [(0, 1, 4.0, 0.0)]
    graph, nodes = _build(2, tweights, edges)
    assert graph.maxflow() == 3.0
    assert graph.what_segment(nodes[0]) == Terminal.SOURCE
    assert graph.what_segment(nodes[1]) == Terminal.SINK


def test_edge_bottleneck():
    tweights = [(5.0, 0.0), (0.0, 6.0)]
    edges = [(0, 1, 2.0, 0.0)]
    graph, nodes = _build(2, tweights, edges)
    assert graph.maxflow() == 2.0
    assert graph.what_segment(nodes[0]) == Terminal.SOURCE
    assert graph.what_segment(nodes[1]) == Terminal.SINK


def test_single_node_flow_is_minimum_of_tweights():
    graph = Graph()
    node = graph.add_node()
    graph.set_tweights(node, 4.0, 7.0)
    assert graph.maxflow() == 4.0
    assert graph.what_segment(node) == Terminal.SINK


def test_single_node_on_source_side():
    graph = Graph()
    node = graph.add_node()
    graph.set_tweights(node, 9.0, 2.0)
    assert graph.maxflow() == 2.0
    assert graph.what_segment(node) == Terminal.SOURCE


def test_isolated_node_is_sink_side():
    graph = Graph()
    node = graph.add_node()
    graph.maxflow()
    assert graph.what_segment(node) == Terminal.SINK


def test_segment_before_maxflow_is_sink():
    graph = Graph()
    node = graph.add_node()
    graph.set_tweights(node, 3.0, 0.0)
    assert graph.what_segment(node) == Terminal.SINK


def test_node_ids_are_sequential():
    graph = Graph()
    ids = [graph.add_node() for _ in range(4)]
    assert ids == [0, 1, 2, 3]


@pytest.mark.parametrize("bad", [-1, 5])
def test_unknown_node_raises(bad):
    graph = Graph()
    graph.add_node()
    with pytest.raises(IndexError):
        graph.what_segment(bad)
    with pytest.raises(IndexError):
        graph.set_tweights(bad, 1.0, 1.0)
    with pytest.raises(IndexError):
        graph.add_edge(0, bad, 1.0, 1.0)


@pytest.mark.parametrize("seed", range(20))
def test_flow_equals_cut_capacity(seed):
    tweights, edges = _random_problem(seed)
    graph, nodes = _build(len(tweights), tweights, edges)
    flow = graph.maxflow()
    assert flow == pytest.approx(_cut_cost(graph, nodes, tweights, edges))


@pytest.mark.parametrize("seed", range(10))
def test_flow_equals_cut_capacity_with_negative_weights(seed):
    tweights, edges = _random_problem(100 + seed, allow_negative=True)
    graph, nodes = _build(len(tweights), tweights, edges)
    flow = graph.maxflow()
    assert flow == pytest.approx(_cut_cost(graph, nodes, tweights, edges))


@pytest.mark.parametrize("seed", range(10))
def test_flow_bounded_by_terminal_capacities(seed):
    tweights, edges = _random_problem(200 + seed)
    graph, _ = _build(len(tweights), tweights, edges)
    flow = graph.maxflow()
    assert 0.0 <= flow <= sum(cs for cs, _ in tweights)
    assert flow <= sum(ck for _, ck in tweights)


@pytest.mark.parametrize("seed", range(10))
def test_add_tweights_accumulates_like_set_tweights(seed):
    first, edges = _random_problem(300 + seed)
    second, _ = _random_problem(400 + seed)
    summed = [(a + c, b + d) for (a, b), (c, d) in zip(first, second)]

    reference, _ = _build(len(summed), summed, edges)

    graph = Graph()
    nodes = [graph.add_node() for _ in summed]
    for node, (cs, ck) in zip(nodes, first):
        graph.add_tweights(node, cs, ck)
    for node, (cs, ck) in zip(nodes, second):
        graph.add_tweights(node, cs, ck)
    for u, v, cap, rev in edges:
        graph.add_edge(nodes[u], nodes[v], cap, rev)

    assert graph.maxflow() == pytest.approx(reference.maxflow())


def test_grid_cut_is_minimal():
    rng = random.Random(7)
    width, height = 6, 5
    tweights = [(float(rng.randint(0, 20)), float(rng.randint(0, 20))) for _ in range(width * height)]
    edges = []
    for r in range(height):
        for c in range(width):
            p = r * width + c
            if c != width - 1:
                w = float(rng.randint(0, 6))
                edges.append((p, p + 1, w, w))
            if r != height - 1:
                w = float(rng.randint(0, 6))
                edges.append((p, p + width, w, w))
    graph, nodes = _build(width * height, tweights, edges)
    flow = graph.maxflow()
    cut = _cut_cost(graph, nodes, tweights, edges)
    assert flow == pytest.approx(cut)

    # Any single-node flip of the found partition cannot give a cheaper cut.
    segments = [graph.what_segment(n) for n in nodes]

    def cost(assign):
        total = 0.0
        for (cs, ck), seg in zip(tweights, assign):
            total += cs if seg == Terminal.SINK else ck
        for u, v, cap, rev in edges:
            if assign[u] == Terminal.SOURCE and assign[v] == Terminal.SINK:
                total += cap
            elif assign[u] == Terminal.SINK and assign[v] == Terminal.SOURCE:
                total += rev
        return total

    for k in range(len(segments)):
        flipped = list(segments)
        flipped[k] = Terminal.SINK if flipped[k] == Terminal.SOURCE else Terminal.SOURCE
        assert cost(flipped) >= cut - 1e-9
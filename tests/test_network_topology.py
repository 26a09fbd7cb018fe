import pytest

from bayesnet import BayesianNetwork, Node, NodeSpec, TopologyError, build_network


def _chain():
    a = Node("A", 0.5)
    b = Node("B", [0.2, 0.8], parents=[a])
    c = Node("C", [0.1, 0.9], parents=[b])
    return a, b, c


def test_accepts_topological_order():
    a, b, c = _chain()
    network = BayesianNetwork([a, b, c])
    assert network.names == ("A", "B", "C")
    assert network.node("B") is b
    assert "C" in network
    assert len(network) == 3
    with pytest.raises(KeyError):
        network.node("D")


def test_rejects_parent_after_child():
    a, b, c = _chain()
    with pytest.raises(TopologyError, match="must appear before"):
        BayesianNetwork([a, c, b])


def test_rejects_parent_outside_network():
    a, b, _ = _chain()
    with pytest.raises(TopologyError, match="not part of this network"):
        BayesianNetwork([b])
    impostor = Node("A", 0.5)
    with pytest.raises(TopologyError):
        BayesianNetwork([impostor, b])


def test_rejects_duplicate_names():
    with pytest.raises(TopologyError, match="Duplicate"):
        BayesianNetwork([Node("A", 0.1), Node("A", 0.2)])


def test_sorted_reorders_and_keeps_input_order_for_ties():
    a, b, c = _chain()
    d = Node("D", 0.3)
    network = BayesianNetwork.sorted([c, d, b, a])
    assert network.names == ("D", "A", "B", "C")


def test_build_network_from_specs():
    network = build_network(
        [
            NodeSpec("Storm", (), 0.7),
            NodeSpec("Rain", "Storm", {"T": 0.7, "F": 0.3}),
        ]
    )
    assert network.node("Rain").parent_names == ("Storm",)
    assert network.node("Rain").probability([False]) == 0.3


def test_build_network_requires_order_unless_sorting():
    specs = [
        NodeSpec("Rain", ("Storm",), [0.3, 0.7]),
        NodeSpec("Storm", (), 0.7),
    ]
    with pytest.raises(TopologyError, match="appears after"):
        build_network(specs)
    assert build_network(specs, sort=True).names == ("Storm", "Rain")


def test_build_network_rejects_unknown_parents_and_cycles():
    with pytest.raises(TopologyError, match="not defined"):
        build_network([NodeSpec("Rain", ("Storm",), [0.3, 0.7])])
    cyclic = [
        NodeSpec("A", ("B",), [0.5, 0.5]),
        NodeSpec("B", ("A",), [0.5, 0.5]),
    ]
    with pytest.raises(TopologyError, match="cycle"):
        build_network(cyclic, sort=True)
    with pytest.raises(TopologyError, match="unknown parent"):
        build_network([NodeSpec("A", ("Z",), [0.5, 0.5])], sort=True)

import numpy as np
import pytest

from bayesnet import Assignment, Query
from bayesnet.networks import NETWORKS, burglary_alarm, get_network, storm_rain

from _exact import exact_posterior


@pytest.mark.parametrize("name", sorted(NETWORKS))
def test_templates_build_fresh_networks(name):
    first = get_network(name)
    second = get_network(name)
    assert first.names == second.names
    assert first.nodes[0] is not second.nodes[0]


def test_unknown_template_lists_choices():
    with pytest.raises(KeyError, match="storm_rain"):
        get_network("asia")


def test_storm_rain_cpts():
    network = storm_rain()
    assert network.node("Storm").probability() == 0.7
    assert network.node("Rain").probability([True]) == 0.7
    assert network.node("Rain").probability([False]) == 0.3


def test_burglary_alarm_posterior():
    network = burglary_alarm()
    query = Query.of("Alarm", {"JohnCalls": True, "MaryCalls": True})
    exact = exact_posterior(network, query)
    result = network.likelihood_weighting(query, 100000, np.random.default_rng(21))
    assert exact[Assignment.of(True).index] == pytest.approx(0.7606, abs=1e-3)
    np.testing.assert_allclose(result.to_array(), exact, atol=0.05)

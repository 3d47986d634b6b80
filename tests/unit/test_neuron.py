import numpy as np
import pytest

from icrnet.core.neuron import Layer, Neuron, build_layers, check_topology
from icrnet.core.random import RandomSource


def test_standalone_neuron_storage():
    neuron = Neuron(3, value=0.25)
    assert neuron.fan_out == 3
    assert neuron.get_value() == 0.25
    neuron.set_value(-7.5)
    assert neuron.get_value() == -7.5
    neuron.set_weight(2, 1.5)
    assert neuron.get_weight(2) == 1.5
    assert neuron.weights.tolist() == [0.0, 0.0, 1.5]


def test_output_neuron_has_no_weights():
    neuron = Neuron(0)
    assert neuron.fan_out == 0
    with pytest.raises(IndexError):
        neuron.get_weight(0)


def test_initialize_weights_uses_symmetric_range():
    neuron = Neuron(500)
    neuron.initialize_weights(RandomSource(0))
    assert neuron.weights.min() >= -0.5
    assert neuron.weights.max() < 0.5
    before = neuron.weights.copy()
    neuron.initialize_weights(RandomSource(1), low=-0.1, high=0.1)
    assert not np.array_equal(before, neuron.weights)
    assert np.abs(neuron.weights).max() <= 0.1


def test_layer_neurons_are_views_of_layer_storage():
    layer = Layer(3, 2)
    layer[1].set_value(0.75)
    layer[2].set_weight(1, -2.0)
    assert layer.values.tolist() == [0.0, 0.75, 0.0]
    assert layer.weights[2, 1] == -2.0
    layer.set_values(np.array([1.0, 2.0, 3.0]))
    assert [n.get_value() for n in layer] == [1.0, 2.0, 3.0]


def test_layer_rejects_wrong_value_count():
    layer = Layer(3, 1)
    with pytest.raises(ValueError, match="expects 3 values"):
        layer.set_values([1.0, 2.0])


def test_layer_initialization_touches_each_neuron_independently():
    layer = Layer(4, 5)
    layer.initialize_weights(RandomSource(3))
    rows = {tuple(row) for row in layer.weights}
    assert len(rows) == 4


@pytest.mark.parametrize("dims", [[784, 60, 10], [2, 2, 2], [5, 4, 3, 2]])
def test_build_layers_wires_fan_out(dims):
    layers = build_layers(dims)
    assert [len(layer) for layer in layers] == dims
    check_topology(layers)
    assert layers[-1].fan_out == 0


def test_build_layers_needs_two_layers():
    with pytest.raises(ValueError):
        build_layers([10])

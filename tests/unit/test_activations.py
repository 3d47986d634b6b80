import warnings

import numpy as np
import pytest

from icrnet.core.activations import (
    activation_deriv,
    argmax_first,
    one_hot,
    resolve_derivative,
    resquash_deriv,
    sigmoid,
)


def test_sigmoid_midpoint_and_range():
    assert sigmoid(0.0) == 0.5
    xs = np.linspace(-30.0, 30.0, 601)
    ys = sigmoid(xs)
    assert np.all(np.diff(ys) > 0)
    assert np.all((ys > 0.0) & (ys < 1.0))


def test_sigmoid_saturates_without_overflow_warnings():
    with warnings.catch_warnings(), np.errstate(over="raise"):
        warnings.simplefilter("error")
        assert sigmoid(-800.0) == 0.0
        assert sigmoid(np.float64(-1000.0)) == 0.0
        assert sigmoid(np.float64(1000.0)) == 1.0
        assert np.array_equal(sigmoid(np.array([-800.0, 0.0, 800.0])), [0.0, 0.5, 1.0])


def test_resquash_derivative_applies_sigmoid_to_activation():
    values = np.array([0.2, 0.5, 0.9])
    s = 1.0 / (1.0 + np.exp(-values))
    assert np.allclose(resquash_deriv(values), s * (1 - s))
    assert np.allclose(activation_deriv(values), values * (1 - values))
    assert not np.allclose(resquash_deriv(values), activation_deriv(values))


def test_resolve_derivative_rejects_unknown_mode():
    assert resolve_derivative("resquash") is resquash_deriv
    with pytest.raises(ValueError, match="Unknown derivative"):
        resolve_derivative("tanh")


def test_argmax_keeps_first_maximum():
    assert argmax_first([0.5, 0.9, 0.9, 0.1]) == 1
    assert argmax_first(np.array([0.3, 0.3])) == 0


def test_one_hot():
    assert one_hot(2, 4).tolist() == [0.0, 0.0, 1.0, 0.0]

import math
import pytest
from vfdtpy import HoeffdingConfig, HoeffdingTree, InvalidConfigurationError


def test_defaults():
    cfg = HoeffdingConfig()
    assert cfg.delta == 1e-4
    assert cfg.tie_confidence == 0.05
    assert cfg.n_min == 30
    assert cfg.ln_inv_delta == pytest.approx(math.log(1e4))


@pytest.mark.parametrize("delta", [0.0, 1.0, -1e-3, 1.5, float("nan")])
def test_delta_outside_unit_interval(delta):
    with pytest.raises(InvalidConfigurationError):
        HoeffdingConfig(delta=delta)


@pytest.mark.parametrize("n_min", [0, -30, 1.5, True])
def test_n_min_must_be_positive_integer(n_min):
    with pytest.raises(InvalidConfigurationError):
        HoeffdingConfig(n_min=n_min)


def test_config_is_immutable():
    cfg = HoeffdingConfig(n_min=10)
    with pytest.raises(AttributeError):
        cfg.n_min = 20


def test_tree_requires_config_object():
    with pytest.raises(TypeError):
        HoeffdingTree({"n_min": 10})

import pytest
import torch

from xmeans.utils.device import parse_device, get_default_device


def test_parse_device_defaults_to_cpu():
    assert parse_device(None) == torch.device("cpu")
    assert parse_device("cpu") == torch.device("cpu")
    assert parse_device(torch.device("cpu")) == torch.device("cpu")


def test_parse_device_auto_matches_default():
    assert parse_device("auto") == get_default_device()


@pytest.mark.skipif(torch.cuda.is_available(), reason="CUDA present; no fallback to check")
def test_parse_device_cuda_falls_back_with_warning():
    with pytest.warns(UserWarning, match="CUDA not available"):
        assert parse_device("cuda") == torch.device("cpu")


def test_parse_device_rejects_unknown():
    with pytest.raises(ValueError):
        parse_device("tpu")
    with pytest.raises(TypeError):
        parse_device(0)

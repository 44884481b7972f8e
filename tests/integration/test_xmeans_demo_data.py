import importlib.util
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import torch

from xmeans import XMeans

DEMO = Path(__file__).resolve().parents[2] / "src" / "examples" / "xmeans_demo.py"


def _load_demo():
    spec = importlib.util.spec_from_file_location("xmeans_demo", DEMO)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_demo_blobs_are_found_with_stop_policy():
    demo = _load_demo()
    X, labels = demo.generate_blobs()

    assert X.shape == (600, 2)
    assert torch.bincount(labels).tolist() == [150, 150, 150, 150]

    model = XMeans(min_clusters=1, max_clusters=10, stall_policy="stop", random_state=0).fit(X)

    assert model.n_clusters_ >= 2
    assert model.k_history_[0] >= 2

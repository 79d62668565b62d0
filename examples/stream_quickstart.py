import logging
import numpy as np
from time import perf_counter
from vfdtpy import HoeffdingConfig, HoeffdingTree, Schema, VFDTClassifier

logging.basicConfig(level=logging.INFO)

# --- estimator on an in-memory table --------------------------------------
rng = np.random.default_rng(42)
n = 20000
outlook = rng.choice(["sunny", "overcast", "rain"], size=n)
windy = rng.choice(["yes", "no"], size=n)
humidity = rng.choice(["high", "normal"], size=n)
play = np.where((outlook == "overcast") | ((outlook == "sunny") & (humidity == "normal"))
                | ((outlook == "rain") & (windy == "no")), "play", "stay")
noise = rng.random(n) < 0.05
play = np.where(noise, np.where(play == "play", "stay", "play"), play)

X = np.column_stack([outlook, windy, humidity]).astype(object)
feats = ["outlook", "windy", "humidity"]

clf = VFDTClassifier(delta=1e-4, tie_confidence=0.05, n_min=200, feature_names=feats)
t0 = perf_counter(); clf.fit(X, play); print(f"fit: {perf_counter()-t0:.3f} s")
clf.print_tree()
print(f"train accuracy: {clf.score(X, play):.3f}")
try:
    clf.export_graphviz("weather_tree", format="dot")
except RuntimeError as e:
    print(f"Skipping Graphviz export: {e}")

# --- the tree on an unbounded generator -----------------------------------
schema = Schema.from_domains([["sunny", "overcast", "rain"], ["yes", "no"], ["high", "normal"]],
                             ["play", "stay"], feats, class_name="play")


def stream():
    for row, label in zip(X, play):
        yield schema.make_instance(list(row) + [label])


tree = HoeffdingTree(HoeffdingConfig(n_min=200)).train(stream())
print(f"nodes={tree.n_nodes} leaves={tree.n_leaves} depth={tree.depth}")

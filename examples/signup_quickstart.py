from time import perf_counter

import numpy as np
from gaintree import GainTreeClassifier, build_tree, enable_logging, md_classify, prune, to_dot

rows = [
    ["slashdot", "USA", "yes", 18, "None"],
    ["google", "France", "yes", 23, "Premium"],
    ["digg", "USA", "yes", 24, "Basic"],
    ["kiwitobes", "France", "yes", 23, "Basic"],
    ["google", "UK", "no", 21, "Premium"],
    ["(direct)", "New Zealand", "no", 12, "None"],
    ["(direct)", "UK", "no", 21, "Basic"],
    ["google", "USA", "no", 24, "Premium"],
    ["slashdot", "France", "yes", 19, "None"],
    ["digg", "USA", "no", 18, "None"],
    ["google", "UK", "no", 18, "None"],
    ["kiwitobes", "UK", "no", 19, "None"],
    ["digg", "New Zealand", "yes", 12, "Basic"],
    ["slashdot", "UK", "no", 21, "None"],
    ["google", "UK", "yes", 18, "Basic"],
    ["kiwitobes", "France", "yes", 19, "Basic"],
]
feats = ["referrer", "country", "read_faq", "pages"]

# functional API
with enable_logging(level="DEBUG"):
    tree = build_tree(rows)
print(to_dot(tree))
print(md_classify(tree, ["google", None, "yes", None]))
print(f"collapsed: {prune(tree, 1.0)}")

# estimator API
X = np.array([r[:-1] for r in rows], dtype=object)
y = np.array([r[-1] for r in rows])

clf = GainTreeClassifier(feature_names=feats, n_jobs=2)
t0 = perf_counter(); clf.fit(X, y); print(f"fit: {perf_counter()-t0:.3f} s")
clf.print_tree()
for rule in clf.export_rules():
    print(rule)
print(clf.predict_proba([["google", "France", None, None]]))
try:
    clf.export_graphviz("signup_tree", format="dot")
except RuntimeError as e:
    print(f"Skipping Graphviz export: {e}")

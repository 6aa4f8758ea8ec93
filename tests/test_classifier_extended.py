import os
import threading

import numpy as np
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError
from gaintree import BuildCancelledError, GainTreeClassifier


def _tiny_dataset():
    """Return a small classification dataset with a categorical and a numeric feature."""
    X = np.array([["a", 1], ["a", 2], ["b", 1], ["b", 2]], dtype=object)
    y = np.array(["yes", "no", "yes", "yes"])
    return X, y


def test_classifier_fits_training_data():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier().fit(X, y)
    assert list(clf.classes_) == ["no", "yes"]
    assert list(clf.predict(X)) == list(y)
    assert clf.score(X, y) == 1.0
    assert clf.get_depth() == 2
    assert clf.get_n_leaves() == 3


def test_classifier_proba_sums_to_one():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier(feature_names=["site", "pages"]).fit(X, y)
    proba = clf.predict_proba(X)
    # probabilities for each row should sum to 1
    assert np.allclose(proba.sum(axis=1), 1.0)


def test_classifier_missing_value_blends_branches():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier().fit(X, y)
    assert np.allclose(clf.predict_proba([["a", None]]), [[0.5, 0.5]])
    assert np.allclose(clf.predict_proba([["a", np.nan]]), [[0.5, 0.5]])
    assert clf.predict_counts([["b", 1]]) == [{"yes": 2}]


def test_classifier_rule_export():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier(feature_names=["site", "pages"]).fit(X, y)
    rules = clf.export_rules()
    assert rules == [
        "site == a AND pages >= 2 => {'no': 1}",
        "site == a AND pages < 2 => {'yes': 1}",
        "site != a => {'yes': 2}",
    ]
    # default names when none were given
    plain = GainTreeClassifier().fit(X, y)
    assert plain.export_rules()[0].startswith("f0 == a AND f1 >= 2")


def test_classifier_export_dot():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier().fit(X, y)
    dot = clf.export_dot()
    assert dot.startswith("digraph decision_tree {")
    assert "  A -> E" in dot


def test_classifier_print_tree(capsys):
    X, y = _tiny_dataset()
    GainTreeClassifier().fit(X, y).print_tree(feature_names=["site", "pages"])
    out = capsys.readouterr().out
    assert out.startswith("if site == a:")


def test_classifier_graphviz_export(tmp_path):
    pytest.importorskip("graphviz")
    X, y = _tiny_dataset()
    clf = GainTreeClassifier().fit(X, y)

    src = clf.export_graphviz()
    assert "f0 == a" in src
    # dot format does not need the external graphviz binary
    out_path = clf.export_graphviz(str(tmp_path / "test_tree"), feature_names=["site", "pages"],
                                   format="dot")
    assert out_path.endswith(".dot")
    assert os.path.exists(out_path)


def test_classifier_not_fitted_raises():
    clf = GainTreeClassifier()
    with pytest.raises(NotFittedError):
        clf.predict([["a", 1]])
    with pytest.raises(ValueError):
        clf.export_rules()


def test_classifier_input_validation():
    X, y = _tiny_dataset()
    with pytest.raises(ValueError):
        GainTreeClassifier(feature_names=["only_one"]).fit(X, y)
    with pytest.raises(ValueError):
        GainTreeClassifier().fit(X, y[:3])
    clf = GainTreeClassifier().fit(X, y)
    with pytest.raises(ValueError):
        clf.predict([["a", 1, 3]])


def test_classifier_min_gain_prunes():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier(min_gain=float("inf")).fit(X, y)
    assert clf.get_n_leaves() == 1
    assert clf.get_depth() == 0
    assert list(clf.predict(X)) == ["yes"] * 4
    assert np.allclose(clf.predict_proba(X[:1]), [[0.25, 0.75]])


def test_classifier_prune_after_fit():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier().fit(X, y)
    assert clf.prune(0.5) is clf
    # the {no: 1} / {yes: 1} pair is one bit apart, above the threshold
    assert clf.get_n_leaves() == 3
    clf.prune(float("inf"))
    assert clf.get_n_leaves() == 1


def test_classifier_parallel_matches_sequential():
    X, y = _tiny_dataset()
    seq = GainTreeClassifier().fit(X, y)
    par = GainTreeClassifier(n_jobs=2).fit(X, y)
    assert par.tree_ == seq.tree_


def test_classifier_gini():
    X, y = _tiny_dataset()
    clf = GainTreeClassifier(criterion="gini").fit(X, y)
    assert list(clf.predict(X)) == list(y)


def test_classifier_cancel_event():
    X, y = _tiny_dataset()
    event = threading.Event()
    event.set()
    with pytest.raises(BuildCancelledError):
        GainTreeClassifier().fit(X, y, cancel_event=event)


def test_classifier_params_round_trip():
    clf = GainTreeClassifier(criterion="gini", min_gain=0.1, n_jobs=2)
    params = clf.get_params()
    assert params["criterion"] == "gini"
    assert params["min_gain"] == 0.1
    cloned = clone(clf)
    assert cloned.get_params() == params

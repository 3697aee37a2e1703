import threading

import pytest

from method_object.runtime.exceptions import FrozenRegistry
from method_object.spec.parameter import Parameter
from method_object.spec.registry import ParameterRegistry


def test_declare_appends_in_order():
    registry = ParameterRegistry("D")
    registry.declare(Parameter.declare("a", int))
    registry.declare(Parameter.declare("b", int, default=0))

    assert list(registry.effective()) == ["a", "b"]
    assert len(registry) == 2
    assert "a" in registry
    assert "z" not in registry


def test_redeclaring_replaces_in_place():
    registry = ParameterRegistry("D")
    registry.declare(Parameter.declare("a", int))
    registry.declare(Parameter.declare("b", int))
    registry.declare(Parameter.declare("a", str, default="x"))

    assert list(registry.effective()) == ["a", "b"]
    assert registry.get("a").type is str
    assert registry.get("a").default == "x"


def test_effective_overlays_parent():
    parent = ParameterRegistry("Base")
    parent.declare(Parameter.declare("base_param", str))
    parent.declare(Parameter.declare("shared", int))

    child = ParameterRegistry("Child", parent=parent)
    child.declare(Parameter.declare("child_param", str))
    child.declare(Parameter.declare("shared", str))

    effective = child.effective()
    assert list(effective) == ["base_param", "shared", "child_param"]
    assert effective["shared"].type is str
    # The parent keeps its own view
    assert parent.get("shared").type is int


def test_parent_declarations_are_read_at_read_time():
    parent = ParameterRegistry("Base")
    child = ParameterRegistry("Child", parent=parent)

    parent.declare(Parameter.declare("late", int))

    assert "late" in child


def test_own_excludes_inherited():
    parent = ParameterRegistry("Base")
    parent.declare(Parameter.declare("a", int))
    child = ParameterRegistry("Child", parent=parent)
    child.declare(Parameter.declare("b", int))

    assert list(child.own()) == ["b"]


def test_freeze_is_idempotent_and_one_way():
    registry = ParameterRegistry("D")

    assert not registry.is_frozen
    assert registry.freeze() is True
    assert registry.freeze() is False
    assert registry.is_frozen


def test_declare_after_freeze_fails_loudly():
    registry = ParameterRegistry("D")
    registry.declare(Parameter.declare("a", int))
    registry.freeze()

    with pytest.raises(FrozenRegistry, match="'b' on 'D'"):
        registry.declare(Parameter.declare("b", int))
    with pytest.raises(FrozenRegistry):
        registry.declare(Parameter.declare("a", str))

    assert list(registry.effective()) == ["a"]


def test_freezing_a_child_freezes_its_ancestors():
    parent = ParameterRegistry("Base")
    child = ParameterRegistry("Child", parent=parent)

    child.freeze()

    assert parent.is_frozen
    with pytest.raises(FrozenRegistry):
        parent.declare(Parameter.declare("a", int))


def test_freezing_a_parent_leaves_children_open():
    parent = ParameterRegistry("Base")
    child = ParameterRegistry("Child", parent=parent)

    parent.freeze()
    child.declare(Parameter.declare("a", int))

    assert not child.is_frozen
    assert "a" in child


def test_effective_view_is_read_only():
    registry = ParameterRegistry("D")
    registry.declare(Parameter.declare("a", int))

    with pytest.raises(TypeError):
        registry.effective()["b"] = Parameter.declare("b", int)


def test_concurrent_freeze_has_exactly_one_winner():
    registry = ParameterRegistry("D")
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(registry.freeze())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert registry.is_frozen

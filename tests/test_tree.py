import gc

import pytest

from hap import EventEmitter
from hap.errors import CycleError, InvalidNodeError
from hap.tree import (
    ancestors,
    attach,
    attach_to_parent,
    detach,
    has_valid_parent,
    is_leaf,
    root_of,
    valid_children,
)


class Foreign:
    """Looks nothing like a Node."""


def test_attach_sets_both_links():
    parent, child = EventEmitter("parent"), EventEmitter("child")
    attach(parent, child)
    assert parent.children == [child]
    assert child.parent is parent


def test_attach_to_parent_delegates():
    parent, child = EventEmitter("parent"), EventEmitter("child")
    assert attach_to_parent(child, parent) is child
    assert parent.children == [child]
    assert child.parent is parent


def test_emitter_helpers_are_chainable():
    root, a, b = EventEmitter("root"), EventEmitter("a"), EventEmitter("b")
    assert root.add_child(a).add_child(b) is root
    c = EventEmitter("c").set_parent(a)
    assert root.children == [a, b]
    assert a.children == [c]


def test_attach_twice_to_same_parent_appends_twice():
    parent, child = EventEmitter("parent"), EventEmitter("child")
    attach(parent, child)
    attach(parent, child)
    assert parent.children == [child, child]


def test_reparent_moves_child():
    old, new, child = EventEmitter("old"), EventEmitter("new"), EventEmitter("child")
    old.add_child(child)
    new.add_child(child)
    assert old.children == []
    assert new.children == [child]
    assert child.parent is new


def test_detach_clears_links():
    parent, child = EventEmitter("parent"), EventEmitter("child")
    parent.add_child(child)
    assert detach(child) is parent
    assert parent.children == []
    assert child.parent is None
    assert detach(child) is None


def test_remove_child_only_detaches_own_children():
    parent, other, child = EventEmitter("parent"), EventEmitter("other"), EventEmitter("child")
    parent.add_child(child)
    other.remove_child(child)
    assert child.parent is parent
    parent.remove_child(child)
    assert child.parent is None


def test_cycles_are_rejected():
    root, mid, leaf = EventEmitter("root"), EventEmitter("mid"), EventEmitter("leaf")
    root.add_child(mid)
    mid.add_child(leaf)
    with pytest.raises(CycleError):
        leaf.add_child(root)
    with pytest.raises(CycleError):
        root.add_child(root)
    assert root.parent is None


def test_attach_requires_nodes():
    with pytest.raises(InvalidNodeError):
        attach(EventEmitter(), Foreign())
    with pytest.raises(TypeError):
        attach(Foreign(), EventEmitter())


def test_predicates_skip_foreign_entries():
    node = EventEmitter("node")
    node.children.append(Foreign())
    assert is_leaf(node)
    assert valid_children(node) == []

    foreign = Foreign()
    node.parent = foreign
    assert not has_valid_parent(node)
    assert list(ancestors(node)) == []


@pytest.mark.parametrize("foreign", [{"not": "a node"}, 42, "parent"])
def test_unreferenceable_foreign_parent_is_skipped(foreign):
    node = EventEmitter("node")
    node.parent = foreign
    assert node.parent is foreign
    assert not has_valid_parent(node)
    assert list(ancestors(node)) == []
    assert node.fire("x", {"val": "done"}) == "done"


def test_ancestors_and_root():
    root, mid, leaf = EventEmitter("root"), EventEmitter("mid"), EventEmitter("leaf")
    root.add_child(mid)
    mid.add_child(leaf)
    assert list(ancestors(leaf)) == [mid, root]
    assert root_of(leaf) is root
    assert root_of(root) is root
    assert not leaf.children and leaf.is_leaf and not root.is_leaf


def test_parent_is_a_weak_reference():
    child = EventEmitter("child")
    EventEmitter("parent").add_child(child)
    # Nothing else holds the parent, so the back-reference does not keep it alive
    gc.collect()
    assert child.parent is None

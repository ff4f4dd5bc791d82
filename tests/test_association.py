import gc
import pytest
from tableview.association import AssociationNode


def _build_tree() -> tuple[AssociationNode, AssociationNode, AssociationNode]:
    root = AssociationNode.new_root()
    b = AssociationNode('b', parent=root, depth=0, container=True)
    root.add_child(b)
    x = AssociationNode('x', parent=b, depth=1, container=False, value='hi')
    b.add_child(x)
    return (root, b, x)


def test_root_is_an_undisplayed_container() -> None:
    root = AssociationNode.new_root()
    assert root.is_root
    assert root.is_container
    assert root.depth == -1
    assert root.parent is None
    assert root.handle is None


def test_node_is_either_container_or_scalar() -> None:
    (root, b, x) = _build_tree()
    assert b.is_container and b.kind == 'table'
    assert not x.is_container and x.kind == 'string'
    with pytest.raises(ValueError):
        x.children
    with pytest.raises(ValueError):
        b.value = 5
    with pytest.raises(ValueError):
        AssociationNode('bad', parent=root, depth=0, container=True, value=5)


def test_can_navigate_tree() -> None:
    (root, b, x) = _build_tree()
    assert root.child('b') is b
    assert b.child('x') is x
    assert x.child('anything') is None
    assert list(root.walk()) == [b, x]
    assert list(x.ancestors()) == [b, root]
    assert x.parent is b


def test_parent_reference_is_weak() -> None:
    (root, b, x) = _build_tree()
    del root
    gc.collect()
    assert b.parent is None


def test_cannot_add_two_children_with_same_key() -> None:
    (root, b, x) = _build_tree()
    duplicate = AssociationNode('x', parent=b, depth=1, container=False, value=1)
    with pytest.raises(ValueError):
        b.add_child(duplicate)


def test_destroyed_node_and_descendants_reject_further_use() -> None:
    (root, b, x) = _build_tree()
    root.detach_child('b')
    b.mark_destroyed()
    assert b.is_destroyed
    assert x.is_destroyed
    assert root.child('b') is None
    with pytest.raises(ValueError):
        x.value = 'again'
    with pytest.raises(ValueError):
        b.add_child(AssociationNode('y', parent=b, depth=1, container=False, value=1))

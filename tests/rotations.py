# Tests for the four rebalancing cases and for the two-child removal strategy
import pytest
from avlmap import AVLTree
from avlmap.tree import rotate_left, rotate_right, weight

def build(*keys):
    tree = AVLTree()
    for k in keys:
        tree.insert(k, f"v{k}")
    return tree

def shape(node):
    if node is None:
        return None
    return (node.key, shape(node.left), shape(node.right))

@pytest.mark.parametrize("keys", [
    (30, 20, 10),   # left-left
    (10, 20, 30),   # right-right
    (30, 10, 20),   # left-right
    (10, 30, 20),   # right-left
])
def test_single_and_double_rotations(keys):
    tree = build(*keys)
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))
    assert tree.get_height() == 2
    assert tree.root.num_element == 3
    assert tree.check(raise_assertion_error=True)

def test_rotation_updates_both_heights():
    tree = build(2, 1, 4, 3, 5)
    root = tree.root
    assert weight(root) == -1
    new_root = rotate_left(root)
    assert new_root.key == 4
    assert new_root.left.key == 2
    assert new_root.left.right.key == 3
    assert new_root.left.height == 2
    assert new_root.height == 3
    assert new_root.num_element == 5
    back = rotate_right(new_root)
    assert shape(back) == shape(build(2, 1, 4, 3, 5).root)
    assert back.height == 3

def test_sequential_insertion_shape():
    tree = build(1, 2, 3, 4, 5, 6, 7)
    assert shape(tree.root) == (
        4,
        (2, (1, None, None), (3, None, None)),
        (6, (5, None, None), (7, None, None)),
    )

def test_remove_two_children_promotes_successor():
    tree = build(1, 2, 3, 4, 5, 6, 7)
    tree.remove(4)
    assert tree.root.key == 5
    assert tree.root.value == "v5"
    assert shape(tree.root.right) == (6, None, (7, None, None))
    assert tree.search(4) is None
    assert tree.search(5) == "v5"
    assert tree.check(raise_assertion_error=True)

def test_remove_triggers_single_rotation():
    # After removing 10 the root is right heavy and its right child is even
    tree = build(20, 10, 30, 25, 35)
    tree.remove(10)
    assert shape(tree.root) == (30, (20, None, (25, None, None)), (35, None, None))
    assert tree.check(raise_assertion_error=True)

def test_remove_triggers_double_rotation():
    tree = build(20, 10, 30, 25)
    tree.remove(10)
    assert shape(tree.root) == (25, (20, None, None), (30, None, None))
    assert tree.check(raise_assertion_error=True)

def test_remove_leaf_and_single_child():
    tree = build(2, 1, 3, 4)
    tree.remove(3)
    assert shape(tree.root) == (2, (1, None, None), (4, None, None))
    tree.remove(1)
    assert shape(tree.root) == (2, None, (4, None, None))
    tree.remove(2)
    assert shape(tree.root) == (4, None, None)
    tree.remove(4)
    assert tree.root is None

def test_check_detects_corruption():
    tree = build(1, 2, 3)
    assert tree.check()
    tree.root.height = 5
    assert not tree.check()
    with pytest.raises(AssertionError):
        tree.check(raise_assertion_error=True)
    # The balance check works from the shape alone
    assert tree.is_balanced()

def test_is_balanced_detects_unbalanced_shape():
    tree = build(1)
    # Hand-built chain that never went through insert
    tree.root.right = AVLTree.Node(2, None)
    tree.root.right.right = AVLTree.Node(3, None)
    assert not tree.is_balanced()
    assert not tree.check()

def test_check_detects_misordered_keys():
    tree = build(2, 1, 3)
    tree.root.left.key = 5
    assert tree.is_balanced()
    assert not tree.check()

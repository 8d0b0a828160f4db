from __future__ import annotations
import warnings
from typing import Any, Callable, Generic, Iterator, TypeVar
from .errors import DuplicateKeyError, EmptyTreeError
from . import traversal, display

K = TypeVar('K')
V = TypeVar('V')

def height(x: AVLTree.Node | None):
    return x.height if x is not None else 0

def num_element(x: AVLTree.Node | None):
    return x.num_element if x is not None else 0

def update_height(x: AVLTree.Node):
    x.height = 1 + max(height(x.left), height(x.right))
    x.num_element = 1 + num_element(x.left) + num_element(x.right)

def weight(x: AVLTree.Node | None):
    return height(x.left) - height(x.right) if x is not None else 0

def rotate_right(node: AVLTree.Node):
    y = node.left
    node.left = y.right
    y.right = node
    update_height(node)
    update_height(y)
    return y

def rotate_left(node: AVLTree.Node):
    y = node.right
    node.right = y.left
    y.left = node
    update_height(node)
    update_height(y)
    return y

def fix_left_right(node: AVLTree.Node):
    node.left = rotate_left(node.left)
    return rotate_right(node)

def fix_right_left(node: AVLTree.Node):
    node.right = rotate_right(node.right)
    return rotate_left(node)

def rebalance(node: AVLTree.Node):
    """Recomputes the cached height of node and applies at most one single or double rotation at it.
    Returns the new root of the subtree."""
    update_height(node)
    w = weight(node)
    if w > 1:
        if weight(node.left) < 0:
            return fix_left_right(node)
        return rotate_right(node)
    if w < -1:
        if weight(node.right) > 0:
            return fix_right_left(node)
        return rotate_left(node)
    return node

def insert(node: AVLTree.Node | None, key, value):
    # Nothing is written on the way down, so a duplicate leaves the tree untouched
    if node is None:
        return AVLTree.Node(key, value)

    if key < node.key:
        node.left = insert(node.left, key, value)
    elif key > node.key:
        node.right = insert(node.right, key, value)
    else:
        raise DuplicateKeyError(key)

    return rebalance(node)

def delete(node: AVLTree.Node | None, key):
    if node is None:
        return node

    if key < node.key:
        node.left = delete(node.left, key)
    elif key > node.key:
        node.right = delete(node.right, key)
    elif node.left is None:
        return node.right
    elif node.right is None:
        return node.left
    else:
        successor = node.right.min_node()
        node.key = successor.key
        node.value = successor.value
        node.right = delete(node.right, successor.key)

    return rebalance(node)

def find(node: AVLTree.Node | None, key):
    while node is not None:
        if key < node.key:
            node = node.left
        elif key > node.key:
            node = node.right
        else:
            return node
    return None

def measured_height(node: AVLTree.Node | None) -> int:
    """Height of the subtree computed from its shape, or -1 if some node in it is out of balance.
    Does not read the cached heights."""
    if node is None:
        return 0
    left = measured_height(node.left)
    if left < 0:
        return -1
    right = measured_height(node.right)
    if right < 0 or abs(left - right) > 1:
        return -1
    return 1 + max(left, right)

def audit(node: AVLTree.Node | None, lower=None, upper=None) -> tuple[int, int]:
    """Asserts every invariant on the subtree. lower and upper are exclusive key bounds inherited from the ancestors.
    Returns the measured (height, number of elements)"""
    if node is None:
        return 0, 0
    assert lower is None or lower < node.key, f"Key {node.key} is not greater than ancestor key {lower}"
    assert upper is None or node.key < upper, f"Key {node.key} is not less than ancestor key {upper}"
    left_height, left_size = audit(node.left, lower, node.key)
    right_height, right_size = audit(node.right, node.key, upper)
    assert abs(left_height - right_height) <= 1, f"Node {node.key} is out of balance: {left_height} vs {right_height}"
    assert node.height == 1 + max(left_height, right_height), f"Node {node.key} caches height {node.height}"
    assert node.num_element == 1 + left_size + right_size, f"Node {node.key} caches size {node.num_element}"
    return node.height, node.num_element

class AVLTree(Generic[K, V]):
    """An ordered map from keys to values. Keys must be totally ordered with < and >, values are never compared.
    The tree stays height balanced after every insertion and removal."""
    class Node:
        def __init__(self, key, value):
            self.key = key
            self.value = value
            self.left: AVLTree.Node | None = None
            self.right: AVLTree.Node | None = None
            self.height = 1
            self.num_element = 1

        def min_node(self):
            x = self
            while x.left is not None:
                x = x.left
            return x

        def max_node(self):
            x = self
            while x.right is not None:
                x = x.right
            return x

        def flatten(self) -> list:
            elements = []
            if self.left is not None:
                elements += self.left.flatten()
            elements.append(self.key)
            if self.right is not None:
                elements += self.right.flatten()
            return elements

        def __repr__(self):
            return f"Node({self.key!r}, {self.value!r}, height={self.height})"

    def __init__(self):
        self.root: AVLTree.Node | None = None

    ### Mutation ###
    def insert(self, key: K, value: V):
        """Inserts key with its value. Raises DuplicateKeyError if the key is already present, in which case the tree is unchanged.
        DuplicateKeyError is also a KeyError, so an except KeyError around insert catches it too."""
        self.root = insert(self.root, key, value)

    def remove(self, key: K):
        """Removes key and its value. Removing a key that is not present does nothing."""
        self.root = delete(self.root, key)

    ### Lookup ###
    def search(self, key: K) -> V | None:
        """Returns the value stored under key, or None if the key is absent"""
        node = find(self.root, key)
        if node is None:
            return None
        return node.value

    def get_min(self) -> K:
        if self.root is None:
            raise EmptyTreeError("Cannot get the minimum of an empty tree")
        return self.root.min_node().key

    def get_max(self) -> K:
        if self.root is None:
            raise EmptyTreeError("Cannot get the maximum of an empty tree")
        return self.root.max_node().key

    def predecessor(self, key: K) -> K | None:
        """Returns the largest key strictly less than key, or None if there is none. key itself need not be in the tree."""
        best = None
        node = self.root
        while node is not None:
            if node.key < key:
                best = node.key
                node = node.right
            else:
                node = node.left
        return best

    def successor(self, key: K) -> K | None:
        """Returns the smallest key strictly greater than key, or None if there is none."""
        best = None
        node = self.root
        while node is not None:
            if node.key > key:
                best = node.key
                node = node.left
            else:
                node = node.right
        return best

    def key_at(self, idx: int) -> K:
        """Returns the idx-th smallest key (0-based)"""
        def getitem(node: AVLTree.Node | None, idx: int):
            if node is None:
                raise IndexError(idx)
            left_elem = num_element(node.left)
            if idx < left_elem:
                return getitem(node.left, idx)
            if idx == left_elem:
                return node.key
            return getitem(node.right, idx - left_elem - 1)
        if idx < 0 or idx >= len(self):
            raise IndexError(f"Index {idx} out of range for tree of size {len(self)}")
        return getitem(self.root, idx)

    ### Shape ###
    def count_nodes(self) -> int:
        """Counts the nodes by walking the whole tree. len(tree) gives the same number from the cached sizes."""
        def count(node: AVLTree.Node | None) -> int:
            if node is None:
                return 0
            return 1 + count(node.left) + count(node.right)
        return count(self.root)

    def get_height(self) -> int:
        return height(self.root)

    @property
    def height(self):
        return height(self.root)

    def is_balanced(self) -> bool:
        """Checks the balance condition at every node from the actual shape of the tree, ignoring the cached heights"""
        return measured_height(self.root) >= 0

    def check(self, raise_assertion_error: bool = False) -> bool:
        """Audits ordering, key uniqueness, cached heights, cached sizes and balance at every node.

        If any of the checks fail, returns False, or reraises the AssertionError if raise_assertion_error is set."""
        try:
            audit(self.root)
            return True
        except AssertionError as e:
            if raise_assertion_error:
                raise e
            return False

    def empty(self):
        return self.root is None

    ### Traversal and queries ###
    def flatten(self) -> list[K]:
        if self.root is None:
            return []
        return self.root.flatten()

    def items(self) -> Iterator[tuple[K, V]]:
        for node in traversal.in_order_nodes(self.root):
            yield node.key, node.value

    def reverse_in_order_traversal(self, visit: Callable[[K], Any]):
        """Calls visit once for every key, largest key first"""
        traversal.reverse_in_order(self.root, visit)

    def get_keys_in_range(self, lo: K, hi: K) -> list[K]:
        """Returns all keys k with lo <= k <= hi in ascending order. Subtrees entirely outside the range are not visited."""
        if hi < lo:
            warnings.warn(f"Range lower bound {lo} is greater than upper bound {hi}. Returning no keys.")
            return []
        result: list[K] = []
        traversal.collect_range(self.root, lo, hi, result)
        return result

    def copy(self) -> AVLTree[K, V]:
        """Returns a deep copy. The copy shares no nodes with this tree, so mutating either one never affects the other."""
        new_tree: AVLTree[K, V] = AVLTree()
        new_tree.root = traversal.copy_nodes(self.root)
        return new_tree

    def is_subtree(self, other: AVLTree) -> bool:
        """Returns True if the shape and keys of other occur rooted at some node of this tree. Values are not compared.
        Every node is tried as a candidate, not only the one other's root key would be found at."""
        return traversal.contains_subtree(self.root, other.root)

    def is_same_shape(self, other: AVLTree) -> bool:
        """Returns True if both trees have the same keys at the same positions. Values are not compared."""
        return traversal.nodes_match(self.root, other.root)

    def render(self) -> str:
        return display.render(self)

    ### Container protocol ###
    def __len__(self):
        return num_element(self.root)

    def __contains__(self, x: K):
        return find(self.root, x) is not None

    def __getitem__(self, key: K) -> V:
        node = find(self.root, key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __iter__(self) -> Iterator[K]:
        for node in traversal.in_order_nodes(self.root):
            yield node.key

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"AVLTree(size={len(self)}, height={self.height})"

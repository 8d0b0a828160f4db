# Walks over the node structure of an AVLTree. Everything here works on bare nodes and never rebalances.
# Copy and structural matching use an explicit stack so their depth does not depend on the call stack.
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Callable, Iterator

if TYPE_CHECKING:
    from .tree import AVLTree

def in_order_nodes(node: AVLTree.Node | None) -> Iterator[AVLTree.Node]:
    stack: list[AVLTree.Node] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right

def reverse_in_order(node: AVLTree.Node | None, visit: Callable[[Any], Any]):
    if node is None:
        return
    reverse_in_order(node.right, visit)
    visit(node.key)
    reverse_in_order(node.left, visit)

def collect_range(node: AVLTree.Node | None, lo, hi, result: list):
    if node is None:
        return
    # Only go left if something smaller than node.key can still be in range, and likewise on the right
    if lo < node.key:
        collect_range(node.left, lo, hi, result)
    if not node.key < lo and not hi < node.key:
        result.append(node.key)
    if node.key < hi:
        collect_range(node.right, lo, hi, result)

def copy_nodes(node: AVLTree.Node | None) -> AVLTree.Node | None:
    """Deep copies the subtree rooted at node, including cached heights and sizes"""
    if node is None:
        return None

    def clone(x: AVLTree.Node) -> AVLTree.Node:
        y = type(x)(x.key, x.value)
        y.height = x.height
        y.num_element = x.num_element
        return y

    new_root = clone(node)
    stack = [(node, new_root)]
    while stack:
        src, dst = stack.pop()
        if src.left is not None:
            dst.left = clone(src.left)
            stack.append((src.left, dst.left))
        if src.right is not None:
            dst.right = clone(src.right)
            stack.append((src.right, dst.right))
    return new_root

def same_key(a, b) -> bool:
    # Keys only need to be ordered, so equality is "neither is smaller", as in the search
    return not a < b and not b < a

def nodes_match(a: AVLTree.Node | None, b: AVLTree.Node | None) -> bool:
    """Returns True if the two subtrees hold equal keys in the same shape. Values are ignored."""
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if x is None and y is None:
            continue
        if x is None or y is None:
            return False
        if not same_key(x.key, y.key):
            return False
        stack.append((x.right, y.right))
        stack.append((x.left, y.left))
    return True

def contains_subtree(node: AVLTree.Node | None, pattern: AVLTree.Node | None) -> bool:
    """Returns True if pattern matches the subtree rooted at any node under node (inclusive).
    The empty pattern is contained in every tree."""
    if pattern is None:
        return True
    stack = [node] if node is not None else []
    while stack:
        x = stack.pop()
        if same_key(x.key, pattern.key) and nodes_match(x, pattern):
            return True
        if x.right is not None:
            stack.append(x.right)
        if x.left is not None:
            stack.append(x.left)
    return False

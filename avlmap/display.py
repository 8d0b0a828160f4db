# The module responsible for displaying trees as text
from __future__ import annotations
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from .tree import AVLTree

RIGHT_MARKER = "R----"
LEFT_MARKER = "L----"

# Indent added below a right child and below a left child respectively.
# The bar keeps the left branch visually connected to its right sibling further down.
BLANK_INDENT = "     "
BRANCH_INDENT = "|    "

def render_lines(node: AVLTree.Node | None, indent: str = "", last: bool = True) -> Iterator[str]:
    """Yields one line per node, parent before its left then right children. The root counts as a right child."""
    if node is None:
        return
    yield indent + (RIGHT_MARKER if last else LEFT_MARKER) + str(node.key)
    indent += BLANK_INDENT if last else BRANCH_INDENT
    yield from render_lines(node.left, indent, False)
    yield from render_lines(node.right, indent, True)

def render(tree: AVLTree) -> str:
    """Renders the tree, one newline-terminated line per node. An empty tree renders as the empty string."""
    return "".join(line + "\n" for line in render_lines(tree.root))

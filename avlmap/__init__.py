from .tree import AVLTree
from .errors import AVLTreeError, DuplicateKeyError, EmptyTreeError
from .display import render

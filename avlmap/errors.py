class AVLTreeError(Exception):
    """Base class for usage errors reported by the tree"""
    pass

class DuplicateKeyError(AVLTreeError, KeyError):
    """Reports an insertion of a key that is already in the tree"""
    def __init__(self, key):
        self.key = key
        super().__init__(f"Key {key!r} already exists in the tree")

    def __str__(self):
        # KeyError.__str__ would repr the message
        return str(self.args[0])

class EmptyTreeError(AVLTreeError, ValueError):
    """Reports a query that needs at least one node on an empty tree"""
    pass

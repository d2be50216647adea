"""Traversal and lookup helpers for nested category trees.

The helpers work on anything shaped like a ``TreeNode``: an object with
``id``, ``parent_id`` and an ordered ``children`` list. Presentation fields
(title, icon, badges) are never read here.
"""

from typing import Dict, Iterator, List, Optional, Protocol, Sequence, TypeVar


class TreeNode(Protocol):
    """Minimal structure the tree engine relies on."""

    id: str
    parent_id: Optional[str]
    children: Sequence["TreeNode"]


T = TypeVar("T")
N = TypeVar("N", bound=TreeNode)


def iter_nodes(nodes: Sequence[N]) -> Iterator[N]:
    """Yield every node of a forest in pre-order (parent before children)."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_by_id(nodes: Sequence[N], node_id: str) -> Optional[N]:
    """Find a node anywhere in the forest by ID.

    Args:
        nodes: Root nodes of the forest.
        node_id: ID to look for.

    Returns:
        The first matching node in pre-order, or None.
    """
    for node in nodes:
        if node.id == node_id:
            return node
        if node.children:
            found = find_by_id(node.children, node_id)
            if found is not None:
                return found
    return None


def get_siblings(nodes: Sequence[N], parent_id: Optional[str]) -> List[N]:
    """Collect every node in the forest whose parent_id equals parent_id.

    The whole forest is searched, not only the children of the parent node,
    so the result follows pre-order traversal order.
    """
    return [node for node in iter_nodes(nodes) if node.parent_id == parent_id]


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Return a copy of items with one element moved from old_index to new_index.

    Every other element keeps its relative order.
    """
    result = list(items)
    result.insert(new_index, result.pop(old_index))
    return result


class TreeIndex:
    """Flat lookup tables built once from a tree snapshot.

    ``find`` is a dictionary lookup and ``siblings`` returns a prebuilt
    group, instead of walking the whole tree for every query. Results match
    ``find_by_id`` and ``get_siblings`` on the same snapshot.

    Args:
        roots: Root nodes of the forest.
    """

    def __init__(self, roots: Sequence[N]):
        self._nodes: Dict[str, N] = {}
        self._groups: Dict[Optional[str], List[N]] = {}

        for node in iter_nodes(roots):
            self._nodes.setdefault(node.id, node)
            self._groups.setdefault(node.parent_id, []).append(node)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def find(self, node_id: str) -> Optional[N]:
        return self._nodes.get(node_id)

    def siblings(self, parent_id: Optional[str]) -> List[N]:
        return list(self._groups.get(parent_id, []))

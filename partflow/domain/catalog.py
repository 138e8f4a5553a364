"""Categories, locations and tags: constructors plus category tree walks.

Category rows are an unchecked parent-pointer graph, so every walk here keeps
a visited set and stops at the first node it has already seen.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from partflow.domain.entities import Category, CategoryNode, Location, Tag
from partflow.domain.exceptions import DomainValidationError
from partflow.domain.inventory import new_id
from partflow.utils.timestamps import utc_now_iso


def create_category(data: Mapping[str, Any]) -> Category:
    name = data.get("name")
    if not name or not str(name).strip():
        raise DomainValidationError("name", "Category name is required")

    now = utc_now_iso()
    return Category(
        id=data.get("id") or new_id(),
        name=name,
        parent_id=data.get("parent_id"),
        icon=data.get("icon"),
        description=data.get("description"),
        created_at=now,
        updated_at=now,
    )


def normalize_location_code(code: str) -> str:
    return code.strip().upper()


def create_location(data: Mapping[str, Any]) -> Location:
    code = data.get("code")
    if not code or not str(code).strip():
        raise DomainValidationError("code", "Location code is required")

    now = utc_now_iso()
    return Location(
        id=data.get("id") or new_id(),
        code=normalize_location_code(code),
        name=data.get("name"),
        description=data.get("description"),
        created_at=now,
        updated_at=now,
    )


def create_tag(data: Mapping[str, Any]) -> Tag:
    name = data.get("name")
    if not name or not str(name).strip():
        raise DomainValidationError("name", "Tag name is required")

    return Tag(
        id=data.get("id") or new_id(),
        name=name,
        color=data.get("color"),
        created_at=utc_now_iso(),
    )


def build_category_path(categories: Iterable[Category], category_id: str) -> List[str]:
    """Names from the root down to ``category_id``.

    Empty when the id is unknown. A cycle ends the walk at the last node
    not yet visited.
    """
    by_id: Dict[str, Category] = {c.id: c for c in categories}
    names: List[str] = []
    visited = set()

    current: Optional[Category] = by_id.get(category_id)
    while current is not None and current.id not in visited:
        visited.add(current.id)
        names.append(current.name)
        if not current.parent_id:
            break
        current = by_id.get(current.parent_id)

    names.reverse()
    return names


def would_create_cycle(
    categories: Iterable[Category],
    category_id: str,
    new_parent_id: Optional[str],
) -> bool:
    """True when making ``new_parent_id`` the parent of ``category_id`` closes a loop."""
    if not new_parent_id:
        return False
    if new_parent_id == category_id:
        return True

    by_id = {c.id: c for c in categories}
    visited = set()
    current = by_id.get(new_parent_id)
    while current is not None and current.id not in visited:
        if current.id == category_id:
            return True
        visited.add(current.id)
        current = by_id.get(current.parent_id) if current.parent_id else None
    return False


def _by_name(category: Category):
    return (category.name, category.id)


def build_category_tree(categories: Iterable[Category]) -> List[CategoryNode]:
    """Nest categories under their parents, siblings ordered by name.

    Nodes whose parent is missing become roots. Members of a cycle that no
    root reaches are attached starting from the first of them by name, so
    every category appears exactly once.
    """
    categories = list(categories)
    by_id = {c.id: c for c in categories}
    children: Dict[str, List[Category]] = defaultdict(list)
    roots: List[Category] = []

    for category in categories:
        parent_id = category.parent_id
        if parent_id and parent_id in by_id and parent_id != category.id:
            children[parent_id].append(category)
        else:
            roots.append(category)

    visited = set()

    def _attach(top: Category) -> CategoryNode:
        root = CategoryNode.model_validate(top.model_dump())
        visited.add(root.id)
        stack = [root]
        while stack:
            node = stack.pop()
            for child in sorted(children.get(node.id, ()), key=_by_name):
                if child.id in visited:
                    continue
                visited.add(child.id)
                child_node = CategoryNode.model_validate(child.model_dump())
                node.children.append(child_node)
                stack.append(child_node)
        return root

    tree = [_attach(c) for c in sorted(roots, key=_by_name)]
    for category in sorted(categories, key=_by_name):
        if category.id not in visited:
            tree.append(_attach(category))
    return tree

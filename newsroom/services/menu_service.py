# newsroom/services/menu_service.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from newsroom.schemas.delivery import MenuNode
from newsroom.services.context import ResolveContext
from newsroom.services.sanitizer import decode_entities
from newsroom.stores.contracts import MenuItemRecord


def structure_menu(ctx: ResolveContext, items: Sequence[MenuItemRecord]) -> List[dict]:
    """Lista plana de items (con parent_id) -> árbol de MenuNode, en el orden del menú."""
    if not items:
        return []
    children: Dict[int, List[MenuItemRecord]] = {}
    for item in items:
        children.setdefault(item.parent_id, []).append(item)

    def build(item: MenuItemRecord, seen: frozenset) -> MenuNode:
        kids = [build(c, seen | {c.id}) for c in children.get(item.id, []) if c.id not in seen]
        slug = ctx.stores.taxonomy.object_slug(item) if ctx.stores.taxonomy is not None else ""
        return MenuNode(
            id=item.object_id,
            menu_item_id=item.id,
            title=decode_entities(item.title),
            url=item.url,
            post_type=item.object_type,
            slug=slug,
            children=kids,
        )

    return [build(root, frozenset({root.id})).model_dump() for root in children.get(0, [])]


def menu_for_locations(ctx: ResolveContext, *locations: str) -> List[dict]:
    """Primer location asignado de la lista; [] si ninguno tiene menú."""
    taxonomy = ctx.stores.taxonomy
    if taxonomy is None:
        return []
    assigned = taxonomy.menu_locations()
    menu_id: Optional[int] = next((assigned[loc] for loc in locations if assigned.get(loc)), None)
    if menu_id is None:
        return []
    return structure_menu(ctx, taxonomy.menu_items(menu_id))

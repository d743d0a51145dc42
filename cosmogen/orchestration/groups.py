"""
Group orchestrator: clusters root systems into an optional nested hierarchy.

Every root system lands in exactly one group. The nesting pass then visits
groups in order and, with probability nesting_probability, parents each one
under a random unparented group, retrying other candidates whenever the
choice would close a cycle.
"""

from __future__ import annotations
from typing import Dict, List, Sequence

from ..config import GroupingParams
from ..core.bodies import Group, GroupChild, Vector3
from ..core.distributions import RandomGenerator
from ..core.materializer import _letters
from ..phenomena.base import PhenomenonGenerator


GROUP_PALETTE = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#FFA07A",
    "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E2",
]


def would_create_cycle(child: Group, parent: Group, groups: Dict[str, Group]) -> bool:
    """True if making parent the parent of child closes an ancestor loop."""
    seen = set()
    current = parent
    while current is not None:
        if current.id == child.id:
            return True
        if current.id in seen:
            return True
        seen.add(current.id)
        current = groups.get(current.parent_group_id) if current.parent_group_id else None
    return False


class GroupGenerator(PhenomenonGenerator):
    """
    Example:
        groups = GroupGenerator(config.grouping, master.fork("groups")).generate(root_ids)
    """

    label = "groups"

    def __init__(self, params: GroupingParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def generate(self, root_ids: Sequence[str]) -> List[Group]:
        if not self.enabled or not root_ids:
            return []

        p = self.params
        n = len(root_ids)
        low, high = sorted(p.num_groups)
        # At least one group, at most one per system
        low = max(1, min(low, n))
        num_groups = self.rng.randint(low, max(low, min(high, n)))

        groups = [
            Group(
                id=self.new_id(),
                name=f"Cluster {_letters(i + 1)}",
                color=self.rng.choice(GROUP_PALETTE),
                position=Vector3(
                    self.rng.normal(0.0, p.position_sigma),
                    self.rng.normal(0.0, p.position_sigma),
                    self.rng.normal(0.0, p.position_sigma),
                ),
            )
            for i in range(num_groups)
        ]

        for root_id in root_ids:
            self.rng.choice(groups).children.append(GroupChild(id=root_id, type="system"))

        self._nest(groups)
        return groups

    def _nest(self, groups: List[Group]) -> None:
        if len(groups) < 2:
            return
        by_id = {g.id: g for g in groups}
        for group in groups:
            if not self.rng.bool(self.params.nesting_probability):
                continue
            candidates = [g for g in groups if g is not group and g.parent_group_id is None]
            while candidates:
                parent = self.rng.choice(candidates)
                if would_create_cycle(group, parent, by_id):
                    candidates.remove(parent)
                    continue
                group.parent_group_id = parent.id
                parent.children.append(GroupChild(id=group.id, type="group"))
                break


def root_group_ids(groups: Sequence[Group]) -> List[str]:
    return [g.id for g in groups if g.parent_group_id is None]

"""
Topology grammar engine.

A system's shape is a small typed tree grown from a stochastic grammar:

    system → stars, planets
    stars  → star{1-3}
    planets→ planet*          (geometric repeat)
    planet → moons
    moons  → moon*

Symbols come in two kinds:
- Node symbols (system, star, planet, moon, submoon) create one tree node
  and may carry further productions of their own.
- Container symbols (stars, planets, moons, submoons) fan out into N node
  symbols, where N is a sampled repeat count clamped to [min_count, max_count].

Key properties:
- Termination: every expansion step increases the expansion level by one and
  nothing is expanded at or beyond the depth ceiling, so any grammar halts.
- Planets always attach to the system node; the orbit host (the heaviest
  star) is only known after masses are sampled by the materializer.
- Rule selection skips the weighted draw when a symbol has a single rule.
- Expansion runs from an explicit depth-first worklist, so tree height is
  bounded by the depth ceiling rather than the interpreter's stack.
"""

from __future__ import annotations
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence

from .distributions import RandomGenerator

if TYPE_CHECKING:
    from ..config import GeneratorConfig


# Bounds a single fan-out when a rule gives no explicit max_count
MAX_REPEAT_COUNT = 64


class GrammarError(Exception):
    """Raised for structurally invalid grammars or unknown presets."""
    pass


class NodeType(Enum):
    """Types of topology nodes."""
    SYSTEM = "system"
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    SUBMOON = "submoon"


class RepeatType(Enum):
    """How many times a container symbol repeats."""
    GEOMETRIC = "geometric"
    FIXED = "fixed"
    UNIFORM = "uniform"
    POISSON = "poisson"


NODE_SYMBOLS: Dict[str, NodeType] = {t.value: t for t in NodeType}

# Container symbol -> node symbol it fans out into
CONTAINER_SYMBOLS: Dict[str, str] = {
    "stars": "star",
    "planets": "planet",
    "moons": "moon",
    "submoons": "submoon",
}

KNOWN_SYMBOLS = set(NODE_SYMBOLS) | set(CONTAINER_SYMBOLS)


@dataclass(eq=False)
class TopologyNode:
    """
    One node of the ephemeral topology tree.

    Equality compares whole subtrees by their pre-order outline; repr
    leaves out parent and children.
    """
    type: NodeType
    id: str
    parent: Optional["TopologyNode"] = field(default=None, repr=False)
    children: List["TopologyNode"] = field(default_factory=list, repr=False)
    depth: int = 0

    def walk(self) -> Iterator["TopologyNode"]:
        """Pre-order traversal including self."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def outline(self) -> List[tuple]:
        """(type, id, depth, child count) per node, pre-order."""
        return [(n.type, n.id, n.depth, len(n.children)) for n in self.walk()]

    def __eq__(self, other):
        if not isinstance(other, TopologyNode):
            return NotImplemented
        return self.outline() == other.outline()

    def children_of_type(self, node_type: NodeType) -> List["TopologyNode"]:
        return [c for c in self.children if c.type == node_type]

    def count(self, node_type: NodeType) -> int:
        return sum(1 for n in self.walk() if n.type == node_type)

    @property
    def height(self) -> int:
        """Maximum depth of any node in this subtree."""
        return max(n.depth for n in self.walk())

    def system_ancestor(self) -> "TopologyNode":
        """Nearest SYSTEM node on the parent chain (self included)."""
        node = self
        while node.type != NodeType.SYSTEM and node.parent is not None:
            node = node.parent
        return node


@dataclass
class RepeatDistribution:
    """
    Repeat-count distribution of a container rule.

    Example:
        RepeatDistribution.geometric(0.4)
        RepeatDistribution.uniform(1, 4)
    """
    type: RepeatType = RepeatType.GEOMETRIC
    p: Optional[float] = None       # geometric; None = config default
    count: int = 0                  # fixed
    min: int = 0                    # uniform
    max: int = 5                    # uniform
    lam: float = 3.0                # poisson

    @classmethod
    def geometric(cls, p: Optional[float] = None) -> "RepeatDistribution":
        return cls(type=RepeatType.GEOMETRIC, p=p)

    @classmethod
    def fixed(cls, count: int) -> "RepeatDistribution":
        return cls(type=RepeatType.FIXED, count=count)

    @classmethod
    def uniform(cls, low: int, high: int) -> "RepeatDistribution":
        return cls(type=RepeatType.UNIFORM, min=low, max=high)

    @classmethod
    def poisson(cls, lam: float) -> "RepeatDistribution":
        return cls(type=RepeatType.POISSON, lam=lam)

    def sample(self, rng: RandomGenerator, default_p: float) -> int:
        if self.type == RepeatType.FIXED:
            return max(0, int(self.count))
        if self.type == RepeatType.UNIFORM:
            return rng.randint(self.min, self.max)
        if self.type == RepeatType.POISSON:
            return rng.poisson(self.lam)
        return rng.geometric(default_p if self.p is None else self.p)


@dataclass
class ProductionRule:
    """
    One weighted alternative for a symbol.

    An empty expand list is the terminal "no offspring" outcome.
    """
    weight: float
    expand: List[str] = field(default_factory=list)
    repeat: Optional[RepeatDistribution] = None
    min_count: Optional[int] = None
    max_count: Optional[int] = None

    def clamp_count(self, count: int) -> int:
        if self.max_count is not None:
            count = min(count, self.max_count)
        else:
            count = min(count, MAX_REPEAT_COUNT)
        if self.min_count is not None:
            count = max(count, self.min_count)
        return max(0, count)


@dataclass
class GrammarDefinition:
    """
    Axiom plus weighted productions.

    Attributes:
        axiom: Symbols applied to the root system node
        productions: Symbol -> weighted alternatives
        max_depth: Grammar's own depth ceiling (combined with the config's)
        star_count: Optional (single, binary, ternary) weights for 'stars'
        allow_sub_moons: Whether 'submoons' produces anything
    """
    axiom: List[str]
    productions: Dict[str, List[ProductionRule]]
    max_depth: int = 4
    star_count: Optional[Sequence[float]] = None
    allow_sub_moons: bool = False
    default_planet_geometric_p: Optional[float] = None
    default_moon_geometric_p: Optional[float] = None

    def __post_init__(self):
        problems = self.validate()
        if problems:
            raise GrammarError("; ".join(problems))

    def validate(self) -> List[str]:
        """Return structural problems (empty list if the grammar is usable)."""
        problems = []
        for symbol in self.axiom:
            if symbol not in KNOWN_SYMBOLS:
                problems.append(f"axiom references undefined symbol '{symbol}'")
        for symbol, rules in self.productions.items():
            if symbol not in KNOWN_SYMBOLS:
                problems.append(f"production for undefined symbol '{symbol}'")
            for i, rule in enumerate(rules):
                if not rule.weight > 0:
                    problems.append(f"{symbol}[{i}]: weight must be > 0")
                if (rule.min_count is not None and rule.max_count is not None
                        and rule.min_count > rule.max_count):
                    problems.append(f"{symbol}[{i}]: min_count > max_count")
                for target in rule.expand:
                    if target == "system":
                        problems.append(f"{symbol}[{i}]: 'system' is only valid in the axiom")
                    elif target not in KNOWN_SYMBOLS:
                        problems.append(f"{symbol}[{i}] references undefined symbol '{target}'")
                    elif symbol in CONTAINER_SYMBOLS and target in CONTAINER_SYMBOLS:
                        # Containers fan out at the same level; nesting them never terminates
                        problems.append(f"{symbol}[{i}]: container may only expand to node symbols")
        if self.star_count is not None and len(self.star_count) != 3:
            problems.append("star_count needs exactly three weights")
        return problems


@dataclass
class ExpansionStats:
    """Bookkeeping of one expansion (statistics only, never control flow)."""
    nodes_created: int = 0
    empty_expansions: int = 0
    missing_rules: int = 0
    depth_truncations: int = 0


class _Step(NamedTuple):
    """One pending unit of expansion work."""
    action: str             # "expand" a node's production or "apply" a symbol
    node: TopologyNode
    symbol: str
    level: int


def _default_id() -> str:
    return str(uuid.uuid4())


class TopologyGenerator(ABC):
    """Strategy interface: grow one system tree."""

    preset_id: str = ""

    def __init__(self, new_id: Optional[Callable[[], str]] = None):
        self.new_id = new_id or _default_id
        self.stats = ExpansionStats()

    @abstractmethod
    def generate(self, rng: RandomGenerator, config: "GeneratorConfig") -> TopologyNode:
        """Build a tree rooted at a SYSTEM node."""
        pass

    def _new_root(self) -> TopologyNode:
        self.stats = ExpansionStats()
        self.stats.nodes_created = 1
        return TopologyNode(type=NodeType.SYSTEM, id=self.new_id(), depth=0)

    def _attach(self, parent: TopologyNode, node_type: NodeType) -> TopologyNode:
        node = TopologyNode(
            type=node_type,
            id=self.new_id(),
            parent=parent,
            depth=parent.depth + 1,
        )
        parent.children.append(node)
        self.stats.nodes_created += 1
        return node


class GrammarTopologyGenerator(TopologyGenerator):
    """
    General grammar interpreter.

    Example:
        gen = GrammarTopologyGenerator(grammar, preset_id="moonRich")
        root = gen.generate(rng.fork("lsystem"), config)
    """

    def __init__(
        self,
        grammar: GrammarDefinition,
        preset_id: str = "custom",
        new_id: Optional[Callable[[], str]] = None,
    ):
        super().__init__(new_id)
        self.grammar = grammar
        self.preset_id = preset_id

    def generate(self, rng: RandomGenerator, config: "GeneratorConfig") -> TopologyNode:
        self._rng = rng
        self._config = config
        self._ceiling = min(self.grammar.max_depth, config.max_depth)

        root = self._new_root()
        if self._ceiling <= 0:
            if self.grammar.axiom:
                self.stats.depth_truncations += 1
            return root

        pending = [
            _Step("expand" if symbol == "system" else "apply", root, symbol, 0)
            for symbol in reversed(self.grammar.axiom)
        ]
        while pending:
            step = pending.pop()
            if step.action == "expand":
                follow = self._expand(step.node, step.symbol, step.level)
            elif step.symbol in CONTAINER_SYMBOLS:
                follow = self._fan_out(step.node, step.symbol, step.level)
            else:
                follow = self._spawn(step.node, step.symbol, step.level)
            # Reversed so the first follow-up is handled next (depth-first)
            pending.extend(reversed(follow))
        return root

    # ===== Expansion =====

    def _select(self, rules: List[ProductionRule]) -> ProductionRule:
        if len(rules) == 1:
            return rules[0]
        return self._rng.weighted(rules, [r.weight for r in rules])

    def _expand(self, node: TopologyNode, symbol: str, level: int) -> List[_Step]:
        """Pick one production of a node symbol; returns its symbols to apply."""
        rules = self.grammar.productions.get(symbol)
        if not rules:
            self.stats.missing_rules += 1
            return []
        if level >= self._ceiling:
            self.stats.depth_truncations += 1
            return []

        rule = self._select(rules)
        if not rule.expand:
            self.stats.empty_expansions += 1
            return []
        return [_Step("apply", node, target, level) for target in rule.expand]

    def _spawn(self, parent: TopologyNode, symbol: str, level: int) -> List[_Step]:
        node_type = NODE_SYMBOLS[symbol]
        host = parent.system_ancestor() if node_type == NodeType.PLANET else parent
        child = self._attach(host, node_type)
        return [_Step("expand", child, symbol, level + 1)]

    def _fan_out(self, parent: TopologyNode, container: str, level: int) -> List[_Step]:
        if container == "submoons" and not self.grammar.allow_sub_moons:
            return []

        rules = self.grammar.productions.get(container)
        if not rules:
            if container != "stars":
                self.stats.missing_rules += 1
                return []
            # Bare 'stars' falls back to the star-multiplicity weights
            rule = ProductionRule(weight=1.0, expand=["star"], max_count=3)
        else:
            rule = self._select(rules)

        if not rule.expand:
            self.stats.empty_expansions += 1
            return []

        count = rule.clamp_count(self._sample_count(container, rule))
        return [
            _Step("apply", parent, target, level)
            for _ in range(count)
            for target in rule.expand
        ]

    def _sample_count(self, container: str, rule: ProductionRule) -> int:
        config = self._config
        if container == "stars" and rule.repeat is None:
            weights = self.grammar.star_count or config.star_probabilities
            return self._rng.weighted([1, 2, 3], list(weights))

        if container == "planets":
            default_p = config.planet_geometric_p
        elif container == "submoons":
            default_p = config.moon_geometric_p * 1.5
        else:
            default_p = config.moon_geometric_p

        repeat = rule.repeat or RepeatDistribution.geometric()
        return repeat.sample(self._rng, default_p)


class ClassicTopologyGenerator(TopologyGenerator):
    """
    Legacy hard-coded expansion, kept for stable historical output.

    Draw order: star multiplicity, planet count, then per planet its moon
    count. Equivalent grammar:

        S → ★{1-3} ●*
        ● → ◦*
    """

    preset_id = "classic"

    def generate(self, rng: RandomGenerator, config: "GeneratorConfig") -> TopologyNode:
        root = self._new_root()
        ceiling = config.max_depth
        if ceiling <= 0:
            self.stats.depth_truncations += 1
            return root

        num_stars = rng.weighted([1, 2, 3], list(config.star_probabilities))
        for _ in range(num_stars):
            self._attach(root, NodeType.STAR)

        num_planets = min(rng.geometric(config.planet_geometric_p), MAX_REPEAT_COUNT)
        for _ in range(num_planets):
            planet = self._attach(root, NodeType.PLANET)
            if ceiling < 2:
                self.stats.depth_truncations += 1
                continue
            num_moons = min(rng.geometric(config.moon_geometric_p), MAX_REPEAT_COUNT)
            for _ in range(num_moons):
                self._attach(planet, NodeType.MOON)
        return root

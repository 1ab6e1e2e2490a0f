"""Update pipeline: turns a snapshot plus proposed changes into its successor.

For every update:

1. the proposed changes are wrapped in a snapshot whose predecessor is the
   current snapshot,
2. the model's pre-phase guards run over the changes, in registration order,
3. the (possibly transformed) changes are shallow-merged onto the current
   snapshot, changes winning,
4. the model's post-phase guards run over the merged snapshot, in
   registration order,
5. the result is returned.

A guard failure at any step propagates and nothing is returned. The current
snapshot is never modified, so a failed update leaves no trace.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import structlog

from modeling.registry import Mixin, MixinRegistry, Phase
from modeling.snapshot import Snapshot

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Policy:
    """A cross-cutting set of guards that model definitions opt into."""

    name: str
    mixins: tuple[Mixin, ...]


@dataclass(frozen=True)
class ModelSpec:
    """Static guard configuration for one entity type.

    Policy guards are registered first, then the model's own guards, each in
    the order given.
    """

    name: str
    mixins: tuple[Mixin, ...]
    policies: tuple[Policy, ...] = field(default=())


def compose(*mixins: Mixin):
    """Chain ``mixins`` left to right, each consuming the previous one's output."""

    def composed(obj):
        for mixin in mixins:
            obj = mixin(obj)
        return obj

    return composed


def apply_mixins(
    current: Snapshot,
    changes: Mapping,
    pre: Sequence[Mixin] = (),
    post: Sequence[Mixin] = (),
) -> Snapshot:
    proposed = Snapshot(changes, model_name=current.model_name, previous=current)
    updates = compose(*pre)(proposed) if pre else proposed
    merged = current.merge(updates)
    return compose(*post)(merged) if post else merged


class UpdatePipeline:
    """Owns the guard configuration of a group of models and applies it."""

    def __init__(self, name: str, registry: MixinRegistry | None = None) -> None:
        self.name = name
        self.registry = registry or MixinRegistry()
        self._specs: dict[str, ModelSpec] = {}

    def define(self, spec: ModelSpec) -> ModelSpec:
        for policy in spec.policies:
            for mixin in policy.mixins:
                self.registry.register(spec.name, mixin)
        for mixin in spec.mixins:
            self.registry.register(spec.name, mixin)

        self._specs[spec.name] = spec
        logger.debug(
            "Model defined",
            pipeline=self.name,
            model=spec.name,
            policies=[p.name for p in spec.policies],
        )
        return spec

    def spec_for(self, model_name: str) -> ModelSpec:
        try:
            return self._specs[model_name]
        except KeyError:
            raise LookupError(f"Model {model_name!r} is not defined in pipeline {self.name!r}") from None

    def create(self, model_name: str, data: Mapping) -> Snapshot:
        """Run every guard over a new snapshot that has no predecessor."""
        self.spec_for(model_name)
        proposed = Snapshot(data, model_name=model_name)
        created = compose(*self.registry.mixins(Phase.PRE, model_name))(proposed)
        return compose(*self.registry.mixins(Phase.POST, model_name))(created.tagged(model_name))

    def process_update(self, current: Snapshot, changes: Mapping) -> Snapshot:
        model_name = current.model_name
        if model_name not in self.registry:
            logger.warning("Model has no guards, applying update unchecked", pipeline=self.name, model=model_name)
        logger.debug("Processing update", model=model_name, fields=sorted(changes))
        return apply_mixins(
            current,
            changes,
            self.registry.mixins(Phase.PRE, model_name),
            self.registry.mixins(Phase.POST, model_name),
        )

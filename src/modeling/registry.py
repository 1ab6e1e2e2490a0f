"""Mixin registry: per-model, per-phase ordered guard sets.

Guards are kept out of band, keyed by model name, so snapshots stay plain
data. Each phase holds an insertion-ordered mapping of mixin name to mixin;
attaching a name that is already present is a no-op.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from modeling.exceptions import InvalidMixinPhase

logger = structlog.get_logger(__name__)


class Phase(Enum):
    PRE = "pre"  # runs over the proposed changes, before the merge
    POST = "post"  # runs over the merged snapshot


@dataclass(frozen=True)
class Mixin:
    """A named guard bound to the phase it runs in."""

    name: str
    phase: Phase
    fn: Callable

    def __call__(self, obj):
        return self.fn(obj)


def as_phase(phase) -> Phase:
    if isinstance(phase, Phase):
        return phase
    try:
        return Phase(phase)
    except ValueError:
        raise InvalidMixinPhase(phase) from None


class MixinRegistry:
    def __init__(self) -> None:
        self._sets: dict[str, dict[Phase, dict[str, Mixin]]] = {}

    def attach(self, phase, model_name: str, name: str, factory: Callable) -> bool:
        """Attach the mixin built by ``factory`` unless ``name`` is already present.

        Returns True when a new mixin was attached.
        """
        phase = as_phase(phase)
        phases = self._sets.setdefault(model_name, {Phase.PRE: {}, Phase.POST: {}})
        mixin_set = phases[phase]
        if name in mixin_set:
            return False

        built = factory()
        mixin_set[name] = built if isinstance(built, Mixin) and built.phase is phase else Mixin(name, phase, built)
        logger.debug("Mixin attached", model=model_name, phase=phase.value, mixin=name)
        return True

    def register(self, model_name: str, mixin: Mixin) -> bool:
        return self.attach(mixin.phase, model_name, mixin.name, lambda: mixin)

    def mixins(self, phase, model_name: str) -> tuple[Mixin, ...]:
        phase = as_phase(phase)
        phases = self._sets.get(model_name)
        if phases is None:
            return ()
        return tuple(phases[phase].values())

    def __contains__(self, model_name: str) -> bool:
        return model_name in self._sets

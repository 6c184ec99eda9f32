"""
Ordered pipelines of named transforms.

Markers declare their transforms as dotted names (``"frame.frame_map"``,
``"x.differentiate"``, ``"filter_required"``, ``"frame.current_frame"``). Owners register
the callables behind those names; the pipeline runs them in declared order, each stage
receiving the previous stage's output.

Examples:
    >>> p = TransformPipeline(["double", "inc"])
    >>> p.register("double", lambda x: x * 2)
    >>> p.register("inc", lambda x: x + 1)
    >>> p.run(3)
    7
    >>> p.run_until(3, "inc")
    6
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

__all__ = ["Transform", "TransformPipeline"]

Transform = Callable[[Any], Any]


class TransformPipeline:
    """Named transform registry plus the declared stage order."""

    def __init__(self, steps: Sequence[str] = ()) -> None:
        self.steps: list[str] = list(steps)
        self._registry: dict[str, Transform] = {}

    def register(self, name: str, fn: Transform) -> None:
        self._registry[name] = fn

    def register_many(self, prefix: str, fns: Mapping[str, Transform]) -> None:
        """Register ``fns`` under ``"<prefix>.<name>"`` (e.g. an engine's transforms)."""
        for name, fn in fns.items():
            self.register(f"{prefix}.{name}" if prefix else name, fn)

    def _resolve(self, name: str) -> Transform:
        try:
            return self._registry[name]
        except KeyError as exc:
            raise KeyError(
                f"Unknown transform: {name!r} (registered: {sorted(self._registry)!r})"
            ) from exc

    def _run(self, data: Any, steps: Sequence[str]) -> Any:
        for name in steps:
            data = self._resolve(name)(data)
        return data

    def run(self, data: Any) -> Any:
        return self._run(data, self.steps)

    def run_until(self, data: Any, name: str) -> Any:
        """Output of the pipeline right before stage ``name``."""
        if name not in self.steps:
            raise KeyError(f"Transform {name!r} is not a stage of this pipeline")
        return self._run(data, self.steps[: self.steps.index(name)])

    def __contains__(self, name: object) -> bool:
        return name in self.steps

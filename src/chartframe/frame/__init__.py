"""
chartframe.frame: frame (animation) engine and frame-grouped transforms.

## Public API
- engine: FrameEngine, the playback state machine, current value/step, transforms.
- playback: pure tick/start/stop transitions.
- scheduler: AsyncioScheduler and ManualScheduler.
- step_scale: frame value <-> step index mapping.
- group / transforms: FrameGroup and the pure transforms over it.

## Examples
```python
from chartframe.frame import FrameEngine, ManualScheduler
sched = ManualScheduler()
engine = FrameEngine({"speed": 50, "loop": True}, source, scheduler=sched)  # doctest: +SKIP
engine.play(); sched.advance(500)  # doctest: +SKIP
engine.dispose()  # doctest: +SKIP
```
"""

from __future__ import annotations

from .engine import FrameEngine
from .group import FrameGroup
from .models import FrameConfig, PlaybackState
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .select import select_frame_concept
from .step_scale import StepScale

__all__ = [
    "FrameEngine",
    "FrameGroup",
    "FrameConfig",
    "PlaybackState",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "StepScale",
    "select_frame_concept",
]

"""Animation engine: per-element task queues driven by the host scheduler."""

from .effects import build_effect, format_numeric, parse_numeric  # noqa: F401
from .elements import (  # noqa: F401
    PROPERTIES,
    AnimatableElement,
    ElementResolver,
    QtWidgetElement,
    WidgetRegistry,
)
from .sequencer import AnimationSequencer  # noqa: F401
from .tasks import (  # noqa: F401
    AnimationKind,
    AnimationOutcome,
    AnimationTask,
    Completion,
    GroupCompletion,
    bounce,
    dimension,
    fade_in,
    fade_out,
    numeric,
    pulse,
    rotate,
    scale_in,
    shake,
    slide_down,
    slide_left,
    slide_right,
    slide_up,
)

"""Design vocabulary: motion tokens, reduced-motion preference, notification styles."""

from .motion import (  # noqa: F401
    DEFAULT_MOTION,
    MotionSpec,
    cubic_bezier,
    ease_out_quart,
    get_duration_ms,
    get_easing,
    parse_cubic_bezier,
)
from .reduced_motion import (  # noqa: F401
    adjust_duration,
    is_reduced_motion,
    set_reduced_motion,
    temporarily_reduced_motion,
)
from .notifications import (  # noqa: F401
    SEVERITIES,
    NotificationStyle,
    get_notification_style,
    list_notification_styles,
)

"""Timewise: animated screen-time dashboard core.

Chart resources bound to named surfaces, per-element animation queues and a
capacity-bounded notification center, wired together by ``timewise.app``.
"""

__version__ = "0.1.0"

"""Domain models for remsh.

Data structures shared by the server components. ``ArgumentList`` uses
Pydantic v2 for validation; ``OutputBuffer`` is a plain bounded buffer.
"""

from remsh.domain.models import ArgumentList, OutputBuffer, SessionState

__all__ = [
    "ArgumentList",
    "OutputBuffer",
    "SessionState",
]

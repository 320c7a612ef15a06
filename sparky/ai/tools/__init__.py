"""
Function-calling package: declarations, dispatch and executors.

- schemas.py: Gemini function declarations
- registry.py: FunctionName enum and ToolRegistry dispatch
- context.py: NoteHost protocol and the per-send DomainContext snapshot
- notes.py: note, reminder and status executors
- app.py: theme, settings and status executors

Re-exports:
    ToolRegistry: dispatches function calls
    FunctionName: closed set of callable functions
    DomainContext, NoteHost: domain snapshot and host interface
    FUNCTION_DECLARATIONS: list of declarations sent to the model
"""

from .context import DomainContext, NoteHost
from .registry import FunctionName, ToolRegistry
from .schemas import FUNCTION_DECLARATIONS

__all__ = ["DomainContext", "FUNCTION_DECLARATIONS", "FunctionName", "NoteHost", "ToolRegistry"]

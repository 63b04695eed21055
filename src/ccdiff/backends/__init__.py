"""External process interfaces."""
from .base import CommandResult, run_command
from .compiler import compile_source, run_binary
from .csmith import CsmithGenerator, GeneratorError

__all__ = [
    "CommandResult",
    "CsmithGenerator",
    "GeneratorError",
    "compile_source",
    "run_binary",
    "run_command",
]

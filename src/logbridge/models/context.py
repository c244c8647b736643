"""
Caller and process context models.

The metadata shape produced here is consumed downstream by field name:

    context.runtime.{file,type,method,function,line,column}
    context.system.{pid,main_file}
"""

import os
import sys
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SystemContext(BaseModel):
    """Process-wide values, read once and passed around explicitly."""

    pid: int = Field(description="Process id")
    main_file: str = Field(default="", description="Absolute path of the entry file, empty when unknown")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_process(cls, main_file: Optional[str] = None) -> "SystemContext":
        """Snapshot the running process, optionally overriding the entry file."""
        if main_file is None:
            main_file = getattr(sys.modules.get("__main__"), "__file__", None) or ""
        return cls(
            pid=os.getpid(),
            main_file=os.path.abspath(main_file) if main_file else "",
        )


@lru_cache()
def get_system_context() -> SystemContext:
    """Get the cached SystemContext for this process."""
    return SystemContext.from_process()


# A forked child has a new pid
if hasattr(os, "register_at_fork"):
    os.register_at_fork(after_in_child=get_system_context.cache_clear)


class CallerContext(BaseModel):
    """Location of the call site of a logging call."""

    file: Optional[str] = None
    type: Optional[str] = None
    method: Optional[str] = None
    function: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    pid: int
    main_file: str = ""

    def to_metadata(self) -> Dict[str, Any]:
        """Nest the context under ``context.runtime`` and ``context.system``."""
        return {
            "context": {
                "runtime": {
                    "file": self.file,
                    "type": self.type,
                    "method": self.method,
                    "function": self.function,
                    "line": self.line,
                    "column": self.column,
                },
                "system": {
                    "pid": self.pid,
                    "main_file": self.main_file,
                },
            }
        }

"""
Caller context resolution.

Determines the file name and the line number from which a log call was
initiated, if we're able to tell, by walking the interpreter stack.
"""

import inspect
import itertools
import os
from dataclasses import dataclass
from types import CodeType, FrameType
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Sequence
from urllib.parse import urlparse

from ..models.context import CallerContext, SystemContext, get_system_context

# Checked in order, first method found on the stack wins
CALLER_METHODS = ("warn", "error", "info", "log")

# Modules whose frames are never the call site
INTERNAL_MODULES = ("logging", "structlog", "logbridge")

URL_SCHEMES = ("file:/",)

StackGetter = Callable[[Callable[..., Any]], Iterable["StackFrame"]]


@dataclass
class StackFrame:
    """Snapshot of one interpreter frame."""
    file_name: Optional[str]
    line_number: Optional[int]
    column_number: Optional[int]
    function_name: Optional[str]
    method_name: Optional[str]
    type_name: Optional[str]
    module_name: Optional[str]

    @classmethod
    def from_frame(cls, frame: FrameType) -> "StackFrame":
        code = frame.f_code
        receiver = _receiver_type(frame)
        return cls(
            file_name=code.co_filename,
            line_number=frame.f_lineno,
            column_number=_column_of(frame),
            function_name=getattr(code, "co_qualname", code.co_name),
            method_name=code.co_name if receiver is not None else None,
            type_name=receiver.__name__ if receiver is not None else None,
            module_name=frame.f_globals.get("__name__"),
        )


def _receiver_type(frame: FrameType) -> Optional[type]:
    """Class of the ``self``/``cls`` argument, if the frame runs a method."""
    code = frame.f_code
    if not code.co_argcount or code.co_varnames[0] not in ("self", "cls"):
        return None
    receiver = frame.f_locals.get(code.co_varnames[0])
    if receiver is None:
        return None
    return receiver if isinstance(receiver, type) else type(receiver)


def _column_of(frame: FrameType) -> Optional[int]:
    """1-based column of the executing instruction (Python 3.11+)."""
    positions = getattr(frame.f_code, "co_positions", None)
    if positions is None or frame.f_lasti < 0:
        return None
    position = next(itertools.islice(positions(), frame.f_lasti // 2, None), None)
    if position is None or position[2] is None:
        return None
    return position[2] + 1


def _code_of(fn: Callable[..., Any]) -> Optional[CodeType]:
    fn = getattr(fn, "__func__", fn)
    try:
        fn = inspect.unwrap(fn)
    except ValueError:
        return None
    return getattr(fn, "__code__", None)


def capture_stack(fn: Callable[..., Any]) -> Iterator[StackFrame]:
    """
    Yield the frames that called ``fn``, innermost first.

    Frames are snapshotted one at a time as the caller iterates, so a search
    that stops early never touches the outer frames. Yields nothing when
    ``fn`` is not currently executing.
    """
    code = _code_of(fn)
    if code is None:
        return

    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code is not code:
            frame = frame.f_back
        if frame is None:
            return

        frame = frame.f_back
        while frame is not None:
            yield StackFrame.from_frame(frame)
            frame = frame.f_back
    finally:
        del frame


def is_internal_module(module_name: Optional[str], ignore_modules: Sequence[str] = ()) -> bool:
    """Whether a module belongs to the logging machinery."""
    if not module_name:
        return False
    for prefix in itertools.chain(INTERNAL_MODULES, ignore_modules):
        if module_name == prefix or module_name.startswith(prefix + "."):
            return True
    return False


def find_calling_frame(
    logger: Any,
    stack_getter: StackGetter = capture_stack,
    ignore_modules: Sequence[str] = (),
) -> Optional[StackFrame]:
    """
    Find the frame that invoked one of the logger's logging methods.

    The first frame outside the logging machinery is the call site. If every
    frame is internal, the innermost one is returned.
    """
    for name in CALLER_METHODS:
        method = getattr(logger, name, None)
        if not callable(method):
            continue

        innermost: Optional[StackFrame] = None
        for stack_frame in stack_getter(method):
            if innermost is None:
                innermost = stack_frame
            if not is_internal_module(stack_frame.module_name, ignore_modules):
                return stack_frame

        if innermost is not None:
            return innermost

    return None


def relative_to_main_module(file_name: Any, main_file: str) -> Optional[str]:
    """Express ``file_name`` relative to the directory of the entry file."""
    if not isinstance(file_name, str):
        return None

    if file_name.startswith(URL_SCHEMES):
        return urlparse(file_name).path

    # <stdin>, <string>, <frozen ...>
    if file_name.startswith("<"):
        return file_name

    root_path = os.path.dirname(main_file) or os.getcwd()
    try:
        return os.path.relpath(file_name, root_path)
    except ValueError:
        # No relative path between drives
        return file_name


def get_stack_context(
    logger: Any,
    *,
    system: Optional[SystemContext] = None,
    stack_getter: StackGetter = capture_stack,
    ignore_modules: Sequence[str] = (),
) -> Dict[str, Any]:
    """
    Resolve caller location metadata for a log call made through ``logger``.

    Returns:
        ``{"context": {"runtime": {...}, "system": {...}}}``, or an empty dict
        when no stack information is available.
    """
    stack_frame = find_calling_frame(logger, stack_getter, ignore_modules)
    if stack_frame is None:
        return {}

    system = system or get_system_context()

    return CallerContext(
        file=relative_to_main_module(stack_frame.file_name, system.main_file),
        type=stack_frame.type_name,
        method=stack_frame.method_name,
        function=stack_frame.function_name,
        line=stack_frame.line_number,
        column=stack_frame.column_number,
        pid=system.pid,
        main_file=system.main_file,
    ).to_metadata()

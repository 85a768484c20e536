"""Backtrace capture for call-site recognition.

A ``Backtrace`` is an innermost-first list of ``BacktraceFrame`` records.
Each record keeps the function name, the bound receiver (``self``) when
there is one, and the class in the receiver's MRO that declares the running
code object.
"""

import inspect
from dataclasses import dataclass, field
from types import CodeType, FrameType
from typing import Any, Iterable, List, Optional, Sequence


def _function_of(attribute: Any) -> Any:
    if isinstance(attribute, (staticmethod, classmethod)):
        attribute = attribute.__func__
    elif isinstance(attribute, property):
        attribute = attribute.fget
    return inspect.unwrap(attribute) if inspect.isfunction(attribute) else attribute


def find_declaring_class(cls: type, code: CodeType) -> Optional[type]:
    """Class in ``cls.__mro__`` whose namespace defines ``code``."""
    for klass in cls.__mro__:
        for attribute in vars(klass).values():
            function = _function_of(attribute)
            if getattr(function, "__code__", None) is code:
                return klass
    return None


@dataclass(frozen=True)
class BacktraceFrame:
    """One captured stack frame.

    Attributes:
        function: Name of the running function
        receiver: Bound ``self`` of a method frame, otherwise None
        declaring_class: Class declaring the running method, otherwise None
        module: Module name the code belongs to
    """
    function: str
    receiver: Any = None
    declaring_class: Optional[type] = None
    module: Optional[str] = None

    @classmethod
    def from_frame(cls, frame: FrameType) -> "BacktraceFrame":
        code = frame.f_code
        receiver = None
        declaring_class = None

        if code.co_argcount and code.co_varnames[0] == "self":
            receiver = frame.f_locals.get("self")
            if receiver is not None:
                declaring_class = find_declaring_class(type(receiver), code)

        return cls(
            function=code.co_name,
            receiver=receiver,
            declaring_class=declaring_class,
            module=frame.f_globals.get("__name__"),
        )


@dataclass
class Backtrace:
    """Innermost-first sequence of frames.

    Attributes:
        frames: Captured frames, innermost first
        anchor: Function name marking where resolution started
        internal_modules: Modules whose frames are skipped after the anchor
    """
    frames: List[BacktraceFrame] = field(default_factory=list)
    anchor: Optional[str] = None
    internal_modules: Sequence[str] = ()

    @classmethod
    def capture(
        cls,
        limit: int,
        anchor: Optional[str] = None,
        internal_modules: Iterable[str] = (),
    ) -> "Backtrace":
        """Capture at most ``limit`` frames, starting with the caller."""
        frames = []
        frame = inspect.currentframe()
        try:
            frame = frame.f_back if frame is not None else None
            while frame is not None and len(frames) < limit:
                frames.append(BacktraceFrame.from_frame(frame))
                frame = frame.f_back
        finally:
            # Break the reference cycle with the frame object
            del frame
        return cls(frames, anchor, tuple(internal_modules))

    def callers(self) -> List[BacktraceFrame]:
        """Frames outside the resolution machinery, innermost first.

        Everything up to and including the anchor frame is dropped, then any
        directly following frames from the internal modules.
        """
        frames = self.frames
        if self.anchor is not None:
            for index, frame in enumerate(frames):
                if frame.function == self.anchor and (
                    not self.internal_modules or frame.module in self.internal_modules
                ):
                    frames = frames[index + 1:]
                    break

        start = 0
        while start < len(frames) and frames[start].module in self.internal_modules:
            start += 1
        return list(frames[start:])

    def __len__(self) -> int:
        return len(self.frames)

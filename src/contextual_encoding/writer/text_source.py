"""Values accepted by ``MediaWriter.text``.

A text source is one of:

* ``None``, written as an empty value
* ``str``, written as-is
* :class:`CharRange`, a slice of a string written without copying it first
* :class:`Deferred`, a supplier called at write time, whose result is any
  text source
* a :class:`MediaWritable`, which streams itself into a text region
* an object whose ``is_fast_to_string()`` returns true, written as ``str(obj)``
* anything else, coerced through the markup hook
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from .media_writer import MediaWriter


@dataclass(frozen=True)
class CharRange:
    """The characters ``text[start:end]``."""

    text: str
    start: int = 0
    end: Optional[int] = None

    def __post_init__(self) -> None:
        end = len(self.text) if self.end is None else self.end
        if not 0 <= self.start <= end <= len(self.text):
            raise ValueError(
                f"Invalid range [{self.start}:{self.end}] for length {len(self.text)}"
            )

    def __len__(self) -> int:
        end = len(self.text) if self.end is None else self.end
        return end - self.start

    def __str__(self) -> str:
        return self.text[self.start:self.end]


@dataclass(frozen=True)
class Deferred:
    """A text source computed only when written."""

    supplier: Callable[[], Any]

    def get(self) -> Any:
        return self.supplier()


@runtime_checkable
class MediaWritable(Protocol):
    """Writes itself as text, possibly in many pieces."""

    def write_to(self, writer: "MediaWriter") -> None:
        ...


TextSource = Union[None, str, CharRange, Deferred, MediaWritable, Any]


def is_fast_to_string(value: Any) -> bool:
    """Whether ``str(value)`` is known to be cheap and final."""
    check = getattr(value, "is_fast_to_string", None)
    return callable(check) and bool(check())

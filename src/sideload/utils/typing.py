import typing

from .types import UNSPECIFIED, UnspecifiedType

T = typing.TypeVar("T")


def maybe_unspecified(maybe: typing.Union[UnspecifiedType, T], default: T) -> T:
    return typing.cast(T, maybe) if maybe is not UNSPECIFIED else default

import typing

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object holds a value that is computed on first use.

    Representers routinely refer to each other before both are defined
    (``Post`` has an author, ``Author`` has posts), so a declaration may hand over
    a yielder instead of the value itself.  Calling the :py:class:`Deferred`
    runs the yielder once and memoizes the result.

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    :param kwargs: keyword arguments for the yielder.
    """

    _yielder: typing.Callable[..., T]
    _value_yielded: bool = False
    _value: typing.Optional[T] = None
    _args: typing.Sequence[typing.Any]
    _kwargs: typing.Mapping[str, typing.Any]

    @property
    def resolved(self) -> bool:
        return self._value_yielded

    def __repr__(self) -> str:
        if self._value_yielded:
            return f"{type(self).__name__}({self._value!r})"
        return f"{type(self).__name__}(<unresolved {self._yielder!r}>)"

    def __call__(self) -> T:
        if not self._value_yielded:
            self._value = self._yielder(*self._args, **self._kwargs)
            self._value_yielded = True
        return typing.cast(T, self._value)

    def __init__(self, yielder: typing.Callable[..., T], *args, **kwargs) -> None:
        self._yielder = yielder  # type: ignore
        self._args = args
        self._kwargs = kwargs

"""
:py:mod:`sideload.renderer` turns the values emitted by representers into JSON.

Representers emit plain Python values: nested ``dict`` and ``list`` objects
from sideloaded associations, and whatever the represented objects hold in
their attributes (dates, decimals, identifiers that are tuples for composite
keys...).  :py:class:`JSONRenderer` converts all of these into JSON-compatible
values.

Synopsis
--------

.. code-block:: python

   from sideload.renderer import JSONRenderer

   renderer = JSONRenderer(assume_naive_timezone_as=datetime.timezone.utc)
   print(renderer.dumps(PostRepresenter(post).to_dict(user_options)))

"""
import base64
import collections.abc
import datetime
import decimal
import enum
import json
import typing
import uuid

JSONScalar = typing.Union[bool, int, float, str, None]
JSONValue = typing.Union[JSONScalar, typing.List[typing.Any], typing.Dict[str, typing.Any]]


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


Path = typing.Tuple[typing.Union[str, int], ...]


def format_path(path: Path) -> str:
    return "".join(f"/{c}" for c in path) or "/"


class JSONRenderer:
    _render_decimal_as_str: bool = True
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None

    def _dict_factory(self, items: typing.Iterator[typing.Tuple[str, typing.Any]]):
        return dict(items)

    def _render_datetime(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        _value = typing.cast(datetime.datetime, value)
        if _value.tzinfo is None:
            if self._assume_naive_timezone_as is None:
                raise ValueError(f"{format_path(path)}: naive datetime {_value}")
            else:
                if hasattr(self._assume_naive_timezone_as, "localize"):
                    _value = typing.cast(TZLocalizer, self._assume_naive_timezone_as).localize(
                        _value
                    )
                else:
                    _value = _value.replace(tzinfo=self._assume_naive_timezone_as)
        return _value.astimezone(datetime.timezone.utc).isoformat()

    def _render_date(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        return typing.cast(datetime.date, value).isoformat()

    def _render_decimal(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        _value = typing.cast(decimal.Decimal, value)
        return str(_value) if self._render_decimal_as_str else float(_value)

    def _render_bytes(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        return base64.b64encode(typing.cast(bytes, value)).decode("ascii")

    def _render_str(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        return str(value)

    def _render_enum(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        return self._render_scalar(path, typing.cast(enum.Enum, value).value)

    def _render_passthrough(self: "JSONRenderer", path: Path, value: typing.Any) -> JSONScalar:
        return typing.cast(JSONScalar, value)

    _supported_types: typing.ClassVar[typing.Dict[type, typing.Callable]] = {
        datetime.datetime: _render_datetime,
        datetime.date: _render_date,
        decimal.Decimal: _render_decimal,
        bytes: _render_bytes,
        uuid.UUID: _render_str,
        enum.Enum: _render_enum,
        str: _render_passthrough,
        bool: _render_passthrough,
        int: _render_passthrough,
        float: _render_passthrough,
        None.__class__: _render_passthrough,
    }

    def _render_scalar(self, path: Path, value: typing.Any) -> JSONScalar:
        # fast pass
        r = self._supported_types.get(type(value))
        if r is not None:
            return r(self, path, value)

        for type_, r in self._supported_types.items():
            if isinstance(value, type_):
                return r(self, path, value)

        raise TypeError(f"{format_path(path)}: unsupported type {value!r}")

    def _render(self, path: Path, value: typing.Any) -> JSONValue:
        if isinstance(value, collections.abc.Mapping):
            return self._dict_factory(
                (str(k), self._render(path + (str(k),), v)) for k, v in value.items()
            )
        elif isinstance(value, (collections.abc.Sequence, collections.abc.Set)) and not isinstance(
            value, (str, bytes)
        ):
            return [self._render(path + (i,), v) for i, v in enumerate(value)]
        else:
            return self._render_scalar(path, value)

    def __call__(self, value: typing.Any) -> JSONValue:
        return self._render((), value)

    def dumps(self, value: typing.Any, **kwargs) -> str:
        return json.dumps(self(value), **kwargs)

    def __init__(
        self,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._render_decimal_as_str = render_decimal_as_str
        self._assume_naive_timezone_as = assume_naive_timezone_as

import dataclasses
import typing

from .context import RenderContext, UserOptions
from .exceptions import InvalidDeclarationError
from .reflection import Condition

ActivationPredicate = typing.Callable[["Representer", UserOptions], bool]
FieldGetter = typing.Callable[["Representer", UserOptions, RenderContext], typing.Any]


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """
    A :py:class:`FieldDescriptor` is one entry of a representer's ordered field list.
    The representer emits ``key`` whenever ``is_active`` holds, with the value
    returned by ``getter``.
    """

    key: str
    is_active: ActivationPredicate
    getter: FieldGetter
    owner: typing.Optional[str] = None
    """
    Name of the association that installed the field; :py:const:`None` for plain properties.
    """

    def get(
        self, representer: "Representer", user_options: UserOptions, render_ctx: RenderContext
    ) -> typing.Any:
        return self.getter(representer, user_options, render_ctx)


def _always(representer: "Representer", user_options: UserOptions) -> bool:
    return True


class Property:
    """
    Declares a plain output field on a representer.

    .. code-block:: python

       class PostRepresenter(Representer):
           id = Property()
           title = Property()
           body = Property(attr="content", if_=lambda ctx, opts: opts.current_user is not None)

    :param str attr: the attribute to read off the represented object.  Defaults to the field name.
    :param getter: a callable ``(represented) -> value`` used instead of ``attr``.
    :param if_: a condition ``(representer, user_options) -> bool`` gating the field.
    :param str key: the output key.  Defaults to the field name.
    """

    attr: typing.Optional[str]
    getter: typing.Optional[typing.Callable[[typing.Any], typing.Any]]
    if_: typing.Optional[Condition]
    key: typing.Optional[str]

    def build_field(self, name: str) -> FieldDescriptor:
        attr = self.attr or name
        getter = self.getter
        condition = self.if_

        def get(
            representer: "Representer", user_options: UserOptions, render_ctx: RenderContext
        ) -> typing.Any:
            if getter is not None:
                return getter(representer.represented)
            return getattr(representer.represented, attr)

        is_active: ActivationPredicate = _always
        if condition is not None:

            def is_active(representer: "Representer", user_options: UserOptions) -> bool:
                return bool(condition(representer, user_options))

        return FieldDescriptor(key=self.key or name, is_active=is_active, getter=get)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attr={self.attr!r}, key={self.key!r})"

    def __init__(
        self,
        attr: typing.Optional[str] = None,
        *,
        getter: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None,
        if_: typing.Optional[Condition] = None,
        key: typing.Optional[str] = None,
    ):
        if attr is not None and getter is not None:
            raise InvalidDeclarationError("attr and getter are mutually exclusive")
        self.attr = attr
        self.getter = getter
        self.if_ = if_
        self.key = key


if typing.TYPE_CHECKING:
    from .representer import Representer  # noqa: E402

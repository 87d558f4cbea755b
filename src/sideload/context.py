import collections.abc
import contextlib
import dataclasses
import types
import typing

from .config import DEFAULT_CONFIG, Config
from .defaults import DefaultIdentityResolverImpl, DefaultPaginatorImpl
from .exceptions import InvalidUserOptionsError
from .interfaces import IdentityResolver, Paginator
from .registry import RepresenterRegistry, default_registry


def _parse_page(parameter: str, value: typing.Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidUserOptionsError(parameter, value, "not an integer")
    try:
        page = int(value)
    except (TypeError, ValueError):
        raise InvalidUserOptionsError(parameter, value, "not an integer") from None
    if page < 1:
        raise InvalidUserOptionsError(parameter, value, "pages start at 1")
    return page


def _last(value: typing.Any) -> typing.Any:
    if isinstance(value, collections.abc.Sequence) and not isinstance(value, (str, bytes)):
        return value[-1] if value else None
    return value


def _split_include(value: typing.Any, separator: str) -> typing.Iterator[str]:
    if value is None:
        return
    if isinstance(value, str):
        values: typing.Iterable[typing.Any] = value.split(separator)
    else:
        values = value
    for v in values:
        if not isinstance(v, str):
            raise InvalidUserOptionsError("include", v, "not a string")
        for name in v.split(separator):
            name = name.strip()
            if name:
                yield name


@dataclasses.dataclass(frozen=True)
class UserOptions:
    """
    The caller's intent for one request: which associations to embed, and
    which page of each nested collection to return.
    """

    include: typing.FrozenSet[str] = frozenset()
    """
    Names of the associations to embed in full.
    """

    pages: typing.Mapping[str, int] = dataclasses.field(default_factory=dict)
    """
    1-based page numbers of nested collections, keyed by association name.
    """

    page: typing.Optional[int] = None
    """
    1-based page number of a top-level collection listing.
    """

    current_user: typing.Any = None

    extra: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)
    """
    Arbitrary request data made available to condition predicates.
    """

    include_separator: dataclasses.InitVar[str] = DEFAULT_CONFIG.include_separator
    """
    Separator of names within a string given as ``include``.
    """

    def __post_init__(self, include_separator: str):
        object.__setattr__(self, "include", frozenset(_split_include(self.include, include_separator)))
        object.__setattr__(
            self,
            "pages",
            types.MappingProxyType(
                {name: _parse_page(f"{name}_page", v) for name, v in self.pages.items()}
            ),
        )
        if self.page is not None:
            object.__setattr__(self, "page", _parse_page("page", self.page))
        object.__setattr__(self, "extra", types.MappingProxyType(dict(self.extra)))

    def includes(self, name: str) -> bool:
        return name in self.include

    def page_for(self, name: str) -> typing.Optional[int]:
        return self.pages.get(name)

    @classmethod
    def from_query(
        cls,
        params: typing.Mapping[str, typing.Any],
        config: Config = DEFAULT_CONFIG,
        **kwargs,
    ) -> "UserOptions":
        """
        Builds :py:class:`UserOptions` out of request query parameters such as
        ``?include=posts,comments&posts_page=2``.

        :param Mapping[str, Any] params: query parameters; values are strings or lists of strings.
        :param Config config: the parameter naming configuration.
        :param kwargs: other :py:class:`UserOptions` fields (``current_user``, ``extra``).
        """
        include: typing.Set[str] = set()
        pages: typing.Dict[str, int] = {}
        page: typing.Optional[int] = None

        for k, v in params.items():
            if k == config.include_param:
                if v is None:
                    continue
                include.update(_split_include(v, config.include_separator))
            elif k == config.page_param:
                v = _last(v)
                if v is not None and v != "":
                    page = _parse_page(k, v)
            elif k.endswith(config.page_param_suffix):
                name = k[: -len(config.page_param_suffix)]
                v = _last(v)
                if name and v is not None and v != "":
                    pages[name] = _parse_page(k, v)

        return cls(
            include=frozenset(include),
            pages=pages,
            page=page,
            include_separator=config.include_separator,
            **kwargs,
        )


@dataclasses.dataclass(frozen=True)
class EvaluationContext:
    """
    What a condition predicate gets to see.
    """

    context: typing.Any
    """
    The representer being rendered.
    """

    user_options: UserOptions


class RenderContext:
    """
    A :py:class:`RenderContext` carries the collaborators of one top-level render
    and the stack of native objects currently being rendered.  It is created per
    request and never shared.
    """

    registry: RepresenterRegistry
    config: Config
    identity_resolver: IdentityResolver
    paginator: Paginator
    _stack: typing.List[int]

    @property
    def depth(self) -> int:
        return len(self._stack)

    def is_visiting(self, native: typing.Any) -> bool:
        return id(native) in self._stack

    @contextlib.contextmanager
    def visiting(self, native: typing.Any) -> typing.Iterator[None]:
        self._stack.append(id(native))
        try:
            yield
        finally:
            self._stack.pop()

    def __init__(
        self,
        registry: typing.Optional[RepresenterRegistry] = None,
        config: typing.Optional[Config] = None,
        identity_resolver: typing.Optional[IdentityResolver] = None,
        paginator: typing.Optional[Paginator] = None,
    ):
        self.registry = default_registry if registry is None else registry
        self.config = DEFAULT_CONFIG if config is None else config
        self.identity_resolver = (
            DefaultIdentityResolverImpl() if identity_resolver is None else identity_resolver
        )
        self.paginator = DefaultPaginatorImpl() if paginator is None else paginator
        self._stack = []

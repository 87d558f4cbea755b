import collections.abc
import itertools
import typing

from .exceptions import IdentityNotFoundError
from .interfaces import IdentityResolver, Paginator


class DefaultIdentityResolverImpl(IdentityResolver):
    attr: str

    def get_identity(self, native: typing.Any) -> typing.Any:
        try:
            return getattr(native, self.attr)
        except AttributeError:
            raise IdentityNotFoundError(native, self.attr) from None

    def __init__(self, attr: str = "id"):
        self.attr = attr


class DefaultPaginatorImpl(Paginator):
    def paginate(
        self, collection: typing.Iterable[typing.Any], page: int, per_page: int
    ) -> typing.Sequence[typing.Any]:
        assert page >= 1 and per_page >= 1
        offset = (page - 1) * per_page
        if isinstance(collection, collections.abc.Sequence):
            return collection[offset : offset + per_page]
        return list(itertools.islice(collection, offset, offset + per_page))

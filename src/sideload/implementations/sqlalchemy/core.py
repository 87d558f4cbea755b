import typing

from sqlalchemy import orm  # type: ignore
from sqlalchemy.orm.exc import UnmappedInstanceError  # type: ignore

from ...defaults import DefaultIdentityResolverImpl, DefaultPaginatorImpl
from ...interfaces import IdentityResolver


class SQLAIdentityResolver(IdentityResolver):
    """
    Resolves the identity of a mapped instance from its primary key.  A single-column
    key yields its value; a composite key yields a tuple.  Objects that are not
    mapped are handed over to ``fallback``.
    """

    fallback: IdentityResolver

    def get_identity(self, native: typing.Any) -> typing.Any:
        try:
            sa_mapper = orm.object_mapper(native)
        except UnmappedInstanceError:
            return self.fallback.get_identity(native)
        pk = sa_mapper.primary_key_from_instance(native)
        if len(pk) == 1:
            return pk[0]
        return tuple(pk)

    def __init__(self, fallback: typing.Optional[IdentityResolver] = None):
        self.fallback = DefaultIdentityResolverImpl() if fallback is None else fallback


class SQLAPaginator(DefaultPaginatorImpl):
    """
    Paginates query-backed collections (such as ``lazy="dynamic"`` relationships)
    with ``LIMIT`` / ``OFFSET`` so that only one page is loaded.  The ordering of the
    query, including the relationship's ``order_by``, is kept.
    """

    def paginate(
        self, collection: typing.Iterable[typing.Any], page: int, per_page: int
    ) -> typing.Sequence[typing.Any]:
        if isinstance(collection, orm.Query):
            assert page >= 1 and per_page >= 1
            return collection.limit(per_page).offset((page - 1) * per_page).all()
        return super().paginate(collection, page, per_page)

from ...context import RenderContext
from .core import SQLAIdentityResolver, SQLAPaginator

__all__ = ["SQLAIdentityResolver", "SQLAPaginator", "create_render_context"]


def create_render_context(**kwargs) -> RenderContext:
    """
    Builds a :py:class:`RenderContext` that resolves identities from primary keys
    and paginates query-backed relationships in SQL.  Takes the same keyword
    arguments as :py:class:`RenderContext`.
    """
    kwargs.setdefault("identity_resolver", SQLAIdentityResolver())
    kwargs.setdefault("paginator", SQLAPaginator())
    return RenderContext(**kwargs)



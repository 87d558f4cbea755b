import inspect
import logging
import typing

from .context import RenderContext, UserOptions
from .deferred import Deferred
from .exceptions import AccessorNotFoundError, RenderError, SideloadException
from .reflection import Reflection
from .registry import RepresenterFactory
from .utils import OMITTED, OmittedType, maybe_unspecified

logger = logging.getLogger(__name__)


class Binding:
    """
    A :py:class:`Binding` resolves one association of one root object into an
    output value.  It is created for a single field evaluation and then discarded.

    :param Reflection reflection: the association to resolve.
    :param Any native: the root object the association is read off.
    :param UserOptions user_options: the request's options.
    :param RenderContext render_ctx: the context of the ongoing render.
    """

    reflection: Reflection
    native: typing.Any
    user_options: UserOptions
    render_ctx: RenderContext

    def fetch_related(self) -> typing.Any:
        accessor = self.reflection.accessor
        if callable(accessor):
            return accessor(self.native)
        assert isinstance(accessor, str)
        try:
            related = getattr(self.native, accessor)
        except AttributeError as e:
            try:
                inspect.getattr_static(self.native, accessor)
            except AttributeError:
                raise AccessorNotFoundError(self.reflection, self.native) from e
            raise
        if inspect.ismethod(related):
            related = related()
        return related

    def resolve_representer(self, related: typing.Any) -> RepresenterFactory:
        spec = self.reflection.representer
        if spec is None:
            return self.render_ctx.registry.query_by_native(related)
        elif isinstance(spec, str):
            return self.render_ctx.registry.query_by_name(spec)
        elif isinstance(spec, Deferred):
            return spec()
        else:
            return spec

    def _render(self, related: typing.Any) -> typing.Dict[str, typing.Any]:
        representer = self.resolve_representer(related)
        try:
            return representer(related).serialize(self.user_options, self.render_ctx)
        except SideloadException:
            raise
        except Exception as e:
            raise RenderError(self.reflection, related) from e

    def _paginate(self, related: typing.Iterable[typing.Any]) -> typing.Iterable[typing.Any]:
        page = self.user_options.page_for(self.reflection.name)
        if page is None:
            return related
        per_page = maybe_unspecified(
            self.reflection.per_page, self.render_ctx.config.default_page_size
        )
        logger.debug(
            "paginating association (%s) of %s: page=%d, per_page=%d",
            self.reflection.name,
            self.reflection.source_name,
            page,
            per_page,
        )
        return self.render_ctx.paginator.paginate(related, page, per_page)

    def represent(
        self,
    ) -> typing.Union[OmittedType, typing.Dict[str, typing.Any], typing.List[typing.Any]]:
        """
        Renders the related object(s) in full.

        A singular association without a related object yields :py:const:`OMITTED`,
        so the key is left out of the output rather than rendered as ``null``.
        Objects that are already being rendered further up the stack are never
        rendered again.
        """
        related = self.fetch_related()
        if not self.reflection.is_collection():
            if related is None:
                return OMITTED
            if self.render_ctx.is_visiting(related):
                logger.debug(
                    "association (%s) of %s: %r is on the render stack; omitted",
                    self.reflection.name,
                    self.reflection.source_name,
                    related,
                )
                return OMITTED
            return self._render(related)

        retval: typing.List[typing.Any] = []
        if related is None:
            return retval
        for n in self._paginate(related):
            if self.render_ctx.is_visiting(n):
                logger.debug(
                    "association (%s) of %s: %r is on the render stack; skipped",
                    self.reflection.name,
                    self.reflection.source_name,
                    n,
                )
                continue
            retval.append(self._render(n))
        return retval

    def represent_ids(self) -> typing.Any:
        """
        Renders the identifier(s) of the related object(s).  Page overrides are
        ignored: a collection always yields the identifiers of every element.
        """
        related = self.fetch_related()
        identity_resolver = self.render_ctx.identity_resolver
        if not self.reflection.is_collection():
            if related is None:
                return None
            return identity_resolver.get_identity(related)
        if related is None:
            return []
        return [identity_resolver.get_identity(n) for n in related]

    def __init__(
        self,
        reflection: Reflection,
        native: typing.Any,
        user_options: UserOptions,
        render_ctx: RenderContext,
    ):
        self.reflection = reflection
        self.native = native
        self.user_options = user_options
        self.render_ctx = render_ctx

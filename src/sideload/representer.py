"""
:py:mod:`sideload.representer` contains the representer base classes and the
declaration DSL for sideloaded associations.

Synopsis
--------

.. code-block:: python

   from sideload.context import UserOptions
   from sideload.representer import Property, Representer

   class CommentRepresenter(Representer):
       id = Property()
       body = Property()

       class Meta:
           entity = Comment

   class PostRepresenter(Representer):
       id = Property()
       title = Property()

       class Meta:
           entity = Post

   PostRepresenter.belongs_to("author", representer=lambda: AuthorRepresenter, expose_id=True)
   PostRepresenter.has_many("comments", expose_id=True)

   PostRepresenter(post).to_dict(UserOptions.from_query({"include": "comments"}))

"""
import dataclasses
import logging
import typing

from .config import Config
from .context import RenderContext, UserOptions
from .exceptions import InvalidDeclarationError
from .fields import FieldDescriptor, Property
from .installer import PropertyInstaller
from .reflection import Accessor, AssociationKind, Condition, Reflection, RepresenterSpec
from .registry import (
    AssociationRegistry,
    RepresenterFactory,
    RepresenterRegistry,
    default_registry,
)
from .renderer import JSONRenderer
from .utils import OMITTED, UNSPECIFIED, UnspecifiedType

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Meta:
    entity: typing.Optional[type] = None
    name: typing.Optional[str] = None
    registry: typing.Optional[RepresenterRegistry] = None


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknown = set(attrs) - {f.name for f in dataclasses.fields(Meta)}
    if unknown:
        raise InvalidDeclarationError(f"unknown Meta options: {', '.join(sorted(unknown))}")
    return Meta(**attrs)


def _replace_field(
    fields: typing.List[FieldDescriptor], new_field: FieldDescriptor, owner_name: str
) -> None:
    for i, field in enumerate(fields):
        if field.key == new_field.key:
            if field.owner is not None:
                raise InvalidDeclarationError(
                    f"property {new_field.key} of {owner_name} conflicts with "
                    f"association ({field.owner})"
                )
            fields[i] = new_field
            return
    fields.append(new_field)


class RepresenterType(type):
    def __new__(mcs, name, bases, attrs):
        fields: typing.List[FieldDescriptor] = []
        associations = AssociationRegistry()
        for base in bases:
            if isinstance(base, RepresenterType):
                # an association reached through several bases is taken from the first one
                for field in base._fields:
                    if field.owner is not None and field.owner in associations:
                        continue
                    _replace_field(fields, field, name)
                for reflection in base._associations.values():
                    if reflection.name not in associations:
                        associations.add(reflection)

        for k, v in list(attrs.items()):
            if isinstance(v, Property):
                _replace_field(fields, v.build_field(k), name)
                del attrs[k]

        cls = super().__new__(mcs, name, bases, attrs)
        cls._fields = fields
        cls._associations = associations

        meta = attrs.get("Meta")
        if meta is not None:
            m = handle_meta(meta)
            if m.entity is not None or m.name is not None:
                registry = default_registry if m.registry is None else m.registry
                registry.register(cls, class_=m.entity, name=m.name)
        return cls


class Representer(metaclass=RepresenterType):
    """
    A :py:class:`Representer` renders a single native object into an ordered ``dict``
    by walking its field list.  Plain fields are declared as :py:class:`Property` class
    attributes, associations through :py:meth:`association` and its shortcuts.
    """

    _fields: typing.ClassVar[typing.List[FieldDescriptor]]
    _associations: typing.ClassVar[AssociationRegistry]
    _installer: typing.ClassVar[PropertyInstaller] = PropertyInstaller()

    represented: typing.Any

    @classmethod
    def fields(cls) -> typing.Sequence[FieldDescriptor]:
        return tuple(cls._fields)

    @classmethod
    def associations(cls) -> typing.Mapping[str, Reflection]:
        return cls._associations

    @classmethod
    def add_property(cls, name: str, *args, **kwargs) -> FieldDescriptor:
        """
        Adds a plain field after the class has been created.  Takes the same
        arguments as :py:class:`Property`.
        """
        field = Property(*args, **kwargs).build_field(name)
        fields = list(cls._fields)
        _replace_field(fields, field, cls.__name__)
        cls._fields = fields
        return field

    @classmethod
    def association(
        cls,
        name: str,
        kind: typing.Union[AssociationKind, str] = AssociationKind.BELONGS_TO,
        *,
        conditions: typing.Union[Condition, typing.Iterable[Condition]] = (),
        expose_id: bool = False,
        accessor: typing.Optional[Accessor] = None,
        representer: typing.Union[RepresenterSpec, typing.Callable[[], type]] = None,
        per_page: typing.Union[UnspecifiedType, int] = UNSPECIFIED,
        id_key: typing.Optional[str] = None,
    ) -> Reflection:
        """
        Configures sideloading for the given association.

        Declaring the same name again replaces the previous declaration along with
        the fields it installed.

        :param str name: the association's name.
        :param kind: an :py:class:`AssociationKind` or its string value.
        :param conditions: a predicate or predicates ``(representer, user_options) -> bool``
                           that must all hold for the association to be rendered at all.
        :param bool expose_id: render the identifier field when not included.
        :param accessor: the attribute name or callable to read related objects with.
        :param representer: the representer for related objects; a class, a registered name,
                            or a zero-argument callable returning a class.
        :param int per_page: page size for nested pagination.
        :param str id_key: overrides the key of the identifier field.
        :return: the stored :py:class:`Reflection`.
        :raises InvalidDeclarationError: if the declaration is invalid.
        """
        reflection = Reflection(
            name=name,
            kind=typing.cast(AssociationKind, kind),
            conditions=typing.cast(typing.Tuple[Condition, ...], conditions),
            expose_id=bool(expose_id),
            accessor=accessor,
            representer=typing.cast(RepresenterSpec, representer),
            per_page=per_page,
            source=cls,
            id_key=id_key,
        )
        fields = cls._installer(cls._fields, reflection)
        associations = cls._associations.copy()
        prev = associations.add(reflection)
        cls._fields = fields
        cls._associations = associations
        if prev is not None:
            logger.debug("association (%s) of %s redeclared", name, cls.__name__)
        else:
            logger.debug(
                "association (%s) of %s declared as %s", name, cls.__name__, reflection.kind.value
            )
        return reflection

    @classmethod
    def belongs_to(cls, name: str, **options) -> Reflection:
        """
        Shortcut for ``association(name, AssociationKind.BELONGS_TO, **options)``.
        """
        return cls.association(name, **{**options, "kind": AssociationKind.BELONGS_TO})

    @classmethod
    def has_one(cls, name: str, **options) -> Reflection:
        """
        Shortcut for ``association(name, AssociationKind.HAS_ONE, **options)``.
        """
        return cls.association(name, **{**options, "kind": AssociationKind.HAS_ONE})

    @classmethod
    def has_many(cls, name: str, **options) -> Reflection:
        """
        Shortcut for ``association(name, AssociationKind.HAS_MANY, **options)``.
        """
        return cls.association(name, **{**options, "kind": AssociationKind.HAS_MANY})

    @classmethod
    def has_and_belongs_to_many(cls, name: str, **options) -> Reflection:
        """
        Shortcut for ``association(name, AssociationKind.HAS_AND_BELONGS_TO_MANY, **options)``.
        """
        return cls.association(
            name, **{**options, "kind": AssociationKind.HAS_AND_BELONGS_TO_MANY}
        )

    def serialize(
        self, user_options: UserOptions, render_ctx: RenderContext
    ) -> typing.Dict[str, typing.Any]:
        retval: typing.Dict[str, typing.Any] = {}
        with render_ctx.visiting(self.represented):
            for field in self._fields:
                if not field.is_active(self, user_options):
                    continue
                value = field.get(self, user_options, render_ctx)
                if value is OMITTED:
                    continue
                retval[field.key] = value
        return retval

    def to_dict(
        self,
        user_options: typing.Optional[UserOptions] = None,
        *,
        registry: typing.Optional[RepresenterRegistry] = None,
        config: typing.Optional[Config] = None,
        render_ctx: typing.Optional[RenderContext] = None,
    ) -> typing.Dict[str, typing.Any]:
        if render_ctx is None:
            render_ctx = RenderContext(registry=registry, config=config)
        return self.serialize(UserOptions() if user_options is None else user_options, render_ctx)

    def to_json(
        self,
        user_options: typing.Optional[UserOptions] = None,
        *,
        renderer: typing.Optional[JSONRenderer] = None,
        **kwargs,
    ) -> str:
        renderer = JSONRenderer() if renderer is None else renderer
        return renderer.dumps(self.to_dict(user_options, **kwargs))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.represented!r})"

    def __init__(self, represented: typing.Any):
        self.represented = represented


class CollectionRepresenter:
    """
    Renders a top-level listing: one page of native objects, each through its
    item representer.  The page is taken from :py:attr:`UserOptions.page`
    (defaulting to the first one) and sized by :py:attr:`Config.default_page_size`.
    """

    item_representer: typing.ClassVar[typing.Optional[RepresenterFactory]] = None
    natives: typing.Iterable[typing.Any]
    paginate: bool
    _item_representer: typing.Optional[RepresenterFactory]

    def serialize(
        self, user_options: UserOptions, render_ctx: RenderContext
    ) -> typing.List[typing.Dict[str, typing.Any]]:
        natives = self.natives
        if self.paginate:
            natives = render_ctx.paginator.paginate(
                natives,
                1 if user_options.page is None else user_options.page,
                render_ctx.config.default_page_size,
            )
        retval = []
        for native in natives:
            representer = self._item_representer
            if representer is None:
                representer = render_ctx.registry.query_by_native(native)
            retval.append(representer(native).serialize(user_options, render_ctx))
        return retval

    def to_list(
        self,
        user_options: typing.Optional[UserOptions] = None,
        *,
        registry: typing.Optional[RepresenterRegistry] = None,
        config: typing.Optional[Config] = None,
        render_ctx: typing.Optional[RenderContext] = None,
    ) -> typing.List[typing.Dict[str, typing.Any]]:
        if render_ctx is None:
            render_ctx = RenderContext(registry=registry, config=config)
        return self.serialize(UserOptions() if user_options is None else user_options, render_ctx)

    def to_json(
        self,
        user_options: typing.Optional[UserOptions] = None,
        *,
        renderer: typing.Optional[JSONRenderer] = None,
        **kwargs,
    ) -> str:
        renderer = JSONRenderer() if renderer is None else renderer
        return renderer.dumps(self.to_list(user_options, **kwargs))

    def __init__(
        self,
        natives: typing.Iterable[typing.Any],
        item_representer: typing.Optional[RepresenterFactory] = None,
        paginate: bool = True,
    ):
        self.natives = natives
        self._item_representer = (
            type(self).item_representer if item_representer is None else item_representer
        )
        self.paginate = paginate

import dataclasses
import enum
import typing

import inflect  # type: ignore

from .deferred import Deferred
from .exceptions import ConditionEvaluationError, InvalidDeclarationError
from .utils import UNSPECIFIED, UnspecifiedType

Condition = typing.Callable[[typing.Any, "UserOptions"], bool]
"""
A predicate called with the representer being rendered and the request's
:py:class:`UserOptions`.
"""

Accessor = typing.Union[str, typing.Callable[[typing.Any], typing.Any]]

RepresenterSpec = typing.Union[type, str, Deferred[type], None]

_inflect_engine = inflect.engine()


def singularize(word: str) -> str:
    """
    Returns the singular form of a plural ending in "s"; other words are returned as is.
    """
    if not word.endswith("s"):
        return word
    singular = _inflect_engine.singular_noun(word)
    return word if singular is False else singular


class AssociationKind(enum.Enum):
    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"

    @property
    def is_collection(self) -> bool:
        return self in (AssociationKind.HAS_MANY, AssociationKind.HAS_AND_BELONGS_TO_MANY)

    @classmethod
    def coerce(cls, value: typing.Union["AssociationKind", str]) -> "AssociationKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidDeclarationError(f"invalid association kind: {value!r}") from None


@dataclasses.dataclass(frozen=True)
class Reflection:
    """
    A :py:class:`Reflection` is the declared metadata of one association of a representer.
    It is created once when the association is declared and never changes afterwards.
    """

    name: str
    """
    The name of the association, unique within its representer.
    """

    kind: AssociationKind = AssociationKind.BELONGS_TO

    conditions: typing.Tuple[Condition, ...] = ()
    """
    Predicates that all have to hold for the association to be rendered in either mode.
    """

    expose_id: bool = False
    """
    Set to :py:const:`True` to render the identifier field (see :py:attr:`id_key`) when
    the association is not included.
    """

    accessor: typing.Optional[Accessor] = None
    """
    The attribute name (or a callable) by which related objects are read off the root
    object.  Defaults to :py:attr:`name`.
    """

    representer: RepresenterSpec = None
    """
    The representer for related objects.  When :py:const:`None`, the representer is
    looked up by the related object's type.
    """

    per_page: typing.Union[UnspecifiedType, int] = UNSPECIFIED
    """
    Page size for nested pagination of a collection association.
    """

    source: typing.Optional[type] = None
    """
    The representer class that declared the association.
    """

    id_key: typing.Optional[str] = None
    """
    The output key of the identifier field.  Defaults to ``<name>_id`` for singular
    associations and ``<singular name>_ids`` for collections (``comments`` yields
    ``comment_ids``). Collection names that do not end in "s" are kept as they are
    (``data`` yields ``data_ids``). Singular nouns ending in "s" are singularized
    all the same (``bus`` yields ``bu_ids``), so such associations should give
    ``id_key`` explicitly.
    """

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidDeclarationError(f"invalid association name: {self.name!r}")
        object.__setattr__(self, "kind", AssociationKind.coerce(self.kind))

        conditions = self.conditions
        if callable(conditions):
            conditions = (conditions,)
        conditions = tuple(conditions)
        for condition in conditions:
            if not callable(condition):
                raise InvalidDeclarationError(
                    f"condition of association ({self.name}) is not callable: {condition!r}"
                )
        object.__setattr__(self, "conditions", conditions)

        if self.accessor is None:
            object.__setattr__(self, "accessor", self.name)
        elif not (isinstance(self.accessor, str) or callable(self.accessor)):
            raise InvalidDeclarationError(
                f"accessor of association ({self.name}) must be a str or a callable"
            )

        representer = self.representer
        if (
            representer is not None
            and not isinstance(representer, (type, str, Deferred))
            and callable(representer)
        ):
            object.__setattr__(self, "representer", Deferred(representer))
        elif not (representer is None or isinstance(representer, (type, str, Deferred))):
            raise InvalidDeclarationError(
                f"invalid representer for association ({self.name}): {representer!r}"
            )

        if self.id_key is None:
            if self.kind.is_collection:
                id_key = f"{singularize(self.name)}_ids"
            else:
                id_key = f"{self.name}_id"
            object.__setattr__(self, "id_key", id_key)
        elif not isinstance(self.id_key, str) or not self.id_key:
            raise InvalidDeclarationError(f"invalid id_key for association ({self.name})")

        if self.per_page is not UNSPECIFIED and (
            not isinstance(self.per_page, int)
            or isinstance(self.per_page, bool)
            or self.per_page < 1
        ):
            raise InvalidDeclarationError(
                f"per_page of association ({self.name}) must be a positive integer"
            )

    @property
    def source_name(self) -> str:
        return self.source.__name__ if self.source is not None else "<unbound>"

    def is_collection(self) -> bool:
        return self.kind.is_collection

    def evaluate_conditions(self, ctx: "EvaluationContext") -> bool:
        """
        Returns :py:const:`True` if every condition holds.  Evaluation stops at the
        first condition that does not.

        :param EvaluationContext ctx: the representer being rendered and the request's options.
        :raises ConditionEvaluationError: if a condition raises.
        """
        for condition in self.conditions:
            try:
                result = condition(ctx.context, ctx.user_options)
            except Exception as e:
                raise ConditionEvaluationError(self, condition) from e
            if not result:
                return False
        return True


if typing.TYPE_CHECKING:
    from .context import EvaluationContext, UserOptions  # noqa: E402

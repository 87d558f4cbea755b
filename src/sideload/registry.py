import logging
import typing

from .exceptions import InvalidDeclarationError, RepresenterNotFoundError
from .reflection import Reflection

logger = logging.getLogger(__name__)

RepresenterFactory = typing.Callable[[typing.Any], "Representer"]


class AssociationRegistry(typing.Mapping[str, Reflection]):
    """
    The associations declared on one representer class, keyed by name.
    """

    _reflections: typing.Dict[str, Reflection]

    def __getitem__(self, name: str) -> Reflection:
        return self._reflections[name]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._reflections)

    def __len__(self) -> int:
        return len(self._reflections)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self._reflections)})"

    def add(self, reflection: Reflection) -> typing.Optional[Reflection]:
        """
        Stores the reflection under its name.

        :param Reflection reflection: the reflection to store.
        :return: the reflection previously stored under the same name, if any.
        """
        prev = self._reflections.get(reflection.name)
        self._reflections[reflection.name] = reflection
        return prev

    def copy(self) -> "AssociationRegistry":
        return AssociationRegistry(self._reflections.values())

    def __init__(self, reflections: typing.Iterable[Reflection] = ()):
        self._reflections = {}
        for reflection in reflections:
            self.add(reflection)


class RepresenterRegistry:
    """
    Maps native types and string keys to the representers that render them.
    Representers are registered at startup and looked up by key afterwards.
    """

    _by_class: typing.Dict[type, RepresenterFactory]
    _by_name: typing.Dict[str, RepresenterFactory]

    def register(
        self,
        representer: RepresenterFactory,
        class_: typing.Optional[type] = None,
        name: typing.Optional[str] = None,
    ) -> None:
        if class_ is None and name is None:
            raise InvalidDeclarationError("either class_ or name must be given")
        if class_ is not None:
            self._by_class[class_] = representer
        if name is not None:
            self._by_name[name] = representer
        logger.debug("registered %r for class=%r, name=%r", representer, class_, name)

    def query_by_native_class(self, class_: type) -> RepresenterFactory:
        for c in class_.__mro__:
            representer = self._by_class.get(c)
            if representer is not None:
                return representer
        raise RepresenterNotFoundError(class_)

    def query_by_native(self, native: typing.Any) -> RepresenterFactory:
        return self.query_by_native_class(type(native))

    def query_by_name(self, name: str) -> RepresenterFactory:
        try:
            return self._by_name[name]
        except KeyError:
            raise RepresenterNotFoundError(name) from None

    def __init__(self):
        self._by_class = {}
        self._by_name = {}


default_registry = RepresenterRegistry()


if typing.TYPE_CHECKING:
    from .representer import Representer  # noqa: E402

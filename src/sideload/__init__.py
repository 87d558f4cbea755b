from .config import DEFAULT_CONFIG, Config  # noqa
from .context import RenderContext, UserOptions  # noqa
from .exceptions import (  # noqa
    AccessorNotFoundError,
    ConditionEvaluationError,
    ConfigurationError,
    IdentityNotFoundError,
    InvalidDeclarationError,
    InvalidUserOptionsError,
    RenderError,
    RepresenterNotFoundError,
    SideloadException,
)
from .fields import Property  # noqa
from .reflection import AssociationKind, Reflection  # noqa
from .registry import RepresenterRegistry, default_registry  # noqa
from .representer import CollectionRepresenter, Representer  # noqa

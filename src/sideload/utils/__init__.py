from .types import OMITTED, UNSPECIFIED, OmittedType, UnspecifiedType  # noqa
from .typing import maybe_unspecified  # noqa

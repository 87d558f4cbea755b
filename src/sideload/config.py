import dataclasses
import logging
import os
import typing

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30


@dataclasses.dataclass(frozen=True)
class Config:
    """
    Engine-wide settings.  A single instance is usually built at startup and
    handed to every top-level render.
    """

    default_page_size: int = DEFAULT_PAGE_SIZE
    """
    Page size for top-level collection listings, and for nested collections
    whose association does not declare its own ``per_page``.
    """

    include_param: str = "include"
    """
    Name of the query parameter that lists the associations to embed.
    """

    include_separator: str = ","

    page_param: str = "page"
    """
    Name of the query parameter that selects the page of a top-level listing.
    """

    page_param_suffix: str = "_page"
    """
    Suffix that turns an association name into its page parameter (``posts_page``).
    """

    def __post_init__(self):
        if (
            not isinstance(self.default_page_size, int)
            or isinstance(self.default_page_size, bool)
            or self.default_page_size < 1
        ):
            raise ConfigurationError(
                f"default_page_size must be a positive integer: {self.default_page_size!r}"
            )
        for name in ("include_param", "include_separator", "page_param", "page_param_suffix"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} must not be empty")

    @classmethod
    def from_env(
        cls,
        environ: typing.Optional[typing.Mapping[str, str]] = None,
        prefix: str = "SIDELOAD_",
    ) -> "Config":
        if environ is None:
            environ = os.environ
        kwargs: typing.Dict[str, typing.Any] = {}
        for field in dataclasses.fields(cls):
            value = environ.get(prefix + field.name.upper())
            if value is None:
                continue
            if field.type in (int, "int"):
                try:
                    kwargs[field.name] = int(value)
                except ValueError:
                    raise ConfigurationError(
                        f"{prefix}{field.name.upper()} must be an integer: {value!r}"
                    ) from None
            else:
                kwargs[field.name] = value
        logger.debug("configuration loaded from environment: %r", kwargs)
        return cls(**kwargs)


DEFAULT_CONFIG = Config()

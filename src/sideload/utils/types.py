import typing


class SentinelType:
    _singletons: typing.ClassVar[typing.Dict[type, "SentinelType"]] = {}

    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return type(self).__name__[: -len("Type")].upper()

    def __new__(cls) -> "SentinelType":
        singleton = SentinelType._singletons.get(cls)
        if singleton is None:
            SentinelType._singletons[cls] = singleton = object.__new__(cls)
        return singleton


class UnspecifiedType(SentinelType):
    """
    Denotes an option that was not given by the declaring side.
    """


class OmittedType(SentinelType):
    """
    Returned by a field getter when the field must not appear in the output at all.
    """


UNSPECIFIED = typing.cast(UnspecifiedType, UnspecifiedType())
OMITTED = typing.cast(OmittedType, OmittedType())

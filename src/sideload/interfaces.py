"""
This module contains the interfaces the engine consumes from the object layer.
Plain-object defaults live in :py:mod:`sideload.defaults`; storage-aware
implementations live under :py:mod:`sideload.implementations`.

"""
import abc
import typing


class IdentityResolver(metaclass=abc.ABCMeta):
    """
    An :py:class:`IdentityResolver` tells the identifier of a related object.
    It backs the identifier fields of associations.
    """

    @abc.abstractmethod
    def get_identity(self, native: typing.Any) -> typing.Any:
        """
        Retrieves the identity for the native object.

        :param Any native: a related object.
        :return: An implementation-dependent identifier for the object.
        """
        ...  # pragma: nocover


class Paginator(metaclass=abc.ABCMeta):
    """
    A :py:class:`Paginator` cuts one page out of a collection of related objects.
    """

    @abc.abstractmethod
    def paginate(
        self, collection: typing.Iterable[typing.Any], page: int, per_page: int
    ) -> typing.Sequence[typing.Any]:
        """
        Returns the elements of the ``page``-th page, keeping the collection's ordering.

        :param Iterable[Any] collection: the related collection.
        :param int page: a 1-based page number.
        :param int per_page: the number of elements in a full page.
        :return: the elements at offsets ``(page - 1) * per_page`` up to ``page * per_page - 1``.
        """
        ...  # pragma: nocover

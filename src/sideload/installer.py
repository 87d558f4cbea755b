import typing

from .binding import Binding
from .context import EvaluationContext, RenderContext, UserOptions
from .exceptions import InvalidDeclarationError
from .fields import FieldDescriptor
from .reflection import Reflection


class PropertyInstaller:
    """
    Turns a :py:class:`Reflection` into the computed fields that render it.

    Every association gets a full field keyed by its name, active when the
    association is included.  Associations that expose identifiers additionally
    get an identifier field keyed by :py:attr:`Reflection.id_key`, active when
    it is not.  Both are gated by the association's conditions, so at most one of them
    is active for a given render.
    """

    def build_full_field(self, reflection: Reflection) -> FieldDescriptor:
        name = reflection.name

        def is_active(representer: "Representer", user_options: UserOptions) -> bool:
            return user_options.includes(name) and reflection.evaluate_conditions(
                EvaluationContext(context=representer, user_options=user_options)
            )

        def get(
            representer: "Representer", user_options: UserOptions, render_ctx: RenderContext
        ) -> typing.Any:
            return Binding(reflection, representer.represented, user_options, render_ctx).represent()

        return FieldDescriptor(key=name, is_active=is_active, getter=get, owner=name)

    def build_id_field(self, reflection: Reflection) -> FieldDescriptor:
        name = reflection.name

        def is_active(representer: "Representer", user_options: UserOptions) -> bool:
            return not user_options.includes(name) and reflection.evaluate_conditions(
                EvaluationContext(context=representer, user_options=user_options)
            )

        def get(
            representer: "Representer", user_options: UserOptions, render_ctx: RenderContext
        ) -> typing.Any:
            return Binding(
                reflection, representer.represented, user_options, render_ctx
            ).represent_ids()

        return FieldDescriptor(key=reflection.id_key, is_active=is_active, getter=get, owner=name)

    def build_fields(self, reflection: Reflection) -> typing.List[FieldDescriptor]:
        fields = [self.build_full_field(reflection)]
        if reflection.expose_id:
            fields.append(self.build_id_field(reflection))
        return fields

    def __call__(
        self, fields: typing.Sequence[FieldDescriptor], reflection: Reflection
    ) -> typing.List[FieldDescriptor]:
        """
        Returns a new field list in which the fields previously installed for
        ``reflection.name`` are replaced by the fields for ``reflection``.
        The replacement takes the position of the first replaced field.

        :raises InvalidDeclarationError: if a new key is already taken by another field.
        """
        new_fields = self.build_fields(reflection)
        retval: typing.List[FieldDescriptor] = []
        position: typing.Optional[int] = None
        for field in fields:
            if field.owner == reflection.name:
                if position is None:
                    position = len(retval)
                continue
            for new_field in new_fields:
                if field.key == new_field.key:
                    raise InvalidDeclarationError(
                        f"association ({reflection.name}) of {reflection.source_name} "
                        f"conflicts with field {field.key}"
                    )
            retval.append(field)
        if position is None:
            position = len(retval)
        retval[position:position] = new_fields
        return retval


if typing.TYPE_CHECKING:
    from .representer import Representer  # noqa: E402

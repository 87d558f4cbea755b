import pytest

from ..context import EvaluationContext, UserOptions
from ..deferred import Deferred
from ..exceptions import ConditionEvaluationError, InvalidDeclarationError
from ..reflection import AssociationKind, Reflection, singularize
from ..utils import UNSPECIFIED


class TestAssociationKind:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            (AssociationKind.BELONGS_TO, False),
            (AssociationKind.HAS_ONE, False),
            (AssociationKind.HAS_MANY, True),
            (AssociationKind.HAS_AND_BELONGS_TO_MANY, True),
        ],
    )
    def test_is_collection(self, kind, expected):
        assert kind.is_collection is expected

    def test_coerce(self):
        assert AssociationKind.coerce("has_one") is AssociationKind.HAS_ONE
        assert AssociationKind.coerce(AssociationKind.HAS_MANY) is AssociationKind.HAS_MANY

    @pytest.mark.parametrize("value", ["HAS_MANY", "has_few", None, 1])
    def test_coerce_invalid(self, value):
        with pytest.raises(InvalidDeclarationError):
            AssociationKind.coerce(value)


class TestReflection:
    def test_defaults(self):
        reflection = Reflection(name="author")
        assert reflection.kind is AssociationKind.BELONGS_TO
        assert reflection.conditions == ()
        assert reflection.expose_id is False
        assert reflection.accessor == "author"
        assert reflection.representer is None
        assert reflection.per_page is UNSPECIFIED
        assert reflection.source_name == "<unbound>"

    @pytest.mark.parametrize(
        "name, kind, expected",
        [
            ("author", AssociationKind.BELONGS_TO, "author_id"),
            ("profile", AssociationKind.HAS_ONE, "profile_id"),
            ("comments", AssociationKind.HAS_MANY, "comment_ids"),
            ("categories", AssociationKind.HAS_MANY, "category_ids"),
            ("tags", AssociationKind.HAS_AND_BELONGS_TO_MANY, "tag_ids"),
            ("data", AssociationKind.HAS_MANY, "data_ids"),
            ("people", AssociationKind.HAS_MANY, "people_ids"),
        ],
    )
    def test_id_key(self, name, kind, expected):
        assert Reflection(name=name, kind=kind).id_key == expected

    def test_id_key_override(self):
        reflection = Reflection(name="comments", kind=AssociationKind.HAS_MANY, id_key="cids")
        assert reflection.id_key == "cids"
        with pytest.raises(InvalidDeclarationError):
            Reflection(name="comments", kind=AssociationKind.HAS_MANY, id_key="")

    def test_singularize(self):
        assert singularize("posts") == "post"
        assert singularize("post") == "post"
        assert singularize("data") == "data"

    def test_single_condition(self):
        def condition(ctx, opts):
            return True

        assert Reflection(name="author", conditions=condition).conditions == (condition,)

    @pytest.mark.parametrize("name", ["", None, 1])
    def test_invalid_name(self, name):
        with pytest.raises(InvalidDeclarationError):
            Reflection(name=name)

    def test_invalid_condition(self):
        with pytest.raises(InvalidDeclarationError):
            Reflection(name="author", conditions=("not callable",))

    def test_invalid_accessor(self):
        with pytest.raises(InvalidDeclarationError):
            Reflection(name="author", accessor=1)

    def test_representer_forward_reference(self):
        class Target:
            pass

        reflection = Reflection(name="author", representer=lambda: Target)
        assert isinstance(reflection.representer, Deferred)
        assert not reflection.representer.resolved
        assert reflection.representer() is Target
        assert reflection.representer.resolved

        assert Reflection(name="author", representer=Target).representer is Target
        assert Reflection(name="author", representer="author").representer == "author"

    def test_invalid_representer(self):
        with pytest.raises(InvalidDeclarationError):
            Reflection(name="author", representer=1)


class TestEvaluateConditions:
    @pytest.fixture
    def ctx(self):
        return EvaluationContext(context=object(), user_options=UserOptions(current_user="alice"))

    def test_vacuous_truth(self, ctx):
        assert Reflection(name="author").evaluate_conditions(ctx)

    def test_all_must_hold(self, ctx):
        reflection = Reflection(
            name="author",
            conditions=(
                lambda c, opts: True,
                lambda c, opts: opts.current_user == "bob",
            ),
        )
        assert not reflection.evaluate_conditions(ctx)

    def test_short_circuit(self, ctx):
        calls = []

        def record(result):
            def condition(c, opts):
                calls.append(result)
                return result

            return condition

        reflection = Reflection(name="author", conditions=(record(True), record(False), record(True)))
        assert not reflection.evaluate_conditions(ctx)
        assert calls == [True, False]

    def test_condition_receives_context(self, ctx):
        seen = []
        reflection = Reflection(
            name="author", conditions=lambda c, opts: seen.append((c, opts)) is None
        )
        assert reflection.evaluate_conditions(ctx)
        assert seen == [(ctx.context, ctx.user_options)]

    def test_raising_condition(self, ctx):
        def condition(c, opts):
            raise KeyError("boom")

        reflection = Reflection(name="author", conditions=condition)
        with pytest.raises(ConditionEvaluationError) as excinfo:
            reflection.evaluate_conditions(ctx)
        assert isinstance(excinfo.value.__cause__, KeyError)
        assert excinfo.value.condition is condition
        assert "author" in str(excinfo.value)

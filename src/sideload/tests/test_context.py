import decimal

import pytest

from ..config import DEFAULT_PAGE_SIZE, Config
from ..context import RenderContext, UserOptions
from ..defaults import DefaultIdentityResolverImpl, DefaultPaginatorImpl
from ..exceptions import ConfigurationError, InvalidUserOptionsError
from ..registry import RepresenterRegistry, default_registry


class TestUserOptions:
    def test_defaults(self):
        user_options = UserOptions()
        assert user_options.include == frozenset()
        assert dict(user_options.pages) == {}
        assert user_options.page is None
        assert user_options.current_user is None

    @pytest.mark.parametrize(
        "include, expected",
        [
            (None, set()),
            ("", set()),
            ("posts", {"posts"}),
            ("posts,comments", {"posts", "comments"}),
            (" posts , comments ,", {"posts", "comments"}),
            (["posts", "posts"], {"posts"}),
            (("posts,author", "comments"), {"posts", "author", "comments"}),
            (frozenset(["posts"]), {"posts"}),
        ],
    )
    def test_include(self, include, expected):
        user_options = UserOptions(include=include)
        assert user_options.include == frozenset(expected)
        for name in expected:
            assert user_options.includes(name)

    def test_include_is_case_sensitive(self):
        assert not UserOptions(include="Posts").includes("posts")

    def test_include_separator(self):
        user_options = UserOptions(include="posts;comments,author", include_separator=";")
        assert user_options.include == frozenset(["posts", "comments,author"])
        assert UserOptions(include=["posts;comments"]).include == frozenset(["posts;comments"])

    def test_include_with_non_string(self):
        with pytest.raises(InvalidUserOptionsError):
            UserOptions(include=[1])

    def test_pages(self):
        user_options = UserOptions(pages={"posts": "2", "comments": 3})
        assert user_options.page_for("posts") == 2
        assert user_options.page_for("comments") == 3
        assert user_options.page_for("tags") is None

    def test_pages_are_read_only(self):
        user_options = UserOptions(pages={"posts": 2})
        with pytest.raises(TypeError):
            user_options.pages["posts"] = 3  # type: ignore

    @pytest.mark.parametrize("page", [0, -1, "x", "1.5", True, None, 2.7, 2.0, decimal.Decimal("2")])
    def test_invalid_page(self, page):
        with pytest.raises(InvalidUserOptionsError) as excinfo:
            UserOptions(pages={"posts": page})
        assert excinfo.value.parameter == "posts_page"

    def test_top_level_page(self):
        assert UserOptions(page="4").page == 4
        with pytest.raises(InvalidUserOptionsError):
            UserOptions(page=0)


class TestUserOptionsFromQuery:
    def test_from_query(self):
        user_options = UserOptions.from_query(
            {
                "include": "posts,comments",
                "posts_page": "2",
                "page": "3",
                "q": "ignored",
            },
            current_user="alice",
        )
        assert user_options.include == frozenset(["posts", "comments"])
        assert user_options.page_for("posts") == 2
        assert user_options.page == 3
        assert user_options.current_user == "alice"

    def test_multi_valued_parameters(self):
        user_options = UserOptions.from_query(
            {"include": ["posts", "author,comments"], "posts_page": ["1", "2"]}
        )
        assert user_options.include == frozenset(["posts", "author", "comments"])
        assert user_options.page_for("posts") == 2

    def test_empty_values(self):
        user_options = UserOptions.from_query({"include": "", "page": "", "posts_page": ""})
        assert user_options.include == frozenset()
        assert user_options.page is None
        assert user_options.page_for("posts") is None

    def test_invalid_page(self):
        with pytest.raises(InvalidUserOptionsError) as excinfo:
            UserOptions.from_query({"posts_page": "zero"})
        assert excinfo.value.parameter == "posts_page"
        assert "posts_page" in str(excinfo.value)

    def test_custom_parameter_names(self):
        config = Config(
            include_param="with", include_separator=";", page_param="p", page_param_suffix="-p"
        )
        user_options = UserOptions.from_query(
            {"with": "posts;comments,author", "posts-p": "2", "p": "5", "include": "author"}, config
        )
        assert user_options.include == frozenset(["posts", "comments,author"])
        assert user_options.page_for("posts") == 2
        assert user_options.page == 5


class TestRenderContext:
    def test_defaults(self):
        ctx = RenderContext()
        assert ctx.registry is default_registry
        assert ctx.config.default_page_size == DEFAULT_PAGE_SIZE
        assert isinstance(ctx.identity_resolver, DefaultIdentityResolverImpl)
        assert isinstance(ctx.paginator, DefaultPaginatorImpl)
        assert ctx.depth == 0

    def test_visiting(self):
        ctx = RenderContext(registry=RepresenterRegistry())
        a, b = object(), object()
        with ctx.visiting(a):
            assert ctx.is_visiting(a)
            assert not ctx.is_visiting(b)
            with ctx.visiting(b):
                assert ctx.depth == 2
                assert ctx.is_visiting(b)
            assert not ctx.is_visiting(b)
        assert ctx.depth == 0

    def test_visiting_unwinds_on_error(self):
        ctx = RenderContext()
        a = object()
        with pytest.raises(ValueError):
            with ctx.visiting(a):
                raise ValueError()
        assert not ctx.is_visiting(a)
        assert ctx.depth == 0


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.default_page_size == 30
        assert config.include_param == "include"
        assert config.include_separator == ","
        assert config.page_param == "page"
        assert config.page_param_suffix == "_page"

    @pytest.mark.parametrize("default_page_size", [0, -5, "30", True])
    def test_invalid_page_size(self, default_page_size):
        with pytest.raises(ConfigurationError):
            Config(default_page_size=default_page_size)

    def test_empty_parameter_name(self):
        with pytest.raises(ConfigurationError):
            Config(include_param="")

    def test_from_env(self):
        config = Config.from_env(
            {
                "SIDELOAD_DEFAULT_PAGE_SIZE": "50",
                "SIDELOAD_INCLUDE_PARAM": "with",
                "OTHER_PAGE_PARAM": "p",
            }
        )
        assert config.default_page_size == 50
        assert config.include_param == "with"
        assert config.page_param == "page"

    def test_from_env_with_prefix(self):
        config = Config.from_env({"APP_PAGE_PARAM": "p"}, prefix="APP_")
        assert config.page_param == "p"

    def test_from_os_environ(self, monkeypatch):
        monkeypatch.setenv("SIDELOAD_DEFAULT_PAGE_SIZE", "7")
        assert Config.from_env().default_page_size == 7

    @pytest.mark.parametrize("value", ["many", "0"])
    def test_from_env_invalid(self, value):
        with pytest.raises(ConfigurationError):
            Config.from_env({"SIDELOAD_DEFAULT_PAGE_SIZE": value})

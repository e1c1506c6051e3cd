"""
Tests for the require filter: transient package handlers and script calls.
"""

import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from varfilter.config import ConfigStore
from varfilter.directories import GLOBALDIR_ENV, Directories
from varfilter.exceptions import UndefinedVariablesError
from varfilter.filter import ExecutionContext, Literal, TableHandler
from varfilter.require import Package, RequireFilter, SandboxScript, build_require_filter
from varfilter.require.action import COMMON_HANDLER, PACKAGE_HANDLER


@pytest.fixture
def require_filter(tmp_path):
    config = ConfigStore({"mode": "release"})
    return build_require_filter(config, Directories(project_dir=tmp_path))


class TestHandle:
    """One-shot substitution with a transient package handler."""

    def test_expands_package_and_common_variables(self, require_filter):
        package = Package("zlib", "1.2.13", Path("/b"))
        result = require_filter.handle("$(version)-$(mode) in $(buildir)", package)
        assert result == f"1.2.13-release in {Path('/b/zlib/1.2.13')}"

    def test_package_handler_removed_after_call(self, require_filter):
        require_filter.handle("$(version)", Package("zlib", "1.0"))
        assert PACKAGE_HANDLER not in require_filter.filter.registry
        assert require_filter.filter.registry.names() == [COMMON_HANDLER]
        assert require_filter.filter.expand("$(version)") == "$(version)"

    def test_package_handler_removed_on_error(self, require_filter):
        with pytest.raises(UndefinedVariablesError):
            require_filter.handle("$(missing)", Package("zlib", "1.0"), strict=True)
        assert PACKAGE_HANDLER not in require_filter.filter.registry

    def test_sequential_packages_do_not_mix(self, require_filter):
        a = Package("a", "1.0")
        b = Package("b", "2.0")
        assert require_filter.handle("$(version)", a) == "1.0"
        assert require_filter.handle("$(version)", b) == "2.0"
        assert require_filter.handle("$(version)", a) == "1.0"

    def test_concurrent_handles_do_not_cross_contaminate(self, require_filter):
        """Each caller sees only its own package's version."""
        results = {}
        errors = []
        barrier = threading.Barrier(8)

        def worker(index):
            try:
                package = Package(f"p{index}", f"{index}.0")
                barrier.wait()
                for _ in range(50):
                    value = require_filter.handle("$(version)", package)
                    if value != f"{index}.0":
                        results[index] = value
                        return
                results[index] = value
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert results == {i: f"{i}.0" for i in range(8)}

    def test_globaldir_through_common_handler(self, require_filter):
        with patch.dict(os.environ, {GLOBALDIR_ENV: "/home/u/.config/tool"}):
            assert require_filter.handle("root=${globaldir}", Package("x")) == "root=/home/u/.config/tool"


class TestCall:
    """Running a script with the shared handlers installed on its context."""

    def test_script_sees_shared_and_package_handlers(self, require_filter):
        context = ExecutionContext("on_install", handlers={"own": TableHandler({"mode": Literal("debug")})})

        def on_install(package):
            return context.filter.expand("$(mode) $(version)")

        script = SandboxScript(on_install, context)
        result = require_filter.call(script, Package("zlib", "1.2"))

        assert result == "release 1.2"
        assert context.filter.expand("$(mode) $(version)") == "debug $(version)"

    def test_restores_script_handlers_when_script_raises(self, require_filter):
        context = ExecutionContext("on_install", handlers={"own": TableHandler({})})
        before = dict(context.get_handlers())

        def on_install(package):
            raise RuntimeError(f"install of {package.name} failed")

        with pytest.raises(RuntimeError, match="install of zlib failed"):
            require_filter.call(SandboxScript(on_install, context), Package("zlib", "1.2"))

        assert dict(context.get_handlers()) == before

    def test_does_not_touch_shared_handlers(self, require_filter):
        shared_before = dict(require_filter.filter.handlers())

        def on_install(package):
            script.context.filter.register("temp", TableHandler({}))

        script = SandboxScript(on_install)
        require_filter.call(script, Package("zlib"))

        assert dict(require_filter.filter.handlers()) == shared_before
        assert dict(script.context.get_handlers()) == {}

    def test_nested_calls_bind_their_own_package(self, require_filter):
        outer_ctx = ExecutionContext("outer")
        inner_ctx = ExecutionContext("inner")
        seen = []

        def inner(package):
            seen.append(inner_ctx.filter.expand("inner=$(version)"))

        def outer(package):
            seen.append(outer_ctx.filter.expand("outer=$(version)"))
            require_filter.call(SandboxScript(inner, inner_ctx), Package("dep", "0.1"))
            seen.append(outer_ctx.filter.expand("outer=$(version)"))

        require_filter.call(SandboxScript(outer, outer_ctx), Package("app", "2.0"))
        assert seen == ["outer=2.0", "inner=0.1", "outer=2.0"]


def test_sandbox_script_default_context_named_after_function():
    def on_load(package):
        return package

    script = SandboxScript(on_load)
    assert script.context.name == "on_load"
    assert script("x") == "x"


def test_require_filter_wraps_given_filter():
    from varfilter.filter import Filter

    engine = Filter()
    assert RequireFilter(engine).filter is engine


class TestPackagePrecedence:
    """Package variables win over config keys with the same name."""

    @pytest.fixture
    def shadowing_filter(self, tmp_path):
        config = ConfigStore({"buildir": "build", "version": "9.9", "mode": "release"})
        return build_require_filter(config, Directories(project_dir=tmp_path))

    def test_handle_prefers_package(self, shadowing_filter):
        package = Package("zlib", "1.0", Path("/b"))
        result = shadowing_filter.handle("$(version) $(buildir) $(mode)", package)
        assert result == f"1.0 {Path('/b/zlib/1.0')} release"

    def test_handle_restores_shared_order(self, shadowing_filter):
        shadowing_filter.handle("$(version)", Package("zlib", "1.0"))
        assert shadowing_filter.filter.registry.names() == [COMMON_HANDLER]
        assert shadowing_filter.filter.expand("$(version)") == "9.9"

    def test_call_prefers_package(self, shadowing_filter):
        context = ExecutionContext("on_install")

        def on_install(package):
            return context.filter.expand("$(version) $(buildir)")

        result = shadowing_filter.call(SandboxScript(on_install, context), Package("zlib", "1.0", Path("/b")))
        assert result == f"1.0 {Path('/b/zlib/1.0')}"


class TestScriptDir:
    """$(scriptdir) inside a script resolves to the script's own directory."""

    def test_call_uses_context_scriptdir(self, require_filter):
        context = ExecutionContext("on_install", scriptdir=Path("/pkgs/zlib"))
        script = SandboxScript(lambda package: context.filter.expand("$(scriptdir)"), context)

        assert require_filter.call(script, Package("zlib", "1.0")) == str(Path("/pkgs/zlib"))
        assert dict(context.get_handlers()) == {}

    def test_call_without_scriptdir_falls_back_to_common(self, require_filter):
        context = ExecutionContext("on_install")
        script = SandboxScript(lambda package: context.filter.expand("$(scriptdir)"), context)

        assert require_filter.call(script, Package("zlib", "1.0")) == os.getcwd()

    def test_scriptdir_not_visible_to_shared_filter(self, require_filter):
        context = ExecutionContext("on_install", scriptdir=Path("/pkgs/zlib"))
        require_filter.call(SandboxScript(lambda package: None, context), Package("zlib"))
        assert require_filter.filter.expand("$(scriptdir)") == os.getcwd()

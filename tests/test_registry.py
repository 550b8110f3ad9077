import pytest

from gitle.errors import InvalidUrlError
from gitle.model import UpdatePolicy, github, https
from gitle.registry import DependencyRegistry


@pytest.mark.short
def test_keeps_registration_order():
    registry = DependencyRegistry()
    registry.add("https://github.com/CodeMC/API")
    registry.add(github("gmitch215/gitle"))
    registry.add("https://example.com/a/b")

    assert registry.repositories == [
        "https://github.com/CodeMC/API.git",
        "https://github.com/gmitch215/gitle.git",
        "https://example.com/a/b.git",
    ]


@pytest.mark.short
def test_deduplicates_by_url():
    registry = DependencyRegistry()
    first = registry.add(github("CodeMC/API"))
    again = registry.add("https://github.com/CodeMC/API.git")

    assert again is first
    assert len(registry) == 1


@pytest.mark.short
def test_string_options():
    registry = DependencyRegistry()
    dep = registry.add("github.com/a/b", checkout="v1", update_policy="always")
    assert dep.checkout == "v1"
    assert dep.update_policy is UpdatePolicy.ALWAYS


@pytest.mark.short
def test_add_all_and_membership():
    registry = DependencyRegistry()
    registry.add_all("github.com/a/b", https("example.com/c/d"))

    assert github("a/b") in registry
    assert "https://example.com/c/d.git" in registry
    assert github("x/y") not in registry
    assert [d.repo_name for d in registry] == ["b", "d"]


@pytest.mark.short
def test_dependencies_is_a_copy():
    registry = DependencyRegistry()
    registry.add("github.com/a/b")
    registry.dependencies.clear()
    assert len(registry) == 1


@pytest.mark.short
def test_rejects_invalid():
    registry = DependencyRegistry()
    with pytest.raises(InvalidUrlError):
        registry.add("nohost")
    with pytest.raises(TypeError):
        registry.add(42)
    assert len(registry) == 0

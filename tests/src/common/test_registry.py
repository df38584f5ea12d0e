"""Tests for the generic registry."""
from contractdesk.shared.registry import Registry


def test_registry_register_and_get_case_insensitive():
    reg: Registry[int] = Registry("numbers")
    reg.register("One", 1)
    assert reg.get("one") == 1
    assert reg.get(" ONE ") == 1
    assert reg.get("two") is None


def test_registry_overwrite_and_names():
    reg: Registry[str] = Registry()
    reg.register("b", "x")
    reg.register("a", "y")
    reg.register("b", "z")
    assert reg.names() == ["a", "b"]
    assert reg.get("b") == "z"

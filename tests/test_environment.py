import pytest

from minishell.environment import (
    Environment,
    compare_entries,
    format_export,
    get_key,
    has_value,
)


@pytest.fixture
def env():
    return Environment(["PATH=/bin:/usr/bin", "HOME=/home/user", "PATHEXT=x", "EMPTY="])


def test_get_key():
    assert get_key("HOME=/home/user") == "HOME"
    assert get_key("FLAG") == "FLAG"
    assert get_key("A=b=c") == "A"


def test_has_value():
    assert has_value("A=") is True
    assert has_value("A=1") is True
    assert has_value("A") is False


def test_get_exact_key(env):
    assert env.get("PATH") == "/bin:/usr/bin"
    assert env.get("PATHEXT") == "x"
    assert env.get("PAT") is None
    assert env.get("EMPTY") == ""


def test_get_ignores_entry_without_value():
    assert Environment(["FLAG"]).get("FLAG") is None


def test_set_replaces_existing(env):
    env.set("HOME=/tmp")
    assert env.get("HOME") == "/tmp"
    assert len(env) == 4
    assert list(env)[1] == "HOME=/tmp"


def test_set_appends_new(env):
    env.set("NEW=value")
    assert list(env)[-1] == "NEW=value"
    assert env.get("NEW") == "value"


def test_set_prefix_key_does_not_clobber(env):
    env.set("PATH=/opt")
    assert env.get("PATHEXT") == "x"
    assert env.get("PATH") == "/opt"


def test_set_without_value_replaces_entry(env):
    env.set("HOME")
    assert env.get("HOME") is None
    assert env.has_key("HOME")


def test_has_key(env):
    assert env.has_key("HOME")
    assert env.has_key("HOME=/elsewhere")
    assert not env.has_key("HOM")


def test_unset(env):
    assert env.unset("PATH") is True
    assert env.get("PATH") is None
    assert env.get("PATHEXT") == "x"
    assert env.unset("PATH") is False
    assert len(env) == 3


def test_from_mapping_roundtrip():
    mapping = {"A": "1", "B": "two"}
    assert Environment.from_mapping(mapping).as_dict() == mapping


def test_as_dict_skips_valueless_and_keeps_first():
    environment = Environment(["A=1", "FLAG", "A=2"])
    assert environment.as_dict() == {"A": "1"}


def test_constructor_copies_entries():
    entries = ["A=1"]
    environment = Environment(entries)
    environment.set("B=2")
    assert entries == ["A=1"]


def test_sorted_entries(env):
    assert env.sorted_entries() == ["EMPTY=", "HOME=/home/user", "PATH=/bin:/usr/bin", "PATHEXT=x"]
    assert list(env)[0] == "PATH=/bin:/usr/bin"


def test_sorted_entries_is_ordered():
    environment = Environment(["b=1", "a", "B=2", "ab=3", "a=0"])
    result = environment.sorted_entries()
    assert sorted(result) == sorted(list(environment))
    for first, second in zip(result, result[1:]):
        assert compare_entries(first, second) <= 0


def test_compare_entries():
    assert compare_entries("abc", "abc") == 0
    assert compare_entries("ab", "abc") == -1
    assert compare_entries("abc", "ab") == 1
    assert compare_entries(None, "a") == -1
    assert compare_entries("a", None) == 1
    assert compare_entries("abc", "abd") < 0
    assert compare_entries("b", "a") > 0


def test_format_export():
    assert format_export("HOME=/home/user") == 'declare -x HOME="/home/user"'
    assert format_export("EMPTY=") == 'declare -x EMPTY=""'
    assert format_export("FLAG") == "declare -x FLAG"
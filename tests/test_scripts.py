"""Tests for editor query helpers."""

from blockdriver.scripts import (
    CONNECTION_LOCATION,
    CONNECTION_TARGET,
    call_expression,
    script_error,
)


class TestCallExpression:
    def test_encodes_arguments_as_json(self):
        expression = call_expression("function (a, b, c) { return a; }", "x\"y", 3, None)
        assert expression == '(function (a, b, c) { return a; })("x\\"y", 3, null)'

    def test_no_arguments(self):
        assert call_expression("  function () {}\n") == "(function () {})()"

    def test_encodes_connection_payload(self):
        expression = call_expression(
            CONNECTION_LOCATION, "abc", {"kind": "input", "name": "VALUE"}, None
        )
        assert expression.endswith(
            '("abc", {"kind": "input", "name": "VALUE"}, null)'
        )


class TestScriptError:
    def test_success(self):
        assert script_error({"id": "abc"}) is None
        assert script_error([]) is None

    def test_error_payload(self):
        assert script_error({"error": "no block with id q"}) == "no block with id q"

    def test_nothing_returned(self):
        assert script_error(None) == "editor query returned nothing"


def test_connection_scripts_share_resolution():
    """Both connection scripts resolve the mutator workspace the same way."""
    for script in (CONNECTION_LOCATION, CONNECTION_TARGET):
        assert "mutator.getWorkspace()" in script
        assert "getInput(spec.name)" in script

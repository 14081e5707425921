"""Tests for jsondoctor/syntax.py - quoting, literal and punctuation rewrites."""

import json

import pytest

from jsondoctor.actions import Layer
from jsondoctor.engine import normalize, repair_text
from jsondoctor.syntax import LITERALS, SyntaxRewriteEngine


def syntax(runner, text, **options):
    return runner(SyntaxRewriteEngine, text, **options)


def descriptions(actions):
    return [a.description for a in actions]


class TestPythonStyleObject:
    """``{name: 'Alice', active: True,}`` end to end through the core."""

    def test_output(self):
        result = repair_text("{name: 'Alice', active: True,}")
        assert result.text == '{"name": "Alice", "active": true}'

    def test_action_kinds(self):
        result = repair_text("{name: 'Alice', active: True,}")
        assert set(result.descriptions()) == {
            "quoted unquoted key",
            "normalized quotes",
            "normalized literal",
            "removed trailing comma",
        }
        assert all(a.layer is Layer.SYNTAX for a in result.repairs)

    def test_offsets_increase(self):
        result = repair_text("{name: 'Alice', active: True,}")
        offsets = [a.offset for a in result.repairs]
        assert offsets == sorted(offsets)


class TestQuoting:
    """String delimiters become double quotes."""

    def test_single_quotes(self, engine_runner):
        out, actions = syntax(engine_runner, "{'a': 'b'}")
        assert out == '{"a": "b"}'
        assert descriptions(actions) == ["normalized quotes", "normalized quotes"]
        assert (actions[1].original, actions[1].replacement) == ("'b'", '"b"')

    def test_curly_quotes(self, engine_runner):
        out, _ = syntax(engine_runner, "{“a”: “b”}")
        assert out == '{"a": "b"}'

    def test_embedded_double_quote_escaped(self, engine_runner):
        out, _ = syntax(engine_runner, "{'q': 'say \"hi\"'}")
        assert out == '{"q": "say \\"hi\\""}'
        assert json.loads(out) == {"q": 'say "hi"'}

    def test_escaped_apostrophe_unescaped(self, engine_runner):
        out, _ = syntax(engine_runner, "{'it': 'don\\'t'}")
        assert out == '{"it": "don\'t"}'

    def test_double_quoted_untouched(self, engine_runner):
        text = '{"a": "it\'s \\"fine\\""}'
        out, actions = syntax(engine_runner, text)
        assert out == text
        assert actions == ()

    def test_disabled(self, engine_runner):
        out, actions = syntax(engine_runner, "{'a': 1}", normalize_quotes=False)
        assert out == "{'a': 1}"
        assert actions == ()

    def test_unterminated_string(self, engine_runner):
        out, actions = syntax(engine_runner, '["abc')
        assert out == '["abc"'
        assert descriptions(actions) == ["added missing closing quote"]


class TestKeys:
    """Bare object keys are quoted."""

    def test_identifier_key(self, engine_runner):
        out, actions = syntax(engine_runner, "{a: 1}")
        assert out == '{"a": 1}'
        assert len(actions) == 1
        assert actions[0].description == "quoted unquoted key"
        assert (actions[0].offset, actions[0].original, actions[0].replacement) == (
            1,
            "a",
            '"a"',
        )

    def test_numeric_key(self, engine_runner):
        out, _ = syntax(engine_runner, '{1: "x"}')
        assert out == '{"1": "x"}'

    def test_key_with_dash_and_dollar(self, engine_runner):
        out, _ = syntax(engine_runner, "{$id: 1, content-type: 2}")
        assert out == '{"$id": 1, "content-type": 2}'

    def test_disabled(self, engine_runner):
        out, actions = syntax(engine_runner, "{a: 1}", quote_keys=False)
        assert out == "{a: 1}"
        assert actions == ()


class TestBareValues:
    """Bare words in value position become strings."""

    def test_object_values(self, engine_runner):
        out, actions = syntax(engine_runner, "{status: active, mode: fast}")
        assert out == '{"status": "active", "mode": "fast"}'
        assert json.loads(out) == {"status": "active", "mode": "fast"}
        assert descriptions(actions) == [
            "quoted unquoted key",
            "quoted unquoted string value",
            "quoted unquoted key",
            "quoted unquoted string value",
        ]
        assert (actions[1].offset, actions[1].original, actions[1].replacement) == (
            9,
            "active",
            '"active"',
        )

    def test_words_joined_until_next_key(self, engine_runner):
        out, actions = syntax(engine_runner, "{a: hello world b: 2}")
        assert out == '{"a": "hello world", "b": 2}'
        assert actions[1].original == "hello world"

    def test_array_items(self, engine_runner):
        out, _ = syntax(engine_runner, "[red, green blue]")
        assert out == '["red", "green", "blue"]'

    def test_literals_not_quoted(self, engine_runner):
        out, actions = syntax(engine_runner, '{"a": None, "b": yes}')
        assert out == '{"a": null, "b": "yes"}'
        assert descriptions(actions) == ["normalized literal", "quoted unquoted string value"]

    def test_root_word_untouched(self, engine_runner):
        out, actions = syntax(engine_runner, "hello")
        assert out == "hello"
        assert actions == ()

    def test_disabled(self, engine_runner):
        out, actions = syntax(engine_runner, '{"status": active}', quote_values=False)
        assert out == '{"status": active}'
        assert actions == ()


class TestEllipsis:
    """``...`` placeholders for elided members."""

    @pytest.mark.parametrize(
        "text, expected, value",
        [
            ("[1, 2, ...]", "[1, 2 ]", [1, 2]),
            ("[..., 1]", "[ 1]", [1]),
            ("[1, ..., 4]", "[1,  4]", [1, 4]),
            ("[...]", "[]", []),
            ("[ … ]", "[  ]", []),
            ('{"a": 1, ...}', '{"a": 1 }', {"a": 1}),
            ('{"items": [1, 2, ...], "n": 3}', '{"items": [1, 2 ], "n": 3}', {"items": [1, 2], "n": 3}),
        ],
        ids=["ELL-01", "ELL-02", "ELL-03", "ELL-04", "ELL-05", "ELL-06", "ELL-07"],
    )
    def test_removed(self, engine_runner, text, expected, value):
        out, actions = syntax(engine_runner, text)
        assert out == expected
        assert json.loads(out) == value
        assert "filtered ellipsis placeholder" in descriptions(actions)

    def test_action(self, engine_runner):
        _, actions = syntax(engine_runner, "[1, 2, ...]")
        assert descriptions(actions) == [
            "filtered ellipsis placeholder",
            "removed trailing comma",
        ]
        assert (actions[0].offset, actions[0].original) == (7, "...")

    def test_inside_string_kept(self, engine_runner):
        out, actions = syntax(engine_runner, '["...", "wait…"]')
        assert out == '["...", "wait…"]'
        assert actions == ()

    def test_leading_comma(self, engine_runner):
        out, actions = syntax(engine_runner, "[, 1]")
        assert out == "[ 1]"
        assert descriptions(actions) == ["removed extra comma"]

    def test_disabled(self, engine_runner):
        _, actions = syntax(engine_runner, "[1, ...]", fix_punctuation=False)
        assert "filtered ellipsis placeholder" not in descriptions(actions)


class TestLiterals:
    """Non-JSON spellings of true / false / null."""

    @pytest.mark.parametrize(
        "word, canonical",
        [
            ("True", "true"),
            ("FALSE", "false"),
            ("None", "null"),
            ("NULL", "null"),
            ("Null", "null"),
            ("nil", "null"),
            ("undefined", "null"),
        ],
    )
    def test_normalized(self, engine_runner, word, canonical):
        out, actions = syntax(engine_runner, f"[{word}]")
        assert out == f"[{canonical}]"
        assert descriptions(actions) == ["normalized literal"]
        assert (actions[0].original, actions[0].replacement) == (word, canonical)

    def test_canonical_untouched(self, engine_runner):
        out, actions = syntax(engine_runner, "[true, false, null]")
        assert out == "[true, false, null]"
        assert actions == ()

    def test_inside_string_untouched(self, engine_runner):
        out, actions = syntax(engine_runner, '["True None"]')
        assert out == '["True None"]'
        assert actions == ()

    def test_disabled(self, engine_runner):
        out, actions = syntax(engine_runner, "[True]", normalize_literals=False)
        assert out == "[True]"
        assert actions == ()

    def test_table(self):
        assert set(LITERALS.values()) == {"true", "false", "null"}


class TestPunctuation:
    """Commas and colons."""

    @pytest.mark.parametrize(
        "text, expected, expected_actions",
        [
            ("[1, 2, 3,]", "[1, 2, 3]", ["removed trailing comma"]),
            ('{"a": 1,}', '{"a": 1}', ["removed trailing comma"]),
            ("[1,, 2]", "[1, 2]", ["removed extra comma"]),
            ('{"a": 1,,}', '{"a": 1}', ["removed extra comma", "removed trailing comma"]),
            ("[1 2 3]", "[1, 2, 3]", ["added missing comma", "added missing comma"]),
            ('{"a": 1 "b": 2}', '{"a": 1, "b": 2}', ["added missing comma"]),
            ('[{"a": 1} {"b": 2}]', '[{"a": 1}, {"b": 2}]', ["added missing comma"]),
            ('{"a" 1}', '{"a": 1}', ["added missing colon"]),
            ("{a 1}", '{"a": 1}', ["quoted unquoted key", "added missing colon"]),
        ],
        ids=["PUN-01", "PUN-02", "PUN-03", "PUN-04", "PUN-05", "PUN-06", "PUN-07", "PUN-08", "PUN-09"],
    )
    def test_rewrites(self, engine_runner, text, expected, expected_actions):
        out, actions = syntax(engine_runner, text)
        assert out == expected
        assert descriptions(actions) == expected_actions

    def test_trailing_comma_offset(self, engine_runner):
        _, actions = syntax(engine_runner, "[1, 2,]")
        assert actions[0].offset == 5
        assert actions[0].original == ","

    def test_disabled(self, engine_runner):
        out, actions = syntax(engine_runner, "[1 2,]", fix_punctuation=False)
        assert out == "[1 2,]"
        assert actions == ()


class TestIdempotence:
    """normalize(normalize(t)) == normalize(t)."""

    @pytest.mark.parametrize(
        "text",
        [
            "{name: 'Alice', active: True,}",
            "[1 2 3]",
            '{"a": 1,,}',
            "{a 1}",
            "[1, 2, ]",
            "{'q': 'say \"hi\"'}",
            '["abc',
            '{"a": [True None]}',
            "'it\\'s'",
            ",,,",
            "{:}",
            '{"status": active, "n": -1.5e3}',
            "{“a”: ‘b’}",
            "{a: hello world, b: [x y]}",
            "[1, ..., 4]",
            "[..., 1]",
        ],
    )
    def test_stable(self, text):
        once = normalize(text)
        assert normalize(once) == once


class TestStringContent:
    """Characters between string delimiters survive unchanged."""

    @pytest.mark.parametrize(
        "text, content",
        [
            ('{"msg": "he said \\"{not a brace}\\""}', 'he said \\"{not a brace}\\"'),
            ("{'k': 'a,b:c]{ True'}", "a,b:c]{ True"),
            ('["// not a comment, None"]', "// not a comment, None"),
            ("{'k': '  spaced  '}", "  spaced  "),
        ],
    )
    def test_preserved(self, text, content):
        result = repair_text(text)
        assert '"' + content + '"' in result.text

"""
Tests for the opening brace whitespace checks.
"""

import pytest

from bracelint.parser import TokenStream, TokenType, prev_code_token
from bracelint.rules import NoFixError, get_rule
from bracelint.rules import opening_brace
from bracelint.rules.opening_brace import AFTER, AFTER_MESSAGE, BEFORE, BEFORE_MESSAGE
from bracelint.tools.lint import Linter, LintOptions


def check(name, code):
    stream = TokenStream.from_source(code)
    return stream, get_rule(name).check(stream)


def fix_all(name, code):
    """Fix every finding of one rule and return the stream."""
    rule = get_rule(name)
    stream = TokenStream.from_source(code)
    for finding in rule.check(stream):
        rule.fix(stream, finding)
    return stream


# =============================================================================
# BEFORE
# =============================================================================

class TestBeforeCheck:
    """Single space before an opening brace."""

    def test_compliant(self):
        _, findings = check(BEFORE, "class example {\n}\n")
        assert findings == []

    def test_no_space(self):
        """class example{ is flagged at the brace."""
        _, findings = check(BEFORE, "class example{\n}\n")
        assert len(findings) == 1
        assert findings[0].message == BEFORE_MESSAGE
        assert (findings[0].line, findings[0].column) == (1, 14)
        assert findings[0].token.type == TokenType.LBRACE

    @pytest.mark.parametrize("gap", ["  ", "\t", "     ", " \t"])
    def test_wrong_spacing(self, gap):
        _, findings = check(BEFORE, f"foo{gap}{{ }}")
        assert len(findings) == 1
        assert findings[0].column == 4 + len(gap)

    def test_newline_before_brace(self):
        _, findings = check(BEFORE, "class example\n{\n}\n")
        assert len(findings) == 1
        assert (findings[0].line, findings[0].column) == (2, 1)

    def test_brace_at_stream_start(self):
        _, findings = check(BEFORE, "{ }")
        assert findings == []

    def test_only_whitespace_before_brace(self):
        _, findings = check(BEFORE, "\n  { }")
        assert findings == []

    @pytest.mark.parametrize("code", [
        "[{ }]",
        "[  { }]",
        "{{ }}",
        "{\n  { }\n}",
        "'title':{ }",
        "'title':  { }",
        "[1,{ }]",
        "[1,\n  { }]",
        "class example # comment\n{\n}\n",
        "class example # comment\n\n    {\n}\n",
    ])
    def test_exemptions(self, code):
        """Braces after [ { : , or a comment are never flagged."""
        _, findings = check(BEFORE, code)
        assert findings == []

    def test_nested_brace_literal(self):
        """Both braces of {[1,2,3]} and the inner one of {{}} are fine."""
        assert check(BEFORE, "{[1,2,3]}")[1] == []
        assert check(BEFORE, "x = {{}}")[1] == []

    def test_check_does_not_mutate(self):
        code = "class example{\n}\n"
        stream, _ = check(BEFORE, code)
        assert stream.render() == code


class TestBeforeFix:
    """Collapsing the gap before a brace to one space."""

    @pytest.mark.parametrize("code", [
        "class example{\n}\n",
        "class example  {\n}\n",
        "class example\t{\n}\n",
        "class example\n{\n}\n",
        "class example\n\n\n  {\n}\n",
    ])
    def test_fix_yields_single_space(self, code):
        stream = fix_all(BEFORE, code)
        assert stream.render() == "class example {\n}\n"

    def test_fix_is_idempotent(self):
        stream = fix_all(BEFORE, "a{ }\nb  { }\nc\n{ }\n")
        assert stream.render() == "a { }\nb { }\nc { }\n"
        assert get_rule(BEFORE).check(stream) == []

    def test_fix_leaves_other_sites_alone(self):
        code = "class  example{\n  file  { 'x': }\n}\n"
        stream = fix_all(BEFORE, code)
        assert stream.render() == "class  example {\n  file { 'x': }\n}\n"

    def test_unexpected_token_refuses_fix(self, monkeypatch):
        """A comment inside the run cannot be collapsed; the stream is untouched."""
        monkeypatch.setattr(opening_brace, "prev_non_space_token", prev_code_token)
        code = "class example # note\n{\n}\n"
        stream, findings = check(BEFORE, code)
        assert len(findings) == 1
        with pytest.raises(NoFixError) as exc_info:
            get_rule(BEFORE).fix(stream, findings[0])
        assert exc_info.value.finding is findings[0]
        assert stream.render() == code


# =============================================================================
# AFTER
# =============================================================================

class TestAfterCheck:
    """Single space or single newline after an opening brace."""

    @pytest.mark.parametrize("code", [
        "{ foo }",
        "{\n  foo\n}",
        "{}",
        "{{ }}",
        "{[1,2,3]}",
        "{ # comment\n}",
        "foo {",
        "foo {\n",
    ])
    def test_compliant(self, code):
        _, findings = check(AFTER, code)
        assert findings == []

    def test_no_space(self):
        """Anchored at the token directly after the brace."""
        _, findings = check(AFTER, "{foo }")
        assert len(findings) == 1
        assert findings[0].message == AFTER_MESSAGE
        assert (findings[0].line, findings[0].column) == (1, 2)
        assert findings[0].token.value == "foo"

    @pytest.mark.parametrize("gap", ["  ", "\t", "   "])
    def test_wrong_spacing(self, gap):
        _, findings = check(AFTER, f"{{{gap}foo }}")
        assert len(findings) == 1
        assert findings[0].token.type == TokenType.WHITESPACE
        assert findings[0].column == 2

    def test_blank_line_after_brace(self):
        """Flagged on the second newline."""
        _, findings = check(AFTER, "class example {\n\n  body\n}\n")
        assert len(findings) == 1
        assert (findings[0].line, findings[0].column) == (2, 1)
        assert findings[0].token.type == TokenType.NEWLINE

    def test_many_blank_lines_one_finding(self):
        _, findings = check(AFTER, "{\n\n\n\nfoo\n}")
        assert len(findings) == 1
        assert findings[0].line == 2

    def test_comment_directly_after_brace(self):
        _, findings = check(AFTER, "{# comment\n}")
        assert len(findings) == 1
        assert findings[0].token.type == TokenType.COMMENT


class TestAfterFix:
    """Rewriting the separator after a brace."""

    @pytest.mark.parametrize("code", ["{  foo }", "{\tfoo }", "{ \t foo }"])
    def test_whitespace_rewritten(self, code):
        stream = fix_all(AFTER, code)
        assert stream.render() == "{ foo }"

    def test_whitespace_fix_is_value_only(self):
        stream = TokenStream.from_source("{  foo }")
        before = len(stream)
        finding = get_rule(AFTER).check(stream)[0]
        get_rule(AFTER).fix(stream, finding)
        assert len(stream) == before
        assert finding.token.value == " "

    def test_missing_space_inserted(self):
        stream = fix_all(AFTER, "{foo }")
        assert stream.render() == "{ foo }"

    def test_blank_line_removed(self):
        stream = fix_all(AFTER, "class example {\n\n  body\n}\n")
        assert stream.render() == "class example {\n  body\n}\n"

    def test_blank_line_run_fully_collapsed(self):
        """Every consecutive newline after the first is removed."""
        stream = fix_all(AFTER, "{\n\n\n\nfoo\n}")
        assert stream.render() == "{\nfoo\n}"
        assert get_rule(AFTER).check(stream) == []

    def test_indented_blank_line_stops_collapse(self):
        """Removal stops at the first non-newline token; the rest is compliant."""
        stream = fix_all(AFTER, "{\n\n  \n  foo\n}")
        assert stream.render() == "{\n  \n  foo\n}"
        assert get_rule(AFTER).check(stream) == []

    def test_crlf_blank_line(self):
        stream = fix_all(AFTER, "{\r\n\r\n  foo\r\n}")
        assert stream.render() == "{\r\n  foo\r\n}"

    def test_comment_gets_space(self):
        stream = fix_all(AFTER, "{# comment\n}")
        assert stream.render() == "{ # comment\n}"

    @pytest.mark.parametrize("code", [
        "{foo}",
        "{  foo}",
        "{\n\n\nfoo}",
        "x = {'a' => {  'b' => 1}}",
    ])
    def test_fix_is_idempotent(self, code):
        stream = fix_all(AFTER, code)
        assert get_rule(AFTER).check(stream) == []


class TestScenarios:
    """End-to-end examples on small manifests."""

    def test_double_space_after_keyword(self):
        """The brace itself is fine; the class header check catches the gap."""
        assert check(BEFORE, "class  example {")[1] == []

        report = Linter(LintOptions(fix=True)).lint_source("class  example {")
        assert [p.kind for p in report.problems] == ["fixed"]
        assert report.manifest == "class example {"

    def test_brace_without_space(self):
        stream = fix_all(BEFORE, "class example{")
        assert stream.render() == "class example {"

    def test_comment_before_brace(self):
        _, findings = check(BEFORE, "class example # comment\n{")
        assert findings == []

    def test_blank_line_in_block(self):
        stream = fix_all(AFTER, "class example {\n\n  body")
        assert stream.render() == "class example {\n  body"

    def test_collection_literal(self):
        assert check(AFTER, "{[1,2,3]}")[1] == []
        assert check(BEFORE, "{[1,2,3]}")[1] == []

    def test_lambda_parameters(self):
        """The brace after a lambda's parameter list needs its space too."""
        code = "$list.each |$x|{\n  notice($x)\n}\n"
        _, findings = check(BEFORE, code)
        assert [(f.line, f.column) for f in findings] == [(1, 16)]
        assert fix_all(BEFORE, code).render() == "$list.each |$x| {\n  notice($x)\n}\n"

    def test_after_regex_condition(self):
        report = Linter(LintOptions(fix=True)).lint_source("if $x =~ /^foo|bar$/{\n  include foo\n}\n")
        assert [(p.check, p.kind) for p in report.problems] == [(BEFORE, "fixed")]
        assert report.manifest == "if $x =~ /^foo|bar$/ {\n  include foo\n}\n"

    def test_collector_and_chaining(self):
        code = "User <| title == 'x' |> -> Service['x']\nPackage['a'] ~> Service['a']\n"
        report = Linter().lint_source(code)
        assert report.problems == []

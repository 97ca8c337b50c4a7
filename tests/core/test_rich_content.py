"""
Unit Tests for Rich Content Model

Tests normalisation of Delta/Html/PlainText into StyledRuns, plain-text
extraction and the stored-field fallback chain.
"""

import logging

import pytest

from quiz_toolkit.core.models.rich_content import (
    Delta,
    Html,
    MalformedRichContentError,
    PlainText,
    ScriptOffset,
    StyledRun,
    extract_plain_text,
    normalize,
    plain_text_of,
    rich_content_from_fields,
)


class TestDeltaFromOps:
    """Tests for Delta.from_ops()."""

    def test_from_ops_when_dict_with_ops_then_reads_attributes(self):
        delta = Delta.from_ops({"ops": [
            {"insert": "Bold", "attributes": {"bold": True}},
            {"insert": " plain\n"},
        ]})

        assert len(delta.ops) == 2
        assert delta.ops[0].bold is True
        assert delta.ops[1].bold is False

    def test_from_ops_when_embed_insert_then_skipped(self):
        delta = Delta.from_ops([{"insert": {"formula": "x^2"}}, {"insert": "text"}])

        assert [op.insert for op in delta.ops] == ["text"]

    def test_from_ops_when_not_list_then_raises(self):
        with pytest.raises(MalformedRichContentError, match="must be a list"):
            Delta.from_ops({"ops": "nope"})

    def test_from_ops_when_op_missing_insert_then_raises(self):
        with pytest.raises(MalformedRichContentError, match="no insert"):
            Delta.from_ops([{"retain": 3}])

    @pytest.mark.parametrize("attributes", [["bold"], "bold", 1])
    def test_from_ops_when_attributes_not_object_then_raises(self, attributes):
        with pytest.raises(MalformedRichContentError, match="attributes must be an object"):
            Delta.from_ops([{"insert": "x", "attributes": attributes}])


class TestNormalize:
    """Tests for normalize()."""

    def test_normalize_when_delta_with_superscript_then_two_runs(self):
        """E = mc² splits into a plain run and a superscript run."""
        # Arrange
        delta = Delta.from_ops([
            {"insert": "E = mc"},
            {"insert": "2", "attributes": {"script": "super"}},
        ])

        # Act
        runs = normalize(delta)

        # Assert
        assert runs == [
            StyledRun("E = mc"),
            StyledRun("2", script=ScriptOffset.SUPER),
        ]

    def test_normalize_when_html_nested_tags_then_flags_combine(self):
        runs = normalize(Html("<strong>Bold <em>both</em></strong> none"))

        assert runs == [
            StyledRun("Bold ", bold=True),
            StyledRun("both", bold=True, italic=True),
            StyledRun(" none"),
        ]

    def test_normalize_when_html_sub_and_underline_then_flags_set(self):
        runs = normalize(Html("H<sub>2</sub>O is <u>water</u>"))

        assert runs[1] == StyledRun("2", script=ScriptOffset.SUB)
        assert runs[-1] == StyledRun("water", underline=True)

    def test_normalize_when_html_paragraphs_then_joined_with_space(self):
        runs = normalize(Html("<p>Hello</p><p>World</p>"))

        assert plain_text_of(runs) == "Hello World"

    def test_normalize_when_html_entities_then_decoded(self):
        runs = normalize(Html("5 &lt; 6 &amp;&amp; 7 &gt; 3"))

        assert plain_text_of(runs) == "5 < 6 && 7 > 3"

    def test_normalize_when_escaped_entity_then_decoded_once(self):
        runs = normalize(Html("&amp;lt;tag&amp;gt;"))

        assert plain_text_of(runs) == "&lt;tag&gt;"

    def test_normalize_when_newlines_then_replaced_by_spaces(self):
        runs = normalize(PlainText("line one\nline two\n"))

        assert runs == [StyledRun("line one line two")]

    def test_normalize_when_empty_or_none_then_no_runs(self):
        assert normalize(None) == []
        assert normalize(PlainText("   \n")) == []
        assert normalize(Html("<p></p>")) == []

    def test_normalize_when_same_input_twice_then_same_output(self):
        content = Html("<em>a</em> b <strong>c</strong>")

        assert normalize(content) == normalize(content)

    def test_normalize_when_unknown_type_then_raises(self):
        with pytest.raises(TypeError):
            normalize("raw string")


class TestRoundTrip:
    """plain_text_of(normalize(c)) matches extract_plain_text(c)."""

    @pytest.mark.parametrize("content", [
        PlainText("  What is 2 + 2?  "),
        PlainText("multi\nline\ntext"),
        Html("<p>The <strong>capital</strong> of <em>France</em>?</p>"),
        Html("x<sup>2</sup> + y<sub>1</sub><br/>next line"),
        Html("Tom &amp; Jerry&nbsp;&quot;cartoon&quot;"),
        Html("<p> </p><p>Spaced</p>"),
        Delta.from_ops([
            {"insert": "E = mc"},
            {"insert": "2", "attributes": {"script": "super"}},
            {"insert": "\n"},
        ]),
        Delta.from_ops([
            {"insert": "  Bold", "attributes": {"bold": True}},
            {"insert": " and "},
            {"insert": "italic  ", "attributes": {"italic": True}},
        ]),
    ])
    def test_round_trip_when_normalized_then_plain_text_matches(self, content):
        assert plain_text_of(normalize(content)) == extract_plain_text(content)


class TestRichContentFromFields:
    """Tests for the Delta → Html → PlainText fallback."""

    def test_from_fields_when_delta_present_then_delta_wins(self):
        content = rich_content_from_fields(
            delta={"ops": [{"insert": "from delta"}]},
            html="<p>from html</p>",
            text="from text",
        )

        assert isinstance(content, Delta)
        assert extract_plain_text(content) == "from delta"

    def test_from_fields_when_delta_malformed_then_falls_back_to_html(self, caplog):
        with caplog.at_level(logging.WARNING):
            content = rich_content_from_fields(delta={"ops": 42}, html="<b>hi</b>", text="hi")

        assert content == Html("<b>hi</b>")
        assert "malformed Delta" in caplog.text

    def test_from_fields_when_delta_empty_then_falls_back_to_text(self):
        content = rich_content_from_fields(delta={"ops": [{"insert": "\n"}]}, text="plain")

        assert content == PlainText("plain")

    def test_from_fields_when_nothing_then_empty_plain_text(self):
        content = rich_content_from_fields()

        assert content == PlainText("")
        assert normalize(content) == []

    def test_from_fields_when_delta_attributes_not_object_then_falls_back_to_text(self):
        content = rich_content_from_fields(
            delta={"ops": [{"insert": "x", "attributes": ["bold"]}]},
            text="x",
        )

        assert content == PlainText("x")

    def test_from_fields_when_html_not_string_then_falls_back_to_text(self):
        content = rich_content_from_fields(html={"A": "<b>x</b>"}, text="plain")

        assert content == PlainText("plain")

"""
Unit tests for WordExtractor.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from wordquarry.config import ExtractionSettings
from wordquarry.exceptions import CollaboratorError, ExtractionCancelled
from wordquarry.extractor import CancellationToken, HttpMessage, ResponseInfo, WordExtractor
from wordquarry.observability.metrics import METRICS

from tests.helpers.metric_delta import metric_delta


def words_of(extractor: WordExtractor, html: str) -> set:
    return extractor.extract_from_html(html)


class TestTokenization:
    """Token pattern behavior."""

    def test_punctuation_and_underscore_split_words(self, extractor_factory):
        extractor = extractor_factory()

        assert words_of(extractor, "<p>foo-bar, baz_123!</p>") == {"foo", "bar", "baz", "123"}

    def test_apostrophes_and_unicode_letters(self, extractor_factory):
        extractor = extractor_factory()

        assert words_of(extractor, "<p>Don't panic, Zoë. Straße 東京</p>") == {"Don't", "panic", "Zoë", "Straße", "東京"}

    def test_case_is_preserved_by_default(self, extractor_factory):
        assert words_of(extractor_factory(), "<p>Hello HELLO</p>") == {"Hello", "HELLO"}

    def test_force_lowercase(self, extractor_factory):
        assert words_of(extractor_factory(force_lowercase=True), "<p>Hello HELLO</p>") == {"hello"}

    def test_custom_pattern(self, extractor_factory):
        extractor = extractor_factory(token_pattern=r"[A-Za-z_]{4,}")

        assert words_of(extractor, "<p>the snake_case word is long</p>") == {"snake_case", "word", "long"}

    def test_zero_length_matches_are_discarded(self, extractor_factory):
        extractor = extractor_factory(token_pattern=r"[a-z]*")

        words = list(extractor.extract_words("ab, cd"))

        assert words == ["ab", "cd"]

    def test_entities_are_decoded_before_tokenizing(self, extractor_factory):
        assert words_of(extractor_factory(), "<p>caf&eacute; na&iuml;ve</p>") == {"café", "naïve"}


class TestTagScoping:
    """Style, script and comment handling."""

    def test_style_text_ignored(self, extractor_factory):
        html = "<style>ignored</style>visible"

        assert words_of(extractor_factory(ignore_style_tags=True), html) == {"visible"}
        assert words_of(extractor_factory(ignore_style_tags=False), html) == {"ignored", "visible"}

    def test_comments_ignored(self, extractor_factory):
        html = "<!-- secret --><p>shown</p>"

        assert words_of(extractor_factory(ignore_comments=True), html) == {"shown"}
        assert words_of(extractor_factory(ignore_comments=False), html) == {"secret", "shown"}

    def test_unterminated_comment_is_ignored(self, extractor_factory):
        html = "<p>shown</p><!-- secret"

        assert words_of(extractor_factory(ignore_comments=True), html) == {"shown"}
        assert words_of(extractor_factory(ignore_comments=False), html) == {"secret", "shown"}

    def test_truncated_tag_contributes_no_words(self, extractor_factory):
        html = '<p>shown</p><a href="http://internal.example/admin"'

        assert words_of(extractor_factory(), html) == {"shown"}

    def test_comment_inside_style_is_still_extracted(self, extractor_factory):
        html = "<div><!-- note --></div><style>a { }</style>"

        assert words_of(extractor_factory(ignore_style_tags=True), html) == {"note"}

    def test_script_text_is_not_suppressed(self, extractor_factory):
        html = "<script>var tracker;</script><p>body</p>"

        assert words_of(extractor_factory(ignore_script_tags=True), html) == {"var", "tracker", "body"}

    def test_uppercase_style_tags(self, extractor_factory):
        assert words_of(extractor_factory(ignore_style_tags=True), "<STYLE>hidden</STYLE>seen") == {"seen"}

    def test_stray_end_tag_is_tolerated(self, extractor_factory):
        assert words_of(extractor_factory(ignore_style_tags=True), "</style>text</script>more") == {"text", "more"}

    def test_style_scope_ends_at_end_tag(self, extractor_factory):
        html = "<p>before</p><style>.x{}</style><p>after</p>"

        assert words_of(extractor_factory(ignore_style_tags=True), html) == {"before", "after"}

    def test_sample_page(self, extractor_factory, sample_html):
        words = words_of(extractor_factory(ignore_style_tags=True, ignore_comments=True), sample_html)

        assert {"Quarterly", "Report", "Revenue", "Growth", "grew", "region"} <= words
        assert "crimson" not in words
        assert "draft" not in words
        assert "trackingId" in words


class TestExtract:
    """Full runs over message batches."""

    def test_words_accumulate_across_documents(self, extractor_factory, make_message):
        extractor = extractor_factory()
        messages = [make_message("<p>alpha beta</p>"), make_message("<p>beta gamma</p>")]

        result = extractor.extract(messages)

        assert result.words == {"alpha", "beta", "gamma"}
        assert result.sorted_words == ["alpha", "beta", "gamma"]
        assert result.stats.processed == 2
        assert result.stats.tokens == 4

    def test_sorted_words_are_lexicographic(self, extractor_factory, make_message):
        result = extractor_factory().extract([make_message("<p>b a B A 10 9</p>")])

        assert result.sorted_words == ["10", "9", "A", "B", "a", "b"]

    def test_idempotent(self, extractor_factory, make_message, sample_html):
        extractor = extractor_factory(force_lowercase=True)
        messages = [make_message(sample_html), make_message("<p>extra words</p>")]

        assert extractor.extract(messages).words == extractor.extract(messages).words

    def test_content_type_gate(self, extractor_factory, make_message):
        message = make_message("<p>pixels</p>", content_type="image/png")

        skipped = extractor_factory(check_content_type=True).extract([message])
        processed = extractor_factory(check_content_type=False).extract([message])

        assert skipped.words == frozenset()
        assert skipped.stats.skipped == 1
        assert processed.words == {"pixels"}

    def test_document_without_content_type_is_processed(self, extractor_factory, make_message):
        result = extractor_factory().extract([make_message("<p>plain</p>", content_type=None)])

        assert result.words == {"plain"}

    def test_bare_html_message(self, extractor_factory):
        result = extractor_factory().extract([HttpMessage(response="<p>raw ünïcode</p>".encode("utf-8"))])

        assert result.words == {"raw", "ünïcode"}

    def test_tag_context_does_not_leak_between_documents(self, extractor_factory, make_message):
        extractor = extractor_factory(ignore_style_tags=True)
        messages = [make_message("<style>unclosed"), make_message("visible")]

        assert extractor.extract(messages).words == {"visible"}

    def test_malformed_document_does_not_stop_the_run(self, extractor_factory, make_message, make_response):
        errors = []
        extractor = extractor_factory(on_error=errors.append)
        bad = HttpMessage(
            response=make_response("", {"Content-Type": "text/html"}) + b"<p>broken \xff\xfe\xfa</p>",
            source="bad.html",
        )
        messages = [make_message("<p>first</p>"), bad, make_message("<p>last</p>")]

        result = extractor.extract(messages)

        assert result.words == {"first", "last"}
        assert result.stats.failed == 1
        assert result.stats.processed == 2
        assert len(errors) == 1
        assert "bad.html" in errors[0]

    def test_failed_document_contributes_no_partial_words(self, extractor_factory):
        extractor = extractor_factory(chunk_size=8)
        # The invalid byte sits well after a complete first word
        bad = HttpMessage(response=b"<p>partial words here \xff</p>")

        result = extractor.extract([bad])

        assert result.words == frozenset()
        assert result.stats.failed == 1

    def test_replace_decode_errors(self, extractor_factory):
        extractor = extractor_factory(decode_errors="replace")

        result = extractor.extract([HttpMessage(response=b"<p>ok \xff</p>")])

        assert "ok" in result.words
        assert result.stats.failed == 0

    def test_internal_assertion_is_not_treated_as_bad_document(self, extractor_factory, make_message):
        extractor = extractor_factory()
        extractor._fold_events = MagicMock(side_effect=AssertionError("fold invariant"))

        with pytest.raises(AssertionError):
            extractor.extract([make_message("<p>x</p>")])

    def test_failing_error_reporter_is_contained(self, extractor_factory, make_message):
        reporter = MagicMock(side_effect=RuntimeError("reporter down"))
        extractor = extractor_factory(on_error=reporter)

        result = extractor.extract([HttpMessage(response=b"\xff"), make_message("<p>after</p>")])

        reporter.assert_called_once()
        assert result.words == {"after"}

    def test_multibyte_characters_split_across_chunks(self, extractor_factory):
        extractor = extractor_factory(chunk_size=1)

        result = extractor.extract([HttpMessage(response="<p>crème brûlée</p>".encode("utf-8"))])

        assert result.words == {"crème", "brûlée"}

    def test_configured_encoding(self, extractor_factory):
        extractor = extractor_factory(encoding="latin-1")

        result = extractor.extract([HttpMessage(response="<p>façade</p>".encode("latin-1"))])

        assert result.words == {"façade"}

    def test_message_source_failure_is_fatal(self, extractor_factory, make_message):
        def source():
            yield make_message("<p>one</p>")
            raise OSError("disk gone")

        with pytest.raises(CollaboratorError) as excinfo:
            extractor_factory().extract(source())

        assert isinstance(excinfo.value.__cause__, OSError)
        assert excinfo.value.collaborator == "message source"

    def test_inspector_failure_is_fatal(self, settings_factory, make_message):
        inspector = MagicMock()
        inspector.analyze_response.side_effect = RuntimeError("boom")
        extractor = WordExtractor(settings_factory(), inspector=inspector)

        with pytest.raises(CollaboratorError):
            extractor.extract([make_message("<p>x</p>")])

    def test_inspector_offset_out_of_range(self, settings_factory):
        inspector = MagicMock()
        inspector.analyze_response.return_value = ResponseInfo(body_offset=99, headers=[])
        extractor = WordExtractor(settings_factory(), inspector=inspector)

        with pytest.raises(CollaboratorError, match="body offset 99"):
            extractor.extract([HttpMessage(response=b"short")])

    def test_cancellation_before_next_document(self, extractor_factory, make_message):
        token = CancellationToken()

        def source():
            yield make_message("<p>one</p>")
            token.cancel()
            yield make_message("<p>two</p>")

        with pytest.raises(ExtractionCancelled):
            extractor_factory().extract(source(), cancel_token=token)

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            WordExtractor(ExtractionSettings(), chunk_size=0)


class TestMetrics:
    """Prometheus counters updated by a run."""

    def test_outcome_counters(self, extractor_factory, make_message):
        messages = [
            make_message("<p>a b</p>"),
            make_message("<p>img</p>", content_type="image/jpeg"),
            HttpMessage(response=b"\xff"),
        ]
        documents = METRICS["documents"]

        with metric_delta(documents.labels(outcome="processed")), metric_delta(
            documents.labels(outcome="skipped")
        ), metric_delta(documents.labels(outcome="failed")), metric_delta(METRICS["words_extracted"], 2):
            extractor_factory().extract(messages)

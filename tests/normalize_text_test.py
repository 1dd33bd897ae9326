"""
Tests for the text normalization preprocessing module.
"""

from absl.testing import absltest
from absl.testing import parameterized

from preprocessing.normalize_text import (
    NormalizationError,
    apply_substitutions,
    normalize_text,
    sanitize_control_characters,
    strip_non_ascii,
)


class NormalizeTextTest(parameterized.TestCase):
    """Test cases for the fixed substitution pass."""

    @parameterized.named_parameters(
        dict(testcase_name="curly_double_quotes", text="“commerce”", expected='"commerce"'),
        dict(testcase_name="curly_single_quotes", text="court’s ‘rule’", expected="court's 'rule'"),
        dict(testcase_name="em_and_en_dashes", text="1950–1960 — held", expected="1950-1960 - held"),
        dict(testcase_name="accented_letters", text="café déjà naïve", expected="cafe deja naive"),
        dict(testcase_name="ligatures", text="ﬁnal œuvre", expected="final oeuvre"),
        dict(testcase_name="angle_brackets", text="<em>held</em>", expected="emheld/em"),
        dict(testcase_name="section_symbol", text="§ 1983", expected=" 1983"),
        dict(testcase_name="ellipsis", text="and…", expected="and..."),
        dict(testcase_name="non_breaking_space", text="42\u00a0U.S.C.", expected="42 U.S.C."),
    )
    def test_substitutions(self, text, expected):
        self.assertEqual(normalize_text(text), expected)

    def test_unmapped_non_ascii_is_dropped(self):
        self.assertEqual(normalize_text("law 法 court"), "law  court")

    def test_plain_ascii_is_unchanged(self):
        text = "The Commerce Clause, U.S. Const. art. I, sec. 8."
        self.assertEqual(normalize_text(text), text)

    def test_empty_string(self):
        self.assertEqual(normalize_text(""), "")

    @parameterized.parameters(
        "“Quoted” — text with café and ﬁnal…",
        "plain ascii text",
        "<b>bold</b> § 12 ¶ 3 © 2001",
        "mixed\ttabs\nand\x00controls",
    )
    def test_normalization_is_idempotent(self, text):
        once = normalize_text(text)
        self.assertEqual(normalize_text(once), once)

    def test_output_is_ascii(self):
        result = normalize_text("Ærø “x” – ß ™ 𝔘")
        self.assertTrue(result.isascii())

    def test_invalid_input_type(self):
        with self.assertRaises(NormalizationError):
            normalize_text(None)
        with self.assertRaises(NormalizationError):
            sanitize_control_characters(42)


class NormalizationStepsTest(absltest.TestCase):

    def test_control_characters_removed_whitespace_kept(self):
        result = sanitize_control_characters("a\x00b\tc\nd\re\x07")
        self.assertEqual(result, "ab\tc\nd\re")

    def test_page_breaks_keep_words_apart(self):
        result = normalize_text("interstate\x0ccommerce\x0bpower\x1fclause")
        self.assertEqual(result, "interstate commerce power clause")
        self.assertEqual(result.split(), "interstate\x0ccommerce\x0bpower\x1fclause".split())

    def test_substitutions_keep_unknown_characters(self):
        self.assertEqual(apply_substitutions("é法"), "e法")

    def test_strip_non_ascii(self):
        self.assertEqual(strip_non_ascii("a法b"), "ab")


if __name__ == "__main__":
    absltest.main()

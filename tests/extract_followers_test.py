"""
Tests for follower phrase extraction and the follower frequency table.
"""

from absl.testing import absltest
from absl.testing import parameterized

from kwicextract import exceptions
from kwicextract import rows
from postprocessing.count_followers import count_followers, format_counts
from postprocessing.extract_followers import extract_follower, iter_follower_records


def _primary_line(record_id, case_match, after, opinion_match="1"):
    values = [record_id, "T", "1 U.S. 1", "1900", "U.S.", "us", 1, "majority", 1,
              case_match, opinion_match, "the/DT", "commerce/NN", after]
    return rows.format_row(values)


class ExtractFollowerTest(parameterized.TestCase):
    """Test cases for the noun-boundary heuristic."""

    @parameterized.named_parameters(
        dict(testcase_name="noun_first", after="cat/NN runs/VBZ fast/RB", expected="cat"),
        dict(testcase_name="noun_later", after="the/DT big/JJ dogs/NNS bark/VBP", expected="the big dogs"),
        dict(testcase_name="proper_noun", after="of/IN congress/NNP was/VBD", expected="of congress"),
        dict(testcase_name="no_noun_takes_all", after="quickly/RB and/CC well/RB", expected="quickly and well"),
        dict(testcase_name="empty", after="", expected=""),
        dict(testcase_name="hyphen_kept", after="well-known/JJ rule/NN", expected="well-known rule"),
        dict(testcase_name="punctuation_stripped", after="\"/`` power's/NN", expected="powers"),
    )
    def test_extract_follower(self, after, expected):
        self.assertEqual(extract_follower(after), expected)

    def test_custom_noun_prefix(self):
        self.assertEqual(extract_follower("a/X b/N c/N", noun_prefix="N"), "a b")


class IterFollowerRecordsTest(absltest.TestCase):

    def test_rows_become_follower_records(self):
        lines = [
            rows.format_row(rows.PRIMARY_HEADER),
            _primary_line("caseA", 1, "clause/NN of/IN"),
            _primary_line("caseA", 2, "power/NN"),
        ]
        records = list(iter_follower_records(lines))
        self.assertEqual(
            [r.as_row() for r in records],
            [
                ["caseA", "majority", "1", "1", "1", "clause"],
                ["caseA", "majority", "1", "2", "1", "power"],
            ],
        )

    def test_short_rows_are_reported(self):
        errors = []
        lines = [rows.format_row(rows.PRIMARY_HEADER), "caseA\tonly\n"]
        records = list(iter_follower_records(lines, on_error=errors.append))
        self.assertEmpty(records)
        self.assertLen(errors, 1)
        self.assertIsInstance(errors[0], exceptions.MissingFieldError)
        self.assertEqual(errors[0].line_number, 2)

    def test_missing_after_column_gives_empty_follower(self):
        line = "\t".join(["caseA", "T", "c", "d", "ct", "s", "1", "majority", "1", "1", "1"]) + "\n"
        (record,) = iter_follower_records([line], has_header=False)
        self.assertEqual(record.follower, "")


class CountFollowersTest(absltest.TestCase):

    def test_counts_sorted_by_frequency_then_term(self):
        lines = [rows.format_row(rows.FOLLOWER_HEADER)] + [
            rows.format_row(["c", "majority", 1, i, i, term])
            for i, term in enumerate(["clause", "power", "clause", "", "act", "power", "clause"], start=1)
        ]
        counts = count_followers(lines)
        self.assertEqual(counts, [(3, "clause"), (2, "power"), (1, "act")])
        self.assertEqual(
            list(format_counts(counts)),
            ["3\tclause\n", "2\tpower\n", "1\tact\n"],
        )


if __name__ == "__main__":
    absltest.main()

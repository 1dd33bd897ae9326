# Copyright 2025 Google LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from absl.testing import absltest

from kwicextract import data
from kwicextract import rows


class RowsTest(absltest.TestCase):

  def test_separators_and_newlines_inside_values_become_spaces(self):
    self.assertEqual(
        rows.format_row(["a\tb", "c\nd", None, 3]), "a b\tc d\t\t3\n"
    )

  def test_custom_separator(self):
    self.assertEqual(rows.format_row(["a,b", "c"], ","), "a b,c\n")

  def test_primary_row_layout(self):
    record = data.Record(
        record_id="r1",
        short_title="A v. B",
        long_title="Alpha v. Beta",
        citation="1 U.S. 1",
        date="1901-02-03",
        court_name="U.S.",
        court_slug="us",
        subdocuments=(data.SubDocument(1, "majority", "x"),),
    )
    window = data.Window("r1", "majority", 1, 4, 2, "the", "fox", "ran")
    tagged = data.TaggedWindow(window, "the/DT", "fox/NN", "ran/VBD")
    values = rows.primary_row(record, tagged)
    self.assertLen(values, len(rows.PRIMARY_HEADER))
    self.assertEqual(
        dict(zip(rows.PRIMARY_HEADER, values)),
        {
            "id": "r1",
            "title": "A v. B",
            "citation": "1 U.S. 1",
            "date": "1901",
            "court": "U.S.",
            "court_slug": "us",
            "opinion_count": 1,
            "opinion_type": "majority",
            "opinion_number": 1,
            "case_match": 4,
            "opinion_match": 2,
            "before": "the/DT",
            "match": "fox/NN",
            "after": "ran/VBD",
        },
    )

  def test_key_columns(self):
    self.assertEqual(rows.PRIMARY_ID_COLUMN, 0)
    self.assertEqual(rows.PRIMARY_CASE_MATCH_COLUMN, 9)
    self.assertEqual(rows.PRIMARY_AFTER_COLUMN, 13)
    self.assertEqual(rows.FOLLOWER_TERM_COLUMN, 5)


class LabelTableTest(absltest.TestCase):

  def test_overwrite_keeps_last(self):
    table = data.LabelTable()
    table.add(("a", "1"), data.LabelEntry("x"))
    table.add(("a", "1"), data.LabelEntry("y"))
    self.assertEqual(table.lookup(("a", "1")).label, "y")
    self.assertIsNone(table.lookup(("a", "2")))
    self.assertEqual(table.overwrites, 1)
    self.assertIn(("a", "1"), table)


if __name__ == "__main__":
  absltest.main()

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

from unittest import mock

from absl.testing import absltest
from absl.testing import parameterized

from kwicextract import data
from kwicextract import exceptions
from kwicextract import kwic
from kwicextract import realign
from kwicextract import tagging


class RealignTest(parameterized.TestCase):

  def test_split_on_tagged_term(self):
    self.assertEqual(
        realign.realign(
            "quick/JJ brown/JJ fox/NN jumps/VBZ over/IN", "fox"
        ),
        ("quick/JJ brown/JJ", "fox/NN", "jumps/VBZ over/IN"),
    )

  def test_multi_word_term(self):
    self.assertEqual(
        realign.realign(
            "the/DT interstate/JJ commerce/NN clause/NN", "interstate commerce"
        ),
        ("the/DT", "interstate/JJ commerce/NN", "clause/NN"),
    )

  def test_missing_trailing_segment_is_empty(self):
    self.assertEqual(
        realign.realign("the/DT lazy/JJ fox/NN", "fox"),
        ("the/DT lazy/JJ", "fox/NN", ""),
    )

  def test_term_not_found_keeps_text_as_before(self):
    self.assertEqual(
        realign.realign("the/DT court/NN", "fox"), ("the/DT court/NN", "", "")
    )

  def test_term_inside_longer_word_is_not_split(self):
    self.assertEqual(
        realign.realign("firefox/NN fox/NN runs/VBZ", "fox"),
        ("firefox/NN", "fox/NN", "runs/VBZ"),
    )

  def test_first_occurrence_wins(self):
    self.assertEqual(
        realign.realign("a/DT fox/NN and/CC fox/NN", "fox"),
        ("a/DT", "fox/NN", "and/CC fox/NN"),
    )

  @parameterized.named_parameters(
      dict(
          testcase_name="middle",
          text="one two three fox four five six",
          width=2,
      ),
      dict(testcase_name="at_start", text="fox four five", width=5),
      dict(testcase_name="at_end", text="one two fox", width=5),
      dict(
          testcase_name="several_matches",
          text="a b fox c d e fox f g",
          width=2,
      ),
  )
  def test_round_trip_with_passthrough_tagger(self, text, width):
    tagger = tagging.PassthroughTagger()
    windows = kwic.extract_windows(
        data.SubDocument(1, None, text),
        kwic.compile_pattern("fox"),
        data.MatchCounters(),
        "c",
        width=width,
    )
    self.assertNotEmpty(windows)
    for window in windows:
      tagged = realign.tag_window(window, tagger)
      self.assertEqual(realign.strip_tags(tagged.tagged_before), window.before)
      self.assertEqual(realign.strip_tags(tagged.tagged_match), window.match)
      self.assertEqual(realign.strip_tags(tagged.tagged_after), window.after)

  def test_tag_window_keeps_window(self):
    window = data.Window("c", None, 1, 1, 1, "the", "fox", "ran")
    tagged = realign.tag_window(window, tagging.PassthroughTagger("T"))
    self.assertIs(tagged.window, window)
    self.assertEqual(tagged.tagged_match, "fox/T")


class TaggedTokenTest(parameterized.TestCase):

  @parameterized.parameters(
      ("cat/NN", ("cat", "NN")),
      ("and/or/CC", ("and/or", "CC")),
      ("plain", ("plain", "")),
      ("/NN", ("/NN", "")),
  )
  def test_split_tagged_token(self, token, expected):
    self.assertEqual(realign.split_tagged_token(token), expected)

  def test_strip_tags(self):
    self.assertEqual(realign.strip_tags("the/DT cat/NN ./."), "the cat .")


class TaggerTest(absltest.TestCase):

  def test_passthrough_tagger(self):
    self.assertEqual(tagging.PassthroughTagger()("a  b\nc"), "a/XX b/XX c/XX")

  def test_create_passthrough(self):
    self.assertIsInstance(
        tagging.create_tagger("passthrough"), tagging.PassthroughTagger
    )

  def test_unknown_tagger(self):
    with self.assertRaises(exceptions.ConfigError):
      tagging.create_tagger("brill")

  def test_spacy_tagger_formats_fine_grained_tags(self):
    token_cls = mock.Mock
    tokens = [
        token_cls(text="the", tag_="DT", is_space=False),
        token_cls(text=" ", tag_="_SP", is_space=True),
        token_cls(text="court", tag_="NN", is_space=False),
    ]
    fake_spacy = mock.Mock()
    fake_spacy.load.return_value = mock.Mock(
        return_value=tokens, pipe_names=["tok2vec", "tagger"]
    )
    with mock.patch.dict("sys.modules", {"spacy": fake_spacy}):
      tagger = tagging.SpacyTagger("en_core_web_sm")
    self.assertEqual(tagger("the  court"), "the/DT court/NN")
    fake_spacy.load.assert_called_once()

  def test_spacy_missing_model_raises(self):
    fake_spacy = mock.Mock()
    fake_spacy.load.side_effect = OSError("no model")
    with mock.patch.dict("sys.modules", {"spacy": fake_spacy}):
      with self.assertRaises(exceptions.TaggerError):
        tagging.SpacyTagger("missing_model")


if __name__ == "__main__":
  absltest.main()

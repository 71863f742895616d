import unittest

from vue_html_bridge.compiler.parser import TemplateParser
from vue_html_bridge.core.contexts import generate_contexts
from vue_html_bridge.core.segments import (
    IMPLICIT_ELSE,
    ForBlockSegment,
    IfBlockSegment,
    ImplicitElse,
    ShowBlockSegment,
    StaticSegment,
    group_segments,
    parse_inline_array,
)


def segments_of(markup: str):
    return group_segments(TemplateParser().parse(markup))


class TestContexts(unittest.TestCase):
    def test_no_definitions(self):
        self.assertEqual(generate_contexts({}), [{}])

    def test_cartesian_order(self):
        contexts = generate_contexts({"a": [1, 2], "b": ["x", "y", "z"]})
        self.assertEqual(len(contexts), 6)
        self.assertEqual(contexts[0], {"a": 1, "b": "x"})
        self.assertEqual(contexts[1], {"a": 1, "b": "y"})
        self.assertEqual(contexts[3], {"a": 2, "b": "x"})

    def test_array_values_are_single_candidates(self):
        contexts = generate_contexts({"tags": [["A", "B"]]})
        self.assertEqual(contexts, [{"tags": ["A", "B"]}])

    def test_no_deduplication(self):
        self.assertEqual(len(generate_contexts({"a": [1, 1]})), 2)


class TestGroupSegments(unittest.TestCase):
    def test_if_else_chain(self):
        segments = segments_of(
            '<p v-if="a">A</p><p v-else-if="b">B</p><p v-else>C</p><p>D</p>'
        )
        self.assertEqual(len(segments), 2)
        block = segments[0]
        self.assertIsInstance(block, IfBlockSegment)
        self.assertEqual(len(block.branches), 3)
        self.assertNotIn(IMPLICIT_ELSE, block.branches)
        self.assertIsInstance(segments[1], StaticSegment)

    def test_implicit_else(self):
        segments = segments_of('<p v-if="a">A</p><p v-else-if="b">B</p>')
        block = segments[0]
        self.assertEqual(len(block.branches), 3)
        self.assertIsInstance(block.branches[-1], ImplicitElse)

    def test_text_breaks_chain(self):
        segments = segments_of('<p v-if="a">A</p>text<p v-else>B</p>')
        self.assertEqual(len(segments), 3)
        self.assertIsInstance(segments[0].branches[-1], ImplicitElse)
        # A v-else without a preceding v-if is rendered as-is
        self.assertIsInstance(segments[2], StaticSegment)

    def test_show(self):
        segments = segments_of('<div v-show="open">x</div>')
        self.assertIsInstance(segments[0], ShowBlockSegment)

    def test_for_identifier(self):
        segments = segments_of('<li v-for="item in items">{{ item }}</li>')
        seg = segments[0]
        self.assertIsInstance(seg, ForBlockSegment)
        self.assertEqual((seg.iterator, seg.source), ("item", "items"))
        self.assertIsNone(seg.inline_array)

    def test_for_of(self):
        seg = segments_of('<li v-for="item of items">x</li>')[0]
        self.assertIsInstance(seg, ForBlockSegment)
        self.assertEqual(seg.source, "items")

    def test_for_inline_array(self):
        seg = segments_of("<li v-for=\"n in [1, 'two', three]\">{{ n }}</li>")[0]
        self.assertIsInstance(seg, ForBlockSegment)
        self.assertEqual(seg.inline_array, [1, "two", "three"])

    def test_unsupported_for_is_static(self):
        seg = segments_of('<li v-for="(item, index) in items">x</li>')[0]
        self.assertIsInstance(seg, StaticSegment)

    def test_grouping_is_per_level(self):
        segments = segments_of('<div><p v-if="a">A</p></div>')
        self.assertEqual(len(segments), 1)
        self.assertIsInstance(segments[0], StaticSegment)


class TestParseInlineArray(unittest.TestCase):
    def test_parts(self):
        self.assertEqual(parse_inline_array('[1, 2.5, "a", \'b\', c]'), [1, 2.5, "a", "b", "c"])

    def test_empty(self):
        self.assertEqual(parse_inline_array("[]"), [])
        self.assertEqual(parse_inline_array("[ ]"), [])

    def test_skips_empty_parts(self):
        self.assertEqual(parse_inline_array("[1,,2,]"), [1, 2])


if __name__ == "__main__":
    unittest.main()

import unittest

from vue_html_bridge.config import BridgeConfig
from vue_html_bridge.core.bridge import bridge
from vue_html_bridge.lint.remap import MappedLocation, map_location

ANNOTATED = (
    '<div data-start-line="2" data-start-column="3" data-end-line="2" data-end-column="40" '
    'aria-hidden="true" data-aria-hidden-start-line="2" data-aria-hidden-start-column="8" '
    'data-aria-hidden-end-line="2" data-aria-hidden-end-column="29">test</div>'
)


class TestMapLocation(unittest.TestCase):
    def test_element_start(self):
        self.assertEqual(map_location(ANNOTATED, 1, 1, "<div"), MappedLocation(2, 3))

    def test_position_inside_tag(self):
        self.assertEqual(map_location(ANNOTATED, 1, 30, ""), MappedLocation(2, 3))

    def test_attribute_specific_position(self):
        col = ANNOTATED.index("aria-hidden=") + 1
        self.assertEqual(map_location(ANNOTATED, 1, col, 'aria-hidden="true"'), (2, 8))
        self.assertEqual(map_location(ANNOTATED, 1, col, "aria-hidden"), (2, 8))

    def test_unknown_attribute_falls_back_to_element(self):
        self.assertEqual(map_location(ANNOTATED, 1, 1, 'role="x"'), (2, 3))

    def test_text_maps_to_enclosing_open_tag(self):
        col = ANNOTATED.index(">test") + 2
        self.assertEqual(map_location(ANNOTATED, 1, col, "test"), (2, 3))

    def test_no_annotation_returns_input(self):
        self.assertEqual(map_location("<div>x</div>", 1, 2, ""), (1, 2))
        self.assertEqual(map_location("plain text", 1, 3, ""), (1, 3))

    def test_out_of_range_returns_input(self):
        self.assertEqual(map_location(ANNOTATED, 10, 1, ""), (10, 1))
        self.assertEqual(map_location(ANNOTATED, 0, 0, ""), (0, 0))
        self.assertEqual(map_location("", 1, 1, ""), (1, 1))

    def test_prefix_attribute_does_not_match(self):
        html = '<p my-data-start-line="9" data-start-line="4" data-start-column="5">x</p>'
        self.assertEqual(map_location(html, 1, 1, ""), (4, 5))

    def test_multiline_html(self):
        html = '<ul>\n  <li\n    data-start-line="7"\n    data-start-column="9"\n  >x</li>\n</ul>'
        self.assertEqual(map_location(html, 2, 3, "<li"), (7, 9))


class TestRoundTrip(unittest.TestCase):
    SOURCE = """<template>
  <section class="card">
    <img src="a.png" :alt="label">
    <p v-if="open">{{ label }}</p>
  </section>
</template>
<script setup lang="ts">
defineProps<{ label: string; open: boolean }>()
</script>"""

    def test_positions_recover_source_starts(self):
        for width in (80, 10000):
            for output in bridge(self.SOURCE, BridgeConfig(print_width=width)):
                html = output.annotated
                lines = html.split("\n")

                line_no, col = _locate(lines, "<img")
                self.assertEqual(map_location(html, line_no, col, "<img"), (3, 5))

                line_no, col = _locate(lines, 'alt="')
                self.assertEqual(map_location(html, line_no, col, 'alt="mock-label"'), (3, 22))

                line_no, col = _locate(lines, 'class="card"')
                self.assertEqual(map_location(html, line_no, col, 'class="card"'), (2, 12))


def _locate(lines, needle):
    for index, line in enumerate(lines):
        if needle in line:
            return index + 1, line.index(needle) + 1
    raise AssertionError(f"{needle!r} not found")


if __name__ == "__main__":
    unittest.main()

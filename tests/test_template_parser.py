import unittest

from vue_html_bridge.compiler.ast_nodes import (
    AttributeNode,
    CommentNode,
    DirectiveNode,
    ElementNode,
    InterpolationNode,
    Position,
    TextNode,
)
from vue_html_bridge.compiler.exceptions import BridgeSyntaxError
from vue_html_bridge.compiler.parser import TemplateParser


class TestTemplateParser(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = TemplateParser()

    def test_element_with_text(self):
        nodes = self.parser.parse("<div>Hello</div>")
        self.assertEqual(len(nodes), 1)
        div = nodes[0]
        self.assertIsInstance(div, ElementNode)
        self.assertEqual(div.tag, "div")
        self.assertEqual(len(div.children), 1)
        self.assertIsInstance(div.children[0], TextNode)
        self.assertEqual(div.children[0].content, "Hello")

    def test_element_location(self):
        nodes = self.parser.parse("\n  <span>x</span>\n")
        span = nodes[0]
        self.assertEqual((span.loc.start.line, span.loc.start.column), (2, 3))
        self.assertEqual((span.loc.end.line, span.loc.end.column), (2, 17))
        self.assertEqual(span.loc.source, "<span>x</span>")

    def test_origin_shifts_positions(self):
        origin = Position(line=1, column=11, offset=10)
        nodes = self.parser.parse("<b>x</b>\n<i>y</i>", origin=origin)
        first, second = nodes
        self.assertEqual((first.loc.start.line, first.loc.start.column), (1, 11))
        self.assertEqual(first.loc.start.offset, 10)
        # Only the first line is shifted horizontally
        self.assertEqual((second.loc.start.line, second.loc.start.column), (2, 1))

    def test_whitespace_only_text_is_dropped(self):
        nodes = self.parser.parse("\n  <ul>\n    <li>a</li>\n  </ul>\n")
        self.assertEqual(len(nodes), 1)
        ul = nodes[0]
        self.assertEqual([c.tag for c in ul.children], ["li"])

    def test_text_whitespace_is_condensed(self):
        nodes = self.parser.parse("<p>one\n    two</p>")
        self.assertEqual(nodes[0].children[0].content, "one two")

    def test_interpolation(self):
        nodes = self.parser.parse("<h1>Hi {{ name }}!</h1>")
        children = nodes[0].children
        self.assertEqual(len(children), 3)
        self.assertIsInstance(children[0], TextNode)
        self.assertEqual(children[0].content, "Hi ")
        self.assertIsInstance(children[1], InterpolationNode)
        self.assertEqual(children[1].expression, "name")
        self.assertEqual(children[1].loc.source, "{{ name }}")
        self.assertEqual(children[2].content, "!")

    def test_interpolation_with_markup_characters(self):
        nodes = self.parser.parse("<p>{{ a < b && c > d }}</p>")
        p = nodes[0]
        self.assertEqual(len(p.children), 1)
        self.assertIsInstance(p.children[0], InterpolationNode)
        self.assertEqual(p.children[0].expression, "a < b && c > d")

    def test_comment(self):
        nodes = self.parser.parse("<div><!-- note --></div>")
        comment = nodes[0].children[0]
        self.assertIsInstance(comment, CommentNode)
        self.assertEqual(comment.content, " note ")

    def test_static_attributes(self):
        nodes = self.parser.parse('<input type="text" disabled value=\'x\'>')
        props = nodes[0].props
        self.assertTrue(all(isinstance(p, AttributeNode) for p in props))
        self.assertEqual(
            [(p.name, p.value) for p in props],
            [("type", "text"), ("disabled", None), ("value", "x")],
        )

    def test_attribute_location(self):
        nodes = self.parser.parse('<div class="root">x</div>')
        attr = nodes[0].props[0]
        self.assertEqual((attr.loc.start.line, attr.loc.start.column), (1, 6))
        self.assertEqual((attr.loc.end.line, attr.loc.end.column), (1, 18))

    def test_void_and_self_closing(self):
        nodes = self.parser.parse("<div><br><img src=\"a.png\"><Comp /></div>")
        tags = [(c.tag, c.is_self_closing) for c in nodes[0].children]
        self.assertEqual(tags, [("br", False), ("img", False), ("Comp", True)])

    def test_control_flow_directives(self):
        nodes = self.parser.parse(
            '<div v-if="ok">A</div><div v-else-if="maybe">B</div><div v-else>C</div>'
        )
        self.assertEqual(nodes[0].find_directive("if").exp, "ok")
        self.assertEqual(nodes[1].find_directive("else-if").exp, "maybe")
        self.assertTrue(nodes[2].has_directive("else"))
        self.assertIsNone(nodes[2].find_directive("else").exp)

    def test_directive_shorthands(self):
        nodes = self.parser.parse(
            '<a :href="url" @click.stop.prevent="go" #default .value="v" v-bind:title="t"></a>'
        )
        props = nodes[0].props
        self.assertTrue(all(isinstance(p, DirectiveNode) for p in props))

        bind, on, slot, prop, title = props
        self.assertEqual((bind.name, bind.arg, bind.exp), ("bind", "href", "url"))
        self.assertEqual((on.name, on.arg), ("on", "click"))
        self.assertEqual(on.modifiers, ["stop", "prevent"])
        self.assertEqual((slot.name, slot.arg), ("slot", "default"))
        self.assertEqual((prop.name, prop.arg), ("bind", "value"))
        self.assertIn("prop", prop.modifiers)
        self.assertEqual((title.name, title.arg, title.raw_name), ("bind", "title", "v-bind:title"))

    def test_dynamic_argument(self):
        nodes = self.parser.parse('<div :[key]="value"></div>')
        directive = nodes[0].props[0]
        self.assertEqual(directive.arg, "key")
        self.assertFalse(directive.arg_is_static)

    def test_for_directive_expression(self):
        nodes = self.parser.parse('<li v-for="item in items">{{ item }}</li>')
        self.assertEqual(nodes[0].find_directive("for").exp, "item in items")

    def test_nested_template(self):
        nodes = self.parser.parse(
            '<div><template v-if="x"><span>Child</span></template></div>'
        )
        template = nodes[0].children[0]
        self.assertEqual(template.tag, "template")
        self.assertEqual(template.children[0].tag, "span")

    def test_stray_end_tag_raises(self):
        with self.assertRaises(BridgeSyntaxError) as ctx:
            self.parser.parse("<div></div>\n</span>", file_path="Broken.vue")
        self.assertEqual(ctx.exception.file_path, "Broken.vue")
        self.assertEqual(ctx.exception.line, 2)
        self.assertIn("Broken.vue:2", str(ctx.exception))

    def test_missing_end_tag_raises(self):
        with self.assertRaises(BridgeSyntaxError) as ctx:
            self.parser.parse("<div>\n  <span>\n</div>", file_path="Broken.vue")
        self.assertIn("<span> is missing end tag", str(ctx.exception))
        self.assertEqual(ctx.exception.file_path, "Broken.vue")
        self.assertEqual((ctx.exception.line, ctx.exception.column), (2, 3))

    def test_void_element_span_ends_at_its_tag(self):
        nodes = self.parser.parse('<div>\n    <img alt="x">\n  </div>')
        img = nodes[0].children[0]
        self.assertEqual((img.loc.start.line, img.loc.start.column), (2, 5))
        self.assertEqual((img.loc.end.line, img.loc.end.column), (2, 18))
        self.assertEqual(img.loc.source, '<img alt="x">')

    def test_empty_template(self):
        self.assertEqual(self.parser.parse(""), [])
        self.assertEqual(self.parser.parse("   \n  "), [])


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest

import soupsieve

from mationhtml import ConversionContext, Matcher, MationHTML, Rule, SoupsieveMatcher, TreeReducer, parse_html


class TestConversionContext(unittest.TestCase):
    def test_content_is_lazy(self) -> None:
        calls: list[str] = []

        def child(ctx):
            calls.append("child")
            return ctx.content

        converter = MationHTML()
        converter.register([Rule("b", format=child), Rule("p", format=lambda ctx: "skipped")])
        assert converter.convert("<p><b>x</b></p>") == "skipped"
        assert calls == []

    def test_children_are_reduced_once_per_element(self) -> None:
        calls: list[str] = []

        def child(ctx):
            calls.append("child")
            return ctx.content

        def parent(ctx):
            return ctx.content + ctx.content + ctx.convert()

        converter = MationHTML()
        converter.register([Rule("b", format=child), Rule("p", format=parent), Rule("p", to="{content}")])
        assert converter.convert("<p><b>x</b></p>") == "xxx"
        assert calls == ["child"]

    def test_convert_without_argument_ignores_previous_rule_output(self) -> None:
        converter = MationHTML()
        converter.register(
            [
                Rule("b", to="**{content}**"),
                Rule("b", format=lambda ctx: f"{ctx.content}|{ctx.convert()}"),
            ]
        )
        assert converter.convert("<b>x</b>") == "**x**|x"

    def test_convert_child_node_applies_its_rules(self) -> None:
        depths: list[int] = []

        def item(ctx):
            depths.append(ctx.depth)
            return f"- {ctx.content}\n"

        def listing(ctx):
            items = ctx.node.find_all("li", recursive=False)
            return "".join(ctx.convert(li) for li in items)

        converter = MationHTML()
        converter.register([Rule("ul", format=listing), Rule("li", format=item)])
        assert converter.convert("<ul><li>a</li> <li>b</li></ul>") == "- a\n- b\n"
        assert depths == [2, 2]

    def test_convert_text_node(self) -> None:
        def first_text(ctx):
            return ctx.convert(ctx.node.contents[0])

        converter = MationHTML()
        converter.register(Rule("p", format=first_text))
        assert converter.convert("<p>a   b<i>c</i></p>") == "a b"

    def test_depth_counts_from_conversion_root(self) -> None:
        depths: dict[str, int] = {}

        def record(ctx):
            depths[ctx.node.name] = ctx.depth
            return ctx.content

        converter = MationHTML()
        converter.register(Rule("*", format=record))
        converter.convert("<div><p><b>x</b></p></div><span>y</span>")
        assert depths == {"div": 1, "p": 2, "b": 3, "span": 1}

    def test_dataset_and_node(self) -> None:
        seen: list[ConversionContext] = []

        def record(ctx):
            seen.append(ctx)
            return ""

        converter = MationHTML()
        converter.register(Rule("a", format=record))
        converter.convert('<a href="/x" title="t">go</a>')
        ctx = seen[0]
        assert ctx.node.name == "a"
        assert ctx.dataset == {"href": "/x", "title": "t"}
        assert repr(ctx) == "ConversionContext(<a>, depth=1)"

    def test_fallback_context_has_no_previous_output(self) -> None:
        converter = MationHTML()
        converter.set_fallback(lambda ctx: ctx.content if ctx.content == ctx.convert() else "mismatch")
        assert converter.convert("<p>x</p>") == "x"


class TestChildSnapshot(unittest.TestCase):
    def test_appended_siblings_are_not_visited(self) -> None:
        def mutate(ctx):
            ctx.node.parent.append("!")
            return ctx.content

        converter = MationHTML()
        converter.register(Rule("b", format=mutate))
        assert converter.convert("<p><b>x</b></p>") == "x"

    def test_removed_siblings_are_still_visited(self) -> None:
        def mutate(ctx):
            ctx.node.next_sibling.extract()
            return ctx.content

        converter = MationHTML()
        converter.register(Rule("b", format=mutate))
        assert converter.convert("<p><b>x</b><i>y</i></p>") == "xy"


class TestMatchers(unittest.TestCase):
    def test_function_matcher(self) -> None:
        converter = MationHTML(matcher=lambda node, selector: node.name == selector)
        converter.register(Rule("p", to="<{content}>"))
        assert converter.convert("<p>x</p><div>y</div>") == "<x>y"

    def test_object_matcher_receives_selectors_verbatim(self) -> None:
        class RecordingMatcher:
            def __init__(self) -> None:
                self.calls: list[tuple[str, str]] = []

            def matches(self, node, selector: str) -> bool:
                self.calls.append((node.name, selector))
                return selector == "any " + node.name

        matcher = RecordingMatcher()
        assert isinstance(matcher, Matcher)

        converter = MationHTML(matcher=matcher)
        converter.register(Rule("any p", to="[{content}]"))
        converter.set_ignore_selectors(["!skip"])
        assert converter.convert("<p>x</p>") == "[x]"
        assert matcher.calls == [("p", "!skip"), ("p", "any p")]

    def test_rejects_unusable_matcher(self) -> None:
        with self.assertRaises(TypeError):
            MationHTML(matcher=42)  # type: ignore[arg-type]

    def test_soupsieve_matcher_caches_compiled_selectors(self) -> None:
        matcher = SoupsieveMatcher()
        assert matcher.compile("p.note") is matcher.compile("p.note")

        soup = parse_html('<p class="note">x</p><p>y</p>')
        first, second = soup.body.find_all("p")
        assert matcher.matches(first, "p.note") is True
        assert matcher.matches(second, "p.note") is False
        assert matcher.matches(second, "body > p:last-child") is True

    def test_invalid_selector_fails_at_conversion(self) -> None:
        converter = MationHTML()
        converter.register(Rule("p[", to="x"))
        with self.assertRaises(soupsieve.SelectorSyntaxError):
            converter.convert("<p>x</p>")


class TestTreeReducer(unittest.TestCase):
    def test_reduce_children_directly(self) -> None:
        soup = parse_html("<p>a  <b>b</b></p><!-- c -->")
        reducer = TreeReducer(rules=(Rule("b", to="*{content}*"),), matcher=SoupsieveMatcher())
        assert reducer.reduce_children(soup.body, 0) == "a *b*"

    def test_ignored_element(self) -> None:
        soup = parse_html("<p>a</p><p class='x'>b</p>")
        reducer = TreeReducer(rules=(), matcher=SoupsieveMatcher(), ignore_selectors=(".x",))
        assert reducer.reduce_children(soup.body, 0) == "a"

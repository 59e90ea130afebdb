import json
import logging

import pytest

from objkit import *


builder = css_selector_builder


class Circle(object):
    def __init__(self, radius):
        raise AssertionError("constructor must not be called")

    def diameter(self):
        return self.radius * 2


class Doubler(object):
    def __init__(self, w):
        self.w = w
        self.get_double = lambda: self.w * 2


class Point(object):
    __slots__ = ("x", "y")


def test_rectangle():
    r = Rectangle(10, 20)
    assert r.width == 10
    assert r.height == 20
    assert r.area() == 200
    assert r.get_area() == 200
    repr(r)


@pytest.mark.parametrize(
    "value,text",
    [
        ([1, 2, 3], "[1,2,3]"),
        ({"width": 10, "height": 20}, '{"width":10,"height":20}'),
        (Rectangle(10, 20), '{"width":10,"height":20}'),
        ({"shapes": [Rectangle(1, 2)]}, '{"shapes":[{"width":1,"height":2}]}'),
        ("text", '"text"'),
        (None, "null"),
        (Doubler(3), '{"w":3}'),
    ],
)
def test_serialize(value, text):
    assert serialize(value) == text
    assert get_json(value) == text


def test_serialize_unsupported():
    with pytest.raises(TypeError):
        serialize(object())


def test_deserialize():
    circle = deserialize(Circle, '{"radius":10}')
    assert isinstance(circle, Circle)
    assert circle.radius == 10
    assert circle.diameter() == 20
    assert from_json(Circle, '{"radius":1}').diameter() == 2


def test_round_trip():
    r = Rectangle(10, 20)
    copy = deserialize(Rectangle, serialize(r))
    assert isinstance(copy, Rectangle)
    assert vars(copy) == vars(r)
    assert copy.area() == 200


def test_deserialize_malformed():
    with pytest.raises(json.JSONDecodeError):
        deserialize(Circle, '{"radius":')
    with pytest.raises(TypeError):
        deserialize(Circle, "[1,2,3]")


@pytest.mark.parametrize(
    "type,value,rendered",
    [
        (SimpleSelectorType.ELEMENT, "div", "div"),
        (SimpleSelectorType.ID, "main", "#main"),
        (SimpleSelectorType.CLASS, "container", ".container"),
        (SimpleSelectorType.ATTRIBUTE, 'href$=".png"', '[href$=".png"]'),
        (SimpleSelectorType.PSEUDO_CLASS, "focus", ":focus"),
        (SimpleSelectorType.PSEUDO_ELEMENT, "before", "::before"),
    ],
)
def test_simple_selector(type, value, rendered):
    selector = SimpleSelector(value, type)
    assert selector.render() == rendered
    assert str(selector) == rendered
    assert selector.stringify() == rendered
    repr(selector)


@pytest.mark.parametrize(
    "selector,rendered",
    [
        (builder.element("div"), "div"),
        (
            builder.id("main").class_("container").class_("editable"),
            "#main.container.editable",
        ),
        (
            builder.element("a").attr('href$=".png"').pseudo_class("focus"),
            'a[href$=".png"]:focus',
        ),
        (builder.element("p").pseudo_element("first-line"), "p::first-line"),
        (builder.class_("a").class_("b").attr("x").attr("y"), ".a.b[x][y]"),
        (
            builder.attr("disabled").pseudo_class("hover").pseudo_class("focus"),
            "[disabled]:hover:focus",
        ),
        (builder.pseudo_class("root"), ":root"),
        (builder.pseudo_element("selection"), "::selection"),
        (
            builder.element("input")
            .id("name")
            .class_("field")
            .attr("type=text")
            .pseudo_class("focus")
            .pseudo_element("placeholder"),
            "input#name.field[type=text]:focus::placeholder",
        ),
    ],
)
def test_compound_selector(selector, rendered):
    assert selector.render() == rendered
    assert str(selector) == rendered
    assert selector.stringify() == rendered
    assert "".join(part.render() for part in selector) == rendered
    repr(selector)


def test_compound_selector_is_fluent():
    selector = builder.element("div")
    assert selector.id("main") is selector
    assert selector.class_("a") is selector
    assert selector.attr("b") is selector
    assert selector.pseudo_class("c") is selector
    assert selector.pseudo_element("d") is selector
    assert len(selector) == 6


def test_empty_compound_selector():
    selector = CompoundSelector()
    assert selector.render() == ""
    assert len(selector) == 0
    assert selector.element("div") is selector
    assert selector.render() == "div"


@pytest.mark.parametrize(
    "build",
    [
        lambda: builder.class_("a").element("div"),
        lambda: builder.id("main").element("div"),
        lambda: builder.class_("a").id("main"),
        lambda: builder.attr("href").class_("a"),
        lambda: builder.pseudo_class("focus").attr("href"),
        lambda: builder.pseudo_element("after").pseudo_class("hover"),
        lambda: builder.element("div").pseudo_element("after").class_("a"),
    ],
)
def test_order_error(build):
    with pytest.raises(OrderError):
        build()


@pytest.mark.parametrize(
    "build",
    [
        lambda: builder.element("div").element("span"),
        lambda: builder.element("div").id("main").element("span"),
        lambda: builder.id("a").id("b"),
        lambda: builder.element("div").id("a").class_("c").id("b"),
        lambda: builder.pseudo_element("before").pseudo_element("after"),
        lambda: builder.element("p").pseudo_element("before").pseudo_element("after"),
    ],
)
def test_duplicate_error(build):
    with pytest.raises(DuplicateError):
        build()


def test_duplicate_checked_before_order():
    # A second id after a class is a duplicate, not an ordering problem.
    with pytest.raises(DuplicateError):
        builder.id("a").class_("b").id("c")


def test_rejected_part_leaves_selector_unchanged():
    selector = builder.element("div").id("main").class_("container")
    with pytest.raises(DuplicateError):
        selector.id("other")
    with pytest.raises(DuplicateError):
        selector.element("span")
    with pytest.raises(OrderError):
        selector.attr("x").class_("late")
    assert selector.render() == "div#main.container[x]"
    assert selector.id_count == 1
    assert selector.pseudo_element_count == 0
    selector.pseudo_element("after")
    with pytest.raises(DuplicateError):
        selector.pseudo_element("before")
    assert selector.pseudo_element_count == 1
    assert selector.render() == "div#main.container[x]::after"


def test_exception_attributes():
    with pytest.raises(OrderError) as excinfo:
        builder.id("main").element("div")
    exc = excinfo.value
    assert isinstance(exc, SelectorBuilderException)
    assert exc.selector == "#main"
    assert exc.type == SimpleSelectorType.ELEMENT
    assert exc.value == "div"
    assert "in order" in exc.why
    assert str(exc).startswith("cannot add element 'div' to '#main': ")

    with pytest.raises(DuplicateError) as excinfo:
        builder.pseudo_element("before").pseudo_element("after")
    assert excinfo.value.type == SimpleSelectorType.PSEUDO_ELEMENT
    assert "at most once" in str(excinfo.value)


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="objkit"):
        with pytest.raises(DuplicateError):
            builder.id("a").id("b")
    assert "DuplicateError" in caplog.text


def test_combined_selector():
    a = builder.element("div").id("main")
    b = builder.class_("item")
    for combinator in [" ", ">", "+", "~"]:
        combined = builder.combine(a, combinator, b)
        assert combined.render() == a.render() + " " + combinator + " " + b.render()
        assert str(combined) == combined.stringify() == combined.render()
    repr(builder.combine(a, ">", b))


def test_nested_combined_selector():
    selector = builder.combine(
        builder.element("div").id("main").class_("container").class_("draggable"),
        "+",
        builder.combine(
            builder.element("table").id("data"),
            "~",
            builder.combine(
                builder.element("tr").pseudo_class("nth-of-type(even)"),
                " ",
                builder.element("td").pseudo_class("nth-of-type(even)"),
            ),
        ),
    )
    assert selector.render() == (
        "div#main.container.draggable + table#data ~ "
        "tr:nth-of-type(even)   td:nth-of-type(even)"
    )


def test_left_nested_combined_selector():
    selector = builder.combine(
        builder.combine(builder.element("ul"), ">", builder.element("li")),
        Combinator.SUBSEQUENT_SIBLING,
        builder.element("a").attr("href"),
    )
    assert selector.combinator == "~"
    assert selector.render() == "ul > li ~ a[href]"


@pytest.mark.parametrize(
    "combinator,symbol",
    [
        (Combinator.DESCENDANT, " "),
        (Combinator.CHILD, ">"),
        (Combinator.NEXT_SIBLING, "+"),
        (Combinator.SUBSEQUENT_SIBLING, "~"),
    ],
)
def test_combinator_members(combinator, symbol):
    combined = CombinedSelector(builder.element("a"), combinator, builder.element("b"))
    assert combined.render() == "a %s b" % symbol


def test_combinator_not_validated():
    combined = builder.combine(builder.element("a"), "||", builder.element("b"))
    assert combined.render() == "a || b"


def test_builder_is_stateless():
    first = builder.element("div")
    second = builder.element("div")
    assert first is not second
    first.id("main")
    assert second.render() == "div"
    assert SelectorBuilder().id("x").render() == "#x"


def test_deserialize_slots():
    point = deserialize(Point, '{"x":1,"y":2}')
    assert isinstance(point, Point)
    assert (point.x, point.y) == (1, 2)

"""
:mod:`objkit` is a small collection of object utilities: a rectangle
value type, JSON round-tripping of plain objects, and a fluent CSS
selector builder.

:mod:`objkit`

- is a single module;
- has no dependency outside `PSL <https://docs.python.org/3/library/>`_;
- supports Python 3.7 and forward.

The selector builder composes selector strings part by part and rejects
parts given out of order (element, id, class, attribute, pseudo-class,
pseudo-element) or given twice where CSS allows only one.

Simple example:

.. doctest::

   >>> from objkit import css_selector_builder as builder
   >>> builder.id("main").class_("container").class_("editable").render()
   '#main.container.editable'
   >>> builder.element("a").attr('href$=".png"').pseudo_class("focus").render()
   'a[href$=".png"]:focus'
   >>> builder.combine(
   ...     builder.element("div").id("main").class_("container").class_("draggable"),
   ...     "+",
   ...     builder.combine(
   ...         builder.element("table").id("data"),
   ...         "~",
   ...         builder.combine(
   ...             builder.element("tr").pseudo_class("nth-of-type(even)"),
   ...             " ",
   ...             builder.element("td").pseudo_class("nth-of-type(even)"),
   ...         ),
   ...     ),
   ... ).render()
   'div#main.container.draggable + table#data ~ tr:nth-of-type(even)   td:nth-of-type(even)'
   >>> builder.id("main").element("div")
   Traceback (most recent call last):
     ...
   objkit.OrderError: cannot add element 'div' to '#main': selector parts must appear in order: element, id, class, attribute, pseudo-class, pseudo-element
"""

import json
import logging
from enum import Enum
from typing import Any, Iterator, List, NoReturn, Type, TypeVar, Union

__all__ = [
    "Rectangle",
    "serialize",
    "deserialize",
    "get_json",
    "from_json",
    "SelectorBuilderException",
    "OrderError",
    "DuplicateError",
    "SimpleSelectorType",
    "SimpleSelector",
    "CompoundSelector",
    "CombinedSelector",
    "Combinator",
    "SelectorBuilder",
    "css_selector_builder",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

SelectorLike = Union["CompoundSelector", "CombinedSelector"]


class Rectangle(object):
    """
    Represents a rectangle.

    Attributes:
        width  (:class:`float`)
        height (:class:`float`)
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return "<Rectangle %sx%s>" % (self.width, self.height)

    def area(self) -> float:
        return self.width * self.height

    def get_area(self) -> float:
        """Alias of :meth:`area`."""
        return self.area()


# Plain objects are encoded by their instance attributes; callables
# stored on the instance are left out along with the class's methods.
def _encode_object(obj: Any) -> Any:
    try:
        fields = vars(obj)
    except TypeError:
        raise TypeError(
            "object of type %s is not JSON serializable" % type(obj).__name__
        )
    return {key: val for key, val in fields.items() if not callable(val)}


def serialize(value: Any) -> str:
    """
    Returns the compact JSON representation of `value`.

    Lists, dicts, strings, numbers, booleans and ``None`` are encoded as
    usual; any other object is encoded as a JSON object of its instance
    attributes.

    Args:
        value: object to encode

    Returns:
        JSON text without insignificant whitespace, e.g. ``[1,2,3]`` or
        ``{"width":10,"height":20}``.
    """
    return json.dumps(value, separators=(",", ":"), default=_encode_object)


def deserialize(cls: Type[T], text: str) -> T:
    """
    Reconstructs an instance of `cls` from its JSON representation.

    The instance is created without calling ``cls.__init__``; the parsed
    fields are set directly as instance attributes, so the result has
    the data of `text` and the behavior (methods) of `cls`. Classes
    using ``__slots__`` are supported for fields named in their slots.

    :class:`json.JSONDecodeError` is raised on malformed input, and
    :class:`TypeError` if `text` does not encode a JSON object.

    Args:
        cls:  class to instantiate
        text: JSON text

    Returns:
        The reconstructed instance.
    """
    fields = json.loads(text)
    if not isinstance(fields, dict):
        raise TypeError(
            "expecting a JSON object for %s, got %s"
            % (cls.__name__, type(fields).__name__)
        )
    obj = cls.__new__(cls)  # type: T
    for key, val in fields.items():
        setattr(obj, key, val)
    return obj


get_json = serialize
from_json = deserialize


class SelectorBuilderException(Exception):
    """
    Exception raised when a part cannot be added to a compound selector.

    Attributes:
        selector (:class:`str`):
            Rendering of the compound selector at the time of failure.
        type (:class:`SimpleSelectorType`):
            Type of the rejected part.
        value (:class:`str`):
            Value of the rejected part.
        why (:class:`str`):
            Reason of the failure.
    """

    def __init__(
        self, selector: str, type: "SimpleSelectorType", value: str, why: str
    ) -> None:
        self.selector = selector
        self.type = type
        self.value = value
        self.why = why

    def __str__(self) -> str:
        return "cannot add %s %s to %s: %s" % (
            self.type.label,
            repr(self.value),
            repr(self.selector),
            self.why,
        )


class OrderError(SelectorBuilderException):
    """Raised when a part is added after a part of higher rank."""

    def __init__(
        self, selector: str, type: "SimpleSelectorType", value: str
    ) -> None:
        super().__init__(
            selector,
            type,
            value,
            "selector parts must appear in order: "
            "element, id, class, attribute, pseudo-class, pseudo-element",
        )


class DuplicateError(SelectorBuilderException):
    """Raised when an element, id or pseudo-element is added twice."""

    def __init__(
        self, selector: str, type: "SimpleSelectorType", value: str
    ) -> None:
        super().__init__(
            selector,
            type,
            value,
            "element, id, and pseudo-element may each occur at most once "
            "in a compound selector",
        )


# Enum: basis for poor man's algebraic data type. Values double as
# ranks; parts of a compound selector must be non-decreasing in rank.
class SimpleSelectorType(Enum):
    """
    Simple selector types, in the order they must appear.

    Members correspond to the following forms of simple selector:

    - :attr:`ELEMENT`: ``tag``;
    - :attr:`ID`: ``#id``;
    - :attr:`CLASS`: ``.class``;
    - :attr:`ATTRIBUTE`: ``[attr]``;
    - :attr:`PSEUDO_CLASS`: ``:pseudo-class``;
    - :attr:`PSEUDO_ELEMENT`: ``::pseudo-element``.
    """

    ELEMENT = 1
    ID = 2
    CLASS = 3
    ATTRIBUTE = 4
    PSEUDO_CLASS = 5
    PSEUDO_ELEMENT = 6

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


class SimpleSelector:
    """
    Represents a simple selector, e.g. ``#main`` or ``[href]``.

    The value is taken verbatim; no validation is performed.

    Attributes:
        value (:class:`str`)
        type  (:class:`SimpleSelectorType`)
    """

    def __init__(self, value: str, type: SimpleSelectorType) -> None:
        self.value = value
        self.type = type

    def __repr__(self) -> str:
        return "<SimpleSelector %s>" % repr(str(self))

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        if self.type == SimpleSelectorType.ELEMENT:
            fmt = "{val}"
        elif self.type == SimpleSelectorType.ID:
            fmt = "#{val}"
        elif self.type == SimpleSelectorType.CLASS:
            fmt = ".{val}"
        elif self.type == SimpleSelectorType.ATTRIBUTE:
            fmt = "[{val}]"
        elif self.type == SimpleSelectorType.PSEUDO_CLASS:
            fmt = ":{val}"
        elif self.type == SimpleSelectorType.PSEUDO_ELEMENT:
            fmt = "::{val}"
        else:  # pragma: no cover
            raise RuntimeError("unimplemented simple selector: %s" % repr(self.type))
        return fmt.format(val=self.value)

    def stringify(self) -> str:
        """Alias of :meth:`render`."""
        return self.render()


class CompoundSelector:
    """
    Represents a compound selector, i.e. a sequence of simple selectors
    describing a single element, such as ``div#main.container``.

    Parts are added through the fluent methods :meth:`element`,
    :meth:`id`, :meth:`class_`, :meth:`attr`, :meth:`pseudo_class` and
    :meth:`pseudo_element`, each of which returns the selector itself.
    Parts must be added in the order listed above; an element, an id
    and a pseudo-element may each be added at most once. Violations
    raise :class:`OrderError` or :class:`DuplicateError` and leave the
    selector unchanged.

    An element can only be the first part, so :meth:`element` only
    succeeds on an empty selector. Use :data:`css_selector_builder` to
    start a selector with any type of part.

    Attributes:
        parts (:class:`List`\\[:class:`SimpleSelector`]):
            Simple selectors, in rendering order.
        id_count (:class:`int`)
        pseudo_element_count (:class:`int`)
    """

    def __init__(self) -> None:
        self.parts = []  # type: List[SimpleSelector]
        self.id_count = 0
        self.pseudo_element_count = 0

    def __repr__(self) -> str:
        return "<CompoundSelector %s>" % repr(str(self))

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return len(self.parts)

    def __iter__(self) -> Iterator[SimpleSelector]:
        return iter(self.parts)

    def element(self, value: str) -> "CompoundSelector":
        if self.parts:
            if any(part.type == SimpleSelectorType.ELEMENT for part in self.parts):
                self._reject(DuplicateError, value, SimpleSelectorType.ELEMENT)
            self._reject(OrderError, value, SimpleSelectorType.ELEMENT)
        return self._append(value, SimpleSelectorType.ELEMENT)

    def id(self, value: str) -> "CompoundSelector":
        if self.id_count > 0:
            self._reject(DuplicateError, value, SimpleSelectorType.ID)
        return self._append(value, SimpleSelectorType.ID)

    def class_(self, value: str) -> "CompoundSelector":
        return self._append(value, SimpleSelectorType.CLASS)

    def attr(self, value: str) -> "CompoundSelector":
        return self._append(value, SimpleSelectorType.ATTRIBUTE)

    def pseudo_class(self, value: str) -> "CompoundSelector":
        return self._append(value, SimpleSelectorType.PSEUDO_CLASS)

    def pseudo_element(self, value: str) -> "CompoundSelector":
        if self.pseudo_element_count > 0:
            self._reject(DuplicateError, value, SimpleSelectorType.PSEUDO_ELEMENT)
        return self._append(value, SimpleSelectorType.PSEUDO_ELEMENT)

    def render(self) -> str:
        """Concatenation of all parts; empty if there are none."""
        return "".join(part.render() for part in self.parts)

    def stringify(self) -> str:
        """Alias of :meth:`render`."""
        return self.render()

    def _append(self, value: str, type: SimpleSelectorType) -> "CompoundSelector":
        if self.parts and self.parts[-1].type.value > type.value:
            self._reject(OrderError, value, type)
        self.parts.append(SimpleSelector(value, type))
        if type == SimpleSelectorType.ID:
            self.id_count += 1
        elif type == SimpleSelectorType.PSEUDO_ELEMENT:
            self.pseudo_element_count += 1
        return self

    def _reject(
        self,
        exc_class: Type[SelectorBuilderException],
        value: str,
        type: SimpleSelectorType,
    ) -> NoReturn:
        exc = exc_class(self.render(), type, value)
        logger.debug("%s: %s", exc_class.__name__, exc)
        raise exc


class Combinator(Enum):
    """
    Combinator types.

    Members correspond to the following combinators:

    - :attr:`DESCENDANT`: ``A   B``;
    - :attr:`CHILD`: ``A > B``;
    - :attr:`NEXT_SIBLING`: ``A + B``;
    - :attr:`SUBSEQUENT_SIBLING`: ``A ~ B``.
    """

    DESCENDANT = " "
    CHILD = ">"
    NEXT_SIBLING = "+"
    SUBSEQUENT_SIBLING = "~"


class CombinedSelector:
    """
    Represents two selectors joined by a combinator.

    Either side may itself be a :class:`CombinedSelector`, so arbitrarily
    long chains are built as nested pairs. The combinator is rendered
    with a single space on each side; it is not validated, and a
    :class:`Combinator` member is accepted in place of its symbol.

    Attributes:
        left       (:class:`CompoundSelector` or :class:`CombinedSelector`)
        combinator (:class:`str`)
        right      (:class:`CompoundSelector` or :class:`CombinedSelector`)
    """

    def __init__(
        self,
        left: SelectorLike,
        combinator: Union[str, Combinator],
        right: SelectorLike,
    ) -> None:
        if isinstance(combinator, Combinator):
            combinator = combinator.value
        self.left = left
        self.combinator = combinator  # type: str
        self.right = right

    def __repr__(self) -> str:
        return "<CombinedSelector %s>" % repr(str(self))

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        return "%s %s %s" % (self.left.render(), self.combinator, self.right.render())

    def stringify(self) -> str:
        """Alias of :meth:`render`."""
        return self.render()


class SelectorBuilder:
    """
    Factory for selectors.

    Each of the part methods starts a new :class:`CompoundSelector` with
    that part; :meth:`combine` joins two selectors. The builder holds no
    state, so a single instance (:data:`css_selector_builder`) can be
    shared freely.
    """

    def element(self, value: str) -> CompoundSelector:
        return CompoundSelector().element(value)

    def id(self, value: str) -> CompoundSelector:
        return CompoundSelector().id(value)

    def class_(self, value: str) -> CompoundSelector:
        return CompoundSelector().class_(value)

    def attr(self, value: str) -> CompoundSelector:
        return CompoundSelector().attr(value)

    def pseudo_class(self, value: str) -> CompoundSelector:
        return CompoundSelector().pseudo_class(value)

    def pseudo_element(self, value: str) -> CompoundSelector:
        return CompoundSelector().pseudo_element(value)

    def combine(
        self,
        left: SelectorLike,
        combinator: Union[str, Combinator],
        right: SelectorLike,
    ) -> CombinedSelector:
        """
        Joins `left` and `right` with `combinator`.

        Args:
            left:       selector on the left-hand side
            combinator: one of ``" "``, ``">"``, ``"+"``, ``"~"`` (not
                        validated) or a :class:`Combinator`
            right:      selector on the right-hand side

        Returns:
            A new :class:`CombinedSelector`.
        """
        return CombinedSelector(left, combinator, right)


css_selector_builder = SelectorBuilder()

#!/usr/bin/env python
import sys
from collections.abc import Iterable
from typing import ClassVar
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from davcal.lib.namespace import nsmap
from davcal.lib.namespace import Property
from davcal.lib.python_utilities import to_unicode

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    children: Optional[List[Self]] = None
    tag: ClassVar[Optional[str]] = None
    value: Optional[str] = None
    attributes: Optional[dict] = None

    def __init__(
        self, name: Optional[str] = None, value: Union[str, bytes, None] = None
    ) -> None:
        self.children = []
        self.attributes = {}
        value = to_unicode(value)
        self.value = None
        if name is not None:
            self.attributes["name"] = name
        if value is not None:
            self.value = value

    def __add__(
        self, other: Union["BaseElement", Iterable["BaseElement"]]
    ) -> "BaseElement":
        return self.append(other)

    def __str__(self) -> str:
        return str(self.tobytes(pretty_print=True), "utf-8")

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.attributes)

    def tobytes(self, pretty_print: bool = False) -> bytes:
        """
        Serializes the element tree as a complete XML document.  All
        namespaces in use are declared once, on the root element.
        """
        root = self.xmlelement()
        etree.cleanup_namespaces(root, top_nsmap=nsmap)
        return etree.tostring(
            root, encoding="utf-8", xml_declaration=True, pretty_print=pretty_print
        )

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("Unexpected value None for self.tag")

        if self.attributes is None:
            raise ValueError("Unexpected value None for self.attributes")

        root = etree.Element(self.tag, nsmap=nsmap)
        if self.value is not None:
            root.text = self.value

        for k in self.attributes:
            root.set(k, self.attributes[k])

        self.xmlchildren(root)
        return root

    def xmlchildren(self, root: _Element) -> None:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        for c in self.children:
            root.append(c.xmlelement())

    def append(self, element: Union[Self, Iterable[Self]]) -> Self:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        if isinstance(element, Iterable):
            self.children.extend(element)
        else:
            self.children.append(element)

        return self


class NamedBaseElement(BaseElement):
    def __init__(self, name: Optional[str] = None) -> None:
        super(NamedBaseElement, self).__init__(name=name)

    def xmlelement(self) -> _Element:
        if self.attributes.get("name") is None:
            raise ValueError("name attribute must be defined")
        return super(NamedBaseElement, self).xmlelement()


class ValuedBaseElement(BaseElement):
    def __init__(self, value: Union[str, bytes, None] = None) -> None:
        super(ValuedBaseElement, self).__init__(value=value)


class PropertyElement(BaseElement):
    """
    An element for an arbitrary requested property.  The tag is taken
    from the Property rather than from the class.
    """

    def __init__(self, prop: Property, value: Union[str, bytes, None] = None) -> None:
        super(PropertyElement, self).__init__(value=value)
        self.prop = prop

    @property
    def tag(self) -> str:  # type: ignore[override]
        return self.prop.tag

    def __repr__(self) -> str:
        return "PropertyElement(%s)" % self.prop

from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional
from xml.dom import minidom
from xml.etree.ElementTree import Element, SubElement, tostring

from ..core.errors import InternalExportError


class DocumentBuilder:
    """
    Builds an ElementTree document through a stack of open elements.

    ``depth`` is the number of elements opened below the root. Elements
    are only opened through the ``element()`` context manager, which
    restores the previous depth on every exit path.
    """

    def __init__(self, tag: str, **attrib: str):
        self.root = Element(tag, attrib)
        self._stack: List[Element] = [self.root]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    @property
    def current(self) -> Element:
        return self._stack[-1]

    @contextmanager
    def element(self, tag: str, text: Optional[str] = None, **attrib: str) -> Iterator[Element]:
        elem = self.leaf(tag, text, **attrib)
        depth = self.depth
        self._stack.append(elem)
        try:
            yield elem
        finally:
            popped = self._stack.pop()
            if popped is not elem or self.depth != depth:
                raise InternalExportError(
                    f"Unbalanced element nesting while closing <{tag}>")

    def leaf(self, tag: str, text: Optional[str] = None, **attrib: str) -> Element:
        """Append a child element to the currently open element."""
        elem = SubElement(self.current, tag, attrib)
        if text is not None:
            elem.text = text
        return elem


def float_to_str(value: float, precision: int = 7) -> str:
    return f"{value:.{precision}g}"


def floats_to_str(values: Iterable[float], precision: int = 7) -> str:
    return " ".join(float_to_str(v, precision) for v in values)


def ints_to_str(values: Iterable[int]) -> str:
    return " ".join(str(v) for v in values)


def matrix_to_values(matrix) -> List[float]:
    """Flatten a 4x4 matrix to 16 floats, row major."""
    return [matrix[row][col] for row in range(4) for col in range(4)]


def xml_to_bytes(root: Element, indent: str = "  ") -> bytes:
    """Convert an ElementTree Element to pretty-printed UTF-8 XML."""
    rough = tostring(root, encoding='unicode')
    parsed = minidom.parseString(rough)
    return parsed.toprettyxml(indent=indent, encoding="utf-8")

"""Bind OFD XML entries onto pydantic models.

Element and attribute names are matched on their local name (the ``ofd:``
namespace is ignored) against the field aliases, which default to the
PascalCase form of the field name.
"""

import logging
import re
import typing
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from lxml import etree
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_pascal

from ofdling.exceptions import StructuralDecodeError

_log = logging.getLogger(__name__)

_XML_TEXT = "xml_text"
_XML_SCALAR = "xml_scalar"

_XML_DECLARATION = re.compile(r"\A\ufeff?\s*<\?xml\b[^>]*\?>")

_ModelT = TypeVar("_ModelT", bound="XmlModel")


def xml_text(default: Any = "", **kwargs: Any) -> Any:
    """Declare a field that receives the element's own text content."""
    return Field(default, json_schema_extra={_XML_TEXT: True}, **kwargs)


def xml_scalar(default: Any = None, **kwargs: Any) -> Any:
    """Declare a child element whose text is decoded as one value.

    Used where a field validator turns the text into a list, so the binder must
    not collect repeated tags into a list itself.
    """
    return Field(default, json_schema_extra={_XML_SCALAR: True}, **kwargs)


def local_name(tag: str) -> str:
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def _unwrap(annotation: Any) -> Tuple[bool, Any]:
    """Return ``(is_list, item_type)`` with ``Optional`` stripped."""
    origin = typing.get_origin(annotation)
    if origin is Union:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap(args[0])
        return False, annotation
    if origin in (list, List):
        (item,) = typing.get_args(annotation) or (str,)
        return True, item
    if origin is typing.Annotated:
        return _unwrap(typing.get_args(annotation)[0])
    return False, annotation


def _is_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, XmlModel)


def _element_text(element: etree._Element) -> str:
    return element.text or ""


class XmlModel(BaseModel):
    """A pydantic model decodable from an XML element."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def _xml_names(cls) -> Dict[str, str]:
        names: Dict[str, str] = {}
        for field_name, info in cls.model_fields.items():
            if isinstance(info.validation_alias, AliasChoices):
                for choice in info.validation_alias.choices:
                    if isinstance(choice, str):
                        names[choice] = field_name
            elif isinstance(info.validation_alias, str):
                names[info.validation_alias] = field_name
            if info.alias:
                names[info.alias] = field_name
        return names

    @classmethod
    def _marked_fields(cls, marker: str) -> List[str]:
        return [
            field_name
            for field_name, info in cls.model_fields.items()
            if isinstance(info.json_schema_extra, dict)
            and info.json_schema_extra.get(marker)
        ]

    @classmethod
    def element_data(cls, element: etree._Element) -> Dict[str, Any]:
        """Collect the raw field values of ``element`` keyed by field name."""
        names = cls._xml_names()
        data: Dict[str, Any] = {}

        for attr_name, value in element.attrib.items():
            field_name = names.get(local_name(attr_name))
            if field_name is not None:
                data[field_name] = value

        for text_field in cls._marked_fields(_XML_TEXT):
            data[text_field] = _element_text(element)

        scalar_fields = cls._marked_fields(_XML_SCALAR)

        for child in element:
            if not isinstance(child.tag, str):
                # comments and processing instructions
                continue
            field_name = names.get(local_name(child.tag))
            if field_name is None:
                _log.debug("Ignoring <%s> in <%s>", child.tag, element.tag)
                continue
            if field_name in scalar_fields:
                data.setdefault(field_name, _element_text(child))
                continue
            is_list, item_type = _unwrap(cls.model_fields[field_name].annotation)
            if _is_model(item_type):
                value: Any = item_type.element_data(child)
            else:
                value = _element_text(child)
            if is_list:
                data.setdefault(field_name, []).append(value)
            elif field_name not in data:
                data[field_name] = value

        return data

    @classmethod
    def from_element(
        cls: Type[_ModelT], element: etree._Element, entry: Optional[str] = None
    ) -> _ModelT:
        try:
            return cls.model_validate(cls.element_data(element))
        except ValidationError as exc:
            raise StructuralDecodeError(
                f"<{local_name(element.tag)}> does not match {cls.__name__}: {exc}",
                entry=entry,
            ) from exc

    @classmethod
    def from_xml(
        cls: Type[_ModelT],
        data: Union[bytes, str],
        entry: Optional[str] = None,
        huge_tree: bool = False,
    ) -> _ModelT:
        """Parse an XML document and decode its root element.

        Bytes are decoded as their XML declaration says. A ``str`` is taken as
        already decoded, so its declaration (and any encoding it names) is
        dropped before parsing.
        """
        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            huge_tree=huge_tree,
        )
        if isinstance(data, str):
            data = _XML_DECLARATION.sub("", data, count=1)
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as exc:
            raise StructuralDecodeError(f"Malformed XML: {exc}", entry=entry) from exc
        if root is None:
            raise StructuralDecodeError("Empty XML document", entry=entry)
        return cls.from_element(root, entry=entry)

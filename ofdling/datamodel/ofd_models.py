"""Typed shapes of the OFD XML entries.

``OFD.xml`` decodes to :class:`OfdNode`, the document root (usually
``Doc_0/Document.xml``) to :class:`Document`, resource entries to :class:`Res`
and page entries to :class:`Page`.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator

from ofdling.backend.st_parser import parse_box, parse_deltas, parse_path
from ofdling.backend.xml_binding import XmlModel, xml_scalar, xml_text
from ofdling.datamodel.st_types import Box, Path

# OFD.xml


class KeywordList(XmlModel):
    keyword: List[str] = []


class CustomData(XmlModel):
    """A ``<CustomData Name="...">value</CustomData>`` entry."""

    name: Optional[str] = None
    value: str = xml_text()


class CustomDataList(XmlModel):
    custom_data: List[CustomData] = []


class DocInfo(XmlModel):
    doc_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("DocID", "DocId")
    )
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    abstract_text: Optional[str] = Field(None, alias="Abstract")
    creation_date: Optional[str] = None
    mod_date: Optional[str] = None
    doc_usage: Optional[str] = None
    cover: Optional[str] = None
    keywords: Optional[KeywordList] = None
    creator: Optional[str] = None
    creator_version: Optional[str] = None
    custom_datas: Optional[CustomDataList] = None


class DocBody(XmlModel):
    doc_info: DocInfo = DocInfo()
    doc_root: str
    versions: Optional[str] = None
    signatures: Optional[str] = None


class OfdNode(XmlModel):
    version: Optional[str] = None
    doc_type: Optional[str] = None
    doc_body: DocBody


# Document.xml


class PageRef(XmlModel):
    id: str = Field(alias="ID")
    base_loc: str


class PageRefs(XmlModel):
    page: List[PageRef] = []


class PageArea(XmlModel):
    physical_box: Box
    application_box: Optional[Box] = None
    content_box: Optional[Box] = None
    bleed_box: Optional[Box] = None

    @field_validator(
        "physical_box", "application_box", "content_box", "bleed_box", mode="before"
    )
    @classmethod
    def decode_box(cls, value):
        if isinstance(value, str):
            return parse_box(value)
        return value


class CommonData(XmlModel):
    max_unit_id: int = Field(alias="MaxUnitID")
    page_area: Optional[PageArea] = None
    public_res: List[str] = []
    document_res: List[str] = []
    template_page: List[PageRef] = []


class Document(XmlModel):
    common_data: CommonData
    pages: PageRefs
    outlines: Optional[str] = None
    permissions: Optional[str] = None
    custom_tags: Optional[str] = None
    annotations: Optional[str] = None
    attachments: Optional[str] = None


# PublicRes.xml / DocumentRes.xml


class ColorSpace(XmlModel):
    id: str = Field(alias="ID")
    type: str
    bits_per_component: Optional[int] = None


class ColorSpaces(XmlModel):
    color_space: List[ColorSpace] = []


class Font(XmlModel):
    id: str = Field(alias="ID")
    font_name: str
    family_name: Optional[str] = None
    font_file: Optional[str] = None


class Fonts(XmlModel):
    font: List[Font] = []


class MultiMedia(XmlModel):
    id: str = Field(alias="ID")
    type: str
    format: Optional[str] = None
    media_file: Optional[str] = None


class MultiMedias(XmlModel):
    multi_media: List[MultiMedia] = []


class Res(XmlModel):
    base_loc: Optional[str] = None
    color_spaces: Optional[ColorSpaces] = None
    fonts: Optional[Fonts] = None
    multi_medias: Optional[MultiMedias] = None


# Page_N/Content.xml


class TextCode(XmlModel):
    x: Optional[float] = Field(None, alias="X")
    y: Optional[float] = Field(None, alias="Y")
    delta_x: List[float] = []
    delta_y: List[float] = []
    text: str = xml_text()

    @field_validator("delta_x", "delta_y", mode="before")
    @classmethod
    def decode_deltas(cls, value):
        if isinstance(value, str):
            return parse_deltas(value)
        return value


class _GraphicUnit(XmlModel):
    id: str = Field(alias="ID")
    boundary: Box
    ctm: Optional[str] = Field(None, alias="CTM")

    @field_validator("boundary", mode="before")
    @classmethod
    def decode_boundary(cls, value):
        if isinstance(value, str):
            return parse_box(value)
        return value


class TextObject(_GraphicUnit):
    font: str
    size: float
    text_code: List[TextCode] = []

    @property
    def text(self) -> str:
        return "".join(code.text for code in self.text_code)


class PathObject(_GraphicUnit):
    stroke: Optional[bool] = None
    fill: Optional[bool] = None
    abstract_shape: Path = xml_scalar([])

    @field_validator("abstract_shape", mode="before")
    @classmethod
    def decode_shape(cls, value):
        if isinstance(value, str):
            return parse_path(value)
        return value


class Layer(XmlModel):
    id: str = Field(alias="ID")
    type: Optional[str] = None
    text_object: List[TextObject] = []
    path_object: List[PathObject] = []


class Content(XmlModel):
    layer: List[Layer] = []


class Page(XmlModel):
    area: Optional[PageArea] = None
    content: Optional[Content] = None

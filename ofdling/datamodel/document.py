import importlib.metadata
import logging
import platform
import sys
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ofdling.backend.ofd_container import OfdContainer, resolve_path
from ofdling.backend.ofd_metadata import flatten_attributes, flatten_custom_datas
from ofdling.datamodel.backend_options import OfdBackendOptions
from ofdling.datamodel.ofd_models import Document, OfdNode, Page, Res

_log = logging.getLogger(__name__)


class OfdlingVersion(BaseModel):
    ofdling_version: str = Field(
        default_factory=lambda: importlib.metadata.version("ofdling")
    )
    pydantic_version: str = Field(
        default_factory=lambda: importlib.metadata.version("pydantic")
    )
    lxml_version: str = Field(default_factory=lambda: importlib.metadata.version("lxml"))
    platform_str: str = platform.platform()
    py_impl_version: str = sys.implementation.cache_tag
    py_lang_version: str = platform.python_version()


class OfdSnapshot(BaseModel):
    """Serializable view of the document metadata."""

    attributes: Dict[str, str] = Field(
        default_factory=dict, description="Flattened DocInfo fields."
    )
    custom_datas: Dict[str, str] = Field(
        default_factory=dict, description="CustomData entries keyed by name."
    )


class PageEntry(BaseModel):
    index: int
    page_id: str
    entry: str


class OfdDocument:
    """A decoded OFD document.

    Owns the open archive together with the decoded ``OFD.xml`` manifest and
    document root. Use it as a context manager, or call :meth:`close`, to
    release the archive.
    """

    def __init__(
        self,
        container: OfdContainer,
        manifest: OfdNode,
        document: Document,
        doc_root_path: str,
        options: OfdBackendOptions = OfdBackendOptions(),
    ):
        self._container = container
        self.manifest = manifest
        self.document = document
        self.doc_root_path = doc_root_path
        self.document_dir = PurePosixPath(doc_root_path).parent
        self.options = options

    @classmethod
    def open(
        cls,
        path_or_stream: Union[BytesIO, Path, str],
        options: Optional[OfdBackendOptions] = None,
    ) -> "OfdDocument":
        from ofdling.backend.ofd_backend import OfdDocumentBackend

        if isinstance(path_or_stream, str):
            path_or_stream = Path(path_or_stream)
        backend = OfdDocumentBackend(path_or_stream, options or OfdBackendOptions())
        return backend.load()

    @property
    def version(self) -> Optional[str]:
        return self.manifest.version

    @property
    def closed(self) -> bool:
        return self._container.closed

    def attributes(self) -> Dict[str, str]:
        return flatten_attributes(self.manifest.doc_body.doc_info)

    def custom_data(self) -> Dict[str, str]:
        return flatten_custom_datas(self.manifest.doc_body.doc_info)

    def to_snapshot(self) -> OfdSnapshot:
        return OfdSnapshot(attributes=self.attributes(), custom_datas=self.custom_data())

    def snapshot(self, indent: Optional[int] = None) -> str:
        """Return ``{"attributes": ..., "custom_datas": ...}`` as JSON."""
        return self.to_snapshot().model_dump_json(indent=indent)

    def page_refs(self) -> List[PageEntry]:
        """List the pages with the archive entry holding each one."""
        return [
            PageEntry(
                index=index,
                page_id=page.id,
                entry=resolve_path(self.document_dir, page.base_loc),
            )
            for index, page in enumerate(self.document.pages.page)
        ]

    def load_page(self, index: int) -> Page:
        refs = self.page_refs()
        if not 0 <= index < len(refs):
            raise IndexError(f"Page index {index} out of range (0..{len(refs) - 1})")
        entry = refs[index].entry
        _log.debug("Loading page %d from %s", index, entry)
        return Page.from_xml(
            self._container.read_bytes(entry),
            entry=entry,
            huge_tree=self.options.huge_tree,
        )

    def resource_entries(self) -> List[str]:
        common_data = self.document.common_data
        return [
            resolve_path(self.document_dir, res)
            for res in common_data.public_res + common_data.document_res
        ]

    def load_resources(self) -> Dict[str, Res]:
        """Decode every PublicRes and DocumentRes entry, keyed by entry name."""
        resources: Dict[str, Res] = {}
        for entry in self.resource_entries():
            resources[entry] = Res.from_xml(
                self._container.read_bytes(entry),
                entry=entry,
                huge_tree=self.options.huge_tree,
            )
        return resources

    def close(self) -> None:
        self._container.close()

    def __enter__(self) -> "OfdDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""OFD Document Backend.

Resolves the container chain of an OFD file: the ``OFD.xml`` manifest names
the document root entry, which in turn lists the pages and resource entries.
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ofdling.backend.abstract_backend import AbstractDocumentBackend
from ofdling.backend.ofd_container import OfdContainer, resolve_path
from ofdling.datamodel.backend_options import OfdBackendOptions
from ofdling.datamodel.document import OfdDocument
from ofdling.datamodel.ofd_models import Document, OfdNode
from ofdling.exceptions import ContainerError

_log = logging.getLogger(__name__)

MANIFEST_ENTRY = "OFD.xml"


class OfdDocumentBackend(AbstractDocumentBackend):
    """Backend for reading OFD (Open Fixed-layout Document) archives."""

    def __init__(
        self,
        path_or_stream: Union[BytesIO, Path],
        options: OfdBackendOptions = OfdBackendOptions(),
    ):
        super().__init__(path_or_stream, options)
        _log.debug("Starting OfdDocumentBackend...")
        self._valid: Optional[bool] = None

    def _probe_validity(self) -> bool:
        try:
            if isinstance(self.path_or_stream, BytesIO):
                self.path_or_stream.seek(0)
                try:
                    with zipfile.ZipFile(self.path_or_stream, "r") as ofd_zip:
                        return MANIFEST_ENTRY in ofd_zip.namelist()
                finally:
                    self.path_or_stream.seek(0)
            with zipfile.ZipFile(self.path_or_stream, "r") as ofd_zip:
                return MANIFEST_ENTRY in ofd_zip.namelist()
        except (zipfile.BadZipFile, OSError) as exc:
            _log.warning("Invalid OFD file: %s", exc)
        return False

    def is_valid(self) -> bool:
        """Check if the file is a ZIP archive with an OFD.xml manifest.

        The archive is probed on the first call only; ``load`` does not need it.
        """
        if self._valid is None:
            self._valid = self._probe_validity()
        return self._valid

    def load(self) -> OfdDocument:
        """Open the archive and decode the manifest and document root.

        Raises ContainerError when the archive or one of the two entries is
        missing and StructuralDecodeError when either entry is malformed.
        Nothing is returned on failure; the archive is closed again.
        """
        container = OfdContainer.open(
            self.path_or_stream, max_entry_size=self.options.max_entry_size
        )
        try:
            manifest = self._load_manifest(container)
            doc_root_path = resolve_path(
                PurePosixPath(), manifest.doc_body.doc_root
            )
            if not container.has_entry(doc_root_path):
                raise ContainerError(
                    f"Document root {doc_root_path} named in {MANIFEST_ENTRY} "
                    "is missing from the archive"
                )
            document = Document.from_xml(
                container.read_bytes(doc_root_path),
                entry=doc_root_path,
                huge_tree=self.options.huge_tree,
            )
        except BaseException as exc:
            _log.error("Failed to load OFD document: %s", exc)
            container.close()
            raise

        _log.info(
            "Loaded OFD document %s with %d pages",
            doc_root_path,
            len(document.pages.page),
        )
        return OfdDocument(
            container=container,
            manifest=manifest,
            document=document,
            doc_root_path=doc_root_path,
            options=self.options,
        )

    def _load_manifest(self, container: OfdContainer) -> OfdNode:
        if not container.has_entry(MANIFEST_ENTRY):
            raise ContainerError(f"Missing {MANIFEST_ENTRY} in archive")
        return OfdNode.from_xml(
            container.read_bytes(MANIFEST_ENTRY),
            entry=MANIFEST_ENTRY,
            huge_tree=self.options.huge_tree,
        )

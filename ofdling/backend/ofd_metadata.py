"""Flatten the ``DocInfo`` block of ``OFD.xml`` into string maps."""

import logging
from typing import Dict, Optional

from ofdling.datamodel.ofd_models import DocInfo

_log = logging.getLogger(__name__)

# public key -> DocInfo field
ATTRIBUTE_FIELDS: Dict[str, str] = {
    "DocId": "doc_id",
    "Title": "title",
    "Author": "author",
    "Subject": "subject",
    "Abstract": "abstract_text",
    "CreationDate": "creation_date",
    "ModDate": "mod_date",
    "DocUsage": "doc_usage",
    "Cover": "cover",
    "Creator": "creator",
    "CreatorVersion": "creator_version",
}


def flatten_attributes(doc_info: DocInfo) -> Dict[str, str]:
    """Return the non-empty document attributes keyed by their OFD names.

    ``Keywords`` is joined with commas and is present whenever the
    ``<Keywords>`` element is, even if it holds no keyword.
    """
    attributes: Dict[str, str] = {}
    for key, field_name in ATTRIBUTE_FIELDS.items():
        value: Optional[str] = getattr(doc_info, field_name)
        if value:
            attributes[key] = value

    if doc_info.keywords is not None:
        attributes["Keywords"] = ",".join(doc_info.keywords.keyword)

    _log.debug("Flattened %d document attributes", len(attributes))
    return attributes


def flatten_custom_datas(doc_info: DocInfo) -> Dict[str, str]:
    """Return the ``CustomData`` entries keyed by their ``Name``.

    Entries without a name are dropped. The entries are inserted in reverse
    document order, so for a repeated name the first declared value wins.
    """
    if doc_info.custom_datas is None:
        return {}

    named = [entry for entry in doc_info.custom_datas.custom_data if entry.name is not None]
    dropped = len(doc_info.custom_datas.custom_data) - len(named)
    if dropped:
        _log.debug("Dropped %d unnamed CustomData entries", dropped)

    custom_datas: Dict[str, str] = {}
    for entry in reversed(named):
        custom_datas[entry.name] = entry.value
    return custom_datas

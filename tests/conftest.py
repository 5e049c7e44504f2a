from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from .ofd_samples import default_entries, write_ofd


@pytest.fixture
def make_ofd(tmp_path: Path) -> Callable[..., Path]:
    """Build an OFD archive from the sample entries, with overrides.

    An override value of ``None`` removes the entry.
    """

    def _make(
        overrides: Optional[Dict[str, Optional[str]]] = None,
        name: str = "sample.ofd",
    ) -> Path:
        entries = default_entries()
        for entry, content in (overrides or {}).items():
            if content is None:
                entries.pop(entry, None)
            else:
                entries[entry] = content
        return write_ofd(tmp_path / name, entries)

    return _make


@pytest.fixture
def sample_ofd(make_ofd) -> Path:
    return make_ofd()

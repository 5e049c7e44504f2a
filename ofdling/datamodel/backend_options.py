from typing import Literal, Optional

from pydantic import BaseModel, Field


class OfdBackendOptions(BaseModel):
    """Options for reading OFD archives."""

    kind: Literal["ofd"] = Field("ofd", exclude=True, repr=False)
    max_entry_size: Optional[int] = Field(
        64 * 1024 * 1024,
        ge=0,
        description=(
            "Largest uncompressed size, in bytes, of an archive entry the backend "
            "will read. None disables the check."
        ),
    )
    huge_tree: bool = Field(
        False,
        description="Allow very deep or very large XML entries (lxml huge_tree).",
    )

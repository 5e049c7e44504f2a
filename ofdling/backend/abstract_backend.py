from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Union

from ofdling.datamodel.backend_options import OfdBackendOptions

if TYPE_CHECKING:
    from ofdling.datamodel.document import OfdDocument


class AbstractDocumentBackend(ABC):
    @abstractmethod
    def __init__(
        self,
        path_or_stream: Union[BytesIO, Path],
        options: OfdBackendOptions = OfdBackendOptions(),
    ):
        self.path_or_stream = path_or_stream
        self.options = options

    @abstractmethod
    def is_valid(self) -> bool:
        pass

    @abstractmethod
    def load(self) -> "OfdDocument":
        pass

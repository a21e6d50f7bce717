import abc
from typing import Optional

from ..model import ParsedClass


class BaseAdapter(abc.ABC):
    """Source text -> first class with its public members, or None."""

    name = "base"

    @abc.abstractmethod
    def extract(self, source_text: str) -> Optional[ParsedClass]:
        """Return the first class found in `source_text`, or None when there is none."""

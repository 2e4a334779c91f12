"""Abstract base class for schedule transformers."""

from abc import ABC, abstractmethod
from typing import Any

from extractor.models import MeetingEvent


class BaseTransformer(ABC):
    """Interface for turning meeting events into an output document.

    Subclasses decide which events their format can represent; events
    missing required fields are skipped rather than reported as errors.
    """

    @abstractmethod
    def transform(self, events: list[MeetingEvent]) -> Any:
        """Build the output document object for the given events."""

    @abstractmethod
    def generate(self, events: list[MeetingEvent]) -> str:
        """Build the output document and return it serialized as text.

        Args:
            events: Meeting events to include.

        Returns:
            The serialized document.
        """

    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the last transformed document to a file.

        Args:
            output_path: Path to the output file.
        """

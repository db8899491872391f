"""Builder and validator interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Iterable
from typing import Generic, TypeVar

from request_dto.validation import Violation


__all__ = ["DTOBuilder", "DTOValidator"]


InputT = TypeVar("InputT")
DTOT = TypeVar("DTOT")


class DTOBuilder(ABC, Generic[InputT, DTOT]):
    """Converts an intermediate input object into a domain DTO."""

    input_type: type[InputT]
    output_type: type[DTOT] | None = None

    @abstractmethod
    def build(self, input: InputT) -> DTOT | Awaitable[DTOT]:
        """Build the DTO from a populated, validated input object.

        Args:
            input: The intermediate object

        Returns:
            The DTO, or an awaitable resolving to it
        """


class DTOValidator(ABC, Generic[DTOT]):
    """Checks business constraints on a built DTO."""

    supported_type: type[DTOT]

    @abstractmethod
    def validate(
        self, dto: DTOT
    ) -> Iterable[Violation] | None | Awaitable[Iterable[Violation] | None]:
        """Validate ``dto``.

        Returns:
            Violations found; empty or None when the DTO is valid

        Raises:
            DTOValidationError: Equivalent to returning violations
        """

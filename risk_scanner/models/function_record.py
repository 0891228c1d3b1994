"""
Model for a function segmented out of Solidity source.
"""
from typing import Iterator, Literal, Tuple
from pydantic import BaseModel, ConfigDict

Visibility = Literal["public", "external", "internal", "private"]
Mutability = Literal["pure", "view", "payable", "nonpayable"]


class FunctionRecord(BaseModel):
    """One function definition with its verbatim body and 1-indexed line bounds."""
    model_config = ConfigDict(frozen=True)

    name: str
    visibility: Visibility
    payable: bool
    mutability: Mutability = "nonpayable"
    body: str
    line_start: int
    line_end: int

    @property
    def is_externally_callable(self) -> bool:
        return self.visibility in ("public", "external")

    @property
    def is_read_only(self) -> bool:
        return self.mutability in ("pure", "view")

    def numbered_lines(self) -> Iterator[Tuple[int, str]]:
        """Yield (line number, text) for every line of the body."""
        for offset, line in enumerate(self.body.split('\n')):
            yield self.line_start + offset, line

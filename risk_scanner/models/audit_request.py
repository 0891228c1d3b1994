"""
Model for an incoming audit request.
"""
from typing import Literal
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# "solidity" is the name the web front end uses for plain source input
InputMode = Literal["source", "solidity", "address"]


class AuditRequest(BaseModel):
    """Source text plus the mode describing how it should be interpreted."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    source_text: str = ""
    input_mode: InputMode = "source"

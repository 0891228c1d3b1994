"""
Catalog of the vulnerability categories the detectors can report.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel


class VulnerabilityInfo(BaseModel):
    """Static text describing one vulnerability category."""
    key: str
    title: str
    description: str
    remediation_example: str
    references: List[str] = []


REENTRANCY = "reentrancy"
UNCHECKED_CALL = "unchecked-call"
OVERFLOW = "overflow"
ACCESS_CONTROL = "access-control"
INFO = "info"


_CATALOG: Dict[str, VulnerabilityInfo] = {
    REENTRANCY: VulnerabilityInfo(
        key=REENTRANCY,
        title="Reentrancy Vulnerability",
        description=(
            "An external call is made before contract state is updated. The callee can "
            "re-enter the function while the old state is still visible and repeat the "
            "operation, for example withdrawing the same balance several times."
        ),
        remediation_example=(
            "Follow the checks-effects-interactions pattern: update state before the "
            "external call, and add OpenZeppelin's ReentrancyGuard.\n\n"
            "uint256 amount = balances[msg.sender];\n"
            "balances[msg.sender] = 0;\n"
            "(bool success, ) = msg.sender.call{value: amount}(\"\");\n"
            "require(success, \"Transfer failed\");"
        ),
        references=[
            "https://swcregistry.io/docs/SWC-107",
            "https://docs.openzeppelin.com/contracts/4.x/api/security#ReentrancyGuard",
        ]
    ),
    UNCHECKED_CALL: VulnerabilityInfo(
        key=UNCHECKED_CALL,
        title="Unchecked External Call",
        description=(
            "A low-level call's return value is not checked. If the call fails, "
            "execution continues silently and the contract's accounting no longer "
            "matches what actually happened."
        ),
        remediation_example=(
            "Capture and check the success flag of every low-level call.\n\n"
            "(bool success, ) = recipient.call{value: amount}(\"\");\n"
            "require(success, \"Call failed\");"
        ),
        references=["https://swcregistry.io/docs/SWC-104"]
    ),
    OVERFLOW: VulnerabilityInfo(
        key=OVERFLOW,
        title="Potential Integer Overflow/Underflow",
        description=(
            "The contract targets a compiler older than 0.8.0, which does not check "
            "arithmetic for overflow or underflow. Arithmetic on balances or supply "
            "can wrap around silently."
        ),
        remediation_example=(
            "Upgrade to Solidity 0.8 or later, or use OpenZeppelin's SafeMath for "
            "every arithmetic operation.\n\n"
            "pragma solidity ^0.8.0;"
        ),
        references=["https://swcregistry.io/docs/SWC-101"]
    ),
    ACCESS_CONTROL: VulnerabilityInfo(
        key=ACCESS_CONTROL,
        title="Missing Access Control",
        description=(
            "A publicly callable function changes state or accepts ether without any "
            "access restriction. Any account can invoke it."
        ),
        remediation_example=(
            "Restrict the function with an access-control modifier such as onlyOwner "
            "or onlyRole, or check the caller explicitly.\n\n"
            "function mint(address to, uint256 amount) public onlyOwner {\n"
            "    ...\n"
            "}"
        ),
        references=["https://swcregistry.io/docs/SWC-105"]
    ),
    INFO: VulnerabilityInfo(
        key=INFO,
        title="No Critical Issues Detected",
        description=(
            "Basic static analysis did not detect common vulnerability patterns. "
            "However, a full security audit should include manual review and advanced analysis."
        ),
        remediation_example="Consider professional security audit for production contracts."
    ),
}


def get_vulnerability(key: str) -> Optional[VulnerabilityInfo]:
    """Return the catalog entry for a category key, or None."""
    return _CATALOG.get(key)

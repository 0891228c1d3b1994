import pytest

from risk_scanner.services.code_analyzer import (
    count_function_declarations,
    parse_pragma_version,
    parse_version,
    segment_functions,
)


MIXED_SOURCE = """contract T {
    function withdraw(uint256 amount)
        external
        nonReentrant
    {
        if (amount > 0) {
            total -= amount;
        }
    }

    function helper() internal pure returns (uint256) {
        return 1;
    }

    function noVisibility() {
        x = 1;
    }
}
"""


def test_segments_functions_with_line_bounds():
    functions = segment_functions(MIXED_SOURCE)

    assert [f.name for f in functions] == ["withdraw", "helper", "noVisibility"]
    assert [(f.line_start, f.line_end) for f in functions] == [(2, 9), (11, 13), (15, 17)]


def test_multiline_header_qualifiers():
    withdraw = segment_functions(MIXED_SOURCE)[0]

    assert withdraw.visibility == "external"
    assert withdraw.payable is False
    assert "total -= amount;" in withdraw.body
    assert "nonReentrant" in withdraw.body


def test_mutability_is_parsed():
    helper = segment_functions(MIXED_SOURCE)[1]

    assert helper.visibility == "internal"
    assert helper.mutability == "pure"
    assert helper.is_read_only


def test_missing_visibility_uses_default_policy():
    assert segment_functions(MIXED_SOURCE)[2].visibility == "public"
    assert segment_functions(MIXED_SOURCE, default_visibility="internal")[2].visibility == "internal"


def test_unknown_default_visibility_rejected():
    with pytest.raises(ValueError):
        segment_functions(MIXED_SOURCE, default_visibility="everyone")


def test_payable_function():
    source = "contract C {\n    function deposit() external payable {\n        total += msg.value;\n    }\n}"
    deposit = segment_functions(source)[0]

    assert deposit.payable is True
    assert deposit.mutability == "payable"


def test_payable_parameter_is_not_payability():
    source = "contract C {\n    function pay(address payable to) public {\n        to.transfer(1);\n    }\n}"
    pay = segment_functions(source)[0]

    assert pay.payable is False
    assert pay.visibility == "public"


def test_returns_clause_is_ignored():
    source = "contract C {\n    function get() external view returns (address payable) {\n        return owner;\n    }\n}"
    get = segment_functions(source)[0]

    assert get.payable is False
    assert get.mutability == "view"


def test_bodiless_declarations_are_skipped():
    source = """interface IToken {
    function transfer(address to, uint256 amount) external returns (bool);
}
contract C {
    function f() public {
    }
}
"""
    functions = segment_functions(source)

    assert [(f.name, f.line_start, f.line_end) for f in functions] == [("f", 5, 6)]


def test_single_line_contract():
    functions = segment_functions("contract C { function f() public payable { x += 1; } }")

    assert len(functions) == 1
    assert functions[0].name == "f"
    assert (functions[0].line_start, functions[0].line_end) == (1, 1)
    assert functions[0].payable


def test_unclosed_function_is_dropped():
    assert segment_functions("contract C {\n    function f() public {\n        x = 1;\n") == []


def test_commented_header_is_ignored():
    source = "contract C {\n    // function fake() public {\n    function real() public {\n    }\n}"

    assert [f.name for f in segment_functions(source)] == ["real"]


def test_braces_in_line_comments_do_not_count():
    source = "contract C {\n    function f() public {\n        x = 1; // }\n        y = 2;\n    }\n}"
    f = segment_functions(source)[0]

    assert f.line_end == 5


def test_numbered_lines():
    f = segment_functions(MIXED_SOURCE)[1]
    numbered = list(f.numbered_lines())

    assert numbered[0][0] == 11
    assert numbered[-1] == (13, "    }")


def test_empty_source_has_no_functions():
    assert segment_functions("") == []


def test_count_function_declarations_includes_bodiless():
    source = "interface I {\n    function a() external;\n}\ncontract C {\n    function b() public {}\n}"

    assert count_function_declarations(source) == 2


@pytest.mark.parametrize("source, expected", [
    ("pragma solidity ^0.7.6;", (0, 7, 6)),
    ("pragma solidity >=0.6.0 <0.9.0;", (0, 6, 0)),
    ("pragma solidity 0.8;", (0, 8, 0)),
    ("// SPDX-License-Identifier: MIT\npragma solidity ^0.8.19;\ncontract C {}", (0, 8, 19)),
    ("contract C {}", None),
])
def test_parse_pragma_version(source, expected):
    assert parse_pragma_version(source) == expected


def test_parse_version():
    assert parse_version("0.8.0") == (0, 8, 0)
    with pytest.raises(ValueError):
        parse_version("latest")

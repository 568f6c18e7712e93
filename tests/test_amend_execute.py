import pytest

from recokit.amend_ast import (
    AmendCommand,
    BooleanExpression,
    BooleanOp,
    CommandList,
    FunctionCall,
    LiteralString,
    StringComparison,
    StringOp,
    WordList,
)
from recokit.amend_commands import CommandArgumentType, CommandError, CommandRegistry
from recokit.amend_execute import (
    ExecutionError,
    evaluate_boolean,
    evaluate_string,
    execute_command,
    execute_command_list,
)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def registry(calls):
    reg = CommandRegistry()

    def words_cmd(name, cookie, args):
        calls.append((name, list(args)))
        return 0

    def failing_cmd(name, cookie, args):
        calls.append((name, list(args)))
        return 7

    def bool_cmd(name, cookie, value):
        calls.append((name, value))
        return 0 if value else 1

    def concat(name, cookie, args):
        return "".join(args)

    def boom(name, cookie, args):
        raise CommandError("boom", 1)

    reg.register_command("run", CommandArgumentType.WORDS, words_cmd, None)
    reg.register_command("fail", CommandArgumentType.WORDS, failing_cmd, None)
    reg.register_command("assert", CommandArgumentType.BOOLEAN, bool_cmd, None)
    reg.register_function("concat", concat, None)
    reg.register_function("boom", boom, None)
    return reg


def lit(text):
    return LiteralString(text)


def eq(a, b):
    return StringComparison(StringOp.EQ, lit(a), lit(b))


def test_literal_evaluates_to_text(registry):
    assert evaluate_string(registry, lit("abc")) == "abc"


def test_function_call_evaluates_nested(registry):
    call = FunctionCall("concat", [lit("a"), FunctionCall("concat", [lit("b"), lit("c")])])
    assert evaluate_string(registry, call) == "abc"


def test_unknown_function_raises(registry):
    with pytest.raises(ExecutionError):
        evaluate_string(registry, FunctionCall("missing", []))


def test_failing_function_propagates_status(registry):
    with pytest.raises(ExecutionError) as info:
        evaluate_string(registry, FunctionCall("boom", []))
    assert info.value.status == 1


@pytest.mark.parametrize(
    "op,a,b,expected",
    [
        (StringOp.LT, "a", "b", True),
        (StringOp.LT, "b", "a", False),
        (StringOp.LE, "a", "a", True),
        (StringOp.GT, "b", "a", True),
        (StringOp.GE, "a", "b", False),
        (StringOp.EQ, "x", "x", True),
        (StringOp.NE, "x", "x", False),
    ],
)
def test_string_comparisons(registry, op, a, b, expected):
    assert evaluate_boolean(registry, StringComparison(op, lit(a), lit(b))) is expected


@pytest.mark.parametrize(
    "op,left,right,expected",
    [
        (BooleanOp.AND, True, True, True),
        (BooleanOp.AND, True, False, False),
        (BooleanOp.OR, False, True, True),
        (BooleanOp.OR, False, False, False),
        (BooleanOp.EQ, False, False, True),
        (BooleanOp.NE, True, False, True),
    ],
)
def test_boolean_operators(registry, op, left, right, expected):
    expr = BooleanExpression(op, eq("a", "a" if left else "b"), eq("a", "a" if right else "b"))
    assert evaluate_boolean(registry, expr) is expected


def test_not_operator(registry):
    assert evaluate_boolean(registry, BooleanExpression(BooleanOp.NOT, eq("a", "b"))) is True


def test_both_operands_are_evaluated(registry):
    expr = BooleanExpression(
        BooleanOp.OR,
        eq("a", "a"),
        StringComparison(StringOp.EQ, FunctionCall("boom", []), lit("x")),
    )
    with pytest.raises(ExecutionError):
        evaluate_boolean(registry, expr)


def test_word_command_receives_words(registry, calls):
    status = execute_command(registry, AmendCommand("run", WordList(["x", "y"])))
    assert status == 0
    assert calls == [("run", ["x", "y"])]


def test_boolean_command_receives_value(registry, calls):
    status = execute_command(registry, AmendCommand("assert", eq("a", "b")))
    assert status == 1
    assert calls == [("assert", False)]


def test_unknown_command_raises(registry):
    with pytest.raises(ExecutionError):
        execute_command(registry, AmendCommand("nothing", WordList([])))


def test_argument_kind_mismatch_raises(registry):
    with pytest.raises(ExecutionError):
        execute_command(registry, AmendCommand("assert", WordList(["a"])))


def test_command_list_runs_in_order(registry, calls):
    commands = CommandList(
        [
            AmendCommand("run", WordList(["1"]), line=1),
            AmendCommand("assert", eq("a", "a"), line=2),
            AmendCommand("run", WordList(["2"]), line=3),
        ]
    )
    result = execute_command_list(registry, commands)
    assert not result
    assert calls == [("run", ["1"]), ("assert", True), ("run", ["2"])]


def test_command_list_stops_at_failure_with_line(registry, calls):
    commands = CommandList(
        [
            AmendCommand("run", WordList(["1"]), line=4),
            AmendCommand("fail", WordList([]), line=5),
            AmendCommand("run", WordList(["2"]), line=6),
        ]
    )
    with pytest.raises(ExecutionError) as info:
        execute_command_list(registry, commands)
    assert info.value.line == 5
    assert info.value.code == 5
    assert info.value.status == 7
    assert calls == [("run", ["1"]), ("fail", [])]


def test_failure_without_line_reports_status(registry):
    commands = CommandList([AmendCommand("fail", WordList([]))])
    with pytest.raises(ExecutionError) as info:
        execute_command_list(registry, commands)
    assert info.value.code == 7


def test_evaluation_error_gets_line(registry):
    commands = CommandList(
        [AmendCommand("assert", StringComparison(StringOp.EQ, FunctionCall("boom", []), lit("")), line=9)]
    )
    with pytest.raises(ExecutionError) as info:
        execute_command_list(registry, commands)
    assert info.value.line == 9
"""Integer arithmetic tools."""

from react_gateway.platform.agent.tools import ERROR_PREFIX, ParameterType, Tool, ToolParameter


def _operands(first: str, second: str) -> tuple[ToolParameter, ToolParameter]:
    return (
        ToolParameter("a", ParameterType.INTEGER, first),
        ToolParameter("b", ParameterType.INTEGER, second),
    )


def _add(a: int, b: int) -> str:
    return str(a + b)


def _subtract(a: int, b: int) -> str:
    return str(a - b)


def _multiply(a: int, b: int) -> str:
    return str(a * b)


def _divide(a: int, b: int) -> str:
    if b == 0:
        return f"{ERROR_PREFIX} division by zero"
    quotient = a / b
    return str(int(quotient)) if quotient.is_integer() else str(quotient)


def create_math_tools() -> list[Tool]:
    """Create the add, subtract, multiply and divide tools.

    Returns:
        Tools ready to be registered in a ToolRegistry
    """
    return [
        Tool("add", "Add two integers", _operands("First addend", "Second addend"), _add),
        Tool("subtract", "Subtract b from a", _operands("Minuend", "Subtrahend"), _subtract),
        Tool("multiply", "Multiply two integers", _operands("First factor", "Second factor"), _multiply),
        Tool("divide", "Divide a by b", _operands("Dividend", "Divisor (must not be 0)"), _divide),
    ]

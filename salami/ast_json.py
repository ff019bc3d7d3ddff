"""JSON serialization/deserialization for the Salami AST.

This module converts between Salami AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node type survives
a full round trip.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Block,
    BooleanLiteral,
    CallExpression,
    ExitStatement,
    FunctionLiteral,
    FunctionStatement,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    Program,
    ReturnStatement,
    VarStatement,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, VarStatement):
        return {"type": "VarStatement", "name": node.name.name, "value": ast_to_obj(node.value)}
    if isinstance(node, FunctionStatement):
        return {
            "type": "FunctionStatement",
            "name": node.name.name,
            "parameters": [p.name for p in node.parameters],
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, ReturnStatement):
        return {"type": "ReturnStatement", "value": ast_to_obj(node.value)}
    if isinstance(node, ExitStatement):
        return {"type": "ExitStatement", "value": ast_to_obj(node.value)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name}
    if isinstance(node, IntegerLiteral):
        return {"type": "IntegerLiteral", "value": node.value}
    if isinstance(node, BooleanLiteral):
        return {"type": "BooleanLiteral", "value": node.value}
    if isinstance(node, InfixExpression):
        return {
            "type": "InfixExpression",
            "operator": node.operator,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, IfExpression):
        return {
            "type": "IfExpression",
            "condition": ast_to_obj(node.condition),
            "consequence": ast_to_obj(node.consequence),
            "alternative": ast_to_obj(node.alternative),
        }
    if isinstance(node, FunctionLiteral):
        return {
            "type": "FunctionLiteral",
            "parameters": [p.name for p in node.parameters],
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, CallExpression):
        return {
            "type": "CallExpression",
            "callee": ast_to_obj(node.callee),
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _child(obj: Dict[str, Any], key: str) -> Any:
    # only IfExpression.alternative may be absent
    node = ast_from_obj(obj.get(key))
    if node is None:
        raise ValueError(f"{obj.get('type')}.{key} must not be null")
    return node


def _children(obj: Dict[str, Any], key: str) -> list:
    nodes = [ast_from_obj(item) for item in obj[key]]
    if any(node is None for node in nodes):
        raise ValueError(f"{obj.get('type')}.{key} must not contain null")
    return nodes


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(statements=_children(obj, "statements"))
    if t == "VarStatement":
        return VarStatement(name=Identifier(obj["name"]), value=_child(obj, "value"))
    if t == "FunctionStatement":
        return FunctionStatement(
            name=Identifier(obj["name"]),
            parameters=[Identifier(p) for p in obj["parameters"]],
            body=_child(obj, "body"),
        )
    if t == "ReturnStatement":
        return ReturnStatement(value=_child(obj, "value"))
    if t == "ExitStatement":
        return ExitStatement(value=_child(obj, "value"))
    if t == "Block":
        return Block(statements=_children(obj, "statements"))
    if t == "Identifier":
        return Identifier(name=obj["name"])
    if t == "IntegerLiteral":
        return IntegerLiteral(value=int(obj["value"]))
    if t == "BooleanLiteral":
        return BooleanLiteral(value=bool(obj["value"]))
    if t == "InfixExpression":
        return InfixExpression(
            operator=obj["operator"],
            left=_child(obj, "left"),
            right=_child(obj, "right"),
        )
    if t == "IfExpression":
        return IfExpression(
            condition=_child(obj, "condition"),
            consequence=_child(obj, "consequence"),
            alternative=ast_from_obj(obj.get("alternative")),
        )
    if t == "FunctionLiteral":
        return FunctionLiteral(
            parameters=[Identifier(p) for p in obj["parameters"]],
            body=_child(obj, "body"),
        )
    if t == "CallExpression":
        return CallExpression(
            callee=_child(obj, "callee"),
            arguments=_children(obj, "arguments"),
        )

    raise ValueError(f"Unknown AST node type: {t}")


def program_from_obj(obj: Dict[str, Any]) -> Program:
    program = ast_from_obj(obj)
    if not isinstance(program, Program):
        raise ValueError("AST JSON root must be a Program")
    return program

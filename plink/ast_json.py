"""JSON serialization/deserialization for the Plink AST.

This module converts between Plink AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Positions are stored as
`[line, col]` pairs so that runtime errors raised while executing a
reloaded AST still point into the original source.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Program,
    FalseLiteral,
    TrueLiteral,
    NumberLiteral,
    ArrayLiteral,
    FunctionLiteral,
    Identifier,
    Unary,
    Binary,
    Call,
    Branch,
    If,
    While,
    Assign,
    ArrayWrite,
    ArrayPush,
    ArrayPop,
    Return,
    ExpressionStatement,
)
from .errors import Position


def pos_to_obj(pos: Position) -> List[int]:
    return [pos.line, pos.col]


def pos_from_obj(o: List[int]) -> Position:
    return Position(int(o[0]), int(o[1]))


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    if isinstance(node, Program):
        return {"type": "Program", "body": ast_to_obj(node.body)}
    if isinstance(node, FalseLiteral):
        return {"type": "False", "pos": pos_to_obj(node.pos)}
    if isinstance(node, TrueLiteral):
        return {"type": "True", "pos": pos_to_obj(node.pos)}
    if isinstance(node, NumberLiteral):
        return {"type": "NumberLiteral", "value": node.value, "pos": pos_to_obj(node.pos)}
    if isinstance(node, ArrayLiteral):
        return {"type": "ArrayLiteral", "values": ast_to_obj(node.values), "pos": pos_to_obj(node.pos)}
    if isinstance(node, FunctionLiteral):
        return {
            "type": "FunctionLiteral",
            "params": list(node.params),
            "body": ast_to_obj(node.body),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name, "pos": pos_to_obj(node.pos)}
    if isinstance(node, Unary):
        return {"type": "Unary", "op": node.op, "operand": ast_to_obj(node.operand), "pos": pos_to_obj(node.pos)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "args": ast_to_obj(node.args),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, Branch):
        return {"type": "Branch", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, If):
        return {
            "type": "If",
            "branches": ast_to_obj(node.branches),
            "else_body": ast_to_obj(node.else_body),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, While):
        return {
            "type": "While",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value), "pos": pos_to_obj(node.pos)}
    if isinstance(node, ArrayWrite):
        return {
            "type": "ArrayWrite",
            "name": node.name,
            "index": ast_to_obj(node.index),
            "value": ast_to_obj(node.value),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, ArrayPush):
        return {"type": "ArrayPush", "name": node.name, "value": ast_to_obj(node.value), "pos": pos_to_obj(node.pos)}
    if isinstance(node, ArrayPop):
        return {"type": "ArrayPop", "name": node.name, "pos": pos_to_obj(node.pos)}
    if isinstance(node, Return):
        return {"type": "Return", "value": ast_to_obj(node.value), "pos": pos_to_obj(node.pos)}
    if isinstance(node, ExpressionStatement):
        return {"type": "ExpressionStatement", "value": ast_to_obj(node.value), "pos": pos_to_obj(node.pos)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=ast_from_obj(obj["body"]))
    if t == "Branch":
        return Branch(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))

    if "pos" not in obj:
        raise ValueError(f"AST node {t!r} has no position")
    pos = pos_from_obj(obj["pos"])
    if t == "False":
        return FalseLiteral(pos=pos)
    if t == "True":
        return TrueLiteral(pos=pos)
    if t == "NumberLiteral":
        return NumberLiteral(value=float(obj["value"]), pos=pos)
    if t == "ArrayLiteral":
        return ArrayLiteral(values=ast_from_obj(obj["values"]), pos=pos)
    if t == "FunctionLiteral":
        return FunctionLiteral(params=list(obj["params"]), body=ast_from_obj(obj["body"]), pos=pos)
    if t == "Identifier":
        return Identifier(name=obj["name"], pos=pos)
    if t == "Unary":
        return Unary(op=obj["op"], operand=ast_from_obj(obj["operand"]), pos=pos)
    if t == "Binary":
        return Binary(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), pos=pos)
    if t == "Call":
        return Call(callee=ast_from_obj(obj["callee"]), args=ast_from_obj(obj["args"]), pos=pos)
    if t == "If":
        return If(branches=ast_from_obj(obj["branches"]), else_body=ast_from_obj(obj["else_body"]), pos=pos)
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]), pos=pos)
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]), pos=pos)
    if t == "ArrayWrite":
        return ArrayWrite(
            name=obj["name"],
            index=ast_from_obj(obj["index"]),
            value=ast_from_obj(obj["value"]),
            pos=pos,
        )
    if t == "ArrayPush":
        return ArrayPush(name=obj["name"], value=ast_from_obj(obj["value"]), pos=pos)
    if t == "ArrayPop":
        return ArrayPop(name=obj["name"], pos=pos)
    if t == "Return":
        return Return(value=ast_from_obj(obj["value"]), pos=pos)
    if t == "ExpressionStatement":
        return ExpressionStatement(value=ast_from_obj(obj["value"]), pos=pos)

    raise ValueError(f"Unknown AST node type: {t}")

"""Generator for the Lox AST node module.

Node types are described with one compact definition per class::

    Binary : Expr left, Token operator, Expr right

i.e. the class name, a colon, and a comma-separated list of
``<type> <field>`` pairs. Field types may be ``Expr``, ``Stmt``,
``Token``, ``Object`` (any value), ``List<T>`` (an immutable sequence)
and may end in ``?`` when the field is optional. Each definition is
parsed with a small Lark grammar and rendered as a frozen dataclass
deriving from its family's base class.

Usage:
    python -m lox.tools.generate_ast <output_dir>

writes ``<output_dir>/ast.py``; the checked-in ``lox/ast.py`` is the
output of running it on ``lox/``.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from lark import Lark, Token as LarkToken, Transformer, v_args

NODE_FAMILIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('Expr', (
        'Assign   : Token name, Expr value',
        'Binary   : Expr left, Token operator, Expr right',
        'Grouping : Expr expression',
        'Literal  : Object value',
        'Unary    : Token operator, Expr right',
        'Variable : Token name',
    )),
    ('Stmt', (
        'Block          : List<Stmt> statements',
        'ExpressionStmt : Expr expression',
        'PrintStmt      : Expr expression',
        'VarDecl        : Token name, Expr? initializer',
    )),
)

NODE_GRAMMAR = r"""
    start: NAME ":" field ("," field)*
    field: type_ref NAME
    type_ref: NAME generic? OPTIONAL?
    generic: "<" type_ref ">"
    OPTIONAL: "?"

    %import common.CNAME -> NAME
    %import common.WS_INLINE
    %ignore WS_INLINE
"""

NODE_PARSER = Lark(NODE_GRAMMAR, parser='lalr')

# Definition type names that are spelled differently in Python.
TYPE_NAMES = {
    'Object': 'Any',
}

HEADER = '''"""Abstract syntax tree node definitions for the Lox language.

Generated by ``python -m lox.tools.generate_ast``; edit the node
definitions in that module and regenerate instead of editing this file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .tokens import Token
'''


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type_hint: str


@dataclass(frozen=True)
class NodeSpec:
    name: str
    fields: Tuple[FieldSpec, ...]


@v_args(inline=True)
class NodeSpecBuilder(Transformer):
    """Turns the parse tree of one definition into a :class:`NodeSpec`."""

    def start(self, name, *fields):
        return NodeSpec(str(name), tuple(fields))

    def field(self, type_hint, name):
        return FieldSpec(str(name), type_hint)

    def type_ref(self, name, *suffixes):
        hint = TYPE_NAMES.get(str(name), str(name))
        for suffix in suffixes:
            if isinstance(suffix, LarkToken) and suffix.type == 'OPTIONAL':
                hint = f"Optional[{hint}]"
            elif hint == 'List':
                hint = f"Tuple[{suffix}, ...]"
            else:
                hint = f"{hint}[{suffix}]"
        return hint

    def generic(self, inner):
        return inner


def parse_definition(definition: str) -> NodeSpec:
    tree = NODE_PARSER.parse(definition)
    return NodeSpecBuilder().transform(tree)


def define_family(base_name: str, specs: Sequence[NodeSpec]) -> List[str]:
    lines = [
        '', '',
        '@dataclass(frozen=True)',
        f'class {base_name}:',
        f'    """Base class of the {base_name} node family."""',
    ]
    for spec in specs:
        lines += ['', '', '@dataclass(frozen=True)', f'class {spec.name}({base_name}):']
        lines += [f'    {field.name}: {field.type_hint}' for field in spec.fields]
    return lines


def render_module(families: Sequence[Tuple[str, Sequence[str]]] = NODE_FAMILIES) -> str:
    lines = [HEADER.rstrip('\n')]
    for base_name, definitions in families:
        lines += define_family(base_name, [parse_definition(d) for d in definitions])
    return '\n'.join(lines) + '\n'


def write_module(output_dir: Path) -> Path:
    out_path = Path(output_dir) / 'ast.py'
    with open(out_path, 'w', encoding='utf-8') as out:
        out.write(render_module())
    return out_path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate the Lox AST node module")
    parser.add_argument('output_dir', help='directory that receives ast.py')
    args = parser.parse_args(argv)
    output_dir = Path(args.output_dir)
    if not output_dir.is_dir():
        parser.error(f'{output_dir} is not a directory')
    print(str(write_module(output_dir)))


if __name__ == '__main__':
    main()

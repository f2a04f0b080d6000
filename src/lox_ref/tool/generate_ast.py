"""
generate_ast.py — build-time generator for the syntax node families.

Each family descriptor is a (FamilyName, ["Variant : Type field, ..."]) pair.
For every family the generator writes one module holding:

1. a visitor ABC with one abstract ``visit_<variant>_<family>`` per variant,
2. the family base class (closed: variants register themselves on it),
3. one frozen dataclass per variant whose ``accept`` calls its visitor method.

Field types are ``Token``, ``object`` (literal value), a family name (owned
child), ``List[T]`` (owned sequence, stored as a tuple) or ``Optional[T]``.
A family may reference itself and any family listed before it.

The generated modules are checked into ``lox_ref.syntax``; rerun with
``--check`` to confirm they still match the descriptor table.
"""

from __future__ import annotations

import argparse
import keyword
import logging
import os
import re
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

LOG = logging.getLogger("lox_ref.tool.generate_ast")

DEFAULT_PACKAGE = "lox_ref.syntax"
DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parent.parent / "syntax"

# sysexits.h codes, as the command-line tools of the language use them
EX_USAGE = 64
EX_DATAERR = 65

Descriptor = Tuple[str, Sequence[str]]

AST_FAMILIES: List[Descriptor] = [
    (
        "Expr",
        [
            "Assign   : Token name, Expr value",
            "Binary   : Expr left, Token operator, Expr right",
            "Call     : Expr callee, Token paren, List[Expr] arguments",
            "Grouping : Expr expression",
            "Literal  : object value",
            "Logical  : Expr left, Token operator, Expr right",
            "Unary    : Token operator, Expr right",
            "Ternary  : Expr condition, Token operator1, Expr left, Token operator2, Expr right",
            "Variable : Token name",
        ],
    ),
    (
        "Stmt",
        [
            "Block      : List[Stmt] statements",
            "Expression : Expr expression",
            "Function   : Token name, List[Token] params, List[Stmt] body",
            "If         : Expr condition, Stmt then_branch, Optional[Stmt] else_branch",
            "Print      : Expr expression",
            "While      : Expr condition, Stmt body",
            "Var        : Token name, Optional[Expr] initializer",
        ],
    ),
]

# Attribute names the node base classes already use.
RESERVED_FIELDS = {"accept", "children", "family", "variants", "variant_name"}

# Names every generated module binds at top level besides its variants.
MODULE_NAMES = {
    "ABC", "Generic", "Node", "Optional", "R", "Token", "Tuple", "TypeVar",
    "UnhandledVariantError", "abstractmethod", "annotations", "dataclass",
}

_CLASS_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_FIELD_RE = re.compile(r"^(?P<type>\S+)\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)$")
_WRAPPED_RE = re.compile(r"^(?P<wrapper>List|Optional)\[(?P<inner>.+)\]$")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class DescriptorError(Exception):
    """Malformed or conflicting descriptor; nothing is written."""
    def __init__(self, message: str, family: Optional[str] = None, line: Optional[str] = None):
        self.message = message
        self.family = family
        self.line = line
        where = f" in {family}" if family else ""
        detail = f": {line.strip()!r}" if line else ""
        super().__init__(f"{message}{where}{detail}")


# ============================================================================
# Descriptor model
# ============================================================================

@dataclass(frozen=True)
class FieldType:
    kind: str  # token | value | node | list | optional
    family: Optional[str] = None
    inner: Optional[FieldType] = None

    def annotation(self) -> str:
        if self.kind == "token":
            return "Token"
        if self.kind == "value":
            return "object"
        if self.kind == "node" and self.family is not None:
            return self.family
        if self.kind == "list" and self.inner is not None:
            return f"Tuple[{self.inner.annotation()}, ...]"
        if self.kind == "optional" and self.inner is not None:
            return f"Optional[{self.inner.annotation()}]"
        raise ValueError(f"Incomplete field type {self!r}")

    def walk(self) -> Iterable[FieldType]:
        yield self
        if self.inner is not None:
            yield from self.inner.walk()


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: FieldType


@dataclass(frozen=True)
class VariantSpec:
    name: str
    fields: Tuple[FieldSpec, ...]

    def visit_method(self, family: str) -> str:
        return f"visit_{snake_case(self.name)}_{family.lower()}"


@dataclass(frozen=True)
class FamilySpec:
    name: str
    variants: Tuple[VariantSpec, ...]

    @property
    def module(self) -> str:
        return self.name.lower()

    def field_types(self) -> Iterable[FieldType]:
        for variant in self.variants:
            for field in variant.fields:
                yield from field.type.walk()

    def referenced_families(self) -> List[str]:
        seen: List[str] = []
        for ftype in self.field_types():
            if ftype.kind == "node" and ftype.family not in seen:
                seen.append(ftype.family)  # type: ignore[arg-type]
        return seen


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


# ============================================================================
# Parsing
# ============================================================================

def parse_field_type(text: str, families: Set[str], family: str, line: str) -> FieldType:
    text = text.strip()

    if text == "Token":
        return FieldType("token")
    if text == "object":
        return FieldType("value")
    if text in families:
        return FieldType("node", family=text)

    m = _WRAPPED_RE.match(text)
    if m is not None:
        inner = parse_field_type(m.group("inner"), families, family, line)
        kind = "list" if m.group("wrapper") == "List" else "optional"
        return FieldType(kind, inner=inner)

    raise DescriptorError(f"Unknown field type '{text}'", family, line)


def parse_descriptor(family: str, line: str, families: Optional[Set[str]] = None) -> VariantSpec:
    """Parse one ``"Variant : Type field, Type field"`` line."""
    known = families if families is not None else {family}

    if ":" not in line:
        raise DescriptorError("Expected 'Variant : fields'", family, line)

    head, _, rest = line.partition(":")
    name = head.strip()
    if not _CLASS_NAME_RE.match(name):
        raise DescriptorError(f"Bad variant name '{name}'", family, line)

    fields: List[FieldSpec] = []
    seen: Set[str] = set()

    if rest.strip():
        for part in rest.split(","):
            m = _FIELD_RE.match(part.strip())
            if m is None:
                raise DescriptorError(f"Field spec '{part.strip()}' is not 'Type name'", family, line)

            field_name = m.group("name")
            if keyword.iskeyword(field_name) or field_name in RESERVED_FIELDS:
                raise DescriptorError(f"Field name '{field_name}' is reserved", family, line)
            if field_name in seen:
                raise DescriptorError(f"Duplicate field '{field_name}' in {name}", family, line)
            seen.add(field_name)

            fields.append(FieldSpec(field_name, parse_field_type(m.group("type"), known, family, line)))

    return VariantSpec(name, tuple(fields))


def build_families(descriptors: Sequence[Descriptor]) -> List[FamilySpec]:
    """Parse the whole descriptor list; raises DescriptorError on the first problem."""
    names = [family for family, _ in descriptors]
    taken = MODULE_NAMES | {f"{name}Visitor" for name in names}
    result: List[FamilySpec] = []
    declared: Set[str] = set()
    modules: Set[str] = set()

    for family, lines in descriptors:
        if not _CLASS_NAME_RE.match(family):
            raise DescriptorError(f"Bad family name '{family}'")
        if family in taken:
            raise DescriptorError(f"Family name '{family}' is already bound in generated modules")
        if family in declared:
            raise DescriptorError(f"Duplicate family '{family}'")
        if family.lower() in modules:
            raise DescriptorError(f"Family '{family}' collides with another module name")
        if not lines:
            raise DescriptorError("Family has no variants", family)

        declared.add(family)
        modules.add(family.lower())

        variants: List[VariantSpec] = []
        seen: Set[str] = set()

        for line in lines:
            variant = parse_descriptor(family, line, set(names))
            if variant.name in seen:
                raise DescriptorError(f"Duplicate variant '{variant.name}'", family, line)
            if variant.name in names:
                raise DescriptorError(f"Variant '{variant.name}' shadows a family", family, line)
            if variant.name in taken:
                raise DescriptorError(f"Variant '{variant.name}' shadows a name the generated module binds", family, line)
            seen.add(variant.name)

            # Only earlier families are importable without a cycle.
            for ftype in (t for f in variant.fields for t in f.type.walk()):
                if ftype.kind == "node" and ftype.family not in declared:
                    raise DescriptorError(
                        f"'{ftype.family}' must be declared before {family} can reference it",
                        family,
                        line,
                    )

            variants.append(variant)

        result.append(FamilySpec(family, tuple(variants)))

    return result


# ============================================================================
# Rendering
# ============================================================================

def render_family(family: FamilySpec, package: str = DEFAULT_PACKAGE) -> str:
    """Return the Python source of one family module."""
    kinds = {ftype.kind for ftype in family.field_types()}
    typing_names = ["Generic", "TypeVar"]
    if "optional" in kinds:
        typing_names.append("Optional")
    if "list" in kinds:
        typing_names.append("Tuple")

    out: List[str] = []
    emit = out.append

    emit(f"# Generated by lox_ref.tool.generate_ast from the {family.name} descriptors. Do not edit.")
    emit("from __future__ import annotations")
    emit("")
    emit("from abc import ABC, abstractmethod")
    emit("from dataclasses import dataclass")
    emit(f"from typing import {', '.join(sorted(typing_names))}")
    emit("")
    emit("from lox_ref.syntax.nodes import Node")
    if "token" in kinds:
        emit("from lox_ref.token_types import Token")
    emit("from lox_ref.types import UnhandledVariantError")
    for other in family.referenced_families():
        if other != family.name:
            emit(f"from {package}.{other.lower()} import {other}")
    emit("")
    emit('R = TypeVar("R")')
    emit("")
    emit("")

    param = family.name.lower()
    emit(f"class {family.name}Visitor(ABC, Generic[R]):")
    emit(f'    """One operation per {family.name} variant; a subclass must implement every one."""')
    for variant in family.variants:
        LOG.debug("rendering %s.%s", family.name, variant.name)
        emit("")
        emit("    @abstractmethod")
        emit(f"    def {variant.visit_method(family.name)}(self, {param}: {variant.name}) -> R:")
        emit(f'        raise UnhandledVariantError("{family.name}.{variant.name}", self)')
    emit("")
    emit("")

    emit(f'class {family.name}(Node, family="{family.name}"):')
    emit('    """Closed family: only the variants declared in this module belong to it."""')
    emit("")
    emit("    @abstractmethod")
    emit(f"    def accept(self, visitor: {family.name}Visitor[R]) -> R:")
    emit("        raise NotImplementedError")

    for variant in family.variants:
        emit("")
        emit("")
        emit("@dataclass(frozen=True)")
        emit(f"class {variant.name}({family.name}):")
        for field in variant.fields:
            emit(f"    {field.name}: {field.type.annotation()}")
        if variant.fields:
            emit("")
        emit(f"    def accept(self, visitor: {family.name}Visitor[R]) -> R:")
        emit(f"        return visitor.{variant.visit_method(family.name)}(self)")

    emit("")
    return "\n".join(out)


def render_all(descriptors: Sequence[Descriptor], package: str = DEFAULT_PACKAGE) -> List[Tuple[str, str]]:
    """Render every family up front: (module file name, source) pairs."""
    return [
        (f"{family.module}.py", render_family(family, package))
        for family in build_families(descriptors)
    ]


# ============================================================================
# Output
# ============================================================================

def define_ast(
    output_dir: Path,
    descriptors: Sequence[Descriptor] = AST_FAMILIES,
    package: str = DEFAULT_PACKAGE,
) -> List[Path]:
    """Write one module per family; on any error no artifact is written."""
    output_dir = Path(output_dir)
    rendered = render_all(descriptors, package)

    output_dir.mkdir(parents=True, exist_ok=True)
    staged: List[Tuple[Path, Path]] = []

    try:
        for filename, source in rendered:
            fd, tmp_name = tempfile.mkstemp(dir=output_dir, prefix=f".{filename}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(source)
            staged.append((Path(tmp_name), output_dir / filename))
    except OSError:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        raise

    # Prior contents of each target; None where it did not exist yet.
    previous: Dict[Path, Optional[bytes]] = {}
    written: List[Path] = []

    try:
        for _, target in staged:
            previous[target] = target.read_bytes() if target.exists() else None
        for tmp, target in staged:
            os.replace(tmp, target)
            written.append(target)
    except OSError:
        for target in written:
            old = previous[target]
            if old is None:
                target.unlink(missing_ok=True)
            else:
                target.write_bytes(old)
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        LOG.error("rolled back %d of %d modules in %s", len(written), len(staged), output_dir)
        raise

    for target in written:
        LOG.info("wrote %s", target)

    return written


def check_ast(
    output_dir: Path,
    descriptors: Sequence[Descriptor] = AST_FAMILIES,
    package: str = DEFAULT_PACKAGE,
) -> List[Path]:
    """Return the family modules that are missing or differ from a fresh render."""
    stale: List[Path] = []

    for filename, source in render_all(descriptors, package):
        target = Path(output_dir) / filename
        if not target.exists() or target.read_text(encoding="utf-8") != source:
            stale.append(target)

    return stale


# ============================================================================
# Command line
# ============================================================================

class _ArgParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG

    name = os.environ.get("LOX_REF_GEN_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = _ArgParser(prog="lox-generate-ast", description="Generate the syntax node family modules.")
    ap.add_argument("output_dir", nargs="?", default=str(DEFAULT_OUTPUT_DIR), help="Directory receiving <family>.py")
    ap.add_argument("--package", default=DEFAULT_PACKAGE, help="Import path of the output directory")
    ap.add_argument("--check", action="store_true", help="Report stale modules instead of writing")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every rendered variant")

    args = ap.parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose), format="%(levelname)s %(name)s: %(message)s")

    output_dir = Path(args.output_dir)

    try:
        if args.check:
            stale = check_ast(output_dir, AST_FAMILIES, package=args.package)
            for path in stale:
                LOG.error("out of date: %s", path)
            return 1 if stale else 0

        define_ast(output_dir, AST_FAMILIES, package=args.package)
    except DescriptorError as err:
        LOG.error("%s", err)
        return EX_DATAERR

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Python rules -- checks over the tree-sitter syntax tree.

Tree nodes carry byte offsets; everything reported goes through
ParsedDocument.node_range so diagnostics and edits use character offsets.
"""

from .base import Rule, RuleContext
from ..core.diagnostics import Severity
from ..core.edits import TextEdit


PYTHON = {"Python"}


def check_no_bare_except(ctx: RuleContext) -> None:
    document = ctx.document
    for node in document.walk("except_clause"):
        children = node.children
        if len(children) < 2 or children[0].type != "except" or children[1].type != ":":
            continue
        start, end = document.node_range(children[0])
        ctx.report("Bare 'except:' also catches SystemExit and KeyboardInterrupt", start, end).with_fix(
            "Catch Exception", TextEdit.insert(end, " Exception")
        )


def check_no_breakpoint(ctx: RuleContext) -> None:
    document = ctx.document
    for node in document.walk("call"):
        function = node.child_by_field_name("function")
        if function is None or function.type != "identifier" or document.node_text(function) != "breakpoint":
            continue
        start, end = document.node_range(node)
        report = ctx.report("Leftover breakpoint() call", start, end)

        # Only a statement that is just the call can be swapped for `pass`
        statement = node.parent
        if statement is not None and statement.type == "expression_statement" and statement.named_child_count == 1:
            stmt_start, stmt_end = document.node_range(statement)
            report.with_fix("Replace breakpoint() with pass", TextEdit(stmt_start, stmt_end, "pass"))


NO_BARE_EXCEPT = Rule(
    name="no-bare-except",
    description="Disallow bare 'except:' clauses (Python)",
    check=check_no_bare_except,
    languages=PYTHON,
    needs_tree=True,
)

NO_BREAKPOINT = Rule(
    name="no-breakpoint",
    description="Disallow leftover breakpoint() calls (Python)",
    check=check_no_breakpoint,
    default_severity=Severity.WARNING,
    languages=PYTHON,
    needs_tree=True,
)

"""Method and property existence on resolved classes."""

from __future__ import annotations

from typing import Mapping, Optional

from .. import patterns
from ..constants import OBJECT, msg_method_not_found, msg_property_not_found
from ..documentation import ClassDoc
from ..type_inference import resolve_class_name
from .core import ERROR, Rule, RuleContext, make_diagnostic


def _documented_class(receiver: str, context: RuleContext,
                      classes: Mapping[str, ClassDoc]) -> Optional[ClassDoc]:
    class_name = resolve_class_name(receiver, context.tracking.instance_definitions)
    if class_name is None:
        return None
    return classes.get(class_name)


class MemberAccessRule(Rule):
    """Unresolved receivers and undocumented classes are skipped, never reported."""

    name = "members"

    def evaluate(self, context: RuleContext):
        classes = context.docs.classes(context.mode)
        if not classes:
            return []
        base = classes.get(OBJECT)
        diagnostics = []

        for index, line in enumerate(context.code):
            for m in patterns.METHOD_CALL.finditer(line):
                info = _documented_class(m.group(1), context, classes)
                method = m.group(2)
                if info is None or info.has_method(method):
                    continue
                if base is not None and base.has_method(method):
                    continue
                diagnostics.append(make_diagnostic(ERROR, index, m.start(2), m.end(2),
                                                   msg_method_not_found(method, info.name)))

            for m in patterns.PROPERTY_ACCESS.finditer(line):
                after = line[m.end():]
                if after and (patterns.WORD_CHAR.match(after)
                              or not patterns.VALID_TERMINATOR.match(after)):
                    continue
                info = _documented_class(m.group(1), context, classes)
                prop = m.group(2)
                if info is None or info.has_property(prop):
                    continue
                if base is not None and base.has_property(prop):
                    continue
                diagnostics.append(make_diagnostic(ERROR, index, m.start(2), m.end(2),
                                                   msg_property_not_found(prop, info.name)))
        return diagnostics

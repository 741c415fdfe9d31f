"""Validity protocol shared by form fields and the tree-walking aggregator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

ChildrenAccessor = Callable[[Any], Iterable[Any]]


@dataclass(frozen=True)
class ValidationResult:
    """Snapshot of one field's last validation.

    ``valid`` is ``None`` until the field has been validated once.
    """

    valid: Optional[bool]
    message: Optional[str] = None

    @property
    def validated(self) -> bool:
        return self.valid is not None


class Validatable:
    """Capability mixin for anything a form can validate.

    Subclasses implement :meth:`validate` and :meth:`last_error_message`;
    fields with a visual error state override :meth:`show_error`,
    :meth:`clear_error` and :meth:`is_error_shown`. This is a plain mixin
    so Qt widgets can inherit it next to ``QWidget``.
    """

    def validate(self) -> bool:
        raise NotImplementedError

    def last_error_message(self) -> Optional[str]:
        return None

    def show_error(self) -> None:
        pass

    def clear_error(self) -> None:
        pass

    def is_error_shown(self) -> bool:
        return False

    def validation_result(self) -> ValidationResult:
        """Result of the last :meth:`validate`.

        The mixin keeps no state, so this reads as valid until a message
        is recorded. Field models override it to report "not validated".
        """
        message = self.last_error_message()
        return ValidationResult(valid=message is None, message=message)

    def validate_with_feedback(self) -> bool:
        """Validate and show the error state only when invalid."""
        self.clear_error()
        result = self.validate()
        if not result:
            self.show_error()
        return result


@dataclass(frozen=True)
class AggregateResult:
    """Outcome of validating every field under a container."""

    all_valid: bool
    first_failure: Optional[Validatable] = None
    failures: Tuple[Validatable, ...] = ()

    @property
    def message(self) -> Optional[str]:
        if self.first_failure is None:
            return None
        return self.first_failure.last_error_message()


def _default_children(node: Any) -> Iterable[Any]:
    children = getattr(node, "children", None)
    if callable(children):
        return children() or ()
    return ()


def iter_validatables(root: Any, children: Optional[ChildrenAccessor] = None) -> Iterator[Validatable]:
    """Yield every :class:`Validatable` under ``root`` in depth-first pre-order.

    ``root`` itself is included. Nodes that are not validatable are still
    descended into, and so are validatable ones.
    """
    get_children = children or _default_children
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Validatable):
            yield node
        stack.extend(reversed(list(get_children(node))))


def validate_all(root: Any, children: Optional[ChildrenAccessor] = None) -> AggregateResult:
    """Run ``validate_with_feedback`` on every field under ``root``.

    Never stops at the first failure: every invalid field ends up showing
    its error. The first failure in traversal order is reported so the
    caller can focus it.
    """
    failures = []
    total = 0
    for field in iter_validatables(root, children):
        total += 1
        if not field.validate_with_feedback():
            failures.append(field)

    first_failure = failures[0] if failures else None
    if first_failure is not None:
        logger.debug(
            "Validation failed for %d of %d fields; first: %s",
            len(failures),
            total,
            first_failure.last_error_message(),
        )
    else:
        logger.debug("All %d fields valid", total)

    return AggregateResult(
        all_valid=not failures,
        first_failure=first_failure,
        failures=tuple(failures),
    )

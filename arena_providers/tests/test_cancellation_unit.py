"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, callbacks, and raise_if_cancelled behavior.
"""
from __future__ import annotations

import pytest

from arena_providers.base.cancellation import (
    CancellationToken,
    CancelledError,
)
from arena_providers.base.errors import ErrorCode


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    # idempotent second call
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.cancelled is True and child1.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child2.cancelled is True and child2.reason == "stop"  # nosec B101 - pytest assert in tests


def test_child_cancel_does_not_touch_parent_or_siblings():
    parent = CancellationToken()
    a, b = parent.child(), parent.child()
    a.cancel("only a")
    assert a.cancelled and not b.cancelled and not parent.cancelled  # nosec B101 - pytest assert in tests


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"  # nosec B101 - pytest assert in tests


def test_on_cancel_fires_once_and_remover_unregisters():
    token = CancellationToken()
    seen: list = []
    token.on_cancel(seen.append)
    remove = token.on_cancel(lambda r: seen.append(("removed", r)))
    remove()
    token.cancel("bye")
    token.cancel("again")
    assert seen == ["bye"]  # nosec B101 - pytest assert in tests


def test_on_cancel_after_cancel_fires_immediately():
    token = CancellationToken()
    token.cancel("early")
    seen: list = []
    token.on_cancel(seen.append)
    assert seen == ["early"]  # nosec B101 - pytest assert in tests


def test_raise_if_cancelled_raises_custom_error():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError) as ei:
        token.raise_if_cancelled()
    assert ei.value.code is ErrorCode.CANCELLED  # nosec B101 - pytest assert in tests

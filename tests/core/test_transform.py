"""Tests for wrap_all, unwrap_all, to_plain, from_plain and copy_tree."""

import pytest as _pytest

import ribbon


def _containers(value: object) -> list[object]:
    """Collect every container node reachable from value, root included."""
    found: list[object] = []
    stack = [value]
    while stack:
        node = stack.pop()
        if ribbon.is_container(node):
            found.append(node)
            stack.extend(node.values())  # type: ignore[attr-defined]
    return found


class TestFromPlain:
    """Building ribbons from plain data."""

    def test_nested(self) -> None:
        r = ribbon.from_plain({"a": {"b": {"c": 1}}, "d": [1, 2]})

        assert isinstance(r, ribbon.Ribbon)
        assert isinstance(r.a.b, ribbon.Ribbon)
        assert r.d == [1, 2]

    def test_none_raises(self) -> None:
        with _pytest.raises(ribbon.InvalidSourceError):
            ribbon.from_plain(None)

    @_pytest.mark.parametrize("source", [1, "text", [1, 2]])
    def test_non_mapping_raises(self, source: object) -> None:
        with _pytest.raises(ribbon.InvalidSourceError):
            ribbon.from_plain(source)

    def test_container_source_is_copied(self) -> None:
        original = ribbon.from_plain({"a": {"b": 1}})
        copied = ribbon.from_plain(original)

        assert copied == original
        assert copied is not original
        assert copied.peek("a") is not original.peek("a")


class TestToPlain:
    """Pure conversion to dicts and lists."""

    def test_nested_ribbons_become_dicts(self) -> None:
        r = ribbon.from_plain({"a": {"b": 1}})
        plain = ribbon.to_plain(r)

        assert plain == {"a": {"b": 1}}
        assert type(plain) is dict
        assert type(plain["a"]) is dict

    def test_wrappers_become_dicts(self) -> None:
        w = ribbon.wrap_all(ribbon.from_plain({"a": {"b": 1}}))
        plain = ribbon.to_plain(w)

        assert plain == {"a": {"b": 1}}
        assert type(plain["a"]) is dict

    def test_sequences_become_lists(self) -> None:
        r = ribbon.Ribbon()
        r.put("items", ({"x": ribbon.Ribbon({"y": 1})}, [ribbon.Ribbon({"z": 2})]))
        plain = ribbon.to_plain(r)

        assert plain == {"items": [{"x": {"y": 1}}, [{"z": 2}]]}
        assert type(plain["items"][0]["x"]) is dict

    def test_explicit_children(self) -> None:
        c = ribbon.Ribbon()
        c.put("a", ribbon.Ribbon())
        c.get("a").put("b", 1)
        assert ribbon.to_plain(c) == {"a": {"b": 1}}

    def test_repeatable(self, deep_ribbon: ribbon.Ribbon) -> None:
        first = ribbon.to_plain(deep_ribbon)
        second = ribbon.to_plain(deep_ribbon)

        assert first == second
        assert first is not second
        assert deep_ribbon == first

    def test_leaves_pass_through(self) -> None:
        marker = object()
        assert ribbon.to_plain(marker) is marker
        assert ribbon.to_plain(3) == 3

    def test_input_not_modified(self) -> None:
        w = ribbon.wrap_all(ribbon.from_plain({"a": {"b": 1}}))
        ribbon.to_plain(w)
        assert isinstance(w.ribbon.peek("a"), ribbon.Wrapper)

    def test_mixed_wrapping(self) -> None:
        """to_plain gives the same result whatever the wrapping state."""
        r = ribbon.from_plain({"a": {"b": {"c": 1}}})
        expected = ribbon.to_plain(r)
        ribbon.wrap_all(r)
        assert ribbon.to_plain(r) == expected

    def test_cycle_raises(self) -> None:
        r = ribbon.Ribbon()
        r.put("self", r)
        with _pytest.raises(ValueError, match="circular"):
            ribbon.to_plain(r)

    def test_shared_subtree_is_not_a_cycle(self) -> None:
        shared = ribbon.Ribbon({"x": 1})
        r = ribbon.Ribbon()
        r.put("a", shared)
        r.put("b", shared)
        assert ribbon.to_plain(r) == {"a": {"x": 1}, "b": {"x": 1}}

    def test_to_dict_method(self) -> None:
        assert ribbon.from_plain({"a": {"b": 1}}).to_dict() == {"a": {"b": 1}}


class TestWrapAll:
    """Converting a tree to its wrapped form."""

    def test_every_nested_container_wrapped(self, deep_ribbon: ribbon.Ribbon) -> None:
        w = ribbon.wrap_all(deep_ribbon)

        assert isinstance(w, ribbon.Wrapper)
        assert w.ribbon is deep_ribbon
        nested = _containers(w)[1:]
        assert nested
        assert all(isinstance(node, ribbon.Wrapper) for node in nested)

    def test_wrapper_root_returned_as_is(self) -> None:
        w = ribbon.Wrapper({"a": {"b": 1}})
        assert ribbon.wrap_all(w) is w
        assert isinstance(w.ribbon.peek("a"), ribbon.Wrapper)

    def test_idempotent(self, deep_ribbon: ribbon.Ribbon) -> None:
        first = ribbon.wrap_all(deep_ribbon)
        snapshot = ribbon.to_plain(first)
        second = ribbon.wrap_all(first)

        assert second is first
        assert ribbon.to_plain(second) == snapshot
        assert all(isinstance(node, ribbon.Wrapper) for node in _containers(second)[1:])

    def test_leaves_untouched(self) -> None:
        items = [{"x": 1}]
        w = ribbon.wrap_all(ribbon.Ribbon({"items": items}))
        assert w.ribbon.peek("items") is items

    def test_leaf_raises(self) -> None:
        with _pytest.raises(ribbon.NotAContainerError):
            ribbon.wrap_all({"a": 1})

    def test_cycle_terminates(self) -> None:
        r = ribbon.Ribbon()
        child = r.get("child")
        child.put("parent", r)
        w = ribbon.wrap_all(r)
        assert isinstance(w.ribbon.peek("child"), ribbon.Wrapper)

    def test_method_form(self) -> None:
        w = ribbon.Wrapper({"a": {"b": 1}})
        assert w.wrap_all() is w
        assert isinstance(w.ribbon.peek("a"), ribbon.Wrapper)


class TestUnwrapAll:
    """Converting a tree back to bare ribbons."""

    def test_every_container_bare(self, deep_ribbon: ribbon.Ribbon) -> None:
        w = ribbon.wrap_all(deep_ribbon)
        r = ribbon.unwrap_all(w)

        assert r is deep_ribbon
        assert all(type(node) is ribbon.Ribbon for node in _containers(r))

    def test_round_trip_keeps_contents(self, deep_ribbon: ribbon.Ribbon) -> None:
        before = ribbon.to_plain(deep_ribbon)
        ribbon.unwrap_all(ribbon.wrap_all(deep_ribbon))
        assert ribbon.to_plain(deep_ribbon) == before

    def test_idempotent(self, deep_ribbon: ribbon.Ribbon) -> None:
        first = ribbon.unwrap_all(deep_ribbon)
        second = ribbon.unwrap_all(first)
        assert second is deep_ribbon

    def test_wrappers_below_bare_ribbons(self) -> None:
        """Wrappers nested under bare ribbons are found too."""
        r = ribbon.Ribbon()
        r.get("a").put("b", ribbon.Wrapper({"c": 1}))
        ribbon.unwrap_all(r)
        assert type(r.a.peek("b")) is ribbon.Ribbon

    def test_leaf_raises(self) -> None:
        with _pytest.raises(ribbon.NotAContainerError):
            ribbon.unwrap_all([1, 2])

    def test_method_form(self) -> None:
        w = ribbon.wrap_all(ribbon.from_plain({"a": {"b": 1}}))
        r = w.unwrap_all()
        assert r is w.ribbon
        assert type(r.peek("a")) is ribbon.Ribbon


class TestCopyTree:
    """Fresh container nodes with shared leaves."""

    def test_all_nodes_fresh(self, deep_ribbon: ribbon.Ribbon) -> None:
        clone = ribbon.copy_tree(deep_ribbon)
        original_ids = {id(node) for node in _containers(deep_ribbon)}

        assert clone == deep_ribbon
        assert not original_ids & {id(node) for node in _containers(clone)}

    def test_preserves_wrapping(self) -> None:
        w = ribbon.wrap_all(ribbon.from_plain({"a": {"b": 1}}))
        clone = ribbon.copy_tree(w)

        assert isinstance(clone, ribbon.Wrapper)
        assert isinstance(clone.ribbon.peek("a"), ribbon.Wrapper)
        assert clone.ribbon.peek("a") is not w.ribbon.peek("a")

    def test_leaf_returned_as_is(self) -> None:
        items = [1, 2]
        assert ribbon.copy_tree(items) is items

    def test_cycle_raises(self) -> None:
        r = ribbon.Ribbon()
        r.put("loop", r)
        with _pytest.raises(ValueError):
            ribbon.copy_tree(r)

import random
from tableview.options import resolve_options
from tableview.ordering import sibling_sort_key
from tableview.viewer import TableViewer


def _orders(viewer: TableViewer, *path) -> dict:
    node = viewer.root
    for key in path:
        node = node.child(key)
    return {key: child.layout_order for (key, child) in node.children.items()}


def test_number_keys_sort_before_string_keys_in_numeric_order() -> None:
    keys = ['b', 10, 'A', 2, 'c']
    assert sorted(keys, key=sibling_sort_key) == [2, 10, 'A', 'b', 'c']


def test_string_keys_sort_case_sensitively_when_requested() -> None:
    keys = ['b', 'A', 'a', 'B']
    assert sorted(keys, key=lambda k: sibling_sort_key(k, True)) == ['A', 'B', 'a', 'b']
    assert sorted(keys, key=sibling_sort_key) == ['A', 'a', 'B', 'b']


def test_entries_are_grouped_by_kind_then_sorted_by_key(surface) -> None:
    viewer = TableViewer({
        'name': 'Bob',
        'alive': True,
        'level': 3,
        'stats': {'hp': 10},
        'age': 30,
    }, surface=surface)
    orders = _orders(viewer)
    # boolean < number < string < table
    assert sorted(orders, key=orders.__getitem__) == ['alive', 'age', 'level', 'name', 'stats']
    assert orders['age'] == 2000 + 0
    assert orders['level'] == 2000 + 2
    # 'stats' has index 4 among its siblings and holds 1 item
    assert orders['stats'] == 7000 + 4 + 1 * 100


def test_bigger_tables_order_after_smaller_tables(surface) -> None:
    viewer = TableViewer({
        'a': {'x': 1, 'y': 2, 'z': 3},
        'b': {'x': 1},
    }, surface=surface)
    orders = _orders(viewer)
    assert orders['b'] < orders['a']
    
    viewer2 = TableViewer(
        {'a': {'x': 1, 'y': 2, 'z': 3}, 'b': {'x': 1}},
        {'order_tables_by_size': False},
        surface=surface)
    orders2 = _orders(viewer2)
    assert orders2['a'] < orders2['b']


def test_order_does_not_depend_on_order_of_updates(surface) -> None:
    final = {'k%d' % i: i for i in range(12)}
    final.update({'t': {'p': 1, 'q': {'r': 's'}}, 7: 'seven', 'flag': False})
    
    direct = TableViewer(final, surface=surface)
    expected = (_orders(direct), _orders(direct, 't'))
    
    rng = random.Random(1234)
    for _ in range(5):
        keys = list(final)
        rng.shuffle(keys)
        viewer = TableViewer({}, surface=surface)
        partial = {}
        for key in keys:
            partial[key] = final[key]
            viewer.update(partial)
        assert (_orders(viewer), _orders(viewer, 't')) == expected
    
    # Reaching the same data by removing extra keys gives the same order too
    viewer = TableViewer({**final, 'extra': 1, 'k99': {'z': 1}}, surface=surface)
    viewer.update(final)
    assert (_orders(viewer), _orders(viewer, 't')) == expected


def test_type_ordering_offsets_are_configurable(surface) -> None:
    viewer = TableViewer(
        {'flag': True, 'sub': {'a': 1}},
        {'settings': {'type_ordering': {'table': 0}}},
        surface=surface)
    orders = _orders(viewer)
    assert orders['sub'] < orders['flag']


def test_options_resolve_type_ordering_for_every_kind() -> None:
    type_ordering = resolve_options()['settings']['type_ordering']
    assert set(type_ordering) == {
        'boolean', 'number', 'string', 'Instance', 'Other', 'function', 'table'}

import pytest
from tableview.viewer import TableViewer
from tableview.visibility import parse_filter_text


def _data() -> dict:
    return {
        'player': {
            'name': 'Bob',
            'health': 100,
            'inventory': {'sword': True},
        },
        'score': 5,
        'empty': {},
    }


def _visible(viewer: TableViewer) -> set[str]:
    """Returns the paths of all visible entries, such as 'player.name'."""
    paths = set()
    for node in viewer.root.walk():
        if node.visible:
            path = [node.key] + [a.key for a in node.ancestors() if not a.is_root]
            paths.add('.'.join(str(k) for k in reversed(path)))
    return paths


ALL_PATHS = {
    'player', 'player.name', 'player.health', 'player.inventory',
    'player.inventory.sword', 'score', 'empty',
}


class TestParseFilterText:
    def test_splits_on_commas_and_strips_whitespace(self) -> None:
        assert parse_filter_text(' Name , health,,') == ['name', 'health']
    
    def test_empty_text_has_no_filters(self) -> None:
        assert parse_filter_text('') == []
        assert parse_filter_text(' , ') == []
    
    def test_preserves_case_when_case_sensitive(self) -> None:
        assert parse_filter_text('Name', case_sensitive=True) == ['Name']


class TestKeyFilters:
    def test_without_filters_everything_is_visible(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        assert _visible(viewer) == ALL_PATHS
    
    def test_filter_hides_nonmatching_entries_and_empty_tables(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('health')
        assert viewer.key_filters == ['health']
        assert _visible(viewer) == {'player', 'player.health'}
    
    def test_filter_matches_substrings_of_keys(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('sc, nam')
        assert _visible(viewer) == {'player', 'player.name', 'score'}
    
    def test_table_whose_key_matches_filter_pins_its_descendants(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('inventory')
        assert _visible(viewer) == {'player', 'player.inventory', 'player.inventory.sword'}
    
    def test_pinned_table_shows_nested_descendants_at_any_depth(self, surface) -> None:
        viewer = TableViewer({'outer': {'mid': {'deep': {'leaf': 1}}, 'other': 2}}, surface=surface)
        viewer.set_key_filters('outer')
        assert _visible(viewer) == {
            'outer', 'outer.mid', 'outer.mid.deep', 'outer.mid.deep.leaf', 'outer.other'}
    
    def test_clearing_filter_makes_hidden_ancestor_chain_visible_again(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('score')
        assert _visible(viewer) == {'score'}
        
        viewer.set_key_filters('')
        assert _visible(viewer) == ALL_PATHS
    
    def test_filter_is_case_insensitive_by_default(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('HEALTH')
        assert 'player.health' in _visible(viewer)
    
    def test_filter_is_case_sensitive_when_requested(self, surface) -> None:
        viewer = TableViewer(_data(), {'case_sensitive': True}, surface=surface)
        viewer.set_key_filters('HEALTH')
        assert _visible(viewer) == set()
    
    def test_filter_applies_to_entries_added_later(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('health')
        
        data = _data()
        data['player']['max_health'] = 150
        data['player']['mana'] = 20
        data['empty'] = {'health_bonus': 1}
        viewer.update(data)
        assert _visible(viewer) == {
            'player', 'player.health', 'player.max_health',
            'empty', 'empty.health_bonus'}
    
    def test_table_that_loses_its_last_visible_entry_is_hidden(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('health')
        
        data = _data()
        del data['player']['health']
        viewer.update(data)
        assert _visible(viewer) == set()


class TestTypeExclusions:
    def test_excluded_kinds_are_hidden(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_type_exclusions('boolean')
        assert viewer.type_exclusions == ['boolean']
        # 'inventory' only holds a boolean. 'empty' is hidden while filtering.
        assert _visible(viewer) == {'player', 'player.name', 'player.health', 'score'}
    
    def test_excluding_tables_hides_all_tables(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_type_exclusions('table')
        assert {p for p in _visible(viewer) if '.' not in p} == {'score'}
    
    def test_exclusion_overrides_pinning(self, surface) -> None:
        viewer = TableViewer(_data(), surface=surface)
        viewer.set_key_filters('inventory')
        viewer.set_type_exclusions('table')
        assert 'player.inventory' not in _visible(viewer)
    
    def test_other_values_are_excluded_by_python_type_name(self, surface) -> None:
        viewer = TableViewer({'nothing': None, 'n': 1}, surface=surface)
        viewer.set_type_exclusions('NoneType')
        assert _visible(viewer) == {'n'}


class TestEmptyTables:
    def test_empty_table_is_visible_when_not_filtering(self, surface) -> None:
        viewer = TableViewer({'empty': {}}, surface=surface)
        assert _visible(viewer) == {'empty'}
    
    def test_empty_table_whose_key_matches_filter_stays_visible(self, surface) -> None:
        viewer = TableViewer({'empty': {}, 'n': 1}, surface=surface)
        viewer.set_key_filters('empty')
        assert _visible(viewer) == {'empty'}


@pytest.mark.parametrize('text', ['', ' ', ',', ' , '])
def test_blank_filter_text_clears_filters(surface, text: str) -> None:
    viewer = TableViewer(_data(), surface=surface)
    viewer.set_key_filters('score')
    viewer.set_key_filters(text)
    assert viewer.key_filters == []
    assert _visible(viewer) == ALL_PATHS

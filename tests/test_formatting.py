from tableview.formatting import (
    format_key, format_number, format_value, FUNCTION_PLACEHOLDER, truncate_text,
)
from tableview.values import ExternalHandle


class _Part(ExternalHandle):
    def __init__(self, path: str | None) -> None:
        self._path = path
    
    @property
    def path(self) -> str | None:
        return self._path


class _Vector3:
    def __init__(self, x: float, y: float, z: float) -> None:
        (self.x, self.y, self.z) = (x, y, z)
    
    def __str__(self) -> str:
        return f'{self.x}, {self.y}, {self.z}'


class _Unprintable:
    def __str__(self) -> str:
        raise ValueError('no text')


class TestFormatKey:
    def test_string_key_is_shown_verbatim(self) -> None:
        assert format_key('Health') == 'Health'
    
    def test_number_key_is_shown_as_number(self) -> None:
        assert format_key(3) == '3'
    
    def test_other_key_is_shown_with_its_type(self) -> None:
        assert format_key(True) == '<boolean> (True)'
        assert format_key(None) == '<NoneType> (None)'


class TestFormatValue:
    def test_table_shows_item_count(self) -> None:
        assert format_value({'a': 1, 'b': 2}) == '<Table> (2 Items)'
        assert format_value({}) == '<Table> (0 Items)'
    
    def test_table_shows_nothing_when_table_values_hidden(self) -> None:
        assert format_value({'a': 1}, show_table_value=False) == ''
    
    def test_string_is_quoted(self) -> None:
        assert format_value('hi') == '"hi"'
    
    def test_function_shows_placeholder(self) -> None:
        assert format_value(print) == FUNCTION_PLACEHOLDER
    
    def test_handle_shows_class_name_and_path(self) -> None:
        assert format_value(_Part('Workspace.Part')) == '<Instance: _Part> (Workspace.Part)'
        assert format_value(_Part(None)) == '<Instance: _Part>'
    
    def test_boolean_and_none_use_plain_text(self) -> None:
        assert format_value(True) == 'True'
        assert format_value(None) == 'None'
    
    def test_number_is_rounded_to_precision(self) -> None:
        assert format_value(3.14159, number_precision=2) == '3.14'
        assert format_value(3.14159) == '3.14159'
    
    def test_numbers_embedded_in_other_values_are_rounded_to_precision(self) -> None:
        assert (
            format_value(_Vector3(1.23456, 2.5, 10.0), number_precision=1) ==
            '<_Vector3> (1.2, 2.5, 10)'
        )
    
    def test_other_value_without_precision_is_plain_text(self) -> None:
        assert format_value(_Vector3(1.23456, 2.5, 10.0)) == '1.23456, 2.5, 10.0'
    
    def test_value_that_cannot_be_stringified_shows_its_type(self) -> None:
        assert format_value(_Unprintable()) == '<_Unprintable>'


class TestFormatNumber:
    def test_trailing_zeros_and_point_are_dropped(self) -> None:
        assert format_number(3.0, 2) == '3'
        assert format_number(2.50, 2) == '2.5'
        assert format_number(7, 0) == '7'
    
    def test_negative_precision_does_not_round(self) -> None:
        assert format_number(0.1 + 0.2, -1) == str(0.1 + 0.2)
    
    def test_integers_are_not_mangled(self) -> None:
        assert format_number(100, 2) == '100'
    
    def test_huge_integers_are_shown_in_full_rather_than_overflowing(self) -> None:
        huge = 10 ** 400
        assert format_number(huge, 2) == str(huge)
        assert format_number(-huge, 0) == str(-huge)
        assert format_value(huge, number_precision=2) == str(huge)
    
    def test_non_finite_floats_are_shown_as_is(self) -> None:
        assert format_number(float('inf'), 2) == 'inf'
        assert format_number(float('nan'), 2) == 'nan'


class TestTruncateText:
    def test_short_text_is_unchanged(self) -> None:
        assert truncate_text('hello', 10, 'end') == 'hello'
    
    def test_none_policy_never_truncates(self) -> None:
        assert truncate_text('hello world', 5, 'none') == 'hello world'
    
    def test_end_policy_cuts_at_limit(self) -> None:
        assert truncate_text('hello world', 8, 'end') == 'hello w…'
    
    def test_split_word_policy_cuts_at_word_boundary(self) -> None:
        assert truncate_text('hello brave world', 14, 'split_word') == 'hello brave…'
    
    def test_split_word_policy_without_boundary_cuts_at_limit(self) -> None:
        assert truncate_text('abcdefghij', 5, 'split_word') == 'abcd…'

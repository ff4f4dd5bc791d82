import pytest
from tableview.main import _DEFAULT_WATCH_INTERVAL, _parse_args


def test_parse_args_with_only_data_filepath_uses_defaults() -> None:
    parsed_args = _parse_args(['data.json'])
    assert parsed_args.data_filepath == 'data.json'
    assert parsed_args.options is None
    assert parsed_args.title is None
    assert parsed_args.watch_interval == _DEFAULT_WATCH_INTERVAL


def test_parse_args_accepts_all_options() -> None:
    parsed_args = _parse_args([
        '--options', 'options.json',
        '--title', 'Inventory',
        '--watch-interval', '0',
        'data.json',
    ])
    assert parsed_args.options == 'options.json'
    assert parsed_args.title == 'Inventory'
    assert parsed_args.watch_interval == 0


def test_parse_args_rejects_negative_watch_interval(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _parse_args(['--watch-interval', '-1', 'data.json'])
    assert exc_info.value.code == 2
    assert '--watch-interval cannot be negative' in capsys.readouterr().err


def test_parse_args_requires_data_filepath() -> None:
    with pytest.raises(SystemExit):
        _parse_args([])

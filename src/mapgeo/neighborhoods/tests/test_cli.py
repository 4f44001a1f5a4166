import json

from mapgeo.neighborhoods.cli import main
from mapgeo.neighborhoods.tests.fixtures.polygon_fixture import make_row, square_polygon


def _write_rows(tmp_path):
    rows = [
        make_row('a', 'Alpha', square_polygon(0, 0, 1, 1)),
        make_row('b', 'Beta', square_polygon(0, 0, 1, 1)),
        make_row('c', 'Gamma', square_polygon(-1, -1, 2, 2)),
    ]
    path = tmp_path / 'rows.json'
    path.write_text(json.dumps(rows))
    return path


def test_cli_writes_output_file(tmp_path):
    src = _write_rows(tmp_path)
    out = tmp_path / 'out.json'
    assert main([str(src), '-o', str(out), '--indent', '2']) == 0
    payload = json.loads(out.read_text())
    assert [item['id'] for item in payload['items']] == ['a', 'c']
    assert payload['debug'] == {'total': 3, 'parsed': 3, 'overlap_removed': 1}


def test_cli_writes_stdout(tmp_path, capsys):
    src = _write_rows(tmp_path)
    assert main([str(src)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload['items']) == 2


def test_cli_missing_input(tmp_path):
    assert main([str(tmp_path / 'missing.json')]) == 2

import importlib
import json
import sys

import pytest

# run.py is imported as a module; parse_args + main are exercised with a
# patched start_server so no networking happens.


@pytest.fixture()
def run_module():
    if 'run' in sys.modules:
        del sys.modules['run']
    return importlib.import_module('run')


@pytest.fixture()
def fake_server(monkeypatch):
    calls = {}

    def fake_start_server(host, port, debug):  # signature match
        calls['host'] = host
        calls['port'] = port
        calls['debug'] = debug

    import delve.server as server_mod
    monkeypatch.setattr(server_mod, 'start_server', fake_start_server)
    return calls


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(['--version'])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert 'Delve Dungeon Generator' in out


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == 'server'


def test_server_main_invokes_start_server(monkeypatch, run_module, fake_server, capsys):
    monkeypatch.setenv('PORT', '5555')
    monkeypatch.setenv('HOST', '127.0.0.1')
    assert run_module.main(['server']) == 0
    assert fake_server == {'host': '127.0.0.1', 'port': 5555, 'debug': False}
    assert 'Delve Dungeon Server' in capsys.readouterr().out


def test_server_flags_beat_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv('PORT', '5555')
    run_module.main(['server', '--port', '7000', '--host', 'localhost', '--debug'])
    assert fake_server == {'host': 'localhost', 'port': 7000, 'debug': True}


def test_env_file_argument(monkeypatch, tmp_path, run_module, fake_server):
    monkeypatch.delenv('PORT', raising=False)
    monkeypatch.delenv('HOST', raising=False)
    env_file = tmp_path / '.env'
    env_file.write_text('HOST=0.0.0.0\nPORT=6001\n')
    run_module.main(['--env-file', str(env_file), 'server'])
    assert fake_server['port'] == 6001
    assert fake_server['host'] == '0.0.0.0'
    # load_dotenv populated os.environ; leave it clean for later tests
    monkeypatch.delenv('PORT', raising=False)
    monkeypatch.delenv('HOST', raising=False)


def test_generate_json(run_module, capsys):
    assert run_module.main(['generate', '--seed', '42', '--json']) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload['seed'] == 42
    assert payload['dungeon']['seed'] == 42
    assert 'roomCosts' in payload['analysis']


def test_generate_prints_map(run_module, capsys):
    assert run_module.main(['generate', '--seed', '42']) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[-1].startswith('seed=42 rooms=')
    grid = lines[:-1]
    assert len(grid) == 64
    assert sum(row.count('<') for row in grid) == 1


def test_settings_file_round_trip(run_module, tmp_path, capsys):
    path = tmp_path / 'settings.json'
    assert run_module.main(['settings', '--output', str(path)]) == 0
    assert 'Wrote default settings' in capsys.readouterr().out
    data = json.loads(path.read_text())
    data['gridWidth'] = 32
    data['gridHeight'] = 32
    path.write_text(json.dumps(data))
    assert run_module.main(['generate', '--settings', str(path), '--seed', '5', '--json']) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload['dungeon']['gridWidth'] == 32


def test_settings_to_stdout(run_module, capsys):
    assert run_module.main(['settings']) == 0
    assert json.loads(capsys.readouterr().out)['gridWidth'] == 64


def test_missing_settings_file(run_module, tmp_path, capsys):
    assert run_module.main(['generate', '--settings', str(tmp_path / 'nope.json')]) == 1
    assert '[ERROR] Cannot read settings' in capsys.readouterr().err


def test_invalid_settings_file(run_module, tmp_path, capsys):
    path = tmp_path / 'bad.json'
    path.write_text('{"gridWidth": 40}')
    assert run_module.main(['generate', '--settings', str(path)]) == 1
    assert 'ERROR: gridHeight: missing' in capsys.readouterr().err

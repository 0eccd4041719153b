from caro import bcrypt
from caro.services.gate import PasswordGate


def test_gate_keeps_only_a_hash(gated_app):
    gate = gated_app.extensions['caro_gate']
    assert not gate.is_open
    assert 'letmein' not in gate._password_hash
    assert gate.check('letmein')
    assert not gate.check('wrong')
    assert not gate.check(None)
    assert not gate.check(123456)


def test_admit_and_forget(gated_app):
    gate = gated_app.extensions['caro_gate']
    assert not gate.admit('sid-1', 'nope')
    assert not gate.is_admitted('sid-1')
    assert gate.admit('sid-1', 'letmein')
    assert gate.is_admitted('sid-1')
    # Already admitted connections need no password
    assert gate.admit('sid-1')
    assert gate.forget('sid-1')
    assert not gate.forget('sid-1')


def test_configured_hash_takes_precedence(gated_app):
    password_hash = bcrypt.generate_password_hash('other').decode('utf-8')
    gate = PasswordGate.from_config(bcrypt, {'GAME_PASSWORD': 'letmein', 'GAME_PASSWORD_HASH': password_hash})
    assert gate.check('other')
    assert not gate.check('letmein')


def test_empty_password_opens_gate(flask_app):
    gate = flask_app.extensions['caro_gate']
    assert gate.is_open
    assert gate.admit('anyone')


def test_hash_password_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['hash-password', 'secret'])
    assert result.exit_code == 0
    assert bcrypt.check_password_hash(result.output.strip(), 'secret')

    # No argument and no configured password
    result = runner.invoke(args=['hash-password'])
    assert result.exit_code != 0

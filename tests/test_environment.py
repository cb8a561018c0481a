import pytest

from lox.environment import Environment
from lox.errors import LoxRuntimeError
from lox.tokens import Token, TokenType


def name(lexeme, line=1):
    return Token(TokenType.IDENTIFIER, lexeme, None, line)


def test_define_and_get_in_global_frame():
    env = Environment()
    env.define(Environment.GLOBAL, 'a', 1.0)
    assert env.get(Environment.GLOBAL, name('a')) == 1.0


def test_define_overwrites_in_same_frame():
    env = Environment()
    env.define(Environment.GLOBAL, 'a', 1.0)
    env.define(Environment.GLOBAL, 'a', 'two')
    assert env.get(Environment.GLOBAL, name('a')) == 'two'


def test_get_undefined_variable_raises_with_token():
    env = Environment()
    token = name('missing', line=7)
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.get(Environment.GLOBAL, token)
    assert excinfo.value.token is token
    assert excinfo.value.message == "Undefined variable 'missing'."


def test_get_walks_outward():
    env = Environment()
    env.define(Environment.GLOBAL, 'a', 'global')
    inner = env.push(env.push(Environment.GLOBAL))
    assert env.get(inner, name('a')) == 'global'


def test_define_in_child_shadows_without_touching_parent():
    env = Environment()
    env.define(Environment.GLOBAL, 'a', 'outer')
    child = env.push(Environment.GLOBAL)
    env.define(child, 'a', 'inner')
    assert env.get(child, name('a')) == 'inner'
    assert env.get(Environment.GLOBAL, name('a')) == 'outer'


def test_assign_updates_nearest_binding():
    env = Environment()
    env.define(Environment.GLOBAL, 'a', 1.0)
    middle = env.push(Environment.GLOBAL)
    env.define(middle, 'a', 2.0)
    inner = env.push(middle)
    env.assign(inner, name('a'), 3.0)
    assert env.get(middle, name('a')) == 3.0
    assert env.get(Environment.GLOBAL, name('a')) == 1.0
    assert 'a' not in env.frames[inner].values


def test_assign_never_creates_a_binding():
    env = Environment()
    child = env.push(Environment.GLOBAL)
    with pytest.raises(LoxRuntimeError, match="Undefined variable 'x'."):
        env.assign(child, name('x'), 1.0)
    for frame in env.frames:
        assert 'x' not in frame.values


def test_release_drops_block_frames():
    env = Environment()
    outer = env.push(Environment.GLOBAL)
    env.push(outer)
    assert len(env) == 3
    env.release(outer)
    assert len(env) == 1


def test_global_frame_cannot_be_released():
    env = Environment()
    with pytest.raises(ValueError):
        env.release(Environment.GLOBAL)

import pytest

from binfiles.base import ADDRESS_SPACE
from binfiles.fragment import Fragment


def test_init():
    buffer = bytearray(range(100))
    fragment = Fragment(100, buffer)

    assert fragment.position == 100
    assert fragment.length == 100
    assert len(fragment) == 100
    assert fragment.endex == 200
    assert fragment.data == bytes(buffer)
    assert isinstance(fragment.data, bytes)


def test_init_iterable():
    fragment = Fragment(0, [12, 13, 14, 15])
    assert fragment.data == b'\x0C\x0D\x0E\x0F'

    fragment = Fragment(0, memoryview(b'abc'))
    assert fragment.data == b'abc'


def test_init_takes_copy():
    buffer = bytearray(16)
    buffer[0] = 12
    fragment = Fragment(0, buffer)
    buffer[0] = 10
    assert fragment.data[0] == 12


def test_data_is_immutable():
    fragment = Fragment(0, b'abc')
    with pytest.raises(TypeError):
        fragment.data[0] = 0  # type: ignore
    with pytest.raises(AttributeError):
        fragment.data = b'xyz'  # type: ignore
    assert fragment.data == b'abc'


def test_start_out_of_bounds():
    for position in (-1, ADDRESS_SPACE):
        with pytest.raises(ValueError, match='address out of bounds'):
            Fragment(position, bytes(100))


def test_end_out_of_bounds():
    fragment = Fragment(0, bytes(ADDRESS_SPACE))
    assert fragment.endex == ADDRESS_SPACE

    fragment = Fragment(ADDRESS_SPACE - 1, b'\xFF')
    assert fragment.endex == ADDRESS_SPACE

    with pytest.raises(ValueError, match='address out of bounds: 65536'):
        Fragment(65000, bytes(537))


def test_empty():
    for position in (0, 1, ADDRESS_SPACE - 1):
        with pytest.raises(ValueError):
            Fragment(position, b'')


def test_none():
    with pytest.raises(TypeError, match='data must not be None'):
        Fragment(0, None)  # type: ignore


def test_invalid_items():
    with pytest.raises(ValueError, match='byte value overflow'):
        Fragment(0, [1, 256])
    with pytest.raises(TypeError):
        Fragment(0, 5)  # type: ignore
    with pytest.raises(TypeError):
        Fragment('0', b'abc')  # type: ignore


def test_eq():
    assert Fragment(1, b'abc') == Fragment(1, bytearray(b'abc'))
    assert Fragment(1, b'abc') != Fragment(2, b'abc')
    assert Fragment(1, b'abc') != Fragment(1, b'abd')
    assert Fragment(1, b'abc') != (1, b'abc')
    assert len({Fragment(1, b'abc'), Fragment(1, b'abc')}) == 1


def test_repr():
    assert repr(Fragment(100, b'abcd')) == 'Fragment(position=100, length=4)'

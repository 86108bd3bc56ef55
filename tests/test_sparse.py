import pytest

from binfiles.base import ADDRESS_SPACE
from binfiles.base import DEFAULT_STEP
from binfiles.base import CollisionError
from binfiles.fragment import Fragment
from binfiles.sparse import SparseFile


def _positions_lengths(fragments):
    return [(fragment.position, fragment.length) for fragment in fragments]


def _build_paged_file():
    file = SparseFile(256)

    # page 0 stays empty

    # page 1 fully occupied
    for i in range(64):
        file.put_byte(64 + i, i)

    # page 2 with 3 disjoint runs
    for i in range(32):
        file.put_byte(128 + i, i)
    file.put_byte(170, 1)
    file.put_byte(171, 2)
    file.put_byte(191, 3)

    # page 3 with the last byte only
    file.put_byte(255, 1)
    return file


class TestSparseFile:

    def test_init_empty(self):
        file = SparseFile()
        assert file.size_limit == ADDRESS_SPACE
        assert file.current_size == 0
        assert file.get_byte(0) is None
        assert file.get_byte(ADDRESS_SPACE - 1) is None
        assert file.get_fragments(0, ADDRESS_SPACE) == []

    def test_init_size_limit(self):
        file = SparseFile(16)
        assert file.size_limit == 16
        assert file.current_size == 0

    def test_init_raises_size_limit(self):
        for size_limit in (0, -1, ADDRESS_SPACE + 1):
            with pytest.raises(ValueError):
                SparseFile(size_limit)

    def test_init_fragments(self):
        fragment1 = Fragment(100, [12, 13, 14, 15])
        fragment2 = Fragment(104, [22, 23, 24, 25])

        file1 = SparseFile(fragments=[fragment1, fragment2])
        assert file1.current_size == 108

        file2 = SparseFile()
        file2.add_fragment(fragment2)
        file2.add_fragment(fragment1)
        assert file2.current_size == 108

        for address in range(90, 120):
            assert file1.get_byte(address) == file2.get_byte(address)
        assert file1.get_fragments(0, ADDRESS_SPACE) == file2.get_fragments(0, ADDRESS_SPACE)

    def test_init_fragments_raises_collision(self):
        fragments = [Fragment(100, b'abcd'), Fragment(102, b'xy')]
        with pytest.raises(CollisionError):
            SparseFile(fragments=fragments)

    def test_init_fragments_raises_bounds(self):
        fragments = [Fragment(10, b'abcd'), Fragment(14, b'xy')]
        with pytest.raises(IndexError):
            SparseFile(15, fragments)

    def test_put_byte(self):
        file = SparseFile(16)
        file.put_byte(3, 0x00)
        assert file.current_size == 4
        assert file.get_byte(3) == 0x00

        file.put_byte(1, 0xFF)
        assert file.current_size == 4
        assert file.get_byte(1) == 0xFF

        file.put_byte(15, 0x55)
        assert file.current_size == 16

    def test_put_byte_raises(self):
        file = SparseFile(16)
        file.put_byte(3, 1)

        with pytest.raises(CollisionError, match='address 3'):
            file.put_byte(3, 2)
        with pytest.raises(IndexError):
            file.put_byte(16, 2)
        with pytest.raises(IndexError):
            file.put_byte(-1, 2)
        with pytest.raises(ValueError, match='byte value overflow'):
            file.put_byte(4, 0x100)

        assert file.current_size == 4
        assert file.get_byte(3) == 1

    def test_add_byte_deprecated(self):
        file = SparseFile(16)
        with pytest.deprecated_call():
            file.add_byte(7, 0x77)
        assert file.get_byte(7) == 0x77
        assert file.current_size == 8

    def test_add_fragment(self):
        file = SparseFile()
        file.add_fragment(Fragment(100, [12, 13, 14, 15]))

        assert file.current_size == 104
        assert [file.get_byte(a) for a in range(100, 104)] == [12, 13, 14, 15]
        assert file.get_byte(99) is None
        assert file.get_byte(104) is None

    def test_add_fragment_covers_current_size(self):
        file = SparseFile()
        for fragment in (Fragment(50, b'x'), Fragment(0, b'abc'), Fragment(ADDRESS_SPACE - 2, b'yz')):
            file.add_fragment(fragment)
            assert file.current_size >= fragment.position + fragment.length
        assert file.current_size == ADDRESS_SPACE

    def test_add_fragment_raises_none(self):
        with pytest.raises(TypeError, match='fragment must not be None'):
            SparseFile().add_fragment(None)  # type: ignore

    def test_add_fragment_raises_collision(self):
        file = SparseFile()
        file.add_fragment(Fragment(100, [12, 13, 14, 15]))
        with pytest.raises(CollisionError, match='address 100'):
            file.add_fragment(Fragment(98, [1, 2, 3, 4, 5, 6, 7, 8]))

    def test_add_fragment_is_atomic(self):
        file = SparseFile(256)
        file.add_fragment(Fragment(100, [12, 13, 14, 15]))
        before = file.get_fragments(0, 256)

        with pytest.raises(CollisionError):
            file.add_fragment(Fragment(96, [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]))
        with pytest.raises(IndexError):
            file.add_fragment(Fragment(250, [1, 2, 3, 4, 5, 6, 7, 8]))

        assert file.get_fragments(0, 256) == before
        assert file.current_size == 104
        assert file.get_byte(96) is None
        assert file.get_byte(250) is None

    def test_get_byte_raises(self):
        file = SparseFile(16)
        with pytest.raises(IndexError):
            file.get_byte(16)
        with pytest.raises(IndexError):
            file.get_byte(-1)

    def test_get_fragments_empty(self):
        file = SparseFile()
        assert file.get_fragments(32, 64) == []

        file.add_fragment(Fragment(10, b'abc'))
        file.add_fragment(Fragment(200, b'xyz'))
        assert file.get_fragments(13, 187) == []

    def test_get_fragments_dense(self):
        file = SparseFile(fragments=[Fragment(100, [12, 13, 14, 15]),
                                     Fragment(104, [22, 23, 24, 25])])

        fragments = file.get_fragments(102, 4)
        assert fragments == [Fragment(102, [14, 15, 22, 23])]

    def test_get_fragments_sparse(self):
        file = SparseFile(fragments=[Fragment(100, [12, 13, 14, 15]),
                                     Fragment(105, [23, 24, 25])])

        fragments = file.get_fragments(102, 4)
        assert len(fragments) == 2
        assert fragments[0].position == 102
        assert fragments[0].data == bytes([14, 15])
        assert fragments[1].position == 105
        assert fragments[1].data == bytes([23])

    def test_get_fragments_properties(self):
        file = _build_paged_file()
        fragments = file.get_fragments(0, 256)
        assert _positions_lengths(fragments) == [(64, 96), (170, 2), (191, 1), (255, 1)]

        previous_endex = -1
        for fragment in fragments:
            assert fragment.length > 0
            assert fragment.position > previous_endex
            previous_endex = fragment.endex
            for address in range(fragment.position, fragment.endex):
                assert file.get_byte(address) is not None

    def test_get_fragments_clipped(self):
        file = SparseFile(fragments=[Fragment(10, b'ABCDEFGH')])
        assert file.get_fragments(12, 3) == [Fragment(12, b'CDE')]
        assert file.get_fragments(0, 11) == [Fragment(10, b'A')]
        assert file.get_fragments(17, 100) == [Fragment(17, b'H')]

    def test_get_fragments_raises(self):
        file = SparseFile(16)
        for length in (0, -1):
            with pytest.raises(ValueError, match='length must be greater than zero'):
                file.get_fragments(0, length)
        with pytest.raises(IndexError):
            file.get_fragments(-1, 4)
        with pytest.raises(IndexError):
            file.get_fragments(13, 4)
        assert file.get_fragments(12, 4) == []

    def test_round_trip(self):
        file1 = _build_paged_file()
        file2 = SparseFile(256, file1.get_fragments(0, file1.size_limit))

        assert file2.current_size == file1.current_size
        for address in range(file1.current_size):
            assert file2.get_byte(address) == file1.get_byte(address)

    def test_iterate(self):
        file = _build_paged_file()
        fragments = list(file.iterate(64))
        expected = [(64, 64), (128, 32), (170, 2), (191, 1), (255, 1)]
        assert _positions_lengths(fragments) == expected

    def test_iter_default_step(self):
        file = _build_paged_file()
        assert DEFAULT_STEP == 64
        assert list(file) == list(file.iterate(64))
        assert list(file) == list(file.iterate())

    def test_iterate_splits_windows(self):
        file = SparseFile(fragments=[Fragment(2, b'ABCDEFGHIJ')])
        fragments = list(file.iterate(4))
        assert fragments == [Fragment(2, b'AB'), Fragment(4, b'CDEF'), Fragment(8, b'GHIJ')]

        for fragment in file.iterate(5):
            window = fragment.position // 5
            assert (fragment.endex - 1) // 5 == window

    def test_iterate_restartable(self):
        file = _build_paged_file()
        iterator1 = file.iterate(64)
        iterator2 = file.iterate(64)
        assert next(iterator1).position == 64
        assert next(iterator1).position == 128
        assert next(iterator2).position == 64
        assert len(list(iterator1)) == 3
        assert len(list(iterator2)) == 4

    def test_iterate_empty(self):
        assert list(SparseFile().iterate(16)) == []

    def test_iterate_raises_step(self):
        file = SparseFile(16)
        for step in (0, -1):
            with pytest.raises(ValueError, match='step must be greater than zero'):
                file.iterate(step)

    def test_iterate_last_window_not_clipped(self):
        file = SparseFile(16)
        for address in range(16):
            file.put_byte(address, address)

        iterator = file.iterate(64)
        with pytest.raises(IndexError):
            next(iterator)

        assert list(file.iterate(16)) == [Fragment(0, bytes(range(16)))]
        assert list(file.iterate(8)) == [Fragment(0, bytes(range(8))), Fragment(8, bytes(range(8, 16)))]

    def test_repr(self):
        file = SparseFile(256)
        file.put_byte(9, 9)
        assert repr(file) == '<SparseFile size_limit=256 current_size=10>'

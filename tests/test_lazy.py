import pytest

from sapluck.engine.lazy import LazyBatchSequence


def test_lazy_batch_sequence():
    calls = []

    def iterate():
        calls.append('iterate')
        yield [1, 2]
        calls.append('next')
        yield [3]

    def size():
        calls.append('size')
        return 2

    seq = LazyBatchSequence(iterate, size)

    # Nothing is done until pulled
    assert calls == []

    # Size: computed without iterating
    assert seq.size() == 2
    assert calls == ['size']

    # Pull one by one
    assert next(seq) == [1, 2]
    assert calls == ['size', 'iterate']
    assert next(seq) == [3]
    assert calls == ['size', 'iterate', 'next']

    # Exhausted. Not restartable.
    with pytest.raises(StopIteration):
        next(seq)
    assert list(seq) == []
    assert next(seq, None) is None
    assert calls == ['size', 'iterate', 'next']


def test_lazy_batch_sequence_iter():
    seq = LazyBatchSequence(lambda: iter([[1], [2], [3]]), lambda: 3)

    assert iter(seq) is seq
    assert [batch for batch in seq] == [[1], [2], [3]]

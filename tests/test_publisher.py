import threading

from gesture_arcade.orchestrator.contracts import ClassificationResult, LatestResult


def test_empty_slot(publisher):
    assert publisher.read_latest() is None
    assert publisher.snapshot() == LatestResult(result=None, sequence=0)


def test_last_write_wins(publisher):
    publisher.publish(ClassificationResult("rock", 0.4))
    seq = publisher.publish(ClassificationResult("paper", 0.9))

    assert seq == 2
    assert publisher.read_latest() == ClassificationResult("paper", 0.9)
    assert publisher.snapshot().sequence == 2


def test_no_torn_reads_under_concurrent_publish(publisher):
    n = 5000
    stop = threading.Event()
    torn = []
    sequences = []

    def writer():
        for i in range(1, n + 1):
            # label and confidence always written together: "i" <-> i / n
            publisher.publish(ClassificationResult(label=str(i), confidence=i / n))
        stop.set()

    def reader():
        while not stop.is_set():
            snap = publisher.snapshot()
            if snap.result is None:
                continue
            if snap.result.confidence != int(snap.result.label) / n:
                torn.append(snap)
            if int(snap.result.label) != snap.sequence:
                torn.append(snap)
            sequences.append(snap.sequence)

    readers = [threading.Thread(target=reader) for _ in range(3)]
    w = threading.Thread(target=writer)
    for t in readers:
        t.start()
    w.start()
    w.join()
    for t in readers:
        t.join()

    assert torn == []
    assert publisher.snapshot().sequence == n
    assert publisher.read_latest().label == str(n)


def test_reader_sees_monotonic_sequence(publisher):
    seen = []
    done = threading.Event()

    def writer():
        for i in range(5000):
            publisher.publish(ClassificationResult("x", 0.5))
        done.set()

    t = threading.Thread(target=writer)
    t.start()
    while not done.is_set():
        seen.append(publisher.snapshot().sequence)
    t.join()

    assert seen == sorted(seen)

import threading

from rpgen.stats import Statistic, StatisticsClient


def test_increment_and_listeners():
    stats = StatisticsClient()
    seen = []
    stats.add_listener(lambda stat, value: seen.append((stat, value)))

    assert stats.increment(Statistic.GENERATED_PASSWORDS) == 1
    assert stats.increment(Statistic.GENERATED_PASSWORDS) == 2
    assert stats.get(Statistic.GENERATION_EXHAUSTED) == 0
    assert seen == [
        (Statistic.GENERATED_PASSWORDS, 1),
        (Statistic.GENERATED_PASSWORDS, 2),
    ]

    stats.reset()
    assert stats.get(Statistic.GENERATED_PASSWORDS) == 0


def test_concurrent_increments():
    stats = StatisticsClient()

    def bump():
        for _ in range(1000):
            stats.increment(Statistic.GENERATED_PASSWORDS)

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert stats.get(Statistic.GENERATED_PASSWORDS) == 4000

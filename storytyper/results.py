"""Speed and accuracy summary of a finished typing test."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass
class Fraction:
    numerator: int = 0
    denominator: int = 0

    def __float__(self):
        if self.denominator == 0:
            return 0.0
        return self.numerator / self.denominator

    def __str__(self):
        return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class TimingData:
    # Characters per second over every gap between consecutive events
    overall_cps: float
    per_event: Tuple[float, ...]
    # Average time spent reaching each key
    per_key: Dict[object, float]


@dataclass(frozen=True)
class AccuracyData:
    overall: Fraction
    per_key: Dict[object, Fraction]


@dataclass(frozen=True)
class Results:
    timing: TimingData
    accuracy: AccuracyData
    missed_words: List[str]
    slow_words: List[str]
    elapsed: float
    correct: int
    incorrect: int
    control: int = 0
    word_count: int = 0

    @classmethod
    def from_test(cls, test):
        """Snapshot the event log of a completed test."""
        # Words can be revisited, so order by capture time rather than by word
        events = sorted(test.events(), key=lambda e: e.time)
        timing = calc_timing(events)
        accuracy = calc_accuracy(events)
        correct = sum(1 for e in events if e.correct is True)
        incorrect = sum(1 for e in events if e.correct is False)
        return cls(
            timing=timing,
            accuracy=accuracy,
            missed_words=calc_missed_words(test),
            slow_words=calc_slow_words(test),
            elapsed=events[-1].time - events[0].time if events else 0.0,
            correct=correct,
            incorrect=incorrect,
            control=len(events) - correct - incorrect,
            word_count=len(test.words),
        )

    @property
    def wpm(self):
        # 5 characters per word, 60 seconds per minute
        return self.timing.overall_cps * 12

    @property
    def accuracy_percent(self):
        return float(self.accuracy.overall) * 100

    def worst_keys(self, count=5):
        return worst_keys(self.accuracy)[:count]


def calc_timing(events) -> TimingData:
    per_event = []
    keys: Dict[object, List[float]] = {}
    for previous, event in zip(events, events[1:]):
        duration = event.time - previous.time
        per_event.append(duration)
        bucket = keys.setdefault(event.key, [0.0, 0])
        bucket[0] += duration
        bucket[1] += 1

    total = sum(per_event)
    return TimingData(
        overall_cps=len(per_event) / total if total > 0 else 0.0,
        per_event=tuple(per_event),
        per_key={key: spent / count for key, (spent, count) in keys.items()},
    )


def calc_accuracy(events) -> AccuracyData:
    overall = Fraction()
    per_key: Dict[object, Fraction] = {}
    for event in events:
        if event.correct is None:
            continue
        key = per_key.setdefault(event.key, Fraction())
        overall.denominator += 1
        key.denominator += 1
        if event.correct:
            overall.numerator += 1
            key.numerator += 1
    return AccuracyData(overall=overall, per_key=per_key)


def calc_missed_words(test) -> List[str]:
    return [w.text for w in test.words if any(e.correct is False for e in w.events)]


def calc_slow_words(test, count=5) -> List[str]:
    """Words with the highest average time between their own keystrokes."""
    averages = []
    for word in test.words:
        times = [e.time for e in word.events]
        if len(times) < 2:
            continue
        averages.append(((times[-1] - times[0]) / (len(times) - 1), word.text))
    averages.sort(key=lambda x: -x[0])
    return [text for _, text in averages[:count]]


def worst_keys(accuracy: AccuracyData):
    ranked = [(key, frac) for key, frac in accuracy.per_key.items() if frac.denominator]
    return sorted(ranked, key=lambda x: (float(x[1]), -x[1].denominator))
